# src/subscription/schemas.py
from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional, Union
from payment.schemas import PlanName


class SubscriptionCreate(BaseModel):
    """Schema for starting a subscription."""
    plan_name: PlanName


class SubscriptionStartResponse(BaseModel):
    """Outcome of starting a subscription: where to send the browser, or why not."""
    success: bool
    redirect_url: Optional[str] = None
    status: Optional[Union[int, str]] = None
    message: Optional[str] = None


class SubscriptionStateResponse(BaseModel):
    """Schema for the owner's current subscription."""
    subscription_status: Optional[str] = None
    subscription_plan: Optional[str] = None
    plan_name: Optional[str] = None
    customer_id: Optional[str] = None
    subscription_id: Optional[str] = None
    activated_at: Optional[datetime] = None
    trial_ends_at: Optional[datetime] = None


class PlanResponse(BaseModel):
    name: str
    price: int
    period: str
    months: int


class PlanListResponse(BaseModel):
    plans: List[PlanResponse]
