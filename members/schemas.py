# src/members/schemas.py
from pydantic import BaseModel
from datetime import datetime
from typing import Literal, Optional

SubscriptionStatus = Literal["active", "trial", "inactive", "past_due", "canceled"]


class FlowSubscriptionResponse(BaseModel):
    """Schema for the gateway sub-record of a member."""
    customer_id: str
    subscription_id: str
    plan_name: str
    created_at: datetime
    activated_at: Optional[datetime] = None
    subscription_started_at: Optional[datetime] = None
    last_payment_status: bool

    class Config:
        from_attributes = True


class MemberResponse(BaseModel):
    """Schema for member response."""
    id: int
    uid: str
    owner_id: str
    name: str
    last_name: str
    email: Optional[str] = None
    role: str
    is_owner_profile: bool
    subscription_plan: Optional[str] = None
    subscription_status: Optional[str] = None
    trial_ends_at: Optional[datetime] = None
    created_at: datetime
    flow_subscription: Optional[FlowSubscriptionResponse] = None

    class Config:
        from_attributes = True


class MemberSubscriptionUpdate(BaseModel):
    """Schema for an administrative subscription status change."""
    subscription_status: SubscriptionStatus
    subscription_plan: Optional[str] = None
    trial_ends_at: Optional[datetime] = None
