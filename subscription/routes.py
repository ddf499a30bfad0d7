# src/subscription/routes.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
from auth.routes import get_owner_profile
from config import settings
from database import get_db
from members.models import Member
from payment.client import FlowClient, get_flow_client
from subscription.schemas import (
    SubscriptionCreate,
    SubscriptionStartResponse,
    SubscriptionStateResponse,
    PlanResponse,
    PlanListResponse,
)
from subscription.services import SubscriptionService, success_redirect_url, error_redirect_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])
callback_router = APIRouter(prefix="/subscription", tags=["subscriptions"])


def get_subscription_service(flow_client: FlowClient = Depends(get_flow_client)) -> SubscriptionService:
    return SubscriptionService(flow_client)


@router.get("/plans", response_model=PlanListResponse)
def list_plans():
    """List the plans a member can subscribe to."""
    return PlanListResponse(plans=[PlanResponse(name=name, **plan) for name, plan in settings.PLANS.items()])


@router.post("/", response_model=SubscriptionStartResponse)
def create_subscription(
    subscription_data: SubscriptionCreate,
    db: Session = Depends(get_db),
    owner: Member = Depends(get_owner_profile),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Start a subscription; on success the client sends the browser to ``redirect_url``."""
    return service.start_subscription(owner, subscription_data.plan_name, db)


@router.get("/me", response_model=SubscriptionStateResponse)
def get_my_subscription(owner: Member = Depends(get_owner_profile)):
    """Retrieve the account's subscription state."""
    return SubscriptionService.get_subscription_state(owner)


@callback_router.post("/result")
def subscription_result(
    request: Request,
    token: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Return URL Flow POSTs to after card registration; always answers with a redirect."""
    base_url = str(request.base_url)
    try:
        service.complete_registration(token, db)
    except Exception as e:
        logger.error(f"Error handling subscription result: {str(e)}", exc_info=True)
        return RedirectResponse(error_redirect_url(base_url, e), status_code=303)
    return RedirectResponse(success_redirect_url(base_url), status_code=303)
