# src/admin/routes.py
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from auth.routes import check_admin_role
from database import get_db
from exceptions import SubscriptionError, ValidationError, to_http_exception
from members.models import Member
from members.schemas import MemberResponse, MemberSubscriptionUpdate
from members.services import MemberService
from payment.schemas import GatewaySubscription
from subscription.routes import get_subscription_service
from subscription.services import SubscriptionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/owners", response_model=List[MemberResponse], dependencies=[Depends(check_admin_role)])
def get_owner_profiles(
    subscription_status: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Retrieve account owner profiles with optional subscription status filter."""
    return [MemberResponse.model_validate(m) for m in MemberService.list_owner_profiles(db, subscription_status)]


@router.patch("/members/{uid}/subscription", response_model=MemberResponse)
def update_member_subscription(
    uid: str,
    update: MemberSubscriptionUpdate,
    db: Session = Depends(get_db),
    current_member: Member = Depends(check_admin_role),
):
    """Update a member's subscription status."""
    try:
        record = MemberService.find_member_by_uid(uid, db)
        sub = record.data.flow_subscription
        if update.subscription_status == "active" and not (sub and sub.subscription_id):
            raise ValidationError(f"Member {uid} has no gateway subscription and cannot be marked active")
        member = MemberService.update_member(record.id, update.model_dump(exclude_unset=True), db)
    except SubscriptionError as e:
        raise to_http_exception(e)
    logger.info(f"Admin {current_member.uid} set subscription of {uid} to {update.subscription_status}")
    return MemberResponse.model_validate(member)


@router.get("/members/{uid}/gateway-subscription", response_model=GatewaySubscription, dependencies=[Depends(check_admin_role)])
def get_member_gateway_subscription(
    uid: str,
    db: Session = Depends(get_db),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Fetch the member's live subscription from the gateway."""
    try:
        member = MemberService.find_member_by_uid(uid, db).data
        return service.get_gateway_subscription(member)
    except SubscriptionError as e:
        raise to_http_exception(e)
