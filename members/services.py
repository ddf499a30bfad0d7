# src/members/services.py
"""Privileged read/write access to members and their gateway sub-record.

Only server-side code (the subscription flow and admin routes) goes through
here; end users never reach these functions directly.
"""
import logging
from typing import Any, Dict, List, NamedTuple, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from exceptions import NotFoundError, PersistenceError, ValidationError
from members.models import Member, FlowSubscription

logger = logging.getLogger(__name__)

MEMBER_FIELDS = {
    "owner_id", "name", "last_name", "email", "role", "is_owner_profile",
    "subscription_plan", "subscription_status", "trial_ends_at",
}
FLOW_SUBSCRIPTION_FIELDS = {
    "customer_id", "subscription_id", "plan_name", "created_at", "activated_at",
    "subscription_started_at", "last_payment_status",
}


class MemberRecord(NamedTuple):
    """A member together with its document id (not its uid)."""
    id: int
    data: Member


class MemberService:
    @staticmethod
    def find_member_by_uid(uid: str, db: Session) -> MemberRecord:
        member = db.query(Member).filter(Member.uid == uid).first()
        if member is None:
            logger.warning(f"No member found with uid: {uid}")
            raise NotFoundError(f"No member found with uid {uid}")
        return MemberRecord(id=member.id, data=member)

    @staticmethod
    def find_member_by_gateway_customer_id(customer_id: str, db: Session) -> Optional[Member]:
        member = (
            db.query(Member)
            .join(FlowSubscription, FlowSubscription.member_id == Member.id)
            .filter(FlowSubscription.customer_id == customer_id)
            .first()
        )
        if member is None:
            logger.warning(f"No member found with customerId: {customer_id}")
        return member

    @staticmethod
    def list_owner_profiles(db: Session, status: Optional[str] = None) -> List[Member]:
        query = db.query(Member).filter(Member.is_owner_profile.is_(True))
        if status:
            query = query.filter(Member.subscription_status == status)
        return query.order_by(Member.created_at.desc()).all()

    @staticmethod
    def _merge(member: Member, data: Dict[str, Any]) -> None:
        for key, value in data.items():
            if key == "flow_subscription":
                if value is None:
                    continue
                sub = member.flow_subscription
                if sub is None:
                    sub = FlowSubscription()
                    member.flow_subscription = sub
                for sub_key, sub_value in value.items():
                    if sub_key not in FLOW_SUBSCRIPTION_FIELDS:
                        raise ValidationError(f"Unknown subscription field: {sub_key}")
                    if sub_key == "customer_id" and sub.customer_id and sub.customer_id != sub_value:
                        raise ValidationError(f"Member {member.uid} already has gateway customer {sub.customer_id}")
                    setattr(sub, sub_key, sub_value)
            elif key in MEMBER_FIELDS:
                setattr(member, key, value)
            else:
                raise ValidationError(f"Unknown member field: {key}")

    @staticmethod
    def _commit(member: Member, db: Session) -> Member:
        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error updating member {member.uid}: {str(e)}", exc_info=True)
            raise PersistenceError(f"Could not save member {member.uid}")
        db.refresh(member)
        return member

    @staticmethod
    def update_member(document_id: int, data: Dict[str, Any], db: Session) -> Member:
        """Merge ``data`` into the member stored under ``document_id``."""
        member = db.get(Member, document_id)
        if member is None:
            raise NotFoundError(f"No member document with id {document_id}")
        try:
            MemberService._merge(member, data)
        except ValidationError:
            db.rollback()
            raise
        return MemberService._commit(member, db)

    @staticmethod
    def update_member_by_uid(uid: str, data: Dict[str, Any], db: Session) -> Optional[Member]:
        """Merge ``data`` into the member with ``uid``; a missing member is logged and skipped."""
        member = db.query(Member).filter(Member.uid == uid).first()
        if member is None:
            logger.info(f"No member documents found with uid {uid}, nothing updated")
            return None
        try:
            MemberService._merge(member, data)
        except ValidationError:
            db.rollback()
            raise
        return MemberService._commit(member, db)
