# src/subscription/services.py
import logging
from datetime import datetime
from urllib.parse import urlencode

from sqlalchemy.orm import Session

from config import settings
from exceptions import (
    SubscriptionError,
    ValidationError,
    GatewayError,
    NotFoundError,
    PersistenceError,
)
from members.models import Member, FlowSubscription
from members.services import MemberService
from payment.client import FlowClient
from payment.schemas import GatewaySubscription
from subscription.schemas import SubscriptionStartResponse, SubscriptionStateResponse

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred while processing your subscription."


class SubscriptionService:
    """Drives a member from no gateway customer to an active Flow subscription.

    The flow spans two requests. ``start_subscription`` creates the gateway
    customer if needed and returns the hosted card-registration URL. The
    browser then leaves for Flow, and Flow POSTs a token back to
    ``/subscription/result``, which calls ``complete_registration``.
    """

    def __init__(self, flow_client: FlowClient):
        self.flow_client = flow_client

    def ensure_customer(self, member: Member, plan_name: str, db: Session) -> FlowSubscription:
        """Create the gateway customer once; later calls reuse the stored one."""
        sub = member.flow_subscription
        if sub is not None:
            if sub.plan_name != plan_name and member.subscription_status != "active":
                logger.info(f"Member {member.uid} switched plan from {sub.plan_name} to {plan_name}")
                MemberService.update_member_by_uid(member.owner_id, {"flow_subscription": {"plan_name": plan_name}}, db)
            return sub

        if not member.email:
            raise ValidationError("An email address is required to subscribe")
        full_name = f"{member.name} {member.last_name or ''}".strip()
        customer = self.flow_client.create_customer(full_name, member.email, member.owner_id)
        logger.info(f"Created gateway customer {customer.customer_id} for owner {member.owner_id}")

        updated = MemberService.update_member_by_uid(
            member.owner_id,
            {
                "flow_subscription": {
                    "customer_id": customer.customer_id,
                    "subscription_id": "",
                    "plan_name": plan_name,
                    "created_at": datetime.utcnow(),
                    "last_payment_status": False,
                }
            },
            db,
        )
        if updated is None:
            raise PersistenceError(
                f"Gateway customer {customer.customer_id} was created but owner {member.owner_id} could not be updated"
            )
        return updated.flow_subscription

    def register_card(self, customer_id: str) -> str:
        """Start card registration and return the hosted page URL for the browser."""
        registration = self.flow_client.register_card(customer_id, settings.subscription_return_url)
        return registration.redirect_url

    def start_subscription(self, member: Member, plan_name: str, db: Session) -> SubscriptionStartResponse:
        try:
            if member.subscription_status == "active":
                raise ValidationError("This account already has an active subscription")
            if plan_name not in settings.PLANS:
                raise ValidationError(f"Unknown plan: {plan_name}")
            sub = self.ensure_customer(member, plan_name, db)
            redirect_url = self.register_card(sub.customer_id)
        except SubscriptionError as e:
            logger.error(f"Could not start subscription for {member.uid}: status={e.status}, message={e.message}")
            return SubscriptionStartResponse(success=False, status=e.status, message=e.message)
        return SubscriptionStartResponse(success=True, redirect_url=redirect_url)

    def complete_registration(self, token: str, db: Session) -> Member:
        """Handle the gateway's return after card entry and activate the subscription."""
        if not token:
            raise ValidationError("No token was received from the payment gateway")

        register_status = self.flow_client.get_register_status(token)
        if not register_status.is_registered:
            raise GatewayError(f"Card registration did not succeed, expected status 1 but got status: {register_status.status}")

        customer_id = register_status.customer_id
        if not customer_id:
            raise GatewayError("Card registration response did not include a customerId")

        member = MemberService.find_member_by_gateway_customer_id(customer_id, db)
        if member is None:
            raise NotFoundError(f"No member found for gateway customer {customer_id}")

        sub = member.flow_subscription
        if member.subscription_status == "active" and sub.subscription_id:
            logger.warning(f"Ignoring repeated activation for customer {customer_id}, subscription {sub.subscription_id} is already active")
            return member

        created = self.flow_client.create_subscription(settings.plan_id_for(sub.plan_name), customer_id)
        logger.info(f"Created gateway subscription {created.subscription_id} for customer {customer_id}")

        updated = MemberService.update_member_by_uid(
            member.owner_id,
            {
                "subscription_status": "active",
                "subscription_plan": sub.plan_name,
                "flow_subscription": {
                    "subscription_id": created.subscription_id,
                    "last_payment_status": True,
                    "activated_at": datetime.utcnow(),
                },
            },
            db,
        )
        if updated is None:
            raise PersistenceError(
                f"Subscription {created.subscription_id} was created but owner {member.owner_id} could not be updated"
            )
        return updated

    def get_gateway_subscription(self, member: Member) -> GatewaySubscription:
        sub = member.flow_subscription
        if sub is None or not sub.subscription_id:
            raise NotFoundError(f"Member {member.uid} has no gateway subscription")
        return self.flow_client.get_subscription(sub.subscription_id)

    @staticmethod
    def get_subscription_state(member: Member) -> SubscriptionStateResponse:
        sub = member.flow_subscription
        return SubscriptionStateResponse(
            subscription_status=member.subscription_status,
            subscription_plan=member.subscription_plan,
            plan_name=sub.plan_name if sub else None,
            customer_id=sub.customer_id if sub else None,
            subscription_id=(sub.subscription_id or None) if sub else None,
            activated_at=sub.activated_at if sub else None,
            trial_ends_at=member.trial_ends_at,
        )


def success_redirect_url(base_url: str) -> str:
    return f"{base_url.rstrip('/')}/subscription/success?status=success"


def error_redirect_url(base_url: str, error: Exception) -> str:
    """Error page URL carrying the failure code and message as query parameters."""
    if isinstance(error, SubscriptionError):
        status, message = error.status, error.message
    else:
        status, message = 500, GENERIC_ERROR_MESSAGE
    return f"{base_url.rstrip('/')}/subscription/error?{urlencode({'status': status, 'message': message})}"
