# src/payment/services.py
import logging
from uuid import uuid4

from config import settings
from exceptions import ValidationError
from members.models import Member
from payment.client import FlowClient
from payment.schemas import PaymentOrderCreateResponse, PaymentStatusResponse

logger = logging.getLogger(__name__)


class PaymentService:
    """One-off plan payments through Flow's hosted checkout."""

    def __init__(self, flow_client: FlowClient):
        self.flow_client = flow_client

    def create_payment_order(self, member: Member, plan_name: str) -> PaymentOrderCreateResponse:
        amount = settings.plan_price(plan_name)
        if amount is None:
            raise ValidationError(f"Unknown plan: {plan_name}")
        if not member.email:
            raise ValidationError("An email address is required to pay")

        commerce_order = f"ord_{uuid4().hex[:12]}"
        order = self.flow_client.create_payment_order(
            commerce_order=commerce_order,
            subject=f"Suscripción {plan_name} - Aula Digital Plus",
            amount=amount,
            email=member.email,
            url_confirmation=settings.payment_confirmation_url,
            url_return=settings.payment_return_url,
            currency=settings.FLOW_CURRENCY,
            payment_method=settings.FLOW_PAYMENT_METHOD,
        )
        logger.info(f"Created payment order {commerce_order} (flowOrder={order.flow_order}) for {member.uid}: {amount} {settings.FLOW_CURRENCY}")

        return PaymentOrderCreateResponse(
            commerce_order=commerce_order,
            payment_url=order.redirect_url,
            amount=amount,
            currency=settings.FLOW_CURRENCY,
        )

    def confirm_payment(self, token: str) -> PaymentStatusResponse:
        """Look up a payment Flow notified us about."""
        if not token:
            raise ValidationError("No token was received from the payment gateway")
        payment_status = self.flow_client.get_payment_status(token)
        logger.info(f"Payment {payment_status.commerce_order} (flowOrder={payment_status.flow_order}) status={payment_status.status}, amount={payment_status.amount}")
        return payment_status
