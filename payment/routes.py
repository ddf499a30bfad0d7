# src/payment/routes.py
from typing import Optional

from fastapi import APIRouter, Depends, Form
from auth.routes import get_owner_profile
from exceptions import SubscriptionError, to_http_exception
from members.models import Member
from payment.client import FlowClient, get_flow_client
from payment.services import PaymentService
from payment.schemas import PaymentOrderCreate, PaymentOrderCreateResponse, PaymentConfirmationResponse

router = APIRouter(prefix="/payments", tags=["payments"])


def get_payment_service(flow_client: FlowClient = Depends(get_flow_client)) -> PaymentService:
    return PaymentService(flow_client)


@router.post("/orders", response_model=PaymentOrderCreateResponse)
def create_payment_order(
    order: PaymentOrderCreate,
    owner: Member = Depends(get_owner_profile),
    payment_service: PaymentService = Depends(get_payment_service),
):
    """Create a one-off payment order and return the checkout URL."""
    try:
        return payment_service.create_payment_order(owner, order.plan_name)
    except SubscriptionError as e:
        raise to_http_exception(e)


@router.post("/confirmation", response_model=PaymentConfirmationResponse)
def payment_confirmation(
    token: Optional[str] = Form(None),
    payment_service: PaymentService = Depends(get_payment_service),
):
    """Confirmation callback Flow calls once a payment settles."""
    try:
        payment_status = payment_service.confirm_payment(token)
    except SubscriptionError as e:
        raise to_http_exception(e)
    return PaymentConfirmationResponse(commerce_order=payment_status.commerce_order, status=payment_status.status)
