# src/payment/schemas.py
from pydantic import BaseModel, Field
from typing import Literal, Optional, Union

PlanName = Literal["Plan Mensual", "Plan Semestral", "Plan Anual"]


class GatewayModel(BaseModel):
    """Base for Flow responses: camelCase on the wire, snake_case in code."""

    class Config:
        populate_by_name = True


class GatewayErrorBody(GatewayModel):
    """Error envelope Flow returns with 4xx responses."""
    code: Optional[Union[int, str]] = None
    message: Optional[str] = None


class CustomerCreateResponse(GatewayModel):
    customer_id: str = Field(alias="customerId")
    name: Optional[str] = None
    email: Optional[str] = None
    external_id: Optional[str] = Field(default=None, alias="externalId")
    status: Optional[Union[int, str]] = None


class CardRegisterResponse(GatewayModel):
    token: str
    url: str

    @property
    def redirect_url(self) -> str:
        return f"{self.url}?token={self.token}"


class RegisterStatusResponse(GatewayModel):
    status: Optional[int] = None
    customer_id: Optional[str] = Field(default=None, alias="customerId")
    credit_card_type: Optional[str] = Field(default=None, alias="creditCardType")
    last4_card_digits: Optional[str] = Field(default=None, alias="last4CardDigits")

    @property
    def is_registered(self) -> bool:
        return self.status == 1


class SubscriptionCreateResponse(GatewayModel):
    subscription_id: str = Field(alias="subscriptionId")
    plan_id: Optional[str] = Field(default=None, alias="planId")
    customer_id: Optional[str] = Field(default=None, alias="customerId")
    status: Optional[int] = None
    period_start: Optional[str] = None
    period_end: Optional[str] = None
    next_invoice_date: Optional[str] = None


class GatewaySubscription(GatewayModel):
    subscription_id: str = Field(alias="subscriptionId")
    plan_id: Optional[str] = Field(default=None, alias="planId")
    plan_name: Optional[str] = None
    customer_id: Optional[str] = Field(default=None, alias="customerId")
    status: Optional[int] = None
    created: Optional[str] = None
    subscription_start: Optional[str] = None
    period_start: Optional[str] = None
    period_end: Optional[str] = None
    next_invoice_date: Optional[str] = None
    trial_period_days: Optional[int] = None
    cancel_at_period_end: Optional[int] = None
    cancel_at: Optional[str] = None


class PaymentOrderResponse(GatewayModel):
    token: str
    url: str
    flow_order: Optional[int] = Field(default=None, alias="flowOrder")

    @property
    def redirect_url(self) -> str:
        return f"{self.url}?token={self.token}"


class PaymentStatusResponse(GatewayModel):
    flow_order: Optional[int] = Field(default=None, alias="flowOrder")
    commerce_order: Optional[str] = Field(default=None, alias="commerceOrder")
    status: Optional[int] = None
    subject: Optional[str] = None
    currency: Optional[str] = None
    amount: Optional[float] = None
    payer: Optional[str] = None


class PaymentOrderCreate(BaseModel):
    """Schema for creating a one-off payment order."""
    plan_name: PlanName


class PaymentOrderCreateResponse(BaseModel):
    """Schema for payment order creation response."""
    commerce_order: str
    payment_url: str
    amount: int
    currency: str


class PaymentConfirmationResponse(BaseModel):
    commerce_order: Optional[str]
    status: Optional[int]
