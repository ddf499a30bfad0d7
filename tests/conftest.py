import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("APP_URL", "https://app.example.cl")
os.environ.setdefault("FLOW_API_URL", "https://sandbox.flow.test/api")
os.environ.setdefault("FLOW_API_KEY", "test-api-key")
os.environ.setdefault("FLOW_SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from auth.services import AuthService
from database import Base, get_db
from exceptions import GatewayError
from main import app
from members.models import Member, FlowSubscription
from payment.client import get_flow_client
from payment.schemas import (
    CustomerCreateResponse,
    CardRegisterResponse,
    RegisterStatusResponse,
    SubscriptionCreateResponse,
    GatewaySubscription,
    PaymentOrderResponse,
    PaymentStatusResponse,
)

engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeFlowClient:
    """Stands in for FlowClient and records every gateway call."""

    def __init__(self):
        self.calls = []
        self.customer_id = "c1"
        self.register_status = {"status": 1, "customerId": "c1"}
        self.subscription_id = "s1"
        self.create_customer_error = None

    @property
    def call_names(self):
        return [call[0] for call in self.calls]

    def create_customer(self, name, email, external_id):
        self.calls.append(("create_customer", name, email, external_id))
        if self.create_customer_error is not None:
            raise self.create_customer_error
        return CustomerCreateResponse.model_validate(
            {"customerId": self.customer_id, "name": name, "email": email, "externalId": external_id}
        )

    def register_card(self, customer_id, url_return):
        self.calls.append(("register_card", customer_id, url_return))
        return CardRegisterResponse(token="regtok", url="https://sandbox.flow.test/app/customer/disclaimer.php")

    def get_register_status(self, token):
        self.calls.append(("get_register_status", token))
        return RegisterStatusResponse.model_validate(self.register_status)

    def create_subscription(self, plan_id, customer_id):
        self.calls.append(("create_subscription", plan_id, customer_id))
        return SubscriptionCreateResponse.model_validate(
            {"subscriptionId": self.subscription_id, "planId": plan_id, "customerId": customer_id, "status": 1}
        )

    def get_subscription(self, subscription_id):
        self.calls.append(("get_subscription", subscription_id))
        return GatewaySubscription.model_validate(
            {"subscriptionId": subscription_id, "planId": "Plan Anual", "customerId": self.customer_id, "status": 1}
        )

    def create_payment_order(self, **kwargs):
        self.calls.append(("create_payment_order", kwargs))
        return PaymentOrderResponse.model_validate(
            {"token": "paytok", "url": "https://sandbox.flow.test/app/web/pay.php", "flowOrder": 7001}
        )

    def get_payment_status(self, token):
        self.calls.append(("get_payment_status", token))
        return PaymentStatusResponse.model_validate(
            {"flowOrder": 7001, "commerceOrder": "ord_abc", "status": 2, "amount": 12990, "currency": "CLP"}
        )


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_flow():
    return FakeFlowClient()


@pytest.fixture
def client(db, fake_flow):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_flow_client] = lambda: fake_flow
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_member(db):
    def _make(uid="u1", owner_id=None, name="Ana", email="a@x.com", role="adult", customer_id=None,
              plan_name="Plan Anual", **fields):
        owner_id = owner_id or uid
        member = Member(
            uid=uid,
            owner_id=owner_id,
            name=name,
            last_name=fields.pop("last_name", ""),
            email=email,
            role=role,
            is_owner_profile=uid == owner_id,
            **fields,
        )
        if customer_id is not None:
            member.flow_subscription = FlowSubscription(customer_id=customer_id, subscription_id="", plan_name=plan_name)
        db.add(member)
        db.commit()
        db.refresh(member)
        return member
    return _make


@pytest.fixture
def auth_headers():
    def _headers(uid="u1"):
        return {"Authorization": f"Bearer {AuthService.create_access_token({'sub': uid})}"}
    return _headers


@pytest.fixture
def gateway_error():
    return GatewayError("email is not valid", status=401)
