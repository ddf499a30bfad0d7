# src/payment/client.py
import logging
from functools import lru_cache
from typing import Dict, Type, TypeVar

import requests
from pydantic import ValidationError as SchemaError

from config import GatewayConfig, settings
from exceptions import GatewayError
from payment.schemas import (
    GatewayErrorBody,
    GatewayModel,
    CustomerCreateResponse,
    CardRegisterResponse,
    RegisterStatusResponse,
    SubscriptionCreateResponse,
    GatewaySubscription,
    PaymentOrderResponse,
    PaymentStatusResponse,
)
from payment.signature import ParamValue, render_value, sign_params

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=GatewayModel)


class FlowClient:
    """Signed HTTP client for the Flow customer, subscription and payment APIs."""

    def __init__(self, config: GatewayConfig):
        self.config = config.validate()
        self.base_url = config.api_url.rstrip("/")

    def _signed(self, params: Dict[str, ParamValue]) -> Dict[str, str]:
        # Send exactly the strings that were signed.
        payload = {key: render_value(value) for key, value in {"apiKey": self.config.api_key, **params}.items()}
        payload["s"] = sign_params(payload, self.config.api_secret)
        return payload

    def _post(self, path: str, params: Dict[str, ParamValue], model: Type[T]) -> T:
        url = f"{self.base_url}{path}"
        logger.info(f"Flow POST {path}: params={sorted(params)}")
        try:
            response = requests.post(url, data=self._signed(params), timeout=self.config.timeout)
        except requests.RequestException as e:
            logger.error(f"Flow POST {path} failed: {str(e)}")
            raise GatewayError(f"Could not reach the payment gateway: {str(e)}")
        return self._parse(response, model, path)

    def _get(self, path: str, params: Dict[str, ParamValue], model: Type[T]) -> T:
        url = f"{self.base_url}{path}"
        logger.info(f"Flow GET {path}: params={sorted(params)}")
        try:
            response = requests.get(
                url,
                params=self._signed(params),
                headers={"Accept": "application/json"},
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Flow GET {path} failed: {str(e)}")
            raise GatewayError(f"Could not reach the payment gateway: {str(e)}")
        return self._parse(response, model, path)

    @staticmethod
    def _parse(response: requests.Response, model: Type[T], path: str) -> T:
        try:
            data = response.json()
        except ValueError:
            logger.error(f"Flow {path} non-JSON response: status={response.status_code}, text={response.text[:200]}")
            raise GatewayError(f"Payment gateway returned an invalid response (HTTP {response.status_code})",
                               status=response.status_code)
        if not isinstance(data, dict):
            raise GatewayError(f"Payment gateway returned an unexpected payload for {path}",
                               status=response.status_code, payload={"body": data})
        logger.info(f"Flow {path} response status: {response.status_code}")
        try:
            return model.model_validate(data)
        except SchemaError:
            error = GatewayErrorBody.model_validate(
                {k: data.get(k) for k in ("code", "message") if isinstance(data.get(k), (int, str))}
            )
            status = error.code if error.code is not None else response.status_code
            message = error.message or f"Payment gateway rejected {path} (HTTP {response.status_code})"
            logger.error(f"Flow {path} error: code={status}, message={message}")
            raise GatewayError(message, status=status, payload=data)

    def create_customer(self, name: str, email: str, external_id: str) -> CustomerCreateResponse:
        return self._post(
            "/customer/create",
            {"name": name, "email": email, "externalId": external_id},
            CustomerCreateResponse,
        )

    def register_card(self, customer_id: str, url_return: str) -> CardRegisterResponse:
        return self._post(
            "/customer/register",
            {"customerId": customer_id, "url_return": url_return},
            CardRegisterResponse,
        )

    def get_register_status(self, token: str) -> RegisterStatusResponse:
        return self._get("/customer/getRegisterStatus", {"token": token}, RegisterStatusResponse)

    def create_subscription(self, plan_id: str, customer_id: str) -> SubscriptionCreateResponse:
        return self._post(
            "/subscription/create",
            {"planId": plan_id, "customerId": customer_id},
            SubscriptionCreateResponse,
        )

    def get_subscription(self, subscription_id: str) -> GatewaySubscription:
        return self._get("/subscription/get", {"subscriptionId": subscription_id}, GatewaySubscription)

    def create_payment_order(
        self,
        commerce_order: str,
        subject: str,
        amount: int,
        email: str,
        url_confirmation: str,
        url_return: str,
        currency: str = "CLP",
        payment_method: int = 9,
    ) -> PaymentOrderResponse:
        return self._post(
            "/payment/create",
            {
                "commerceOrder": commerce_order,
                "subject": subject,
                "currency": currency,
                "amount": amount,
                "email": email,
                "urlConfirmation": url_confirmation,
                "urlReturn": url_return,
                "paymentMethod": payment_method,
            },
            PaymentOrderResponse,
        )

    def get_payment_status(self, token: str) -> PaymentStatusResponse:
        return self._get("/payment/getStatus", {"token": token}, PaymentStatusResponse)


@lru_cache()
def get_flow_client() -> FlowClient:
    """Process-wide gateway client built from settings."""
    return FlowClient(settings.gateway_config())
