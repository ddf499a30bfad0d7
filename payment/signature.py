# src/payment/signature.py
"""Request signing for the Flow API.

Flow authenticates every call with an ``s`` parameter: the HMAC-SHA256 of all
other parameters, sorted by name and concatenated as ``name + value`` with no
separators, keyed with the merchant secret and rendered as lowercase hex.
"""
import hashlib
import hmac
from typing import Mapping, Union

from exceptions import ConfigurationError

ParamValue = Union[str, int, float, bool]


def render_value(value: ParamValue) -> str:
    # Match how Flow's reference clients stringify values.
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def canonical_string(params: Mapping[str, ParamValue]) -> str:
    return "".join(f"{key}{render_value(params[key])}" for key in sorted(params))


def sign_params(params: Mapping[str, ParamValue], secret: str) -> str:
    """Return the hex HMAC-SHA256 signature of ``params``."""
    if not secret:
        raise ConfigurationError("Cannot sign gateway request without a secret key")
    to_sign = canonical_string(params)
    return hmac.new(secret.encode("utf-8"), to_sign.encode("utf-8"), hashlib.sha256).hexdigest()
