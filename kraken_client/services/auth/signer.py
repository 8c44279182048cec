"""
Request signing for private endpoints.

API-Sign = base64(HMAC-SHA512(base64decode(secret),
                              path + SHA256(nonce + urlencoded body)))
"""

import base64
import binascii
import hashlib
import hmac
from decimal import Decimal
from typing import Mapping
from urllib.parse import urlencode

from kraken_client.core.exceptions import AuthenticationError
from kraken_client.models.request import Scalar


def serialize_params(params: Mapping[str, Scalar]) -> str:
    """
    Form-encode ``params`` keeping insertion order, floats in fixed-point.

    The same string is signed and sent as the request body, so the order
    must not change between the two.
    """
    fields = []
    for key, value in params.items():
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, float):
            value = format(Decimal(repr(value)), "f")
        fields.append((key, value))
    return urlencode(fields)


def decode_secret(secret: str) -> bytes:
    """
    Decode the base64 API secret.

    Raises:
        AuthenticationError: secret is missing or not valid base64
    """
    if not secret:
        raise AuthenticationError("API secret is not configured")
    try:
        return base64.b64decode(secret, validate=True)
    except (binascii.Error, ValueError) as e:
        raise AuthenticationError(
            "API secret is not valid base64",
            original_exception=e,
        ) from e


def sign_request(path: str, params: Mapping[str, Scalar], nonce: int, secret: str) -> str:
    """
    Compute the API-Sign header value.

    Args:
        path: URI path, e.g. ``/0/private/Balance``
        params: form fields in send order, ``nonce`` included
        nonce: the nonce also present in ``params``
        secret: base64 encoded private key

    Returns:
        Base64 encoded HMAC-SHA512 signature

    Raises:
        AuthenticationError: secret cannot be decoded
    """
    key = decode_secret(secret)
    body = serialize_params(params)

    digest = hashlib.sha256(str(nonce).encode("utf-8") + body.encode("utf-8")).digest()
    mac = hmac.new(key, path.encode("utf-8") + digest, hashlib.sha512)

    return base64.b64encode(mac.digest()).decode("ascii")
