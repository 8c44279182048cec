"""
Auth module - nonces and signatures for private endpoints.
"""

from kraken_client.services.auth.nonce import NonceGenerator
from kraken_client.services.auth.signer import decode_secret, serialize_params, sign_request

__all__ = [
    'NonceGenerator',
    'decode_secret',
    'serialize_params',
    'sign_request',
]
