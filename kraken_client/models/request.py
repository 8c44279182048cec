"""
Request models

Credentials, transport options and the per-call request context.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Scalar = Union[str, int, float, bool]


class Visibility(str, Enum):
    """Whether an endpoint needs authentication"""

    PUBLIC = "public"
    PRIVATE = "private"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"


class Credentials(BaseModel):
    """API credentials and connection target, immutable once built"""

    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = Field(default=None, description="API key")
    api_secret: Optional[str] = Field(default=None, description="Base64 encoded private key")
    otp: Optional[str] = Field(default=None, description="One-time password")
    host: str = Field(default="api.kraken.com", description="API hostname")
    protocol: str = Field(default="https", description="http or https")
    version: int = Field(default=0, description="API version path segment")
    port: int = Field(default=443, description="TCP port")

    @property
    def has_private_access(self) -> bool:
        """True when both key and secret are configured"""
        return bool(self.api_key) and bool(self.api_secret)

    def __repr__(self) -> str:
        return (
            f"Credentials(host={self.host!r}, protocol={self.protocol!r}, "
            f"version={self.version}, private={self.has_private_access})"
        )

    __str__ = __repr__


class RequestOptions(BaseModel):
    """Everything the transport needs to perform one HTTP exchange"""

    model_config = ConfigDict(frozen=True)

    host: str
    port: int = 443
    protocol: str = "https"
    path: str
    method: HttpMethod
    headers: Dict[str, str] = Field(default_factory=dict)
    timeout: float = Field(default=4.0, gt=0)

    @property
    def url(self) -> str:
        return f"{self.protocol}://{self.host}:{self.port}{self.path}"


class RequestContext(BaseModel):
    """
    State of one in-flight call.

    Private calls gain ``nonce`` before signing and ``signature`` after.
    """

    visibility: Visibility
    endpoint: str
    params: Dict[str, Scalar] = Field(default_factory=dict)
    nonce: Optional[int] = None
    signature: Optional[str] = None

    def path(self, version: int) -> str:
        """``/{version}/{public|private}/{endpoint}``"""
        return f"/{version}/{self.visibility.value}/{self.endpoint}"
