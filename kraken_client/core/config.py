"""
Configuration Management Module

This module handles client configuration loading from environment variables
and a .env file in the working directory. It uses pydantic-settings for validation and type safety.
"""

import base64
import binascii
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from kraken_client.models.request import Credentials

# resolved against the working directory
ENV_FILE = ".env"

DEFAULT_API_BASE = "api.kraken.com"
DEFAULT_USER_AGENT = "kraken-client Python API Client"


class ClientSettings(BaseSettings):
    """
    Main configuration class for the Kraken client.

    Loads configuration from environment variables (prefix ``KRAKEN_``)
    and the .env file. API key and secret are optional; without them the
    client can only reach public endpoints.

    Usage:
        settings = ClientSettings()
        creds = settings.get_credentials()
    """

    # Environment
    environment: str = Field(default="dev", description="dev/test/prod")

    # Credentials
    api_key: Optional[str] = Field(default=None)
    api_secret: Optional[str] = Field(
        default=None,
        description="Base64 encoded private key"
    )
    api_otp: Optional[str] = Field(
        default=None,
        description="One-time password for keys with 2FA enabled"
    )

    # Connection target
    api_base: str = Field(default=DEFAULT_API_BASE, description="API hostname")
    api_protocol: str = Field(default="https")
    api_version: int = Field(default=0)
    api_port: int = Field(default=443)
    timeout: float = Field(default=4.0, description="Request deadline in seconds")
    user_agent: str = Field(default=DEFAULT_USER_AGENT)

    # Logging
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)
    timezone: str = Field(default="UTC")

    model_config = SettingsConfigDict(
        env_prefix="KRAKEN_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator('api_key', 'api_secret', 'api_otp')
    @classmethod
    def empty_as_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat blank strings from the environment as unset"""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator('api_protocol')
    @classmethod
    def validate_protocol(cls, v: str) -> str:
        v = v.lower()
        if v not in ("http", "https"):
            raise ValueError("api_protocol must be http or https")
        return v

    @field_validator('api_version')
    @classmethod
    def validate_version(cls, v: int) -> int:
        if v < 0:
            raise ValueError("api_version must be >= 0")
        return v

    @field_validator('api_port')
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError("api_port must be between 1 and 65535")
        return v

    @field_validator('timeout')
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return v

    def get_credentials(self) -> Credentials:
        """
        Build the immutable credential record used by the dispatcher.

        Returns:
            Credentials object
        """
        return Credentials(
            api_key=self.api_key,
            api_secret=self.api_secret,
            otp=self.api_otp,
            host=self.api_base,
            protocol=self.api_protocol,
            version=self.api_version,
            port=self.api_port,
        )

    def validate_config(self) -> List[str]:
        """
        Validate configuration and return list of warnings.

        Returns:
            List of warning messages
        """
        warnings = []

        if bool(self.api_key) != bool(self.api_secret):
            warnings.append(
                "Only one of KRAKEN_API_KEY / KRAKEN_API_SECRET is set; "
                "private endpoints are disabled"
            )

        if self.api_secret:
            try:
                base64.b64decode(self.api_secret, validate=True)
            except (binascii.Error, ValueError):
                warnings.append("KRAKEN_API_SECRET is not valid base64; private calls will fail")

        if self.api_protocol != "https":
            warnings.append("API protocol is not https; credentials would travel in clear text")

        if self.api_otp and not self.api_key:
            warnings.append("KRAKEN_API_OTP is set without an API key and will be ignored")

        return warnings


# Global config instance
_config: Optional[ClientSettings] = None


def get_config() -> ClientSettings:
    """
    Get global configuration instance (singleton pattern).

    Returns:
        ClientSettings object
    """
    global _config
    if _config is None:
        _config = ClientSettings()
    return _config


def reload_config() -> ClientSettings:
    """
    Reload configuration from environment.

    Returns:
        New ClientSettings object
    """
    global _config
    _config = ClientSettings()
    return _config
