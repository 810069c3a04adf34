"""Client configuration for the cloudControl API."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

VERSION = "0.3.0"
USER_AGENT = f"cclib/{VERSION}"

DEFAULT_API_URL = "https://api.cloudcontrol.com"
TOKEN_PATH = "/token/"

ACCEPT_ENCODING = "compress, gzip"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"
SUCCESS_STATUS_CODES = frozenset({200, 201, 204})

# Environment variables read by Config.from_env()
API_URL_ENV = "CCTRL_API_URL"
TOKEN_SOURCE_URL_ENV = "CCTRL_TOKEN_SOURCE_URL"
REGISTER_ADDON_URL_ENV = "CCTRL_REGISTER_ADDON_URL"
SSL_VERIFY_ENV = "CCTRL_SSL_VERIFY"
CA_CERTS_ENV = "CCTRL_CA_CERTS"

_FALSE_VALUES = {"0", "false", "no", "off"}


class Config(BaseModel):
    """Connection settings for a Session.

    Replaces module-level globals: a Config is built once, handed to the
    session and never re-read from the environment afterwards.
    """

    model_config = ConfigDict(frozen=True)

    api_url: str = Field(default=DEFAULT_API_URL, description="Base URL of the API")
    token_source_url: str = Field(
        default="", description="Token issuance URL, defaults to <api_url>/token/"
    )
    register_addon_url: str = Field(
        default="", description="Add-on registration URL, defaults to <api_url>"
    )
    ssl_verify: bool = Field(default=True, description="Verify TLS certificates")
    ca_certs: Path | None = Field(default=None, description="PEM bundle of trusted roots")
    timeout: float | None = Field(default=None, description="Per-request timeout in seconds")

    @field_validator("api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        if not value:
            raise ValueError("api_url must not be empty")
        return value.rstrip("/")

    @model_validator(mode="after")
    def _fill_derived_urls(self) -> Config:
        # frozen model: derived defaults are written through object.__setattr__
        if not self.token_source_url:
            object.__setattr__(self, "token_source_url", self.api_url + TOKEN_PATH)
        if not self.register_addon_url:
            object.__setattr__(self, "register_addon_url", self.api_url)
        return self

    @classmethod
    def from_env(cls, **overrides: object) -> Config:
        """Build a Config from CCTRL_* environment variables.

        Explicit keyword overrides win over the environment.

        Args:
            **overrides: Field values that take priority over the environment.

        Returns:
            The resolved configuration.
        """
        values: dict[str, object] = {}

        api_url = os.environ.get(API_URL_ENV)
        if api_url:
            values["api_url"] = api_url

        token_source_url = os.environ.get(TOKEN_SOURCE_URL_ENV)
        if token_source_url:
            values["token_source_url"] = token_source_url

        register_addon_url = os.environ.get(REGISTER_ADDON_URL_ENV)
        if register_addon_url:
            values["register_addon_url"] = register_addon_url

        ssl_verify = os.environ.get(SSL_VERIFY_ENV)
        if ssl_verify:
            values["ssl_verify"] = ssl_verify.strip().lower() not in _FALSE_VALUES

        ca_certs = os.environ.get(CA_CERTS_ENV)
        if ca_certs:
            values["ca_certs"] = Path(ca_certs)

        values.update(overrides)
        return cls.model_validate(values)
