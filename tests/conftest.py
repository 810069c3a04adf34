"""Shared fixtures and configuration for tests."""

from __future__ import annotations

import gzip
import json
from typing import Any

import pytest
import respx

from cclib.config import Config
from cclib.token import Token

API_URL = "https://api.example.com"

# ==================== MOCK DATA ====================


def make_token_dict(
    token: str = "abc123",
    expires: str | None = "2014-11-24T16:39:54.450",
) -> dict[str, Any]:
    """Create a mock token document."""
    data: dict[str, Any] = {"token": token}
    if expires is not None:
        data["expires"] = expires
    return data


def make_app_dict(
    name: str = "myapp",
    app_type: str = "python",
    deployments: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Create a mock application dictionary."""
    return {
        "name": name,
        "type": {"name": app_type},
        "owner": {
            "username": "john",
            "first_name": "John",
            "last_name": "Doe",
            "email": "john@example.org",
            "is_active": True,
        },
        "repository": f"ssh://{name}@cloudcontrolled.com/repository.git",
        "users": [{"username": "john", "email": "john@example.org", "role": "owner"}],
        "deployments": deployments if deployments is not None else [make_deployment_dict()],
    }


def make_deployment_dict(
    name: str = "myapp/default",
    dep_id: str = "dep12345678",
    state: str = "deployed",
) -> dict[str, Any]:
    """Create a mock deployment dictionary."""
    return {
        "name": name,
        "dep_id": dep_id,
        "default_subdomain": "myapp.cloudcontrolled.com",
        "stack": {"name": "pinky"},
        "version": "4f2b0a1",
        "is_default": True,
        "state": state,
        "min_boxes": 2,
        "max_boxes": 4,
        "boxes": {"boxes": 2, "costs": 0.0, "free_boxes": 1, "until": 1414156800.0},
        "billed_addons": [{"addon": "mysqls.free", "hours": 10, "costs": 0, "until": 0}],
    }


def gzip_json(data: Any) -> bytes:
    """Encode ``data`` as gzip-compressed JSON."""
    return gzip.compress(json.dumps(data).encode("utf-8"))


# ==================== FIXTURES ====================


@pytest.fixture
def api_base_url() -> str:
    """Base URL for API mocks."""
    return API_URL


@pytest.fixture
def config(api_base_url) -> Config:
    """Config pointing at the mocked API."""
    return Config(api_url=api_base_url)


@pytest.fixture
def token() -> Token:
    """A valid token."""
    return Token.model_validate(make_token_dict())


@pytest.fixture
def respx_mock():
    """Fixture for respx mocking."""
    with respx.mock(assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def temp_credentials_file(tmp_path):
    """Create a temporary two-line credentials file."""
    creds_file = tmp_path / "credentials"
    creds_file.write_text("user@example.com\nsecret\n")
    return creds_file
