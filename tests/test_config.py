"""Tests for client configuration."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from cclib.config import DEFAULT_API_URL, USER_AGENT, VERSION, Config


class TestConfigDefaults:
    def test_defaults(self):
        config = Config()

        assert config.api_url == DEFAULT_API_URL
        assert config.token_source_url == f"{DEFAULT_API_URL}/token/"
        assert config.register_addon_url == DEFAULT_API_URL
        assert config.ssl_verify is True
        assert config.ca_certs is None
        assert config.timeout is None

    def test_trailing_slash_stripped(self):
        config = Config(api_url="https://api.example.com/")

        assert config.api_url == "https://api.example.com"
        assert config.token_source_url == "https://api.example.com/token/"

    def test_explicit_urls_kept(self):
        config = Config(
            api_url="https://api.example.com",
            token_source_url="https://auth.example.com/token/",
            register_addon_url="https://addons.example.com",
        )

        assert config.token_source_url == "https://auth.example.com/token/"
        assert config.register_addon_url == "https://addons.example.com"

    def test_empty_api_url(self):
        with pytest.raises(ValidationError):
            Config(api_url="")

    def test_frozen(self):
        config = Config()

        with pytest.raises(ValidationError):
            config.api_url = "https://other.example.com"

    def test_user_agent(self):
        assert USER_AGENT == f"cclib/{VERSION}"


class TestConfigFromEnv:
    """Tests for environment-derived defaults."""

    def test_empty_environment(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config.from_env()

        assert config == Config()

    def test_environment(self, tmp_path):
        ca_file = tmp_path / "ca.pem"
        env = {
            "CCTRL_API_URL": "https://api.example.com",
            "CCTRL_TOKEN_SOURCE_URL": "https://auth.example.com/token/",
            "CCTRL_REGISTER_ADDON_URL": "https://addons.example.com",
            "CCTRL_SSL_VERIFY": "false",
            "CCTRL_CA_CERTS": str(ca_file),
        }

        with patch.dict(os.environ, env, clear=True):
            config = Config.from_env()

        assert config.api_url == "https://api.example.com"
        assert config.token_source_url == "https://auth.example.com/token/"
        assert config.register_addon_url == "https://addons.example.com"
        assert config.ssl_verify is False
        assert config.ca_certs == Path(ca_file)

    @pytest.mark.parametrize("value,expected", [("1", True), ("yes", True), ("0", False), ("No", False)])
    def test_ssl_verify_values(self, value, expected):
        with patch.dict(os.environ, {"CCTRL_SSL_VERIFY": value}, clear=True):
            assert Config.from_env().ssl_verify is expected

    def test_overrides_win(self):
        with patch.dict(os.environ, {"CCTRL_API_URL": "https://env.example.com"}, clear=True):
            config = Config.from_env(api_url="https://explicit.example.com", timeout=10)

        assert config.api_url == "https://explicit.example.com"
        assert config.timeout == 10

    def test_resolved_once(self):
        """Test that later environment changes do not affect a built config."""
        with patch.dict(os.environ, {"CCTRL_API_URL": "https://first.example.com"}, clear=True):
            config = Config.from_env()

        with patch.dict(os.environ, {"CCTRL_API_URL": "https://second.example.com"}, clear=True):
            assert config.api_url == "https://first.example.com"
