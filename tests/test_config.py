"""
Tests for env getters and get_settings().
"""

from __future__ import annotations


def test_defaults(clean_env):
    from backend_txreport.config.settings import get_settings

    settings = get_settings()
    assert settings.octav_api_key == ""
    assert settings.octav_base_url == "https://api.octav.fi"
    assert settings.wallet_addresses == ()
    assert settings.report_output_dir == "./reports"
    assert settings.report_schedule == "0 9 * * *"
    assert settings.hide_spam is True
    assert settings.excluded_transaction_types == ("BRIDGEIN", "BRIDGEOUT", "CLAIM")
    assert settings.smtp_port == 587
    assert settings.scheduler_enabled is True
    assert settings.api_port == 3000


def test_values_from_env(clean_env):
    from backend_txreport.config.settings import get_settings

    clean_env.setenv("OCTAV_API_KEY", " key ")
    clean_env.setenv("OCTAV_BASE_URL", "https://octav.test/")
    clean_env.setenv("WALLET_ADDRESSES", "0xa, 0xb,,")
    clean_env.setenv("HIDE_SPAM", "false")
    clean_env.setenv("EXCLUDED_TRANSACTION_TYPES", "claim, airdrop")
    clean_env.setenv("EMAIL_SMTP_PORT", "not-a-port")
    clean_env.setenv("EMAIL_USERNAME", "bot@test")
    clean_env.setenv("EMAIL_TO", "a@test,b@test")
    clean_env.setenv("SCHEDULER_ENABLED", "0")
    clean_env.setenv("PORT", "8080")

    settings = get_settings()
    assert settings.octav_api_key == "key"
    assert settings.octav_base_url == "https://octav.test"
    assert settings.wallet_addresses == ("0xa", "0xb")
    assert settings.hide_spam is False
    assert settings.excluded_transaction_types == ("CLAIM", "AIRDROP")
    assert settings.smtp_port == 587
    assert settings.email_sender == "bot@test"
    assert settings.email_recipients == ("a@test", "b@test")
    assert settings.scheduler_enabled is False
    assert settings.api_port == 8080


def test_explicit_empty_exclusions(clean_env):
    from backend_txreport.config.env import get_excluded_transaction_types

    clean_env.setenv("EXCLUDED_TRANSACTION_TYPES", "")
    assert get_excluded_transaction_types() == []


def test_services_client_needs_key(clean_env):
    import pytest

    from backend_txreport.core.exceptions import ConfigError
    from backend_txreport.core.services import build_services

    services = build_services()
    assert services.gate.excluded_types == frozenset({"BRIDGEIN", "BRIDGEOUT", "CLAIM"})
    with pytest.raises(ConfigError):
        services.client
