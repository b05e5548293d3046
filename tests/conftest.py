"""Pytest fixtures for the lead funnel tests."""

import pytest

from src.concierge.wizard import WizardMachine
from src.integrations.contracts.interfaces import LeadContact
from src.utils.config_loader import DEFAULT_CONFIG_PATH, load_landing_config
from src.utils.settings import Settings, SmtpSettings


@pytest.fixture
def landing_config():
    return load_landing_config(DEFAULT_CONFIG_PATH)


@pytest.fixture
def machine(landing_config):
    return WizardMachine(landing_config.questions)


@pytest.fixture
def valid_lead():
    return LeadContact(name="Jane Doe", email="jane@x.com", phone="08012345678")


@pytest.fixture
def settings():
    return Settings(
        webhook_url="https://script.google.test/macros/s/abc/exec",
        site_url="https://landing.spa.test",
        smtp=SmtpSettings(host="smtp.spa.test", user="concierge@spa.test", password="pw"),
        notify_emails=["team@spa.test"],
    )
