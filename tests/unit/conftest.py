"""
Unit test configuration.

Keeps settings hermetic: pydantic-settings never reads the project's .env
file, and switches that change provider behaviour are cleared from the
process environment. Tests opt in through monkeypatch.setenv().
"""

import pytest

_BEHAVIOUR_SWITCHES = (
    "ENV",
    "WHATSAPP_SIMULATE_ON_UNREACHABLE",
    "CAPTCHA_REQUIRED",
    "SENTRY_DSN",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})
    for name in _BEHAVIOUR_SWITCHES:
        monkeypatch.delenv(name, raising=False)
