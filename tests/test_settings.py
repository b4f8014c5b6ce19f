from siteaudit.settings import Settings


def test_defaults():
    s = Settings(_env_file=None, GOOGLE_PAGESPEED_API_KEY="", OPENROUTER_API_KEY="")

    assert s.OPENROUTER_MODEL == "deepseek/deepseek-r1"
    assert s.PSI_STRATEGY == "desktop"
    assert s.PSI_LOCALE == "en"
    assert not s.has_pagespeed_key
    assert not s.has_openrouter_key


def test_secrets_are_unquoted(monkeypatch):
    monkeypatch.setenv("GOOGLE_PAGESPEED_API_KEY", '"abc123" ')
    monkeypatch.setenv("OPENROUTER_API_KEY", "'sk-or-1'")

    s = Settings(_env_file=None)

    assert s.GOOGLE_PAGESPEED_API_KEY == "abc123"
    assert s.OPENROUTER_API_KEY == "sk-or-1"
    assert s.has_pagespeed_key
