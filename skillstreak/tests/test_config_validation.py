import logging

import pytest

from skillstreak.core.config import Settings, validate_config


def test_defaults_are_valid():
    assert validate_config(strict=True, settings_obj=Settings()) is True


def test_strict_mode_raises_on_bad_values():
    cfg = Settings(BASE_XP_DEFAULT=0, STREAK_BONUS_PER_DAY=-0.1)
    with pytest.raises(RuntimeError) as excinfo:
        validate_config(strict=True, settings_obj=cfg)
    assert "BASE_XP_DEFAULT" in str(excinfo.value)
    assert "STREAK_BONUS_PER_DAY" in str(excinfo.value)


def test_lenient_mode_warns(caplog):
    cfg = Settings(RUN_RATE_LIMIT_PER_MINUTE=0)
    with caplog.at_level(logging.WARNING, logger="skillstreak"):
        assert validate_config(strict=False, settings_obj=cfg) is True
    assert any("RUN_RATE_LIMIT_PER_MINUTE" in r.getMessage() for r in caplog.records)


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("STREAK_BONUS_PER_DAY", "0.2")
    monkeypatch.setenv("CONFIG_STRICT", "true")
    cfg = Settings()
    assert cfg.STREAK_BONUS_PER_DAY == 0.2
    assert cfg.CONFIG_STRICT is True


def test_unknown_log_level_is_reported():
    with pytest.raises(RuntimeError) as excinfo:
        validate_config(strict=True, settings_obj=Settings(LOG_LEVEL="chatty"))
    assert "LOG_LEVEL" in str(excinfo.value)
