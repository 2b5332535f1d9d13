import logging

from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import Optional

class Settings(BaseSettings):
    # Environment
    ENV: str = "development"
    CONFIG_STRICT: bool = False
    LOG_LEVEL: str = "INFO"

    # Rewards
    BASE_XP_DEFAULT: int = 100
    STREAK_BONUS_PER_DAY: float = 0.1

    # Run submission guards
    RUN_RATE_LIMIT_PER_MINUTE: int = 10
    MAX_SAMPLE_POINTS: int = 500

    # Count scorer: largest miss that still earns the speed bonus
    COUNT_SPEED_BONUS_MAX_DIFFERENCE: int = 0

    # CORS
    CORS_ALLOWED_ORIGINS: str = "http://localhost:3000"  # comma-separated

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
settings = Settings()


def validate_config(strict: Optional[bool] = None, settings_obj: Optional[Settings] = None, logger: Optional[logging.Logger] = None) -> bool:
    """Validate scoring and reward configuration.

    In strict mode raise RuntimeError; otherwise emit warnings only.
    """
    cfg = settings_obj or settings
    log = logger or logging.getLogger("skillstreak")
    strict_mode = strict if strict is not None else getattr(cfg, "CONFIG_STRICT", False)

    problems = []
    if not isinstance(logging.getLevelName(cfg.LOG_LEVEL.upper()), int):
        problems.append(f"LOG_LEVEL {cfg.LOG_LEVEL!r} is not a logging level")
    if cfg.BASE_XP_DEFAULT <= 0:
        problems.append("BASE_XP_DEFAULT must be positive")
    if cfg.STREAK_BONUS_PER_DAY < 0:
        problems.append("STREAK_BONUS_PER_DAY must not be negative")
    if cfg.RUN_RATE_LIMIT_PER_MINUTE <= 0:
        problems.append("RUN_RATE_LIMIT_PER_MINUTE must be positive")
    if cfg.MAX_SAMPLE_POINTS <= 0:
        problems.append("MAX_SAMPLE_POINTS must be positive")
    if cfg.COUNT_SPEED_BONUS_MAX_DIFFERENCE < 0:
        problems.append("COUNT_SPEED_BONUS_MAX_DIFFERENCE must not be negative")

    if problems:
        message = f"Invalid configuration: {'; '.join(problems)}"
        if strict_mode:
            raise RuntimeError(message)
        log.warning(message)

    return True
