"""Settings runtime đọc từ biến môi trường (và file .env nếu có)."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from authcode import otp_core
from authcode.errors import ConfigurationError

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    digits: int = otp_core.DEFAULT_DIGITS
    period: int = otp_core.DEFAULT_TIME_STEP
    window: int = otp_core.DEFAULT_WINDOW
    issuer: str = "authcode"
    log_level: str = "INFO"
    secret: Optional[str] = None


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def load_settings(dotenv: bool = True) -> Settings:
    """
    Tạo Settings từ các biến môi trường AUTHCODE_*.

    Biến hỗ trợ: AUTHCODE_DIGITS, AUTHCODE_PERIOD, AUTHCODE_WINDOW,
    AUTHCODE_ISSUER, AUTHCODE_LOG_LEVEL, AUTHCODE_SECRET (Base32).

    Raises:
        ConfigurationError: nếu có giá trị không dùng được
    """
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    settings = Settings(
        digits=_int_env("AUTHCODE_DIGITS", otp_core.DEFAULT_DIGITS),
        period=_int_env("AUTHCODE_PERIOD", otp_core.DEFAULT_TIME_STEP),
        window=_int_env("AUTHCODE_WINDOW", otp_core.DEFAULT_WINDOW),
        issuer=os.getenv("AUTHCODE_ISSUER", "authcode"),
        log_level=os.getenv("AUTHCODE_LOG_LEVEL", "INFO").upper(),
        secret=os.getenv("AUTHCODE_SECRET") or None,
    )
    otp_core.validate_digits(settings.digits)
    otp_core.validate_step(settings.period)
    otp_core.validate_window(settings.window)
    if not isinstance(logging.getLevelName(settings.log_level), int):
        raise ConfigurationError(f"AUTHCODE_LOG_LEVEL is not a logging level: {settings.log_level!r}")
    return settings


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
