"""
Centralized configuration with environment variable overrides.

Hosted backend credentials, business details and booking defaults are
configurable here. Nothing is hardcoded in scheduling or data logic.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from booking_widget.logging_context import add_session_filter

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] [%(session_id)s] %(levelname)s: %(message)s"


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_bool(env_var: str, default: str) -> bool:
    """Parse a boolean flag from an env var."""
    raw = os.getenv(env_var, default).strip().lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"Invalid boolean for {env_var}: {raw!r}")


def _env_with_fallback(name: str, legacy_name: str, default: str = "") -> str:
    return os.getenv(name) or os.getenv(legacy_name) or default


@dataclass(frozen=True)
class SupabaseConfig:
    """Hosted backend project credentials."""

    url: str = _env_with_fallback("SUPABASE_URL", "VITE_SUPABASE_URL")
    anon_key: str = _env_with_fallback("SUPABASE_ANON_KEY", "VITE_SUPABASE_ANON_KEY")

    @property
    def configured(self) -> bool:
        return bool(self.url and self.anon_key)


@dataclass(frozen=True)
class BusinessConfig:
    """Business-specific settings loaded from environment or defaults."""

    name: str = os.getenv("BUSINESS_NAME", "AutoAesthetic")
    timezone: str = os.getenv("BUSINESS_TIMEZONE", "UTC")
    messenger_url: str = os.getenv("MESSENGER_URL", "")


@dataclass(frozen=True)
class BookingConfig:
    """Defaults used by the date manager and the booking flow."""

    default_start_time: str = os.getenv("DEFAULT_START_TIME", "09:00")
    default_end_time: str = os.getenv("DEFAULT_END_TIME", "17:00")
    default_slot_interval: int = _safe_int("DEFAULT_SLOT_INTERVAL", "60")
    default_slots_per_interval: int = _safe_int("DEFAULT_SLOTS_PER_INTERVAL", "1")
    default_max_bookings_per_day: int = _safe_int("DEFAULT_MAX_BOOKINGS_PER_DAY", "10")
    calendar_months_ahead: int = _safe_int("CALENDAR_MONTHS_AHEAD", "2")
    reference_prefix: str = os.getenv("REFERENCE_PREFIX", "BK")
    maintain_slot_counters: bool = _safe_bool("MAINTAIN_SLOT_COUNTERS", "true")


@dataclass(frozen=True)
class AdminConfig:
    """Admin sign-in settings.

    The fallback password lets a single local admin in without a hosted
    account. It is disabled while empty.
    """

    fallback_password: str = os.getenv("ADMIN_FALLBACK_PASSWORD", "")
    fallback_email: str = os.getenv("ADMIN_FALLBACK_EMAIL", "admin@localhost")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    supabase: SupabaseConfig = field(default_factory=SupabaseConfig)
    business: BusinessConfig = field(default_factory=BusinessConfig)
    booking: BookingConfig = field(default_factory=BookingConfig)
    admin: AdminConfig = field(default_factory=AdminConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _parse_clock(env_var: str, value: str) -> datetime:
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(value.strip(), fmt)
        except ValueError:
            continue
    raise ValueError(f"{env_var} must be HH:MM, got {value!r}")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    booking = config.booking
    if booking.default_slot_interval < 1:
        raise ValueError(
            f"DEFAULT_SLOT_INTERVAL must be >= 1, got {booking.default_slot_interval}"
        )
    if booking.default_slots_per_interval < 1:
        raise ValueError(
            "DEFAULT_SLOTS_PER_INTERVAL must be >= 1, "
            f"got {booking.default_slots_per_interval}"
        )
    if booking.default_max_bookings_per_day < 1:
        raise ValueError(
            "DEFAULT_MAX_BOOKINGS_PER_DAY must be >= 1, "
            f"got {booking.default_max_bookings_per_day}"
        )
    if booking.calendar_months_ahead < 0:
        raise ValueError(
            f"CALENDAR_MONTHS_AHEAD must be >= 0, got {booking.calendar_months_ahead}"
        )
    if not booking.reference_prefix.strip():
        raise ValueError("REFERENCE_PREFIX must not be empty")

    start = _parse_clock("DEFAULT_START_TIME", booking.default_start_time)
    end = _parse_clock("DEFAULT_END_TIME", booking.default_end_time)
    if start >= end:
        raise ValueError(
            "DEFAULT_START_TIME must be before DEFAULT_END_TIME, "
            f"got {booking.default_start_time} - {booking.default_end_time}"
        )

    try:
        ZoneInfo(config.business.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(
            f"BUSINESS_TIMEZONE is not a known timezone: {config.business.timezone!r}"
        ) from None


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for handler in logging.getLogger().handlers:
        add_session_filter(handler)
    if not config.supabase.configured:
        logger.warning(
            "Supabase credentials not found. Set SUPABASE_URL and SUPABASE_ANON_KEY."
        )
    logger.info("Configuration loaded for '%s'", config.business.name)
    return config


# Singleton instance
settings = load_config()
