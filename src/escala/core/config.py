"""Configuration loading utilities.

Settings are read once at process start and passed explicitly to every
component, so tests can build a ``Settings`` directly without touching
the environment.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "America/Sao_Paulo"
DEFAULT_DATA_FILE = Path("data") / "escala.json"
SERVICE_NAME = "escala-oficiais"


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration for the schedule board.

    ``lock_weekday`` uses Python's ``date.weekday()`` numbering
    (0=Monday, 4=Friday, 6=Sunday).
    """

    data_file: Path = DEFAULT_DATA_FILE
    host: str = "0.0.0.0"
    port: int = 8080
    timezone: str = DEFAULT_TIMEZONE
    lock_weekday: int = 4
    lock_hour: int = 10
    admin_key: str = ""
    ciente_key: str = ""
    title: str = ""
    author: str = ""
    chief_name: str = ""
    chief_role: str = "Chefe P/1"
    deputy_name: str = ""
    deputy_role: str = "Subcomandante"
    _tz: ZoneInfo = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not 0 <= self.lock_weekday <= 6:
            raise ValueError(f"lock_weekday must be between 0 and 6, got {self.lock_weekday}")
        if not 0 <= self.lock_hour <= 23:
            raise ValueError(f"lock_hour must be between 0 and 23, got {self.lock_hour}")
        try:
            tz = ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {self.timezone!r}") from e
        # frozen: normalized values go through object.__setattr__
        object.__setattr__(self, "admin_key", self.admin_key.strip())
        object.__setattr__(self, "ciente_key", self.ciente_key.strip())
        object.__setattr__(self, "data_file", Path(self.data_file))
        object.__setattr__(self, "_tz", tz)

    @property
    def tz(self) -> ZoneInfo:
        """Timezone used for lock evaluation and local dates."""
        return self._tz


def _env_int(name: str, default: int, *fallbacks: str) -> int:
    """Read an integer environment variable, trying legacy names in order."""
    for key in (name, *fallbacks):
        raw = os.getenv(key)
        if raw is None or not raw.strip():
            continue
        try:
            return int(raw.strip())
        except ValueError as e:
            raise ValueError(f"{key} must be an integer, got {raw!r}") from e
    return default


def _env_str(name: str, default: str = "", *fallbacks: str) -> str:
    """Read a string environment variable, trying legacy names in order."""
    for key in (name, *fallbacks):
        value = os.getenv(key)
        if value:
            return value
    return default


def _is_zone_name(name: str) -> bool:
    # POSIX forms such as ":/etc/localtime" are not zone keys
    if name.startswith(":"):
        return False
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def _timezone_from_env() -> str:
    """Read TIMEZONE, else the legacy TZ when it names an IANA zone."""
    explicit = os.getenv("TIMEZONE", "").strip()
    if explicit:
        return explicit
    legacy = os.getenv("TZ", "").strip()
    if not legacy:
        return DEFAULT_TIMEZONE
    if not _is_zone_name(legacy):
        logger.warning("Ignoring TZ=%r (not a zone name), using %s", legacy, DEFAULT_TIMEZONE)
        return DEFAULT_TIMEZONE
    return legacy


def _data_file_from_env() -> Path:
    data_file = os.getenv("DATA_FILE")
    if data_file:
        return Path(data_file)
    data_dir = os.getenv("DATA_DIR")
    if data_dir:
        return Path(data_dir) / DEFAULT_DATA_FILE.name
    return DEFAULT_DATA_FILE


def load_settings() -> Settings:
    """Load settings from the environment (and a local ``.env`` file).

    Environment variables:
        PORT, HOST: Listening address for the HTTP server
        TIMEZONE: Timezone for wall-clock lock evaluation (falls back to TZ)
        LOCK_WEEKDAY: Weekday the lock starts on (0=Monday, default 4=Friday)
        LOCK_HOUR: Hour the lock starts (falls back to LOCK_FRIDAY_HOUR)
        ADMIN_KEY: Administrative bypass secret
        CIENTE_KEY: Acknowledgement secret (falls back to MAJOR_KEY)
        TITLE, AUTHOR: Metadata overrides applied on every read
        DATA_FILE / DATA_DIR: Location of the persisted document
        CHIEF_NAME, CHIEF_ROLE, DEPUTY_NAME, DEPUTY_ROLE: Signer identities

    Raises:
        ValueError: If a numeric variable is malformed or out of range
    """
    load_dotenv()

    return Settings(
        data_file=_data_file_from_env(),
        host=_env_str("HOST", "0.0.0.0"),
        port=_env_int("PORT", 8080),
        timezone=_timezone_from_env(),
        lock_weekday=_env_int("LOCK_WEEKDAY", 4),
        lock_hour=_env_int("LOCK_HOUR", 10, "LOCK_FRIDAY_HOUR"),
        admin_key=_env_str("ADMIN_KEY"),
        ciente_key=_env_str("CIENTE_KEY", "", "MAJOR_KEY"),
        title=_env_str("TITLE"),
        author=_env_str("AUTHOR"),
        chief_name=_env_str("CHIEF_NAME"),
        chief_role=_env_str("CHIEF_ROLE", "Chefe P/1"),
        deputy_name=_env_str("DEPUTY_NAME"),
        deputy_role=_env_str("DEPUTY_ROLE", "Subcomandante"),
    )


def local_now(settings: Settings) -> datetime:
    """Current wall-clock time in the configured timezone."""
    return datetime.now(settings.tz)


def today_iso(settings: Settings) -> str:
    """Today's local date as YYYY-MM-DD."""
    return local_now(settings).date().isoformat()


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision (``...Z``)."""
    now = now or datetime.now(UTC)
    return now.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
