"""Core utilities: configuration, lock policy and backups."""

from escala.core.config import Settings, load_settings, local_now
from escala.core.lock import has_bypass, is_locked

__all__ = [
    "Settings",
    "has_bypass",
    "is_locked",
    "load_settings",
    "local_now",
]
