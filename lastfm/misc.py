"""Platform helpers: per-user data directories, platform naming and md5 digests."""

from __future__ import annotations

import hashlib
import os
import platform
import sys
from pathlib import Path

__all__ = [
    "runtime_data_dir",
    "cache_dir",
    "logs_dir",
    "platform_name",
    "md5",
]

_APP_DIR_NAME = "Last.fm"

_WINDOWS_RELEASES = {
    "95": "Windows 95",
    "98": "Windows 98",
    "Me": "Windows Me",
    "NT": "Windows NT",
    "2000": "Windows 2000",
    "XP": "Windows XP",
    "2003Server": "Windows Server 2003",
    "Vista": "Windows Vista",
    "7": "Windows 7",
}

_KNOWN_MAC_MINORS = range(0, 9)


def _home() -> Path:
    return Path(os.path.expanduser("~"))


def _ensure_exists(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def _is_windows() -> bool:
    return sys.platform == "win32"


def _is_mac() -> bool:
    return sys.platform == "darwin"


def _data_parent() -> Path:
    """The platform's per-user application data directory."""
    if _is_windows():
        local = os.environ.get("LOCALAPPDATA")
        return Path(local) if local else _home()
    if _is_mac():
        return _ensure_exists(_home() / "Library" / "Application Support")
    return _ensure_exists(_home() / ".local" / "share")


def runtime_data_dir() -> Path:
    """Directory for runtime data, created if missing."""
    return _ensure_exists(_data_parent() / _APP_DIR_NAME)


def logs_dir() -> Path:
    """Directory for log files, created if missing."""
    if _is_mac():
        return _ensure_exists(_home() / "Library" / "Logs" / _APP_DIR_NAME)
    return runtime_data_dir()


def cache_dir() -> Path:
    """Directory for cached data, created if missing."""
    if _is_mac():
        return _ensure_exists(_home() / "Library" / "Caches" / _APP_DIR_NAME)
    return _ensure_exists(runtime_data_dir() / "cache")


def _mac_name(version: str) -> str:
    if not version:
        return "Unknown Mac"
    parts = version.split(".")
    try:
        major = int(parts[0])
        minor = int(parts[1]) if len(parts) > 1 else 0
    except ValueError:
        return "Unknown"
    if major == 9:
        return "Mac OS 9"
    if major == 10 and minor in _KNOWN_MAC_MINORS:
        return f"Mac OS X 10.{minor}"
    return "Unknown"


def platform_name() -> str:
    """A human-readable name of the operating system."""
    if _is_windows():
        return _WINDOWS_RELEASES.get(platform.release(), "Unknown")
    if _is_mac():
        return _mac_name(platform.mac_ver()[0])
    return "UNIX X11"


def md5(data: bytes | str) -> str:
    """Lower-case hexadecimal md5 digest; text is encoded as UTF-8."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.md5(data).hexdigest().rjust(32, "0").lower()