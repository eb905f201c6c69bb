"""Configuration helpers: data directory discovery, settings, sync parameters."""

import os
import pathlib
import sys
from dataclasses import dataclass

DEFAULT_SETTINGS = {
    "device_name": "StudyBuddy_Reviewer",
    "service_uuid": "4fafc201-1fb5-459e-8fcc-c5c9c331914b",
    "characteristic_uuid": "beb5483e-36e1-4688-b7f5-ea07361b26a8",
    "reset_spacing_ms": 100,
    "command_spacing_ms": 80,
    "scan_timeout": 10,
    "include_category": True,
    "write_with_response": True,
}


def get_data_dir() -> pathlib.Path:
    env_dir = os.environ.get("STUDYBUDDY_DIR")
    if env_dir:
        return pathlib.Path(env_dir)
    config_path = pathlib.Path.home() / ".config" / "studybuddy" / "config"
    if config_path.exists():
        for line in config_path.read_text().splitlines():
            line = line.strip()
            if line.startswith("DIR="):
                return pathlib.Path(line[4:].strip())
    return pathlib.Path.home() / ".local" / "share" / "studybuddy"


def load_settings(data_dir: pathlib.Path) -> dict:
    settings_path = data_dir / "settings.toml"
    settings = dict(DEFAULT_SETTINGS)
    if settings_path.exists():
        try:
            settings.update(_parse_toml_simple(settings_path.read_text()))
        except OSError as e:
            print(f"Warning: cannot read {settings_path}: {e}", file=sys.stderr)
    return settings


def _parse_toml_simple(text: str) -> dict:
    """Minimal TOML parser for flat key=value files."""
    result = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" in line:
            k, v = line.split("=", 1)
            k = k.strip()
            v = v.strip()
            if v.startswith('"') and v.endswith('"'):
                v = v[1:-1]
            elif v.isdigit():
                v = int(v)
            elif v == "true":
                v = True
            elif v == "false":
                v = False
            result[k] = v
    return result


@dataclass(frozen=True)
class SyncConfig:
    """Parameters of one sync attempt against the reviewer peripheral.

    Spacing values are the minimum pause after each write. The peripheral
    has no write buffer, so overlapping writes get dropped or corrupted.
    """
    device_name: str
    service_uuid: str
    characteristic_uuid: str
    reset_spacing_ms: int = 100
    command_spacing_ms: int = 80
    scan_timeout: int = 10
    include_category: bool = True
    write_with_response: bool = True

    def __post_init__(self):
        for name in ("reset_spacing_ms", "command_spacing_ms"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
        if isinstance(self.scan_timeout, bool) or not isinstance(self.scan_timeout, int) \
                or self.scan_timeout <= 0:
            raise ValueError(f"scan_timeout must be a positive integer, got {self.scan_timeout!r}")
        for name in ("device_name", "service_uuid", "characteristic_uuid"):
            if not isinstance(getattr(self, name), str) or not getattr(self, name):
                raise ValueError(f"{name} must be a non-empty string")
        for name in ("include_category", "write_with_response"):
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"{name} must be true or false")

    @classmethod
    def from_settings(cls, settings: dict) -> "SyncConfig":
        merged = dict(DEFAULT_SETTINGS)
        merged.update(settings)
        return cls(
            device_name=merged["device_name"],
            service_uuid=merged["service_uuid"].lower(),
            characteristic_uuid=merged["characteristic_uuid"].lower(),
            reset_spacing_ms=merged["reset_spacing_ms"],
            command_spacing_ms=merged["command_spacing_ms"],
            scan_timeout=merged["scan_timeout"],
            include_category=merged["include_category"],
            write_with_response=merged["write_with_response"],
        )
