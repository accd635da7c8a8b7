from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from config import ConfigurationSet, config_from_dict, config_from_env, config_from_yaml

from pitch_counter.sync.remote import DEFAULT_COLLECTION

_DEFAULTS: dict[str, object] = {
    "store": {
        "db_path": "~/.config/pitch-counter/pitch_counter.db",
    },
    "sync": {
        "base_url": "",
        "collection": DEFAULT_COLLECTION,
        "timeout": 10.0,
        "background": True,
    },
}

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "off"})


class ConfigError(Exception):
    """Raised when a configuration value cannot be interpreted."""

    def __init__(self, key: str, value: object, expected: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Config '{key}': expected {expected}, got {value!r}")


@dataclass(frozen=True)
class AppSettings:
    db_path: Path
    sync_base_url: str | None
    sync_collection: str
    sync_timeout: float
    sync_background: bool

    @property
    def sync_configured(self) -> bool:
        return self.sync_base_url is not None


def create_config(
    yaml_path: str = "pitch_counter.yaml",
    env_prefix: str = "PITCH_COUNTER",
    defaults: dict[str, object] | None = None,
    *,
    db_path: str | None = None,
    sync_url: str | None = None,
) -> ConfigurationSet:
    """Create a layered configuration.

    Priority (highest to lowest): explicit overrides > env vars > YAML file > defaults dict.

    Args:
        yaml_path: Path to the YAML config file.
        env_prefix: Prefix for environment variables (``PITCH_COUNTER__SYNC__BASE_URL``).
        defaults: Default configuration values.
        db_path: Override the local database path.
        sync_url: Override the remote sync base URL.
    """
    if defaults is None:
        defaults = _DEFAULTS

    layers = [
        config_from_env(env_prefix, separator="__", lowercase_keys=True),
        config_from_yaml(yaml_path, read_from_file=True, ignore_missing_paths=True),
        config_from_dict(defaults),
    ]

    overrides = _build_overrides(db_path, sync_url)
    if overrides:
        layers.insert(0, config_from_dict(overrides))

    return ConfigurationSet(*layers)


def _build_overrides(db_path: str | None, sync_url: str | None) -> dict[str, object]:
    overrides: dict[str, object] = {}
    if db_path is not None:
        overrides["store"] = {"db_path": db_path}
    if sync_url is not None:
        overrides["sync"] = {"base_url": sync_url}
    return overrides


def _as_bool(key: str, value: object) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ConfigError(key, value, "a boolean")


def _as_positive_float(key: str, value: object) -> float:
    try:
        number = float(str(value))
    except ValueError:
        raise ConfigError(key, value, "a number") from None
    if number <= 0:
        raise ConfigError(key, value, "a positive number")
    return number


def load_settings(cfg: ConfigurationSet | None = None) -> AppSettings:
    if cfg is None:
        cfg = create_config()
    base_url = str(cfg["sync.base_url"]).strip()
    collection = str(cfg["sync.collection"]).strip()
    if not collection:
        raise ConfigError("sync.collection", collection, "a non-empty name")
    return AppSettings(
        db_path=Path(str(cfg["store.db_path"])).expanduser(),
        sync_base_url=base_url or None,
        sync_collection=collection,
        sync_timeout=_as_positive_float("sync.timeout", cfg["sync.timeout"]),
        sync_background=_as_bool("sync.background", cfg["sync.background"]),
    )
