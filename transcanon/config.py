"""Configuration model and loaders for the content engine.

Responsibilities:
- Define engine configuration as a typed dataclass.
- Provide loader entry points for file- and environment-based configuration.
- Resolve the locale chain and translated locales for one render.

Key types:
- `EngineConfig`: normalized settings for fingerprinting and reconciliation.
- `ConfigLoader`: static construction helpers for `EngineConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from .parsing import (
    normalize_optional_string,
    parse_locale_list,
    parse_positive_float,
)
from .remote.locales import resolve_locale_chain, standardize_locale


_DEFAULT_LOCALE = "en"
_DEFAULT_DATA_FORMAT = "JSX"
_DEFAULT_FETCH_TIMEOUT_SECONDS = 8.0
_DEFAULT_MAX_FETCH_TIMEOUT_SECONDS = 60.0
_SUPPORTED_DATA_FORMATS = frozenset({"JSX", "ICU", "I18NEXT", "STRING"})


@dataclass(slots=True)
class EngineConfig:
    """Runtime configuration for fingerprinting and reconciliation.

    Attributes:
        default_locale: Locale that always terminates the preference chain.
        locales: Locales the project is translated into.
        data_format: Payload format; only `JSX` targets carry structure.
        cache_url: Base URL of the translation cache service, if any.
        project_id: Project identifier used in cache request paths.
        fetch_timeout_seconds: Default wait for one translation fetch.
        max_fetch_timeout_seconds: Hard cap applied to every fetch wait.
    """

    default_locale: str = _DEFAULT_LOCALE
    locales: tuple[str, ...] = ()
    data_format: str = _DEFAULT_DATA_FORMAT
    cache_url: str | None = None
    project_id: str | None = None
    fetch_timeout_seconds: float = _DEFAULT_FETCH_TIMEOUT_SECONDS
    max_fetch_timeout_seconds: float = _DEFAULT_MAX_FETCH_TIMEOUT_SECONDS

    def validate(self) -> None:
        """Validate configuration values before the engine uses them."""

        if normalize_optional_string(self.default_locale) is None:
            raise ValueError("`default_locale` must be a non-empty string.")
        if not standardize_locale(self.default_locale):
            raise ValueError("`default_locale` must be a valid locale code.")
        if self.data_format not in _SUPPORTED_DATA_FORMATS:
            supported = ", ".join(sorted(_SUPPORTED_DATA_FORMATS))
            raise ValueError(f"`data_format` must be one of: {supported}.")
        if self.fetch_timeout_seconds <= 0.0:
            raise ValueError("`fetch_timeout_seconds` must be a positive number.")
        if self.max_fetch_timeout_seconds <= 0.0:
            raise ValueError("`max_fetch_timeout_seconds` must be a positive number.")
        if (self.cache_url is None) != (self.project_id is None):
            raise ValueError("`cache_url` and `project_id` must be configured together.")

    @property
    def remote_enabled(self) -> bool:
        """Return whether translations can be fetched from a cache service."""

        return self.cache_url is not None and self.project_id is not None

    def is_translated(self, locale: str) -> bool:
        """Return whether `locale` has translations; an empty `locales` allows any."""

        if not self.locales:
            return True
        return standardize_locale(locale) in {standardize_locale(item) for item in self.locales}

    def locale_chain(self, requested: str | Iterable[str] | None = None) -> tuple[str, ...]:
        """Return the locale preference chain for a render request."""

        return resolve_locale_chain(requested, self.default_locale)


class ConfigLoader:
    """Factory methods for creating `EngineConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "default_locale",
            "locales",
            "data_format",
            "cache_url",
            "project_id",
            "fetch_timeout_seconds",
            "max_fetch_timeout_seconds",
        }
    )

    @staticmethod
    def from_yaml(path: Path) -> EngineConfig:
        """Create a validated config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        payload = ConfigLoader._parse_yaml_payload(path_text, path)
        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> EngineConfig:
        """Create a validated config from `TRANSCANON_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env

        default_locale = (
            ConfigLoader._optional_env_string(env_map, "TRANSCANON_DEFAULT_LOCALE")
            or _DEFAULT_LOCALE
        )
        data_format = (
            ConfigLoader._optional_env_string(env_map, "TRANSCANON_DATA_FORMAT")
            or _DEFAULT_DATA_FORMAT
        )
        fetch_timeout = ConfigLoader._optional_env_positive_float(
            env_map, "TRANSCANON_FETCH_TIMEOUT_SECONDS"
        )
        max_fetch_timeout = ConfigLoader._optional_env_positive_float(
            env_map, "TRANSCANON_MAX_FETCH_TIMEOUT_SECONDS"
        )

        config = EngineConfig(
            default_locale=default_locale,
            locales=parse_locale_list(
                ConfigLoader._optional_env_string(env_map, "TRANSCANON_LOCALES")
            ),
            data_format=data_format.upper(),
            cache_url=ConfigLoader._optional_env_string(env_map, "TRANSCANON_CACHE_URL"),
            project_id=ConfigLoader._optional_env_string(env_map, "TRANSCANON_PROJECT_ID"),
            fetch_timeout_seconds=fetch_timeout or _DEFAULT_FETCH_TIMEOUT_SECONDS,
            max_fetch_timeout_seconds=max_fetch_timeout or _DEFAULT_MAX_FETCH_TIMEOUT_SECONDS,
        )
        config.validate()
        return config

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` could not be parsed: {exc}") from exc
        if payload is None:
            return {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _build_config_from_mapping(payload: Mapping[str, Any], source_label: str) -> EngineConfig:
        """Build and validate a config from one parsed mapping."""

        ConfigLoader._validate_yaml_keys(payload, source_label)

        default_locale = (
            ConfigLoader._optional_non_empty_string(payload, "default_locale") or _DEFAULT_LOCALE
        )
        data_format = (
            ConfigLoader._optional_non_empty_string(payload, "data_format")
            or _DEFAULT_DATA_FORMAT
        )
        try:
            locales = parse_locale_list(payload.get("locales"))
        except ValueError as exc:
            raise ValueError(f"{source_label} field `locales`: {exc}") from exc

        config = EngineConfig(
            default_locale=default_locale,
            locales=locales,
            data_format=data_format.upper(),
            cache_url=ConfigLoader._optional_non_empty_string(payload, "cache_url"),
            project_id=ConfigLoader._optional_non_empty_string(payload, "project_id"),
            fetch_timeout_seconds=ConfigLoader._optional_positive_float(
                payload, "fetch_timeout_seconds", source_label, _DEFAULT_FETCH_TIMEOUT_SECONDS
            ),
            max_fetch_timeout_seconds=ConfigLoader._optional_positive_float(
                payload,
                "max_fetch_timeout_seconds",
                source_label,
                _DEFAULT_MAX_FETCH_TIMEOUT_SECONDS,
            ),
        )
        config.validate()
        return config

    @staticmethod
    def _validate_yaml_keys(payload: Mapping[str, Any], source_label: str) -> None:
        """Reject keys the engine does not understand."""

        unknown = sorted(str(key) for key in set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

    @staticmethod
    def _optional_non_empty_string(payload: Mapping[str, Any], key: str) -> str | None:
        """Read an optional string field and normalize blank values to `None`."""

        if key not in payload:
            return None
        return normalize_optional_string(payload[key])

    @staticmethod
    def _optional_positive_float(
        payload: Mapping[str, Any], key: str, source_label: str, default: float
    ) -> float:
        """Read and validate a positive number payload field."""

        if key not in payload or payload[key] is None:
            return default
        try:
            return parse_positive_float(payload[key], key)
        except ValueError as exc:
            raise ValueError(f"{source_label} field `{key}` must be a positive number.") from exc

    @staticmethod
    def _optional_env_string(env: Mapping[str, str], key: str) -> str | None:
        """Read and normalize optional string environment variable values."""

        if key not in env:
            return None
        return normalize_optional_string(env.get(key))

    @staticmethod
    def _optional_env_positive_float(env: Mapping[str, str], key: str) -> float | None:
        """Read an optional positive number from environment mapping."""

        raw_value = ConfigLoader._optional_env_string(env, key)
        if raw_value is None:
            return None
        try:
            return parse_positive_float(raw_value, key)
        except ValueError as exc:
            raise ValueError(f"Environment variable `{key}` must be a positive number.") from exc
