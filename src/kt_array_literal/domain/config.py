"""Configuration for the inspection. Immutable value object created by Infrastructure."""

from __future__ import annotations

import logging
import re

from kt_array_literal.domain.entities import LanguageFeature, Severity
from kt_array_literal.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE_VERSION = "2.0"
_VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)$")


class LanguageVersionSettings:
    """
    Language version plus explicit feature overrides.

    A feature is supported when it is explicitly enabled, or when the language
    version is at least the version that introduced it and it is not
    explicitly disabled.
    """

    def __init__(
        self,
        language_version: str = DEFAULT_LANGUAGE_VERSION,
        enabled_features: frozenset[LanguageFeature] = frozenset(),
        disabled_features: frozenset[LanguageFeature] = frozenset(),
    ) -> None:
        self._version = LanguageVersionSettings.parse_version(language_version)
        self._version_string = language_version
        self._enabled = enabled_features
        self._disabled = disabled_features
        overlap = enabled_features & disabled_features
        if overlap:
            names = ", ".join(sorted(f.feature_name for f in overlap))
            raise ConfigurationError(f"Features both enabled and disabled: {names}")

    @staticmethod
    def parse_version(value: str) -> tuple[int, int]:
        """Parse 'major.minor' into a tuple."""
        match = _VERSION_PATTERN.match(value.strip())
        if not match:
            raise ConfigurationError(f"Invalid language version: {value!r} (expected e.g. '1.9')")
        return (int(match.group(1)), int(match.group(2)))

    @property
    def language_version(self) -> str:
        return self._version_string

    def supports_feature(self, feature: LanguageFeature) -> bool:
        if feature in self._enabled:
            return True
        if feature in self._disabled:
            return False
        return self._version >= feature.since_version


class ConfigurationLoader:
    """
    Immutable configuration for the inspection.

    Created by Infrastructure from the [tool.kt-array-literal] section of
    pyproject.toml, with CLI overrides already merged in. Domain does not read
    the filesystem.
    """

    def __init__(self, config_dict: dict[str, object]) -> None:
        """Set config once at construction. No mutable state after init."""
        self._config = dict(config_dict)
        self.validate_config(self._config)
        self._language_settings = LanguageVersionSettings(
            language_version=self.language_version,
            enabled_features=self._features("enable_features"),
            disabled_features=self._features("disable_features"),
        )

    def validate_config(self, config: dict[str, object]) -> None:
        """Validate configuration values."""
        known = {"language_version", "enable_features", "disable_features", "force", "exclude", "severity"}
        for key in config:
            if key not in known:
                logger.warning("Configuration Warning: unknown key '%s' is ignored.", key)
        version = config.get("language_version", DEFAULT_LANGUAGE_VERSION)
        if not isinstance(version, str):
            raise ConfigurationError(f"language_version must be a string, got {version!r}")
        LanguageVersionSettings.parse_version(version)
        force = config.get("force", False)
        if not isinstance(force, bool):
            raise ConfigurationError(f"force must be a boolean, got {force!r}")
        severity = config.get("severity", Severity.GENERIC_ERROR_OR_WARNING.value)
        if not isinstance(severity, str) or severity not in {s.value for s in Severity}:
            raise ConfigurationError(f"Unknown severity: {severity!r}")
        exclude = config.get("exclude", [])
        if not isinstance(exclude, list) or not all(isinstance(x, str) for x in exclude):
            raise ConfigurationError(f"exclude must be a list of path fragments, got {exclude!r}")

    def _features(self, key: str) -> frozenset[LanguageFeature]:
        raw = self._config.get(key, [])
        if not isinstance(raw, list):
            raise ConfigurationError(f"{key} must be a list of feature names")
        features: set[LanguageFeature] = set()
        for name in raw:
            feature = LanguageFeature.from_name(str(name))
            if feature is None:
                raise ConfigurationError(f"Unknown language feature: {name!r}")
            features.add(feature)
        return frozenset(features)

    @property
    def config(self) -> dict[str, object]:
        """Return the loaded configuration."""
        return self._config

    @property
    def language_version(self) -> str:
        return str(self._config.get("language_version", DEFAULT_LANGUAGE_VERSION))

    @property
    def language_settings(self) -> LanguageVersionSettings:
        return self._language_settings

    @property
    def force(self) -> bool:
        """Report even when the language does not support array literals in annotations."""
        return bool(self._config.get("force", False))

    @property
    def severity(self) -> Severity:
        return Severity(self._config.get("severity", Severity.GENERIC_ERROR_OR_WARNING.value))

    @property
    def exclude(self) -> list[str]:
        """Path fragments to skip when collecting files."""
        raw = self._config.get("exclude", [])
        return [str(x) for x in raw] if isinstance(raw, list) else []

    def with_overrides(self, **overrides: object) -> "ConfigurationLoader":
        """Return a new loader with non-None overrides applied."""
        merged = dict(self._config)
        merged.update({key: value for key, value in overrides.items() if value is not None})
        return ConfigurationLoader(merged)
