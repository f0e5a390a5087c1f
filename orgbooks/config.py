"""Configuration model and loaders for Orgbooks.

Responsibilities:
- Define runtime configuration as a typed dataclass.
- Provide loader entry points for file- and environment-based configuration.
- Merge sources with deterministic precedence: YAML file over environment over defaults.

Key types:
- `OrgBooksConfig`: normalized settings for one CLI invocation.
- `ConfigLoader`: static construction helpers for `OrgBooksConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .models.datatypes import PLACEMENT_APPEND, PLACEMENT_PREPEND, SUPPORTED_PLACEMENTS
from .parsing import normalize_optional_string, parse_permissive_boolean


_DEFAULT_MAX_DEPTH = 2
_DEFAULT_PLACEMENT = PLACEMENT_PREPEND
_DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0


@dataclass(slots=True)
class OrgBooksConfig:
    """Runtime configuration for reading-list operations.

    Attributes:
        file: Path to the reading-list outline, or `None` when not configured.
        max_depth: Deepest heading level offered as an insertion category.
        placement: `prepend` files new entries first under a category, `append` last.
        request_timeout_seconds: HTTP timeout for metadata lookups.
    """

    file: Path | None = None
    max_depth: int = _DEFAULT_MAX_DEPTH
    placement: str = _DEFAULT_PLACEMENT
    request_timeout_seconds: float = _DEFAULT_REQUEST_TIMEOUT_SECONDS

    def validate(self) -> None:
        """Validate configuration values before use."""

        if isinstance(self.max_depth, bool) or self.max_depth <= 0:
            raise ValueError("`max_depth` must be a positive integer.")
        if self.placement not in SUPPORTED_PLACEMENTS:
            supported = ", ".join(sorted(SUPPORTED_PLACEMENTS))
            raise ValueError(
                f"Unsupported `placement` value `{self.placement}`; supported: {supported}."
            )
        if self.request_timeout_seconds <= 0:
            raise ValueError("`request_timeout_seconds` must be a positive number.")


class ConfigLoader:
    """Factory methods for creating `OrgBooksConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "file",
            "max_depth",
            "placement",
            "add_to_top",
            "request_timeout_seconds",
        }
    )
    _ENV_KEYS = {
        "ORGBOOKS_FILE": "file",
        "ORGBOOKS_MAX_DEPTH": "max_depth",
        "ORGBOOKS_PLACEMENT": "placement",
        "ORGBOOKS_ADD_TO_TOP": "add_to_top",
        "ORGBOOKS_REQUEST_TIMEOUT": "request_timeout_seconds",
    }

    @staticmethod
    def from_yaml(path: Path) -> OrgBooksConfig:
        """Create a validated config from a YAML file."""

        values = ConfigLoader._values_from_yaml(path)
        return ConfigLoader._build_config(values)

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> OrgBooksConfig:
        """Create a validated config from environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        return ConfigLoader._build_config(ConfigLoader._values_from_env(env_map))

    @staticmethod
    def load(
        config_path: Path | None = None, env: Mapping[str, str] | None = None
    ) -> OrgBooksConfig:
        """Create a validated config where YAML values override environment values."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        values = ConfigLoader._values_from_env(env_map)
        if config_path is not None:
            values.update(ConfigLoader._values_from_yaml(config_path))
        return ConfigLoader._build_config(values)

    @staticmethod
    def _values_from_yaml(path: Path) -> dict[str, Any]:
        """Read and normalize the supported keys of a YAML config file."""

        path_text = path.read_text(encoding="utf-8")
        payload = yaml.safe_load(path_text)
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return ConfigLoader._values_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def _values_from_env(env: Mapping[str, str]) -> dict[str, Any]:
        """Read and normalize supported environment variables."""

        payload = {
            field_name: env[env_key]
            for env_key, field_name in ConfigLoader._ENV_KEYS.items()
            if env_key in env and normalize_optional_string(env[env_key]) is not None
        }
        return ConfigLoader._values_from_mapping(payload, source_label="Environment")

    @staticmethod
    def _values_from_mapping(payload: Mapping[str, Any], source_label: str) -> dict[str, Any]:
        """Validate keys and convert raw values into typed config values."""

        unknown = sorted(
            str(key) for key in set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS)
        )
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        values: dict[str, Any] = {}
        file_value = ConfigLoader._optional_non_empty_string(payload, "file")
        if file_value is not None:
            values["file"] = Path(file_value).expanduser()
        if "max_depth" in payload:
            values["max_depth"] = ConfigLoader._positive_int(
                payload["max_depth"], "max_depth", source_label
            )
        placement = ConfigLoader._placement(payload, source_label)
        if placement is not None:
            values["placement"] = placement
        if "request_timeout_seconds" in payload:
            values["request_timeout_seconds"] = ConfigLoader._positive_float(
                payload["request_timeout_seconds"], "request_timeout_seconds", source_label
            )
        return values

    @staticmethod
    def _build_config(values: Mapping[str, Any]) -> OrgBooksConfig:
        """Build and validate a config from typed values."""

        config = OrgBooksConfig(
            file=values.get("file"),
            max_depth=values.get("max_depth", _DEFAULT_MAX_DEPTH),
            placement=values.get("placement", _DEFAULT_PLACEMENT),
            request_timeout_seconds=values.get(
                "request_timeout_seconds", _DEFAULT_REQUEST_TIMEOUT_SECONDS
            ),
        )
        config.validate()
        return config

    @staticmethod
    def _optional_non_empty_string(payload: Mapping[str, Any], key: str) -> str | None:
        """Read an optional string field and normalize blank values to `None`."""

        if key not in payload:
            return None
        return normalize_optional_string(payload[key])

    @staticmethod
    def _placement(payload: Mapping[str, Any], source_label: str) -> str | None:
        """Resolve `placement` and the `add_to_top` shorthand into one value."""

        placement = ConfigLoader._optional_non_empty_string(payload, "placement")
        if placement is not None:
            placement = placement.lower()
            if placement not in SUPPORTED_PLACEMENTS:
                supported = ", ".join(sorted(SUPPORTED_PLACEMENTS))
                raise ValueError(
                    f"{source_label} field `placement` must be one of: {supported}."
                )

        if "add_to_top" not in payload:
            return placement
        add_to_top = parse_permissive_boolean(payload["add_to_top"])
        if add_to_top is None:
            raise ValueError(
                f"{source_label} field `add_to_top` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        from_flag = PLACEMENT_PREPEND if add_to_top else PLACEMENT_APPEND
        if placement is not None and placement != from_flag:
            raise ValueError(
                f"{source_label} fields `placement` and `add_to_top` disagree."
            )
        return from_flag

    @staticmethod
    def _positive_int(raw_value: object, key: str, source_label: str) -> int:
        """Parse a positive integer value."""

        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be a positive integer.")
        if isinstance(raw_value, int):
            parsed = raw_value
        else:
            normalized = normalize_optional_string(raw_value)
            try:
                parsed = int(normalized) if normalized is not None else 0
            except ValueError as exc:
                raise ValueError(
                    f"{source_label} field `{key}` must be a positive integer."
                ) from exc
        if parsed <= 0:
            raise ValueError(f"{source_label} field `{key}` must be a positive integer.")
        return parsed

    @staticmethod
    def _positive_float(raw_value: object, key: str, source_label: str) -> float:
        """Parse a positive number value."""

        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be a positive number.")
        try:
            parsed = float(str(raw_value).strip())
        except ValueError as exc:
            raise ValueError(f"{source_label} field `{key}` must be a positive number.") from exc
        if parsed <= 0:
            raise ValueError(f"{source_label} field `{key}` must be a positive number.")
        return parsed
