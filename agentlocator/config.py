"""Configuration model and loaders for agentlocator.

Responsibilities:
- Define discovery settings as a typed dataclass.
- Provide deterministic precedence resolution for CLI, environment, and file values.
- Provide loader entry points for YAML- and environment-based configuration.

Key types:
- `LocatorConfig`: normalized discovery settings for one command run.
- `ConfigSources`: optional value sources for precedence resolution.
- `ConfigLoader`: static construction helpers for `LocatorConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .parsing import normalize_optional_string, parse_string_list, parse_timeout_seconds
from .resolver import (
    DEFAULT_OVERRIDE_ENV,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_TOOL_NAME,
    ResolutionRequest,
)
from .strategies import DEFAULT_POSIX_SHELLS, DEFAULT_WINDOWS_EXTENSIONS


ENV_KEYS: Mapping[str, str] = {
    "tool_name": "AGENTLOCATOR_TOOL",
    "override_env": "AGENTLOCATOR_OVERRIDE_ENV",
    "timeout_seconds": "AGENTLOCATOR_TIMEOUT",
    "posix_shells": "AGENTLOCATOR_SHELLS",
    "windows_extensions": "AGENTLOCATOR_WINDOWS_EXTENSIONS",
    "work_dir": "AGENTLOCATOR_WORK_DIR",
}


@dataclass(frozen=True, slots=True)
class ConfigSources:
    """Source mappings used for deterministic value precedence.

    Attributes:
        cli: Values explicitly provided by CLI arguments, keyed by field name.
        env: Environment variables, looked up through `ENV_KEYS`.
    """

    cli: Mapping[str, str] = field(default_factory=dict)
    env: Mapping[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class LocatorConfig:
    """Discovery settings for one command run.

    Attributes:
        tool_name: Command name to locate.
        override_env: Environment variable holding an explicit tool path, or
            `None` to disable the override step.
        timeout_seconds: Per-strategy wait bound; `None` waits indefinitely.
        posix_shells: Absolute login-shell paths tried in order on POSIX hosts.
        windows_extensions: Suffixes retried with `where.exe` on Windows hosts.
        work_dir: Working directory for lookup commands and launches.
    """

    tool_name: str = DEFAULT_TOOL_NAME
    override_env: str | None = DEFAULT_OVERRIDE_ENV
    timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS
    posix_shells: tuple[str, ...] = DEFAULT_POSIX_SHELLS
    windows_extensions: tuple[str, ...] = DEFAULT_WINDOWS_EXTENSIONS
    work_dir: Path | None = None

    def validate(self) -> None:
        """Validate settings before discovery runs."""

        self._require_token(self.tool_name, "tool_name")
        if self.override_env is not None:
            self._require_token(self.override_env, "override_env")
            if "=" in self.override_env:
                raise ValueError("`override_env` must be a valid environment variable name.")
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError("`timeout_seconds` must be a positive number of seconds.")
        if not self.posix_shells:
            raise ValueError("`posix_shells` must contain at least one shell path.")
        for shell in self.posix_shells:
            if not os.path.isabs(shell):
                raise ValueError(f"`posix_shells` entry `{shell}` must be an absolute path.")
        for extension in self.windows_extensions:
            if not extension.startswith(".") or len(extension) < 2:
                raise ValueError(
                    f"`windows_extensions` entry `{extension}` must look like `.exe`."
                )

    def resolved(self, sources: ConfigSources | None = None) -> LocatorConfig:
        """Return a validated copy with source overrides applied.

        Precedence for each key is `cli` > `env` > current field value.
        """

        resolved_sources = sources if sources is not None else ConfigSources()

        tool_name = self._lookup(resolved_sources, "tool_name")
        override_env = self._lookup(resolved_sources, "override_env")
        timeout_raw = self._lookup(resolved_sources, "timeout_seconds")
        shells_raw = self._lookup(resolved_sources, "posix_shells")
        extensions_raw = self._lookup(resolved_sources, "windows_extensions")
        work_dir = self._lookup(resolved_sources, "work_dir")

        config = replace(
            self,
            tool_name=tool_name if tool_name is not None else self.tool_name,
            override_env=override_env if override_env is not None else self.override_env,
            timeout_seconds=(
                parse_timeout_seconds(timeout_raw, "timeout_seconds")
                if timeout_raw is not None
                else self.timeout_seconds
            ),
            posix_shells=(
                parse_string_list(shells_raw, "posix_shells")
                if shells_raw is not None
                else self.posix_shells
            ),
            windows_extensions=(
                parse_string_list(extensions_raw, "windows_extensions")
                if extensions_raw is not None
                else self.windows_extensions
            ),
            work_dir=Path(work_dir) if work_dir is not None else self.work_dir,
        )
        config.validate()
        return config

    def to_request(self) -> ResolutionRequest:
        """Build a fresh resolution request from these settings."""

        return ResolutionRequest(
            work_dir=self.work_dir,
            tool_name=self.tool_name,
            override_env=self.override_env,
            timeout_seconds=self.timeout_seconds,
            posix_shells=self.posix_shells,
            windows_extensions=self.windows_extensions,
        )

    @staticmethod
    def _lookup(sources: ConfigSources, key: str) -> str | None:
        """Return the first non-blank value for a key from CLI, then env."""

        cli_value = normalize_optional_string(sources.cli.get(key))
        if cli_value is not None:
            return cli_value
        return normalize_optional_string(sources.env.get(ENV_KEYS[key]))

    @staticmethod
    def _require_token(value: str, field_name: str) -> None:
        """Validate that a string field is non-empty and contains no whitespace."""

        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"`{field_name}` must be a non-empty string.")
        if any(character.isspace() for character in value):
            raise ValueError(f"`{field_name}` must not contain whitespace.")


class ConfigLoader:
    """Factory methods for creating `LocatorConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(ENV_KEYS.keys())

    @staticmethod
    def from_yaml(path: Path) -> LocatorConfig:
        """Create a validated config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        payload = ConfigLoader._parse_yaml_payload(path_text, path)

        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> LocatorConfig:
        """Create a validated config from environment variables over built-in defaults."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        return LocatorConfig().resolved(ConfigSources(env=env_map))

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` could not be parsed: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _build_config_from_mapping(payload: Mapping[str, Any], source_label: str) -> LocatorConfig:
        """Build a validated config from a normalized mapping payload."""

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        tool_name = normalize_optional_string(payload.get("tool_name")) or DEFAULT_TOOL_NAME
        if "override_env" in payload:
            override_env = normalize_optional_string(payload["override_env"])
        else:
            override_env = DEFAULT_OVERRIDE_ENV
        work_dir_text = normalize_optional_string(payload.get("work_dir"))

        try:
            timeout_seconds = (
                parse_timeout_seconds(payload["timeout_seconds"], "timeout_seconds")
                if "timeout_seconds" in payload
                else DEFAULT_TIMEOUT_SECONDS
            )
            posix_shells = (
                parse_string_list(payload["posix_shells"], "posix_shells")
                if payload.get("posix_shells") is not None
                else DEFAULT_POSIX_SHELLS
            )
            windows_extensions = (
                parse_string_list(payload["windows_extensions"], "windows_extensions")
                if payload.get("windows_extensions") is not None
                else DEFAULT_WINDOWS_EXTENSIONS
            )
        except ValueError as exc:
            raise ValueError(f"{source_label}: {exc}") from exc

        config = LocatorConfig(
            tool_name=tool_name,
            override_env=override_env,
            timeout_seconds=timeout_seconds,
            posix_shells=posix_shells,
            windows_extensions=windows_extensions,
            work_dir=Path(work_dir_text) if work_dir_text is not None else None,
        )
        config.validate()
        return config
