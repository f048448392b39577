"""Configuration loading utilities for the in-memory filesystem."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List

import yaml # type: ignore


logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""


class SeedKind(str, Enum):
    """Kinds of entries a seed item may create."""

    DIRECTORY = "directory"
    FILE = "file"


@dataclass
class FilesystemConfig:
    """Options describing how the provider should behave."""

    scheme: str = "memfs"
    readonly: bool = False
    debounce_ms: float = 5.0

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0


@dataclass
class SeedEntry:
    """An entry written into the tree at startup."""

    kind: SeedKind
    path: str
    content: bytes = b""


@dataclass
class ListenerConfig:
    """Change listener definition loaded from the configuration file."""

    name: str
    module: str
    function: str
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AppConfig:
    """Top-level configuration structure."""

    filesystem: FilesystemConfig = field(default_factory=FilesystemConfig)
    sample_data: bool = False
    seed: List[SeedEntry] = field(default_factory=list)
    listeners: List[ListenerConfig] = field(default_factory=list)


def load_config(path: Path) -> AppConfig:
    """Load and validate the YAML configuration file."""

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:  # pragma: no cover - logging helper
        raise ConfigError(f"Failed to parse YAML configuration: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    return parse_config(data)


def parse_config(data: Dict[str, Any]) -> AppConfig:
    """Validate an already-decoded configuration mapping."""

    filesystem_cfg = _parse_filesystem_config(data.get("filesystem"))

    sample_data = data.get("sample_data", False)
    if not isinstance(sample_data, bool):
        raise ConfigError("sample_data must be a boolean")

    seed_cfg = _parse_seed_config(data.get("seed", []))
    listeners_cfg = _parse_listeners_config(data.get("listeners", []))

    return AppConfig(
        filesystem=filesystem_cfg,
        sample_data=sample_data,
        seed=seed_cfg,
        listeners=listeners_cfg,
    )


def _parse_filesystem_config(raw: Any) -> FilesystemConfig:
    if raw is None:
        return FilesystemConfig()
    if not isinstance(raw, dict):
        raise ConfigError("'filesystem' section must be a mapping")

    scheme = raw.get("scheme", "memfs")
    if not isinstance(scheme, str) or not scheme or ":" in scheme or "/" in scheme:
        raise ConfigError("filesystem.scheme must be a non-empty string without ':' or '/'")

    readonly = raw.get("readonly", False)
    if not isinstance(readonly, bool):
        raise ConfigError("filesystem.readonly must be a boolean")

    debounce = raw.get("debounce_ms", 5.0)
    if isinstance(debounce, bool):
        raise ConfigError("filesystem.debounce_ms must be numeric")
    try:
        debounce_val = float(debounce)
    except (TypeError, ValueError) as exc:
        raise ConfigError("filesystem.debounce_ms must be numeric") from exc
    if debounce_val <= 0:
        raise ConfigError("filesystem.debounce_ms must be positive")

    return FilesystemConfig(scheme=scheme, readonly=readonly, debounce_ms=debounce_val)


def _parse_seed_config(raw: Any) -> List[SeedEntry]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigError("'seed' section must be a list")

    entries: List[SeedEntry] = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ConfigError(f"seed[{index}] must be a mapping")

        directory = item.get("directory")
        file_path = item.get("file")
        if (directory is None) == (file_path is None):
            raise ConfigError(f"seed[{index}] must define exactly one of 'directory' or 'file'")

        if directory is not None:
            if not isinstance(directory, str):
                raise ConfigError(f"seed[{index}].directory must be a string")
            if "content" in item:
                raise ConfigError(f"seed[{index}].content is only valid for files")
            entries.append(SeedEntry(kind=SeedKind.DIRECTORY, path=directory))
            continue

        if not isinstance(file_path, str):
            raise ConfigError(f"seed[{index}].file must be a string")
        content = _parse_content(item.get("content", ""), field_name=f"seed[{index}].content")
        entries.append(SeedEntry(kind=SeedKind.FILE, path=file_path, content=content))

    return entries


def _parse_listeners_config(raw: Any) -> List[ListenerConfig]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigError("'listeners' section must be a list")

    listeners: List[ListenerConfig] = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ConfigError(f"listeners[{index}] must be a mapping")

        name = item.get("name") or f"listener_{index}"
        module = item.get("module")
        function = item.get("function")
        options = item.get("options", {})

        if not isinstance(module, str) or not isinstance(function, str):
            raise ConfigError(f"listeners[{index}] must include 'module' and 'function' strings")
        if options is None:
            options = {}
        if not isinstance(options, dict):
            raise ConfigError(f"listeners[{index}].options must be a mapping if provided")

        listener_cfg = ListenerConfig(
            name=str(name),
            module=module,
            function=function,
            options=options,
        )
        logger.info(
            "Loaded listener '%s' (%s.%s)",
            listener_cfg.name,
            listener_cfg.module,
            listener_cfg.function,
        )
        listeners.append(listener_cfg)

    return listeners


def _parse_content(value: Any, *, field_name: str) -> bytes:
    # YAML !!binary values decode to bytes already.
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode("utf-8")
    if value is None:
        return b""
    raise ConfigError(f"{field_name} must be a string or !!binary value")
