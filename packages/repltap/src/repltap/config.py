"""Configuration management for repltap.

Handles interpreter settings, editing contexts and key overrides from
repltap.toml.
"""

import codecs
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any
import tomllib

from .exceptions import ConfigError
from .text import DEFAULT_CHUNK_SIZE, DEFAULT_LITERATE_PREFIX, DEFAULT_BLOCK_BEGIN, DEFAULT_BLOCK_END

CONFIG_FILENAME = "repltap.toml"


def _require_bool(name: str, value: Any) -> bool:
    """Reject strings like "false" that would read as True."""
    if not isinstance(value, bool):
        raise ConfigError(f"{name} must be true or false, got {value!r}")
    return value


@dataclass
class ContextConfig:
    """Per editing context source settings."""

    name: str
    literate: bool = False
    literate_prefix: str = DEFAULT_LITERATE_PREFIX


@dataclass
class ReplConfig:
    """Validated interpreter session settings."""

    interpreter: str = "ghci"
    arguments: list[str] = field(default_factory=list)
    boot_script: Optional[Path] = None
    boot_template: str = ":script {path}"
    chunk_size: int = DEFAULT_CHUNK_SIZE
    block_begin: str = DEFAULT_BLOCK_BEGIN
    block_end: str = DEFAULT_BLOCK_END
    literate: bool = False
    literate_prefix: str = DEFAULT_LITERATE_PREFIX
    literate_suffixes: list[str] = field(default_factory=lambda: [".lhs"])
    silence_template: str = "{slot} $ silence"
    stop_all_command: str = "hush"
    load_template: str = ':load "{path}"'
    main_command: str = "main"
    write_timeout: float = 5.0
    stop_timeout: float = 2.0
    encoding: str = "utf-8"
    max_output_lines: int = 5000
    echo_output: bool = False
    cwd: Optional[Path] = None
    env: Dict[str, str] = field(default_factory=dict)
    contexts: Dict[str, ContextConfig] = field(default_factory=dict)
    keys: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        self.validate()

    @property
    def command(self) -> list[str]:
        """Full argv used to spawn the interpreter."""
        return [self.interpreter, *self.arguments]

    def validate(self) -> None:
        """Check value ranges and marker shapes.

        Raises:
            ConfigError: On the first invalid value.
        """
        if not self.interpreter:
            raise ConfigError("interpreter must not be empty")
        for name in ("literate", "echo_output"):
            _require_bool(name, getattr(self, name))
        if isinstance(self.chunk_size, bool) or not isinstance(self.chunk_size, int) or self.chunk_size < 1:
            raise ConfigError(f"chunk_size must be a positive integer, got {self.chunk_size!r}")
        for name in ("block_begin", "block_end"):
            marker = getattr(self, name)
            if not marker or "\n" in marker or "\r" in marker:
                raise ConfigError(f"{name} must be a non-empty single line, got {marker!r}")
        if "{slot}" not in self.silence_template:
            raise ConfigError("silence_template must contain {slot}")
        if "{path}" not in self.load_template:
            raise ConfigError("load_template must contain {path}")
        if "{path}" not in self.boot_template:
            raise ConfigError("boot_template must contain {path}")
        for name in ("write_timeout", "stop_timeout"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive")
        if self.max_output_lines < 1:
            raise ConfigError("max_output_lines must be positive")
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ConfigError(f"unknown encoding {self.encoding!r}") from e

    def get_context(self, name: Optional[str]) -> Optional[ContextConfig]:
        """Get context configuration by name."""
        if name is None:
            return None
        return self.contexts.get(name)

    def is_literate(self, context: Optional[str] = None, path: Optional[Path] = None) -> bool:
        """Resolve literate mode for an editing context.

        Named context first, then document suffix, then the global default.
        """
        ctx = self.get_context(context)
        if ctx is not None:
            return ctx.literate
        if path is not None and Path(path).suffix in self.literate_suffixes:
            return True
        return self.literate

    def literate_prefix_for(self, context: Optional[str] = None) -> str:
        """Get the literate marker for a context."""
        ctx = self.get_context(context)
        if ctx is not None:
            return ctx.literate_prefix
        return self.literate_prefix


def _find_config_file() -> Optional[Path]:
    """Find repltap.toml in current or parent directories."""
    current = Path.cwd()

    for parent in [current] + list(current.parents):
        config_file = parent / CONFIG_FILENAME
        if config_file.exists():
            return config_file

    return None


def _load_config(path: Optional[Path] = None) -> dict:
    """Load raw configuration from file."""
    if path is None:
        path = _find_config_file()

    if path is None or not path.exists():
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid {path}: {e}") from e


def _resolve_path(value: Optional[str], base: Path) -> Optional[Path]:
    if not value:
        return None
    path = Path(value).expanduser()
    return path if path.is_absolute() else base / path


def parse_config(data: dict[str, Any], base_dir: Optional[Path] = None) -> ReplConfig:
    """Build a ReplConfig from raw TOML data.

    Args:
        data: Parsed TOML document.
        base_dir: Directory relative paths are resolved against.

    Raises:
        ConfigError: On unknown keys or invalid values.
    """
    base_dir = base_dir or Path.cwd()
    default = dict(data.get("default", {}))

    known = set(ReplConfig.__dataclass_fields__) - {"contexts", "keys"}
    unknown = set(default) - known
    if unknown:
        raise ConfigError(f"Unknown [default] keys: {', '.join(sorted(unknown))}")

    if "boot_script" in default:
        default["boot_script"] = _resolve_path(default["boot_script"], base_dir)
    if "cwd" in default:
        default["cwd"] = _resolve_path(default["cwd"], base_dir)
    if "arguments" in default and not isinstance(default["arguments"], list):
        raise ConfigError("arguments must be a list of strings")

    contexts = {}
    for name, value in data.get("context", {}).items():
        if not isinstance(value, dict):
            raise ConfigError(f"[context.{name}] must be a table")
        contexts[name] = ContextConfig(
            name=name,
            literate=_require_bool(f"context.{name}.literate", value.get("literate", False)),
            literate_prefix=value.get("literate_prefix", default.get("literate_prefix", DEFAULT_LITERATE_PREFIX)),
        )

    keys = {str(name): str(key) for name, key in data.get("keys", {}).items()}

    try:
        return ReplConfig(**default, contexts=contexts, keys=keys)
    except TypeError as e:
        raise ConfigError(str(e)) from e


class ConfigManager:
    """Manages configuration for repltap."""

    def __init__(self, path: Optional[Path] = None):
        self._config_file = path or _find_config_file()
        self.data = _load_config(self._config_file)
        base_dir = self._config_file.parent if self._config_file else Path.cwd()
        self.config = parse_config(self.data, base_dir)

    @property
    def config_file(self) -> Optional[Path]:
        """Path of the loaded config file, if any."""
        return self._config_file

    def list_contexts(self) -> list[str]:
        """List configured editing contexts."""
        return list(self.config.contexts.keys())


# Global instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get or create the global config manager."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_config() -> ReplConfig:
    """Get the active session configuration."""
    return get_config_manager().config
