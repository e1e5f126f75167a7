"""Configuration loading and management for gokode.

Configuration sources are merged in priority order:
    1. Defaults (defined in GokodeConfig)
    2. Global config (~/.gokode.toml)
    3. Project config (./gokode.toml)
    4. Explicit config file
    5. Environment variables (GOKODE_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(workers=8)
    >>> config.workers
    8
    >>> config.effective_queue_size
    16
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "GOKODE_"
GLOBAL_CONFIG_NAME = ".gokode.toml"
PROJECT_CONFIG_NAME = "gokode.toml"


@dataclass(frozen=True)
class GokodeConfig:
    """Configuration for a gokode run.

    All fields have defaults. Users typically override only a few fields via
    CLI flags or a config file.

    Attributes:
        Metrics pipeline:
            workers: Number of metric worker threads
            queue_size: Work queue bound (None = 2 * workers)
            metrics: Names of the per-file metrics to compute

        File filtering:
            extensions: Source file extensions to analyze
            exclude_dirs: Directory names pruned from the walk (e.g. "vendor")
            exclude_patterns: Glob patterns (relative POSIX paths) to skip
            allow_hidden_files: Include dot files and dot directories
            follow_symlinks: Descend into symlinked directories
            max_file_size_mb: Files above this size are skipped

        Output:
            metrics_dir_name: Directory (under the target path) for artifacts
            report_name: File name of the per-file metrics report
            verbosity: Logging level for the CLI (quiet, normal or verbose)

        External tools:
            timeout_seconds: Timeout for each external tool invocation
            golangci_lint_version: Version installed by ``gokode tools``
            gocyclo_version: Version installed by ``gokode tools``
    """

    # Metrics pipeline
    workers: int = 5
    queue_size: Optional[int] = None
    metrics: list[str] = field(default_factory=lambda: ["number_of_rows"])

    # File filtering
    extensions: list[str] = field(default_factory=lambda: [".go"])
    exclude_dirs: list[str] = field(default_factory=list)
    exclude_patterns: list[str] = field(default_factory=list)
    allow_hidden_files: bool = True
    follow_symlinks: bool = False
    max_file_size_mb: float = 10.0

    # Output
    metrics_dir_name: str = "metrics"
    report_name: str = "report.json"
    verbosity: Verbosity = "normal"

    # External tools
    timeout_seconds: int = 300
    golangci_lint_version: str = "v1.60.3"
    gocyclo_version: str = "v0.6.0"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.queue_size is not None and self.queue_size < 1:
            raise InvalidConfigError("queue_size", self.queue_size, "must be at least 1")
        if not self.metrics:
            raise InvalidConfigError("metrics", self.metrics, "at least one metric is required")

        if not self.extensions:
            raise InvalidConfigError("extensions", self.extensions, "must not be empty")
        for ext in self.extensions:
            if not ext.startswith("."):
                raise InvalidConfigError("extensions", ext, "extensions must start with '.'")
        if self.max_file_size_mb <= 0:
            raise InvalidConfigError("max_file_size_mb", self.max_file_size_mb, "must be positive")

        if not self.metrics_dir_name or os.sep in self.metrics_dir_name:
            raise InvalidConfigError(
                "metrics_dir_name", self.metrics_dir_name, "must be a plain directory name"
            )
        if not self.report_name.endswith(".json"):
            raise InvalidConfigError("report_name", self.report_name, "must be a .json file")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet/normal/verbose")

        if self.timeout_seconds < 1:
            raise InvalidConfigError("timeout_seconds", self.timeout_seconds, "must be at least 1")

    @property
    def effective_queue_size(self) -> int:
        """Queue bound used by the pipeline."""
        if self.queue_size is not None:
            return self.queue_size
        return 2 * self.workers

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)

    def metrics_dir(self, root: Path) -> Path:
        """Artifact directory for a target project."""
        return root / self.metrics_dir_name


def load_config(config_file: Optional[Path] = None, **overrides) -> GokodeConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep lower-priority values.

    Returns:
        Validated GokodeConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / GLOBAL_CONFIG_NAME
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    # Convert verbosity boolean flags to string
    if "verbose" in overrides:
        if overrides.pop("verbose"):
            overrides["verbosity"] = "verbose"
    if "quiet" in overrides:
        if overrides.pop("quiet"):
            overrides["verbosity"] = "quiet"

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return GokodeConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from GOKODE_* environment variables.

    Scalar fields map directly (``GOKODE_WORKERS=8``). List fields take a
    comma-separated value (``GOKODE_EXTENSIONS=.go,.mod``).

    Returns:
        Dict of field_name -> parsed_value for any GOKODE_* vars found.
    """
    type_hints = get_type_hints(GokodeConfig)

    result: dict[str, Any] = {}

    for field_name in GokodeConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is list:
        return [item.strip() for item in value.split(",") if item.strip()]

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return the ``[gokode]`` table, or the whole document.

    Raises:
        ConfigurationError: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")

    section = data.get("gokode")
    if isinstance(section, dict):
        return section
    return data
