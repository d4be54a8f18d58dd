"""Configuration management for rosterpipe.

Configuration Discovery Precedence (Highest to Lowest Priority):
===============================================================

1. **ROSTERPIPE_CONFIG_DIR Environment Variable** (Highest Priority)
   - Looks for: `${ROSTERPIPE_CONFIG_DIR}/rosterpipe.yaml`
   - Use case: Development, testing, custom setups

2. **~/.rosterpipe Directory** (Fallback)
   - Looks for: `~/.rosterpipe/rosterpipe.yaml`
   - Use case: Default user installations

If no `rosterpipe.yaml` is found, default configuration (no pipelines) is applied.

Example rosterpipe.yaml:
-----------------------
rosterpipe:
  debug: false
  pipelines:
    - name: draft_emails
      selector: selective_service
      transform: email
      sink: print_value
    - name: twenties
      selector: rosterpipe.criteria.within_age_range
      params: {low: 20, high: 29}
      sink: print_person
"""

import importlib
import logging
import os
import threading
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from rosterpipe.pipeline.registry import PipelineSpec, Role, create_pipeline_spec, get_registry

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "rosterpipe.yaml"


class PipelineConfig(BaseModel):
    """Configuration for a single named pipeline.

    Capability entries are either names registered with the ``@selector``,
    ``@transform`` and ``@sink`` decorators, or dotted import paths.
    """

    name: str
    """Unique pipeline name"""

    selector: str
    """Selector name or import path"""

    transform: str | None = None
    """Transform name or import path (identity when omitted)"""

    sink: str | None = None
    """Sink name or import path (discard when omitted)"""

    description: str = ""
    """Human-readable summary"""

    params: dict[str, Any] = Field(default_factory=dict)
    """Keyword arguments for a selector factory"""


def import_object(path: str) -> Any:
    """Import an object from a dotted path like ``package.module.name``.

    Raises:
        ImportError: If the module cannot be imported
        AttributeError: If the module has no such attribute
    """
    module_path, attr_name = path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, attr_name)


def resolve_entry(role: Role, entry: str, params: dict[str, Any] | None = None) -> Any:
    """Resolve a configured capability entry.

    Dotted paths are imported; bare names are looked up in the registry.
    When params are given the resolved object is treated as a factory and
    called with them.
    """
    if "." in entry:
        obj = import_object(entry)
    else:
        obj = get_registry().get(role, entry)
    if params:
        obj = obj(**params)
    return obj


class RosterPipeConfig(BaseSettings):
    """Main configuration for rosterpipe that reads from rosterpipe.yaml."""

    model_config = SettingsConfigDict(
        env_prefix="ROSTERPIPE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Core settings
    debug: bool = False

    # Named pipeline definitions
    pipelines: list[PipelineConfig] = Field(default_factory=list)

    # Path to rosterpipe config
    config_path: Path = Field(default_factory=lambda: Path("./rosterpipe.yaml"))

    def load_pipelines(self) -> list[PipelineSpec]:
        """Build pipeline specs from their configured entries.

        Entries that fail to resolve are logged and skipped.

        Returns:
            List of PipelineSpec instances in configured order
        """
        from rosterpipe.criteria import register_builtins

        register_builtins()

        specs: list[PipelineSpec] = []
        for entry in self.pipelines:
            try:
                spec = create_pipeline_spec(
                    entry.name,
                    selector=resolve_entry("selector", entry.selector, entry.params),
                    transform=resolve_entry("transform", entry.transform) if entry.transform else None,
                    sink=resolve_entry("sink", entry.sink) if entry.sink else None,
                    description=entry.description,
                )
            except (ImportError, AttributeError, KeyError, TypeError, ValueError) as e:
                logger.error(f"Failed to load pipeline {entry.name}: {e}")
                continue
            specs.append(spec)
            logger.debug(f"Loaded pipeline: {entry.name}")
        return specs

    @classmethod
    def from_yaml(cls, yaml_path: Path, **kwargs: Any) -> "RosterPipeConfig":
        """Load configuration from rosterpipe.yaml file.

        Args:
            yaml_path: Path to the rosterpipe.yaml file
            **kwargs: Additional keyword arguments

        Returns:
            RosterPipeConfig instance
        """
        instance = cls(config_path=yaml_path, **kwargs)

        if yaml_path.exists():
            try:
                with yaml_path.open() as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                logger.error(f"Failed to parse {yaml_path}, using default config: {e}")
                return instance

            section = (data.get("rosterpipe") or {}) if isinstance(data, dict) else None
            if not isinstance(section, dict):
                logger.error(f"Invalid {CONFIG_FILENAME} format in {yaml_path}, using default config")
                return instance

            if "debug" in section:
                instance.debug = bool(section["debug"])

            entries = section.get("pipelines") or []
            if not isinstance(entries, list):
                logger.error(f"Invalid pipelines format in {yaml_path}: expected a list, got {type(entries)}")
                entries = []

            instance.pipelines = []
            for pipeline_data in entries:
                if not isinstance(pipeline_data, dict):
                    logger.error(f"Invalid pipeline entry type: {type(pipeline_data)}")
                    continue
                if not pipeline_data.get("name") or not pipeline_data.get("selector"):
                    logger.error(f"Pipeline entry missing 'name' or 'selector': {pipeline_data}")
                    continue
                try:
                    instance.pipelines.append(PipelineConfig(**pipeline_data))
                except ValidationError as e:
                    logger.error(f"Invalid pipeline entry {pipeline_data.get('name')}: {e}")

        return instance


# Global configuration instance
_config_instance: RosterPipeConfig | None = None
_config_lock = threading.Lock()


def discover_config_dir() -> Path:
    """Return the configuration directory following the discovery precedence."""
    env_config_dir = os.environ.get("ROSTERPIPE_CONFIG_DIR")
    if env_config_dir:
        logger.info(f"Using config directory from environment: {env_config_dir}")
        return Path(env_config_dir)
    return Path.home() / ".rosterpipe"


def get_config(config_dir: Path | None = None) -> RosterPipeConfig:
    """Get the configuration instance."""
    global _config_instance

    if _config_instance is None:
        with _config_lock:
            # Double-check locking pattern
            if _config_instance is None:
                directory = config_dir or discover_config_dir()
                yaml_path = directory / CONFIG_FILENAME
                if yaml_path.exists():
                    logger.info(f"Loading rosterpipe config from: {yaml_path}")
                    _config_instance = RosterPipeConfig.from_yaml(yaml_path)
                else:
                    logger.info(f"{CONFIG_FILENAME} not found at {yaml_path}, using default config")
                    _config_instance = RosterPipeConfig(config_path=yaml_path)

    return _config_instance


def set_config_instance(config: RosterPipeConfig) -> None:
    """Set the global configuration instance (for testing)."""
    global _config_instance
    _config_instance = config


def clear_config_instance() -> None:
    """Clear the global configuration instance (for testing)."""
    global _config_instance
    _config_instance = None
