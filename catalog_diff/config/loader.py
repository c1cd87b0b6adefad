"""YAML config loading with env var expansion."""

import logging
import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import CatalogDiffConfig

logger = logging.getLogger(__name__)

_ENV_REF = re.compile(r"\$\{(\w+)\}")


def load_config(cli_path: str | None = None) -> CatalogDiffConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults.

    The first existing, non-empty file wins; files are never merged.

    Raises:
        ValueError: the file is not valid YAML, is not a mapping, or holds an
            unknown section, unknown key or invalid value. The message names
            the file and every offending ``section.key``.
    """
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./catalog-diff.yaml"),
        Path.home() / ".catalog-diff" / "config.yaml",
    ]

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    raw = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
            if raw is None:
                continue
            if not isinstance(raw, dict):
                raise ValueError(
                    f"Invalid config in {path}: expected a mapping of sections, "
                    f"got {type(raw).__name__}"
                )
            try:
                config = CatalogDiffConfig(**_expand_env_vars(raw))
            except ValidationError as e:
                raise ValueError(f"Invalid config in {path}: {_describe_errors(e)}") from e
            logger.debug("loaded config from %s", path)
            return config

    return CatalogDiffConfig()


def _describe_errors(error: ValidationError) -> str:
    """One ``section.key: message`` entry per validation error."""
    parts = []
    for err in error.errors():
        where = ".".join(str(p) for p in err["loc"]) or "<top level>"
        parts.append(f"{where}: {err['msg']}")
    return "; ".join(parts)


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings. Unset variables expand to ""."""
    if isinstance(obj, str):
        return _ENV_REF.sub(_env_value, obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


def _env_value(match: re.Match) -> str:
    name = match.group(1)
    if name not in os.environ:
        logger.warning("config references unset environment variable %s", name)
    return os.environ.get(name, "")


# Default YAML template for `catalog-diff config init`
DEFAULT_CONFIG_TEMPLATE = """\
# catalog-diff.yaml

# Stable identifiers used for rename detection
identity:
  identifier_fields: ["uuid", "id"]  # first field present on an entity wins
  set_field: "sets"            # per-theme children of set tokens

# Deprecation markers
lifecycle:
  deprecated_field: "deprecated"
  comment_field: "deprecated_comment"

# Breaking-change rules for component schemas
compatibility:
  properties_field: "properties"
  required_field: "required"
  title_field: "title"
  schema_ref_field: "$schema"
  default_field: "default"
  enum_field: "enum"
  type_field: "type"
  enum_removal_breaking: true  # removing an enum member is a breaking change

# Resource limits
limits:
  max_nodes: 1000000           # fail fast above this many nodes per snapshot
  max_workers: 4               # thread pool size for batch diffs

# Semver recommendations (`catalog-diff bump`)
release:
  strict_bumps: false          # also bump for breaking body changes, renames and deprecations

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
