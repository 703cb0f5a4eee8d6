# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Declarations loader: reads variants.yaml and produces a frozen BuildConfig.

The loading pipeline is linear:
  1. Locate the declarations file (a project directory means its variants.yaml)
  2. Parse it as YAML into a plain mapping
  3. Validate the mapping against BuildConfig
  4. Anchor the file paths it declares at the project root

Step 4 is what makes the config usable from any working directory. The
declarations spell `log_file` and `signing.credentials_file` relative to the
project, and everything after loading only ever sees absolute paths.

Any failure stops the build before resolution starts. There are no fallback
defaults for a broken file.
"""

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from buildvariant.config.defaults import DEFAULT_DECLARATIONS_FILE
from buildvariant.config.exceptions import ConfigLoadError, ConfigValidationError
from buildvariant.config.schema import BuildConfig
from buildvariant.utils.paths import resolve_project_path


def _declarations_path(config_path: Path) -> Path:
    if config_path.is_dir():
        return config_path / DEFAULT_DECLARATIONS_FILE
    return config_path


def _parse_declarations(config_path: Path) -> dict[str, Any]:
    """
    Read the declarations file and return its top-level mapping.

    An empty file parses to None in PyYAML; we report that as "not a mapping"
    alongside lists and scalars rather than letting pydantic complain about a
    missing config_version.

    Raises:
        ConfigLoadError: The file is missing, unreadable, not YAML or not a mapping.
    """
    if not config_path.is_file():
        raise ConfigLoadError(f"Declarations file not found: {config_path}")

    try:
        with config_path.open(encoding="utf-8") as stream:
            parsed = yaml.safe_load(stream)
    except (OSError, UnicodeDecodeError) as err:
        raise ConfigLoadError(f"Cannot read declarations file {config_path}: {err}") from err
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"{config_path} must contain a YAML mapping at the top level, "
            f"got {type(parsed).__name__}"
        )
    return parsed


def _anchor_paths(config: BuildConfig, project_root: Path) -> BuildConfig:
    """Return a copy of `config` whose declared file paths are absolute."""
    update: dict[str, Any] = {
        "signing": config.signing.model_copy(
            update={
                "credentials_file": str(
                    resolve_project_path(project_root, config.signing.credentials_file)
                )
            }
        )
    }
    if config.log_file is not None:
        update["log_file"] = str(resolve_project_path(project_root, config.log_file))
    return config.model_copy(update=update)


def load_config(config_path: Path, project_root: Optional[Path] = None) -> BuildConfig:
    """
    Load, validate, and freeze a declarations file into a BuildConfig.

    Args:
        config_path: The YAML declarations file, or a project directory
            holding variants.yaml.
        project_root: Directory relative paths in the file are anchored at.
            Defaults to the directory containing the declarations file.

    Returns:
        A fully validated, frozen BuildConfig with absolute `log_file` and
        `signing.credentials_file`.

    Raises:
        ConfigLoadError: File I/O or YAML parse failures.
        ConfigValidationError: Schema violations (missing fields, wrong types,
            unknown keys, unknown log level).
    """
    config_path = _declarations_path(config_path).absolute()
    raw_data = _parse_declarations(config_path)

    try:
        config = BuildConfig.model_validate(raw_data)
    except ValidationError as err:
        raise ConfigValidationError(
            f"Declarations validation failed for {config_path}:\n{err}"
        ) from err

    if project_root is None:
        project_root = config_path.parent
    return _anchor_paths(config, project_root.absolute())
