# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Entry point for build orchestrators.

resolve_build() is the one call a build step makes. The sequence is:
  1. Find the project root (walk up from the working directory if not given)
  2. Load and validate the declarations file
  3. Configure logging from it
  4. Consult the CredentialStore (independent of build type)
  5. Run the VariantResolver for the requested build type
  6. Optionally write the variant manifest

Every failure is logged once here, with its error class, and then re-raised
so the orchestrator aborts the build before any compilation starts.
"""

import logging
from pathlib import Path
from typing import Optional

from buildvariant.config.exceptions import ConfigError, ConfigLoadError, ResolutionError
from buildvariant.config.loader import load_config
from buildvariant.config.schema import BuildConfig, BuildType, BuildVariantSpec
from buildvariant.credentials.store import CredentialStore
from buildvariant.logging.logger import configure_package_logging
from buildvariant.release.manifest import write_variant_manifest
from buildvariant.utils.paths import find_project_root
from buildvariant.variants.resolver import VariantResolver

_logger = logging.getLogger(__name__)


def bootstrap(config: BuildConfig) -> logging.Logger:
    """
    Configure package logging from the declarations and return the pipeline logger.

    Raises:
        ConfigLoadError: The declared log file cannot be opened.
    """
    log_file = Path(config.log_file) if config.log_file is not None else None
    try:
        configure_package_logging(config.log_level, log_file=log_file)
    except OSError as err:
        raise ConfigLoadError(f"Cannot open log file {log_file}: {err}") from err
    return _logger


def _locate_project_root(config_path: Optional[Path]) -> Path:
    if config_path is not None:
        return config_path.absolute().parent
    try:
        return find_project_root(Path.cwd())
    except FileNotFoundError as err:
        raise ConfigLoadError(str(err)) from err


def resolve_build(
    project_root: Optional[Path],
    build_type: BuildType | str,
    config_path: Optional[Path] = None,
    manifest_path: Optional[Path] = None,
) -> BuildVariantSpec:
    """
    Resolve the variant for one build invocation.

    Args:
        project_root: Directory the declarations and credential paths are
            relative to. None means the nearest ancestor of the working
            directory holding variants.yaml, or the directory of
            `config_path` when that is given.
        build_type: "debug" or "release" (case-insensitive) or a BuildType.
        config_path: Declarations file; defaults to <project_root>/variants.yaml.
        manifest_path: If given, the redacted variant manifest is written there.

    Returns:
        The frozen BuildVariantSpec.

    Raises:
        ConfigError: No project root was found, or the declarations file is
            missing, unreadable or invalid.
        ResolutionError: Credentials or declarations cannot produce a valid variant.
    """
    try:
        if project_root is None:
            project_root = _locate_project_root(config_path)
        project_root = project_root.absolute()
        config = load_config(
            config_path if config_path is not None else project_root,
            project_root=project_root,
        )
        logger = bootstrap(config)
    except ConfigError as err:
        _logger.error(
            "Declarations error",
            extra={"error_type": type(err).__name__, "error": str(err)},
        )
        raise

    try:
        build_type = BuildType.parse(build_type)
        logger.info(
            "Resolving variant",
            extra={"build_type": build_type.value, "project_root": str(project_root)},
        )

        store = CredentialStore(project_root, config.signing.credentials_file)
        credentials = store.read()
        logger.debug(
            "Credentials consulted",
            extra={"path": str(store.path), "present": credentials is not None},
        )

        resolver = VariantResolver(config.project, config.packaging)
        spec = resolver.resolve(build_type, credentials)
    except ResolutionError as err:
        logger.error(
            "Variant resolution failed",
            extra={"error_type": type(err).__name__, "error": str(err)},
        )
        raise

    if manifest_path is not None:
        write_variant_manifest(spec, manifest_path)

    return spec
