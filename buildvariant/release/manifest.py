# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Variant manifest generation.

The manifest is the hand-off from this resolver to downstream packaging: it
lists the filters, policies and split dimensions of one resolved variant as
JSON. Credentials are described (alias, keystore location) but passwords are
always written masked. The signing stage gets the real values from the
in-memory BuildVariantSpec, never from disk.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from buildvariant import __version__
from buildvariant.config.defaults import POLICY_VERSION
from buildvariant.config.schema import BuildVariantSpec
from buildvariant.utils.filesystem import atomic_write_json

_logger = logging.getLogger(__name__)

_REQUIRED_MANIFEST_FIELDS: frozenset[str] = frozenset(
    {
        "variant",
        "policy_version",
        "buildvariant_version",
        "timestamp",
    }
)


# Set-valued fields come out of json mode as lists in arbitrary order.
_SET_FIELDS: tuple[str, ...] = ("architecture_filter", "locale_filter", "split_dimensions")


def build_manifest(spec: BuildVariantSpec) -> dict[str, Any]:
    """
    Describe a resolved variant as a JSON-ready dict with secrets masked.

    pydantic's json mode renders SecretStr as '**********', enums as their
    values and paths as strings.
    """
    variant = spec.model_dump(mode="json")
    for name in _SET_FIELDS:
        variant[name] = sorted(variant[name])
    return {
        "variant": variant,
        "policy_version": POLICY_VERSION,
        "buildvariant_version": __version__,
        "timestamp": datetime.now(tz=timezone.utc).isoformat(),
    }


def write_variant_manifest(spec: BuildVariantSpec, path: Path) -> dict[str, Any]:
    """
    Write the manifest for `spec` to `path` atomically and return it.

    Args:
        spec: The resolved variant.
        path: Target file, usually inside the build output directory.
    """
    manifest = build_manifest(spec)
    atomic_write_json(path, manifest)

    _logger.info(
        "Variant manifest written",
        extra={"path": str(path), "build_type": spec.build_type.value},
    )
    return manifest


def load_variant_manifest(path: Path) -> dict[str, Any]:
    """
    Read a manifest back, checking that the top-level fields are present.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If required fields are missing.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Manifest file not found: {path}")

    data = json.loads(path.read_text(encoding="utf-8"))
    missing = _REQUIRED_MANIFEST_FIELDS - set(data)
    if missing:
        raise ValueError(f"Manifest is missing required fields: {', '.join(sorted(missing))}")
    return data
