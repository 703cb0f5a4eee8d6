# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Build-type policy tables.

All debug/release branching lives here as data, one table per dimension.
The resolver only looks values up; it never compares build types itself.
Adding a build type means adding a row to every table, and the completeness
check at the bottom fails at import time if a row is forgotten.
"""

from types import MappingProxyType
from typing import Mapping

from buildvariant.config.defaults import RELEASE_PROGUARD_FILES
from buildvariant.config.schema import BuildType, DebugSymbolLevel, ShrinkPolicy, SplitDimension

SIGNING_REQUIRED: Mapping[BuildType, bool] = MappingProxyType(
    {
        # Debug builds use the toolchain's implicit debug key.
        BuildType.DEBUG: False,
        BuildType.RELEASE: True,
    }
)

SHRINK_POLICIES: Mapping[BuildType, ShrinkPolicy] = MappingProxyType(
    {
        BuildType.DEBUG: ShrinkPolicy(
            minify_enabled=False,
            shrink_resources=False,
        ),
        BuildType.RELEASE: ShrinkPolicy(
            minify_enabled=True,
            shrink_resources=True,
            proguard_files=RELEASE_PROGUARD_FILES,
            debug_symbol_level=DebugSymbolLevel.SYMBOL_TABLE,
        ),
    }
)

SPLIT_POLICIES: Mapping[BuildType, frozenset[SplitDimension]] = MappingProxyType(
    {
        BuildType.DEBUG: frozenset(),
        BuildType.RELEASE: frozenset(SplitDimension),
    }
)


def _check_complete(name: str, table: Mapping[BuildType, object]) -> None:
    missing = set(BuildType) - set(table)
    if missing:
        raise RuntimeError(
            f"Policy table {name} has no entry for: "
            f"{', '.join(sorted(member.value for member in missing))}"
        )


for _name, _table in (
    ("SIGNING_REQUIRED", SIGNING_REQUIRED),
    ("SHRINK_POLICIES", SHRINK_POLICIES),
    ("SPLIT_POLICIES", SPLIT_POLICIES),
):
    _check_complete(_name, _table)
