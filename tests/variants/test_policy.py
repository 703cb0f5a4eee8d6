# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The policy tables are data; these tests pin the data down and make sure every
build type has a row in every table.
"""

import pytest

from buildvariant.config.schema import BuildType, SplitDimension
from buildvariant.variants.policy import SHRINK_POLICIES, SIGNING_REQUIRED, SPLIT_POLICIES


@pytest.mark.parametrize("table", [SIGNING_REQUIRED, SHRINK_POLICIES, SPLIT_POLICIES])
def test_every_build_type_has_a_row(table) -> None:
    assert set(table) == set(BuildType)


def test_only_release_requires_signing() -> None:
    assert SIGNING_REQUIRED[BuildType.RELEASE] is True
    assert SIGNING_REQUIRED[BuildType.DEBUG] is False


def test_release_splits_all_dimensions() -> None:
    assert SPLIT_POLICIES[BuildType.RELEASE] == frozenset(SplitDimension)


def test_tables_are_read_only() -> None:
    with pytest.raises(TypeError):
        SIGNING_REQUIRED[BuildType.DEBUG] = True  # type: ignore[index]
