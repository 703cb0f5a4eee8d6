# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for VariantResolver: each resolution step on its own, then the full
resolve() orchestration.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from buildvariant.config.defaults import DEFAULT_EXCLUSION_PATTERNS, RELEASE_PROGUARD_FILES
from buildvariant.config.exceptions import (
    EmptyArchitectureFilter,
    InvalidPlatformRange,
    MissingReleaseCredentials,
    UnknownBuildType,
)
from buildvariant.config.schema import (
    BuildType,
    CredentialSet,
    DebugSymbolLevel,
    PackagingConfig,
    ProjectIdentity,
    SplitDimension,
)
from buildvariant.variants.resolver import VariantResolver


def _identity(min_v: int, target_v: int, compile_v: int) -> ProjectIdentity:
    return ProjectIdentity(
        application_id="com.example.app",
        version_code=17,
        version_name="1.4.2",
        min_platform_version=min_v,
        target_platform_version=target_v,
        compile_platform_version=compile_v,
    )


@pytest.fixture()
def credentials() -> CredentialSet:
    return CredentialSet(
        alias="a",
        password="p1",
        store_file=Path("/project/s.jks"),
        store_password="p2",
    )


class TestResolveIdentity:
    def test_returns_identity_verbatim(self, identity: ProjectIdentity) -> None:
        assert VariantResolver(identity).resolve_identity() is identity

    def test_equal_versions_are_valid(self) -> None:
        resolver = VariantResolver(_identity(34, 34, 34))
        assert resolver.resolve_identity().target_platform_version == 34

    def test_compile_below_target(self) -> None:
        with pytest.raises(InvalidPlatformRange, match="compile_platform_version"):
            VariantResolver(_identity(24, 34, 20)).resolve_identity()

    def test_min_above_target(self) -> None:
        with pytest.raises(InvalidPlatformRange, match="min_platform_version"):
            VariantResolver(_identity(30, 28, 34)).resolve_identity()


class TestFilters:
    def test_default_architectures(self, identity: ProjectIdentity) -> None:
        resolver = VariantResolver(identity)
        assert resolver.resolve_architecture_filter("release") == {"arm64-v8a", "armeabi-v7a"}

    def test_architectures_do_not_depend_on_build_type(self, identity: ProjectIdentity) -> None:
        resolver = VariantResolver(identity)
        assert resolver.resolve_architecture_filter(BuildType.DEBUG) == (
            resolver.resolve_architecture_filter(BuildType.RELEASE)
        )

    def test_empty_architectures_fail(self, identity: ProjectIdentity) -> None:
        resolver = VariantResolver(identity, PackagingConfig(architectures=()))
        with pytest.raises(EmptyArchitectureFilter):
            resolver.resolve_architecture_filter("release")

    def test_blank_architecture_entries_count_as_empty(self, identity: ProjectIdentity) -> None:
        resolver = VariantResolver(identity, PackagingConfig(architectures=(" ", "")))
        with pytest.raises(EmptyArchitectureFilter):
            resolver.resolve_architecture_filter("debug")

    def test_default_locales(self, identity: ProjectIdentity) -> None:
        assert VariantResolver(identity).resolve_locale_filter() == {"en", "tr"}

    def test_declared_locales(self, identity: ProjectIdentity) -> None:
        resolver = VariantResolver(identity, PackagingConfig(locales=("de", "fr", "de")))
        assert resolver.resolve_locale_filter() == frozenset({"de", "fr"})


class TestResolveSigning:
    def test_debug_is_absent_even_with_credentials(
        self, identity: ProjectIdentity, credentials: CredentialSet
    ) -> None:
        assert VariantResolver(identity).resolve_signing("debug", credentials) is None

    def test_debug_without_credentials(self, identity: ProjectIdentity) -> None:
        assert VariantResolver(identity).resolve_signing("debug", None) is None

    def test_release_uses_credentials(
        self, identity: ProjectIdentity, credentials: CredentialSet
    ) -> None:
        assert VariantResolver(identity).resolve_signing("release", credentials) is credentials

    def test_release_without_credentials_fails(self, identity: ProjectIdentity) -> None:
        with pytest.raises(MissingReleaseCredentials):
            VariantResolver(identity).resolve_signing("release", None)


class TestPolicies:
    def test_release_shrink_policy(self, identity: ProjectIdentity) -> None:
        policy = VariantResolver(identity).resolve_shrink_policy("release")
        assert policy.minify_enabled is True
        assert policy.shrink_resources is True
        assert policy.proguard_files == RELEASE_PROGUARD_FILES
        assert policy.debug_symbol_level is DebugSymbolLevel.SYMBOL_TABLE

    def test_debug_shrink_policy(self, identity: ProjectIdentity) -> None:
        policy = VariantResolver(identity).resolve_shrink_policy("debug")
        assert policy.minify_enabled is False
        assert policy.shrink_resources is False
        assert policy.proguard_files == ()
        assert policy.debug_symbol_level is DebugSymbolLevel.NONE

    def test_debug_has_no_splits(self, identity: ProjectIdentity) -> None:
        assert VariantResolver(identity).resolve_split_dimensions("debug") == frozenset()

    def test_release_splits_every_dimension(self, identity: ProjectIdentity) -> None:
        assert VariantResolver(identity).resolve_split_dimensions("release") == {
            SplitDimension.ARCHITECTURE,
            SplitDimension.DENSITY,
            SplitDimension.LANGUAGE,
        }

    def test_unknown_build_type(self, identity: ProjectIdentity) -> None:
        with pytest.raises(UnknownBuildType):
            VariantResolver(identity).resolve_split_dimensions("staging")


class TestResolve:
    def test_debug_spec(self, identity: ProjectIdentity) -> None:
        spec = VariantResolver(identity).resolve("debug")
        assert spec.build_type is BuildType.DEBUG
        assert spec.signing is None
        assert spec.shrink_enabled is False
        assert spec.split_dimensions == frozenset()
        assert spec.exclusion_patterns == DEFAULT_EXCLUSION_PATTERNS

    def test_release_spec(self, identity: ProjectIdentity, credentials: CredentialSet) -> None:
        spec = VariantResolver(identity).resolve("Release", credentials)
        assert spec.build_type is BuildType.RELEASE
        assert spec.application_id == "com.example.app"
        assert spec.namespace == "com.example.app"
        assert spec.version_code == 17
        assert spec.version_name == "1.4.2"
        assert spec.signing == credentials
        assert spec.shrink_enabled is True
        assert spec.shrink_resources is True
        assert spec.exclusion_patterns == DEFAULT_EXCLUSION_PATTERNS
        assert spec.architecture_filter == {"arm64-v8a", "armeabi-v7a"}
        assert spec.locale_filter == {"en", "tr"}
        assert len(spec.split_dimensions) == 3

    def test_release_without_credentials_fails(self, identity: ProjectIdentity) -> None:
        with pytest.raises(MissingReleaseCredentials):
            VariantResolver(identity).resolve("release")

    def test_identity_failure_comes_first(self) -> None:
        # Both identity and signing are broken; identity is checked first.
        with pytest.raises(InvalidPlatformRange):
            VariantResolver(_identity(24, 34, 20)).resolve("release", None)

    def test_repeated_resolution_is_equal(
        self, identity: ProjectIdentity, credentials: CredentialSet
    ) -> None:
        resolver = VariantResolver(identity)
        assert resolver.resolve("release", credentials) == resolver.resolve("release", credentials)

    def test_debug_and_release_differ(
        self, identity: ProjectIdentity, credentials: CredentialSet
    ) -> None:
        resolver = VariantResolver(identity)
        assert resolver.resolve("debug", credentials) != resolver.resolve("release", credentials)

    def test_spec_is_frozen(self, identity: ProjectIdentity) -> None:
        spec = VariantResolver(identity).resolve("debug")
        with pytest.raises(ValidationError):
            spec.shrink_enabled = True  # type: ignore[misc]
