# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Variant resolution: static declarations + build type + credentials -> BuildVariantSpec.

resolve() walks the steps in a fixed order:
  1. identity (platform version ordering)
  2. architecture and locale allow-lists
  3. signing
  4. shrink policy
  5. split dimensions

The first failing step raises and nothing is returned, so callers never see a
partially resolved spec. The resolver holds only its declarations; calling
resolve() twice with the same inputs gives equal results.
"""

import logging
from typing import Optional

from buildvariant.config.exceptions import (
    EmptyArchitectureFilter,
    InvalidPlatformRange,
    MissingReleaseCredentials,
)
from buildvariant.config.schema import (
    BuildType,
    BuildVariantSpec,
    CredentialSet,
    PackagingConfig,
    ProjectIdentity,
    ShrinkPolicy,
    SplitDimension,
)
from buildvariant.variants.policy import SHRINK_POLICIES, SIGNING_REQUIRED, SPLIT_POLICIES

_logger = logging.getLogger(__name__)


class VariantResolver:
    """Resolves a BuildVariantSpec for one project."""

    def __init__(
        self,
        identity: ProjectIdentity,
        packaging: Optional[PackagingConfig] = None,
    ) -> None:
        self.identity = identity
        self.packaging = packaging if packaging is not None else PackagingConfig()

    def resolve_identity(self) -> ProjectIdentity:
        """
        Return the project identity unchanged after checking platform ordering.

        Raises:
            InvalidPlatformRange: Unless min <= target <= compile.
        """
        ident = self.identity
        if ident.min_platform_version > ident.target_platform_version:
            raise InvalidPlatformRange(
                f"min_platform_version ({ident.min_platform_version}) is above "
                f"target_platform_version ({ident.target_platform_version})"
            )
        if ident.target_platform_version > ident.compile_platform_version:
            raise InvalidPlatformRange(
                f"target_platform_version ({ident.target_platform_version}) is above "
                f"compile_platform_version ({ident.compile_platform_version})"
            )
        return ident

    def resolve_architecture_filter(self, build_type: BuildType | str) -> frozenset[str]:
        """
        Return the ABI allow-list. It is the same for every build type.

        Raises:
            EmptyArchitectureFilter: If the declared list is empty.
        """
        BuildType.parse(build_type)  # reject unknown names even though the list is shared
        architectures = frozenset(arch.strip() for arch in self.packaging.architectures if arch.strip())
        if not architectures:
            raise EmptyArchitectureFilter(
                "packaging.architectures is empty; at least one target ABI is required"
            )
        return architectures

    def resolve_locale_filter(self) -> frozenset[str]:
        return frozenset(locale.strip() for locale in self.packaging.locales if locale.strip())

    def resolve_signing(
        self,
        build_type: BuildType | str,
        credentials: Optional[CredentialSet],
    ) -> Optional[CredentialSet]:
        """
        Pick the signing identity for a build type.

        Debug builds return None; the toolchain signs them with its own debug
        key. Release builds must have credentials.

        Raises:
            MissingReleaseCredentials: Release build without credentials.
        """
        build_type = BuildType.parse(build_type)
        if not SIGNING_REQUIRED[build_type]:
            return None
        if credentials is None:
            raise MissingReleaseCredentials(
                f"A {build_type.value} build requires signing credentials, but none were found. "
                "Provide a credential file with keyAlias, keyPassword, storeFile and storePassword."
            )
        return credentials

    def resolve_shrink_policy(self, build_type: BuildType | str) -> ShrinkPolicy:
        return SHRINK_POLICIES[BuildType.parse(build_type)]

    def resolve_split_dimensions(self, build_type: BuildType | str) -> frozenset[SplitDimension]:
        return SPLIT_POLICIES[BuildType.parse(build_type)]

    def resolve(
        self,
        build_type: BuildType | str,
        credentials: Optional[CredentialSet] = None,
    ) -> BuildVariantSpec:
        """
        Run every resolution step and assemble the spec.

        Args:
            build_type: BuildType member or its name ("debug", "Release", ...).
            credentials: Result of CredentialStore.read(), None when absent.

        Returns:
            A frozen BuildVariantSpec.

        Raises:
            ResolutionError: Whichever step fails first.
        """
        build_type = BuildType.parse(build_type)

        identity = self.resolve_identity()
        architectures = self.resolve_architecture_filter(build_type)
        locales = self.resolve_locale_filter()
        signing = self.resolve_signing(build_type, credentials)
        shrink = self.resolve_shrink_policy(build_type)
        splits = self.resolve_split_dimensions(build_type)

        spec = BuildVariantSpec(
            application_id=identity.application_id,
            namespace=identity.resolved_namespace,
            version_code=identity.version_code,
            version_name=identity.version_name,
            min_platform_version=identity.min_platform_version,
            target_platform_version=identity.target_platform_version,
            compile_platform_version=identity.compile_platform_version,
            ndk_version=identity.ndk_version,
            jvm_target=identity.jvm_target,
            build_type=build_type,
            architecture_filter=architectures,
            locale_filter=locales,
            signing=signing,
            shrink_enabled=shrink.minify_enabled,
            shrink_resources=shrink.shrink_resources,
            exclusion_patterns=self.packaging.exclusion_patterns,
            proguard_files=shrink.proguard_files,
            debug_symbol_level=shrink.debug_symbol_level,
            split_dimensions=splits,
        )

        _logger.info(
            "Variant resolved",
            extra={
                "build_type": build_type.value,
                "application_id": spec.application_id,
                "version": f"{spec.version_name}+{spec.version_code}",
                "architectures": sorted(architectures),
                "locales": sorted(locales),
                "signed": signing is not None,
                "splits": sorted(dim.value for dim in splits),
            },
        )
        return spec
