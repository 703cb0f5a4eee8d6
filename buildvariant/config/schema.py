# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe models for build declarations and resolved variants.

Every model is a frozen pydantic model using ConfigDict with:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked

Two groups live here. The declaration models (ProjectIdentity, PackagingConfig,
SigningConfig, BuildConfig) mirror the YAML declarations file. The output
models (CredentialSet, ShrinkPolicy, BuildVariantSpec) are what the resolver
hands to the packaging and signing stages.

ProjectIdentity does not check platform version ordering. That check belongs
to VariantResolver.resolve_identity so it surfaces as InvalidPlatformRange
rather than a generic schema error. BuildVariantSpec does check it, as a
last line for specs constructed outside the resolver.
"""

import re
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator, model_validator

from buildvariant.config.defaults import (
    DEFAULT_ARCHITECTURES,
    DEFAULT_CREDENTIALS_FILE,
    DEFAULT_EXCLUSION_PATTERNS,
    DEFAULT_LOCALES,
)
from buildvariant.config.exceptions import UnknownBuildType

_PUBSPEC_VERSION = re.compile(r"^\s*(?P<name>[^+\s]+)\+(?P<code>\d+)\s*$")

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class BuildType(str, Enum):
    DEBUG = "debug"
    RELEASE = "release"

    @classmethod
    def parse(cls, value: "BuildType | str") -> "BuildType":
        """Accept an enum member or a case-insensitive name like 'Release'."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise UnknownBuildType(
            f"Unknown build type '{value}'. Must be one of: "
            f"{', '.join(member.value for member in cls)}"
        )


class SplitDimension(str, Enum):
    ARCHITECTURE = "architecture"
    DENSITY = "density"
    LANGUAGE = "language"


class DebugSymbolLevel(str, Enum):
    """How much native debug information ships alongside the bundle."""

    NONE = "none"
    SYMBOL_TABLE = "symbol_table"
    FULL = "full"


class ProjectIdentity(BaseModel):
    """
    Static identity of the application, taken verbatim from project metadata.

    The version can be declared either pubspec style ("1.4.2+17") through the
    `version` key, or explicitly through version_name and version_code. The
    model always ends up with both explicit fields populated.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    application_id: str = Field(min_length=1, description="Stable package identifier")
    namespace: Optional[str] = Field(
        default=None,
        description="Code namespace, defaults to application_id",
    )
    version_code: int = Field(ge=1, description="Monotonic integer version")
    version_name: str = Field(min_length=1, description="Human-readable version")
    min_platform_version: int = Field(ge=1)
    target_platform_version: int = Field(ge=1)
    compile_platform_version: int = Field(ge=1)
    ndk_version: Optional[str] = Field(
        default=None, description="Native toolchain version, passed through"
    )
    jvm_target: str = Field(default="17", description="JVM bytecode target")

    @model_validator(mode="before")
    @classmethod
    def _split_version_string(cls, data: object) -> object:
        if not isinstance(data, dict) or "version" not in data:
            return data
        data = dict(data)
        raw = data.pop("version")
        match = _PUBSPEC_VERSION.match(str(raw))
        if match is None:
            raise ValueError(
                f"version '{raw}' must look like '<name>+<code>', e.g. '1.4.2+17'"
            )
        data.setdefault("version_name", match.group("name"))
        data.setdefault("version_code", int(match.group("code")))
        return data

    @property
    def resolved_namespace(self) -> str:
        return self.namespace or self.application_id


class PackagingConfig(BaseModel):
    """Project-declared allow-lists. Defaults come from config.defaults."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    architectures: tuple[str, ...] = Field(
        default=DEFAULT_ARCHITECTURES,
        description="Target CPU ABIs to include; everything else is dropped",
    )
    locales: tuple[str, ...] = Field(
        default=DEFAULT_LOCALES,
        description="Locale tags to retain; the packager strips the rest",
    )
    exclusion_patterns: tuple[str, ...] = Field(
        default=DEFAULT_EXCLUSION_PATTERNS,
        description="Resource globs excluded from every package",
    )


class SigningConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    credentials_file: str = Field(
        default=DEFAULT_CREDENTIALS_FILE,
        description="Credential properties file, relative to project root",
    )


class BuildConfig(BaseModel):
    """
    Root model for the declarations file.

    Only `config_version` and `project` are required. Everything else has a
    default that matches the policy tables, so a minimal file is just the
    application identity.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(description="Schema version, e.g. '1.0.0'")
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output, relative to project root",
    )
    project: ProjectIdentity
    packaging: PackagingConfig = Field(default_factory=PackagingConfig)
    signing: SigningConfig = Field(default_factory=SigningConfig)

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        upper = value.strip().upper()
        if upper not in LOG_LEVELS:
            raise ValueError(
                f"log_level '{value}' is not one of: {', '.join(LOG_LEVELS)}"
            )
        return upper


class CredentialSet(BaseModel):
    """
    Signing identity for a release artifact.

    Passwords are SecretStr so they never leak through repr() or model dumps.
    A missing store_file means the signing backend should use its default
    keystore.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    alias: str = Field(min_length=1)
    password: SecretStr
    store_file: Optional[Path] = None
    store_password: SecretStr


class ShrinkPolicy(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    minify_enabled: bool
    shrink_resources: bool
    proguard_files: tuple[str, ...] = ()
    debug_symbol_level: DebugSymbolLevel = DebugSymbolLevel.NONE


class BuildVariantSpec(BaseModel):
    """
    Everything downstream stages need for one build invocation.

    Built fresh per call and never cached. Equality is structural, so two
    resolutions over identical inputs compare equal.

    The model checks its own invariants too, so a spec built by hand cannot
    carry an inverted platform range, an empty ABI list or an unsigned
    release. VariantResolver checks the same things first to raise the
    specific ResolutionError subclasses.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    application_id: str
    namespace: str
    version_code: int
    version_name: str
    min_platform_version: int
    target_platform_version: int
    compile_platform_version: int
    ndk_version: Optional[str] = None
    jvm_target: str
    build_type: BuildType
    architecture_filter: frozenset[str]
    locale_filter: frozenset[str]
    signing: Optional[CredentialSet] = None
    shrink_enabled: bool
    shrink_resources: bool
    exclusion_patterns: tuple[str, ...]
    proguard_files: tuple[str, ...]
    debug_symbol_level: DebugSymbolLevel
    split_dimensions: frozenset[SplitDimension]

    @model_validator(mode="after")
    def _check_invariants(self) -> "BuildVariantSpec":
        if not (
            self.min_platform_version
            <= self.target_platform_version
            <= self.compile_platform_version
        ):
            raise ValueError(
                "platform versions must satisfy min <= target <= compile, got "
                f"{self.min_platform_version}/{self.target_platform_version}/"
                f"{self.compile_platform_version}"
            )
        if not self.architecture_filter:
            raise ValueError("architecture_filter must not be empty")
        if self.build_type is BuildType.RELEASE and self.signing is None:
            raise ValueError("a release variant must carry signing credentials")
        return self
