# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Exceptions raised while loading declarations and resolving a build variant.

Two families live here:
  - ConfigError covers the YAML declarations file (I/O, parsing, schema).
  - ResolutionError covers everything that goes wrong while turning valid
    declarations plus credentials into a BuildVariantSpec.

Every one of these is fatal for the build invocation. Nothing catches them to
retry, because they all come from static misconfiguration that only a human
can fix.
"""


class ConfigError(Exception):
    """Base for all declarations-file errors."""


class ConfigLoadError(ConfigError):
    """Raised when the declarations file cannot be read from disk or parsed as YAML."""


class ConfigValidationError(ConfigError):
    """
    Raised when the declarations file parses fine but fails schema validation.
    This covers missing required fields, type mismatches, unknown keys and
    version strings that cannot be split into name and code.
    """


class ResolutionError(Exception):
    """Base for all failures while resolving a build variant."""


class MalformedCredentialFile(ResolutionError):
    """The credential file exists but its content is not key/value text."""


class IncompleteCredentials(ResolutionError):
    """
    The credential file is non-empty but lacks one or more required keys.

    Carries the sorted list of missing keys so the build log can say exactly
    what to add.
    """

    def __init__(self, missing: list[str], source: str | None = None) -> None:
        self.missing = sorted(missing)
        self.source = source
        location = f" in {source}" if source else ""
        super().__init__(
            f"Incomplete signing credentials{location}: missing {', '.join(self.missing)}"
        )


class MissingReleaseCredentials(ResolutionError):
    """A release build was requested but no signing credentials are available."""


class InvalidPlatformRange(ResolutionError):
    """Platform versions are not ordered min <= target <= compile."""


class EmptyArchitectureFilter(ResolutionError):
    """The architecture allow-list is empty, so nothing would be packaged."""


class UnknownBuildType(ResolutionError):
    """The requested build type is neither debug nor release."""
