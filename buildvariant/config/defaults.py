# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Versioned packaging defaults.

These are plain data, not logic. Bump POLICY_VERSION whenever a value here
changes so manifests written by older builds can be told apart.

The architecture list intentionally narrows the ABI universe to the two ARM
targets that cover practically every shipping device. Locales are limited to
what the app actually translates. Both keep the artifact small.
"""

POLICY_VERSION: str = "1.0.0"

DEFAULT_DECLARATIONS_FILE: str = "variants.yaml"

DEFAULT_CREDENTIALS_FILE: str = "key.properties"

DEFAULT_ARCHITECTURES: tuple[str, ...] = ("arm64-v8a", "armeabi-v7a")

DEFAULT_LOCALES: tuple[str, ...] = ("en", "tr")

# License metadata shipped by several dependencies under the same name.
DEFAULT_EXCLUSION_PATTERNS: tuple[str, ...] = ("/META-INF/{AL2.0,LGPL2.1}",)

RELEASE_PROGUARD_FILES: tuple[str, ...] = (
    "proguard-android-optimize.txt",
    "proguard-rules.pro",
)
