# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Release outputs for buildvariant.

Serializes resolved variants for the packaging stage and for audit. No
resolution logic lives here, and no signing secret ever leaves memory.
"""
