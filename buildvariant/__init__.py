# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Release-build configuration resolver: signing credentials, packaging filters and split policy."""

__version__ = "0.1.0"
