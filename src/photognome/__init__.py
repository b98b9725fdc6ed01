# SPDX-FileCopyrightText: 2025-present DouglasMacKrell <d.mackrell@gmail.com>
#
# SPDX-License-Identifier: MIT

"""PhotoGnome - Template-driven bulk renamer for camera JPEGs."""

from photognome.__about__ import __version__

__all__ = ["__version__"]
