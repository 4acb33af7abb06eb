# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""passgen internals.

Warning:
    Non-public package (implementation detail), provided for didactical
    and educational purposes only. Subject to change without notice,
    including removal.

"""

import passgen

__all__ = ()

PROG_NAME = passgen.__distribution_name__
VERSION = passgen.__version__
AUTHOR = passgen.__author__
