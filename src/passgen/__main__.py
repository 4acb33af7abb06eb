# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib
"""Run [`passgen.cli.passgen`][] on import."""

import sys

if __name__ == '__main__':
    from passgen.cli import passgen

    sys.exit(passgen())
