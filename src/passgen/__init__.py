# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Password generation strategies with an explicit entropy model"""  # noqa: D415

__author__ = 'Marco Ricci <software@the13thletter.info>'
__distribution_name__ = 'passgen'

# Automatically generated.  DO NOT EDIT! Use importlib.metadata instead
# to query the correct values.
__version__ = '0.1a1.dev1'
# END automatically generated.
