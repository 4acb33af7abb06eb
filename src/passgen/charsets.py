# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Character sets for password generation."""

from __future__ import annotations

import string
import types
from typing import TYPE_CHECKING

from passgen import errors

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = (
    'BASE64_CHARSET',
    'CONSONANTS',
    'NAMED_CHARSETS',
    'PRINTABLE_ASCII_CHARSET',
    'VOWELS',
    'build_custom_charset',
    'charset_problems',
)

BASE64_CHARSET = string.ascii_uppercase + string.ascii_lowercase + '0123456789+/'
"""The 64-symbol base64 alphabet (RFC 4648), without padding."""
PRINTABLE_ASCII_CHARSET = ''.join(chr(i) for i in range(0x21, 0x7F))
"""The 94 printable ASCII characters, excluding space."""
CONSONANTS = 'bcdfghjklmnpqrstvwxyz'
"""The 21 consonants used in pronounceable syllables."""
VOWELS = 'aeiou'
"""The 5 vowels used in pronounceable syllables."""

NAMED_CHARSETS: Mapping[str, str] = types.MappingProxyType({
    'UPPERCASE': string.ascii_uppercase,
    'LOWERCASE': string.ascii_lowercase,
    'DIGITS': string.digits,
    'SPECIAL': '!@#$%^&*()_+-=[]{}|;:,.<>?',
    'HEX_UPPERCASE': '0123456789ABCDEF',
    'HEX_LOWERCASE': '0123456789abcdef',
})
"""Named character sets usable in [`build_custom_charset`][]."""

MINIMUM_CHARSET_SIZE = 2


def _is_control_character(char: str, /) -> bool:
    return ord(char) < 0x20 or 0x7F <= ord(char) <= 0x9F  # noqa: PLR2004


def build_custom_charset(allowed: str, forbidden: str = '') -> str:
    """Assemble a custom character set.

    `allowed` is a comma-separated list of items.  Each item is either
    the (case-insensitive) name of one of the [`NAMED_CHARSETS`][], or
    a run of literal characters.  Characters in `forbidden` are removed,
    as are duplicates (keeping the first occurrence).

    Args:
        allowed:
            The item list of allowed characters.
        forbidden:
            Characters to exclude.

    Returns:
        The character set, in order of first occurrence.

    Raises:
        passgen.errors.ArgumentError:
            No characters remain.

    Examples:
        >>> build_custom_charset('digits,abc')
        '0123456789abc'
        >>> build_custom_charset('HEX_LOWERCASE', forbidden='0123456789')
        'abcdef'
        >>> build_custom_charset('aabbcc')
        'abc'

    """
    pieces: list[str] = []
    for item in allowed.split(','):
        name = item.strip().upper()
        if name in NAMED_CHARSETS:
            pieces.append(NAMED_CHARSETS[name])
        else:
            pieces.append(item.strip())
    excluded = frozenset(forbidden)
    charset = ''.join(
        char
        for char in dict.fromkeys(''.join(pieces))
        if char not in excluded
    )
    if not charset:
        raise errors.ArgumentError('Character set must not be empty')
    return charset


def charset_problems(charset: str, /) -> list[str]:
    """Return all reasons why `charset` is unsuitable for generation.

    A suitable character set has at least two characters, no duplicate
    characters, and no control characters.

    Examples:
        >>> charset_problems('abc')
        []
        >>> charset_problems('aa')
        ['charset must contain at least 2 distinct characters', 'charset must not contain duplicate characters']

    """
    problems: list[str] = []
    if len(set(charset)) < MINIMUM_CHARSET_SIZE:
        problems.append(
            f'charset must contain at least {MINIMUM_CHARSET_SIZE} '
            f'distinct characters'
        )
    if len(set(charset)) != len(charset):
        problems.append('charset must not contain duplicate characters')
    control_characters = sorted({c for c in charset if _is_control_character(c)})
    if control_characters:
        problems.append(
            'charset must not contain control characters: '
            + ', '.join(f'U+{ord(c):04X}' for c in control_characters)
        )
    return problems
