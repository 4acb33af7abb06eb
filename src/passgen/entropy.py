# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""The entropy model: password strength from a configuration's shape.

Everything in here is a pure function of its arguments.  No randomness
is consumed, and no generation strategy is invoked: the strength of
a configuration is the base-2 logarithm of the number of equally likely
passwords it can produce.

"""

from __future__ import annotations

import math
import types
from typing import TYPE_CHECKING

from passgen import _types, charsets, errors, template

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = (
    'QUANTUM_ENTROPY_TARGET_BITS',
    'RECOMMENDATIONS',
    'charset_size',
    'chunked_bits',
    'entropy_report',
    'minimum_quantum_length',
    'security_level',
    'syllable_bits',
    'word_bits',
)

QUANTUM_ENTROPY_TARGET_BITS = 256
"""The entropy floor for quantum-resistant passwords, in bits."""

SYLLABLE_COMBINATIONS = (
    len(charsets.CONSONANTS) * len(charsets.VOWELS) * len(charsets.CONSONANTS)
)
"""The number of distinct consonant-vowel-consonant syllables (2205)."""

RECOMMENDATIONS: Mapping[_types.SecurityLevel, str] = types.MappingProxyType({
    _types.SecurityLevel.WEAK: (
        'Weak password. Increase the password length or the iteration '
        'count before using it.'
    ),
    _types.SecurityLevel.MODERATE: (
        'Consider increasing password length or iteration count '
        'for better security.'
    ),
    _types.SecurityLevel.GOOD: (
        'Good security for most applications. '
        'Consider increasing length for high-security needs.'
    ),
    _types.SecurityLevel.STRONG: (
        'Excellent security. Suitable for high-security applications.'
    ),
    _types.SecurityLevel.EXCELLENT: (
        'Excellent security. Meets the 256-bit target for '
        'quantum-resistant passwords.'
    ),
})
"""The fixed recommendation for each security level."""


def _log2(n: int, /) -> float:
    return math.log2(n) if n > 0 else 0.0


def chunked_bits(length: int, iteration: int, size: int, /) -> float:
    """Return the entropy of `iteration` chunks of `length` characters.

    Args:
        length:
            The chunk length.
        iteration:
            The number of chunks.
        size:
            The size of the character set.

    Examples:
        >>> chunked_bits(16, 4, 64)
        384.0

    """
    return max(length, 0) * max(iteration, 0) * _log2(size)


def word_bits(iteration: int, dictionary_size: int, /) -> float:
    """Return the entropy of `iteration` words from a dictionary.

    Examples:
        >>> word_bits(4, 7776) == 4 * math.log2(7776)
        True

    """
    return max(iteration, 0) * _log2(dictionary_size)


def syllable_bits(iteration: int, /) -> float:
    """Return the entropy of `iteration` pronounceable syllables."""
    return max(iteration, 0) * _log2(SYLLABLE_COMBINATIONS)


def security_level(bits: float, /) -> _types.SecurityLevel:
    """Return the security level band for `bits` of entropy."""
    return _types.SecurityLevel.from_bits(bits)


def charset_size(config: _types.PasswordConfig, /) -> int:
    """Return the character set size of a chunked configuration.

    Raises:
        passgen.errors.UnknownTypeError:
            The configuration's type is not registered.
        passgen.errors.ArgumentError:
            The configuration's type is not a chunked type.

    """
    password_type = _resolve_type(config)
    if password_type == _types.PasswordType.QUANTUM_RESISTANT:
        return len(charsets.PRINTABLE_ASCII_CHARSET)
    if password_type == _types.PasswordType.CUSTOM:
        return len(config.charset or '')
    if password_type in {_types.PasswordType.STRONG, _types.PasswordType.BASE64}:
        return len(charsets.BASE64_CHARSET)
    msg = f'Not a chunked password type: {password_type.value!r}'
    raise errors.ArgumentError(msg)


def minimum_quantum_length(iteration: int = 1, /) -> int:
    """Return the smallest quantum-resistant chunk length for 256 bits.

    Examples:
        >>> minimum_quantum_length()
        40
        >>> minimum_quantum_length(4)
        10

    """
    per_chunk = QUANTUM_ENTROPY_TARGET_BITS / max(iteration, 1)
    return math.ceil(
        per_chunk / math.log2(len(charsets.PRINTABLE_ASCII_CHARSET))
    )


def _resolve_type(config: _types.PasswordConfig, /) -> _types.PasswordType:
    try:
        return _types.PasswordType(config.type)
    except ValueError:
        raise errors.UnknownTypeError(
            config.type, _types.PasswordType.tags()
        ) from None


def entropy_report(
    config: _types.PasswordConfig,
    /,
    *,
    dictionary_size: int | None = None,
) -> _types.EntropyReport:
    """Compute the strength of a (resolved) password configuration.

    Args:
        config:
            The configuration.  Chunked types need a `length`; unset
            lengths count as zero.
        dictionary_size:
            The size of the active dictionary.  Required for word
            types, ignored otherwise.

    Returns:
        The entropy report.  Identical inputs always yield identical
        reports.

    Raises:
        passgen.errors.UnknownTypeError:
            The configuration's type is not registered.
        passgen.errors.ArgumentError:
            A word type was given without a dictionary size, or a
            template type without a well-formed template.

    Examples:
        >>> report = entropy_report(
        ...     _types.PasswordConfig('strong', length=16, iteration=4)
        ... )
        >>> report.total_bits, report.per_unit_bits, report.security_level.value
        (384.0, 6.0, 'EXCELLENT')

    """
    password_type = _resolve_type(config)
    family = password_type.family
    iteration = config.iteration
    if family == _types.StrategyFamily.CHUNKED:
        size = charset_size(config)
        total = chunked_bits(config.length or 0, iteration, size)
        per_unit = _log2(size)
    elif family == _types.StrategyFamily.WORDS:
        if dictionary_size is None:
            msg = f'A dictionary size is required for {password_type.value!r}'
            raise errors.ArgumentError(msg)
        total = word_bits(iteration, dictionary_size)
        per_unit = _log2(dictionary_size)
    elif family == _types.StrategyFamily.TEMPLATE:
        per_unit = template.template_bits(
            template.parse_template(config.template or '')
        )
        total = max(iteration, 0) * per_unit
    else:
        total = syllable_bits(iteration)
        per_unit = _log2(SYLLABLE_COMBINATIONS)
    level = security_level(total)
    return _types.EntropyReport(
        total_bits=total,
        per_unit_bits=per_unit,
        security_level=level,
        recommendation=RECOMMENDATIONS[level],
    )
