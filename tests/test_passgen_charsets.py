# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Test the character sets in passgen.charsets."""

from __future__ import annotations

import string

import hypothesis
import pytest
from hypothesis import strategies

from passgen import charsets, errors


class TestAlphabets:
    """Test the fixed alphabets."""

    def test_100_sizes(self) -> None:
        """The alphabets have their documented sizes."""
        assert len(set(charsets.BASE64_CHARSET)) == 64
        assert len(set(charsets.PRINTABLE_ASCII_CHARSET)) == 94
        assert len(charsets.CONSONANTS) == 21
        assert len(charsets.VOWELS) == 5

    def test_101_printable_ascii(self) -> None:
        """The quantum-resistant alphabet is printable ASCII sans space."""
        assert set(charsets.PRINTABLE_ASCII_CHARSET) == (
            set(string.printable) - set(string.whitespace)
        )

    def test_102_base64(self) -> None:
        """The base64 alphabet matches RFC 4648, in order."""
        assert charsets.BASE64_CHARSET.startswith('ABC')
        assert charsets.BASE64_CHARSET.endswith('789+/')


class TestBuildCustomCharset:
    """Test assembling custom character sets."""

    @pytest.mark.parametrize(
        ['allowed', 'forbidden', 'expected'],
        [
            pytest.param('digits', '', string.digits, id='named'),
            pytest.param('Digits', '13579', '02468', id='named-excluded'),
            pytest.param('xyz,uppercase', 'ABCDEFGHIJKLMNOPQRSTUVW', 'xyzXYZ',
                         id='mixed'),
            pytest.param('abc, def', '', 'abcdef', id='stripped'),
            pytest.param('hex_lowercase,digits', '', '0123456789abcdef',
                         id='deduplicated'),
        ],
    )
    def test_100_build(self, allowed: str, forbidden: str, expected: str) -> None:
        """Items are names or literals, in order of first occurrence."""
        assert charsets.build_custom_charset(allowed, forbidden) == expected

    def test_101_empty(self) -> None:
        """Empty results are rejected."""
        with pytest.raises(errors.ArgumentError):
            charsets.build_custom_charset('digits', string.digits)
        with pytest.raises(errors.ArgumentError):
            charsets.build_custom_charset('')

    @hypothesis.given(
        allowed=strategies.text(
            strategies.characters(
                min_codepoint=0x21, max_codepoint=0x7E, exclude_characters=','
            ),
            min_size=1,
        ),
        forbidden=strategies.text(
            strategies.characters(min_codepoint=0x21, max_codepoint=0x7E)
        ),
    )
    def test_102_properties(self, allowed: str, forbidden: str) -> None:
        """Results have no duplicates and no forbidden characters."""
        try:
            charset = charsets.build_custom_charset(allowed, forbidden)
        except errors.ArgumentError:
            hypothesis.assume(False)
        else:
            assert len(set(charset)) == len(charset)
            assert not set(charset) & set(forbidden)


class TestCharsetProblems:
    """Test character set suitability checks."""

    def test_100_suitable(self) -> None:
        """Two distinct printable characters suffice."""
        assert charsets.charset_problems('01') == []

    def test_101_too_small(self) -> None:
        """Single-character sets are unsuitable."""
        assert charsets.charset_problems('x') == [
            'charset must contain at least 2 distinct characters'
        ]

    def test_102_control_characters(self) -> None:
        """Control characters are reported by code point."""
        assert charsets.charset_problems('ab\t\x7f') == [
            'charset must not contain control characters: U+0009, U+007F'
        ]
