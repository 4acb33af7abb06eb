# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Dictionary (word list) adapters.

A dictionary loads its words at most once, and hands out the same
immutable snapshot afterwards.  The built-in [`DEFAULT_WORD_LIST`][] is
deliberately small, and serves memorable passphrases and honeywords
only.  Diceware passphrases need a word list of exactly
[`DICEWARE_WORD_COUNT`][] words (such as the EFF long word list),
supplied via [`FileDictionary`][].

"""

from __future__ import annotations

import logging
import pathlib
from typing import TYPE_CHECKING, Callable

from passgen import _internals, errors

if TYPE_CHECKING:
    import os
    from collections.abc import Iterable

__all__ = (
    'DEFAULT_WORD_LIST',
    'DICEWARE_WORD_COUNT',
    'FileDictionary',
    'MemoryDictionary',
)

PROG_NAME = _internals.PROG_NAME

DICEWARE_WORD_COUNT = 6**5
"""The size of a standard diceware word list (five dice rolls)."""

# fmt: off
DEFAULT_WORD_LIST: tuple[str, ...] = (
    'abandon', 'ability', 'able', 'about', 'above', 'absent', 'absorb',
    'abstract', 'absurd', 'abuse', 'access', 'accident', 'account',
    'accuse', 'achieve', 'acid', 'acoustic', 'acquire', 'across', 'act',
    'action', 'actor', 'actress', 'actual', 'adapt', 'add', 'addict',
    'address', 'adjust', 'admit', 'adult', 'advance', 'advice', 'aerobic',
    'affair', 'afford', 'afraid', 'again', 'age', 'agent', 'agree',
    'ahead', 'aim', 'air', 'airport', 'aisle', 'alarm', 'album', 'alert',
    'alien', 'all', 'alley', 'allow', 'almost', 'alone', 'alpha',
    'already', 'also', 'alter', 'always', 'amateur', 'amazing', 'among',
    'amount',
)
# fmt: on
"""The built-in word list: 64 words, i.e. 6 bits per word."""


class MemoryDictionary:
    """A dictionary over an in-memory word list.

    Examples:
        >>> words = MemoryDictionary(['alpha', 'beta', 'gamma'])
        >>> words.count()
        3
        >>> words.select_random(lambda n: n - 1)
        'gamma'

    """

    def __init__(self, words: Iterable[str] = DEFAULT_WORD_LIST, /) -> None:
        """Initialize the dictionary.

        Args:
            words:
                The words.  Copied on first load.

        """
        self._source = words
        self._words: tuple[str, ...] | None = None

    def load(self) -> tuple[str, ...]:
        """Return the word snapshot, taking it on the first call."""
        if self._words is None:
            self._words = tuple(self._source)
        return self._words

    def count(self) -> int:
        """Return the number of words."""
        return len(self.load())

    def select_random(self, random_int: Callable[[int], int], /) -> str:
        """Return a word chosen by `random_int`.

        Args:
            random_int:
                A function returning an integer in `range(n)` when
                called with `n`.  Typically
                [`RandomSource.random_int`][passgen.ports.RandomSource.random_int].

        Raises:
            passgen.errors.EmptyDictionaryError:
                The dictionary is empty.

        """
        words = self.load()
        if not words:
            raise errors.EmptyDictionaryError
        return words[random_int(len(words))]


class FileDictionary(MemoryDictionary):
    """A dictionary read from a text file, on first use.

    The file holds one word per line.  Blank lines and lines starting
    with `#` are skipped.  Lines with several whitespace-separated
    fields keep only the last field, so diceware lists in the EFF
    layout (`11111<TAB>abacus`) load as expected.

    """

    logger = logging.getLogger(PROG_NAME)

    def __init__(
        self,
        path: str | os.PathLike[str],
        /,
        *,
        encoding: str = 'utf-8',
    ) -> None:
        """Initialize the dictionary.

        Args:
            path:
                The word list file.
            encoding:
                The file's text encoding.

        """
        super().__init__(())
        self.path = pathlib.Path(path)
        self.encoding = encoding

    def load(self) -> tuple[str, ...]:
        """Return the word snapshot, reading the file on the first call.

        Raises:
            passgen.errors.PortBackendError:
                The file cannot be read or decoded.

        """
        if self._words is None:
            try:
                text = self.path.read_text(encoding=self.encoding)
            except (OSError, UnicodeDecodeError) as exc:
                msg = f'Cannot load word list {str(self.path)!r}: {exc}'
                raise errors.PortBackendError(msg) from exc
            self._words = tuple(self._parse(text.splitlines()))
            self.logger.debug(
                'Loaded %d words from %r', len(self._words), str(self.path)
            )
        return self._words

    @staticmethod
    def _parse(lines: Iterable[str], /) -> Iterable[str]:
        for line in lines:
            stripped = line.strip()
            if not stripped or stripped.startswith('#'):
                continue
            yield stripped.split()[-1]
