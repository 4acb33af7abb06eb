# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Random source adapters.

[`SystemRandomSource`][] is the production adapter, reading from the
operating system's CSPRNG.  [`ByteSequenceRandomSource`][] replays
a fixed byte string, for reproducible tests.  Both share the unbiased
integer and string sampling of [`RandomSourceBase`][].

"""

from __future__ import annotations

import abc
import collections
import os

from typing_extensions import override

from passgen import _types, errors

__all__ = (
    'ByteSequenceRandomSource',
    'RandomSourceBase',
    'RandomSourceExhaustedError',
    'SystemRandomSource',
)

SELF_CHECK_SAMPLE_SIZE = 10_000
"""The default number of bytes drawn by the uniformity self-check."""
SELF_CHECK_CRITICAL_VALUE = 310.46
"""Chi-squared critical value for 255 degrees of freedom, at p = 0.01."""


def _is_positive_int(value: object, /) -> bool:
    return (
        isinstance(value, int) and not isinstance(value, bool) and value > 0
    )


def byte_width(n: int, /) -> int:
    """Return the minimal number of bytes covering `range(n)`.

    Examples:
        >>> [byte_width(n) for n in (1, 2, 256, 257, 65536, 65537)]
        [0, 1, 1, 2, 2, 3]

    """
    return ((n - 1).bit_length() + 7) // 8


class RandomSourceBase(abc.ABC):
    """Unbiased sampling on top of a random byte stream.

    Subclasses implement [`_draw`][], the raw byte source; everything
    else derives from it.

    """

    @abc.abstractmethod
    def _draw(self, n: int, /) -> bytes:
        """Return `n` raw random bytes; `n` is positive."""
        raise NotImplementedError

    def random_bytes(self, n: int, /) -> bytes:
        """Return `n` random bytes.

        Raises:
            passgen.errors.ArgumentError:
                `n` is not a positive integer.
            passgen.errors.PortBackendError:
                The underlying entropy source failed.

        """
        if not _is_positive_int(n):
            raise errors.ArgumentError.not_a_positive_integer('n')
        return self._draw(n)

    def random_int(self, max: int, /) -> int:  # noqa: A002
        """Return a uniformly distributed integer in `range(max)`.

        We draw just enough bytes to cover `range(max)`, read them as
        a big-endian number `v`, and reject `v` if it lies at or above
        the largest multiple of `max` that fits into this many bytes.
        Otherwise, we return `v % max`.  Every residue is then equally
        likely.  For `max == 1`, we draw nothing.

        Args:
            max:
                The (exclusive) upper bound.

        Raises:
            passgen.errors.ArgumentError:
                `max` is not a positive integer.
            passgen.errors.PortBackendError:
                The underlying entropy source failed.

        Examples:
            >>> source = ByteSequenceRandomSource(bytes([255, 254, 7]))
            >>> source.random_int(10)  # 255 and 254 are rejected
            7
            >>> source.remaining
            0

        """
        if not _is_positive_int(max):
            raise errors.ArgumentError.not_a_positive_integer('max')
        if max == 1:
            return 0
        k = byte_width(max)
        p = 256**k
        limit = p - p % max
        while True:
            v = int.from_bytes(self._draw(k), 'big')
            if v < limit:
                return v % max

    def random_string(self, length: int, charset: str, /) -> str:
        """Return `length` characters drawn uniformly from `charset`.

        Raises:
            passgen.errors.ArgumentError:
                `length` is not a positive integer, or `charset` is
                empty.
            passgen.errors.PortBackendError:
                The underlying entropy source failed.

        """
        if not _is_positive_int(length):
            raise errors.ArgumentError.not_a_positive_integer('length')
        if not charset:
            raise errors.ArgumentError('Character set must not be empty')
        n = len(charset)
        return ''.join(charset[self.random_int(n)] for _ in range(length))

    def self_check(
        self,
        sample_size: int = SELF_CHECK_SAMPLE_SIZE,
        /,
        *,
        critical_value: float = SELF_CHECK_CRITICAL_VALUE,
    ) -> _types.SelfCheckResult:
        """Test the byte stream for uniformity.

        Draw `sample_size` bytes, and compute the chi-squared statistic
        of the byte value frequencies against the uniform distribution
        (255 degrees of freedom).  A diagnostic only: it consumes
        randomness, so it never runs during generation.

        Args:
            sample_size:
                The number of bytes to draw.
            critical_value:
                The pass/fail threshold for the statistic.

        Raises:
            passgen.errors.ArgumentError:
                `sample_size` is not a positive integer.
            passgen.errors.PortBackendError:
                The underlying entropy source failed.

        """
        sample = self.random_bytes(sample_size)
        expected = sample_size / 256
        counts = collections.Counter(sample)
        chi_squared = sum(
            (counts.get(value, 0) - expected) ** 2 / expected
            for value in range(256)
        )
        return _types.SelfCheckResult(
            sample_size=sample_size,
            chi_squared=chi_squared,
            critical_value=critical_value,
            passed=chi_squared < critical_value,
        )


class SystemRandomSource(RandomSourceBase):
    """Randomness from the operating system, via [`os.urandom`][]."""

    @override
    def _draw(self, n: int, /) -> bytes:
        try:
            return os.urandom(n)
        except OSError as exc:
            msg = f'Cannot read from the system random source: {exc}'
            raise errors.PortBackendError(msg) from exc


class ByteSequenceRandomSource(RandomSourceBase):
    """Replay a fixed byte string as "randomness".

    Deterministic, hence for tests and reproducible examples only.
    Consumes its input front to back; partial draws do not consume
    anything.  Not safe for concurrent use.

    Attributes:
        remaining:
            The number of bytes not yet consumed.

    """

    def __init__(self, data: bytes | bytearray, /) -> None:
        """Initialize the source.

        Args:
            data:
                The bytes to replay, in order.

        """
        self._data = bytes(data)
        self._pos = 0

    @property
    def remaining(self) -> int:
        """The number of bytes not yet consumed."""
        return len(self._data) - self._pos

    @override
    def _draw(self, n: int, /) -> bytes:
        if n > self.remaining:
            raise RandomSourceExhaustedError
        chunk = self._data[self._pos : self._pos + n]
        self._pos += n
        return chunk


class RandomSourceExhaustedError(errors.PortBackendError):
    """The deterministic random source has run out of bytes."""

    def __init__(self) -> None:  # noqa: D107
        super().__init__('Random source is exhausted')
