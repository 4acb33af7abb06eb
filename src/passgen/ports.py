# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Capability contracts ("ports") consumed by the password service.

Each port is a structural [`typing.Protocol`][]: any object with the
right methods satisfies it, and a static type checker verifies this at
the call site.  Adapters registered at runtime (e.g., chosen on the
command-line) are additionally checked once, via [`check_port`][],
against the capability descriptors in [`CAPABILITIES`][].  The check
never runs during generation.

"""

from __future__ import annotations

import types
from typing import TYPE_CHECKING, Callable, Protocol, TypeVar

from passgen import errors

if TYPE_CHECKING:
    import datetime
    from collections.abc import Mapping, Sequence

    from passgen import _types

__all__ = (
    'CAPABILITIES',
    'AppendableStorage',
    'Clock',
    'Dictionary',
    'Logger',
    'RandomSource',
    'Storage',
    'check_port',
)

T = TypeVar('T')


class RandomSource(Protocol):
    """A source of cryptographically secure randomness.

    Implementations must be safe to call repeatedly without external
    synchronization, and must not retain mutable state across calls
    (except for deterministic test doubles).

    """

    def random_bytes(self, n: int, /) -> bytes:
        """Return `n` random bytes.

        Raises:
            passgen.errors.ArgumentError:
                `n` is not a positive integer.
            passgen.errors.PortBackendError:
                The underlying entropy source failed.

        """

    def random_int(self, max: int, /) -> int:  # noqa: A002
        """Return a uniformly distributed integer in `range(max)`.

        Must not be biased towards low values; use rejection sampling.

        Raises:
            passgen.errors.ArgumentError:
                `max` is not a positive integer.
            passgen.errors.PortBackendError:
                The underlying entropy source failed.

        """

    def random_string(self, length: int, charset: str, /) -> str:
        """Return `length` characters drawn uniformly from `charset`.

        Raises:
            passgen.errors.ArgumentError:
                `length` is not a positive integer, or `charset` is
                empty.
            passgen.errors.PortBackendError:
                The underlying entropy source failed.

        """


class SelfCheckingRandomSource(RandomSource, Protocol):
    """A random source offering a uniformity self-check."""

    def self_check(self) -> _types.SelfCheckResult:
        """Run a statistical uniformity test on the byte stream."""


class Dictionary(Protocol):
    """A word list.

    The service calls [`count`][] and [`select_random`][] directly, for
    every request.  Loading the word list at most once, and keeping the
    words stable afterwards, is up to the adapter.

    """

    def load(self) -> Sequence[str]:
        """Return the words, loading them on the first call only.

        Raises:
            passgen.errors.PortBackendError:
                The word list could not be loaded.

        """

    def count(self) -> int:
        """Return the number of words, loading them if necessary.

        Raises:
            passgen.errors.PortBackendError:
                The word list could not be loaded.

        """

    def select_random(self, random_int: Callable[[int], int], /) -> str:
        """Return `words[random_int(count())]`.

        Raises:
            passgen.errors.EmptyDictionaryError:
                The dictionary is empty.

        """


class Clock(Protocol):
    """A source of timestamps.  Never used for generation."""

    def now(self) -> datetime.datetime:
        """Return the current time, timezone-aware."""


class Logger(Protocol):
    """A logger.  Any [`logging.Logger`][] qualifies."""

    def info(self, msg: object, /, *args: object, **kwargs: object) -> None:
        """Log an informational message."""

    def warning(
        self, msg: object, /, *args: object, **kwargs: object
    ) -> None:
        """Log a warning."""

    def error(self, msg: object, /, *args: object, **kwargs: object) -> None:
        """Log an error."""


class Storage(Protocol):
    """A simple key-value text store, used by the audit trail only."""

    def read(self, key: str, /) -> str | None:
        """Return the value stored under `key`, or `None`."""

    def write(self, key: str, value: str, /) -> None:
        """Store `value` under `key`, replacing any previous value."""


class AppendableStorage(Storage, Protocol):
    """A key-value text store that can append to a value in place."""

    def append(self, key: str, value: str, /) -> None:
        """Append `value` to the value stored under `key`.

        A missing value counts as empty.  If the stored value does not
        end in a newline, one is inserted first.  The stored value is
        never rewritten, only extended.

        """


CAPABILITIES: Mapping[str, frozenset[str]] = types.MappingProxyType({
    'random_source': frozenset({
        'random_bytes',
        'random_int',
        'random_string',
    }),
    'dictionary': frozenset({'load', 'count', 'select_random'}),
    'clock': frozenset({'now'}),
    'logger': frozenset({'info', 'warning', 'error'}),
    'storage': frozenset({'read', 'write'}),
})
"""The required method names of each port."""


def check_port(port_name: str, adapter: T, /) -> T:
    """Check that `adapter` provides every capability of a port.

    Args:
        port_name:
            The port name, a key of [`CAPABILITIES`][].
        adapter:
            The adapter to check.

    Returns:
        The adapter, unchanged.

    Raises:
        passgen.errors.PortContractError:
            The port name is unknown, or the adapter lacks some
            required methods.

    Examples:
        >>> class Stopped:
        ...     def now(self):
        ...         return None
        >>> isinstance(check_port('clock', Stopped()), Stopped)
        True
        >>> check_port('storage', Stopped())
        Traceback (most recent call last):
            ...
        passgen.errors.PortContractError: storage: Missing required methods for Stopped: read, write

    """
    try:
        required = CAPABILITIES[port_name]
    except KeyError:
        raise errors.PortContractError(port_name, ()) from None
    missing = [
        name
        for name in required
        if not callable(getattr(adapter, name, None))
    ]
    if missing:
        raise errors.PortContractError(port_name, missing, adapter=adapter)
    return adapter
