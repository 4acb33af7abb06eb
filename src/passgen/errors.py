# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Exceptions raised by passgen.

All exceptions derive from [`PassgenError`][], and additionally from
the closest built-in exception class, so callers not interested in the
finer distinctions may catch [`ValueError`][], [`TypeError`][],
[`RuntimeError`][] or [`LookupError`][] instead.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

__all__ = (
    'ArgumentError',
    'DicewareDictionaryError',
    'EmptyDictionaryError',
    'EntropyDeficitError',
    'PassgenError',
    'PortBackendError',
    'PortContractError',
    'UnknownTypeError',
)
__author__ = 'Marco Ricci <software@the13thletter.info>'


class PassgenError(Exception):
    """Base class for all passgen errors."""


class ArgumentError(PassgenError, ValueError):
    """An argument or a password configuration is malformed.

    Attributes:
        errors:
            The individual problems found, in the order they were
            detected.  Contains at least the exception message.

    """

    def __init__(self, *errors: str) -> None:
        """Initialize the error.

        Args:
            errors:
                One or more problem descriptions.  The exception message
                is their concatenation.

        """
        self.errors: list[str] = list(errors)
        super().__init__('; '.join(errors))

    @classmethod
    def not_a_positive_integer(cls, name: str, /) -> ArgumentError:
        """Return the error for a non-positive or non-integer argument."""
        return cls(f'The {name} argument must be a positive integer')


class UnknownTypeError(ArgumentError):
    """The password type is not registered.

    Attributes:
        type_tag:
            The offending type tag.
        valid_types:
            The sorted list of valid type tags.

    """

    def __init__(
        self, type_tag: object, valid_types: Iterable[str], /
    ) -> None:
        self.type_tag = type_tag
        self.valid_types = sorted(valid_types)
        super().__init__(
            f'Unknown password type: "{type_tag}". '
            f'Valid types: {", ".join(self.valid_types)}'
        )


class PortContractError(PassgenError, TypeError):
    """An adapter does not provide all capabilities of its port.

    Attributes:
        port_name:
            The name of the port the adapter was registered for.
        missing:
            The sorted names of the missing methods.

    """

    def __init__(
        self,
        port_name: str,
        missing: Sequence[str],
        /,
        *,
        adapter: object = None,
    ) -> None:
        self.port_name = port_name
        self.missing = sorted(missing)
        if not self.missing:
            msg = f'Unknown port: {port_name!r}'
        else:
            msg = (
                f'{port_name}: Missing required methods for '
                f'{type(adapter).__name__}: {", ".join(self.missing)}'
            )
        super().__init__(msg)


class PortBackendError(PassgenError, RuntimeError):
    """The backend of a port implementation failed.

    Raised by adapters only.  The engine propagates these errors
    unchanged and never retries.

    """


class EntropyDeficitError(ArgumentError):
    """A quantum-resistant password would fall below the entropy floor.

    Attributes:
        actual_bits:
            The entropy of the requested configuration.
        required_bits:
            The entropy floor.
        deficit:
            The difference between the two, in bits.

    """

    def __init__(self, actual_bits: float, required_bits: float, /) -> None:
        self.actual_bits = actual_bits
        self.required_bits = required_bits
        self.deficit = required_bits - actual_bits
        super().__init__(
            f'Quantum-resistant passwords require at least '
            f'{required_bits:g} bits of entropy, but this configuration '
            f'provides only {actual_bits:.1f} bits '
            f'({self.deficit:.1f} bits short)'
        )


class EmptyDictionaryError(PassgenError, LookupError):
    """A word was requested from an empty dictionary."""

    def __init__(self) -> None:  # noqa: D107
        super().__init__('Cannot select a word from an empty dictionary')


class DicewareDictionaryError(ArgumentError):
    """No diceware dictionary of the required size is available.

    Diceware passphrases are only as strong as their word list is long,
    so a missing word list, or one of the wrong size, is refused instead
    of silently falling back to a smaller list.

    Attributes:
        count:
            The size of the offending word list, or `None` if no
            diceware word list is configured.
        expected:
            The required word list size.

    """

    def __init__(self, count: int | None, expected: int, /) -> None:
        self.count = count
        self.expected = expected
        if count is None:
            msg = (
                f'Diceware passphrases require a word list of '
                f'{expected} words, but none is configured'
            )
        else:
            msg = (
                f'Invalid diceware dictionary size: {count} '
                f'(expected {expected} words)'
            )
        super().__init__(msg)
