# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Generation strategies: one algorithm per password type.

The set of password types is closed (see
[`PasswordType`][passgen._types.PasswordType]), and
[`strategy_for`][] maps each type to its strategy exhaustively.  Every
strategy checks the configuration before drawing any randomness, so
a rejected configuration leaves the random stream untouched.

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from typing_extensions import assert_never, override

from passgen import _internals, _types, charsets, entropy, errors, template

if TYPE_CHECKING:
    from passgen import ports

__all__ = (
    'ChunkedCharsetStrategy',
    'GenerationStrategy',
    'QuantumResistantStrategy',
    'SyllableStrategy',
    'TemplateStrategy',
    'WordStrategy',
    'strategy_for',
    'title_case',
)

PROG_NAME = _internals.PROG_NAME


class GenerationStrategy(Protocol):
    """The algorithm turning a configuration into a password."""

    def generate(
        self,
        config: _types.PasswordConfig,
        /,
        *,
        random_source: ports.RandomSource,
        dictionary: ports.Dictionary | None = None,
    ) -> str:
        """Generate a password.

        Args:
            config:
                The (resolved, validated) configuration.  An unset
                separator counts as the empty string.
            random_source:
                The source of randomness.
            dictionary:
                The word list, for word-based strategies.

        Raises:
            passgen.errors.ArgumentError:
                The configuration is unsuitable for this strategy.
            passgen.errors.PortBackendError:
                A port failed.

        """


def _check_positive(config: _types.PasswordConfig, *names: str) -> None:
    for name in names:
        value = getattr(config, name)
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise errors.ArgumentError.not_a_positive_integer(name)


def _separator(config: _types.PasswordConfig, /) -> str:
    return config.separator if config.separator is not None else ''


def title_case(word: str, /) -> str:
    """Capitalize each space-separated part of `word`.

    The first character of each part is uppercased, the rest
    lowercased.  Runs of spaces are kept as they are.

    Examples:
        >>> title_case('aBSURD')
        'Absurd'
        >>> title_case('ice cream')
        'Ice Cream'
        >>> title_case('')
        ''

    """
    return ' '.join(
        part[:1].upper() + part[1:].lower() for part in word.split(' ')
    )


class ChunkedCharsetStrategy:
    """Fixed-length chunks drawn uniformly from a character set.

    Produces `iteration` chunks of exactly `length` characters each,
    joined by the separator.

    """

    def __init__(self, charset: str | None = None, /) -> None:
        """Initialize the strategy.

        Args:
            charset:
                The character set.  If `None`, use the configuration's
                `charset` instead (for custom character sets).

        """
        self.charset = charset

    def _charset_for(self, config: _types.PasswordConfig, /) -> str:
        charset = self.charset if self.charset is not None else config.charset
        if not charset:
            raise errors.ArgumentError('Character set must not be empty')
        return charset

    def check(self, config: _types.PasswordConfig, /) -> None:
        """Check the configuration before any randomness is drawn.

        Raises:
            passgen.errors.ArgumentError:
                The length or iteration count is not a positive
                integer, or the character set is empty.

        """
        _check_positive(config, 'length', 'iteration')
        self._charset_for(config)

    def generate(
        self,
        config: _types.PasswordConfig,
        /,
        *,
        random_source: ports.RandomSource,
        dictionary: ports.Dictionary | None = None,
    ) -> str:
        """Generate a chunked password.  See [`GenerationStrategy`][]."""
        del dictionary
        self.check(config)
        charset = self._charset_for(config)
        assert config.length is not None
        chunks = [
            random_source.random_string(config.length, charset)
            for _ in range(config.iteration)
        ]
        return _separator(config).join(chunks)


class QuantumResistantStrategy(ChunkedCharsetStrategy):
    """Chunks over printable ASCII, with an entropy floor of 256 bits.

    Rather than silently producing a weaker password, configurations
    below the floor are refused.

    """

    def __init__(self) -> None:  # noqa: D107
        super().__init__(charsets.PRINTABLE_ASCII_CHARSET)

    @override
    def check(self, config: _types.PasswordConfig, /) -> None:
        """Check the configuration before any randomness is drawn.

        Raises:
            passgen.errors.ArgumentError:
                The length or iteration count is not a positive
                integer.
            passgen.errors.EntropyDeficitError:
                The configuration falls below the entropy floor.

        """
        super().check(config)
        assert config.length is not None
        bits = entropy.chunked_bits(
            config.length,
            config.iteration,
            len(charsets.PRINTABLE_ASCII_CHARSET),
        )
        if bits < entropy.QUANTUM_ENTROPY_TARGET_BITS:
            raise errors.EntropyDeficitError(
                bits, entropy.QUANTUM_ENTROPY_TARGET_BITS
            )


class WordStrategy:
    """Title-cased dictionary words, joined by the separator.

    Used for memorable passphrases, diceware passphrases and honeywords
    alike; they differ only in the dictionary supplied.  Honeywords are
    indistinguishable from real passwords; keeping track of which
    password is real is up to the caller.

    """

    def generate(  # noqa: PLR6301
        self,
        config: _types.PasswordConfig,
        /,
        *,
        random_source: ports.RandomSource,
        dictionary: ports.Dictionary | None = None,
    ) -> str:
        """Generate a word-based password.  See [`GenerationStrategy`][].

        Raises:
            passgen.errors.EmptyDictionaryError:
                The dictionary is empty.

        """
        _check_positive(config, 'iteration')
        if dictionary is None:
            msg = 'Word-based passwords require a dictionary'
            raise errors.ArgumentError(msg)
        if dictionary.count() == 0:
            raise errors.EmptyDictionaryError
        words = [
            title_case(dictionary.select_random(random_source.random_int))
            for _ in range(config.iteration)
        ]
        return _separator(config).join(words)


class SyllableStrategy:
    """Pronounceable consonant-vowel-consonant syllables."""

    def generate(  # noqa: PLR6301
        self,
        config: _types.PasswordConfig,
        /,
        *,
        random_source: ports.RandomSource,
        dictionary: ports.Dictionary | None = None,
    ) -> str:
        """Generate a pronounceable password.  See [`GenerationStrategy`][]."""
        del dictionary
        _check_positive(config, 'iteration')
        consonants = charsets.CONSONANTS
        vowels = charsets.VOWELS
        syllables: list[str] = []
        for _ in range(config.iteration):
            first = consonants[random_source.random_int(len(consonants))]
            vowel = vowels[random_source.random_int(len(vowels))]
            last = consonants[random_source.random_int(len(consonants))]
            syllables.append(first + vowel + last)
        return _separator(config).join(syllables)


class TemplateStrategy:
    """Expansions of a template, joined by the separator.

    See [`passgen.template`][] for the template syntax.

    """

    def generate(  # noqa: PLR6301
        self,
        config: _types.PasswordConfig,
        /,
        *,
        random_source: ports.RandomSource,
        dictionary: ports.Dictionary | None = None,
    ) -> str:
        """Generate a password from a template.  See [`GenerationStrategy`][].

        Raises:
            passgen.errors.ArgumentError:
                The template is missing, malformed, or too weak.

        """
        del dictionary
        _check_positive(config, 'iteration')
        problems = template.template_problems(config.template)
        if problems:
            raise errors.ArgumentError(*problems)
        assert config.template is not None
        instructions = template.parse_template(config.template)
        return _separator(config).join(
            template.expand_template(instructions, random_source.random_int)
            for _ in range(config.iteration)
        )


_BASE64 = ChunkedCharsetStrategy(charsets.BASE64_CHARSET)
_CUSTOM = ChunkedCharsetStrategy()
_QUANTUM_RESISTANT = QuantumResistantStrategy()
_WORDS = WordStrategy()
_SYLLABLES = SyllableStrategy()
_TEMPLATE = TemplateStrategy()


def strategy_for(password_type: object, /) -> GenerationStrategy:
    """Return the generation strategy for a password type.

    Args:
        password_type:
            A [`PasswordType`][passgen._types.PasswordType], or its
            string value.

    Raises:
        passgen.errors.UnknownTypeError:
            The type is not registered.

    Examples:
        >>> isinstance(strategy_for('diceware'), WordStrategy)
        True
        >>> strategy_for('bogus')  # doctest: +ELLIPSIS
        Traceback (most recent call last):
            ...
        passgen.errors.UnknownTypeError: Unknown password type: "bogus". Valid types: base64, custom, ...

    """
    try:
        tag = _types.PasswordType(password_type)
    except ValueError:
        raise errors.UnknownTypeError(
            password_type, _types.PasswordType.tags()
        ) from None
    logging.getLogger(PROG_NAME).debug('Using %s strategy', tag.value)
    if tag is _types.PasswordType.STRONG or tag is _types.PasswordType.BASE64:
        return _BASE64
    elif tag is _types.PasswordType.CUSTOM:  # noqa: RET505
        return _CUSTOM
    elif tag is _types.PasswordType.QUANTUM_RESISTANT:
        return _QUANTUM_RESISTANT
    elif (
        tag is _types.PasswordType.MEMORABLE
        or tag is _types.PasswordType.DICEWARE
        or tag is _types.PasswordType.HONEYWORD
    ):
        return _WORDS
    elif tag is _types.PasswordType.PRONOUNCEABLE:
        return _SYLLABLES
    elif tag is _types.PasswordType.TEMPLATE:
        return _TEMPLATE
    else:  # pragma: no cover [failsafe]
        assert_never(tag)
