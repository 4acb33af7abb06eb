# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""The password service: the facade over validation, generation and
the entropy model.

"""  # noqa: D205

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Literal, Union, overload

from typing_extensions import TypeAlias

from passgen import (
    _internals,
    _types,
    adapters,
    entropy,
    errors,
    ports,
    randomness,
    strategies,
    strength,
    validation,
    wordlist,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from typing_extensions import Any

__all__ = ('DEFAULT_CONFIG', 'ConfigLike', 'PasswordService')

PROG_NAME = _internals.PROG_NAME

_logger = logging.getLogger(PROG_NAME)

ConfigLike: TypeAlias = Union[_types.PasswordConfig, Mapping[str, 'Any']]
"""A password configuration, as a [`PasswordConfig`][] or a mapping."""

DEFAULT_CONFIG = _types.PasswordConfig(
    type=None, length=16, iteration=1, separator='-'
)
"""Defaults for unset configuration values."""


class PasswordService:
    """Generate passwords and report their strength.

    The service validates each configuration, picks the generation
    strategy for its type and draws randomness from the injected random
    source; word-based types additionally draw from a dictionary.
    Strength reports come from the entropy model and never consume
    randomness.

    Adapters are checked against their port's capability descriptor
    once, at construction time.  Word-based requests go to the
    dictionary adapter itself (its `count` and `select_random`
    methods); the adapter is responsible for loading its word list
    only once.

    Diceware passphrases are only generated from a dedicated diceware
    dictionary of exactly
    [`DICEWARE_WORD_COUNT`][passgen.wordlist.DICEWARE_WORD_COUNT]
    words.  There is no fallback to the general dictionary.

    Attributes:
        random_source:
            The random source.
        dictionary:
            The dictionary for memorable passphrases and honeywords.
        diceware_dictionary:
            The dictionary for diceware passphrases, if any.
        clock:
            The clock, for timestamps.  Not used for generation.
        logger:
            The logger.
        storage:
            The storage, for audit trails.  Not used for generation.

    """

    def __init__(  # noqa: PLR0913
        self,
        random_source: ports.RandomSource | None = None,
        dictionary: ports.Dictionary | None = None,
        *,
        diceware_dictionary: ports.Dictionary | None = None,
        clock: ports.Clock | None = None,
        logger: ports.Logger | None = None,
        storage: ports.Storage | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            random_source:
                The random source.  Defaults to
                [`SystemRandomSource`][passgen.randomness.SystemRandomSource].
            dictionary:
                The dictionary for memorable passphrases and
                honeywords.  Defaults to the built-in word list.
            diceware_dictionary:
                The dictionary for diceware passphrases.  If unset,
                diceware passphrases are refused.
            clock:
                The clock.  Defaults to the system clock.
            logger:
                The logger.  Defaults to the `passgen` logger.
            storage:
                The storage.  Defaults to in-memory storage.

        Raises:
            passgen.errors.PortContractError:
                An adapter lacks some required capability.

        """
        self.random_source = ports.check_port(
            'random_source',
            random_source
            if random_source is not None
            else randomness.SystemRandomSource(),
        )
        self.dictionary = ports.check_port(
            'dictionary',
            dictionary
            if dictionary is not None
            else wordlist.MemoryDictionary(wordlist.DEFAULT_WORD_LIST),
        )
        self.diceware_dictionary = (
            ports.check_port('dictionary', diceware_dictionary)
            if diceware_dictionary is not None
            else None
        )
        self.clock = ports.check_port(
            'clock', clock if clock is not None else adapters.SystemClock()
        )
        self.logger = ports.check_port(
            'logger',
            logger if logger is not None else logging.getLogger(PROG_NAME),
        )
        self.storage = ports.check_port(
            'storage',
            storage if storage is not None else adapters.MemoryStorage(),
        )

    def _dictionary_for(
        self, password_type: _types.PasswordType, /
    ) -> ports.Dictionary:
        if password_type is not _types.PasswordType.DICEWARE:
            return self.dictionary
        if self.diceware_dictionary is None:
            raise errors.DicewareDictionaryError(
                None, wordlist.DICEWARE_WORD_COUNT
            )
        return self.diceware_dictionary

    def _checked_dictionary(
        self, password_type: _types.PasswordType, /
    ) -> tuple[ports.Dictionary, int]:
        dictionary = self._dictionary_for(password_type)
        size = dictionary.count()
        if (
            password_type is _types.PasswordType.DICEWARE
            and size != wordlist.DICEWARE_WORD_COUNT
        ):
            raise errors.DicewareDictionaryError(
                size, wordlist.DICEWARE_WORD_COUNT
            )
        return dictionary, size

    def dictionary_size(self, password_type: object, /) -> int:
        """Return the size of the dictionary used for a word type.

        Asks the dictionary adapter, which loads its words if
        necessary.

        Raises:
            passgen.errors.UnknownTypeError:
                The type is not registered.
            passgen.errors.DicewareDictionaryError:
                Diceware was requested, but no diceware dictionary is
                configured.
            passgen.errors.PortBackendError:
                The dictionary failed to load.

        """
        return self._dictionary_for(self._resolve_type(password_type)).count()

    @staticmethod
    def _resolve_type(password_type: object, /) -> _types.PasswordType:
        try:
            return _types.PasswordType(password_type)
        except ValueError:
            raise errors.UnknownTypeError(
                password_type, _types.PasswordType.tags()
            ) from None

    @staticmethod
    def resolve_config(config: ConfigLike, /) -> _types.PasswordConfig:
        """Fill in defaults for unset configuration values.

        The defaults are a length of 16, one iteration and `-` as the
        separator; pronounceable passwords default to no separator.
        Set values are kept as they are, valid or not.

        Args:
            config:
                The configuration.

        Returns:
            The configuration, with defaults applied.

        Examples:
            >>> PasswordService.resolve_config({'type': 'strong'})
            ... # doctest: +NORMALIZE_WHITESPACE
            PasswordConfig(type='strong', length=16, iteration=1,
                           separator='-', charset=None, template=None)
            >>> PasswordService.resolve_config(
            ...     {'type': 'pronounceable', 'iteration': 3}
            ... ).separator
            ''

        """
        if isinstance(config, Mapping):
            config = _types.PasswordConfig.from_mapping(config)
        separator = config.separator
        if separator is None:
            separator = (
                ''
                if config.type_tag == _types.PasswordType.PRONOUNCEABLE.value
                else DEFAULT_CONFIG.separator
            )
        return config._replace(
            length=(
                config.length
                if config.length is not None
                else DEFAULT_CONFIG.length
            ),
            iteration=(
                config.iteration
                if config.iteration is not None
                else DEFAULT_CONFIG.iteration
            ),
            separator=separator,
        )

    @overload
    def generate(  # pragma: no cover
        self,
        config: ConfigLike,
        /,
        *,
        include_entropy: Literal[False] = False,
    ) -> str: ...

    @overload
    def generate(  # pragma: no cover
        self,
        config: ConfigLike,
        /,
        *,
        include_entropy: Literal[True],
    ) -> _types.GenerationResult: ...

    def generate(
        self,
        config: ConfigLike,
        /,
        *,
        include_entropy: bool = False,
    ) -> str | _types.GenerationResult:
        """Generate a password.

        Validation happens before any randomness is drawn.

        Args:
            config:
                The configuration.  Unset values take their defaults;
                see [`resolve_config`][].
            include_entropy:
                If true, return the password together with its entropy,
                security level and metadata, instead of the bare
                password.

        Returns:
            The password, or a
            [`GenerationResult`][passgen._types.GenerationResult] if
            `include_entropy` is true.

        Raises:
            passgen.errors.UnknownTypeError:
                The type is not registered.
            passgen.errors.EntropyDeficitError:
                A quantum-resistant configuration falls below 256 bits.
            passgen.errors.DicewareDictionaryError:
                Diceware was requested without a diceware dictionary
                of the standard size.
            passgen.errors.ArgumentError:
                The configuration is invalid otherwise.
            passgen.errors.EmptyDictionaryError:
                The dictionary for a word-based type is empty.
            passgen.errors.PortBackendError:
                A port failed.  Never retried.

        """
        resolved = validation.ensure_valid(self._prepare(config))
        password_type = self._resolve_type(resolved.type)
        strategy = strategies.strategy_for(password_type)
        dictionary: ports.Dictionary | None = None
        dictionary_size: int | None = None
        if password_type.family is _types.StrategyFamily.WORDS:
            dictionary, dictionary_size = self._checked_dictionary(
                password_type
            )
        _logger.debug(
            'Generating %s password (length=%r, iteration=%r)',
            password_type.value,
            resolved.length if password_type.requires_length else None,
            resolved.iteration,
        )
        password = strategy.generate(
            resolved,
            random_source=self.random_source,
            dictionary=dictionary,
        )
        if not include_entropy:
            return password
        report = entropy.entropy_report(
            resolved, dictionary_size=dictionary_size
        )
        return _types.GenerationResult(
            password=password,
            entropy=round(report.total_bits, 2),
            security_level=report.security_level,
            metadata=_types.GenerationMetadata(
                type=password_type.value,
                length=len(password),
                config=resolved,
                generated_at=self.clock.now(),
            ),
        )

    def generate_multiple(self, configs: Iterable[ConfigLike], /) -> list[str]:
        """Generate several passwords, in order.

        Configurations are processed one at a time.  If any of them
        fails, the whole call fails and no passwords are returned.

        Args:
            configs:
                The configurations.

        Returns:
            The passwords, in the order of `configs`.

        Raises:
            passgen.errors.PassgenError:
                Any error raised by [`generate`][] for any of the
                configurations.

        """
        results: list[str] = []
        for config in configs:
            results.append(self.generate(config))  # noqa: PERF401
        return results

    def calculate_entropy(self, config: ConfigLike, /) -> _types.EntropyReport:
        """Report the strength of a configuration.

        The configuration is validated like for [`generate`][], except
        that quantum-resistant configurations below the entropy floor
        are reported (as weak) rather than refused.  No randomness is
        drawn and no strategy is invoked.  Word-based types ask their
        dictionary for its size.

        Raises:
            passgen.errors.UnknownTypeError:
                The type is not registered.
            passgen.errors.DicewareDictionaryError:
                Diceware was requested without a diceware dictionary
                of the standard size.
            passgen.errors.ArgumentError:
                The configuration is invalid otherwise.

        """
        resolved = validation.ensure_valid(self._prepare(config))
        password_type = self._resolve_type(resolved.type)
        dictionary_size = (
            self._checked_dictionary(password_type)[1]
            if password_type.family is _types.StrategyFamily.WORDS
            else None
        )
        return entropy.entropy_report(
            resolved, dictionary_size=dictionary_size
        )

    @staticmethod
    def analyze_strength(password: str, /) -> strength.StrengthAnalysis:
        """Analyze the strength of an existing password.

        See [`passgen.strength.analyze_password_strength`][].

        """
        return strength.analyze_password_strength(password)

    def validate_config(self, config: Any, /) -> _types.ValidationResult:  # noqa: ANN401
        """Validate a configuration, collecting all problems.

        Unset values take their defaults first.  Never raises.

        """
        return validation.validate_config(self._prepare(config))

    @staticmethod
    def get_supported_types() -> list[str]:
        """Return the sorted list of supported type tags.

        The list is a fresh copy on every call.

        Examples:
            >>> PasswordService.get_supported_types()[:3]
            ['base64', 'custom', 'diceware']

        """
        return _types.PasswordType.tags()

    def self_check(self) -> _types.SelfCheckResult:
        """Run the random source's uniformity self-check.

        Raises:
            NotImplementedError:
                The random source offers no self-check.
            passgen.errors.PortBackendError:
                The random source failed.

        """
        check = getattr(self.random_source, 'self_check', None)
        if not callable(check):
            msg = f'{type(self.random_source).__name__} has no self-check'
            raise NotImplementedError(msg)
        return check()

    def _prepare(self, config: object, /) -> object:
        if isinstance(config, (_types.PasswordConfig, Mapping)):
            return self.resolve_config(config)
        return config
