# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Types used by passgen."""

from __future__ import annotations

import enum
import types
from typing import TYPE_CHECKING

from typing_extensions import (
    NamedTuple,
    NotRequired,
    TypedDict,
)

if TYPE_CHECKING:
    import datetime
    from collections.abc import Mapping

    from typing_extensions import Any, Self

__all__ = (
    'EntropyReport',
    'GenerationMetadata',
    'GenerationResult',
    'PasswordConfig',
    'PasswordConfigDict',
    'PasswordType',
    'Preset',
    'SecurityLevel',
    'SelfCheckResult',
    'StrategyFamily',
    'ValidationResult',
)


class StrategyFamily(enum.Enum):
    """The algorithm family of a password type.

    Attributes:
        CHUNKED:
            Fixed-length chunks drawn uniformly from a character set.
        WORDS:
            Words drawn from a dictionary, title-cased.
        SYLLABLES:
            Consonant-vowel-consonant syllables.
        TEMPLATE:
            Literal text and character set slots, following a template.

    """

    CHUNKED = enum.auto()
    """"""
    WORDS = enum.auto()
    """"""
    SYLLABLES = enum.auto()
    """"""
    TEMPLATE = enum.auto()
    """"""


class PasswordType(str, enum.Enum):
    """The closed set of supported password types.

    Attributes:
        STRONG:
            Chunks over the 64-symbol base64 alphabet.
        BASE64:
            Same algorithm and alphabet as `STRONG`.
        CUSTOM:
            Chunks over a caller-supplied character set.
        QUANTUM_RESISTANT:
            Chunks over the 94 printable ASCII characters, with an
            entropy floor of 256 bits.
        MEMORABLE:
            Title-cased dictionary words.
        DICEWARE:
            Title-cased words from the diceware dictionary.
        HONEYWORD:
            Title-cased dictionary words, for use as decoys.
        PRONOUNCEABLE:
            Consonant-vowel-consonant syllables.
        TEMPLATE:
            Expansions of a caller-supplied template such as
            `[UPPERCASE]{2}-[DIGITS]{4}`.

    """

    STRONG = 'strong'
    """"""
    BASE64 = 'base64'
    """"""
    CUSTOM = 'custom'
    """"""
    QUANTUM_RESISTANT = 'quantum-resistant'
    """"""
    MEMORABLE = 'memorable'
    """"""
    DICEWARE = 'diceware'
    """"""
    HONEYWORD = 'honeyword'
    """"""
    PRONOUNCEABLE = 'pronounceable'
    """"""
    TEMPLATE = 'template'
    """"""

    @property
    def family(self) -> StrategyFamily:
        """The algorithm family of this type."""
        if self in {
            PasswordType.MEMORABLE,
            PasswordType.DICEWARE,
            PasswordType.HONEYWORD,
        }:
            return StrategyFamily.WORDS
        if self == PasswordType.PRONOUNCEABLE:
            return StrategyFamily.SYLLABLES
        if self == PasswordType.TEMPLATE:
            return StrategyFamily.TEMPLATE
        return StrategyFamily.CHUNKED

    @property
    def requires_length(self) -> bool:
        """True if the chunk length is meaningful for this type."""
        return self.family == StrategyFamily.CHUNKED

    @classmethod
    def tags(cls) -> list[str]:
        """Return the sorted list of all type tags."""
        return sorted(member.value for member in cls)


class PasswordConfigDict(TypedDict, total=False):
    """A password configuration, in its mapping form.

    This is the form used by the command-line and by serialized data.
    See [`PasswordConfig`][] for the meaning of the keys.

    """

    type: str
    length: NotRequired[int]
    iteration: NotRequired[int]
    separator: NotRequired[str]
    charset: NotRequired[str]
    template: NotRequired[str]


class PasswordConfig(NamedTuple):
    """A request to generate one password.

    Immutable and ephemeral: construct one per request.

    Attributes:
        type:
            The password type tag.  Either a [`PasswordType`][] or its
            string value.
        length:
            The chunk length.  Only meaningful for chunked types.  If
            unset, the service default applies.
        iteration:
            The number of chunks, words or syllables.
        separator:
            The string joining chunks, words or syllables.  If unset,
            the service default for the type applies.
        charset:
            The character set for the `custom` type.  Ignored
            otherwise.
        template:
            The template for the `template` type.  Ignored otherwise.

    """

    type: PasswordType | str | None
    """"""
    length: int | None = None
    """"""
    iteration: int = 1
    """"""
    separator: str | None = None
    """"""
    charset: str | None = None
    """"""
    template: str | None = None
    """"""

    @classmethod
    def from_mapping(cls, obj: Mapping[str, Any], /) -> Self:
        """Build a configuration from its mapping form.

        Unknown keys are ignored.  Values are not validated; see
        [`passgen.validation.validate_config`][] for that.

        Examples:
            >>> PasswordConfig.from_mapping({'type': 'strong', 'length': 8})
            ... # doctest: +NORMALIZE_WHITESPACE
            PasswordConfig(type='strong', length=8, iteration=1,
                           separator=None, charset=None, template=None)

        """
        return cls(
            type=obj.get('type'),
            length=obj.get('length'),
            iteration=obj.get('iteration', 1),
            separator=obj.get('separator'),
            charset=obj.get('charset'),
            template=obj.get('template'),
        )

    @property
    def type_tag(self) -> str | None:
        """The type tag as a plain string, if set."""
        if isinstance(self.type, PasswordType):
            return self.type.value
        return self.type

    def as_dict(self) -> PasswordConfigDict:
        """Return the mapping form, omitting unset values."""
        ret: dict[str, Any] = {'type': self.type_tag}
        for key in ('length', 'iteration', 'separator', 'charset', 'template'):
            value = getattr(self, key)
            if value is not None:
                ret[key] = value
        return ret  # type: ignore[return-value]


class SecurityLevel(str, enum.Enum):
    """Security level bands, by total entropy in bits.

    Levels are totally ordered by their [`min_bits`][] attribute.

    Attributes:
        WEAK:
            Fewer than 64 bits.
        MODERATE:
            64 bits to below 80 bits.
        GOOD:
            80 bits to below 128 bits.
        STRONG:
            128 bits to below 256 bits.
        EXCELLENT:
            256 bits or more.

    """

    WEAK = 'WEAK'
    """"""
    MODERATE = 'MODERATE'
    """"""
    GOOD = 'GOOD'
    """"""
    STRONG = 'STRONG'
    """"""
    EXCELLENT = 'EXCELLENT'
    """"""

    @property
    def min_bits(self) -> int:
        """The inclusive lower bound of this band, in bits."""
        return _SECURITY_LEVEL_THRESHOLDS[self]

    @classmethod
    def from_bits(cls, bits: float, /) -> SecurityLevel:
        """Return the band that `bits` falls into.

        Examples:
            >>> SecurityLevel.from_bits(63.9).value
            'WEAK'
            >>> SecurityLevel.from_bits(80).value
            'GOOD'
            >>> SecurityLevel.from_bits(384).value
            'EXCELLENT'

        """
        ret = cls.WEAK
        for level in cls:
            if bits >= level.min_bits:
                ret = level
        return ret


_SECURITY_LEVEL_THRESHOLDS: Mapping[SecurityLevel, int] = (
    types.MappingProxyType({
        SecurityLevel.WEAK: 0,
        SecurityLevel.MODERATE: 64,
        SecurityLevel.GOOD: 80,
        SecurityLevel.STRONG: 128,
        SecurityLevel.EXCELLENT: 256,
    })
)


class EntropyReport(NamedTuple):
    """The strength of a password configuration.

    A pure function of the configuration's shape; never depends on the
    actual random draw.

    Attributes:
        total_bits:
            The total entropy, in bits.
        per_unit_bits:
            The entropy per character (chunked types), per word (word
            types), per syllable (syllable types) or per template
            expansion (template types).
        security_level:
            The security level band of `total_bits`.
        recommendation:
            A fixed advice string for the security level.

    """

    total_bits: float
    """"""
    per_unit_bits: float
    """"""
    security_level: SecurityLevel
    """"""
    recommendation: str
    """"""

    def as_dict(self) -> dict[str, Any]:
        """Return the report using the serialized key names."""
        return {
            'totalBits': self.total_bits,
            'perUnitBits': self.per_unit_bits,
            'securityLevel': self.security_level.value,
            'recommendation': self.recommendation,
        }


class GenerationMetadata(NamedTuple):
    """Details about one generated password.

    Attributes:
        type:
            The password type tag.
        length:
            The length of the generated password, in characters.
        config:
            The configuration the password was generated from, with
            all defaults applied.
        generated_at:
            The time of generation, as reported by the clock port.

    """

    type: str
    """"""
    length: int
    """"""
    config: PasswordConfig
    """"""
    generated_at: datetime.datetime
    """"""


class GenerationResult(NamedTuple):
    """A generated password, together with its strength.

    Attributes:
        password:
            The generated password.
        entropy:
            The total entropy of the configuration, in bits, rounded
            to two decimal places.
        security_level:
            The security level band of the entropy.
        metadata:
            Details about the generation.

    """

    password: str
    """"""
    entropy: float
    """"""
    security_level: SecurityLevel
    """"""
    metadata: GenerationMetadata
    """"""

    def as_dict(self) -> dict[str, Any]:
        """Return the result using the serialized key names."""
        return {
            'password': self.password,
            'entropy': self.entropy,
            'securityLevel': self.security_level.value,
            'metadata': {
                'type': self.metadata.type,
                'length': self.metadata.length,
                'config': dict(self.metadata.config.as_dict()),
                'generatedAt': isoformat_utc(self.metadata.generated_at),
            },
        }


class ValidationResult(NamedTuple):
    """The outcome of validating a password configuration.

    Attributes:
        is_valid:
            True if and only if `errors` is empty.
        errors:
            All problems found, in the order they were checked.

    """

    is_valid: bool
    """"""
    errors: list[str]
    """"""

    @classmethod
    def from_errors(cls, errors: list[str], /) -> Self:
        """Build a validation result from a list of problems."""
        return cls(is_valid=not errors, errors=list(errors))


class SelfCheckResult(NamedTuple):
    """The outcome of a chi-squared uniformity self-check.

    Attributes:
        sample_size:
            The number of bytes drawn.
        chi_squared:
            The chi-squared statistic over the 256 byte values.
        critical_value:
            The critical value the statistic was compared against.
        passed:
            True if the statistic is below the critical value.

    """

    sample_size: int
    """"""
    chi_squared: float
    """"""
    critical_value: float
    """"""
    passed: bool
    """"""


class AuditRecord(TypedDict):
    """An audit trail entry for one generated password.

    Never contains the password itself.

    """

    timestamp: str
    type: str
    length: int | None
    iteration: int
    separator: str
    entropy: float
    strength: str
    kdf: dict[str, int]


class Preset(str, enum.Enum):
    """Named configurations for the command-line.

    Attributes:
        QUICK:
            Three 12-character strong chunks, dash-separated.
        SECURE:
            Four 16-character strong chunks, unseparated.
        MEMORABLE:
            Four memorable words, dash-separated.
        QUANTUM:
            One 40-character quantum-resistant chunk (just above
            256 bits).

    """

    QUICK = 'quick'
    """"""
    SECURE = 'secure'
    """"""
    MEMORABLE = 'memorable'
    """"""
    QUANTUM = 'quantum'
    """"""

    @property
    def config(self) -> PasswordConfig:
        """The configuration this preset stands for."""
        return _PRESET_CONFIGS[self]


_PRESET_CONFIGS: Mapping[Preset, PasswordConfig] = types.MappingProxyType({
    Preset.QUICK: PasswordConfig(
        PasswordType.STRONG, length=12, iteration=3, separator='-'
    ),
    Preset.SECURE: PasswordConfig(
        PasswordType.STRONG, length=16, iteration=4, separator=''
    ),
    Preset.MEMORABLE: PasswordConfig(
        PasswordType.MEMORABLE, iteration=4, separator='-'
    ),
    Preset.QUANTUM: PasswordConfig(
        PasswordType.QUANTUM_RESISTANT, length=40, iteration=1, separator=''
    ),
})


def isoformat_utc(instant: datetime.datetime, /) -> str:
    """Format a timestamp as ISO 8601, with a `Z` suffix for UTC.

    Examples:
        >>> import datetime
        >>> isoformat_utc(
        ...     datetime.datetime(2025, 1, 2, 3, 4, 5, tzinfo=datetime.timezone.utc)
        ... )
        '2025-01-02T03:04:05.000Z'

    """
    text = instant.isoformat(timespec='milliseconds')
    if text.endswith('+00:00'):
        text = text[: -len('+00:00')] + 'Z'
    return text
