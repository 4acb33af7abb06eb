# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Strength analysis of existing passwords.

Unlike the [entropy model][passgen.entropy], which rates a
configuration by the number of passwords it can produce, the analyzer
rates one concrete password, as a human might have chosen it.  It
estimates the entropy from the character classes present, then
penalizes well-known weaknesses: sequences, keyboard walks,
repetitions, predictable substitutions, common passwords and
dictionary words.  The result is a score from 0 (very weak) to 4
(strong), with feedback for the user.

This is a heuristic.  Generated passwords should be rated with the
entropy model instead.

"""

from __future__ import annotations

import enum
import math
import re
import types
from typing import TYPE_CHECKING

from typing_extensions import NamedTuple

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

__all__ = (
    'COMMON_DICTIONARY',
    'COMMON_PASSWORDS',
    'Composition',
    'DictionaryMatch',
    'PatternMatch',
    'StrengthAnalysis',
    'StrengthFeedback',
    'StrengthScore',
    'analyze_password_strength',
)

ENTROPY_THRESHOLDS = (20, 40, 60, 80)
"""Base entropy needed for scores 1 to 4, in bits."""

MAX_ENTROPY_REDUCTION = 0.8

COMMON_PASSWORDS = frozenset({
    'password', 'password1', 'password123', '123456', '123456789',
    'qwerty', 'abc123', 'welcome', 'admin', 'letmein', 'monkey',
    'dragon', 'master', 'hello', 'freedom', 'whatever', 'qazwsx',
    'trustno1', 'jordan', 'iloveyou', 'princess', 'starwars', 'shadow',
    'superman', 'sunshine', 'michael', 'computer', 'football', 'pepper',
    'mustang', 'charlie',
})  # fmt: skip
"""Very common passwords, lowercased."""

COMMON_DICTIONARY = frozenset({
    'the', 'and', 'for', 'are', 'but', 'not', 'you', 'all', 'can', 'had',
    'her', 'was', 'one', 'our', 'out', 'day', 'get', 'has', 'him', 'his',
    'how', 'man', 'new', 'now', 'old', 'see', 'two', 'way', 'who', 'boy',
    'did', 'its', 'let', 'put', 'say', 'she', 'too', 'use', 'love',
    'time', 'very', 'when', 'come', 'here', 'just', 'like', 'long',
    'make', 'many', 'over', 'such', 'take', 'than', 'them', 'well',
    'were', 'what', 'year', 'your', 'work', 'life', 'only', 'think',
    'first', 'after', 'back', 'other', 'good', 'want', 'give',
})  # fmt: skip
"""Common English words.  Only words longer than three letters count."""

MIN_DICTIONARY_WORD_LENGTH = 4

# (name, regular expression, remaining strength factor, description)
_WEAKNESS_PATTERNS: Sequence[tuple[str, re.Pattern[str], float, str]] = (
    (
        'sequence',
        re.compile(
            '|'.join(
                s[i : i + 3]
                for s in ('abcdefghijklmnopqrstuvwxyz', '0123456789')
                for i in range(len(s) - 2)
            ),
            re.IGNORECASE,
        ),
        0.9,
        'Contains alphabetic or numeric sequences',
    ),
    (
        'reverse_sequence',
        re.compile(
            '|'.join(
                s[i : i + 3]
                for s in ('zyxwvutsrqponmlkjihgfedcba', '9876543210')
                for i in range(len(s) - 2)
            ),
            re.IGNORECASE,
        ),
        0.9,
        'Contains reverse sequences',
    ),
    (
        'keyboard_row',
        re.compile(
            '|'.join(
                s[i : i + 4]
                for s in ('qwertyuiop', 'asdfghjkl', 'zxcvbnm')
                for i in range(len(s) - 3)
            ),
            re.IGNORECASE,
        ),
        0.85,
        'Contains keyboard row patterns',
    ),
    (
        'keyboard_column',
        re.compile('qaz|wsx|edc|rfv|tgb|yhn|ujm|ik', re.IGNORECASE),
        0.85,
        'Contains keyboard column patterns',
    ),
    ('repetition', re.compile(r'(.)\1{2,}'), 0.8, 'Contains character repetition'),
    (
        'alternating',
        re.compile(r'(.)(.)(?:\1\2){2,}'),
        0.7,
        'Contains alternating patterns',
    ),
    (
        'leet_speak',
        re.compile('[4@]s|[3€]e|[1!]i|0|[5$]s|7t', re.IGNORECASE),
        0.5,
        'Uses common character substitutions',
    ),
)

_DICTIONARY_FACTORS: Mapping[str, float] = types.MappingProxyType({
    'common_passwords': 1.0,
    'english_words': 0.7,
    'reversed_words': 0.8,
})


class StrengthScore(enum.IntEnum):
    """The strength score of a password, from 0 to 4.

    Attributes:
        VERY_WEAK:
            Trivially guessable.
        WEAK:
            Guessable by an online attack.
        FAIR:
            Resists online attacks, but not offline ones.
        GOOD:
            Resists most offline attacks.
        STRONG:
            Resists offline attacks.

    """

    VERY_WEAK = 0
    """"""
    WEAK = 1
    """"""
    FAIR = 2
    """"""
    GOOD = 3
    """"""
    STRONG = 4
    """"""

    @property
    def label(self) -> str:
        """A human-readable label, such as `Very Weak`."""
        return self.name.replace('_', ' ').title()


class PatternMatch(NamedTuple):
    """A weakness pattern found in a password.

    Attributes:
        pattern:
            The pattern name, such as `sequence` or `keyboard_row`.
        matches:
            The matching substrings, in order.
        factor:
            The fraction of strength remaining despite the pattern.
            Lower factors weigh more heavily.
        description:
            A description of the weakness.

    """

    pattern: str
    """"""
    matches: list[str]
    """"""
    factor: float
    """"""
    description: str
    """"""


class DictionaryMatch(NamedTuple):
    """A password, or part of one, found in a word list.

    Attributes:
        dictionary:
            `common_passwords`, `english_words` or `reversed_words`.
        word:
            The matching word, as found in the password.
        factor:
            The fraction of strength remaining despite the match.
        description:
            A description of the weakness.

    """

    dictionary: str
    """"""
    word: str
    """"""
    factor: float
    """"""
    description: str
    """"""


class Composition(NamedTuple):
    """The character classes of a password, and its base entropy.

    The base entropy assumes each character was drawn uniformly from
    the union of the character classes present: 26 lowercase letters,
    26 uppercase letters, 10 digits and (roughly) 32 symbols.

    """

    length: int
    """"""
    has_lowercase: bool
    """"""
    has_uppercase: bool
    """"""
    has_numbers: bool
    """"""
    has_symbols: bool
    """"""
    unique_characters: int
    """"""
    charset_size: int
    """"""
    entropy: float
    """"""


class StrengthFeedback(NamedTuple):
    """Advice for the user.

    Attributes:
        warning:
            The most pressing problem, if any.
        suggestions:
            Concrete changes to the password.
        recommendations:
            General advice, for weak passwords only.

    """

    warning: str | None
    """"""
    suggestions: list[str]
    """"""
    recommendations: list[str]
    """"""


class StrengthAnalysis(NamedTuple):
    """The result of [`analyze_password_strength`][].

    Attributes:
        score:
            The strength score.
        entropy:
            The effective entropy, after penalties, rounded to two
            decimal places.
        base_entropy:
            The entropy before penalties.  See [`Composition`][].
        feedback:
            Advice for the user.
        patterns:
            The weakness patterns found.
        dictionaries:
            The dictionary matches found.
        composition:
            The character class analysis.  `None` for an empty
            password.

    """

    score: StrengthScore
    """"""
    entropy: float
    """"""
    base_entropy: float
    """"""
    feedback: StrengthFeedback
    """"""
    patterns: list[PatternMatch]
    """"""
    dictionaries: list[DictionaryMatch]
    """"""
    composition: Composition | None
    """"""

    @property
    def label(self) -> str:
        """The human-readable label of the score."""
        return self.score.label

    @property
    def is_common_password(self) -> bool:
        """True if the password is a very common one."""
        return any(d.dictionary == 'common_passwords' for d in self.dictionaries)


def detect_weakness_patterns(password: str, /) -> list[PatternMatch]:
    """Return the weakness patterns found in `password`.

    Examples:
        >>> [p.pattern for p in detect_weakness_patterns('abc111')]
        ['sequence', 'repetition']

    """
    found: list[PatternMatch] = []
    for name, regex, factor, description in _WEAKNESS_PATTERNS:
        matches = [m.group(0) for m in regex.finditer(password)]
        if matches:
            found.append(PatternMatch(name, matches, factor, description))
    return found


def check_dictionary_weakness(password: str, /) -> list[DictionaryMatch]:
    """Return the dictionary matches for `password`.

    The whole password is looked up (case-insensitively) in the
    [common passwords][COMMON_PASSWORDS].  Each run of letters is
    looked up, forwards and backwards, in the
    [common dictionary][COMMON_DICTIONARY].

    Examples:
        >>> [(d.dictionary, d.word) for d in check_dictionary_weakness('Love-emit')]
        [('english_words', 'love'), ('reversed_words', 'emit')]

    """
    found: list[DictionaryMatch] = []
    lowered = password.lower()
    if lowered in COMMON_PASSWORDS:
        found.append(
            DictionaryMatch(
                'common_passwords',
                password,
                _DICTIONARY_FACTORS['common_passwords'],
                'Found in common passwords list',
            )
        )
    words = re.split('[^a-z]', lowered)
    found.extend(
        DictionaryMatch(
            'english_words',
            word,
            _DICTIONARY_FACTORS['english_words'],
            f'Contains dictionary word: {word}',
        )
        for word in words
        if len(word) >= MIN_DICTIONARY_WORD_LENGTH
        and word in COMMON_DICTIONARY
    )
    found.extend(
        DictionaryMatch(
            'reversed_words',
            word,
            _DICTIONARY_FACTORS['reversed_words'],
            f'Contains reversed dictionary word: {word[::-1]}',
        )
        for word in words
        if len(word) >= MIN_DICTIONARY_WORD_LENGTH
        and word[::-1] in COMMON_DICTIONARY
    )
    return found


def analyze_composition(password: str, /) -> Composition:
    """Return the character class analysis of `password`.

    Examples:
        >>> c = analyze_composition('aB3')
        >>> c.charset_size, round(c.entropy, 2)
        (62, 17.86)

    """
    has_lowercase = re.search('[a-z]', password) is not None
    has_uppercase = re.search('[A-Z]', password) is not None
    has_numbers = re.search('[0-9]', password) is not None
    has_symbols = re.search('[^a-zA-Z0-9]', password) is not None
    size = (
        26 * has_lowercase
        + 26 * has_uppercase
        + 10 * has_numbers
        + 32 * has_symbols
    )
    return Composition(
        length=len(password),
        has_lowercase=has_lowercase,
        has_uppercase=has_uppercase,
        has_numbers=has_numbers,
        has_symbols=has_symbols,
        unique_characters=len(set(password)),
        charset_size=size,
        entropy=math.log2(size) * len(password) if size else 0.0,
    )


def _pattern_penalty(patterns: Sequence[PatternMatch], /) -> float:
    return sum(1 - p.factor for p in patterns)


def strength_score(
    composition: Composition,
    patterns: Sequence[PatternMatch],
    dictionaries: Sequence[DictionaryMatch],
) -> StrengthScore:
    """Score a password from its analysis results.

    The base score counts the [entropy thresholds][ENTROPY_THRESHOLDS]
    reached.  Common passwords score 0 outright.  Any other dictionary
    match costs two points, and every full point of accumulated
    pattern penalty (one minus the factor) costs half a point, rounded
    down.

    """
    score = 0
    for i, threshold in enumerate(ENTROPY_THRESHOLDS):
        if composition.entropy < threshold:
            break
        score = i + 1
    if any(d.dictionary == 'common_passwords' for d in dictionaries):
        return StrengthScore.VERY_WEAK
    if dictionaries:
        score = max(0, score - 2)
    score = max(0, score - math.floor(_pattern_penalty(patterns) / 2))
    return StrengthScore(min(score, StrengthScore.STRONG))


def effective_entropy(
    composition: Composition,
    patterns: Sequence[PatternMatch],
    dictionaries: Sequence[DictionaryMatch],
) -> float:
    """Reduce the base entropy by the weaknesses found.

    Each pattern reduces the entropy by a fifth of its penalty, and
    each dictionary match by a tenth, up to a total reduction of 80%.
    Common passwords have an effective entropy of 1 bit.

    """
    if any(d.dictionary == 'common_passwords' for d in dictionaries):
        return 1.0
    reduction = min(
        MAX_ENTROPY_REDUCTION,
        _pattern_penalty(patterns) * 0.2 + len(dictionaries) * 0.1,
    )
    return composition.entropy * (1 - reduction)


def strength_feedback(
    score: StrengthScore,
    patterns: Sequence[PatternMatch],
    dictionaries: Sequence[DictionaryMatch],
    composition: Composition,
) -> StrengthFeedback:
    """Assemble the user advice for an analyzed password."""
    suggestions: list[str] = []
    recommendations: list[str] = []
    warning: str | None = None
    if composition.length < 8:  # noqa: PLR2004
        suggestions.append('Use at least 8 characters')
    elif composition.length < 12:  # noqa: PLR2004
        suggestions.append(
            'Consider using 12 or more characters for better security'
        )
    if not composition.has_lowercase:
        suggestions.append('Add lowercase letters')
    if not composition.has_uppercase:
        suggestions.append('Add uppercase letters')
    if not composition.has_numbers:
        suggestions.append('Add numbers')
    if not composition.has_symbols:
        suggestions.append('Add symbols')
    names = {p.pattern for p in patterns}
    if names & {'sequence', 'reverse_sequence'}:
        suggestions.append('Avoid sequences (e.g., abc, 123)')
    if names & {'keyboard_row', 'keyboard_column'}:
        suggestions.append('Avoid keyboard patterns (e.g., qwerty, asdf)')
    if 'repetition' in names:
        suggestions.append('Avoid repeated characters (e.g., aaa, 111)')
    if 'leet_speak' in names:
        suggestions.append(
            'Predictable substitutions like @ for a are easy to guess'
        )
    kinds = {d.dictionary for d in dictionaries}
    if 'common_passwords' in kinds:
        warning = 'This is a very common password'
        suggestions.append('Avoid common passwords')
    if 'english_words' in kinds:
        suggestions.append('Avoid dictionary words')
    if score <= StrengthScore.WEAK:
        recommendations.extend([
            'Consider using a password manager',
            'Use a passphrase with multiple random words',
        ])
    elif score <= StrengthScore.FAIR:
        recommendations.extend([
            'Consider adding more complexity',
            'Avoid predictable patterns',
        ])
    return StrengthFeedback(warning, suggestions, recommendations)


def analyze_password_strength(password: str, /) -> StrengthAnalysis:
    """Analyze the strength of an existing password.

    Args:
        password:
            The password.  An empty password (or a non-string) yields
            a very weak result asking for a password.

    Returns:
        The analysis.

    Examples:
        >>> result = analyze_password_strength('password')
        >>> result.label, result.entropy, result.feedback.warning
        ('Very Weak', 1.0, 'This is a very common password')
        >>> analyze_password_strength('').feedback.warning
        'Password is required'

    """
    if not isinstance(password, str) or not password:
        return StrengthAnalysis(
            score=StrengthScore.VERY_WEAK,
            entropy=0.0,
            base_entropy=0.0,
            feedback=StrengthFeedback(
                'Password is required', ['Enter a password'], []
            ),
            patterns=[],
            dictionaries=[],
            composition=None,
        )
    patterns = detect_weakness_patterns(password)
    dictionaries = check_dictionary_weakness(password)
    composition = analyze_composition(password)
    score = strength_score(composition, patterns, dictionaries)
    return StrengthAnalysis(
        score=score,
        entropy=round(effective_entropy(composition, patterns, dictionaries), 2),
        base_entropy=composition.entropy,
        feedback=strength_feedback(score, patterns, dictionaries, composition),
        patterns=patterns,
        dictionaries=dictionaries,
        composition=composition,
    )
