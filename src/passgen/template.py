# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Password templates.

A template mixes literal text with character set slots.  A slot is
written in square brackets, optionally followed by a repetition count
in braces: `[UPPERCASE]{2}-[0-9]{4}` yields passwords like `QX-0815`.
Inside the brackets, the following are recognized, in this order:

1.  the (case-insensitive) name of one of the
    [named character sets][passgen.charsets.NAMED_CHARSETS];
2.  one of the aliases `ALPHA`, `ALPHANUMERIC`, `HEX` and
    `HEXADECIMAL`;
3.  a range of two letters or digits, such as `a-f` or `0-9`;
4.  anything else, taken as a literal set of characters.

Literal text contributes no entropy.

"""

from __future__ import annotations

import math
import re
import string
import types
from typing import TYPE_CHECKING, Union

from typing_extensions import NamedTuple

from passgen import charsets, errors

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

__all__ = (
    'CharacterSlot',
    'Literal',
    'expand_template',
    'parse_template',
    'template_bits',
    'template_length',
    'template_problems',
)

MAX_QUANTITY = 1000
"""The largest repetition count of a single slot."""
MAX_TEMPLATE_LENGTH = 1000
"""The largest number of characters one template expansion may have."""
MIN_TEMPLATE_BITS = 20
"""The smallest entropy one template expansion may have, in bits."""

ALIASES: Mapping[str, str] = types.MappingProxyType({
    'ALPHA': string.ascii_uppercase + string.ascii_lowercase,
    'ALPHANUMERIC': (
        string.ascii_uppercase + string.ascii_lowercase + string.digits
    ),
    'HEX': charsets.NAMED_CHARSETS['HEX_UPPERCASE'],
    'HEXADECIMAL': charsets.NAMED_CHARSETS['HEX_UPPERCASE'],
})
"""Additional character set names, only valid in templates."""

_RANGE = re.compile(r'\A([A-Za-z0-9])-([A-Za-z0-9])\Z')


class Literal(NamedTuple):
    """Literal template text, copied verbatim."""

    text: str
    """"""

    @property
    def bits(self) -> float:
        """The entropy of this instruction: always zero."""
        return 0.0

    @property
    def length(self) -> int:
        """The number of characters this instruction produces."""
        return len(self.text)


class CharacterSlot(NamedTuple):
    """A run of characters drawn uniformly from a character set.

    Attributes:
        charset:
            The character set, without duplicates.
        quantity:
            The number of characters to draw.

    """

    charset: str
    """"""
    quantity: int = 1
    """"""

    @property
    def bits(self) -> float:
        """The entropy of this instruction, in bits."""
        return self.quantity * math.log2(len(self.charset))

    @property
    def length(self) -> int:
        """The number of characters this instruction produces."""
        return self.quantity


Instruction = Union[Literal, CharacterSlot]


def _syntax_error(message: str, /) -> errors.ArgumentError:
    return errors.ArgumentError(f'Template syntax error: {message}')


def _resolve_charset(definition: str, /) -> str:
    name = definition.upper()
    if name in charsets.NAMED_CHARSETS:
        return charsets.NAMED_CHARSETS[name]
    if name in ALIASES:
        return ALIASES[name]
    match = _RANGE.match(definition)
    if match is not None:
        start, end = (ord(c) for c in match.group(1, 2))
        if start > end:
            msg = (
                f'Invalid range: {definition}.  Start character must '
                f'come before end character'
            )
            raise _syntax_error(msg)
        return ''.join(chr(code) for code in range(start, end + 1))
    return ''.join(dict.fromkeys(definition))


def _parse_quantity(template: str, start: int, /) -> tuple[int, int]:
    end = template.find('}', start)
    if end < 0:
        raise _syntax_error(f"Unmatched '{{' at position {start}")
    definition = template[start + 1 : end]
    if not definition:
        msg = f'Empty quantity at position {start}'
        raise _syntax_error(msg)
    if ',' in definition:
        msg = f'Range quantities are not supported: {{{definition}}}'
        raise _syntax_error(msg)
    if not definition.isdigit() or int(definition) < 1:
        msg = f'Invalid quantity: {definition}.  Must be a positive integer'
        raise _syntax_error(msg)
    quantity = int(definition)
    if quantity > MAX_QUANTITY:
        msg = f'Quantity too large: {quantity}.  Maximum allowed: {MAX_QUANTITY}'
        raise _syntax_error(msg)
    return quantity, end + 1


def parse_template(template: str, /) -> list[Instruction]:
    """Parse a template into its instructions.

    Args:
        template:
            The template.

    Returns:
        The instructions, in order.  Adjacent literal text forms a
        single [`Literal`][].

    Raises:
        passgen.errors.ArgumentError:
            The template is empty or malformed.

    Examples:
        >>> parse_template('[a-c]{2}-x')
        [CharacterSlot(charset='abc', quantity=2), Literal(text='-x')]
        >>> parse_template('[ab')
        Traceback (most recent call last):
            ...
        passgen.errors.ArgumentError: Template syntax error: Unmatched '[' at position 0

    """
    if not isinstance(template, str) or not template:
        raise _syntax_error('Template must be a non-empty string')
    instructions: list[Instruction] = []
    pos = 0
    while pos < len(template):
        if template[pos] != '[':
            end = template.find('[', pos)
            if end < 0:
                end = len(template)
            instructions.append(Literal(template[pos:end]))
            pos = end
            continue
        end = template.find(']', pos)
        if end < 0:
            raise _syntax_error(f"Unmatched '[' at position {pos}")
        definition = template[pos + 1 : end]
        if not definition:
            raise _syntax_error(f'Empty character set at position {pos}')
        quantity = 1
        pos = end + 1
        if pos < len(template) and template[pos] == '{':
            quantity, pos = _parse_quantity(template, pos)
        instructions.append(
            CharacterSlot(_resolve_charset(definition), quantity)
        )
    return instructions


def template_bits(instructions: Sequence[Instruction], /) -> float:
    """Return the entropy of one template expansion, in bits."""
    return sum(instruction.bits for instruction in instructions)


def template_length(instructions: Sequence[Instruction], /) -> int:
    """Return the length of one template expansion, in characters."""
    return sum(instruction.length for instruction in instructions)


def template_problems(template: object, /) -> list[str]:
    """Return all reasons why `template` is unsuitable for generation.

    A suitable template parses, contains at least one character set
    slot, expands to at most 1000 characters, and carries at least 20
    bits of entropy per expansion.

    Examples:
        >>> template_problems('[ALPHANUMERIC]{8}')
        []
        >>> template_problems('[0-9]{4}')
        ['Template provides insufficient entropy: 13.3 bits (minimum: 20 bits)']

    """
    if not isinstance(template, str):
        return ['Template syntax error: Template must be a non-empty string']
    try:
        instructions = parse_template(template)
    except errors.ArgumentError as exc:
        return list(exc.errors)
    problems: list[str] = []
    if not any(isinstance(i, CharacterSlot) for i in instructions):
        problems.append(
            'Template must contain at least one random character set [...]'
        )
    length = template_length(instructions)
    if length > MAX_TEMPLATE_LENGTH:
        problems.append(
            f'Template generates passwords that are too long: '
            f'{length} characters (max: {MAX_TEMPLATE_LENGTH})'
        )
    bits = template_bits(instructions)
    if bits < MIN_TEMPLATE_BITS:
        problems.append(
            f'Template provides insufficient entropy: {bits:.1f} bits '
            f'(minimum: {MIN_TEMPLATE_BITS} bits)'
        )
    return problems


def expand_template(
    instructions: Sequence[Instruction],
    random_int: Callable[[int], int],
    /,
) -> str:
    """Expand the template instructions once.

    Args:
        instructions:
            The parsed template.
        random_int:
            The uniform integer source, as in
            [`RandomSource.random_int`][passgen.ports.RandomSource.random_int].

    """
    pieces: list[str] = []
    for instruction in instructions:
        if isinstance(instruction, Literal):
            pieces.append(instruction.text)
        else:
            pieces.extend(
                instruction.charset[random_int(len(instruction.charset))]
                for _ in range(instruction.quantity)
            )
    return ''.join(pieces)
