# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Validation of password configurations.

[`validate_config`][] collects every problem of a configuration and
never raises.  [`ensure_valid`][] turns the result into an exception,
for callers who want to abort.

"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from passgen import _types, charsets, errors, template

if TYPE_CHECKING:
    from typing_extensions import Any

__all__ = ('MAX_ITERATION', 'MAX_LENGTH', 'ensure_valid', 'validate_config')

MIN_LENGTH = 1
MAX_LENGTH = 1024
MIN_ITERATION = 1
MAX_ITERATION = 1024

# Error messages
TYPE_REQUIRED = 'type is required'
CONFIG_NOT_A_MAPPING = 'configuration must be a mapping'
SEPARATOR_NOT_A_STRING = 'separator must be a string'
CHARSET_REQUIRED = 'charset is required for type "custom"'
CHARSET_NOT_A_STRING = 'charset must be a string'
TEMPLATE_REQUIRED = 'template is required for type "template"'


def _as_mapping(obj: Any, /) -> Mapping[str, Any] | None:  # noqa: ANN401
    if obj is None:
        return {}
    if isinstance(obj, _types.PasswordConfig):
        return obj._asdict()
    if isinstance(obj, Mapping):
        return obj
    return None


def _is_int(value: object, /) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _range_error(name: str, value: object, low: int, high: int) -> str:
    return (
        f'{name} must be an integer between {low} and {high} '
        f'(got {value!r})'
    )


def validate_config(obj: Any, /) -> _types.ValidationResult:  # noqa: ANN401
    """Check a password configuration, collecting all problems.

    The checks run in this order: the type is present and registered;
    the length (if the type uses one) is an integer from 1 to 1024;
    the iteration count is an integer from 1 to 1024; the separator (if
    set) is a string; for custom character sets, the character set is
    present and suitable; for templates, the template is present and
    suitable.  A length of 0 is an error, not a missing length.

    Args:
        obj:
            The configuration: a [`PasswordConfig`][passgen._types.PasswordConfig],
            a mapping in the form of
            [`PasswordConfigDict`][passgen._types.PasswordConfigDict], or
            anything else (which fails validation).

    Returns:
        The validation result.  Never raises.

    Examples:
        >>> validate_config({'length': 16})
        ValidationResult(is_valid=False, errors=['type is required'])
        >>> validate_config({'type': 'strong', 'length': 16}).is_valid
        True
        >>> validate_config({'type': 'strong', 'length': 0}).errors
        ['length must be an integer between 1 and 1024 (got 0)']

    """
    config = _as_mapping(obj)
    if config is None:
        return _types.ValidationResult.from_errors([CONFIG_NOT_A_MAPPING])
    problems: list[str] = []
    password_type: _types.PasswordType | None = None
    type_tag = config.get('type')
    if type_tag is None or type_tag == '':  # noqa: PLC1901
        problems.append(TYPE_REQUIRED)
    else:
        try:
            password_type = _types.PasswordType(type_tag)
        except ValueError:
            problems.append(
                str(
                    errors.UnknownTypeError(
                        type_tag, _types.PasswordType.tags()
                    )
                )
            )
    if password_type is not None and password_type.requires_length:
        length = config.get('length')
        if not _is_int(length) or not MIN_LENGTH <= length <= MAX_LENGTH:
            problems.append(
                _range_error('length', length, MIN_LENGTH, MAX_LENGTH)
            )
    iteration = config.get('iteration', MIN_ITERATION)
    if not _is_int(iteration) or not MIN_ITERATION <= iteration <= MAX_ITERATION:
        problems.append(
            _range_error('iteration', iteration, MIN_ITERATION, MAX_ITERATION)
        )
    separator = config.get('separator')
    if separator is not None and not isinstance(separator, str):
        problems.append(SEPARATOR_NOT_A_STRING)
    if password_type is _types.PasswordType.CUSTOM:
        charset = config.get('charset')
        if charset is None or charset == '':  # noqa: PLC1901
            problems.append(CHARSET_REQUIRED)
        elif not isinstance(charset, str):
            problems.append(CHARSET_NOT_A_STRING)
        else:
            problems.extend(charsets.charset_problems(charset))
    if password_type is _types.PasswordType.TEMPLATE:
        template_text = config.get('template')
        if template_text is None or template_text == '':  # noqa: PLC1901
            problems.append(TEMPLATE_REQUIRED)
        else:
            problems.extend(template.template_problems(template_text))
    return _types.ValidationResult.from_errors(problems)


def ensure_valid(obj: Any, /) -> _types.PasswordConfig:  # noqa: ANN401
    """Validate a configuration, raising on the first failure.

    Args:
        obj:
            The configuration.  See [`validate_config`][].

    Returns:
        The configuration, as a [`PasswordConfig`][passgen._types.PasswordConfig].

    Raises:
        passgen.errors.UnknownTypeError:
            The type is not registered.
        passgen.errors.ArgumentError:
            The configuration is invalid otherwise.  The exception
            carries all problems found.

    """
    result = validate_config(obj)
    config = _as_mapping(obj)
    if not result.is_valid:
        type_tag = config.get('type') if config is not None else None
        if type_tag is not None and type_tag != '':  # noqa: PLC1901
            try:
                _types.PasswordType(type_tag)
            except ValueError:
                raise errors.UnknownTypeError(
                    type_tag, _types.PasswordType.tags()
                ) from None
        raise errors.ArgumentError(*result.errors)
    assert config is not None
    if isinstance(obj, _types.PasswordConfig):
        return obj
    return _types.PasswordConfig.from_mapping(config)
