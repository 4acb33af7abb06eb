# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Helper functions for the passgen command-line.

Warning:
    Non-public module (implementation detail), provided for didactical and
    educational purposes only. Subject to change without notice, including
    removal.

"""

from __future__ import annotations

import csv
import io
import json
import os
import pathlib
import types
from typing import TYPE_CHECKING, NamedTuple

import click

import passgen as pg
from passgen import _types
from passgen._internals import cli_messages as _msg

if TYPE_CHECKING:
    import datetime
    from collections.abc import Iterable, Mapping, Sequence

    from typing_extensions import Any

    from passgen import ports

__author__ = pg.__author__
__version__ = pg.__version__

PROG_NAME = _msg.PROG_NAME
AUDIT_TRAIL_KEY = 'audit.jsonl'
CSV_COLUMNS = (
    'password',
    'type',
    'length',
    'iteration',
    'separator',
    'strength',
    'entropy',
)
ENTROPY_DIGITS = 2


config_filename_table = {
    None: '.',
    'audit': AUDIT_TRAIL_KEY,
}


def config_filename(
    subsystem: str | None = 'audit',
) -> pathlib.Path:
    """Return the filename of the data file for the subsystem.

    The files are located within the configuration directory as
    determined by the `PASSGEN_PATH` environment variable, or by
    [`click.get_app_dir`][] in POSIX mode.

    Args:
        subsystem:
            Name of the subsystem whose filename to return.  If `None`,
            return the configuration directory instead.

    Raises:
        AssertionError:
            An unknown subsystem was passed.

    """
    path = pathlib.Path(
        os.getenv(PROG_NAME.upper() + '_PATH')
        or click.get_app_dir(PROG_NAME, force_posix=True)
    )
    try:
        filename = config_filename_table[subsystem]
    except (KeyError, TypeError):  # pragma: no cover
        msg = f'Unknown configuration subsystem: {subsystem!r}'
        raise AssertionError(msg) from None
    return path / filename


class GeneratedPassword(NamedTuple):
    """A generated password, with the configuration that produced it.

    Attributes:
        password:
            The password.
        config:
            The resolved configuration.
        report:
            The entropy report of the configuration.

    """

    password: str
    """"""
    config: _types.PasswordConfig
    """"""
    report: _types.EntropyReport
    """"""

    def as_row(self) -> dict[str, Any]:
        """Return the password as an output row.

        The length is `None` for types that do not use one.

        Examples:
            >>> from passgen import entropy
            >>> config = _types.PasswordConfig(
            ...     'diceware', length=16, iteration=2, separator=' '
            ... )
            >>> row = GeneratedPassword(
            ...     'Abacus Zebra',
            ...     config,
            ...     entropy.entropy_report(config, dictionary_size=7776),
            ... ).as_row()
            >>> row['length'], row['entropy'], row['strength']
            (None, 25.85, 'WEAK')

        """
        password_type = _types.PasswordType(self.config.type)
        return {
            'password': self.password,
            'type': password_type.value,
            'length': (
                self.config.length if password_type.requires_length else None
            ),
            'iteration': self.config.iteration,
            'separator': self.config.separator,
            'strength': self.report.security_level.value,
            'entropy': round(self.report.total_bits, ENTROPY_DIGITS),
        }


def _metadata(
    count: int,
    fmt: str,
    *,
    generated_at: datetime.datetime,
    kdf: Mapping[str, int],
) -> dict[str, Any]:
    metadata: dict[str, Any] = {
        'count': count,
        'generatedAt': _types.isoformat_utc(generated_at),
        'format': fmt,
    }
    if kdf:
        metadata['kdf'] = dict(kdf)
    return metadata


def format_as_text(passwords: Sequence[GeneratedPassword], /) -> str:
    """Format the passwords one per line.

    Examples:
        >>> format_as_text([])
        ''

    """
    return ''.join(f'{p.password}\n' for p in passwords)


def format_as_json(
    passwords: Sequence[GeneratedPassword],
    /,
    *,
    generated_at: datetime.datetime,
    kdf: Mapping[str, int] = types.MappingProxyType({}),
) -> str:
    """Format the passwords as a JSON document, with metadata."""
    document = {
        'metadata': _metadata(
            len(passwords), 'json', generated_at=generated_at, kdf=kdf
        ),
        'passwords': [p.as_row() for p in passwords],
    }
    return json.dumps(document, ensure_ascii=False, indent=2) + '\n'


def _yaml_scalar(value: object, /) -> str:
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (int, float)):
        return repr(value)
    # JSON strings are valid YAML double-quoted scalars.
    return json.dumps(str(value), ensure_ascii=False)


def _yaml_lines(obj: object, indent: int = 0, /) -> Iterable[str]:
    spaces = '  ' * indent
    if isinstance(obj, dict):
        for key, value in obj.items():
            if isinstance(value, (dict, list)) and value:
                yield f'{spaces}{key}:'
                yield from _yaml_lines(value, indent + 1)
            elif isinstance(value, (dict, list)):
                empty = '{}' if isinstance(value, dict) else '[]'
                yield f'{spaces}{key}: {empty}'
            else:
                yield f'{spaces}{key}: {_yaml_scalar(value)}'
    elif isinstance(obj, list):
        for item in obj:
            if isinstance(item, dict) and item:
                first, *rest = _yaml_lines(item, indent + 1)
                yield f'{spaces}- {first.lstrip()}'
                yield from rest
            else:
                yield f'{spaces}- {_yaml_scalar(item)}'
    else:  # pragma: no cover [failsafe]
        yield f'{spaces}{_yaml_scalar(obj)}'


def format_as_yaml(
    passwords: Sequence[GeneratedPassword],
    /,
    *,
    generated_at: datetime.datetime,
    kdf: Mapping[str, int] = types.MappingProxyType({}),
) -> str:
    """Format the passwords as a YAML document, with metadata.

    Block style throughout; all strings are double-quoted.

    """
    document = {
        'metadata': _metadata(
            len(passwords), 'yaml', generated_at=generated_at, kdf=kdf
        ),
        'passwords': [p.as_row() for p in passwords],
    }
    return ''.join(f'{line}\n' for line in _yaml_lines(document))


def format_as_csv(passwords: Sequence[GeneratedPassword], /) -> str:
    r"""Format the passwords as CSV, with a header row.

    The header row is present even if there are no passwords.

    Examples:
        >>> format_as_csv([])
        'password,type,length,iteration,separator,strength,entropy\r\n'

    """
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_COLUMNS)
    writer.writeheader()
    for p in passwords:
        writer.writerow(p.as_row())
    return buffer.getvalue()


def format_output(
    passwords: Sequence[GeneratedPassword],
    fmt: str,
    /,
    *,
    generated_at: datetime.datetime,
    kdf: Mapping[str, int] = types.MappingProxyType({}),
) -> str:
    """Format the passwords in the requested output format.

    Raises:
        AssertionError:
            The output format is unknown.

    """
    if fmt == 'text':
        return format_as_text(passwords)
    elif fmt == 'json':  # noqa: RET505
        return format_as_json(passwords, generated_at=generated_at, kdf=kdf)
    elif fmt == 'yaml':
        return format_as_yaml(passwords, generated_at=generated_at, kdf=kdf)
    elif fmt == 'csv':
        return format_as_csv(passwords)
    else:  # pragma: no cover [failsafe]
        msg = f'Unknown output format: {fmt!r}'
        raise AssertionError(msg)


def audit_record(
    generated: GeneratedPassword,
    /,
    *,
    timestamp: datetime.datetime,
    kdf: Mapping[str, int],
) -> _types.AuditRecord:
    """Return the audit trail entry for a generated password.

    The entry describes the configuration and its strength, never the
    password itself.

    """
    row = generated.as_row()
    return {
        'timestamp': _types.isoformat_utc(timestamp),
        'type': row['type'],
        'length': row['length'],
        'iteration': row['iteration'],
        'separator': row['separator'],
        'entropy': row['entropy'],
        'strength': row['strength'],
        'kdf': dict(kdf),
    }


def append_audit_records(
    storage: ports.Storage,
    records: Iterable[_types.AuditRecord],
    /,
    *,
    key: str = AUDIT_TRAIL_KEY,
) -> None:
    """Append records to the audit trail, one JSON document per line.

    Storage that supports appending (see
    [`AppendableStorage`][passgen.ports.AppendableStorage]) is extended
    in place, so the existing trail is never rewritten.  Other storage
    is read and written back as a whole.

    Raises:
        passgen.errors.PortBackendError:
            The storage failed.

    """
    text = ''.join(
        json.dumps(record, ensure_ascii=False, sort_keys=True) + '\n'
        for record in records
    )
    if not text:
        return
    append = getattr(storage, 'append', None)
    if callable(append):
        append(key, text)
        return
    existing = storage.read(key) or ''
    if existing and not existing.endswith('\n'):
        existing += '\n'
    storage.write(key, existing + text)
