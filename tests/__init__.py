# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

from __future__ import annotations

import contextlib
import datetime
import logging
import os
import re
from typing import TYPE_CHECKING

import click.testing
from typing_extensions import NamedTuple, Self

from passgen import adapters, cli, errors, randomness, wordlist
from passgen._internals import cli_helpers, cli_machinery

__all__ = ()

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    import pytest
    from typing_extensions import Any

FIXED_INSTANT = datetime.datetime(
    2025, 1, 2, 3, 4, 5, tzinfo=datetime.timezone.utc
)
"""The instant reported by [`fixed_clock`][]."""

FIXED_INSTANT_TEXT = '2025-01-02T03:04:05.000Z'
"""[`FIXED_INSTANT`][], as formatted in the output and the audit trail."""

SMALL_WORD_LIST = ('apple', 'banana', 'cherry', 'damson')
"""A word list of four words, i.e. 2 bits per word."""


def fixed_clock() -> adapters.FixedClock:
    """Return a clock stuck at [`FIXED_INSTANT`][]."""
    return adapters.FixedClock(FIXED_INSTANT)


def byte_source(*values: int) -> randomness.ByteSequenceRandomSource:
    """Return a deterministic random source replaying `values`."""
    return randomness.ByteSequenceRandomSource(bytes(values))


def small_dictionary() -> wordlist.MemoryDictionary:
    """Return a dictionary over [`SMALL_WORD_LIST`][]."""
    return wordlist.MemoryDictionary(SMALL_WORD_LIST)


def diceware_words() -> list[str]:
    """Return a diceware-sized word list: `word0000` to `word7775`."""
    return [f'word{i:04d}' for i in range(wordlist.DICEWARE_WORD_COUNT)]


def diceware_dictionary() -> wordlist.MemoryDictionary:
    """Return a dictionary over [`diceware_words`][]."""
    return wordlist.MemoryDictionary(diceware_words())


class RecordingLogger:
    """A logger adapter recording all messages, for port tests."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def info(self, msg: object, /, *args: object, **kwargs: object) -> None:
        del kwargs
        self.messages.append(('info', str(msg) % args if args else str(msg)))

    def warning(
        self, msg: object, /, *args: object, **kwargs: object
    ) -> None:
        del kwargs
        self.messages.append((
            'warning',
            str(msg) % args if args else str(msg),
        ))

    def error(self, msg: object, /, *args: object, **kwargs: object) -> None:
        del kwargs
        self.messages.append(('error', str(msg) % args if args else str(msg)))


class BrokenStorage:
    """A storage adapter whose backend always fails."""

    def read(self, key: str, /) -> str | None:  # noqa: PLR6301
        del key
        msg = 'storage is offline'
        raise errors.PortBackendError(msg)

    def write(self, key: str, value: str, /) -> None:  # noqa: PLR6301
        del key, value
        msg = 'storage is offline'
        raise errors.PortBackendError(msg)


class ReadWriteStorage:
    """A storage adapter without in-place appending."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.writes = 0

    def read(self, key: str, /) -> str | None:
        return self.data.get(key)

    def write(self, key: str, value: str, /) -> None:
        self.writes += 1
        self.data[key] = value


class FailingAppendStorage(ReadWriteStorage):
    """A storage adapter whose appends fail, leaving the value intact."""

    def append(self, key: str, value: str, /) -> None:  # noqa: PLR6301
        del key, value
        msg = 'disk full'
        raise errors.PortBackendError(msg)


class ReadableResult(NamedTuple):
    """Helper class for formatting and testing click.testing.Result objects."""

    exception: BaseException | None
    exit_code: int
    stdout: str
    stderr: str

    @classmethod
    def parse(cls, r: click.testing.Result, /) -> Self:
        try:
            stderr = r.stderr
        except ValueError:  # pragma: no cover
            stderr = r.output
        return cls(r.exception, r.exit_code, r.stdout or '', stderr or '')

    def clean_exit(
        self, *, output: str = '', empty_stderr: bool = False
    ) -> bool:
        """Return whether the invocation exited cleanly.

        Args:
            output:
                An expected output string.
            empty_stderr:
                Whether to require the standard error output to be
                empty.

        """
        return (
            (
                not self.exception
                or (
                    isinstance(self.exception, SystemExit)
                    and self.exit_code == 0
                )
            )
            and (not output or output in self.stdout)
            and (not empty_stderr or not self.stderr)
        )

    def error_exit(
        self,
        *,
        error: str | type[BaseException] = BaseException,
        exit_code: int | None = None,
    ) -> bool:
        """Return whether the invocation exited uncleanly.

        Args:
            error:
                An expected error message, or an expected exception
                type.
            exit_code:
                An expected exit code, if any.

        """
        if isinstance(error, str):
            return (
                isinstance(self.exception, SystemExit)
                and self.exit_code > 0
                and (exit_code is None or self.exit_code == exit_code)
                and (not error or error in self.stderr)
            )
        else:  # noqa: RET505
            return isinstance(self.exception, error)


class CliRunner:
    """An abstracted CLI runner class.

    Wraps [`click.testing.CliRunner`][].  Each invocation runs within
    the standard CLI logging setup, the way the installed command-line
    does, and restores the global logging levels afterwards (the
    `--verbose`, `--quiet` and `--debug` options modify them).

    """

    def __init__(self, *, mix_stderr: bool = False) -> None:
        del mix_stderr
        self.click_testing_clirunner = click.testing.CliRunner()

    def isolated_filesystem(
        self, *args: Any, **kwargs: Any
    ) -> contextlib.AbstractContextManager[str]:
        """See [`click.testing.CliRunner.isolated_filesystem`][]."""
        return self.click_testing_clirunner.isolated_filesystem(
            *args, **kwargs
        )

    def invoke(
        self,
        cli: click.Command,
        args: Sequence[str] | str | None = None,
        input: str | bytes | None = None,  # noqa: A002
        env: dict[str, str | None] | None = None,
        catch_exceptions: bool = True,  # noqa: FBT001, FBT002
        color: bool = False,  # noqa: FBT001, FBT002
        **extra: Any,
    ) -> ReadableResult:
        """Invoke the command, and parse the result."""
        handler = cli_machinery.LOG_HANDLER
        package_logger = logging.getLogger(cli_machinery.PROG_NAME)
        saved_levels = (handler.level, package_logger.level)
        try:
            with cli_machinery.cli_logging():
                raw_result = self.click_testing_clirunner.invoke(
                    cli,
                    args=args,
                    input=input,
                    env=env,
                    catch_exceptions=catch_exceptions,
                    color=color,
                    **extra,
                )
        finally:
            handler.setLevel(saved_levels[0])
            package_logger.setLevel(saved_levels[1])
        return ReadableResult.parse(raw_result)


@contextlib.contextmanager
def isolated_config(
    monkeypatch: pytest.MonkeyPatch,
    runner: CliRunner,
) -> Iterator[None]:
    """Run the command-line in an empty, temporary directory.

    The home directory is the temporary directory, and the data
    directory is the (not yet existing) default data directory below
    it.

    """
    prog_name = cli.PROG_NAME
    env_name = prog_name.replace(' ', '_').upper() + '_PATH'
    with runner.isolated_filesystem():
        monkeypatch.setenv('HOME', os.getcwd())
        monkeypatch.setenv('USERPROFILE', os.getcwd())
        monkeypatch.delenv(env_name, raising=False)
        yield


def audit_trail_lines() -> list[str]:
    """Return the lines of the audit trail, or an empty list."""
    path = cli_helpers.config_filename(subsystem='audit')
    if not path.exists():
        return []
    return path.read_text(encoding='UTF-8').splitlines()


def message_emitted_factory(
    level: int,
    *,
    logger_name: str = cli.PROG_NAME,
) -> Callable[[str | re.Pattern[str], Sequence[tuple[str, int, str]]], bool]:
    """Return a function to test if a matching message was emitted.

    Args:
        level: The level to match messages at.
        logger_name: The name of the logger to match against.

    """

    def message_emitted(
        text: str | re.Pattern[str],
        record_tuples: Sequence[tuple[str, int, str]],
    ) -> bool:
        """Return true if a matching message was emitted.

        Args:
            text: Substring or pattern to match against.
            record_tuples: Items to match.

        """

        def check_record(record: tuple[str, int, str]) -> bool:
            if record[:2] != (logger_name, level):
                return False
            if isinstance(text, str):
                return text in record[2]
            return text.match(record[2]) is not None  # pragma: no cover

        return any(map(check_record, record_tuples))

    return message_emitted


info_emitted = message_emitted_factory(logging.INFO)
warning_emitted = message_emitted_factory(logging.WARNING)
error_emitted = message_emitted_factory(logging.ERROR)
