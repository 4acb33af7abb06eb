# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib


"""Command-line machinery for passgen.

Logging to standard error, grouped `--help` output, numeric option
parsing and the `--version` output of the `passgen` command.

Warning:
    Non-public module (implementation detail), provided for didactical and
    educational purposes only. Subject to change without notice, including
    removal.

"""

from __future__ import annotations

import contextlib
import importlib.metadata
import logging
import textwrap
import types
from typing import TYPE_CHECKING, Callable, TypeVar

import click
from typing_extensions import Any, ParamSpec

from passgen import _internals, _types
from passgen._internals import cli_messages as _msg

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

PROG_NAME = _internals.PROG_NAME
VERSION = _internals.VERSION
VERSION_OUTPUT_WRAPPING_WIDTH = 72
OUTPUT_FORMATS = ('text', 'json', 'yaml', 'csv')

# Error messages
NOT_AN_INTEGER = 'not an integer'
NOT_A_POSITIVE_INTEGER = 'not a positive integer'
TOO_LARGE = 'too large (at most {maximum})'

P = ParamSpec('P')
R = TypeVar('R')


# Logging
# =======


class StderrLogHandler(logging.Handler):
    """Emit log records to standard error, via [`click.echo`][].

    Each line of the message is prefixed with `"passgen: "` and a level
    marker.  A record may carry a `color` attribute (see the `extra`
    argument of [`logging.Logger.debug`][]), which is passed on to
    [`click.echo`][].

    """

    def __init__(
        self, level: int = logging.NOTSET, *, prog_name: str = PROG_NAME
    ) -> None:
        super().__init__(level)
        self.prog_name = prog_name

    @staticmethod
    def level_marker(record: logging.LogRecord, /) -> str:
        """Return the marker for the record's level.

        `"Debug: "` for debug messages, a bold `"Warning: "` for
        warnings, and nothing otherwise.

        """
        if record.levelno <= logging.DEBUG:
            return 'Debug: '
        if record.levelno == logging.WARNING:
            label = _msg.render(_msg.Label.WARNING_LABEL)
            return f'{click.style(label, bold=True)}: '
        return ''

    def format(self, record: logging.LogRecord) -> str:
        prefix = f'{self.prog_name}: {self.level_marker(record)}'
        text = ''.join(
            prefix + line
            for line in record.getMessage().splitlines(True)  # noqa: FBT003
        )
        if record.exc_info:
            text += '\n' + logging.Formatter().formatException(
                record.exc_info
            )
        return text

    def emit(self, record: logging.LogRecord) -> None:
        click.echo(
            self.format(record),
            err=True,
            color=getattr(record, 'color', None),
        )


LOG_HANDLER = StderrLogHandler(logging.WARNING)
"""The handler for the `passgen` logger, used by [`cli_logging`][]."""
LOG_HANDLER.addFilter(logging.Filter(name=PROG_NAME))


@contextlib.contextmanager
def cli_logging(
    handler: logging.Handler = LOG_HANDLER,
) -> Iterator[logging.Handler]:
    """Attach `handler` to the `passgen` logger for the duration.

    Reentrant: the handler is only removed again by the context that
    attached it.  Not thread safe, because it modifies global state.

    """
    logger = logging.getLogger(PROG_NAME)
    attached = handler not in logger.handlers
    if attached:
        logger.addHandler(handler)
    try:
        yield handler
    finally:
        if attached:
            logger.removeHandler(handler)


def adjust_logging_level(
    ctx: click.Context,
    /,
    param: click.Parameter | None = None,
    value: int | None = None,
) -> None:
    """Set the level of the `passgen` logger and of [`LOG_HANDLER`][].

    A callback for the `-v`, `-q` and `--debug` options.

    """
    # Several options share this callback; runs must be idempotent.
    if param is None or value is None or ctx.resilient_parsing:
        return
    LOG_HANDLER.setLevel(value)
    logging.getLogger(PROG_NAME).setLevel(value)


# Option parsing and grouping
# ===========================


GENERATION_GROUP = _msg.render(_msg.Label.PASSWORD_GENERATION_LABEL)
OUTPUT_GROUP = _msg.render(_msg.Label.OUTPUT_LABEL)
AUDIT_GROUP = _msg.render(_msg.Label.AUDIT_LABEL)
LOGGING_GROUP = _msg.render(_msg.Label.LOGGING_LABEL)
OPTION_GROUPS: Mapping[str, str] = types.MappingProxyType({
    GENERATION_GROUP: _msg.render(
        _msg.Label.PASSWORD_GENERATION_EPILOG,
        metavar=_msg.render(_msg.Label.METAVAR_NUMBER),
    ),
    OUTPUT_GROUP: '',
    AUDIT_GROUP: _msg.render(_msg.Label.AUDIT_EPILOG),
    LOGGING_GROUP: '',
})
"""The option groups of `passgen --help`, in order, with their epilogs."""


class GroupedOption(click.Option):
    """A [`click.Option`][] belonging to a named option group.

    Attributes:
        group:
            The option group name, a key of the command's
            `option_groups`, or `None` for "Other options".

    """

    def __init__(
        self,
        *args: Any,  # noqa: ANN401
        group: str | None = None,
        **kwargs: Any,  # noqa: ANN401
    ) -> None:
        super().__init__(*args, **kwargs)
        self.group = group


class GroupedCommand(click.Command):
    """A [`click.Command`][] listing its options in groups.

    Inspired by [a comment on `pallets/click#373`][CLICK_ISSUE].  Each
    group may carry an epilog, printed below its options.  Options not
    in any known group are listed last, under "Other options".

    When called as a function, this sets up [`cli_logging`][] before
    invoking the actual callback.  This can be bypassed by calling the
    `.main` method directly.

    [CLICK_ISSUE]: https://github.com/pallets/click/issues/373#issuecomment-515293746

    """

    def __init__(
        self,
        *args: Any,  # noqa: ANN401
        option_groups: Mapping[str, str] = OPTION_GROUPS,
        **kwargs: Any,  # noqa: ANN401
    ) -> None:
        super().__init__(*args, **kwargs)
        self.option_groups = option_groups

    def __call__(  # pragma: no cover [external-api]
        self,
        *args: Any,  # noqa: ANN401
        **kwargs: Any,  # noqa: ANN401
    ) -> Any:  # noqa: ANN401
        """"""  # noqa: D419
        # The tests use click.testing, which does not go through here.
        with cli_logging():
            return self.main(*args, **kwargs)

    def format_options(
        self,
        ctx: click.Context,
        formatter: click.HelpFormatter,
    ) -> None:
        """Write the options to the help listing, one section per group."""
        grouped: dict[str, list[tuple[str, str]]] = {
            name: [] for name in self.option_groups
        }
        others: list[tuple[str, str]] = []
        for param in self.get_params(ctx):
            record = param.get_help_record(ctx)
            if record is None:
                continue
            group = getattr(param, 'group', None)
            grouped.get(group, others).append(record)  # type: ignore[arg-type]
        for name, records in grouped.items():
            if not records:
                continue
            with formatter.section(name):
                formatter.write_dl(records)
            epilog = self.option_groups[name]
            if epilog:
                formatter.write_paragraph()
                with formatter.indentation():
                    formatter.write_text(epilog)
        if others:
            with formatter.section(
                _msg.render(_msg.Label.OTHER_OPTIONS_LABEL)
            ):
                formatter.write_dl(others)


class PositiveInt(click.ParamType):
    """A positive integer, optionally bounded above.

    Examples:
        >>> PositiveInt(maximum=1024).convert('16', None, None)
        16

    """

    name = 'integer'

    def __init__(self, maximum: int | None = None) -> None:
        self.maximum = maximum

    def convert(
        self,
        value: Any,  # noqa: ANN401
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> int:
        """Parse `value`, failing with a usage error if it is invalid."""
        if isinstance(value, int) and not isinstance(value, bool):
            int_value = value
        else:
            try:
                int_value = int(value, 10)
            except (TypeError, ValueError):
                self.fail(NOT_AN_INTEGER, param, ctx)
        if int_value < 1:
            self.fail(NOT_A_POSITIVE_INTEGER, param, ctx)
        if self.maximum is not None and int_value > self.maximum:
            self.fail(TOO_LARGE.format(maximum=self.maximum), param, ctx)
        return int_value


# Version output
# ==============


def _wrapped_list(label: _msg.Label, items: list[str], /) -> str:
    header = _msg.render(label)
    text = textwrap.fill(
        f'{header} {", ".join(items)}.',
        width=VERSION_OUTPUT_WRAPPING_WIDTH,
        subsequent_indent='    ',
        break_long_words=False,
        break_on_hyphens=False,
    )
    return click.style(header, bold=True) + text[len(header) :]


def print_version(
    ctx: click.Context,
    param: click.Parameter,
    value: bool,  # noqa: FBT001
) -> None:
    """Print the version and the supported features, then exit.

    A callback for the `--version` option.

    """
    del param
    if not value or ctx.resilient_parsing:
        return
    click.echo(
        f'{click.style(PROG_NAME, bold=True)} {VERSION}', color=ctx.color
    )
    click.echo(
        _msg.render(
            _msg.Label.VERSION_INFO_MAJOR_LIBRARY_TEXT,
            dependency_name_and_version=(
                f'click {importlib.metadata.version("click")}'
            ),
        ),
        color=ctx.color,
    )
    click.echo()
    feature_lists = {
        _msg.Label.SUPPORTED_PASSWORD_TYPES: _types.PasswordType.tags(),
        _msg.Label.SUPPORTED_PRESETS: [p.value for p in _types.Preset],
        _msg.Label.SUPPORTED_OUTPUT_FORMATS: list(OUTPUT_FORMATS),
    }
    for label, items in feature_lists.items():
        click.echo(_wrapped_list(label, items), color=ctx.color)
    ctx.exit()


def logging_options(f: Callable[P, R]) -> Callable[P, R]:
    """Decorate the command with the `--debug`, `-v` and `-q` options.

    All three call back into [`adjust_logging_level`][].

    """
    for decls, level, help_text in (
        (('-q', '--quiet'), logging.ERROR, _msg.Label.QUIET_OPTION_HELP_TEXT),
        (
            ('-v', '--verbose'),
            logging.INFO,
            _msg.Label.VERBOSE_OPTION_HELP_TEXT,
        ),
        (('--debug',), logging.DEBUG, _msg.Label.DEBUG_OPTION_HELP_TEXT),
    ):
        f = click.option(
            *decls,
            'logging_level',
            is_flag=True,
            flag_value=level,
            expose_value=False,
            callback=adjust_logging_level,
            help=_msg.render(help_text),
            cls=GroupedOption,
            group=LOGGING_GROUP,
        )(f)
    return f
