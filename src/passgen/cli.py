# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

# ruff: noqa: TRY400

"""Command-line interface for passgen."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final, NoReturn

import click
from typing_extensions import Any

from passgen import (
    _internals,
    _types,
    adapters,
    charsets,
    errors,
    service,
    validation,
    wordlist,
)
from passgen._internals import cli_helpers, cli_machinery
from passgen._internals import cli_messages as _msg

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ('passgen',)

PROG_NAME = _internals.PROG_NAME
VERSION = _internals.VERSION

CLI_DEFAULT_CONFIG = _types.PasswordConfig(
    _types.PasswordType.STRONG, length=16, iteration=3
)
"""The configuration used for options given neither explicitly nor by
a preset.  The separator is left to the type's default."""


class _PassgenContext:
    """The context for the `passgen` command-line interface.

    This context object, wrapping a [`click.Context`][] object,
    encapsulates a single call to the `passgen` command-line.  It is an
    implementation detail of the command-line and should not be
    instantiated directly by users or API clients.

    Attributes:
        logger:
            The logger used for warnings and error messages.
        ctx:
            The underlying [`click.Context`][] from which the
            command-line settings and parameter values are queried.
        service:
            The password service, wired with the adapters requested on
            the command-line.

    """

    logger: Final = logging.getLogger(PROG_NAME)
    """"""
    ctx: Final[click.Context]
    """"""
    service: service.PasswordService
    """"""

    def __init__(self, ctx: click.Context, /) -> None:
        """Initialize the passgen context.

        Args:
            ctx:
                The underlying [`click.Context`][] from which the
                command-line settings and parameter values are queried.

        """
        self.ctx = ctx
        wordlist_path = ctx.params.get('wordlist')
        self.service = service.PasswordService(
            dictionary=(
                wordlist.FileDictionary(wordlist_path)
                if wordlist_path is not None
                else None
            ),
            diceware_dictionary=(
                wordlist.FileDictionary(self.diceware_wordlist_path)
                if self.diceware_wordlist_path is not None
                else None
            ),
            logger=self.logger,
            storage=adapters.FileStorage(
                cli_helpers.config_filename(subsystem=None)
            ),
        )

    def err(self, msg: Any, /, **kwargs: Any) -> NoReturn:  # noqa: ANN401
        """Log an error message, then abort the function call.

        We ensure that color handling is done properly before the error
        message is logged.

        """
        stacklevel = kwargs.pop('stacklevel', 1)
        stacklevel += 1
        extra = kwargs.pop('extra', {})
        extra.setdefault('color', self.ctx.color)
        self.logger.error(msg, stacklevel=stacklevel, extra=extra, **kwargs)
        self.ctx.exit(1)

    def warning(self, msg: Any, /, **kwargs: Any) -> None:  # noqa: ANN401
        """Log a warning message.

        We ensure that color handling is done properly before the
        warning message is logged.

        """
        stacklevel = kwargs.pop('stacklevel', 1)
        stacklevel += 1
        extra = kwargs.pop('extra', {})
        extra.setdefault('color', self.ctx.color)
        self.logger.warning(msg, stacklevel=stacklevel, extra=extra, **kwargs)

    def info(self, msg: Any, /, **kwargs: Any) -> None:  # noqa: ANN401
        """Log an informational message.

        We ensure that color handling is done properly before the
        message is logged.

        """
        stacklevel = kwargs.pop('stacklevel', 1)
        stacklevel += 1
        extra = kwargs.pop('extra', {})
        extra.setdefault('color', self.ctx.color)
        self.logger.info(msg, stacklevel=stacklevel, extra=extra, **kwargs)

    @property
    def diceware_wordlist_path(self) -> str | None:
        """The diceware word list file, falling back to `--wordlist`."""
        return self.ctx.params.get('diceware_wordlist') or self.ctx.params.get(
            'wordlist'
        )

    @property
    def kdf_parameters(self) -> dict[str, int]:
        """The key derivation parameters given on the command-line."""
        names = {
            'kdf_memory': 'memory',
            'kdf_time': 'time',
            'kdf_parallelism': 'parallelism',
        }
        return {
            key: self.ctx.params[param]
            for param, key in names.items()
            if self.ctx.params.get(param) is not None
        }

    def run_self_check(self) -> None:
        """Run the random source self-check, and report the result."""
        result = self.service.self_check()
        if not result.passed:
            self.err(
                _msg.TranslatedString(
                    _msg.ErrMsg.SELF_CHECK_FAILED,
                    chi_squared=result.chi_squared,
                    critical_value=result.critical_value,
                )
            )
        click.echo(
            str(
                _msg.TranslatedString(
                    _msg.InfoMsg.SELF_CHECK_PASSED,
                    chi_squared=result.chi_squared,
                    sample_size=result.sample_size,
                    critical_value=result.critical_value,
                )
            ),
            color=self.ctx.color,
        )

    def resolve_config(self) -> _types.PasswordConfig:
        """Assemble the password configuration from the command-line.

        Explicitly given options take precedence over the preset, which
        takes precedence over the command-line defaults.

        """
        params = self.ctx.params
        preset = params.get('preset')
        base = (
            _types.Preset(preset).config
            if preset is not None
            else CLI_DEFAULT_CONFIG
        )
        overrides = {
            field: params[field]
            for field in (
                'type',
                'length',
                'iteration',
                'separator',
                'template',
            )
            if params.get(field) is not None
        }
        config = base._replace(**overrides)
        config = config._replace(
            type=(
                config.type.value
                if isinstance(config.type, _types.PasswordType)
                else config.type
            ),
            length=(
                config.length
                if config.length is not None
                else CLI_DEFAULT_CONFIG.length
            ),
        )
        charset = params.get('charset')
        exclude = params.get('exclude')
        if config.type == _types.PasswordType.CUSTOM.value:
            if charset is not None:
                try:
                    config = config._replace(
                        charset=charsets.build_custom_charset(
                            charset, exclude or ''
                        )
                    )
                except errors.ArgumentError as exc:
                    self.err(
                        _msg.TranslatedString(
                            _msg.ErrMsg.INVALID_CHARSET,
                            error='; '.join(exc.errors),
                        )
                    )
        elif charset is not None or exclude is not None:
            self.warning(
                _msg.TranslatedString(
                    _msg.WarnMsg.CHARSET_IGNORED, type=config.type
                )
            )
        if (
            params.get('template') is not None
            and config.type != _types.PasswordType.TEMPLATE.value
        ):
            self.warning(
                _msg.TranslatedString(
                    _msg.WarnMsg.TEMPLATE_IGNORED, type=config.type
                )
            )
            config = config._replace(template=None)
        if params.get('length') is not None:
            try:
                password_type = _types.PasswordType(config.type)
            except ValueError:
                pass
            else:
                if not password_type.requires_length:
                    self.warning(
                        _msg.TranslatedString(
                            _msg.WarnMsg.LENGTH_IGNORED,
                            type=config.type,
                        )
                    )
        resolved = self.service.resolve_config(config)
        self.logger.debug(
            _msg.TranslatedString(
                _msg.DebugMsg.RESOLVED_CONFIGURATION,
                config=resolved.as_dict(),
            ),
            extra={'color': self.ctx.color},
        )
        return resolved

    def check_dictionary(self, config: _types.PasswordConfig, /) -> None:
        """Load the dictionary for word-based types, and check its size."""
        try:
            password_type = _types.PasswordType(config.type)
        except ValueError:
            return
        if password_type.family is not _types.StrategyFamily.WORDS:
            return
        path = (
            self.diceware_wordlist_path
            if password_type is _types.PasswordType.DICEWARE
            else self.ctx.params.get('wordlist')
        )
        try:
            size = self.service.dictionary_size(password_type)
        except errors.DicewareDictionaryError as exc:
            self.diceware_error(exc, path)
        except errors.PortBackendError as exc:
            cause = exc.__cause__
            error = (
                cause.strerror
                if isinstance(cause, OSError) and cause.strerror
                else str(cause or exc)
            )
            self.err(
                _msg.TranslatedString(
                    _msg.ErrMsg.CANNOT_LOAD_WORDLIST,
                    error=error,
                    filename=path,
                ).maybe_without_filename()
            )
        if size == 0:
            self.err(_msg.TranslatedString(_msg.ErrMsg.EMPTY_WORDLIST))
        if (
            password_type is _types.PasswordType.DICEWARE
            and size != wordlist.DICEWARE_WORD_COUNT
        ):
            self.diceware_error(
                errors.DicewareDictionaryError(
                    size, wordlist.DICEWARE_WORD_COUNT
                ),
                path,
            )

    def diceware_error(
        self, exc: errors.DicewareDictionaryError, path: str | None, /
    ) -> NoReturn:
        """Abort, because the diceware word list is missing or unusable."""
        self.err(
            _msg.TranslatedString(
                _msg.ErrMsg.DICEWARE_WORDLIST_UNUSABLE,
                error=str(exc),
                filename=path,
                expected=exc.expected,
            ).maybe_without_filename()
        )

    def generate(
        self, config: _types.PasswordConfig, count: int, /
    ) -> list[cli_helpers.GeneratedPassword]:
        """Generate `count` passwords, all or nothing."""
        try:
            passwords = self.service.generate_multiple([config] * count)
            report = self.service.calculate_entropy(config)
        except errors.UnknownTypeError as exc:
            self.err(
                _msg.TranslatedString(
                    _msg.ErrMsg.UNKNOWN_PASSWORD_TYPE,
                    type=exc.type_tag,
                    valid_types=', '.join(exc.valid_types),
                )
            )
        except errors.EntropyDeficitError as exc:
            self.err(
                _msg.TranslatedString(
                    _msg.ErrMsg.ENTROPY_DEFICIT,
                    actual=exc.actual_bits,
                    required=exc.required_bits,
                )
            )
        except errors.DicewareDictionaryError as exc:
            self.diceware_error(exc, self.diceware_wordlist_path)
        except errors.ArgumentError as exc:
            self.err(
                _msg.TranslatedString(
                    _msg.ErrMsg.INVALID_CONFIGURATION,
                    errors='; '.join(exc.errors),
                )
            )
        except errors.EmptyDictionaryError:
            self.err(_msg.TranslatedString(_msg.ErrMsg.EMPTY_WORDLIST))
        except errors.PortBackendError as exc:
            self.err(
                _msg.TranslatedString(
                    _msg.ErrMsg.CANNOT_GENERATE_PASSWORDS,
                    error=str(exc),
                )
            )
        if config.type == _types.PasswordType.QUANTUM_RESISTANT.value:
            self.info(
                _msg.TranslatedString(
                    _msg.InfoMsg.QUANTUM_RESISTANT_NOTE
                )
            )
        return [
            cli_helpers.GeneratedPassword(password, config, report)
            for password in passwords
        ]

    def audit(
        self, generated: Sequence[cli_helpers.GeneratedPassword], /
    ) -> None:
        """Report on the passwords, and append them to the audit trail."""
        timestamp = self.service.clock.now()
        kdf = self.kdf_parameters
        for index, item in enumerate(generated, start=1):
            self.info(
                _msg.TranslatedString(
                    _msg.InfoMsg.ENTROPY_REPORT,
                    index=index,
                    type=item.config.type,
                    bits=item.report.total_bits,
                    level=item.report.security_level.value,
                    recommendation=item.report.recommendation,
                )
            )
        try:
            cli_helpers.append_audit_records(
                self.service.storage,
                [
                    cli_helpers.audit_record(
                        item, timestamp=timestamp, kdf=kdf
                    )
                    for item in generated
                ],
            )
        except errors.PassgenError as exc:
            self.err(
                _msg.TranslatedString(
                    _msg.ErrMsg.CANNOT_WRITE_AUDIT_TRAIL,
                    error=str(exc),
                )
            )
        self.logger.debug(
            _msg.TranslatedString(
                _msg.DebugMsg.AUDIT_RECORD_WRITTEN,
                filename=str(cli_helpers.config_filename(subsystem='audit')),
            ),
            extra={'color': self.ctx.color},
        )

    def output(
        self, generated: Sequence[cli_helpers.GeneratedPassword], /
    ) -> None:
        """Print the passwords in the requested format."""
        if self.ctx.params.get('clipboard'):
            self.warning(
                _msg.TranslatedString(
                    _msg.WarnMsg.CLIPBOARD_UNAVAILABLE
                )
            )
        click.echo(
            cli_helpers.format_output(
                generated,
                self.ctx.params.get('output_format') or 'text',
                generated_at=self.service.clock.now(),
                kdf=self.kdf_parameters,
            ),
            nl=False,
            color=self.ctx.color,
        )


def _metavar(label: _msg.Label, /) -> str:
    return _msg.render(label)


def _help(label: _msg.Label, metavar: _msg.Label, /) -> str:
    return _msg.render(label, metavar=_msg.render(metavar))


@click.command(
    PROG_NAME,
    context_settings={'help_option_names': ['-h', '--help']},
    cls=cli_machinery.GroupedCommand,
    help='\n\n'.join([
        _msg.render(_msg.Label.PASSGEN_01),
        _msg.render(_msg.Label.PASSGEN_02),
    ]),
    epilog=_msg.render(_msg.Label.PASSGEN_EPILOG_01),
)
@click.option(
    '-t',
    '--type',
    'type',
    metavar=_metavar(_msg.Label.METAVAR_TYPE),
    help=_help(_msg.Label.TYPE_HELP_TEXT, _msg.Label.METAVAR_TYPE),
    cls=cli_machinery.GroupedOption,
    group=cli_machinery.GENERATION_GROUP,
)
@click.option(
    '-l',
    '--length',
    metavar=_metavar(_msg.Label.METAVAR_NUMBER),
    type=cli_machinery.PositiveInt(maximum=validation.MAX_LENGTH),
    help=_help(_msg.Label.LENGTH_HELP_TEXT, _msg.Label.METAVAR_NUMBER),
    cls=cli_machinery.GroupedOption,
    group=cli_machinery.GENERATION_GROUP,
)
@click.option(
    '-i',
    '--iteration',
    metavar=_metavar(_msg.Label.METAVAR_NUMBER),
    type=cli_machinery.PositiveInt(maximum=validation.MAX_LENGTH),
    help=_help(_msg.Label.ITERATION_HELP_TEXT, _msg.Label.METAVAR_NUMBER),
    cls=cli_machinery.GroupedOption,
    group=cli_machinery.GENERATION_GROUP,
)
@click.option(
    '-s',
    '--separator',
    metavar=_metavar(_msg.Label.METAVAR_STRING),
    help=_help(_msg.Label.SEPARATOR_HELP_TEXT, _msg.Label.METAVAR_STRING),
    cls=cli_machinery.GroupedOption,
    group=cli_machinery.GENERATION_GROUP,
)
@click.option(
    '-p',
    '--preset',
    metavar=_metavar(_msg.Label.METAVAR_PRESET),
    type=click.Choice([p.value for p in _types.Preset]),
    help=_help(_msg.Label.PRESET_HELP_TEXT, _msg.Label.METAVAR_PRESET),
    cls=cli_machinery.GroupedOption,
    group=cli_machinery.GENERATION_GROUP,
)
@click.option(
    '--charset',
    metavar=_metavar(_msg.Label.METAVAR_CHARS),
    help=_help(_msg.Label.CHARSET_HELP_TEXT, _msg.Label.METAVAR_CHARS),
    cls=cli_machinery.GroupedOption,
    group=cli_machinery.GENERATION_GROUP,
)
@click.option(
    '--exclude',
    metavar=_metavar(_msg.Label.METAVAR_CHARS),
    help=_help(_msg.Label.EXCLUDE_HELP_TEXT, _msg.Label.METAVAR_CHARS),
    cls=cli_machinery.GroupedOption,
    group=cli_machinery.GENERATION_GROUP,
)
@click.option(
    '-T',
    '--template',
    metavar=_metavar(_msg.Label.METAVAR_PATTERN),
    help=_help(_msg.Label.TEMPLATE_HELP_TEXT, _msg.Label.METAVAR_PATTERN),
    cls=cli_machinery.GroupedOption,
    group=cli_machinery.GENERATION_GROUP,
)
@click.option(
    '--wordlist',
    metavar=_metavar(_msg.Label.METAVAR_PATH),
    type=click.Path(dir_okay=False),
    help=_help(_msg.Label.WORDLIST_HELP_TEXT, _msg.Label.METAVAR_PATH),
    cls=cli_machinery.GroupedOption,
    group=cli_machinery.GENERATION_GROUP,
)
@click.option(
    '--diceware-wordlist',
    metavar=_metavar(_msg.Label.METAVAR_PATH),
    type=click.Path(dir_okay=False),
    help=_help(
        _msg.Label.DICEWARE_WORDLIST_HELP_TEXT, _msg.Label.METAVAR_PATH
    ),
    cls=cli_machinery.GroupedOption,
    group=cli_machinery.GENERATION_GROUP,
)
@click.option(
    '-n',
    '--count',
    metavar=_metavar(_msg.Label.METAVAR_NUMBER),
    type=cli_machinery.PositiveInt(maximum=validation.MAX_LENGTH),
    default=1,
    help=_help(_msg.Label.COUNT_HELP_TEXT, _msg.Label.METAVAR_NUMBER),
    cls=cli_machinery.GroupedOption,
    group=cli_machinery.OUTPUT_GROUP,
)
@click.option(
    '-f',
    '--format',
    'output_format',
    metavar=_metavar(_msg.Label.METAVAR_FORMAT),
    type=click.Choice(list(cli_machinery.OUTPUT_FORMATS)),
    default='text',
    help=_help(_msg.Label.FORMAT_HELP_TEXT, _msg.Label.METAVAR_FORMAT),
    cls=cli_machinery.GroupedOption,
    group=cli_machinery.OUTPUT_GROUP,
)
@click.option(
    '-c',
    '--clipboard',
    is_flag=True,
    help=_msg.render(_msg.Label.CLIPBOARD_HELP_TEXT),
    cls=cli_machinery.GroupedOption,
    group=cli_machinery.OUTPUT_GROUP,
)
@click.option(
    '-a',
    '--audit',
    is_flag=True,
    help=_msg.render(_msg.Label.AUDIT_HELP_TEXT),
    cls=cli_machinery.GroupedOption,
    group=cli_machinery.AUDIT_GROUP,
)
@click.option(
    '--self-check',
    is_flag=True,
    help=_msg.render(_msg.Label.SELF_CHECK_HELP_TEXT),
    cls=cli_machinery.GroupedOption,
    group=cli_machinery.AUDIT_GROUP,
)
@click.option(
    '--kdf-memory',
    metavar=_metavar(_msg.Label.METAVAR_NUMBER),
    type=cli_machinery.PositiveInt(),
    help=_help(_msg.Label.KDF_MEMORY_HELP_TEXT, _msg.Label.METAVAR_NUMBER),
    cls=cli_machinery.GroupedOption,
    group=cli_machinery.AUDIT_GROUP,
)
@click.option(
    '--kdf-time',
    metavar=_metavar(_msg.Label.METAVAR_NUMBER),
    type=cli_machinery.PositiveInt(),
    help=_help(_msg.Label.KDF_TIME_HELP_TEXT, _msg.Label.METAVAR_NUMBER),
    cls=cli_machinery.GroupedOption,
    group=cli_machinery.AUDIT_GROUP,
)
@click.option(
    '--kdf-parallelism',
    metavar=_metavar(_msg.Label.METAVAR_NUMBER),
    type=cli_machinery.PositiveInt(),
    help=_help(
        _msg.Label.KDF_PARALLELISM_HELP_TEXT, _msg.Label.METAVAR_NUMBER
    ),
    cls=cli_machinery.GroupedOption,
    group=cli_machinery.AUDIT_GROUP,
)
@click.option(
    '--version',
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=cli_machinery.print_version,
    help=_msg.render(_msg.Label.VERSION_OPTION_HELP_TEXT),
)
@cli_machinery.logging_options
@click.pass_context
def passgen(
    ctx: click.Context,
    /,
    **_kwargs: Any,  # noqa: ANN401
) -> None:
    """Generate secure passwords and passphrases.

    This is a [`click`][CLICK]-powered command-line interface function,
    and not intended for programmatic use.  (See
    [`click.testing.CliRunner`][] for controlled, programmatic
    invocation, and [`PasswordService`][passgen.service.PasswordService]
    for the programmatic interface.)

    [CLICK]: https://pypi.org/package/click/

    Parameters:
        ctx (click.Context):
            The `click` context.

    Other Parameters:
        type (str | None):
            Command-line argument `-t`/`--type`.  The password type.
        length (int | None):
            Command-line argument `-l`/`--length`.  The chunk length of
            chunked types.
        iteration (int | None):
            Command-line argument `-i`/`--iteration`.  The number of
            chunks, words or syllables.
        separator (str | None):
            Command-line argument `-s`/`--separator`.
        preset (str | None):
            Command-line argument `-p`/`--preset`.  A named base
            configuration; explicit options override it.
        charset (str | None):
            Command-line argument `--charset`.  For custom character
            sets, a comma-separated list of character set names or
            literal characters.
        exclude (str | None):
            Command-line argument `--exclude`.  Characters to remove
            from the custom character set.
        template (str | None):
            Command-line argument `-T`/`--template`.  The pattern of
            template passwords.
        wordlist (str | None):
            Command-line argument `--wordlist`.  A word list file for
            memorable passphrases and honeywords.
        diceware_wordlist (str | None):
            Command-line argument `--diceware-wordlist`.  A word list
            file for diceware passphrases, of exactly 7776 words.
            Defaults to the `--wordlist` file.
        count (int):
            Command-line argument `-n`/`--count`.  The number of
            passwords to generate.
        output_format (str):
            Command-line argument `-f`/`--format`.  One of "text",
            "json", "yaml" or "csv".
        clipboard (bool):
            Command-line argument `-c`/`--clipboard`.  Accepted, but
            unsupported: passwords are printed instead.
        audit (bool):
            Command-line argument `-a`/`--audit`.  Append a record per
            password to the audit trail, and report the entropy at info
            level.
        self_check (bool):
            Command-line argument `--self-check`.  Run the random
            source's uniformity self-check instead of generating.
        kdf_memory (int | None):
            Command-line argument `--kdf-memory`.
        kdf_time (int | None):
            Command-line argument `--kdf-time`.
        kdf_parallelism (int | None):
            Command-line argument `--kdf-parallelism`.  These key
            derivation parameters are recorded in the audit trail and
            the structured output formats, never used.

    """
    passgen_context = _PassgenContext(ctx)
    if ctx.params.get('self_check'):
        passgen_context.run_self_check()
        return
    config = passgen_context.resolve_config()
    passgen_context.check_dictionary(config)
    generated = passgen_context.generate(config, ctx.params['count'])
    if ctx.params.get('audit'):
        passgen_context.audit(generated)
    passgen_context.output(generated)


if __name__ == '__main__':
    passgen()
