# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Messages for the command-line interface of `passgen`.

Every user-visible string of the command-line lives here, keyed by
a [`gettext`][] context, so that a translation catalog named `passgen`
can override it.

Warning:
    Non-public module (implementation detail), provided for didactical and
    educational purposes only. Subject to change without notice, including
    removal.

"""

from __future__ import annotations

import enum
import gettext
import os
import pathlib
import string
import sys
import types
from typing import TYPE_CHECKING, NamedTuple, Union

from typing_extensions import TypeAlias

from passgen import _internals

if TYPE_CHECKING:
    from collections.abc import Mapping

    from typing_extensions import Any, Self

__all__ = ('PROG_NAME',)

PROG_NAME = _internals.PROG_NAME
FILENAME_FIELD = ': {filename!r}'


def load_translations() -> gettext.NullTranslations:  # pragma: no cover
    """Load the translation catalog for passgen, if there is one.

    The catalog is looked up in `$XDG_DATA_HOME/locale` (usually
    `~/.local/share/locale`), then in `{sys.prefix}/share/locale`.

    """
    xdg_data_home = (
        pathlib.Path(os.environ['XDG_DATA_HOME'])
        if os.environ.get('XDG_DATA_HOME')
        else pathlib.Path('~').expanduser() / '.local' / 'share'
    )
    localedirs = (
        xdg_data_home / 'locale',
        pathlib.Path(sys.prefix, 'share', 'locale'),
    )
    for localedir in localedirs:
        catalog = gettext.translation(
            PROG_NAME, localedir=os.fsdecode(localedir), fallback=True
        )
        if type(catalog) is not gettext.NullTranslations:
            return catalog
    return gettext.NullTranslations()


translation = load_translations()


class Message(NamedTuple):
    """A translatable message.

    Attributes:
        context:
            The [`gettext`][] context, disambiguating equal texts.
        text:
            The English text, a [`str.format`][] template if it has
            replacement fields.

    """

    context: str
    """"""
    text: str
    """"""

    def fields(self) -> list[str]:
        """Return the replacement field names, in order of appearance.

        Examples:
            >>> Message('', '{count} words in {filename!r}.').fields()
            ['count', 'filename']

        """
        names: dict[str, None] = {}
        for _literal, field, _spec, _conv in string.Formatter().parse(
            self.text
        ):
            if field is not None:
                names.setdefault(field)
        return list(names)


class TranslatedString:
    """A string object that stringifies to its translation.

    Translation and formatting happen when the object is first
    stringified, so log records are only rendered if they are emitted.

    """

    def __init__(
        self,
        template: MsgTemplate | Message,
        args_dict: Mapping[str, Any] = types.MappingProxyType({}),
        /,
        **kwargs: Any,  # noqa: ANN401
    ) -> None:
        """Initialize the string.

        Args:
            template:
                The message, or an enum member whose value is one.
            args_dict:
                Replacement values for the message's fields.
            kwargs:
                More replacement values.

        """
        self.message: Message = (
            template.value if isinstance(template, enum.Enum) else template
        )
        self.kwargs = {**args_dict, **kwargs}
        self._rendered: str | None = None

    def __str__(self) -> str:
        if self._rendered is None:
            template = translation.pgettext(
                self.message.context, self.message.text
            )
            kwargs = {
                k: str(v) if isinstance(v, TranslatedString) else v
                for k, v in self.kwargs.items()
            }
            self._rendered = template.format(**kwargs)
        return self._rendered

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f'{self.__class__.__name__}({self.message!r}, '
            f'{dict(self.kwargs)!r})'
        )

    def __eq__(self, other: object) -> bool:  # pragma: no cover
        return str(self) == other

    def __hash__(self) -> int:  # pragma: no cover
        return hash(str(self))

    def maybe_without_filename(self) -> Self:
        """Drop the `": {filename!r}"` part if no filename is known.

        This is correct usage in English for messages like
        `"Cannot load the word list: {error}: {filename!r}."`, but not
        necessarily in other languages; the shortened text is looked up
        in the catalog separately.

        Examples:
            >>> str(
            ...     TranslatedString(
            ...         ErrMsg.CANNOT_LOAD_WORDLIST, error='denied', filename=None
            ...     ).maybe_without_filename()
            ... )
            'Cannot load the word list: denied.'

        """
        if self.kwargs.get('filename') is not None:
            return self
        text = self.message.text.replace(FILENAME_FIELD, '', 1)
        if text == self.message.text:
            return self
        return self.__class__(self.message._replace(text=text), self.kwargs)


def render(template: MsgTemplate, /, **kwargs: Any) -> str:  # noqa: ANN401
    """Return the translated and formatted text of a message right away.

    Used for help texts, which `click` needs as real strings.

    """
    return str(TranslatedString(template, kwargs))


class Label(enum.Enum):
    """Labels for the `passgen` command-line: help texts and markers."""

    WARNING_LABEL = Message('Label :: Diagnostics :: Marker', 'Warning')
    """TRANSLATORS: Prepended to warnings, as in "Warning: ..."."""
    PASSGEN_01 = Message(
        'Label :: Help text :: One-line description',
        'Generate secure passwords and passphrases.',
    )
    """"""
    PASSGEN_02 = Message(
        'Label :: Help text :: Explanation',
        'Chunked types ("strong", "base64", "custom" and '
        '"quantum-resistant") produce chunks of random characters.  '
        'Word-based types ("memorable", "diceware" and "honeyword") '
        'produce title-cased words, "pronounceable" produces '
        'consonant-vowel-consonant syllables, and "template" expands '
        'a pattern such as "[A-Z]{{4}}-[0-9]{{4}}".  Diceware needs '
        'a word list of exactly 7776 words.',
    )
    """TRANSLATORS: Braces are doubled; they print as single braces."""
    PASSGEN_EPILOG_01 = Message(
        'Label :: Help text :: Explanation',
        'The audit trail is stored in a directory according to the '
        '`PASSGEN_PATH` variable, which defaults to `~/.passgen` on '
        'UNIX-like systems and '
        r'`C:\Users\<user>\AppData\Roaming\Passgen` on Windows.  '
        'It never contains the passwords themselves.',
    )
    """"""
    DEBUG_OPTION_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'Also emit debug information.  Implies --verbose.',
    )
    """"""
    QUIET_OPTION_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'Suppress even warnings; emit only errors.',
    )
    """"""
    VERBOSE_OPTION_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'Emit extra/progress information to standard error.',
    )
    """"""
    VERSION_OPTION_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'Show applicable version information, then exit.',
    )
    """"""
    TYPE_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'Generate passwords of type {metavar} (default: strong).',
    )
    """"""
    LENGTH_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'Use chunks of {metavar} characters (default: 16).',
    )
    """"""
    ITERATION_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'Use {metavar} chunks, words, syllables or template expansions '
        '(default: 3).',
    )
    """"""
    SEPARATOR_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'Join the parts with {metavar} '
        '(default: "-", or nothing for pronounceable passwords).',
    )
    """"""
    PRESET_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'Start from the preset configuration {metavar}.',
    )
    """"""
    CHARSET_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'For "custom" passwords, draw from {metavar}, '
        'a comma-separated list of character set names or literal characters.',
    )
    """"""
    EXCLUDE_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'For "custom" passwords, never use the characters in {metavar}.',
    )
    """"""
    TEMPLATE_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'For "template" passwords, expand {metavar}: bracketed character '
        'sets, each optionally repeated by a {{count}}, among literal text.',
    )
    """TRANSLATORS: "{{count}}" prints as "{count}"; keep it verbatim."""
    WORDLIST_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'Read memorable words and honeywords from {metavar}.',
    )
    """"""
    DICEWARE_WORDLIST_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'Read diceware words from {metavar} (default: the --wordlist file).',
    )
    """"""
    COUNT_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'Generate {metavar} passwords (default: 1).',
    )
    """"""
    FORMAT_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'Print the passwords in format {metavar} (default: text).',
    )
    """"""
    CLIPBOARD_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'Copy the passwords to the clipboard.  '
        'Not supported; passwords are printed instead.',
    )
    """"""
    AUDIT_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'Record the strength of each password in the audit trail.  '
        'With --verbose, also report it.',
    )
    """"""
    SELF_CHECK_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'Check the random source for uniformity, then exit.',
    )
    """"""
    KDF_MEMORY_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'Record a key derivation memory cost of {metavar} KiB.',
    )
    """"""
    KDF_TIME_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'Record a key derivation time cost of {metavar} passes.',
    )
    """"""
    KDF_PARALLELISM_HELP_TEXT = Message(
        'Label :: Help text :: One-line description',
        'Record a key derivation parallelism of {metavar} lanes.',
    )
    """"""
    METAVAR_CHARS = Message('Label :: Help text :: Metavar', 'CHARS')
    """"""
    METAVAR_FORMAT = Message('Label :: Help text :: Metavar', 'FORMAT')
    """"""
    METAVAR_NUMBER = Message('Label :: Help text :: Metavar', 'NUMBER')
    """"""
    METAVAR_PATH = Message('Label :: Help text :: Metavar', 'PATH')
    """"""
    METAVAR_PATTERN = Message('Label :: Help text :: Metavar', 'PATTERN')
    """"""
    METAVAR_PRESET = Message('Label :: Help text :: Metavar', 'PRESET')
    """"""
    METAVAR_STRING = Message('Label :: Help text :: Metavar', 'STRING')
    """"""
    METAVAR_TYPE = Message('Label :: Help text :: Metavar', 'TYPE')
    """"""
    PASSWORD_GENERATION_EPILOG = Message(
        'Label :: Help text :: Explanation',
        'Each {metavar} must be a positive integer, at most 1024.  '
        'Explicitly given options take precedence over the preset.  '
        'Only chunked types use the length.',
    )
    """"""
    AUDIT_EPILOG = Message(
        'Label :: Help text :: Explanation',
        'The key derivation parameters are only recorded in the audit '
        'trail and in structured output.  passgen does not hash passwords.',
    )
    """"""
    AUDIT_LABEL = Message(
        'Label :: Help text :: Option group name', 'Security audit'
    )
    """TRANSLATORS: This and the following labels head option groups."""
    LOGGING_LABEL = Message('Label :: Help text :: Option group name', 'Logging')
    """"""
    OTHER_OPTIONS_LABEL = Message(
        'Label :: Help text :: Option group name', 'Other options'
    )
    """"""
    OUTPUT_LABEL = Message('Label :: Help text :: Option group name', 'Output')
    """"""
    PASSWORD_GENERATION_LABEL = Message(
        'Label :: Help text :: Option group name', 'Password generation'
    )
    """"""
    VERSION_INFO_MAJOR_LIBRARY_TEXT = Message(
        'Label :: Info message',
        'Using {dependency_name_and_version}.',
    )
    """TRANSLATORS: E.g. "Using click 8.2.1."."""
    SUPPORTED_OUTPUT_FORMATS = Message(
        'Label :: Info message :: Table row header',
        'Supported output formats:',
    )
    """TRANSLATORS: A comma-separated list follows."""
    SUPPORTED_PASSWORD_TYPES = Message(
        'Label :: Info message :: Table row header',
        'Supported password types:',
    )
    """TRANSLATORS: A comma-separated list follows."""
    SUPPORTED_PRESETS = Message(
        'Label :: Info message :: Table row header',
        'Supported presets:',
    )
    """TRANSLATORS: A comma-separated list follows."""


class DebugMsg(enum.Enum):
    """Debug messages for the `passgen` command-line."""

    RESOLVED_CONFIGURATION = Message(
        'Debug message',
        'Resolved password configuration: {config!r}.',
    )
    """TRANSLATORS: "config" is the configuration after applying
    the preset and the command-line options."""
    AUDIT_RECORD_WRITTEN = Message(
        'Debug message',
        'Appended an audit record to {filename!r}.',
    )
    """"""


class InfoMsg(enum.Enum):
    """Info messages for the `passgen` command-line."""

    ENTROPY_REPORT = Message(
        'Info message',
        'Password {index}: {type}, {bits:.2f} bits of entropy ({level}).  '
        '{recommendation}',
    )
    """TRANSLATORS: "index" counts the passwords, starting at 1.  "level"
    is a security level such as "STRONG", and "recommendation" a fixed
    piece of advice for that level."""
    QUANTUM_RESISTANT_NOTE = Message(
        'Info message',
        'Quantum-resistant passwords carry at least 256 bits of entropy.  '
        'Store them using a memory-hard key derivation function '
        'such as Argon2id.',
    )
    """"""
    SELF_CHECK_PASSED = Message(
        'Info message',
        'Random source self-check passed: chi-squared statistic '
        '{chi_squared:.2f} over {sample_size} bytes '
        '(critical value {critical_value:.2f}).',
    )
    """"""


class WarnMsg(enum.Enum):
    """Warning messages for the `passgen` command-line."""

    CHARSET_IGNORED = Message(
        'Warning message',
        'Passwords of type {type!r} use a fixed character set.  '
        'Ignoring --charset and --exclude.',
    )
    """"""
    CLIPBOARD_UNAVAILABLE = Message(
        'Warning message',
        'No clipboard support is available.  '
        'Printing to standard output instead.',
    )
    """"""
    LENGTH_IGNORED = Message(
        'Warning message',
        'Passwords of type {type!r} do not use a length.  '
        'Ignoring --length.',
    )
    """"""
    TEMPLATE_IGNORED = Message(
        'Warning message',
        'Passwords of type {type!r} do not use a template.  '
        'Ignoring --template.',
    )
    """"""


class ErrMsg(enum.Enum):
    """Error messages for the `passgen` command-line."""

    CANNOT_GENERATE_PASSWORDS = Message(
        'Error message',
        'Cannot generate passwords: {error}.',
    )
    """TRANSLATORS: "error" comes from the failing component, e.g. the
    random source."""
    CANNOT_LOAD_WORDLIST = Message(
        'Error message',
        'Cannot load the word list: {error}: {filename!r}.',
    )
    """TRANSLATORS: "error" comes from the operating system."""
    CANNOT_WRITE_AUDIT_TRAIL = Message(
        'Error message',
        'Cannot write the audit trail: {error}.',
    )
    """"""
    DICEWARE_WORDLIST_UNUSABLE = Message(
        'Error message',
        'Cannot generate diceware passphrases: {error}: {filename!r}.  '
        'Use --diceware-wordlist to supply a list of {expected} words.',
    )
    """TRANSLATORS: "expected" is 7776."""
    EMPTY_WORDLIST = Message(
        'Error message',
        'Cannot generate word-based passwords from an empty word list.',
    )
    """"""
    ENTROPY_DEFICIT = Message(
        'Error message',
        'This quantum-resistant configuration provides only '
        '{actual:.1f} bits of entropy, but at least {required:g} bits '
        'are required.  Increase the length or the iteration count.',
    )
    """"""
    INVALID_CHARSET = Message(
        'Error message',
        'Invalid character set: {error}.',
    )
    """"""
    INVALID_CONFIGURATION = Message(
        'Error message',
        'Invalid password configuration: {errors}.',
    )
    """TRANSLATORS: "errors" is a semicolon-separated list of problems."""
    SELF_CHECK_FAILED = Message(
        'Error message',
        'Random source self-check failed: chi-squared statistic '
        '{chi_squared:.2f} exceeds the critical value {critical_value:.2f}.',
    )
    """"""
    UNKNOWN_PASSWORD_TYPE = Message(
        'Error message',
        'Unknown password type {type!r}.  Valid types: {valid_types}.',
    )
    """"""


MsgTemplate: TypeAlias = Union[Label, DebugMsg, InfoMsg, WarnMsg, ErrMsg]
"""Any enum whose members are [`Message`][]s."""
