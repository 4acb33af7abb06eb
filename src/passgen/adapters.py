# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Clock and storage adapters.

These serve the peripheral parts of passgen (metadata timestamps, the
audit trail).  Password generation never consults them.

"""

from __future__ import annotations

import datetime
import os
import pathlib

from passgen import errors

__all__ = (
    'FileStorage',
    'FixedClock',
    'MemoryStorage',
    'SystemClock',
)


class SystemClock:
    """The system clock, in UTC."""

    def now(self) -> datetime.datetime:  # noqa: PLR6301
        """Return the current time."""
        return datetime.datetime.now(datetime.timezone.utc)


class FixedClock:
    """A clock that is stuck at a fixed instant."""

    def __init__(self, instant: datetime.datetime | None = None, /) -> None:
        """Initialize the clock.

        Args:
            instant:
                The instant to report.  Defaults to the Unix epoch.
                Naive datetimes are taken to be in UTC.

        """
        if instant is None:
            instant = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)
        elif instant.tzinfo is None:
            instant = instant.replace(tzinfo=datetime.timezone.utc)
        self.instant = instant

    def now(self) -> datetime.datetime:
        """Return the fixed instant."""
        return self.instant


class MemoryStorage:
    """A key-value store in a `dict`."""

    def __init__(self) -> None:  # noqa: D107
        self.data: dict[str, str] = {}

    def read(self, key: str, /) -> str | None:
        """Return the value stored under `key`, or `None`."""
        return self.data.get(key)

    def write(self, key: str, value: str, /) -> None:
        """Store `value` under `key`."""
        self.data[key] = value

    def append(self, key: str, value: str, /) -> None:
        """Append `value` to the value under `key`, on a fresh line."""
        existing = self.data.get(key, '')
        if existing and not existing.endswith('\n'):
            existing += '\n'
        self.data[key] = existing + value


class FileStorage:
    """A key-value store, one UTF-8 text file per key in a directory."""

    def __init__(self, directory: str | os.PathLike[str], /) -> None:
        """Initialize the store.

        Args:
            directory:
                The storage directory.  Created on the first write.

        """
        self.directory = pathlib.Path(directory)

    def _path(self, key: str, /) -> pathlib.Path:
        if not key or key in {'.', '..'} or '/' in key or '\\' in key:
            msg = f'Invalid storage key: {key!r}'
            raise errors.ArgumentError(msg)
        return self.directory / key

    def read(self, key: str, /) -> str | None:
        """Return the contents of the file for `key`, or `None`.

        Raises:
            passgen.errors.ArgumentError:
                `key` is not usable as a filename.
            passgen.errors.PortBackendError:
                The file exists but cannot be read.

        """
        path = self._path(key)
        try:
            return path.read_text(encoding='UTF-8')
        except FileNotFoundError:
            return None
        except OSError as exc:
            msg = f'Cannot read {str(path)!r}: {exc.strerror}'
            raise errors.PortBackendError(msg) from exc

    def write(self, key: str, value: str, /) -> None:
        """Replace the contents of the file for `key` with `value`.

        Raises:
            passgen.errors.ArgumentError:
                `key` is not usable as a filename.
            passgen.errors.PortBackendError:
                The file cannot be written.

        """
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(value, encoding='UTF-8')
        except OSError as exc:
            msg = f'Cannot write {str(path)!r}: {exc.strerror}'
            raise errors.PortBackendError(msg) from exc

    def append(self, key: str, value: str, /) -> None:
        """Append `value` to the file for `key`, on a fresh line.

        The file is opened in append mode; its existing contents are
        neither read in full nor rewritten.  A missing file is created.

        Raises:
            passgen.errors.ArgumentError:
                `key` is not usable as a filename.
            passgen.errors.PortBackendError:
                The file cannot be written.

        """
        path = self._path(key)
        data = value.encode('UTF-8')
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with path.open('a+b') as outfile:
                if outfile.seek(0, os.SEEK_END) > 0:
                    outfile.seek(-1, os.SEEK_END)
                    if outfile.read(1) != b'\n':
                        data = b'\n' + data
                outfile.write(data)
        except OSError as exc:
            msg = f'Cannot write {str(path)!r}: {exc.strerror}'
            raise errors.PortBackendError(msg) from exc
