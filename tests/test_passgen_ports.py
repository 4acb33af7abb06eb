# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Test the port contracts and the built-in adapters."""

from __future__ import annotations

import datetime
import logging
import pathlib

import pytest

import tests
from passgen import adapters, errors, ports, randomness, service, wordlist


class NoClock:
    """An adapter that is not a clock."""

    def then(self) -> None:  # pragma: no cover
        """Not the method you are looking for."""


class HalfStorage:
    """A storage adapter that cannot write."""

    def read(self, key: str, /) -> str | None:  # noqa: PLR6301
        """Return nothing."""
        del key
        return None  # pragma: no cover


class Parametrize:
    GOOD_ADAPTERS = pytest.mark.parametrize(
        ['port_name', 'adapter'],
        [
            pytest.param(
                'random_source',
                randomness.SystemRandomSource(),
                id='system-random-source',
            ),
            pytest.param(
                'random_source',
                randomness.ByteSequenceRandomSource(b''),
                id='byte-sequence-random-source',
            ),
            pytest.param(
                'dictionary', wordlist.MemoryDictionary(), id='memory-dictionary'
            ),
            pytest.param(
                'dictionary',
                wordlist.FileDictionary('words.txt'),
                id='file-dictionary',
            ),
            pytest.param('clock', adapters.SystemClock(), id='system-clock'),
            pytest.param('clock', adapters.FixedClock(), id='fixed-clock'),
            pytest.param(
                'logger', logging.getLogger('passgen'), id='stdlib-logger'
            ),
            pytest.param(
                'logger', tests.RecordingLogger(), id='recording-logger'
            ),
            pytest.param(
                'storage', adapters.MemoryStorage(), id='memory-storage'
            ),
            pytest.param(
                'storage', adapters.FileStorage('data'), id='file-storage'
            ),
        ],
    )
    BAD_ADAPTERS = pytest.mark.parametrize(
        ['port_name', 'adapter', 'missing'],
        [
            pytest.param('clock', NoClock(), ['now'], id='clock'),
            pytest.param('storage', HalfStorage(), ['write'], id='storage'),
            pytest.param(
                'random_source',
                wordlist.MemoryDictionary(),
                ['random_bytes', 'random_int', 'random_string'],
                id='random-source',
            ),
            pytest.param(
                'logger', adapters.MemoryStorage(), ['error', 'info', 'warning'],
                id='logger',
            ),
        ],
    )
    BAD_STORAGE_KEYS = pytest.mark.parametrize(
        'key', ['', '.', '..', 'a/b', 'a\\b']
    )


class TestCapabilityChecks:
    """Test the capability checks at adapter registration time."""

    @Parametrize.GOOD_ADAPTERS
    def test_100_good_adapters(self, port_name: str, adapter: object) -> None:
        """Built-in adapters satisfy their ports."""
        assert ports.check_port(port_name, adapter) is adapter

    @Parametrize.BAD_ADAPTERS
    def test_101_bad_adapters(
        self, port_name: str, adapter: object, missing: list[str]
    ) -> None:
        """Incomplete adapters are rejected, naming what is missing."""
        with pytest.raises(errors.PortContractError) as excinfo:
            ports.check_port(port_name, adapter)
        assert excinfo.value.port_name == port_name
        assert excinfo.value.missing == missing
        assert type(adapter).__name__ in str(excinfo.value)

    def test_102_unknown_port(self) -> None:
        """Unknown ports are rejected."""
        with pytest.raises(errors.PortContractError, match='Unknown port'):
            ports.check_port('teleporter', object())

    def test_103_non_callable_attributes(self) -> None:
        """Capabilities must be callable."""

        class FakeClock:
            now = datetime.datetime(2000, 1, 1)

        with pytest.raises(errors.PortContractError):
            ports.check_port('clock', FakeClock())

    def test_200_service_rejects_bad_adapters_up_front(self) -> None:
        """The service checks its adapters when it is constructed."""
        with pytest.raises(errors.PortContractError):
            service.PasswordService(clock=NoClock())  # type: ignore[arg-type]
        with pytest.raises(errors.PortContractError):
            service.PasswordService(
                random_source=tests.small_dictionary()  # type: ignore[arg-type]
            )


class TestClocks:
    """Test the clock adapters."""

    def test_100_system_clock_is_aware(self) -> None:
        """The system clock reports timezone-aware UTC instants."""
        now = adapters.SystemClock().now()
        assert now.utcoffset() == datetime.timedelta(0)

    def test_101_fixed_clock(self) -> None:
        """The fixed clock never moves."""
        clock = tests.fixed_clock()
        assert clock.now() == tests.FIXED_INSTANT
        assert clock.now() == clock.now()

    def test_102_fixed_clock_defaults(self) -> None:
        """The fixed clock defaults to the Unix epoch, and assumes UTC."""
        assert adapters.FixedClock().now().timestamp() == 0
        naive = datetime.datetime(2001, 2, 3)  # noqa: DTZ001
        assert adapters.FixedClock(naive).now().tzinfo is datetime.timezone.utc


class TestStorage:
    """Test the storage adapters."""

    def test_100_memory_storage(
        self, memory_storage: adapters.MemoryStorage
    ) -> None:
        """Memory storage stores values by key."""
        assert memory_storage.read('key') is None
        memory_storage.write('key', 'value')
        memory_storage.write('key', 'other value')
        assert memory_storage.read('key') == 'other value'

    def test_101_memory_storage_append(
        self, memory_storage: adapters.MemoryStorage
    ) -> None:
        """Appended values start on a fresh line."""
        memory_storage.append('key', 'one\n')
        memory_storage.append('key', 'two\n')
        assert memory_storage.read('key') == 'one\ntwo\n'
        memory_storage.write('other', 'partial')
        memory_storage.append('other', 'three\n')
        assert memory_storage.read('other') == 'partial\nthree\n'

    def test_200_file_storage(self, tmp_path: pathlib.Path) -> None:
        """File storage keeps one file per key, creating the directory."""
        storage = adapters.FileStorage(tmp_path / 'data')
        assert storage.read('audit.jsonl') is None
        storage.write('audit.jsonl', 'one\n')
        storage.write('audit.jsonl', 'two\n')
        assert storage.read('audit.jsonl') == 'two\n'
        assert (tmp_path / 'data' / 'audit.jsonl').read_text(
            encoding='UTF-8'
        ) == 'two\n'

    @Parametrize.BAD_STORAGE_KEYS
    def test_201_file_storage_bad_keys(
        self, tmp_path: pathlib.Path, key: str
    ) -> None:
        """Keys must be plain filenames."""
        storage = adapters.FileStorage(tmp_path)
        with pytest.raises(errors.ArgumentError):
            storage.read(key)
        with pytest.raises(errors.ArgumentError):
            storage.write(key, 'value')

    def test_202_file_storage_backend_failure(
        self, tmp_path: pathlib.Path
    ) -> None:
        """Unwritable storage locations are backend failures."""
        blocker = tmp_path / 'blocker'
        blocker.write_text('not a directory', encoding='UTF-8')
        storage = adapters.FileStorage(blocker)
        with pytest.raises(errors.PortBackendError) as excinfo:
            storage.write('key', 'value')
        assert isinstance(excinfo.value.__cause__, OSError)

    def test_203_file_storage_append(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path
    ) -> None:
        """Appending extends the file in place, on a fresh line."""
        storage = adapters.FileStorage(tmp_path)
        path = tmp_path / 'audit.jsonl'
        path.write_bytes(b'{"old": 1}')
        inode = path.stat().st_ino

        def fail(*_args: object) -> None:  # pragma: no cover
            msg = 'whole-file access during append'
            raise AssertionError(msg)

        monkeypatch.setattr(storage, 'read', fail)
        monkeypatch.setattr(storage, 'write', fail)
        storage.append('audit.jsonl', '{"new": 2}\n')
        storage.append('audit.jsonl', '{"new": 3}\n')
        assert path.read_bytes() == b'{"old": 1}\n{"new": 2}\n{"new": 3}\n'
        assert path.stat().st_ino == inode

    def test_204_file_storage_append_creates_file(
        self, tmp_path: pathlib.Path
    ) -> None:
        """Appending to a missing key creates the file and directory."""
        storage = adapters.FileStorage(tmp_path / 'data')
        storage.append('audit.jsonl', 'one\n')
        assert storage.read('audit.jsonl') == 'one\n'
        with pytest.raises(errors.ArgumentError):
            storage.append('../escape', 'value')

    def test_205_file_storage_append_failure(
        self, tmp_path: pathlib.Path
    ) -> None:
        """Unwritable append locations are backend failures."""
        blocker = tmp_path / 'blocker'
        blocker.write_text('not a directory', encoding='UTF-8')
        storage = adapters.FileStorage(blocker)
        with pytest.raises(errors.PortBackendError):
            storage.append('key', 'value')
