# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING

import hypothesis
import pytest

import tests
from passgen import adapters, service

if TYPE_CHECKING:
    from collections.abc import Iterator

# https://hypothesis.readthedocs.io/en/latest/settings.html#settings-profiles
hypothesis.settings.register_profile('ci', max_examples=1000)
hypothesis.settings.register_profile('dev', max_examples=10)
hypothesis.settings.register_profile(
    'debug', max_examples=10, verbosity=hypothesis.Verbosity.verbose
)
hypothesis.settings.register_profile(
    'flaky', deadline=datetime.timedelta(milliseconds=150)
)


# https://docs.pytest.org/en/stable/explanation/fixtures.html#a-note-about-fixture-cleanup
# https://github.com/pytest-dev/pytest/issues/5243#issuecomment-491522595
@pytest.fixture(scope='session', autouse=True)
def term_handler() -> Iterator[None]:  # pragma: no cover
    try:
        import signal  # noqa: PLC0415

        sigint_handler = signal.getsignal(signal.SIGINT)
    except (ImportError, OSError):
        return
    else:
        orig_term = signal.signal(signal.SIGTERM, sigint_handler)
        yield
        signal.signal(signal.SIGTERM, orig_term)


@pytest.fixture
def memory_storage() -> adapters.MemoryStorage:
    """Provide an empty in-memory storage."""
    return adapters.MemoryStorage()


@pytest.fixture
def password_service(
    memory_storage: adapters.MemoryStorage,
) -> service.PasswordService:
    """Provide a password service with the system random source.

    The service uses the small test word list, a fixed clock and
    in-memory storage.

    """
    return service.PasswordService(
        dictionary=tests.small_dictionary(),
        clock=tests.fixed_clock(),
        storage=memory_storage,
    )
