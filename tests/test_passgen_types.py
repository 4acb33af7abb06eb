# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Test the data model in passgen._types."""

from __future__ import annotations

import datetime

import hypothesis
import pytest
from hypothesis import strategies

from passgen import _types


class Parametrize:
    LEVEL_BOUNDARIES = pytest.mark.parametrize(
        ['bits', 'level'],
        [
            pytest.param(0, _types.SecurityLevel.WEAK, id='zero'),
            pytest.param(63.99, _types.SecurityLevel.WEAK, id='below-64'),
            pytest.param(64, _types.SecurityLevel.MODERATE, id='64'),
            pytest.param(79.9, _types.SecurityLevel.MODERATE, id='below-80'),
            pytest.param(80, _types.SecurityLevel.GOOD, id='80'),
            pytest.param(127.9, _types.SecurityLevel.GOOD, id='below-128'),
            pytest.param(128, _types.SecurityLevel.STRONG, id='128'),
            pytest.param(255.9, _types.SecurityLevel.STRONG, id='below-256'),
            pytest.param(256, _types.SecurityLevel.EXCELLENT, id='256'),
            pytest.param(1e6, _types.SecurityLevel.EXCELLENT, id='huge'),
        ],
    )
    TYPE_FAMILIES = pytest.mark.parametrize(
        ['password_type', 'family'],
        [
            pytest.param('strong', _types.StrategyFamily.CHUNKED, id='strong'),
            pytest.param('base64', _types.StrategyFamily.CHUNKED, id='base64'),
            pytest.param('custom', _types.StrategyFamily.CHUNKED, id='custom'),
            pytest.param(
                'quantum-resistant',
                _types.StrategyFamily.CHUNKED,
                id='quantum-resistant',
            ),
            pytest.param(
                'memorable', _types.StrategyFamily.WORDS, id='memorable'
            ),
            pytest.param(
                'diceware', _types.StrategyFamily.WORDS, id='diceware'
            ),
            pytest.param(
                'honeyword', _types.StrategyFamily.WORDS, id='honeyword'
            ),
            pytest.param(
                'pronounceable',
                _types.StrategyFamily.SYLLABLES,
                id='pronounceable',
            ),
            pytest.param(
                'template', _types.StrategyFamily.TEMPLATE, id='template'
            ),
        ],
    )


class TestPasswordType:
    """Test the password type enumeration."""

    def test_100_tags_are_sorted(self) -> None:
        """The type tags are listed in sorted order."""
        tags = _types.PasswordType.tags()
        assert tags == sorted(tags)
        assert len(tags) == 9

    def test_101_tags_are_fresh_copies(self) -> None:
        """Modifying the tag list does not affect later calls."""
        tags = _types.PasswordType.tags()
        tags.clear()
        assert _types.PasswordType.tags()

    @Parametrize.TYPE_FAMILIES
    def test_200_family(
        self, password_type: str, family: _types.StrategyFamily
    ) -> None:
        """Each type belongs to exactly its algorithm family."""
        assert _types.PasswordType(password_type).family is family

    @Parametrize.TYPE_FAMILIES
    def test_201_requires_length(
        self, password_type: str, family: _types.StrategyFamily
    ) -> None:
        """Only chunked types use the length."""
        assert _types.PasswordType(password_type).requires_length is (
            family is _types.StrategyFamily.CHUNKED
        )


class TestPasswordConfig:
    """Test the password configuration."""

    def test_100_from_mapping_ignores_unknown_keys(self) -> None:
        """Unknown keys in the mapping form are ignored."""
        config = _types.PasswordConfig.from_mapping({
            'type': 'memorable',
            'iteration': 4,
            'color': 'blue',
        })
        assert config == _types.PasswordConfig('memorable', iteration=4)

    def test_101_from_mapping_keeps_invalid_values(self) -> None:
        """The mapping form is not validated."""
        config = _types.PasswordConfig.from_mapping({
            'type': 'strong',
            'length': 0,
            'separator': 5,
        })
        assert config.length == 0
        assert config.separator == 5

    def test_200_type_tag(self) -> None:
        """The type tag is always a plain string."""
        config = _types.PasswordConfig(_types.PasswordType.DICEWARE)
        assert config.type_tag == 'diceware'
        assert type(config.type_tag) is str
        assert _types.PasswordConfig('bogus').type_tag == 'bogus'
        assert _types.PasswordConfig(None).type_tag is None

    def test_300_as_dict_omits_unset_values(self) -> None:
        """The mapping form omits unset values."""
        config = _types.PasswordConfig(
            _types.PasswordType.STRONG, length=8, separator=''
        )
        assert config.as_dict() == {
            'type': 'strong',
            'length': 8,
            'iteration': 1,
            'separator': '',
        }

    @hypothesis.given(
        length=strategies.integers(min_value=1, max_value=1024),
        iteration=strategies.integers(min_value=1, max_value=1024),
        separator=strategies.text(max_size=3),
    )
    def test_301_as_dict_from_mapping(
        self, length: int, iteration: int, separator: str
    ) -> None:
        """The mapping form describes the same configuration."""
        config = _types.PasswordConfig(
            'base64', length=length, iteration=iteration, separator=separator
        )
        assert _types.PasswordConfig.from_mapping(config.as_dict()) == config

    def test_302_as_dict_template(self) -> None:
        """Templates are part of the mapping form."""
        config = _types.PasswordConfig.from_mapping({
            'type': 'template',
            'template': '[A-Z]{4}-[0-9]{4}',
        })
        assert config.template == '[A-Z]{4}-[0-9]{4}'
        assert config.as_dict() == {
            'type': 'template',
            'iteration': 1,
            'template': '[A-Z]{4}-[0-9]{4}',
        }


class TestSecurityLevel:
    """Test the security level bands."""

    @Parametrize.LEVEL_BOUNDARIES
    def test_100_from_bits(
        self, bits: float, level: _types.SecurityLevel
    ) -> None:
        """Bands have inclusive lower bounds."""
        assert _types.SecurityLevel.from_bits(bits) is level

    def test_101_totally_ordered(self) -> None:
        """The bands are ordered by their lower bounds."""
        bounds = [level.min_bits for level in _types.SecurityLevel]
        assert bounds == sorted(bounds)
        assert len(set(bounds)) == len(bounds)

    @hypothesis.given(
        bits1=strategies.floats(min_value=0, max_value=1e4),
        bits2=strategies.floats(min_value=0, max_value=1e4),
    )
    def test_102_monotonic(self, bits1: float, bits2: float) -> None:
        """More bits never yield a lower band."""
        low, high = sorted([bits1, bits2])
        assert (
            _types.SecurityLevel.from_bits(low).min_bits
            <= _types.SecurityLevel.from_bits(high).min_bits
        )


class TestPreset:
    """Test the command-line presets."""

    def test_100_quantum_preset_meets_the_floor(self) -> None:
        """The quantum preset is a quantum-resistant configuration."""
        config = _types.Preset.QUANTUM.config
        assert config.type is _types.PasswordType.QUANTUM_RESISTANT
        assert config.length == 40
        assert config.iteration == 1

    def test_101_every_preset_has_a_config(self) -> None:
        """Every preset names a registered type."""
        for preset in _types.Preset:
            assert isinstance(preset.config.type, _types.PasswordType)


class TestTimestamps:
    """Test the timestamp formatting."""

    def test_100_utc(self) -> None:
        """UTC timestamps get a `Z` suffix."""
        instant = datetime.datetime(
            2025, 6, 7, 8, 9, 10, 123456, tzinfo=datetime.timezone.utc
        )
        assert _types.isoformat_utc(instant) == '2025-06-07T08:09:10.123Z'

    def test_101_other_timezones(self) -> None:
        """Other timezones keep their offset."""
        instant = datetime.datetime(
            2025,
            6,
            7,
            8,
            9,
            10,
            tzinfo=datetime.timezone(datetime.timedelta(hours=2)),
        )
        assert _types.isoformat_utc(instant) == '2025-06-07T08:09:10.000+02:00'
