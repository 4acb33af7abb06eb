# SPDX-FileCopyrightText: 2025 Marco Ricci <software@the13thletter.info>
#
# SPDX-License-Identifier: Zlib

"""Test configuration validation in passgen.validation."""

from __future__ import annotations

import hypothesis
import pytest
from hypothesis import strategies

from passgen import _types, errors, validation


class Parametrize:
    VALID_CONFIGS = pytest.mark.parametrize(
        'config',
        [
            pytest.param(
                {'type': 'strong', 'length': 16, 'iteration': 4},
                id='strong',
            ),
            pytest.param(
                {'type': 'base64', 'length': 1, 'iteration': 1024},
                id='base64-bounds',
            ),
            pytest.param(
                {'type': 'custom', 'length': 8, 'charset': 'abc'},
                id='custom',
            ),
            pytest.param(
                {'type': 'memorable', 'iteration': 4, 'separator': ''},
                id='memorable-without-length',
            ),
            pytest.param(
                {'type': 'diceware', 'length': 0, 'iteration': 6},
                id='diceware-ignores-length',
            ),
            pytest.param(
                _types.PasswordConfig(
                    _types.PasswordType.PRONOUNCEABLE, iteration=3
                ),
                id='pronounceable-config',
            ),
            pytest.param(
                {'type': 'template', 'template': '[A-Z]{4}-[0-9]{4}'},
                id='template',
            ),
        ],
    )
    INVALID_CONFIGS = pytest.mark.parametrize(
        ['config', 'expected_errors'],
        [
            pytest.param(
                {'length': 16},
                ['type is required'],
                id='missing-type',
            ),
            pytest.param(
                {'type': '', 'length': 16},
                ['type is required'],
                id='empty-type',
            ),
            pytest.param(
                {'type': 'strong', 'length': 0},
                ['length must be an integer between 1 and 1024 (got 0)'],
                id='zero-length',
            ),
            pytest.param(
                {'type': 'strong'},
                ['length must be an integer between 1 and 1024 (got None)'],
                id='missing-length',
            ),
            pytest.param(
                {'type': 'strong', 'length': 1025},
                ['length must be an integer between 1 and 1024 (got 1025)'],
                id='overlong',
            ),
            pytest.param(
                {'type': 'strong', 'length': True},
                ['length must be an integer between 1 and 1024 (got True)'],
                id='boolean-length',
            ),
            pytest.param(
                {'type': 'memorable', 'iteration': 0},
                ['iteration must be an integer between 1 and 1024 (got 0)'],
                id='zero-iteration',
            ),
            pytest.param(
                {'type': 'memorable', 'iteration': '4'},
                ["iteration must be an integer between 1 and 1024 (got '4')"],
                id='string-iteration',
            ),
            pytest.param(
                {'type': 'memorable', 'separator': 5},
                ['separator must be a string'],
                id='numeric-separator',
            ),
            pytest.param(
                {'type': 'custom', 'length': 8},
                ['charset is required for type "custom"'],
                id='missing-charset',
            ),
            pytest.param(
                {'type': 'custom', 'length': 8, 'charset': ['a', 'b']},
                ['charset must be a string'],
                id='list-charset',
            ),
            pytest.param(
                {'type': 'custom', 'length': 8, 'charset': 'z'},
                ['charset must contain at least 2 distinct characters'],
                id='tiny-charset',
            ),
            pytest.param(
                {'type': 'template'},
                ['template is required for type "template"'],
                id='missing-template',
            ),
            pytest.param(
                {'type': 'template', 'template': '[0-9]{4}'},
                [
                    'Template provides insufficient entropy: 13.3 bits '
                    '(minimum: 20 bits)'
                ],
                id='weak-template',
            ),
            pytest.param(
                {'length': 0, 'iteration': 0, 'separator': None},
                [
                    'type is required',
                    'iteration must be an integer between 1 and 1024 '
                    '(got 0)',
                ],
                id='several-problems',
            ),
            pytest.param(
                {'type': 'strong', 'length': -1, 'iteration': 2000},
                [
                    'length must be an integer between 1 and 1024 (got -1)',
                    'iteration must be an integer between 1 and 1024 '
                    '(got 2000)',
                ],
                id='checked-in-order',
            ),
            pytest.param(
                [('type', 'strong')],
                ['configuration must be a mapping'],
                id='not-a-mapping',
            ),
        ],
    )


class TestValidateConfig:
    """Test collecting validation problems."""

    @Parametrize.VALID_CONFIGS
    def test_100_valid(self, config: object) -> None:
        """Valid configurations have no problems."""
        result = validation.validate_config(config)
        assert result.is_valid
        assert result.errors == []

    @Parametrize.INVALID_CONFIGS
    def test_101_invalid(
        self, config: object, expected_errors: list[str]
    ) -> None:
        """All problems are reported, in order."""
        result = validation.validate_config(config)
        assert not result.is_valid
        assert result.errors == expected_errors

    def test_102_unknown_type(self) -> None:
        """Unknown types are reported with the valid types."""
        result = validation.validate_config({'type': 'bogus', 'length': 0})
        assert result.errors == [
            'Unknown password type: "bogus". Valid types: base64, custom, '
            'diceware, honeyword, memorable, pronounceable, '
            'quantum-resistant, strong, template'
        ]

    def test_103_none(self) -> None:
        """A missing configuration is missing its type."""
        assert validation.validate_config(None).errors == ['type is required']

    @hypothesis.given(
        config=strategies.one_of(
            strategies.none(),
            strategies.integers(),
            strategies.text(),
            strategies.dictionaries(
                strategies.sampled_from([
                    'type',
                    'length',
                    'iteration',
                    'separator',
                    'charset',
                    'other',
                ]),
                strategies.one_of(
                    strategies.none(),
                    strategies.booleans(),
                    strategies.integers(),
                    strategies.floats(allow_nan=True),
                    strategies.text(max_size=8),
                    strategies.sampled_from(_types.PasswordType.tags()),
                    strategies.lists(strategies.integers(), max_size=2),
                ),
            ),
        ),
    )
    def test_200_never_raises(self, config: object) -> None:
        """Validation never raises, whatever the input."""
        result = validation.validate_config(config)
        assert result.is_valid is (not result.errors)


class TestEnsureValid:
    """Test raising on validation problems."""

    def test_100_valid(self) -> None:
        """Valid mappings are turned into configurations."""
        config = validation.ensure_valid({
            'type': 'strong',
            'length': 8,
            'separator': '-',
        })
        assert config == _types.PasswordConfig(
            'strong', length=8, separator='-'
        )

    def test_101_valid_config_passes_through(self) -> None:
        """Valid configurations are returned unchanged."""
        config = _types.PasswordConfig('memorable', iteration=2)
        assert validation.ensure_valid(config) is config

    def test_200_unknown_type(self) -> None:
        """Unknown types raise the dedicated error."""
        with pytest.raises(errors.UnknownTypeError):
            validation.ensure_valid({'type': 'bogus', 'length': 8})

    def test_201_aggregate_errors(self) -> None:
        """Other problems raise one error carrying all of them."""
        with pytest.raises(errors.ArgumentError) as excinfo:
            validation.ensure_valid({
                'type': 'strong',
                'length': 0,
                'iteration': 0,
            })
        assert len(excinfo.value.errors) == 2
        assert not isinstance(excinfo.value, errors.UnknownTypeError)
