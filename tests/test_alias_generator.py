"""
Tests for short code generation and custom alias validation.
"""
import random
import string

import pytest

from shortlink_app.dependencies import get_alias_generator
from shortlink_app.errors import ValidationError
from shortlink_app.services.alias_generator import ALPHABET, AliasGenerator


class TestGenerate:
    """Random code generation"""

    def test_alphabet_is_62_symbols(self):
        assert len(ALPHABET) == 62
        assert set(ALPHABET) == set(string.ascii_letters + string.digits)

    @pytest.mark.parametrize("length", [1, 6, 12, 30])
    def test_exact_length_and_alphabet(self, length):
        generator = AliasGenerator()

        for _ in range(200):
            code = generator.generate(length)
            assert len(code) == length
            assert set(code) <= set(ALPHABET)

    def test_rejects_non_positive_length(self):
        with pytest.raises(ValueError):
            AliasGenerator().generate(0)

    def test_consecutive_calls_differ(self):
        """Shared source is never reseeded, so rapid calls don't repeat"""
        generator = AliasGenerator()

        codes = {generator.generate(6) for _ in range(1000)}

        assert len(codes) == 1000

    def test_injected_source_is_deterministic(self):
        first = AliasGenerator(random.Random(42))
        second = AliasGenerator(random.Random(42))

        assert [first.generate(6) for _ in range(5)] == [second.generate(6) for _ in range(5)]

    def test_process_wide_instance(self):
        assert get_alias_generator() is get_alias_generator()


class TestValidateCustom:
    """Custom alias shape: ASCII alphanumerics, 3-30 characters"""

    @pytest.mark.parametrize("code", ["abc", "promo2025", "A1b2C3", "x" * 30])
    def test_accepts_valid(self, code):
        AliasGenerator.validate_custom(code)

    @pytest.mark.parametrize("code", [
        "ab",
        "x" * 31,
        "",
        "has-dash",
        "under_score",
        "with space",
        "ünïcode",
        "slash/",
    ])
    def test_rejects_invalid(self, code):
        with pytest.raises(ValidationError) as exc_info:
            AliasGenerator.validate_custom(code)

        assert exc_info.value.code == "FIELD_INCORRECT"
