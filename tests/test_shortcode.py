"""Tests for short code generation."""

import random

import pytest

from shortlinks.common.validators import is_valid_short_code
from shortlinks.errors import ShortCodeGenerationError
from shortlinks.shortcode import ALPHABET, ShortCodeGenerator, encode_base62


class TestShortCodeGenerator:
    """Test short code generation."""
    
    def test_generate_random(self):
        """Test random code generation."""
        generator = ShortCodeGenerator(default_length=6)
        
        code = generator.generate_random()
        assert len(code) == 6
        assert is_valid_short_code(code)
    
    def test_generate_random_custom_length(self):
        """Test random code with custom length."""
        generator = ShortCodeGenerator(default_length=6)
        
        code = generator.generate_random(length=10)
        assert len(code) == 10
        assert is_valid_short_code(code)
    
    def test_seeded_generator_is_reproducible(self):
        first = ShortCodeGenerator(rng=random.Random(42)).generate_random()
        second = ShortCodeGenerator(rng=random.Random(42)).generate_random()
        assert first == second
    
    def test_generate_from_uuid(self):
        """Test UUID-based generation."""
        generator = ShortCodeGenerator(default_length=8)
        
        code = generator.generate_from_uuid()
        assert len(code) == 8
        assert is_valid_short_code(code)
    
    def test_base62_encoding(self):
        assert encode_base62(0) == "a"
        assert encode_base62(61) == "9"
        assert encode_base62(62) == "ba"
    
    def test_generated_codes_pass_syntax_check(self):
        generator = ShortCodeGenerator(default_length=20, rng=random.Random(3))

        for _ in range(50):
            code = generator.generate_random()
            assert set(code) <= set(ALPHABET)
            assert is_valid_short_code(code)


class TestUniqueGeneration:
    """Test collision avoidance."""
    
    def test_avoids_taken_codes(self):
        generator = ShortCodeGenerator(default_length=6, rng=random.Random(7))
        taken = {ShortCodeGenerator(default_length=6, rng=random.Random(7)).generate_random()}
        
        code = generator.generate_unique(taken)
        
        assert code not in taken
        assert len(code) == 6
    
    def test_falls_back_to_longer_uuid_code(self):
        generator = ShortCodeGenerator(default_length=1)
        taken = set(ALPHABET)
        
        code = generator.generate_unique(taken, attempts=3)
        
        assert len(code) == 3
        assert code not in taken
    
    def test_exhausted(self):
        class Always(ShortCodeGenerator):
            def generate_random(self, length=None):
                return "same"
            
            def generate_from_uuid(self, length=None):
                return "same"
        
        with pytest.raises(ShortCodeGenerationError):
            Always().generate_unique({"same"}, attempts=2)
