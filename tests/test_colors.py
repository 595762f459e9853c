"""
Tests for hex/HSL conversion and the foreground fallback.
"""

import pytest

from sitecms.styles.colors import hex_to_hsl, normalize_hex, is_hex_color, contrast_foreground
from sitecms.styles.errors import InvalidColor


class TestHexToHsl:

    @pytest.mark.parametrize('hex_color,expected', [
        ('#000000', '0 0% 0%'),
        ('#ffffff', '0 0% 100%'),
        ('#ff0000', '0 100% 50%'),
        ('#00ff00', '120 100% 50%'),
        ('#0000ff', '240 100% 50%'),
        ('#808080', '0 0% 50%'),
        ('#667eea', '229 76% 66%'),
    ])
    def test_known_values(self, hex_color, expected):
        assert hex_to_hsl(hex_color) == expected

    def test_violet_primary(self):
        # Exact output of the conversion for the classic-kennel primary
        assert hex_to_hsl('#8b5cf6') == '258 90% 66%'

    def test_hash_is_optional_and_case_insensitive(self):
        assert hex_to_hsl('8B5CF6') == hex_to_hsl('#8b5cf6')

    def test_hue_never_reaches_360(self):
        # Red with a trace of blue rounds up to 360 before wrapping
        hue = int(hex_to_hsl('#ff0001').split()[0])
        assert 0 <= hue < 360

    def test_ranges_over_a_sample_of_colours(self):
        for value in range(0, 0xFFFFFF, 0x0F0F13):
            hsl = hex_to_hsl(f'#{value:06x}')
            h, s, l = hsl.split()
            assert 0 <= int(h) < 360
            assert 0 <= int(s.rstrip('%')) <= 100
            assert 0 <= int(l.rstrip('%')) <= 100

    def test_is_pure(self):
        assert hex_to_hsl('#10b981') == hex_to_hsl('#10b981')

    @pytest.mark.parametrize('bad', ['', '#fff', '#12345g', 'blue', '#1234567', None, 123])
    def test_invalid_input_raises(self, bad):
        with pytest.raises(InvalidColor):
            hex_to_hsl(bad)

    def test_invalid_colour_is_a_value_error(self):
        with pytest.raises(ValueError):
            hex_to_hsl('nope')


class TestNormalize:

    def test_lowercases_and_adds_hash(self):
        assert normalize_hex('ABCDEF') == '#abcdef'
        assert normalize_hex('  #AbCdEf ') == '#abcdef'

    def test_is_hex_color(self):
        assert is_hex_color('#abcdef')
        assert not is_hex_color('#abc')
        assert not is_hex_color(None)


class TestContrastForeground:

    def test_only_exact_white_gets_black(self):
        assert contrast_foreground('#ffffff') == '#000000'

    @pytest.mark.parametrize('light', ['#fefefe', '#fafafa', '#ffff00'])
    def test_other_light_colours_get_white(self, light):
        assert contrast_foreground(light) == '#ffffff'
