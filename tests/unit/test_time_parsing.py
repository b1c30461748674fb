import pytest
from taskflow.utils.time_parsing import parse_duration


class TestParseDuration:
    """Test duration strings to minutes"""

    @pytest.mark.parametrize("text, minutes", [
        ("2h 30m", 150),
        ("1d 4h", 1680),
        ("45m", 45),
        ("1.5h", 90),
        ("2 hours 15 minutes", 135),
        ("3", 180),
        ("  90M ", 90),
    ])
    def test_valid_strings(self, text, minutes):
        """Test supported formats"""
        assert parse_duration(text) == minutes

    @pytest.mark.parametrize("value", ["", "   ", "soon", None, [], 1.5, True])
    def test_invalid_input_is_zero(self, value):
        """Test malformed input degrades to zero"""
        assert parse_duration(value) == 0

    def test_integer_minutes_pass_through(self):
        """Test integers are already minutes"""
        assert parse_duration(75) == 75
        assert parse_duration(-5) == 0
