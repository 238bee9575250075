"""
Unit tests for CLI input validators.
"""

import pytest
import typer

from farescope.cli.validators import (
    target_codes_callback,
    validate_airport_code,
    validate_airport_codes_list,
    validate_trip_type,
)


class TestAirportCodeValidator:
    """Tests for airport code validation."""

    def test_valid_uppercase_code(self):
        assert validate_airport_code("ATH") == "ATH"
        assert validate_airport_code("BER") == "BER"

    def test_code_with_whitespace(self):
        """Test that codes with leading/trailing whitespace are accepted."""
        assert validate_airport_code(" CDG ") == "CDG"

    def test_lowercase_code_is_rejected(self):
        """Codes are case-sensitive, so lower-case input is not converted."""
        with pytest.raises(typer.BadParameter, match="upper-case"):
            validate_airport_code("ath")
        with pytest.raises(typer.BadParameter, match="upper-case"):
            validate_airport_code("Ath")

    def test_empty_code(self):
        with pytest.raises(typer.BadParameter, match="cannot be empty"):
            validate_airport_code("")

    def test_wrong_length(self):
        with pytest.raises(typer.BadParameter, match="exactly 3 characters"):
            validate_airport_code("AT")
        with pytest.raises(typer.BadParameter, match="exactly 3 characters"):
            validate_airport_code("ATHX")

    def test_code_with_numbers_or_symbols(self):
        with pytest.raises(typer.BadParameter, match="upper-case letters"):
            validate_airport_code("A1H")
        with pytest.raises(typer.BadParameter, match="upper-case letters"):
            validate_airport_code("A-H")


class TestAirportCodesListValidator:
    """Tests for airport code list validation."""

    def test_valid_list(self):
        assert validate_airport_codes_list("BER,CDG,ATH") == "BER,CDG,ATH"

    def test_list_with_spaces(self):
        assert validate_airport_codes_list("BER, CDG ,ATH") == "BER,CDG,ATH"

    def test_all_keyword(self):
        assert validate_airport_codes_list("ALL") == "ALL"

    def test_all_keyword_disallowed(self):
        with pytest.raises(typer.BadParameter, match="not allowed"):
            validate_airport_codes_list("ALL", allow_all=False)

    def test_invalid_code_in_list(self):
        with pytest.raises(typer.BadParameter):
            validate_airport_codes_list("BER,XX,ATH")

    def test_empty_list(self):
        with pytest.raises(typer.BadParameter, match="At least one"):
            validate_airport_codes_list(" , ")


class TestTripTypeValidator:
    """Tests for trip type validation."""

    @pytest.mark.parametrize("value, expected", [("RT", "RT"), ("ow", "OW"), (" Rt ", "RT")])
    def test_valid(self, value, expected):
        assert validate_trip_type(value) == expected

    def test_invalid(self):
        with pytest.raises(typer.BadParameter, match="RT or OW"):
            validate_trip_type("ONEWAY")


class TestCallbacks:
    """Tests for Typer callbacks."""

    def test_target_callback_allows_empty(self):
        assert target_codes_callback(None) is None
        assert target_codes_callback("") == ""

    def test_target_callback_rejects_all(self):
        with pytest.raises(typer.BadParameter):
            target_codes_callback("ALL")
