"""
Input validators for CLI commands.
Ensures data quality and provides better error messages.
"""

import re
from typing import Optional

import typer

from farescope.config import ALL_AIRPORTS

IATA_CODE_RE = re.compile(r"^[A-Z]{3}$")
TRIP_TYPES = ("RT", "OW")


def validate_airport_code(value: str) -> str:
    """
    Validate airport IATA code.

    Must be exactly 3 upper-case letters. Codes are matched against the
    catalog as given, so lower-case input is rejected rather than converted.

    Args:
        value: Airport code to validate

    Returns:
        The code, stripped of surrounding whitespace

    Raises:
        typer.BadParameter: If code is invalid
    """
    if not value:
        raise typer.BadParameter("Airport code cannot be empty")

    value = value.strip()

    if len(value) != 3:
        raise typer.BadParameter(
            f"Airport code must be exactly 3 characters (got '{value}' with {len(value)} characters)"
        )

    if not IATA_CODE_RE.match(value):
        raise typer.BadParameter(
            f"Airport code must be 3 upper-case letters (got '{value}')"
        )

    return value


def validate_airport_codes_list(value: str, allow_all: bool = True) -> str:
    """
    Validate a comma-separated list of airport codes.

    The special value 'ALL' selects the whole catalog.

    Args:
        value: Comma-separated list of airport codes or 'ALL'
        allow_all: Accept 'ALL'

    Returns:
        Validated, comma-joined string

    Raises:
        typer.BadParameter: If any code is invalid
    """
    if value.strip() == ALL_AIRPORTS:
        if not allow_all:
            raise typer.BadParameter("'ALL' is not allowed here")
        return ALL_AIRPORTS

    codes = [code.strip() for code in value.split(",") if code.strip()]
    if not codes:
        raise typer.BadParameter("At least one airport code is required")

    return ",".join(validate_airport_code(code) for code in codes)


def validate_trip_type(value: str) -> str:
    """
    Validate a trip type code.

    Raises:
        typer.BadParameter: Unless the value is RT or OW (case-insensitive)
    """
    normalized = value.strip().upper()
    if normalized not in TRIP_TYPES:
        raise typer.BadParameter(f"Trip type must be RT or OW (got '{value}')")
    return normalized


# Typer callback functions for use with Option/Argument
def airport_code_callback(value: Optional[str]) -> Optional[str]:
    """Callback for validating airport codes in Typer options."""
    if value is None:
        return None
    return validate_airport_code(value)


def airport_codes_list_callback(value: Optional[str]) -> Optional[str]:
    """Callback for validating airport code lists in Typer options."""
    if value is None:
        return None
    return validate_airport_codes_list(value)


def target_codes_callback(value: Optional[str]) -> Optional[str]:
    """Callback for target lists: explicit codes only, empty allowed."""
    if value is None or not value.strip():
        return value
    return validate_airport_codes_list(value, allow_all=False)


def trip_type_callback(value: Optional[str]) -> Optional[str]:
    """Callback for validating trip types in Typer options."""
    if value is None:
        return None
    return validate_trip_type(value)
