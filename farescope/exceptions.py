"""
Custom exceptions for FareScope.

This module provides the base exception hierarchy used across the
application, plus informative exceptions that carry remediation hints for
operator-facing failures (database unreachable, bad configuration).
"""

from typing import Optional


# ============================================================================
# Base Exception Hierarchy
# ============================================================================


class FareScopeException(Exception):
    """Base exception class for all FareScope exceptions."""

    pass


class ConfigurationException(FareScopeException):
    """Exception raised for configuration errors."""

    pass


class DatabaseException(FareScopeException):
    """Exception raised for database-related errors."""

    pass


class CollectionException(FareScopeException):
    """
    Exception raised when a whole airport group cannot be collected.

    Wraps catalog and storage failures so the orchestrator can record them
    against the group and move on to the next one.

    Attributes:
        group_name: Name of the airport group that failed
        stage: Pipeline stage that failed ('catalog' or 'storage')
    """

    def __init__(self, group_name: str, stage: str, message: str):
        self.group_name = group_name
        self.stage = stage
        self.message = message
        super().__init__(f"[{group_name}] {stage} failed: {message}")


class ExperimentNotFoundError(FareScopeException):
    """Raised when a requested experiment is not configured."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Experiment '{name}' is not configured")


# ============================================================================
# Informative Exceptions with Actionable Guidance
# ============================================================================


class InformativeException(FareScopeException):
    """Base class for informative exceptions with actionable guidance."""

    def __init__(
        self,
        message: str,
        remediation: Optional[str] = None,
        details: Optional[str] = None,
        commands: Optional[list[str]] = None,
    ):
        """
        Initialize an informative exception.

        Args:
            message: Clear explanation of what went wrong
            remediation: Specific remediation instructions
            details: Relevant configuration or context details
            commands: List of troubleshooting commands to try
        """
        self.message = message
        self.remediation = remediation
        self.details = details
        self.commands = commands or []

        full_message = f"\n{'=' * 80}\n"
        full_message += f"ERROR: {message}\n"

        if details:
            full_message += f"\nDETAILS:\n{details}\n"

        if remediation:
            full_message += f"\nHOW TO FIX:\n{remediation}\n"

        if commands:
            full_message += "\nTROUBLESHOOTING COMMANDS:\n"
            for cmd in commands:
                full_message += f"  $ {cmd}\n"

        full_message += f"{'=' * 80}\n"

        super().__init__(full_message)


class DatabaseConnectionError(InformativeException, DatabaseException):
    """Raised when the database cannot be reached."""

    def __init__(self, database_url: str = "unknown", error_details: str = ""):
        message = "Database connection failed"

        details = f"Database: {database_url}"
        if error_details:
            details += f"\nError: {error_details}"

        remediation = """
1. Ensure the database server is running (or the SQLite path is writable)
2. Verify DATABASE_URL in your .env file is correct
3. Create the tables with 'farescope db init'
        """.strip()

        commands = [
            "farescope config show",
            "farescope db init",
        ]

        super().__init__(message, remediation, details, commands)


class InvalidAirportGroupError(InformativeException, ConfigurationException):
    """Raised when AIRPORT_GROUPS or EXPERIMENTS cannot be used."""

    def __init__(self, group_name: str, reason: str):
        message = f"Airport group '{group_name}' is invalid"
        remediation = """
Each group needs 'airports' (comma-separated IATA codes or ALL),
'targets' (comma-separated IATA codes, may be empty), 'trip_type' (RT or OW)
and 'trip_dates' ({"departure_date": ..., "return_date": ...}).
        """.strip()
        super().__init__(message, remediation, details=reason)
