"""
Configuration management using Pydantic Settings.
Loads environment variables with validation and type checking.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ALL_AIRPORTS = "ALL"


def _split_codes(value):
    """Accept either a list of codes or a comma-separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        if value.strip() == ALL_AIRPORTS:
            return ALL_AIRPORTS
        return [code.strip() for code in value.split(",") if code.strip()]
    return list(value)


class TripDates(BaseModel):
    """Departure/return window passed verbatim to the fare API (e.g. '2021-9')."""

    departure_date: str = Field(description="Departure month or date, as the fare API expects it")
    return_date: str = Field(description="Return month or date, as the fare API expects it")


class AirportGroup(BaseModel):
    """A set of airports to collect fares for, with optional target airports."""

    name: str = Field(default="default", description="Group name used in logs")
    airports: List[str] | str = Field(description="IATA codes, or 'ALL' for the whole catalog")
    targets: List[str] = Field(default_factory=list, description="Target (arrival) IATA codes")
    trip_type: str = Field(default="RT", description="RT (round trip) or OW (one way)")
    trip_dates: TripDates

    @field_validator("airports", mode="before")
    @classmethod
    def split_airports(cls, v):
        return _split_codes(v)

    @field_validator("targets", mode="before")
    @classmethod
    def split_targets(cls, v):
        codes = _split_codes(v)
        return [] if codes == ALL_AIRPORTS else codes

    @field_validator("trip_type")
    @classmethod
    def check_trip_type(cls, v: str) -> str:
        if v not in ("RT", "OW"):
            raise ValueError(f"trip_type must be 'RT' or 'OW', got '{v}'")
        return v

    @property
    def has_targets(self) -> bool:
        return len(self.targets) > 0

    @property
    def all_airports(self) -> bool:
        return self.airports == ALL_AIRPORTS


class Experiment(BaseModel):
    """A reporting experiment: a route set plus the interval fares were collected at."""

    name: str = Field(default="experiment", description="Experiment identifier")
    description: str = Field(default="", description="Free-text description")
    source: str = Field(default="AEGEAN", description="Fare source the data came from")
    airports: List[str] = Field(description="IATA codes taking part in the experiment")
    targets: List[str] = Field(default_factory=list, description="Target IATA codes")
    trip_type: str = Field(default="RT", description="RT or OW")
    request_interval: str = Field(
        default="once per day", description="Collection interval, e.g. 'once per day'"
    )
    start_date: Optional[str] = Field(default=None, description="Start of collection")
    end_date: Optional[str] = Field(default=None, description="End of collection")

    @field_validator("airports", "targets", mode="before")
    @classmethod
    def split_codes(cls, v):
        codes = _split_codes(v)
        if codes == ALL_AIRPORTS:
            raise ValueError("experiments need an explicit airport list")
        return codes

    @field_validator("trip_type")
    @classmethod
    def check_trip_type(cls, v: str) -> str:
        if v not in ("RT", "OW"):
            raise ValueError(f"trip_type must be 'RT' or 'OW', got '{v}'")
        return v


def _default_airport_groups() -> List[AirportGroup]:
    return [
        AirportGroup(
            name="europe-athens",
            airports="BER,CDG,MAD,FCO,LON,ATH",
            targets="ATH",
            trip_type="RT",
            trip_dates=TripDates(departure_date="2021-9", return_date="2021-9"),
        )
    ]


def _default_experiments() -> List[Experiment]:
    return [
        Experiment(
            name="experiment",
            description="Daily round-trip fares from major European airports to Athens",
            source="AEGEAN",
            airports="BER,CDG,MAD,FCO,LON,ATH",
            targets="ATH",
            trip_type="RT",
            request_interval="once per day",
            start_date="01-09-2021",
            end_date="30-09-2021",
        )
    ]


class Settings(BaseSettings):
    """Application settings with environment variable validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="FareScope", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    environment: str = Field(default="development", description="Environment name")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[str] = Field(default="logs/farescope.log", description="General log file")
    error_log_file: Optional[str] = Field(
        default="logs/error.log", description="Error-only log file"
    )
    json_logs: bool = Field(default=False, description="JSON console logs")

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./farescope.db",
        description="SQLAlchemy async database URL",
    )
    db_pool_size: int = Field(default=5, description="Connection pool size")
    db_max_overflow: int = Field(default=10, description="Maximum overflow connections")
    db_pool_timeout: int = Field(default=30, description="Pool checkout timeout in seconds")

    # Fare API
    fare_api_url: str = Field(
        default="https://el.aegeanair.com/sys/lowfares/routelowfares/",
        description="Low-fares endpoint",
    )
    fare_api_timeout: int = Field(default=30, description="Fare API timeout in seconds")
    fare_api_max_retries: int = Field(default=3, description="Attempts per fare lookup")
    fare_api_user_agent: str = Field(
        default="Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
        description="User agent for fare lookups",
    )

    # Collection
    airport_groups: List[AirportGroup] = Field(
        default_factory=_default_airport_groups,
        description="Airport groups collected by 'farescope collect' (JSON)",
    )

    # Results
    experiments: List[Experiment] = Field(
        default_factory=_default_experiments,
        description="Experiments exposed by the results API (JSON)",
    )
    stats_daily_flight_date_after: str = Field(
        default="2021-08-31", description="Daily window: flight dates strictly after this day"
    )
    stats_daily_record_date_before: str = Field(
        default="2021-09-07", description="Daily window: record dates strictly before this day"
    )
    stats_three_times_flight_date: str = Field(
        default="2021-09-13", description="Three-times window: the single flight date"
    )
    stats_three_times_record_date_from: str = Field(
        default="2021-09-07", description="Three-times window: record dates from this day"
    )

    # API
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        description="Allowed CORS origins (comma-separated)",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case the log level so 'debug' and 'DEBUG' behave the same."""
        return v.upper()

    def get_allowed_origins_list(self) -> List[str]:
        """Get list of allowed origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    def get_experiment(self, name: str) -> Optional[Experiment]:
        for experiment in self.experiments:
            if experiment.name == name:
                return experiment
        return None

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to avoid re-reading environment variables.
    """
    return Settings()
