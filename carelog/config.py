"""
Configuration management with environment variable support and validation.

Design principles:
- Environment-specific configs (dev, staging, prod)
- Validation at startup (fail fast)
- Type safety with Pydantic
- Clinical thresholds in one place instead of scattered literals
"""

import os
from functools import lru_cache
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

# Load environment variables from .env file
load_dotenv()


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class ValidationConfig(BaseModel):
    """Limits applied by the record validator on top of the field schemas."""

    notes_max_length: int = Field(
        default=1000, gt=0, description="Maximum length of free text fields after trimming"
    )


class LocaleConfig(BaseModel):
    """Locale used to read naive timestamps and to render dates and times."""

    timezone: str = Field(default="UTC", description="IANA timezone name for local wall time")

    @field_validator("timezone")
    def validate_timezone(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("timezone must be a non-empty IANA name")
        return v.strip()


class AlertThresholds(BaseModel):
    """Vital sign limits used by the care rules to raise alerts."""

    baby_temperature_low: float = Field(default=36.0, description="Below this is too cold (°C)")
    baby_temperature_high: float = Field(default=37.5, description="Above this is too warm (°C)")
    baby_temperature_critical_low: float = Field(default=35.0)
    baby_temperature_critical_high: float = Field(default=38.0)
    jaundice_warning_level: int = Field(default=4, ge=1, le=5)
    jaundice_critical_level: int = Field(default=5, ge=1, le=5)
    feeding_gap_hours: float = Field(
        default=4.0, gt=0.0, description="Maximum hours between two feedings"
    )

    mother_fever: float = Field(default=38.0, description="Above this is a fever (°C)")
    mother_fever_critical: float = Field(default=38.5)
    systolic_high: int = Field(default=140, gt=0)
    systolic_low: int = Field(default=90, gt=0)
    diastolic_high: int = Field(default=90, gt=0)
    diastolic_low: int = Field(default=60, gt=0)
    systolic_critical_high: int = Field(default=160, gt=0)
    systolic_critical_low: int = Field(default=80, gt=0)
    diastolic_critical_high: int = Field(default=100, gt=0)
    pain_warning_level: int = Field(default=8, ge=1, le=10)

    @model_validator(mode="after")
    def bounds_are_ordered(self) -> "AlertThresholds":
        """Reject threshold sets where a low bound sits above its high bound."""
        if self.baby_temperature_low >= self.baby_temperature_high:
            raise ValueError("baby_temperature_low must be below baby_temperature_high")
        if self.jaundice_warning_level > self.jaundice_critical_level:
            raise ValueError("jaundice_warning_level must not exceed jaundice_critical_level")
        if self.mother_fever > self.mother_fever_critical:
            raise ValueError("mother_fever must not exceed mother_fever_critical")
        return self


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    # Component configs
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    locale: LocaleConfig = Field(default_factory=LocaleConfig)
    thresholds: AlertThresholds = Field(default_factory=AlertThresholds)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    def _env_to_literal(val: str) -> Literal["development", "staging", "production"]:
        v = val.strip().lower()
        if v in {"dev", "development"}:
            return "development"
        if v in {"stage", "staging"}:
            return "staging"
        return "production"

    def _level_to_literal(val: str) -> Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        v = val.strip().upper()
        return cast(
            Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO",
        )

    def _format_to_literal(val: str | None, debug: bool) -> Literal["json", "console"]:
        if val is None:
            return "console" if debug else "json"
        return "console" if val.strip().lower() == "console" else "json"

    # Detect environment
    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
        format=_format_to_literal(os.getenv("LOG_FORMAT"), debug),
    )

    validation_config = ValidationConfig(
        notes_max_length=int(os.getenv("NOTES_MAX_LENGTH", "1000")),
    )

    locale_config = LocaleConfig(timezone=os.getenv("CARELOG_TIMEZONE", "UTC"))

    thresholds = AlertThresholds(
        feeding_gap_hours=float(os.getenv("FEEDING_GAP_HOURS", "4.0")),
    )

    return AppConfig(
        environment=environment,
        debug=debug,
        logging=logging_config,
        validation=validation_config,
        locale=locale_config,
        thresholds=thresholds,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()
