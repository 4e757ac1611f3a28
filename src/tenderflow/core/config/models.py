"""
Pydantic configuration models for TenderFlow.

These models provide type-safe configuration with validation for:
- Database connection and timeouts
- Logging
- Listing defaults
- Approval quorum
- Organization membership used by the command line
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# Database Configuration
# =============================================================================


class DatabaseConfig(BaseModel):
    """Database connection settings."""

    url: str = Field(
        default="sqlite:///data/tenderflow.db",
        description="SQLAlchemy database URL",
    )
    echo: bool = Field(
        default=False,
        description="Echo SQL statements (debugging)",
    )
    pool_size: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Connection pool size",
    )
    timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=60,
        description="Upper bound for one statement or lock wait",
    )


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    file: Path | None = Field(
        default=Path("logs/tenderflow.log"),
        description="Log file path",
    )
    json_format: bool = Field(
        default=True,
        description="Use JSON format for file logs",
    )
    rich_console: bool = Field(
        default=True,
        description="Use Rich for console output",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


# =============================================================================
# Service Configuration
# =============================================================================


class PaginationConfig(BaseModel):
    """Listing defaults."""

    default_limit: int = Field(
        default=5,
        ge=0,
        description="Rows per page when no limit is given (0 = unbounded)",
    )


class ApprovalConfig(BaseModel):
    """Approval consensus settings."""

    quorum: int = Field(
        default=3,
        ge=1,
        description="Approvals that close a tender (fewer if the organization is smaller)",
    )


# =============================================================================
# Application Configuration
# =============================================================================


class AppConfig(BaseModel):
    """Root application configuration.

    This is the main configuration object loaded from app.yaml.
    """

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    pagination: PaginationConfig = Field(default_factory=PaginationConfig)
    approvals: ApprovalConfig = Field(default_factory=ApprovalConfig)

    organizations: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Organization id -> ids of the users responsible for it",
    )

    @field_validator("organizations")
    @classmethod
    def validate_single_membership(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        seen: dict[str, str] = {}
        for org_id, members in v.items():
            for user_id in members:
                if user_id in seen and seen[user_id] != org_id:
                    raise ValueError(
                        f"User {user_id} belongs to both {seen[user_id]} and {org_id}"
                    )
                seen[user_id] = org_id
        return v

    def ensure_directories(self) -> None:
        """Create the log and SQLite data directories if they don't exist."""
        if self.logging.file:
            self.logging.file.parent.mkdir(parents=True, exist_ok=True)
        if self.database.url.startswith("sqlite:///"):
            Path(self.database.url.replace("sqlite:///", "")).parent.mkdir(parents=True, exist_ok=True)
