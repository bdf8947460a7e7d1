"""Service settings for the version history engine.

All settings use the VERSION_HISTORY_ environment prefix and cover:
- Storage backend selection (in-memory or SQL)
- SQL database connection pool
- Version list caps for UI-facing queries
- Logging output
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the version history engine.

    Environment variable prefix: VERSION_HISTORY_
    """

    service_name: str = "version-history-engine"

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------

    storage_backend: Literal["memory", "sql"] = Field(
        default="memory",
        description="Where live documents and version logs are kept. "
        "'memory' is process-local and intended for tests and single-node demos.",
    )
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/version_history",
        description="Async SQLAlchemy URL used when storage_backend is 'sql'.",
    )
    db_pool_size: int = Field(
        default=5,
        description="Connection pool size for the SQL backend.",
    )
    db_max_overflow: int = Field(
        default=2,
        description="Max overflow connections above db_pool_size.",
    )
    db_pool_timeout: int = Field(
        default=30,
        description="Seconds to wait for a database connection before raising an error.",
    )
    db_create_schema: bool = Field(
        default=False,
        description="Create missing vh_ tables at startup. Development only.",
    )

    # -------------------------------------------------------------------------
    # Version listing
    # -------------------------------------------------------------------------

    version_list_limit: int = Field(
        default=50,
        ge=1,
        description="Default number of versions returned by list_versions. "
        "Bounds UI response size; reconstruction always reads the full log.",
    )
    version_list_max_limit: int = Field(
        default=200,
        ge=1,
        description="Upper bound for caller-supplied list limits. Larger values are clamped.",
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------

    log_level: str = Field(
        default="INFO",
        description="Minimum log level for the stderr sink.",
    )
    log_json: bool = Field(
        default=False,
        description="Serialize log records as JSON lines.",
    )

    model_config = SettingsConfigDict(env_prefix="VERSION_HISTORY_")
