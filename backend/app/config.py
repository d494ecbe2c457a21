"""Application configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Pipeline settings loaded from environment variables.

    Settings are loaded in this priority order (highest to lowest):
    1. Environment variables
    2. .env file (for local development)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application
    # =========================================================================
    app_name: str = "Bill Text Pipeline"
    debug: bool = False

    # =========================================================================
    # Database (document archive)
    # =========================================================================
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/billtext",
        description="PostgreSQL connection URL",
    )

    # =========================================================================
    # Input files
    # =========================================================================
    # GPO bulk BILLS layout: {congress}/{type}/{type}{number}-{congress}-{code}.htm
    # with a {stem}.mods.xml descriptor beside each version.
    gpo_bills_dir: str = Field(
        default="data/gpo/BILLS",
        description="Root directory of downloaded GPO bill versions",
    )
    cache_dir: str = Field(
        default="data",
        description="Root directory for citation and text caches",
    )

    # Version ids known to ship without a MODS file. hr81-112-enr is a GPO
    # publishing mistake (HR 81 was never voted on).
    missing_descriptor_allow_list: list[str] = ["hr81-112-enr"]

    # Store each version's normalized text in the bill_version table
    archive_versions: bool = True

    # =========================================================================
    # Search index
    # =========================================================================
    elasticsearch_url: str = Field(
        default="http://localhost:9200",
        description="Elasticsearch base URL",
    )
    bills_index: str = "bills"
    index_batch_size: int = Field(default=100, ge=1)

    # =========================================================================
    # Citation service
    # =========================================================================
    citation_service_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the citation-finding service",
    )
    citation_timeout: float = 60.0


settings = Settings()
