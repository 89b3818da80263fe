"""Pydantic models for record-factory configuration."""

from pydantic import BaseModel, Field


# ============================================================================
# Configuration Models
# ============================================================================


class AnalysisSettings(BaseModel):
    """Schema analysis settings from the ``[analysis]`` table."""

    attribute_namespace: str = "record_factory"  # metadata key holding annotations
    # When True, a relation without referenced_key uses the field-name suffix
    # (hammer_id -> id). When False, referenced_key is always required.
    implicit_referenced_key: bool = True


class DatabaseProfile(BaseModel):
    """Database connection profile from record_factory.toml."""

    url: str
    description: str = ""
    db_password: str | None = None  # For [YOUR-PASSWORD] placeholder substitution


class FactoryConfig(BaseModel):
    """Complete configuration from record_factory.toml."""

    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    profiles: dict[str, DatabaseProfile] = Field(default_factory=dict)
