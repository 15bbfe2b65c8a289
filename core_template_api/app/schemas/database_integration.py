"""
Pydantic schemas for database integrations and vector stores.

An integration record describes how to reach an external database or
vector store: its connection string, the store type (``pgvector``,
``qdrant`` and so on), operational hints and free-form metadata.  A
vector-store record may point at a parent integration through
``database_integration_id``; the reference is not enforced.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from .common import RecordCreate, RecordRead, RecordUpdate


def _clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    cleaned = [tag.strip() for tag in tags]
    return [tag for tag in cleaned if tag]


class DatabaseIntegrationCreate(RecordCreate):
    """Schema for creating an integration record."""

    connection_string: str = Field(..., max_length=500)
    vector_store_type: str = Field(..., max_length=50, description="e.g. pgvector, qdrant, chroma")
    description: Optional[str] = None
    database_integration_id: Optional[int] = Field(None, description="Parent integration id")
    metadata: Optional[Dict[str, Any]] = None
    timeout_seconds: Optional[int] = Field(None, ge=0)
    max_retries: Optional[int] = Field(None, ge=0)
    is_encrypted: bool = False
    last_synced_at: Optional[datetime] = None
    status_message: Optional[str] = Field(None, max_length=255)
    environment: Optional[str] = Field(None, max_length=50)
    region: Optional[str] = Field(None, max_length=50)
    tags: Optional[List[str]] = None

    @field_validator("tags")
    @classmethod
    def strip_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(v)


class DatabaseIntegrationUpdate(RecordUpdate):
    connection_string: Optional[str] = Field(None, max_length=500)
    vector_store_type: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    database_integration_id: Optional[int] = None
    metadata: Optional[Dict[str, Any]] = None
    timeout_seconds: Optional[int] = Field(None, ge=0)
    max_retries: Optional[int] = Field(None, ge=0)
    is_encrypted: Optional[bool] = None
    last_synced_at: Optional[datetime] = None
    status_message: Optional[str] = Field(None, max_length=255)
    environment: Optional[str] = Field(None, max_length=50)
    region: Optional[str] = Field(None, max_length=50)
    tags: Optional[List[str]] = None

    @field_validator("tags")
    @classmethod
    def strip_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(v)


class DatabaseIntegrationRead(RecordRead):
    connection_string: str
    vector_store_type: str
    description: Optional[str]
    database_integration_id: Optional[int]
    metadata: Optional[Dict[str, Any]]
    timeout_seconds: Optional[int]
    max_retries: Optional[int]
    is_encrypted: bool
    last_synced_at: Optional[datetime]
    status_message: Optional[str]
    environment: Optional[str]
    region: Optional[str]
    tags: Optional[List[str]]
