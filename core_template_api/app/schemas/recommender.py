"""
Pydantic schemas for recommenders.
"""

from typing import Optional

from pydantic import ConfigDict, Field

from .common import RecordCreate, RecordRead, RecordUpdate


class RecommenderCreate(RecordCreate):
    # "model_version" would otherwise clash with pydantic's own namespace
    model_config = ConfigDict(protected_namespaces=())

    description: Optional[str] = Field(None, max_length=500)
    model_version: Optional[str] = Field(None, max_length=50, description="Version of the underlying model")


class RecommenderUpdate(RecordUpdate):
    model_config = ConfigDict(protected_namespaces=())

    description: Optional[str] = Field(None, max_length=500)
    model_version: Optional[str] = Field(None, max_length=50)


class RecommenderRead(RecordRead):
    model_config = ConfigDict(protected_namespaces=())

    description: Optional[str]
    model_version: Optional[str]
