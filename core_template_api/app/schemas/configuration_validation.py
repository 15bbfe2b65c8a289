"""
Pydantic schemas for configuration validation rules.

A configuration validation record stores a named validation rule
together with retry and timeout hints, a production toggle and an
optional free-form JSON configuration object.
"""

from typing import Any, Dict, Optional

from pydantic import Field

from .common import RecordCreate, RecordRead, RecordUpdate


class ConfigurationValidationCreate(RecordCreate):
    """Schema for creating a configuration validation rule."""

    validation_rule: Optional[str] = Field(None, description="Rule expression, e.g. a regular expression")
    description: Optional[str] = None
    max_retries: Optional[int] = Field(None, ge=0)
    timeout_seconds: Optional[int] = Field(None, ge=0)
    enabled_for_production: bool = False
    dynamic_config: Optional[Dict[str, Any]] = Field(None, description="Arbitrary JSON configuration")


class ConfigurationValidationUpdate(RecordUpdate):
    validation_rule: Optional[str] = None
    description: Optional[str] = None
    max_retries: Optional[int] = Field(None, ge=0)
    timeout_seconds: Optional[int] = Field(None, ge=0)
    enabled_for_production: Optional[bool] = None
    dynamic_config: Optional[Dict[str, Any]] = None


class ConfigurationValidationRead(RecordRead):
    validation_rule: Optional[str]
    description: Optional[str]
    max_retries: Optional[int]
    timeout_seconds: Optional[int]
    enabled_for_production: bool
    dynamic_config: Optional[Dict[str, Any]]
