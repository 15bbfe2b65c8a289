"""
Pydantic schemas for user feedback entries.

A feedback entry records a rating from 1 to 5 given by a user
(referenced by an opaque integer id), an optional free-text
description and a resolution flag.  ``feedback_date`` defaults to the
moment the entry is stored when the client omits it.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .common import RecordCreate, RecordRead, RecordUpdate


class UserFeedbackCreate(RecordCreate):
    """Schema for submitting feedback."""

    description: Optional[str] = Field(None, max_length=500, description="Feedback text")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    feedback_date: Optional[datetime] = Field(None, description="When the feedback was given")
    user_id: int = Field(..., description="Identifier of the user giving feedback")
    is_resolved: bool = False

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: Optional[str]) -> Optional[str]:
        """Trim surrounding whitespace from the feedback text."""
        if v is None:
            return None
        return v.strip()


class UserFeedbackUpdate(RecordUpdate):
    description: Optional[str] = Field(None, max_length=500)
    rating: Optional[int] = Field(None, ge=1, le=5)
    feedback_date: Optional[datetime] = None
    user_id: Optional[int] = None
    is_resolved: Optional[bool] = None


class UserFeedbackRead(RecordRead):
    description: Optional[str]
    rating: int
    feedback_date: datetime
    user_id: int
    is_resolved: bool
