"""
Schema pieces shared by every resource kind.

Each kind extends ``RecordCreate``, ``RecordUpdate`` and ``RecordRead``
with its own fields.  ``Page`` wraps one page of read models together
with the total number of matching records.
"""

from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

ItemT = TypeVar("ItemT")


class RecordCreate(BaseModel):
    """Fields every record accepts on creation."""

    name: str = Field(..., max_length=100, description="Display name; must not be blank")
    is_active: bool = Field(False, description="Whether the record is active")


class RecordUpdate(BaseModel):
    """Fields every record accepts on update.

    All fields are optional; only provided values are changed.  ``id``
    is compared with the path id according to the resource's policy and
    ``version`` enables the optimistic concurrency check.
    """

    id: Optional[int] = Field(None, description="Must match the path id when supplied")
    version: Optional[int] = Field(None, description="Version the client last read")
    name: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None


class RecordRead(BaseModel):
    """Fields every stored record carries."""

    id: int
    name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    version: int


class Page(BaseModel, Generic[ItemT]):
    """A bounded slice of an ordered result set plus the total count."""

    model_config = ConfigDict(populate_by_name=True)

    items: List[ItemT]
    total_elements: int = Field(..., alias="totalElements")
    page: int
    size: int
