"""Base model class for all database models."""

from typing import Optional

from pydantic import BaseModel, Field


class DBModel(BaseModel):
    """Base model for all database models."""

    id: Optional[int] = Field(None, description="Primary key")

    class Config:
        """Pydantic config."""

        from_attributes = True
