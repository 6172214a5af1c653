"""
Business input data.
"""
from pydantic import BaseModel, Field, field_validator


class BusinessData(BaseModel):
    """Validated input for creating or updating a business."""
    name: str = Field(..., min_length=1, max_length=255)

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('name must not be blank')
        return value
