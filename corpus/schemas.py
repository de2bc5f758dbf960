"""
Pydantic models for validating corpus records before they become KnowledgeEntry objects
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class KnowledgeEntryRecord(BaseModel):
    """Schema for one record of the corpus JSON file"""
    model_config = ConfigDict(extra='forbid', str_strip_whitespace=True)

    id: str = Field(..., min_length=1, description="Unique stable identifier")
    title: str = Field(..., min_length=1, description="Short name of the doctrine, term or writ")
    summary: str = Field(..., min_length=1, description="Plain-language explanation")
    citations: List[str] = Field(..., min_length=1, description="Ordered authority strings")
    era: str = Field(..., min_length=1, description="Coarse historical period label")
    jurisdiction: str = Field(..., min_length=1, description="Applicable jurisdiction label")
    category: str = Field(..., min_length=1, description="Classification tag, e.g. writ or definition")
    keywords: List[str] = Field(..., min_length=1, description="Search vocabulary, words or phrases")

    @field_validator('citations')
    @classmethod
    def validate_citations(cls, v):
        cleaned = [c.strip() for c in v if c and c.strip()]
        if not cleaned:
            raise ValueError("citations cannot be empty")
        return cleaned

    @field_validator('category')
    @classmethod
    def normalize_category(cls, v):
        return v.lower()
