from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List
from datetime import datetime

class StringCreate(BaseModel):
    value: str = Field(..., description="String to analyze")

class StringProperties(BaseModel):
    length: int
    is_palindrome: bool
    unique_characters: int
    word_count: int
    sha256_hash: str
    character_frequency_map: Dict[str, int]

class StringResponse(BaseModel):
    id: str
    value: str
    properties: StringProperties
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_record(cls, record) -> "StringResponse":
        """Build the response shape from a StringAnalysis row"""
        return cls(
            id=record.id,
            value=record.value,
            properties=StringProperties(
                length=record.length,
                is_palindrome=record.is_palindrome,
                unique_characters=record.unique_characters,
                word_count=record.word_count,
                sha256_hash=record.sha256_hash,
                character_frequency_map=record.character_frequency_map
            ),
            created_at=record.created_at
        )

class StringListResponse(BaseModel):
    data: List[StringResponse]
    count: int
    filters_applied: Dict[str, Any]

class InterpretedQuery(BaseModel):
    original: str
    parsed_filters: Dict[str, Any]

class NaturalLanguageResponse(BaseModel):
    data: List[StringResponse]
    count: int
    interpreted_query: InterpretedQuery
