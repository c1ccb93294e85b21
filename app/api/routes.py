from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from app.database import get_db
from app.schemas import StringCreate, StringResponse, StringListResponse, NaturalLanguageResponse, InterpretedQuery
from app import crud
from app.filters import FilterPredicate, InvalidFilterError
from app.nlp import parse_natural_language_query, NoConstraintsRecognized, ConflictingFilters, INT_MAX
from app.utils import compute_sha256

router = APIRouter()
logger = logging.getLogger(__name__)


def error_detail(code: str, message: str) -> dict:
    """HTTPException detail in the shape the app-level handler passes through."""
    return {"error": message, "code": code}


@router.post("/strings", response_model=StringResponse, status_code=status.HTTP_201_CREATED)
def create_string(string_data: StringCreate, db: Session = Depends(get_db)):
    """
    Analyze and store a string.
    Returns 409 if the string already exists.
    """
    if not string_data.value.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_detail("INVALID_INPUT", "Invalid request body or missing 'value' field")
        )

    if crud.get_string_by_id(db, compute_sha256(string_data.value)):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=error_detail("CONFLICT", "String already exists in the system")
        )

    db_string = crud.create_string_analysis(db, string_data.value)
    logger.info(f"Stored analysis {db_string.id}")
    return StringResponse.from_record(db_string)


@router.get("/strings", response_model=StringListResponse)
def get_all_strings(
    is_palindrome: Optional[bool] = Query(None),
    min_length: Optional[int] = Query(None, ge=0, le=INT_MAX),
    max_length: Optional[int] = Query(None, ge=0, le=INT_MAX),
    word_count: Optional[int] = Query(None, ge=0, le=INT_MAX),
    contains_character: Optional[str] = Query(None, min_length=1, max_length=1),
    db: Session = Depends(get_db)
):
    """
    Get all strings with optional filtering.
    """
    try:
        filters = FilterPredicate.from_query_params(
            is_palindrome=is_palindrome,
            min_length=min_length,
            max_length=max_length,
            word_count=word_count,
            contains_character=contains_character
        )
    except InvalidFilterError as e:
        logger.info(f"Rejected filter parameters: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_detail("INVALID_INPUT", "Invalid query parameter values or types")
        )

    data = [StringResponse.from_record(s) for s in crud.get_all_strings(db, filters)]
    return StringListResponse(
        data=data,
        count=len(data),
        filters_applied=filters.to_dict()
    )


# Must stay above /strings/{string_value} or the path parameter swallows it
@router.get("/strings/filter-by-natural-language", response_model=NaturalLanguageResponse)
def filter_by_natural_language(
    query: str = Query(..., description="Natural language query"),
    db: Session = Depends(get_db)
):
    """
    Filter strings using natural language queries.
    Example: "all single word palindromic strings"
    """
    try:
        parsed = parse_natural_language_query(query)
    except NoConstraintsRecognized:
        logger.info(f"No filters recognized in query {query!r}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_detail("INVALID_INPUT", "Unable to parse natural language query")
        )
    except ConflictingFilters as e:
        logger.info(f"Conflicting filters in query {query!r}: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=error_detail("CONFLICT", "Query parsed but resulted in conflicting filters")
        )

    data = [StringResponse.from_record(s) for s in crud.get_all_strings(db, parsed.filters)]

    return NaturalLanguageResponse(
        data=data,
        count=len(data),
        interpreted_query=InterpretedQuery(
            original=parsed.original,
            parsed_filters=parsed.filters.to_dict()
        )
    )


@router.get("/strings/{string_value}", response_model=StringResponse)
def get_string(string_value: str, db: Session = Depends(get_db)):
    """
    Get analysis for a specific string.
    Returns 404 if the string doesn't exist.
    """
    db_string = crud.get_string_by_value(db, string_value.strip())
    if not db_string:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error_detail("NOT_FOUND", "String does not exist in the system")
        )
    return StringResponse.from_record(db_string)


@router.delete("/strings/{string_value}", status_code=status.HTTP_204_NO_CONTENT)
def delete_string(string_value: str, db: Session = Depends(get_db)):
    """
    Delete a string from the system.
    Returns 404 if the string doesn't exist.
    """
    if not crud.delete_string(db, string_value.strip()):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error_detail("NOT_FOUND", "String does not exist in the system")
        )
    logger.info(f"Deleted string {string_value.strip()!r}")
    return None
