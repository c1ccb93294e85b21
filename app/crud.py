from sqlalchemy.orm import Session
from sqlalchemy import and_
from app.models import StringAnalysis, CharacterFrequency
from app.utils import analyze_string
from app.filters import Clause, ClauseKind, FilterPredicate, compile_filters
from typing import List, Optional

def create_string_analysis(db: Session, value: str) -> StringAnalysis:
    """Create a new string analysis"""
    analysis_data = analyze_string(value)

    db_string = StringAnalysis(
        id=analysis_data["id"],
        value=analysis_data["value"],
        length=analysis_data["length"],
        is_palindrome=analysis_data["is_palindrome"],
        unique_characters=analysis_data["unique_characters"],
        word_count=analysis_data["word_count"],
        sha256_hash=analysis_data["sha256_hash"],
        character_frequency_map=analysis_data["character_frequency_map"],
        characters=[
            CharacterFrequency(character=character, count=count)
            for character, count in analysis_data["character_frequency_map"].items()
        ]
    )

    db.add(db_string)
    db.commit()
    db.refresh(db_string)
    return db_string

def get_string_by_value(db: Session, value: str) -> Optional[StringAnalysis]:
    """Get string analysis by value"""
    return db.query(StringAnalysis).filter(StringAnalysis.value == value).first()

def get_string_by_id(db: Session, string_id: str) -> Optional[StringAnalysis]:
    """Get string analysis by ID (hash)"""
    return db.query(StringAnalysis).filter(StringAnalysis.id == string_id).first()

# Clause kind -> SQLAlchemy expression. Values are always bound parameters.
_CLAUSE_BUILDERS = {
    ClauseKind.PALINDROME: lambda value: StringAnalysis.is_palindrome == value,
    ClauseKind.MIN_LENGTH: lambda value: StringAnalysis.length >= value,
    ClauseKind.MAX_LENGTH: lambda value: StringAnalysis.length <= value,
    ClauseKind.WORD_COUNT: lambda value: StringAnalysis.word_count == value,
    ClauseKind.CONTAINS_CHARACTER: lambda value: StringAnalysis.characters.any(
        CharacterFrequency.character == value
    ),
}

def clause_to_expression(clause: Clause):
    """Translate one compiled clause into a SQL expression"""
    return _CLAUSE_BUILDERS[clause.kind](clause.value)

def get_all_strings(db: Session, filters: FilterPredicate) -> List[StringAnalysis]:
    """Get all strings matching a filter predicate (empty predicate matches everything)"""
    query = db.query(StringAnalysis)

    expressions = [clause_to_expression(clause) for clause in compile_filters(filters)]
    if expressions:
        query = query.filter(and_(*expressions))

    return query.order_by(StringAnalysis.created_at, StringAnalysis.id).all()

def delete_string(db: Session, value: str) -> bool:
    """Delete string analysis by value"""
    db_string = get_string_by_value(db, value)
    if db_string:
        db.delete(db_string)
        db.commit()
        return True
    return False
