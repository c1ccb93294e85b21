from sqlalchemy import Column, String, Integer, Boolean, DateTime, JSON, ForeignKey
from sqlalchemy.dialects import mysql
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from app.database import Base

class StringAnalysis(Base):
    __tablename__ = "string_analyses"

    id = Column(String(64), primary_key=True, index=True)  # SHA-256 hash
    value = Column(String, unique=True, nullable=False, index=True)
    length = Column(Integer, nullable=False, index=True)
    is_palindrome = Column(Boolean, nullable=False, index=True)
    unique_characters = Column(Integer, nullable=False)
    word_count = Column(Integer, nullable=False, index=True)
    sha256_hash = Column(String(64), nullable=False)
    character_frequency_map = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    characters = relationship(
        "CharacterFrequency",
        back_populates="analysis",
        cascade="all, delete-orphan",
    )

class CharacterFrequency(Base):
    """One row per distinct (lowercased) character of an analysed string."""
    __tablename__ = "character_frequencies"

    string_id = Column(
        String(64),
        ForeignKey("string_analyses.id", ondelete="CASCADE"),
        primary_key=True,
    )
    # binary collation so MySQL keeps "a" and "á" as distinct keys
    character = Column(
        String(8).with_variant(mysql.VARCHAR(8, collation="utf8mb4_bin"), "mysql"),
        primary_key=True,
        index=True,
    )
    count = Column(Integer, nullable=False)

    analysis = relationship("StringAnalysis", back_populates="characters")
