import hashlib
from collections import Counter
from typing import Dict

def compute_sha256(text: str) -> str:
    """Compute SHA-256 hash of a string"""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()

def is_palindrome(text: str) -> bool:
    """Check if string reads the same reversed (case-insensitive)"""
    normalized = text.lower()
    return normalized == normalized[::-1]

def count_unique_characters(text: str) -> int:
    """Count distinct characters, ignoring case"""
    return len(set(text.lower()))

def count_words(text: str) -> int:
    """Count words separated by whitespace"""
    return len(text.split())

def get_character_frequency(text: str) -> Dict[str, int]:
    """Get frequency map of each lowercased character"""
    return dict(Counter(text.lower()))

def analyze_string(value: str) -> Dict:
    """Analyze a string and return all computed properties"""
    sha256_hash = compute_sha256(value)

    return {
        "id": sha256_hash,
        "value": value,
        "length": len(value),
        "is_palindrome": is_palindrome(value),
        "unique_characters": count_unique_characters(value),
        "word_count": count_words(value),
        "sha256_hash": sha256_hash,
        "character_frequency_map": get_character_frequency(value)
    }
