"""
Integration tests for API endpoints
"""

from app.utils import compute_sha256


def values(response):
    return sorted(item["value"] for item in response.json()["data"])


class TestCreateString:
    def test_create(self, client):
        response = client.post("/strings", json={"value": "Hello World"})

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == compute_sha256("Hello World")
        assert data["value"] == "Hello World"
        assert data["properties"] == {
            "length": 11,
            "is_palindrome": False,
            "unique_characters": 8,
            "word_count": 2,
            "sha256_hash": compute_sha256("Hello World"),
            "character_frequency_map": {
                "h": 1, "e": 1, "l": 3, "o": 2, " ": 1, "w": 1, "r": 1, "d": 1,
            },
        }
        assert "created_at" in data

    def test_duplicate_is_conflict(self, client):
        client.post("/strings", json={"value": "twice"})
        response = client.post("/strings", json={"value": "twice"})

        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"

    def test_missing_value(self, client):
        response = client.post("/strings", json={})
        assert response.status_code == 400

    def test_blank_value(self, client):
        response = client.post("/strings", json={"value": "   "})
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"

    def test_wrong_type(self, client):
        response = client.post("/strings", json={"value": 123})
        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestGetAndDelete:
    def test_get_by_value(self, seeded_client):
        response = seeded_client.get("/strings/racecar")

        assert response.status_code == 200
        assert response.json()["properties"]["is_palindrome"] is True

    def test_get_unknown(self, client):
        response = client.get("/strings/missing")

        assert response.status_code == 404
        assert response.json() == {
            "error": "String does not exist in the system",
            "code": "NOT_FOUND",
        }

    def test_delete(self, seeded_client):
        response = seeded_client.delete("/strings/zebra crossing ahead")
        assert response.status_code == 204

        assert seeded_client.get("/strings/zebra crossing ahead").status_code == 404
        assert seeded_client.get("/strings", params={"contains_character": "z"}).json()["count"] == 0

    def test_delete_unknown(self, client):
        assert client.delete("/strings/missing").status_code == 404


class TestListStrings:
    def test_no_filters_returns_everything(self, seeded_client):
        response = seeded_client.get("/strings")

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 7
        assert body["filters_applied"] == {}

    def test_palindromes(self, seeded_client):
        response = seeded_client.get("/strings", params={"is_palindrome": "true"})

        assert values(response) == ["Level", "a", "noon", "racecar"]
        assert response.json()["filters_applied"] == {"is_palindrome": True}

    def test_length_range(self, seeded_client):
        response = seeded_client.get("/strings", params={"min_length": 5, "max_length": 7})
        assert values(response) == ["Level", "python", "racecar"]

    def test_word_count(self, seeded_client):
        response = seeded_client.get("/strings", params={"word_count": 2})
        assert values(response) == ["hello world"]

    def test_contains_character_ignores_case(self, seeded_client):
        response = seeded_client.get("/strings", params={"contains_character": "Z"})
        assert values(response) == ["zebra crossing ahead"]

    def test_inverted_bounds(self, seeded_client):
        response = seeded_client.get("/strings", params={"min_length": 10, "max_length": 2})
        assert response.status_code == 400

    def test_invalid_parameters(self, seeded_client):
        assert seeded_client.get("/strings", params={"contains_character": "ab"}).status_code == 400
        assert seeded_client.get("/strings", params={"min_length": "abc"}).status_code == 400
        assert seeded_client.get("/strings", params={"word_count": -1}).status_code == 400

    def test_numbers_beyond_storage_range(self, seeded_client):
        for name in ("min_length", "max_length", "word_count"):
            response = seeded_client.get("/strings", params={name: "99999999999999999999"})
            assert response.status_code == 400
        assert seeded_client.get("/strings", params={"max_length": 2**31 - 1}).json()["count"] == 7


class TestNaturalLanguageFilter:
    def test_single_word_palindromes(self, seeded_client):
        query = "all single word palindromic strings"
        response = seeded_client.get("/strings/filter-by-natural-language", params={"query": query})

        assert response.status_code == 200
        body = response.json()
        assert values(response) == ["Level", "a", "noon", "racecar"]
        assert body["count"] == 4
        assert body["interpreted_query"] == {
            "original": query,
            "parsed_filters": {"is_palindrome": True, "word_count": 1},
        }

    def test_containing_letter(self, seeded_client):
        response = seeded_client.get(
            "/strings/filter-by-natural-language",
            params={"query": "strings containing the letter z"},
        )
        assert values(response) == ["zebra crossing ahead"]

    def test_longer_than(self, seeded_client):
        response = seeded_client.get(
            "/strings/filter-by-natural-language",
            params={"query": "strings longer than 10 characters"},
        )
        assert values(response) == ["hello world", "zebra crossing ahead"]

    def test_unrecognized_query(self, seeded_client):
        response = seeded_client.get(
            "/strings/filter-by-natural-language",
            params={"query": "show me something nice"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Unable to parse natural language query"

    def test_conflicting_query(self, seeded_client):
        response = seeded_client.get(
            "/strings/filter-by-natural-language",
            params={"query": "shorter than 5 longer than 10"},
        )
        assert response.status_code == 422
        assert response.json()["error"] == "Query parsed but resulted in conflicting filters"

    def test_oversized_number_is_ignored(self, seeded_client):
        response = seeded_client.get(
            "/strings/filter-by-natural-language",
            params={"query": "palindromes longer than 99999999999999999999"},
        )
        assert response.status_code == 200
        assert response.json()["interpreted_query"]["parsed_filters"] == {"is_palindrome": True}

    def test_only_oversized_number_is_unrecognized(self, seeded_client):
        response = seeded_client.get(
            "/strings/filter-by-natural-language",
            params={"query": "longer than 99999999999999999999"},
        )
        assert response.status_code == 400

    def test_missing_query(self, client):
        response = client.get("/strings/filter-by-natural-language")
        assert response.status_code == 400


class TestServiceEndpoints:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "POST /strings" in response.json()["endpoints"]

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


class TestCharacterStorage:
    def test_accented_and_plain_letters_are_separate(self, client):
        assert client.post("/strings", json={"value": "aá"}).status_code == 201

        response = client.get("/strings", params={"contains_character": "á"})
        assert values(response) == ["aá"]
        assert response.json()["data"][0]["properties"]["character_frequency_map"] == {"a": 1, "á": 1}

    def test_character_column_is_binary_on_mysql(self):
        from sqlalchemy.dialects import mysql
        from sqlalchemy.schema import CreateTable

        from app.models import CharacterFrequency

        ddl = str(CreateTable(CharacterFrequency.__table__).compile(dialect=mysql.dialect()))
        assert "utf8mb4_bin" in ddl
