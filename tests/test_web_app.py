"""Tests for the FastAPI web app."""

from __future__ import annotations

import json
from pathlib import Path

from fastapi.testclient import TestClient

from linkfinder.web.app import _resolve_data_path, app


client = TestClient(app)


def payload(vault_dir: Path, tmp_path: Path, **extra: object) -> dict:
    body = {"vault": str(vault_dir), "data": str(tmp_path / "recent.json")}
    body.update(extra)
    return body


class TestHelpers:
    """Tests for helper functions."""

    def test_resolve_data_path_with_path(self, tmp_path: Path) -> None:
        """Returns an absolute path as-is."""
        path = tmp_path / "recent.json"

        assert _resolve_data_path(path) == path

    def test_resolve_data_path_with_none(self) -> None:
        """Falls back to the default ledger file."""
        assert _resolve_data_path(None).name == "recent.json"


class TestSearchEndpoint:
    """Tests for /search."""

    def test_search_empty_query(self, vault_dir: Path, tmp_path: Path) -> None:
        """Rejects an empty query."""
        response = client.post("/search", json=payload(vault_dir, tmp_path, query="   "))

        assert response.status_code == 400
        assert response.json()["detail"] == "Empty query"

    def test_search_missing_vault(self, tmp_path: Path) -> None:
        """Returns 404 for a missing vault."""
        response = client.post("/search", json=payload(tmp_path / "missing", tmp_path, query="x"))

        assert response.status_code == 404

    def test_search_success(self, vault_dir: Path, tmp_path: Path) -> None:
        """Returns note suggestions."""
        response = client.post("/search", json=payload(vault_dir, tmp_path, query="wooden boxes"))

        assert response.status_code == 200
        results = response.json()["results"]
        assert results[0]["note"]["title"] == "Деревянная коробка"
        assert results[0]["matched_alias"] == "Wooden box"
        assert results[0]["kind"] == "note"

    def test_search_clamps_limit(self, vault_dir: Path, tmp_path: Path) -> None:
        """Returns at least one result even for a zero limit."""
        response = client.post("/search", json=payload(vault_dir, tmp_path, query="plan", limit=0))

        assert response.status_code == 200
        assert len(response.json()["results"]) == 1


class TestSuggestEndpoint:
    """Tests for /suggest."""

    def test_suggest_headings_of_selected_note(self, vault_dir: Path, tmp_path: Path) -> None:
        """Uses the selected note for heading queries."""
        response = client.post(
            "/suggest",
            json=payload(vault_dir, tmp_path, query="#разм", selected_path="Деревянная коробка.md"),
        )

        assert response.status_code == 200
        suggestions = response.json()["suggestions"]
        assert [item["heading"] for item in suggestions] == ["Размеры"]
        assert suggestions[0]["kind"] == "heading"

    def test_suggest_unknown_selected_note(self, vault_dir: Path, tmp_path: Path) -> None:
        """Returns 404 for an unknown selected note."""
        response = client.post(
            "/suggest", json=payload(vault_dir, tmp_path, query="#x", selected_path="nope.md")
        )

        assert response.status_code == 404

    def test_suggest_blank_query(self, vault_dir: Path, tmp_path: Path) -> None:
        """Lists nothing without history."""
        response = client.post("/suggest", json=payload(vault_dir, tmp_path, query=""))

        assert response.status_code == 200
        assert response.json()["suggestions"] == []


class TestSelectEndpoint:
    """Tests for /select."""

    def test_select_records_note(self, vault_dir: Path, tmp_path: Path) -> None:
        """Returns the link and saves the ledger."""
        response = client.post("/select", json=payload(vault_dir, tmp_path, query="коробку"))

        assert response.status_code == 200
        assert response.json() == {"link": "[[Деревянная коробка|коробку]]", "title": "Деревянная коробка"}
        saved = json.loads((tmp_path / "recent.json").read_text(encoding="utf-8"))
        assert list(saved) == ["Деревянная коробка"]

    def test_select_as_typed(self, vault_dir: Path, tmp_path: Path) -> None:
        """Returns the raw link without recording."""
        response = client.post("/select", json=payload(vault_dir, tmp_path, query="new idea", as_typed=True))

        assert response.json() == {"link": "[[new idea|new idea]]", "title": None}
        assert not (tmp_path / "recent.json").exists()

    def test_select_out_of_range(self, vault_dir: Path, tmp_path: Path) -> None:
        """Returns 404 for an index beyond the suggestions."""
        response = client.post("/select", json=payload(vault_dir, tmp_path, query="коробку", index=3))

        assert response.status_code == 404
        assert response.json()["detail"] == "Suggestion not found"


class TestRecentEndpoint:
    """Tests for /recent."""

    def test_recent_lists_entries(self, tmp_path: Path) -> None:
        """Lists entries newest first."""
        data = tmp_path / "recent.json"
        data.write_text(json.dumps({"A": 1000, "B": 2000}), encoding="utf-8")

        response = client.get("/recent", params={"data": str(data)})

        assert response.status_code == 200
        assert response.json() == {
            "recent": [{"title": "B", "timestamp": 2000}, {"title": "A", "timestamp": 1000}]
        }

    def test_recent_malformed(self, tmp_path: Path) -> None:
        """Returns 400 for a broken ledger file."""
        data = tmp_path / "recent.json"
        data.write_text("[]", encoding="utf-8")

        response = client.get("/recent", params={"data": str(data)})

        assert response.status_code == 400
