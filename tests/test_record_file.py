"""Tests for JSON record files and the ranking script."""

import importlib.util
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import pytest

from src.infrastructure.record_file import load_records, write_records

SCRIPT = Path(__file__).parent.parent / "scripts" / "rank_repositories.py"


def load_script():
    spec = importlib.util.spec_from_file_location("rank_repositories", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestRecordFile:
    def test_load_array(self, tmp_path: Path) -> None:
        path = tmp_path / "repos.json"
        path.write_text(json.dumps([{"full_name": "a/b", "stargazers_count": 1}]), encoding="utf-8")

        assert load_records(str(path)) == [{"full_name": "a/b", "stargazers_count": 1}]

    def test_load_search_response(self, tmp_path: Path) -> None:
        path = tmp_path / "search.json"
        path.write_text(json.dumps({"total_count": 1, "items": [{"full_name": "a/b"}]}), encoding="utf-8")

        assert load_records(str(path)) == [{"full_name": "a/b"}]

    @pytest.mark.parametrize("content", ['{"full_name": "a/b"}', "[1, 2]", '"text"'])
    def test_load_rejects_other_shapes(self, tmp_path: Path, content: str) -> None:
        path = tmp_path / "bad.json"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(ValueError):
            load_records(str(path))

    def test_write_converts_datetimes(self, tmp_path: Path) -> None:
        path = tmp_path / "out.json"
        updated = datetime(2023, 1, 1, tzinfo=timezone.utc)

        write_records([{"full_name": "ü/ß", "updated_at": updated}], str(path))

        text = path.read_text(encoding="utf-8")
        assert json.loads(text) == [{"full_name": "ü/ß", "updated_at": "2023-01-01T00:00:00+00:00"}]
        assert "ü/ß" in text


    def test_write_attribute_records(self, tmp_path: Path) -> None:
        @dataclass
        class Row:
            full_name: str
            stargazers_count: int
            updated_at: datetime

        class Plain:
            def __init__(self) -> None:
                self.full_name = "c/d"
                self.stargazers_count = 2

        path = tmp_path / "out.json"
        updated = datetime(2023, 1, 1, tzinfo=timezone.utc)

        write_records([Row("a/b", 1, updated), Plain()], str(path))

        assert json.loads(path.read_text(encoding="utf-8")) == [
            {"full_name": "a/b", "stargazers_count": 1, "updated_at": "2023-01-01T00:00:00+00:00"},
            {"full_name": "c/d", "stargazers_count": 2},
        ]


class TestRankScript:
    def test_ranks_input_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        input_file = tmp_path / "repos.json"
        input_file.write_text(
            json.dumps(
                [
                    {"full_name": "a/low", "stargazers_count": 1, "updated_at": "2024-01-01T00:00:00Z", "language": "Go"},
                    {"full_name": "a/high", "stargazers_count": 9, "updated_at": "2020-01-01T00:00:00Z"},
                    {"full_name": "a/mid", "stargazers_count": 5, "updated_at": "2022-01-01T00:00:00Z"},
                ]
            ),
            encoding="utf-8",
        )
        output_dir = tmp_path / "out"
        monkeypatch.setenv("INPUT_FILE", str(input_file))
        monkeypatch.setenv("OUTPUT_DIR", str(output_dir))
        monkeypatch.setenv("TOP_N", "2")
        monkeypatch.delenv("RANKING_POLICY", raising=False)

        assert load_script().main() == 0

        (output_file,) = output_dir.glob("ranked_repositories_*.json")
        ranked = json.loads(output_file.read_text(encoding="utf-8"))
        assert [r["full_name"] for r in ranked] == ["a/high", "a/mid"]

    def test_missing_input_file_setting(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("INPUT_FILE", raising=False)

        assert load_script().main() == 1

    def test_invalid_records_fail(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        input_file = tmp_path / "repos.json"
        input_file.write_text(json.dumps([{"full_name": "a/b", "stargazers_count": "many"}]), encoding="utf-8")
        monkeypatch.setenv("INPUT_FILE", str(input_file))
        monkeypatch.setenv("OUTPUT_DIR", str(tmp_path / "out"))
        monkeypatch.setenv("RANKING_POLICY", "strict")
        monkeypatch.delenv("TOP_N", raising=False)

        assert load_script().main() == 1
