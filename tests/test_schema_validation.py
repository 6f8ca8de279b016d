"""
SonicState v1 Schema Validation Tests

Tests that the result schema is valid and agrees with AnalysisResult.to_dict().
"""

import json
import subprocess
from pathlib import Path

import pytest

# Import validation functions from tools
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "tools"))
from validate_schema import load_schema, validate_document, validate_result, SCHEMA_FILES

from sonicstate import fallback_result


SCHEMA_DIR = Path(__file__).parent.parent / "schemas"


def _document(result, category="neutral"):
    doc = result.to_dict()
    doc["category"] = category
    return doc


class TestSchemaLoading:

    def test_result_schema_loads(self):
        schema = load_schema("result")
        assert schema["title"] == "SonicState v1 Analysis Result"
        assert "scores" in schema["required"]

    def test_invalid_schema_name_raises(self):
        with pytest.raises(ValueError, match="Unknown schema"):
            load_schema("invalid_schema")

    def test_every_schema_file_is_json(self):
        for filename in SCHEMA_FILES.values():
            with open(SCHEMA_DIR / filename) as f:
                assert json.load(f)["$schema"].startswith("http://json-schema.org/draft-07")


class TestResultSchemaValidation:

    @pytest.fixture
    def schema(self):
        return load_schema("result")

    def test_fallback_is_valid(self, schema):
        assert validate_document(_document(fallback_result()), schema) == []

    def test_feature_keys_match_schema(self, schema):
        keys = set(fallback_result().features.to_dict())
        assert keys == set(schema["definitions"]["features"]["required"])

    def test_score_out_of_range(self, schema):
        doc = _document(fallback_result())
        doc["scores"]["energy"] = 101
        errors = validate_document(doc, schema)
        assert any("scores.energy" in e for e in errors)

    def test_unknown_confidence(self, schema):
        doc = _document(fallback_result())
        doc["confidence"] = "certain"
        assert validate_document(doc, schema) != []

    def test_missing_category(self, schema):
        doc = fallback_result().to_dict()
        errors = validate_document(doc, schema)
        assert any("category" in e for e in errors)

    def test_extra_field_rejected(self, schema):
        doc = _document(fallback_result())
        doc["transcript"] = "hello"
        assert validate_document(doc, schema) != []


class TestValidateResult:

    def test_fallback_is_valid(self):
        assert validate_result(_document(fallback_result())) == []

    def test_matching_insights_must_start_with_insight(self):
        doc = _document(fallback_result())
        doc["matching_insights"] = ["Voice signal detected within typical range."]
        assert validate_result(doc) == ["matching_insights: first entry must equal insight"]

    def test_matching_insights_consistent(self):
        doc = _document(fallback_result())
        doc["matching_insights"] = [doc["insight"]]
        assert validate_result(doc) == []

    def test_schema_errors_reported_first(self):
        doc = _document(fallback_result())
        del doc["scores"]
        doc["matching_insights"] = ["something else"]
        errors = validate_result(doc)
        assert len(errors) == 1
        assert "scores" in errors[0]


class TestValidateTool:

    TOOL = Path(__file__).parent.parent / "tools" / "validate_schema.py"

    def _run(self, *args, stdin=None):
        return subprocess.run(
            [sys.executable, str(self.TOOL), *args],
            input=stdin,
            capture_output=True,
            text=True,
        )

    def test_valid_from_stdin(self):
        result = self._run("-", stdin=json.dumps(_document(fallback_result())))
        assert result.returncode == 0
        assert result.stdout.startswith("VALID")

    def test_invalid_file(self, tmp_path):
        doc = _document(fallback_result())
        doc["confidence"] = "certain"
        path = tmp_path / "result.json"
        path.write_text(json.dumps(doc))

        result = self._run(str(path))

        assert result.returncode == 1
        assert "confidence" in result.stdout

    def test_missing_file(self, tmp_path):
        result = self._run(str(tmp_path / "missing.json"))
        assert result.returncode == 1
        assert "File not found" in result.stderr
