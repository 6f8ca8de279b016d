#!/usr/bin/env python3
"""
SonicState v1 Result Validation Tool

Checks `sonicstate analyze` output against schemas/result.schema.json plus
the cross-field rules the schema cannot express. Located outside the
runtime package (tools/).

Usage:
    sonicstate analyze --input voice.wav | python tools/validate_schema.py -
    python tools/validate_schema.py result.json
"""

import argparse
import json
import sys
from pathlib import Path

import jsonschema


SCHEMA_DIR = Path(__file__).parent.parent / "schemas"

SCHEMA_FILES = {
    "result": "result.schema.json",
}


def load_schema(schema_name: str = "result") -> dict:
    """Load a schema by name."""
    if schema_name not in SCHEMA_FILES:
        raise ValueError(f"Unknown schema: {schema_name}. Valid: {list(SCHEMA_FILES.keys())}")

    with open(SCHEMA_DIR / SCHEMA_FILES[schema_name], "r") as f:
        return json.load(f)


def validate_document(document: dict, schema: dict) -> list[str]:
    """
    Validate a document against a schema.

    Returns:
        List of "path: message" strings (empty if valid).
    """
    validator = jsonschema.Draft7Validator(schema)
    errors = []
    ordered = sorted(validator.iter_errors(document), key=lambda e: [str(p) for p in e.absolute_path])
    for error in ordered:
        path = ".".join(str(p) for p in error.absolute_path) or "(root)"
        errors.append(f"{path}: {error.message}")
    return errors


def validate_result(document: dict) -> list[str]:
    """
    Validate an analysis result.

    Schema errors are reported first. When the document is structurally
    valid, the chosen insight must also head the matching_insights list.
    """
    errors = validate_document(document, load_schema("result"))
    if errors:
        return errors

    matching = document.get("matching_insights")
    if matching is not None and matching[0] != document["insight"]:
        errors.append("matching_insights: first entry must equal insight")
    return errors


def main():
    parser = argparse.ArgumentParser(
        description="Validate `sonicstate analyze` output"
    )
    parser.add_argument(
        "json_file",
        help="Path to JSON result, or - to read stdin",
    )

    args = parser.parse_args()

    try:
        if args.json_file == "-":
            document = json.load(sys.stdin)
        else:
            with open(args.json_file, "r") as f:
                document = json.load(f)
    except FileNotFoundError:
        sys.exit(f"Error: File not found: {args.json_file}")
    except json.JSONDecodeError as e:
        sys.exit(f"Error: Invalid JSON: {e}")

    errors = validate_result(document)

    if errors:
        print(f"INVALID: {len(errors)} error(s) found:")
        for error in errors:
            print(f"  - {error}")
        sys.exit(1)

    print("VALID: Result conforms to the SonicState v1 result schema.")
    sys.exit(0)


if __name__ == "__main__":
    main()
