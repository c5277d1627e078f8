from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema import FormatChecker

ARTIFACT_SCHEMA = "contract.artifact.schema.json"


class SchemaValidationError(ValueError):
    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


@dataclass(frozen=True)
class SchemaRegistry:
    schema_root: Path

    @staticmethod
    def discover_root() -> Path:
        root = Path(__file__).resolve().parent / "v1"
        if not root.is_dir():
            raise FileNotFoundError(f"Unable to locate bundled schemas at {root}.")
        return root

    @classmethod
    def default(cls) -> "SchemaRegistry":
        return cls(schema_root=cls.discover_root())

    def validator_for(self, schema_filename: str) -> jsonschema.Validator:
        with (self.schema_root / schema_filename).open("r", encoding="utf-8") as f:
            schema = json.load(f)
        validator_cls = jsonschema.validators.validator_for(schema)
        validator_cls.check_schema(schema)
        return validator_cls(schema, format_checker=FormatChecker())

    def validate_instance(self, instance: Any, schema_filename: str) -> None:
        validator = self.validator_for(schema_filename)
        errors = sorted(validator.iter_errors(instance), key=lambda e: [str(part) for part in e.path])
        if errors:
            formatted = [self._format_error(err) for err in errors]
            raise SchemaValidationError(
                f"Schema validation failed for {schema_filename}.",
                errors=formatted,
            )

    @staticmethod
    def _format_error(error: jsonschema.ValidationError) -> str:
        location = "/".join(str(part) for part in error.path) or "<root>"
        return f"{location}: {error.message}"


__all__ = ["ARTIFACT_SCHEMA", "SchemaRegistry", "SchemaValidationError"]
