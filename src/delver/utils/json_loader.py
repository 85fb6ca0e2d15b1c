from __future__ import annotations

import json
import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from jsonschema import Draft202012Validator, exceptions as js_exceptions, validators

logger = logging.getLogger("delver.json")

JsonObject = Dict[str, Any]


# ---------------------------
# Exceptions
# ---------------------------

class JsonLoaderError(Exception):
    """Base error for JSON loader issues."""


class JsonFileNotFoundError(JsonLoaderError):
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"JSON file not found: {self.path}")


class JsonParseError(JsonLoaderError):
    def __init__(self, path: Union[str, Path], message: str, lineno: Optional[int] = None, colno: Optional[int] = None):
        self.path = Path(path)
        self.message = message
        self.lineno = lineno
        self.colno = colno
        location = f" (line {lineno}, column {colno})" if lineno is not None and colno is not None else ""
        super().__init__(f"Failed to parse JSON at {self.path}{location}: {message}")


class JsonSchemaError(JsonLoaderError):
    def __init__(self, path: Union[str, Path], errors: Sequence[js_exceptions.ValidationError]):
        self.path = Path(path)
        self.errors = list(errors)
        super().__init__(_format_schema_errors(self.path, self.errors))


# ---------------------------
# Utilities
# ---------------------------

def _extend_with_default(validator_class):
    """Extend a jsonschema validator so 'default' values are written into missing properties."""

    validate_properties = validator_class.VALIDATORS["properties"]

    def set_defaults(validator, properties, instance, schema):
        if isinstance(instance, dict):
            for prop, subschema in properties.items():
                if "default" in subschema and prop not in instance:
                    instance[prop] = deepcopy(subschema["default"])
        for error in validate_properties(validator, properties, instance, schema):
            yield error

    return validators.extend(validator_class, {"properties": set_defaults})


DefaultingValidator = _extend_with_default(Draft202012Validator)


def _read_json(path: Union[str, Path]) -> Any:
    p = Path(path)
    if not p.exists():
        raise JsonFileNotFoundError(p)
    try:
        with p.open("r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise JsonParseError(p, e.msg, e.lineno, e.colno) from e


def _format_schema_errors(path: Path, errors: Sequence[js_exceptions.ValidationError]) -> str:
    lines = [f"Schema validation failed for {path}:"]
    for err in errors:
        where = ".".join(str(p) for p in err.absolute_path) or "$"
        lines.append(f" - At {where}: {err.message}")
    return "\n".join(lines)


# ---------------------------
# Public API
# ---------------------------

def load_json_file(
    path: Union[str, Path],
    *,
    schema: Optional[Mapping[str, Any]] = None,
    log: Optional[logging.Logger] = None,
) -> JsonObject:
    """Load a JSON document and validate it against `schema` if one is given.

    Defaults declared in the schema are written into the returned object. Raises a
    JsonLoaderError subclass when the file is missing, unparsable or invalid.
    """
    lg = log or logger
    data = _read_json(path)
    if not schema:
        return data

    if not isinstance(data, (dict, list)):
        raise JsonSchemaError(path, [js_exceptions.ValidationError("Root must be object or array")])

    before: List[str] = list(data.keys()) if isinstance(data, dict) else []
    errors = sorted(DefaultingValidator(schema).iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errors:
        raise JsonSchemaError(path, errors)

    if isinstance(data, dict):
        applied = sorted(set(data.keys()) - set(before))
        if applied:
            lg.info("Applied default values for missing keys in %s: %s", str(path), ", ".join(applied))
    return data


__all__ = [
    "load_json_file",
    "JsonLoaderError",
    "JsonFileNotFoundError",
    "JsonParseError",
    "JsonSchemaError",
]
