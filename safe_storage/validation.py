"""
Runtime validation of JSON-compatible values against a schema.

Everything here is pure: no I/O, no shared state, same answer for the same
inputs. Schemas are checked with a Draft 7 `jsonschema` validator; the first
violation is reported with where it happened (`path`) and which constraint
failed (`reason`).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Mapping, Union

from jsonschema import Draft7Validator, validators
from jsonschema.exceptions import ValidationError as JSONSchemaError

from .errors import SchemaDefinitionError
from .json_schema import ArraySchema, IntegerSchema, ObjectSchema, SchemaLike, SchemaModel
from .typed_schema import Typed, unwrap

Path = tuple[Union[str, int], ...]


class Reason(str, Enum):
    INVALID_TYPE = "invalid_type"
    NOT_IN_ENUM = "not_in_enum"
    NOT_CONST = "not_const"
    MISSING_REQUIRED = "missing_required"
    ARRAY_LENGTH = "array_length"
    TUPLE_LENGTH = "tuple_length"
    STRING_LENGTH = "string_length"
    PATTERN_MISMATCH = "pattern_mismatch"
    OUT_OF_RANGE = "out_of_range"
    NOT_MULTIPLE_OF = "not_multiple_of"
    NOT_UNIQUE = "not_unique"
    INVALID_SCHEMA = "invalid_schema"


@dataclass(frozen=True)
class Valid:
    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Invalid:
    path: Path
    reason: Reason
    message: str

    @property
    def ok(self) -> bool:
        return False


ValidationResult = Union[Valid, Invalid]

VALID = Valid()


_REASONS = {
    "type": Reason.INVALID_TYPE,
    "enum": Reason.NOT_IN_ENUM,
    "const": Reason.NOT_CONST,
    "required": Reason.MISSING_REQUIRED,
    "minItems": Reason.ARRAY_LENGTH,
    "maxItems": Reason.ARRAY_LENGTH,
    "additionalItems": Reason.TUPLE_LENGTH,
    "minLength": Reason.STRING_LENGTH,
    "maxLength": Reason.STRING_LENGTH,
    "pattern": Reason.PATTERN_MISMATCH,
    "minimum": Reason.OUT_OF_RANGE,
    "maximum": Reason.OUT_OF_RANGE,
    "exclusiveMinimum": Reason.OUT_OF_RANGE,
    "exclusiveMaximum": Reason.OUT_OF_RANGE,
    "multipleOf": Reason.NOT_MULTIPLE_OF,
    "uniqueItems": Reason.NOT_UNIQUE,
}


# Python shapes accepted for each JSON type: tuples are arrays, any str-keyed
# Mapping is an object, and non-finite floats are not numbers.


def _is_array(checker: Any, instance: Any) -> bool:
    return isinstance(instance, (list, tuple))


def _is_object(checker: Any, instance: Any) -> bool:
    return isinstance(instance, Mapping) and all(isinstance(k, str) for k in instance)


def _is_number(checker: Any, instance: Any) -> bool:
    if isinstance(instance, bool) or not isinstance(instance, (int, float)):
        return False
    return isinstance(instance, int) or math.isfinite(instance)


def _is_integer(checker: Any, instance: Any) -> bool:
    if isinstance(instance, float):
        return math.isfinite(instance) and instance.is_integer()
    return isinstance(instance, int) and not isinstance(instance, bool)


def _multiple_of(validator: Any, divisor: Any, instance: Any, schema: Mapping[str, Any]) -> Iterator[JSONSchemaError]:
    if not validator.is_type(instance, "number"):
        return
    if isinstance(instance, int) and isinstance(divisor, int):
        failed = instance % divisor != 0
    else:
        quotient = instance / divisor
        # binary floats: 0.3 / 0.1 == 2.9999999999999996
        failed = not math.isclose(quotient, round(quotient), rel_tol=1e-9, abs_tol=1e-9)
    if failed:
        yield JSONSchemaError(f"{instance!r} is not a multiple of {divisor!r}")


_TYPE_CHECKER = Draft7Validator.TYPE_CHECKER.redefine_many(
    {
        "array": _is_array,
        "object": _is_object,
        "number": _is_number,
        "integer": _is_integer,
    }
)

StorageValidator = validators.extend(
    Draft7Validator,
    validators={"multipleOf": _multiple_of},
    type_checker=_TYPE_CHECKER,
)


def validate(schema: Typed[Any] | SchemaLike | Mapping[str, Any], value: Any) -> ValidationResult:
    """
    Check `value` against `schema`.

    A schema that cannot be parsed yields `Invalid(reason=INVALID_SCHEMA)` with an
    empty path; use `parse_schema` first to get a SchemaDefinitionError instead.
    """
    try:
        model = unwrap(schema)
    except SchemaDefinitionError as e:
        return Invalid((), Reason.INVALID_SCHEMA, str(e))

    errors = sorted(
        StorageValidator(to_document(model)).iter_errors(value),
        key=lambda error: (len(error.absolute_path), error.validator != "type"),
    )
    if not errors:
        return VALID
    return _to_invalid(errors[0])


def to_document(schema: SchemaModel) -> dict[str, Any]:
    """
    JSON Schema document checked by the validator.

    Tuple schemas get `additionalItems: false` and a `minItems` of at least
    their arity, so a tuple only matches at exactly that length.
    """
    return _close_tuples(schema.to_dict())


def _close_tuples(doc: dict[str, Any]) -> dict[str, Any]:
    if doc["type"] == "array":
        items = doc["items"]
        if isinstance(items, list):
            doc["items"] = [_close_tuples(item) for item in items]
            doc["additionalItems"] = False
            doc["minItems"] = max(doc.get("minItems", 0), len(items))
        else:
            doc["items"] = _close_tuples(items)
    elif doc["type"] == "object" and "properties" in doc:
        doc["properties"] = {name: _close_tuples(prop) for name, prop in doc["properties"].items()}
    return doc


def _to_invalid(error: JSONSchemaError) -> Invalid:
    path: Path = tuple(error.absolute_path)
    reason = _REASONS.get(str(error.validator), Reason.INVALID_SCHEMA)

    if reason is Reason.MISSING_REQUIRED:
        missing = next(name for name in error.validator_value if name not in error.instance)
        path += (missing,)
    elif reason is Reason.ARRAY_LENGTH:
        items = error.schema.get("items")
        if isinstance(items, list) and len(error.instance) != len(items):
            reason = Reason.TUPLE_LENGTH
    return Invalid(path, reason, error.message)


def json_equal(a: Any, b: Any) -> bool:
    """Equality under JSON semantics: booleans never equal numbers, containers compare structurally."""
    return StorageValidator({"const": b}).is_valid(a)


def to_storage(value: Any) -> Any:
    """JSON-compatible copy of `value`: tuples become lists, mappings become dicts."""
    if isinstance(value, (list, tuple)):
        return [to_storage(v) for v in value]
    if isinstance(value, Mapping):
        return {k: to_storage(v) for k, v in value.items()}
    return value


def conform(schema: Typed[Any] | SchemaLike | Mapping[str, Any], value: Any) -> Any:
    """
    Rebuild an already-validated value in the Python shape its schema describes.

    Tuple schemas give `tuple`, integral floats under an integer schema give `int`,
    every container is a fresh copy. Values that were not validated first get no
    guarantees.
    """
    return _conform(unwrap(schema), value)


def _conform(schema: SchemaModel, value: Any) -> Any:
    if isinstance(schema, IntegerSchema) and isinstance(value, float):
        return int(value)
    if isinstance(schema, ArraySchema):
        if isinstance(schema.items, tuple):
            return tuple(_conform(s, v) for s, v in zip(schema.items, value))
        return [_conform(schema.items, v) for v in value]
    if isinstance(schema, ObjectSchema):
        props = schema.properties
        return {k: _conform(props[k], v) if k in props else to_storage(v) for k, v in value.items()}
    return value
