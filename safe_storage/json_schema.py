"""
Schema model: an immutable, JSON-Schema-like description of a stored value.

Schemas are pydantic models discriminated on `type`. Callers may also pass the
plain dict form (`{"type": "number", "maximum": 10}`); `parse_schema` turns it
into the model and raises `SchemaDefinitionError` when it is malformed.
"""

from __future__ import annotations

import re
from typing import Annotated, Any, Literal, Mapping, Required, Sequence, TypeAlias, TypedDict, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    model_serializer,
    model_validator,
)

from .errors import SchemaDefinitionError

JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]

StrictNumber: TypeAlias = Union[StrictInt, StrictFloat]


class _SchemaBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    title: str | None = None
    description: str | None = None

    @model_serializer(mode="wrap")
    def _omit_defaults(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        # Keywords left at their default are not part of the document; `type` always is.
        data = handler(self)
        for name, field in type(self).model_fields.items():
            if name == "type" or field.is_required():
                continue
            if getattr(self, name) == field.get_default(call_default_factory=True):
                data.pop(field.alias or name, None)
                data.pop(name, None)
        return data

    def to_dict(self) -> dict[str, Any]:
        """JSON form of the schema, using the JSON Schema keyword spellings."""
        return self.model_dump(mode="json", by_alias=True)


class StringSchema(_SchemaBase):
    type: Literal["string"] = "string"
    const: StrictStr | None = None
    enum: tuple[StrictStr, ...] | None = None
    min_length: int | None = Field(default=None, alias="minLength", ge=0)
    max_length: int | None = Field(default=None, alias="maxLength", ge=0)
    pattern: str | None = None

    @model_validator(mode="after")
    def _check_bounds(self) -> "StringSchema":
        if self.enum is not None and not self.enum:
            raise ValueError("enum must list at least one value")
        if self.min_length is not None and self.max_length is not None and self.min_length > self.max_length:
            raise ValueError("minLength must not exceed maxLength")
        if self.pattern is not None:
            try:
                re.compile(self.pattern)
            except re.error as e:
                raise ValueError(f"pattern is not a valid regular expression: {e}") from e
        return self


class _NumericSchema(_SchemaBase):
    const: StrictNumber | None = None
    enum: tuple[StrictNumber, ...] | None = None
    minimum: StrictNumber | None = None
    maximum: StrictNumber | None = None
    exclusive_minimum: StrictNumber | None = Field(default=None, alias="exclusiveMinimum")
    exclusive_maximum: StrictNumber | None = Field(default=None, alias="exclusiveMaximum")
    multiple_of: StrictNumber | None = Field(default=None, alias="multipleOf")

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.enum is not None and not self.enum:
            raise ValueError("enum must list at least one value")
        if self.multiple_of is not None and not self.multiple_of > 0:
            raise ValueError("multipleOf must be greater than 0")
        if self.minimum is not None and self.maximum is not None and self.minimum > self.maximum:
            raise ValueError("minimum must not exceed maximum")
        return self


class NumberSchema(_NumericSchema):
    type: Literal["number"] = "number"


def _is_integral(value: int | float) -> bool:
    return isinstance(value, int) or value.is_integer()


class IntegerSchema(_NumericSchema):
    type: Literal["integer"] = "integer"

    @model_validator(mode="after")
    def _check_literals(self) -> "IntegerSchema":
        if self.const is not None and not _is_integral(self.const):
            raise ValueError("const of an integer schema must be integral")
        if self.enum is not None and not all(_is_integral(member) for member in self.enum):
            raise ValueError("enum members of an integer schema must be integral")
        return self


class BooleanSchema(_SchemaBase):
    type: Literal["boolean"] = "boolean"
    const: StrictBool | None = None


class ArraySchema(_SchemaBase):
    """
    `items` is either one schema (homogeneous list) or a sequence of schemas
    (fixed-length tuple, one schema per position).
    """

    type: Literal["array"] = "array"
    items: JSONSchema | tuple[JSONSchema, ...]
    min_items: int | None = Field(default=None, alias="minItems", ge=0)
    max_items: int | None = Field(default=None, alias="maxItems", ge=0)
    unique_items: bool = Field(default=False, alias="uniqueItems")

    @property
    def is_tuple(self) -> bool:
        return isinstance(self.items, tuple)

    @model_validator(mode="after")
    def _check_items(self) -> "ArraySchema":
        if isinstance(self.items, tuple) and not self.items:
            raise ValueError("tuple items must list at least one schema")
        if self.min_items is not None and self.max_items is not None and self.min_items > self.max_items:
            raise ValueError("minItems must not exceed maxItems")
        return self


class ObjectSchema(_SchemaBase):
    type: Literal["object"] = "object"
    properties: dict[str, JSONSchema] = Field(default_factory=dict)
    required: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_required(self) -> "ObjectSchema":
        if len(set(self.required)) != len(self.required):
            raise ValueError("required names must be unique")
        return self


JSONSchema = Annotated[
    Union[StringSchema, NumberSchema, IntegerSchema, BooleanSchema, ArraySchema, ObjectSchema],
    Field(discriminator="type"),
]

SCHEMA_MODELS = (StringSchema, NumberSchema, IntegerSchema, BooleanSchema, ArraySchema, ObjectSchema)

ArraySchema.model_rebuild()
ObjectSchema.model_rebuild()


# Widened dict forms, for callers writing the schema as a plain literal.


class StringSchemaDict(TypedDict, total=False):
    type: Required[Literal["string"]]
    const: str
    enum: Sequence[str]
    minLength: int
    maxLength: int
    pattern: str
    title: str
    description: str


class NumberSchemaDict(TypedDict, total=False):
    type: Required[Literal["number"]]
    const: float
    enum: Sequence[float]
    minimum: float
    maximum: float
    exclusiveMinimum: float
    exclusiveMaximum: float
    multipleOf: float
    title: str
    description: str


class IntegerSchemaDict(TypedDict, total=False):
    type: Required[Literal["integer"]]
    const: int
    enum: Sequence[int]
    minimum: float
    maximum: float
    exclusiveMinimum: float
    exclusiveMaximum: float
    multipleOf: float
    title: str
    description: str


class BooleanSchemaDict(TypedDict, total=False):
    type: Required[Literal["boolean"]]
    const: bool
    title: str
    description: str


class ArraySchemaDict(TypedDict, total=False):
    type: Required[Literal["array"]]
    items: Required[SchemaLike | Sequence[SchemaLike]]
    minItems: int
    maxItems: int
    uniqueItems: bool
    title: str
    description: str


class ObjectSchemaDict(TypedDict, total=False):
    type: Required[Literal["object"]]
    properties: Mapping[str, SchemaLike]
    required: Sequence[str]
    title: str
    description: str


JSONSchemaDict = Union[
    StringSchemaDict,
    NumberSchemaDict,
    IntegerSchemaDict,
    BooleanSchemaDict,
    ArraySchemaDict,
    ObjectSchemaDict,
]

SchemaModel: TypeAlias = Union[StringSchema, NumberSchema, IntegerSchema, BooleanSchema, ArraySchema, ObjectSchema]
SchemaLike: TypeAlias = Union[SchemaModel, JSONSchemaDict]

_SCHEMA_ADAPTER: TypeAdapter[SchemaModel] = TypeAdapter(JSONSchema)


def parse_schema(schema: SchemaLike | Mapping[str, Any]) -> SchemaModel:
    """
    Return the schema model for `schema`.

    Model instances are returned as-is; mappings are validated. Raises
    SchemaDefinitionError for anything that is not a well-formed schema.
    """
    if isinstance(schema, SCHEMA_MODELS):
        return schema
    if not isinstance(schema, Mapping):
        raise SchemaDefinitionError(f"schema must be a mapping, got {type(schema).__name__}")
    try:
        return _SCHEMA_ADAPTER.validate_python(dict(schema))
    except ValidationError as e:
        raise SchemaDefinitionError(f"invalid schema: {e}") from e
