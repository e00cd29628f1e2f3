"""
Narrow schemas: a schema paired with the static type of the values it accepts.

Python cannot read literal types out of a dict literal, so a schema written as
`{"type": "string", "const": "hello"}` only ever types as `str`. The builders
here return `Typed[T]`, which carries `T` for the type checker and the schema
for the validator:

    >>> count = integer(maximum=10)                    # Typed[int]
    >>> pair = tuple_of(boolean(), number())           # Typed[tuple[bool, float]]
    >>> theme: Typed[Literal["dark", "light"]] = enum("dark", "light")

`obj` and `typed` take the static type explicitly, typically a TypedDict.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Mapping, Sequence, TypeVar, Union, overload

from pydantic import ValidationError

from .errors import SchemaDefinitionError
from .json_schema import (
    ArraySchema,
    BooleanSchema,
    IntegerSchema,
    NumberSchema,
    ObjectSchema,
    SchemaLike,
    SchemaModel,
    StringSchema,
    parse_schema,
)

T = TypeVar("T")
L = TypeVar("L", bound=Union[str, int, float, bool])

A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
D = TypeVar("D")
E = TypeVar("E")
F = TypeVar("F")


@dataclass(frozen=True)
class Typed(Generic[T]):
    schema: SchemaModel

    def to_dict(self) -> dict[str, Any]:
        return self.schema.to_dict()


def unwrap(schema: Typed[Any] | SchemaLike | Mapping[str, Any]) -> SchemaModel:
    """Schema model behind a narrow or widened schema."""
    if isinstance(schema, Typed):
        return schema.schema
    return parse_schema(schema)


def _build(model: type[SchemaModel], **fields: Any) -> Any:
    try:
        return model(**{k: v for k, v in fields.items() if v is not None})
    except ValidationError as e:
        raise SchemaDefinitionError(f"invalid {model.__name__}: {e}") from e


def string(
    *,
    min_length: int | None = None,
    max_length: int | None = None,
    pattern: str | None = None,
    title: str | None = None,
    description: str | None = None,
) -> Typed[str]:
    return Typed(
        _build(
            StringSchema,
            min_length=min_length,
            max_length=max_length,
            pattern=pattern,
            title=title,
            description=description,
        )
    )


def number(
    *,
    minimum: float | None = None,
    maximum: float | None = None,
    exclusive_minimum: float | None = None,
    exclusive_maximum: float | None = None,
    multiple_of: float | None = None,
    title: str | None = None,
    description: str | None = None,
) -> Typed[float]:
    return Typed(
        _build(
            NumberSchema,
            minimum=minimum,
            maximum=maximum,
            exclusive_minimum=exclusive_minimum,
            exclusive_maximum=exclusive_maximum,
            multiple_of=multiple_of,
            title=title,
            description=description,
        )
    )


def integer(
    *,
    minimum: float | None = None,
    maximum: float | None = None,
    exclusive_minimum: float | None = None,
    exclusive_maximum: float | None = None,
    multiple_of: float | None = None,
    title: str | None = None,
    description: str | None = None,
) -> Typed[int]:
    return Typed(
        _build(
            IntegerSchema,
            minimum=minimum,
            maximum=maximum,
            exclusive_minimum=exclusive_minimum,
            exclusive_maximum=exclusive_maximum,
            multiple_of=multiple_of,
            title=title,
            description=description,
        )
    )


def boolean(*, title: str | None = None, description: str | None = None) -> Typed[bool]:
    return Typed(_build(BooleanSchema, title=title, description=description))


def _literal_model(values: Sequence[Any]) -> type[SchemaModel]:
    if all(isinstance(v, bool) for v in values):
        return BooleanSchema
    if all(isinstance(v, str) for v in values):
        return StringSchema
    if any(isinstance(v, bool) for v in values):
        raise SchemaDefinitionError("literal values must share one primitive type")
    if all(isinstance(v, int) for v in values):
        return IntegerSchema
    if all(isinstance(v, (int, float)) for v in values):
        return NumberSchema
    raise SchemaDefinitionError("literal values must share one primitive type")


def const(value: L) -> Typed[L]:
    """Schema accepting exactly `value`; the primitive type is taken from the value."""
    return Typed(_build(_literal_model([value]), const=value))


def enum(*values: L) -> Typed[L]:
    """Schema accepting any of `values`, which must share one primitive type."""
    if not values:
        raise SchemaDefinitionError("enum needs at least one value")
    model = _literal_model(values)
    if model is BooleanSchema:
        raise SchemaDefinitionError("boolean schemas take const, not enum")
    return Typed(_build(model, enum=tuple(values)))


def array(
    items: Typed[T],
    *,
    min_items: int | None = None,
    max_items: int | None = None,
    unique_items: bool | None = None,
    title: str | None = None,
    description: str | None = None,
) -> Typed[list[T]]:
    return Typed(
        _build(
            ArraySchema,
            items=items.schema,
            min_items=min_items,
            max_items=max_items,
            unique_items=unique_items,
            title=title,
            description=description,
        )
    )


@overload
def tuple_of(a: Typed[A], /) -> Typed[tuple[A]]: ...
@overload
def tuple_of(a: Typed[A], b: Typed[B], /) -> Typed[tuple[A, B]]: ...
@overload
def tuple_of(a: Typed[A], b: Typed[B], c: Typed[C], /) -> Typed[tuple[A, B, C]]: ...
@overload
def tuple_of(a: Typed[A], b: Typed[B], c: Typed[C], d: Typed[D], /) -> Typed[tuple[A, B, C, D]]: ...
@overload
def tuple_of(
    a: Typed[A], b: Typed[B], c: Typed[C], d: Typed[D], e: Typed[E], /
) -> Typed[tuple[A, B, C, D, E]]: ...
@overload
def tuple_of(
    a: Typed[A], b: Typed[B], c: Typed[C], d: Typed[D], e: Typed[E], f: Typed[F], /
) -> Typed[tuple[A, B, C, D, E, F]]: ...
def tuple_of(*items: Typed[Any]) -> Typed[tuple[Any, ...]]:
    """Fixed-length array, one schema per position. Read back as a `tuple`."""
    if not items:
        raise SchemaDefinitionError("tuple_of needs at least one item schema")
    return Typed(_build(ArraySchema, items=tuple(item.schema for item in items)))


def obj(
    model: type[T],
    properties: Mapping[str, Typed[Any] | SchemaLike],
    *,
    required: Sequence[str] | None = None,
    title: str | None = None,
    description: str | None = None,
) -> Typed[T]:
    """
    Object schema typed as `model`.

    When `required` is omitted and `model` is a TypedDict, the required names are
    its required keys, so the static and runtime views cannot drift apart.
    """
    if required is None:
        required_keys = getattr(model, "__required_keys__", frozenset())
        required = [name for name in getattr(model, "__annotations__", {}) if name in required_keys]
    return Typed(
        _build(
            ObjectSchema,
            properties={name: unwrap(prop) for name, prop in properties.items()},
            required=tuple(required),
            title=title,
            description=description,
        )
    )


def typed(model: type[T], schema: Typed[Any] | SchemaLike | Mapping[str, Any]) -> Typed[T]:
    """Attach an explicit static type to any schema."""
    return Typed(unwrap(schema))
