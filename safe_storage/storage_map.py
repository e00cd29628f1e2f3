from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Mapping, TypeVar, overload

from .backends.interfaces import StorageBackend
from .errors import SchemaValidationError
from .json_schema import (
    ArraySchema,
    ArraySchemaDict,
    BooleanSchema,
    BooleanSchemaDict,
    IntegerSchema,
    IntegerSchemaDict,
    JSONValue,
    NumberSchema,
    NumberSchemaDict,
    ObjectSchema,
    ObjectSchemaDict,
    SchemaLike,
    StringSchema,
    StringSchemaDict,
)
from .typed_schema import Typed, unwrap
from .validation import Invalid, conform, to_storage, validate

logger = logging.getLogger(__name__)

T = TypeVar("T")


class KeySnapshot:
    """
    Stored key names, read from the backend when iteration starts.

    Every new `async for` takes a fresh snapshot; later writes do not affect
    an enumeration already in progress.
    """

    def __init__(self, backend: StorageBackend) -> None:
        self._backend = backend

    def __aiter__(self) -> AsyncIterator[str]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[str]:
        for key in list(await self._backend.keys()):
            yield key


class StorageMap:
    """
    Schema-checked access to a key-value backend.

    Every read is validated against the caller's schema before it is returned,
    and every write is validated before it reaches the backend. Nothing is
    cached: each call goes to the backend.
    """

    def __init__(self, backend: StorageBackend, *, debug_log: bool = True) -> None:
        self._backend = backend
        self._debug_log = debug_log

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    def _log(self, msg: str, *args: Any) -> None:
        if self._debug_log:
            logger.debug(msg, *args)

    @overload
    async def get(self, key: str, schema: Typed[T]) -> T | None: ...
    @overload
    async def get(self, key: str, schema: StringSchema | StringSchemaDict) -> str | None: ...
    @overload
    async def get(self, key: str, schema: IntegerSchema | IntegerSchemaDict) -> int | None: ...
    @overload
    async def get(self, key: str, schema: NumberSchema | NumberSchemaDict) -> float | None: ...
    @overload
    async def get(self, key: str, schema: BooleanSchema | BooleanSchemaDict) -> bool | None: ...
    @overload
    async def get(self, key: str, schema: ArraySchema | ArraySchemaDict) -> list[Any] | None: ...
    @overload
    async def get(self, key: str, schema: ObjectSchema | ObjectSchemaDict) -> dict[str, Any] | None: ...
    @overload
    async def get(self, key: str, schema: SchemaLike) -> JSONValue | None: ...
    async def get(self, key: str, schema: Typed[Any] | SchemaLike | Mapping[str, Any]) -> Any:
        """
        Read `key` and check it against `schema`.

        Returns None when the key is absent. Raises SchemaValidationError when the
        stored value does not match, SchemaDefinitionError (before touching the
        backend) when the schema is malformed.
        """
        model = unwrap(schema)
        self._log("STORAGE GET: key=%s type=%s", key, model.type)

        raw = await self._backend.get(key)
        if raw is None:
            return None

        result = validate(model, raw)
        if isinstance(result, Invalid):
            logger.info(
                "STORAGE GET: stored value rejected key=%s path=%s reason=%s",
                key,
                result.path,
                result.reason.value,
            )
            raise SchemaValidationError.from_result(key, result)
        return conform(model, raw)

    @overload
    async def set(self, key: str, schema: Typed[T], value: T | None) -> None: ...
    @overload
    async def set(self, key: str, schema: StringSchema | StringSchemaDict, value: str | None) -> None: ...
    @overload
    async def set(self, key: str, schema: IntegerSchema | IntegerSchemaDict, value: int | None) -> None: ...
    @overload
    async def set(self, key: str, schema: NumberSchema | NumberSchemaDict, value: float | None) -> None: ...
    @overload
    async def set(self, key: str, schema: BooleanSchema | BooleanSchemaDict, value: bool | None) -> None: ...
    @overload
    async def set(self, key: str, schema: SchemaLike, value: Any) -> None: ...
    async def set(self, key: str, schema: Typed[Any] | SchemaLike | Mapping[str, Any], value: Any) -> None:
        """
        Validate `value` against `schema`, then store it.

        An invalid value raises SchemaValidationError and nothing is written.
        `None` deletes the key. Backend errors propagate unchanged.
        """
        model = unwrap(schema)

        if value is None:
            self._log("STORAGE SET: key=%s value=None, deleting", key)
            await self._backend.delete(key)
            return

        result = validate(model, value)
        if isinstance(result, Invalid):
            logger.info(
                "STORAGE SET: value rejected key=%s path=%s reason=%s",
                key,
                result.path,
                result.reason.value,
            )
            raise SchemaValidationError.from_result(key, result)

        self._log("STORAGE SET: key=%s type=%s", key, model.type)
        await self._backend.set(key, to_storage(value))

    async def delete(self, key: str) -> None:
        self._log("STORAGE DELETE: key=%s", key)
        await self._backend.delete(key)

    async def has(self, key: str) -> bool:
        """Whether `key` holds a value. Never validates."""
        return await self._backend.get(key) is not None

    async def clear(self) -> None:
        self._log("STORAGE CLEAR")
        await self._backend.clear()

    def keys(self) -> KeySnapshot:
        return KeySnapshot(self._backend)

    async def size(self) -> int:
        return len(await self._backend.keys())
