from __future__ import annotations

from .backends import AsyncBackendAdapter, DiskJsonBackend, MemoryBackend, StorageBackend, SyncStorageBackend
from .errors import BackendError, SchemaDefinitionError, SchemaValidationError, StorageError
from .factory import open_storage_map
from .json_schema import (
    ArraySchema,
    BooleanSchema,
    IntegerSchema,
    JSONSchema,
    JSONSchemaDict,
    JSONValue,
    NumberSchema,
    ObjectSchema,
    SchemaLike,
    StringSchema,
    parse_schema,
)
from .settings import Settings, get_settings
from .storage_map import KeySnapshot, StorageMap
from .typed_schema import Typed, array, boolean, const, enum, integer, number, obj, string, tuple_of, typed
from .validation import VALID, Invalid, Reason, Valid, ValidationResult, conform, json_equal, validate

__all__ = [
    "StorageMap",
    "KeySnapshot",
    "open_storage_map",
    "Settings",
    "get_settings",
    "StorageBackend",
    "SyncStorageBackend",
    "MemoryBackend",
    "DiskJsonBackend",
    "AsyncBackendAdapter",
    "StorageError",
    "SchemaValidationError",
    "SchemaDefinitionError",
    "BackendError",
    "JSONSchema",
    "JSONSchemaDict",
    "JSONValue",
    "SchemaLike",
    "StringSchema",
    "NumberSchema",
    "IntegerSchema",
    "BooleanSchema",
    "ArraySchema",
    "ObjectSchema",
    "parse_schema",
    "Typed",
    "string",
    "number",
    "integer",
    "boolean",
    "const",
    "enum",
    "array",
    "tuple_of",
    "obj",
    "typed",
    "validate",
    "conform",
    "json_equal",
    "Reason",
    "Valid",
    "Invalid",
    "ValidationResult",
    "VALID",
]
