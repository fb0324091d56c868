"""Intermediate representation shared by parsers, formatters and emitters."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from ..shared.errors import SchemaValidationError
from ..shared.generic_names import namespace_bucket, normalize_key

# Source descriptor for raw binary payloads (uploads and downloads)
FILE_TYPE = "IFile"
UNTYPED = "object"


class OverwritePolicy(str, Enum):
    """How the writer treats a file that already exists."""

    ALWAYS = "always"
    WRITE_ONCE = "write_once"
    MERGE = "merge"


@dataclass(frozen=True, slots=True)
class PropertyInfo:
    """A model field, or an enum member when the owner is an enum."""

    name: str
    source_type: str = UNTYPED
    is_nullable: bool = False
    is_required: bool = False
    is_enum: bool = False
    is_list: bool = False
    is_navigation: bool = False
    navigation_name: str | None = None
    comment_summary: str | None = None
    enum_value: int | str | None = None

    @property
    def renders_nullable(self) -> bool:
        """Nullable marker for generated output; a required field never gets one."""
        return self.is_nullable and not self.is_required


@dataclass(frozen=True, slots=True)
class TypeMeta:
    """One named model class or enum from the schema."""

    name: str
    full_name: str
    schema_key: str
    namespace: str = ""
    comment: str | None = None
    is_enum: bool = False
    is_list: bool = False
    is_reference: bool = False
    reference_name: str | None = None
    is_nullable: bool = False
    properties: tuple[PropertyInfo, ...] = ()
    generic_params: tuple[TypeMeta, ...] = ()
    # Descriptor for schemas that are not plain objects (arrays, dictionaries, aliases)
    alias_type: str | None = None

    def __post_init__(self) -> None:
        if self.is_enum and self.generic_params:
            raise SchemaValidationError(
                "enums cannot declare generic parameters",
                field=self.schema_key,
            )

    @property
    def is_generic(self) -> bool:
        return bool(self.generic_params)

    @property
    def bucket(self) -> str:
        """Directory bucket derived from the namespace."""
        return namespace_bucket(self.namespace)


class TypeTable:
    """Schema key -> TypeMeta lookup owned by a single generation run.

    Several schema keys may resolve to the same TypeMeta: closed generic
    instantiations (``PageList`1[[A]]``, ``PageList`1[[B]]``) share the open
    ``PageList<T>`` model.
    """

    __slots__ = ("_by_key", "_by_full_name")

    def __init__(self) -> None:
        self._by_key: dict[str, TypeMeta] = {}
        self._by_full_name: dict[str, TypeMeta] = {}

    def add(self, schema_key: str, meta: TypeMeta) -> TypeMeta:
        """Register ``meta`` under ``schema_key``; the first meta per full name wins."""
        existing = self._by_full_name.setdefault(meta.full_name, meta)
        self._by_key[normalize_key(schema_key)] = existing
        return existing

    def get(self, name: str | None) -> TypeMeta | None:
        """Look a type up by raw schema key or by full name."""
        if not name:
            return None
        key = normalize_key(name)
        return self._by_key.get(key) or self._by_full_name.get(key)

    def by_full_name(self, full_name: str) -> TypeMeta | None:
        return self._by_full_name.get(full_name)

    @property
    def enums(self) -> list[TypeMeta]:
        return [meta for meta in self if meta.is_enum]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __iter__(self) -> Iterator[TypeMeta]:
        return iter(self._by_full_name.values())

    def __len__(self) -> int:
        return len(self._by_full_name)


@dataclass(frozen=True, slots=True)
class FunctionParam:
    """One operation parameter."""

    name: str
    source_type: str
    type_text: str
    is_required: bool = False
    in_path: bool = False
    location: str = "query"
    description: str | None = None
    ref_name: str | None = None

    @property
    def is_file(self) -> bool:
        return self.source_type == FILE_TYPE


@dataclass(frozen=True, slots=True)
class RequestFunction:
    """One API operation before rendering."""

    name: str
    method: str
    path: str
    tag: str | None = None
    description: str | None = None
    request_type: str = ""
    response_type: str = ""
    request_source_type: str = ""
    response_source_type: str = ""
    request_ref_name: str | None = None
    response_ref_name: str | None = None
    params: tuple[FunctionParam, ...] = ()

    @property
    def uploads_file(self) -> bool:
        return self.request_source_type == FILE_TYPE or any(p.is_file for p in self.params)

    @property
    def downloads_file(self) -> bool:
        return self.response_source_type == FILE_TYPE


@dataclass(frozen=True, slots=True)
class GenFile:
    """One emitted artifact, relative to the caller's output root."""

    relative_directory: str
    file_name: str
    content: str
    overwrite_policy: OverwritePolicy = OverwritePolicy.ALWAYS

    @property
    def relative_path(self) -> str:
        if not self.relative_directory:
            return self.file_name
        return posixpath.join(self.relative_directory, self.file_name)


@dataclass(slots=True)
class GenerationResult:
    """Files produced by one run plus every recovered problem."""

    files: list[GenFile] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def file(self, relative_path: str) -> GenFile | None:
        return next((f for f in self.files if f.relative_path == relative_path), None)
