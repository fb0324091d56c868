"""Import resolution for generated service files."""

from __future__ import annotations

from typing import Iterable, Iterator

from ..schema.types import RequestFunction, TypeMeta, TypeTable
from ..shared.generic_names import iter_referenced_keys


def _function_refs(function: RequestFunction) -> Iterator[str]:
    for ref in (function.request_ref_name, function.response_ref_name):
        if ref:
            yield ref
    for param in function.params:
        if param.ref_name:
            yield param.ref_name


def referenced_types(
    functions: Iterable[RequestFunction],
    types: TypeTable,
    *,
    exclude: str | None = None,
) -> list[TypeMeta]:
    """Every type a group of functions refers to, deduplicated by full name.

    Generic references contribute their container and each argument.
    Primitives never carry a reference name, and references missing from
    the type table are dropped.
    """
    found: dict[str, TypeMeta] = {}
    for function in functions:
        for ref in _function_refs(function):
            for key in iter_referenced_keys(ref):
                meta = types.get(key)
                if meta is None or meta.full_name == exclude:
                    continue
                found.setdefault(meta.full_name, meta)
    return list(found.values())
