"""Foreign-key references returned by the backend.

A reference field (``phong``, ``khachThue``, ``hopDong`` ...) arrives either as
a bare id string or as an already populated record. Callers narrow it once with
:func:`to_ref` and read it through :func:`resolve` instead of checking types at
every call site.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Union

from ..core.constants import ID_FIELD, NOT_AVAILABLE


@dataclass(frozen=True)
class IdRef:
    id: str


@dataclass(frozen=True)
class ExpandedRef:
    record: Mapping[str, Any]

    @property
    def id(self) -> Optional[str]:
        value = self.record.get(ID_FIELD)
        return str(value) if value is not None else None


Ref = Union[IdRef, ExpandedRef]


def to_ref(raw: Any) -> Optional[Ref]:
    if raw is None or raw == "":
        return None
    if isinstance(raw, Mapping):
        return ExpandedRef(raw)
    return IdRef(str(raw))


def ref_id(raw: Any) -> Optional[str]:
    ref = to_ref(raw)
    return ref.id if ref else None


def index_by_id(records: Iterable[Mapping[str, Any]]) -> dict[str, Mapping[str, Any]]:
    out: dict[str, Mapping[str, Any]] = {}
    for r in records:
        rid = r.get(ID_FIELD)
        if rid is not None:
            out[str(rid)] = r
    return out


def resolve(raw: Any, lookup: Mapping[str, Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
    """Return the referenced record.

    An expanded reference is returned as is; a bare id is looked up in
    ``lookup`` (see :func:`index_by_id`).
    """

    ref = to_ref(raw)
    if ref is None:
        return None
    if isinstance(ref, ExpandedRef):
        return ref.record
    return lookup.get(ref.id)


def display_name(raw: Any, lookup: Mapping[str, Mapping[str, Any]], field: str) -> str:
    record = resolve(raw, lookup)
    if not record:
        return NOT_AVAILABLE
    value = record.get(field)
    return str(value) if value else NOT_AVAILABLE
