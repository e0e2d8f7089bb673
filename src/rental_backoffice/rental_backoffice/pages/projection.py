"""Search and filter projections for the list pages.

Pure functions over the already loaded list; recomputed on every request.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.clock import now_local, parse_iso_datetime
from ..common.refs import index_by_id, ref_id, resolve
from ..core.constants import FILTER_ALL
from ..core.enums import (
    ContractStatus,
    IncidentPriority,
    IncidentStatus,
    IncidentType,
    InvoiceStatus,
    PaymentMethod,
    Resource,
    RoomStatus,
    TenantStatus,
)

Record = Mapping[str, Any]


def _values(enum) -> list[str]:
    return [FILTER_ALL, *(m.value for m in enum)]


# Choices offered by each page's filter dropdowns.
FILTER_OPTIONS: dict[Resource, dict[str, list[str]]] = {
    Resource.INVOICE: {"trangThai": _values(InvoiceStatus)},
    Resource.CONTRACT: {"trangThai": _values(ContractStatus)},
    Resource.ROOM: {"trangThai": _values(RoomStatus)},
    Resource.TENANT: {"trangThai": _values(TenantStatus)},
    Resource.BUILDING: {},
    Resource.PAYMENT: {"phuongThuc": _values(PaymentMethod), "thoiGian": [FILTER_ALL, "today", "week", "month"]},
    Resource.INCIDENT: {
        "trangThai": _values(IncidentStatus),
        "loaiSuCo": _values(IncidentType),
        "mucDoUuTien": _values(IncidentPriority),
    },
}


def _field(record: Record, path: str) -> Any:
    value: Any = record
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def _active(value: Optional[str]) -> bool:
    return value is not None and str(value).strip() != "" and str(value) != FILTER_ALL


def matches_search(record: Record, search: str, fields: Sequence[str]) -> bool:
    term = (search or "").strip().lower()
    if not term:
        return True
    for path in fields:
        value = _field(record, path)
        if value is not None and term in str(value).lower():
            return True
    return False


def project(
    records: Sequence[Record],
    *,
    search: str = "",
    search_fields: Sequence[str] = (),
    filters: Optional[Mapping[str, Optional[str]]] = None,
    predicates: Sequence[Callable[[Record], bool]] = (),
) -> list[Record]:
    """Filtered view of ``records``.

    ``filters`` are exact matches on the string form of a field; a value of
    ``"all"`` or empty disables that filter.
    """

    active = {k: str(v) for k, v in (filters or {}).items() if _active(v)}
    out = []
    for r in records:
        if not matches_search(r, search, search_fields):
            continue
        if any(str(_field(r, path)) != value for path, value in active.items()):
            continue
        if any(not p(r) for p in predicates):
            continue
        out.append(r)
    return out


def filter_invoices(items, *, search="", status=None, month=None, year=None):
    return project(
        items,
        search=search,
        search_fields=("maHoaDon", "ghiChu"),
        filters={"trangThai": status, "thang": month, "nam": year},
    )


def invoice_summary(items: Sequence[Record], *, now: Optional[datetime] = None) -> dict:
    now = now or now_local()
    unpaid = sum(1 for h in items if h.get("trangThai") == InvoiceStatus.UNPAID.value)
    overdue = 0
    for h in items:
        due = parse_iso_datetime(h.get("hanThanhToan"))
        if due is not None and due < now:
            overdue += 1
    return {"total": len(items), "unpaid": unpaid, "overdue": overdue}


def filter_contracts(items, *, rooms: Sequence[Record] = (), search="", status=None, building=None):
    predicates = []
    if _active(building):
        room_lookup = index_by_id(rooms)

        def _in_building(contract: Record) -> bool:
            room = resolve(contract.get("phong"), room_lookup)
            return bool(room) and ref_id(room.get("toaNha")) == str(building)

        predicates.append(_in_building)

    return project(
        items,
        search=search,
        search_fields=("maHopDong", "dieuKhoan"),
        filters={"trangThai": status},
        predicates=predicates,
    )


def filter_rooms(items, *, search="", status=None, building=None):
    predicates = []
    if _active(building):
        predicates.append(lambda r: ref_id(r.get("toaNha")) == str(building))
    return project(
        items,
        search=search,
        search_fields=("maPhong", "moTa"),
        filters={"trangThai": status},
        predicates=predicates,
    )


def filter_tenants(items, *, search="", status=None):
    return project(
        items,
        search=search,
        search_fields=("hoTen", "soDienThoai", "cccd", "queQuan"),
        filters={"trangThai": status},
    )


def filter_incidents(items, *, search="", status=None, kind=None, priority=None):
    return project(
        items,
        search=search,
        search_fields=("tieuDe", "moTa"),
        filters={"trangThai": status, "loaiSuCo": kind, "mucDoUuTien": priority},
    )


def _in_window(value: Any, window: str, now: datetime) -> bool:
    when = parse_iso_datetime(value)
    if when is None:
        return False
    if window == "today":
        return when.date() == now.date()
    if window == "week":
        # Rolling seven days up to now.
        return now - timedelta(days=7) <= when <= now
    if window == "month":
        return (when.year, when.month) == (now.year, now.month)
    return True


def filter_payments(items, *, search="", method=None, period=None, now: Optional[datetime] = None):
    predicates = []
    if _active(period):
        now = now or now_local()
        predicates.append(lambda p: _in_window(p.get("ngayThanhToan"), str(period), now))
    return project(
        items,
        search=search,
        search_fields=("ghiChu", "thongTinChuyenKhoan.soGiaoDich"),
        filters={"phuongThuc": method},
        predicates=predicates,
    )


def filter_buildings(items, *, search=""):
    return project(items, search=search, search_fields=("tenToaNha", "diaChi.duong", "diaChi.phuong"))
