from __future__ import annotations

from datetime import datetime

from src.rental_backoffice.rental_backoffice.common.refs import display_name, index_by_id, ref_id, resolve
from src.rental_backoffice.rental_backoffice.pages import projection

NOW = datetime(2026, 10, 19, 12, 0, 0)


def test_search_is_case_insensitive():
    items = [{"maHoaDon": "HD-001"}, {"maHoaDon": "HD-002", "ghiChu": "Tiền Điện"}]
    assert projection.filter_invoices(items, search="hd-001") == [items[0]]
    assert projection.filter_invoices(items, search="ĐIỆN") == [items[1]]


def test_all_disables_a_filter():
    items = [{"trangThai": "daThanhToan"}, {"trangThai": "chuaThanhToan"}]
    assert projection.filter_invoices(items, status="all") == items
    assert projection.filter_invoices(items, status="chuaThanhToan") == [items[1]]


def test_month_and_year_filters_compare_as_strings():
    items = [{"thang": 10, "nam": 2026}, {"thang": 9, "nam": 2026}]
    assert projection.filter_invoices(items, month="10", year="2026") == [items[0]]


def test_invoice_summary_counts_unpaid_and_overdue():
    items = [
        {"trangThai": "chuaThanhToan", "hanThanhToan": "2026-10-01T00:00:00.000Z"},
        {"trangThai": "daThanhToan", "hanThanhToan": "2026-11-30"},
        {"trangThai": "chuaThanhToan"},
    ]
    assert projection.invoice_summary(items, now=NOW) == {"total": 3, "unpaid": 2, "overdue": 1}


def test_contracts_filtered_by_building_through_room():
    rooms = [{"_id": "p1", "toaNha": "t1"}, {"_id": "p2", "toaNha": {"_id": "t2"}}]
    contracts = [{"_id": "c1", "phong": "p1"}, {"_id": "c2", "phong": "p2"}, {"_id": "c3", "phong": None}]
    assert projection.filter_contracts(contracts, rooms=rooms, building="t2") == [contracts[1]]
    assert projection.filter_contracts(contracts, rooms=rooms, building="all") == contracts


def test_rooms_filtered_by_expanded_building():
    rooms = [{"maPhong": "A1", "toaNha": {"_id": "t1"}}, {"maPhong": "B1", "toaNha": "t2"}]
    assert projection.filter_rooms(rooms, building="t1") == [rooms[0]]


def test_incident_filters_combine():
    items = [
        {"tieuDe": "Mất điện", "trangThai": "moi", "loaiSuCo": "dienNuoc", "mucDoUuTien": "cao"},
        {"tieuDe": "Hỏng cửa", "trangThai": "moi", "loaiSuCo": "noiThat", "mucDoUuTien": "cao"},
    ]
    assert projection.filter_incidents(items, status="moi", kind="dienNuoc", priority="cao") == [items[0]]


def test_payments_by_period_and_nested_search():
    items = [
        {"ngayThanhToan": "2026-10-19T08:00:00", "phuongThuc": "tienMat"},
        {"ngayThanhToan": "2026-10-14T08:00:00", "phuongThuc": "chuyenKhoan", "thongTinChuyenKhoan": {"soGiaoDich": "GD123"}},
        {"ngayThanhToan": "2026-10-02T08:00:00", "phuongThuc": "tienMat"},
        {"ngayThanhToan": "2026-08-02T08:00:00", "phuongThuc": "tienMat"},
    ]
    assert projection.filter_payments(items, period="today", now=NOW) == [items[0]]
    assert projection.filter_payments(items, period="week", now=NOW) == items[:2]
    assert projection.filter_payments(items, period="month", now=NOW) == items[:3]
    assert projection.filter_payments(items, search="gd123") == [items[1]]
    assert projection.filter_payments(items, method="tienMat", period="month", now=NOW) == [items[0], items[2]]


def test_buildings_search_address():
    items = [{"tenToaNha": "Nhà A", "diaChi": {"duong": "Lê Lợi", "phuong": "Bến Nghé"}}]
    assert projection.filter_buildings(items, search="lê lợi") == items
    assert projection.filter_buildings(items, search="xyz") == []


def test_refs_resolve_both_shapes():
    lookup = index_by_id([{"_id": "k1", "hoTen": "Nguyễn Văn A"}])
    assert ref_id({"_id": "k1"}) == "k1"
    assert ref_id("k1") == "k1"
    assert ref_id(None) is None
    assert resolve("k1", lookup) == {"_id": "k1", "hoTen": "Nguyễn Văn A"}
    assert display_name({"_id": "x", "hoTen": "B"}, lookup, "hoTen") == "B"
    assert display_name("missing", lookup, "hoTen") == "N/A"
