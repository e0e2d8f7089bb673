from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..api.client import ApiClient
from ..common.refs import ExpandedRef, display_name, index_by_id, to_ref
from ..common.validators import require_non_empty, require_number
from ..core.constants import ID_FIELD
from ..core.enums import PaymentMethod, Resource
from ..core.exceptions import ApiError, ValidationError
from ..pages.coordinator import Notification
from ..pages.reconciler import ListReconciler, Mutation
from ..pages.service import PageService
from .calculator import InvoiceInputs, InvoiceTotals, ServiceFee, compute_totals, unit_prices, validate_meter_readings

_READING_FIELDS = (
    ("chiSoDienBanDau", "Chỉ số điện ban đầu"),
    ("chiSoDienCuoiKy", "Chỉ số điện cuối kỳ"),
    ("chiSoNuocBanDau", "Chỉ số nước ban đầu"),
    ("chiSoNuocCuoiKy", "Chỉ số nước cuối kỳ"),
)

# Fields the stored amounts are derived from.
_AMOUNT_INPUTS = frozenset({key for key, _ in _READING_FIELDS} | {"tienPhong", "phiDichVu", "daThanhToan", "hopDong"})


def _number(payload: Mapping[str, Any], key: str, label: str) -> float:
    value = payload.get(key)
    if value is None or value == "":
        return 0
    return require_number(value, label)


def parse_fees(raw: Any) -> tuple[ServiceFee, ...]:
    if not raw:
        return ()
    if not isinstance(raw, list):
        raise ValidationError("Phí dịch vụ không hợp lệ")
    fees = []
    for item in raw:
        if not isinstance(item, Mapping):
            raise ValidationError("Phí dịch vụ không hợp lệ")
        fees.append(ServiceFee(ten=str(item.get("ten") or ""), gia=_number(item, "gia", "Giá dịch vụ")))
    return tuple(fees)


def inputs_from_payload(payload: Mapping[str, Any], contract: Optional[Mapping[str, Any]]) -> InvoiceInputs:
    gia_dien, gia_nuoc = unit_prices(contract)
    readings = {key: _number(payload, key, label) for key, label in _READING_FIELDS}
    return InvoiceInputs(
        tien_phong=_number(payload, "tienPhong", "Tiền phòng"),
        chi_so_dien_ban_dau=readings["chiSoDienBanDau"],
        chi_so_dien_cuoi_ky=readings["chiSoDienCuoiKy"],
        chi_so_nuoc_ban_dau=readings["chiSoNuocBanDau"],
        chi_so_nuoc_cuoi_ky=readings["chiSoNuocCuoiKy"],
        gia_dien=gia_dien,
        gia_nuoc=gia_nuoc,
        phi_dich_vu=parse_fees(payload.get("phiDichVu")),
        da_thanh_toan=_number(payload, "daThanhToan", "Số tiền đã thanh toán"),
    )


class InvoiceService:
    """Invoice page: the generic list workflow plus totals, payments,
    automatic monthly invoices and meter reading prefill."""

    def __init__(
        self,
        page: PageService,
        api: ApiClient,
        reconciler: ListReconciler,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self.page = page
        self._api = api
        self._reconciler = reconciler
        self._log = logger or logging.getLogger("rental_backoffice.invoices")

    def _contract(self, session_id: str, payload: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
        ref = to_ref(payload.get("hopDong"))
        if ref is None:
            return None
        if isinstance(ref, ExpandedRef) and ("giaDien" in ref.record or "giaNuoc" in ref.record):
            return ref.record
        if ref.id is None:
            return None
        contract = self.page.find(session_id, ref.id, "hopDongList")
        if contract is not None:
            return contract
        try:
            resp = self._api.get(f"/api/hop-dong/{ref.id}")
        except ApiError as exc:
            if exc.status != 404:
                raise
            self._log.info("Không tìm thấy hợp đồng %s", ref.id)
            return None
        return resp.data if isinstance(resp.data, dict) else None

    def preview(self, session_id: str, payload: Mapping[str, Any]) -> InvoiceTotals:
        """Totals for a draft invoice; unknown contracts price utilities at 0."""
        return compute_totals(inputs_from_payload(payload, self._contract(session_id, payload)))

    def _invoice(self, session_id: str, invoice_id: str) -> dict:
        invoice = self.page.find(session_id, invoice_id)
        if invoice is None:
            # Cached list may predate the invoice.
            self.page.load(session_id, force_refresh=True)
            invoice = self.page.find(session_id, invoice_id)
        if invoice is None:
            raise ApiError("Không tìm thấy hóa đơn", status=404)
        return invoice

    def _prepared(self, session_id: str, payload: Mapping[str, Any], base: Optional[Mapping[str, Any]] = None) -> dict:
        source = {**(base or {}), **payload}
        inputs = inputs_from_payload(source, self._contract(session_id, source))
        validate_meter_readings(inputs)
        totals = compute_totals(inputs)

        body = {k: v for k, v in payload.items() if k != ID_FIELD}
        if not str(body.get("maHoaDon") or "").strip():
            # Backend generates the code when none is given.
            body.pop("maHoaDon", None)
        body.update(
            tienPhong=inputs.tien_phong,
            tienDien=totals.tien_dien,
            tienNuoc=totals.tien_nuoc,
            soDien=totals.so_dien,
            soNuoc=totals.so_nuoc,
            tongTien=totals.tong_tien,
            daThanhToan=inputs.da_thanh_toan,
            conLai=totals.con_lai,
        )
        return body

    def create(self, session_id: str, payload: Mapping[str, Any]) -> tuple[dict, Notification]:
        return self.page.create(session_id, self._prepared(session_id, payload))

    def update(self, session_id: str, record_id: str, payload: Mapping[str, Any]) -> tuple[dict, Notification]:
        """Amounts are recomputed over the stored invoice with the sent fields
        on top; an update that touches none of them is sent unchanged."""

        if not _AMOUNT_INPUTS.intersection(payload):
            body = {k: v for k, v in payload.items() if k != ID_FIELD}
            return self.page.update(session_id, record_id, body)
        current = self._invoice(session_id, str(record_id))
        return self.page.update(session_id, record_id, self._prepared(session_id, payload, base=current))

    def record_payment(self, session_id: str, invoice_id: str, payload: Mapping[str, Any]) -> tuple[dict, Notification]:
        """Record a payment against one invoice.

        The backend answers with the updated invoice (``data.hoaDon``), which
        replaces the row in place; invoice and payment caches are dropped.
        """

        invoice_id = str(invoice_id)
        amount = require_number(payload.get("soTien"), "Số tiền thanh toán")
        if amount <= 0:
            raise ValidationError("Số tiền thanh toán phải lớn hơn 0")
        invoice = self._invoice(session_id, invoice_id)
        if amount > (invoice.get("conLai") or 0):
            raise ValidationError("Số tiền thanh toán vượt quá số tiền còn lại")

        method = str(payload.get("phuongThuc") or PaymentMethod.CASH.value)
        try:
            PaymentMethod(method)
        except ValueError:
            raise ValidationError("Phương thức thanh toán không hợp lệ")

        body: dict[str, Any] = {
            "hoaDonId": invoice_id,
            "soTien": amount,
            "phuongThuc": method,
            "ngayThanhToan": payload.get("ngayThanhToan"),
            "ghiChu": payload.get("ghiChu") or "",
        }
        if method == PaymentMethod.BANK_TRANSFER.value:
            transfer = payload.get("thongTinChuyenKhoan") or {}
            body["thongTinChuyenKhoan"] = {
                "nganHang": str(transfer.get("nganHang") or "").strip(),
                "soGiaoDich": require_non_empty(transfer.get("soGiaoDich"), "Số giao dịch"),
            }

        resp = self._api.post("/api/thanh-toan", json_body=body)
        state = self.page.state(session_id)
        updated = resp.data.get("hoaDon") if isinstance(resp.data, dict) else None
        if isinstance(updated, dict):
            self._reconciler.apply(state, Mutation.update(updated))
        self._reconciler.invalidate(state, Resource.INVOICE, Resource.PAYMENT)
        return updated or {}, Notification("success", resp.message or "Thanh toán đã được tạo thành công")

    def auto_create(self, session_id: str) -> tuple[int, list, list[Notification]]:
        """Create this month's invoices for every active contract, then reload."""

        resp = self._api.post("/api/auto-invoice")
        data = resp.data if isinstance(resp.data, dict) else {}
        created = int(data.get("createdInvoices") or 0)
        errors = list(data.get("errors") or [])

        notes = [Notification("success", f"Đã tạo {created} hóa đơn tự động")]
        if errors:
            self._log.warning("Tạo hóa đơn tự động có %d lỗi: %s", len(errors), errors)
            notes.append(Notification("warning", f"Một số lỗi xảy ra: {len(errors)} lỗi"))

        self._reconciler.invalidate(self.page.state(session_id))
        self.page.load(session_id, force_refresh=True)
        return created, errors, notes

    def latest_reading(self, contract_id: str, month: int, year: int) -> dict:
        """Start readings for a new invoice: the previous invoice's end readings,
        or the contract's initial readings. Zeros when the lookup fails."""

        zeros = {"chiSoDienBanDau": 0, "chiSoNuocBanDau": 0}
        if not contract_id:
            return zeros
        try:
            resp = self._api.get(
                "/api/hoa-don/latest-reading",
                params={"hopDong": contract_id, "thang": month, "nam": year},
            )
        except ApiError as exc:
            self._log.warning("Không lấy được chỉ số mới nhất cho hợp đồng %s: %s", contract_id, exc)
            return zeros
        data = resp.data if isinstance(resp.data, dict) else {}
        return {
            "chiSoDienBanDau": data.get("chiSoDienBanDau") or 0,
            "chiSoNuocBanDau": data.get("chiSoNuocBanDau") or 0,
        }

    @staticmethod
    def export_rows(items: Sequence[Mapping[str, Any]], lookups: Mapping[str, Sequence[Mapping[str, Any]]]) -> list[dict]:
        rooms = index_by_id(lookups.get("phongList", []))
        tenants = index_by_id(lookups.get("khachThueList", []))
        rows = []
        for h in items:
            rows.append(
                {
                    "maHoaDon": h.get("maHoaDon") or "",
                    "phong": display_name(h.get("phong"), rooms, "maPhong"),
                    "khachThue": display_name(h.get("khachThue"), tenants, "hoTen"),
                    "thang": h.get("thang") or "",
                    "nam": h.get("nam") or "",
                    "tongTien": h.get("tongTien") or 0,
                    "daThanhToan": h.get("daThanhToan") or 0,
                    "conLai": h.get("conLai") or 0,
                    "trangThai": h.get("trangThai") or "",
                    "hanThanhToan": h.get("hanThanhToan") or "",
                }
            )
        return rows
