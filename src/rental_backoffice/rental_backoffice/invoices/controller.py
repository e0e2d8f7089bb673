from __future__ import annotations

import csv
import io

from flask import Flask, request

from ..common.clock import now_local
from ..common.web import current_session_id, json_body, json_errors, ok
from ..container import Container
from ..pages.controller import filtered_items

EXPORT_FIELDS = [
    "maHoaDon",
    "phong",
    "khachThue",
    "thang",
    "nam",
    "tongTien",
    "daThanhToan",
    "conLai",
    "trangThai",
    "hanThanhToan",
]


def register(app: Flask, container: Container) -> None:
    service = container.invoice_service

    def _write_invoices_csv(*, rows, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=EXPORT_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/dashboard/hoa-don/tinh-tien", methods=["POST"], endpoint="invoice_preview")
    @json_errors("Lỗi hệ thống khi tính tiền")
    def invoice_preview():
        totals = service.preview(current_session_id(), json_body())
        return ok(totals.to_dict())

    @app.route("/dashboard/hoa-don/<invoice_id>/thanh-toan", methods=["POST"], endpoint="invoice_payment")
    @json_errors("Có lỗi xảy ra khi tạo thanh toán")
    def invoice_payment(invoice_id: str):
        invoice, note = service.record_payment(current_session_id(), invoice_id, json_body())
        return ok(invoice, note.message, status=201)

    @app.route("/dashboard/hoa-don/tu-dong", methods=["POST"], endpoint="invoice_auto_create")
    @json_errors("Có lỗi xảy ra khi tạo hóa đơn tự động")
    def invoice_auto_create():
        created, errors, notes = service.auto_create(current_session_id())
        return ok(
            {"createdInvoices": created, "errors": errors},
            notes[0].message,
            notifications=[n.to_dict() for n in notes],
        )

    @app.route("/dashboard/hoa-don/chi-so-moi-nhat", methods=["GET"], endpoint="invoice_latest_reading")
    @json_errors("Lỗi hệ thống khi lấy chỉ số")
    def invoice_latest_reading():
        now = now_local()
        month = request.args.get("thang", type=int) or now.month
        year = request.args.get("nam", type=int) or now.year
        return ok(service.latest_reading(request.args.get("hopDong", ""), month, year))

    @app.route("/dashboard/hoa-don/export.csv", methods=["GET"], endpoint="invoice_export_csv")
    @json_errors("Lỗi hệ thống khi xuất báo cáo")
    def invoice_export_csv():
        st, _ = service.page.load(current_session_id())
        rows = service.export_rows(filtered_items(st, request.args), st.lists)
        filename = f"hoa_don_{now_local().strftime('%Y%m%d')}.csv"
        return _write_invoices_csv(rows=rows, filename=filename)
