"""Ví dụ: dùng service layer (không qua Flask).

Tải trang hóa đơn của một phiên, lọc hóa đơn chưa thanh toán và tính thử tiền
cho một hóa đơn nháp.
"""

import importlib

from config import get_settings_module

from src.rental_backoffice.rental_backoffice.container import build_container
from src.rental_backoffice.rental_backoffice.pages.projection import filter_invoices


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(api_base_url=settings.API_BASE_URL)
    invoices = container.invoice_service

    state, result = invoices.page.load("example-session")
    print("from cache:", result.from_cache, "failures:", [f.path for f in result.failures])
    print(filter_invoices(state.items, status="chuaThanhToan")[:5])

    draft = {"tienPhong": 3500000, "chiSoDienBanDau": 100, "chiSoDienCuoiKy": 150}
    print(invoices.preview("example-session", draft).to_dict())


if __name__ == "__main__":
    main()
