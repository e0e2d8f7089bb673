from __future__ import annotations

from enum import Enum


class PageKey(str, Enum):
    """Khoá cache của từng trang danh sách."""

    INVOICES = "hoa-don-data"
    CONTRACTS = "hop-dong-data"
    ROOMS = "phong-data"
    TENANTS = "khach-thue-data"
    BUILDINGS = "toa-nha-data"
    PAYMENTS = "thanh-toan-data"
    INCIDENTS = "su-co-data"
    ACCOUNTS = "tai-khoan-data"


class Resource(str, Enum):
    """Tài nguyên REST phía backend."""

    INVOICE = "hoa-don"
    CONTRACT = "hop-dong"
    ROOM = "phong"
    TENANT = "khach-thue"
    BUILDING = "toa-nha"
    PAYMENT = "thanh-toan"
    INCIDENT = "su-co"


class MutationKind(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class InvoiceStatus(str, Enum):
    """Trạng thái thanh toán của hoá đơn."""

    UNPAID = "chuaThanhToan"
    PARTIALLY_PAID = "daThanhToanMotPhan"
    PAID = "daThanhToan"
    OVERDUE = "quaHan"


class ContractStatus(str, Enum):
    ACTIVE = "hoatDong"
    EXPIRED = "hetHan"
    CANCELLED = "daHuy"


class RoomStatus(str, Enum):
    VACANT = "trong"
    RESERVED = "daDat"
    OCCUPIED = "dangThue"
    MAINTENANCE = "baoTri"


class TenantStatus(str, Enum):
    RENTING = "dangThue"
    MOVED_OUT = "daTraPhong"
    NOT_RENTING = "chuaThue"


class IncidentStatus(str, Enum):
    """Trạng thái xử lý sự cố."""

    NEW = "moi"
    IN_PROGRESS = "dangXuLy"
    DONE = "daXong"
    CANCELLED = "daHuy"


class IncidentType(str, Enum):
    UTILITIES = "dienNuoc"
    FURNITURE = "noiThat"
    CLEANING = "vesinh"
    SECURITY = "anNinh"
    OTHER = "khac"


class IncidentPriority(str, Enum):
    LOW = "thap"
    MEDIUM = "trungBinh"
    HIGH = "cao"
    URGENT = "khancap"


class PaymentMethod(str, Enum):
    CASH = "tienMat"
    BANK_TRANSFER = "chuyenKhoan"
    E_WALLET = "viDienTu"


class CacheInvalidation(str, Enum):
    """Phạm vi xoá cache sau khi thay đổi dữ liệu."""

    PAGE = "page"
    RESOURCE = "resource"
