from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from ..common.validators import require_non_negative, require_not_less_than


@dataclass(frozen=True)
class ServiceFee:
    ten: str
    gia: float


@dataclass(frozen=True)
class InvoiceInputs:
    tien_phong: float
    chi_so_dien_ban_dau: float
    chi_so_dien_cuoi_ky: float
    chi_so_nuoc_ban_dau: float
    chi_so_nuoc_cuoi_ky: float
    gia_dien: float = 0
    gia_nuoc: float = 0
    phi_dich_vu: Sequence[ServiceFee] = field(default_factory=tuple)
    da_thanh_toan: float = 0


@dataclass(frozen=True)
class InvoiceTotals:
    so_dien: float
    so_nuoc: float
    tien_dien: float
    tien_nuoc: float
    tong_phi_dich_vu: float
    tong_tien: float
    con_lai: float

    def to_dict(self) -> dict:
        return {
            "soDien": self.so_dien,
            "soNuoc": self.so_nuoc,
            "tienDien": self.tien_dien,
            "tienNuoc": self.tien_nuoc,
            "tongPhiDichVu": self.tong_phi_dich_vu,
            "tongTien": self.tong_tien,
            "conLai": self.con_lai,
        }


def compute_totals(inputs: InvoiceInputs) -> InvoiceTotals:
    """Invoice total and remaining amount.

    total = rent + electricity delta * price + water delta * price + service fees
    remaining = total - paid

    The displayed usage is clamped at zero; the charges use the raw delta, so
    readings must be validated first (see :func:`validate_meter_readings`).
    """

    dien = inputs.chi_so_dien_cuoi_ky - inputs.chi_so_dien_ban_dau
    nuoc = inputs.chi_so_nuoc_cuoi_ky - inputs.chi_so_nuoc_ban_dau
    tien_dien = dien * inputs.gia_dien
    tien_nuoc = nuoc * inputs.gia_nuoc
    phi = sum(f.gia for f in inputs.phi_dich_vu)
    tong = inputs.tien_phong + tien_dien + tien_nuoc + phi
    return InvoiceTotals(
        so_dien=max(0, dien),
        so_nuoc=max(0, nuoc),
        tien_dien=tien_dien,
        tien_nuoc=tien_nuoc,
        tong_phi_dich_vu=phi,
        tong_tien=tong,
        con_lai=tong - inputs.da_thanh_toan,
    )


def validate_meter_readings(inputs: InvoiceInputs) -> None:
    """Reject readings before anything is sent to the backend."""

    require_non_negative(min(inputs.chi_so_dien_ban_dau, inputs.chi_so_dien_cuoi_ky), "Chỉ số điện không được âm")
    require_non_negative(min(inputs.chi_so_nuoc_ban_dau, inputs.chi_so_nuoc_cuoi_ky), "Chỉ số nước không được âm")
    require_not_less_than(
        inputs.chi_so_dien_cuoi_ky,
        inputs.chi_so_dien_ban_dau,
        "Chỉ số điện cuối kỳ phải lớn hơn hoặc bằng chỉ số ban đầu",
    )
    require_not_less_than(
        inputs.chi_so_nuoc_cuoi_ky,
        inputs.chi_so_nuoc_ban_dau,
        "Chỉ số nước cuối kỳ phải lớn hơn hoặc bằng chỉ số ban đầu",
    )


def unit_prices(contract: Optional[Mapping]) -> tuple[float, float]:
    """Electricity and water prices of a contract; 0 when unknown."""
    if not contract:
        return 0, 0
    return contract.get("giaDien") or 0, contract.get("giaNuoc") or 0
