from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import PageKey, Resource


@dataclass(frozen=True)
class FetchSource:
    """One GET issued when a page loads.

    ``lists`` maps the page list name to where it lives in the response:
    ``None`` means ``data`` itself is the list, a string means ``data[<name>]``
    (batched endpoints such as ``/api/hoa-don/form-data``).
    """

    path: str
    lists: dict[str, Optional[str]]
    params: Optional[dict] = None


@dataclass(frozen=True)
class PageDefinition:
    key: PageKey
    resource: Resource
    primary_list: str
    sources: tuple[FetchSource, ...]
    embeds: frozenset[Resource] = field(default_factory=frozenset)
    noun: str = "bản ghi"

    @property
    def list_names(self) -> list[str]:
        names: list[str] = []
        for source in self.sources:
            for name in source.lists:
                if name not in names:
                    names.append(name)
        return names


_LIMIT = {"limit": DEFAULT_LIST_LIMIT}

INVOICES_PAGE = PageDefinition(
    key=PageKey.INVOICES,
    resource=Resource.INVOICE,
    primary_list="hoaDonList",
    sources=(
        FetchSource("/api/hoa-don", {"hoaDonList": None}),
        FetchSource(
            "/api/hoa-don/form-data",
            {"hopDongList": "hopDongList", "phongList": "phongList", "khachThueList": "khachThueList"},
        ),
    ),
    embeds=frozenset({Resource.INVOICE, Resource.CONTRACT, Resource.ROOM, Resource.TENANT, Resource.PAYMENT}),
    noun="hóa đơn",
)

CONTRACTS_PAGE = PageDefinition(
    key=PageKey.CONTRACTS,
    resource=Resource.CONTRACT,
    primary_list="hopDongList",
    sources=(
        FetchSource("/api/hop-dong", {"hopDongList": None}, _LIMIT),
        FetchSource("/api/phong", {"phongList": None}, _LIMIT),
        FetchSource("/api/khach-thue", {"khachThueList": None}, _LIMIT),
        FetchSource("/api/toa-nha", {"toaNhaList": None}, _LIMIT),
    ),
    embeds=frozenset({Resource.CONTRACT, Resource.ROOM, Resource.TENANT, Resource.BUILDING}),
    noun="hợp đồng",
)

ROOMS_PAGE = PageDefinition(
    key=PageKey.ROOMS,
    resource=Resource.ROOM,
    primary_list="phongList",
    sources=(
        FetchSource("/api/phong", {"phongList": None}, _LIMIT),
        FetchSource("/api/toa-nha", {"toaNhaList": None}),
    ),
    # Room rows carry the current contract and its tenants.
    embeds=frozenset({Resource.ROOM, Resource.BUILDING, Resource.CONTRACT, Resource.TENANT}),
    noun="phòng",
)

TENANTS_PAGE = PageDefinition(
    key=PageKey.TENANTS,
    resource=Resource.TENANT,
    primary_list="khachThueList",
    sources=(FetchSource("/api/khach-thue", {"khachThueList": None}, _LIMIT),),
    embeds=frozenset({Resource.TENANT, Resource.CONTRACT, Resource.ROOM}),
    noun="khách thuê",
)

BUILDINGS_PAGE = PageDefinition(
    key=PageKey.BUILDINGS,
    resource=Resource.BUILDING,
    primary_list="toaNhaList",
    sources=(FetchSource("/api/toa-nha", {"toaNhaList": None}),),
    embeds=frozenset({Resource.BUILDING, Resource.ROOM}),
    noun="tòa nhà",
)

PAYMENTS_PAGE = PageDefinition(
    key=PageKey.PAYMENTS,
    resource=Resource.PAYMENT,
    primary_list="thanhToanList",
    sources=(
        FetchSource("/api/thanh-toan", {"thanhToanList": None}),
        FetchSource("/api/hoa-don", {"hoaDonList": None}),
    ),
    embeds=frozenset({Resource.PAYMENT, Resource.INVOICE}),
    noun="thanh toán",
)

INCIDENTS_PAGE = PageDefinition(
    key=PageKey.INCIDENTS,
    resource=Resource.INCIDENT,
    primary_list="suCoList",
    sources=(
        FetchSource("/api/su-co", {"suCoList": None}),
        FetchSource("/api/phong", {"phongList": None}),
        FetchSource("/api/khach-thue", {"khachThueList": None}),
        FetchSource("/api/hop-dong", {"hopDongList": None}),
    ),
    embeds=frozenset({Resource.INCIDENT, Resource.ROOM, Resource.TENANT, Resource.CONTRACT}),
    noun="sự cố",
)

PAGES: dict[PageKey, PageDefinition] = {
    p.key: p
    for p in (
        INVOICES_PAGE,
        CONTRACTS_PAGE,
        ROOMS_PAGE,
        TENANTS_PAGE,
        BUILDINGS_PAGE,
        PAYMENTS_PAGE,
        INCIDENTS_PAGE,
    )
}

# URL slug -> page, used by the controllers.
PAGES_BY_SLUG: dict[str, PageDefinition] = {p.resource.value: p for p in PAGES.values()}


def pages_embedding(resource: Resource) -> list[PageDefinition]:
    return [p for p in PAGES.values() if resource in p.embeds]
