from __future__ import annotations

from typing import Callable, Mapping

from flask import Flask, abort, request

from ..common.web import current_session_id, json_body, json_errors, ok
from ..container import Container
from ..core.enums import Resource
from . import projection
from .definitions import PAGES_BY_SLUG, PageDefinition
from .state import PageState

Args = Mapping[str, str]

_FILTERS: dict[Resource, Callable[[PageState, Args], list]] = {
    Resource.INVOICE: lambda st, a: projection.filter_invoices(
        st.items, search=a.get("q", ""), status=a.get("trangThai"), month=a.get("thang"), year=a.get("nam")
    ),
    Resource.CONTRACT: lambda st, a: projection.filter_contracts(
        st.items,
        rooms=st.lists.get("phongList", []),
        search=a.get("q", ""),
        status=a.get("trangThai"),
        building=a.get("toaNha"),
    ),
    Resource.ROOM: lambda st, a: projection.filter_rooms(
        st.items, search=a.get("q", ""), status=a.get("trangThai"), building=a.get("toaNha")
    ),
    Resource.TENANT: lambda st, a: projection.filter_tenants(st.items, search=a.get("q", ""), status=a.get("trangThai")),
    Resource.BUILDING: lambda st, a: projection.filter_buildings(st.items, search=a.get("q", "")),
    Resource.PAYMENT: lambda st, a: projection.filter_payments(
        st.items, search=a.get("q", ""), method=a.get("phuongThuc"), period=a.get("thoiGian")
    ),
    Resource.INCIDENT: lambda st, a: projection.filter_incidents(
        st.items,
        search=a.get("q", ""),
        status=a.get("trangThai"),
        kind=a.get("loaiSuCo"),
        priority=a.get("mucDoUuTien"),
    ),
}


def filtered_items(state: PageState, args: Args) -> list:
    return _FILTERS[state.definition.resource](state, args)


def register(app: Flask, container: Container) -> None:
    def _page(slug: str) -> PageDefinition:
        definition = PAGES_BY_SLUG.get(slug)
        if definition is None:
            abort(404)
        return definition

    def _writer(definition: PageDefinition):
        # Invoice writes go through the invoice service so totals are recomputed.
        if definition.resource == Resource.INVOICE:
            return container.invoice_service
        return container.page_services[definition.resource]

    @app.route("/dashboard/<slug>", methods=["GET"], endpoint="page_list")
    @json_errors("Lỗi hệ thống khi tải dữ liệu")
    def page_list(slug: str):
        definition = _page(slug)
        st, result = container.page_services[definition.resource].load(current_session_id())
        items = filtered_items(st, request.args)
        extra = {
            "total": len(st.items),
            "fromCache": result.from_cache,
            "filterOptions": projection.FILTER_OPTIONS[definition.resource],
            "lookups": {name: st.lists.get(name, []) for name in definition.list_names if name != definition.primary_list},
        }
        if definition.resource == Resource.INVOICE:
            extra["summary"] = projection.invoice_summary(st.items)
        return ok(items, **extra)

    @app.route("/dashboard/<slug>/refresh", methods=["POST"], endpoint="page_refresh")
    @json_errors("Lỗi hệ thống khi tải dữ liệu")
    def page_refresh(slug: str):
        definition = _page(slug)
        service = container.page_services[definition.resource]
        sid = current_session_id()
        note = service.refresh(sid)
        st = service.state(sid)
        return ok(filtered_items(st, request.args), note.message, total=len(st.items))

    @app.route("/dashboard/<slug>", methods=["POST"], endpoint="page_create")
    @json_errors("Lỗi hệ thống khi tạo dữ liệu")
    def page_create(slug: str):
        definition = _page(slug)
        record, note = _writer(definition).create(current_session_id(), json_body())
        return ok(record, note.message, status=201)

    @app.route("/dashboard/<slug>/<record_id>", methods=["PUT"], endpoint="page_update")
    @json_errors("Lỗi hệ thống khi cập nhật dữ liệu")
    def page_update(slug: str, record_id: str):
        definition = _page(slug)
        record, note = _writer(definition).update(current_session_id(), record_id, json_body())
        return ok(record, note.message)

    @app.route("/dashboard/<slug>/<record_id>", methods=["DELETE"], endpoint="page_delete")
    @json_errors("Lỗi hệ thống khi xóa dữ liệu")
    def page_delete(slug: str, record_id: str):
        definition = _page(slug)
        note = container.page_services[definition.resource].delete(current_session_id(), record_id)
        return ok({"id": record_id}, note.message)

    @app.route("/dashboard/<slug>/bulk-delete", methods=["POST"], endpoint="page_bulk_delete")
    @json_errors("Lỗi hệ thống khi xóa dữ liệu")
    def page_bulk_delete(slug: str):
        definition = _page(slug)
        ids = json_body().get("ids") or []
        if not isinstance(ids, list):
            ids = []
        result = container.page_services[definition.resource].bulk_delete(current_session_id(), ids)
        note = result.notification(definition.noun)
        return ok(result.to_dict(), note.message, level=note.level, failureCount=result.failure_count)
