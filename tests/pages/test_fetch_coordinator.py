from __future__ import annotations

from src.rental_backoffice.rental_backoffice.api.client import ApiResponse
from src.rental_backoffice.rental_backoffice.cache.storage import InMemoryStorage
from src.rental_backoffice.rental_backoffice.core.constants import REFRESH_SUCCESS_MESSAGE
from src.rental_backoffice.rental_backoffice.core.enums import PageKey
from src.rental_backoffice.rental_backoffice.core.exceptions import ApiError
from src.rental_backoffice.rental_backoffice.pages.coordinator import FetchCoordinator
from src.rental_backoffice.rental_backoffice.pages.reconciler import ListReconciler, Mutation
from src.rental_backoffice.rental_backoffice.pages.state import PageSessions


def _rooms_backend(fake_api):
    fake_api.on("GET", "/api/phong", [{"_id": "p1", "maPhong": "A101"}])
    fake_api.on("GET", "/api/toa-nha", [{"_id": "t1", "tenToaNha": "Nhà A"}])


def test_cold_load_fetches_every_source_and_caches(fake_api, clock):
    _rooms_backend(fake_api)
    sessions = PageSessions(InMemoryStorage(), clock=clock)
    state = sessions.state("s1", PageKey.ROOMS)

    result = FetchCoordinator(fake_api).load(state)

    assert result.from_cache is False
    assert result.failures == ()
    assert state.items == [{"_id": "p1", "maPhong": "A101"}]
    assert state.lists["toaNhaList"] == [{"_id": "t1", "tenToaNha": "Nhà A"}]
    assert state.loading is False
    assert state.cache.get() == state.snapshot()
    assert ("GET", "/api/phong", {"limit": 100}, None) in fake_api.calls


def test_fresh_cache_skips_network(fake_api, clock):
    _rooms_backend(fake_api)
    sessions = PageSessions(InMemoryStorage(), clock=clock)
    coordinator = FetchCoordinator(fake_api)
    coordinator.load(sessions.state("s1", PageKey.ROOMS))

    clock.advance(60_000)
    result = coordinator.load(sessions.state("s1", PageKey.ROOMS))

    assert result.from_cache is True
    assert fake_api.count("GET", "/api/phong") == 1


def test_expired_cache_refetches(fake_api, clock):
    _rooms_backend(fake_api)
    sessions = PageSessions(InMemoryStorage(), clock=clock)
    coordinator = FetchCoordinator(fake_api)
    coordinator.load(sessions.state("s1", PageKey.ROOMS))

    clock.advance(300_001)
    result = coordinator.load(sessions.state("s1", PageKey.ROOMS))

    assert result.from_cache is False
    assert fake_api.count("GET", "/api/phong") == 2


def test_failed_source_degrades_to_empty_list(fake_api, clock):
    fake_api.on("GET", "/api/phong", [{"_id": "p1"}])
    fake_api.on("GET", "/api/toa-nha", error=ApiError("Không thể kết nối tới máy chủ"))
    state = PageSessions(InMemoryStorage(), clock=clock).state("s1", PageKey.ROOMS)

    result = FetchCoordinator(fake_api).load(state)

    assert state.items == [{"_id": "p1"}]
    assert state.lists["toaNhaList"] == []
    assert [f.path for f in result.failures] == ["/api/toa-nha"]
    # Degraded results are cached as well.
    assert state.cache.get() == {"phongList": [{"_id": "p1"}], "toaNhaList": []}


def test_all_sources_failing_still_loads(fake_api, clock):
    state = PageSessions(InMemoryStorage(), clock=clock).state("s1", PageKey.INCIDENTS)

    result = FetchCoordinator(fake_api).load(state)

    assert len(result.failures) == 4
    assert state.lists == {"suCoList": [], "phongList": [], "khachThueList": [], "hopDongList": []}
    assert state.loading is False


def test_batched_source_splits_into_named_lists(fake_api, clock):
    fake_api.on("GET", "/api/hoa-don", [{"_id": "h1"}])
    fake_api.on(
        "GET",
        "/api/hoa-don/form-data",
        {"hopDongList": [{"_id": "hd1"}], "phongList": [{"_id": "p1"}], "khachThueList": "bad"},
    )
    state = PageSessions(InMemoryStorage(), clock=clock).state("s1", PageKey.INVOICES)

    FetchCoordinator(fake_api).load(state)

    assert state.items == [{"_id": "h1"}]
    assert state.lists["hopDongList"] == [{"_id": "hd1"}]
    assert state.lists["khachThueList"] == []


def test_refresh_bypasses_cache_and_reports_success(fake_api, clock):
    _rooms_backend(fake_api)
    sessions = PageSessions(InMemoryStorage(), clock=clock)
    coordinator = FetchCoordinator(fake_api)
    state = sessions.state("s1", PageKey.ROOMS)
    coordinator.load(state)

    note = coordinator.handle_refresh(state)

    assert note.level == "success"
    assert note.message == REFRESH_SUCCESS_MESSAGE
    assert state.cache.is_refreshing is False
    assert fake_api.count("GET", "/api/phong") == 2


def test_sessions_do_not_share_cache(fake_api, clock):
    _rooms_backend(fake_api)
    sessions = PageSessions(InMemoryStorage(), clock=clock)
    coordinator = FetchCoordinator(fake_api)

    coordinator.load(sessions.state("s1", PageKey.ROOMS))
    result = coordinator.load(sessions.state("s2", PageKey.ROOMS))

    assert result.from_cache is False
    assert sessions.state("s1", PageKey.ROOMS) is not sessions.state("s2", PageKey.ROOMS)


def test_delete_applied_during_a_fetch_is_not_undone(fake_api, clock):
    sessions = PageSessions(InMemoryStorage(), clock=clock)
    state = sessions.state("s1", PageKey.ROOMS)
    state.items = [{"_id": "p1"}, {"_id": "p2"}]
    reconciler = ListReconciler()

    def rooms(params, body):
        # Another request deletes p1 while this read is in flight.
        reconciler.apply(state, Mutation.delete("p1"))
        return ApiResponse(status=200, success=True, data=[{"_id": "p1"}, {"_id": "p2"}])

    fake_api.on("GET", "/api/phong", handler=rooms)
    fake_api.on("GET", "/api/toa-nha", [{"_id": "t1"}])

    result = FetchCoordinator(fake_api).load(state, force_refresh=True)

    assert result.superseded is True
    assert state.ids() == ["p2"]
    assert state.lists["toaNhaList"] == [{"_id": "t1"}]
    assert state.cache.get() is None
    assert state.loading is False


def test_mutation_bumps_version_under_the_page_lock(fake_api, clock):
    sessions = PageSessions(InMemoryStorage(), clock=clock)
    state = sessions.state("s1", PageKey.ROOMS)
    state.items = [{"_id": "p1"}]

    ListReconciler().apply(state, Mutation.update({"_id": "p1", "maPhong": "A102"}))

    assert state.version == 1
    assert state.lock.acquire(blocking=False)
    state.lock.release()
