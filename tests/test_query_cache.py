"""Tests for the query cache and mutations."""

import asyncio

import pytest

from backoffice.shared.core import events
from backoffice.shared.domain.query.cache import Mutation, QueryCache, key_family
from backoffice.shared.infrastructure.api.client import ApiError


class CountingFetcher:
    """Async fetcher that counts calls and can be held open."""

    def __init__(self, results=None, gate: asyncio.Event | None = None) -> None:
        self.calls = 0
        self.results = list(results or [])
        self.gate = gate

    async def __call__(self):
        self.calls += 1
        call = self.calls
        if self.gate is not None:
            await self.gate.wait()
        if self.results:
            result = self.results.pop(0)
            if isinstance(result, BaseException):
                raise result
            return result
        return [{"id": call}]


def test__key_family__string_and_tuple() -> None:
    assert key_family("users") == "users"
    assert key_family(("users", "42", "reports")) == "users"


class TestQuery:

    @pytest.mark.asyncio
    async def test__query__concurrent_observers_share_one_fetch(self) -> None:
        cache = QueryCache()
        gate = asyncio.Event()
        fetcher = CountingFetcher(gate=gate)

        pending = [asyncio.ensure_future(cache.query("users", fetcher)) for _ in range(3)]
        await asyncio.sleep(0)
        gate.set()
        results = await asyncio.gather(*pending)

        assert fetcher.calls == 1
        assert cache.fetch_count("users") == 1
        assert all(r.data == [{"id": 1}] for r in results)

    @pytest.mark.asyncio
    async def test__query__fresh_entry_is_served_from_cache(self) -> None:
        cache = QueryCache()
        fetcher = CountingFetcher()

        first = await cache.query("users", fetcher)
        second = await cache.query("users", fetcher)

        assert fetcher.calls == 1
        assert first.data == second.data
        assert second.is_fresh is True
        assert second.status == "success"

    @pytest.mark.asyncio
    async def test__query__invalidate_forces_refetch(self) -> None:
        cache = QueryCache()
        fetcher = CountingFetcher()
        await cache.query("users", fetcher)

        cache.invalidate("users")
        assert cache.is_fresh("users") is False
        result = await cache.query("users", fetcher)

        assert fetcher.calls == 2
        assert result.data == [{"id": 2}]
        assert result.version == 1

    @pytest.mark.asyncio
    async def test__query__error_is_stored_not_raised(self) -> None:
        cache = QueryCache()
        fetcher = CountingFetcher(results=[ApiError("Request failed with status 500", status_code=500)])

        result = await cache.query("reports", fetcher)

        assert result.is_error is True
        assert result.status == "error"
        assert result.error.status_code == 500
        assert result.data is None

    @pytest.mark.asyncio
    async def test__query__error_stays_until_invalidated(self) -> None:
        cache = QueryCache()
        fetcher = CountingFetcher(results=[ApiError("down"), [{"id": "ok"}]])

        await cache.query("reports", fetcher)
        again = await cache.query("reports", fetcher)
        assert again.is_error and fetcher.calls == 1

        cache.invalidate("reports")
        recovered = await cache.query("reports", fetcher)

        assert recovered.error is None
        assert recovered.data == [{"id": "ok"}]

    @pytest.mark.asyncio
    async def test__query__failed_refetch_keeps_previous_data(self) -> None:
        cache = QueryCache()
        fetcher = CountingFetcher(results=[[{"id": 1}], ApiError("down")])
        await cache.query("users", fetcher)
        cache.invalidate("users")

        result = await cache.query("users", fetcher)

        assert result.is_error
        assert result.data == [{"id": 1}]

    @pytest.mark.asyncio
    async def test__query__invalidate_during_fetch_discards_stale_result(self) -> None:
        cache = QueryCache()
        gate = asyncio.Event()
        slow = CountingFetcher(results=[["old"]], gate=gate)
        await cache.query("users", CountingFetcher(results=[["first"]]))
        cache.invalidate("users")

        observer = asyncio.ensure_future(cache.query("users", slow))
        await asyncio.sleep(0)
        cache.invalidate("users")
        gate.set()
        await observer

        assert cache.peek("users").data == ["first"]
        assert cache.is_fresh("users") is False

        result = await cache.query("users", CountingFetcher(results=[["new"]]))
        assert result.data == ["new"]
        assert result.is_fresh is True

    @pytest.mark.asyncio
    async def test__query__peek_does_not_fetch(self) -> None:
        cache = QueryCache()
        assert cache.peek("users") is None
        assert cache.fetch_count("users") == 0


class TestInvalidate:

    @pytest.mark.asyncio
    async def test__invalidate__family_name_covers_tuple_keys(self) -> None:
        cache = QueryCache()
        for key in ("users", ("users", "42", "reports"), ("users", "42", "blocked"), "reports"):
            await cache.query(key, CountingFetcher())

        invalidated = cache.invalidate("users")

        assert set(invalidated) == {"users", ("users", "42", "reports"), ("users", "42", "blocked")}
        assert cache.is_fresh("reports") is True

    @pytest.mark.asyncio
    async def test__invalidate__tuple_key_is_exact(self) -> None:
        cache = QueryCache()
        for key in ("users", ("users", "42", "reports"), ("users", "42", "blocked")):
            await cache.query(key, CountingFetcher())

        assert cache.invalidate(("users", "42", "reports")) == [("users", "42", "reports")]
        assert cache.is_fresh("users") is True
        assert cache.is_fresh(("users", "42", "blocked")) is True

    def test__invalidate__unknown_key_is_noop(self) -> None:
        assert QueryCache().invalidate("announcements") == []

    @pytest.mark.asyncio
    async def test__invalidate_and_notify__publishes_keys(self, bus) -> None:
        seen = []

        async def on_invalidated(payload):
            seen.append(payload["keys"])

        bus.subscribe(events.TOPIC_QUERY_INVALIDATED, on_invalidated)
        cache = QueryCache(bus)
        await cache.query("users", CountingFetcher())

        await cache.invalidate_and_notify("users")
        await bus.wait_until_idle()

        assert seen == [["users"]]


class TestMutation:

    @pytest.mark.asyncio
    async def test__mutate__success_invalidates_keys(self) -> None:
        cache = QueryCache()
        await cache.query("users", CountingFetcher())
        await cache.query("reports", CountingFetcher())

        async def ban(user_id):
            return {"banned": user_id}

        mutation = Mutation(ban, cache=cache, invalidates=("users",))
        result = await mutation.mutate("42")

        assert result == {"banned": "42"}
        assert mutation.data == result
        assert mutation.is_running is False
        assert cache.is_fresh("users") is False
        assert cache.is_fresh("reports") is True

    @pytest.mark.asyncio
    async def test__mutate__failure_leaves_cache_untouched(self) -> None:
        cache = QueryCache()
        await cache.query("users", CountingFetcher())

        async def ban(user_id):
            raise ApiError("User not found", status_code=404)

        errors = []
        mutation = Mutation(ban, cache=cache, invalidates=("users",), on_error=errors.append)

        with pytest.raises(ApiError):
            await mutation.mutate("nope")

        assert cache.is_fresh("users") is True
        assert mutation.error is errors[0]
        assert mutation.is_running is False

    @pytest.mark.asyncio
    async def test__mutate__is_running_while_in_progress(self) -> None:
        gate = asyncio.Event()

        async def slow():
            await gate.wait()
            return True

        mutation = Mutation(slow)
        task = asyncio.ensure_future(mutation.mutate())
        await asyncio.sleep(0)
        assert mutation.is_running is True

        gate.set()
        await task
        assert mutation.is_running is False

    @pytest.mark.asyncio
    async def test__mutate__callbacks_and_events(self, bus) -> None:
        cache = QueryCache(bus)
        await cache.query("announcements", CountingFetcher())
        succeeded, failed, callbacks = [], [], []

        async def on_succeeded(payload):
            succeeded.append(payload)

        async def on_failed(payload):
            failed.append(payload)

        async def on_success(result):
            callbacks.append(result)

        bus.subscribe(events.TOPIC_MUTATION_SUCCEEDED, on_succeeded)
        bus.subscribe(events.TOPIC_MUTATION_FAILED, on_failed)

        async def create(data):
            return {"id": "a1", **data}

        async def broken(data):
            raise ApiError("Request failed with status 500", status_code=500)

        await Mutation(create, cache=cache, invalidates=("announcements",), on_success=on_success).mutate({"title": "Hi"})
        with pytest.raises(ApiError):
            await Mutation(broken, cache=cache, name="publish").mutate({})
        await bus.wait_until_idle()

        assert callbacks == [{"id": "a1", "title": "Hi"}]
        assert succeeded == [{"name": "create", "invalidated": ["announcements"]}]
        assert failed[0]["name"] == "publish"
        assert failed[0]["status_code"] == 500

    @pytest.mark.asyncio
    async def test__mutate__then_query_refetches(self) -> None:
        cache = QueryCache()
        fetcher = CountingFetcher()
        await cache.query("pendingCreators", fetcher)

        async def review(creator_id, approved):
            return {"approved": approved}

        await Mutation(review, cache=cache, invalidates=("pendingCreators", "users")).mutate("7", True)
        await cache.query("pendingCreators", fetcher)

        assert fetcher.calls == 2
