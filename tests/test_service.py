"""Tests for the shortening and resolution engines."""

import asyncio

import pytest

from shortkey.exceptions import (
    CollisionError,
    InvalidKeyError,
    NotFoundError,
    RetriesExhaustedError,
    StoreError,
    ValidationError,
)
from shortkey.service import ShorteningEngine

from doubles import BASE_URL, CollidingStore, FailingStore, RacingStore, StalledStore


class TestShorten:
    """Test the shortening engine."""

    async def test_shorten(self, service, generator, sample_urls):
        """A new URL gets its salt-0 key under the base URL."""
        short_url = await service.shorten(sample_urls[0])

        assert short_url == f"{BASE_URL}/{generator.generate(sample_urls[0], 0)}"

    async def test_shorten_is_idempotent(self, service, store, sample_urls):
        """Shortening the same URL twice returns the same short URL and one mapping."""
        first = await service.shorten(sample_urls[0])
        second = await service.shorten(sample_urls[0])

        assert first == second
        assert len(store) == 1
        # The second call was answered by the dedup lookup alone
        assert store.call_names() == ["find_by_long_url", "insert", "find_by_long_url"]

    async def test_distinct_urls(self, service, sample_urls):
        """Different URLs get different short URLs."""
        short_urls = [await service.shorten(url) for url in sample_urls]

        assert len(set(short_urls)) == len(sample_urls)

    @pytest.mark.parametrize(
        "url, rule",
        [
            ("http://localhost/admin", "ssrf"),
            ("ftp://example.com", "scheme"),
            ("https://example.com/" + "a" * 3000, "length"),
            ("http://", "format"),
        ],
    )
    async def test_invalid_url_never_touches_store(self, service, store, url, rule):
        """Rejected URLs fail before any store access."""
        with pytest.raises(ValidationError) as exc_info:
            await service.shorten(url)

        assert exc_info.value.rule == rule
        assert store.calls == []

    async def test_collision_retries_with_next_salt(self, service, store, generator, sample_urls):
        """A taken salt-0 key moves the URL to its salt-1 key."""
        url = sample_urls[0]
        await store.insert(generator.generate(url, 0), "https://other.example/")

        short_url = await service.shorten(url)

        assert short_url == f"{BASE_URL}/{generator.generate(url, 1)}"

    async def test_retries_exhausted(self, make_service, generator, sample_urls):
        """Five collisions in a row raise RetriesExhaustedError naming five attempts."""
        store = CollidingStore()
        service = make_service(store)
        url = sample_urls[0]

        with pytest.raises(RetriesExhaustedError, match="5 attempts") as exc_info:
            await service.shorten(url)

        assert exc_info.value.attempts == 5
        inserted_keys = [call[1] for call in store.calls if call[0] == "insert"]
        assert inserted_keys == [generator.generate(url, salt) for salt in range(5)]

        cause = exc_info.value.__cause__
        assert isinstance(cause, CollisionError)
        assert cause.salt == 4

    async def test_retry_bound_is_configurable(self, make_service, sample_urls):
        store = CollidingStore()
        service = make_service(store, max_collision_retries=2)

        with pytest.raises(RetriesExhaustedError, match="2 attempts"):
            await service.shorten(sample_urls[0])

        assert store.call_names().count("insert") == 2

    async def test_store_error_is_not_retried(self, make_service, sample_urls):
        """A non-collision insert failure surfaces after a single attempt."""
        store = FailingStore()
        service = make_service(store)

        with pytest.raises(StoreError):
            await service.shorten(sample_urls[0])

        assert store.call_names().count("insert") == 1

    async def test_lost_race_returns_winner(self, make_service, sample_urls):
        """A concurrent writer's mapping is returned instead of a second one."""
        store = RacingStore()
        url = sample_urls[0]
        await store.insert("WINNER1", url)
        service = make_service(store)

        short_url = await service.shorten(url)

        assert short_url == f"{BASE_URL}/WINNER1"
        assert len(store) == 1

    async def test_lost_race_on_same_key_returns_winner(self, make_service, generator, sample_urls):
        """Losing the race for the same salted key returns the winner without a retry."""
        store = RacingStore()
        url = sample_urls[0]
        winner_key = generator.generate(url, 0)
        await store.insert(winner_key, url)
        store.calls.clear()
        service = make_service(store, max_collision_retries=1)

        short_url = await service.shorten(url)

        assert short_url == f"{BASE_URL}/{winner_key}"
        assert store.call_names().count("insert") == 1
        assert len(store) == 1

    async def test_shorten_deadline_leaves_no_mapping(self, make_service, sample_urls):
        """A caller deadline cancels the pending insert without a StoreError."""
        store = StalledStore()
        service = make_service(store)

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(service.shorten(sample_urls[0]), timeout=0.05)

        assert len(store) == 0
        assert await store.find_by_long_url(sample_urls[0]) is None

    async def test_concurrent_shorten_same_url(self, service, store, sample_urls):
        """Concurrent requests for one URL converge on one mapping."""
        results = await asyncio.gather(*(service.shorten(sample_urls[1]) for _ in range(10)))

        assert len(set(results)) == 1
        assert len(store) == 1

    async def test_path_prefix(self, make_service, store, generator, sample_urls):
        service = make_service(store, path_prefix="/s")

        short_url = await service.shorten(sample_urls[0])

        assert short_url == f"{BASE_URL}/s/{generator.generate(sample_urls[0])}"

    def test_retry_bound_must_be_positive(self, store):
        with pytest.raises(ValueError):
            ShorteningEngine(store, base_url=BASE_URL, max_retries=0)


class TestResolve:
    """Test the resolution engine."""

    async def test_resolve(self, service, generator, sample_urls):
        await service.shorten(sample_urls[0])
        key = generator.generate(sample_urls[0])

        assert await service.resolve(key) == sample_urls[0]

    async def test_resolve_counts_clicks(self, service, generator, sample_urls):
        await service.shorten(sample_urls[0])
        key = generator.generate(sample_urls[0])

        for _ in range(3):
            await service.resolve(key)

        mapping = await service.get_url_info(key)
        assert mapping.click_count == 3

    async def test_resolve_is_single_store_operation(self, service, store, generator, sample_urls):
        """Resolution increments and reads in one call, never read-then-write."""
        await service.shorten(sample_urls[0])
        key = generator.generate(sample_urls[0])
        store.calls.clear()

        await service.resolve(key)

        assert store.call_names() == ["increment_and_fetch"]

    async def test_concurrent_resolves(self, service, generator, sample_urls):
        """k concurrent resolutions add exactly k clicks."""
        await service.shorten(sample_urls[0])
        key = generator.generate(sample_urls[0])
        await service.resolve(key)

        k = 50
        results = await asyncio.gather(*(service.resolve(key) for _ in range(k)))

        assert results == [sample_urls[0]] * k
        mapping = await service.get_url_info(key)
        assert mapping.click_count == k + 1

    async def test_resolve_deadline_adds_no_click(self, make_service, generator, sample_urls):
        """A cancelled resolution propagates the timeout and counts nothing."""
        store = StalledStore()
        service = make_service(store)
        url = sample_urls[0]
        store.release.set()
        await service.shorten(url)
        key = generator.generate(url)
        store.release.clear()

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(service.resolve(key), timeout=0.05)

        mapping = await store.get_mapping(key)
        assert mapping.click_count == 0

    async def test_unknown_key(self, service):
        """A well-formed but unassigned key is NotFound, not an internal error."""
        with pytest.raises(NotFoundError) as exc_info:
            await service.resolve("abc123X")

        assert exc_info.value.to_dict()["error"] == "not_found"

    @pytest.mark.parametrize("key", ["abc123", "abc123XY", "abc$12X", "../etc", ""])
    async def test_invalid_key_never_touches_store(self, service, store, key):
        with pytest.raises(InvalidKeyError):
            await service.resolve(key)

        assert store.calls == []

    async def test_store_error_is_distinct_from_not_found(self, make_service):
        service = make_service(FailingStore())

        with pytest.raises(StoreError):
            await service.resolve("abc123X")

    async def test_get_url_info_does_not_count(self, service, generator, sample_urls):
        await service.shorten(sample_urls[0])
        key = generator.generate(sample_urls[0])

        await service.get_url_info(key)
        mapping = await service.get_url_info(key)

        assert mapping.click_count == 0
        assert mapping.long_url == sample_urls[0]
        assert mapping.created_at is not None

    async def test_get_url_info_unknown(self, service):
        with pytest.raises(NotFoundError):
            await service.get_url_info("abc123X")


class TestServiceHealth:
    """Test service health reporting."""

    async def test_health_check(self, service):
        assert await service.health_check() == {"database": True, "overall": True}

    async def test_health_check_unhealthy(self, make_service):
        health = await make_service(FailingStore()).health_check()

        assert health["overall"] is False
