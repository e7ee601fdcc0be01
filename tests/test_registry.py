"""Tests for the link registry."""

import re
from datetime import datetime, timedelta, timezone

import pytest

from linkreg.database.memory import MemoryLinkStore
from linkreg.errors import (
    CodeConflict,
    ExhaustedCodeSpace,
    InvalidCode,
    InvalidTarget,
    LinkNotFound,
    StorageFailure,
)
from linkreg.registry import LinkRegistry
from linkreg.shortcode import ShortCodeGenerator


class FixedCodeGenerator(ShortCodeGenerator):
    """Generator that always proposes the same code and counts draws."""

    def __init__(self, code: str):
        super().__init__(default_length=len(code))
        self.code = code
        self.draws = 0

    def generate_random(self, length=None):
        self.draws += 1
        return self.code


class SequenceCodeGenerator(ShortCodeGenerator):
    def __init__(self, codes):
        super().__init__()
        self.codes = list(codes)

    def generate_random(self, length=None):
        return self.codes.pop(0)


class CountingStore(MemoryLinkStore):
    """Memory store that counts every call into it."""

    def __init__(self):
        super().__init__()
        self.calls = 0
        self.inserts = 0

    async def insert_link(self, link):
        self.calls += 1
        self.inserts += 1
        return await super().insert_link(link)

    async def get_link(self, code):
        self.calls += 1
        return await super().get_link(code)

    async def record_hit(self, code, at):
        self.calls += 1
        return await super().record_hit(code, at)

    async def delete_link(self, code):
        self.calls += 1
        return await super().delete_link(code)


class BrokenStore(MemoryLinkStore):
    async def record_hit(self, code, at):
        raise StorageFailure("connection reset")


class TestCreate:
    """Test link creation."""

    @pytest.mark.asyncio
    async def test_create_generates_code(self, registry):
        link = await registry.create("https://example.com")

        assert re.fullmatch(r"[A-Za-z0-9]{6}", link.code)
        assert link.target_url == "https://example.com"
        assert link.clicks == 0
        assert link.last_clicked_at is None
        assert link.created_at == link.updated_at
        assert link.id

    @pytest.mark.asyncio
    async def test_create_with_custom_code(self, registry, sample_urls):
        link = await registry.create(sample_urls[0], code="test123")

        assert link.code == "test123"
        stored = await registry.get("test123")
        assert stored.target_url == sample_urls[0]

    @pytest.mark.asyncio
    async def test_generated_codes_are_unique(self, registry):
        links = [await registry.create(f"https://example.com/{i}") for i in range(200)]

        codes = [link.code for link in links]
        assert len(set(codes)) == len(codes)
        assert len({link.id for link in links}) == len(links)

    @pytest.mark.asyncio
    async def test_duplicate_custom_code(self, registry, sample_urls):
        await registry.create(sample_urls[0], code="dupe123")

        with pytest.raises(CodeConflict, match="already exists"):
            await registry.create(sample_urls[1], code="dupe123")

        # The original link is untouched
        link = await registry.get("dupe123")
        assert link.target_url == sample_urls[0]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("target", ["not a url", "", None, "example.com/path", "https://"])
    async def test_invalid_target(self, target):
        store = CountingStore()
        registry = LinkRegistry(store)

        with pytest.raises(InvalidTarget):
            await registry.create(target)
        assert store.calls == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", ["ab", "abcdefghi", "abc-12", "abc 123", ""])
    async def test_invalid_code(self, code):
        store = CountingStore()
        registry = LinkRegistry(store)

        with pytest.raises(InvalidCode):
            await registry.create("https://example.com", code=code)
        assert store.calls == 0

    @pytest.mark.asyncio
    async def test_exhausted_code_space(self, store):
        generator = FixedCodeGenerator("taken1")
        registry = LinkRegistry(store, code_generator=generator)
        await registry.create("https://example.com/first", code="taken1")

        with pytest.raises(ExhaustedCodeSpace) as exc_info:
            await registry.create("https://example.com/second")

        assert generator.draws == 10
        assert exc_info.value.attempts == 10
        assert len(await registry.list_links()) == 1

    @pytest.mark.asyncio
    async def test_max_code_attempts_is_tunable(self):
        store = CountingStore()
        generator = FixedCodeGenerator("taken1")
        registry = LinkRegistry(store, code_generator=generator, max_code_attempts=3)
        await registry.create("https://example.com/first", code="taken1")
        store.inserts = 0

        with pytest.raises(ExhaustedCodeSpace):
            await registry.create("https://example.com/second")

        assert store.inserts == 3

    @pytest.mark.asyncio
    async def test_retries_past_collisions(self, store):
        registry = LinkRegistry(
            store,
            code_generator=SequenceCodeGenerator(["taken1", "taken1", "fresh1"]),
        )
        await registry.create("https://example.com/a", code="taken1")

        link = await registry.create("https://example.com/b")

        assert link.code == "fresh1"

    def test_rejects_zero_attempts(self, store):
        with pytest.raises(ValueError):
            LinkRegistry(store, max_code_attempts=0)


class TestResolve:
    """Test resolve-and-record-hit."""

    @pytest.mark.asyncio
    async def test_resolve_scenario(self, registry):
        link = await registry.create("https://example.com")

        target = await registry.resolve(link.code)
        assert target == "https://example.com"

        stored = await registry.get(link.code)
        assert stored.clicks == 1
        assert stored.last_clicked_at is not None
        assert stored.last_clicked_at >= stored.created_at
        assert stored.updated_at == stored.last_clicked_at

    @pytest.mark.asyncio
    async def test_resolve_uses_clock(self, store):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        ticks = iter(start + timedelta(minutes=i) for i in range(10))
        registry = LinkRegistry(store, clock=lambda: next(ticks))

        link = await registry.create("https://example.com", code="clock01")
        await registry.resolve("clock01")
        await registry.resolve("clock01")

        stored = await registry.get("clock01")
        assert link.created_at == start
        assert stored.created_at == start
        assert stored.last_clicked_at == start + timedelta(minutes=2)
        assert stored.updated_at == start + timedelta(minutes=2)
        assert stored.clicks == 2

    @pytest.mark.asyncio
    async def test_resolve_not_found(self, registry):
        with pytest.raises(LinkNotFound):
            await registry.resolve("nope123")

    @pytest.mark.asyncio
    async def test_malformed_code_skips_store(self):
        store = CountingStore()
        registry = LinkRegistry(store)

        for call in (registry.resolve, registry.get, registry.delete):
            with pytest.raises(LinkNotFound):
                await call("favicon.ico")
        assert store.calls == 0

    @pytest.mark.asyncio
    async def test_get_does_not_count(self, registry):
        link = await registry.create("https://example.com")

        for _ in range(3):
            await registry.get(link.code)

        assert (await registry.get(link.code)).clicks == 0

    @pytest.mark.asyncio
    async def test_storage_failure_propagates(self):
        registry = LinkRegistry(BrokenStore())
        await registry.create("https://example.com", code="broken1")

        with pytest.raises(StorageFailure):
            await registry.resolve("broken1")


class TestListAndDelete:
    """Test listing and deletion."""

    @pytest.mark.asyncio
    async def test_list_newest_first(self, store):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        ticks = iter(start + timedelta(seconds=i) for i in range(10))
        registry = LinkRegistry(store, clock=lambda: next(ticks))

        for code in ("first01", "second1", "third01"):
            await registry.create("https://example.com", code=code)

        links = await registry.list_links()
        assert [link.code for link in links] == ["third01", "second1", "first01"]

    @pytest.mark.asyncio
    async def test_list_empty(self, registry):
        assert await registry.list_links() == []

    @pytest.mark.asyncio
    async def test_delete_then_lookups_fail(self, registry):
        link = await registry.create("https://example.com")

        await registry.delete(link.code)

        with pytest.raises(LinkNotFound):
            await registry.get(link.code)
        with pytest.raises(LinkNotFound):
            await registry.resolve(link.code)
        assert await registry.list_links() == []

    @pytest.mark.asyncio
    async def test_second_delete_not_found(self, registry):
        await registry.create("https://example.com", code="gone123")
        await registry.delete("gone123")

        with pytest.raises(LinkNotFound):
            await registry.delete("gone123")

    @pytest.mark.asyncio
    async def test_code_reusable_after_delete(self, registry):
        old = await registry.create("https://example.com/old", code="reuse12")
        await registry.resolve("reuse12")
        await registry.delete("reuse12")

        new = await registry.create("https://example.com/new", code="reuse12")

        assert new.id != old.id
        assert new.clicks == 0
        assert await registry.resolve("reuse12") == "https://example.com/new"

    @pytest.mark.asyncio
    async def test_returned_links_are_snapshots(self, registry):
        link = await registry.create("https://example.com", code="snap123")
        link.clicks = 99

        assert (await registry.get("snap123")).clicks == 0
