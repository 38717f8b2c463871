"""Tests for URL shortener service."""

import asyncio

import pytest

from shortlinks.common.validators import ShortenEntry
from shortlinks.errors import (
    PersistenceError,
    ShortCodeGenerationError,
    ValidationError,
)
from shortlinks.resolver import ClientContext, ResolveStatus
from shortlinks.service import URLShortenerService
from shortlinks.shortcode import ShortCodeGenerator
from shortlinks.store import RecordStore
from shortlinks.store.models import UrlRecord

from conftest import START_MS, FailingBackend


class StuckGenerator(ShortCodeGenerator):
    """Generator that always returns the same codes."""
    
    def __init__(self, code: str, uuid_code: str):
        super().__init__(default_length=len(code))
        self.code = code
        self.uuid_code = uuid_code
        self.calls = 0
    
    def generate_random(self, length=None):
        self.calls += 1
        return self.code
    
    def generate_from_uuid(self, length=None):
        return self.uuid_code


class TestCreateShortURL:
    """Test single URL shortening."""
    
    @pytest.mark.asyncio
    async def test_create_with_defaults(self, service, store):
        record = await service.create_short_url("example.com", 30)
        
        assert record.original_url == "https://example.com"
        assert len(record.short_code) == 6
        assert record.short_code.isalnum()
        assert record.created_at == START_MS
        assert record.expires_at - record.created_at == 1_800_000
        assert record.validity_minutes == 30
        assert record.is_custom is False
        assert record.id
        
        stored = await store.list_records()
        assert stored == [record]
    
    @pytest.mark.asyncio
    async def test_default_validity(self, service):
        record = await service.create_short_url("https://example.com")
        assert record.validity_minutes == 30
    
    @pytest.mark.asyncio
    async def test_custom_code(self, service):
        record = await service.create_short_url("https://example.com", 60, "promo2024")
        
        assert record.short_code == "promo2024"
        assert record.is_custom is True
        assert record.expires_at == START_MS + 3_600_000
    
    @pytest.mark.asyncio
    async def test_duplicate_custom_code(self, service):
        first = await service.create_short_url("https://example.com/a")
        
        with pytest.raises(ValidationError) as exc:
            await service.create_short_url("https://example.com/b", 10, first.short_code)
        
        assert exc.value.duplicate
        assert exc.value.field == "custom_short_code"
        assert exc.value.message == "This shortcode is already in use"
    
    @pytest.mark.asyncio
    async def test_invalid_url(self, service, store):
        with pytest.raises(ValidationError) as exc:
            await service.create_short_url("not a url")
        
        assert exc.value.field == "original_url"
        assert await store.list_records() == []
    
    @pytest.mark.asyncio
    async def test_custom_codes_disabled(self, store, clock, logger):
        service = URLShortenerService(store, clock=clock, logger=logger, enable_custom_codes=False)
        
        with pytest.raises(ValidationError):
            await service.create_short_url("https://example.com", 10, "mycode")
    
    @pytest.mark.asyncio
    async def test_persistence_failure(self, clock, logger):
        store = RecordStore(FailingBackend(fail_writes=True), clock=clock, logger=logger)
        service = URLShortenerService(store, clock=clock, logger=logger)
        
        with pytest.raises(PersistenceError):
            await service.create_short_url("https://example.com")
    
    @pytest.mark.asyncio
    async def test_expired_code_can_be_reused(self, service, clock):
        await service.create_short_url("https://example.com/old", 1, "reuse")
        clock.advance(minutes=1)
        
        record = await service.create_short_url("https://example.com/new", 5, "reuse")
        
        assert record.original_url == "https://example.com/new"
        assert len(await service.list_records()) == 1


class TestShortCodeGeneration:
    """Test collision handling."""
    
    @pytest.mark.asyncio
    async def test_collision_falls_back_to_uuid_code(self, store, clock, logger):
        generator = StuckGenerator("aaaaaa", "bbbbbbbb")
        service = URLShortenerService(store, generator, logger, clock=clock, max_collision_retries=3)
        
        first = await service.create_short_url("https://example.com/1")
        second = await service.create_short_url("https://example.com/2")
        
        assert first.short_code == "aaaaaa"
        assert second.short_code == "bbbbbbbb"
        assert generator.calls == 1 + 3
    
    @pytest.mark.asyncio
    async def test_generation_exhausted(self, store, clock, logger):
        generator = StuckGenerator("aaaaaa", "aaaaaa")
        service = URLShortenerService(store, generator, logger, clock=clock, max_collision_retries=2)
        await service.create_short_url("https://example.com/1")
        
        with pytest.raises(ShortCodeGenerationError):
            await service.create_short_url("https://example.com/2")


class TestBatch:
    """Test batch submissions."""
    
    @pytest.mark.asyncio
    async def test_entries_are_independent(self, service, store):
        result = await service.create_short_urls([
            ShortenEntry("https://a.example", 10),
            ShortenEntry("not a url", 10),
        ])
        
        assert list(result.created) == [0]
        assert list(result.errors) == [1]
        assert result.errors[1].field == "original_url"
        assert result.errors[1].index == 1
        assert not result.ok
        
        records = await store.list_records()
        assert [r.original_url for r in records] == ["https://a.example"]
    
    @pytest.mark.asyncio
    async def test_empty_first_entry(self, service):
        result = await service.create_short_urls([
            ShortenEntry("", 10),
            ShortenEntry("https://b.example", 10),
        ])

        assert result.errors[0].message == "URL is required"
        assert result.errors[0].index == 0
        assert result.created[1].original_url == "https://b.example"

    @pytest.mark.asyncio
    async def test_custom_code_only_when_requested(self, service):
        result = await service.create_short_urls([
            ShortenEntry("https://a.example", custom_short_code="ignored", use_custom=False),
            ShortenEntry("https://b.example", custom_short_code="wanted", use_custom=True),
        ])
        
        assert result.ok
        assert result.created[0].short_code != "ignored"
        assert not result.created[0].is_custom
        assert result.created[1].short_code == "wanted"
    
    @pytest.mark.asyncio
    async def test_duplicate_within_batch(self, service):
        result = await service.create_short_urls([
            ShortenEntry("https://a.example", custom_short_code="same", use_custom=True),
            ShortenEntry("https://b.example", custom_short_code="same", use_custom=True),
        ])
        
        assert list(result.created) == [0]
        assert result.errors[1].duplicate
    
    @pytest.mark.asyncio
    async def test_batch_size_limits(self, service, sample_urls):
        with pytest.raises(ValidationError):
            await service.create_short_urls([])
        
        entries = [ShortenEntry(url) for url in sample_urls * 2]
        with pytest.raises(ValidationError) as exc:
            await service.create_short_urls(entries)
        assert exc.value.field == "urls"
        
        result = await service.create_short_urls(entries[:5])
        assert len(result.created) == 5
    
    @pytest.mark.asyncio
    async def test_batch_sweeps_first(self, service, backend, clock):
        await service.create_short_url("https://example.com/old", 1)
        clock.advance(minutes=2)
        
        await service.create_short_url("https://example.com/new", 10)
        
        records = await service.list_records()
        assert [r.original_url for r in records] == ["https://example.com/new"]


class TestServiceOperations:
    """Test resolution, sweeping and statistics through the service."""
    
    @pytest.mark.asyncio
    async def test_resolve_and_analytics(self, service):
        record = await service.create_short_url("https://example.com", 10)
        
        outcome = await service.resolve(record.short_code, ClientContext(user_agent="pytest"))
        missing = await service.resolve("nothere")
        
        assert outcome.status is ResolveStatus.FOUND_VALID
        assert missing.status is ResolveStatus.NOT_FOUND
        clicks = await service.get_analytics(record.short_code)
        assert [c.referrer_info.user_agent for c in clicks] == ["pytest"]
        assert await service.get_analytics("nothere") == []
    
    @pytest.mark.asyncio
    async def test_sweep_count_with_concurrent_save(self, service, store, clock):
        await service.create_short_url("https://example.com/1", 1)
        await service.create_short_url("https://example.com/2", 1)
        clock.advance(minutes=1)
        fresh = UrlRecord(
            id="fresh",
            original_url="https://example.com/fresh",
            short_code="fresh",
            created_at=clock(),
            expires_at=clock() + 600_000,
            validity_minutes=10,
        )
        
        removed, saved = await asyncio.gather(service.sweep_expired(), store.save_record(fresh))
        
        assert removed == 2
        assert saved.ok
        assert [r.short_code for r in await service.list_records()] == ["fresh"]
    
    @pytest.mark.asyncio
    async def test_sweep_count_on_read_failure(self, clock, logger):
        store = RecordStore(FailingBackend(fail_reads=True), clock=clock, logger=logger)
        service = URLShortenerService(store, clock=clock, logger=logger)
        
        assert await service.sweep_expired() == 0
    
    @pytest.mark.asyncio
    async def test_sweep_count(self, service, clock):
        await service.create_short_url("https://example.com/1", 1)
        await service.create_short_url("https://example.com/2", 1)
        await service.create_short_url("https://example.com/3", 60)
        clock.advance(minutes=1)
        
        assert await service.sweep_expired() == 2
        assert await service.sweep_expired() == 0
        assert len(await service.list_records()) == 1
    
    @pytest.mark.asyncio
    async def test_statistics(self, service, clock):
        first = await service.create_short_url("https://example.com/1", 1, "mine")
        await service.create_short_url("https://example.com/2", 60)
        await service.resolve(first.short_code)
        await service.resolve(first.short_code)
        clock.advance(minutes=1)
        
        stats = await service.get_statistics()
        
        assert stats == {
            "total_urls": 2,
            "active_urls": 1,
            "custom_urls": 1,
            "total_clicks": 2,
            "store_backend": "memory",
            "custom_codes_enabled": True,
        }
    
    @pytest.mark.asyncio
    async def test_clear_all(self, service):
        record = await service.create_short_url("https://example.com")
        await service.resolve(record.short_code)
        
        assert await service.clear_all()
        assert await service.list_records() == []
        assert await service.get_analytics(record.short_code) == []
    
    @pytest.mark.asyncio
    async def test_clear_all_failure(self, clock, logger):
        store = RecordStore(FailingBackend(fail_writes=True), clock=clock, logger=logger)
        service = URLShortenerService(store, clock=clock, logger=logger)
        
        with pytest.raises(PersistenceError):
            await service.clear_all()
    
    @pytest.mark.asyncio
    async def test_health_check(self, service):
        assert await service.health_check() == {"store": True, "overall": True}
