"""Tests for the registry."""

import pytest

from link_registry.environment import Clock, ManualClock, StaticAuthenticator
from link_registry.errors import (
    AuthenticationFailed,
    InvalidInput,
    KeyConflict,
    NotFound,
    RegistryError,
    Unauthorized,
)
from link_registry.keygen import KeyGenerator
from link_registry.models import LinkRecord
from link_registry.registry import Registry
from link_registry.store.memory import MemoryLinkStore


class TickingClock(Clock):
    """Moves to the next ledger on every sequence read."""

    def __init__(self, sequence: int, timestamp: int):
        self._sequence = sequence
        self._timestamp = timestamp

    def sequence(self) -> int:
        self._sequence += 1
        return self._sequence

    def timestamp(self) -> int:
        return self._timestamp


class NoExtendStore(MemoryLinkStore):
    """Fails any retention call made after the insert."""

    async def extend_retention(self, short_key, min_horizon, max_horizon):
        raise AssertionError("retention must be applied by insert")


class TestCreate:
    """Test link creation."""

    async def test_create_with_custom_key(self, registry, sample_urls):
        key = await registry.create("alice", sample_urls[0], "abc")

        assert key == "abc"
        assert await registry.get_destination("abc") == sample_urls[0]
        assert await registry.get_owner("abc") == "alice"

    async def test_create_with_generated_key(self, registry, sample_urls):
        key = await registry.create("alice", sample_urls[0])

        assert key == "71ed1ba"
        assert KeyGenerator.is_generated_format(key)
        assert await registry.get_destination(key) == sample_urls[0]

    async def test_generated_key_changes_with_ledger(self, registry, clock, sample_urls):
        first = await registry.create("alice", sample_urls[0])
        clock.advance()
        second = await registry.create("alice", sample_urls[1])

        assert first != second

    async def test_record_metadata(self, registry, clock, sample_urls):
        await registry.create("alice", sample_urls[0], "meta")

        record = await registry.get_record("meta")
        assert record == LinkRecord(
            destination_url=sample_urls[0],
            created_at=clock.sequence(),
            owner="alice",
        )

    async def test_duplicate_custom_key(self, registry, sample_urls):
        await registry.create("alice", sample_urls[0], "dup")

        with pytest.raises(KeyConflict, match="already exists"):
            await registry.create("bob", sample_urls[1], "dup")

        assert await registry.get_owner("dup") == "alice"
        assert await registry.get_destination("dup") == sample_urls[0]

    async def test_empty_url(self, registry, store):
        with pytest.raises(InvalidInput, match="URL cannot be empty"):
            await registry.create("alice", "", "empty")

        assert len(store) == 0

    @pytest.mark.parametrize("custom_key", ["", "k" * 65])
    async def test_custom_key_length(self, registry, store, sample_urls, custom_key):
        with pytest.raises(InvalidInput, match="between 1 and 64"):
            await registry.create("alice", sample_urls[0], custom_key)

        assert len(store) == 0

    @pytest.mark.parametrize("custom_key", ["k", "k" * 64])
    async def test_custom_key_length_bounds_accepted(self, registry, sample_urls, custom_key):
        assert await registry.create("alice", sample_urls[0], custom_key) == custom_key

    async def test_unauthenticated_owner(self, registry, store, sample_urls):
        with pytest.raises(AuthenticationFailed):
            await registry.create("mallory", sample_urls[0], "evil")

        assert len(store) == 0

    async def test_per_call_authenticator(self, registry, sample_urls):
        """A call-level authenticator replaces the registry default."""
        key = await registry.create(
            "carol", sample_urls[0], "carol", auth=StaticAuthenticator(["carol"])
        )

        assert await registry.get_owner(key) == "carol"

    async def test_no_authenticator(self, store, clock, sample_urls):
        registry = Registry(store=store, clock=clock)

        with pytest.raises(AuthenticationFailed):
            await registry.create("alice", sample_urls[0])

    async def test_create_extends_retention(self, registry, store, sample_urls):
        await registry.create("alice", sample_urls[0], "kept")

        assert store.remaining_retention("kept") == pytest.approx(31_536_000)

    @pytest.mark.parametrize("custom_key", ["kept", None])
    async def test_retention_applied_with_insert(self, fake_time, clock, authenticator, custom_key):
        store = NoExtendStore(time_source=fake_time)
        registry = Registry(
            store=store, clock=clock, authenticator=authenticator, retention_seconds=600
        )

        key = await registry.create("alice", "https://example.com/x", custom_key)

        assert store.remaining_retention(key) == pytest.approx(600)

    async def test_generated_key_seeded_from_created_at(self, store, authenticator):
        clock = TickingClock(sequence=12344, timestamp=1_700_000_000)
        registry = Registry(store=store, clock=clock, authenticator=authenticator)

        key = await registry.create("alice", "https://example.com/x")
        record = await registry.get_record(key)

        assert record.created_at == 12345
        assert key == KeyGenerator().generate(record.created_at, 1_700_000_000)


class TestGeneratedKeyCollisions:
    """Collision handling for generated keys."""

    async def test_collision_retries_next_seed(self, registry, sample_urls):
        first = await registry.create("alice", sample_urls[0])
        second = await registry.create("bob", sample_urls[1])

        assert first == "71ed1ba"
        assert second == "81ed1ba"
        assert await registry.get_owner(second) == "bob"

    async def test_collision_without_retries(self, store, clock, authenticator, sample_urls):
        registry = Registry(
            store=store,
            clock=clock,
            authenticator=authenticator,
            max_collision_retries=0,
        )
        await registry.create("alice", sample_urls[0])

        with pytest.raises(KeyConflict):
            await registry.create("alice", sample_urls[1])

        assert len(store) == 1

    async def test_retries_exhausted(self, store, clock, authenticator, sample_urls):
        registry = Registry(
            store=store,
            clock=clock,
            authenticator=authenticator,
            max_collision_retries=2,
        )
        for _ in range(3):
            await registry.create("alice", sample_urls[0])

        with pytest.raises(KeyConflict):
            await registry.create("alice", sample_urls[0])

    async def test_custom_key_never_retried(self, registry, sample_urls):
        generated = await registry.create("alice", sample_urls[0])

        with pytest.raises(KeyConflict):
            await registry.create("bob", sample_urls[1], generated)

    def test_negative_retries_rejected(self, store, clock):
        with pytest.raises(ValueError):
            Registry(store=store, clock=clock, max_collision_retries=-1)


class TestUpdate:
    """Test destination updates."""

    async def test_update(self, registry, sample_urls):
        await registry.create("alice", sample_urls[0], "abc")
        await registry.update("alice", "abc", sample_urls[1])

        assert await registry.get_destination("abc") == sample_urls[1]

    async def test_update_preserves_metadata(self, registry, clock, sample_urls):
        await registry.create("alice", sample_urls[0], "meta")
        before = await registry.get_record("meta")

        clock.advance(ledgers=10)
        await registry.update("alice", "meta", sample_urls[1])
        after = await registry.get_record("meta")

        assert after.destination_url == sample_urls[1]
        assert after.owner == before.owner
        assert after.created_at == before.created_at

    async def test_update_wrong_owner(self, registry, sample_urls):
        await registry.create("alice", sample_urls[0], "abc")

        with pytest.raises(Unauthorized, match="Not the owner"):
            await registry.update("bob", "abc", sample_urls[1])

        assert await registry.get_destination("abc") == sample_urls[0]

    async def test_update_missing_key(self, registry, sample_urls):
        with pytest.raises(NotFound):
            await registry.update("alice", "missing", sample_urls[0])

    async def test_update_empty_url(self, registry, sample_urls):
        await registry.create("alice", sample_urls[0], "abc")

        with pytest.raises(InvalidInput):
            await registry.update("alice", "abc", "")

        assert await registry.get_destination("abc") == sample_urls[0]

    async def test_ownership_checked_before_url(self, registry, sample_urls):
        """A non-owner learns nothing about URL validation."""
        await registry.create("alice", sample_urls[0], "abc")

        with pytest.raises(Unauthorized):
            await registry.update("bob", "abc", "")

    async def test_update_unauthenticated(self, registry, sample_urls):
        await registry.create("alice", sample_urls[0], "abc")

        with pytest.raises(AuthenticationFailed):
            await registry.update("alice", "abc", sample_urls[1], auth=StaticAuthenticator([]))

        assert await registry.get_destination("abc") == sample_urls[0]

    async def test_update_reextends_retention(self, registry, store, fake_time, sample_urls):
        await registry.create("alice", sample_urls[0], "abc")
        fake_time.advance(31_535_000)

        await registry.update("alice", "abc", sample_urls[1])

        assert store.remaining_retention("abc") == pytest.approx(31_536_000)


class TestDelete:
    """Test link deletion."""

    async def test_delete_removes_everything(self, registry, sample_urls):
        await registry.create("alice", sample_urls[0], "gone")
        await registry.delete("alice", "gone")

        with pytest.raises(NotFound):
            await registry.get_destination("gone")
        with pytest.raises(NotFound):
            await registry.get_record("gone")
        with pytest.raises(NotFound):
            await registry.get_owner("gone")

    async def test_deleted_key_reusable(self, registry, sample_urls):
        await registry.create("alice", sample_urls[0], "reuse")
        await registry.delete("alice", "reuse")

        assert await registry.create("bob", sample_urls[1], "reuse") == "reuse"
        assert await registry.get_owner("reuse") == "bob"

    async def test_delete_wrong_owner(self, registry, sample_urls):
        await registry.create("alice", sample_urls[0], "abc")

        with pytest.raises(Unauthorized):
            await registry.delete("bob", "abc")

        assert await registry.get_owner("abc") == "alice"

    async def test_delete_missing_key(self, registry):
        with pytest.raises(NotFound):
            await registry.delete("alice", "missing")

    async def test_delete_unauthenticated(self, registry, sample_urls):
        await registry.create("alice", sample_urls[0], "abc")

        with pytest.raises(AuthenticationFailed):
            await registry.delete("alice", "abc", auth=StaticAuthenticator(["bob"]))

        assert await registry.get_owner("abc") == "alice"


class TestReads:
    """Test public reads."""

    async def test_get_nonexistent(self, registry):
        with pytest.raises(NotFound, match="not found"):
            await registry.get_destination("nonexistent")

    async def test_errors_carry_codes(self, registry):
        with pytest.raises(RegistryError) as exc_info:
            await registry.get_owner("nonexistent")

        assert exc_info.value.code == "not_found"

    async def test_expired_record_is_gone(self, registry, fake_time, sample_urls):
        await registry.create("alice", sample_urls[0], "old")
        fake_time.advance(31_536_001)

        with pytest.raises(NotFound):
            await registry.get_record("old")

    async def test_health_check(self, registry):
        health = await registry.health_check()

        assert health == {"store": True, "overall": True}


class TestScenarios:
    """End-to-end flows through the registry."""

    async def test_lifecycle(self, registry):
        assert await registry.create("alice", "https://example.com/x", "abc") == "abc"
        assert await registry.get_destination("abc") == "https://example.com/x"

        await registry.update("alice", "abc", "https://example.com/y")
        assert await registry.get_destination("abc") == "https://example.com/y"

        await registry.delete("alice", "abc")
        with pytest.raises(NotFound):
            await registry.get_destination("abc")

    async def test_two_owners(self, registry, sample_urls):
        await registry.create("alice", sample_urls[0], "alice-link")
        await registry.create("bob", sample_urls[1], "bob-link")

        await registry.update("alice", "alice-link", sample_urls[2])
        await registry.update("bob", "bob-link", sample_urls[2])

        with pytest.raises(Unauthorized):
            await registry.update("alice", "bob-link", sample_urls[0])
        with pytest.raises(Unauthorized):
            await registry.delete("bob", "alice-link")

        await registry.delete("alice", "alice-link")
        await registry.delete("bob", "bob-link")

        with pytest.raises(NotFound):
            await registry.get_owner("alice-link")
        with pytest.raises(NotFound):
            await registry.get_owner("bob-link")

    async def test_new_ledger_new_generated_key(self, store, authenticator, sample_urls):
        clock = ManualClock(sequence=1, timestamp=1_700_000_000)
        registry = Registry(
            store=store, clock=clock, authenticator=authenticator, max_collision_retries=0
        )

        first = await registry.create("alice", sample_urls[0])
        clock.advance()
        second = await registry.create("alice", sample_urls[0])

        assert len(first) == len(second) == 7
        assert first != second
