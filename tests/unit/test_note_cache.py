"""Unit tests for the note listing cache."""

from voxnote.notes.cache import DEFAULT_FRESHNESS_SECONDS, NoteCache
from voxnote.notes.models import Note


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _notes() -> list[Note]:
    return [Note(id="n1", content="first", owner_id="ana@example.com")]


class TestNoteCache:
    """Tests for NoteCache."""

    def test_default_window_is_five_minutes(self) -> None:
        """Test default freshness window."""
        assert DEFAULT_FRESHNESS_SECONDS == 300
        assert NoteCache().freshness_seconds == 300

    def test_empty_cache_misses(self) -> None:
        """Test empty cache returns None."""
        cache = NoteCache()
        assert cache.get("ana@example.com") is None
        assert cache.get_stale("ana@example.com") is None

    def test_fresh_hit(self) -> None:
        """Test listing is served within the window."""
        clock = FakeClock()
        cache = NoteCache(clock=clock)
        cache.put("ana@example.com", _notes())

        clock.now += 299
        result = cache.get("ana@example.com")

        assert result is not None
        assert [n.id for n in result] == ["n1"]

    def test_expired_entry_misses(self) -> None:
        """Test listing is not served once the window elapsed."""
        clock = FakeClock()
        cache = NoteCache(clock=clock)
        cache.put("ana@example.com", _notes())

        clock.now += 300
        assert cache.get("ana@example.com") is None

    def test_expired_entry_served_as_stale(self) -> None:
        """Test expired listing is still available for stale-while-error."""
        clock = FakeClock()
        cache = NoteCache(clock=clock)
        cache.put("ana@example.com", _notes())

        clock.now += 3600
        stale = cache.get_stale("ana@example.com")

        assert stale is not None
        assert stale[0].id == "n1"

    def test_other_owner_misses(self) -> None:
        """Test entries are scoped to their owner, fresh or stale."""
        cache = NoteCache()
        cache.put("ana@example.com", _notes())

        assert cache.get("bo@example.com") is None
        assert cache.get_stale("bo@example.com") is None

    def test_invalidate_drops_entry(self) -> None:
        """Test invalidation removes the entry entirely."""
        cache = NoteCache()
        cache.put("ana@example.com", _notes())

        cache.invalidate()

        assert cache.get("ana@example.com") is None
        assert cache.get_stale("ana@example.com") is None

    def test_returned_list_is_a_copy(self) -> None:
        """Test callers cannot mutate the cached listing."""
        cache = NoteCache()
        cache.put("ana@example.com", _notes())

        result = cache.get("ana@example.com")
        assert result is not None
        result.clear()

        assert len(cache.get("ana@example.com") or []) == 1
