import json
from pathlib import Path

from quote_screener.domain.models import Quote
from quote_screener.infrastructure.storage.kv_store import InMemoryStore, JsonFileStore
from quote_screener.infrastructure.storage.quote_cache import CACHE_TTL_MS, QuoteCache


class FakeClock:
    def __init__(self, now: int = 1_700_000_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


def test_get_returns_quote_inside_ttl() -> None:
    clock = FakeClock()
    cache = QuoteCache(InMemoryStore(), clock=clock)
    quote = Quote(peg_ratio=0.8, dividend_yield=0.03)
    cache.put("alphavantage", "KO", quote)

    clock.now += CACHE_TTL_MS - 1
    assert cache.get("alphavantage", "KO") == quote


def test_get_is_absent_at_exact_ttl_boundary() -> None:
    clock = FakeClock()
    cache = QuoteCache(InMemoryStore(), clock=clock)
    cache.put("alphavantage", "KO", Quote(peg_ratio=0.8))

    clock.now += CACHE_TTL_MS
    assert cache.get("alphavantage", "KO") is None


def test_stale_entry_is_left_in_place_until_overwritten() -> None:
    clock = FakeClock()
    cache = QuoteCache(InMemoryStore(), clock=clock)
    cache.put("alphavantage", "KO", Quote(peg_ratio=0.8))
    clock.now += CACHE_TTL_MS * 2

    assert cache.get("alphavantage", "KO") is None
    entry = cache.entry("alphavantage", "KO")
    assert entry is not None
    assert entry.quote.peg_ratio == 0.8

    cache.put("alphavantage", "KO", Quote(peg_ratio=1.2))
    refreshed = cache.entry("alphavantage", "KO")
    assert refreshed is not None
    assert refreshed.fetched_at_ms == clock.now
    assert cache.get("alphavantage", "KO") == Quote(peg_ratio=1.2)


def test_providers_do_not_collide() -> None:
    cache = QuoteCache(InMemoryStore(), clock=FakeClock())
    cache.put("alphavantage", "AAPL", Quote(pe_ratio=10.0))
    cache.put("yahoo", "AAPL", Quote(pe_ratio=20.0))

    assert cache.get("alphavantage", "AAPL") == Quote(pe_ratio=10.0)
    assert cache.get("yahoo", "AAPL") == Quote(pe_ratio=20.0)


def test_clear_removes_everything() -> None:
    store = InMemoryStore()
    cache = QuoteCache(store, clock=FakeClock())
    cache.put("alphavantage", "KO", Quote(peg_ratio=0.8))
    cache.clear()

    assert len(store) == 0
    assert cache.get("alphavantage", "KO") is None


def test_undecodable_entry_behaves_as_absent() -> None:
    store = InMemoryStore()
    store.set("alphavantage:KO", "{not json")
    cache = QuoteCache(store, clock=FakeClock())
    assert cache.get("alphavantage", "KO") is None


def test_non_object_cached_data_behaves_as_absent(caplog) -> None:
    store = InMemoryStore()
    store.set("alphavantage:KO", json.dumps({"data": ["x"], "timestamp": 1}))
    store.set("alphavantage:PG", json.dumps({"data": "x", "timestamp": 1}))
    store.set("alphavantage:JNJ", json.dumps(["x"]))
    cache = QuoteCache(store, clock=FakeClock())

    assert cache.get("alphavantage", "KO") is None
    assert cache.get("alphavantage", "PG") is None
    assert cache.entry("alphavantage", "JNJ") is None
    assert "Cache entry undecodable" in caplog.text


def test_json_file_store_persists_between_instances(tmp_path) -> None:
    path = tmp_path / "cache" / "quotes.json"
    clock = FakeClock()
    QuoteCache(JsonFileStore(path), clock=clock).put("alphavantage", "KO", Quote(peg_ratio=0.8))

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert "alphavantage:KO" in payload

    reopened = QuoteCache(JsonFileStore(path), clock=clock)
    assert reopened.get("alphavantage", "KO") == Quote(peg_ratio=0.8)


def test_json_file_store_clear_deletes_file(tmp_path) -> None:
    path = tmp_path / "quotes.json"
    store = JsonFileStore(path)
    store.set("k", "v")
    assert path.exists()

    store.clear()
    assert not path.exists()
    assert store.get("k") is None


def test_json_file_store_ignores_corrupt_file(tmp_path, caplog) -> None:
    path = tmp_path / "quotes.json"
    path.write_text("[broken", encoding="utf-8")

    store = JsonFileStore(path)
    assert store.get("anything") is None
    assert "Cache file unreadable" in caplog.text


def test_json_file_store_keeps_entry_when_disk_write_fails(tmp_path, monkeypatch, caplog) -> None:
    path = tmp_path / "quotes.json"
    store = JsonFileStore(path)

    def refuse_write(self, *args, **kwargs):
        raise PermissionError("read-only filesystem")

    monkeypatch.setattr(Path, "write_text", refuse_write)
    cache = QuoteCache(store, clock=FakeClock())
    cache.put("alphavantage", "KO", Quote(peg_ratio=0.8))

    assert cache.get("alphavantage", "KO") == Quote(peg_ratio=0.8)
    assert not path.exists()
    assert "Cache file not writable" in caplog.text
