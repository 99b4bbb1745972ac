from __future__ import annotations

import json
import threading

from substore.core.store import COLLECTIONS_KEY, SUBS_KEY, JsonStore


def test_ensure_defaults_creates_empty_lists(tmp_path):
    store = JsonStore(tmp_path / "db.json")
    store.ensure_defaults()
    data = json.loads((tmp_path / "db.json").read_text(encoding="utf-8"))
    assert data == {SUBS_KEY: [], COLLECTIONS_KEY: []}


def test_ensure_defaults_keeps_existing_data(tmp_path):
    path = tmp_path / "db.json"
    path.write_text(json.dumps({SUBS_KEY: [{"name": "a"}]}), encoding="utf-8")
    store = JsonStore(path)
    store.ensure_defaults()
    assert store.read(SUBS_KEY) == [{"name": "a"}]
    assert store.read(COLLECTIONS_KEY) == []


def test_write_persists_across_instances(tmp_path):
    path = tmp_path / "nested" / "db.json"
    JsonStore(path).write([{"name": "订阅"}], SUBS_KEY)
    assert JsonStore(path).read(SUBS_KEY) == [{"name": "订阅"}]
    assert not (tmp_path / "nested" / "db.json.tmp").exists()


def test_read_returns_detached_copy(store):
    store.write([{"name": "a"}], SUBS_KEY)
    snapshot = store.read(SUBS_KEY)
    snapshot[0]["name"] = "mutated"
    assert store.read(SUBS_KEY) == [{"name": "a"}]


def test_read_missing_key_returns_default(store):
    assert store.read("nope") is None
    assert store.read("nope", []) == []


def test_raw_read_modify_write_loses_concurrent_update(store):
    store.write([{"name": "a"}], SUBS_KEY)
    both_read = threading.Barrier(2)
    first_written = threading.Event()

    def patch(field, value, wait_for=None, done=None):
        subs = store.read(SUBS_KEY)
        both_read.wait()
        if wait_for is not None:
            wait_for.wait()
        subs[0][field] = value
        store.write(subs, SUBS_KEY)
        if done is not None:
            done.set()

    t1 = threading.Thread(target=patch, args=("ua", "clash"), kwargs={"done": first_written})
    t2 = threading.Thread(target=patch, args=("icon", "x.png"), kwargs={"wait_for": first_written})
    t1.start()
    t2.start()
    t1.join()
    t2.join()

    record = store.read(SUBS_KEY)[0]
    assert record["icon"] == "x.png"
    assert "ua" not in record


def test_transaction_serializes_read_modify_write(store):
    store.write([{"name": "a", "count": 0}], SUBS_KEY)

    def bump():
        for _ in range(50):
            with store.transaction():
                subs = store.read(SUBS_KEY)
                subs[0]["count"] += 1
                store.write(subs, SUBS_KEY)

    threads = [threading.Thread(target=bump) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert store.read(SUBS_KEY)[0]["count"] == 200
