from __future__ import annotations

from typing import Any, Dict, List, Optional

Record = Dict[str, Any]


def find_by_name(records: List[Record], name: str) -> Optional[Record]:
    for record in records:
        if record.get("name") == name:
            return record
    return None


def find_index_by_name(records: List[Record], name: str) -> int:
    for idx, record in enumerate(records):
        if record.get("name") == name:
            return idx
    return -1


def update_by_name(records: List[Record], name: str, new_record: Record) -> bool:
    idx = find_index_by_name(records, name)
    if idx == -1:
        return False
    records[idx] = new_record
    return True


def delete_by_name(records: List[Record], name: str) -> bool:
    idx = find_index_by_name(records, name)
    if idx == -1:
        return False
    del records[idx]
    return True


def rename_reference(collections: List[Record], old: str, new: str) -> int:
    """Swap ``old`` for ``new`` in each collection's ``subscriptions`` list, in place."""
    changed = 0
    for collection in collections:
        refs = collection.get("subscriptions") or []
        if old in refs:
            refs[refs.index(old)] = new
            collection["subscriptions"] = refs
            changed += 1
    return changed


def drop_reference(collections: List[Record], name: str) -> int:
    changed = 0
    for collection in collections:
        refs = collection.get("subscriptions") or []
        kept = [s for s in refs if s != name]
        if len(kept) != len(refs):
            changed += 1
        collection["subscriptions"] = kept
    return changed
