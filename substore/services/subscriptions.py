from __future__ import annotations

import logging
from typing import Any, Dict, List

import requests
from fastapi import HTTPException

from substore.core.errors import InternalServerError, NetworkError, ResourceNotFoundError
from substore.core.records import delete_by_name, drop_reference, find_by_name, rename_reference, update_by_name
from substore.core.store import COLLECTIONS_KEY, SUBS_KEY, JsonStore
from substore.metrics import record_flow_fetch, record_subscription_change
from substore.models import SOURCE_LOCAL
from substore.services.flow import FlowHeaderError, get_flow_headers, parse_flow_headers

logger = logging.getLogger(__name__)


def merge_subscription(base: Dict[str, Any], patch: Dict[str, Any]) -> Dict[str, Any]:
    return {**base, **patch}


def list_subscriptions(store: JsonStore) -> List[Dict[str, Any]]:
    return store.read(SUBS_KEY, [])


def list_collections(store: JsonStore) -> List[Dict[str, Any]]:
    return store.read(COLLECTIONS_KEY, [])


def get_subscription(store: JsonStore, name: str) -> Dict[str, Any]:
    sub = find_by_name(list_subscriptions(store), name)
    if not sub:
        raise HTTPException(404, f"Subscription {name} not found!")
    return sub


def create_subscription(store: JsonStore, record: Dict[str, Any]) -> Dict[str, Any]:
    name = record["name"]
    logger.info("Creating subscription %s", name)
    with store.transaction():
        subs = store.read(SUBS_KEY, [])
        if find_by_name(subs, name):
            raise HTTPException(500, f"Subscription {name} already exists!")
        subs.append(record)
        store.write(subs, SUBS_KEY)
    record_subscription_change("create")
    return record


def update_subscription(store: JsonStore, name: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow-merge ``patch`` over the record called ``name``.

    A rename is cascaded into every collection referencing the old name.
    Subscriptions and collections are written one after the other; a
    failure between the two writes is not rolled back.
    """
    with store.transaction():
        subs = store.read(SUBS_KEY, [])
        old = find_by_name(subs, name)
        if not old:
            raise HTTPException(500, f"Subscription {name} does not exist and cannot be updated!")

        new_name = patch.get("name", name)
        renamed = new_name != name
        if renamed and find_by_name(subs, new_name):
            raise HTTPException(409, f"Subscription {new_name} already exists!")

        merged = merge_subscription(old, patch)
        logger.info("Updating subscription %s", name)
        update_by_name(subs, name, merged)
        store.write(subs, SUBS_KEY)

        if renamed:
            collections = store.read(COLLECTIONS_KEY, [])
            changed = rename_reference(collections, name, new_name)
            store.write(collections, COLLECTIONS_KEY)
            logger.info("Renamed %s -> %s in %d collection(s)", name, new_name, changed)
    record_subscription_change("update")
    return merged


def delete_subscription(store: JsonStore, name: str) -> None:
    logger.info("Deleting subscription %s", name)
    with store.transaction():
        subs = store.read(SUBS_KEY, [])
        removed = delete_by_name(subs, name)
        store.write(subs, SUBS_KEY)

        collections = store.read(COLLECTIONS_KEY, [])
        drop_reference(collections, name)
        store.write(collections, COLLECTIONS_KEY)
    if removed:
        record_subscription_change("delete")


def get_flow_info(store: JsonStore, name: str) -> Dict[str, Any]:
    sub = find_by_name(list_subscriptions(store), name)
    if not sub:
        raise ResourceNotFoundError("RESOURCE_NOT_FOUND", f"Subscription {name} does not exist!")
    if sub.get("source") == SOURCE_LOCAL:
        raise InternalServerError("NO_FLOW_INFO", "N/A")

    inaccessible = f"The URL for subscription {name} is inaccessible."
    raw = sub.get("subUserinfo")
    if not raw:
        url = sub.get("url")
        if not url:
            record_flow_fetch("network_error")
            raise NetworkError("URL_NOT_ACCESSIBLE", inaccessible, details="subscription has no url")
        try:
            raw = get_flow_headers(url)
        except requests.RequestException as exc:
            logger.warning("Flow header fetch failed for %s: %s", name, exc)
            record_flow_fetch("network_error")
            raise NetworkError("URL_NOT_ACCESSIBLE", inaccessible, details=str(exc)) from exc
        if not raw:
            record_flow_fetch("no_info")
            raise InternalServerError("NO_FLOW_INFO", "N/A")

    try:
        info = parse_flow_headers(raw)
    except FlowHeaderError as exc:
        logger.warning("Unparseable flow header for %s: %r", name, raw)
        record_flow_fetch("invalid_header")
        raise NetworkError("URL_NOT_ACCESSIBLE", inaccessible, details=str(exc)) from exc
    record_flow_fetch("success")
    return info.to_payload()
