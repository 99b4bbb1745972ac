from __future__ import annotations

from urllib.parse import unquote

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from substore.core.errors import success
from substore.core.store import JsonStore, get_store
from substore.models import SubscriptionIn, SubscriptionPatch
from substore.services.subscriptions import (
    create_subscription,
    delete_subscription,
    get_flow_info,
    get_subscription,
    list_subscriptions,
    update_subscription,
)

router = APIRouter(prefix="/api", tags=["subscriptions"])


def _decode(name: str) -> str:
    # clients encode names with encodeURIComponent on top of the URL encoding
    return unquote(name)


@router.get("/sub/flow/{name:path}")
async def api_get_flow_info(name: str, store: JsonStore = Depends(get_store)):
    info = await run_in_threadpool(get_flow_info, store, _decode(name))
    return success(info)


@router.get("/sub/{name:path}")
async def api_get_subscription(name: str, store: JsonStore = Depends(get_store)):
    return success(get_subscription(store, _decode(name)))


@router.patch("/sub/{name:path}")
async def api_update_subscription(name: str, body: SubscriptionPatch, store: JsonStore = Depends(get_store)):
    return success(update_subscription(store, _decode(name), body.changes()))


@router.delete("/sub/{name:path}")
async def api_delete_subscription(name: str, store: JsonStore = Depends(get_store)):
    delete_subscription(store, _decode(name))
    return success()


@router.get("/subs")
async def api_list_subscriptions(store: JsonStore = Depends(get_store)):
    return success(list_subscriptions(store))


@router.post("/subs", status_code=201)
async def api_create_subscription(body: SubscriptionIn, store: JsonStore = Depends(get_store)):
    return success(create_subscription(store, body.to_record()))
