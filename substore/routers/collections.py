from __future__ import annotations

from fastapi import APIRouter, Depends

from substore.core.errors import success
from substore.core.store import JsonStore, get_store
from substore.services.subscriptions import list_collections

router = APIRouter(prefix="/api", tags=["collections"])


@router.get("/collections")
async def api_list_collections(store: JsonStore = Depends(get_store)):
    return success(list_collections(store))
