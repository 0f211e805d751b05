from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

import crud
from auth import SessionContext
from dependencies import get_session_context, get_storage, require_admin
from filter_helpers import blank_to_none, normalize_category
from models import Asset, AssetIn, AssetUpdate
from storage import Storage

router = APIRouter()


@router.get("/assets", response_model=list[Asset])
def list_assets_api(
    q: Optional[str] = None,
    category: Optional[str] = None,
    store: Storage = Depends(get_storage),
    ctx: SessionContext = Depends(get_session_context),
):
    q = blank_to_none(q)
    category = normalize_category(category)
    return crud.list_assets(store, q=q, category=category)


@router.post("/assets", response_model=Asset, status_code=201)
def create_asset_api(
    body: AssetIn,
    store: Storage = Depends(get_storage),
    ctx: SessionContext = Depends(require_admin),
):
    return crud.create_asset(store, body)


@router.get("/assets/{asset_id}", response_model=Asset)
def get_asset_api(
    asset_id: str,
    store: Storage = Depends(get_storage),
    ctx: SessionContext = Depends(get_session_context),
):
    asset = crud.get_asset(store, asset_id)
    if not asset:
        raise HTTPException(status_code=404, detail="asset not found")
    return asset


@router.patch("/assets/{asset_id}", response_model=Asset)
def update_asset_api(
    asset_id: str,
    body: AssetUpdate,
    store: Storage = Depends(get_storage),
    ctx: SessionContext = Depends(require_admin),
):
    return crud.update_asset(store, asset_id, body)


@router.delete("/assets/{asset_id}", status_code=204)
def delete_asset_api(
    asset_id: str,
    store: Storage = Depends(get_storage),
    ctx: SessionContext = Depends(require_admin),
):
    ok = crud.delete_asset(store, asset_id)
    if not ok:
        raise HTTPException(status_code=404, detail="asset not found")
    return None
