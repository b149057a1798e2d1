"""
Catalog RPC procedures.

Every procedure is addressed by name under the router prefix. Queries are
read-only ``GET`` calls taking query parameters; mutations are ``POST`` calls
taking a JSON body. Procedures that look up a missing record return ``null``.
"""
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlmodel import Session

from window_catalog.db.database import get_session
from window_catalog.models.collection import (
    WindowCollectionCreate,
    WindowCollectionRead,
    WindowCollectionUpdate,
    WindowCollectionWithWindows,
)
from window_catalog.models.window import WindowCreate, WindowRead, WindowUpdate
from window_catalog.services import collections, windows

router = APIRouter()


class IdInput(BaseModel):
    id: int


class HealthStatus(BaseModel):
    status: str
    timestamp: str


@router.get("/healthcheck", response_model=HealthStatus)
def healthcheck():
    return HealthStatus(status="ok", timestamp=datetime.now(timezone.utc).isoformat())


# Window collections

@router.post("/createCollection", response_model=WindowCollectionRead)
def create_collection(data: WindowCollectionCreate, session: Session = Depends(get_session)):
    return collections.create_collection(session, data)


@router.get("/getCollections", response_model=List[WindowCollectionRead])
def get_collections(session: Session = Depends(get_session)):
    return collections.get_collections(session)


@router.get("/getCollectionById", response_model=Optional[WindowCollectionWithWindows])
def get_collection_by_id(id: int, session: Session = Depends(get_session)):
    return collections.get_collection_by_id(session, id)


@router.post("/updateCollection", response_model=Optional[WindowCollectionRead])
def update_collection(data: WindowCollectionUpdate, session: Session = Depends(get_session)):
    return collections.update_collection(session, data)


@router.post("/deleteCollection", response_model=bool)
def delete_collection(data: IdInput, session: Session = Depends(get_session)):
    return collections.delete_collection(session, data.id)


# Items (windows). The window-named paths are aliases kept for older clients.

@router.post("/createItem", response_model=WindowRead)
@router.post("/createWindow", response_model=WindowRead, include_in_schema=False)
def create_window(data: WindowCreate, session: Session = Depends(get_session)):
    return windows.create_window(session, data)


@router.get("/getItemsByCollection", response_model=List[WindowRead])
@router.get("/getWindowsByCollection", response_model=List[WindowRead], include_in_schema=False)
def get_windows_by_collection(
    collection_id: int = Query(alias="collectionId"),
    session: Session = Depends(get_session),
):
    return windows.get_windows_by_collection(session, collection_id)


@router.post("/updateItem", response_model=Optional[WindowRead])
@router.post("/updateWindow", response_model=Optional[WindowRead], include_in_schema=False)
def update_window(data: WindowUpdate, session: Session = Depends(get_session)):
    return windows.update_window(session, data)


@router.post("/deleteItem", response_model=bool)
@router.post("/deleteWindow", response_model=bool, include_in_schema=False)
def delete_window(data: IdInput, session: Session = Depends(get_session)):
    return windows.delete_window(session, data.id)
