"""Data access for window collections (product lines)."""
import logging
from typing import List, Optional

from sqlalchemy import delete
from sqlmodel import Session, select

from window_catalog.models.collection import (
    WindowCollection,
    WindowCollectionCreate,
    WindowCollectionUpdate,
    WindowCollectionWithWindows,
)
from window_catalog.models.window import Window
from window_catalog.services.windows import to_window_read

logger = logging.getLogger(__name__)


def create_collection(session: Session, data: WindowCollectionCreate) -> WindowCollection:
    try:
        collection = WindowCollection.model_validate(data)
        session.add(collection)
        session.commit()
        session.refresh(collection)
        return collection
    except Exception:
        logger.exception("Window collection creation failed")
        session.rollback()
        raise


def get_collections(session: Session) -> List[WindowCollection]:
    try:
        return list(session.exec(select(WindowCollection)).all())
    except Exception:
        logger.exception("Failed to fetch window collections")
        raise


def get_collection_by_id(session: Session, collection_id: int) -> Optional[WindowCollectionWithWindows]:
    """Fetch a collection together with all of its windows.

    Two plain queries rather than a left join: the parent first, then its
    children. A collection without windows gets an empty list.
    """
    try:
        collection = session.get(WindowCollection, collection_id)
        if collection is None:
            return None

        windows = session.exec(select(Window).where(Window.collection_id == collection_id)).all()
        return WindowCollectionWithWindows(
            id=collection.id,
            name=collection.name,
            description=collection.description,
            main_image_url=collection.main_image_url,
            brand_name=collection.brand_name,
            created_at=collection.created_at,
            windows=[to_window_read(window) for window in windows],
        )
    except Exception:
        logger.exception("Get window collection by id failed", extra={"collection_id": collection_id})
        raise


def update_collection(session: Session, data: WindowCollectionUpdate) -> Optional[WindowCollection]:
    """Apply the supplied fields; an update carrying only the id returns the record as is."""
    try:
        collection = session.get(WindowCollection, data.id)
        if collection is None:
            return None

        changes = data.model_dump(exclude_unset=True, exclude={"id"})
        if not changes:
            return collection

        for field, value in changes.items():
            setattr(collection, field, value)

        session.add(collection)
        session.commit()
        session.refresh(collection)
        return collection
    except Exception:
        logger.exception("Window collection update failed", extra={"collection_id": data.id})
        session.rollback()
        raise


def delete_collection(session: Session, collection_id: int) -> bool:
    """Delete a collection; its windows go with it through ON DELETE CASCADE."""
    try:
        result = session.execute(delete(WindowCollection).where(WindowCollection.id == collection_id))
        session.commit()
        return result.rowcount > 0
    except Exception:
        logger.exception("Window collection deletion failed", extra={"collection_id": collection_id})
        session.rollback()
        raise
