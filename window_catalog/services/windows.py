"""Data access for windows, the individual products inside a collection."""
import logging
from typing import List, Optional

from sqlalchemy import delete
from sqlmodel import Session, select

from window_catalog.core.exceptions import CollectionNotFoundError
from window_catalog.models.collection import WindowCollection
from window_catalog.models.window import Window, WindowCreate, WindowRead, WindowUpdate
from window_catalog.services.coercion import decode_gallery, encode_gallery, format_price, parse_price

logger = logging.getLogger(__name__)


def to_window_read(window: Window) -> WindowRead:
    """Reshape a stored row into the API shape (numeric price, list gallery)."""
    return WindowRead(
        id=window.id,
        collection_id=window.collection_id,
        price=parse_price(window.price),
        description=window.description,
        main_image_url=window.main_image_url,
        gallery_image_urls=decode_gallery(window.gallery_image_urls),
        created_at=window.created_at,
    )


def create_window(session: Session, data: WindowCreate) -> WindowRead:
    try:
        # Friendly error ahead of the foreign key; the constraint still guards
        # against the collection vanishing between this check and the insert.
        if session.get(WindowCollection, data.collection_id) is None:
            raise CollectionNotFoundError(data.collection_id)

        window = Window(
            collection_id=data.collection_id,
            price=format_price(data.price),
            description=data.description,
            main_image_url=data.main_image_url,
            gallery_image_urls=encode_gallery(data.gallery_image_urls),
        )
        session.add(window)
        session.commit()
        session.refresh(window)
        return to_window_read(window)
    except Exception:
        logger.exception("Window creation failed", extra={"collection_id": data.collection_id})
        session.rollback()
        raise


def get_windows_by_collection(session: Session, collection_id: int) -> List[WindowRead]:
    """All windows of a collection; an unknown collection simply has none."""
    try:
        windows = session.exec(select(Window).where(Window.collection_id == collection_id)).all()
        return [to_window_read(window) for window in windows]
    except Exception:
        logger.exception("Failed to get windows by collection", extra={"collection_id": collection_id})
        raise


def update_window(session: Session, data: WindowUpdate) -> Optional[WindowRead]:
    """Apply the supplied fields to a window.

    Returns None when the window does not exist and also when nothing but the
    id was supplied. Collection updates return the current record in the
    latter case; the difference is long-standing client-visible behaviour.
    """
    changes = data.model_dump(exclude_unset=True, exclude={"id"})
    if not changes:
        return None

    if "price" in changes:
        changes["price"] = format_price(changes["price"])
    if "gallery_image_urls" in changes:
        changes["gallery_image_urls"] = encode_gallery(changes["gallery_image_urls"])

    try:
        window = session.get(Window, data.id)
        if window is None:
            return None

        # A new collection_id is not pre-checked; the foreign key rejects dangling ids
        for field, value in changes.items():
            setattr(window, field, value)

        session.add(window)
        session.commit()
        session.refresh(window)
        return to_window_read(window)
    except Exception:
        logger.exception("Window update failed", extra={"window_id": data.id})
        session.rollback()
        raise


def delete_window(session: Session, window_id: int) -> bool:
    try:
        result = session.execute(delete(Window).where(Window.id == window_id))
        session.commit()
        return result.rowcount > 0
    except Exception:
        logger.exception("Window deletion failed", extra={"window_id": window_id})
        session.rollback()
        raise
