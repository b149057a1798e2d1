import pytest
from pydantic import ValidationError
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from conftest import make_collection, make_window
from window_catalog.core.exceptions import CollectionNotFoundError
from window_catalog.models.collection import WindowCollection
from window_catalog.models.window import Window, WindowCreate, WindowUpdate
from window_catalog.services import windows

GALLERY = ["https://example.com/g1.jpg", "https://example.com/g2.jpg", "https://example.com/g3.jpg"]


def window_input(collection_id: int, **overrides) -> WindowCreate:
    values = {
        "collection_id": collection_id,
        "price": 1999.99,
        "description": "Triple-glazed tilt and turn",
        "main_image_url": "https://example.com/tilt.jpg",
        "gallery_image_urls": GALLERY,
    }
    values.update(overrides)
    return WindowCreate(**values)


def test_create_window_coerces_price_and_gallery(session):
    collection = make_collection(session)

    created = windows.create_window(session, window_input(collection.id))

    assert created.id > 0
    assert created.collection_id == collection.id
    assert isinstance(created.price, float)
    assert created.price == 1999.99
    assert created.gallery_image_urls == GALLERY
    assert created.description == "Triple-glazed tilt and turn"

    with Session(session.get_bind()) as verify_session:
        stored = verify_session.get(Window, created.id)
        assert stored.price == "1999.99"
        assert stored.gallery_image_urls.startswith("[")


def test_create_window_round_trips_through_listing(session):
    collection = make_collection(session)
    created = windows.create_window(session, window_input(collection.id))

    listed = windows.get_windows_by_collection(session, collection.id)

    assert len(listed) == 1
    assert listed[0].id == created.id
    assert listed[0].price == 1999.99
    assert listed[0].gallery_image_urls == GALLERY


def test_create_window_with_empty_gallery(session):
    collection = make_collection(session)

    created = windows.create_window(session, window_input(collection.id, gallery_image_urls=[]))
    listed = windows.get_windows_by_collection(session, collection.id)

    assert created.gallery_image_urls == []
    assert listed[0].gallery_image_urls == []


def test_create_window_gallery_defaults_to_empty():
    data = WindowCreate(
        collection_id=1,
        price=10,
        description="Basic",
        main_image_url="https://example.com/basic.jpg",
    )
    assert data.gallery_image_urls == []


def test_create_window_for_missing_collection_raises(session):
    with pytest.raises(CollectionNotFoundError) as excinfo:
        windows.create_window(session, window_input(4242))

    assert "4242" in str(excinfo.value)
    assert excinfo.value.collection_id == 4242
    assert session.exec(select(Window)).all() == []


def test_create_window_when_collection_vanishes_before_insert(session, monkeypatch):
    collection = make_collection(session)
    collection_id = collection.id
    real_get = session.get

    def get_then_delete_parent(entity, ident, **kwargs):
        found = real_get(entity, ident, **kwargs)
        session.execute(delete(WindowCollection).where(WindowCollection.id == ident))
        session.commit()
        return found

    monkeypatch.setattr(session, "get", get_then_delete_parent)

    with pytest.raises(IntegrityError):
        windows.create_window(session, window_input(collection_id))

    monkeypatch.undo()
    with Session(session.get_bind()) as verify_session:
        assert verify_session.get(WindowCollection, collection_id) is None
        assert verify_session.exec(select(Window)).all() == []


@pytest.mark.parametrize(
    "overrides",
    [
        {"price": 0},
        {"price": -5},
        {"price": 0.001},
        {"price": float("inf")},
        {"price": 1e300},
        {"description": ""},
        {"main_image_url": "not-a-url"},
        {"gallery_image_urls": ["https://example.com/ok.jpg", "nope"]},
    ],
)
def test_window_input_rejects_invalid_fields(overrides):
    with pytest.raises(ValidationError):
        window_input(1, **overrides)


def test_get_windows_by_collection_filters_by_owner(session):
    collection = make_collection(session)
    other = make_collection(session, name="Other")
    make_window(session, collection.id, description="Mine")
    make_window(session, other.id, description="Theirs")

    listed = windows.get_windows_by_collection(session, collection.id)

    assert [window.description for window in listed] == ["Mine"]


def test_get_windows_by_collection_unknown_collection_is_empty(session):
    assert windows.get_windows_by_collection(session, 9999) == []


def test_get_windows_by_collection_tolerates_malformed_gallery(session):
    collection = make_collection(session)
    make_window(session, collection.id, gallery_image_urls="{broken")

    listed = windows.get_windows_by_collection(session, collection.id)

    assert listed[0].gallery_image_urls == []


def test_update_window_applies_only_supplied_fields(session):
    collection = make_collection(session)
    window = make_window(session, collection.id)

    updated = windows.update_window(session, WindowUpdate(id=window.id, price=399.99))

    assert updated is not None
    assert updated.price == 399.99
    assert updated.description == "Two-pane casement"
    assert updated.main_image_url == "https://example.com/window.jpg"
    assert updated.gallery_image_urls == ["https://example.com/g1.jpg", "https://example.com/g2.jpg"]


def test_update_window_replaces_gallery_and_collection(session):
    collection = make_collection(session)
    target = make_collection(session, name="Target")
    window = make_window(session, collection.id)

    updated = windows.update_window(
        session,
        WindowUpdate(id=window.id, collection_id=target.id, gallery_image_urls=["https://example.com/new.jpg"]),
    )

    assert updated.collection_id == target.id
    assert updated.gallery_image_urls == ["https://example.com/new.jpg"]
    assert windows.get_windows_by_collection(session, collection.id) == []


def test_update_window_with_only_id_returns_none(session):
    # Known quirk: update_collection returns the current record in this case
    collection = make_collection(session)
    window = make_window(session, collection.id)

    assert windows.update_window(session, WindowUpdate(id=window.id)) is None


def test_update_window_missing_returns_none(session):
    assert windows.update_window(session, WindowUpdate(id=9999, description="Ghost")) is None


def test_update_window_to_missing_collection_is_a_store_error(session):
    collection = make_collection(session)
    window = make_window(session, collection.id)

    with pytest.raises(IntegrityError):
        windows.update_window(session, WindowUpdate(id=window.id, collection_id=9999))

    with Session(session.get_bind()) as verify_session:
        assert verify_session.get(Window, window.id).collection_id == collection.id


def test_window_update_rejects_explicit_null():
    with pytest.raises(ValidationError):
        WindowUpdate(id=1, price=None)


def test_delete_window(session):
    collection = make_collection(session)
    window = make_window(session, collection.id)

    assert windows.delete_window(session, window.id) is True
    assert windows.delete_window(session, window.id) is False

    with Session(session.get_bind()) as verify_session:
        assert verify_session.get(Window, window.id) is None
