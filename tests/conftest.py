import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT_DIR))

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from window_catalog.api import rpc
from window_catalog.core.error_handlers import register_rpc_error_handlers
from window_catalog.db.database import get_session
from window_catalog.db.engine import build_engine
from window_catalog.db.init_db import init_db
from window_catalog.models.collection import WindowCollection
from window_catalog.models.window import Window


@pytest.fixture(scope="session")
def engine():
    engine = build_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as session:
        yield session
        session.rollback()
        for table in reversed(SQLModel.metadata.sorted_tables):
            session.execute(table.delete())
        session.commit()


@pytest.fixture()
def client(engine, session):
    # Depends on session so tables are cleared after every endpoint test
    app = FastAPI()
    app.include_router(rpc.router, prefix="/api/v1/rpc", tags=["rpc"])
    register_rpc_error_handlers(app)

    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    return TestClient(app)


def make_collection(session: Session, **overrides) -> WindowCollection:
    values = {
        "name": "Classic Casements",
        "description": "Timber casement windows",
        "main_image_url": "https://example.com/casement.jpg",
        "brand_name": "Acme Windows",
    }
    values.update(overrides)
    collection = WindowCollection(**values)
    session.add(collection)
    session.commit()
    session.refresh(collection)
    return collection


def make_window(session: Session, collection_id: int, **overrides) -> Window:
    values = {
        "collection_id": collection_id,
        "price": "299.99",
        "description": "Two-pane casement",
        "main_image_url": "https://example.com/window.jpg",
        "gallery_image_urls": '["https://example.com/g1.jpg", "https://example.com/g2.jpg"]',
    }
    values.update(overrides)
    window = Window(**values)
    session.add(window)
    session.commit()
    session.refresh(window)
    return window
