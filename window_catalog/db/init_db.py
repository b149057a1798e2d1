import logging

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

# Import models so they are registered with SQLModel.metadata
from window_catalog.models.collection import WindowCollection  # noqa: F401
from window_catalog.models.window import Window  # noqa: F401

logger = logging.getLogger(__name__)


def init_db(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)
    logger.info("Catalog tables ready", extra={"tables": sorted(SQLModel.metadata.tables)})
