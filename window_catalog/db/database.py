from typing import Iterator

from fastapi import Request
from sqlmodel import Session


def get_session(request: Request) -> Iterator[Session]:
    """FastAPI dependency yielding a session from the store opened at startup."""
    yield from request.app.state.store.session()
