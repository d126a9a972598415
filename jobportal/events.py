"""
Domain events raised by request handlers and handled off the request path.

Handlers take ``(session_factory, event)``; they run as FastAPI background
tasks after the response is sent, or inline when no ``BackgroundTasks`` is
available (scripts, direct service calls).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from fastapi import BackgroundTasks, Depends
from loguru import logger
from sqlalchemy.orm import sessionmaker

from .database import get_session_factory
from .notifications import notify_workers_of_job


@dataclass(frozen=True)
class JobPosted:
    job_id: int
    employer_id: int
    title: str
    city: str


HANDLERS: dict[type, list[Callable]] = {
    JobPosted: [notify_workers_of_job],
}


class EventDispatcher:
    def __init__(self, session_factory: sessionmaker, background: BackgroundTasks | None = None):
        self.session_factory = session_factory
        self.background = background

    def publish(self, event) -> None:
        handlers = HANDLERS.get(type(event), [])
        logger.debug(f"publishing {event!r} to {len(handlers)} handler(s)")
        for handler in handlers:
            if self.background is not None:
                self.background.add_task(handler, self.session_factory, event)
            else:
                handler(self.session_factory, event)


def get_dispatcher(
    background: BackgroundTasks, session_factory: sessionmaker = Depends(get_session_factory)
) -> EventDispatcher:
    return EventDispatcher(session_factory, background)
