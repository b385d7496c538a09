import json
import logging
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Session
from ..models.events import Event

logger = logging.getLogger(__name__)


def log_event(session: Session, event_type: str, description: str, metadata: Optional[dict] = None):
    """Add an event-log row to the session; the caller commits."""
    eid = f"EVT-{uuid.uuid4().hex}"
    e = Event(
        event_id=eid,
        event_type=event_type,
        description=description,
        event_date=datetime.utcnow(),
        metadata_json=json.dumps(metadata) if metadata else None,
    )
    session.add(e)
    logger.info("%s: %s", event_type, description)
    return e
