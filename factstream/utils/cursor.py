"""Opaque pagination cursors over (created_at, id) keys."""
import base64
import json
from datetime import datetime, timezone


def as_utc(dt):
    """Treat naive datetimes (SQLite round-trips) as UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def encode_cursor(created_at, item_id):
    payload = json.dumps({'t': as_utc(created_at).isoformat(), 'id': item_id})
    return base64.urlsafe_b64encode(payload.encode('utf-8')).decode('ascii')


def decode_cursor(cursor):
    """Return (created_at, id). Raises ValueError on anything malformed."""
    try:
        raw = base64.urlsafe_b64decode(cursor.encode('ascii'))
        payload = json.loads(raw.decode('utf-8'))
        created_at = datetime.fromisoformat(payload['t'])
        item_id = str(payload['id'])
    except (AttributeError, KeyError, TypeError, UnicodeError, ValueError) as e:
        raise ValueError(f"Malformed cursor: {cursor!r}") from e
    return as_utc(created_at), item_id
