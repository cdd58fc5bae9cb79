import random
import string
import time

from shared.logging.logger import get_logger
from widget.core.config import settings
from widget.storage import KeyValueStorage

logger = get_logger("widget.session")

_BASE36 = string.digits + string.ascii_lowercase


def generate_session_id() -> str:
    """``vh-<epoch ms>-<9 base-36 chars>``."""
    suffix = "".join(random.choices(_BASE36, k=9))
    return f"vh-{int(time.time() * 1000)}-{suffix}"


def get_or_create_session_id(
    storage: KeyValueStorage | None, key: str = settings.widget_session_storage_key
) -> str:
    """Return the persisted session id, creating it on first use.

    Never raises: when storage is missing or refuses access an ephemeral id
    is returned instead, so every call may yield a new one.
    """
    if storage is None:
        return generate_session_id()
    try:
        session_id = storage.get_item(key)
        if not session_id:
            session_id = generate_session_id()
            storage.set_item(key, session_id)
        return session_id
    except Exception as e:
        logger.debug("session_storage_unavailable", extra={"error": str(e)})
        return generate_session_id()
