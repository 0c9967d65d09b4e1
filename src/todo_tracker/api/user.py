"""Owner identity for incoming requests."""

from todo_tracker.config import get_settings


def get_owner_id() -> str:
    """Every record is scoped to the single configured owner (``DEFAULT_USER_ID``)."""
    return get_settings().default_user_id
