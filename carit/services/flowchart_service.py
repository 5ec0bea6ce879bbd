# carit/services/flowchart_service.py
"""
Bounded flowchart history embedded in the user document (oldest first).
Appending past MAX_FLOWCHARTS evicts the oldest entries. Writes run through
user_service.modify_user, so two concurrent appends both land instead of one being lost.
"""

from sqlalchemy.orm import Session

from carit.config import settings
from carit.exceptions import IndexOutOfRangeError, InvalidArgumentError, NoFlowchartsError
from carit.models.user import User
from carit.services.user_service import get_user, modify_user
from carit.utils.logger import get_logger

logger = get_logger(__name__)


def _is_missing(value) -> bool:
    # An empty Q&A list is a real session with no follow-up questions
    if isinstance(value, list):
        return False
    return not value


def check_flowchart_context(user_id: str, vehicle, issues, responses) -> None:
    """Reject a save that is bound to fail before anything expensive runs."""
    if not user_id or not vehicle or not issues or _is_missing(responses):
        logger.info("[Flowcharts] append: missing required fields")
        raise InvalidArgumentError()


def append_flowchart(db: Session, user_id: str, flowchart, vehicle, issues, responses) -> dict:
    check_flowchart_context(user_id, vehicle, issues, responses)
    if not flowchart:
        logger.info("[Flowcharts] append: missing flowchart")
        raise InvalidArgumentError()

    record = {"flowchart": flowchart, "vehicle": vehicle, "issues": issues, "responses": responses}
    limit = settings.MAX_FLOWCHARTS

    def push(user: User) -> int:
        history = list(user.flowcharts or [])
        evicted = max(0, len(history) + 1 - limit)
        user.flowcharts = history[evicted:] + [record]
        return evicted

    evicted = modify_user(db, user_id, push)
    if evicted:
        logger.info(f"[Flowcharts] {user_id}: evicted {evicted} oldest to stay within {limit}")
    logger.info(f"[Flowcharts] Saved flowchart for {user_id}")
    return record


def list_flowcharts(db: Session, user_id: str) -> list:
    user = get_user(db, user_id)
    if user is None:
        return []
    return list(user.flowcharts or [])


def _parse_index(index) -> int:
    if index is None or index == "" or isinstance(index, bool):
        raise InvalidArgumentError()
    try:
        return int(index)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"Invalid index: {index!r}") from None


def delete_flowchart(db: Session, user_id: str, index) -> None:
    if not user_id:
        raise InvalidArgumentError()
    index = _parse_index(index)

    if get_user(db, user_id) is None:
        logger.info(f"[Flowcharts] delete: no user {user_id}")
        raise NoFlowchartsError()

    def remove(user: User) -> None:
        history = user.flowcharts
        if not isinstance(history, list):
            raise NoFlowchartsError()
        if index < 0 or index >= len(history):
            logger.info(f"[Flowcharts] delete: index {index} out of range for {user_id}")
            raise IndexOutOfRangeError()
        user.flowcharts = history[:index] + history[index + 1:]

    modify_user(db, user_id, remove)
    logger.info(f"[Flowcharts] Deleted flowchart {index} for {user_id}")
