"""
View invalidation topics.

Mutations publish named topics ("projects-list", "project-detail:<id>", ...)
after they commit. Presentation consumers either subscribe to callbacks or
poll topic versions and refetch whatever moved.
"""

import threading
from typing import Callable, Dict, Iterable, List, Tuple

from app.core.logging import get_logger

logger = get_logger(__name__)

ADMIN_DASHBOARD = "admin-dashboard"
CLIENT_DASHBOARD = "client-dashboard"
PROJECTS_LIST = "projects-list"
INVOICES_LIST = "invoices-list"
USERS_LIST = "users-list"


def project_detail(project_id) -> str:
    """Topic for a single project's detail view."""
    return f"project-detail:{project_id}"


Subscriber = Callable[[str], None]


class InvalidationBus:
    """In-process topic publisher with per-topic versions."""

    def __init__(self):
        self._lock = threading.Lock()
        self._versions: Dict[str, int] = {}
        self._subscribers: List[Tuple[str, Subscriber]] = []

    def subscribe(self, pattern: str, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for a topic.

        ``pattern`` is an exact topic or a prefix ending in ``*``
        (``"project-detail:*"``). Returns a function that unsubscribes.
        """
        entry = (pattern, callback)
        with self._lock:
            self._subscribers.append(entry)

        def unsubscribe() -> None:
            with self._lock:
                if entry in self._subscribers:
                    self._subscribers.remove(entry)

        return unsubscribe

    def publish(self, *topics: str) -> None:
        """Bump the version of each topic and notify matching subscribers."""
        unique = list(dict.fromkeys(topics))
        with self._lock:
            for topic in unique:
                self._versions[topic] = self._versions.get(topic, 0) + 1
            subscribers = list(self._subscribers)

        logger.debug("Published invalidation topics", extra={"topics": unique})

        for topic in unique:
            for pattern, callback in subscribers:
                if not _matches(pattern, topic):
                    continue
                try:
                    callback(topic)
                except Exception:
                    # A broken view must not undo a committed mutation
                    logger.exception(
                        "Invalidation subscriber failed",
                        extra={"topic": topic, "pattern": pattern},
                    )

    def retire(self, *topics: str) -> None:
        """
        Forget the versions of topics that will never be published again.

        A poller holding an older version sees the topic fall back to 0 and refetches.
        """
        with self._lock:
            for topic in topics:
                self._versions.pop(topic, None)

    def version(self, topic: str) -> int:
        with self._lock:
            return self._versions.get(topic, 0)

    def versions(self, topics: Iterable[str] = ()) -> Dict[str, int]:
        """Snapshot of topic versions; all known topics when none are named."""
        with self._lock:
            if not topics:
                return dict(self._versions)
            return {topic: self._versions.get(topic, 0) for topic in topics}


def _matches(pattern: str, topic: str) -> bool:
    if pattern.endswith("*"):
        return topic.startswith(pattern[:-1])
    return pattern == topic
