"""In-memory registry of task categories (process-wide, read-mostly)."""

import threading
from dataclasses import dataclass

CATEGORY_TITLES: dict[str, str] = {
    "user-guidance": "User Guidance",
    "password-reset": "Password Reset",
    "incident-solving": "Incident Solving",
    "request-solving": "Request Solving",
    "faq": "FAQ",
    "sla-monitoring": "SLA Monitoring",
}


@dataclass(frozen=True)
class Category:
    id: str
    title: str


def default_title(key: str) -> str:
    return CATEGORY_TITLES.get(key) or key.replace("-", " ").title()


class CategoryRegistry:
    """Ordered set of category keys guarded by a lock."""

    def __init__(self, keys: list[str] | tuple[str, ...] = ()) -> None:
        self._lock = threading.Lock()
        self._categories: dict[str, Category] = {}
        for key in keys:
            self._categories[key] = Category(id=key, title=default_title(key))

    def all(self) -> list[Category]:
        with self._lock:
            return list(self._categories.values())

    def contains(self, key: str | None) -> bool:
        if not key:
            return False
        with self._lock:
            return key in self._categories

    def add(self, key: str, title: str | None = None) -> Category | None:
        """Register a category. Returns None if the key already exists."""
        with self._lock:
            if key in self._categories:
                return None
            category = Category(id=key, title=title or default_title(key))
            self._categories[key] = category
            return category

    def remove(self, key: str) -> bool:
        with self._lock:
            return self._categories.pop(key, None) is not None

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains(key)
