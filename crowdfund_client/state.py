"""Process-local UI state and form helpers for the campaign client."""
import math
import re
from typing import Any, Dict, List, Optional

PAGE_SIZE = 9
MAX_IMAGE_BYTES = 5 * 1024 * 1024
EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")


def progress_percentage(current: float, target: float) -> float:
    """Funded share for progress bars, capped at 100."""
    if not target:
        return 0.0
    return min(current / target * 100, 100.0)


def format_currency(amount: float) -> str:
    """Format an amount in rupees with Indian digit grouping, e.g. ₹12,34,567.50"""
    sign = "-" if amount < 0 else ""
    whole, fraction = f"{abs(amount):.2f}".split(".")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])
    return f"{sign}₹{whole}.{fraction}"


def add_tag(tags: List[str], tag: str) -> List[str]:
    name = tag.strip()
    if not name or name in tags:
        return list(tags)
    return list(tags) + [name]


def remove_tag(tags: List[str], tag: str) -> List[str]:
    return [t for t in tags if t != tag]


def validate_event_form(title: str, description: str, amount_to_raise: Any,
                        image_size: Optional[int] = None) -> Optional[str]:
    """Return the first problem with the campaign form, or None when it can be submitted."""
    if image_size is not None and image_size > MAX_IMAGE_BYTES:
        return "Image size should be less than 5MB"
    if not (title or "").strip():
        return "Title is required"
    if not (description or "").strip():
        return "Description is required"
    try:
        amount = float(amount_to_raise)
    except (TypeError, ValueError):
        return "Please enter a valid amount to raise"
    if not math.isfinite(amount) or amount <= 0:
        return "Please enter a valid amount to raise"
    return None


def validate_registration(first_name: str, last_name: str, email: str, password: str) -> Dict[str, str]:
    errors = {}
    if not (first_name or "").strip():
        errors["firstName"] = "First name is required"
    if not (last_name or "").strip():
        errors["lastName"] = "Last name is required"
    if not (email or "").strip():
        errors["email"] = "Email is required"
    elif not EMAIL_PATTERN.search(email):
        errors["email"] = "Email is invalid"
    if not password:
        errors["password"] = "Password is required"
    elif len(password) < 6:
        errors["password"] = "Password must be at least 6 characters"
    return errors


class ClientState:
    """
    Session identity, campaign list and pagination for one UI session.

    The identity is only known after an explicit login in this session; the
    client does not ask the server for an existing session on start-up.
    """

    def __init__(self):
        self.user: Optional[Dict[str, Any]] = None
        self.events: List[Dict[str, Any]] = []
        self.current_page = 1
        self.total_pages = 1
        self.total = 0
        self.tags = ""
        self.is_active = True
        self.search = ""

    @property
    def logged_in(self) -> bool:
        return self.user is not None

    def set_user(self, user: Optional[Dict[str, Any]]) -> None:
        self.user = user

    def clear_user(self) -> None:
        self.user = None

    def set_filters(self, tags: Optional[str] = None, is_active: Optional[bool] = None,
                    search: Optional[str] = None) -> None:
        """Change filters; a server-side filter change restarts at page 1."""
        changed = False
        if tags is not None and tags != self.tags:
            self.tags = tags
            changed = True
        if is_active is not None and is_active != self.is_active:
            self.is_active = is_active
            changed = True
        if search is not None:
            self.search = search
        if changed:
            self.current_page = 1

    def query_params(self) -> Dict[str, Any]:
        params = {"page": self.current_page, "limit": PAGE_SIZE, "is_active": self.is_active}
        if self.tags.strip():
            params["tags"] = self.tags.strip()
        return params

    def apply_page(self, data: Dict[str, Any]) -> None:
        """Store a ``GET /api/events`` response."""
        self.events = list(data.get("events", []))
        self.current_page = data.get("currentPage", self.current_page)
        self.total_pages = max(data.get("totalPages", 1), 1)
        self.total = data.get("total", len(self.events))

    def next_page(self) -> bool:
        if self.current_page >= self.total_pages:
            return False
        self.current_page += 1
        return True

    def prev_page(self) -> bool:
        if self.current_page <= 1:
            return False
        self.current_page -= 1
        return True

    def visible_events(self) -> List[Dict[str, Any]]:
        """Events on the current page matching the local search text."""
        needle = self.search.strip().lower()
        if not needle:
            return list(self.events)
        return [
            event for event in self.events
            if needle in event.get("title", "").lower() or needle in event.get("description", "").lower()
        ]

    def record_contribution(self, event_id: int, current_amount: float) -> None:
        for event in self.events:
            if event.get("id") == event_id:
                event["currentAmount"] = current_amount

    def remove_event(self, event_id: int) -> None:
        self.events = [event for event in self.events if event.get("id") != event_id]
