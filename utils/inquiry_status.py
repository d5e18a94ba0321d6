from __future__ import annotations

from typing import Dict, FrozenSet, Iterable

from models import INQUIRY_STATUSES

PIPELINE = (
    "pending",
    "contacted",
    "enrolled",
    "books_given",
    "exam_completed",
    "certificate_issued",
)
CANCELLED = "cancelled"
TERMINAL = frozenset({"certificate_issued", CANCELLED})
# statuses a new inquiry may be recorded with; later stages need an enrollment
INITIAL = frozenset({"pending", "contacted", CANCELLED})


class InvalidStatusTransition(Exception):
    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move inquiry from '{current}' to '{requested}'")


def _build_table() -> Dict[str, FrozenSet[str]]:
    table: Dict[str, FrozenSet[str]] = {}
    for idx, status in enumerate(PIPELINE):
        if status in TERMINAL:
            table[status] = frozenset()
        else:
            # forward moves may skip stages (conversion goes pending -> enrolled)
            table[status] = frozenset(PIPELINE[idx + 1:]) | {CANCELLED}
    table[CANCELLED] = frozenset()
    return table


TRANSITIONS = _build_table()


def is_valid_status(status: str) -> bool:
    return status in INQUIRY_STATUSES


def can_transition(current: str, requested: str) -> bool:
    if requested == current:
        return True
    return requested in TRANSITIONS.get(current, frozenset())


def check_transition(current: str, requested: str) -> None:
    if not is_valid_status(requested):
        raise ValueError(f"Unknown inquiry status: {requested!r}")
    if not can_transition(current, requested):
        raise InvalidStatusTransition(current, requested)


def apply_status(inquiry, requested: str) -> bool:
    """Move ``inquiry`` to ``requested``. Returns False when it was already there."""
    check_transition(inquiry.status, requested)
    if inquiry.status == requested:
        return False
    inquiry.status = requested
    return True


def apply_bulk_status(inquiries: Iterable, requested: str) -> int:
    """Validate every inquiry first so a single illegal move changes nothing."""
    rows = list(inquiries)
    for inquiry in rows:
        check_transition(inquiry.status, requested)
    return sum(1 for inquiry in rows if apply_status(inquiry, requested))


def check_advance(current: str, requested: str) -> None:
    """Like :func:`check_transition`, but staying on ``current`` is refused."""
    check_transition(current, requested)
    if current == requested:
        raise InvalidStatusTransition(current, requested)
