from types import SimpleNamespace

import pytest

from utils.inquiry_status import (
    TRANSITIONS,
    InvalidStatusTransition,
    apply_bulk_status,
    apply_status,
    can_transition,
    check_transition,
    is_valid_status,
)


def test_every_known_status_has_a_row():
    for status in ("pending", "contacted", "enrolled", "books_given",
                   "exam_completed", "certificate_issued", "cancelled"):
        assert is_valid_status(status)
        assert status in TRANSITIONS
    assert not is_valid_status("archived")


def test_forward_moves_and_cancellation():
    assert can_transition("pending", "contacted")
    assert can_transition("pending", "enrolled")
    assert can_transition("enrolled", "books_given")
    assert can_transition("exam_completed", "certificate_issued")
    assert can_transition("contacted", "cancelled")
    assert can_transition("pending", "pending")


def test_backward_and_terminal_moves_are_rejected():
    assert not can_transition("enrolled", "pending")
    assert not can_transition("certificate_issued", "cancelled")
    assert not can_transition("cancelled", "pending")


def test_check_transition_errors():
    with pytest.raises(InvalidStatusTransition) as exc:
        check_transition("cancelled", "contacted")
    assert exc.value.current == "cancelled"
    assert exc.value.requested == "contacted"
    with pytest.raises(ValueError):
        check_transition("pending", "archived")


def test_apply_status_reports_change():
    inquiry = SimpleNamespace(status="pending")
    assert apply_status(inquiry, "contacted") is True
    assert inquiry.status == "contacted"
    assert apply_status(inquiry, "contacted") is False


def test_bulk_update_is_all_or_nothing():
    rows = [SimpleNamespace(status="pending"), SimpleNamespace(status="cancelled")]
    with pytest.raises(InvalidStatusTransition):
        apply_bulk_status(rows, "contacted")
    assert [r.status for r in rows] == ["pending", "cancelled"]

    rows = [SimpleNamespace(status="pending"), SimpleNamespace(status="contacted")]
    assert apply_bulk_status(rows, "contacted") == 1
    assert [r.status for r in rows] == ["contacted", "contacted"]
