"""Tests for status presentation tables"""
import pytest

from church_review.domain.enums import ChurchStatus
from church_review.engine import presentation
from church_review.engine.presentation import (
    get_status_info, get_status_badge_classes, get_status_icon, get_action_label
)


@pytest.mark.parametrize("status", list(ChurchStatus))
def test_every_status_has_a_rendering(status):
    info = get_status_info(status)
    assert info.label
    assert info.color
    assert info.description
    assert get_status_badge_classes(status).startswith(f"bg-{info.color}-")
    assert get_status_icon(status)
    assert get_action_label(status)


def test_published_wording():
    info = get_status_info(ChurchStatus.APPROVED)
    assert info.label == "Published"
    assert info.color == "green"
    assert get_status_icon(ChurchStatus.APPROVED) == "CheckCircle2"


def test_lookup_accepts_raw_values():
    assert get_status_info("heritage_review").label == "Heritage Review"
    assert get_action_label("approved") == "Approve & Publish"


def test_unknown_value_raises():
    with pytest.raises(ValueError):
        get_status_info("archived")


def test_missing_table_entry_is_detected():
    with pytest.raises(RuntimeError, match="heritage_review"):
        presentation._ensure_exhaustive(
            "STATUS_ICONS",
            {ChurchStatus.PENDING: "Clock", ChurchStatus.APPROVED: "CheckCircle2"},
        )
