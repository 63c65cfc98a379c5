"""Tests for the church review service and heritage detection"""
import pytest

from church_review.domain.models import TransitionContext
from church_review.domain.enums import (
    ChurchStatus, Role, TransitionFailure, HeritageClassification
)
from church_review.services.church_review_service import AUTO_FORWARD_NOTE
from church_review.services.heritage import (
    should_require_heritage_review, suggest_heritage_classification
)

from tests.conftest import make_church

PENDING = ChurchStatus.PENDING
HERITAGE = ChurchStatus.HERITAGE_REVIEW
APPROVED = ChurchStatus.APPROVED


# =============================================================================
# update_church_status
# =============================================================================

@pytest.mark.asyncio
async def test_unknown_church_is_reported(review_service, store, chancery):
    result = await review_service.update_church_status("CHR-404", APPROVED, chancery)

    assert result.success is False
    assert result.failure == TransitionFailure.CHURCH_NOT_FOUND
    assert store.commit_calls == 0


@pytest.mark.asyncio
async def test_from_status_is_read_from_store(review_service, store, audit, museum):
    store.add(make_church(status=HERITAGE))

    result = await review_service.update_church_status("CHR-1", APPROVED, museum)

    assert result.success is True
    assert result.from_status == HERITAGE
    assert audit.entries[0].from_status == HERITAGE
    assert audit.entries[0].metadata == {"isAutomated": False}


@pytest.mark.asyncio
async def test_notifier_called_after_success(review_service, store, notifier, chancery):
    store.add(make_church(status=APPROVED))

    result = await review_service.update_church_status(
        "CHR-1", HERITAGE, chancery, note="bell tower restoration"
    )

    assert result.success is True
    assert notifier.calls == [
        (APPROVED, HERITAGE, "CHR-1", chancery.uid, "bell tower restoration")
    ]


@pytest.mark.asyncio
async def test_notifier_not_called_on_rejection(review_service, store, notifier, parish_secretary):
    store.add(make_church())

    result = await review_service.update_church_status("CHR-1", APPROVED, parish_secretary)

    assert result.failure == TransitionFailure.UNAUTHORIZED_ROLE
    assert notifier.calls == []


@pytest.mark.asyncio
async def test_notifier_failure_does_not_fail_transition(review_service, store, notifier, chancery):
    store.add(make_church())
    notifier.fail = True

    result = await review_service.update_church_status("CHR-1", APPROVED, chancery)

    assert result.success is True
    assert store.churches["CHR-1"].status == APPROVED


@pytest.mark.asyncio
async def test_execute_transition_does_not_notify(review_service, store, notifier, chancery):
    store.add(make_church())
    context = TransitionContext(
        church_id="CHR-1", from_status=PENDING, to_status=APPROVED, actor=chancery
    )

    result = await review_service.execute_transition(context)

    assert result.success is True
    assert notifier.calls == []


# =============================================================================
# heritage auto-forward
# =============================================================================

@pytest.mark.asyncio
async def test_heritage_church_approval_is_forwarded(review_service, store, audit, chancery):
    store.add(make_church(founded_year=1784))

    result = await review_service.update_church_status_with_heritage_detection(
        "CHR-1", APPROVED, chancery, note="complete profile"
    )

    assert result.success is True
    assert result.auto_forwarded is True
    assert result.to_status == HERITAGE
    assert store.churches["CHR-1"].status == HERITAGE

    entry = audit.entries[0]
    assert entry.note == f"{AUTO_FORWARD_NOTE} complete profile"
    assert entry.metadata == {"isAutomated": False, "autoForwarded": True}


@pytest.mark.asyncio
async def test_plain_church_approval_is_not_forwarded(review_service, store, chancery):
    store.add(make_church(founded_year=1978))

    result = await review_service.update_church_status_with_heritage_detection(
        "CHR-1", APPROVED, chancery
    )

    assert result.success is True
    assert result.auto_forwarded is False
    assert store.churches["CHR-1"].status == APPROVED


@pytest.mark.asyncio
async def test_museum_approval_is_never_forwarded(review_service, store, museum):
    store.add(make_church(status=HERITAGE, classification=HeritageClassification.NCT))

    result = await review_service.update_church_status_with_heritage_detection(
        "CHR-1", APPROVED, museum
    )

    assert result.success is True
    assert result.auto_forwarded is False
    assert store.churches["CHR-1"].status == APPROVED


@pytest.mark.asyncio
async def test_detection_on_published_church_does_not_reopen(review_service, store, audit, chancery):
    store.add(make_church(status=APPROVED, has_historical_documents=True))

    result = await review_service.update_church_status_with_heritage_detection(
        "CHR-1", APPROVED, chancery
    )

    assert result.success is False
    assert result.failure == TransitionFailure.ILLEGAL_TRANSITION
    assert result.auto_forwarded is False
    assert store.churches["CHR-1"].status == APPROVED
    assert store.commit_calls == 0
    assert audit.entries == []


@pytest.mark.asyncio
async def test_detection_during_heritage_review_reports_wrong_role(review_service, store, chancery):
    store.add(make_church(status=HERITAGE, classification=HeritageClassification.ICP))

    result = await review_service.update_church_status_with_heritage_detection(
        "CHR-1", APPROVED, chancery
    )

    assert result.success is False
    assert result.failure == TransitionFailure.UNAUTHORIZED_ROLE
    assert (result.from_status, result.to_status) == (HERITAGE, APPROVED)
    assert store.churches["CHR-1"].status == HERITAGE


@pytest.mark.asyncio
async def test_detection_keeps_caller_metadata(review_service, store, audit, chancery):
    store.add(make_church(founded_year=1734))

    await review_service.update_church_status_with_heritage_detection(
        "CHR-1", APPROVED, chancery, metadata={"source": "bulk-import"}
    )

    assert audit.entries[0].metadata == {
        "source": "bulk-import", "autoForwarded": True, "isAutomated": False
    }


@pytest.mark.asyncio
async def test_reserved_metadata_keys_are_ignored(review_service, store, audit, chancery):
    store.add(make_church())

    result = await review_service.update_church_status(
        "CHR-1", APPROVED, chancery,
        metadata={"reviewerUid": "someone-else", "isAutomated": True, "autoForwarded": True},
    )

    assert result.success is True
    assert result.auto_forwarded is False
    assert store.churches["CHR-1"].last_reviewed_by == chancery.uid
    assert audit.entries[0].is_automated is False
    assert audit.entries[0].metadata == {"isAutomated": False}


@pytest.mark.parametrize("kwargs, expected", [
    ({}, False),
    ({"classification": HeritageClassification.ICP}, True),
    ({"classification": HeritageClassification.NON_HERITAGE}, False),
    ({"founded_year": 1899}, True),
    ({"founded_year": 1900}, False),
    ({"has_historical_documents": True}, True),
    ({"architectural_significance": True}, True),
])
def test_should_require_heritage_review(kwargs, expected):
    assert should_require_heritage_review(make_church(**kwargs)) is expected


def test_suggest_heritage_classification():
    assert suggest_heritage_classification(
        make_church(classification=HeritageClassification.NCT, founded_year=1600)
    ) == HeritageClassification.NCT
    assert suggest_heritage_classification(make_church(founded_year=1595)) == HeritageClassification.ICP
    assert suggest_heritage_classification(make_church()) == HeritageClassification.NON_HERITAGE


# =============================================================================
# queries and records
# =============================================================================

def test_get_next_actions_ignores_church_id(review_service):
    first = review_service.get_next_actions("CHR-1", PENDING, Role.CHANCERY_OFFICE)
    second = review_service.get_next_actions("CHR-2", PENDING, Role.CHANCERY_OFFICE)

    assert first == second
    assert len(first) == 2
    assert review_service.get_next_actions("CHR-1", APPROVED, Role.MUSEUM_RESEARCHER) == []


def test_is_transition_valid(review_service, chancery):
    context = TransitionContext(
        church_id="CHR-1", from_status=APPROVED, to_status=HERITAGE, actor=chancery, note="x"
    )
    assert review_service.is_transition_valid(context).valid is True


@pytest.mark.asyncio
async def test_create_church_always_starts_pending(review_service):
    church = await review_service.create_church(make_church(status=APPROVED))

    assert church.status == PENDING
    assert (await review_service.get_church("CHR-1")).status == PENDING


@pytest.mark.asyncio
async def test_audit_trail_newest_first(review_service, store, chancery, parish_secretary):
    store.add(make_church())
    await review_service.update_church_status("CHR-1", PENDING, parish_secretary)
    await review_service.update_church_status("CHR-1", APPROVED, chancery)

    trail = await review_service.get_audit_trail("CHR-1")

    assert [(e.from_status, e.to_status) for e in trail] == [(PENDING, APPROVED), (PENDING, PENDING)]
