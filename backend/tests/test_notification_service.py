"""Tests for status change notification routing"""
from unittest.mock import AsyncMock

import pytest

from church_review.domain.enums import ChurchStatus, NotificationType, Role
from church_review.services.notification_service import NotificationService

from tests.conftest import make_church

PENDING = ChurchStatus.PENDING
HERITAGE = ChurchStatus.HERITAGE_REVIEW
APPROVED = ChurchStatus.APPROVED


@pytest.fixture
def outbox():
    repo = AsyncMock()
    repo.create_notifications.side_effect = lambda notifications: notifications
    return repo


@pytest.fixture
def service(outbox) -> NotificationService:
    return NotificationService(repo=outbox)


def _routing(notifications):
    return [(n.type, n.recipient_roles) for n in notifications]


def test_submission_goes_to_chancery(service, parish_secretary):
    notifications = service.build_notifications(PENDING, PENDING, make_church(), parish_secretary)
    assert _routing(notifications) == [(NotificationType.CHURCH_SUBMITTED, [Role.CHANCERY_OFFICE])]


@pytest.mark.parametrize("from_status", [PENDING, APPROVED])
def test_heritage_review_goes_to_museum(service, chancery, from_status):
    notifications = service.build_notifications(from_status, HERITAGE, make_church(), chancery)
    assert _routing(notifications) == [
        (NotificationType.HERITAGE_REVIEW_ASSIGNED, [Role.MUSEUM_RESEARCHER])
    ]


def test_heritage_validation_informs_chancery_and_parish(service, museum):
    notifications = service.build_notifications(HERITAGE, APPROVED, make_church(), museum)
    assert _routing(notifications) == [
        (NotificationType.HERITAGE_VALIDATED, [Role.CHANCERY_OFFICE]),
        (NotificationType.CHURCH_APPROVED, [Role.PARISH_SECRETARY]),
    ]


def test_notification_payload(service, chancery):
    church = make_church(name="Baclayon Church", diocese="tagbilaran")

    [notification] = service.build_notifications(PENDING, APPROVED, church, chancery, note="ok")

    assert notification.notification_id.startswith("NTF")
    assert notification.church_name == "Baclayon Church"
    assert notification.dioceses == ["tagbilaran"]
    assert notification.action_by.uid == chancery.uid
    assert notification.note == "ok"
    assert notification.read_by == []


def test_unrouted_transition_builds_nothing(service, chancery):
    assert service.build_notifications(HERITAGE, PENDING, make_church(), chancery) == []


@pytest.mark.asyncio
async def test_notify_writes_to_outbox(service, outbox, museum):
    await service.notify(HERITAGE, APPROVED, make_church(), museum)

    outbox.create_notifications.assert_awaited_once()
    [written] = outbox.create_notifications.await_args.args
    assert len(written) == 2


@pytest.mark.asyncio
async def test_notify_skips_outbox_when_no_route(service, outbox, chancery):
    await service.notify(APPROVED, PENDING, make_church(), chancery)

    outbox.create_notifications.assert_not_awaited()
