"""
Pytest Configuration and Fixtures

In-memory stand-ins for the persistence, audit and notification ports, plus
one actor per role and a registry/state machine wired to them.
"""

import asyncio
from datetime import datetime
from typing import Dict, List, Optional

import pytest

from church_review.domain.models import Actor, AuditEntry, Church
from church_review.domain.enums import ChurchStatus, Role
from church_review.engine.registry import TransitionRegistry
from church_review.engine.state_machine import WorkflowStateMachine
from church_review.services.church_review_service import ChurchReviewService


class InMemoryChurchStore:
    """ChurchStatusStore + church lookups backed by a dict"""

    def __init__(self):
        self.churches: Dict[str, Church] = {}
        self.commit_calls = 0
        self.fail_commits = False
        self.commit_delay = 0.0

    def add(self, church: Church) -> Church:
        self.churches[church.church_id] = church
        return church

    async def create_church(self, church: Church) -> Church:
        church = church.model_copy(update={"status": ChurchStatus.PENDING})
        return self.add(church)

    async def get_church(self, church_id: str) -> Optional[Church]:
        return self.churches.get(church_id)

    async def commit_status(
        self,
        church_id: str,
        expected_status: ChurchStatus,
        new_status: ChurchStatus,
        reviewed_by: str,
        note: Optional[str],
        changed_at: datetime,
    ) -> bool:
        self.commit_calls += 1
        if self.fail_commits:
            raise ConnectionError("document store unavailable")
        if self.commit_delay:
            await asyncio.sleep(self.commit_delay)
        church = self.churches.get(church_id)
        if church is None or church.status != expected_status:
            return False
        self.churches[church_id] = church.model_copy(update={
            "status": new_status,
            "last_reviewed_by": reviewed_by,
            "last_review_note": note,
            "last_status_change": changed_at,
            "updated_at": changed_at,
        })
        return True


class InMemoryAuditTrail:
    """AuditTrailPort that keeps entries in a list"""

    def __init__(self):
        self.entries: List[AuditEntry] = []
        self.append_calls = 0
        self.fail = False

    async def append(self, entry: AuditEntry) -> None:
        self.append_calls += 1
        if self.fail:
            raise RuntimeError("audit sink offline")
        self.entries.append(entry)

    async def list_for_church(
        self,
        church_id: str,
        skip: int = 0,
        limit: int = 100,
        since: Optional[datetime] = None
    ) -> List[AuditEntry]:
        matching = [
            e for e in reversed(self.entries)
            if e.church_id == church_id and (since is None or e.timestamp >= since)
        ]
        return matching[skip:skip + limit]


class RecordingNotifier:
    """NotificationPort that records calls"""

    def __init__(self):
        self.calls = []
        self.fail = False

    async def notify(self, from_status, to_status, church, actor, note=None) -> None:
        if self.fail:
            raise RuntimeError("outbox unavailable")
        self.calls.append((from_status, to_status, church.church_id, actor.uid, note))


def make_actor(role: Role, uid: Optional[str] = None, diocese: str = "tagbilaran") -> Actor:
    uid = uid or f"{role.value}-1"
    return Actor(
        uid=uid,
        email=f"{uid.replace('_', '.')}@bohol-diocese.org",
        name=role.value.replace("_", " ").title(),
        role=role,
        diocese=diocese,
    )


def make_church(church_id: str = "CHR-1", status: ChurchStatus = ChurchStatus.PENDING, **kwargs) -> Church:
    return Church(
        church_id=church_id,
        name=kwargs.pop("name", "St. Joseph the Worker Parish"),
        diocese=kwargs.pop("diocese", "tagbilaran"),
        status=status,
        **kwargs,
    )


@pytest.fixture
def parish_secretary() -> Actor:
    return make_actor(Role.PARISH_SECRETARY)


@pytest.fixture
def chancery() -> Actor:
    return make_actor(Role.CHANCERY_OFFICE)


@pytest.fixture
def museum() -> Actor:
    return make_actor(Role.MUSEUM_RESEARCHER)


@pytest.fixture
def registry() -> TransitionRegistry:
    return TransitionRegistry.default()


@pytest.fixture
def store() -> InMemoryChurchStore:
    return InMemoryChurchStore()


@pytest.fixture
def audit() -> InMemoryAuditTrail:
    return InMemoryAuditTrail()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def state_machine(registry, store, audit) -> WorkflowStateMachine:
    return WorkflowStateMachine(registry=registry, store=store, audit_sink=audit)


@pytest.fixture
def review_service(state_machine, store, audit, notifier) -> ChurchReviewService:
    return ChurchReviewService(
        state_machine=state_machine,
        church_repo=store,
        audit_repo=audit,
        notifier=notifier,
    )
