"""Transition Registry - Authoritative table of legal status moves"""
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ..domain.models import TransitionRule
from ..domain.enums import ChurchStatus, Role, GuardKind
from ..domain.errors import DuplicateTransitionRuleError
from ..utils.logger import get_logger

logger = get_logger(__name__)


CANONICAL_RULES: Tuple[TransitionRule, ...] = (
    TransitionRule(
        from_status=ChurchStatus.PENDING,
        to_status=ChurchStatus.PENDING,
        allowed_roles=frozenset({Role.PARISH_SECRETARY}),
        description="Submit church profile for initial review",
    ),
    TransitionRule(
        from_status=ChurchStatus.PENDING,
        to_status=ChurchStatus.APPROVED,
        allowed_roles=frozenset({Role.CHANCERY_OFFICE}),
        description="Approve church directly (non-heritage churches)",
    ),
    TransitionRule(
        from_status=ChurchStatus.PENDING,
        to_status=ChurchStatus.HERITAGE_REVIEW,
        allowed_roles=frozenset({Role.CHANCERY_OFFICE}),
        description="Forward to museum researcher for heritage validation",
    ),
    TransitionRule(
        from_status=ChurchStatus.HERITAGE_REVIEW,
        to_status=ChurchStatus.APPROVED,
        allowed_roles=frozenset({Role.MUSEUM_RESEARCHER}),
        description="Approve after heritage validation",
    ),
    TransitionRule(
        from_status=ChurchStatus.APPROVED,
        to_status=ChurchStatus.HERITAGE_REVIEW,
        allowed_roles=frozenset({Role.CHANCERY_OFFICE}),
        guard=GuardKind.NOTE_REQUIRED,
        description="Send published church for heritage re-evaluation (requires an explanation)",
    ),
)


class TransitionRegistry:
    """
    Immutable set of transition rules

    Built once at startup and passed explicitly to every consumer. Two rules
    sharing a (from, to, role) triple make the registry ambiguous, so
    construction fails instead of letting a lookup pick one at random.
    """

    def __init__(self, rules: Iterable[TransitionRule]):
        self._rules: Tuple[TransitionRule, ...] = tuple(rules)
        self._by_from: Dict[ChurchStatus, Tuple[TransitionRule, ...]] = {}
        self._by_triple: Dict[Tuple[ChurchStatus, ChurchStatus, Role], TransitionRule] = {}

        grouped: Dict[ChurchStatus, List[TransitionRule]] = {}
        for rule in self._rules:
            for role in rule.allowed_roles:
                key = (rule.from_status, rule.to_status, role)
                if key in self._by_triple:
                    raise DuplicateTransitionRuleError(
                        f"Ambiguous transition rules for {rule.from_status.value} -> "
                        f"{rule.to_status.value} by {role.value}",
                        details={
                            "from_status": rule.from_status.value,
                            "to_status": rule.to_status.value,
                            "role": role.value
                        }
                    )
                self._by_triple[key] = rule
            grouped.setdefault(rule.from_status, []).append(rule)

        self._by_from = {status: tuple(rules) for status, rules in grouped.items()}
        logger.debug(f"Transition registry built with {len(self._rules)} rules")

    @classmethod
    def default(cls) -> "TransitionRegistry":
        """Registry with the canonical church review rules"""
        return cls(CANONICAL_RULES)

    @property
    def rules(self) -> Tuple[TransitionRule, ...]:
        return self._rules

    def transitions_from(self, status: ChurchStatus) -> List[TransitionRule]:
        """All rules starting at status; unknown or terminal states give []"""
        return list(self._by_from.get(status, ()))

    def find(
        self,
        from_status: ChurchStatus,
        to_status: ChurchStatus,
        role: Role
    ) -> Optional[TransitionRule]:
        """Exact (from, to, role) lookup"""
        return self._by_triple.get((from_status, to_status, role))

    def rules_between(
        self,
        from_status: ChurchStatus,
        to_status: ChurchStatus
    ) -> List[TransitionRule]:
        """Rules for (from, to) regardless of role"""
        return [r for r in self.transitions_from(from_status) if r.to_status == to_status]

    def roles_for(self, from_status: ChurchStatus, to_status: ChurchStatus) -> Set[Role]:
        """Roles that may perform from -> to"""
        roles: Set[Role] = set()
        for rule in self.rules_between(from_status, to_status):
            roles |= rule.allowed_roles
        return roles

    def hook_ids(self) -> List[str]:
        return [r.hook for r in self._rules if r.hook is not None]

    def guard_kinds(self) -> Set[GuardKind]:
        return {r.guard for r in self._rules}
