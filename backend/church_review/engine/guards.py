"""Guard Evaluator - Named guard conditions for transition rules"""
from typing import Callable, Dict, Iterable

from ..domain.models import TransitionContext
from ..domain.enums import GuardKind
from ..domain.errors import UnknownGuardError

GuardFn = Callable[[TransitionContext], bool]


def _always(context: TransitionContext) -> bool:
    return True


def _note_required(context: TransitionContext) -> bool:
    return bool(context.note and context.note.strip())


GUARDS: Dict[GuardKind, GuardFn] = {
    GuardKind.ALWAYS: _always,
    GuardKind.NOTE_REQUIRED: _note_required,
}

GUARD_FAILURE_MESSAGES: Dict[GuardKind, str] = {
    GuardKind.ALWAYS: "Transition conditions not met",
    GuardKind.NOTE_REQUIRED: "A justification note is required for this transition",
}


class GuardEvaluator:
    """
    Evaluate guard conditions by name

    Rules carry a GuardKind instead of a function so they stay inspectable
    and serializable. The evaluator owns the kind -> function table.
    """

    def __init__(self, guards: Dict[GuardKind, GuardFn] = None):
        self._guards = dict(guards if guards is not None else GUARDS)

    def ensure_known(self, kinds: Iterable[GuardKind]) -> None:
        """Raise UnknownGuardError for any kind without an implementation"""
        for kind in kinds:
            if kind not in self._guards:
                raise UnknownGuardError(
                    f"No guard implementation registered for {kind.value}",
                    details={"guard": kind.value}
                )

    def evaluate(self, kind: GuardKind, context: TransitionContext) -> bool:
        return self._guards[kind](context)

    def failure_message(self, kind: GuardKind) -> str:
        return GUARD_FAILURE_MESSAGES.get(kind, "Transition conditions not met")
