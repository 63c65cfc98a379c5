"""Hook Registry - Named pre-transition side effects"""
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

from ..domain.models import TransitionContext
from ..domain.errors import UnknownHookError
from ..utils.logger import get_logger

logger = get_logger(__name__)

HookFn = Callable[[TransitionContext], Awaitable[None]]


class HookRegistry:
    """
    Registry of async hooks a transition rule may name

    A rule refers to a hook by id; the state machine resolves every id once
    at construction so a typo fails at startup rather than mid-transition.
    """

    def __init__(self, hooks: Optional[Dict[str, HookFn]] = None):
        self._hooks: Dict[str, HookFn] = dict(hooks or {})

    def register(self, hook_id: str, fn: HookFn) -> None:
        if hook_id in self._hooks:
            raise ValueError(f"Hook already registered: {hook_id}")
        self._hooks[hook_id] = fn

    def names(self) -> List[str]:
        return sorted(self._hooks)

    def ensure_known(self, hook_ids: Iterable[Optional[str]]) -> None:
        """Raise UnknownHookError for any id that was never registered"""
        for hook_id in hook_ids:
            if hook_id is not None and hook_id not in self._hooks:
                raise UnknownHookError(
                    f"Transition rule names unregistered hook '{hook_id}'",
                    details={"hook": hook_id, "registered": self.names()}
                )

    async def run(self, hook_id: Optional[str], context: TransitionContext) -> None:
        """Run the named hook; a missing id is a no-op"""
        if hook_id is None:
            return
        logger.info(
            f"Running pre-transition hook {hook_id}",
            extra={"church_id": context.church_id, "hook": hook_id}
        )
        await self._hooks[hook_id](context)
