# keeper/dispatch/router.py
"""
Name-based routing of positional string arguments onto registry operations.

Results leave this module as wire payloads: b"\\x01" for added/found,
b"\\x00" for no-op/not-found, b"" for operations without a result.
"""

import logging
from typing import Callable, Dict, Optional, Sequence

from keeper.core.types import MembershipResult
from keeper.core.encoding import encode_result
from keeper.core.errors import ArgumentCountError, UnknownFunctionError, InvalidFunctionError
from keeper.registry.membership import MembershipRegistry

log = logging.getLogger(__name__)


def _expect_args(args: Sequence[str], count: int) -> None:
    if len(args) != count:
        raise ArgumentCountError(count, len(args))


def _init(registry: MembershipRegistry, args: Sequence[str]) -> Optional[MembershipResult]:
    # Legacy callers pass a keeper name; it is accepted and ignored
    registry.initialize()
    return None


def _record(registry: MembershipRegistry, args: Sequence[str]) -> Optional[MembershipResult]:
    _expect_args(args, 2)
    hash_, user = args
    return registry.record_membership(hash_, user)


def _delete(registry: MembershipRegistry, args: Sequence[str]) -> Optional[MembershipResult]:
    _expect_args(args, 1)
    registry.delete_key(args[0])
    return None


HANDLERS: Dict[str, Callable[[MembershipRegistry, Sequence[str]], Optional[MembershipResult]]] = {
    "invoke": _record,
    "init": _init,
    "delete": _delete,
}


def dispatch(registry: MembershipRegistry, function: str, args: Sequence[str]) -> bytes:
    """Route a mutating call by exact function name."""
    handler = HANDLERS.get(function)
    if handler is None:
        raise UnknownFunctionError(function)
    log.debug("Dispatching %r with %d args", function, len(args))
    return encode_result(handler(registry, list(args)))


class MembershipService:
    """
    Invocation surface exposed to a hosting dispatcher.
    invoke and run are the primary and legacy entry points; both go through dispatch().
    """

    def __init__(self, registry: MembershipRegistry):
        self.registry = registry

    def init(self, function: str, args: Sequence[str]) -> bytes:
        log.debug("Init called with function %r", function)
        return encode_result(_init(self.registry, args))

    def invoke(self, function: str, args: Sequence[str]) -> bytes:
        return dispatch(self.registry, function, args)

    def run(self, function: str, args: Sequence[str]) -> bytes:
        return dispatch(self.registry, function, args)

    def query(self, function: str, args: Sequence[str]) -> bytes:
        if function != "query":
            raise InvalidFunctionError(function)
        _expect_args(args, 2)
        hash_, user = args
        return encode_result(self.registry.query_membership(hash_, user))
