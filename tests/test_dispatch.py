# tests/test_dispatch.py
import pytest

from keeper.core.types import REGISTRY_KEY
from keeper.core.errors import (
    ArgumentCountError, UnknownFunctionError, InvalidFunctionError, DeserializationError,
)
from keeper.dispatch.router import MembershipService, dispatch
from keeper.registry.membership import MembershipRegistry
from conftest import CountingStore


@pytest.fixture(params=["invoke", "run"])
def entry(request, service: MembershipService):
    """Primary and legacy entry points must behave identically."""
    return getattr(service, request.param)


def test_scenario_bytes(entry, service: MembershipService):
    assert entry("invoke", ["h1", "alice"]) == b"\x01"
    assert entry("invoke", ["h1", "alice"]) == b"\x00"
    assert entry("invoke", ["h1", "bob"]) == b"\x01"
    assert service.query("query", ["h1", "alice"]) == b"\x01"
    assert service.query("query", ["h1", "carol"]) == b"\x00"


def test_init_through_dispatch_resets(entry, service: MembershipService):
    entry("invoke", ["h1", "alice"])
    assert entry("init", []) == b""
    assert service.query("query", ["h1", "alice"]) == b"\x00"


def test_init_ignores_legacy_argument(service: MembershipService, store: CountingStore):
    service.invoke("invoke", ["h1", "alice"])
    assert service.init("init", ["keeper-name"]) == b""
    assert store.data[REGISTRY_KEY] == b"{}"


def test_delete_through_dispatch(entry, service: MembershipService, store: CountingStore):
    entry("invoke", ["h1", "alice"])
    assert entry("delete", [REGISTRY_KEY]) == b""
    assert REGISTRY_KEY not in store.data

    with pytest.raises(DeserializationError):
        service.query("query", ["h1", "alice"])


def test_unknown_function(entry, store: CountingStore):
    with pytest.raises(UnknownFunctionError, match="unknown function"):
        entry("query", ["h1", "alice"])
    with pytest.raises(UnknownFunctionError):
        entry("Invoke", ["h1", "alice"])
    assert store.calls == []


@pytest.mark.parametrize("args", [[], ["h1"], ["h1", "alice", "extra"]])
def test_record_argument_count(entry, store: CountingStore, args):
    with pytest.raises(ArgumentCountError) as exc_info:
        entry("invoke", args)
    assert exc_info.value.expected == 2
    assert exc_info.value.got == len(args)
    assert store.calls == []


@pytest.mark.parametrize("args", [[], ["h1"], ["h1", "alice", "extra"]])
def test_query_argument_count(service: MembershipService, store: CountingStore, args):
    with pytest.raises(ArgumentCountError):
        service.query("query", args)
    assert store.calls == []


@pytest.mark.parametrize("args", [[], ["a", "b"]])
def test_delete_argument_count(entry, store: CountingStore, args):
    with pytest.raises(ArgumentCountError, match="Expecting 1 argument"):
        entry("delete", args)
    assert store.calls == []


def test_query_requires_query_name(service: MembershipService, store: CountingStore):
    with pytest.raises(InvalidFunctionError, match='Expecting "query"'):
        service.query("invoke", ["h1", "alice"])
    assert store.calls == []


def test_dispatch_function_directly():
    store = CountingStore()
    reg = MembershipRegistry(store)
    assert dispatch(reg, "init", ()) == b""
    assert dispatch(reg, "invoke", ("h1", "alice")) == b"\x01"
    assert store.calls == [("put", REGISTRY_KEY), ("get", REGISTRY_KEY), ("put", REGISTRY_KEY)]


def test_invoke_and_run_share_state(service: MembershipService):
    assert service.invoke("invoke", ["h1", "alice"]) == b"\x01"
    assert service.run("invoke", ["h1", "alice"]) == b"\x00"
