"""
Shared fixtures for the gateway tests.

Upstream sources are replaced by ``FakeSource``: canned responses keyed by
root field name, with every call recorded for assertions.
"""

from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from citisignal_mesh.sources import MeshContext


class FakeSource:
    """Stand-in for ``SourceClient``.

    A response may be a value, an exception instance to raise, or a
    callable taking the call arguments.
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None) -> None:
        self.responses: Dict[str, Any] = dict(responses or {})
        self.calls: List[Tuple[str, str, Dict]] = []

    def _respond(self, operation: str, field_name: str, args: Optional[Dict]) -> Any:
        args = dict(args or {})
        self.calls.append((operation, field_name, args))
        response = self.responses.get(field_name)
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(args)
        return response

    def query(self, field_name: str, args: Optional[Dict] = None, selection_set: Optional[str] = None) -> Any:
        return self._respond("query", field_name, args)

    def mutate(self, field_name: str, args: Optional[Dict] = None, selection_set: Optional[str] = None) -> Any:
        return self._respond("mutation", field_name, args)

    def fields_called(self) -> List[str]:
        return [field for _, field, _ in self.calls]


@pytest.fixture
def commerce() -> FakeSource:
    return FakeSource()


@pytest.fixture
def catalog() -> FakeSource:
    return FakeSource()


@pytest.fixture
def search() -> FakeSource:
    return FakeSource()


@pytest.fixture
def make_context(commerce: FakeSource, catalog: FakeSource, search: FakeSource) -> Callable[..., MeshContext]:
    def _make(headers: Optional[Dict[str, str]] = None) -> MeshContext:
        return MeshContext(headers=dict(headers or {}), commerce=commerce, catalog=catalog, search=search)

    return _make


@pytest.fixture
def context(make_context: Callable[..., MeshContext]) -> MeshContext:
    return make_context()


@pytest.fixture
def info(context: MeshContext) -> SimpleNamespace:
    """Minimal resolve info: resolvers only read ``info.context``."""
    return SimpleNamespace(context=context)
