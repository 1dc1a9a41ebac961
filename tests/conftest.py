"""Pytest fixtures for RoleGraph tests."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from rolegraph.application.use_cases.role.role_service import RoleService
from rolegraph.domain.value_objects import RelationTuple, SubjectSet
from rolegraph.infrastructure.keto.sync_client import KetoSyncClient
from rolegraph.infrastructure.persistence.file.persistence_manager import FilePersistenceManager
from rolegraph.infrastructure.persistence.memory.role_catalog import InMemoryRoleCatalog

KETO_READ_URL = "http://keto-read:4466"
KETO_WRITE_URL = "http://keto-write:4467"


# --- Fake Keto ---


def _tuple_from_params(params: httpx.QueryParams) -> RelationTuple:
    subject_set = None
    if params.get("subject_set.namespace") is not None:
        subject_set = SubjectSet(
            namespace=params["subject_set.namespace"],
            object=params["subject_set.object"],
            relation=params["subject_set.relation"],
        )
    return RelationTuple(
        namespace=params["namespace"],
        object=params["object"],
        relation=params["relation"],
        subject_id=params.get("subject_id") if subject_set is None else None,
        subject_set=subject_set,
    )


class FakeKetoBackend:
    """In-memory Keto read and write APIs behind an httpx.MockTransport.

    ``fail_objects`` makes writes and deletes of tuples on those objects
    answer 500; ``fail_reads`` does the same for list queries; ``offline``
    refuses every connection. ``write_delay`` holds each tuple PUT for that
    many seconds.
    """

    def __init__(self, page_size: int = 100) -> None:
        self.tuples: list[RelationTuple] = []
        self.requests: list[httpx.Request] = []
        self.fail_objects: set[str] = set()
        self.fail_reads = False
        self.offline = False
        self.page_size = page_size
        self.write_delay = 0.0

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle_async)

    async def handle_async(self, request: httpx.Request) -> httpx.Response:
        if self.write_delay and request.method == "PUT":
            await asyncio.sleep(self.write_delay)
        return self.handle(request)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.offline:
            raise httpx.ConnectError("connection refused", request=request)
        path = request.url.path
        if path == "/admin/relation-tuples" and request.method == "PUT":
            return self._write(RelationTuple.from_payload(json.loads(request.content)))
        if path == "/admin/relation-tuples" and request.method == "DELETE":
            return self._delete(_tuple_from_params(request.url.params))
        if path == "/relation-tuples" and request.method == "GET":
            return self._list(request.url.params)
        if path == "/relation-tuples/check" and request.method == "GET":
            return self._check(request.url.params)
        if path == "/relation-tuples/expand" and request.method == "GET":
            return httpx.Response(200, json={"type": "union", "children": []})
        return httpx.Response(404, json={"error": {"code": 404}})

    def _write(self, relation_tuple: RelationTuple) -> httpx.Response:
        if relation_tuple.object in self.fail_objects:
            return httpx.Response(500, json={"error": {"code": 500}})
        if relation_tuple not in self.tuples:
            self.tuples.append(relation_tuple)
        return httpx.Response(201, json=relation_tuple.to_payload())

    def _delete(self, relation_tuple: RelationTuple) -> httpx.Response:
        if relation_tuple.object in self.fail_objects:
            return httpx.Response(500, json={"error": {"code": 500}})
        if relation_tuple not in self.tuples:
            return httpx.Response(404, json={"error": {"code": 404}})
        self.tuples.remove(relation_tuple)
        return httpx.Response(204)

    def _list(self, params: httpx.QueryParams) -> httpx.Response:
        if self.fail_reads:
            return httpx.Response(503, json={"error": {"code": 503}})
        matches = [
            t
            for t in self.tuples
            if t.namespace == params.get("namespace")
            and t.subject_set is not None
            and t.subject_set.namespace == params.get("subject_set.namespace")
            and t.subject_set.object == params.get("subject_set.object")
            and t.subject_set.relation == params.get("subject_set.relation")
        ]
        start = int(params.get("page_token") or 0)
        page = matches[start : start + self.page_size]
        next_start = start + self.page_size
        return httpx.Response(
            200,
            json={
                "relation_tuples": [t.to_payload() for t in page],
                "next_page_token": str(next_start) if next_start < len(matches) else "",
            },
        )

    def _check(self, params: httpx.QueryParams) -> httpx.Response:
        subject = _tuple_from_params(params).subject_set
        reachable = {subject}
        frontier = [subject]
        while frontier:
            current = frontier.pop()
            for t in self.tuples:
                if t.subject_set == current:
                    granted = SubjectSet(t.namespace, t.object, t.relation)
                    if granted not in reachable:
                        reachable.add(granted)
                        frontier.append(granted)
        target = SubjectSet(params["namespace"], params["object"], params["relation"])
        allowed = target in reachable
        return httpx.Response(200 if allowed else 403, json={"allowed": allowed})

    def tuples_of(self, namespace: str, role: str) -> list[RelationTuple]:
        """Tuples whose subject is the member set of ``role``."""
        return [
            t
            for t in self.tuples
            if t.subject_set == SubjectSet(namespace, f"role:{role}", "member")
        ]


# --- Fixtures ---


@pytest.fixture
def keto_backend() -> FakeKetoBackend:
    return FakeKetoBackend()


@pytest.fixture
def sync_client(keto_backend: FakeKetoBackend) -> KetoSyncClient:
    """Keto client wired to the fake backend."""
    return KetoSyncClient(
        KETO_READ_URL,
        KETO_WRITE_URL,
        client=httpx.AsyncClient(transport=keto_backend.transport()),
    )


@pytest.fixture
def catalog() -> InMemoryRoleCatalog:
    return InMemoryRoleCatalog()


@pytest.fixture
def memory_store() -> FilePersistenceManager:
    """Persistence manager without a file (memory-only mode)."""
    return FilePersistenceManager()


@pytest.fixture
def role_service(
    catalog: InMemoryRoleCatalog,
    sync_client: KetoSyncClient,
    memory_store: FilePersistenceManager,
) -> RoleService:
    return RoleService.build(catalog, sync_client, memory_store)
