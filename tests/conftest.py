import copy
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId

sys.path.insert(0, str(Path(__file__).parent.parent))

from backend.graphql.context import GraphQLContext
from backend.graphql.schema import schema
from backend.middleware.jwt_auth import hash_password
from src.core.document_store import COURSES, USERS

WRITE_OPERATIONS = {"insert", "update_fields", "push_to_array", "delete"}


def _matches(doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
    for key, condition in query.items():
        value = doc.get(key)
        if isinstance(condition, dict) and any(op.startswith("$") for op in condition):
            for op, arg in condition.items():
                if op == "$in":
                    values = value if isinstance(value, list) else [value]
                    if not any(v in arg for v in values):
                        return False
                elif op == "$regex":
                    if not isinstance(value, str) or re.search(arg, value) is None:
                        return False
                else:
                    raise NotImplementedError(op)
        elif isinstance(value, list):
            if condition not in value:
                return False
        elif value != condition:
            return False
    return True


class InMemoryStore:
    """Same interface as DocumentStore, backed by dicts. Records every call."""

    def __init__(self):
        self.data: Dict[str, Dict[ObjectId, Dict[str, Any]]] = {}
        self.calls: List[tuple] = []

    @property
    def writes(self) -> List[tuple]:
        return [call for call in self.calls if call[0] in WRITE_OPERATIONS]

    def _collection(self, name: str) -> Dict[ObjectId, Dict[str, Any]]:
        return self.data.setdefault(name, {})

    def seed(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        doc = dict(document)
        doc.setdefault("_id", ObjectId())
        self._collection(collection)[doc["_id"]] = doc
        return copy.deepcopy(doc)

    def all(self, collection: str) -> List[Dict[str, Any]]:
        return [copy.deepcopy(doc) for doc in self._collection(collection).values()]

    async def find_one(self, collection, query):
        self.calls.append(("find_one", collection, query))
        for doc in self._collection(collection).values():
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    async def find_by_id(self, collection, doc_id):
        return await self.find_one(collection, {"_id": doc_id})

    async def find_many(self, collection, query=None):
        self.calls.append(("find_many", collection, query))
        return [copy.deepcopy(doc) for doc in self._collection(collection).values()
                if _matches(doc, query or {})]

    async def insert(self, collection, document):
        self.calls.append(("insert", collection, document))
        doc = copy.deepcopy(document)
        doc["_id"] = ObjectId()
        self._collection(collection)[doc["_id"]] = doc
        return doc["_id"]

    async def update_fields(self, collection, doc_id, fields):
        self.calls.append(("update_fields", collection, doc_id))
        doc = self._collection(collection).get(doc_id)
        if doc is None or not fields:
            return 0
        doc.update(copy.deepcopy(fields))
        return 1

    async def push_to_array(self, collection, doc_id, field, value):
        self.calls.append(("push_to_array", collection, doc_id))
        doc = self._collection(collection).get(doc_id)
        if doc is None:
            return 0
        values = doc.setdefault(field, [])
        if value not in values:
            values.append(value)
        return 1

    async def delete(self, collection, doc_id):
        self.calls.append(("delete", collection, doc_id))
        return 1 if self._collection(collection).pop(doc_id, None) is not None else 0


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def alice(store):
    return store.seed(USERS, {
        "name": "Alice",
        "email": "alice@example.com",
        "password": hash_password("wonderland"),
    })


@pytest.fixture
def bob(store):
    return store.seed(USERS, {
        "name": "Bob",
        "email": "bob@example.com",
        "password": hash_password("builder"),
        "avatar": "https://example.com/bob.png",
    })


@pytest.fixture
def courses(store):
    rows = [
        ("CS", "CS101", "Intro to Programming", 4.0, "LEC"),
        ("CS", "CS240", "Data Structures", 4.0, "LEC"),
        ("MA", "MA101", "Calculus I", 3.0, "LEC"),
        ("PH", "PH101", "Physics I", 3.5, "LAB"),
        ("EN", "EN210", "Technical Writing", 2.0, "SEM"),
    ]
    return [
        store.seed(COURSES, {
            "divisionCode": division,
            "courseCode": code,
            "courseTitle": title,
            "credits": credits,
            "creditTypeCode": credit_type,
        })
        for division, code, title, credits, credit_type in rows
    ]


@pytest.fixture
def make_context(store):
    """Build a request context; call inside the test so loaders bind to its loop"""
    def _make(user: Optional[Dict[str, Any]] = None) -> GraphQLContext:
        return GraphQLContext(store=store, user=user)
    return _make


@pytest.fixture
def execute(make_context):
    async def _execute(query: str, user: Optional[Dict[str, Any]] = None, **variables):
        return await schema.execute(
            query,
            variable_values=variables or None,
            context_value=make_context(user),
        )
    return _execute
