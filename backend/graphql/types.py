"""
GraphQL Types

Strawberry types for users, task lists, to-dos and courses. Scalar fields
come straight from the MongoDB document; relationship and computed fields
are resolved lazily, per item, when the caller selects them.
"""

from typing import Any, Dict, List, Optional

import strawberry
from bson import ObjectId

from src.core.document_store import TASK_LISTS, TODOS


def compute_progress(todos: List[Dict[str, Any]]) -> float:
    """
    Completion percentage of a set of ToDo documents.

    0 for an empty set, otherwise 100 * completed / total, both counted
    from the same list.
    """
    if not todos:
        return 0.0
    completed = sum(1 for todo in todos if todo.get('isCompleted'))
    return 100 * completed / len(todos)


@strawberry.type
class User:
    """User, corresponds to the 'Users' collection. The password hash is never exposed."""
    id: strawberry.ID
    name: str
    email: str
    avatar: Optional[str] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "User":
        return cls(
            id=strawberry.ID(str(doc['_id'])),
            name=doc.get('name', ''),
            email=doc.get('email', ''),
            avatar=doc.get('avatar'),
        )


@strawberry.type
class TaskList:
    """
    Shared task list, corresponds to the 'TaskList' collection.

    Members are referenced by userIds; there is no reverse index on users.
    """
    id: strawberry.ID
    created_at: str
    title: str
    object_id: strawberry.Private[ObjectId]
    user_ids: strawberry.Private[List[ObjectId]]

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "TaskList":
        return cls(
            id=strawberry.ID(str(doc['_id'])),
            created_at=doc.get('createdAt', ''),
            title=doc.get('title', ''),
            object_id=doc['_id'],
            user_ids=list(doc.get('userIds', [])),
        )

    @strawberry.field
    async def progress(self, info: strawberry.Info) -> float:
        """Percentage of completed to-dos, recomputed from live ToDo state"""
        todos = await info.context.store.find_many(TODOS, {'taskListId': self.object_id})
        return compute_progress(todos)

    @strawberry.field
    async def users(self, info: strawberry.Info) -> List[Optional[User]]:
        """
        Members in userIds order. A missing user yields null in its position.

        Lookups go through the per-request users DataLoader, so members shared
        by several lists in one response are fetched once.
        """
        docs = await info.context.loaders['users'].load_many(self.user_ids)

        return [User.from_document(doc) if doc else None for doc in docs]

    @strawberry.field
    async def todos(self, info: strawberry.Info) -> List["ToDo"]:
        docs = await info.context.store.find_many(TODOS, {'taskListId': self.object_id})
        return [ToDo.from_document(doc) for doc in docs]


@strawberry.type
class ToDo:
    """To-do item, corresponds to the 'ToDo' collection"""
    id: strawberry.ID
    content: str
    is_completed: bool
    task_list_id: strawberry.Private[Optional[ObjectId]]

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "ToDo":
        return cls(
            id=strawberry.ID(str(doc['_id'])),
            content=doc.get('content', ''),
            is_completed=bool(doc.get('isCompleted', False)),
            task_list_id=doc.get('taskListId'),
        )

    @strawberry.field
    async def task_list(self, info: strawberry.Info) -> Optional[TaskList]:
        """Owning task list; null once that list has been deleted (no cascade)"""
        if self.task_list_id is None:
            return None
        doc = await info.context.store.find_by_id(TASK_LISTS, self.task_list_id)
        return TaskList.from_document(doc) if doc else None


@strawberry.type
class Course:
    """Catalog course, corresponds to the read-only 'Courses' collection"""
    id: strawberry.ID
    division_code: str
    course_code: str
    course_title: str
    credits: float
    credit_type_code: str

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Course":
        return cls(
            id=strawberry.ID(str(doc['_id'])),
            division_code=doc.get('divisionCode', ''),
            course_code=doc.get('courseCode', ''),
            course_title=doc.get('courseTitle', ''),
            credits=float(doc.get('credits') or 0),
            credit_type_code=doc.get('creditTypeCode', ''),
        )


@strawberry.type
class AuthUser:
    """Result of signUp/signIn"""
    user: User
    token: str


@strawberry.input
class SignUpInput:
    email: str
    password: str
    name: str
    avatar: Optional[str] = None


@strawberry.input
class SignInInput:
    email: str
    password: str
