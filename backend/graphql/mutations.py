"""
GraphQL Mutations

Sign-up/sign-in and the task list / to-do mutations. Every mutation except
the two sign-in operations requires a signed-in user; the check happens
before any store access.
"""

import strawberry
from typing import Optional

from backend.middleware.jwt_auth import create_access_token, hash_password, verify_password
from src.core.document_store import TASK_LISTS, TODOS, USERS, to_object_id
from src.models.mongo_models import TaskListDocument, ToDoDocument, UserDocument
from src.utils.logger import get_logger

from .errors import InvalidCredentialsError
from .types import AuthUser, SignInInput, SignUpInput, TaskList, ToDo, User

logger = get_logger(__name__)


@strawberry.type
class Mutation:
    """
    Root Mutation type for GraphQL API

    Results are nullable for the same reason as on Query: one failed
    mutation must not hide what its siblings already committed.
    """

    @strawberry.mutation
    async def sign_up(self, info: strawberry.Info, input: SignUpInput) -> Optional[AuthUser]:
        """
        Register a user and sign them in.

        Email uniqueness is not enforced here. Insert and re-fetch are two
        separate store calls with no transaction around them.

        Returns:
            AuthUser with the stored user and a 7-day token
        """
        store = info.context.store

        document = UserDocument(
            name=input.name,
            email=input.email,
            password=hash_password(input.password),
            avatar=input.avatar,
        ).to_document()

        user_id = await store.insert(USERS, document)
        user_doc = await store.find_by_id(USERS, user_id)

        logger.info(f"👤 New user signed up: {user_id}")

        return AuthUser(
            user=User.from_document(user_doc),
            token=create_access_token(str(user_id)),
        )

    @strawberry.mutation
    async def sign_in(self, info: strawberry.Info, input: SignInInput) -> Optional[AuthUser]:
        """
        Exchange email and password for a token.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password (same message)
        """
        user_doc = await info.context.store.find_one(USERS, {'email': input.email})

        if not user_doc or not verify_password(input.password, user_doc.get('password', '')):
            logger.warning("❌ Failed sign-in attempt")
            raise InvalidCredentialsError()

        logger.info(f"🔐 User signed in: {user_doc['_id']}")

        return AuthUser(
            user=User.from_document(user_doc),
            token=create_access_token(str(user_doc['_id'])),
        )

    @strawberry.mutation
    async def create_task_list(self, info: strawberry.Info, title: str) -> Optional[TaskList]:
        """Create a task list with the signed-in user as its only member"""
        user = info.context.require_user()
        store = info.context.store

        document = TaskListDocument(title=title, user_ids=[user['_id']]).to_document()

        task_list_id = await store.insert(TASK_LISTS, document)
        doc = await store.find_by_id(TASK_LISTS, task_list_id)

        logger.info(f"📝 Task list {task_list_id} created by {user['_id']}")

        return TaskList.from_document(doc)

    @strawberry.mutation
    async def update_task_list(
        self,
        info: strawberry.Info,
        id: strawberry.ID,
        title: str
    ) -> Optional[TaskList]:
        """Rename a task list. No ownership check; a missing id yields null."""
        info.context.require_user()
        store = info.context.store
        object_id = to_object_id(id)

        await store.update_fields(TASK_LISTS, object_id, {'title': title})

        doc = await store.find_by_id(TASK_LISTS, object_id)
        return TaskList.from_document(doc) if doc else None

    @strawberry.mutation
    async def delete_task_list(self, info: strawberry.Info, id: strawberry.ID) -> Optional[bool]:
        """Hard delete. To-dos of the list are left in place."""
        user = info.context.require_user()

        object_id = to_object_id(id)
        await info.context.store.delete(TASK_LISTS, object_id)

        logger.info(f"🗑️  Task list {object_id} deleted by {user['_id']}")
        return True

    @strawberry.mutation
    async def add_user_to_task_list(
        self,
        info: strawberry.Info,
        task_list_id: strawberry.ID,
        user_id: strawberry.ID
    ) -> Optional[TaskList]:
        """
        Add a member to a task list.

        Idempotent: a user who is already a member leaves the list unchanged.
        The existence of the added user is not checked.

        Returns:
            The task list after the change, or null if it does not exist
        """
        info.context.require_user()
        store = info.context.store
        list_object_id = to_object_id(task_list_id)
        member_id = to_object_id(user_id)

        doc = await store.find_by_id(TASK_LISTS, list_object_id)
        if not doc:
            return None

        if member_id in doc.get('userIds', []):
            return TaskList.from_document(doc)

        # $addToSet, so a concurrent call that also passed the check above
        # cannot produce a duplicate member
        await store.push_to_array(TASK_LISTS, list_object_id, 'userIds', member_id)

        logger.info(f"👥 User {member_id} added to task list {list_object_id}")

        doc = await store.find_by_id(TASK_LISTS, list_object_id)
        return TaskList.from_document(doc) if doc else None

    @strawberry.mutation
    async def create_to_do(
        self,
        info: strawberry.Info,
        content: str,
        task_list_id: strawberry.ID
    ) -> Optional[ToDo]:
        """Create an open to-do. The task list is not re-validated."""
        info.context.require_user()
        store = info.context.store

        document = ToDoDocument(
            content=content,
            task_list_id=to_object_id(task_list_id),
        ).to_document()

        todo_id = await store.insert(TODOS, document)
        doc = await store.find_by_id(TODOS, todo_id)

        return ToDo.from_document(doc)

    @strawberry.mutation
    async def update_to_do(
        self,
        info: strawberry.Info,
        id: strawberry.ID,
        content: Optional[str] = None,
        is_completed: Optional[bool] = None
    ) -> Optional[ToDo]:
        """Partial update: only the arguments that were provided are set"""
        info.context.require_user()
        store = info.context.store
        object_id = to_object_id(id)

        fields = {}
        if content is not None:
            fields['content'] = content
        if is_completed is not None:
            fields['isCompleted'] = is_completed

        await store.update_fields(TODOS, object_id, fields)

        doc = await store.find_by_id(TODOS, object_id)
        return ToDo.from_document(doc) if doc else None

    @strawberry.mutation
    async def delete_to_do(self, info: strawberry.Info, id: strawberry.ID) -> Optional[bool]:
        info.context.require_user()

        await info.context.store.delete(TODOS, to_object_id(id))
        return True
