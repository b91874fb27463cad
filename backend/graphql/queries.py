"""
GraphQL Query Resolvers

Implements query resolvers for fetching task lists and courses from MongoDB.
"""

from typing import List, Optional

import strawberry

from src.core.document_store import COURSES, TASK_LISTS, to_object_id
from src.utils.logger import get_logger

from .types import Course, TaskList

logger = get_logger(__name__)


def course_code_query(course_code: str) -> dict:
    """
    Filter for getCoursesByCode.

    The uppercased input is used as an unanchored pattern, so it matches
    anywhere in the stored code (substring, not prefix-only).
    """
    return {'courseCode': {'$regex': course_code.upper()}}


@strawberry.type
class Query:
    """
    Root Query type for GraphQL API

    Every field is nullable so that a failing field yields null without
    discarding the results of its siblings.
    """

    @strawberry.field
    async def my_task_lists(self, info: strawberry.Info) -> Optional[List[TaskList]]:
        """Task lists the signed-in user is a member of"""
        user = info.context.require_user()

        docs = await info.context.store.find_many(TASK_LISTS, {'userIds': user['_id']})
        return [TaskList.from_document(doc) for doc in docs]

    @strawberry.field
    async def get_task_list(self, info: strawberry.Info, id: strawberry.ID) -> Optional[TaskList]:
        """
        Get a task list by ID.

        Requires a signed-in user; membership is not checked.
        """
        info.context.require_user()

        doc = await info.context.store.find_by_id(TASK_LISTS, to_object_id(id))
        if not doc:
            return None

        return TaskList.from_document(doc)

    @strawberry.field
    async def get_courses(self, info: strawberry.Info) -> Optional[List[Course]]:
        docs = await info.context.store.find_many(COURSES)
        return [Course.from_document(doc) for doc in docs]

    @strawberry.field
    async def get_courses_by_code(self, info: strawberry.Info, course_code: str) -> Optional[List[Course]]:
        """Courses whose code contains the given text, case-insensitive on input"""
        docs = await info.context.store.find_many(COURSES, course_code_query(course_code))
        return [Course.from_document(doc) for doc in docs]

    @strawberry.field
    async def get_courses_by_division_codes(
        self,
        info: strawberry.Info,
        division_codes: Optional[List[str]] = None
    ) -> Optional[List[Course]]:
        """
        Courses in any of the given divisions.

        A missing list matches nothing.
        """
        if not division_codes:
            return []

        docs = await info.context.store.find_many(
            COURSES,
            {'divisionCode': {'$in': list(division_codes)}}
        )
        return [Course.from_document(doc) for doc in docs]
