"""
MongoDB Models

Pydantic models describing the documents written to the four collections.
Field names are snake_case in Python and camelCase in the store.
"""

from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, Field
from bson import ObjectId


def iso_timestamp(moment: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix"""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class MongoDocument(BaseModel):
    """Base for documents inserted by the service (the store assigns _id)"""

    class Config:
        populate_by_name = True
        arbitrary_types_allowed = True

    def to_document(self) -> Dict[str, Any]:
        """Dict ready for insert_one, using store field names"""
        return self.model_dump(by_alias=True, exclude_none=True)


class UserDocument(MongoDocument):
    """Users collection. `password` holds the bcrypt hash, never plain text."""
    name: str
    email: str
    password: str
    avatar: Optional[str] = None


class TaskListDocument(MongoDocument):
    """
    TaskList collection

    userIds starts with the creator and is only ever appended to.
    Progress is derived from ToDo documents and never stored.
    """
    title: str
    created_at: str = Field(default_factory=iso_timestamp, alias="createdAt")
    user_ids: List[ObjectId] = Field(alias="userIds", min_length=1)


class ToDoDocument(MongoDocument):
    """ToDo collection, owned by exactly one TaskList"""
    content: str
    is_completed: bool = Field(default=False, alias="isCompleted")
    task_list_id: ObjectId = Field(alias="taskListId")


class CourseDocument(MongoDocument):
    """Courses collection (read-only reference data, loaded by scripts)"""
    division_code: str = Field(alias="divisionCode")
    course_code: str = Field(alias="courseCode")
    course_title: str = Field(alias="courseTitle")
    credits: float
    credit_type_code: str = Field(alias="creditTypeCode")
