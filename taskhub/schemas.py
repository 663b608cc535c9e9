"""
Request and response schemas.

Request schemas describe what a client may send; they reject unknown keys and
carry per-field message overrides used by ``taskhub.validation``. Response
schemas are the explicit allow-list of what leaves the API; password hashes
never appear in them.
"""

import re
from datetime import datetime
from typing import Annotated, ClassVar, Literal
from uuid import UUID

from email_validator import EmailNotValidError, validate_email
from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 255
PASSWORD_REQUIRED_CLASSES = 4

_PASSWORD_CLASSES = (
    re.compile(r"[a-z]"),
    re.compile(r"[A-Z]"),
    re.compile(r"[0-9]"),
    re.compile(r"[^a-zA-Z0-9]"),
)


def _check_email(value: str) -> str:
    if not value:
        raise PydanticCustomError("string.empty", "value is empty")
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise PydanticCustomError("string.email", "invalid email: {reason}", {"reason": str(e)}) from e
    return value


def check_password_complexity(value: str) -> str:
    """
    Password policy: 8-255 characters containing a lowercase letter, an
    uppercase letter, a digit and a symbol.
    """
    if value == "":
        raise PydanticCustomError("password.empty", "Password cannot be an empty field")
    if len(value) < PASSWORD_MIN_LENGTH:
        raise PydanticCustomError(
            "password.min",
            f"Password should be at least {PASSWORD_MIN_LENGTH} characters long",
        )
    if len(value) > PASSWORD_MAX_LENGTH:
        raise PydanticCustomError(
            "password.max",
            f"Password should not be longer than {PASSWORD_MAX_LENGTH} characters",
        )
    classes_present = sum(1 for pattern in _PASSWORD_CLASSES if pattern.search(value))
    if classes_present < PASSWORD_REQUIRED_CLASSES:
        raise PydanticCustomError(
            "password.complexity", "Password must meet complexity requirements"
        )
    return value


Username = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=20)]
Email = Annotated[str, StringConstraints(strip_whitespace=True), AfterValidator(_check_email)]
TaskTitle = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
TaskDescription = Annotated[str, StringConstraints(max_length=1000)]
ProjectName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=50)]
ProjectDescription = Annotated[str, StringConstraints(max_length=500)]
TaskStatus = Literal["pending", "in-progress", "completed"]


# ===== Request schemas =====


class RequestSchema(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    # "<field>.<error type>" -> message, overriding the generic templates
    error_messages: ClassVar[dict[str, str]] = {}


class UserCreate(RequestSchema):
    username: Username
    email: Email
    password: str

    error_messages: ClassVar[dict[str, str]] = {
        "password.missing": "Password is a required field",
        "password.string_type": "Password should be a type of 'text'",
    }

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return check_password_complexity(value)


class UserLogin(RequestSchema):
    email: Email
    password: Annotated[str, StringConstraints(min_length=1)]


class UserUpdate(RequestSchema):
    # Defaults are not validated: an omitted key stays unset, an explicit null
    # fails the type check.
    username: Username = None
    email: Email = None


class TaskCreate(RequestSchema):
    title: TaskTitle
    description: TaskDescription | None = None
    status: TaskStatus = "pending"
    due_date: datetime | None = None
    assigned_to: UUID | None = None


class TaskUpdate(RequestSchema):
    title: TaskTitle = None
    description: TaskDescription | None = None
    status: TaskStatus = None
    due_date: datetime | None = None
    assigned_to: UUID | None = None


class ProjectCreate(RequestSchema):
    name: ProjectName
    description: ProjectDescription | None = None


class ProjectUpdate(RequestSchema):
    name: ProjectName = None
    description: ProjectDescription | None = None


class MemberRequest(RequestSchema):
    user_id: UUID


# ===== Response schemas =====


class APIModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class UserSummary(APIModel):
    """Projection of a referenced user: never includes credentials."""

    id: UUID
    username: str
    email: str


class UserResponse(UserSummary):
    role: str
    created_at: datetime
    updated_at: datetime


class _TaskFields(APIModel):
    id: UUID
    title: str
    description: str | None = None
    status: str
    due_date: datetime | None = None
    project_id: UUID | None = None
    created_at: datetime
    updated_at: datetime


class TaskResponse(_TaskFields):
    assigned_to: UUID | None = None


class PopulatedTaskResponse(_TaskFields):
    """Task with the assignee expanded to ``{id, username, email}``."""

    assignee: UserSummary | None = Field(default=None, alias="assignedTo")


class ProjectResponse(APIModel):
    id: UUID
    name: str
    description: str | None = None
    owner_id: UUID
    members: list[UserSummary] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class NotificationResponse(APIModel):
    id: UUID
    user_id: UUID
    message: str
    read: bool
    created_at: datetime


class TaskEnvelope(BaseModel):
    task: TaskResponse


class PopulatedTaskEnvelope(BaseModel):
    task: PopulatedTaskResponse


class TaskListResponse(BaseModel):
    tasks: list[PopulatedTaskResponse]
    amount: int


class ProjectEnvelope(BaseModel):
    project: ProjectResponse


class ProjectListResponse(BaseModel):
    projects: list[ProjectResponse]
    amount: int


class MemberListResponse(BaseModel):
    members: list[UserSummary]
    amount: int


class UserEnvelope(BaseModel):
    user: UserResponse


class UserListResponse(BaseModel):
    users: list[UserResponse]
    amount: int


class RegisterResponse(BaseModel):
    user: UserResponse
    token: str


class TokenResponse(BaseModel):
    token: str


class NotificationEnvelope(BaseModel):
    notification: NotificationResponse


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    amount: int


class MessageResponse(BaseModel):
    msg: str
