"""
Request body validation.

Each ``validate_*`` function is pure: it takes the decoded JSON body and
returns a ``ValidationOutcome`` holding either the parsed request schema or
the first violated rule, phrased as a human readable message.
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from taskhub.errors import ValidationError
from taskhub.schemas import (
    MemberRequest,
    ProjectCreate,
    ProjectUpdate,
    RequestSchema,
    TaskCreate,
    TaskUpdate,
    UserCreate,
    UserLogin,
    UserUpdate,
)

SchemaType = TypeVar("SchemaType", bound=RequestSchema)

MESSAGE_TEMPLATES = {
    "missing": '"{label}" is required',
    "string_type": '"{label}" must be a string',
    "string.empty": '"{label}" is not allowed to be empty',
    "string.email": '"{label}" must be a valid email',
    "string_too_short": '"{label}" length must be at least {min_length} characters long',
    "string_too_long": '"{label}" length must be less than or equal to {max_length} characters long',
    "literal_error": '"{label}" must be one of {expected}',
    "extra_forbidden": '"{label}" is not allowed',
    "uuid_parsing": '"{label}" must be a valid id',
    "uuid_type": '"{label}" must be a valid id',
    "datetime_parsing": '"{label}" must be a valid date',
    "datetime_from_date_parsing": '"{label}" must be a valid date',
    "datetime_type": '"{label}" must be a valid date',
    "model_type": '"{label}" must be of type object',
    "model_attributes_type": '"{label}" must be of type object',
    "dict_type": '"{label}" must be of type object',
}


@dataclass(frozen=True)
class ValidationFailure:
    field: str
    kind: str
    message: str


@dataclass(frozen=True)
class ValidationOutcome(Generic[SchemaType]):
    value: SchemaType | None = None
    error: ValidationFailure | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> SchemaType:
        """Return the parsed schema or raise the first failure as a 400."""
        if self.error is not None:
            raise ValidationError(self.error.message)
        return self.value


def _label(loc: tuple) -> str:
    parts = [str(part) for part in loc]
    return ".".join(parts) if parts else "value"


def describe_error(schema: type[RequestSchema] | None, error: dict[str, Any]) -> ValidationFailure:
    """Turn one pydantic error entry into a ValidationFailure."""
    label = _label(error.get("loc", ()))
    kind = error["type"]
    ctx = error.get("ctx") or {}

    if kind == "string_too_short" and str(error.get("input", "")).strip() == "":
        kind = "string.empty"

    overrides = schema.error_messages if schema is not None else {}
    template = overrides.get(f"{label}.{kind}") or MESSAGE_TEMPLATES.get(kind)
    if template is None:
        # Custom errors already carry a complete message
        return ValidationFailure(field=label, kind=kind, message=error["msg"])
    return ValidationFailure(field=label, kind=kind, message=template.format(label=label, **ctx))


def validate(schema: type[SchemaType], data: Any) -> ValidationOutcome[SchemaType]:
    """Validate ``data`` against ``schema``; only the first error is reported."""
    try:
        return ValidationOutcome(value=schema.model_validate(data))
    except PydanticValidationError as e:
        first = e.errors(include_url=False)[0]
        return ValidationOutcome(error=describe_error(schema, first))


def _partial(data: Any) -> Any:
    # A partial update without a body changes nothing
    return {} if data is None else data


def validate_user(data: Any) -> ValidationOutcome[UserCreate]:
    return validate(UserCreate, data)


def validate_login(data: Any) -> ValidationOutcome[UserLogin]:
    return validate(UserLogin, data)


def validate_user_update(data: Any) -> ValidationOutcome[UserUpdate]:
    return validate(UserUpdate, _partial(data))


def validate_task(data: Any) -> ValidationOutcome[TaskCreate]:
    return validate(TaskCreate, data)


def validate_task_update(data: Any) -> ValidationOutcome[TaskUpdate]:
    return validate(TaskUpdate, _partial(data))


def validate_project(data: Any) -> ValidationOutcome[ProjectCreate]:
    return validate(ProjectCreate, data)


def validate_project_update(data: Any) -> ValidationOutcome[ProjectUpdate]:
    return validate(ProjectUpdate, _partial(data))


def validate_member(data: Any) -> ValidationOutcome[MemberRequest]:
    return validate(MemberRequest, data)


def changed_fields(payload: BaseModel) -> dict[str, Any]:
    """Fields the client actually sent, keyed by attribute name."""
    return payload.model_dump(exclude_unset=True)
