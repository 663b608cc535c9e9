import uuid

import pytest

from taskhub.validation import (
    validate_login,
    validate_member,
    validate_project,
    validate_project_update,
    validate_task,
    validate_task_update,
    validate_user,
    validate_user_update,
)


def _user(**overrides):
    data = {"username": "alice", "email": "alice@example.com", "password": "Abcdef12!"}
    data.update(overrides)
    return data


class TestPasswordPolicy:
    def test_short_password_is_rejected(self):
        outcome = validate_user(_user(password="abc"))
        assert not outcome.ok
        assert outcome.error.field == "password"
        assert outcome.error.message == "Password should be at least 8 characters long"

    def test_password_with_all_classes_passes(self):
        outcome = validate_user(_user(password="Abcdef12!"))
        assert outcome.ok
        assert outcome.value.password == "Abcdef12!"

    @pytest.mark.parametrize("password", ["abcdefgh1!", "ABCDEFGH1!", "Abcdefghi!", "Abcdefgh12"])
    def test_missing_character_class_fails_complexity(self, password):
        outcome = validate_user(_user(password=password))
        assert outcome.error.message == "Password must meet complexity requirements"

    def test_missing_password(self):
        data = _user()
        del data["password"]
        assert validate_user(data).error.message == "Password is a required field"

    def test_empty_password(self):
        assert validate_user(_user(password="")).error.message == "Password cannot be an empty field"

    def test_non_text_password(self):
        assert validate_user(_user(password=12345678)).error.message == (
            "Password should be a type of 'text'"
        )

    def test_overlong_password(self):
        outcome = validate_user(_user(password="Aa1!" * 64))
        assert outcome.error.message == "Password should not be longer than 255 characters"


class TestUserSchemas:
    def test_username_is_trimmed(self):
        outcome = validate_user(_user(username="  alice  "))
        assert outcome.value.username == "alice"

    def test_username_too_short(self):
        outcome = validate_user(_user(username="al"))
        assert outcome.error.message == '"username" length must be at least 3 characters long'

    def test_username_too_long(self):
        outcome = validate_user(_user(username="a" * 21))
        assert outcome.error.message == (
            '"username" length must be less than or equal to 20 characters long'
        )

    def test_first_error_wins(self):
        outcome = validate_user({"username": "al", "email": "nope", "password": "abc"})
        assert outcome.error.field == "username"

    def test_invalid_email(self):
        outcome = validate_user(_user(email="not-an-email"))
        assert outcome.error.message == '"email" must be a valid email'

    def test_unknown_key_is_rejected(self):
        outcome = validate_user(_user(role="admin"))
        assert outcome.error.message == '"role" is not allowed'

    def test_login_skips_complexity(self):
        outcome = validate_login({"email": "alice@example.com", "password": "abc"})
        assert outcome.ok

    def test_login_requires_password(self):
        outcome = validate_login({"email": "alice@example.com"})
        assert outcome.error.message == '"password" is required'

    def test_update_allows_partial_body(self):
        assert validate_user_update({}).ok
        assert validate_user_update({"username": "alicia"}).value.username == "alicia"

    def test_update_keeps_format_constraints(self):
        outcome = validate_user_update({"email": "broken"})
        assert outcome.error.message == '"email" must be a valid email'


class TestTaskSchemas:
    def test_title_is_required_on_create(self):
        outcome = validate_task({"description": "no title"})
        assert outcome.error.message == '"title" is required'

    def test_blank_title_is_empty(self):
        outcome = validate_task({"title": "   "})
        assert outcome.error.message == '"title" is not allowed to be empty'

    def test_create_defaults(self):
        outcome = validate_task({"title": "Write report"})
        assert outcome.value.status == "pending"
        assert outcome.value.assigned_to is None

    def test_assignee_accepts_camel_case_key(self):
        user_id = uuid.uuid4()
        outcome = validate_task({"title": "Write report", "assignedTo": str(user_id)})
        assert outcome.value.assigned_to == user_id

    def test_assignee_must_be_an_id(self):
        outcome = validate_task({"title": "Write report", "assignedTo": "64f0c0ffee"})
        assert outcome.error.message == '"assignedTo" must be a valid id'

    def test_invalid_status(self):
        outcome = validate_task_update({"status": "blocked"})
        assert not outcome.ok
        assert outcome.error.field == "status"
        assert outcome.error.message.startswith('"status" must be one of')

    def test_update_allows_partial_body(self):
        outcome = validate_task_update({"status": "completed"})
        assert outcome.ok
        assert outcome.value.model_dump(exclude_unset=True) == {"status": "completed"}

    def test_invalid_due_date(self):
        outcome = validate_task({"title": "Write report", "dueDate": "someday"})
        assert outcome.error.message == '"dueDate" must be a valid date'

    def test_non_object_body(self):
        outcome = validate_task(["not", "an", "object"])
        assert outcome.error.message == '"value" must be of type object'

    def test_missing_body(self):
        assert validate_task(None).error.message == '"value" must be of type object'


class TestProjectSchemas:
    def test_name_required(self):
        assert validate_project({}).error.message == '"name" is required'

    def test_member_requires_user_id(self):
        assert validate_member({}).error.message == '"userId" is required'

    def test_unwrap_raises_validation_error(self):
        from taskhub.errors import ValidationError

        with pytest.raises(ValidationError) as exc_info:
            validate_project({"name": "ab"}).unwrap()
        assert exc_info.value.status_code == 400


class TestPartialUpdates:
    def test_null_title_is_rejected(self):
        outcome = validate_task_update({"title": None})
        assert outcome.error.field == "title"
        assert outcome.error.message == '"title" must be a string'

    def test_null_status_is_rejected(self):
        outcome = validate_task_update({"description": "mutated", "status": None})
        assert outcome.error.field == "status"
        assert outcome.error.message.startswith('"status" must be one of')

    def test_nullable_fields_accept_null(self):
        outcome = validate_task_update({"description": None, "dueDate": None, "assignedTo": None})
        assert outcome.ok
        assert outcome.value.model_dump(exclude_unset=True) == {
            "description": None,
            "due_date": None,
            "assigned_to": None,
        }

    def test_null_username_is_rejected(self):
        outcome = validate_user_update({"username": None})
        assert outcome.error.message == '"username" must be a string'

    def test_null_email_is_rejected(self):
        assert validate_user_update({"email": None}).error.field == "email"

    def test_null_project_name_is_rejected(self):
        assert validate_project_update({"name": None}).error.message == '"name" must be a string'

    def test_missing_body_is_an_empty_update(self):
        outcome = validate_task_update(None)
        assert outcome.ok
        assert outcome.value.model_dump(exclude_unset=True) == {}
        assert validate_user_update(None).ok
