"""Tests for op_common.errors and op_common.response."""

from src.op_common.errors import (
    AppError,
    InsufficientBalanceError,
    InvalidCredentialsError,
    InvalidSessionError,
    ProjectNotFoundError,
    SessionMissingError,
    ValidationFailedError,
)
from src.op_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500
        assert isinstance(err, Exception)


class TestSpecificErrors:
    def test_auth_errors_are_401(self) -> None:
        for err in (InvalidCredentialsError(), SessionMissingError(), InvalidSessionError()):
            assert err.http_status == 401
        assert InvalidCredentialsError().message == "Incorrect email or password"
        assert SessionMissingError().message == "Token not found"

    def test_project_not_found(self) -> None:
        err = ProjectNotFoundError("p-9")
        assert err.code == 3001
        assert err.http_status == 404
        assert "p-9" in err.message

    def test_insufficient_balance(self) -> None:
        err = InsufficientBalanceError(required=650, available=300)
        assert err.code == 4003
        assert err.http_status == 422
        assert "650.00" in err.message
        assert "300.00" in err.message

    def test_validation_failed_default_message(self) -> None:
        assert ValidationFailedError().message == "Invalid data"
        assert ValidationFailedError().http_status == 400


class TestApiResponse:
    def test_success_omits_unset_fields(self) -> None:
        assert success_response({"id": 1}).to_content() == {"success": True, "data": {"id": 1}}

    def test_success_with_user_and_message(self) -> None:
        content = success_response(user={"id": "m"}, message="ok").to_content()
        assert content == {"success": True, "message": "ok", "user": {"id": "m"}}

    def test_error_response(self) -> None:
        assert error_response("nope").to_content() == {"success": False, "message": "nope"}

    def test_default_is_success(self) -> None:
        assert ApiResponse().success is True

    def test_model_dump_drops_unset_top_level_fields(self) -> None:
        assert success_response(message="ok").model_dump() == {"success": True, "message": "ok"}

    def test_none_inside_data_is_kept(self) -> None:
        content = success_response({"description": None}).model_dump()
        assert content == {"success": True, "data": {"description": None}}

    def test_empty_data_is_kept(self) -> None:
        assert success_response([]).model_dump() == {"success": True, "data": []}
