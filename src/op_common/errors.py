"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/Session
  3xxx: Project
  4xxx: Finance
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/Session ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Incorrect email or password", 401)


class SessionMissingError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Token not found", 401)


class InvalidSessionError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid token", 401)


# --- 3xxx: Project ---

class ProjectNotFoundError(AppError):
    def __init__(self, project_id: str) -> None:
        super().__init__(3001, f"Project not found: {project_id}", 404)


# --- 4xxx: Finance ---

class AccountNotFoundError(AppError):
    def __init__(self, account_id: str) -> None:
        super().__init__(4001, f"Account not found: {account_id}", 404)


class AccountInactiveError(AppError):
    def __init__(self, account_id: str) -> None:
        super().__init__(4002, f"Account is not active: {account_id}", 422)


class InsufficientBalanceError(AppError):
    def __init__(self, required: float, available: float) -> None:
        super().__init__(
            4003,
            f"Insufficient balance: required {required:.2f}, available {available:.2f}",
            422,
        )


# --- 9xxx: System ---

class ValidationFailedError(AppError):
    def __init__(self, detail: str = "Invalid data") -> None:
        super().__init__(9001, detail, 400)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
