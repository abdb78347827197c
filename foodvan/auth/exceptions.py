"""
Authentication and account errors.

Every error carries the HTTP status it is reported with and a message
that is safe to show to the client. Internal details (driver errors,
bcrypt failures) are logged where they happen and never copied into
``message``.
"""

from typing import Optional


class FoodVanError(Exception):
    """Base error for the account and vendor flows."""

    status_code: int = 500
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def headers(self) -> Optional[dict[str, str]]:
        return None


class InvalidCredentials(FoodVanError):
    """Unknown email or wrong password. Both read the same to the client."""
    default_message = "Incorrect email or password."


class AccountExists(FoodVanError):
    default_message = "Account with that email already exists."


class WeakPassword(FoodVanError):
    default_message = "The password must be at least 8 characters, at least 1 letter and a number"


class Unauthorized(FoodVanError):
    status_code = 401
    default_message = "Unauthorized to such actions"

    @property
    def headers(self) -> Optional[dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}


class NotFound(FoodVanError):
    status_code = 404
    default_message = "Not found"


class PersistenceError(FoodVanError):
    default_message = "Could not save your changes, please try again."


class InternalHashError(FoodVanError):
    default_message = "Could not process the password, please try again."
