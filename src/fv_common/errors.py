"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Feature
  3xxx: Vote
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


# --- 1xxx: Auth/User ---

class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Email already registered", 409)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Invalid email or password", 401)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Refresh token is invalid or expired", 401)


class UserNotFoundError(AppError):
    def __init__(self, detail: str = "User not found") -> None:
        super().__init__(1004, detail, 404)


# --- 2xxx: Feature ---

class FeatureNotFoundError(AppError):
    def __init__(self, feature_id: str) -> None:
        super().__init__(2001, f"Feature not found: {feature_id}", 404)


class FeatureForbiddenError(AppError):
    """Actor is not the feature's author."""

    def __init__(self, action: str) -> None:
        super().__init__(2002, f"Only the author can {action} the feature", 403)


# --- 3xxx: Vote ---

class VoteNotFoundError(AppError):
    def __init__(self, feature_id: str) -> None:
        super().__init__(3001, f"Vote not found for feature {feature_id}", 404)


class VoteConflictError(AppError):
    """Unique (user_id, feature_id) violated — a vote already exists.

    Raised by the vote repository; the vote service recovers from it by
    switching to the update-existing-vote path.
    """

    def __init__(self, feature_id: str, user_id: str) -> None:
        super().__init__(
            3002, f"Vote already exists: user {user_id} on feature {feature_id}", 409
        )


class VoteContentionError(AppError):
    """Concurrent writers kept changing the same vote; retry later."""

    def __init__(self, feature_id: str, attempts: int) -> None:
        super().__init__(
            3003,
            f"Vote on feature {feature_id} still contended after {attempts} attempts",
            503,
        )


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
