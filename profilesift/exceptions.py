"""Custom exception hierarchy for profilesift."""


class ProfileSiftError(Exception):
    """Base exception for all profilesift errors."""


class PreconditionError(ProfileSiftError):
    """Request cannot be processed; the pipeline never starts."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingUrlError(PreconditionError):
    """No profile URL was supplied."""

    status_code = 400

    def __init__(self, message: str = "Profile URL is required"):
        super().__init__(message)


class ConfigError(PreconditionError):
    """External service credentials are not configured."""

    status_code = 500


class AuthError(PreconditionError):
    """Caller is not authenticated."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)
