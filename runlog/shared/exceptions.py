"""
Application exceptions.

Cross-cutting errors shared by features and routes.
Strava-specific errors live next to the Strava client.
"""


class RunlogError(Exception):
    """Base application error."""
    pass


class ConfigError(RunlogError):
    """Required configuration is missing."""
    pass


class AuthError(RunlogError):
    """Inbound admin credential missing or invalid."""

    def __init__(self, message: str, status_code: int = 401):
        super().__init__(message)
        self.status_code = status_code


class StoreError(RunlogError):
    """Persistence failed or a write matched no rows."""
    pass


class NotFound(RunlogError):
    """Requested record does not exist."""
    pass


class CredentialsNotFound(NotFound):
    """No Strava credentials have been stored yet."""
    pass
