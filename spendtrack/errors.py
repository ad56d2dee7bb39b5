"""Error taxonomy shared by the services and the blueprints.

``ValidationError`` is raised before any store access; ``StoreError`` and its
subclasses wrap failures reported by the database.
"""


class SpendTrackError(Exception):
    """Base class for application errors."""

    def __init__(self, message, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self):
        return self.message


class ValidationError(SpendTrackError):
    def __init__(self, message, field=None):
        super().__init__(message, field=field)
        self.field = field


class StoreError(SpendTrackError):
    pass


class NotFound(StoreError):
    pass


class RaceRetryExhausted(StoreError):
    """The insert-then-update retry for a budget key failed twice."""
