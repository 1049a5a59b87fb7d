"""
Root of the order engine exception hierarchy.
"""


class OrderEngineException(Exception):
    """
    Base class for every error raised by the engine.

    Failures are scoped to one ordering session and leave its cart intact,
    so callers show `message` to the customer and log `details`.

    Attributes:
        message: Text suitable for user feedback
        details: Structured context (business id, item id, field name, ...)
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        name = type(self).__name__
        if not self.details:
            return f"{name}('{self.message}')"
        context = ', '.join(f"{key}={value}" for key, value in self.details.items())
        return f"{name}('{self.message}', {context})"
