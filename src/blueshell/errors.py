"""Error types raised by the inheritance engine."""


class BlueshellError(Exception):
    """Base class for all blueshell errors."""

    def __init__(self, message: str = "", name: str = "Error"):
        self.message = message
        self.name = name
        super().__init__(f"{name}: {message}" if message else name)


class InvalidArgument(BlueshellError):
    """An argument was not record-shaped, or a flag had the wrong type."""

    def __init__(self, message: str = ""):
        super().__init__(message, "InvalidArgument")


class IdentifierCollision(BlueshellError):
    """A delegate reference was already bound in the table."""

    def __init__(self, message: str = "", ref: str = ""):
        self.ref = ref
        super().__init__(message, "IdentifierCollision")
