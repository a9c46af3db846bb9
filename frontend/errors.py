# frontend/errors.py


class StudioError(Exception):
    """Base class for every error the submission pipeline reports to the user."""


class ValidationError(StudioError):
    """Input rejected before any network activity."""


class EmptyPromptError(ValidationError):
    def __init__(self, message: str = "Please enter a prompt"):
        super().__init__(message)


class NoImageError(ValidationError):
    def __init__(self, message: str = "Please upload at least one image"):
        super().__init__(message)


class UnreadableFileError(StudioError):
    def __init__(self, name: str, reason: str):
        super().__init__(f"Could not read {name}: {reason}")
        self.name = name
        self.reason = reason


class CollaboratorError(StudioError):
    """
    The image service call failed: transport fault, non-success status,
    `success: false`, missing output, or the client-side deadline expired.
    """

    def __init__(self, message: str, status_code: int | None = None, details: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class BusyError(StudioError):
    def __init__(self, message: str = "A job is already in progress"):
        super().__init__(message)
