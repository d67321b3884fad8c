"""Error types raised at the model and database boundaries."""


class MediMindError(Exception):
    """Base error carrying an optional upstream detail string."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.detail = detail

    def __str__(self) -> str:
        message = super().__str__()
        if self.detail:
            return f"{message}: {self.detail}"
        return message


class InferenceError(MediMindError):
    """The chat-completion endpoint was unreachable or returned a failure."""


class StoreError(MediMindError):
    """The case store rejected a read or write."""


class RequestValidationFailed(MediMindError):
    """Submitted fields are missing or malformed."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code
