"""Exception types for tubedigest."""

_SNIPPET_CHARS = 200


class TubedigestError(Exception):
    """Base class for all tubedigest errors."""

    @property
    def reason(self) -> str:
        """Short description suitable for a user-facing diagnostic."""
        return str(self)


class TransportError(TubedigestError):
    """Raised on a non-2xx HTTP response or a connection/timeout failure."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        body: str = "",
        model: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.body = body
        self.model = model

    @property
    def reason(self) -> str:
        if self.status is None:
            return str(self)
        snippet = " ".join(self.body.split())[:_SNIPPET_CHARS]
        if snippet:
            return f"HTTP {self.status}: {snippet}"
        return f"HTTP {self.status}"


class EmptyResponseError(TubedigestError):
    """Raised when a model call succeeds but yields no text."""

    def __init__(self, model: str) -> None:
        super().__init__(f"{model} returned an empty response")
        self.model = model

    @property
    def reason(self) -> str:
        return "empty response / tools unsupported"


class UnsupportedModeError(TubedigestError):
    """Raised when a client is asked for a capability it does not have."""
