class GigaHeaderError(Exception):
    pass


class BindError(GigaHeaderError):
    """The listening port could not be acquired."""

    def __init__(self, port: int) -> None:
        super().__init__(f"Failed to start server on port {port}")
        self.port = port


class ResponseConstructionError(GigaHeaderError):
    """The canned response could not be built for a single request."""
