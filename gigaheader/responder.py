from fastapi import Response

from .errors import ResponseConstructionError

RESPONSE_PAGE = (
    b"<html><body><h1>C to Header-Only Converter</h1>"
    b"<p>Server is working!</p></body></html>"
)
CONTENT_TYPE = "text/html"


def build_response() -> Response:
    """Build the canned page answered for every request.

    The content type is passed as a raw header rather than ``media_type`` so
    that no ``charset`` parameter is appended to it.
    """
    try:
        return Response(content=RESPONSE_PAGE, headers={"Content-Type": CONTENT_TYPE})
    except MemoryError as exc:
        raise ResponseConstructionError("could not build response") from exc
