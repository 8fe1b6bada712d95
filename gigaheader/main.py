from fastapi import FastAPI, Request, Response

from .errors import ResponseConstructionError
from .responder import build_response

app = FastAPI(
    title="C to Header-Only Converter",
    version="1.0.0",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)


@app.middleware("http")
async def respond(request: Request, call_next) -> Response:
    # Answers before routing, so every method and path gets the same page.
    try:
        return build_response()
    except ResponseConstructionError:
        # Only this request fails; the daemon keeps serving.
        return Response(status_code=500)
