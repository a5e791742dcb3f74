"""HTTP caching middleware — Cache-Control and ETag for public reads.

Learn: For the configured path prefixes:
- Every GET response gets "Cache-Control: public, max-age=N"; a 200 also
  gets a weak ETag computed from the body. A request whose If-None-Match
  equals that ETag gets an empty 304 instead of the body.
- Any other method gets "Cache-Control: no-store".

The body has to be buffered to hash it, so only mount this on small
JSON endpoints.
"""

import hashlib

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


def make_etag(body: bytes) -> str:
    """Weak validator: W/"<length hex>-<sha1 prefix>"."""
    digest = hashlib.sha1(body).hexdigest()[:27]
    return f'W/"{len(body):x}-{digest}"'


class CacheControlMiddleware(BaseHTTPMiddleware):
    """Cache headers and conditional GETs for selected path prefixes."""

    def __init__(self, app, path_prefixes: tuple[str, ...], max_age: int = 300):
        super().__init__(app)
        self.path_prefixes = path_prefixes
        self.max_age = max_age

    async def dispatch(self, request: Request, call_next) -> Response:
        if not request.url.path.startswith(self.path_prefixes):
            return await call_next(request)

        response: Response = await call_next(request)
        if request.method != "GET":
            response.headers["Cache-Control"] = "no-store"
            return response
        response.headers["Cache-Control"] = f"public, max-age={self.max_age}"
        # Only successful bodies get a validator.
        if response.status_code != 200:
            return response

        body = b"".join([chunk async for chunk in response.body_iterator])
        etag = make_etag(body)

        if request.headers.get("If-None-Match") == etag:
            headers = {
                k: v
                for k, v in response.headers.items()
                if k.lower() not in ("content-length", "content-type")
            }
            headers["ETag"] = etag
            return Response(status_code=304, headers=headers)

        headers = dict(response.headers)
        headers["ETag"] = etag
        return Response(
            content=body,
            status_code=response.status_code,
            headers=headers,
            media_type=response.media_type,
        )
