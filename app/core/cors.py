"""
CORS middleware answering preflights with an empty 204.

Starlette's CORSMiddleware replies to a valid preflight with `200 OK` and
a text body; the browser client only needs the headers.
"""
from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response

_BODY_HEADERS = {"content-length", "content-type"}


class PreflightCORSMiddleware(CORSMiddleware):
    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            return response
        headers = {
            k: v for k, v in response.headers.items() if k.lower() not in _BODY_HEADERS
        }
        return Response(status_code=204, headers=headers)
