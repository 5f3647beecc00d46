from typing import Mapping, Optional

from fastapi import status
from fastapi.responses import Response

from jsend.response import CONTENT_TYPE, JSendResponse, Status

_DEFAULT_STATUS_CODES = {
    Status.SUCCESS: status.HTTP_200_OK,
    Status.FAIL: status.HTTP_400_BAD_REQUEST,
    Status.ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def default_status_code(response: JSendResponse) -> int:
    """HTTP status used when none is given: 200 for success, 400 for fail, 500 for error."""
    return _DEFAULT_STATUS_CODES[response.status]


class JSendJSONResponse(Response):
    """Starlette response whose body is an encoded JSendResponse."""

    media_type = CONTENT_TYPE

    def __init__(
        self,
        content: JSendResponse,
        status_code: Optional[int] = None,
        headers: Optional[Mapping[str, str]] = None,
    ):
        if status_code is None:
            status_code = default_status_code(content)
        super().__init__(content=content, status_code=status_code, headers=headers, media_type=self.media_type)

    def render(self, content: JSendResponse) -> bytes:
        return content.encode().encode("utf-8")
