import json

import pytest
from fastapi import status
from instructormatch.api.errors import to_http_exception, unhandled_exception_handler
from instructormatch.domain.errors import (
    ForbiddenError,
    MarketplaceError,
    NotFoundError,
    ValidationError,
)
from starlette.requests import Request


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (ValidationError("bad"), status.HTTP_400_BAD_REQUEST),
        (ForbiddenError("nope"), status.HTTP_403_FORBIDDEN),
        (NotFoundError("gone"), status.HTTP_404_NOT_FOUND),
        (MarketplaceError("other"), status.HTTP_400_BAD_REQUEST),
    ],
)
def test_domain_errors_map_to_status(error: MarketplaceError, expected: int) -> None:
    exc = to_http_exception(error)

    assert exc.status_code == expected
    assert exc.detail == str(error)


@pytest.mark.asyncio
async def test_unhandled_errors_become_generic_500() -> None:
    request = Request(
        {"type": "http", "method": "GET", "path": "/boom", "headers": [], "query_string": b""}
    )

    response = await unhandled_exception_handler(request, RuntimeError("database exploded"))

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert json.loads(response.body) == {"message": "Internal server error"}
