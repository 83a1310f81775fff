"""Error responses shared by the API routers."""
import logging

from fastapi import status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def server_error(message: str) -> JSONResponse:
    """Log the active exception and return a generic 500 JSON body.

    Call from inside an ``except`` block.
    """
    logger.exception(message)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": message},
    )
