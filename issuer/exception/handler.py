# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from common.fastapi_extensions import ExtendedFastAPI
from common.model.exception import ValidationErrorResponse, validation_error_details

_logger = logging.getLogger(__name__)


def configure_exception_handlers(app: ExtendedFastAPI) -> None:
    """
    Configure exception handlers on the FastAPI app instance.
    Changed 422 Unprocessable Entity to 400 Bad Request

    Args:
        app (ExtendedFastAPI): the instance to configure the handlers for.
    """

    @app.exception_handler(RequestValidationError)
    async def invalid_credential_exception_handler(request: Request, exc: RequestValidationError):
        """
        Recasts Validation Errors to a bad request with field level details
        """
        _logger.info(f"Rejected invalid credential data on {request.url.path}")
        body = ValidationErrorResponse(
            message="Invalid credential data",
            errors=validation_error_details(exc.errors()),
            worker_id=app.current_config().worker_id,
        )
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump(by_alias=True))
