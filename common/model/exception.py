# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from collections.abc import Sequence

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Body of every failed request
    """

    success: bool = False
    message: str
    worker_id: str = Field(serialization_alias="workerId")


class ValidationErrorResponse(ErrorResponse):
    errors: list[dict]
    """Field level details as reported by pydantic"""


class StorageError(Exception):
    """The durable store could not complete the operation. No partial state has been written."""


def validation_error_details(errors: Sequence[dict]) -> list[dict]:
    """
    Field level details of pydantic errors without the rejected input.
    The input may hold values which are not valid JSON, e.g. NaN.
    """
    return [{"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]} for error in errors]
