# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from typing import Literal

from common.model.credential import CamelModel, IssuedCredential


class IssuedResponse(CamelModel):
    """Body of `POST /issue` for a newly issued credential"""

    success: bool = True
    id: str
    message: str
    worker_id: str
    issued_at: str
    credential: IssuedCredential
    token: str | None = None


class AlreadyIssuedResponse(CamelModel):
    """Body of `POST /issue` if a credential with identical content exists.
    Identifies the existing credential and the worker which issued it."""

    success: bool = False
    status: Literal["already_issued"] = "already_issued"
    id: str
    message: str
    worker_id: str
    issued_at: str
