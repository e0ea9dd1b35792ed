# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from typing import Literal

from pydantic import JsonValue

from common.model.credential import CamelModel

VerificationStatus = Literal["valid", "not_found", "upstream_error"]


class CredentialDetails(CamelModel):
    """Issuance data of the matching credential"""

    id: str
    issued_by: str
    issued_at: str


class VerificationResponse(CamelModel):
    """
    Body of `POST /api/verify`. Always delivered with 200, `valid` carries the verdict.
    `status` tells a credential which was not issued apart from an unreachable issuer.
    """

    valid: bool
    status: VerificationStatus
    message: str
    worker_id: str
    timestamp: str
    credential_details: CredentialDetails | None = None


class VerificationHistoryEntry(CamelModel):
    id: int
    credential_hash: str
    verified: bool
    outcome: str
    worker_id: str
    verified_at: str
    credential_data: dict[str, JsonValue] | None = None


class VerificationHistoryResponse(CamelModel):
    success: bool = True
    history: list[VerificationHistoryEntry]
    count: int
