# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from typing import Annotated

import fastapi
from fastapi import Query, status

from common.model.credential import CredentialAttributes
from common.model.exception import ErrorResponse, ValidationErrorResponse

import verifier.config as conf
import verifier.db.verification_log as db_log
import verifier.models as models
from verifier.db.verification_log import HistoryScope, VerificationOutcome
from verifier.issuer_listing import IssuerListing
from verifier.verification import CredentialVerifier

TAG = "Verification"

router = fastapi.APIRouter(prefix="/api/verify", tags=[TAG])

_STATUS = {
    VerificationOutcome.VALID: "valid",
    VerificationOutcome.NOT_FOUND: "not_found",
    VerificationOutcome.UPSTREAM_ERROR: "upstream_error",
}


def get_issuer_listing(config: conf.inject) -> IssuerListing:
    return IssuerListing(config.get_issuer_client())


def get_credential_verifier(
    config: conf.inject,
    session: conf.inject_session,
    listing: Annotated[IssuerListing, fastapi.Depends(get_issuer_listing)],
) -> CredentialVerifier:
    return CredentialVerifier(session, worker_id=config.worker_id, listing=listing)


inject_verifier = Annotated[CredentialVerifier, fastapi.Depends(get_credential_verifier)]


def _message(outcome: VerificationOutcome, worker_id: str) -> str:
    match outcome:
        case VerificationOutcome.VALID:
            return f"verified by {worker_id}"
        case VerificationOutcome.NOT_FOUND:
            return f"credential not found - verified by {worker_id}"
        case _:
            return f"verification failed - checked by {worker_id}"


@router.post(
    "",
    response_model_exclude_none=True,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
def verify_credential(attributes: CredentialAttributes, config: conf.inject, credential_verifier: inject_verifier) -> models.VerificationResponse:
    """
    Verifies that a credential with exactly these attributes has been issued.
    """
    result = credential_verifier.verify(attributes.as_attributes())
    credential_details = None
    if result.credential:
        credential_details = models.CredentialDetails(
            id=result.credential.id,
            issued_by=result.credential.worker_id,
            issued_at=result.credential.issued_at,
        )
    return models.VerificationResponse(
        valid=result.valid,
        status=_STATUS[result.outcome],
        message=_message(result.outcome, config.worker_id),
        worker_id=config.worker_id,
        timestamp=result.timestamp,
        credential_details=credential_details,
    )


@router.get("/history", description="Verification log newest first. `latest` returns the most recent attempt per credential hash, `all` the complete log.")
def get_verification_history(
    session: conf.inject_session,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
    scope: HistoryScope = HistoryScope.LATEST,
) -> models.VerificationHistoryResponse:
    entries = db_log.history(session, limit=limit, scope=scope)
    history = [
        models.VerificationHistoryEntry(
            id=entry.id,
            credential_hash=entry.content_hash,
            verified=entry.verified,
            outcome=entry.outcome,
            worker_id=entry.worker_id,
            verified_at=entry.verified_at,
            credential_data=entry.request_attributes,
        )
        for entry in entries
    ]
    return models.VerificationHistoryResponse(history=history, count=len(history))
