# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from typing import Annotated

import fastapi
from fastapi import status
from fastapi.responses import JSONResponse

from common.model.credential import CredentialAttributes, CredentialListing
from common.model.exception import ErrorResponse, ValidationErrorResponse

import issuer.config as conf
import issuer.db.credential as db_credential
from issuer.issuance import CredentialIssuer, IssuanceOutcome
from issuer.models import IssuedResponse, AlreadyIssuedResponse
from issuer.token import TokenSigner

TAG = "Issuance"

router = fastapi.APIRouter(tags=[TAG])


def get_credential_issuer(config: conf.inject, session: conf.inject_session) -> CredentialIssuer:
    token_signer = TokenSigner(config.signing_secret, config.app_name) if config.signing_secret else None
    return CredentialIssuer(session, worker_id=config.worker_id, token_signer=token_signer)


inject_issuer = Annotated[CredentialIssuer, fastapi.Depends(get_credential_issuer)]


@router.post(
    "/issue",
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_409_CONFLICT: {"model": AlreadyIssuedResponse, "description": "Credential with identical content already issued"},
        status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
def issue_credential(
    attributes: CredentialAttributes,
    config: conf.inject,
    credential_issuer: inject_issuer,
) -> IssuedResponse:
    """
    Issues a credential for the attributes. Issuing identical attributes again returns the existing credential with 409.
    """
    result = credential_issuer.issue(attributes.as_attributes())
    credential = result.credential
    if result.outcome is IssuanceOutcome.ALREADY_ISSUED:
        body = AlreadyIssuedResponse(
            id=credential.id,
            message=f"credential already issued - checked by {config.worker_id}",
            worker_id=credential.worker_id,
            issued_at=credential.issued_at,
        )
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=body.model_dump(by_alias=True))

    return IssuedResponse(
        id=credential.id,
        message=f"credential issued by {config.worker_id}",
        worker_id=config.worker_id,
        issued_at=credential.issued_at,
        credential=credential,
        token=result.token,
    )


@router.get("/credentials", description="Lists all issued credentials, newest first. Read by the verification service.")
def get_credentials(session: conf.inject_session) -> CredentialListing:
    credentials = [credential.to_model() for credential in db_credential.list_all(session)]
    return CredentialListing(credentials=credentials, count=len(credentials))
