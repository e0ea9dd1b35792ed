# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
At most once issuance of credentials keyed by their content hash.
"""

import uuid
import logging
from enum import Enum

from pydantic import BaseModel, JsonValue
from sqlalchemy.orm import Session

from common import canonical
from common.parsing import utc_today_iso
from common.model.credential import IssuedCredential
from common.model.exception import StorageError

import issuer.db.credential as db_credential
from issuer.token import TokenSigner
from issuer.logging import IssuerOperationsLogEntry

_logger = logging.getLogger(__name__)


class IssuanceOutcome(Enum):
    ISSUED = "issued"
    ALREADY_ISSUED = "already_issued"


class IssuanceResult(BaseModel):
    outcome: IssuanceOutcome
    credential: IssuedCredential
    """The newly issued credential, or the one issued earlier for the same content"""
    token: str | None = None


def with_default_issue_date(attributes: dict[str, JsonValue]) -> dict[str, JsonValue]:
    """Adds todays date as issueDate if the client did not provide one"""
    if attributes.get("issueDate") is None:
        return {**attributes, "issueDate": utc_today_iso()}
    return attributes


class CredentialIssuer:
    def __init__(self, session: Session, worker_id: str, token_signer: TokenSigner | None = None) -> None:
        self._session = session
        self._worker_id = worker_id
        self._token_signer = token_signer

    def _log(self, message: str, step: IssuerOperationsLogEntry.Step, content_hash: str, credential_id: str) -> None:
        _logger.info(
            IssuerOperationsLogEntry(
                message=message,
                status=IssuerOperationsLogEntry.Status.success,
                operation=IssuerOperationsLogEntry.Operation.issuance,
                step=step,
                worker_id=self._worker_id,
                credential_hash=content_hash,
                credential_id=credential_id,
            )
        )

    def _already_issued(self, existing: db_credential.Credential) -> IssuanceResult:
        return IssuanceResult(outcome=IssuanceOutcome.ALREADY_ISSUED, credential=existing.to_model())

    def issue(self, attributes: dict[str, JsonValue]) -> IssuanceResult:
        """
        Issues the credential unless one with identical content exists.
        Resubmitting the same attributes is not an error, the earlier credential is returned.
        """
        attributes = with_default_issue_date(attributes)
        content_hash = canonical.content_hash(attributes)

        existing = db_credential.find_by_hash(self._session, content_hash)
        if existing:
            self._log("Credential already issued.", IssuerOperationsLogEntry.Step.issuance_lookup, content_hash, str(existing.id))
            return self._already_issued(existing)

        credential_id = uuid.uuid4()
        # Signed before the insert, no credential is stored without its token
        token = self._token_signer.sign(str(credential_id), attributes, content_hash) if self._token_signer else None
        try:
            credential = db_credential.insert(self._session, attributes, content_hash, self._worker_id, credential_id)
        except db_credential.DuplicateHashError:
            # Another instance inserted the same content between lookup and insert
            existing = db_credential.find_by_hash(self._session, content_hash)
            if existing is None:
                raise StorageError(f"Credential {content_hash} rejected as duplicate but not found")
            self._log("Credential issued concurrently.", IssuerOperationsLogEntry.Step.issuance_duplicate, content_hash, str(existing.id))
            return self._already_issued(existing)

        issued = credential.to_model()
        self._log("Credential issued.", IssuerOperationsLogEntry.Step.issuance_insertion, content_hash, issued.id)
        return IssuanceResult(outcome=IssuanceOutcome.ISSUED, credential=issued, token=token)
