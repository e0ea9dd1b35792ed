# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Verification of credential attributes against the issuer listing.

A credential is valid if the canonical encoding of the submitted attributes
equals the encoding of an issued credential, i.e. the content hashes match.
Every attempt, whatever its outcome, is appended to the verification log.
"""

import logging

from pydantic import BaseModel, JsonValue
from sqlalchemy.orm import Session

from common import canonical
from common.parsing import utc_now_iso
from common.model.credential import IssuedCredential

import verifier.db.verification_log as db_log
from verifier.db.verification_log import VerificationOutcome
from verifier.issuer_listing import IssuerListing, UpstreamError
from verifier.logging import VerifierOperationsLogEntry

_logger = logging.getLogger(__name__)


class VerificationResult(BaseModel):
    outcome: VerificationOutcome
    content_hash: str
    timestamp: str
    credential: IssuedCredential | None = None
    """The matching issued credential, only set if valid"""

    @property
    def valid(self) -> bool:
        return self.outcome is VerificationOutcome.VALID


def find_matching(credentials: list[IssuedCredential], content_hash: str) -> IssuedCredential | None:
    return next((credential for credential in credentials if credential.credential_hash == content_hash), None)


class CredentialVerifier:
    def __init__(self, session: Session, worker_id: str, listing: IssuerListing) -> None:
        self._session = session
        self._worker_id = worker_id
        self._listing = listing

    def verify(self, attributes: dict[str, JsonValue]) -> VerificationResult:
        """
        Checks the attributes exactly as submitted. No default values are applied,
        so the attributes must be identical to those of the issuance.
        Unreachable issuers are not retried, the attempt counts as not verified.
        """
        content_hash = canonical.content_hash(attributes)
        timestamp = utc_now_iso()

        match = None
        try:
            match = find_matching(self._listing.fetch(), content_hash)
            outcome = VerificationOutcome.VALID if match else VerificationOutcome.NOT_FOUND
        except UpstreamError:
            outcome = VerificationOutcome.UPSTREAM_ERROR
            _logger.warning(
                VerifierOperationsLogEntry(
                    message="Issuer listing unavailable.",
                    status=VerifierOperationsLogEntry.Status.error,
                    operation=VerifierOperationsLogEntry.Operation.verification,
                    step=VerifierOperationsLogEntry.Step.verification_fetch,
                    worker_id=self._worker_id,
                    credential_hash=content_hash,
                )
            )

        _logger.info(
            VerifierOperationsLogEntry(
                message="Verification evaluated.",
                status=VerifierOperationsLogEntry.Status.success if match else VerifierOperationsLogEntry.Status.error,
                operation=VerifierOperationsLogEntry.Operation.verification,
                step=VerifierOperationsLogEntry.Step.verification_evaluation,
                worker_id=self._worker_id,
                credential_hash=content_hash,
                outcome=outcome.value,
            )
        )

        entry = db_log.append(self._session, content_hash, outcome, self._worker_id, timestamp, attributes)
        _logger.debug(
            VerifierOperationsLogEntry(
                message=f"Verification attempt {entry.id} recorded.",
                status=VerifierOperationsLogEntry.Status.success,
                operation=VerifierOperationsLogEntry.Operation.verification,
                step=VerifierOperationsLogEntry.Step.verification_audit,
                worker_id=self._worker_id,
                credential_hash=content_hash,
            )
        )
        return VerificationResult(outcome=outcome, content_hash=content_hash, timestamp=timestamp, credential=match)
