# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Tests Verification Flow against an in process issuance service
"""

import httpx
import pytest
from sqlalchemy import func, select
from fastapi import status
from fastapi.testclient import TestClient

from common import canonical
from common.model.credential import IssuedCredential
from common.model.exception import StorageError

import verifier.db.verification_log as db_log
from verifier.db.verification_log import VerificationOutcome
from verifier.issuer_listing import IssuerListing, UpstreamError
from verifier.verification import CredentialVerifier
from verifier.test_verifier.conftest import VERIFIER_WORKER_ID, upstream

ALICE = {"holderName": "Alice", "credentialType": "License", "issueDate": "2025-01-01"}
BOB = {"holderName": "Bob", "credentialType": "License", "issueDate": "2025-01-01"}


def _log_count(session) -> int:
    return session.scalar(select(func.count()).select_from(db_log.VerificationLogEntry))


def _verify(client: TestClient, payload: dict) -> dict:
    r = client.post("/api/verify", json=payload)
    assert r.status_code == status.HTTP_200_OK, r.text
    return r.json()


def _history(client: TestClient, **params) -> dict:
    r = client.get("/api/verify/history", params=params)
    assert r.status_code == status.HTTP_200_OK, r.text
    return r.json()


def test_health(verifier_client: TestClient):
    r = verifier_client.get("/health")
    assert r.status_code == status.HTTP_200_OK, r.text
    assert r.json()["service"] == "verification"
    assert r.json()["worker"] == VERIFIER_WORKER_ID


def test_readiness_without_issuer(verifier_client: TestClient):
    r = verifier_client.get("/health/readiness")
    assert r.status_code == status.HTTP_503_SERVICE_UNAVAILABLE, r.text
    body = r.json()
    assert body["db_connectivity"] == "HEALTHY"
    assert body["issuer_connectivity"] == "UNHEALTHY"


def test_verify_issued_credential(connected_verifier_client: TestClient, issuer_client: TestClient):
    issued = issuer_client.post("/issue", json=ALICE).json()

    body = _verify(connected_verifier_client, ALICE)
    assert body["valid"] is True
    assert body["status"] == "valid"
    assert body["workerId"] == VERIFIER_WORKER_ID
    assert body["message"] == f"verified by {VERIFIER_WORKER_ID}"
    assert body["timestamp"]
    assert body["credentialDetails"] == {
        "id": issued["id"],
        "issuedBy": issued["workerId"],
        "issuedAt": issued["issuedAt"],
    }


def test_verify_not_issued(connected_verifier_client: TestClient, issuer_client: TestClient):
    issuer_client.post("/issue", json=ALICE)

    body = _verify(connected_verifier_client, BOB)
    assert body["valid"] is False
    assert body["status"] == "not_found"
    assert body["message"] == f"credential not found - verified by {VERIFIER_WORKER_ID}"
    assert "credentialDetails" not in body


def test_verify_with_different_key_order(connected_verifier_client: TestClient, issuer_client: TestClient):
    issuer_client.post("/issue", json={**ALICE, "data": {"level": 2, "tags": ["a", "b"]}})

    body = _verify(connected_verifier_client, {"data": {"tags": ["a", "b"], "level": 2}, "issueDate": "2025-01-01", "holderName": "Alice", "credentialType": "License"})
    assert body["valid"] is True


def test_verify_requires_identical_attributes(connected_verifier_client: TestClient, issuer_client: TestClient):
    """Subsets, supersets and reordered arrays of an issued credential do not verify"""
    issuer_client.post("/issue", json={**ALICE, "data": {"tags": ["a", "b"]}})

    assert not _verify(connected_verifier_client, ALICE)["valid"]
    assert not _verify(connected_verifier_client, {**ALICE, "data": {"tags": ["b", "a"]}})["valid"]
    assert not _verify(connected_verifier_client, {**ALICE, "data": {"tags": ["a", "b"]}, "expiryDate": "2030-01-01"})["valid"]


def test_verify_without_issue_date(connected_verifier_client: TestClient, issuer_client: TestClient):
    """The issuer defaults the issue date, verification has to repeat the stored one"""
    issued = issuer_client.post("/issue", json={"holderName": "Erin", "credentialType": "Badge"}).json()

    assert _verify(connected_verifier_client, {"holderName": "Erin", "credentialType": "Badge"})["status"] == "not_found"
    assert _verify(connected_verifier_client, issued["credential"]["credentialData"])["status"] == "valid"


def test_verify_sees_new_issuance(connected_verifier_client: TestClient, issuer_client: TestClient):
    assert _verify(connected_verifier_client, ALICE)["status"] == "not_found"
    issuer_client.post("/issue", json=ALICE)
    assert _verify(connected_verifier_client, ALICE)["status"] == "valid"


def _server_error(request: httpx.Request) -> httpx.Response:
    return httpx.Response(500, json={"success": False, "message": "boom", "workerId": "issuer-x"})


def _timeout(request: httpx.Request) -> httpx.Response:
    raise httpx.ReadTimeout("Issuer did not answer", request=request)


def _malformed(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"credentials": "none"})


def _not_json(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, text="<html>maintenance</html>")


@pytest.mark.parametrize("handler", [_server_error, _timeout, _malformed, _not_json])
def test_verify_upstream_error(verifier_client: TestClient, handler):
    upstream(handler)

    body = _verify(verifier_client, ALICE)
    assert body["valid"] is False
    assert body["status"] == "upstream_error"
    assert body["message"] == f"verification failed - checked by {VERIFIER_WORKER_ID}"

    history = _history(verifier_client, scope="all")["history"]
    assert len(history) == 1
    assert history[0]["outcome"] == VerificationOutcome.UPSTREAM_ERROR.value
    assert history[0]["verified"] is False


def test_verify_unreachable_issuer(verifier_client: TestClient):
    body = _verify(verifier_client, ALICE)
    assert body["status"] == "upstream_error"


def test_verify_stale_listing(verifier_client: TestClient):
    """A listing taken before the issuance completed does not contain the credential"""
    upstream(lambda request: httpx.Response(200, json={"success": True, "credentials": [], "count": 0}))

    body = _verify(verifier_client, ALICE)
    assert body["status"] == "not_found"


def test_every_attempt_is_logged(connected_verifier_client: TestClient, issuer_client: TestClient, verifier_session):
    issuer_client.post("/issue", json=ALICE)

    attempts = [ALICE, BOB, ALICE, {**BOB, "holderName": "Carol"}, ALICE]
    for payload in attempts:
        _verify(connected_verifier_client, payload)

    assert _log_count(verifier_session) == len(attempts)
    entries = db_log.history(verifier_session, limit=10, scope=db_log.HistoryScope.ALL)
    assert [entry.verified for entry in reversed(entries)] == [True, False, True, False, True]
    assert {entry.worker_id for entry in entries} == {VERIFIER_WORKER_ID}
    assert entries[0].request_attributes == ALICE
    assert entries[0].content_hash == canonical.content_hash(ALICE)


def test_invalid_payload_is_not_logged(connected_verifier_client: TestClient, verifier_session):
    r = connected_verifier_client.post("/api/verify", json={"holderName": "", "credentialType": "License"})
    assert r.status_code == status.HTTP_400_BAD_REQUEST, r.text
    body = r.json()
    assert body["success"] is False
    assert body["message"] == "Invalid credential payload"
    assert body["workerId"] == VERIFIER_WORKER_ID
    assert body["errors"]

    r = connected_verifier_client.post("/api/verify", json={"holderName": "Alice"})
    assert r.status_code == status.HTTP_400_BAD_REQUEST, r.text

    assert _log_count(verifier_session) == 0


def test_history(connected_verifier_client: TestClient, issuer_client: TestClient):
    issuer_client.post("/issue", json=ALICE)
    _verify(connected_verifier_client, BOB)
    _verify(connected_verifier_client, ALICE)
    _verify(connected_verifier_client, BOB)

    everything = _history(connected_verifier_client, scope="all")
    assert everything["success"] is True
    assert everything["count"] == 3
    assert [entry["credentialData"]["holderName"] for entry in everything["history"]] == ["Bob", "Alice", "Bob"]
    ids = [entry["id"] for entry in everything["history"]]
    assert ids == sorted(ids, reverse=True)

    latest = _history(connected_verifier_client)
    assert latest["count"] == 2
    assert [entry["credentialHash"] for entry in latest["history"]] == [canonical.content_hash(BOB), canonical.content_hash(ALICE)]
    assert latest["history"][1]["verified"] is True
    assert set(latest["history"][0]) == {"id", "credentialHash", "verified", "outcome", "workerId", "verifiedAt", "credentialData"}

    limited = _history(connected_verifier_client, scope="all", limit=1)
    assert limited["count"] == 1
    assert limited["history"][0]["id"] == ids[0]


@pytest.mark.parametrize("params", [{"limit": 0}, {"limit": 1001}, {"limit": "many"}, {"scope": "oldest"}])
def test_history_invalid_parameters(verifier_client: TestClient, params):
    r = verifier_client.get("/api/verify/history", params=params)
    assert r.status_code == status.HTTP_400_BAD_REQUEST, r.text


class _FixedListing(IssuerListing):
    def __init__(self, credentials: list[IssuedCredential] | None = None, error: bool = False) -> None:
        self._credentials = credentials or []
        self._error = error

    def fetch(self) -> list[IssuedCredential]:
        if self._error:
            raise UpstreamError("unreachable")
        return self._credentials


def _issued(attributes: dict) -> IssuedCredential:
    return IssuedCredential(
        id="00000000-0000-0000-0000-000000000001",
        credential_data=attributes,
        credential_hash=canonical.content_hash(attributes),
        worker_id="issuer-a",
        issued_at="2025-01-01T00:00:00.000000+00:00",
    )


def test_credential_verifier(verifier_session):
    credential_verifier = CredentialVerifier(verifier_session, worker_id="worker-v", listing=_FixedListing([_issued(BOB), _issued(ALICE)]))

    result = credential_verifier.verify(dict(reversed(list(ALICE.items()))))
    assert result.valid
    assert result.outcome is VerificationOutcome.VALID
    assert result.credential.id == "00000000-0000-0000-0000-000000000001"
    assert result.content_hash == canonical.content_hash(ALICE)

    result = credential_verifier.verify({**ALICE, "holderName": "Mallory"})
    assert not result.valid
    assert result.credential is None

    result = CredentialVerifier(verifier_session, worker_id="worker-v", listing=_FixedListing(error=True)).verify(ALICE)
    assert result.outcome is VerificationOutcome.UPSTREAM_ERROR

    assert _log_count(verifier_session) == 3


@pytest.mark.parametrize("number", ["1e999", "NaN", "-Infinity"])
def test_non_finite_number_rejected(connected_verifier_client: TestClient, verifier_session, number: str):
    r = connected_verifier_client.post(
        "/api/verify",
        content=f'{{"holderName": "A", "credentialType": "B", "level": {number}}}',
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == status.HTTP_400_BAD_REQUEST, r.text
    body = r.json()
    assert body["message"] == "Invalid credential payload"
    assert body["workerId"] == VERIFIER_WORKER_ID
    assert set(body["errors"][0]) == {"loc", "msg", "type"}
    assert _log_count(verifier_session) == 0


def test_log_failure_is_generic_error(verifier_client: TestClient, monkeypatch):
    def broken_append(*args, **kwargs):
        raise StorageError("disk on fire")

    upstream(lambda request: httpx.Response(200, json={"success": True, "credentials": [], "count": 0}))
    monkeypatch.setattr(db_log, "append", broken_append)
    r = verifier_client.post("/api/verify", json=ALICE)
    assert r.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR, r.text
    body = r.json()
    assert body["success"] is False
    assert body["message"] == "Internal server error"
    assert "disk on fire" not in r.text
    assert body["workerId"] == VERIFIER_WORKER_ID
