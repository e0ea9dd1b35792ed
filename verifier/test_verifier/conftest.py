# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import typing

import httpx
import pytest
from fastapi.testclient import TestClient

import common.config as common_conf
import common.db.database as db
import verifier.config as conf
from verifier.issuer_listing import IssuerListing
from verifier.route.verification import get_issuer_listing
from verifier.verifier import app

# The issuance service the verifier reads from runs in process
from issuer.test.conftest import issuer_db_config, issuer_client  # noqa: F401

VERIFIER_WORKER_ID = "verifier-test-1"


def t_config() -> conf.VerifierConfig:
    """
    Overriding Configuration injection function with parameters
    """
    config = conf.VerifierConfig()
    config.worker_id = VERIFIER_WORKER_ID
    # Nothing listens on the discard port
    config.issuance_service_url = "http://127.0.0.1:9"
    config.issuer_timeout_seconds = 0.5
    return config


@pytest.fixture()
def verifier_db_config(tmp_path, monkeypatch) -> conf.VerifierDBConfig:
    """Migrated sqlite database for a single test, separate from the issuer database"""
    monkeypatch.setenv("DB_CONNECTION", f"sqlite:///{tmp_path / 'verifier' / 'verifier.db'}")
    db_config = conf.VerifierDBConfig()
    db.alembic_upgrade(db_config)
    return db_config


@pytest.fixture()
def verifier_session(verifier_db_config: conf.VerifierDBConfig) -> typing.Generator[db.Session, None, None]:
    session = db.session(verifier_db_config.SQLALCHEMY_DATABASE_URL)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def verifier_client(verifier_db_config: conf.VerifierDBConfig) -> typing.Generator[TestClient, None, None]:
    """Verifier without a reachable issuance service"""
    client = TestClient(app)
    app.dependency_overrides[conf.VerifierDBConfig] = lambda: verifier_db_config
    app.dependency_overrides[conf.VerifierConfig] = t_config
    app.dependency_overrides[common_conf.Config] = t_config
    yield client
    client.close()
    app.dependency_overrides.clear()


@pytest.fixture()
def connected_verifier_client(verifier_client: TestClient, issuer_client: TestClient) -> TestClient:
    """Verifier reading the listing of the in process issuance service"""
    app.dependency_overrides[get_issuer_listing] = lambda: IssuerListing(issuer_client)
    return verifier_client


def upstream(handler: typing.Callable[[httpx.Request], httpx.Response]) -> None:
    """Replaces the issuance service by the handler"""
    client = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://issuer.test")
    app.dependency_overrides[get_issuer_listing] = lambda: IssuerListing(client)
