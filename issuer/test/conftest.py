# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import typing

import pytest
from fastapi.testclient import TestClient

import common.config as common_conf
import common.db.database as db
import issuer.config as conf
from issuer.issuer import app

ISSUER_WORKER_ID = "issuer-test-1"


def t_config() -> conf.IssuerConfig:
    """
    Overriding Configuration injection function with parameters
    """
    config = conf.IssuerConfig()
    config.worker_id = ISSUER_WORKER_ID
    config.signing_secret = None
    return config


@pytest.fixture()
def issuer_db_config(tmp_path, monkeypatch) -> conf.IssuerDBConfig:
    """Migrated sqlite database for a single test"""
    monkeypatch.setenv("DB_CONNECTION", f"sqlite:///{tmp_path / 'issuer' / 'issuer.db'}")
    db_config = conf.IssuerDBConfig()
    db.alembic_upgrade(db_config)
    return db_config


@pytest.fixture()
def issuer_session(issuer_db_config: conf.IssuerDBConfig) -> typing.Generator[db.Session, None, None]:
    session = db.session(issuer_db_config.SQLALCHEMY_DATABASE_URL)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def issuer_client(issuer_db_config: conf.IssuerDBConfig) -> typing.Generator[TestClient, None, None]:
    client = TestClient(app)
    app.dependency_overrides[conf.IssuerDBConfig] = lambda: issuer_db_config
    app.dependency_overrides[conf.IssuerConfig] = t_config
    # Injected config & injected specialized config are not the same override
    app.dependency_overrides[common_conf.Config] = t_config
    yield client
    client.close()
    app.dependency_overrides.clear()
