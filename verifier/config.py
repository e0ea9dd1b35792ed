# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import os
from typing import Annotated

import httpx
from fastapi import Depends
from sqlalchemy.orm import Session

import common.config as conf
import common.db.database as db
import common.httpx_wrapper as httpxw


class VerifierConfig(conf.Config):
    def __init__(self):
        super().__init__()
        self.app_name = os.getenv("APP_NAME", "Verification Service")
        self.port = int(os.getenv("PORT", "3001"))
        self.issuance_service_url = os.getenv("ISSUANCE_SERVICE_URL", "http://localhost:3000")
        """Base url of the issuance service whose credential listing is checked"""
        self.issuer_timeout_seconds = float(os.getenv("ISSUER_TIMEOUT_SECONDS", 3))
        """
        Upper bound for fetching the credential listing. A slower issuer counts as unreachable.
        """

    def get_issuer_client(self) -> httpx.Client:
        """Client for the issuance service, shared by all requests with the same settings"""
        return httpxw.client(self.issuance_service_url, self.issuer_timeout_seconds, self.enable_ssl_verification)


inject = Annotated[VerifierConfig, Depends(VerifierConfig)]


class VerifierDBConfig(conf.DBConfig):
    component = "verifier"
    alembic_directory = os.path.dirname(os.path.abspath(__file__))


env_session = db.session_dependency(VerifierDBConfig)

inject_session = Annotated[Session, Depends(env_session)]
