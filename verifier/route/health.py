# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""This file defines the custom health checks for the application."""
import logging

from fastapi import Response
from sqlalchemy.orm import Session

from common import health
import common.httpx_wrapper as httpxw
import verifier.config as conf
from verifier.issuer_listing import CREDENTIALS_PATH

_logger = logging.getLogger(__name__)


class ReadinessHealthResponse(health.ReadinessHealthResponseWithDB):
    """Response body model for health request operation."""

    issuer_connectivity: health.HealthStatus = health.HealthStatus.unhealthy


class VerifierHealthAPIRouter(health.HealthAPIRouter):
    def __init__(self) -> None:
        super().__init__(
            service="verification",
            readiness_response_model=ReadinessHealthResponse,
        )

    def _build_readiness_probe(
        self,
        result: ReadinessHealthResponse,
        response: Response,
        config: conf.VerifierConfig,
        session: Session,
    ) -> ReadinessHealthResponse:
        result.db_connectivity = health.check_health_of_db(session)
        try:
            issuer_response = httpxw.get(config.get_issuer_client(), CREDENTIALS_PATH)
            result.issuer_connectivity = issuer_response.status_code == 200
        except Exception:
            _logger.exception(f"Health check for issuance service ({config.issuance_service_url=}) errors.")
        return super()._build_readiness_probe(result, response, config)

    def get_readiness_probe(
        self,
        response: Response,
        config: conf.inject,
        session: conf.inject_session,
    ) -> ReadinessHealthResponse:
        return self._build_readiness_probe(
            ReadinessHealthResponse(),
            response,
            config,
            session,
        )


router = VerifierHealthAPIRouter()
