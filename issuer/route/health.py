# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""This file defines the custom health checks for the application."""

from fastapi import Response
from sqlalchemy.orm import Session

from common import health
import issuer.config as conf


class ReadinessHealthResponse(health.ReadinessHealthResponseWithDB):
    """Response body model for health request operation."""


class IssuerHealthAPIRouter(health.HealthAPIRouter):
    def __init__(self) -> None:
        super().__init__(
            service="issuance",
            readiness_response_model=ReadinessHealthResponse,
        )

    def _build_readiness_probe(
        self,
        result: ReadinessHealthResponse,
        response: Response,
        config: conf.IssuerConfig,
        session: Session,
    ) -> ReadinessHealthResponse:
        result.db_connectivity = health.check_health_of_db(session)
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


router = IssuerHealthAPIRouter()
