# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from enum import Enum

from pydantic import BaseModel

from fastapi import APIRouter, status, Response

import common.config as conf
from common.parsing import utc_now_iso

__all__ = ["HealthStatus", "HealthResponse", "ServiceHealthResponse", "HealthAPIRouter"]


class HealthStatus(Enum):
    """Indicator of system health."""

    healthy = "HEALTHY"
    unhealthy = "UNHEALTHY"


class ServiceHealthResponse(BaseModel):
    """Summary returned by `/health`, identifies which instance answered."""

    status: str = "healthy"
    service: str
    worker: str
    timestamp: str


class HealthResponse(BaseModel):
    """Response body model for the probe operations.

    May only contain `HealthStatus` fields. Those can be set with boolean values,
    those get converted before the model is returned to the client."""

    http_server_connectivity: HealthStatus = HealthStatus.unhealthy

    def convert_from_bool(self) -> None:
        '''Converts every boolean field into its `HealthStatus` representation.'''
        for k, v in iter(self):
            if isinstance(v, bool):
                setattr(self, k, HealthStatus.healthy if v else HealthStatus.unhealthy)

    def is_healthy(self) -> bool:
        """Summarizes all checks performed into the status field."""
        return all([v == HealthStatus.healthy for _, v in iter(self)])


class HealthAPIRouter(APIRouter):
    """Create a api router for common health endpoints
    `/health`, `/health/liveness` and `/health/readiness`.

    You may extend this router with application specific checks. To do so
    create your own child class of `HealthResponse` and `HealthAPIRouter`
    and overwrite the _build* and get_* methods.
    """

    def __init__(
        self,
        service: str,
        readiness_response_model: type[HealthResponse] = HealthResponse,
        liveness_response_model: type[HealthResponse] = HealthResponse,
        *args,
        **kwargs,
    ) -> None:
        """Create a api router for common health endpoints

        Args:
            service (str): Name of the service reported by `/health`.
            readiness_response_model (type, optional): Response model of `/health/readiness`. Defaults to HealthResponse.
            liveness_response_model (type, optional): Response model of `/health/liveness`. Defaults to HealthResponse.
        """
        super().__init__(prefix="/health", tags=["Health"], *args, **kwargs)
        self.service = service
        self.add_api_route(
            "",
            endpoint=self.get_service_health,
            description="Identifies the service and the worker instance answering.",
        )
        self.add_api_route(
            "/liveness",
            endpoint=self.get_liveness_probe,
            description="Determines whether the application instance needs to be restarted.",
            responses={
                status.HTTP_200_OK: {"model": liveness_response_model},
                status.HTTP_503_SERVICE_UNAVAILABLE: {"model": liveness_response_model},
            },
        )
        self.add_api_route(
            "/readiness",
            endpoint=self.get_readiness_probe,
            description="Determines whether the application instance is ready to accept requests.",
            responses={
                status.HTTP_200_OK: {"model": readiness_response_model},
                status.HTTP_503_SERVICE_UNAVAILABLE: {"model": readiness_response_model},
            },
        )

    def get_service_health(self, config: conf.inject) -> ServiceHealthResponse:
        return ServiceHealthResponse(service=self.service, worker=config.worker_id, timestamp=utc_now_iso())

    def _resolve_probe(self, result: HealthResponse, response: Response) -> HealthResponse:
        """Evaluates the `result` and interprets it according to the checks performed.

        Args:
            result (HealthResponse): The daisy chained response object holding the probe results.
            response (Response): The response object where to set the resulting http code.

        Returns:
            HealthResponse: The daisy chained response object holding the probe results.
        """
        result.http_server_connectivity = HealthStatus.healthy
        result.convert_from_bool()
        if result.is_healthy():
            response.status_code = status.HTTP_200_OK
        else:
            response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return result

    def _build_liveness_probe(
        self,
        result: HealthResponse,
        response: Response,
        config: conf.Config,
    ) -> HealthResponse:
        """Provides information regarding issues which could be
        resolved through a application instance restart."""

        return self._resolve_probe(result, response)

    def get_liveness_probe(self, response: Response, config: conf.inject) -> HealthResponse:
        """Determines whether the application instance needs to be restarted."""
        return self._build_liveness_probe(
            result=HealthResponse(),
            response=response,
            config=config,
        )

    def _build_readiness_probe(
        self,
        result: HealthResponse,
        response: Response,
        config: conf.Config,
    ) -> HealthResponse:
        """Provides information regarding issues which prevent the application to function properly.
        Therefore if any probe fails the system should not receive any data."""

        return self._resolve_probe(result, response)

    def get_readiness_probe(self, response: Response, config: conf.inject) -> HealthResponse:
        """Determines whether the application instance is ready to accept requests."""
        return self._build_readiness_probe(
            result=HealthResponse(),
            response=response,
            config=config,
        )
