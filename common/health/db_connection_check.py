# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Provide functionality to check the sql database connectivity."""

import logging

from sqlalchemy import text
from sqlalchemy.orm import Session

from common.health import base

__all__ = ["check_health_of_db", "ReadinessHealthResponseWithDB"]

_logger = logging.getLogger(__name__)


def check_health_of_db(session_to_check: Session) -> base.HealthStatus:
    """Checks weather the session is active or not.

    Args:
        session_to_check (Session): session to check

    Returns:
        HealthStatus: healthy if the database answered
    """

    result = False
    try:
        session_to_check.execute(text('SELECT 1'))
        result = session_to_check.is_active
    except Exception:
        _logger.exception("Error in health check db probe.")
    return base.HealthStatus.healthy if result else base.HealthStatus.unhealthy


class ReadinessHealthResponseWithDB(base.HealthResponse):
    """Response body model for readiness probes of services owning a database."""

    db_connectivity: base.HealthStatus = base.HealthStatus.unhealthy
