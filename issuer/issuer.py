# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Credential Issuance Service

Issues each distinct credential content exactly once. The SHA-256 digest of
the canonical attribute encoding is the identity of a credential, the
credential table enforces it with a unique constraint so any number of
instances may share one database.
"""

# FastAPI
from asgi_correlation_id import CorrelationIdMiddleware

from common.fastapi_extensions import ExtendedFastAPI

from issuer.exception.handler import configure_exception_handlers
import issuer.route.issuance as issuance
import issuer.route.health as health
import issuer.config as conf

app = ExtendedFastAPI(conf.IssuerConfig)

app.include_router(issuance.router)
app.include_router(health.router)

configure_exception_handlers(app)

app.add_middleware(
    CorrelationIdMiddleware,
)
