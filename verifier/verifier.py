# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Credential Verification Service

Checks submitted credential attributes against the listing published by the
issuance service. Does not share storage with the issuer, each check reads
the issuers current state and is recorded in the verification log.
"""

# FastAPI
from asgi_correlation_id import CorrelationIdMiddleware

from common.fastapi_extensions import ExtendedFastAPI

from verifier.exception.handler import configure_exception_handlers

import verifier.route.verification as verification
import verifier.route.health as health

from verifier import config as conf


app = ExtendedFastAPI(conf.VerifierConfig)
app.include_router(verification.router)
app.include_router(health.router)

configure_exception_handlers(app)

app.add_middleware(CorrelationIdMiddleware)
