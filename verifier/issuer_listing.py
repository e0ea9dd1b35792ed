# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Read access to the credential listing published by the issuance service.

Every fetch returns whatever the issuer holds at that moment. There is no
isolation against issuances in flight elsewhere.
"""

import logging

import httpx
import pydantic

import common.httpx_wrapper as httpxw
from common.model.credential import CredentialListing, IssuedCredential

_logger = logging.getLogger(__name__)

CREDENTIALS_PATH = "/credentials"


class UpstreamError(Exception):
    """The issuer listing could not be fetched or understood"""


class IssuerListing:
    def __init__(self, client: httpx.Client) -> None:
        """* client: httpx client with the issuance service as base url and a bounded timeout"""
        self._client = client

    def fetch(self) -> list[IssuedCredential]:
        """
        Fetches the current snapshot of issued credentials.
        Raises UpstreamError on connection failures, timeouts, non success responses and malformed bodies.
        """
        try:
            response = httpxw.get(self._client, CREDENTIALS_PATH)
            response.raise_for_status()
        except httpx.HTTPError as e:
            _logger.warning(f"Fetching the issuer listing failed: {e!r}")
            raise UpstreamError(f"Issuer listing unavailable: {e}") from e
        try:
            listing = CredentialListing.model_validate_json(response.content)
        except pydantic.ValidationError as e:
            _logger.warning(f"Issuer listing malformed: {e.error_count()} errors")
            raise UpstreamError("Issuer listing malformed") from e
        return listing.credentials
