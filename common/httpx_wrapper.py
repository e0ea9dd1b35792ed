# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Wrapper for httpx functions to add additional context"""

from functools import cache

import httpx
from httpx import ConnectError, TimeoutException


@cache
def client(base_url: str, timeout: float, verify: bool) -> httpx.Client:
    """Shared client per upstream service. Connections are pooled between requests."""
    return httpx.Client(base_url=base_url, timeout=timeout, verify=verify)


def get(http_client: httpx.Client, url: str, **kwargs) -> httpx.Response:
    """Wrapper for httpx.Client.get call, on error adds additional information to exception
    By default httpx.Connection error only provides '[Errno -2] Name or service not known'
    Throws httpx.ConnectError / httpx.TimeoutException with URL & timeout on failure to
        get a response from the service
    """
    try:
        return http_client.get(url, **kwargs)
    except (ConnectError, TimeoutException) as e:
        e.add_note(f"Failed to GET {url=} from {http_client.base_url} with timeout={http_client.timeout}")
        raise
