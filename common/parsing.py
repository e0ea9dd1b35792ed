# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import re
from datetime import datetime, timezone


def interpret_as_bool(boolify: str) -> bool:
    """
    Converts an inpput to an boolean according to commonly used patterns.
    """
    if isinstance(boolify, bool):
        return boolify
    if isinstance(boolify, int):
        return boolify > 0
    elif isinstance(boolify, str):
        return re.match(r"^(y|yes|1|true)$", boolify, re.IGNORECASE | re.MULTILINE) is not None
    raise Exception(f"Can't boolify a {boolify}.")


def utc_now_iso() -> str:
    """Current UTC time as ISO8601 string. Always includes microseconds so the strings sort chronologically."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def utc_today_iso() -> str:
    """Current UTC date as YYYY-MM-DD"""
    return datetime.now(timezone.utc).date().isoformat()
