# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Canonical encoding of credential attributes.

Both services derive the identity of a credential from the SHA-256 digest of
this encoding, so the rules below must never diverge between them:

* null, booleans and strings are written as their JSON literal
* numbers are written as JSON literal, integral floats without fraction (1.0 -> 1)
* arrays keep their element order
* object keys are sorted by unicode code point, no whitespace anywhere
"""

import json
import math
import hashlib

from pydantic import JsonValue


class CanonicalEncodingError(ValueError):
    """The value can not be represented in the canonical encoding"""


def _encode_number(value: int | float) -> str:
    if isinstance(value, float):
        if not math.isfinite(value):
            raise CanonicalEncodingError(f"Non finite number {value} can not be encoded")
        if value.is_integer():
            return json.dumps(int(value))
    return json.dumps(value)


def encode(value: JsonValue) -> str:
    """Returns the canonical string of a JSON compatible value."""
    if value is None or isinstance(value, (bool, str)):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (int, float)):
        return _encode_number(value)
    if isinstance(value, (list, tuple)):
        return f"[{','.join(encode(element) for element in value)}]"
    if isinstance(value, dict):
        for key in value:
            if not isinstance(key, str):
                raise CanonicalEncodingError(f"Object keys must be strings, got {key!r}")
        pairs = (f"{json.dumps(key, ensure_ascii=False)}:{encode(value[key])}" for key in sorted(value))
        return f"{{{','.join(pairs)}}}"
    raise CanonicalEncodingError(f"Type {type(value).__name__} is not JSON compatible")


def encode_bytes(value: JsonValue) -> bytes:
    return encode(value).encode("utf-8")


def content_hash(value: JsonValue) -> str:
    """SHA-256 lowercase hex digest of the canonical encoding. This is the identity of a credential."""
    return hashlib.sha256(encode_bytes(value)).hexdigest()
