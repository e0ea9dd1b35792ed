# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Signed token optionally attached to freshly issued credentials.

Symmetric HS256, there is no trust chain behind it.
"""

import time
import hashlib

from jwcrypto import jwk, jwt
from jwcrypto.common import base64url_encode

from pydantic import JsonValue


def signing_key(secret: str) -> jwk.JWK:
    """
    HS256 key derived from the configured secret.
    The SHA-256 digest always yields the 256 bit key length HS256 requires, whatever the length of the secret.
    """
    return jwk.JWK(kty="oct", k=base64url_encode(hashlib.sha256(secret.encode("utf-8")).digest()))


class TokenSigner:
    def __init__(self, secret: str, issuer_name: str) -> None:
        self._key = signing_key(secret)
        self._issuer_name = issuer_name

    def sign(self, credential_id: str, attributes: dict[str, JsonValue], content_hash: str) -> str:
        claims = {
            "jti": credential_id,
            "sub": attributes.get("holderName"),
            "iss": self._issuer_name,
            "iat": int(time.time()),
            "credentialHash": content_hash,
        }
        token = jwt.JWT(header={"alg": "HS256", "typ": "JWT"}, claims=claims)
        token.make_signed_token(self._key)
        return token.serialize()
