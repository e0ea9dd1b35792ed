# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Credential data as exchanged between clients, the issuer and the verifier.
"""

from pydantic import BaseModel, ConfigDict, Field, JsonValue, model_validator
from pydantic.alias_generators import to_camel

from common import canonical


class CredentialAttributes(BaseModel):
    """
    Attributes of a credential as submitted by a client.

    Requires the holder identity and the credential category. Any further
    JSON compatible field is accepted and becomes part of the content hash.
    """

    model_config = ConfigDict(extra="allow")

    __pydantic_extra__: dict[str, JsonValue]

    holderName: str = Field(min_length=1, max_length=255)
    credentialType: str = Field(min_length=1, max_length=100)
    issueDate: str | None = None
    expiryDate: str | None = None

    @model_validator(mode="after")
    def check_canonical_encoding(self) -> "CredentialAttributes":
        # Rejects e.g. NaN which the json parser accepts
        canonical.encode(self.as_attributes())
        return self

    def as_attributes(self) -> dict[str, JsonValue]:
        """The attributes exactly as submitted. Optional fields which were not sent are left out."""
        return self.model_dump(exclude_unset=True)


class CamelModel(BaseModel):
    """Base for response bodies, serialized with camelCase keys"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IssuedCredential(CamelModel):
    """A credential as published by the issuer listing"""

    id: str
    credential_data: dict[str, JsonValue]
    credential_hash: str
    worker_id: str
    issued_at: str


class CredentialListing(CamelModel):
    """Body of the issuer listing `GET /credentials`"""

    success: bool = True
    credentials: list[IssuedCredential]
    count: int
