# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Storage for issued credentials.

The unique constraint on the content hash is the only synchronisation
between concurrently running issuer instances sharing this table.
"""

import uuid
import logging

import sqlalchemy.exc
import sqlalchemy.orm as sa_orm
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import JSON, TEXT, Uuid, select

import common.db.database as db
from common.parsing import utc_now_iso
from common.model.credential import IssuedCredential
from common.model.exception import StorageError

_logger = logging.getLogger(__name__)


class DuplicateHashError(Exception):
    """A credential with the same content hash has been inserted concurrently"""

    def __init__(self, content_hash: str) -> None:
        super().__init__(f"Credential with hash {content_hash} already exists")
        self.content_hash = content_hash


class Credential(db.Base):
    """
    Issued Credential. Never updated or deleted once inserted.
    """

    __tablename__ = "credential"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    credential_data: Mapped[dict] = mapped_column(JSON, nullable=False)
    """Attributes as submitted, including defaulted issue date"""
    content_hash: Mapped[str] = mapped_column(TEXT, nullable=False, unique=True)
    """SHA-256 of the canonical encoding of credential_data"""
    worker_id: Mapped[str] = mapped_column(TEXT, nullable=False)
    """Instance which inserted the credential"""
    issued_at: Mapped[str] = mapped_column(TEXT, nullable=False, default=utc_now_iso, index=True)
    """ISO8601 UTC timestamp set on insertion"""

    def to_model(self) -> IssuedCredential:
        return IssuedCredential(
            id=str(self.id),
            credential_data=self.credential_data,
            credential_hash=self.content_hash,
            worker_id=self.worker_id,
            issued_at=self.issued_at,
        )


def find_by_hash(session: sa_orm.Session, content_hash: str) -> Credential | None:
    try:
        return session.scalars(select(Credential).where(Credential.content_hash == content_hash)).one_or_none()
    except sqlalchemy.exc.SQLAlchemyError as e:
        _logger.exception("Failed to look up credential.")
        raise StorageError("Failed to look up credential") from e


def insert(session: sa_orm.Session, attributes: dict, content_hash: str, worker_id: str, credential_id: uuid.UUID | None = None) -> Credential:
    """
    Inserts and commits a new credential, with a fresh id unless one is given.
    Raises DuplicateHashError if the content hash has been stored in the meantime.
    """
    credential = Credential(
        id=credential_id or uuid.uuid4(),
        credential_data=attributes,
        content_hash=content_hash,
        worker_id=worker_id,
    )
    session.add(credential)
    try:
        session.commit()
    except sqlalchemy.exc.IntegrityError as e:
        session.rollback()
        raise DuplicateHashError(content_hash) from e
    except sqlalchemy.exc.SQLAlchemyError as e:
        session.rollback()
        _logger.exception("Failed to insert credential.")
        raise StorageError("Failed to insert credential") from e
    return credential


def list_all(session: sa_orm.Session) -> list[Credential]:
    """All issued credentials, newest first"""
    try:
        return list(session.scalars(select(Credential).order_by(Credential.issued_at.desc())).all())
    except sqlalchemy.exc.SQLAlchemyError as e:
        _logger.exception("Failed to list credentials.")
        raise StorageError("Failed to list credentials") from e
