# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Append only audit log of verification attempts
"""

import logging
from enum import Enum

import sqlalchemy.exc
import sqlalchemy.orm as sa_orm
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import BOOLEAN, JSON, TEXT, Integer, func, select

import common.db.database as db
from common.model.exception import StorageError

_logger = logging.getLogger(__name__)


class VerificationOutcome(Enum):
    VALID = "VALID"
    NOT_FOUND = "NOT_FOUND"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    """The issuer listing could not be fetched"""


class HistoryScope(Enum):
    LATEST = "latest"
    """Most recent attempt per content hash"""
    ALL = "all"
    """Every attempt"""


class VerificationLogEntry(db.Base):
    """
    One verification attempt. Never updated or deleted once appended.
    """

    __tablename__ = "verification_log"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content_hash: Mapped[str] = mapped_column(TEXT, nullable=False, index=True)
    verified: Mapped[bool] = mapped_column(BOOLEAN, nullable=False)
    outcome: Mapped[str] = mapped_column(TEXT, nullable=False)
    worker_id: Mapped[str] = mapped_column(TEXT, nullable=False)
    verified_at: Mapped[str] = mapped_column(TEXT, nullable=False)
    """ISO8601 UTC timestamp of the attempt"""
    request_attributes: Mapped[dict] = mapped_column(JSON, nullable=True)
    """Attributes as submitted for the verification"""


def append(
    session: sa_orm.Session,
    content_hash: str,
    outcome: VerificationOutcome,
    worker_id: str,
    verified_at: str,
    request_attributes: dict,
) -> VerificationLogEntry:
    entry = VerificationLogEntry(
        content_hash=content_hash,
        verified=outcome is VerificationOutcome.VALID,
        outcome=outcome.value,
        worker_id=worker_id,
        verified_at=verified_at,
        request_attributes=request_attributes,
    )
    session.add(entry)
    try:
        session.commit()
    except sqlalchemy.exc.SQLAlchemyError as e:
        session.rollback()
        _logger.exception("Failed to append verification log entry.")
        raise StorageError("Failed to append verification log entry") from e
    return entry


def history(session: sa_orm.Session, limit: int = 100, scope: HistoryScope = HistoryScope.LATEST) -> list[VerificationLogEntry]:
    """Log entries newest first"""
    query = select(VerificationLogEntry)
    if scope is HistoryScope.LATEST:
        latest_ids = select(func.max(VerificationLogEntry.id)).group_by(VerificationLogEntry.content_hash)
        query = query.where(VerificationLogEntry.id.in_(latest_ids))
    query = query.order_by(VerificationLogEntry.id.desc()).limit(limit)
    try:
        return list(session.scalars(query).all())
    except sqlalchemy.exc.SQLAlchemyError as e:
        _logger.exception("Failed to read verification history.")
        raise StorageError("Failed to read verification history") from e
