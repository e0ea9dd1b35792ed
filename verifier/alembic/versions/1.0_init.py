# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""init

Revision ID: 1.0
Revises:
Create Date: 2025-10-08 09:00:00.000000

Verification log of the verification service.
Will check if the table already exists before attempting to forcefully create it.

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '1.0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    inspector = sa.inspect(op.get_bind())
    existing_tables = inspector.get_table_names()
    if "verification_log" not in existing_tables:
        op.create_table(
            "verification_log",
            sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
            sa.Column("content_hash", sa.TEXT, nullable=False),
            sa.Column("verified", sa.BOOLEAN, nullable=False),
            sa.Column("outcome", sa.TEXT, nullable=False),
            sa.Column("worker_id", sa.TEXT, nullable=False),
            sa.Column("verified_at", sa.TEXT, nullable=False),
            sa.Column("request_attributes", sa.JSON, nullable=True),
        )
        op.create_index("ix_verification_log_content_hash", "verification_log", ["content_hash"])


def downgrade() -> None:
    op.drop_index("ix_verification_log_content_hash", table_name="verification_log")
    op.drop_table("verification_log")
