# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""init

Revision ID: 1.0
Revises:
Create Date: 2025-10-08 09:00:00.000000

Credential table of the issuance service.
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
    if "credential" not in existing_tables:
        op.create_table(
            "credential",
            sa.Column("id", sa.Uuid, primary_key=True),
            sa.Column("credential_data", sa.JSON, nullable=False),
            sa.Column("content_hash", sa.TEXT, nullable=False),
            sa.Column("worker_id", sa.TEXT, nullable=False),
            sa.Column("issued_at", sa.TEXT, nullable=False),
            sa.UniqueConstraint("content_hash", name="uq_credential_content_hash"),
        )
        op.create_index("ix_credential_issued_at", "credential", ["issued_at"])


def downgrade() -> None:
    op.drop_index("ix_credential_issued_at", table_name="credential")
    op.drop_table("credential")
