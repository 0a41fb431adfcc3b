"""Create user_accounts and attachments tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial schema for registration: user accounts and the attachment
       blobs uploaded with them.
Note:  email is indexed but not unique; attachments have no foreign key.

Rollback: downgrade() drops both tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "user_accounts",
        sa.Column("id", sa.Uuid(), nullable=False, comment="Generated identifier, immutable after insert"),
        sa.Column("first_name", sa.String(255), nullable=True),
        sa.Column("last_name", sa.String(255), nullable=True),
        sa.Column("email", sa.String(320), nullable=False, comment="Login lookup key (exact match, not unique)"),
        sa.Column(
            "password_encoded",
            sa.String(1024),
            nullable=False,
            comment="Base64 of the UTF-8 password; reversible, not a hash",
        ),
        sa.Column("contact_id", sa.BigInteger(), nullable=True, comment="External contact reference, not validated"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_user_accounts_email", "user_accounts", ["email"])

    op.create_table(
        "attachments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=True),
        sa.Column("file_type", sa.String(255), nullable=True),
        sa.Column("data", sa.LargeBinary(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("attachments")
    op.drop_index("idx_user_accounts_email", table_name="user_accounts")
    op.drop_table("user_accounts")
