"""add identity challenges

Single-use challenges proving control of a wallet (signed message) or an
email address (mailed code) before a sign-in or link is accepted.

Revision ID: 9b4e0c7d2a51
Revises: 3f6c2d1a9b7e
Create Date: 2026-10-19 14:31:08.204117

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "9b4e0c7d2a51"
down_revision: Union[str, Sequence[str], None] = "3f6c2d1a9b7e"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "identity_challenges",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("account_type", sa.String(20), nullable=False),
        sa.Column("identifier", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("code_hash", sa.String(64), nullable=True),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("consumed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "account_type IN ('wallet', 'email')",
            name="valid_challenge_account_type",
        ),
    )
    op.create_index(
        "idx_identity_challenges_expires_at", "identity_challenges", ["expires_at"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(
        "idx_identity_challenges_expires_at", table_name="identity_challenges"
    )
    op.drop_table("identity_challenges")
