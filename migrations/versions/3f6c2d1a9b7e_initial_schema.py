"""initial_schema

Create the schema for the Interspace identity and delegation core:
- Accounts (one row per authenticated identity)
- Identity links (undirected account graph with per-edge privacy)
- Profiles and profile memberships
- Linked accounts (EOAs attached to profiles)
- Account delegations (EOA -> session wallet authorizations)

Revision ID: 3f6c2d1a9b7e
Revises:
Create Date: 2026-10-19 09:12:44.517203

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f6c2d1a9b7e"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

UPDATED_AT_TABLES = (
    "accounts",
    "identity_links",
    "profiles",
    "linked_accounts",
    "account_delegations",
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # ========================================================================
    # ACCOUNTS table
    # ========================================================================
    op.create_table(
        "accounts",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("provider", sa.String(50), nullable=True),  # None for wallets
        sa.Column("identifier", sa.String(255), nullable=False),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column(
            "metadata",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "type",
            "provider",
            "identifier",
            name="uq_account_identity",
            postgresql_nulls_not_distinct=True,
        ),
        sa.CheckConstraint(
            "type IN ('wallet', 'email', 'social', 'passkey', 'guest')",
            name="valid_account_type",
        ),
    )
    op.create_index("idx_accounts_identifier", "accounts", ["identifier"])

    # ========================================================================
    # IDENTITY_LINKS table (canonical order: account_a_id < account_b_id)
    # ========================================================================
    op.create_table(
        "identity_links",
        sa.Column("account_a_id", sa.UUID(), nullable=False),
        sa.Column("account_b_id", sa.UUID(), nullable=False),
        sa.Column(
            "privacy_mode", sa.String(20), nullable=False, server_default="linked"
        ),
        sa.Column("link_type", sa.String(20), nullable=False, server_default="direct"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["account_a_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["account_b_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint(
            "account_a_id", "account_b_id", name="pk_identity_links"
        ),
        sa.CheckConstraint("account_a_id < account_b_id", name="canonical_link_order"),
        sa.CheckConstraint(
            "privacy_mode IN ('linked', 'partial', 'isolated')",
            name="valid_privacy_mode",
        ),
        sa.CheckConstraint(
            "link_type IN ('direct', 'inferred')", name="valid_link_type"
        ),
    )
    op.create_index(
        "idx_identity_links_account_b_id", "identity_links", ["account_b_id"]
    )

    # ========================================================================
    # PROFILES table
    # ========================================================================
    op.create_table(
        "profiles",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("session_wallet_address", sa.String(42), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_profiles_session_wallet", "profiles", ["session_wallet_address"]
    )

    # ========================================================================
    # PROFILE_ACCOUNTS table (account membership in profiles)
    # ========================================================================
    op.create_table(
        "profile_accounts",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("profile_id", sa.UUID(), nullable=False),
        sa.Column("account_id", sa.UUID(), nullable=False),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column(
            "permissions",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(["profile_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("profile_id", "account_id", name="uq_profile_account"),
    )
    op.create_index(
        "idx_profile_accounts_account_id", "profile_accounts", ["account_id"]
    )

    # ========================================================================
    # LINKED_ACCOUNTS table (EOAs attached to profiles)
    # ========================================================================
    op.create_table(
        "linked_accounts",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("profile_id", sa.UUID(), nullable=False),
        sa.Column("address", sa.String(42), nullable=False),  # Lower-case hex
        sa.Column("chain_id", sa.BigInteger(), nullable=False, server_default="1"),
        sa.Column(
            "auth_strategy", sa.String(50), nullable=False, server_default="wallet"
        ),
        sa.Column(
            "wallet_type", sa.String(50), nullable=False, server_default="external"
        ),
        sa.Column("custom_name", sa.String(100), nullable=True),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["profile_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("profile_id", "address", name="uq_profile_linked_address"),
    )
    op.create_index("idx_linked_accounts_address", "linked_accounts", ["address"])

    # ========================================================================
    # ACCOUNT_DELEGATIONS table
    # ========================================================================
    op.create_table(
        "account_delegations",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("linked_account_id", sa.UUID(), nullable=False),
        sa.Column("delegated_address", sa.String(42), nullable=False),
        sa.Column("chain_id", sa.BigInteger(), nullable=False),
        sa.Column("authorization_data", postgresql.JSONB(), nullable=False),
        sa.Column("signature", postgresql.JSONB(), nullable=True),
        sa.Column(
            "permissions",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("nonce", sa.Numeric(78, 0), nullable=False),  # uint256
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        *_timestamps(),
        sa.Column("activated_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("revoked_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("transaction_hash", sa.String(66), nullable=True),
        sa.ForeignKeyConstraint(
            ["linked_account_id"], ["linked_accounts.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('pending', 'signed', 'active', 'revoked')",
            name="valid_delegation_status",
        ),
    )
    op.create_index(
        "idx_account_delegations_linked_account_id",
        "account_delegations",
        ["linked_account_id"],
    )
    # At most one open delegation per (linked account, delegate, chain)
    op.create_index(
        "uq_open_delegation",
        "account_delegations",
        ["linked_account_id", "delegated_address", "chain_id"],
        unique=True,
        postgresql_where=sa.text("status IN ('pending', 'signed', 'active')"),
    )

    # Trigger function to update updated_at timestamp
    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql
    """)

    for table in UPDATED_AT_TABLES:
        op.execute(f"""
            CREATE TRIGGER update_{table}_updated_at
            BEFORE UPDATE ON {table}
            FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()
        """)


def downgrade() -> None:
    """Downgrade schema."""
    for table in UPDATED_AT_TABLES:
        op.execute(f"DROP TRIGGER IF EXISTS update_{table}_updated_at ON {table}")
    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")

    # Drop tables (in reverse order of dependencies)
    op.drop_table("account_delegations")
    op.drop_table("linked_accounts")
    op.drop_table("profile_accounts")
    op.drop_table("profiles")
    op.drop_table("identity_links")
    op.drop_table("accounts")
