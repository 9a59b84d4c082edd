"""SQLAlchemy table definitions for Interspace.

These table definitions are used with SQLAlchemy Core.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# Delegation statuses that hold the per-tuple uniqueness slot
OPEN_DELEGATION_STATUSES = ("pending", "signed", "active")

# ============================================================================
# ACCOUNTS TABLE (one row per authenticated identity)
# ============================================================================
accounts_table = Table(
    "accounts",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("type", String(20), nullable=False),  # wallet, email, social, ...
    Column("provider", String(50), nullable=True),  # None for wallets
    Column("identifier", String(255), nullable=False),
    Column("verified", Boolean, nullable=False, server_default="false"),
    Column("metadata", JSONB, nullable=False, server_default="{}"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint(
        "type",
        "provider",
        "identifier",
        name="uq_account_identity",
        postgresql_nulls_not_distinct=True,
    ),
    CheckConstraint(
        "type IN ('wallet', 'email', 'social', 'passkey', 'guest')",
        name="valid_account_type",
    ),
)

Index("idx_accounts_identifier", accounts_table.c.identifier)

# ============================================================================
# IDENTITY LINKS TABLE (undirected edges, stored in canonical order)
# ============================================================================
identity_links_table = Table(
    "identity_links",
    metadata,
    Column(
        "account_a_id",
        UUID,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "account_b_id",
        UUID,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("privacy_mode", String(20), nullable=False, server_default="linked"),
    Column("link_type", String(20), nullable=False, server_default="direct"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    PrimaryKeyConstraint("account_a_id", "account_b_id", name="pk_identity_links"),
    CheckConstraint("account_a_id < account_b_id", name="canonical_link_order"),
    CheckConstraint(
        "privacy_mode IN ('linked', 'partial', 'isolated')",
        name="valid_privacy_mode",
    ),
    CheckConstraint("link_type IN ('direct', 'inferred')", name="valid_link_type"),
)

Index("idx_identity_links_account_b_id", identity_links_table.c.account_b_id)

# ============================================================================
# PROFILES TABLE
# ============================================================================
profiles_table = Table(
    "profiles",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("name", String(100), nullable=False),
    Column("session_wallet_address", String(42), nullable=False),
    Column("is_active", Boolean, nullable=False, server_default="true"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_profiles_session_wallet", profiles_table.c.session_wallet_address)

# ============================================================================
# PROFILE ACCOUNTS TABLE (account membership in profiles)
# ============================================================================
profile_accounts_table = Table(
    "profile_accounts",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "profile_id",
        UUID,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "account_id",
        UUID,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("is_primary", Boolean, nullable=False, server_default="false"),
    Column("permissions", JSONB, nullable=False, server_default="{}"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("profile_id", "account_id", name="uq_profile_account"),
)

Index("idx_profile_accounts_account_id", profile_accounts_table.c.account_id)

# ============================================================================
# LINKED ACCOUNTS TABLE (EOAs attached to profiles)
# ============================================================================
linked_accounts_table = Table(
    "linked_accounts",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "profile_id",
        UUID,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("address", String(42), nullable=False),  # Lower-case hex
    Column("chain_id", BigInteger, nullable=False, server_default="1"),
    Column("auth_strategy", String(50), nullable=False, server_default="wallet"),
    Column("wallet_type", String(50), nullable=False, server_default="external"),
    Column("custom_name", String(100), nullable=True),
    Column("is_primary", Boolean, nullable=False, server_default="false"),
    Column("is_active", Boolean, nullable=False, server_default="true"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("profile_id", "address", name="uq_profile_linked_address"),
)

Index("idx_linked_accounts_address", linked_accounts_table.c.address)

# ============================================================================
# ACCOUNT DELEGATIONS TABLE
# ============================================================================
account_delegations_table = Table(
    "account_delegations",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "linked_account_id",
        UUID,
        ForeignKey("linked_accounts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("delegated_address", String(42), nullable=False),  # Session wallet
    Column("chain_id", BigInteger, nullable=False),
    Column("authorization_data", JSONB, nullable=False),
    Column("signature", JSONB, nullable=True),  # {y_parity, r, s}
    Column("permissions", JSONB, nullable=False, server_default="{}"),
    Column("nonce", Numeric(78, 0), nullable=False),  # uint256
    Column("expires_at", TIMESTAMP(timezone=True), nullable=True),
    Column("status", String(20), nullable=False, server_default="pending"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("activated_at", TIMESTAMP(timezone=True), nullable=True),
    Column("revoked_at", TIMESTAMP(timezone=True), nullable=True),
    Column("transaction_hash", String(66), nullable=True),
    CheckConstraint(
        "status IN ('pending', 'signed', 'active', 'revoked')",
        name="valid_delegation_status",
    ),
)

# At most one open delegation per (linked account, delegate, chain)
Index(
    "uq_open_delegation",
    account_delegations_table.c.linked_account_id,
    account_delegations_table.c.delegated_address,
    account_delegations_table.c.chain_id,
    unique=True,
    postgresql_where=account_delegations_table.c.status.in_(OPEN_DELEGATION_STATUSES),
)
Index(
    "idx_account_delegations_linked_account_id",
    account_delegations_table.c.linked_account_id,
)

# ============================================================================
# IDENTITY CHALLENGES TABLE (single-use proof-of-control challenges)
# ============================================================================
identity_challenges_table = Table(
    "identity_challenges",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("account_type", String(20), nullable=False),  # wallet or email
    Column("identifier", String(255), nullable=False),
    Column("message", Text, nullable=True),  # Wallet: text to sign
    Column("code_hash", String(64), nullable=True),  # Email: sha256 hex
    Column("attempts", Integer, nullable=False, server_default="0"),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    Column("consumed_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint(
        "account_type IN ('wallet', 'email')", name="valid_challenge_account_type"
    ),
)

Index("idx_identity_challenges_expires_at", identity_challenges_table.c.expires_at)
