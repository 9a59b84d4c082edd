"""Domain services."""

from .account_service import AccountService
from .audit import AuditEvent, AuditLog, AuditLogger
from .base import Service
from .delegation_service import DelegationService
from .email import EmailSender
from .execution_router import ExecutionPlan, ExecutionRouter
from .identity_link_service import IdentityLinkService
from .identity_proof_service import IdentityProofService
from .jwt_service import JWTService
from .linked_account_service import LinkedAccountService
from .nonce import NonceProvider
from .permission import PermissionDecision, TransactionAction
from .profile_service import ProfileService
from .session_wallet import SessionWalletClient

__all__ = [
    "AccountService",
    "AuditEvent",
    "AuditLog",
    "AuditLogger",
    "DelegationService",
    "EmailSender",
    "ExecutionPlan",
    "ExecutionRouter",
    "IdentityLinkService",
    "IdentityProofService",
    "JWTService",
    "LinkedAccountService",
    "NonceProvider",
    "PermissionDecision",
    "ProfileService",
    "Service",
    "SessionWalletClient",
    "TransactionAction",
]
