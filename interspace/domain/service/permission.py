"""Delegation permission evaluation.

Pure functions deciding whether a delegation's permission set covers a
transaction. Intent is inferred from the call data's 4-byte selector,
which only buckets calls coarsely (transfer, approve, swap, generic
contract call). An explicit allowed_methods entry for the target contract
takes precedence over the inference.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from interspace.domain.model.delegation import DelegationPermissions
from interspace.domain.model.transaction import TransactionRequest

TRANSFER_SELECTORS = frozenset(
    {
        "0xa9059cbb",  # transfer(address,uint256)
        "0x23b872dd",  # transferFrom(address,address,uint256)
    }
)

APPROVE_SELECTORS = frozenset(
    {
        "0x095ea7b3",  # approve(address,uint256)
    }
)

# Common DEX router entry points
SWAP_SELECTORS = frozenset(
    {
        "0x38ed1739",  # swapExactTokensForTokens
        "0x8803dbee",  # swapTokensForExactTokens
        "0x7ff36ab5",  # swapExactETHForTokens
        "0xfb3bdb41",  # swapETHForExactTokens
        "0x18cbafe5",  # swapExactTokensForETH
        "0x4a25d94a",  # swapTokensForExactETH
        "0x414bf389",  # exactInputSingle (SwapRouter)
        "0xc04b8d59",  # exactInput (SwapRouter)
        "0xdb3e2198",  # exactOutputSingle (SwapRouter)
        "0xf28c0498",  # exactOutput (SwapRouter)
        "0x04e45aaf",  # exactInputSingle (SwapRouter02)
        "0xb858183f",  # exactInput (SwapRouter02)
        "0x3593564c",  # execute(bytes,bytes[],uint256) (UniversalRouter)
        "0x24856bc3",  # execute(bytes,bytes[]) (UniversalRouter)
    }
)


class TransactionAction(str, Enum):
    """Coarse intent inferred from a transaction."""

    TRANSFER = "transfer"
    APPROVE = "approve"
    SWAP = "swap"
    CONTRACT_INTERACTION = "contract interaction"


@dataclass(frozen=True)
class PermissionDecision:
    """Outcome of evaluating a transaction against a permission set."""

    allowed: bool
    reason: Optional[str] = None
    action: Optional[TransactionAction] = None


def classify_transaction(transaction: TransactionRequest) -> TransactionAction:
    """Infer what a transaction does from its call data."""
    selector = transaction.selector
    if transaction.is_plain_transfer:
        return TransactionAction.TRANSFER
    # Data too short for a selector still reaches the fallback
    if selector is None:
        return TransactionAction.CONTRACT_INTERACTION
    if selector in TRANSFER_SELECTORS:
        return TransactionAction.TRANSFER
    if selector in APPROVE_SELECTORS:
        return TransactionAction.APPROVE
    if selector in SWAP_SELECTORS:
        return TransactionAction.SWAP
    return TransactionAction.CONTRACT_INTERACTION


def _denied(action: TransactionAction) -> PermissionDecision:
    return PermissionDecision(
        allowed=False,
        reason=f"Delegation is not authorized for {action.value}",
        action=action,
    )


def _allows_action(
    permissions: DelegationPermissions, action: TransactionAction
) -> bool:
    if action == TransactionAction.TRANSFER:
        return bool(permissions.can_transfer)
    if action == TransactionAction.APPROVE:
        if permissions.can_approve is None:
            return bool(permissions.can_transfer)
        return permissions.can_approve
    if action == TransactionAction.SWAP:
        return permissions.can_swap
    return permissions.can_interact_with_contracts


def evaluate_transaction(
    permissions: DelegationPermissions, transaction: TransactionRequest
) -> PermissionDecision:
    """Decide whether permissions cover transaction.

    Checks, in order: legacy full trust, chain scope, value cap, plain
    transfers, explicit per-contract method allow-list, then the selector
    heuristic with the contract allow-list applied to contract calls.

    Args:
        permissions: Delegation permission set
        transaction: Transaction to authorize

    Returns:
        Decision with a caller-facing reason when denied
    """
    if permissions.can_transfer is None and permissions.full_access:
        return PermissionDecision(allowed=True)

    if (
        permissions.allowed_chains
        and transaction.chain_id not in permissions.allowed_chains
    ):
        return PermissionDecision(
            allowed=False,
            reason=f"Chain {transaction.chain_id} is not allowed by this delegation",
        )

    if (
        permissions.max_transaction_value is not None
        and transaction.value > permissions.max_transaction_value
    ):
        return PermissionDecision(
            allowed=False,
            reason=(
                f"Transaction value {transaction.value} exceeds maximum allowed "
                f"{permissions.max_transaction_value}"
            ),
        )

    action = classify_transaction(transaction)

    if transaction.is_plain_transfer:
        if permissions.can_transfer:
            return PermissionDecision(allowed=True, action=action)
        return _denied(action)

    allowed_methods = permissions.allowed_methods.get(transaction.to.root)
    if allowed_methods is not None:
        if transaction.selector in allowed_methods:
            return PermissionDecision(allowed=True, action=action)
        return PermissionDecision(
            allowed=False,
            reason=(
                f"Delegation is not authorized for method {transaction.selector} "
                f"on {transaction.to.root}"
            ),
            action=action,
        )

    if not _allows_action(permissions, action):
        return _denied(action)

    if action in (TransactionAction.SWAP, TransactionAction.CONTRACT_INTERACTION):
        if (
            permissions.allowed_contracts
            and transaction.to not in permissions.allowed_contracts
        ):
            return PermissionDecision(
                allowed=False,
                reason=(
                    f"Delegation is not authorized for {action.value} "
                    f"with contract {transaction.to.root}"
                ),
                action=action,
            )

    return PermissionDecision(allowed=True, action=action)


def has_permission_for_transaction(
    permissions: DelegationPermissions, transaction: TransactionRequest
) -> bool:
    """Boolean form of evaluate_transaction."""
    return evaluate_transaction(permissions, transaction).allowed
