"""Linked account use cases."""

from .link_account import LinkAccountRequest, LinkAccountUseCase, LinkedAccountItem
from .list_linked_accounts import (
    ListLinkedAccountsRequest,
    ListLinkedAccountsResponse,
    ListLinkedAccountsUseCase,
)
from .unlink_account import UnlinkAccountRequest, UnlinkAccountUseCase

__all__ = [
    "LinkAccountRequest",
    "LinkAccountUseCase",
    "LinkedAccountItem",
    "ListLinkedAccountsRequest",
    "ListLinkedAccountsResponse",
    "ListLinkedAccountsUseCase",
    "UnlinkAccountRequest",
    "UnlinkAccountUseCase",
]
