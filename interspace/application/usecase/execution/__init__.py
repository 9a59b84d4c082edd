"""Execution use cases."""

from .determine_execution_path import (
    DetermineExecutionPathRequest,
    DetermineExecutionPathResponse,
    DetermineExecutionPathUseCase,
)
from .execute_with_delegation import (
    ExecuteWithDelegationRequest,
    ExecuteWithDelegationResponse,
    ExecuteWithDelegationUseCase,
)

__all__ = [
    "DetermineExecutionPathRequest",
    "DetermineExecutionPathResponse",
    "DetermineExecutionPathUseCase",
    "ExecuteWithDelegationRequest",
    "ExecuteWithDelegationResponse",
    "ExecuteWithDelegationUseCase",
]
