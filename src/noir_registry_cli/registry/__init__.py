"""Noir registry client module."""

from .client import RegistryClient
from .retry import RetryDecision, Action, FailureReason, decide, backoff_delay

__all__ = ["RegistryClient", "RetryDecision", "Action", "FailureReason", "decide", "backoff_delay"]
