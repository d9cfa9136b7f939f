"""Application services.

``tool_service`` sits on top of the orchestration layer and is imported
by its module path, not from here.
"""
from .network_resolution import detect_network_from_text, select_network
from .parameter_resolver import ParameterResolver, extract_token_id
from .precondition_verifier import PreconditionVerifier
from .transaction_executor import TransactionExecutor

__all__ = [
    "ParameterResolver",
    "PreconditionVerifier",
    "TransactionExecutor",
    "detect_network_from_text",
    "extract_token_id",
    "select_network",
]
