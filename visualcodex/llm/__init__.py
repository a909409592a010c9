"""LLM integration for visualcodex."""

from .client import LLMClient, create_llm_client
from .payload import PayloadBuilder, create_payload_builder
from .parsers import OperationParser, parse_operations, extract_response_content

__all__ = [
    "LLMClient",
    "create_llm_client",
    "PayloadBuilder",
    "create_payload_builder",
    "OperationParser",
    "parse_operations",
    "extract_response_content",
]
