"""
Host-facing integration: token extraction and the FastAPI dependency.
"""

from .extract import extract_token
from .scheme import AzureADBearer, ErrorContext, ResponseFunc

__all__ = ["AzureADBearer", "ErrorContext", "ResponseFunc", "extract_token"]
