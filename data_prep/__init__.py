"""
Data preparation: loading persisted documents, sanitization, setup gate.
"""

from .loader import load_document, dump_document, document_to_dict
from .validators import ValidationResult, sanitize_document
from .setup_gate import has_any_financial_data

__all__ = [
    "load_document",
    "dump_document",
    "document_to_dict",
    "ValidationResult",
    "sanitize_document",
    "has_any_financial_data",
]
