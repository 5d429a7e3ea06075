"""
API layer package for symgraph.
Exports the facade and the response envelope.
"""

from symgraph.interfaces.api.facade import SymbolGraphFacade, api_call
from symgraph.interfaces.api.types.common_types import ApiError, ApiResponse

__all__ = [
    "ApiError",
    "ApiResponse",
    "SymbolGraphFacade",
    "api_call",
]
