"""
Domain Layer - Pure Value Types

This layer contains:
- Result (the normalized outcome of one processor call)
- Standard error codes and the vendor-code mapper
- AVS / CVV verification codes

Key principle: ZERO dependencies on transport or orchestration.
"""

from gateway_core.domain.error_codes import ErrorCodeMapper, StandardErrorCode
from gateway_core.domain.result import Result
from gateway_core.domain.verification import AVSCode, CVVCode

__all__ = [
    "AVSCode",
    "CVVCode",
    "ErrorCodeMapper",
    "Result",
    "StandardErrorCode",
]
