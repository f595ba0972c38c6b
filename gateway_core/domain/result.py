"""
Result - The Canonical Outcome Of One Remote Operation

Every adapter call, whatever the wire format, ends up here:
- JSON from a REST processor
- XML from a SOAP endpoint
- key=value pairs from a 1990s CGI script

CRITICAL: A decline is data, not an exception.
    Result(success=False, message="Card expired", ...)
Exceptions are reserved for the network giving us nothing at all.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from gateway_core.domain.error_codes import StandardErrorCode
from gateway_core.domain.verification import AVSCode, CVVCode


class Result(BaseModel):
    """
    Immutable, normalized outcome of one processor call.

    Invariant: a successful result never carries an error code.
    Constructing Result(success=True, standard_error_code=...) raises.

    raw is a read-only view of the decoded payload (top level only); it is
    for diagnostics, so copy it before editing.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str = ""
    raw: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)
    authorization: Optional[str] = None
    avs_code: Optional[AVSCode] = None
    cvv_code: Optional[CVVCode] = None
    error_code: Optional[str] = None  # Raw vendor code, surfaced when unmapped
    standard_error_code: Optional[StandardErrorCode] = None
    test: bool = False
    fraud_review: bool = False

    @field_validator("raw")
    @classmethod
    def freeze_raw(cls, v: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(v))

    @field_serializer("raw")
    def serialize_raw(self, raw: Mapping[str, Any]) -> Dict[str, Any]:
        return dict(raw)

    @model_validator(mode="after")
    def check_error_codes(self) -> Result:
        """Reject error codes on successful results."""
        if self.success and (self.standard_error_code is not None or self.error_code is not None):
            raise ValueError("A successful result cannot carry an error code")
        return self

    @property
    def is_test_mode(self) -> bool:
        return self.test

    def __repr__(self) -> str:
        status = "success" if self.success else "failure"
        return f"Result({status}, {self.message!r}, authorization={self.authorization!r})"
