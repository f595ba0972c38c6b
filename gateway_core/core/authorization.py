"""
Composite authorization tokens.

A capture needs the transaction id AND the auth code AND the stored-card token
from the original authorize, but the integrator only keeps one string. We pack
the identifiers positionally into that string and unpack them on the way back.

Format: fields joined by DELIMITER, absent fields as empty segments.
    encode(["txn_1", None, "tok_9"]) == "txn_1||tok_9"

CRITICAL: DELIMITER is part of every token ever handed to an integrator.
Changing it breaks replay of previously issued tokens.

Known limitation: values are not escaped. A field that itself contains the
delimiter shifts every later position on decode.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

import structlog

logger = structlog.get_logger(__name__)

DELIMITER = "|"


def encode(fields: Iterable[Optional[str]]) -> str:
    """
    Pack identifiers into one token.

    Args:
        fields: Ordered identifiers; None becomes an empty segment

    Returns:
        str: Opaque token
    """
    segments = []
    for position, value in enumerate(fields):
        segment = "" if value is None else str(value)
        if DELIMITER in segment:
            logger.warning(
                "authorization_field_contains_delimiter",
                position=position,
                delimiter=DELIMITER,
            )
        segments.append(segment)
    return DELIMITER.join(segments)


def decode(token: Optional[str], expected: Optional[int] = None) -> List[Optional[str]]:
    """
    Unpack a token produced by encode().

    Some call sites historically dropped trailing optional fields, so a short
    token is padded with None up to `expected` positions instead of raising.

    Args:
        token: Token to split
        expected: Number of positions the caller's schema has

    Returns:
        List[Optional[str]]: Segments in order; "" for empty segments,
        None for positions missing from the token. Only a None token decodes
        to no segments; "" is a single empty segment, as encode([None]) gives.
    """
    segments: List[Optional[str]] = [] if token is None else list(token.split(DELIMITER))
    if expected is not None and len(segments) < expected:
        segments.extend([None] * (expected - len(segments)))
    return segments


class AuthorizationSchema:
    """
    Named positions for a composite token.

    Example:
        schema = AuthorizationSchema("transaction_id", "auth_code", "token")
        token = schema.pack(transaction_id="txn_1", auth_code="A1")
        schema.unpack(token)
        # {"transaction_id": "txn_1", "auth_code": "A1", "token": None}
    """

    def __init__(self, *names: str):
        if not names:
            raise ValueError("Authorization schema needs at least one field")
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate authorization field names: {names}")
        self.names: Sequence[str] = tuple(names)

    def pack(self, **values: Optional[str]) -> str:
        unknown = set(values) - set(self.names)
        if unknown:
            raise ValueError(f"Unknown authorization fields: {sorted(unknown)}")
        return encode(values.get(name) for name in self.names)

    def unpack(self, token: Optional[str]) -> Dict[str, Optional[str]]:
        """Empty and missing positions both come back as None."""
        segments = decode(token, expected=len(self.names))
        return {name: (segment or None) for name, segment in zip(self.names, segments)}

    def __len__(self) -> int:
        return len(self.names)
