"""
Address and card-security verification outcomes.

Codes follow the card-network AVS and CVV2 conventions most processors echo
back verbatim. Unknown or blank codes parse to None rather than raising:
a processor inventing a new letter must not turn an approval into an error.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

_AVS_MESSAGES = {
    "A": "Street address matches, but postal code does not match.",
    "B": "Street address matches, but postal code not verified.",
    "C": "Street address and postal code do not match.",
    "D": "Street address and postal code match.",
    "E": "AVS data is invalid or AVS is not allowed for this card type.",
    "F": "Card member's name does not match, but billing postal code matches.",
    "G": "Non-U.S. issuing bank does not support AVS.",
    "H": "Card member's name does not match. Street address and postal code match.",
    "I": "Address not verified.",
    "J": (
        "Card member's name, billing address, and postal code match. Shipping "
        "information verified and chargeback protection guaranteed through the "
        "Fraud Protection Program."
    ),
    "K": "Card member's name matches but billing address and billing postal code do not match.",
    "L": "Card member's name and billing postal code match, but billing address does not match.",
    "M": "Street address and postal code match.",
    "N": "Street address and postal code do not match.",
    "O": "Card member's name and billing address match, but billing postal code does not match.",
    "P": "Postal code matches, but street address not verified.",
    "Q": (
        "Card member's name, billing address, and postal code match. Shipping "
        "information verified but chargeback protection not guaranteed."
    ),
    "R": "System unavailable.",
    "S": "U.S.-issuing bank does not support AVS.",
    "T": "Card member's name does not match, but street address matches.",
    "U": "Address information unavailable.",
    "V": "Card member's name, billing address, and billing postal code match.",
    "W": "Street address does not match, but 9-digit postal code matches.",
    "X": "Street address and 9-digit postal code match.",
    "Y": "Street address and 5-digit postal code match.",
    "Z": "Street address does not match, but 5-digit postal code matches.",
}

_STREET_MATCH = {
    "Y": "ABDHJMOQTVXY",
    "N": "CKLNWZ",
    "X": "GS",
}

_POSTAL_MATCH = {
    "Y": "DHFJLMPQVWXYZ",
    "N": "ACKNO",
    "X": "GS",
}

_CVV_MESSAGES = {
    "D": "CVV check flagged transaction as suspicious",
    "I": "CVV failed data validation check",
    "M": "CVV matches",
    "N": "CVV does not match",
    "P": "CVV not processed",
    "S": "CVV should have been present",
    "U": "CVV request unable to be processed by issuer",
    "X": "Issuer does not participate in CVV2 service",
}


def _match(table: dict[str, str], code: str) -> Optional[str]:
    for outcome, codes in table.items():
        if code in codes:
            return outcome
    return None


def _clean(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip().upper()
    return text or None


class AVSCode(str, Enum):
    """Address verification result."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"
    H = "H"
    I = "I"  # noqa: E741
    J = "J"
    K = "K"
    L = "L"
    M = "M"
    N = "N"
    O = "O"  # noqa: E741
    P = "P"
    Q = "Q"
    R = "R"
    S = "S"
    T = "T"
    U = "U"
    V = "V"
    W = "W"
    X = "X"
    Y = "Y"
    Z = "Z"

    @property
    def message(self) -> str:
        return _AVS_MESSAGES[self.value]

    @property
    def street_match(self) -> Optional[str]:
        """'Y', 'N', 'X' (not supported) or None (not checked)."""
        return _match(_STREET_MATCH, self.value)

    @property
    def postal_match(self) -> Optional[str]:
        """'Y', 'N', 'X' (not supported) or None (not checked)."""
        return _match(_POSTAL_MATCH, self.value)

    @classmethod
    def parse(cls, value: object) -> Optional[AVSCode]:
        """Lenient parse: blank or unknown codes return None."""
        code = _clean(value)
        if code is None or code not in _AVS_MESSAGES:
            return None
        return cls(code)


class CVVCode(str, Enum):
    """Card security code verification result."""

    D = "D"
    I = "I"  # noqa: E741
    M = "M"
    N = "N"
    P = "P"
    S = "S"
    U = "U"
    X = "X"

    @property
    def message(self) -> str:
        return _CVV_MESSAGES[self.value]

    @classmethod
    def parse(cls, value: object) -> Optional[CVVCode]:
        """Lenient parse: blank or unknown codes return None."""
        code = _clean(value)
        if code is None or code not in _CVV_MESSAGES:
            return None
        return cls(code)
