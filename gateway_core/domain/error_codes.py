"""
Standard Error Codes - One Vocabulary For Every Processor

Every processor invents its own decline codes:
- Checkout.com: "20054"
- Credorax: "Z6=05"
- Cardknox: "Expired card"

The integrator should not need a lookup table per vendor to know the card
expired. Each adapter ships a small mapping table; the ErrorCodeMapper turns
vendor codes into StandardErrorCode members.

CRITICAL: an unmapped code stays unmapped. The caller decides whether to fall
back to a generic processing_error or to surface the raw vendor code.
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping, Optional, Union

VendorCode = Union[str, int]


class StandardErrorCode(str, Enum):
    """Cross-provider error kinds attached to failed results."""

    INCORRECT_NUMBER = "incorrect_number"  # Fails ISO/IEC 7812 numbering
    INVALID_NUMBER = "invalid_number"  # Not matched by processor
    INVALID_EXPIRY_DATE = "invalid_expiry_date"
    INVALID_CVC = "invalid_cvc"  # Wrong format (3-4 digits)
    EXPIRED_CARD = "expired_card"
    INCORRECT_CVC = "incorrect_cvc"  # Not matched by processor
    INCORRECT_ZIP = "incorrect_zip"
    INCORRECT_ADDRESS = "incorrect_address"
    INCORRECT_PIN = "incorrect_pin"
    CARD_DECLINED = "card_declined"
    PROCESSING_ERROR = "processing_error"
    CALL_ISSUER = "call_issuer"  # Voice authorization required
    PICKUP_CARD = "pick_up_card"
    CONFIG_ERROR = "config_error"
    TEST_MODE_LIVE_CARD = "test_mode_live_card"
    UNSUPPORTED_FEATURE = "unsupported_feature"  # e.g. network tokenization


class ErrorCodeMapper:
    """
    Pure lookup from vendor error codes to StandardErrorCode.

    Vendors are inconsistent about sending codes as strings or integers
    (20014 vs "20014"), so keys are compared by their string form.

    Example:
        mapper = ErrorCodeMapper({"20054": StandardErrorCode.EXPIRED_CARD})
        mapper.map(20054)   # StandardErrorCode.EXPIRED_CARD
        mapper.map("99999") # None
    """

    def __init__(self, table: Optional[Mapping[VendorCode, StandardErrorCode]] = None):
        """
        Initialize mapper.

        Args:
            table: Adapter-specific mapping of vendor codes to standard codes
        """
        self._table = {
            self._key(code): StandardErrorCode(standard)
            for code, standard in (table or {}).items()
        }

    @staticmethod
    def _key(code: VendorCode) -> str:
        return str(code).strip()

    def map(self, vendor_code: Optional[VendorCode]) -> Optional[StandardErrorCode]:
        """
        Translate a vendor code.

        Args:
            vendor_code: Code reported by the processor

        Returns:
            Optional[StandardErrorCode]: Standard code, or None when unmapped
        """
        if vendor_code is None:
            return None
        return self._table.get(self._key(vendor_code))

    def __contains__(self, vendor_code: object) -> bool:
        if not isinstance(vendor_code, (str, int)):
            return False
        return self._key(vendor_code) in self._table

    def __len__(self) -> int:
        return len(self._table)
