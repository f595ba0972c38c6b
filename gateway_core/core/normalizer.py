"""
Response normalization.

Adapters know how to read their processor's payload; they do not decide what a
Result looks like. They hand us small pure functions (success_from,
message_from, ...) and we assemble the Result the same way for every gateway.

Three inputs end up here:
1. A parsed 2xx payload                    -> normalize()
2. A non-2xx response with a parseable body -> normalize_transport_failure()
3. A body we cannot parse at all           -> unparsable()

None of them raise. A 402 with a JSON decline body is an ordinary decline;
an HTML error page from a load balancer is a failed Result carrying the page.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import structlog

from gateway_core.core.parsers import ParseError, parse_json
from gateway_core.domain.error_codes import ErrorCodeMapper, StandardErrorCode, VendorCode
from gateway_core.domain.result import Result
from gateway_core.domain.verification import AVSCode, CVVCode

logger = structlog.get_logger(__name__)

Payload = Dict[str, Any]

RAW_RESPONSE_KEY = "raw_response"

INVALID_RESPONSE_MESSAGE = (
    "Invalid response received from {gateway}. "
    "Please contact {gateway} if you continue to receive this message."
)


@dataclass(frozen=True)
class Extractors:
    """
    Adapter-supplied readers over a decoded payload.

    Each function must be pure and must tolerate a decline payload (missing
    keys are the norm there, not the exception).
    """

    success_from: Callable[[Payload], bool]
    message_from: Callable[[Payload], Optional[str]]
    authorization_from: Callable[[Payload], Optional[str]]
    error_code_from: Callable[[Payload], Optional[VendorCode]]
    avs_from: Optional[Callable[[Payload], Any]] = None
    cvv_from: Optional[Callable[[Payload], Any]] = None
    fraud_review_from: Optional[Callable[[Payload], bool]] = None


class ResponseNormalizer:
    """
    Builds Results from decoded payloads for one adapter.

    Example:
        normalizer = ResponseNormalizer(
            Extractors(
                success_from=lambda p: p.get("status") == "Approved",
                message_from=lambda p: p.get("message"),
                authorization_from=lambda p: p.get("id"),
                error_code_from=lambda p: p.get("code"),
            ),
            error_mapper=ErrorCodeMapper({"05": StandardErrorCode.CARD_DECLINED}),
        )
        result = normalizer.normalize_body(body)
    """

    def __init__(
        self,
        extractors: Extractors,
        parser: Callable[[str], Payload] = parse_json,
        error_mapper: Optional[ErrorCodeMapper] = None,
        default_error_code: Optional[StandardErrorCode] = None,
        test: bool = False,
        gateway_name: str = "gateway",
    ):
        """
        Initialize normalizer.

        Args:
            extractors: Payload readers supplied by the adapter
            parser: Body decoder; must raise ParseError on bad input
            error_mapper: Vendor code table (empty table if omitted)
            default_error_code: Used for failures with no mapping; None keeps
                the standard code absent
            test: Whether results come from a test-mode endpoint
            gateway_name: Name embedded in diagnostic messages
        """
        self.extractors = extractors
        self.parser = parser
        self.error_mapper = error_mapper or ErrorCodeMapper()
        self.default_error_code = default_error_code
        self.test = test
        self.gateway_name = gateway_name

    def normalize(self, payload: Payload, failed: bool = False, default_message: str = "") -> Result:
        """
        Build a Result from a decoded payload.

        success is computed first; error codes are looked up only for failures.

        Args:
            payload: Decoded response body
            failed: Force a failed outcome whatever success_from says
            default_message: Used when message_from finds nothing

        Returns:
            Result: Normalized outcome
        """
        ex = self.extractors
        success = not failed and bool(ex.success_from(payload))

        error_code: Optional[str] = None
        standard_error_code: Optional[StandardErrorCode] = None
        if not success:
            vendor_code = ex.error_code_from(payload)
            if vendor_code is not None and str(vendor_code) != "":
                error_code = str(vendor_code)
                standard_error_code = self.error_mapper.map(vendor_code)
            if standard_error_code is None:
                standard_error_code = self.default_error_code

        authorization = ex.authorization_from(payload)
        return Result(
            success=success,
            message=ex.message_from(payload) or default_message,
            raw=payload,
            authorization=None if authorization is None else str(authorization),
            avs_code=AVSCode.parse(ex.avs_from(payload)) if ex.avs_from else None,
            cvv_code=CVVCode.parse(ex.cvv_from(payload)) if ex.cvv_from else None,
            error_code=error_code,
            standard_error_code=standard_error_code,
            test=self.test,
            fraud_review=bool(ex.fraud_review_from(payload)) if ex.fraud_review_from else False,
        )

    def normalize_body(self, body: Optional[str]) -> Result:
        """
        Parse a raw body and normalize it.

        An unparsable body becomes a failed Result instead of an exception.
        """
        try:
            payload = self.parser(body or "")
        except ParseError as e:
            logger.warning(
                "response_unparsable",
                gateway=self.gateway_name,
                error=str(e),
            )
            return self.unparsable(body)
        return self.normalize(payload)

    def normalize_transport_failure(self, http_status: int, body: Optional[str]) -> Result:
        """
        Normalize a non-2xx HTTP response.

        A non-2xx status is not fatal: processors routinely answer declines
        with 4xx and a perfectly good body. That body goes through the
        standard path as a failing payload; only an unparsable one gets the
        synthetic failure. The outcome is always a failure, even for an empty
        body that success_from would accept.

        Args:
            http_status: HTTP status code received
            body: Response body, possibly empty

        Returns:
            Result: Failed, normalized outcome
        """
        logger.warning(
            "response_http_error",
            gateway=self.gateway_name,
            http_status=http_status,
        )
        try:
            payload = self.parser(body or "")
        except ParseError as e:
            logger.warning(
                "response_unparsable",
                gateway=self.gateway_name,
                error=str(e),
            )
            return self.unparsable(body)
        return self.normalize(
            payload,
            failed=True,
            default_message=f"{self.gateway_name} returned HTTP {http_status}",
        )

    def unparsable(self, body: Optional[str]) -> Result:
        """
        Synthesize a failed Result for a body we could not decode.

        The raw body is embedded in the message and kept under
        RAW_RESPONSE_KEY so an operator can see what the upstream sent.
        No standard error code: this is a parsing failure, not a decline.
        """
        message = INVALID_RESPONSE_MESSAGE.format(gateway=self.gateway_name)
        message += f" (The raw response returned by the API was {body!r})"
        return Result(
            success=False,
            message=message,
            raw={RAW_RESPONSE_KEY: body},
            test=self.test,
        )
