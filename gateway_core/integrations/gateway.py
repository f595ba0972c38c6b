"""
Gateway - the adapter interface every processor integration implements.

The capability set is fixed:
    purchase, authorize, capture, refund, void, store, verify

A concrete adapter overrides the subset its processor supports and supplies
extractor hooks (success_from, message_from, ...). Everything else, from the
HTTP call through parsing and normalization, is shared here.

Amounts are integers in minor units (1000 == $10.00); formatting them for a
given processor is the adapter's business.
"""
from abc import ABC, abstractmethod
from enum import Enum
from functools import partial
from typing import Any, ClassVar, Dict, List, Mapping, Optional

import structlog

from gateway_core.config import GatewayConfig, get_settings
from gateway_core.core.multi_response import MultiResponse, RunPolicy, RunResult
from gateway_core.core.normalizer import Extractors, Payload, ResponseNormalizer
from gateway_core.core.parsers import parse_json
from gateway_core.domain.error_codes import ErrorCodeMapper, StandardErrorCode, VendorCode
from gateway_core.domain.result import Result
from gateway_core.integrations.transport import HttpTransport, RequestBody

logger = structlog.get_logger(__name__)

Options = Optional[Dict[str, Any]]

VERIFY_AMOUNT = 100


class Capability(str, Enum):
    """Operations an adapter may support."""

    PURCHASE = "purchase"
    AUTHORIZE = "authorize"
    CAPTURE = "capture"
    REFUND = "refund"
    VOID = "void"
    STORE = "store"
    VERIFY = "verify"


class UnsupportedOperation(Exception):
    """Raised when an adapter is asked for a capability it does not implement."""


class Gateway(ABC):
    """
    Base class for processor adapters.

    Subclasses set display_name and error_code_mapping, override the
    capability methods they support, and implement the extractor hooks
    used by commit().
    """

    display_name: ClassVar[str] = "Gateway"
    error_code_mapping: ClassVar[Mapping[VendorCode, StandardErrorCode]] = {}
    default_error_code: ClassVar[Optional[StandardErrorCode]] = None

    def __init__(self, config: GatewayConfig, transport: Optional[HttpTransport] = None):
        """
        Initialize gateway.

        Args:
            config: Immutable credentials, mode and endpoints
            transport: HTTP transport (built from settings if omitted)
        """
        self.config = config
        self.transport = transport or HttpTransport.from_settings(get_settings())
        self.error_mapper = ErrorCodeMapper(self.error_code_mapping)

        logger.info(
            "gateway_initialized",
            gateway=self.display_name,
            test_mode=self.test,
            capabilities=[c.value for c in self.capabilities()],
        )

    @property
    def test(self) -> bool:
        """Are we running against the processor's test environment?"""
        return self.config.test

    # ------------------------------------------------------------------
    # Capability set
    # ------------------------------------------------------------------

    def purchase(self, money: int, source: Any, options: Options = None) -> Result:
        raise self._unsupported(Capability.PURCHASE)

    def authorize(self, money: int, source: Any, options: Options = None) -> Result:
        raise self._unsupported(Capability.AUTHORIZE)

    def capture(self, money: Optional[int], authorization: str, options: Options = None) -> Result:
        raise self._unsupported(Capability.CAPTURE)

    def refund(self, money: Optional[int], authorization: str, options: Options = None) -> Result:
        raise self._unsupported(Capability.REFUND)

    def void(self, authorization: str, options: Options = None) -> Result:
        raise self._unsupported(Capability.VOID)

    def store(self, source: Any, options: Options = None) -> Result:
        raise self._unsupported(Capability.STORE)

    def verify(self, source: Any, options: Options = None) -> RunResult:
        """
        Check a card by authorizing a small amount and voiding it.

        The authorize decides the outcome (USE_FIRST_RESPONSE); the void is
        best-effort cleanup and its failure is ignored.

        Raises:
            UnsupportedOperation: If authorize or void is not implemented
        """
        if not (self.supports(Capability.AUTHORIZE) and self.supports(Capability.VOID)):
            raise self._unsupported(Capability.VERIFY)

        multi = MultiResponse.new(RunPolicy.USE_FIRST_RESPONSE, name=f"{self.display_name}_verify")
        multi.process(lambda: self.authorize(VERIFY_AMOUNT, source, options), name="authorize")
        multi.process(lambda: self.void(multi.authorization, options), ignore_failure=True, name="void")
        return multi.execute()

    @classmethod
    def supports(cls, capability: Capability) -> bool:
        """
        Check whether this adapter implements a capability.

        verify counts as supported when the adapter overrides it or when the
        default authorize-then-void implementation can run.
        """
        capability = Capability(capability)
        if capability is Capability.VERIFY and getattr(cls, "verify") is Gateway.verify:
            return cls.supports(Capability.AUTHORIZE) and cls.supports(Capability.VOID)
        return getattr(cls, capability.value) is not getattr(Gateway, capability.value)

    @classmethod
    def capabilities(cls) -> List[Capability]:
        return [capability for capability in Capability if cls.supports(capability)]

    def _unsupported(self, capability: Capability) -> UnsupportedOperation:
        return UnsupportedOperation(f"{self.display_name} does not support {capability.value}")

    # ------------------------------------------------------------------
    # Transcript scrubbing
    # ------------------------------------------------------------------

    def supports_scrubbing(self) -> bool:
        """Does this adapter know how to remove secrets from HTTP transcripts?"""
        return False

    def scrub(self, transcript: str) -> str:
        raise UnsupportedOperation(f"{self.display_name} does not support scrubbing")

    # ------------------------------------------------------------------
    # Request / response plumbing
    # ------------------------------------------------------------------

    def parse(self, body: str) -> Payload:
        """Decode a response body; override for XML or delimited processors."""
        return parse_json(body)

    @abstractmethod
    def success_from(self, payload: Payload, action: str) -> bool:
        """Did the processor approve this action?"""
        pass

    @abstractmethod
    def message_from(self, payload: Payload, action: str) -> Optional[str]:
        pass

    @abstractmethod
    def authorization_from(self, payload: Payload, action: str) -> Optional[str]:
        """
        Identifier handed back to the integrator.

        Multi-field processors return an AuthorizationSchema.pack() token.
        """
        pass

    def error_code_from(self, payload: Payload, action: str) -> Optional[VendorCode]:
        return None

    def avs_from(self, payload: Payload, action: str) -> Any:
        return None

    def cvv_from(self, payload: Payload, action: str) -> Any:
        return None

    def normalizer(self, action: str) -> ResponseNormalizer:
        """Build a normalizer whose extractors are bound to one action."""
        extractors = Extractors(
            success_from=partial(self.success_from, action=action),
            message_from=partial(self.message_from, action=action),
            authorization_from=partial(self.authorization_from, action=action),
            error_code_from=partial(self.error_code_from, action=action),
            avs_from=partial(self.avs_from, action=action),
            cvv_from=partial(self.cvv_from, action=action),
        )
        return ResponseNormalizer(
            extractors,
            parser=self.parse,
            error_mapper=self.error_mapper,
            default_error_code=self.default_error_code,
            test=self.test,
            gateway_name=self.display_name,
        )

    def commit(
        self,
        action: str,
        url: str,
        data: RequestBody = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Result:
        """
        Send one request and normalize whatever comes back.

        Args:
            action: Logical action name passed to the extractor hooks
            url: Endpoint URL
            data: Request body
            headers: Request headers

        Returns:
            Result: Normalized outcome, including for non-2xx responses

        Raises:
            ConnectionFailure: If the processor could not be reached
        """
        response = self.transport.post(url, data=data, headers=headers)
        normalizer = self.normalizer(action)

        if response.ok:
            result = normalizer.normalize_body(response.body)
        else:
            result = normalizer.normalize_transport_failure(response.status_code, response.body)

        logger.info(
            "gateway_action_completed",
            gateway=self.display_name,
            action=action,
            success=result.success,
            http_status=response.status_code,
        )
        return result
