"""
Pytest configuration and fixtures.
"""
import json
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from gateway_core.config import GatewayConfig
from gateway_core.core.authorization import AuthorizationSchema
from gateway_core.domain.error_codes import StandardErrorCode
from gateway_core.domain.result import Result
from gateway_core.integrations.gateway import Gateway
from gateway_core.integrations.transport import HttpResponse, HttpTransport

EXAMPLE_AUTHORIZATION = AuthorizationSchema("transaction_id", "auth_code")


class ExampleGateway(Gateway):
    """Minimal JSON processor used to exercise the shared plumbing."""

    display_name = "Example Gateway"
    error_code_mapping = {
        "05": StandardErrorCode.CARD_DECLINED,
        54: StandardErrorCode.EXPIRED_CARD,
    }

    def authorize(self, money: int, source: Any, options: Optional[Dict[str, Any]] = None) -> Result:
        body = json.dumps({"amount": money, "card": source})
        return self.commit("authorize", f"{self.config.endpoint}/authorize", body)

    def void(self, authorization: str, options: Optional[Dict[str, Any]] = None) -> Result:
        transaction_id = EXAMPLE_AUTHORIZATION.unpack(authorization)["transaction_id"]
        body = json.dumps({"transaction_id": transaction_id})
        return self.commit("void", f"{self.config.endpoint}/void", body)

    def success_from(self, payload: Dict[str, Any], action: str) -> bool:
        return payload.get("status") == "approved"

    def message_from(self, payload: Dict[str, Any], action: str) -> Optional[str]:
        return payload.get("message")

    def authorization_from(self, payload: Dict[str, Any], action: str) -> Optional[str]:
        if "id" not in payload:
            return None
        return EXAMPLE_AUTHORIZATION.pack(
            transaction_id=payload.get("id"),
            auth_code=payload.get("auth_code"),
        )

    def error_code_from(self, payload: Dict[str, Any], action: str) -> Any:
        return payload.get("code")

    def avs_from(self, payload: Dict[str, Any], action: str) -> Any:
        return payload.get("avs")

    def cvv_from(self, payload: Dict[str, Any], action: str) -> Any:
        return payload.get("cvv")


def http_response(status_code: int, body: Any) -> HttpResponse:
    """Build an HttpResponse; dict bodies are JSON-encoded."""
    if isinstance(body, dict):
        body = json.dumps(body)
    return HttpResponse(status_code=status_code, body=body)


@pytest.fixture
def respond() -> Callable[[int, Any], HttpResponse]:
    """Factory for HttpResponse values."""
    return http_response


@pytest.fixture
def gateway_config() -> GatewayConfig:
    """Test-mode config for the example gateway."""
    return GatewayConfig(
        credentials={"api_key": "test_key"},
        test=True,
        test_url="https://sandbox.example.test",
        live_url="https://api.example.test",
    )


@pytest.fixture
def transport() -> MagicMock:
    """Transport double; set post.return_value / side_effect per test."""
    return MagicMock(spec=HttpTransport)


@pytest.fixture
def gateway_class() -> type:
    return ExampleGateway


@pytest.fixture
def example_gateway(gateway_config: GatewayConfig, transport: MagicMock) -> ExampleGateway:
    return ExampleGateway(gateway_config, transport=transport)


@pytest.fixture
def approved() -> Callable[..., Result]:
    """Factory for successful results."""

    def _approved(authorization: Optional[str] = "auth_1", message: str = "Approved") -> Result:
        return Result(success=True, message=message, authorization=authorization)

    return _approved


@pytest.fixture
def declined() -> Callable[..., Result]:
    """Factory for declined results."""

    def _declined(
        authorization: Optional[str] = None,
        message: str = "Declined",
        standard_error_code: Optional[StandardErrorCode] = StandardErrorCode.CARD_DECLINED,
    ) -> Result:
        return Result(
            success=False,
            message=message,
            authorization=authorization,
            standard_error_code=standard_error_code,
        )

    return _declined


class RecordingOperation:
    """Zero-argument operation that returns a fixed Result and counts calls."""

    def __init__(self, result: Result, calls: Optional[List[str]] = None, name: str = "op"):
        self.result = result
        self.calls = calls if calls is not None else []
        self.name = name

    def __call__(self) -> Result:
        self.calls.append(self.name)
        return self.result


@pytest.fixture
def recording() -> Callable[..., RecordingOperation]:
    """Factory for RecordingOperation instances sharing one call log."""
    calls: List[str] = []

    def _recording(result: Result, name: str = "op") -> RecordingOperation:
        return RecordingOperation(result, calls=calls, name=name)

    _recording.calls = calls  # type: ignore[attr-defined]
    return _recording
