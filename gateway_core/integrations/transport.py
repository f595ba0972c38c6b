"""
Blocking HTTP transport for adapter calls.

Implements:
- One request per call, no retries (a retried charge is a double charge)
- Every HTTP status returned as a value, never raised
- ConnectionFailure when no response arrived at all

CRITICAL: A 402 or 500 with a body is still a response. Processors answer
declines with 4xx all the time; only "nothing came back" is exceptional.
"""
from typing import Any, Dict, Mapping, Optional, Union

import requests
import structlog
from pydantic import BaseModel, ConfigDict, Field

from gateway_core.config import Settings

logger = structlog.get_logger(__name__)

RequestBody = Union[str, bytes, Mapping[str, Any], None]


class ConnectionFailure(Exception):
    """
    No response was received from the processor.

    The only failure the core lets escape as an exception; it aborts the
    enclosing MultiResponse.
    """

    def __init__(self, message: str, url: str, original_error: Optional[Exception] = None):
        """
        Initialize connection failure.

        Args:
            message: Error message
            url: Endpoint that could not be reached
            original_error: Underlying requests exception
        """
        super().__init__(message)
        self.url = url
        self.original_error = original_error


class HttpResponse(BaseModel):
    """Status, body and headers of one HTTP exchange."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    body: str = ""
    headers: Dict[str, str] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class HttpTransport:
    """
    Thin wrapper over requests.Session.

    Example:
        transport = HttpTransport(open_timeout=10, read_timeout=30)
        response = transport.post(url, data=json.dumps(payload), headers=headers)
        if response.ok:
            ...
    """

    def __init__(
        self,
        open_timeout: float = 60.0,
        read_timeout: float = 60.0,
        verify_ssl: bool = True,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize transport.

        Args:
            open_timeout: Connect timeout in seconds
            read_timeout: Read timeout in seconds
            verify_ssl: Verify TLS certificates
            session: Session to reuse (a new one is created if omitted)
        """
        self.open_timeout = open_timeout
        self.read_timeout = read_timeout
        self.verify_ssl = verify_ssl
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "HttpTransport":
        return cls(
            open_timeout=settings.http_open_timeout,
            read_timeout=settings.http_read_timeout,
            verify_ssl=settings.ssl_verify,
        )

    def request(
        self,
        method: str,
        url: str,
        data: RequestBody = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> HttpResponse:
        """
        Perform one HTTP request.

        Args:
            method: HTTP method
            url: Endpoint URL
            data: Request body (string, bytes or form mapping)
            headers: Request headers

        Returns:
            HttpResponse: Response for any status code

        Raises:
            ConnectionFailure: If no response was received
        """
        logger.debug("http_request", method=method, url=url)

        try:
            response = self.session.request(
                method,
                url,
                data=data,
                headers=dict(headers or {}),
                timeout=(self.open_timeout, self.read_timeout),
                verify=self.verify_ssl,
            )
        except requests.exceptions.RequestException as e:
            logger.error(
                "http_connection_failed",
                method=method,
                url=url,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise ConnectionFailure(
                f"Unable to reach {url}: {e}", url=url, original_error=e
            ) from e

        logger.debug("http_response", url=url, status_code=response.status_code)

        return HttpResponse(
            status_code=response.status_code,
            body=response.text or "",
            headers={str(k): str(v) for k, v in response.headers.items()},
        )

    def post(
        self,
        url: str,
        data: RequestBody = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> HttpResponse:
        return self.request("POST", url, data=data, headers=headers)

    def get(self, url: str, headers: Optional[Mapping[str, str]] = None) -> HttpResponse:
        return self.request("GET", url, headers=headers)
