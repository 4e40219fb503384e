"""HTTP client for the device's GET-only endpoint protocol.

Requests are always GET with an empty body. Every call returns an
HttpOutcome; nothing is raised to the caller and nothing is retried.
"""

import logging

import requests

from models.types import EndpointDescriptor, Failure, HttpOutcome, Success, TransportFailure

_LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class HttpEndpointClient:
    """Issues GET requests against device endpoints and classifies the result."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, session: requests.Session | None = None):
        """Initialise HttpEndpointClient.

        Args:
            timeout: Per-request timeout in seconds
            session: Optional session to reuse (a new one is created otherwise)
        """
        self.timeout = timeout
        self.session = session or requests.Session()

    def request(self, endpoint: EndpointDescriptor | str) -> HttpOutcome:
        """Perform a GET request.

        Returns:
            Success(body) for 2xx, Failure(status, body) for any other status,
            TransportFailure(error) when no response was received
        """
        url = endpoint.url if isinstance(endpoint, EndpointDescriptor) else endpoint
        _LOGGER.debug("GET %s", url)

        try:
            response = self.session.get(url, data='', timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            _LOGGER.debug("GET %s failed: %s", url, e)
            return TransportFailure(e)

        if 200 <= response.status_code < 300:
            return Success(response.text)
        return Failure(response.status_code, response.text)

    def close(self):
        self.session.close()
