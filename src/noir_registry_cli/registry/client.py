"""Noir package registry client."""

import time
from typing import Any, Callable, Dict, Optional

import requests

from ..errors import (
    AuthenticationFailed,
    MalformedResponse,
    NetworkError,
    PackageNotFound,
    PublishRejected,
    RegistryError,
    ServiceUnavailable,
)
from ..models.package import PackageInfo, PublishRequest
from ..utils.console import _rich_warning
from .retry import MAX_ATTEMPTS, Action, FailureReason, decide

LOOKUP_TIMEOUT = 30
DOWNLOAD_PING_TIMEOUT = 5
USER_AGENT = "noir-registry-cli"


def _server_message(response: requests.Response) -> str:
    """The ``message`` field of an error body, or the raw text."""
    try:
        data = response.json()
    except ValueError:
        return response.text.strip() or response.reason or f"HTTP {response.status_code}"
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return response.text.strip()


class RegistryClient:
    """Client for the Noir registry REST API."""

    def __init__(self, registry_url: str, session: Optional[requests.Session] = None,
                 sleep: Callable[[float], None] = time.sleep, timeout: float = LOOKUP_TIMEOUT):
        """Initialize the registry client.

        Args:
            registry_url (str): Base URL of the registry API, e.g.
                ``http://localhost:8080/api``.
            session (requests.Session, optional): Session to send requests with.
            sleep (callable, optional): Used for backoff delays.
            timeout (float, optional): Per-attempt timeout in seconds.
        """
        self.registry_url = registry_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)
        self.sleep = sleep
        self.timeout = timeout

    def _url(self, *parts: str) -> str:
        return "/".join([self.registry_url, *parts])

    def package_url(self, package_name: str) -> str:
        return self._url("packages", package_name)

    def fetch_package_info(self, package_name: str) -> PackageInfo:
        """Look up a package, retrying transient failures.

        Transport failures back off 0.1s, 0.2s; 502/503 responses back off
        0.5s, 1.0s. A 404 or any other error status fails at once.

        Args:
            package_name (str): Raw package name, hyphens included.

        Returns:
            PackageInfo: Package metadata.

        Raises:
            PackageNotFound: On 404.
            NetworkError: When every attempt failed at the transport level.
            ServiceUnavailable: When every attempt got 502/503.
            RegistryError: On any other non-success status.
            MalformedResponse: When the body is not the expected JSON object.
        """
        url = self.package_url(package_name)
        last_error = None

        for attempt in range(MAX_ATTEMPTS):
            response = None
            try:
                response = self.session.get(url, timeout=self.timeout)
            except (requests.ConnectionError, requests.Timeout) as e:
                last_error = e
                decision = decide(attempt, transport_error=True)
            except requests.RequestException as e:
                raise NetworkError(url, e) from e
            else:
                decision = decide(attempt, status=response.status_code)

            if decision.action is Action.RETRY:
                if response is not None:
                    _rich_warning(
                        f"Registry temporarily unavailable, retrying in {decision.delay:.1f}s...",
                        symbol="warning",
                    )
                self.sleep(decision.delay)
                continue

            if decision.action is Action.SUCCEED:
                return self._parse_package_info(response)

            self._raise_for_failure(decision.reason, package_name, url, response, last_error)

        # decide() always fails on the last attempt
        raise NetworkError(url, last_error)

    def _parse_package_info(self, response: requests.Response) -> PackageInfo:
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponse(f"invalid JSON ({e})") from e
        return PackageInfo.from_json(data)

    def _raise_for_failure(self, reason: FailureReason, package_name: str, url: str,
                           response: Optional[requests.Response], last_error: Optional[Exception]):
        if reason is FailureReason.NETWORK:
            raise NetworkError(url, last_error) from last_error
        if reason is FailureReason.NOT_FOUND:
            raise PackageNotFound(package_name, self.registry_url)
        if reason is FailureReason.UNAVAILABLE:
            raise ServiceUnavailable(url, response.status_code)
        raise RegistryError(response.status_code, response.text, self.registry_url)

    def authenticate(self, credential: str, provider: str = "github") -> str:
        """Exchange a provider token for a registry API key. Never retried.

        Args:
            credential (str): Token issued by the identity provider.
            provider (str, optional): Identity provider name. Defaults to "github".

        Returns:
            str: The registry API key.

        Raises:
            AuthenticationFailed: On a non-success status or ``success: false``.
            MalformedResponse: When the body is not JSON or has no ``api_key``.
            NetworkError: When the registry cannot be reached.
        """
        url = self._url("auth", provider)
        try:
            response = self.session.post(url, json={"token": credential}, timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkError(url, e) from e

        if not response.ok:
            raise AuthenticationFailed(_server_message(response))

        data = self._json_object(response)
        if not data.get("success"):
            raise AuthenticationFailed(str(data.get("message") or "registry rejected the token"))

        api_key = data.get("api_key")
        if not isinstance(api_key, str) or not api_key:
            raise MalformedResponse("No API key received from authentication")
        return api_key

    def publish(self, api_key: str, request: PublishRequest) -> Dict[str, Any]:
        """Publish a package. Never retried.

        Returns:
            Dict[str, Any]: The decoded response body.

        Raises:
            PublishRejected: On ``success: false`` or a non-success status.
            MalformedResponse: When a success status carries an unreadable body.
            NetworkError: When the registry cannot be reached.
        """
        url = self._url("packages", "publish")
        headers = {"Authorization": f"Bearer {api_key}"}
        try:
            response = self.session.post(url, json=request.to_payload(), headers=headers,
                                         timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkError(url, e) from e

        try:
            data = response.json()
        except ValueError:
            if not response.ok:
                raise PublishRejected(_server_message(response), response.status_code)
            raise MalformedResponse("publish response is not JSON")

        if not isinstance(data, dict):
            if not response.ok:
                raise PublishRejected(response.text.strip(), response.status_code)
            raise MalformedResponse("publish response is not a JSON object")

        message = str(data.get("message") or "")
        if not data.get("success"):
            raise PublishRejected(message or "registry rejected the package")
        if not response.ok:
            raise PublishRejected(message, response.status_code)
        return data

    def record_download(self, package_name: str) -> bool:
        """Tell the registry a package was added. Failures are ignored.

        Returns:
            bool: Whether the registry acknowledged the ping.
        """
        try:
            response = self.session.post(self._url("packages", package_name, "download"),
                                         timeout=DOWNLOAD_PING_TIMEOUT)
        except requests.RequestException:
            return False
        return response.ok

    @staticmethod
    def _json_object(response: requests.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponse(f"invalid JSON ({e})") from e
        if not isinstance(data, dict):
            raise MalformedResponse(f"expected a JSON object, got {type(data).__name__}")
        return data
