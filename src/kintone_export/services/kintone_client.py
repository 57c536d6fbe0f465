"""
Client for the kintone REST API.

Covers the three calls the export needs: form field metadata, record
queries and file downloads. Authentication uses an API token or a
login/password pair, optionally behind HTTP basic authentication.
"""

import base64
import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any, Optional

import httpx

from kintone_export import __version__
from kintone_export.core.config import Settings
from kintone_export.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    KintoneAPIError,
    TransportError,
)
from kintone_export.schemas.field import FieldInfo
from kintone_export.schemas.record import Record

logger = logging.getLogger(__name__)


class KintoneClient:
    """Synchronous kintone API client bound to one app."""

    def __init__(
        self,
        domain: str,
        app_id: int,
        api_token: Optional[str] = None,
        login: Optional[str] = None,
        password: Optional[str] = None,
        basic_auth_user: Optional[str] = None,
        basic_auth_password: Optional[str] = None,
        guest_space_id: Optional[int] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """Initialize client.

        Args:
            domain: kintone domain, e.g. example.cybozu.com
            app_id: App ID
            api_token: API token; takes precedence over login/password
            login: Login name
            password: Login password
            basic_auth_user: Basic authentication user
            basic_auth_password: Basic authentication password
            guest_space_id: Guest space ID for apps in a guest space
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests

        Raises:
            ConfigurationError: If domain or credentials are missing
        """
        if not domain:
            raise ConfigurationError("kintone domain is required")
        if not api_token and not login:
            raise ConfigurationError("An API token or a login name is required")

        self.domain = domain
        self.app_id = app_id
        self.guest_space_id = guest_space_id

        auth = None
        if basic_auth_user:
            auth = httpx.BasicAuth(basic_auth_user, basic_auth_password or "")

        self._client = httpx.Client(
            base_url=self.base_url,
            headers=self._auth_headers(api_token, login, password),
            auth=auth,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "KintoneClient":
        """Create client from loaded settings."""
        return cls(
            domain=settings.domain,
            app_id=settings.app_id or 0,
            api_token=settings.api_token,
            login=settings.login,
            password=settings.password,
            basic_auth_user=settings.basic_auth_user,
            basic_auth_password=settings.basic_auth_password,
            guest_space_id=settings.guest_space_id,
            timeout=settings.timeout_seconds,
            **kwargs,
        )

    @property
    def base_url(self) -> str:
        """REST API root, inside the guest space when one is set."""
        if self.guest_space_id:
            return f"https://{self.domain}/k/guest/{self.guest_space_id}/v1/"
        return f"https://{self.domain}/k/v1/"

    @staticmethod
    def _auth_headers(
        api_token: Optional[str],
        login: Optional[str],
        password: Optional[str],
    ) -> dict[str, str]:
        """Build kintone authentication headers."""
        headers = {"User-Agent": f"kintone-export/{__version__}"}
        if api_token:
            headers["X-Cybozu-API-Token"] = api_token
        else:
            credentials = f"{login}:{password or ''}".encode("utf-8")
            headers["X-Cybozu-Authorization"] = base64.b64encode(credentials).decode("ascii")
        return headers

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> "KintoneClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ==========================================================================
    # Requests
    # ==========================================================================

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        """Translate a non-2xx response into a KintoneAPIError.

        Redirects are not followed, so a 3xx (e.g. to a login page) is an error.
        """
        if response.is_success:
            return

        error_code = None
        error_id = None
        message = f"kintone API returned HTTP {response.status_code}"
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            error_code = body.get("code")
            error_id = body.get("id")
            message = body.get("message") or message

        error_class = (
            AuthenticationError if response.status_code in (401, 403) else KintoneAPIError
        )
        raise error_class(
            message,
            status_code=response.status_code,
            error_code=error_code,
            error_id=error_id,
        )

    def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        """GET a JSON endpoint."""
        logger.debug(f"GET {path} {params}")
        try:
            response = self._client.get(path, params=params)
        except httpx.TransportError as e:
            raise TransportError(f"Request to {path} failed: {e}", url=self.base_url + path) from e
        self._raise_for_status(response)
        try:
            data = response.json()
        except ValueError as e:
            raise KintoneAPIError(
                f"Response from {path} is not JSON", status_code=response.status_code
            ) from e
        if not isinstance(data, dict):
            raise KintoneAPIError(
                f"Response from {path} is not a JSON object", status_code=response.status_code
            )
        return data

    def fields(self) -> dict[str, FieldInfo]:
        """
        Get the app's field metadata.

        Returns:
            Field code to FieldInfo, in form order

        Raises:
            KintoneAPIError: If kintone rejects the request
            TransportError: If the request fails
        """
        data = self._get("app/form/fields.json", {"app": self.app_id})
        return FieldInfo.from_properties(data.get("properties", {}))

    def get_records(self, fields: Optional[Sequence[str]], query: str) -> list[Record]:
        """
        Query records.

        Args:
            fields: Field codes to return, None for all fields
            query: kintone query string, including any limit/offset

        Returns:
            Records in query order

        Raises:
            KintoneAPIError: If kintone rejects the request
            TransportError: If the request fails
        """
        params: dict[str, Any] = {"app": self.app_id, "query": query}
        for i, code in enumerate(fields or ()):
            params[f"fields[{i}]"] = code

        data = self._get("records.json", params)
        return [Record.from_api(record) for record in data.get("records", [])]

    @contextmanager
    def download(self, file_key: str, chunk_size: Optional[int] = None) -> Iterator[Iterator[bytes]]:
        """
        Stream a file by its file key.

        Usage:
            with client.download(key, chunk_size=65536) as chunks:
                for chunk in chunks:
                    ...

        Raises:
            KintoneAPIError: If kintone rejects the request
            TransportError: If the request or the stream fails
        """
        try:
            with self._client.stream("GET", "file.json", params={"fileKey": file_key}) as response:
                if not response.is_success:
                    response.read()
                    self._raise_for_status(response)
                yield response.iter_bytes(chunk_size=chunk_size)
        except httpx.TransportError as e:
            raise TransportError(f"Download of {file_key} failed: {e}", url=self.base_url + "file.json") from e
