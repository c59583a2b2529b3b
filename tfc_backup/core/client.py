"""Terraform Cloud API client."""

import json
import logging
from typing import Any
from urllib.parse import quote, urlparse

import requests

from .exceptions import TransportError

logger = logging.getLogger(__name__)


class TerraformCloudClient:
    """Client for authenticated requests against the Terraform Cloud API.

    The client holds no per-request state, so one instance (and its session)
    may be shared by concurrent fetches.
    """

    DEFAULT_BASE_URL = "https://app.terraform.io/api/v2"
    CONTENT_TYPE = "application/vnd.api+json"

    def __init__(self, token: str, base_url: str = DEFAULT_BASE_URL, timeout: float = 30.0) -> None:
        """Initialize the client with a bearer token."""
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Content-Type": self.CONTENT_TYPE,
            },
        )

        logger.debug("Terraform Cloud client initialized for %s", self.base_url)

    def workspace_by_name_url(self, organization: str, name: str) -> str:
        return f"{self.base_url}/organizations/{quote(organization)}/workspaces/{quote(name)}"

    def workspace_url(self, workspace_id: str) -> str:
        return f"{self.base_url}/workspaces/{quote(workspace_id)}"

    def workspace_vars_url(self, workspace_id: str) -> str:
        return f"{self.workspace_url(workspace_id)}/vars"

    def varsets_url(self, organization: str) -> str:
        return f"{self.base_url}/organizations/{quote(organization)}/varsets"

    def varset_url(self, varset_id: str) -> str:
        return f"{self.base_url}/varsets/{quote(varset_id)}"

    def varset_vars_url(self, varset_id: str) -> str:
        return f"{self.varset_url(varset_id)}/relationships/vars"

    def fetch(self, url: str, params: dict[str, Any] | None = None) -> bytes:
        """
        GET a URL and return the raw response body.

        Args:
            url: Fully-qualified https:// URL of an API endpoint
            params: Optional query parameters

        Returns
        -------
            The response body on a 2xx status

        Raises
        ------
            TransportError: On connection failure, timeout or non-2xx status
        """
        if urlparse(url).scheme != "https":
            raise TransportError(url, reason="URL must use https")

        logger.debug("GET %s %s", url, params or "")
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(url, reason=str(e)) from e

        if not 200 <= response.status_code < 300:
            raise TransportError(url, status=response.status_code, reason=response.reason)

        logger.debug("GET %s -> %d (%d bytes)", url, response.status_code, len(response.content))
        return response.content

    def fetch_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """GET a URL and decode the JSON body."""
        body = self.fetch(url, params=params)
        try:
            return json.loads(body)
        except ValueError as e:
            raise TransportError(url, reason=f"invalid JSON body: {e}") from e

    def close(self) -> None:
        self.session.close()
