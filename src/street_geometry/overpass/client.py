"""
Overpass API HTTP client with multi-instance failover.

Each query is tried against the configured instances in order:
- Client-side failures (malformed query, HTTP 4xx other than 429) abort
  immediately; another instance would reject the same query.
- Server-side failures (timeouts, connection errors, 5xx, 429, unparseable
  or error-carrying bodies) are logged and the next instance is tried.
- When every instance fails, ServiceUnavailableError is raised so callers
  can tell "service unreachable" apart from "street not found".
"""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import urlparse

import requests

from ..errors import (
    ClientQueryError,
    OverpassError,
    ServerQueryError,
    ServiceUnavailableError,
)

logger = logging.getLogger(__name__)

DEFAULT_INSTANCES = (
    "https://overpass.private.coffee/api/interpreter",
    "https://maps.mail.ru/osm/tools/overpass/api/interpreter",
    "https://overpass-api.de/api/interpreter",
    "https://overpass.osm.jp/api/interpreter",
)
DEFAULT_TIMEOUT_S = 25
DEFAULT_USER_AGENT = "street-geometry/0.1"

CLIENT_ERROR_MARKERS = ("syntax", "parse error", "expected", "unexpected", "invalid")
SERVER_REMARK_MARKERS = ("runtime error", "timed out", "out of memory", "too many requests")

REMARK_PATTERN = re.compile(r"<remark>\s*([\s\S]+?)\s*</remark>")


def parse_remark(text: str) -> Optional[str]:
    """Extract the error message Overpass embeds in XML/HTML error pages."""
    match = REMARK_PATTERN.search(text or "")
    if match:
        return match.group(1).strip()
    return None


def is_client_error(message: str, status_code: Optional[int] = None) -> bool:
    """Whether a failure is caused by the query itself rather than the server."""
    msg = message.lower()
    if any(marker in msg for marker in CLIENT_ERROR_MARKERS):
        return True
    return status_code is not None and 400 <= status_code < 500 and status_code != 429


def _classify(message: str, status_code: Optional[int], instance: str) -> OverpassError:
    if is_client_error(message, status_code):
        return ClientQueryError(message, status_code=status_code, instance=instance)
    return ServerQueryError(message, status_code=status_code, instance=instance)


def _hostname(url: str) -> str:
    return urlparse(url).hostname or url


class OverpassClient:
    """Sends Overpass QL queries, failing over across service instances."""

    def __init__(
        self,
        instances: Sequence[str] = DEFAULT_INSTANCES,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ):
        """Initialize client.

        Args:
            instances: Ordered candidate interpreter URLs
            timeout_s: Per-request timeout; a timeout fails over to the next instance
            user_agent: User-Agent header sent with every request
            session: HTTP session (a new one is created when omitted)
        """
        if not instances:
            raise ValueError("At least one Overpass instance is required")
        self.instances = tuple(instances)
        self.timeout_s = timeout_s
        self.user_agent = user_agent
        self.session = session or requests.Session()

    def query(self, overpass_ql: str) -> Dict[str, Any]:
        """Run a query and return the first structurally valid JSON response.

        Raises:
            ClientQueryError: The query was rejected as malformed
            ServiceUnavailableError: Every instance failed server-side
        """
        attempts: List[str] = []
        last_error: Optional[OverpassError] = None

        for instance in self.instances:
            host = _hostname(instance)
            try:
                data = self._request(instance, overpass_ql)
            except ClientQueryError as e:
                logger.error(f"Client error (query issue) from {host}: {e}")
                raise
            except ServerQueryError as e:
                if e.status_code is None and "timeout" in str(e).lower():
                    logger.info(f"Timeout with Overpass instance {host}")
                else:
                    logger.info(f"Failed with Overpass instance {host}: {e}")
                attempts.append(f"{host}: {e}")
                last_error = e
                continue

            logger.info(f"Response from Overpass instance {host}")
            return data

        message = f"All {len(self.instances)} Overpass instance(s) failed"
        if last_error is not None:
            message = f"{message}; last error: {last_error}"
        raise ServiceUnavailableError(message, attempts=attempts) from last_error

    def _request(self, instance: str, overpass_ql: str) -> Dict[str, Any]:
        """Make a single request; raises ClientQueryError or ServerQueryError."""
        try:
            response = self.session.post(
                instance,
                data={"data": overpass_ql},
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout_s,
            )
        except requests.exceptions.Timeout as e:
            raise ServerQueryError(
                f"Overpass request timeout after {self.timeout_s}s", instance=instance
            ) from e
        except requests.exceptions.RequestException as e:
            raise ServerQueryError(f"Overpass request failed: {e}", instance=instance) from e

        status_code = response.status_code
        if not 200 <= status_code < 300:
            detail = parse_remark(response.text) or response.reason or "error"
            raise _classify(f"HTTP {status_code}: {detail}", status_code, instance)

        try:
            data = response.json()
        except ValueError as e:
            # Overpass can answer 200 with an XML error page
            remark = parse_remark(response.text)
            if remark:
                raise _classify(remark, None, instance) from e
            raise ServerQueryError(
                f"Overpass returned non-JSON response (HTTP {status_code})", instance=instance
            ) from e

        if not isinstance(data, dict):
            raise ServerQueryError(
                f"Overpass returned unexpected JSON type {type(data).__name__}", instance=instance
            )

        remark = str(data.get("remark") or "")
        if any(marker in remark.lower() for marker in SERVER_REMARK_MARKERS):
            raise ServerQueryError(f"Overpass server error in response body: {remark[:100]}", instance=instance)

        return data
