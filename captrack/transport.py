"""
HTTP transport for captrack.

Wraps a requests session and translates transport failures into captrack's
NetworkError family. Anything providing ``request(locator) -> bytes`` can
stand in for it when fetching timed text.
"""

import logging
from http.cookiejar import LoadError, MozillaCookieJar
from typing import Any, Dict, Optional

import requests

from .errors import NetworkError, ParseError, RequestBlockedError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_HEADERS = {
    "Accept-Language": "en-US",
    "User-Agent": (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    ),
}


class HttpTransport:
    """
    Blocking HTTP transport backed by a requests.Session.

    A transport instance is not meant to be shared between threads; create
    one per worker when fetching tracks in parallel.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        proxies: Optional[Dict[str, str]] = None,
        cookies_path: Optional[str] = None,
    ):
        """
        Initialize HTTP transport.

        Args:
            session: Optional pre-configured session (created if omitted)
            timeout: Request timeout in seconds
            proxies: Optional requests-style proxies mapping
            cookies_path: Optional Netscape format cookies file

        Raises:
            ValueError: If the cookies file cannot be loaded
        """
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        if session is None:
            self.session.headers.update(DEFAULT_HEADERS)
        if proxies:
            self.session.proxies.update(proxies)
        if cookies_path:
            self.load_cookies(cookies_path)

    def load_cookies(self, cookies_path: str) -> None:
        jar = MozillaCookieJar()
        try:
            jar.load(cookies_path, ignore_discard=True, ignore_expires=True)
        except (OSError, LoadError) as e:
            raise ValueError(f"Could not load cookies from {cookies_path}: {e}") from e
        self.session.cookies.update(jar)
        logger.debug(f"Loaded {len(jar)} cookies from {cookies_path}")

    def set_cookie(self, name: str, value: str, domain: str) -> None:
        self.session.cookies.set(name, value, domain=domain)

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        logger.debug(f"{method} {url[:100]}")
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise NetworkError(f"{method} {url[:100]} failed: {e}") from e

        if response.status_code == 429:
            raise RequestBlockedError(
                f"Too many requests to {url[:100]}; the service is rate limiting this client"
            )
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise NetworkError(f"{method} {url[:100]} failed: {e}") from e
        return response

    def request(self, locator: str) -> bytes:
        """
        Fetch the raw body behind a locator.

        Raises:
            NetworkError: On connection failures and non-2xx responses
        """
        return self._send("GET", locator).content

    def get_text(self, url: str, **kwargs: Any) -> str:
        return self._send("GET", url, **kwargs).text

    def post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        params: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        POST a JSON body and decode the JSON response.

        Raises:
            NetworkError: On transport failures
            ParseError: If the response body is not JSON
        """
        response = self._send("POST", url, json=payload, params=params)
        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"POST {url[:100]} returned invalid JSON: {e}") from e
