"""Navigation seam between the session state machine and the outside world.

In a browser the authorize redirect ends the page and the callback starts a
new one. Here a Navigator stands in for the address bar: ``navigate`` sends
the user to the authorize URL and records wherever they land back, and
``replace_location`` rewrites the recorded URL (used to drop ``?code=`` once
it has been exchanged).
"""

import logging
import urllib.parse
import webbrowser
from abc import ABC, abstractmethod
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

_SUCCESS_PAGE = b"<html><body><h2>Spotify connected! You can close this tab.</h2></body></html>"


class Navigator(ABC):
    """Base navigator. Subclasses decide how the user reaches Spotify."""

    def __init__(self, location: Optional[str] = None):
        self.location = location

    @abstractmethod
    def navigate(self, url: str) -> None:
        ...

    def replace_location(self, url: str) -> None:
        logger.debug("Replacing current location with %s", url)
        self.location = url


class RecordingNavigator(Navigator):
    """Remembers every URL it was sent to and goes nowhere."""

    def __init__(self, location: Optional[str] = None):
        super().__init__(location)
        self.visited: List[str] = []

    def navigate(self, url: str) -> None:
        self.visited.append(url)


class _CallbackHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        parsed = urllib.parse.urlparse(self.path)
        params = urllib.parse.parse_qs(parsed.query)

        if "code" in params or "error" in params:
            self.server.callback_path = self.path
            if "code" in params:
                self.send_response(200)
                self.send_header("Content-Type", "text/html")
                self.end_headers()
                self.wfile.write(_SUCCESS_PAGE)
            else:
                self.send_response(400)
                self.send_header("Content-Type", "text/html")
                self.end_headers()
                error = urllib.parse.quote(params["error"][0])
                self.wfile.write(f"<html><body><h2>Error: {error}</h2></body></html>".encode("utf-8"))
            return

        # Favicons and other stray requests.
        self.send_response(404)
        self.end_headers()

    def log_message(self, format, *args):
        logger.debug("Callback listener: " + format, *args)


class LoopbackNavigator(Navigator):
    """Opens the authorize URL in a browser and waits for the callback locally.

    The listener binds to the host/port of the redirect URI and serves one
    request at a time until one carries ``code`` or ``error``.
    """

    def __init__(
        self,
        redirect_uri: str,
        *,
        open_browser: Callable[[str], bool] = webbrowser.open,
        location: Optional[str] = None,
    ):
        super().__init__(location)
        self.redirect_uri = redirect_uri
        self._open_browser = open_browser

        parsed = urllib.parse.urlparse(redirect_uri)
        if parsed.scheme != "http" or not parsed.hostname:
            raise ValueError(f"Loopback callback needs an http:// redirect URI, got {redirect_uri!r}")
        self._host = parsed.hostname
        self._port = parsed.port or 80

    def navigate(self, url: str) -> None:
        server = HTTPServer((self._host, self._port), _CallbackHandler)
        server.callback_path = None
        try:
            logger.info("Opening browser for Spotify authorisation: %s", url)
            if not self._open_browser(url):
                logger.warning("Could not open a browser. Visit this URL manually:\n%s", url)

            logger.info("Waiting for Spotify to redirect back to %s ...", self.redirect_uri)
            while server.callback_path is None:
                server.handle_request()
        finally:
            server.server_close()

        self.location = urllib.parse.urljoin(self.redirect_uri, server.callback_path)
        logger.debug("Callback received at %s", self.location)


class PasteNavigator(Navigator):
    """Shows the authorize URL and asks the user to paste the redirected URL.

    For redirect URIs the listener cannot bind (remote hosts, https).
    """

    def __init__(
        self,
        prompt: Callable[[str], Optional[str]],
        *,
        open_browser: Optional[Callable[[str], bool]] = None,
        location: Optional[str] = None,
    ):
        super().__init__(location)
        self._prompt = prompt
        self._open_browser = open_browser

    def navigate(self, url: str) -> None:
        logger.info("Authorize URL:\n%s", url)
        if self._open_browser is not None:
            self._open_browser(url)

        pasted = (self._prompt("Paste the full redirect URL from your browser:") or "").strip()
        self.location = pasted or None
