"""Announces the server to a master server over HTTP."""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)


@dataclass
class AdvertiserSettings:
    """The configuration values the advertiser reads."""

    port: int
    name: str = ""
    hostname: str = ""
    description: str = ""
    webao_port: int = -1
    masterserver: str = ""
    debug: bool = False
    cloudflare_mode: bool = False


def _is_valid_url(url: str) -> bool:
    parts = urlsplit(url)
    return bool(parts.scheme) and bool(parts.netloc)


class Advertiser:
    """Posts the server's name, ports and player count to the master server."""

    def __init__(
        self,
        settings: AdvertiserSettings,
        opener: Optional[Callable[..., Any]] = None,
        timeout: float = 10.0,
    ) -> None:
        self.port = settings.port
        # A Cloudflare tunnel always serves the web client on port 80.
        self.ws_port = 80 if settings.cloudflare_mode else settings.webao_port
        self.players = 0
        self.name = ""
        self.hostname = ""
        self.description = ""
        self.masterserver = ""
        self.debug = False
        self.update_settings(settings)
        self._opener = opener or urllib.request.urlopen
        self._timeout = timeout

    def build_payload(self) -> dict[str, Any]:
        """The JSON object sent to the master server."""
        payload: dict[str, Any] = {}
        if self.hostname:
            payload["ip"] = self.hostname
        payload["port"] = self.port
        if self.ws_port != -1:
            payload["ws_port"] = self.ws_port
        payload["players"] = self.players
        payload["name"] = self.name
        if self.description:
            payload["description"] = self.description
        return payload

    def advertise(self) -> bool:
        """Send the advertisement; True if the master server answered."""
        if not _is_valid_url(self.masterserver):
            if self.debug:
                logger.warning("Unable to advertise. Masterserver URL '%s' is not valid.", self.masterserver)
            return False

        body = json.dumps(self.build_payload(), sort_keys=True).encode("utf-8")
        request = urllib.request.Request(
            self.masterserver,
            data=body,
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with self._opener(request, timeout=self._timeout) as response:
                status, reply = response.status, response.read()
        except urllib.error.HTTPError as error:
            status, reply = error.code, error.read()
        except urllib.error.URLError as error:
            logger.error("Failed to reach %s: %s", self.masterserver, error.reason)
            return False

        if self.debug:
            logger.debug("Advertised Server")
            self._log_reply(status, reply)
        return True

    def _log_reply(self, status: int, reply: bytes) -> None:
        if status == 200:
            logger.debug("Succesfully advertised server.")
            return
        try:
            document = json.loads(reply)
        except ValueError:
            logger.error("Invalid JSON response from %s", self.masterserver)
            return
        logger.debug("Got valid response from %s: %s", self.masterserver, document)

    def update_player_count(self, current_players: int) -> None:
        self.players = current_players

    def update_settings(self, settings: AdvertiserSettings) -> None:
        """Take over the settings that may change while the server runs; ports stay."""
        self.name = settings.name
        self.hostname = settings.hostname
        self.description = settings.description
        self.masterserver = settings.masterserver
        self.debug = settings.debug