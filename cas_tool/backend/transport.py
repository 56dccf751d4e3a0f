"""
CAS Tool is a command line interface and client library for querying
and feeding a Cloud App Security tenant.
Copyright (C) 2026 CAS Tool Authors

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU Affero General Public License as
published by the Free Software Foundation, either version 3 of the
License, or (at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU Affero General Public License for more details.

You should have received a copy of the GNU Affero General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""
""" Defines the HTTP capability the API client talks through. """

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

import requests

from cas_tool.constants import DEFAULT_TIMEOUT_SECONDS


@dataclass(frozen=True)
class RawResponse:
    status_code: int
    text: str = ""
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        if not self.text:
            return {}
        return json.loads(self.text)


class TransportError(Exception):
    """No HTTP response was received."""

    def __init__(self, message: str, timed_out: bool = False):
        super().__init__(message)
        self.message = message
        self.timed_out = timed_out


class Transport(ABC):
    @abstractmethod
    def request(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        query: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
        data: Any = None,
    ) -> RawResponse:
        pass


class RequestsTransport(Transport):
    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self._timeout = timeout
        self._session = session or requests.Session()

    def request(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        query: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
        data: Any = None,
    ) -> RawResponse:
        logging.debug("%s %s", method, redact_url(url))
        try:
            resp = self._session.request(
                method,
                url,
                headers=headers,
                params=query,
                json=body,
                data=data,
                timeout=self._timeout,
            )
        except requests.exceptions.Timeout as err:
            raise TransportError(str(err), timed_out=True) from err
        except requests.exceptions.RequestException as err:
            raise TransportError(str(err)) from err

        logging.debug("%s %s returned %d", method, redact_url(url), resp.status_code)
        return RawResponse(
            status_code=resp.status_code, text=resp.text, headers=dict(resp.headers)
        )


def redact_url(url: str) -> str:
    # upload targets carry their access signature in the query string
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
