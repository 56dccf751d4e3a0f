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
import json
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

from cas_tool.constants import API_PATH_PREFIX, VERSION_STRING
from cas_tool.credentials import Credential

from .client import UnknownBackendError
from .errors import classify_response, classify_transport_error
from .transport import RawResponse, Transport, TransportError

USER_AGENT = f"cas_tool/{VERSION_STRING}"


def api_url(credential: Credential, path: str) -> str:
    return f"{credential.base_url()}{API_PATH_PREFIX}{path}"


def api_headers(credential: Credential) -> Dict[str, str]:
    return {
        "Authorization": credential.authorization_header(),
        "Content-Type": "application/json",
        "User-Agent": USER_AGENT,
    }


def send(  # pylint: disable=too-many-arguments
    transport: Transport,
    method: str,
    url: str,
    headers: Dict[str, str],
    context: str,
    query: Optional[Dict[str, Any]] = None,
    body: Optional[Dict[str, Any]] = None,
    data: Any = None,
    bad_request_message: Optional[str] = None,
) -> RawResponse:
    """Issue exactly one request and raise a classified error for anything but a 2xx."""
    try:
        resp = transport.request(method, url, headers, query=query, body=body, data=data)
    except TransportError as err:
        raise classify_transport_error(err, urlsplit(url).hostname or url) from err

    if not resp.ok:
        raise classify_response(resp, context, bad_request_message=bad_request_message)

    return resp


def send_api(  # pylint: disable=too-many-arguments
    transport: Transport,
    credential: Credential,
    method: str,
    path: str,
    context: str,
    query: Optional[Dict[str, Any]] = None,
    body: Optional[Dict[str, Any]] = None,
    bad_request_message: Optional[str] = None,
) -> RawResponse:
    return send(
        transport,
        method,
        api_url(credential, path),
        api_headers(credential),
        context,
        query=query,
        body=body,
        bad_request_message=bad_request_message,
    )


def decode_json(resp: RawResponse, context: str) -> Any:
    try:
        return resp.json()
    except json.decoder.JSONDecodeError as decode_error:
        raise UnknownBackendError(
            "backend sent a malformed response", context, status_code=resp.status_code
        ) from decode_error
