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
import logging
from typing import Any, Optional

from .client import (
    BackendError,
    BackendTimeoutError,
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    UnknownBackendError,
    UnresolvableHostError,
)
from .transport import RawResponse, TransportError

NAME_RESOLUTION_SUBSTRS = (
    "name or service not known",
    "nodename nor servname provided",
    "getaddrinfo failed",
    "failed to resolve",
    "nameresolutionerror",
    "temporary failure in name resolution",
    "no address associated with hostname",
    "no such host is known",
)


def is_name_resolution_error_str(err: str) -> bool:
    if not err:
        return False

    lowered = err.lower()
    return any(substr in lowered for substr in NAME_RESOLUTION_SUBSTRS)


def extract_error_detail(resp: RawResponse) -> str:
    """Pull a human readable message out of an error body, falling back to the raw text."""
    try:
        body: Any = resp.json()
    except (json.decoder.JSONDecodeError, ValueError):
        return resp.text

    if isinstance(body, dict):
        for key in ("detail", "error", "message"):
            if body.get(key):
                return str(body[key])
        errors = body.get("errors")
        if isinstance(errors, list) and errors:
            return "; ".join(str(err) for err in errors)
    return resp.text


def classify_response(
    resp: RawResponse, context: str, bad_request_message: Optional[str] = None
) -> BackendError:
    """Map a non-2xx response onto the error taxonomy.

    A 400 only becomes BadRequestError when the caller says what it means at that call
    site, otherwise it is an unknown backend failure like any other status.
    """
    detail = extract_error_detail(resp)
    code = resp.status_code

    if code == 404:
        return NotFoundError("not found", context)
    if code in (401, 403):
        return ForbiddenError("access denied, check the API token and its permissions", context)
    if code == 400 and bad_request_message is not None:
        return BadRequestError(bad_request_message, context)

    logging.debug("unclassified backend response %d for %s: %s", code, context, detail)
    return UnknownBackendError(f"backend returned {code}", detail, status_code=code)


def classify_transport_error(err: TransportError, host: str) -> BackendError:
    if err.timed_out:
        return BackendTimeoutError("request timed out", host)
    if is_name_resolution_error_str(err.message):
        return UnresolvableHostError("unable to resolve host", host)
    return UnknownBackendError(err.message)
