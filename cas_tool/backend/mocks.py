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
from typing import Any, Dict, List, Optional, Sequence, Union

from cas_tool.backend.client import (
    BackendCheckResponse,
    BackendResponse,
)
from cas_tool.backend.client import Client as BackendClient
from cas_tool.backend.client import (
    DiscoveryUploadResponse,
    FetchResult,
    ListResponse,
    ResourceRecord,
    SetAlertResponse,
)
from cas_tool.backend.params import DiscoveryUploadParams, ListParams, SetAlertParams
from cas_tool.backend.transport import RawResponse, Transport, TransportError
from cas_tool.credentials import Credential
from cas_tool.resources import ResourceKind


class MockBackend(BackendClient):
    def check(self, credential: Optional[Credential] = None) -> BackendCheckResponse:
        pass

    def fetch(
        self, kind: ResourceKind, identity: str, credential: Optional[Credential] = None
    ) -> BackendResponse[ResourceRecord]:
        pass

    def fetch_many(
        self,
        kind: ResourceKind,
        identities: Sequence[str],
        credential: Optional[Credential] = None,
    ) -> List[FetchResult]:
        pass

    def list_records(
        self, params: ListParams, credential: Optional[Credential] = None
    ) -> BackendResponse[ListResponse]:
        pass

    def set_alert(
        self, params: SetAlertParams, credential: Optional[Credential] = None
    ) -> BackendResponse[SetAlertResponse]:
        pass

    def upload_discovery_log(
        self, params: DiscoveryUploadParams, credential: Optional[Credential] = None
    ) -> BackendResponse[DiscoveryUploadResponse]:
        pass


class MockTransport(Transport):
    """Replays canned responses in order and records every request it receives."""

    responses: List[Union[RawResponse, TransportError]]
    calls: List[Dict[str, Any]]

    def __init__(self, responses: Optional[List[Union[RawResponse, TransportError]]] = None):
        self.responses = list(responses or [])
        self.calls = []

    def request(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        query: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
        data: Any = None,
    ) -> RawResponse:
        self.calls.append(
            dict(method=method, url=url, headers=headers, query=query, body=body, data=data)
        )
        if not self.responses:
            raise AssertionError(f"unexpected request: {method} {url}")

        response = self.responses.pop(0)
        if isinstance(response, TransportError):
            raise response
        return response
