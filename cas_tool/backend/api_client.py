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
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from cas_tool.constants import VALID_ALERT_ACTIONS, AlertActions
from cas_tool.credentials import Credential, CredentialProvider
from cas_tool.exceptions import CasError, ValidationError
from cas_tool.query.envelope import QueryEnvelope, assemble
from cas_tool.query.filters import build_filter_set
from cas_tool.resources import ResourceKind, get_spec, validate_identity

from .api_request import decode_json, send_api
from .client import (
    BackendCheckResponse,
    BackendResponse,
    Client,
    DiscoveryUploadResponse,
    FetchResult,
    ListResponse,
    ResourceRecord,
    SetAlertResponse,
    UnknownBackendError,
)
from .discovery import DiscoveryUploader
from .params import (
    DiscoveryUploadParams,
    ListAccountsParams,
    ListParams,
    SetAlertParams,
)
from .transport import RequestsTransport, Transport


@dataclass(frozen=True)
class CloudAppSecurityClientOptions:
    credentials: CredentialProvider
    transport: Optional[Transport] = None


class CloudAppSecurityClient(Client):
    _credentials: CredentialProvider
    _transport: Transport

    def __init__(self, opts: CloudAppSecurityClientOptions):
        self._credentials = opts.credentials
        self._transport = opts.transport or RequestsTransport()

    def check(self, credential: Optional[Credential] = None) -> BackendCheckResponse:
        resolved = self._credentials.resolve(credential)
        try:
            self.list_records(ListAccountsParams(limit=1), credential=resolved)
        except CasError as err:
            logging.debug("connection check failed", exc_info=err)
            return BackendCheckResponse(success=False, message=str(err))

        return BackendCheckResponse(
            success=True, message=f"connected to tenant {resolved.tenant_host}"
        )

    def fetch(
        self, kind: ResourceKind, identity: str, credential: Optional[Credential] = None
    ) -> BackendResponse[ResourceRecord]:
        spec = get_spec(kind)
        identity = validate_identity(kind, identity)
        resolved = self._credentials.resolve(credential)

        resp = send_api(
            self._transport,
            resolved,
            "GET",
            spec.item_path(identity),
            context=f"{kind.value} {identity}",
        )
        data = decode_json(resp, spec.item_path(identity))
        if not isinstance(data, dict):
            raise UnknownBackendError(
                "expected an object", f"{kind.value} {identity}", status_code=resp.status_code
            )

        return BackendResponse(
            status_code=resp.status_code,
            data=ResourceRecord.from_json(data, spec.id_field),
        )

    def fetch_many(
        self,
        kind: ResourceKind,
        identities: Sequence[str],
        credential: Optional[Credential] = None,
    ) -> List[FetchResult]:
        results = []
        for identity in identities:
            try:
                record = self.fetch(kind, identity, credential=credential).data
            except CasError as err:
                logging.debug("fetching %s %s failed: %s", kind.value, identity, err)
                results.append(FetchResult(identity=identity, error=err))
                continue
            results.append(FetchResult(identity=identity, record=record))
        return results

    def list_records(
        self, params: ListParams, credential: Optional[Credential] = None
    ) -> BackendResponse[ListResponse]:
        spec = get_spec(params.kind)
        envelope = build_envelope(params)
        resolved = self._credentials.resolve(credential)

        if envelope.filters is not None:
            logging.debug("%s filters on: %s", spec.kind.value, ", ".join(envelope.filters))

        resp = send_api(
            self._transport,
            resolved,
            "GET",
            spec.path,
            context=spec.kind.value,
            query=envelope.to_query_params(),
        )
        body = decode_json(resp, spec.path)
        items = body.get("data") if isinstance(body, dict) else None
        if not isinstance(items, list):
            raise UnknownBackendError(
                "response did not include a data list", spec.kind.value, status_code=resp.status_code
            )
        if not all(isinstance(item, dict) for item in items):
            raise UnknownBackendError(
                "expected a list of objects", spec.kind.value, status_code=resp.status_code
            )

        return BackendResponse(
            status_code=resp.status_code,
            data=ListResponse(
                records=[ResourceRecord.from_json(item, spec.id_field) for item in items],
                total=body.get("total"),
                has_next=body.get("hasNext"),
            ),
        )

    def set_alert(
        self, params: SetAlertParams, credential: Optional[Credential] = None
    ) -> BackendResponse[SetAlertResponse]:
        identity = validate_identity(ResourceKind.ALERTS, params.identity)
        if params.action not in VALID_ALERT_ACTIONS:
            raise ValidationError(
                "unknown alert action",
                params.action,
                f"allowed values are {', '.join(VALID_ALERT_ACTIONS)}",
            )
        if params.comment and params.action != AlertActions.DISMISS:
            raise ValidationError("a comment can only be given when dismissing an alert")

        resolved = self._credentials.resolve(credential)
        path = f"{get_spec(ResourceKind.ALERTS).item_path(identity)}{params.action}/"
        body = {"comment": params.comment} if params.comment else {}
        resp = send_api(
            self._transport,
            resolved,
            "POST",
            path,
            context=f"alerts {identity}",
            body=body,
        )
        data: Any = decode_json(resp, path)

        return BackendResponse(
            status_code=resp.status_code,
            data=SetAlertResponse(
                identity=identity,
                action=params.action,
                data=data if isinstance(data, dict) else {},
            ),
        )

    def upload_discovery_log(
        self, params: DiscoveryUploadParams, credential: Optional[Credential] = None
    ) -> BackendResponse[DiscoveryUploadResponse]:
        resolved = self._credentials.resolve(credential)
        uploader = DiscoveryUploader(self._transport, resolved)
        return BackendResponse(status_code=200, data=uploader.upload(params))


def build_envelope(params: ListParams) -> QueryEnvelope:
    """Validate the list options and build the request envelope, without any I/O."""
    spec = get_spec(params.kind)
    filter_set = build_filter_set(params, spec.filter_params, spec.exclusive_pairs)
    return assemble(
        params.skip,
        params.limit,
        params.sort_by,
        params.sort_direction,
        filter_set,
        max_limit=spec.max_limit,
        sort_labels=spec.sort_labels,
        sort_remap=spec.sort_remap,
    )
