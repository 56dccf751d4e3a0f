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
import os
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple

from schema import And, Schema, SchemaError

from cas_tool.constants import (
    AZURE_BLOCK_BLOB_MAX_BYTES,
    AZURE_PROVIDER,
    DISCOVERY_LOG_TYPES,
    UPLOAD_CHUNK_BYTES,
)
from cas_tool.credentials import Credential
from cas_tool.exceptions import ValidationError

from .api_request import decode_json, send, send_api
from .client import DiscoveryUploadResponse, UnknownBackendError
from .params import DiscoveryUploadParams
from .transport import Transport

UPLOAD_URL_PATH = "/discovery/upload_url/"
DONE_UPLOAD_PATH = "/discovery/done_upload/"

UPLOAD_URL_SCHEMA = Schema(
    {"url": And(str, len), "provider": str},
    ignore_extra_keys=True,
)


class UploadState(str, Enum):
    START = "start"
    URL_OBTAINED = "url_obtained"
    UPLOADED = "uploaded"
    FINALIZED = "finalized"
    DELETED = "deleted"
    DONE = "done"


@dataclass(frozen=True)
class UploadSession:
    upload_url: str
    provider: str
    data_source: str
    source_file: str


def resolve_log_type(log_type: str) -> str:
    """Accept either the display label or the wire token of a known log type."""
    if log_type in DISCOVERY_LOG_TYPES:
        return DISCOVERY_LOG_TYPES[log_type]
    if log_type in DISCOVERY_LOG_TYPES.values():
        return log_type
    raise ValidationError(
        "unknown discovery log type",
        log_type,
        f"allowed values are {', '.join(DISCOVERY_LOG_TYPES)}",
    )


def transfer_headers(provider: str, size: int) -> Dict[str, str]:
    if provider.lower() != AZURE_PROVIDER:
        return {}
    if size <= AZURE_BLOCK_BLOB_MAX_BYTES:
        return {"x-ms-blob-type": "BlockBlob"}
    return {"Transfer-Encoding": "chunked"}


def is_chunked(headers: Dict[str, str]) -> bool:
    return headers.get("Transfer-Encoding") == "chunked"


def read_chunks(path: str, chunk_size: int = UPLOAD_CHUNK_BYTES) -> Iterator[bytes]:
    with open(path, "rb") as source:
        while True:
            chunk = source.read(chunk_size)
            if not chunk:
                return
            yield chunk


def source_size(path: str) -> int:
    if not os.path.isfile(path):
        raise ValidationError("discovery log file not found", path)
    try:
        return os.path.getsize(path)
    except OSError as err:
        raise ValidationError("unable to read discovery log file", path, err) from err


class DiscoveryUploader:
    """Runs one discovery log upload: get an upload URL, PUT the file, finalize.

    Any failure before the upload is finalized ends the operation; a retry has to start
    again from a fresh upload URL.
    """

    state: UploadState

    def __init__(self, transport: Transport, credential: Credential):
        self._transport = transport
        self._credential = credential
        self.state = UploadState.START

    def upload(self, params: DiscoveryUploadParams) -> DiscoveryUploadResponse:
        log_type = resolve_log_type(params.log_type)
        if not params.data_source:
            raise ValidationError("a discovery data source name is required")
        size = source_size(params.path)

        session = self._get_upload_url(params, log_type)
        self._advance(UploadState.URL_OBTAINED)

        self._put_file(session, size)
        self._advance(UploadState.UPLOADED)

        self._finalize(session)
        self._advance(UploadState.FINALIZED)

        deleted, delete_error = False, None
        if params.delete_after_upload:
            deleted, delete_error = self._delete_source(session)
            if deleted:
                self._advance(UploadState.DELETED)

        self._advance(UploadState.DONE)
        return DiscoveryUploadResponse(
            upload_url=session.upload_url,
            provider=session.provider,
            data_source=session.data_source,
            deleted=deleted,
            delete_error=delete_error,
        )

    def _advance(self, state: UploadState) -> None:
        logging.debug("discovery upload: %s -> %s", self.state.value, state.value)
        self.state = state

    def _get_upload_url(self, params: DiscoveryUploadParams, log_type: str) -> UploadSession:
        filename = os.path.basename(params.path)
        logging.info("requesting upload url for %s (%s)", filename, log_type)
        resp = send_api(
            self._transport,
            self._credential,
            "GET",
            UPLOAD_URL_PATH,
            context=filename,
            query={"filename": filename, "source": log_type},
        )
        data = decode_json(resp, UPLOAD_URL_PATH)
        try:
            data = UPLOAD_URL_SCHEMA.validate(data)
        except SchemaError as err:
            raise UnknownBackendError(
                "unexpected upload url response", str(err), status_code=resp.status_code
            ) from err

        return UploadSession(
            upload_url=data["url"],
            provider=data["provider"],
            data_source=params.data_source,
            source_file=params.path,
        )

    def _put_file(self, session: UploadSession, size: int) -> None:
        headers = transfer_headers(session.provider, size)
        logging.info(
            "uploading %s (%d bytes, provider %s)",
            os.path.basename(session.source_file),
            size,
            session.provider,
        )
        if is_chunked(headers):
            send(
                self._transport,
                "PUT",
                session.upload_url,
                headers,
                context="upload target",
                data=read_chunks(session.source_file),
            )
            return

        with open(session.source_file, "rb") as source:
            send(
                self._transport,
                "PUT",
                session.upload_url,
                headers,
                context="upload target",
                data=source,
            )

    def _finalize(self, session: UploadSession) -> None:
        logging.info("finalizing upload into data source '%s'", session.data_source)
        send_api(
            self._transport,
            self._credential,
            "POST",
            DONE_UPLOAD_PATH,
            context=session.data_source,
            body={"uploadUrl": session.upload_url, "inputStreamName": session.data_source},
            bad_request_message="unknown discovery data source, check the data source name",
        )

    def _delete_source(self, session: UploadSession) -> Tuple[bool, Optional[str]]:
        try:
            os.remove(session.source_file)
        except OSError as err:
            logging.warning("unable to delete %s: %s", session.source_file, err)
            return False, str(err)

        logging.info("deleted %s", session.source_file)
        return True, None
