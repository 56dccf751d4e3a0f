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
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, Sequence, TypeVar

from cas_tool.credentials import Credential
from cas_tool.exceptions import CasError
from cas_tool.resources import ResourceKind

from .params import DiscoveryUploadParams, ListParams, SetAlertParams

ResponseData = TypeVar("ResponseData")


class BackendError(CasError):
    status_code: Optional[int] = None


class NotFoundError(BackendError):
    status_code = 404

    @property
    def context(self) -> str:
        return str(self.args[1]) if len(self.args) > 1 else ""


class ForbiddenError(BackendError):
    status_code = 403


class UnresolvableHostError(BackendError):
    pass


class BadRequestError(BackendError):
    status_code = 400


class BackendTimeoutError(BackendError):
    pass


class UnknownBackendError(BackendError):
    def __init__(self, *args: Any, status_code: Optional[int] = None) -> None:
        super().__init__(*args)
        self.status_code = status_code


@dataclass(frozen=True)
class BackendResponse(Generic[ResponseData]):
    data: ResponseData
    status_code: int


@dataclass(frozen=True)
class BackendCheckResponse:
    success: bool
    message: str


@dataclass(frozen=True)
class ResourceRecord:
    identity: Optional[str]
    data: Dict[str, Any]

    @classmethod
    def from_json(cls, data: Dict[str, Any], id_field: str) -> "ResourceRecord":
        identity = data.get(id_field)
        return cls(identity=None if identity is None else str(identity), data=data)


@dataclass(frozen=True)
class ListResponse:
    records: List[ResourceRecord]
    total: Optional[int] = None
    has_next: Optional[bool] = None


@dataclass(frozen=True)
class FetchResult:
    identity: str
    record: Optional[ResourceRecord] = None
    error: Optional[CasError] = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SetAlertResponse:
    identity: str
    action: str
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DiscoveryUploadResponse:
    upload_url: str
    provider: str
    data_source: str
    deleted: bool = False
    delete_error: Optional[str] = None


class Client(ABC):
    @abstractmethod
    def check(self, credential: Optional[Credential] = None) -> BackendCheckResponse:
        pass

    @abstractmethod
    def fetch(
        self, kind: ResourceKind, identity: str, credential: Optional[Credential] = None
    ) -> BackendResponse[ResourceRecord]:
        pass

    @abstractmethod
    def fetch_many(
        self,
        kind: ResourceKind,
        identities: Sequence[str],
        credential: Optional[Credential] = None,
    ) -> List[FetchResult]:
        pass

    @abstractmethod
    def list_records(
        self, params: ListParams, credential: Optional[Credential] = None
    ) -> BackendResponse[ListResponse]:
        pass

    @abstractmethod
    def set_alert(
        self, params: SetAlertParams, credential: Optional[Credential] = None
    ) -> BackendResponse[SetAlertResponse]:
        pass

    @abstractmethod
    def upload_discovery_log(
        self, params: DiscoveryUploadParams, credential: Optional[Credential] = None
    ) -> BackendResponse[DiscoveryUploadResponse]:
        pass
