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
from dataclasses import dataclass, fields
from typing import ClassVar, List, Optional

from cas_tool.constants import DEFAULT_RESULT_SET_SIZE
from cas_tool.query.filters import is_supplied
from cas_tool.resources import ResourceKind, filter_param_names


@dataclass(frozen=True)
class ListParams:
    kind: ClassVar[ResourceKind]

    skip: int = 0
    limit: int = DEFAULT_RESULT_SET_SIZE
    sort_by: Optional[str] = None
    sort_direction: Optional[str] = None

    def has_list_options(self) -> bool:
        """True when anything beyond the default paging was asked for."""
        if self.skip != 0 or self.limit != DEFAULT_RESULT_SET_SIZE:
            return True
        if self.sort_by is not None or self.sort_direction is not None:
            return True
        return any(is_supplied(getattr(self, name)) for name in filter_param_names(self.kind))

    def supplied_filters(self) -> List[str]:
        names = set(filter_param_names(self.kind))
        return [f.name for f in fields(self) if f.name in names and is_supplied(getattr(self, f.name))]


# pylint: disable=too-many-instance-attributes
@dataclass(frozen=True)
class ListAccountsParams(ListParams):
    kind: ClassVar[ResourceKind] = ResourceKind.ACCOUNTS

    user_name: Optional[List[str]] = None
    affiliation: Optional[List[str]] = None
    app_id: Optional[List[int]] = None
    app_id_not: Optional[List[int]] = None
    app_name: Optional[List[str]] = None
    app_name_not: Optional[List[str]] = None
    user_domain: Optional[List[str]] = None
    user_domain_not: Optional[List[str]] = None


@dataclass(frozen=True)
class ListActivitiesParams(ListParams):
    kind: ClassVar[ResourceKind] = ResourceKind.ACTIVITIES

    user_name: Optional[List[str]] = None
    app_id: Optional[List[int]] = None
    app_id_not: Optional[List[int]] = None
    app_name: Optional[List[str]] = None
    app_name_not: Optional[List[str]] = None
    event_type_name: Optional[List[str]] = None
    event_type_name_not: Optional[List[str]] = None
    ip_category: Optional[List[str]] = None
    ip_category_not: Optional[List[str]] = None
    ip_starts_with: Optional[str] = None
    ip_does_not_start_with: Optional[str] = None
    user_agent_contains: Optional[str] = None
    user_agent_not_contains: Optional[str] = None
    text: Optional[str] = None
    admin_events: bool = False
    non_admin_events: bool = False


@dataclass(frozen=True)
class ListAlertsParams(ListParams):
    kind: ClassVar[ResourceKind] = ResourceKind.ALERTS

    severity: Optional[List[str]] = None
    severity_not: Optional[List[str]] = None
    resolution_status: Optional[List[str]] = None
    resolution_status_not: Optional[List[str]] = None
    user_name: Optional[List[str]] = None
    app_id: Optional[List[int]] = None
    app_id_not: Optional[List[int]] = None
    app_name: Optional[List[str]] = None
    app_name_not: Optional[List[str]] = None
    policy: Optional[List[str]] = None
    risk: Optional[List[int]] = None
    source: Optional[List[str]] = None
    read: bool = False
    unread: bool = False


@dataclass(frozen=True)
class ListFilesParams(ListParams):
    kind: ClassVar[ResourceKind] = ResourceKind.FILES

    file_type: Optional[List[str]] = None
    file_type_not: Optional[List[str]] = None
    sharing: Optional[List[str]] = None
    sharing_not: Optional[List[str]] = None
    extension: Optional[List[str]] = None
    extension_not: Optional[List[str]] = None
    domain: Optional[List[str]] = None
    domain_not: Optional[List[str]] = None
    file_owner: Optional[List[str]] = None
    mime_type: Optional[List[str]] = None
    mime_type_not: Optional[List[str]] = None
    name: Optional[List[str]] = None
    app_id: Optional[List[int]] = None
    app_id_not: Optional[List[int]] = None
    app_name: Optional[List[str]] = None
    app_name_not: Optional[List[str]] = None
    folder: bool = False
    folder_not: bool = False
    quarantined: bool = False
    quarantined_not: bool = False
    trashed: bool = False
    trashed_not: bool = False


@dataclass(frozen=True)
class SetAlertParams:
    identity: str
    action: str
    comment: Optional[str] = None


@dataclass(frozen=True)
class DiscoveryUploadParams:
    path: str
    log_type: str
    data_source: str
    delete_after_upload: bool = False
