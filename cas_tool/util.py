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
import sys
from pathlib import Path
from typing import Any, List, Optional

from cas_tool.backend.api_client import (
    CloudAppSecurityClient,
    CloudAppSecurityClientOptions,
)
from cas_tool.backend.client import Client as BackendClient
from cas_tool.backend.transport import RequestsTransport
from cas_tool.constants import DEFAULT_TIMEOUT_SECONDS
from cas_tool.credentials import CredentialProvider, credential_from_settings


def get_backend(
    api_token: Optional[str], api_host: Optional[str], timeout: float = DEFAULT_TIMEOUT_SECONDS
) -> BackendClient:
    credential = credential_from_settings(api_host, api_token)
    if credential is not None:
        logging.debug("using tenant %s", credential.tenant_host)

    return CloudAppSecurityClient(
        CloudAppSecurityClientOptions(
            credentials=CredentialProvider(default=credential),
            transport=RequestsTransport(timeout=timeout),
        )
    )


def to_list(listish: Any) -> List[Any]:
    if listish is None:
        return []
    if isinstance(listish, (list, tuple)):
        return list(listish)
    return [listish]


def read_identities(identities: Optional[List[str]], identity_file: Optional[str]) -> List[str]:
    """Collect identities from repeated flags and from a file ("-" reads stdin), in order."""
    collected = [i.strip() for i in to_list(identities) if i and i.strip()]
    if not identity_file:
        return collected

    if identity_file == "-":
        lines = sys.stdin.read().splitlines()
    else:
        lines = Path(identity_file).read_text(encoding="utf-8").splitlines()

    for line in lines:
        line = line.strip()
        if line and not line.startswith("#"):
            collected.append(line)
    return collected
