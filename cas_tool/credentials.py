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
import re
from dataclasses import dataclass, field
from typing import Optional

from cas_tool.constants import ALLOWED_TENANT_SUFFIXES
from cas_tool.exceptions import MissingCredentialError, ValidationError

_HEX_TOKEN = re.compile(r"^[0-9a-fA-F]+$")
# Bare DNS name, optionally fully qualified. No port, path, query or fragment.
_HOST_NAME = re.compile(r"^[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)*\.?$")


@dataclass(frozen=True)
class Credential:
    tenant_host: str
    token: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.tenant_host:
            raise ValidationError("tenant host must not be empty")
        if "://" in self.tenant_host:
            raise ValidationError(
                "tenant host must not include a scheme prefix", self.tenant_host
            )
        if not is_allowed_tenant(self.tenant_host):
            raise ValidationError(
                "tenant host is not a known tenant domain",
                self.tenant_host,
                f"expected a host ending in one of {', '.join(ALLOWED_TENANT_SUFFIXES)}",
            )
        if not self.token or not _HEX_TOKEN.match(self.token):
            raise ValidationError("token must be a non-empty hexadecimal string")

    def authorization_header(self) -> str:
        return f"Token {self.token.lower()}"

    def base_url(self) -> str:
        return f"https://{self.tenant_host}"


class CredentialProvider:
    """Resolves the credential used by a single call.

    An explicit per-call credential wins over the provider default; when neither is
    available the call fails with MissingCredentialError.
    """

    _default: Optional[Credential]

    def __init__(self, default: Optional[Credential] = None) -> None:
        self._default = default

    @property
    def default(self) -> Optional[Credential]:
        return self._default

    def resolve(self, explicit: Optional[Credential] = None) -> Credential:
        if explicit is not None:
            return explicit

        if self._default is not None:
            return self._default

        raise MissingCredentialError(
            "no credential available, set an API host and token (CAS_API_HOST, CAS_API_TOKEN)"
        )


def is_allowed_tenant(host: str) -> bool:
    if not _HOST_NAME.fullmatch(host):
        return False
    host = host.lower().rstrip(".")
    return any(host.endswith(suffix) for suffix in ALLOWED_TENANT_SUFFIXES)


def credential_from_settings(api_host: Optional[str], api_token: Optional[str]) -> Optional[Credential]:
    if not api_host or not api_token:
        logging.debug("api host or token not configured, no default credential")
        return None

    return Credential(tenant_host=api_host.strip(), token=api_token.strip())
