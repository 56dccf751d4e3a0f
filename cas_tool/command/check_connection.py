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
from typing import Optional, Tuple

from cas_tool.backend.client import Client as BackendClient


def run(backend: BackendClient, api_host: Optional[str]) -> Tuple[int, str]:
    logging.info("checking connection to %s...", api_host)
    result = backend.check()

    if not result.success:
        logging.info("connection failed")
        return 1, result.message

    logging.info("connection successful: %s", result.message)
    return 0, ""
