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
import sys
from typing import Any, Optional, TextIO

from cas_tool.backend.client import FetchResult, ResourceRecord


class BColors:
    OKGREEN = "\033[92m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"

    @classmethod
    def bold(cls, text: str) -> str:
        return cls.wrap(cls.BOLD, text)

    @classmethod
    def green(cls, text: str) -> str:
        return cls.wrap(cls.OKGREEN, text)

    @classmethod
    def failed(cls, text: str) -> str:
        return cls.wrap(cls.FAIL, text)

    @classmethod
    def wrap(cls, start: str, text: str) -> str:
        return f"{start}{text}{cls.ENDC}"


def print_op_success_msg(msg: Any) -> None:
    print(f"{BColors.green(msg)}", file=sys.stderr)


def record_to_json(record: ResourceRecord) -> str:
    """One record per line, with the backend id exposed as "identity"."""
    return json.dumps({"identity": record.identity, **record.data}, default=str)


def print_record(record: ResourceRecord, out: Optional[TextIO] = None) -> None:
    print(record_to_json(record), file=out or sys.stdout)


def fetch_failure_msg(result: FetchResult) -> str:
    return f"{BColors.bold(result.identity)}: {BColors.failed(str(result.error))}"
