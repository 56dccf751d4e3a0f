import io
import json
import unittest
from unittest import mock

from cas_tool.backend.client import (
    BackendResponse,
    FetchResult,
    ForbiddenError,
    ListResponse,
    NotFoundError,
    ResourceRecord,
)
from cas_tool.backend.mocks import MockBackend
from cas_tool.backend.params import ListAlertsParams, ListFilesParams
from cas_tool.command import query_resources
from cas_tool.command.query_resources import QueryArgs, QueryMode, select_mode
from cas_tool.exceptions import ValidationError
from cas_tool.resources import ResourceKind

ALERT_ID = "5f1a2b3c4d5e6f7a8b9c0d1e"


def _record(identity, **data):
    return ResourceRecord(identity=identity, data={"_id": identity, **data})


class TestSelectMode(unittest.TestCase):
    def test_modes(self) -> None:
        self.assertEqual(
            select_mode(QueryArgs(ResourceKind.ALERTS, [], ListAlertsParams())), QueryMode.LIST
        )
        self.assertEqual(
            select_mode(QueryArgs(ResourceKind.ALERTS, [ALERT_ID], ListAlertsParams())),
            QueryMode.FETCH,
        )

    def test_identity_with_list_options(self) -> None:
        for params in (
            ListAlertsParams(skip=5),
            ListAlertsParams(limit=10),
            ListAlertsParams(sort_by="Date", sort_direction="asc"),
            ListAlertsParams(unread=True),
        ):
            with self.assertRaises(ValidationError):
                select_mode(QueryArgs(ResourceKind.ALERTS, [ALERT_ID], params))

    def test_error_names_the_filters(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            select_mode(QueryArgs(ResourceKind.FILES, ["x"], ListFilesParams(extension=["pdf"])))
        self.assertIn("extension", str(ctx.exception))


class TestQueryRun(unittest.TestCase):
    def test_fetch_prints_records(self) -> None:
        backend = MockBackend()
        backend.fetch_many = mock.MagicMock(
            return_value=[FetchResult(ALERT_ID, record=_record(ALERT_ID, title="t"))]
        )
        backend.list_records = mock.MagicMock()
        out = io.StringIO()

        code, msg = query_resources.run(
            backend, QueryArgs(ResourceKind.ALERTS, [ALERT_ID], ListAlertsParams()), out
        )

        self.assertEqual((code, msg), (0, ""))
        backend.fetch_many.assert_called_once_with(ResourceKind.ALERTS, [ALERT_ID])
        backend.list_records.assert_not_called()
        self.assertEqual(json.loads(out.getvalue())["identity"], ALERT_ID)

    def test_fetch_reports_partial_failure(self) -> None:
        backend = MockBackend()
        backend.fetch_many = mock.MagicMock(
            return_value=[
                FetchResult(ALERT_ID, record=_record(ALERT_ID)),
                FetchResult("missing", error=NotFoundError("not found", "alerts missing")),
            ]
        )
        out = io.StringIO()

        with self.assertLogs(level="ERROR") as logs:
            code, msg = query_resources.run(
                backend,
                QueryArgs(ResourceKind.ALERTS, [ALERT_ID, "missing"], ListAlertsParams()),
                out,
            )

        self.assertEqual(code, 1)
        self.assertEqual(msg, "1 of 2 alerts could not be fetched")
        self.assertIn("missing", logs.output[0])
        self.assertEqual(len(out.getvalue().splitlines()), 1)

    def test_list_prints_records_and_hint(self) -> None:
        backend = MockBackend()
        backend.list_records = mock.MagicMock(
            return_value=BackendResponse(
                status_code=200,
                data=ListResponse(
                    records=[_record("a" * 24), _record("b" * 24)], total=10, has_next=True
                ),
            )
        )
        out = io.StringIO()
        params = ListFilesParams(skip=4, limit=2)

        with self.assertLogs(level="INFO") as logs:
            code, _ = query_resources.run(backend, QueryArgs(ResourceKind.FILES, [], params), out)

        self.assertEqual(code, 0)
        backend.list_records.assert_called_once_with(params)
        self.assertEqual(len(out.getvalue().splitlines()), 2)
        self.assertTrue(any("--skip 6" in line for line in logs.output))

    def test_list_error(self) -> None:
        backend = MockBackend()
        backend.list_records = mock.MagicMock(side_effect=ForbiddenError("access denied", "files"))
        code, msg = query_resources.run(
            backend, QueryArgs(ResourceKind.FILES, [], ListFilesParams()), io.StringIO()
        )
        self.assertEqual((code, msg), (1, "access denied: files"))

    def test_mixed_mode_sends_nothing(self) -> None:
        backend = MockBackend()
        backend.fetch_many = mock.MagicMock()
        backend.list_records = mock.MagicMock()
        code, msg = query_resources.run(
            backend,
            QueryArgs(ResourceKind.ALERTS, [ALERT_ID], ListAlertsParams(read=True)),
            io.StringIO(),
        )
        self.assertEqual(code, 1)
        self.assertIn("--identity", msg)
        backend.fetch_many.assert_not_called()
        backend.list_records.assert_not_called()
