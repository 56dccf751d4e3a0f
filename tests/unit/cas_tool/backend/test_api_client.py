import json
import unittest

from cas_tool.backend.api_client import (
    CloudAppSecurityClient,
    CloudAppSecurityClientOptions,
    build_envelope,
)
from cas_tool.backend.client import (
    ForbiddenError,
    NotFoundError,
    UnknownBackendError,
    UnresolvableHostError,
)
from cas_tool.backend.mocks import MockTransport
from cas_tool.backend.params import (
    ListActivitiesParams,
    ListAlertsParams,
    ListFilesParams,
    SetAlertParams,
)
from cas_tool.backend.transport import RawResponse, TransportError
from cas_tool.credentials import Credential, CredentialProvider
from cas_tool.exceptions import MissingCredentialError, ValidationError
from cas_tool.resources import ResourceKind

HOST = "contoso.portal.cloudappsecurity.com"
CRED = Credential(HOST, "0123456789ABCDEF")
ALERT_ID = "5f1a2b3c4d5e6f7a8b9c0d1e"
FILE_ID = "60aabbccddeeff0011223344"


def _json(status, body):
    return RawResponse(status_code=status, text=json.dumps(body))


class ClientTestCase(unittest.TestCase):
    def make_client(self, responses, default=CRED):
        self.transport = MockTransport(responses)
        return CloudAppSecurityClient(
            CloudAppSecurityClientOptions(
                credentials=CredentialProvider(default), transport=self.transport
            )
        )


class TestFetch(ClientTestCase):
    def test_fetch_one(self) -> None:
        client = self.make_client([_json(200, {"_id": ALERT_ID, "title": "Impossible travel"})])
        resp = client.fetch(ResourceKind.ALERTS, ALERT_ID)

        self.assertEqual(resp.data.identity, ALERT_ID)
        self.assertEqual(resp.data.data["title"], "Impossible travel")
        call = self.transport.calls[0]
        self.assertEqual(call["method"], "GET")
        self.assertEqual(call["url"], f"https://{HOST}/api/v1/alerts/{ALERT_ID}/")
        self.assertEqual(call["headers"]["Authorization"], "Token 0123456789abcdef")

    def test_malformed_identity_sends_nothing(self) -> None:
        client = self.make_client([])
        with self.assertRaises(ValidationError):
            client.fetch(ResourceKind.FILES, "not-an-id")
        self.assertEqual(self.transport.calls, [])

    def test_activity_identity_cannot_escape_its_path(self) -> None:
        client = self.make_client([])
        with self.assertRaises(ValidationError):
            client.fetch(ResourceKind.ACTIVITIES, "../alerts/?limit=999")
        self.assertEqual(self.transport.calls, [])

    def test_not_found(self) -> None:
        client = self.make_client([RawResponse(404)])
        with self.assertRaises(NotFoundError) as ctx:
            client.fetch(ResourceKind.FILES, FILE_ID)
        self.assertIn(FILE_ID, ctx.exception.context)

    def test_explicit_credential(self) -> None:
        other = Credential("fabrikam.portal.cloudappsecurity.com", "ABCDEF")
        client = self.make_client([_json(200, {"_id": FILE_ID})], default=None)
        client.fetch(ResourceKind.FILES, FILE_ID, credential=other)
        call = self.transport.calls[0]
        self.assertTrue(call["url"].startswith("https://fabrikam.portal.cloudappsecurity.com/"))
        self.assertEqual(call["headers"]["Authorization"], "Token abcdef")

    def test_no_credential(self) -> None:
        client = self.make_client([], default=None)
        with self.assertRaises(MissingCredentialError):
            client.fetch(ResourceKind.FILES, FILE_ID)

    def test_non_object_body(self) -> None:
        client = self.make_client([_json(200, [1, 2])])
        with self.assertRaises(UnknownBackendError):
            client.fetch(ResourceKind.FILES, FILE_ID)

    def test_fetch_many_keeps_going(self) -> None:
        other_id = "60aabbccddeeff0011223355"
        client = self.make_client([RawResponse(404), _json(200, {"_id": other_id})])
        results = client.fetch_many(ResourceKind.FILES, [FILE_ID, "bad", other_id])

        self.assertEqual([r.identity for r in results], [FILE_ID, "bad", other_id])
        self.assertIsInstance(results[0].error, NotFoundError)
        self.assertIsInstance(results[1].error, ValidationError)
        self.assertTrue(results[2].success)
        self.assertEqual(results[2].record.identity, other_id)
        self.assertEqual(len(self.transport.calls), 2)


class TestListRecords(ClientTestCase):
    def test_list_sends_envelope(self) -> None:
        client = self.make_client(
            [_json(200, {"data": [{"_id": ALERT_ID}], "total": 7, "hasNext": True})]
        )
        params = ListAlertsParams(
            skip=0, limit=1, sort_by="Severity", sort_direction="desc", severity=["High"], unread=True
        )
        resp = client.list_records(params)

        self.assertEqual(resp.data.total, 7)
        self.assertTrue(resp.data.has_next)
        self.assertEqual(resp.data.records[0].identity, ALERT_ID)

        call = self.transport.calls[0]
        self.assertEqual(call["url"], f"https://{HOST}/api/v1/alerts/")
        self.assertEqual(call["query"]["sortField"], "severity")
        self.assertEqual(call["query"]["sortDirection"], "desc")
        self.assertEqual(
            json.loads(call["query"]["filters"]),
            {"severity": {"eq": [2]}, "read": {"eq": False}},
        )

    def test_unfiltered_list_has_no_filters_key(self) -> None:
        client = self.make_client([_json(200, {"data": []})])
        client.list_records(ListFilesParams())
        self.assertEqual(self.transport.calls[0]["query"], {"skip": 0, "limit": 100})

    def test_invalid_options_send_nothing(self) -> None:
        client = self.make_client([])
        with self.assertRaises(ValidationError):
            client.list_records(ListActivitiesParams(limit=10001))
        with self.assertRaises(ValidationError):
            client.list_records(ListActivitiesParams(admin_events=True, non_admin_events=True))
        self.assertEqual(self.transport.calls, [])

    def test_missing_data_list(self) -> None:
        client = self.make_client([_json(200, {"total": 0})])
        with self.assertRaises(UnknownBackendError):
            client.list_records(ListFilesParams())

    def test_non_object_items(self) -> None:
        client = self.make_client([_json(200, {"data": [{"_id": FILE_ID}, "oops"]})])
        with self.assertRaises(UnknownBackendError) as ctx:
            client.list_records(ListFilesParams())
        self.assertEqual(ctx.exception.status_code, 200)

    def test_malformed_json(self) -> None:
        client = self.make_client([RawResponse(200, "<html>")])
        with self.assertRaises(UnknownBackendError):
            client.list_records(ListFilesParams())

    def test_build_envelope_has_no_io(self) -> None:
        envelope = build_envelope(ListActivitiesParams(text="vpn"))
        self.assertEqual(envelope.filters, {"text": {"text": "vpn"}})


class TestCheck(ClientTestCase):
    def test_success(self) -> None:
        client = self.make_client([_json(200, {"data": []})])
        resp = client.check()
        self.assertTrue(resp.success)
        self.assertIn(HOST, resp.message)
        self.assertEqual(self.transport.calls[0]["query"]["limit"], 1)

    def test_forbidden(self) -> None:
        client = self.make_client([RawResponse(401)])
        resp = client.check()
        self.assertFalse(resp.success)
        self.assertIn("access denied", resp.message)

    def test_unresolvable(self) -> None:
        client = self.make_client([TransportError("Failed to resolve host")])
        resp = client.check()
        self.assertFalse(resp.success)
        self.assertIn("unable to resolve host", resp.message)


class TestSetAlert(ClientTestCase):
    def test_dismiss_with_comment(self) -> None:
        client = self.make_client([_json(200, {"dismissed": 1})])
        resp = client.set_alert(SetAlertParams(ALERT_ID, "dismiss", comment="false positive"))

        self.assertEqual(resp.data.action, "dismiss")
        self.assertEqual(resp.data.data, {"dismissed": 1})
        call = self.transport.calls[0]
        self.assertEqual(call["method"], "POST")
        self.assertEqual(call["url"], f"https://{HOST}/api/v1/alerts/{ALERT_ID}/dismiss/")
        self.assertEqual(call["body"], {"comment": "false positive"})

    def test_mark_read(self) -> None:
        client = self.make_client([RawResponse(200)])
        client.set_alert(SetAlertParams(ALERT_ID, "read"))
        self.assertEqual(self.transport.calls[0]["body"], {})

    def test_comment_without_dismiss(self) -> None:
        client = self.make_client([])
        with self.assertRaises(ValidationError):
            client.set_alert(SetAlertParams(ALERT_ID, "read", comment="hm"))

    def test_unknown_action(self) -> None:
        client = self.make_client([])
        with self.assertRaises(ValidationError):
            client.set_alert(SetAlertParams(ALERT_ID, "resolve"))

    def test_forbidden(self) -> None:
        client = self.make_client([RawResponse(403)])
        with self.assertRaises(ForbiddenError):
            client.set_alert(SetAlertParams(ALERT_ID, "unread"))

    def test_unresolvable_host(self) -> None:
        client = self.make_client([TransportError("Name or service not known")])
        with self.assertRaises(UnresolvableHostError):
            client.set_alert(SetAlertParams(ALERT_ID, "unread"))
