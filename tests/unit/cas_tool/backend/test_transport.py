import unittest

import requests
import responses
from responses import matchers

from cas_tool.backend.transport import RequestsTransport, TransportError, redact_url

URL = "https://contoso.portal.cloudappsecurity.com/api/v1/alerts/"


class TestRequestsTransport(unittest.TestCase):
    @responses.activate
    def test_request_passes_query_and_body(self) -> None:
        responses.add(
            responses.POST,
            URL,
            json={"data": []},
            status=200,
            match=[
                matchers.query_param_matcher({"skip": "0", "limit": "1"}),
                matchers.json_params_matcher({"comment": "ok"}),
            ],
        )
        resp = RequestsTransport(timeout=5).request(
            "POST", URL, {"Authorization": "Token ab"}, query={"skip": 0, "limit": 1}, body={"comment": "ok"}
        )
        self.assertTrue(resp.ok)
        self.assertEqual(resp.json(), {"data": []})
        self.assertEqual(responses.calls[0].request.headers["Authorization"], "Token ab")

    @responses.activate
    def test_error_status_is_returned(self) -> None:
        responses.add(responses.GET, URL, body="nope", status=500)
        resp = RequestsTransport().request("GET", URL, {})
        self.assertFalse(resp.ok)
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.text, "nope")

    @responses.activate
    def test_timeout(self) -> None:
        responses.add(responses.GET, URL, body=requests.exceptions.ConnectTimeout("too slow"))
        with self.assertRaises(TransportError) as ctx:
            RequestsTransport().request("GET", URL, {})
        self.assertTrue(ctx.exception.timed_out)

    @responses.activate
    def test_connection_error(self) -> None:
        responses.add(
            responses.GET, URL, body=requests.exceptions.ConnectionError("Failed to resolve host")
        )
        with self.assertRaises(TransportError) as ctx:
            RequestsTransport().request("GET", URL, {})
        self.assertFalse(ctx.exception.timed_out)
        self.assertIn("Failed to resolve", ctx.exception.message)


class TestRedactUrl(unittest.TestCase):
    def test_strips_signature(self) -> None:
        self.assertEqual(
            redact_url("https://blob.example.net/c/f.log?sig=secret&se=1#frag"),
            "https://blob.example.net/c/f.log",
        )
