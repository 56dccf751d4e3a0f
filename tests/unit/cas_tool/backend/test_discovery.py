import json
import os
import unittest
from unittest import mock

from pyfakefs.fake_filesystem_unittest import TestCase

from cas_tool.backend.client import BadRequestError, ForbiddenError, UnknownBackendError
from cas_tool.backend.discovery import (
    DiscoveryUploader,
    UploadState,
    read_chunks,
    resolve_log_type,
    transfer_headers,
)
from cas_tool.backend.mocks import MockTransport
from cas_tool.backend.params import DiscoveryUploadParams
from cas_tool.backend.transport import RawResponse
from cas_tool.credentials import Credential
from cas_tool.exceptions import ValidationError

HOST = "contoso.portal.cloudappsecurity.com"
CRED = Credential(HOST, "0123456789ABCDEF")
BLOB_URL = "https://blob.example.net/discovery/proxy.log?sig=abc"
LOG_PATH = "/logs/proxy.log"
MIB = 1024 * 1024


def _upload_url(provider="azure"):
    return RawResponse(200, json.dumps({"url": BLOB_URL, "provider": provider}))


class TestTransferHeaders(unittest.TestCase):
    def test_azure_block_blob_boundary(self) -> None:
        self.assertEqual(transfer_headers("azure", 64 * MIB), {"x-ms-blob-type": "BlockBlob"})
        self.assertEqual(transfer_headers("Azure", 10), {"x-ms-blob-type": "BlockBlob"})
        self.assertEqual(transfer_headers("azure", 64 * MIB + 1), {"Transfer-Encoding": "chunked"})

    def test_other_providers(self) -> None:
        self.assertEqual(transfer_headers("aws", 10), {})
        self.assertEqual(transfer_headers("aws", 100 * MIB), {})

    def test_log_types(self) -> None:
        self.assertEqual(resolve_log_type("PaloAlto"), "PALO_ALTO")
        self.assertEqual(resolve_log_type("BLUECOAT"), "BLUECOAT")
        with self.assertRaises(ValidationError):
            resolve_log_type("palo alto")


class TestDiscoveryUploader(TestCase):
    def setUp(self) -> None:
        self.setUpPyfakefs()
        self.fs.create_file(LOG_PATH, contents="line one\nline two\n")

    def _uploader(self, responses):
        self.transport = MockTransport(responses)
        return DiscoveryUploader(self.transport, CRED)

    def test_happy_path(self) -> None:
        uploader = self._uploader([_upload_url(), RawResponse(201), RawResponse(200)])
        resp = uploader.upload(DiscoveryUploadParams(LOG_PATH, "PaloAlto", "proxy-east"))

        self.assertEqual(uploader.state, UploadState.DONE)
        self.assertEqual(resp.upload_url, BLOB_URL)
        self.assertFalse(resp.deleted)
        self.assertTrue(os.path.exists(LOG_PATH))

        get_url, put, done = self.transport.calls
        self.assertEqual(get_url["method"], "GET")
        self.assertEqual(get_url["url"], f"https://{HOST}/api/v1/discovery/upload_url/")
        self.assertEqual(get_url["query"], {"filename": "proxy.log", "source": "PALO_ALTO"})

        self.assertEqual(put["method"], "PUT")
        self.assertEqual(put["url"], BLOB_URL)
        self.assertEqual(put["headers"], {"x-ms-blob-type": "BlockBlob"})

        self.assertEqual(done["method"], "POST")
        self.assertEqual(done["url"], f"https://{HOST}/api/v1/discovery/done_upload/")
        self.assertEqual(done["body"], {"uploadUrl": BLOB_URL, "inputStreamName": "proxy-east"})
        self.assertEqual(done["headers"]["Authorization"], "Token 0123456789abcdef")

    def test_large_azure_file_is_streamed(self) -> None:
        uploader = self._uploader([_upload_url(), RawResponse(201), RawResponse(200)])
        with mock.patch("cas_tool.backend.discovery.AZURE_BLOCK_BLOB_MAX_BYTES", 4):
            uploader.upload(DiscoveryUploadParams(LOG_PATH, "Squid", "proxy-east"))

        put = self.transport.calls[1]
        self.assertEqual(put["headers"], {"Transfer-Encoding": "chunked"})
        self.assertEqual(b"".join(put["data"]), b"line one\nline two\n")

    def test_non_azure_provider_sends_no_extra_headers(self) -> None:
        uploader = self._uploader([_upload_url("aws"), RawResponse(200), RawResponse(200)])
        uploader.upload(DiscoveryUploadParams(LOG_PATH, "Squid", "proxy-east"))
        self.assertEqual(self.transport.calls[1]["headers"], {})

    def test_delete_after_upload(self) -> None:
        uploader = self._uploader([_upload_url(), RawResponse(201), RawResponse(200)])
        resp = uploader.upload(
            DiscoveryUploadParams(LOG_PATH, "Squid", "proxy-east", delete_after_upload=True)
        )
        self.assertTrue(resp.deleted)
        self.assertFalse(os.path.exists(LOG_PATH))

    def test_delete_failure_is_reported_not_raised(self) -> None:
        uploader = self._uploader([_upload_url(), RawResponse(201), RawResponse(200)])
        with mock.patch(
            "cas_tool.backend.discovery.os.remove", side_effect=PermissionError("read-only")
        ):
            resp = uploader.upload(
                DiscoveryUploadParams(LOG_PATH, "Squid", "proxy-east", delete_after_upload=True)
            )
        self.assertFalse(resp.deleted)
        self.assertIn("read-only", resp.delete_error)
        self.assertEqual(uploader.state, UploadState.DONE)

    def test_unknown_data_source(self) -> None:
        uploader = self._uploader([_upload_url(), RawResponse(201), RawResponse(400)])
        with self.assertRaises(BadRequestError) as ctx:
            uploader.upload(
                DiscoveryUploadParams(LOG_PATH, "Squid", "nope", delete_after_upload=True)
            )
        self.assertIn("data source", str(ctx.exception))
        self.assertEqual(uploader.state, UploadState.UPLOADED)
        self.assertTrue(os.path.exists(LOG_PATH))

    def test_server_error_at_finalize_is_not_a_bad_request(self) -> None:
        uploader = self._uploader([_upload_url(), RawResponse(201), RawResponse(500)])
        with self.assertRaises(UnknownBackendError) as ctx:
            uploader.upload(DiscoveryUploadParams(LOG_PATH, "Squid", "proxy-east"))
        self.assertNotIsInstance(ctx.exception, BadRequestError)
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(uploader.state, UploadState.UPLOADED)
        self.assertEqual(len(self.transport.calls), 3)

    def test_put_failure_stops_before_finalize(self) -> None:
        uploader = self._uploader([_upload_url(), RawResponse(403)])
        with self.assertRaises(ForbiddenError):
            uploader.upload(DiscoveryUploadParams(LOG_PATH, "Squid", "proxy-east"))
        self.assertEqual(len(self.transport.calls), 2)
        self.assertEqual(uploader.state, UploadState.URL_OBTAINED)

    def test_upload_url_response_is_validated(self) -> None:
        uploader = self._uploader([RawResponse(200, json.dumps({"provider": "azure"}))])
        with self.assertRaises(UnknownBackendError):
            uploader.upload(DiscoveryUploadParams(LOG_PATH, "Squid", "proxy-east"))

    def test_validation_before_any_request(self) -> None:
        uploader = self._uploader([])
        with self.assertRaises(ValidationError):
            uploader.upload(DiscoveryUploadParams("/logs/missing.log", "Squid", "proxy-east"))
        with self.assertRaises(ValidationError):
            uploader.upload(DiscoveryUploadParams(LOG_PATH, "NotAFirewall", "proxy-east"))
        with self.assertRaises(ValidationError):
            uploader.upload(DiscoveryUploadParams(LOG_PATH, "Squid", ""))
        self.assertEqual(self.transport.calls, [])

    def test_read_chunks(self) -> None:
        self.assertEqual(
            list(read_chunks(LOG_PATH, chunk_size=8)),
            [b"line one", b"\nline tw", b"o\n"],
        )
