from __future__ import annotations

import unittest
from unittest.mock import Mock, patch

import requests

from substore.services import flow

HEADER = "upload=100;download=200;total=1000;expire=1700000000"


class TestParseFlowHeaders(unittest.TestCase):
    def test_parse_with_expire(self):
        info = flow.parse_flow_headers(HEADER)
        self.assertEqual(
            info.to_payload(),
            {"expires": 1700000000, "total": 1000, "usage": {"upload": 100, "download": 200}},
        )

    def test_parse_without_expire_omits_key(self):
        payload = flow.parse_flow_headers("upload=100;download=200;total=1000").to_payload()
        self.assertNotIn("expires", payload)
        self.assertEqual(payload["total"], 1000)

    def test_parse_tolerates_spacing_and_order(self):
        payload = flow.parse_flow_headers("total=9; download=2; upload=1").to_payload()
        self.assertEqual(payload["usage"], {"upload": 1, "download": 2})

    def test_parse_missing_total_raises(self):
        with self.assertRaises(flow.FlowHeaderError):
            flow.parse_flow_headers("upload=1;download=2")

    def test_parse_rejects_non_string(self):
        with self.assertRaises(flow.FlowHeaderError):
            flow.parse_flow_headers({"upload": 1})


class TestGetFlowHeaders(unittest.TestCase):
    def test_head_response_with_header(self):
        head = Mock(ok=True, headers={flow.FLOW_HEADER: HEADER})
        with (
            patch.object(flow.requests, "head", return_value=head) as head_mock,
            patch.object(flow.requests, "get") as get_mock,
        ):
            value = flow.get_flow_headers("https://example.com/sub", timeout=3, user_agent="ua")
        self.assertEqual(value, HEADER)
        head_mock.assert_called_once_with(
            "https://example.com/sub", headers={"User-Agent": "ua"}, timeout=3, allow_redirects=True
        )
        get_mock.assert_not_called()

    def test_falls_back_to_get(self):
        head = Mock(ok=False, headers={})
        got = Mock(headers={flow.FLOW_HEADER: HEADER})
        with (
            patch.object(flow.requests, "head", return_value=head),
            patch.object(flow.requests, "get", return_value=got),
        ):
            value = flow.get_flow_headers("https://example.com/sub")
        self.assertEqual(value, HEADER)
        got.raise_for_status.assert_called_once()
        got.close.assert_called_once()

    def test_returns_none_when_provider_sends_no_header(self):
        with (
            patch.object(flow.requests, "head", return_value=Mock(ok=True, headers={})),
            patch.object(flow.requests, "get", return_value=Mock(headers={})),
        ):
            self.assertIsNone(flow.get_flow_headers("https://example.com/sub"))

    def test_network_error_propagates(self):
        with (
            patch.object(flow.requests, "head", side_effect=requests.ConnectionError("down")),
            patch.object(flow.requests, "get", side_effect=requests.ConnectionError("down")),
        ):
            with self.assertRaises(requests.RequestException):
                flow.get_flow_headers("https://example.com/sub")

    def test_head_connection_error_falls_back_to_get(self):
        got = Mock(headers={flow.FLOW_HEADER: HEADER})
        with (
            patch.object(flow.requests, "head", side_effect=requests.ConnectionError("reset")),
            patch.object(flow.requests, "get", return_value=got) as get_mock,
        ):
            value = flow.get_flow_headers("https://example.com/sub")
        self.assertEqual(value, HEADER)
        get_mock.assert_called_once()


if __name__ == "__main__":
    unittest.main()
