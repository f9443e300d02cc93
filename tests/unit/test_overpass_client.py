"""
Unit tests for the Overpass failover client.

Tests cover: instance failover, client-error short-circuit, remark parsing,
timeouts and body error detection.
"""

from unittest.mock import MagicMock

import pytest
import requests

from street_geometry.errors import ClientQueryError, ServiceUnavailableError
from street_geometry.localities import LocalityRegistry
from street_geometry.overpass.client import OverpassClient, is_client_error, parse_remark
from street_geometry.providers import OverpassGeometryProvider

INSTANCES = (
    "https://one.example/api/interpreter",
    "https://two.example/api/interpreter",
    "https://three.example/api/interpreter",
)


def _mock_response(status_code=200, json_data=None, text="", reason=""):
    """Create a mock requests.Response object."""
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status_code
    resp.reason = reason
    resp.text = text
    if json_data is not None:
        resp.json.return_value = json_data
    else:
        resp.json.side_effect = ValueError("No JSON")
    return resp


def _client(*responses):
    session = MagicMock(spec=requests.Session)
    session.post.side_effect = list(responses)
    return OverpassClient(instances=INSTANCES, timeout_s=25, session=session), session


def _called_urls(session):
    return [call.args[0] for call in session.post.call_args_list]


class TestFailover:
    def test_server_errors_fail_over_to_next_instance(self):
        client, session = _client(
            _mock_response(500, reason="Internal Server Error"),
            _mock_response(500, reason="Internal Server Error"),
            _mock_response(200, {"elements": []}),
        )

        assert client.query("[out:json];") == {"elements": []}
        assert _called_urls(session) == list(INSTANCES)

    def test_empty_result_after_failover_is_not_found(self):
        client, session = _client(
            _mock_response(500),
            _mock_response(500),
            _mock_response(200, {"elements": []}),
        )
        provider = OverpassGeometryProvider(client, LocalityRegistry().get("bg.sofia"))

        assert provider.fetch_street_geometry("ул. Оборище") is None
        assert session.post.call_count == 3
        assert _called_urls(session) == list(INSTANCES)

    def test_stops_at_first_valid_response(self):
        client, session = _client(
            _mock_response(200, {"elements": [{"type": "node", "lat": 1, "lon": 2}]}),
        )

        client.query("[out:json];")
        assert session.post.call_count == 1

    def test_timeout_fails_over(self):
        client, session = _client(
            requests.exceptions.Timeout("read timed out"),
            requests.exceptions.ConnectionError("refused"),
            _mock_response(200, {"elements": []}),
        )

        assert client.query("[out:json];") == {"elements": []}
        assert session.post.call_count == 3

    def test_rate_limit_is_server_side(self):
        client, session = _client(
            _mock_response(429, reason="Too Many Requests"),
            _mock_response(200, {"elements": []}),
        )

        assert client.query("[out:json];") == {"elements": []}
        assert session.post.call_count == 2

    def test_all_instances_failing_raises(self):
        client, session = _client(
            _mock_response(502),
            _mock_response(503),
            requests.exceptions.Timeout("read timed out"),
        )

        with pytest.raises(ServiceUnavailableError) as exc_info:
            client.query("[out:json];")

        assert len(exc_info.value.attempts) == 3
        assert "timeout" in str(exc_info.value).lower()

    def test_unavailable_service_propagates_from_provider(self):
        client, _ = _client(_mock_response(500), _mock_response(500), _mock_response(500))
        provider = OverpassGeometryProvider(client, LocalityRegistry().get("bg.sofia"))

        with pytest.raises(ServiceUnavailableError):
            provider.fetch_street_geometry("ул. Оборище")

    def test_request_carries_query_and_timeout(self):
        client, session = _client(_mock_response(200, {"elements": []}))
        client.query("[out:json];out;")

        kwargs = session.post.call_args.kwargs
        assert kwargs["data"] == {"data": "[out:json];out;"}
        assert kwargs["timeout"] == 25


class TestClientErrors:
    def test_syntax_error_short_circuits(self):
        body = "<html><body><p><strong>Error</strong>: line 1: <remark> static error: syntax error </remark></p></body></html>"
        client, session = _client(
            _mock_response(400, text=body, reason="Bad Request"),
            _mock_response(200, {"elements": []}),
        )

        with pytest.raises(ClientQueryError) as exc_info:
            client.query("broken")

        assert session.post.call_count == 1
        assert "syntax" in str(exc_info.value)
        assert exc_info.value.status_code == 400

    def test_plain_4xx_short_circuits(self):
        client, session = _client(_mock_response(403, reason="Forbidden"), _mock_response(200, {"elements": []}))

        with pytest.raises(ClientQueryError):
            client.query("[out:json];")
        assert session.post.call_count == 1

    def test_xml_error_with_http_200(self):
        body = "<?xml version='1.0'?><osm><remark> parse error: unexpected token </remark></osm>"
        client, session = _client(_mock_response(200, text=body), _mock_response(200, {"elements": []}))

        with pytest.raises(ClientQueryError):
            client.query("[out:json];")
        assert session.post.call_count == 1

    def test_non_json_without_remark_fails_over(self):
        client, session = _client(
            _mock_response(200, text="<html>gateway</html>"),
            _mock_response(200, {"elements": []}),
        )

        assert client.query("[out:json];") == {"elements": []}
        assert session.post.call_count == 2

    def test_runtime_error_remark_fails_over(self):
        client, session = _client(
            _mock_response(200, {"elements": [], "remark": "runtime error: Query timed out in \"query\""}),
            _mock_response(200, {"elements": []}),
        )

        assert client.query("[out:json];") == {"elements": []}
        assert session.post.call_count == 2


class TestHelpers:
    def test_parse_remark(self):
        assert parse_remark("<remark>  runtime error: out of memory \n</remark>") == "runtime error: out of memory"
        assert parse_remark("no remark here") is None
        assert parse_remark("") is None

    @pytest.mark.parametrize("message,status,expected", [
        ("static error: syntax error", None, True),
        ("parse error: Key expected", None, True),
        ("Invalid bbox", None, True),
        ("HTTP 400: Bad Request", 400, True),
        ("HTTP 429: Too Many Requests", 429, False),
        ("HTTP 504: Gateway Timeout", 504, False),
        ("Overpass request timeout after 25s", None, False),
    ])
    def test_is_client_error(self, message, status, expected):
        assert is_client_error(message, status) is expected

    def test_requires_instances(self):
        with pytest.raises(ValueError):
            OverpassClient(instances=())
