"""Tests del cliente de consultas a Prometheus."""

from unittest.mock import MagicMock

import pytest
import requests

from statuspage_pusher.common.errors import ConfigError, QueryError
from statuspage_pusher.queries import PrometheusQueryClient


def _json_response(payload, status_code=200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    return resp


@pytest.fixture
def session() -> MagicMock:
    session = MagicMock()
    session.get.return_value = _json_response(
        {
            "status": "success",
            "data": {
                "resultType": "vector",
                "result": [{"metric": {"job": "api"}, "value": [1700000000.0, "1"]}],
            },
        }
    )
    return session


@pytest.fixture
def client(session) -> PrometheusQueryClient:
    return PrometheusQueryClient("http://prometheus:9090/", session=session, timeout=3.0)


class TestQuery:

    def test_calls_instant_query_endpoint(self, client, session):
        client.query("up", 1700000000.25)

        args, kwargs = session.get.call_args
        assert args[0] == "http://prometheus:9090/api/v1/query"
        assert kwargs["params"] == {"query": "up", "time": "1700000000.250"}
        assert kwargs["timeout"] == 3.0

    def test_returns_raw_data(self, client):
        response = client.query("up", 0)

        assert response.result_type == "vector"
        assert response.result[0]["metric"] == {"job": "api"}
        assert response.warnings == []

    def test_keeps_warnings(self, client, session):
        session.get.return_value = _json_response(
            {
                "status": "success",
                "warnings": ["partial response"],
                "data": {"resultType": "vector", "result": []},
            }
        )

        assert client.query("up", 0).warnings == ["partial response"]

    def test_transport_error_raises_query_error(self, client, session):
        session.get.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(QueryError) as exc_info:
            client.query("up", 0)

        assert exc_info.value.query == "up"

    def test_backend_error_raises_query_error(self, client, session):
        session.get.return_value = _json_response(
            {"status": "error", "errorType": "bad_data", "error": "parse error at char 3"},
            status_code=400,
        )

        with pytest.raises(QueryError) as exc_info:
            client.query("up{", 0)

        assert "bad_data" in str(exc_info.value)
        assert "parse error" in str(exc_info.value)

    def test_non_json_body_raises_query_error(self, client, session):
        resp = MagicMock()
        resp.status_code = 502
        resp.json.side_effect = ValueError("no json")
        session.get.return_value = resp

        with pytest.raises(QueryError) as exc_info:
            client.query("up", 0)

        assert "502" in str(exc_info.value)


class TestConstruction:

    @pytest.mark.parametrize("url", ["", "prometheus:9090", "ftp://prometheus", "http://"])
    def test_invalid_address_is_config_error(self, url):
        with pytest.raises(ConfigError):
            PrometheusQueryClient(url)

    def test_strips_trailing_slash(self):
        assert PrometheusQueryClient("https://prom.example.com/").base_url == "https://prom.example.com"
