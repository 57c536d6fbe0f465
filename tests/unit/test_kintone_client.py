"""Unit tests for KintoneClient against a mocked transport."""

import base64
import json

import httpx
import pytest

from kintone_export.core.config import Settings
from kintone_export.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    KintoneAPIError,
    TransportError,
)
from kintone_export.services.kintone_client import KintoneClient


class Recorder:
    """Transport handler answering from a route table and keeping requests."""

    def __init__(self, routes):
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.routes[request.url.path](request)


def make_client(routes, **kwargs):
    recorder = Recorder(routes)
    kwargs.setdefault("api_token", "token-1")
    client = KintoneClient(
        domain="example.cybozu.com",
        app_id=12,
        transport=httpx.MockTransport(recorder),
        **kwargs,
    )
    return client, recorder


class TestConstruction:
    """Tests for client setup."""

    def test_requires_credentials(self):
        """Test a token or login is required."""
        with pytest.raises(ConfigurationError):
            KintoneClient(domain="example.cybozu.com", app_id=1)

    def test_requires_domain(self):
        """Test a domain is required."""
        with pytest.raises(ConfigurationError):
            KintoneClient(domain="", app_id=1, api_token="t")

    def test_base_url(self):
        """Test the REST root with and without guest space."""
        assert KintoneClient("example.cybozu.com", 1, api_token="t").base_url == (
            "https://example.cybozu.com/k/v1/"
        )
        assert KintoneClient("example.cybozu.com", 1, api_token="t", guest_space_id=5).base_url == (
            "https://example.cybozu.com/k/guest/5/v1/"
        )

    def test_from_settings(self):
        """Test building from settings."""
        settings = Settings(_env_file=None, domain="example", app_id=3, api_token="t", guest_space_id=9)
        with KintoneClient.from_settings(settings) as client:
            assert client.app_id == 3
            assert client.base_url == "https://example.cybozu.com/k/guest/9/v1/"


class TestAuthentication:
    """Tests for authentication headers."""

    def test_api_token(self):
        """Test the API token header."""
        client, recorder = make_client(
            {"/k/v1/records.json": lambda r: httpx.Response(200, json={"records": []})}
        )
        client.get_records(None, "")
        headers = recorder.requests[0].headers
        assert headers["X-Cybozu-API-Token"] == "token-1"
        assert "X-Cybozu-Authorization" not in headers

    def test_password(self):
        """Test password authentication header."""
        client, recorder = make_client(
            {"/k/v1/records.json": lambda r: httpx.Response(200, json={"records": []})},
            api_token=None,
            login="admin",
            password="secret",
        )
        client.get_records(None, "")
        expected = base64.b64encode(b"admin:secret").decode("ascii")
        assert recorder.requests[0].headers["X-Cybozu-Authorization"] == expected

    def test_basic_auth(self):
        """Test basic authentication is added on top."""
        client, recorder = make_client(
            {"/k/v1/records.json": lambda r: httpx.Response(200, json={"records": []})},
            basic_auth_user="proxy",
            basic_auth_password="pw",
        )
        client.get_records(None, "")
        expected = "Basic " + base64.b64encode(b"proxy:pw").decode("ascii")
        assert recorder.requests[0].headers["Authorization"] == expected


class TestEndpoints:
    """Tests for the API calls."""

    def test_fields(self):
        """Test field metadata keeps form order."""
        properties = {
            "Name": {"type": "SINGLE_LINE_TEXT", "code": "Name", "label": "Name"},
            "Items": {
                "type": "SUBTABLE",
                "code": "Items",
                "fields": {"a": {"type": "NUMBER", "code": "a", "label": "A"}},
            },
        }
        client, recorder = make_client(
            {"/k/v1/app/form/fields.json": lambda r: httpx.Response(200, json={"properties": properties})}
        )

        fields = client.fields()

        assert list(fields) == ["Name", "Items"]
        assert fields["Items"].fields["a"].type == "NUMBER"
        assert recorder.requests[0].url.params["app"] == "12"

    def test_get_records(self):
        """Test query and field params are sent and records parsed."""
        body = {
            "records": [
                {
                    "$id": {"type": "__ID__", "value": "5"},
                    "$revision": {"type": "__REVISION__", "value": "2"},
                    "Name": {"type": "SINGLE_LINE_TEXT", "value": "Bob"},
                }
            ]
        }
        client, recorder = make_client({"/k/v1/records.json": lambda r: httpx.Response(200, json=body)})

        records = client.get_records(["$id", "Name"], "limit 500 offset 0")

        params = recorder.requests[0].url.params
        assert params["query"] == "limit 500 offset 0"
        assert params["fields[0]"] == "$id"
        assert params["fields[1]"] == "Name"
        assert records[0].id == 5
        assert records[0].revision == 2
        assert records[0].fields["Name"].value == "Bob"
        assert records[0].raw == body["records"][0]

    def test_guest_space_path(self):
        """Test requests go to the guest space path."""
        client, recorder = make_client(
            {"/k/guest/4/v1/records.json": lambda r: httpx.Response(200, json={"records": []})},
            guest_space_id=4,
        )
        assert client.get_records(None, "") == []

    def test_download(self):
        """Test file bytes are streamed in chunks."""
        payload = b"x" * 10
        client, recorder = make_client(
            {"/k/v1/file.json": lambda r: httpx.Response(200, content=payload)}
        )

        with client.download("fk-1", chunk_size=4) as chunks:
            data = list(chunks)

        assert b"".join(data) == payload
        assert all(len(chunk) <= 4 for chunk in data)
        assert recorder.requests[0].url.params["fileKey"] == "fk-1"


class TestErrors:
    """Tests for error mapping."""

    def test_api_error(self):
        """Test kintone error bodies are carried on KintoneAPIError."""
        body = {"code": "GAIA_IQ11", "id": "abc", "message": "Invalid query"}
        client, _ = make_client({"/k/v1/records.json": lambda r: httpx.Response(400, json=body)})

        with pytest.raises(KintoneAPIError) as exc_info:
            client.get_records(None, "bad query")

        error = exc_info.value
        assert error.status_code == 400
        assert error.code == "GAIA_IQ11"
        assert error.message == "Invalid query"
        assert error.details["id"] == "abc"

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_error(self, status):
        """Test 401 and 403 raise AuthenticationError."""
        client, _ = make_client(
            {"/k/v1/app/form/fields.json": lambda r: httpx.Response(status, content=b"denied")}
        )
        with pytest.raises(AuthenticationError):
            client.fields()

    def test_download_error(self):
        """Test failed downloads raise before any bytes are returned."""
        client, _ = make_client(
            {"/k/v1/file.json": lambda r: httpx.Response(404, content=json.dumps({"message": "gone"}))}
        )
        with pytest.raises(KintoneAPIError):
            with client.download("missing"):
                pass

    def test_transport_error(self):
        """Test network failures raise TransportError."""

        def refuse(request):
            raise httpx.ConnectError("refused", request=request)

        client, _ = make_client({"/k/v1/records.json": refuse})
        with pytest.raises(TransportError):
            client.get_records(None, "")

    def test_redirect_is_error(self):
        """Test a redirect to a login page raises instead of being parsed."""
        client, _ = make_client(
            {
                "/k/v1/app/form/fields.json": lambda r: httpx.Response(
                    302, headers={"Location": "https://login.example.com/"}, content=b"<html>login</html>"
                )
            }
        )
        with pytest.raises(KintoneAPIError) as exc_info:
            client.fields()

        assert exc_info.value.status_code == 302

    def test_non_json_body(self):
        """Test an HTML page with a 200 status raises KintoneAPIError."""
        client, _ = make_client(
            {"/k/v1/records.json": lambda r: httpx.Response(200, content=b"<html>maintenance</html>")}
        )
        with pytest.raises(KintoneAPIError) as exc_info:
            client.get_records(None, "")

        assert exc_info.value.status_code == 200
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_non_object_body(self):
        """Test a JSON body that is not an object raises KintoneAPIError."""
        client, _ = make_client({"/k/v1/records.json": lambda r: httpx.Response(200, json=[1, 2])})
        with pytest.raises(KintoneAPIError):
            client.get_records(None, "")

    def test_download_redirect(self):
        """Test a redirected download raises before any bytes are returned."""
        client, _ = make_client(
            {"/k/v1/file.json": lambda r: httpx.Response(302, content=b"<html>login</html>")}
        )
        with pytest.raises(KintoneAPIError):
            with client.download("fk-1"):
                pass
