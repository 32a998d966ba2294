import asyncio
import json

import httpx
import pytest

from graphlayout.contracts.base import NodeKind
from graphlayout.ingestion import (
    FetchError, FetchStatus, GraphDocumentLoader, LoadCancelled, LoadResult, ParseError,
    parse_document,
)

DOCUMENT = {
    "nodes": [
        {"id": "p1", "label": "Jane Doe", "type": "person"},
        {"id": "e1", "label": "jane@example.com", "type": "email", "extra": True},
        {"id": "d1"},
    ],
    "edges": [
        {"id": "r1", "source": "p1", "target": "e1", "label": "owns"},
        {"id": "r2", "source": "e1", "target": "d1"},
    ],
}

URL = "https://graphs.example.test/data/graphdata.json"


def mock_loader(handler) -> GraphDocumentLoader:
    transport = httpx.MockTransport(handler)
    return GraphDocumentLoader(transport=transport, async_transport=transport)


class TestParseDocument:

    def test_valid_document(self):
        document = parse_document(json.dumps(DOCUMENT).encode())

        assert [n.id for n in document.nodes] == ["p1", "e1", "d1"]
        assert document.nodes[1].kind == NodeKind.EMAIL
        assert [e.label for e in document.edges] == ["owns", ""]

    def test_missing_fields_get_defaults(self):
        """Unlabelled nodes show their id; untyped nodes are UNKNOWN."""
        document = parse_document(json.dumps(DOCUMENT).encode())
        assert document.nodes[2].label == "d1"
        assert document.nodes[2].kind == NodeKind.UNKNOWN

    def test_empty_object_is_empty_document(self):
        assert parse_document(b"{}").is_empty

    @pytest.mark.parametrize("body", [
        b"{not json",
        b"[]",
        b'{"nodes": "p1"}',
        b'{"nodes": [{"label": "no id"}]}',
        b'{"edges": [{"id": "r1", "source": "a"}]}',
        b'{"nodes": [{"id": ""}]}',
    ])
    def test_malformed_documents(self, body):
        with pytest.raises(ParseError) as exc_info:
            parse_document(body, "inline")
        assert exc_info.value.body == body
        assert exc_info.value.location == "inline"


class TestRemoteLoad:

    def test_success(self):
        loader = mock_loader(lambda request: httpx.Response(200, json=DOCUMENT))
        result = loader.load_sync(URL)

        assert result.status == FetchStatus.SUCCESS
        assert result.http_status == 200
        assert len(result.unwrap().edges) == 2

    def test_user_agent_sent(self):
        seen = {}

        def handler(request):
            seen["ua"] = request.headers["User-Agent"]
            return httpx.Response(200, json=DOCUMENT)

        mock_loader(handler).load_sync(URL)
        assert seen["ua"] == "GraphLayout/1.0"

    def test_http_error_is_fetch_failure(self):
        loader = mock_loader(lambda request: httpx.Response(503, text="down"))
        result = loader.load_sync(URL)

        assert result.status == FetchStatus.HTTP_ERROR
        assert result.body == b"down"
        with pytest.raises(FetchError) as exc_info:
            result.unwrap()
        assert exc_info.value.http_status == 503

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result = mock_loader(handler).load_sync(URL)
        assert result.status == FetchStatus.NETWORK_ERROR
        assert result.status.is_fetch_failure

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        result = mock_loader(handler).load_sync(URL)
        assert result.status == FetchStatus.TIMEOUT
        with pytest.raises(FetchError):
            result.unwrap()

    def test_corrupt_body_is_parse_failure(self):
        """Corrupt data is reported apart from network issues, body kept."""
        loader = mock_loader(lambda request: httpx.Response(200, content=b"<html>oops</html>"))
        result = loader.load_sync(URL)

        assert result.status == FetchStatus.PARSE_ERROR
        assert not result.status.is_fetch_failure
        with pytest.raises(ParseError) as exc_info:
            result.unwrap()
        assert exc_info.value.body == b"<html>oops</html>"

    def test_async_load(self):
        loader = mock_loader(lambda request: httpx.Response(200, json=DOCUMENT))
        result = asyncio.run(loader.load(URL))

        assert result.is_success
        assert [n.id for n in result.document.nodes] == ["p1", "e1", "d1"]

    def test_async_http_error(self):
        loader = mock_loader(lambda request: httpx.Response(404))
        result = asyncio.run(loader.load(URL))
        assert result.status == FetchStatus.HTTP_ERROR
        assert result.http_status == 404


class TestFileLoad:

    def test_local_file(self, tmp_path):
        path = tmp_path / "graphdata.json"
        path.write_text(json.dumps(DOCUMENT))

        result = GraphDocumentLoader().load_sync(str(path))
        assert result.is_success
        assert result.http_status is None

    def test_missing_file(self, tmp_path):
        result = GraphDocumentLoader().load_sync(str(tmp_path / "absent.json"))
        assert result.status == FetchStatus.NOT_FOUND
        with pytest.raises(FetchError):
            result.unwrap()

    def test_async_local_file(self, tmp_path):
        path = tmp_path / "graphdata.json"
        path.write_text("{}")

        result = asyncio.run(GraphDocumentLoader().load(str(path)))
        assert result.is_success
        assert result.document.is_empty


def test_cancelled_result_unwrap():
    result = LoadResult(
        location=URL,
        status=FetchStatus.CANCELLED,
        attempted_at=None,
        completed_at=None,
    )
    with pytest.raises(LoadCancelled):
        result.unwrap()
