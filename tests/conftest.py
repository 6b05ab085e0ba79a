"""Shared fixtures: in-memory S3, stubbed upstream HTTP, initialized container."""

import hashlib
import io
import json

import httpx
import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient

from app.container import container as app_container
from app.repositories.storage import ObjectStore
from settings import ADMIN_PASSWORD


def _client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class FakeS3Client:
    """Enough of the boto3 S3 client for ObjectStore, including conditional puts."""

    def __init__(self):
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.metadata: dict[str, dict] = {}
        self.fail_on: set[str] = set()
        self.puts = 0

    def _check(self, operation: str):
        if operation in self.fail_on:
            raise _client_error("InternalError", operation)

    def put_object(self, Bucket, Key, Body, ContentType=None, Metadata=None, IfMatch=None, IfNoneMatch=None):
        self._check("PutObject")
        current = self.objects.get(Key)
        if IfNoneMatch == "*" and current is not None:
            raise _client_error("PreconditionFailed", "PutObject")
        if IfMatch is not None and (current is None or current[1] != IfMatch):
            raise _client_error("PreconditionFailed", "PutObject")

        etag = f'"{hashlib.md5(Body).hexdigest()}-{self.puts}"'
        self.puts += 1
        self.objects[Key] = (Body, etag)
        if Metadata:
            self.metadata[Key] = Metadata
        return {"ETag": etag}

    def get_object(self, Bucket, Key):
        self._check("GetObject")
        if Key not in self.objects:
            raise _client_error("NoSuchKey", "GetObject")
        body, etag = self.objects[Key]
        return {"Body": io.BytesIO(body), "ETag": etag}

    def delete_object(self, Bucket, Key):
        self._check("DeleteObject")
        self.objects.pop(Key, None)
        return {}

    def list_objects_v2(self, Bucket, Prefix="", ContinuationToken=None):
        self._check("ListObjectsV2")
        keys = sorted(k for k in self.objects if k.startswith(Prefix))
        return {"Contents": [{"Key": k} for k in keys], "IsTruncated": False}

    # helpers for assertions
    def json(self, key: str):
        return json.loads(self.objects[key][0])

    def put_json(self, key: str, data) -> None:
        self.put_object(Bucket="test", Key=key, Body=json.dumps(data).encode())


def topledger_response(rows: list[dict]) -> dict:
    return {"query_result": {"data": {"rows": rows}}}


class UpstreamStub:
    """httpx.MockTransport handler with per-test responses and a call log."""

    def __init__(self):
        self.calls: list[httpx.Request] = []
        self.rows: list[dict] = []
        self.status = 200
        self.routes: dict[str, object] = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        for fragment, result in self.routes.items():
            if fragment in str(request.url):
                if isinstance(result, httpx.Response):
                    return result
                return httpx.Response(200, json=result)
        if self.status != 200:
            return httpx.Response(self.status, json={"error": "boom"})
        return httpx.Response(200, json=topledger_response(self.rows))


@pytest.fixture
def s3():
    return FakeS3Client()


@pytest.fixture
def upstream():
    return UpstreamStub()


@pytest.fixture
def clock():
    class Clock:
        now = 1_700_000_000.0

        def __call__(self):
            return self.now

        def advance(self, seconds: float):
            self.now += seconds

    return Clock()


@pytest.fixture
def runner():
    class Runner:
        def __init__(self):
            self.result = (0, "ok", "")
            self.calls = []

        async def __call__(self, command):
            self.calls.append(command)
            if isinstance(self.result, Exception):
                raise self.result
            return self.result

    return Runner()


@pytest.fixture
def init_kwargs(tmp_path, s3, upstream, runner, clock):
    return {
        "object_store": ObjectStore(bucket="test", client=s3),
        "db_path": str(tmp_path / "charts.duckdb"),
        "temp_dir": tmp_path / "temp",
        "transport": httpx.MockTransport(upstream),
        "updater_runner": runner,
        "clock": clock,
    }


@pytest.fixture
def container(init_kwargs):
    app_container.init(**init_kwargs)
    yield app_container
    app_container.shutdown()


@pytest.fixture
def api(init_kwargs):
    from web.api.app import create_app

    app = create_app(auto_update=False, **init_kwargs)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def admin_headers():
    return {"X-Admin-Auth": ADMIN_PASSWORD}
