import os

import httpx

from utils.media import MediaUploader


def _uploader(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return MediaUploader("https://media.test/upload", upload_preset="unsigned", client=client)


def test_upload_returns_url_and_removes_local_file(make_file):
    seen = {}

    def handler(request):
        seen["body"] = request.read()
        return httpx.Response(200, json={"secure_url": "https://cdn.test/a.png"})

    path = make_file("a.png")
    assert _uploader(handler).upload(path) == {"url": "https://cdn.test/a.png"}
    assert b"unsigned" in seen["body"]
    assert not os.path.exists(path)


def test_upload_failure_returns_none_and_removes_local_file(make_file):
    path = make_file("a.png")
    result = _uploader(lambda request: httpx.Response(500, json={"error": "boom"})).upload(path)
    assert result is None
    assert not os.path.exists(path)


def test_upload_without_url_in_response(make_file):
    path = make_file("a.png")
    assert _uploader(lambda request: httpx.Response(200, json={})).upload(path) is None


def test_upload_of_missing_file(tmp_path):
    uploader = _uploader(lambda request: httpx.Response(200, json={"url": "x"}))
    assert uploader.upload(None) is None
    assert uploader.upload(str(tmp_path / "nope.png")) is None
