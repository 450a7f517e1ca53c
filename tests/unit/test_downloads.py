import pytest
from fastapi import FastAPI
from fastapi import HTTPException
from fastapi.testclient import TestClient

from toolkit.services.downloads import download_file


def test_download_sets_attachment_header(tmp_path):
    (tmp_path / "report-123.pdf").write_bytes(b"%PDF-1.4\n...")

    response = download_file(tmp_path, "report-123.pdf", "Quarterly report.pdf")

    assert response.headers["content-disposition"] == 'attachment; filename="Quarterly report.pdf"'
    assert response.media_type == "application/pdf"


def test_download_missing_file(tmp_path):
    with pytest.raises(HTTPException) as exc:
        download_file(tmp_path, "nope.txt", "nope.txt")
    assert exc.value.status_code == 404


def test_download_directory_is_not_served(tmp_path):
    (tmp_path / "sub").mkdir()
    with pytest.raises(HTTPException):
        download_file(tmp_path, "sub", "sub")


def test_download_served_over_http_with_ranges(tmp_path):
    (tmp_path / "data.txt").write_bytes(b"0123456789")
    app = FastAPI()

    @app.get("/file")
    def _serve():
        return download_file(tmp_path, "data.txt", "data.txt")

    client = TestClient(app)

    full = client.get("/file")
    assert full.status_code == 200
    assert full.content == b"0123456789"
    assert full.headers["content-disposition"] == 'attachment; filename="data.txt"'

    partial = client.get("/file", headers={"Range": "bytes=2-4"})
    assert partial.status_code == 206
    assert partial.content == b"234"


def test_download_non_ascii_display_name(tmp_path):
    (tmp_path / "a.txt").write_bytes(b"hello")

    response = download_file(tmp_path, "a.txt", "报告.txt")

    assert response.headers["content-disposition"] == "attachment; filename*=utf-8''%E6%8A%A5%E5%91%8A.txt"
    assert response.media_type.startswith("text/plain")


def test_download_non_ascii_display_name_over_http(tmp_path):
    (tmp_path / "a.txt").write_bytes(b"hello")
    app = FastAPI()

    @app.get("/file")
    def _serve():
        return download_file(tmp_path, "a.txt", "Résumé.txt")

    resp = TestClient(app).get("/file")

    assert resp.status_code == 200
    assert resp.content == b"hello"
    assert resp.headers["content-disposition"] == "attachment; filename*=utf-8''R%C3%A9sum%C3%A9.txt"
