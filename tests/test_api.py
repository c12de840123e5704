"""End-to-end tests for the HTTP surface."""

import pytest
from fastapi.testclient import TestClient

from config.app_config import AppConfig
from conftest import FIXED_CLASSIFIER_ID, FakeRecognitionClient
from services.webapp.main import create_app


def _config(uploads_dir, static_dir) -> AppConfig:
    return AppConfig(
        uploads_dir=str(uploads_dir),
        static_dir=str(static_dir),
        datasets_path=str(static_dir / "data" / "datasets.json"),
        classifier_ids=[FIXED_CLASSIFIER_ID],
    )


@pytest.fixture
def client(recognition_client, keywords_client, uploads_dir, static_dir):
    app = create_app(_config(uploads_dir, static_dir), recognition_client, keywords_client)
    with TestClient(app) as test_client:
        yield test_client


def test_classify_base64(client, recognition_client, uploads_dir, data_uri):
    resp = client.post("/api/classify", json={"image_data": data_uri})

    assert resp.status_code == 200
    scores = resp.json()["images"][0]["scores"]
    assert scores
    for score in scores:
        assert score["classifier_id"] == score["name"] or score["classifier_id"] == FIXED_CLASSIFIER_ID
    assert list(uploads_dir.iterdir()) == []


def test_classify_malformed_url(client, recognition_client):
    resp = client.post("/api/classify", json={"url": "not a url"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Malformed URL", "code": 400}
    assert recognition_client.classify_calls == []


def test_classify_empty_body(client):
    resp = client.post("/api/classify", content=b"", headers={"Content-Type": "application/json"})

    assert resp.status_code == 400
    assert resp.json()["error"] == "Malformed URL"


def test_classify_multipart_upload_wins(client, recognition_client, uploads_dir, jpeg_bytes):
    resp = client.post(
        "/api/classify",
        files={"images_file": ("snap.jpg", jpeg_bytes, "image/jpeg")},
        data={"url": "images/cat.jpg"},
    )

    assert resp.status_code == 200
    call = recognition_client.classify_calls[0]
    assert call["data"] == jpeg_bytes
    assert call["filename"].endswith(".jpg")
    assert list(uploads_dir.iterdir()) == []


def test_classify_urlencoded_local_image(client, recognition_client, jpeg_bytes):
    resp = client.post("/api/classify", data={"url": "images/cat.jpg"})

    assert resp.status_code == 200
    assert recognition_client.classify_calls[0]["data"] == jpeg_bytes


def test_classify_remote_error(recognition_client, keywords_client, uploads_dir, static_dir, data_uri,
                               remote_failure):
    failing = FakeRecognitionClient(classify_error=remote_failure)
    app = create_app(_config(uploads_dir, static_dir), failing, keywords_client)

    with TestClient(app) as test_client:
        resp = test_client.post("/api/classify", json={"image_data": data_uri})

    assert resp.status_code == 503
    assert resp.json() == {"error": "Service unavailable", "code": 503}
    assert list(uploads_dir.iterdir()) == []


def test_create_classifier(client, recognition_client, uploads_dir, data_uri):
    body = {"positives": [data_uri] * 10, "negatives": ["images/cat.jpg"] * 10, "name": "cats"}

    resp = client.post("/api/classifiers", json=body)

    assert resp.status_code == 200
    assert resp.json()["classifier_id"] == "cats_42"
    assert recognition_client.create_calls[0]["name"] == "cats"
    assert list(uploads_dir.iterdir()) == []


def test_create_classifier_insufficient_positives(client, recognition_client, mocker, data_uri):
    zip_mock = mocker.patch("services.webapp.core.trainer.zip_images")
    body = {"positives": [data_uri] * 9, "negatives": [data_uri] * 12, "name": "cats"}

    resp = client.post("/api/classifiers", json=body)

    assert resp.status_code == 400
    assert resp.json() == {"error": "Minimum positives images (10) sent:9", "code": 400}
    zip_mock.assert_not_called()
    assert recognition_client.create_calls == []


def test_create_classifier_missing_name(client):
    resp = client.post("/api/classifiers", json={"positives": [], "negatives": []})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing classifier name", "code": 400}


def test_create_classifier_remote_failure(recognition_client, keywords_client, uploads_dir, static_dir, data_uri,
                                          remote_failure):
    recognition_client.create_error = remote_failure
    app = create_app(_config(uploads_dir, static_dir), recognition_client, keywords_client)
    body = {"positives": [data_uri] * 10, "negatives": [data_uri] * 10, "name": "cats"}

    with TestClient(app) as test_client:
        resp = test_client.post("/api/classifiers", json=body)

    assert resp.status_code == 503
    assert resp.json()["error"] == "Service unavailable"
    assert list(uploads_dir.iterdir()) == []


@pytest.mark.parametrize("path, view", [("/", "use"), ("/use", "use"), ("/train", "train"), ("/test", "test")])
def test_views(client, path, view):
    resp = client.get(path)

    assert resp.status_code == 200
    assert resp.json() == {"view": view, "datasets": [{"name": "cats"}]}


def test_static_and_health(client, jpeg_bytes):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/static/images/cat.jpg").content == jpeg_bytes


def test_startup_sweeps_stale_artifacts(recognition_client, keywords_client, uploads_dir, static_dir):
    (uploads_dir / "leftover.zip").write_bytes(b"stale")
    app = create_app(_config(uploads_dir, static_dir), recognition_client, keywords_client)

    with TestClient(app):
        assert list(uploads_dir.iterdir()) == []


def test_blank_file_input_falls_through_to_url(client, recognition_client, jpeg_bytes):
    # what a browser sends for a form whose file input was left empty
    boundary = "----formboundary7MA4YWxk"
    body = (
        f"--{boundary}\r\n"
        'Content-Disposition: form-data; name="images_file"; filename=""\r\n'
        "Content-Type: application/octet-stream\r\n\r\n"
        "\r\n"
        f"--{boundary}\r\n"
        'Content-Disposition: form-data; name="url"\r\n\r\n'
        "images/cat.jpg\r\n"
        f"--{boundary}--\r\n"
    ).encode()

    resp = client.post(
        "/api/classify",
        content=body,
        headers={"Content-Type": f"multipart/form-data; boundary={boundary}"},
    )

    assert resp.status_code == 200
    assert recognition_client.classify_calls[0]["data"] == jpeg_bytes
    assert recognition_client.classify_calls[0]["filename"] == "cat.jpg"
