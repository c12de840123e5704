"""Shared fixtures: scratch directories, sample images and fake remote clients."""

import base64
import inspect
import io
import zipfile
from pathlib import Path

import pytest
from PIL import Image

from shared.errors import RemoteServiceError

FIXED_CLASSIFIER_ID = "Test01_1000695352"


def make_jpeg(color: str = "red") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color).save(buffer, format="JPEG")
    return buffer.getvalue()


def make_data_uri(data: bytes, image_type: str = "jpeg") -> str:
    return f"data:image/{image_type};base64,{base64.b64encode(data).decode()}"


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_jpeg()


@pytest.fixture
def data_uri(jpeg_bytes) -> str:
    return make_data_uri(jpeg_bytes)


@pytest.fixture
def uploads_dir(tmp_path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def static_dir(tmp_path, jpeg_bytes) -> Path:
    path = tmp_path / "public"
    (path / "images").mkdir(parents=True)
    (path / "images" / "cat.jpg").write_bytes(jpeg_bytes)
    (path / "data").mkdir()
    (path / "data" / "datasets.json").write_text('{"datasets": [{"name": "cats"}]}')
    return path


class FakeRecognitionClient:
    """Stands in for VisualRecognitionClient; records what it was sent."""

    def __init__(self, classify_error=None, create_error=None):
        self.classify_error = classify_error
        self.create_error = create_error
        self.classify_calls = []
        self.create_calls = []
        self.deleted = []

    async def classify(self, images_file, classifier_ids, filename="image.jpg"):
        data = images_file.read()
        if inspect.isawaitable(data):
            data = await data
        self.classify_calls.append({
            "path": getattr(images_file, "name", None),
            "data": data,
            "classifier_ids": list(classifier_ids),
            "filename": filename,
        })
        if self.classify_error:
            raise self.classify_error
        return {
            "images": [{
                "image": filename,
                "scores": [
                    {"classifier_id": "Animal", "name": "Animal", "score": 0.91},
                    {"classifier_id": FIXED_CLASSIFIER_ID, "name": "Test01", "score": 0.66},
                    {"classifier_id": "Other_123", "name": "Other", "score": 0.55},
                ]
            }]
        }

    async def create_classifier(self, positive_examples, negative_examples, name):
        call = {"name": name, "paths": [positive_examples.name, negative_examples.name]}
        with zipfile.ZipFile(positive_examples) as zf:
            call["positives"] = zf.namelist()
        with zipfile.ZipFile(negative_examples) as zf:
            call["negatives"] = zf.namelist()
        self.create_calls.append(call)
        if self.create_error:
            raise self.create_error
        return {"classifier_id": f"{name}_42", "name": name, "owner": "demo", "created": "2016-01-01T00:00:00.000Z"}

    async def delete_classifier(self, classifier_id):
        self.deleted.append(classifier_id)


class FakeKeywordsClient:
    """Stands in for AlchemyVisionClient."""

    def __init__(self):
        self.calls = []

    async def get_image_keywords(self, image):
        self.calls.append(image.read())
        return {
            "status": "OK",
            "imageKeywords": [
                {"text": "cat", "score": "0.97"},
                {"text": "NO_TAGS", "score": "0"},
                {"score": "0.4"},
            ]
        }


@pytest.fixture
def recognition_client() -> FakeRecognitionClient:
    return FakeRecognitionClient()


@pytest.fixture
def keywords_client() -> FakeKeywordsClient:
    return FakeKeywordsClient()


@pytest.fixture
def remote_failure() -> RemoteServiceError:
    return RemoteServiceError("Service unavailable", code=503)
