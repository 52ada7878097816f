import io
import itertools
import os
import tempfile

# Settings are read at import time, so point them somewhere harmless first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_ROOT"]  = tempfile.mkdtemp(prefix="member_uploads_")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from PIL import Image, features

from deps import get_admin_token, get_member_class_repo, get_member_repo, get_pipeline
from main import app
from repository import InMemoryMemberClassRepository, InMemoryMemberRepository, seed_member_classes
from utils.pipeline import ImagePipeline
from utils.storage import LocalStorage

TIMESTAMP = 1700000000000
ADMIN     = {"X-Admin-Token": "s3cret"}

needs_avif = pytest.mark.skipif(not features.check("avif"), reason="Pillow built without AVIF")


def make_image(size=(1000, 500), mode="RGB", fmt="PNG", color=(200, 40, 40)) -> bytes:
    if mode == "RGBA":
        color = (*color[:3], 128)
    buf = io.BytesIO()
    Image.new(mode, size, color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads" / "members"


@pytest.fixture
def storage(upload_dir):
    return LocalStorage(upload_dir, "/uploads/members")


@pytest.fixture
def pipeline(storage):
    return ImagePipeline(storage, clock=lambda: TIMESTAMP)


@pytest.fixture
def ticking_pipeline(storage):
    ticks = itertools.count(TIMESTAMP, 1000)
    return ImagePipeline(storage, clock=lambda: next(ticks))


@pytest.fixture
def repo():
    return InMemoryMemberRepository()


@pytest.fixture
def classes():
    classes = InMemoryMemberClassRepository()
    seed_member_classes(classes)
    return classes


@pytest.fixture
def client(repo, classes, ticking_pipeline):
    app.dependency_overrides[get_member_repo]       = lambda: repo
    app.dependency_overrides[get_member_class_repo] = lambda: classes
    app.dependency_overrides[get_pipeline]          = lambda: ticking_pipeline
    app.dependency_overrides[get_admin_token]       = lambda: "s3cret"
    yield TestClient(app)
    app.dependency_overrides.clear()
