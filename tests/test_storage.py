import logging

import pytest

from conftest import TIMESTAMP
from errors import StorageError
from utils.variant_plan import plan

PREFIX = "/uploads/members"


def _populate(storage, owner_id="abc", timestamp=TIMESTAMP):
    storage.ensure_directory()
    p = plan(owner_id, timestamp, upload_dir=storage.upload_dir, url_prefix=PREFIX)
    for path in p.disk_paths.values():
        storage.write(path, b"x")
    return p


def test_ensure_directory_is_idempotent(storage, upload_dir):
    storage.ensure_directory()
    storage.ensure_directory()
    assert upload_dir.is_dir()


def test_ensure_directory_failure_is_storage_error(tmp_path):
    from utils.storage import LocalStorage

    blocker = tmp_path / "file"
    blocker.write_bytes(b"")
    with pytest.raises(StorageError):
        LocalStorage(blocker / "members", PREFIX).ensure_directory()


def test_write_overwrites(storage):
    storage.ensure_directory()
    target = storage.upload_dir / "a.jpg"
    storage.write(target, b"one")
    storage.write(target, b"two")
    assert target.read_bytes() == b"two"


def test_write_into_missing_directory_fails(storage):
    with pytest.raises(StorageError):
        storage.write(storage.upload_dir / "a.jpg", b"x")


def test_atomic_write_is_invisible_until_published(storage):
    storage.ensure_directory()
    target = storage.upload_dir / "a.jpg"
    tmp = storage.write_atomic(target, b"data")
    assert tmp.exists() and not target.exists()
    assert tmp.name.startswith(".a.jpg.")

    storage.publish(tmp, target)
    assert target.read_bytes() == b"data"
    assert not tmp.exists()


def test_discard_tolerates_missing(storage):
    storage.ensure_directory()
    storage.discard(storage.upload_dir / "never-written")


def test_path_for_url(storage):
    assert storage.path_for_url("/uploads/members/x.jpg") == storage.upload_dir / "x.jpg"
    assert storage.path_for_url("https://external-host/pic.jpg") is None
    assert storage.path_for_url("/uploads/members/../secret") is None
    assert storage.path_for_url("/uploads/members/.hidden") is None


def test_remove_variant_set_deletes_all_six(storage):
    p = _populate(storage)
    neighbour = _populate(storage, timestamp=TIMESTAMP + 1)

    assert storage.remove_variant_set("/uploads/members/abc_1700000000000_original.jpg") == 6
    assert not any(path.exists() for path in p.disk_paths.values())
    assert all(path.exists() for path in neighbour.disk_paths.values())


def test_remove_variant_set_from_thumbnail_anchor(storage):
    p = _populate(storage)
    assert storage.remove_variant_set("/uploads/members/abc_1700000000000_thumb.webp") == 6
    assert not any(path.exists() for path in p.disk_paths.values())


def test_remove_variant_set_twice_is_harmless(storage, caplog):
    _populate(storage)
    url = "/uploads/members/abc_1700000000000_original.jpg"
    storage.remove_variant_set(url)

    with caplog.at_level(logging.WARNING, logger="member_service"):
        assert storage.remove_variant_set(url) == 0
    assert "StaleReferenceWarning" in caplog.text


def test_partial_set_is_cleaned_up(storage):
    p = _populate(storage)
    next(iter(p.disk_paths.values())).unlink()
    assert storage.remove_variant_set(p.variant_set().original_jpg) == 5


def test_external_url_is_left_alone(storage):
    p = _populate(storage)
    assert storage.remove_variant_set("https://external-host/pic.jpg") == 0
    assert all(path.exists() for path in p.disk_paths.values())


def test_remove_variants_uses_recorded_urls(storage):
    p = _populate(storage)
    assert storage.remove_variants(p.variant_set()) == 6
    assert not any(path.exists() for path in p.disk_paths.values())
    assert storage.remove_variants(p.variant_set()) == 0
