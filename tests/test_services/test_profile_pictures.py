# tests/test_services/test_profile_pictures.py
import pytest
from io import BytesIO
from PIL import Image
from unittest.mock import patch
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import BadRequestError, NotFoundError
from core.services.profile_pictures import ProfilePictureStore


def _image_bytes(fmt="PNG", size=(8, 8)):
    buffer = BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def store(db_session, tmp_path):
    return ProfilePictureStore(db_session, str(tmp_path / "pictures"), max_bytes=64 * 1024)


def test_save_png(store, sample_user):
    user = store.save(sample_user, _image_bytes("PNG"), "image/png")

    assert user.profile_picture == f"{sample_user.id}.png"
    path = store.path_for(user)
    assert path is not None
    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
    assert store.media_type_for(path) == "image/png"


def test_save_replaces_previous_file(store, sample_user):
    store.save(sample_user, _image_bytes("PNG"), "image/png")
    user = store.save(sample_user, _image_bytes("JPEG"), "image/jpeg")

    assert user.profile_picture == f"{sample_user.id}.jpg"
    assert not (store.directory / f"{sample_user.id}.png").exists()
    assert (store.directory / f"{sample_user.id}.jpg").exists()


def test_save_rejects_unsupported_type(store, sample_user):
    with pytest.raises(BadRequestError):
        store.save(sample_user, b"%PDF-1.4", "application/pdf")


def test_save_rejects_empty_file(store, sample_user):
    with pytest.raises(BadRequestError):
        store.save(sample_user, b"", "image/png")


def test_save_rejects_oversized_file(db_session, tmp_path, sample_user):
    small_store = ProfilePictureStore(db_session, str(tmp_path / "pictures"), max_bytes=16)
    with pytest.raises(BadRequestError):
        small_store.save(sample_user, _image_bytes("PNG"), "image/png")


def test_save_rejects_non_image(store, sample_user):
    with pytest.raises(BadRequestError):
        store.save(sample_user, b"definitely not a png", "image/png")
    assert sample_user.profile_picture is None


def test_save_rejects_mismatched_content_type(store, sample_user):
    with pytest.raises(BadRequestError):
        store.save(sample_user, _image_bytes("PNG"), "image/jpeg")


def test_path_for_without_picture(store, sample_user):
    assert store.path_for(sample_user) is None


def test_delete(store, sample_user):
    user = store.save(sample_user, _image_bytes("PNG"), "image/png")
    path = store.path_for(user)

    user = store.delete(user)

    assert user.profile_picture is None
    assert not path.exists()


def test_delete_without_picture(store, sample_user):
    with pytest.raises(NotFoundError):
        store.delete(sample_user)


def test_save_leaves_only_the_final_file(store, sample_user):
    store.save(sample_user, _image_bytes("PNG"), "image/png")
    store.save(sample_user, _image_bytes("PNG", size=(16, 16)), "image/png")

    assert sorted(path.name for path in store.directory.iterdir()) == [f"{sample_user.id}.png"]


def test_failed_update_keeps_previous_picture(store, sample_user, db_session):
    original = _image_bytes("PNG")
    store.save(sample_user, original, "image/png")

    with patch.object(store.users, 'set_profile_picture', side_effect=SQLAlchemyError("db down")):
        with pytest.raises(SQLAlchemyError):
            store.save(sample_user, _image_bytes("PNG", size=(16, 16)), "image/png")

    assert sorted(path.name for path in store.directory.iterdir()) == [f"{sample_user.id}.png"]
    assert (store.directory / f"{sample_user.id}.png").read_bytes() == original
    db_session.expire_all()
    assert sample_user.profile_picture == f"{sample_user.id}.png"


def test_failed_first_upload_leaves_no_file(store, sample_user):
    with patch.object(store.users, 'set_profile_picture', side_effect=SQLAlchemyError("db down")):
        with pytest.raises(SQLAlchemyError):
            store.save(sample_user, _image_bytes("PNG"), "image/png")

    assert list(store.directory.iterdir()) == []
