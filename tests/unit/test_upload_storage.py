import re

import pytest

from shopfront_media.application.use_cases.upload_image import UploadImageUseCase, UploadRejectedError
from shopfront_media.infrastructure.storage.upload_storage import UploadStorage

ALLOWED = ("image/jpeg", "image/png", "image/webp", "image/gif")


def test_resolve_inside_root(tmp_path):
    storage = UploadStorage(tmp_path)
    assert storage.resolve("a/b.jpg") == (tmp_path / "a" / "b.jpg").resolve()
    assert storage.resolve("/b.jpg") == (tmp_path / "b.jpg").resolve()


@pytest.mark.parametrize("path", ["../secret.txt", "a/../../secret.txt", "", "."])
def test_resolve_rejects_escapes_and_root(tmp_path, path):
    storage = UploadStorage(tmp_path / "uploads")
    assert storage.resolve(path) is None


def test_generated_filename_shape():
    name = UploadStorage.generate_filename("Photo.JPG", "image/jpeg")
    assert re.fullmatch(r"product-\d{13}-\d{1,9}\.jpg", name)


def test_generated_filename_uses_content_type_without_extension():
    assert UploadStorage.generate_filename("blob", "image/png").endswith(".png")


def test_upload_use_case_stores_file(tmp_path):
    storage = UploadStorage(tmp_path)
    uc = UploadImageUseCase(storage=storage, allowed_content_types=ALLOWED, max_file_bytes=1024)
    stored = uc.execute(b"abc", "shirt.png", "image/png")
    assert stored.url == f"/uploads/{stored.filename}"
    assert stored.size == 3
    assert (tmp_path / stored.filename).read_bytes() == b"abc"


@pytest.mark.parametrize(
    "data, content_type, status",
    [
        (b"abc", "application/pdf", 400),
        (b"x" * 1025, "image/jpeg", 413),
        (b"", "image/jpeg", 400),
        (b"abc", None, 400),
    ],
)
def test_upload_use_case_rejects(tmp_path, data, content_type, status):
    uc = UploadImageUseCase(storage=UploadStorage(tmp_path), allowed_content_types=ALLOWED, max_file_bytes=1024)
    with pytest.raises(UploadRejectedError) as exc_info:
        uc.execute(data, "file.jpg", content_type)
    assert exc_info.value.status_code == status
    assert list(tmp_path.iterdir()) == []
