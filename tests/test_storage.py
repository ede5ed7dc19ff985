import pytest
from botocore.exceptions import ClientError

from chatapp.core import storage
from chatapp.core.storage import (
    AttachmentTooLargeError,
    StorageError,
    delete_attachment,
    resource_type_for,
    sanitize_filename,
    upload_attachment,
)


class FakeS3:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.put = []
        self.deleted = []

    def _maybe_fail(self, operation):
        if self.fail:
            raise ClientError({"Error": {"Code": "500", "Message": "boom"}}, operation)

    def head_bucket(self, Bucket):
        return {}

    def put_object(self, Bucket, Key, Body, ContentType):
        self._maybe_fail("PutObject")
        self.put.append((Bucket, Key, ContentType))

    def delete_object(self, Bucket, Key):
        self._maybe_fail("DeleteObject")
        self.deleted.append(Key)


@pytest.fixture
def fake_s3(monkeypatch):
    client = FakeS3()
    monkeypatch.setattr(storage, "get_s3_client", lambda: client)
    return client


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("photo.png", "photo.png"),
        ("../../etc/passwd", "passwd"),
        ("..\\evil.txt", "evil.txt"),
        ("bad\x00name.txt", "badname.txt"),
        (".hidden", "unnamed_file"),
        ("", "unnamed_file"),
    ],
)
def test_sanitize_filename(filename, expected):
    assert sanitize_filename(filename) == expected


@pytest.mark.parametrize(
    ("content_type", "expected"),
    [
        ("image/jpeg", "image"),
        ("video/mp4", "video"),
        ("audio/mpeg", "video"),
        ("application/pdf", "raw"),
        (None, "raw"),
    ],
)
def test_resource_type_for(content_type, expected):
    assert resource_type_for(content_type) == expected


def test_upload_attachment(fake_s3):
    stored = upload_attachment(b"data", "../cat.png", "image/png")

    assert stored.public_id.startswith("chat-attachments/")
    assert stored.public_id.endswith("_cat.png")
    assert stored.url.endswith(stored.public_id)
    assert stored.resource_type == "image"
    assert stored.size == 4
    assert fake_s3.put[0][1] == stored.public_id


def test_upload_attachment_too_large(fake_s3, monkeypatch):
    monkeypatch.setattr(storage.settings, "MAX_ATTACHMENT_SIZE_MB", 0)

    with pytest.raises(AttachmentTooLargeError):
        upload_attachment(b"data", "cat.png", "image/png")
    assert fake_s3.put == []


def test_upload_attachment_provider_error(fake_s3):
    fake_s3.fail = True

    with pytest.raises(StorageError):
        upload_attachment(b"data", "cat.png", "image/png")


def test_delete_attachment(fake_s3):
    assert delete_attachment("chat-attachments/abc_cat.png") is True
    assert fake_s3.deleted == ["chat-attachments/abc_cat.png"]


def test_delete_attachment_without_public_id(fake_s3):
    assert delete_attachment(None) is False
    assert delete_attachment("") is False
    assert fake_s3.deleted == []


def test_delete_attachment_swallows_provider_errors(fake_s3):
    fake_s3.fail = True

    assert delete_attachment("chat-attachments/abc_cat.png") is False
