"""S3Uploader 테스트 — S3 모드(모의 클라이언트)와 로컬 모드.

S3Uploader tests — key/URL layout, S3 calls through a mocked boto3
client, best-effort batch behavior, and local-mode file handling.
"""

import io
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from fastapi import UploadFile
from starlette.datastructures import Headers

from app.services.storage_service import S3Uploader, is_image_file
from app.utils.exceptions import NotImageFileError
from tests.conftest import PNG_BYTES

BUCKET = "project3-media"
REGION = "ap-northeast-2"
S3_PREFIX = f"https://{BUCKET}.s3.{REGION}.amazonaws.com/"


def _upload(filename: str, content: bytes = PNG_BYTES, content_type: str = "image/png") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def s3_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def s3_uploader(s3_client: MagicMock) -> S3Uploader:
    return S3Uploader(bucket=BUCKET, region=REGION, client=s3_client)


class TestS3Mode:
    """S3 모드 — boto3 클라이언트 호출 검증."""

    def test_upload_uses_public_read(self, s3_uploader: S3Uploader, s3_client: MagicMock):
        stored = s3_uploader.upload(_upload("photo.png"))

        assert stored.key.startswith("posts/")
        assert stored.key.endswith("_photo.png")
        assert stored.url == S3_PREFIX + stored.key
        assert stored.content_type == "image/png"

        s3_client.upload_fileobj.assert_called_once()
        args, kwargs = s3_client.upload_fileobj.call_args
        assert args[1] == BUCKET
        assert args[2] == stored.key
        assert kwargs["ExtraArgs"] == {"ACL": "public-read", "ContentType": "image/png"}

    def test_keys_are_unique(self, s3_uploader: S3Uploader):
        first = s3_uploader.upload(_upload("same.png"))
        second = s3_uploader.upload(_upload("same.png"))
        assert first.key != second.key

    def test_upload_strips_directories_from_name(self, s3_uploader: S3Uploader):
        stored = s3_uploader.upload(_upload("../../etc/passwd.png"))
        assert stored.key.count("/") == 1
        assert stored.key.endswith("_passwd.png")

    def test_upload_files_best_effort(self, s3_uploader: S3Uploader, s3_client: MagicMock):
        """실패한 파일은 건너뛰고 나머지는 순서대로 반환."""
        error = ClientError({"Error": {"Code": "500", "Message": "boom"}}, "PutObject")
        s3_client.upload_fileobj.side_effect = [None, error, None]

        stored = s3_uploader.upload_files([_upload("a.png"), _upload("b.png"), _upload("c.png")])

        assert [s.key.split("_", 1)[1] for s in stored] == ["a.png", "c.png"]
        assert s3_client.upload_fileobj.call_count == 3

    def test_upload_files_empty(self, s3_uploader: S3Uploader, s3_client: MagicMock):
        assert s3_uploader.upload_files(None) == []
        assert s3_uploader.upload_files([]) == []
        s3_client.upload_fileobj.assert_not_called()

    def test_profile_image_rejects_non_image(self, s3_uploader: S3Uploader, s3_client: MagicMock):
        with pytest.raises(NotImageFileError):
            s3_uploader.upload_profile_image(_upload("doc.pdf", b"%PDF", "application/pdf"))
        s3_client.upload_fileobj.assert_not_called()

    def test_profile_image_folder(self, s3_uploader: S3Uploader):
        stored = s3_uploader.upload_profile_image(_upload("me.png"))
        assert stored.key.startswith("profiles/")

    def test_put_file(self, s3_uploader: S3Uploader, s3_client: MagicMock, tmp_path: Path):
        source = tmp_path / "local.png"
        source.write_bytes(PNG_BYTES)

        url = s3_uploader.put_file(source, "posts", "origin.png")

        assert url.startswith(S3_PREFIX + "posts/")
        assert url.endswith("_origin.png")
        args, kwargs = s3_client.upload_fileobj.call_args
        assert kwargs["ExtraArgs"] == {"ACL": "public-read"}

    def test_delete_file(self, s3_uploader: S3Uploader, s3_client: MagicMock):
        s3_uploader.delete_file("posts/abc_photo.png")
        s3_client.delete_object.assert_called_once_with(Bucket=BUCKET, Key="posts/abc_photo.png")

    def test_delete_files_keeps_going(self, s3_uploader: S3Uploader, s3_client: MagicMock):
        error = ClientError({"Error": {"Code": "403", "Message": "denied"}}, "DeleteObject")
        s3_client.delete_object.side_effect = [error, None]

        s3_uploader.delete_files(["posts/a.png", "posts/b.png"])

        assert s3_client.delete_object.call_count == 2

    def test_extract_key(self, s3_uploader: S3Uploader):
        assert s3_uploader.extract_key(S3_PREFIX + "profiles/x_me.png") == "profiles/x_me.png"
        assert s3_uploader.extract_key("https://example.com/anonymous.png") is None


class TestLocalMode:
    """로컬 모드 — 키가 없으면 파일 시스템에 저장."""

    def test_local_mode_without_keys(self, tmp_path: Path):
        uploader = S3Uploader(bucket=BUCKET, region=REGION, uploads_dir=tmp_path)
        assert uploader.is_local is True
        assert uploader.client is None

    def test_s3_mode_with_keys(self):
        uploader = S3Uploader(bucket=BUCKET, region=REGION, access_key_id="AKIA", secret_access_key="secret")
        assert uploader.is_local is False

    def test_upload_and_delete(self, uploader: S3Uploader):
        stored = uploader.upload(_upload("photo.png"))
        path = uploader.uploads_dir / stored.key

        assert stored.url == f"http://test/uploads/{stored.key}"
        assert path.read_bytes() == PNG_BYTES

        uploader.delete_file(stored.key)
        assert not path.exists()
        # 이미 없는 파일 삭제도 오류 없음
        uploader.delete_file(stored.key)

    def test_convert_and_remove(self, uploader: S3Uploader):
        """업로드 스트림을 임시 파일로 저장하고 삭제."""
        temp = uploader.convert(_upload("photo.png"))
        assert temp is not None
        assert temp.suffix == ".png"
        assert temp.read_bytes() == PNG_BYTES

        assert uploader.remove_file(temp) is True
        assert not temp.exists()
        assert uploader.remove_file(temp) is False


def test_is_image_file():
    assert is_image_file(_upload("a.jpg", content_type="image/jpeg")) is True
    assert is_image_file(_upload("a.txt", content_type="text/plain")) is False
