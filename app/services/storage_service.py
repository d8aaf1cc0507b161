"""스토리지 서비스 — S3 이미지 업로드 (S3Uploader).

Storage Service — Image uploads to S3 with public-read access.
AWS 키나 버킷이 비어있으면 자동으로 로컬 모드로 전환됩니다
(objects are written under ``uploads_dir`` and served at ``/uploads``).

Batch uploads are best-effort: a failing file is logged and skipped.
A single profile upload surfaces its error to the caller.
"""

import logging
import shutil
import tempfile
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO

from fastapi import UploadFile

from app.config import Settings, settings
from app.utils.exceptions import NotImageFileError

logger = logging.getLogger(__name__)

# 로컬 업로드 디렉토리 기본값 — 프로젝트 루트의 uploads/
_PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent.parent


@dataclass(frozen=True)
class StoredFile:
    """업로드 결과 — 스토리지 키, 공개 URL, MIME 타입."""

    key: str
    url: str
    content_type: str | None


def is_image_file(file: UploadFile) -> bool:
    content_type: str | None = file.content_type
    return content_type is not None and content_type.startswith("image/")


class S3Uploader:
    """이미지 업로드 서비스 — S3 또는 로컬 모드 자동 선택.

    Args:
        bucket: S3 버킷 이름 (Bucket name; empty selects local mode)
        region: S3 리전 (Bucket region, used in public URLs)
        access_key_id: AWS 액세스 키 (Empty selects local mode)
        secret_access_key: AWS 시크릿 키
        uploads_dir: 로컬 모드 저장 경로 (Local-mode root directory)
        public_base_url: 로컬 모드 공개 URL 접두사 (Local-mode URL prefix)
        client: 미리 만든 boto3 S3 클라이언트 (Pre-built client, optional)
    """

    def __init__(
        self,
        bucket: str,
        region: str,
        access_key_id: str = "",
        secret_access_key: str = "",
        uploads_dir: Path | None = None,
        public_base_url: str = "http://localhost:8000",
        client: Any | None = None,
    ) -> None:
        self.bucket: str = bucket
        self.region: str = region
        self._access_key_id: str = access_key_id
        self._secret_access_key: str = secret_access_key
        self.uploads_dir: Path = uploads_dir or _PROJECT_ROOT / "uploads"
        self.public_base_url: str = public_base_url.rstrip("/")
        self._client: Any | None = client

    @classmethod
    def from_settings(cls, config: Settings) -> "S3Uploader":
        return cls(
            bucket=config.AWS_S3_BUCKET,
            region=config.AWS_S3_REGION,
            access_key_id=config.AWS_ACCESS_KEY_ID,
            secret_access_key=config.AWS_SECRET_ACCESS_KEY,
            uploads_dir=Path(config.LOCAL_UPLOADS_DIR) if config.LOCAL_UPLOADS_DIR else None,
            public_base_url=config.PUBLIC_BASE_URL,
        )

    @property
    def is_local(self) -> bool:
        if self._client is not None:
            return False
        return not self._access_key_id or not self.bucket

    @property
    def client(self) -> Any:
        if self.is_local:
            return None
        if self._client is None:
            import boto3
            from botocore.config import Config as BotoConfig

            self._client = boto3.client(
                "s3",
                region_name=self.region,
                aws_access_key_id=self._access_key_id,
                aws_secret_access_key=self._secret_access_key,
                config=BotoConfig(signature_version="s3v4"),
            )
        return self._client

    # ------------------------------------------------------------------
    # 키 / URL
    # ------------------------------------------------------------------

    def _generate_key(self, filename: str | None, folder: str) -> str:
        # 경로 구분자를 제거해 원본 파일명이 키 계층을 만들지 않도록 함
        origin_name: str = Path(filename or "file").name.replace(" ", "_") or "file"
        return f"{folder}/{uuid.uuid4().hex}_{origin_name}"

    @property
    def _url_prefix(self) -> str:
        if self.is_local:
            return f"{self.public_base_url}/uploads/"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/"

    def get_url(self, key: str) -> str:
        return f"{self._url_prefix}{key}"

    def extract_key(self, file_url: str) -> str | None:
        """공개 URL에서 storage key를 추출합니다. 이 스토리지의 URL이 아니면 None."""
        if file_url.startswith(self._url_prefix):
            return file_url[len(self._url_prefix):]
        return None

    # ------------------------------------------------------------------
    # 업로드
    # ------------------------------------------------------------------

    def _put_object(self, key: str, body: BinaryIO, content_type: str | None) -> None:
        if self.is_local:
            path: Path = self.uploads_dir / key
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("wb") as out:
                shutil.copyfileobj(body, out)
            return

        extra_args: dict[str, str] = {"ACL": "public-read"}
        if content_type:
            extra_args["ContentType"] = content_type
        self.client.upload_fileobj(body, self.bucket, key, ExtraArgs=extra_args)

    def upload(self, file: UploadFile, folder: str = "posts") -> StoredFile:
        """파일 하나를 업로드하고 결과를 반환합니다.

        Raises:
            botocore.exceptions.BotoCoreError / ClientError: S3 실패
            OSError: 로컬 저장 실패 (Local-mode write failure)
        """
        key: str = self._generate_key(file.filename, folder)
        file.file.seek(0)
        self._put_object(key, file.file, file.content_type)
        logger.info("Uploaded %s as %s", file.filename, key)
        return StoredFile(key=key, url=self.get_url(key), content_type=file.content_type)

    def upload_profile_image(self, file: UploadFile) -> StoredFile:
        """프로필 이미지를 업로드합니다. 이미지가 아니면 NotImageFileError.

        Raises:
            NotImageFileError: content type이 image/* 가 아님
        """
        if not is_image_file(file):
            logger.error("Rejected non-image profile upload: %s (%s)", file.filename, file.content_type)
            raise NotImageFileError("Unsupported file type")
        return self.upload(file, folder="profiles")

    def upload_files(self, files: list[UploadFile] | None, folder: str = "posts") -> list[StoredFile]:
        """여러 파일을 업로드합니다 — 실패한 파일은 로그만 남기고 건너뜁니다.

        Best-effort batch upload. The returned list preserves input order
        and omits every file that failed.
        """
        if not files:
            logger.info("No files to upload")
            return []

        stored: list[StoredFile] = []
        for file in files:
            try:
                stored.append(self.upload(file, folder))
            except Exception:
                logger.exception("Skipping file that failed to upload: %s", file.filename)
        return stored

    def put_file(self, upload_file: Path, dir_name: str, origin_name: str) -> str:
        """로컬에 있는 파일을 업로드하고 공개 URL을 반환합니다."""
        key: str = self._generate_key(origin_name, dir_name)
        with upload_file.open("rb") as body:
            self._put_object(key, body, None)
        return self.get_url(key)

    # ------------------------------------------------------------------
    # 삭제 / 임시 파일
    # ------------------------------------------------------------------

    def delete_file(self, key: str) -> None:
        """키로 객체를 삭제합니다."""
        if self.is_local:
            (self.uploads_dir / key).unlink(missing_ok=True)
            return
        self.client.delete_object(Bucket=self.bucket, Key=key)

    def delete_files(self, keys: list[str]) -> None:
        """여러 객체를 삭제합니다 — 실패는 로그만 남깁니다 (Best-effort)."""
        for key in keys:
            try:
                self.delete_file(key)
            except Exception:
                logger.exception("Failed to delete stored object %s", key)

    def convert(self, file: UploadFile) -> Path | None:
        """업로드 스트림을 임시 로컬 파일로 저장합니다.

        Materialize an uploaded stream for further local processing.
        Returns None (and logs) when the temporary file cannot be written.
        """
        suffix: str = Path(file.filename or "").suffix
        try:
            file.file.seek(0)
            with tempfile.NamedTemporaryFile(prefix="temp", suffix=suffix, delete=False) as tmp:
                shutil.copyfileobj(file.file, tmp)
                return Path(tmp.name)
        except OSError:
            logger.exception("Failed to materialize upload %s", file.filename)
            return None

    def remove_file(self, target: Path) -> bool:
        """임시 파일을 삭제하고 성공 여부를 반환합니다."""
        try:
            target.unlink()
        except OSError:
            logger.info("Could not delete temp file %s", target)
            return False
        logger.info("Deleted temp file %s", target)
        return True


# 전역 업로더 — Built once from settings at startup
s3_uploader: S3Uploader = S3Uploader.from_settings(settings)
