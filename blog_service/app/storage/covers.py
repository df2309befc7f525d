from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePath
from typing import BinaryIO, Protocol

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from ..config import UploadsConfig
from ..exceptions import UpstreamFailure, ValidationFailure


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CoverUpload:
    """업로드된 커버 이미지 파일."""

    filename: str
    content_type: str | None
    stream: BinaryIO

    @property
    def extension(self) -> str:
        return PurePath(self.filename).suffix.lstrip(".").lower()


class CoverStorageInterface(Protocol):
    def upload(self, cover: CoverUpload) -> str:  # pragma: no cover - Protocol
        """커버 이미지를 저장하고 공개 URL 을 반환한다."""
        ...


def validate_cover_format(cover: CoverUpload, allowed_formats: tuple[str, ...]) -> None:
    if cover.extension not in allowed_formats:
        raise ValidationFailure(
            f"unsupported cover format: {cover.extension or 'unknown'} "
            f"(allowed: {', '.join(allowed_formats)})"
        )


class CloudinaryCoverStorage(CoverStorageInterface):
    """Cloudinary 에 커버 이미지를 올리는 구현."""

    def __init__(self, config: UploadsConfig) -> None:
        self._folder = config.folder
        self._allowed_formats = config.allowed_formats
        self._configured = all((config.cloud_name, config.api_key, config.api_secret))
        cloudinary.config(
            cloud_name=config.cloud_name,
            api_key=config.api_key,
            api_secret=config.api_secret,
            secure=True,
        )

    def upload(self, cover: CoverUpload) -> str:
        validate_cover_format(cover, self._allowed_formats)
        if not self._configured:
            logger.error("cover upload rejected: CLOUDINARY_* credentials are not set")
            raise UpstreamFailure("cover storage is not configured")

        try:
            result = cloudinary.uploader.upload(
                cover.stream,
                folder=self._folder,
                resource_type="image",
                allowed_formats=list(self._allowed_formats),
            )
        except (CloudinaryError, ValueError) as exc:
            # 자격 증명 누락 등 설정 오류는 SDK 가 ValueError 로 올린다.
            logger.error("cover upload failed: %s", exc)
            raise UpstreamFailure("failed to upload cover image") from exc

        url = result.get("secure_url")
        if not url:
            raise UpstreamFailure("cover upload returned no url")

        logger.info("cover uploaded (public_id=%s)", result.get("public_id"))
        return str(url)
