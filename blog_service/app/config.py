from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml


DEFAULT_CONFIG_FILE_NAME = "config.yaml"

JWT_SECRET = "JWT_SECRET"
COOKIE_SECURE = "COOKIE_SECURE"
CLOUDINARY_CLOUD_NAME = "CLOUDINARY_CLOUD_NAME"
CLOUDINARY_API_KEY = "CLOUDINARY_API_KEY"
CLOUDINARY_API_SECRET = "CLOUDINARY_API_SECRET"

DEFAULT_ALLOWED_ORIGINS = ("http://localhost:3000",)
DEFAULT_ALLOWED_FORMATS = ("jpg", "jpeg", "png")


@dataclass(frozen=True, slots=True)
class AuthConfig:
    """세션 토큰 발급/검증 및 쿠키 설정."""

    jwt_secret: str
    token_ttl_hours: int = 24
    cookie_name: str = "token"
    cookie_secure: bool = False


@dataclass(frozen=True, slots=True)
class CorsConfig:
    allowed_origins: tuple[str, ...] = DEFAULT_ALLOWED_ORIGINS


@dataclass(frozen=True, slots=True)
class PaginationConfig:
    default_page_size: int = 10
    max_page_size: int = 100


@dataclass(frozen=True, slots=True)
class UploadsConfig:
    """커버 이미지 업로드(Cloudinary) 설정."""

    cloud_name: str | None = None
    api_key: str | None = None
    api_secret: str | None = None
    folder: str = "blog-covers"
    allowed_formats: tuple[str, ...] = DEFAULT_ALLOWED_FORMATS


@dataclass(frozen=True, slots=True)
class AppConfig:
    """blog-service 전체 설정 루트.

    - 비밀값(JWT 시크릿, Cloudinary 키)은 환경변수에서만 읽는다.
    - 리스트/튜닝 값은 선택적인 config.yaml 에서 읽고, 없으면 기본값을 사용한다.
    """

    auth: AuthConfig
    cors: CorsConfig
    pagination: PaginationConfig
    uploads: UploadsConfig


def _find_config_path() -> Path | None:
    """현재 작업 디렉토리 기준으로 상위로 올라가며 config.yaml 을 찾는다."""

    current = Path.cwd()
    for directory in (current, *current.parents):
        candidate = directory / DEFAULT_CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def _load_yaml(path: Path | None) -> dict[str, Any]:
    if path is None:
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise RuntimeError(f"{path} must contain a mapping at the top level")
    return data


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise RuntimeError(f"invalid '{name}' section in {DEFAULT_CONFIG_FILE_NAME}")
    return section


def _positive_int(section: dict[str, Any], key: str, default: int, label: str) -> int:
    raw = section.get(key, default)
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:  # noqa: TRY003
        raise RuntimeError(f"invalid {label}: {raw!r}") from exc
    if value <= 0:
        raise RuntimeError(f"{label} must be > 0, got: {value}")
    return value


def _str_tuple(section: dict[str, Any], key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = section.get(key)
    if raw is None:
        return default
    if not isinstance(raw, list):
        raise RuntimeError(f"{key} must be a list, got: {raw!r}")
    values = tuple(str(item).strip() for item in raw if str(item).strip())
    return values or default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    raise RuntimeError(f"{name} must be a boolean if set, got: {raw!r}")


def load_auth_config(data: dict[str, Any]) -> AuthConfig:
    secret = os.getenv(JWT_SECRET, "").strip()
    if not secret:
        raise RuntimeError(
            f"{JWT_SECRET} environment variable is required for blog-service",
        )

    auth = _section(data, "auth")
    ttl_hours = _positive_int(auth, "token_ttl_hours", 24, "auth.token_ttl_hours")

    return AuthConfig(
        jwt_secret=secret,
        token_ttl_hours=ttl_hours,
        cookie_secure=_env_bool(COOKIE_SECURE),
    )


def load_pagination_config(data: dict[str, Any]) -> PaginationConfig:
    pagination = _section(data, "pagination")
    default_size = _positive_int(
        pagination, "default_page_size", 10, "pagination.default_page_size"
    )
    max_size = _positive_int(
        pagination, "max_page_size", 100, "pagination.max_page_size"
    )
    if default_size > max_size:
        raise RuntimeError(
            "pagination.default_page_size must not exceed pagination.max_page_size",
        )
    return PaginationConfig(default_page_size=default_size, max_page_size=max_size)


def load_uploads_config(data: dict[str, Any]) -> UploadsConfig:
    uploads = _section(data, "uploads")
    folder = str(uploads.get("folder") or "blog-covers").strip() or "blog-covers"
    formats = tuple(
        fmt.lower() for fmt in _str_tuple(uploads, "allowed_formats", DEFAULT_ALLOWED_FORMATS)
    )
    return UploadsConfig(
        cloud_name=os.getenv(CLOUDINARY_CLOUD_NAME) or None,
        api_key=os.getenv(CLOUDINARY_API_KEY) or None,
        api_secret=os.getenv(CLOUDINARY_API_SECRET) or None,
        folder=folder,
        allowed_formats=formats,
    )


def load_config(path: Path | None = None) -> AppConfig:
    """blog-service 설정을 로드하여 AppConfig 로 반환한다."""

    data = _load_yaml(path or _find_config_path())
    cors = _section(data, "cors")

    return AppConfig(
        auth=load_auth_config(data),
        cors=CorsConfig(
            allowed_origins=_str_tuple(cors, "allowed_origins", DEFAULT_ALLOWED_ORIGINS),
        ),
        pagination=load_pagination_config(data),
        uploads=load_uploads_config(data),
    )


@lru_cache(maxsize=1)
def get_app_config() -> AppConfig:
    """FastAPI DI 및 앱 팩토리에서 사용하는 프로세스 단위 설정."""

    return load_config()
