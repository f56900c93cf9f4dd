import logging
import uuid
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

from minio import Minio
from minio.error import S3Error

from core.config import settings
from utils.image_tools import compress_image_bytes, make_thumbnail

logger = logging.getLogger(__name__)

# ==== Настройка клиента MinIO ====
_endpoint = settings.AWS_S3_ENDPOINT_URL.replace("https://", "").replace("http://", "")
_s3 = Minio(
    _endpoint,
    access_key=settings.AWS_ACCESS_KEY_ID,
    secret_key=settings.AWS_SECRET_ACCESS_KEY,
    region=settings.AWS_S3_REGION,
    secure=settings.AWS_S3_ENDPOINT_URL.startswith("https://"),
)


@dataclass
class StoredPhoto:
    s3_key: str
    url: str
    thumbnail_key: str
    thumbnail_url: str
    width: int
    height: int
    size_bytes: int


def public_url(s3_key: str) -> str:
    return f"{settings.s3_base_url}/{s3_key}"


def _put(s3_key: str, data: bytes, content_type: str, bucket_name: str) -> None:
    try:
        _s3.put_object(
            bucket_name,
            s3_key,
            BytesIO(data),
            length=len(data),
            content_type=content_type,
        )
    except S3Error as e:
        raise Exception(f"Failed to upload to object storage: {e}")


def upload_photo_to_s3(file_like, profile_id: str, bucket_name: str) -> StoredPhoto:
    """
    Сжимает фото, делает превью и кладёт оба объекта в бакет под {profile_id}/.
    Бросает ValueError, если файл не изображение.
    Бросает Exception, если проблемы с S3.
    """
    data = file_like.read()

    photo = compress_image_bytes(data, quality=90)
    thumb = make_thumbnail(data)

    name = uuid.uuid4().hex
    s3_key = f"{profile_id}/{name}.{photo.ext}"
    thumbnail_key = f"{profile_id}/thumbs/{name}.{thumb.ext}"

    _put(s3_key, photo.data, photo.content_type, bucket_name)
    try:
        _put(thumbnail_key, thumb.data, thumb.content_type, bucket_name)
    except Exception:
        delete_file_from_s3_quietly(s3_key, bucket_name)
        raise

    return StoredPhoto(
        s3_key=s3_key,
        url=public_url(s3_key),
        thumbnail_key=thumbnail_key,
        thumbnail_url=public_url(thumbnail_key),
        width=photo.width,
        height=photo.height,
        size_bytes=len(photo.data),
    )


def upload_avatar_to_s3(file_like, profile_id: str, bucket_name: str) -> str:
    """Аватар: одно сжатое изображение, возвращает ключ."""
    data = file_like.read()
    avatar = compress_image_bytes(data, quality=85)
    s3_key = f"{profile_id}/avatar-{uuid.uuid4().hex}.{avatar.ext}"
    _put(s3_key, avatar.data, avatar.content_type, bucket_name)
    return s3_key


def delete_file_from_s3(s3_key: str, bucket_name: str) -> None:
    """
    Удаляет объект из MinIO/S3.
    """
    try:
        _s3.remove_object(bucket_name, s3_key)
    except S3Error as e:
        raise Exception(f"Failed to delete from object storage: {e}")


def delete_file_from_s3_quietly(s3_key: Optional[str], bucket_name: str) -> bool:
    """Удаление по принципу best-effort: ошибку пишем в лог, но не пробрасываем."""
    if not s3_key:
        return True
    try:
        delete_file_from_s3(s3_key, bucket_name)
    except Exception as e:  # noqa: BLE001
        logger.warning("Could not remove %s from storage: %s", s3_key, e)
        return False
    return True
