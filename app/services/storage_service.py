"""
Сервис для работы с объектным хранилищем изображений.

Выдает presigned URL для прямой загрузки файлов в S3 / MinIO.
Сама загрузка выполняется клиентом по выданному URL.
"""

import logging
import re
import uuid
from pathlib import Path
from typing import Dict, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Request

from app.core.config import Settings, settings
from app.schemas.upload import PresignedUpload, UploadFileInfo

logger = logging.getLogger(__name__)

SUPPORTED_MIME_TYPES = {
    "image/jpeg", "image/jpg", "image/png",
    "image/webp", "image/gif",
}

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def build_s3_client(config: Settings):
    """Клиент S3 с path-style адресацией (нужна для MinIO)."""
    client_config = Config(
        retries={"max_attempts": 3, "mode": "adaptive"},
        connect_timeout=10,
        read_timeout=30,
        signature_version="s3v4",
        s3={"addressing_style": "path"},
    )
    return boto3.client(
        "s3",
        region_name=config.AWS_REGION,
        endpoint_url=config.S3_ENDPOINT_URL or None,
        aws_access_key_id=config.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=config.AWS_SECRET_ACCESS_KEY,
        config=client_config,
    )


class StorageService:
    """
    Выдача URL для загрузки изображений товаров.

    Attributes:
        bucket_name: Имя bucket
        expires_in: Время жизни presigned URL (секунды)
        public_base_url: Базовый URL для публичных ссылок на объекты
    """

    def __init__(self, config: Optional[Settings] = None, client=None):
        config = config or settings
        self.bucket_name = config.S3_BUCKET_NAME
        self.expires_in = config.PRESIGNED_URL_EXPIRES
        self.s3_client = client or build_s3_client(config)
        base = config.S3_PUBLIC_URL or f"{config.S3_ENDPOINT_URL.rstrip('/')}/{self.bucket_name}"
        self.public_base_url = base.rstrip("/")

    @staticmethod
    def generate_key(file_name: str) -> str:
        """Уникальный ключ объекта: products/<uuid>_<безопасное имя>."""
        name = Path(file_name).name
        safe = _UNSAFE_CHARS.sub("-", name).strip("-") or "image"
        return f"products/{uuid.uuid4().hex}_{safe}"

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    def presign_upload(self, file: UploadFileInfo) -> PresignedUpload:
        """
        Получить URL загрузки для одного файла.

        Returns:
            PresignedUpload: Дескриптор загрузки или ошибка для файла
        """
        if file.type.lower() not in SUPPORTED_MIME_TYPES:
            return PresignedUpload(
                fileName=file.name, error=f"Unsupported file type: {file.type}"
            )

        key = self.generate_key(file.name)
        try:
            upload_url = self.s3_client.generate_presigned_url(
                "put_object",
                Params={"Bucket": self.bucket_name, "Key": key, "ContentType": file.type},
                ExpiresIn=self.expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error generating presigned URL for {file.name}: {e}")
            return PresignedUpload(fileName=file.name, error="Could not get presigned URL")

        return PresignedUpload(
            fileName=file.name,
            uploadUrl=upload_url,
            publicUrl=self.public_url(key),
            key=key,
        )

    def presign_uploads(self, files: List[UploadFileInfo]) -> List[PresignedUpload]:
        return [self.presign_upload(file) for file in files]


def get_storage(request: Request) -> StorageService:
    """Dependency: сервис хранилища, созданный при старте приложения."""
    return request.app.state.storage


def describe_errors(results: List[PresignedUpload]) -> List[Dict[str, str]]:
    return [
        {"fileName": r.file_name, "error": r.error} for r in results if r.error is not None
    ]
