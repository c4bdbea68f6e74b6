#!/usr/bin/env python3
"""
Подготовка bucket для изображений товаров.

Создает bucket, открывает публичное чтение объектов products/*
и разрешает загрузку из браузера по presigned URL (CORS).
"""

import json
import sys
from pathlib import Path

from botocore.exceptions import ClientError

# Добавляем путь к модулю app
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.config import settings
from app.services.storage_service import build_s3_client


def public_read_policy(bucket_name: str) -> str:
    return json.dumps(
        {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Effect": "Allow",
                    "Principal": {"AWS": ["*"]},
                    "Action": ["s3:GetObject"],
                    "Resource": [f"arn:aws:s3:::{bucket_name}/products/*"],
                }
            ],
        }
    )


UPLOAD_CORS = {
    "CORSRules": [
        {
            "AllowedMethods": ["PUT", "GET"],
            "AllowedOrigins": ["*"],
            "AllowedHeaders": ["*"],
            "MaxAgeSeconds": 3000,
        }
    ]
}


def main() -> int:
    print("=== НАСТРОЙКА ХРАНИЛИЩА ИЗОБРАЖЕНИЙ ===")
    s3 = build_s3_client(settings)
    bucket_name = settings.S3_BUCKET_NAME

    try:
        try:
            s3.head_bucket(Bucket=bucket_name)
            print(f"Bucket '{bucket_name}' уже существует")
        except ClientError:
            s3.create_bucket(Bucket=bucket_name)
            print(f"✅ Bucket '{bucket_name}' создан")

        s3.put_bucket_policy(Bucket=bucket_name, Policy=public_read_policy(bucket_name))
        print("✅ Публичное чтение products/* включено")

        try:
            s3.put_bucket_cors(Bucket=bucket_name, CORSConfiguration=UPLOAD_CORS)
            print("✅ CORS для загрузки из браузера настроен")
        except ClientError as e:
            # MinIO управляет CORS на уровне сервера
            print(f"⚠️ CORS не настроен: {e}")
    except ClientError as e:
        print(f"❌ Ошибка: {e}")
        return 1

    response = s3.list_buckets()
    print(f"\nДоступные buckets: {[b['Name'] for b in response['Buckets']]}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
