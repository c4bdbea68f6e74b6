"""
Схемы для выдачи presigned URL на загрузку изображений.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class UploadFileInfo(BaseModel):
    """Файл, для которого нужен URL загрузки."""

    name: str = Field(..., min_length=1, description="Имя файла")
    type: str = Field(..., description="MIME-тип файла")


class PresignRequest(BaseModel):
    files: Optional[List[UploadFileInfo]] = None


class PresignedUpload(BaseModel):
    """Дескриптор загрузки либо ошибка для конкретного файла."""

    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(alias="fileName")
    upload_url: Optional[str] = Field(None, alias="uploadUrl")
    public_url: Optional[str] = Field(None, alias="publicUrl")
    key: Optional[str] = None
    error: Optional[str] = None
