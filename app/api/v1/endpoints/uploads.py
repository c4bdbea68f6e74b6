"""
API endpoint выдачи URL для загрузки изображений.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.schemas.upload import PresignRequest
from app.services.storage_service import StorageService, describe_errors, get_storage

router = APIRouter()


@router.post("/images")
def presign_images(body: PresignRequest, storage: StorageService = Depends(get_storage)):
    """
    Выдать presigned URL для загрузки изображений.

    Тело: {"files": [{"name": ..., "type": ...}]}.

    Returns:
        dict: presignedUrls с uploadUrl, publicUrl и key для каждого файла;
            400 при пустом списке, 500 если хотя бы один файл не обработан
    """
    if body.files is None:
        return JSONResponse(
            {"error": "Invalid request. Must include files array."}, status_code=400
        )
    if not body.files:
        return JSONResponse({"error": "No files provided"}, status_code=400)

    results = storage.presign_uploads(body.files)
    errors = describe_errors(results)
    if errors:
        return JSONResponse(
            {"error": "Error generating some presigned URLs", "details": errors},
            status_code=500,
        )
    return {"presignedUrls": [r.model_dump(by_alias=True) for r in results]}
