"""
FormDrop Backend: Uploaded File Route
=======================================

What:  Serves stored attachments under the public uploads prefix.
Who:   Browsers following the URLs in a submission, and the notifier when
       it fetches an attachment over HTTP.

Security:
    - Only plain names inside the flat upload directory resolve
      (UploadService.resolve rejects anything that escapes it)
    - Read-only and unauthenticated, like any static file
"""

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from app.config import settings
from app.exceptions import NotFoundError
from app.schemas.submission import ErrorResponse
from app.services.upload_service import UploadService, get_upload_service

router = APIRouter(prefix=settings.uploads_url_prefix, tags=["Uploads"])


@router.get(
    "/{filename}",
    summary="Serve an uploaded image",
    responses={
        200: {"description": "File content"},
        400: {"description": "Invalid file path", "model": ErrorResponse},
        404: {"description": "File not found", "model": ErrorResponse},
    },
)
async def serve_upload(
    filename: str,
    uploads: UploadService = Depends(get_upload_service),
) -> FileResponse:
    path = uploads.resolve(filename)
    if not path.is_file():
        raise NotFoundError(resource="file", resource_id=filename)

    # media_type is guessed from the stored name
    return FileResponse(path=str(path), headers={"Cache-Control": "public, max-age=86400"})
