"""
FormDrop Backend: Submission Route Handlers
=============================================

What:  POST /addUser (form intake) and GET /collectionData (read all).
How:   Reads the multipart body, delegates to SubmissionService, returns JSON.
Who:   Called by the form frontend.

Request Flow (POST /addUser):
    1. Client sends multipart/form-data: name, age, message, email, images[0..5]
    2. FastAPI extracts the text fields and UploadFile parts
    3. File parts are read into memory and closed
    4. SubmissionService runs upload → validate → persist → notify
    5. 201 Created with {message, data}
    Errors are rendered by the global exception handlers in main.py.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from app.config import settings
from app.exceptions import UploadError
from app.schemas.submission import ErrorResponse, IntakeResponse, SubmissionResponse
from app.services.submission_service import SubmissionService, get_submission_service
from app.services.upload_service import IncomingFile

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Submissions"])


def request_base_url(request: Request) -> str:
    """Scheme and host the client used, e.g. "https://forms.example.org"."""
    host = request.headers.get("host") or request.url.netloc
    return f"{request.url.scheme}://{host}"


async def read_uploads(uploads: Optional[List[UploadFile]]) -> List[IncomingFile]:
    """
    Read every non-empty file part, in order, then close it.

    Parts without a filename (a file input left empty) are skipped.

    Raises:
        UploadError if a part cannot be read.
    """
    incoming: List[IncomingFile] = []
    try:
        for upload in uploads or []:
            if not upload.filename:
                continue
            incoming.append(IncomingFile(filename=upload.filename, content=await upload.read()))
    except OSError as e:
        raise UploadError(context={"os_error": str(e)})
    finally:
        for upload in uploads or []:
            await upload.close()
    return incoming


@router.post(
    "/addUser",
    status_code=201,
    response_model=IntakeResponse,
    responses={
        201: {"description": "Submission stored and email sent", "model": IntakeResponse},
        400: {"description": "Missing field or image", "model": ErrorResponse},
        500: {"description": "Upload, storage or email failure", "model": ErrorResponse},
    },
    summary="Submit the form",
    description=(
        "Accepts name, age, message, email and up to five images. Stores the "
        "submission and emails the submitted address with the images attached."
    ),
)
async def add_user(
    request: Request,
    name: Optional[str] = Form(default=None),
    age: Optional[str] = Form(default=None),
    message: Optional[str] = Form(default=None),
    email: Optional[str] = Form(default=None),
    images: Optional[List[UploadFile]] = File(
        default=None,
        alias=settings.upload_field_name,
        description="Up to five image files",
    ),
    service: SubmissionService = Depends(get_submission_service),
) -> IntakeResponse:
    files = await read_uploads(images)
    logger.info("Received form submission with %d file(s)", len(files))

    return await service.submit(
        name=name,
        age=age,
        message=message,
        email=email,
        files=files,
        base_url=request_base_url(request),
    )


@router.get(
    "/collectionData",
    response_model=List[SubmissionResponse],
    responses={
        200: {"description": "Every stored submission"},
        500: {"description": "Store unreachable", "model": ErrorResponse},
    },
    summary="List all submissions",
    description="Returns every stored submission. No filtering or pagination.",
)
async def collection_data(
    service: SubmissionService = Depends(get_submission_service),
) -> List[SubmissionResponse]:
    return await service.list_all()
