"""
Image upload endpoint.

The multipart body is parsed by hand instead of declaring a File()
parameter, because FastAPI would answer a missing or malformed form with
its own 422 body. Here every outcome is an ApiResponse:

    400  form not parseable, wrong file count, too large, or nothing stored
    207  some files stored, some failed
    200  every file stored
"""

import logging
from typing import BinaryIO

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from ...core.uploads.models import IncomingImage, base_name
from ...core.uploads.pipeline import INVALID_FORM_MESSAGE, UploadRejected
from ..dependencies import UploadPipelineDep
from ..responses import ApiResponse, api_response

logger = logging.getLogger(__name__)

router = APIRouter()

IMAGES_FIELD = "images"

# Every method except POST; answered after the API key check
_OTHER_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"]


async def _parse_form(request: Request) -> FormData:
    content_type = request.headers.get("content-type", "")
    if not content_type.lower().startswith("multipart/form-data"):
        raise UploadRejected(INVALID_FORM_MESSAGE)

    try:
        return await request.form()
    except (MultiPartException, StarletteHTTPException, ValueError) as e:
        logger.info("Could not parse multipart form", extra={"error": str(e)})
        raise UploadRejected(INVALID_FORM_MESSAGE) from e


def _incoming_image(upload: UploadFile) -> IncomingImage:
    def open_stream() -> BinaryIO:
        upload.file.seek(0)
        return upload.file

    return IncomingImage(
        filename=base_name(upload.filename or ""),
        opener=open_stream,
        size=upload.size,
    )


@router.post(
    "/upload",
    response_model=ApiResponse,
    status_code=status.HTTP_200_OK,
    summary="Upload images",
    description="Upload 1-5 images (jpg, jpeg, png, webp) in the 'images' form field",
    responses={
        207: {"description": "Some images failed", "model": ApiResponse},
        400: {"description": "Nothing uploaded", "model": ApiResponse},
    },
)
async def upload_images(
    request: Request,
    pipeline: UploadPipelineDep,
) -> JSONResponse:
    form = await _parse_form(request)

    try:
        images = [
            _incoming_image(value)
            for value in form.getlist(IMAGES_FIELD)
            if isinstance(value, UploadFile)
        ]
        result = await pipeline.upload_batch(images)
    finally:
        await form.close()

    return api_response(
        result.status_code,
        result.message,
        urls=result.urls,
        failed=result.failed,
    )


@router.api_route("/upload", methods=_OTHER_METHODS, include_in_schema=False)
async def upload_method_not_allowed() -> JSONResponse:
    return api_response(status.HTTP_405_METHOD_NOT_ALLOWED, "Method not allowed")
