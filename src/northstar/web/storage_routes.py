"""API endpoints for signing vision board image uploads and downloads."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from supabase import Client

from northstar.storage import (
    ForbiddenPathError,
    StorageProviderError,
    StorageSigner,
    UnsupportedContentTypeError,
)
from northstar.web.auth import AuthenticatedUser, get_current_user, get_user_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/storage", tags=["storage"])


# =============================================================================
# Request/Response Models
# =============================================================================


class SignUploadRequest(BaseModel):
    """Request a signed upload URL for one image."""

    model_config = ConfigDict(populate_by_name=True)

    filename: str | None = None
    content_type: str | None = Field(default=None, alias="contentType")


class SignUploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    signed_url: str = Field(alias="signedUrl")
    path: str
    token: str | None = None


class SignDownloadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    signed_url: str = Field(alias="signedUrl")


def get_signer(client: Client = Depends(get_user_client)) -> StorageSigner:
    return StorageSigner(client)


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/sign", response_model=SignUploadResponse, response_model_by_alias=True)
async def sign_upload(
    req: SignUploadRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    signer: StorageSigner = Depends(get_signer),
):
    """Create a signed upload URL in the caller's folder."""
    if not req.filename or not req.content_type:
        raise HTTPException(status_code=400, detail="Missing filename or contentType")

    try:
        upload = signer.sign_upload(user.id, req.filename, req.content_type)
    except UnsupportedContentTypeError:
        raise HTTPException(
            status_code=400,
            detail="Invalid content type. Allowed: jpeg, png, gif, webp",
        )
    except StorageProviderError:
        raise HTTPException(status_code=500, detail="Failed to create upload URL")

    return SignUploadResponse(signed_url=upload.signed_url, path=upload.path, token=upload.token)


@router.get("/sign", response_model=SignDownloadResponse, response_model_by_alias=True)
async def sign_download(
    path: str | None = None,
    user: AuthenticatedUser = Depends(get_current_user),
    signer: StorageSigner = Depends(get_signer),
):
    """Create a signed download URL for a file the caller owns."""
    if not path:
        raise HTTPException(status_code=400, detail="Missing path parameter")

    try:
        signed_url = signer.sign_download(user.id, path)
    except ForbiddenPathError:
        raise HTTPException(status_code=403, detail="Unauthorized access to file")
    except StorageProviderError:
        raise HTTPException(status_code=500, detail="Failed to create download URL")

    return SignDownloadResponse(signed_url=signed_url)
