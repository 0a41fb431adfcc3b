"""
Bookstore Backend — User Route Handlers
=========================================

What:  POST /userRegister, POST /userRegisterwithfile, POST /login,
       GET /user/{user_id}.
How:   Parse the request, delegate to RegistrationService, wrap the result
       in a ResponseMessage envelope.

Response Convention:
    Every outcome is delivered with HTTP 200; the envelope's statusCode and
    status carry the real result. Failures are raised by the service and
    rendered by the global handlers in app.main, which use FAILURE_MESSAGES
    below to prefix server-side errors per route.

    On success, data is the account as UserAccountResponse: id, firstName,
    lastName, email, contactId, createdAt, updatedAt. The stored password
    is reversible and is never included.

    Write routes commit before returning, so a SUCCESS envelope is only
    sent for a committed account.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, File, Form, UploadFile
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import commit_session, get_db_session
from app.exceptions import ValidationError
from app.schemas.attachment import AttachmentUpload
from app.schemas.user import (
    LoginRequest,
    ResponseMessage,
    UserAccountResponse,
    UserRegData,
)
from app.services.registration_service import (
    RegistrationService,
    get_registration_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["User Operations"])

REGISTERED_MESSAGE = "User Registered Successfully"
LOGGED_IN_MESSAGE = "User Login Successfully, welcome to E-commerce online BooksStore"

# Prefix for statusCode 500 envelopes, keyed by route path
FAILURE_MESSAGES = {
    "/userRegister": "User Registration Failed",
    "/userRegisterwithfile": "User Registration Failed",
    "/login": "User Login Failed",
}


@router.post(
    "/userRegister",
    response_model=ResponseMessage,
    summary="User Registration",
    description="Register a new user. Email and password are required.",
)
async def register_user(
    user_reg_data: Optional[UserRegData] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
    service: RegistrationService = Depends(get_registration_service),
) -> ResponseMessage:
    user = await service.register(db, user_reg_data)
    await commit_session(db)
    return ResponseMessage.success(REGISTERED_MESSAGE, UserAccountResponse.model_validate(user))


@router.post(
    "/userRegisterwithfile",
    response_model=ResponseMessage,
    summary="User Registration with attachments",
    description=(
        "Multipart registration: `userRegDataJson` holds the registration JSON, "
        "`files` holds zero or more file parts stored as attachments."
    ),
)
async def register_user_with_files(
    user_reg_data_json: str = Form(..., alias="userRegDataJson"),
    files: Optional[List[UploadFile]] = File(default=None),
    db: AsyncSession = Depends(get_db_session),
    service: RegistrationService = Depends(get_registration_service),
) -> ResponseMessage:
    """
    Register a user and store the uploaded files.

    Attachment failures are not reported here; the envelope reflects the
    account creation only.
    """
    try:
        user_reg_data = UserRegData.model_validate_json(user_reg_data_json)
    except PydanticValidationError as e:
        raise ValidationError(
            message="Invalid registration data",
            field="userRegDataJson",
            context={"errors": e.error_count()},
        ) from e

    uploads: List[AttachmentUpload] = []
    for upload in files or []:
        try:
            uploads.append(
                AttachmentUpload(
                    filename=upload.filename,
                    content_type=upload.content_type,
                    data=await upload.read(),
                )
            )
        finally:
            await upload.close()

    logger.info("Received registration with %d file part(s)", len(uploads))

    user = await service.register_with_attachments(db, user_reg_data, uploads)
    await commit_session(db)
    return ResponseMessage.success(REGISTERED_MESSAGE, UserAccountResponse.model_validate(user))


@router.post(
    "/login",
    response_model=ResponseMessage,
    summary="User Login",
    description="Check an email/password pair. No session or token is issued.",
)
async def login(
    credentials: Optional[LoginRequest] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
    service: RegistrationService = Depends(get_registration_service),
) -> ResponseMessage:
    user = await service.login(db, credentials)
    return ResponseMessage.success(LOGGED_IN_MESSAGE, UserAccountResponse.model_validate(user))


@router.get(
    "/user/{user_id}",
    response_model=ResponseMessage,
    summary="Get a registered user by id",
)
async def get_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db_session),
    service: RegistrationService = Depends(get_registration_service),
) -> ResponseMessage:
    user = await service.get_user(db, user_id)
    return ResponseMessage.success("User found", UserAccountResponse.model_validate(user), status_code=200)
