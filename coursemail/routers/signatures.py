"""Signatures router - CRUD for the current user's message signatures."""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from coursemail.core.deps import get_current_user, get_db, require_csrf_header
from coursemail.db.models import User
from coursemail.schemas.signature import (
    SignatureCreate,
    SignatureErrorResponse,
    SignatureListItem,
    SignatureRead,
    SignatureUpdate,
)
from coursemail.services import signature_service
from coursemail.services.signature_service import (
    DuplicateTitleError,
    SignatureValidationError,
)

router = APIRouter(prefix="/me/signatures", tags=["Signatures"])

_ERROR_RESPONSES = {
    409: {"model": SignatureErrorResponse, "description": "Title already in use"},
    422: {"model": SignatureErrorResponse, "description": "Invalid field"},
}


def _validation_error_response(exc: SignatureValidationError) -> JSONResponse:
    status_code = (
        status.HTTP_409_CONFLICT
        if isinstance(exc, DuplicateTitleError)
        else status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    return JSONResponse(status_code=status_code, content={"errors": exc.as_dict()})


@router.get("", response_model=list[SignatureListItem])
def list_signatures(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List the user's signatures; the default is marked in its title."""
    return [
        SignatureListItem(id=signature_id, display_title=title)
        for signature_id, title in signature_service.list_for_user(db, user.id)
    ]


@router.post(
    "",
    response_model=SignatureRead,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
    dependencies=[Depends(require_csrf_header)],
)
def create_signature(
    data: SignatureCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a signature. The first one always becomes the default."""
    try:
        signature = signature_service.create_signature(
            db,
            user_id=user.id,
            title=data.title,
            body=data.body,
            is_default=data.is_default,
        )
    except SignatureValidationError as exc:
        return _validation_error_response(exc)
    return signature


@router.get("/{signature_id}", response_model=SignatureRead)
def get_signature(
    signature_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    signature = signature_service.find_signature_owned_by_user(db, signature_id, user.id)
    if not signature:
        raise HTTPException(status_code=404, detail="Signature not found")
    return signature


@router.patch(
    "/{signature_id}",
    response_model=SignatureRead,
    responses=_ERROR_RESPONSES,
    dependencies=[Depends(require_csrf_header)],
)
def update_signature(
    signature_id: int,
    data: SignatureUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update a signature. Omitted fields are left unchanged."""
    if not signature_service.find_signature_owned_by_user(db, signature_id, user.id):
        raise HTTPException(status_code=404, detail="Signature not found")

    try:
        signature = signature_service.update_signature(
            db,
            signature_id,
            title=data.title,
            body=data.body,
            is_default=data.is_default,
        )
    except SignatureValidationError as exc:
        return _validation_error_response(exc)
    if not signature:
        raise HTTPException(status_code=404, detail="Signature not found")
    return signature


@router.delete(
    "/{signature_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_csrf_header)],
)
def delete_signature(
    signature_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Soft delete a signature. A remaining sibling inherits the default."""
    if not signature_service.find_signature_owned_by_user(db, signature_id, user.id):
        raise HTTPException(status_code=404, detail="Signature not found")
    signature_service.soft_delete_signature(db, signature_id)
    return None
