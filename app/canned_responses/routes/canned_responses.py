from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.dependencies import CurrentSession
from app.canned_responses.schemas.canned_response import (
    CannedResponseCreate,
    CannedResponseResponse,
    CannedResponseUpdate,
)
from app.canned_responses.services.canned_response_service import CannedResponseService
from app.db.session import get_db

router = APIRouter()


@router.get("/canned-responses", response_model=list[CannedResponseResponse])
def list_canned_responses(
    ctx: CurrentSession, db: Session = Depends(get_db)
) -> list[CannedResponseResponse]:
    responses = CannedResponseService(db).list_responses(ctx)
    return [CannedResponseResponse.model_validate(r) for r in responses]


@router.post("/canned-responses", response_model=CannedResponseResponse, status_code=201)
def create_canned_response(
    data: CannedResponseCreate,
    ctx: CurrentSession,
    db: Session = Depends(get_db),
) -> CannedResponseResponse:
    response = CannedResponseService(db).create_response(ctx, data)
    return CannedResponseResponse.model_validate(response)


@router.patch("/canned-responses/{response_id}", response_model=CannedResponseResponse)
def update_canned_response(
    response_id: UUID,
    data: CannedResponseUpdate,
    ctx: CurrentSession,
    db: Session = Depends(get_db),
) -> CannedResponseResponse:
    response = CannedResponseService(db).update_response(ctx, response_id, data)
    return CannedResponseResponse.model_validate(response)


@router.delete("/canned-responses/{response_id}", status_code=204)
def delete_canned_response(
    response_id: UUID,
    ctx: CurrentSession,
    db: Session = Depends(get_db),
) -> None:
    CannedResponseService(db).delete_response(ctx, response_id)
