import logging
from uuid import UUID

from sqlalchemy.orm import Session

from app.access.policy import Operation, Resource, authorize
from app.auth.context import SessionContext
from app.canned_responses.models.canned_response import CannedResponse
from app.canned_responses.schemas.canned_response import (
    CannedResponseCreate,
    CannedResponseUpdate,
)
from app.core.exceptions import ValidationError
from app.core.repository import BaseRepository

logger = logging.getLogger(__name__)


class CannedResponseRepository(BaseRepository[CannedResponse]):
    def __init__(self, db: Session) -> None:
        super().__init__(db, CannedResponse, resource="canned_response")

    def list_by_title(self) -> list[CannedResponse]:
        return self.db.query(CannedResponse).order_by(CannedResponse.title).all()


def _require_text(value: str | None, field: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field.capitalize()} is required", field=field)
    return cleaned


class CannedResponseService:
    """Reusable reply templates for agents and managers."""

    def __init__(self, db: Session) -> None:
        self.repo = CannedResponseRepository(db)

    def list_responses(self, ctx: SessionContext) -> list[CannedResponse]:
        authorize(ctx, Operation.READ, Resource.CANNED_RESPONSE)
        return self.repo.list_by_title()

    def create_response(self, ctx: SessionContext, data: CannedResponseCreate) -> CannedResponse:
        authorize(ctx, Operation.CREATE, Resource.CANNED_RESPONSE)
        response = self.repo.create(
            title=_require_text(data.title, "title"),
            content=_require_text(data.content, "content"),
            created_by=ctx.user_id,
        )
        logger.info("canned_response_created", extra={"canned_response_id": str(response.id)})
        return response

    def update_response(
        self, ctx: SessionContext, response_id: UUID, data: CannedResponseUpdate
    ) -> CannedResponse:
        authorize(ctx, Operation.UPDATE, Resource.CANNED_RESPONSE)
        response = self.repo.get_or_404(response_id)
        changes = {
            field: _require_text(value, field)
            for field, value in data.model_dump(exclude_unset=True).items()
        }
        return self.repo.update(response, **changes)

    def delete_response(self, ctx: SessionContext, response_id: UUID) -> None:
        authorize(ctx, Operation.DELETE, Resource.CANNED_RESPONSE)
        self.repo.delete(self.repo.get_or_404(response_id))
        logger.info("canned_response_deleted", extra={"canned_response_id": str(response_id)})
