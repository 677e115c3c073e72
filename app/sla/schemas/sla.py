from pydantic import BaseModel, Field, model_validator

from app.tickets.models.ticket import TicketPriority


class SlaTargetResponse(BaseModel):
    priority: TicketPriority
    response_time_hours: int
    resolution_time_hours: int

    class Config:
        from_attributes = True


class SlaTargetUpdate(BaseModel):
    response_time_hours: int | None = Field(None, gt=0, le=24 * 365)
    resolution_time_hours: int | None = Field(None, gt=0, le=24 * 365)

    @model_validator(mode="after")
    def _at_least_one(self) -> "SlaTargetUpdate":
        if self.response_time_hours is None and self.resolution_time_hours is None:
            raise ValueError("Provide response_time_hours or resolution_time_hours")
        return self
