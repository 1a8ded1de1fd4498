from pydantic import field_validator

from skillshub.schemas.base import RequestModel


class SendMessageRequest(RequestModel):
    message: str

    @field_validator("message")
    @classmethod
    def non_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Message is required")
        if len(v) > 5000:
            raise ValueError("Message must be less than 5000 characters")
        return v


class NotificationUpdate(RequestModel):
    notification_id: int | None = None
    read: bool = True
