"""
Vendor notification webhooks
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.core.logging_config import LoggingConfig
from app.core.metrics import sms_updates_total

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(prefix="/api/v3/notifications", tags=["notifications"])

TWILIO_SIGNATURE_HEADER = "x-twilio-signature"


class TwilioSmsWebhookBody(BaseModel):
    """
    SMS delivery status callback sent by Twilio

    Statuses arrive as free-form strings; see
    https://www.twilio.com/docs/usage/webhooks/sms-webhooks.
    """
    model_config = ConfigDict(extra="allow")

    SmsSid: str = Field(..., min_length=1)
    SmsStatus: str = Field(..., min_length=1)
    MessageStatus: str = Field(..., min_length=1)
    To: str = Field(..., min_length=1)
    MessageSid: str = Field(..., min_length=1)
    AccountSid: str = Field(..., min_length=1)
    From: str = Field(..., min_length=1)
    ApiVersion: str = Field(..., min_length=1)
    # Undocumented type, observed to be numeric
    ErrorCode: Optional[int] = None
    ErrorMessage: Optional[str] = Field(None, min_length=1)


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else first.get("msg", "Invalid request")


async def _read_body(request: Request) -> Dict[str, Any]:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Malformed JSON body")
        if not isinstance(body, dict):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Body must be an object")
        return body
    form = await request.form()
    return dict(form)


async def validate_twilio_webhook(request: Request) -> TwilioSmsWebhookBody:
    """
    Dependency checking a request looks like a Twilio SMS status callback:
    the signature header is present and the body carries the delivery fields
    """
    if not request.headers.get(TWILIO_SIGNATURE_HEADER):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{TWILIO_SIGNATURE_HEADER} header is required"
        )

    body = await _read_body(request)
    try:
        return TwilioSmsWebhookBody.model_validate(body)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_validation_message(e))


@router.post("/twilio", response_class=PlainTextResponse)
async def twilio_sms_updates(body: TwilioSmsWebhookBody = Depends(validate_twilio_webhook)):
    """Record an SMS delivery update from Twilio"""
    tags = {
        "accountsid": body.AccountSid,
        "smsstatus": body.SmsStatus,
        "errorcode": "0",
    }
    log_meta = {
        "action": "twilioSmsUpdates",
        "body": body.model_dump(),
    }

    if body.ErrorCode or body.ErrorMessage:
        tags["errorcode"] = str(body.ErrorCode)
        logger.error(
            "Error occurred when attempting to send SMS on twilio",
            extra={"meta": log_meta}
        )
    else:
        logger.info("Sms Delivery update", extra={"meta": log_meta})

    sms_updates_total.labels(**tags).inc()

    return PlainTextResponse("OK", status_code=status.HTTP_200_OK)
