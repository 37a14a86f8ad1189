"""Passcode helpers for local development; mounted only with OTP_DEBUG on."""

from fastapi import APIRouter, Depends, Query

from docs_admin.dependencies import get_otp_store
from docs_admin.errors import NotFoundError, ValidationError
from docs_admin.schemas.otp import DevOtpRequest
from docs_admin.schemas.users import validate_email
from docs_admin.services.otp import OtpStore, is_expired

router = APIRouter(prefix="/dev", tags=["dev"])


@router.post("/otp")
def create_otp(payload: DevOtpRequest, otps: OtpStore = Depends(get_otp_store)) -> dict:
    record = otps.issue(payload.email, code=payload.code, expiry_minutes=payload.expiry_minutes)
    return {
        "success": True,
        "message": "OTP created successfully",
        "data": {
            "id": record.id,
            "email": record.email,
            "code": record.code,
            "expires_at": record.expires_at,
            "created_at": record.created_at,
        },
    }


@router.get("/otp")
def get_otp(email: str = Query(min_length=3), otps: OtpStore = Depends(get_otp_store)) -> dict:
    try:
        email = validate_email(email)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
    record = otps.current(email)
    if record is None or is_expired(record):
        raise NotFoundError("No valid OTP found for this email")
    return {"success": True, "otp": record.code, "expires_at": record.expires_at}
