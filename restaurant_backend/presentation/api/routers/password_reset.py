from fastapi import APIRouter, Depends, HTTPException, status

from ....application.services.account_service import AccountService
from ....application.services.otp_service import OtpService
from ....core.dependencies import get_account_service, get_otp_service
from ....domain.errors import (
    AccountError,
    AccountNotFoundError,
    InvalidOtpError,
    OtpExpiredError,
    OtpThrottledError,
)
from ..schemas.account_schemas import MessageResponse
from ..schemas.password_reset_schemas import (
    EmailPayload,
    OtpIssuedResponse,
    ResetPasswordPayload,
    VerifyOtpPayload,
)

router = APIRouter(tags=["password reset"])


@router.post("/forgot-password", response_model=OtpIssuedResponse)
async def forgot_password(
    payload: EmailPayload,
    otp_service: OtpService = Depends(get_otp_service),
) -> OtpIssuedResponse:
    try:
        issued = await otp_service.issue(payload.email)
    except AccountNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found") from exc
    except OtpThrottledError as exc:
        raise _throttled(exc) from exc
    except AccountError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error sending OTP") from exc

    return OtpIssuedResponse(message="OTP sent to your email", cooldown=issued.cooldown_seconds)


@router.post("/resend-otp", response_model=OtpIssuedResponse)
async def resend_otp(
    payload: EmailPayload,
    otp_service: OtpService = Depends(get_otp_service),
) -> OtpIssuedResponse:
    try:
        issued = await otp_service.issue(payload.email)
    except OtpThrottledError as exc:
        raise _throttled(exc) from exc
    except AccountError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error resending OTP") from exc

    return OtpIssuedResponse(message="OTP resent to your email", cooldown=issued.cooldown_seconds)


@router.post("/verify-otp", response_model=MessageResponse)
async def verify_otp(
    payload: VerifyOtpPayload,
    otp_service: OtpService = Depends(get_otp_service),
) -> MessageResponse:
    try:
        await otp_service.validate(payload.email, payload.otp)
    except OtpExpiredError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="OTP has expired") from exc
    except InvalidOtpError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid OTP") from exc
    except AccountError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error") from exc

    return MessageResponse(message="OTP verified successfully")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    payload: ResetPasswordPayload,
    account_service: AccountService = Depends(get_account_service),
    _: OtpService = Depends(get_otp_service),
) -> MessageResponse:
    try:
        await account_service.reset_password(payload.email, payload.password, payload.otp)
    except AccountNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found") from exc
    except OtpExpiredError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="OTP has expired") from exc
    except InvalidOtpError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid OTP") from exc
    except AccountError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error") from exc

    return MessageResponse(message="Password reset successfully")


def _throttled(exc: OtpThrottledError) -> HTTPException:
    # Throttling is reported as a server error; the body says how long to wait.
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "message": f"Please wait {exc.retry_after} seconds before requesting a new OTP",
            "retryAfter": exc.retry_after,
        },
        headers={"Retry-After": str(exc.retry_after)},
    )
