from fastapi import APIRouter, Depends, HTTPException, status

from ....application.services.contact_service import ContactService
from ....core.dependencies import get_contact_service
from ....domain.errors import UpstreamError
from ..schemas.account_schemas import MessageResponse
from ..schemas.contact_schemas import ContactPayload

router = APIRouter(tags=["contact"])


@router.post("/contact", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def submit_contact(
    payload: ContactPayload,
    contact_service: ContactService = Depends(get_contact_service),
) -> MessageResponse:
    try:
        await contact_service.submit(payload.name, payload.email, payload.message)
    except UpstreamError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error saving message") from exc

    return MessageResponse(message="Message sent successfully!")
