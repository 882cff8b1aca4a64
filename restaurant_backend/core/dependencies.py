from fastapi import Depends, HTTPException, Request, status

from .container import ApplicationContainer


def get_container(request: Request) -> ApplicationContainer:
    container = getattr(request.app.state, "container", None)
    if not container:
        raise RuntimeError("Application container not initialised.")
    return container


def get_account_service(container: ApplicationContainer = Depends(get_container)):
    return container.account_service


def get_contact_service(container: ApplicationContainer = Depends(get_container)):
    return container.contact_service


def get_otp_service(container: ApplicationContainer = Depends(get_container)):
    if container.otp_service is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Password reset is not enabled")
    return container.otp_service
