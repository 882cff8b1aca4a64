"""API router for registration and login."""

from fastapi import APIRouter, Depends, HTTPException, status

from ....application.services.account_service import AccountService
from ....core.dependencies import get_account_service
from ....domain.errors import EmailAlreadyRegisteredError, InvalidCredentialsError, UpstreamError
from ....domain.models import Identity
from ..schemas.account_schemas import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    UserResponse,
)

router = APIRouter(tags=["accounts"])

INVALID_CREDENTIALS = "Invalid email or password. Please register first."


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    account_service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    """Register a new user."""
    try:
        await account_service.register(
            full_name=request.full_name,
            username=request.username,
            email=request.email,
            phone=request.phone,
            address=request.address,
            password=request.password,
        )
    except EmailAlreadyRegisteredError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered") from exc
    except UpstreamError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Error registering user") from exc

    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    account_service: AccountService = Depends(get_account_service),
) -> LoginResponse:
    """Check credentials and return the profile without its password hash."""
    try:
        identity = await account_service.authenticate(request.email, request.password)
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_CREDENTIALS) from exc
    except UpstreamError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error") from exc

    return LoginResponse(message="Login successful", user=serialize_identity(identity))


def serialize_identity(identity: Identity) -> UserResponse:
    return UserResponse(
        id=identity.id,
        full_name=identity.full_name,
        username=identity.username,
        email=identity.email,
        phone=identity.phone,
        address=identity.address,
        created_at=identity.created_at,
    )
