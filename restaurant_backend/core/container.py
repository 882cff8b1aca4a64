from dataclasses import dataclass
from typing import Optional

from ..application.services.account_service import AccountService
from ..application.services.contact_service import ContactService
from ..application.services.otp_service import Clock, OtpService, utcnow
from ..domain.ports.persistence import ContactRepository, IdentityRepository, Notifier
from ..infrastructure.persistence.mongo import MongoPersistence
from ..services.password_hasher import PasswordHasher
from .config import Settings


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    identity_repository: IdentityRepository
    contact_repository: ContactRepository
    password_hasher: PasswordHasher
    account_service: AccountService
    contact_service: ContactService
    otp_service: Optional[OtpService] = None
    notifier: Optional[Notifier] = None
    persistence: Optional[MongoPersistence] = None


def build_container(
    settings: Settings,
    *,
    identity_repository: IdentityRepository,
    contact_repository: ContactRepository,
    notifier: Optional[Notifier] = None,
    persistence: Optional[MongoPersistence] = None,
    clock: Clock = utcnow,
) -> ApplicationContainer:
    """Wire the services around already constructed adapters."""
    password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)

    otp_service = None
    if settings.password_reset_enabled:
        if notifier is None:
            raise RuntimeError("Password reset is enabled but no notifier was configured.")
        otp_service = OtpService(
            identity_repository,
            notifier,
            expiry_minutes=settings.otp_expiry_minutes,
            cooldown_seconds=settings.otp_cooldown_seconds,
            clock=clock,
        )

    return ApplicationContainer(
        settings=settings,
        identity_repository=identity_repository,
        contact_repository=contact_repository,
        password_hasher=password_hasher,
        account_service=AccountService(identity_repository, password_hasher, otp_service),
        contact_service=ContactService(contact_repository),
        otp_service=otp_service,
        notifier=notifier,
        persistence=persistence,
    )
