"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from collections.abc import Callable
from concurrent.futures import Executor
from datetime import timedelta

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.adapters.smtp import ConsoleEmailSender, SmtpEmailSender
from src.adapters.tokens import JoseTokenSigner
from src.config.settings import get_settings
from src.domain.accounts import AccountLifecycle, AccountService
from src.domain.entities import EntityService
from src.domain.exceptions import Unauthorized
from src.domain.notifications import ActivationNotifier
from src.domain.ports import EmailSender, RecordStore
from src.domain.sessions import SessionService

# Module-level singleton - ConsoleEmailSender is stateless
_console_sender = ConsoleEmailSender()


def get_store(request: Request) -> RecordStore:
    """
    Get the record store from app state.

    The store is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.store


def get_executor(request: Request) -> Executor | None:
    """Thread pool for detached email deliveries, if the lifespan created one."""
    return getattr(request.app.state, "mail_executor", None)


def get_email_sender() -> EmailSender:
    """Email sender for the configured mail backend."""
    settings = get_settings()
    if settings.mail_backend == "smtp":
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            from_email=settings.mail_from_email,
            from_name=settings.mail_from_name,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
        )
    return _console_sender


def get_notifier(
    executor: Executor | None = Depends(get_executor),
    email_sender: EmailSender = Depends(get_email_sender),
) -> ActivationNotifier:
    return ActivationNotifier(
        email_sender=email_sender,
        frontend_url=get_settings().frontend_url,
        executor=executor,
    )


def get_account_lifecycle(
    store: RecordStore = Depends(get_store),
    notifier: ActivationNotifier = Depends(get_notifier),
) -> AccountLifecycle:
    """
    Create the account lifecycle service with injected dependencies.

    Wires together the record store and the activation notifier.
    """
    settings = get_settings()
    return AccountLifecycle(
        store=store,
        notifier=notifier,
        token_ttl=timedelta(hours=settings.activation_ttl_hours),
        token_bytes=settings.activation_token_bytes,
        bcrypt_cost=settings.bcrypt_cost,
    )


def get_account_service(store: RecordStore = Depends(get_store)) -> AccountService:
    return AccountService(store=store, bcrypt_cost=get_settings().bcrypt_cost)


def get_token_signer() -> JoseTokenSigner:
    settings = get_settings()
    return JoseTokenSigner(
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.access_token_expire_minutes,
    )


def get_session_service(
    store: RecordStore = Depends(get_store),
    signer: JoseTokenSigner = Depends(get_token_signer),
) -> SessionService:
    return SessionService(store=store, signer=signer)


def entity_service(service_class: type[EntityService]) -> Callable[..., EntityService]:
    """Build a dependency that binds ``service_class`` to the app's store."""

    def factory(store: RecordStore = Depends(get_store)) -> EntityService:
        return service_class(store=store)

    factory.__name__ = f"get_{service_class.__name__}"
    return factory


# Bearer token security scheme for OpenAPI documentation
bearer_scheme = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """
    Extract the session token from the Authorization header.

    Missing or non-bearer headers are rejected with the same envelope as
    any other Unauthorized error.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Token de acceso requerido")
    return credentials.credentials
