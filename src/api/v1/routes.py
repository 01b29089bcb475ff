"""
API v1 identity routes.

Pre-registration, email binding, activation, session login and the
current-account profile.
"""

from fastapi import APIRouter, Depends, Path, status
from pydantic import EmailStr

from src.api.dependencies import (
    get_account_lifecycle,
    get_bearer_token,
    get_session_service,
)
from src.api.models import (
    ActivateAccountRequest,
    LoginRequest,
    PreRegisterVoterRequest,
    RegisterEmailRequest,
    ServiceResponse,
    respond,
)
from src.domain.accounts import AccountLifecycle
from src.domain.sessions import SessionService

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ServiceResponse, "description": "Invalid activation flow"},
    404: {"model": ServiceResponse, "description": "Referenced record not found"},
    409: {"model": ServiceResponse, "description": "Uniqueness violated"},
    422: {"model": ServiceResponse, "description": "Validation error"},
}


@router.post(
    "/voters/pre-register",
    response_model=ServiceResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    tags=["voters"],
    summary="Pre-register a voter",
    description="Create a voter profile and a placeholder account with no email or password.",
)
def pre_register_voter(
    request_data: PreRegisterVoterRequest,
    lifecycle: AccountLifecycle = Depends(get_account_lifecycle),
) -> ServiceResponse:
    """
    Pre-register a voter by document number.

    - **name**: Full name
    - **document_number**: National identity document
    - **voting_table_id**: Optional assigned voting table
    """
    voter = lifecycle.pre_register(
        request_data.name,
        request_data.document_number,
        request_data.voting_table_id,
    )
    return respond(
        voter,
        "Votante pre-registrado correctamente. Debe activar su cuenta con email.",
        status.HTTP_201_CREATED,
    )


@router.post(
    "/users/register-email",
    response_model=ServiceResponse,
    responses=ERROR_RESPONSES,
    tags=["users"],
    summary="Bind an email to a pre-registered voter",
    description="Stores the email and sends an activation link valid for 24 hours.",
)
def register_email(
    request_data: RegisterEmailRequest,
    lifecycle: AccountLifecycle = Depends(get_account_lifecycle),
) -> ServiceResponse:
    data = lifecycle.register_email(request_data.document_number, request_data.email)
    return respond(
        data,
        "Correo registrado. Se ha enviado un enlace de activación (válido por 24 horas).",
    )


@router.post(
    "/users/activate-account",
    response_model=ServiceResponse,
    responses=ERROR_RESPONSES,
    tags=["users"],
    summary="Activate account with activation token",
)
def activate_account(
    request_data: ActivateAccountRequest,
    lifecycle: AccountLifecycle = Depends(get_account_lifecycle),
) -> ServiceResponse:
    """
    Redeem the emailed activation token and set the password.

    - **token**: Activation token from the email link
    - **password**: New password (minimum 6 characters)
    """
    account = lifecycle.activate_account(request_data.token, request_data.password)
    return respond(account, "Cuenta activada correctamente. Ya puede iniciar sesión.")


@router.post(
    "/users/resend-activation/{email}",
    response_model=ServiceResponse,
    responses=ERROR_RESPONSES,
    tags=["users"],
    summary="Reissue the activation token",
)
def resend_activation(
    email: EmailStr = Path(..., description="Correo de la cuenta pendiente de activación"),
    lifecycle: AccountLifecycle = Depends(get_account_lifecycle),
) -> ServiceResponse:
    data = lifecycle.resend_activation_token(email)
    return respond(data, "Se ha reenviado el enlace de activación a su correo.")


@router.post(
    "/auth/login",
    response_model=ServiceResponse,
    responses={
        401: {"model": ServiceResponse, "description": "Invalid credentials"},
        422: {"model": ServiceResponse, "description": "Validation error"},
    },
    tags=["auth"],
    summary="Log in with email and password",
)
def login(
    request_data: LoginRequest,
    sessions: SessionService = Depends(get_session_service),
) -> ServiceResponse:
    """
    Verify credentials and issue a bearer token.

    All failures (unknown email, inactive account, wrong password) return
    the same 401 response.
    """
    data = sessions.login(request_data.email, request_data.password)
    return respond(data, "Inicio de sesión exitoso")


@router.get(
    "/auth/profile",
    response_model=ServiceResponse,
    responses={401: {"model": ServiceResponse, "description": "Missing or invalid session"}},
    tags=["auth"],
    summary="Current account",
)
def profile(
    token: str = Depends(get_bearer_token),
    sessions: SessionService = Depends(get_session_service),
) -> ServiceResponse:
    return respond(sessions.current_account(token), "Perfil obtenido correctamente")
