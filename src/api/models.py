"""
API request and response models.

Pydantic models for the identity endpoints and the uniform response
envelope shared by every endpoint.
"""

from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, model_validator
from pydantic.alias_generators import to_camel

from src.domain.ports import UserRole

# Passwords are taken verbatim, surrounding whitespace included
Password = Annotated[str, StringConstraints(strip_whitespace=False, min_length=6)]
LoginPassword = Annotated[str, StringConstraints(strip_whitespace=False, min_length=1)]


class ServiceResponse(BaseModel):
    """
    Uniform response envelope.

    Serialised with camelCase keys: statusCode, message, success, data.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status_code: int
    message: str
    success: bool
    data: Any = None


def respond(data: Any, message: str, status_code: int = 200) -> ServiceResponse:
    return ServiceResponse(status_code=status_code, message=message, success=True, data=data)


class RequestModel(BaseModel):
    """Base for request bodies."""

    model_config = ConfigDict(use_enum_values=True, str_strip_whitespace=True)


class PartialUpdate(RequestModel):
    """
    Base for PATCH bodies.

    Only fields the client sent are applied. Explicit null is accepted
    only for fields listed in ``nullable`` (optional relations and
    optional attributes).
    """

    nullable: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def _reject_null_for_required(self) -> "PartialUpdate":
        for name in self.model_fields_set:
            if getattr(self, name) is None and name not in self.nullable:
                raise ValueError(f"{name} no admite null")
        return self

    def changes(self) -> dict[str, Any]:
        """Fields explicitly supplied by the client, None included."""
        return self.model_dump(exclude_unset=True)


class PreRegisterVoterRequest(RequestModel):
    """Request model for voter pre-registration."""

    name: str = Field(..., min_length=1, description="Nombre completo del votante")
    document_number: str = Field(..., min_length=1, description="Número de documento (DNI)")
    voting_table_id: int | None = Field(None, description="Mesa de votación asignada")


class RegisterEmailRequest(RequestModel):
    """Request model for binding an email to a pre-registered voter."""

    document_number: str = Field(..., min_length=1)
    email: EmailStr


class ActivateAccountRequest(RequestModel):
    """Request model for account activation."""

    token: str = Field(..., min_length=1, description="Token de activación enviado por correo")
    password: Password = Field(..., description="Nueva contraseña (mínimo 6 caracteres)")


class LoginRequest(RequestModel):
    email: EmailStr
    password: LoginPassword


class CreateUserRequest(RequestModel):
    """
    Request model for administrative account creation.

    With a password the account starts active; without one it starts
    pre-registered.
    """

    name: str = Field(..., min_length=1)
    email: EmailStr | None = None
    password: Password | None = None
    role: UserRole | None = None


class UpdateUserRequest(PartialUpdate):
    name: str | None = Field(None, min_length=1)
    email: EmailStr | None = None
    password: Password | None = None
    role: UserRole | None = None
