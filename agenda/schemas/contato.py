from __future__ import annotations
from datetime import date, datetime
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


def parse_data_nascimento(value: Any) -> Optional[date]:
    """Convert an incoming birth date into a `date`.

    Accepts ``YYYY-MM-DD`` or a full ISO-8601 datetime (the date part is
    kept). Falsy values mean "no date" and return None.
    """

    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError("data_nascimento deve ser uma data ISO (AAAA-MM-DD)")
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        raise ValueError(f"data_nascimento inválida: {value!r}") from None


class _ContatoPayload(BaseModel):
    """Campos graváveis de um contato; todos opcionais no nível do schema."""

    nome: Optional[str] = None
    sobrenome: Optional[str] = None
    data_nascimento: Optional[date] = None
    telefone: Optional[str] = None
    familia: Optional[bool] = None

    @field_validator("data_nascimento", mode="before")
    @classmethod
    def parse_data(cls, value: Any) -> Optional[date]:
        return parse_data_nascimento(value)


class ContatoCreate(_ContatoPayload):
    """Payload for `POST /contacts`.

    Presence of ``nome`` and ``telefone`` is checked by the service so a
    missing field answers 400 rather than a schema error.
    """


class ContatoUpdate(_ContatoPayload):
    """Partial payload for `PUT /contacts/{id}`.

    A field is either unset (absent from ``model_fields_set``) or carries a
    value; only set fields are applied.
    """

    def changes(self) -> dict[str, Any]:
        """Return the fields the client actually sent."""

        return {field: getattr(self, field) for field in self.model_fields_set}


class ContatoOut(BaseModel):
    """Public representation of a Contato.

    Attributes:
        id: Unique identifier.
        nome: First name.
        sobrenome: Surname.
        data_nascimento: Birth date.
        telefone: Phone number.
        familia: Family flag.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    nome: str
    sobrenome: Optional[str]
    data_nascimento: Optional[date]
    telefone: str
    familia: bool
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Mensagem legível do erro")
