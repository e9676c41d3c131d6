# agenda/db/models.py
from datetime import date, datetime
from sqlalchemy import Boolean, Date, DateTime, Integer, Text, false, func
from sqlalchemy.orm import Mapped, mapped_column
from agenda.db.base import Base


class TimestampMixin:
    criado_em: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.current_timestamp(), nullable=False
    )
    atualizado_em: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.current_timestamp(),
        onupdate=func.current_timestamp(),
        nullable=False,
    )


class Contato(Base, TimestampMixin):
    __tablename__ = "contato"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, index=True)
    nome: Mapped[str] = mapped_column(Text, nullable=False)
    sobrenome: Mapped[str | None] = mapped_column(Text)
    data_nascimento: Mapped[date | None] = mapped_column(Date)
    telefone: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    familia: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false(), nullable=False)
