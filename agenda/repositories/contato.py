from __future__ import annotations
from datetime import date
from typing import Any, Dict, List, NoReturn, Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.db.errors import RecordNotFound, StorageFailure, UniqueViolation
from agenda.db.models import Contato

# Colunas de `contato` protegidas por restrição de unicidade
UNIQUE_FIELDS = ("telefone",)


async def _raise_storage_error(session: AsyncSession, exc: SQLAlchemyError) -> NoReturn:
    """Roll back and re-raise ``exc`` as one of the `StorageError` variants."""

    await session.rollback()
    if isinstance(exc, IntegrityError):
        message = str(exc.orig)
        lowered = message.lower()
        if "unique" in lowered or "duplicate" in lowered:
            fields = tuple(field for field in UNIQUE_FIELDS if field in lowered)
            raise UniqueViolation(fields, message) from exc
    raise StorageFailure(f"{exc.__class__.__name__}: {exc}") from exc


class ContatoRepository:
    """Repository for `Contato` operations.

    Every method raises `UniqueViolation`, `RecordNotFound` or `StorageFailure`
    instead of raw SQLAlchemy errors.
    """

    async def create(
        self,
        session: AsyncSession,
        nome: str,
        telefone: str,
        sobrenome: Optional[str] = None,
        data_nascimento: Optional[date] = None,
        familia: bool = False,
    ) -> Contato:
        """Create a new `Contato`.

        Args:
            session: Async database session.
            nome: First name.
            telefone: Phone number, unique across contacts.
            sobrenome: Surname.
            data_nascimento: Birth date.
            familia: Family flag.

        Returns:
            Contato: Persisted entity with its generated id.
        """

        entity = Contato(
            nome=nome,
            sobrenome=sobrenome,
            data_nascimento=data_nascimento,
            telefone=telefone,
            familia=familia,
        )
        try:
            session.add(entity)
            await session.flush()
            await session.refresh(entity)
        except SQLAlchemyError as exc:
            await _raise_storage_error(session, exc)
        return entity

    async def list_all(self, session: AsyncSession) -> List[Contato]:
        stmt = select(Contato).order_by(Contato.id)
        try:
            res = await session.execute(stmt)
        except SQLAlchemyError as exc:
            await _raise_storage_error(session, exc)
        return list(res.scalars().all())

    async def get_by_id(self, session: AsyncSession, contato_id: Optional[int]) -> Optional[Contato]:
        """Fetch `Contato` by id; a missing id never matches."""

        if contato_id is None:
            return None
        stmt = select(Contato).where(Contato.id == contato_id)
        try:
            res = await session.execute(stmt)
        except SQLAlchemyError as exc:
            await _raise_storage_error(session, exc)
        return res.scalar_one_or_none()

    async def update(self, session: AsyncSession, contato_id: Optional[int], changes: Dict[str, Any]) -> Contato:
        """Apply ``changes`` to an existing `Contato`.

        Only keys present in ``changes`` are written; ``id`` can never change.
        """

        entity = await self.get_by_id(session, contato_id)
        if entity is None:
            raise RecordNotFound(Contato.__tablename__, contato_id)
        for field, value in changes.items():
            if field == "id":
                continue
            setattr(entity, field, value)
        try:
            await session.flush()
            await session.refresh(entity)
        except SQLAlchemyError as exc:
            await _raise_storage_error(session, exc)
        return entity

    async def delete(self, session: AsyncSession, contato_id: Optional[int]) -> None:
        entity = await self.get_by_id(session, contato_id)
        if entity is None:
            raise RecordNotFound(Contato.__tablename__, contato_id)
        try:
            await session.delete(entity)
            await session.flush()
        except SQLAlchemyError as exc:
            await _raise_storage_error(session, exc)
