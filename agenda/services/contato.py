from __future__ import annotations
import logging
from typing import List, NoReturn, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.core.exceptions import (
    ConflictError,
    ErrorHandler,
    InternalError,
    NotFoundError,
    ValidationError,
)
from agenda.db.errors import RecordNotFound, StorageError, UniqueViolation
from agenda.db.models import Contato
from agenda.repositories.contato import ContatoRepository
from agenda.schemas.contato import ContatoCreate, ContatoUpdate

logger = logging.getLogger(__name__)

MSG_OBRIGATORIOS = "Nome e telefone são obrigatórios."


def _translate(
    exc: StorageError,
    *,
    interno: str,
    conflito: Optional[str] = None,
    nao_encontrado: Optional[str] = None,
) -> NoReturn:
    """Map a storage failure onto the business error taxonomy.

    Unique violations on ``telefone`` become `ConflictError`, missing records
    become `NotFoundError`; everything else is an `InternalError` whose cause
    is kept for logging only.
    """

    if conflito and isinstance(exc, UniqueViolation) and "telefone" in exc.fields:
        raise ConflictError(conflito, {"fields": list(exc.fields)}) from exc
    if nao_encontrado and isinstance(exc, RecordNotFound):
        raise NotFoundError(nao_encontrado, {"id": exc.record_id}) from exc
    raise InternalError(interno) from exc


class ContatoService:
    def __init__(self) -> None:
        self.repo = ContatoRepository()

    async def create(self, session: AsyncSession, payload: ContatoCreate) -> Contato:
        ErrorHandler.validate_required_fields(
            payload.model_dump(), ["nome", "telefone"], message=MSG_OBRIGATORIOS
        )
        try:
            contato = await self.repo.create(
                session=session,
                nome=payload.nome,
                sobrenome=payload.sobrenome,
                data_nascimento=payload.data_nascimento,
                telefone=payload.telefone,
                familia=payload.familia if payload.familia is not None else False,
            )
        except StorageError as exc:
            _translate(
                exc,
                conflito="Já existe um contato com este telefone.",
                interno="Erro interno ao criar contato.",
            )
        logger.info("Contato %s criado", contato.id)
        return contato

    async def list_all(self, session: AsyncSession) -> List[Contato]:
        try:
            return await self.repo.list_all(session)
        except StorageError as exc:
            _translate(
                exc,
                interno="Erro interno ao buscar contatos.",
            )

    async def get(self, session: AsyncSession, contato_id: Optional[int]) -> Contato:
        try:
            contato = await self.repo.get_by_id(session, contato_id)
        except StorageError as exc:
            _translate(
                exc,
                nao_encontrado="Contato não encontrado.",
                interno="Erro interno ao buscar contato.",
            )
        if contato is None:
            raise NotFoundError("Contato não encontrado.", {"id": contato_id})
        return contato

    async def update(self, session: AsyncSession, contato_id: Optional[int], payload: ContatoUpdate) -> Contato:
        changes = payload.changes()
        # Ausente, nulo ou vazio: mantém a data atual
        if changes.get("data_nascimento") is None:
            changes.pop("data_nascimento", None)
        # Coluna não nula; nulo explícito equivale a não alterar
        if "familia" in changes and changes["familia"] is None:
            changes.pop("familia")
        blank = [field for field in ("nome", "telefone") if field in changes and not changes[field]]
        if blank:
            raise ValidationError(
                "Nome e telefone não podem ficar vazios.", {"missing_fields": blank}
            )
        try:
            contato = await self.repo.update(session, contato_id, changes)
        except StorageError as exc:
            _translate(
                exc,
                conflito="Já existe outro contato com este telefone.",
                nao_encontrado="Contato não encontrado para atualização.",
                interno="Erro interno ao atualizar contato.",
            )
        logger.info("Contato %s atualizado: %s", contato.id, sorted(changes))
        return contato

    async def delete(self, session: AsyncSession, contato_id: Optional[int]) -> None:
        try:
            await self.repo.delete(session, contato_id)
        except StorageError as exc:
            _translate(
                exc,
                nao_encontrado="Contato não encontrado para exclusão.",
                interno="Erro interno ao deletar contato.",
            )
        logger.info("Contato %s removido", contato_id)
