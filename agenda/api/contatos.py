from __future__ import annotations
import logging
import re
from typing import List, NoReturn, Optional
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.core.exceptions import BusinessLogicError, InternalError, business_exception_to_http
from agenda.db.session import get_db
from agenda.schemas.contato import ContatoCreate, ContatoOut, ContatoUpdate, ErrorResponse
from agenda.services.contato import ContatoService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/contacts", tags=["contatos"])

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

# Faixa de um INTEGER com sinal de 64 bits (SQLite, BIGINT)
ID_MIN, ID_MAX = -(2 ** 63), 2 ** 63 - 1


def parse_id(raw: str) -> Optional[int]:
    """Read the leading integer of a path segment; None when there is none.

    ``"12"`` and ``"12abc"`` both give 12. ``"abc"`` and values outside the
    64-bit integer range give None, which never matches a stored contact.
    """

    match = _LEADING_INT.match(raw)
    if not match:
        return None
    value = int(match.group(1))
    return value if ID_MIN <= value <= ID_MAX else None


def _raise_http(exc: BusinessLogicError, action: str) -> NoReturn:
    if isinstance(exc, InternalError):
        logger.exception("Erro ao %s: %s", action, exc)
    else:
        logger.warning("Falha ao %s: %s", action, exc.message)
    raise business_exception_to_http(exc)


@router.post(
    "",
    response_model=ContatoOut,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Nome ou telefone ausente"},
        409: {"model": ErrorResponse, "description": "Telefone já cadastrado"},
        500: {"model": ErrorResponse, "description": "Erro interno"},
    },
    summary="Cria um novo contato",
)
async def create_contato(
    payload: ContatoCreate,
    session: AsyncSession = Depends(get_db),
) -> ContatoOut:
    try:
        contato = await ContatoService().create(session, payload)
        await session.commit()
        return ContatoOut.model_validate(contato)
    except BusinessLogicError as e:
        _raise_http(e, "criar contato")
    except Exception as e:
        logger.exception("Erro ao criar contato: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erro interno ao criar contato.",
        )


@router.get(
    "",
    response_model=List[ContatoOut],
    responses={500: {"model": ErrorResponse, "description": "Erro interno"}},
    summary="Lista todos os contatos",
)
async def list_contatos(session: AsyncSession = Depends(get_db)) -> List[ContatoOut]:
    try:
        contatos = await ContatoService().list_all(session)
        return [ContatoOut.model_validate(c) for c in contatos]
    except BusinessLogicError as e:
        _raise_http(e, "buscar contatos")
    except Exception as e:
        logger.exception("Erro ao buscar contatos: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erro interno ao buscar contatos.",
        )


@router.get(
    "/{contato_id}",
    response_model=ContatoOut,
    responses={
        404: {"model": ErrorResponse, "description": "Contato não encontrado"},
        500: {"model": ErrorResponse, "description": "Erro interno"},
    },
    summary="Obtém um contato específico",
)
async def get_contato(contato_id: str, session: AsyncSession = Depends(get_db)) -> ContatoOut:
    try:
        contato = await ContatoService().get(session, parse_id(contato_id))
        return ContatoOut.model_validate(contato)
    except BusinessLogicError as e:
        _raise_http(e, "buscar contato por ID")
    except Exception as e:
        logger.exception("Erro ao buscar contato por ID: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erro interno ao buscar contato.",
        )


@router.put(
    "/{contato_id}",
    response_model=ContatoOut,
    responses={
        400: {"model": ErrorResponse, "description": "Nome ou telefone vazio"},
        404: {"model": ErrorResponse, "description": "Contato não encontrado"},
        409: {"model": ErrorResponse, "description": "Telefone já cadastrado em outro contato"},
        500: {"model": ErrorResponse, "description": "Erro interno"},
    },
    summary="Atualiza um contato existente",
)
async def update_contato(
    contato_id: str,
    payload: Optional[ContatoUpdate] = None,
    session: AsyncSession = Depends(get_db),
) -> ContatoOut:
    try:
        # Sem corpo equivale a {}: nada muda
        contato = await ContatoService().update(session, parse_id(contato_id), payload if payload is not None else ContatoUpdate())
        await session.commit()
        return ContatoOut.model_validate(contato)
    except BusinessLogicError as e:
        _raise_http(e, "atualizar contato")
    except Exception as e:
        logger.exception("Erro ao atualizar contato: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erro interno ao atualizar contato.",
        )


@router.delete(
    "/{contato_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        404: {"model": ErrorResponse, "description": "Contato não encontrado"},
        500: {"model": ErrorResponse, "description": "Erro interno"},
    },
    summary="Deleta um contato",
)
async def delete_contato(contato_id: str, session: AsyncSession = Depends(get_db)) -> Response:
    try:
        await ContatoService().delete(session, parse_id(contato_id))
        await session.commit()
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except BusinessLogicError as e:
        _raise_http(e, "deletar contato")
    except Exception as e:
        logger.exception("Erro ao deletar contato: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erro interno ao deletar contato.",
        )
