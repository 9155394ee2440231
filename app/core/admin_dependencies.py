# app/core/admin_dependencies.py

from typing import List, Optional

from fastapi import HTTPException, status, Request
from jose import JWTError, jwt
from pydantic import BaseModel

from app.config.settings import SECRET_KEY, ALGORITHM
from app.utils.logger import logger

credentials_exception = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Não autenticado Access",
    headers={"WWW-Authenticate": "Bearer"},
)


class UsuarioAutenticado(BaseModel):
    """Identidade extraída do token; permissões são repassadas sem interpretação."""
    id: str
    nome: Optional[str] = None
    permissoes: List[str] = []


def get_current_user(request: Request) -> UsuarioAutenticado:
    """
    Recupera o usuário autenticado a partir do header Authorization (Bearer <token>).
    """
    # 1. Pega o token do header Authorization
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        logger.warning("[AUTH] Cabeçalho Authorization ausente ou malformado.")
        raise credentials_exception

    if not SECRET_KEY:
        logger.error("[AUTH] SECRET_KEY não configurada.")
        raise credentials_exception

    access_token = auth_header.replace("Bearer ", "")

    # 2. Decodifica o JWT
    try:
        payload = jwt.decode(
            access_token,
            SECRET_KEY,
            algorithms=[ALGORITHM],
            options={"verify_sub": False},
        )
    except JWTError as e:
        logger.error(f"[AUTH] Erro ao decodificar JWT: {e}")
        raise credentials_exception

    raw_sub = payload.get("sub")
    if raw_sub is None:
        raise credentials_exception

    return UsuarioAutenticado(
        id=str(raw_sub),
        nome=payload.get("nome"),
        permissoes=list(payload.get("permissoes") or []),
    )
