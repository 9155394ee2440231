import uuid
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

TZ_SP = ZoneInfo('America/Sao_Paulo')


def now_trimmed():
    """Retorna datetime atual em timezone de São Paulo, sem microsegundos"""
    return datetime.now(TZ_SP).replace(microsecond=0)


def agora():
    """Datetime atual em São Paulo com microssegundos (ordenação de fila e presença)."""
    return datetime.now(TZ_SP)


def as_aware(value: Optional[datetime]) -> Optional[datetime]:
    """Bancos sem suporte a timezone (SQLite) devolvem datetime ingênuo; assume São Paulo."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=TZ_SP)
    return value


def gerar_id() -> str:
    return str(uuid.uuid4())
