from .router_zonas import router as router_zonas
from .router_setores import router as router_setores
from .router_precos import router as router_precos
from .router_despacho import router as router_despacho
from .router_entregadores import router as router_entregadores

__all__ = [
    "router_zonas",
    "router_setores",
    "router_precos",
    "router_despacho",
    "router_entregadores",
]
