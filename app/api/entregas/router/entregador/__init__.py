from .router_entregador import router as router_entregador

__all__ = ["router_entregador"]
