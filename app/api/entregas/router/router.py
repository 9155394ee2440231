# app/api/entregas/router/router.py

from fastapi import APIRouter

from app.api.entregas.router.admin import (
    router_zonas,
    router_setores,
    router_precos,
    router_despacho,
    router_entregadores,
)
from app.api.entregas.router.entregador import router_entregador

api_entregas = APIRouter(
    tags=["API - Entregas"]
)

# Routers para admin (usam get_current_user)
api_entregas.include_router(router_zonas)
api_entregas.include_router(router_setores)
api_entregas.include_router(router_precos)
api_entregas.include_router(router_despacho)
api_entregas.include_router(router_entregadores)

# App do entregador
api_entregas.include_router(router_entregador)
