from fastapi import Depends
from sqlalchemy.orm import Session

from app.database.db_connection import get_db

from .deposito_contract import IDepositoContract
from app.api.depositos.adapters.deposito_adapter import DepositoAdapter


def get_deposito_contract(db: Session = Depends(get_db)) -> IDepositoContract:
    return DepositoAdapter(db)
