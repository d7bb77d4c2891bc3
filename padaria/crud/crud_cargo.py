# padaria/crud/crud_cargo.py

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from .base import CRUDBase
from ..models import Cargo, Funcionario
from ..schemas import CargoCreate, CargoUpdate


class CRUDCargo(CRUDBase[Cargo, CargoCreate, CargoUpdate]):
    order_by = "nome_cargo"

    def get_by_nome(self, db: Session, *, nome: str) -> Optional[Cargo]:
        """Busca sem diferenciar maiúsculas e minúsculas."""
        return db.query(Cargo).filter(func.lower(Cargo.nome_cargo) == nome.lower()).first()

    def count_funcionarios(self, db: Session, *, cargo_id: int) -> int:
        return db.query(Funcionario).filter(Funcionario.id_cargo == cargo_id).count()


cargo = CRUDCargo(Cargo)
