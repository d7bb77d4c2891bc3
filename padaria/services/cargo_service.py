# padaria/services/cargo_service.py

import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import crud, models, schemas
from ..core.errors import BusinessRuleError, NotFoundError

logger = logging.getLogger(__name__)

MSG_DUPLICADO = "Já existe um cargo com este nome"


class CargoService:
    def __init__(self, db: Session):
        self.db = db

    def listar(self) -> List[models.Cargo]:
        return crud.cargo.get_multi(self.db)

    def buscar(self, cargo_id: int) -> models.Cargo:
        cargo = crud.cargo.get(self.db, cargo_id)
        if not cargo:
            raise NotFoundError("Cargo não encontrado")
        return cargo

    def criar(self, dados: schemas.CargoCreate) -> models.Cargo:
        if crud.cargo.get_by_nome(self.db, nome=dados.nome_cargo):
            raise BusinessRuleError(MSG_DUPLICADO)
        try:
            return crud.cargo.create(self.db, obj_in=dados)
        except IntegrityError:
            self.db.rollback()
            raise BusinessRuleError(MSG_DUPLICADO)

    def atualizar(self, cargo_id: int, dados: schemas.CargoUpdate) -> models.Cargo:
        cargo = self.buscar(cargo_id)
        existente = crud.cargo.get_by_nome(self.db, nome=dados.nome_cargo)
        if existente and existente.id != cargo_id:
            raise BusinessRuleError(MSG_DUPLICADO)
        try:
            return crud.cargo.update(self.db, db_obj=cargo, obj_in=dados)
        except IntegrityError:
            self.db.rollback()
            raise BusinessRuleError(MSG_DUPLICADO)

    def deletar(self, cargo_id: int) -> None:
        cargo = self.buscar(cargo_id)
        total = crud.cargo.count_funcionarios(self.db, cargo_id=cargo_id)
        if total > 0:
            raise BusinessRuleError(
                f"Não é possível deletar. Existem {total} funcionário(s) vinculado(s) a este cargo."
            )
        crud.cargo.remove(self.db, db_obj=cargo)
        logger.info("Cargo %s removido", cargo_id)
