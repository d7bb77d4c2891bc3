# padaria/services/tipo_produto_service.py

import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import crud, models, schemas
from ..core.errors import BusinessRuleError, NotFoundError

logger = logging.getLogger(__name__)


class TipoProdutoService:
    def __init__(self, db: Session):
        self.db = db

    def listar(self) -> List[models.TipoProduto]:
        return crud.tipo_produto.get_multi(self.db)

    def buscar(self, tipo_id: int) -> models.TipoProduto:
        tipo = crud.tipo_produto.get(self.db, tipo_id)
        if not tipo:
            raise NotFoundError("Tipo de produto não encontrado")
        return tipo

    def _verificar_duplicado(self, nome_tipo: str, tipo_id: int = None) -> None:
        existente = crud.tipo_produto.get_by_nome(self.db, nome_tipo=nome_tipo)
        if existente and existente.id != tipo_id:
            raise BusinessRuleError("Tipo de produto já existe")

    def criar(self, dados: schemas.TipoProdutoCreate) -> models.TipoProduto:
        # Nomes de tipo são guardados sempre em minúsculas
        nome_tipo = dados.nome_tipo.lower()
        self._verificar_duplicado(nome_tipo)
        try:
            return crud.tipo_produto.create(self.db, obj_in={"nome_tipo": nome_tipo})
        except IntegrityError:
            # Outro pedido criou o mesmo nome entre a verificação e o INSERT
            self.db.rollback()
            raise BusinessRuleError("Tipo de produto já existe")

    def atualizar(self, tipo_id: int, dados: schemas.TipoProdutoUpdate) -> models.TipoProduto:
        tipo = self.buscar(tipo_id)
        nome_tipo = dados.nome_tipo.lower()
        self._verificar_duplicado(nome_tipo, tipo_id)
        try:
            return crud.tipo_produto.update(self.db, db_obj=tipo, obj_in={"nome_tipo": nome_tipo})
        except IntegrityError:
            self.db.rollback()
            raise BusinessRuleError("Tipo de produto já existe")

    def deletar(self, tipo_id: int) -> None:
        tipo = self.buscar(tipo_id)
        total = crud.tipo_produto.count_produtos(self.db, tipo_id=tipo_id)
        if total > 0:
            raise BusinessRuleError(
                f"Não é possível deletar. Existem {total} produto(s) vinculado(s) a este tipo."
            )
        crud.tipo_produto.remove(self.db, db_obj=tipo)
        logger.info("Tipo de produto %s removido", tipo_id)
