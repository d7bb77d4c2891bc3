# padaria/services/produto_service.py

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from .. import crud, models, schemas
from ..core.errors import BusinessRuleError, NotFoundError
from ..core.numeros import formatar_quantidade

logger = logging.getLogger(__name__)


class ProdutoService:
    def __init__(self, db: Session):
        self.db = db

    def listar(
        self,
        *,
        tipo: Optional[int] = None,
        nome: Optional[str] = None,
        estoque_baixo: Optional[Decimal] = None,
    ) -> List[models.Produto]:
        return crud.produto.get_filtered(self.db, tipo=tipo, nome=nome, estoque_baixo=estoque_baixo)

    def buscar(self, produto_id: int) -> models.Produto:
        produto = crud.produto.get(self.db, produto_id)
        if not produto:
            raise NotFoundError("Produto não encontrado")
        return produto

    def _verificar_tipo(self, tipo_id: int) -> None:
        if not crud.tipo_produto.exists(self.db, tipo_id):
            raise NotFoundError("Tipo de produto não encontrado")

    def criar(self, dados: schemas.ProdutoCreate) -> models.Produto:
        self._verificar_tipo(dados.id_tipo_produto)
        produto = crud.produto.create(self.db, obj_in=dados)
        return self.buscar(produto.id)

    def atualizar(self, produto_id: int, dados: schemas.ProdutoUpdate) -> models.Produto:
        produto = self.buscar(produto_id)
        if dados.id_tipo_produto is not None:
            self._verificar_tipo(dados.id_tipo_produto)
        crud.produto.update(self.db, db_obj=produto, obj_in=dados)
        return self.buscar(produto_id)

    def ajustar_estoque(self, produto_id: int, quantidade: Decimal) -> schemas.AjusteEstoqueResultado:
        """
        Entrada (quantidade positiva) ou saída (negativa) de estoque.
        O novo saldo é calculado pelo próprio banco num UPDATE condicionado
        a não ficar negativo.
        """
        produto = self.buscar(produto_id)
        estoque_anterior = produto.estoque_atual

        try:
            if not crud.produto.adjust_stock(self.db, produto_id=produto_id, delta=quantidade):
                raise BusinessRuleError(
                    f"Operação resultaria em estoque negativo "
                    f"({formatar_quantidade(estoque_anterior + quantidade)}). "
                    f"Estoque atual: {formatar_quantidade(estoque_anterior)}"
                )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(produto)
        logger.info(
            "Estoque do produto %s ajustado em %s (de %s para %s)",
            produto_id, quantidade, estoque_anterior, produto.estoque_atual,
        )
        return schemas.AjusteEstoqueResultado(
            id=produto.id,
            nome=produto.nome,
            estoque_anterior=estoque_anterior,
            quantidade_alterada=quantidade,
            estoque_atual=produto.estoque_atual,
        )

    def deletar(self, produto_id: int) -> None:
        produto = self.buscar(produto_id)
        total = crud.produto.count_itens_venda(self.db, produto_id=produto_id)
        if total > 0:
            raise BusinessRuleError(
                f"Não é possível deletar. Existem {total} venda(s) vinculada(s) a este produto."
            )
        crud.produto.remove(self.db, db_obj=produto)
        logger.info("Produto %s removido", produto_id)
