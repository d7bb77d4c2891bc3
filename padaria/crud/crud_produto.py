# padaria/crud/crud_produto.py

from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from .base import CRUDBase
from ..models import ItemVenda, Produto
from ..schemas import ProdutoCreate, ProdutoUpdate


class CRUDProduto(CRUDBase[Produto, ProdutoCreate, ProdutoUpdate]):
    order_by = "nome"

    def get(self, db: Session, id: int) -> Optional[Produto]:
        return (
            db.query(Produto)
            .options(joinedload(Produto.tipo_produto))
            .filter(Produto.id == id)
            .first()
        )

    def get_filtered(
        self,
        db: Session,
        *,
        tipo: Optional[int] = None,
        nome: Optional[str] = None,
        estoque_baixo: Optional[Decimal] = None,
    ) -> List[Produto]:
        """
        Lista produtos com o nome do tipo carregado.
        Com `estoque_baixo`, devolve só os produtos abaixo do limite,
        do menor estoque para o maior.
        """
        query = db.query(Produto).options(joinedload(Produto.tipo_produto))

        if estoque_baixo is not None:
            return (
                query.filter(Produto.estoque_atual < estoque_baixo)
                .order_by(Produto.estoque_atual.asc(), Produto.nome)
                .all()
            )

        if tipo is not None:
            query = query.filter(Produto.id_tipo_produto == tipo)
        if nome:
            query = query.filter(Produto.nome.ilike(f"%{nome}%"))
        return query.order_by(Produto.nome).all()

    def count_itens_venda(self, db: Session, *, produto_id: int) -> int:
        return db.query(ItemVenda).filter(ItemVenda.id_produto == produto_id).count()

    def count_estoque_baixo(self, db: Session, *, limite: Decimal) -> int:
        return db.query(Produto).filter(Produto.estoque_atual < limite).count()

    # --- Atualizações atômicas de estoque (não fazem commit) ---

    def decrease_stock_if_available(self, db: Session, *, produto_id: int, quantidade: Decimal) -> bool:
        """
        Baixa o estoque numa única instrução UPDATE, condicionada a haver
        saldo suficiente. Devolve False se nenhuma linha foi afetada.
        """
        rows = (
            db.query(Produto)
            .filter(Produto.id == produto_id, Produto.estoque_atual >= quantidade)
            .update(
                {Produto.estoque_atual: Produto.estoque_atual - quantidade},
                synchronize_session=False,
            )
        )
        return rows == 1

    def adjust_stock(self, db: Session, *, produto_id: int, delta: Decimal) -> bool:
        """Soma `delta` ao estoque desde que o resultado não fique negativo."""
        rows = (
            db.query(Produto)
            .filter(Produto.id == produto_id, Produto.estoque_atual + delta >= 0)
            .update(
                {Produto.estoque_atual: Produto.estoque_atual + delta},
                synchronize_session=False,
            )
        )
        return rows == 1


produto = CRUDProduto(Produto)
