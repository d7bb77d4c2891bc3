# padaria/crud/crud_tipo_produto.py

from typing import Optional

from sqlalchemy.orm import Session

from .base import CRUDBase
from ..models import Produto, TipoProduto
from ..schemas import TipoProdutoCreate, TipoProdutoUpdate


class CRUDTipoProduto(CRUDBase[TipoProduto, TipoProdutoCreate, TipoProdutoUpdate]):
    order_by = "nome_tipo"

    def get_by_nome(self, db: Session, *, nome_tipo: str) -> Optional[TipoProduto]:
        # nome_tipo já é guardado em minúsculas
        return db.query(TipoProduto).filter(TipoProduto.nome_tipo == nome_tipo).first()

    def count_produtos(self, db: Session, *, tipo_id: int) -> int:
        return db.query(Produto).filter(Produto.id_tipo_produto == tipo_id).count()


tipo_produto = CRUDTipoProduto(TipoProduto)
