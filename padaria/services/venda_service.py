# padaria/services/venda_service.py

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from .. import crud, models, schemas
from ..core.errors import BusinessRuleError, NotFoundError
from ..core.numeros import formatar_quantidade, formatar_reais, media, subtotal_item, to_decimal
from ..models import TipoPagamento
from .cliente_service import dias_desde

logger = logging.getLogger(__name__)


class VendaService:
    def __init__(self, db: Session):
        # O serviço recebe a sessão do banco ao ser instanciado
        self.db = db

    def criar(self, venda_in: schemas.VendaCreate) -> models.Venda:
        """
        Registra uma venda completa numa única transação: cabeçalho, itens
        com o preço atual de cada produto e baixa de estoque. Qualquer falha
        desfaz tudo.
        """
        try:
            # --- FASE 1: VALIDAÇÕES DE NEGÓCIO ---
            cliente = crud.cliente.get(self.db, venda_in.id_cliente)
            if not cliente:
                raise NotFoundError("Cliente não encontrado")

            if not crud.funcionario.exists(self.db, venda_in.id_funcionario):
                raise NotFoundError("Funcionário não encontrado")

            itens_validados = []
            for item in venda_in.itens:
                produto = crud.produto.get(self.db, item.id_produto)
                if not produto:
                    raise NotFoundError(f"Produto {item.id_produto} não encontrado")
                if produto.estoque_atual < item.quantidade:
                    raise BusinessRuleError(
                        f"Estoque insuficiente para {produto.nome}. "
                        f"Disponível: {formatar_quantidade(produto.estoque_atual)} {produto.unidade_medida.value}"
                    )
                # O preço é sempre o do cadastro, nunca o enviado pelo cliente
                itens_validados.append((produto, item.quantidade, to_decimal(produto.preco_base)))

            # O total é a soma dos subtotais já arredondados em centavos,
            # igual ao que ItemVenda.subtotal devolve depois de gravado
            valor_total = sum(
                (subtotal_item(qtd, preco) for _, qtd, preco in itens_validados), Decimal("0.00")
            )

            if venda_in.tipo_pagamento == TipoPagamento.FIADO:
                disponivel = to_decimal(cliente.limite_fiado) - crud.cliente.total_em_aberto(
                    self.db, cliente_id=cliente.id
                )
                if disponivel < valor_total:
                    raise BusinessRuleError(f"Crédito insuficiente. Disponível: {formatar_reais(disponivel)}")

            # --- FASE 2: PERSISTÊNCIA ---
            db_venda = crud.venda.create_venda(
                self.db,
                id_cliente=venda_in.id_cliente,
                id_funcionario=venda_in.id_funcionario,
                tipo_pagamento=venda_in.tipo_pagamento,
                valor_total=valor_total,
            )

            for produto, quantidade, preco in itens_validados:
                crud.venda.create_item(
                    self.db,
                    id_venda=db_venda.id,
                    id_produto=produto.id,
                    quantidade=quantidade,
                    preco_unitario=preco,
                )
                # UPDATE condicionado: se outro pedido consumiu o estoque nesse
                # meio tempo (ou o mesmo produto aparece duas vezes), nenhuma
                # linha é afetada e a venda inteira é desfeita.
                if not crud.produto.decrease_stock_if_available(
                    self.db, produto_id=produto.id, quantidade=quantidade
                ):
                    raise BusinessRuleError(f"Estoque insuficiente para {produto.nome}")

            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.warning("Venda não registrada, transação desfeita: %s", e)
            raise

        logger.info(
            "Venda %s registrada: total %s, %d item(ns), pagamento %s",
            db_venda.id, valor_total, len(itens_validados), venda_in.tipo_pagamento.value,
        )
        return self.buscar(db_venda.id)

    def buscar(self, venda_id: int) -> models.Venda:
        db_venda = crud.venda.get(self.db, venda_id)
        if not db_venda:
            raise NotFoundError("Venda não encontrada")
        return db_venda

    def listar(
        self,
        *,
        periodo_inicio: Optional[date] = None,
        periodo_fim: Optional[date] = None,
        cliente: Optional[int] = None,
        funcionario: Optional[int] = None,
        tipo_pagamento: Optional[TipoPagamento] = None,
    ) -> List[models.Venda]:
        return crud.venda.get_filtered(
            self.db,
            periodo_inicio=periodo_inicio,
            periodo_fim=periodo_fim,
            cliente=cliente,
            funcionario=funcionario,
            tipo_pagamento=tipo_pagamento,
        )

    def fiado_em_aberto(self) -> schemas.RespostaFiadoEmAberto:
        vendas = crud.venda.get_fiado_em_aberto(self.db)
        dados = [
            schemas.FiadoEmAberto(
                id_venda=v.id,
                data_hora=v.data_hora,
                valor_total=v.valor_total,
                dias_em_aberto=dias_desde(v.data_hora),
                id_cliente=v.id_cliente,
                cliente=v.cliente.nome,
                cliente_telefone=v.cliente.telefone,
            )
            for v in vendas
        ]
        return schemas.RespostaFiadoEmAberto(
            total=len(dados),
            total_em_aberto=sum((to_decimal(v.valor_total) for v in vendas), Decimal("0")),
            data=dados,
        )

    def quitar(self, venda_id: int) -> models.Venda:
        db_venda = self.buscar(venda_id)
        if db_venda.tipo_pagamento != TipoPagamento.FIADO:
            raise BusinessRuleError("Esta venda não é a fiado")
        if db_venda.data_pagamento_fiado is not None:
            raise BusinessRuleError("Esta venda já foi quitada")

        try:
            # Só atualiza se ainda estiver em aberto: duas quitações
            # simultâneas não sobrescrevem a data da primeira.
            if not crud.venda.quitar(self.db, venda_id=venda_id, quando=datetime.now()):
                raise BusinessRuleError("Não foi possível quitar a venda")
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Venda a fiado %s quitada", venda_id)
        return self.buscar(venda_id)

    def resumo(self, *, data_inicio: Optional[date] = None, data_fim: Optional[date] = None) -> schemas.ResumoVendas:
        """Totais do período. Sem datas, do primeiro dia do mês até hoje."""
        hoje = date.today()
        inicio = data_inicio or hoje.replace(day=1)
        fim = data_fim or hoje

        total_vendas, valor_total = crud.venda.totais(self.db, inicio=inicio, fim=fim)
        por_forma = {
            forma.value: schemas.TotalPorForma(quantidade=quantidade, valor=to_decimal(valor))
            for forma, quantidade, valor in crud.venda.totais_por_forma(self.db, inicio=inicio, fim=fim)
        }
        return schemas.ResumoVendas(
            periodo=schemas.Periodo(inicio=inicio, fim=fim),
            total_vendas=total_vendas,
            valor_total=to_decimal(valor_total),
            ticket_medio=media(valor_total, total_vendas),
            por_forma_pagamento=por_forma,
        )
