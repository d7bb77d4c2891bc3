# padaria/services/cliente_service.py

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from .. import crud, models, schemas
from ..core.errors import BusinessRuleError, NotFoundError
from ..core.numeros import arredondar, formatar_reais, percentual, to_decimal

logger = logging.getLogger(__name__)

# Abaixo de 20% do limite disponível o crédito fica "em atenção"
FAIXA_ATENCAO = Decimal("0.2")

_CAMPOS_TEXTO = ("nome", "rua", "numero", "bairro", "cidade")


def formatar_telefone(telefone: Optional[str]) -> Optional[str]:
    """'11987654321' -> '(11) 98765-4321'; '1133334444' -> '(11) 3333-4444'."""
    if telefone is None or not telefone.strip():
        return None
    digitos = "".join(ch for ch in telefone if ch.isdigit())
    if len(digitos) == 11:
        return f"({digitos[:2]}) {digitos[2:7]}-{digitos[7:]}"
    return f"({digitos[:2]}) {digitos[2:6]}-{digitos[6:]}"


def formatar_cep(cep: Optional[str]) -> Optional[str]:
    if cep is None or not cep.strip():
        return None
    digitos = "".join(ch for ch in cep if ch.isdigit())
    return f"{digitos[:5]}-{digitos[5:]}"


def _normalizar(dados: Dict[str, Any]) -> Dict[str, Any]:
    for campo in _CAMPOS_TEXTO:
        if isinstance(dados.get(campo), str):
            dados[campo] = dados[campo].strip() or None
    if "telefone" in dados:
        dados["telefone"] = formatar_telefone(dados["telefone"])
    if "cep" in dados:
        dados["cep"] = formatar_cep(dados["cep"])
    return dados


def dias_desde(momento) -> int:
    if momento is None:
        return 0
    return (date.today() - momento.date()).days


def linha_devedor(linha) -> Dict[str, Any]:
    """Converte uma linha de crud.cliente.get_devedores no formato de resposta."""
    cliente, total_em_aberto, credito_disponivel, quantidade, mais_antiga = linha
    return {
        "id_cliente": cliente.id,
        "nome": cliente.nome,
        "telefone": cliente.telefone,
        "status": cliente.status,
        "limite_fiado": cliente.limite_fiado,
        "total_em_aberto": arredondar(total_em_aberto),
        "credito_disponivel": arredondar(credito_disponivel),
        "quantidade_vendas_abertas": quantidade,
        "venda_mais_antiga": mais_antiga,
        "dias_mais_antigo": dias_desde(mais_antiga),
    }


class ClienteService:
    def __init__(self, db: Session):
        self.db = db

    def listar(self, *, status: Optional[models.StatusCliente] = None, busca: Optional[str] = None) -> List[models.Cliente]:
        return crud.cliente.get_filtered(self.db, status=status, busca=busca)

    def _get_or_404(self, cliente_id: int) -> models.Cliente:
        cliente = crud.cliente.get(self.db, cliente_id)
        if not cliente:
            raise NotFoundError("Cliente não encontrado")
        return cliente

    def buscar(self, cliente_id: int) -> schemas.ClienteComCredito:
        """Cliente com o saldo de fiado em aberto e o crédito disponível."""
        cliente = self._get_or_404(cliente_id)
        total_em_aberto = crud.cliente.total_em_aberto(self.db, cliente_id=cliente_id)
        return schemas.ClienteComCredito(
            **schemas.Cliente.model_validate(cliente).model_dump(),
            total_em_aberto=total_em_aberto,
            credito_disponivel=to_decimal(cliente.limite_fiado) - total_em_aberto,
        )

    def criar(self, dados: schemas.ClienteCreate) -> models.Cliente:
        return crud.cliente.create(self.db, obj_in=_normalizar(dados.model_dump()))

    def atualizar(self, cliente_id: int, dados: schemas.ClienteUpdate) -> models.Cliente:
        cliente = self._get_or_404(cliente_id)
        return crud.cliente.update(
            self.db, db_obj=cliente, obj_in=_normalizar(dados.model_dump(exclude_unset=True))
        )

    def deletar(self, cliente_id: int) -> None:
        cliente = self._get_or_404(cliente_id)
        total = crud.cliente.count_vendas(self.db, cliente_id=cliente_id)
        if total > 0:
            raise BusinessRuleError(
                f"Não é possível deletar. Existem {total} venda(s) vinculada(s) a este cliente."
            )
        crud.cliente.remove(self.db, db_obj=cliente)
        logger.info("Cliente %s removido", cliente_id)

    def historico(self, cliente_id: int) -> List[models.Venda]:
        self._get_or_404(cliente_id)
        return crud.cliente.get_historico(self.db, cliente_id=cliente_id)

    def credito_disponivel(self, cliente: models.Cliente) -> Decimal:
        total_em_aberto = crud.cliente.total_em_aberto(self.db, cliente_id=cliente.id)
        return to_decimal(cliente.limite_fiado) - total_em_aberto

    def situacao_credito(self, cliente_id: int) -> schemas.SituacaoCredito:
        cliente = self._get_or_404(cliente_id)
        limite = to_decimal(cliente.limite_fiado)
        total_em_aberto = crud.cliente.total_em_aberto(self.db, cliente_id=cliente_id)
        disponivel = limite - total_em_aberto

        if disponivel < 0:
            situacao = "EXCEDIDO"
        elif disponivel < limite * FAIXA_ATENCAO:
            situacao = "ATENCAO"
        else:
            situacao = "OK"

        return schemas.SituacaoCredito(
            cliente=schemas.ClienteResumo(id=cliente.id, nome=cliente.nome, status=cliente.status),
            limite_fiado=limite,
            total_em_aberto=total_em_aberto,
            credito_disponivel=disponivel,
            percentual_utilizado=percentual(total_em_aberto, limite),
            situacao=situacao,
        )

    def validar_fiado(self, cliente_id: int, valor: Decimal) -> schemas.ValidacaoFiado:
        """Diz se uma venda a fiado de `valor` cabe no crédito do cliente."""
        cliente = self._get_or_404(cliente_id)
        disponivel = self.credito_disponivel(cliente)
        pode_vender = disponivel >= valor
        return schemas.ValidacaoFiado(
            pode_vender=pode_vender,
            credito_disponivel=disponivel,
            valor_venda=valor,
            credito_apos_venda=disponivel - valor,
            mensagem="Venda autorizada" if pode_vender
            else f"Crédito insuficiente. Disponível: {formatar_reais(disponivel)}",
        )

    def devedores(self) -> List[Dict[str, Any]]:
        return [linha_devedor(linha) for linha in crud.cliente.get_devedores(self.db)]

    def credito_excedido(self) -> List[Dict[str, Any]]:
        return [linha_devedor(linha) for linha in crud.cliente.get_credito_excedido(self.db)]
