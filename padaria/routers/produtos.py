# padaria/routers/produtos.py

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..services.produto_service import ProdutoService

router = APIRouter(
    prefix="/produtos",
    tags=["Produtos"],
    responses=schemas.ERROS_PADRAO,
)


def get_produto_service(db: Session = Depends(get_db)) -> ProdutoService:
    return ProdutoService(db=db)


@router.get("/", response_model=schemas.RespostaLista[schemas.Produto])
def listar_produtos(
    tipo: Optional[int] = None,
    nome: Optional[str] = None,
    estoque_baixo: Optional[Decimal] = None,
    service: ProdutoService = Depends(get_produto_service),
):
    """
    - `tipo`: id do tipo de produto (pode ser combinado com `nome`)
    - `nome`: parte do nome
    - `estoque_baixo`: só produtos com estoque abaixo deste valor
    """
    produtos = service.listar(tipo=tipo, nome=nome, estoque_baixo=estoque_baixo)
    return {"total": len(produtos), "data": produtos}


@router.get("/{produto_id}", response_model=schemas.Resposta[schemas.Produto])
def buscar_produto(produto_id: int, service: ProdutoService = Depends(get_produto_service)):
    return {"data": service.buscar(produto_id)}


@router.post("/", response_model=schemas.Resposta[schemas.Produto], status_code=status.HTTP_201_CREATED)
def criar_produto(produto_in: schemas.ProdutoCreate, service: ProdutoService = Depends(get_produto_service)):
    return {"message": "Produto criado com sucesso", "data": service.criar(produto_in)}


@router.put("/{produto_id}", response_model=schemas.Resposta[schemas.Produto])
def atualizar_produto(
    produto_id: int,
    produto_in: schemas.ProdutoUpdate,
    service: ProdutoService = Depends(get_produto_service),
):
    return {"message": "Produto atualizado com sucesso", "data": service.atualizar(produto_id, produto_in)}


@router.patch("/{produto_id}/estoque", response_model=schemas.Resposta[schemas.AjusteEstoqueResultado])
def ajustar_estoque(
    produto_id: int,
    ajuste: schemas.AjusteEstoque,
    service: ProdutoService = Depends(get_produto_service),
):
    resultado = service.ajustar_estoque(produto_id, ajuste.quantidade)
    return {"message": "Estoque atualizado com sucesso", "data": resultado}


@router.delete("/{produto_id}", response_model=schemas.Resposta)
def deletar_produto(produto_id: int, service: ProdutoService = Depends(get_produto_service)):
    service.deletar(produto_id)
    return {"message": "Produto deletado com sucesso"}
