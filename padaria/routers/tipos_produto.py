# padaria/routers/tipos_produto.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..services.tipo_produto_service import TipoProdutoService

router = APIRouter(
    prefix="/tipos-produto",
    tags=["Tipos de Produto"],
    responses=schemas.ERROS_PADRAO,
)


def get_tipo_produto_service(db: Session = Depends(get_db)) -> TipoProdutoService:
    return TipoProdutoService(db=db)


@router.get("/", response_model=schemas.RespostaLista[schemas.TipoProduto])
def listar_tipos(service: TipoProdutoService = Depends(get_tipo_produto_service)):
    tipos = service.listar()
    return {"total": len(tipos), "data": tipos}


@router.get("/{tipo_id}", response_model=schemas.Resposta[schemas.TipoProduto])
def buscar_tipo(tipo_id: int, service: TipoProdutoService = Depends(get_tipo_produto_service)):
    return {"data": service.buscar(tipo_id)}


@router.post("/", response_model=schemas.Resposta[schemas.TipoProduto], status_code=status.HTTP_201_CREATED)
def criar_tipo(
    tipo_in: schemas.TipoProdutoCreate,
    service: TipoProdutoService = Depends(get_tipo_produto_service),
):
    return {"message": "Tipo de produto criado com sucesso", "data": service.criar(tipo_in)}


@router.put("/{tipo_id}", response_model=schemas.Resposta[schemas.TipoProduto])
def atualizar_tipo(
    tipo_id: int,
    tipo_in: schemas.TipoProdutoUpdate,
    service: TipoProdutoService = Depends(get_tipo_produto_service),
):
    return {"message": "Tipo de produto atualizado com sucesso", "data": service.atualizar(tipo_id, tipo_in)}


@router.delete("/{tipo_id}", response_model=schemas.Resposta)
def deletar_tipo(tipo_id: int, service: TipoProdutoService = Depends(get_tipo_produto_service)):
    service.deletar(tipo_id)
    return {"message": "Tipo de produto deletado com sucesso"}
