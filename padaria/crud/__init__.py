from . import crud_relatorio as relatorio
from .crud_cargo import cargo
from .crud_cliente import cliente
from .crud_funcionario import funcionario
from .crud_produto import produto
from .crud_tipo_produto import tipo_produto
from .crud_venda import venda
