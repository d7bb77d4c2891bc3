# padaria/core/errors.py

from typing import Any, Dict, List


class DomainError(Exception):
    """Erro de regra da aplicação. Cada subclasse tem um status HTTP fixo."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    status_code = 404


class BusinessRuleError(DomainError):
    """Estoque insuficiente, crédito excedido, exclusão bloqueada, etc."""
    status_code = 400


class ValidationFailedError(DomainError):
    """Lista de erros por campo, devolvida de uma vez só."""
    status_code = 400

    def __init__(self, errors: List[str], message: str = "Dados inválidos"):
        super().__init__(message)
        self.errors = errors


# Mensagens em português para os tipos de erro mais comuns do pydantic
_MENSAGENS = {
    "missing": "campo obrigatório",
    "greater_than": "deve ser maior que {gt}",
    "greater_than_equal": "não pode ser menor que {ge}",
    "less_than_equal": "não pode ser maior que {le}",
    "too_short": "deve ter pelo menos {min_length} item(ns)/caractere(s)",
    "string_too_short": "deve ter pelo menos {min_length} caractere(s)",
    "enum": "valor inválido (opções: {expected})",
    "int_parsing": "deve ser um número inteiro",
    "int_type": "deve ser um número inteiro",
    "decimal_parsing": "deve ser um número",
    "decimal_type": "deve ser um número",
    "decimal_max_places": "deve ter no máximo {decimal_places} casa(s) decimal(is)",
    "decimal_max_digits": "deve ter no máximo {max_digits} dígito(s)",
    "decimal_whole_digits": "deve ter no máximo {whole_digits} dígito(s) antes da vírgula",
    "date_from_datetime_parsing": "data inválida (use AAAA-MM-DD)",
    "date_parsing": "data inválida (use AAAA-MM-DD)",
    "list_type": "deve ser uma lista",
}


def format_validation_errors(raw_errors: List[Dict[str, Any]]) -> List[str]:
    """Converte os erros do pydantic em mensagens '<campo>: <mensagem>'."""
    messages = []
    for err in raw_errors:
        # 'body', 'query' e 'path' só indicam a origem do campo
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "corpo"
        ctx = err.get("ctx") or {}

        if err.get("type") == "value_error" and "error" in ctx:
            text = str(ctx["error"])
        elif err.get("type") in _MENSAGENS:
            try:
                text = _MENSAGENS[err["type"]].format(**ctx)
            except (KeyError, IndexError):
                text = err.get("msg", "valor inválido")
        else:
            text = err.get("msg", "valor inválido")
        messages.append(f"{field}: {text}")
    return messages
