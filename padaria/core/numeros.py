# padaria/core/numeros.py

from decimal import ROUND_HALF_UP, Decimal

CENTAVOS = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """Converte o resultado de uma agregação (None, int, float, Decimal) em Decimal."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def arredondar(value) -> Decimal:
    return to_decimal(value).quantize(CENTAVOS, rounding=ROUND_HALF_UP)


def media(total, quantidade: int) -> Decimal:
    if not quantidade:
        return Decimal("0.00")
    return arredondar(to_decimal(total) / quantidade)


def percentual(parte, todo) -> float:
    todo = to_decimal(todo)
    if todo == 0:
        return 0.0
    return float(arredondar(to_decimal(parte) * 100 / todo))


def formatar_quantidade(value) -> str:
    """10.000 -> '10', 2.500 -> '2.5'."""
    texto = format(to_decimal(value).normalize(), "f")
    return "0" if texto in ("-0", "") else texto


def formatar_reais(value) -> str:
    return f"R$ {arredondar(value):.2f}"


def subtotal_item(quantidade, preco_unitario) -> Decimal:
    """Quantidade x preço, em centavos. O total da venda é a soma destes valores."""
    return arredondar(to_decimal(quantidade) * to_decimal(preco_unitario))
