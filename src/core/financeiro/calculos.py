"""
Cálculos financeiros puros.

Todos os valores monetários são Decimal com duas casas decimais.
Nenhuma função aqui acessa repositórios ou relógio do sistema.
"""

import calendar
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_DOWN, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List

from src.core.shared.exceptions import ValidationError


CENTAVOS = Decimal("0.01")
CEM = Decimal("100")
# Maior valor que cabe nas colunas monetárias (12 dígitos, 2 decimais)
VALOR_MAXIMO = Decimal("9999999999.99")


def para_decimal(valor: Any, campo: str = "valor") -> Decimal:
    """
    Converte valor monetário (str, int, float ou Decimal) para Decimal.

    Floats passam por ``str()`` para evitar artefatos binários
    (``0.1`` vira ``Decimal("0.1")``).

    Raises:
        ValidationError: Se o valor não for numérico ou exceder VALOR_MAXIMO
    """
    if isinstance(valor, Decimal):
        resultado = valor
    else:
        try:
            resultado = Decimal(str(valor).strip().replace(",", "."))
        except (InvalidOperation, AttributeError):
            raise ValidationError(f"Valor inválido: {valor}", field=campo)
    if not resultado.is_finite():
        raise ValidationError(f"Valor inválido: {valor}", field=campo)
    if abs(resultado) > VALOR_MAXIMO:
        raise ValidationError(
            f"Valor excede o máximo permitido ({VALOR_MAXIMO})", field=campo
        )
    try:
        return resultado.quantize(CENTAVOS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"Valor inválido: {valor}", field=campo)


def dividir_em_parcelas(total: Any, numero_parcelas: int) -> List[Decimal]:
    """
    Divide um total em parcelas cuja soma é exatamente o total.

    Cada parcela recebe o valor truncado em centavos; a diferença
    vai para a última parcela.

    Example:
        >>> dividir_em_parcelas(Decimal("1000"), 3)
        [Decimal('333.33'), Decimal('333.33'), Decimal('333.34')]

    Raises:
        ValidationError: Se total <= 0 ou numero_parcelas < 1
    """
    total = para_decimal(total, "valor_total")
    if total <= 0:
        raise ValidationError("Valor total deve ser positivo", field="valor_total")
    if not isinstance(numero_parcelas, int) or numero_parcelas < 1:
        raise ValidationError(
            "Número de parcelas deve ser maior que zero", field="numero_parcelas"
        )

    base = (total / numero_parcelas).quantize(CENTAVOS, rounding=ROUND_DOWN)
    parcelas = [base] * (numero_parcelas - 1)
    parcelas.append(total - base * (numero_parcelas - 1))
    return parcelas


def adicionar_meses(data_base: date, meses: int) -> date:
    """Soma meses mantendo o dia, limitado ao último dia do mês."""
    mes_index = data_base.month - 1 + meses
    ano = data_base.year + mes_index // 12
    mes = mes_index % 12 + 1
    ultimo_dia = calendar.monthrange(ano, mes)[1]
    return date(ano, mes, min(data_base.day, ultimo_dia))


def gerar_vencimentos(primeiro_vencimento: date, numero_parcelas: int) -> List[date]:
    """
    Gera datas de vencimento mensais a partir do primeiro vencimento.

    O dia do primeiro vencimento é preservado sempre que possível
    (31/01 → 28/02 → 31/03).
    """
    if numero_parcelas < 1:
        raise ValidationError(
            "Número de parcelas deve ser maior que zero", field="numero_parcelas"
        )
    return [adicionar_meses(primeiro_vencimento, i) for i in range(numero_parcelas)]


def aplicar_desconto(total: Any, tipo: str, valor: Any) -> Decimal:
    """
    Aplica desconto ao total.

    Args:
        total: Valor original
        tipo: "percentual" ou "valor_fixo"
        valor: Percentual (0-100) ou valor absoluto

    Returns:
        Valor com desconto, nunca negativo

    Example:
        >>> aplicar_desconto(Decimal("1000"), "percentual", 10)
        Decimal('900.00')
    """
    total = para_decimal(total, "valor_total")
    valor = para_decimal(valor, "valor")

    if valor <= 0:
        raise ValidationError("Valor do desconto deve ser positivo", field="valor")

    if tipo == "percentual":
        if valor > CEM:
            raise ValidationError(
                "Desconto percentual não pode exceder 100%", field="valor"
            )
        resultado = total * (CEM - valor) / CEM
    elif tipo == "valor_fixo":
        resultado = max(Decimal("0"), total - valor)
    else:
        raise ValidationError(f"Tipo de desconto inválido: {tipo}", field="tipo")

    return resultado.quantize(CENTAVOS, rounding=ROUND_HALF_UP)


def _informado(valor: Any) -> bool:
    return valor is not None and str(valor).strip() != ""


def calcular_split(valor: Any, recipients: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Calcula a divisão de um pagamento entre destinatários.

    Cada destinatário informa ``percentage`` ou ``amount``. Quando há
    percentual, o valor é ``valor * percentual / 100`` truncado em
    centavos, de modo que a soma nunca ultrapassa o pagamento.

    Args:
        valor: Valor do pagamento
        recipients: Dicionários com recipient_id, recipient_type,
            amount (opcional) e percentage (opcional)

    Returns:
        Lista de dicionários com ``amount`` calculado

    Raises:
        ValidationError: Destinatário sem valor/percentual, soma de
            percentuais acima de 100, percentual ou valor não positivo ou
            total distribuído acima do pagamento
    """
    valor = para_decimal(valor)
    recipients = list(recipients)
    if not recipients:
        raise ValidationError(
            "Pelo menos um destinatário é obrigatório", field="recipients"
        )

    total_percentual = Decimal("0")
    resultado = []

    for recipient in recipients:
        if not recipient.get("recipient_id"):
            raise ValidationError(
                "ID do destinatário é obrigatório", field="recipient_id"
            )
        if not recipient.get("recipient_type"):
            raise ValidationError(
                "Tipo do destinatário é obrigatório", field="recipient_type"
            )

        percentual = recipient.get("percentage")
        amount = recipient.get("amount")

        if _informado(percentual):
            percentual = para_decimal(percentual, "percentage")
            if percentual <= 0 or percentual > CEM:
                raise ValidationError(
                    "Percentual deve ser maior que 0 e no máximo 100", field="percentage"
                )
            total_percentual += percentual
            amount = (valor * percentual / CEM).quantize(CENTAVOS, rounding=ROUND_DOWN)
        elif _informado(amount):
            amount = para_decimal(amount, "amount")
            if amount <= 0:
                raise ValidationError("Valor deve ser positivo", field="amount")
            percentual = None
        else:
            raise ValidationError(
                "Cada destinatário deve ter um percentual ou valor definido",
                field="recipients",
            )

        resultado.append({
            "recipient_id": recipient["recipient_id"],
            "recipient_type": recipient["recipient_type"],
            "amount": amount,
            "percentage": percentual,
        })

    if total_percentual > CEM:
        raise ValidationError(
            "O total de percentuais não pode exceder 100%", field="recipients"
        )
    if sum(item["amount"] for item in resultado) > valor:
        raise ValidationError(
            "O total distribuído não pode exceder o valor do pagamento",
            field="recipients",
        )

    return resultado
