"""
Testes dos cálculos financeiros puros.

Coverage:
- dividir_em_parcelas (soma exata, resto na última parcela)
- gerar_vencimentos / adicionar_meses (fim de mês)
- aplicar_desconto (percentual e valor fixo)
- calcular_split
"""

from datetime import date
from decimal import Decimal

import pytest

from src.core.financeiro.calculos import (
    adicionar_meses,
    aplicar_desconto,
    calcular_split,
    dividir_em_parcelas,
    gerar_vencimentos,
    para_decimal,
)
from src.core.shared.exceptions import ValidationError


class TestDividirEmParcelas:
    """Testes da divisão do total em parcelas."""

    def test_tres_parcelas_de_mil_somam_exatamente_mil(self):
        """1000 em 3 parcelas: 333.33 + 333.33 + 333.34."""
        parcelas = dividir_em_parcelas(Decimal("1000"), 3)

        assert parcelas == [Decimal("333.33"), Decimal("333.33"), Decimal("333.34")]
        assert sum(parcelas) == Decimal("1000.00")

    @pytest.mark.parametrize("total,n", [
        ("999.99", 7),
        ("0.10", 3),
        ("1234.56", 12),
        ("100", 1),
    ])
    def test_soma_sempre_igual_ao_total(self, total, n):
        parcelas = dividir_em_parcelas(total, n)

        assert len(parcelas) == n
        assert sum(parcelas) == Decimal(total).quantize(Decimal("0.01"))
        assert all(p > 0 for p in parcelas)

    def test_parcela_unica_recebe_total(self):
        assert dividir_em_parcelas(500, 1) == [Decimal("500.00")]

    def test_total_zero_invalido(self):
        with pytest.raises(ValidationError) as exc_info:
            dividir_em_parcelas(0, 3)

        assert exc_info.value.field == "valor_total"

    def test_numero_parcelas_zero_invalido(self):
        with pytest.raises(ValidationError) as exc_info:
            dividir_em_parcelas(1000, 0)

        assert exc_info.value.field == "numero_parcelas"


class TestVencimentos:
    """Testes de datas de vencimento mensais."""

    def test_vencimentos_mensais_preservam_dia(self):
        datas = gerar_vencimentos(date(2024, 1, 10), 3)

        assert datas == [date(2024, 1, 10), date(2024, 2, 10), date(2024, 3, 10)]

    def test_dia_31_limitado_ao_fim_do_mes(self):
        """31/01 → 29/02 (bissexto) → 31/03."""
        datas = gerar_vencimentos(date(2024, 1, 31), 3)

        assert datas == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)]

    def test_adicionar_meses_vira_o_ano(self):
        assert adicionar_meses(date(2024, 11, 15), 3) == date(2025, 2, 15)


class TestAplicarDesconto:
    """Testes de aplicação de desconto."""

    def test_desconto_percentual_dez_por_cento(self):
        """10% sobre 1000 resulta em 900."""
        assert aplicar_desconto(Decimal("1000"), "percentual", 10) == Decimal("900.00")

    def test_desconto_valor_fixo(self):
        assert aplicar_desconto("1000", "valor_fixo", "150.50") == Decimal("849.50")

    def test_valor_fixo_maior_que_total_nao_fica_negativo(self):
        assert aplicar_desconto(100, "valor_fixo", 500) == Decimal("0.00")

    def test_percentual_acima_de_cem_invalido(self):
        with pytest.raises(ValidationError):
            aplicar_desconto(1000, "percentual", 101)

    def test_valor_nao_positivo_invalido(self):
        with pytest.raises(ValidationError):
            aplicar_desconto(1000, "percentual", 0)

    def test_tipo_desconhecido_invalido(self):
        with pytest.raises(ValidationError) as exc_info:
            aplicar_desconto(1000, "brinde", 10)

        assert exc_info.value.field == "tipo"


class TestParaDecimal:

    def test_float_sem_artefato_binario(self):
        assert para_decimal(0.1) == Decimal("0.10")

    def test_aceita_virgula_decimal(self):
        assert para_decimal("12,5") == Decimal("12.50")

    def test_texto_invalido(self):
        with pytest.raises(ValidationError):
            para_decimal("abc")

    @pytest.mark.parametrize("valor", ["1e30", "9" * 29, Decimal("1E+40"), "-10000000000"])
    def test_valor_fora_do_limite(self, valor):
        with pytest.raises(ValidationError) as exc_info:
            para_decimal(valor, "valor_total")

        assert exc_info.value.field == "valor_total"

    def test_limite_maximo_aceito(self):
        assert para_decimal("9999999999.99") == Decimal("9999999999.99")


class TestCalcularSplit:
    """Testes da divisão de pagamento entre destinatários."""

    def test_split_percentual_e_valor(self):
        resultado = calcular_split(Decimal("1000"), [
            {"recipient_id": "escola", "recipient_type": "institution", "percentage": 70},
            {"recipient_id": "parceiro", "recipient_type": "partner", "amount": "100"},
        ])

        assert resultado[0]["amount"] == Decimal("700.00")
        assert resultado[1]["amount"] == Decimal("100.00")
        assert resultado[1]["percentage"] is None

    def test_percentuais_acima_de_cem(self):
        with pytest.raises(ValidationError):
            calcular_split(1000, [
                {"recipient_id": "a", "recipient_type": "x", "percentage": 60},
                {"recipient_id": "b", "recipient_type": "x", "percentage": 50},
            ])

    def test_valores_acima_do_pagamento(self):
        with pytest.raises(ValidationError):
            calcular_split(100, [
                {"recipient_id": "a", "recipient_type": "x", "amount": 150},
            ])

    def test_destinatario_sem_valor_nem_percentual(self):
        with pytest.raises(ValidationError):
            calcular_split(100, [{"recipient_id": "a", "recipient_type": "x"}])

    def test_sem_destinatarios(self):
        with pytest.raises(ValidationError):
            calcular_split(100, [])

    def test_percentual_negativo_compensando_outro(self):
        """150% + (-50%) somam 100, mas nenhum destinatário pode receber mais que o total."""
        with pytest.raises(ValidationError) as exc_info:
            calcular_split(100, [
                {"recipient_id": "a", "recipient_type": "x", "percentage": 150},
                {"recipient_id": "b", "recipient_type": "x", "percentage": -50},
            ])

        assert exc_info.value.field == "percentage"

    @pytest.mark.parametrize("destinatario,campo", [
        ({"percentage": "0"}, "percentage"),
        ({"percentage": 0}, "percentage"),
        ({"percentage": "-10"}, "percentage"),
        ({"amount": "0"}, "amount"),
        ({"amount": -5}, "amount"),
    ])
    def test_parcela_do_split_deve_ser_positiva(self, destinatario, campo):
        with pytest.raises(ValidationError) as exc_info:
            calcular_split(100, [{"recipient_id": "a", "recipient_type": "x", **destinatario}])

        assert exc_info.value.field == campo

    def test_percentual_e_valor_somados_acima_do_pagamento(self):
        with pytest.raises(ValidationError) as exc_info:
            calcular_split(100, [
                {"recipient_id": "escola", "recipient_type": "institution", "percentage": 100},
                {"recipient_id": "parceiro", "recipient_type": "partner", "amount": 100},
            ])

        assert exc_info.value.field == "recipients"

    def test_percentuais_truncados_nunca_excedem_o_pagamento(self):
        resultado = calcular_split("0.05", [
            {"recipient_id": "a", "recipient_type": "x", "percentage": 50},
            {"recipient_id": "b", "recipient_type": "x", "percentage": 50},
        ])

        assert [r["amount"] for r in resultado] == [Decimal("0.02"), Decimal("0.02")]

    def test_percentual_vazio_usa_valor(self):
        resultado = calcular_split(100, [
            {"recipient_id": "a", "recipient_type": "x", "percentage": "", "amount": "40"},
        ])

        assert resultado[0]["amount"] == Decimal("40.00")
        assert resultado[0]["percentage"] is None
