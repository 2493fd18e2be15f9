"""
Testes Unitários das Entidades do Domínio Financeiro.

Testam as regras de negócio encapsuladas em PagamentoEntity,
DescontoEntity e NegociacaoEntity, sem dependências externas.
"""

from datetime import date
from decimal import Decimal

import pytest

from src.core.financeiro.entities import (
    DescontoEntity,
    FormaPagamento,
    NegociacaoEntity,
    NegociacaoStatus,
    PagamentoEntity,
    PaymentStatus,
    TipoDesconto,
    TipoTransacao,
    TransacaoFinanceiraEntity,
)
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    ErrorCode,
    ValidationError,
)


@pytest.fixture
def parcela():
    return PagamentoEntity.criar(
        matricula_id="mat-1",
        numero_parcela=1,
        valor=Decimal("333.33"),
        data_vencimento=date(2024, 2, 10),
    )


class TestPagamentoCriacao:
    """Testes do factory method de PagamentoEntity."""

    def test_criar_parcela_pendente(self, parcela):
        assert parcela.status == PaymentStatus.PENDENTE
        assert parcela.forma_pagamento == FormaPagamento.BOLETO
        assert parcela.valor == Decimal("333.33")
        assert parcela.id

    def test_valor_negativo_invalido(self):
        with pytest.raises(ValidationError) as exc_info:
            PagamentoEntity.criar("mat-1", 1, "-10", date(2024, 2, 10))

        assert exc_info.value.field == "valor"

    def test_numero_parcela_zero_invalido(self):
        with pytest.raises(ValidationError):
            PagamentoEntity.criar("mat-1", 0, 100, date(2024, 2, 10))

    def test_sem_vencimento_invalido(self):
        with pytest.raises(ValidationError):
            PagamentoEntity.criar("mat-1", 1, 100, None)


class TestPagamentoRegistro:
    """Testes de registro de pagamento."""

    def test_registrar_pagamento(self, parcela):
        parcela.registrar_pagamento(date(2024, 2, 9), comprovante_url="/media/c.pdf")

        assert parcela.status == PaymentStatus.PAGO
        assert parcela.data_pagamento == date(2024, 2, 9)
        assert parcela.comprovante_url == "/media/c.pdf"

    def test_registrar_duas_vezes_falha(self, parcela):
        parcela.registrar_pagamento(date(2024, 2, 9))

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            parcela.registrar_pagamento(date(2024, 2, 10))

        assert exc_info.value.code == ErrorCode.ALREADY_PAID

    def test_registrar_cancelado_falha(self, parcela):
        parcela.cancelar()

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            parcela.registrar_pagamento()

        assert exc_info.value.code == ErrorCode.INVALID_STATUS


class TestPagamentoCancelamento:
    """Cancelamento é idempotente."""

    def test_cancelar_define_status_cancelado(self, parcela):
        mudou = parcela.cancelar("Desistência")

        assert mudou is True
        assert parcela.status == PaymentStatus.CANCELADO
        assert parcela.observacoes == "Desistência"

    def test_cancelar_novamente_nao_altera(self, parcela):
        parcela.cancelar("Primeiro")
        atualizado_em = parcela.atualizado_em

        mudou = parcela.cancelar("Segundo")

        assert mudou is False
        assert parcela.status == PaymentStatus.CANCELADO
        assert parcela.observacoes == "Primeiro"
        assert parcela.atualizado_em == atualizado_em

    def test_cancelar_pago_falha(self, parcela):
        parcela.registrar_pagamento()

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            parcela.cancelar()

        assert exc_info.value.code == ErrorCode.INVALID_STATUS
        assert parcela.status == PaymentStatus.PAGO


class TestPagamentoAtraso:

    def test_marcar_atrasado_quando_vencido(self, parcela):
        assert parcela.marcar_atrasado(hoje=date(2024, 2, 11)) is True
        assert parcela.status == PaymentStatus.ATRASADO
        assert parcela.dias_atraso(hoje=date(2024, 2, 15)) == 5

    def test_nao_atrasa_no_dia_do_vencimento(self, parcela):
        assert parcela.marcar_atrasado(hoje=date(2024, 2, 10)) is False
        assert parcela.status == PaymentStatus.PENDENTE

    def test_atrasado_continua_em_aberto(self, parcela):
        parcela.marcar_atrasado(hoje=date(2024, 3, 1))

        assert parcela.em_aberto

    def test_expirar_boleto(self, parcela):
        assert parcela.expirar_boleto() is True
        assert parcela.status == PaymentStatus.ATRASADO


class TestPagamentoEstorno:

    def test_estornar_pago(self, parcela):
        parcela.registrar_pagamento()
        parcela.estornar("Chargeback")

        assert parcela.status == PaymentStatus.REEMBOLSADO

    def test_estornar_pendente_falha(self, parcela):
        with pytest.raises(BusinessRuleViolationError):
            parcela.estornar()


class TestEnums:

    def test_forma_pagamento_invalida(self):
        with pytest.raises(BusinessRuleViolationError) as exc_info:
            FormaPagamento.from_string("cheque")

        assert exc_info.value.code == ErrorCode.INVALID_PAYMENT_METHOD

    def test_forma_pagamento_normaliza_caixa(self):
        assert FormaPagamento.from_string(" PIX ") == FormaPagamento.PIX

    def test_status_pagamento_invalido(self):
        with pytest.raises(ValidationError):
            PaymentStatus.from_string("quitado")


class TestDesconto:
    """Testes de DescontoEntity."""

    def _desconto(self, **kwargs):
        dados = dict(
            nome="Promoção de matrícula",
            codigo="promo10",
            tipo=TipoDesconto.PERCENTUAL,
            valor=10,
            data_inicio=date(2024, 1, 1),
            data_fim=date(2024, 12, 31),
        )
        dados.update(kwargs)
        return DescontoEntity.criar(**dados)

    def test_codigo_normalizado_em_maiusculas(self):
        assert self._desconto().codigo == "PROMO10"

    def test_aplicar_percentual(self):
        assert self._desconto().aplicar(Decimal("1000")) == Decimal("900.00")

    def test_percentual_acima_de_cem(self):
        with pytest.raises(ValidationError):
            self._desconto(valor=150)

    def test_periodo_invertido(self):
        with pytest.raises(ValidationError) as exc_info:
            self._desconto(data_inicio=date(2024, 5, 1), data_fim=date(2024, 4, 1))

        assert exc_info.value.field == "data_fim"

    def test_validar_uso_dentro_do_periodo(self):
        self._desconto().validar_uso(hoje=date(2024, 6, 1))

    def test_validar_uso_expirado(self):
        with pytest.raises(BusinessRuleViolationError) as exc_info:
            self._desconto().validar_uso(hoje=date(2025, 1, 1))

        assert exc_info.value.code == ErrorCode.INVALID_DISCOUNT

    def test_validar_uso_curso_nao_aplicavel(self):
        desconto = self._desconto(cursos_aplicaveis=["curso-a"])

        with pytest.raises(BusinessRuleViolationError):
            desconto.validar_uso(curso_id="curso-b", hoje=date(2024, 6, 1))

    def test_validar_uso_limite_atingido(self):
        desconto = self._desconto(limite_usos=1)
        desconto.registrar_uso()

        with pytest.raises(BusinessRuleViolationError):
            desconto.validar_uso(hoje=date(2024, 6, 1))

    def test_desconto_inativo(self):
        desconto = self._desconto()
        desconto.desativar()

        with pytest.raises(BusinessRuleViolationError):
            desconto.validar_uso(hoje=date(2024, 6, 1))


class TestNegociacao:
    """Testes de NegociacaoEntity."""

    def _parcelas(self):
        return [
            PagamentoEntity.criar("mat-1", i, Decimal("500"), date(2024, i, 10))
            for i in (1, 2)
        ]

    def test_criar_negociacao(self):
        negociacao = NegociacaoEntity.criar(
            aluno_id="aluno-1",
            matricula_id="mat-1",
            pagamentos=self._parcelas(),
            valor_negociado=Decimal("800"),
            numero_parcelas=4,
            data_primeira_parcela=date(2024, 6, 10),
        )

        assert negociacao.status == NegociacaoStatus.PENDENTE
        assert negociacao.valor_original == Decimal("1000.00")
        assert negociacao.desconto_concedido == Decimal("200.00")
        assert len(negociacao.pagamento_ids) == 2

    def test_parcela_paga_nao_pode_ser_negociada(self):
        parcelas = self._parcelas()
        parcelas[0].registrar_pagamento()

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            NegociacaoEntity.criar("aluno-1", "mat-1", parcelas, 800, 2, date(2024, 6, 10))

        assert exc_info.value.code == ErrorCode.INVALID_NEGOTIATION

    def test_sem_parcelas(self):
        with pytest.raises(BusinessRuleViolationError):
            NegociacaoEntity.criar("aluno-1", "mat-1", [], 800, 2, date(2024, 6, 10))

    def test_rejeitada_nao_pode_ser_aprovada(self):
        negociacao = NegociacaoEntity.criar(
            "aluno-1", "mat-1", self._parcelas(), 800, 2, date(2024, 6, 10)
        )
        negociacao.rejeitar("gestor-1", "Valor muito baixo")

        with pytest.raises(BusinessRuleViolationError):
            negociacao.aprovar("gestor-1")

        assert negociacao.observacoes == "Valor muito baixo"


class TestTransacao:

    def test_transacao_a_partir_de_pagamento(self):
        parcela = PagamentoEntity.criar(
            "mat-1", 2, Decimal("250"), date(2024, 3, 10), FormaPagamento.PIX
        )

        transacao = TransacaoFinanceiraEntity.de_pagamento(parcela)

        assert transacao.type == TipoTransacao.INCOME
        assert transacao.amount == Decimal("250.00")
        assert transacao.payment_method == "pix"
        assert transacao.metadata["numero_parcela"] == 2
