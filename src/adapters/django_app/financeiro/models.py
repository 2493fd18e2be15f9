"""
Django Models do domínio Financeiro.

Tabelas:
- pagamentos: parcelas das matrículas
- descontos: cupons
- negociacoes: renegociações de parcelas em aberto
- split_pagamentos: divisão de um pagamento entre recebedores
- transacoes_financeiras: fluxo de caixa
"""

from django.db import models
from django.utils import timezone

from src.adapters.django_app.matriculas.models import FormaPagamentoChoices, MatriculaModel


class PaymentStatusChoices(models.TextChoices):
    """Espelha PaymentStatus do Core."""
    PENDENTE = 'pendente', 'Pendente'
    PAGO = 'pago', 'Pago'
    ATRASADO = 'atrasado', 'Atrasado'
    CANCELADO = 'cancelado', 'Cancelado'
    REEMBOLSADO = 'reembolsado', 'Reembolsado'


class TipoDescontoChoices(models.TextChoices):
    PERCENTUAL = 'percentual', 'Percentual'
    VALOR_FIXO = 'valor_fixo', 'Valor fixo'


class NegociacaoStatusChoices(models.TextChoices):
    PENDENTE = 'pendente', 'Pendente'
    APROVADA = 'aprovada', 'Aprovada'
    REJEITADA = 'rejeitada', 'Rejeitada'
    CANCELADA = 'cancelada', 'Cancelada'
    CONCLUIDA = 'concluida', 'Concluída'


class TipoTransacaoChoices(models.TextChoices):
    INCOME = 'income', 'Receita'
    EXPENSE = 'expense', 'Despesa'
    REFUND = 'refund', 'Estorno'


class PagamentoModel(models.Model):
    """
    Tabela: pagamentos

    Índices:
    - status + data_vencimento (verificação de vencidos e dashboard)
    - gateway_id (webhooks)
    """

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    matricula = models.ForeignKey(MatriculaModel, on_delete=models.CASCADE, related_name='pagamentos')
    numero_parcela = models.PositiveSmallIntegerField()
    valor = models.DecimalField(max_digits=12, decimal_places=2)
    data_vencimento = models.DateField(db_index=True)
    data_pagamento = models.DateField(null=True, blank=True, db_index=True)
    status = models.CharField(
        max_length=20,
        choices=PaymentStatusChoices.choices,
        default=PaymentStatusChoices.PENDENTE,
    )
    forma_pagamento = models.CharField(
        max_length=20,
        choices=FormaPagamentoChoices.choices,
        default=FormaPagamentoChoices.BOLETO,
    )
    gateway_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    gateway_data = models.JSONField(default=dict, blank=True)
    comprovante_url = models.CharField(max_length=500, null=True, blank=True)
    observacoes = models.TextField(blank=True, default='')
    negociacao_id = models.CharField(max_length=36, null=True, blank=True)

    criado_em = models.DateTimeField(default=timezone.now)
    atualizado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'pagamentos'
        verbose_name = 'Pagamento'
        verbose_name_plural = 'Pagamentos'
        ordering = ['data_vencimento', 'numero_parcela']
        indexes = [
            models.Index(fields=['status', 'data_vencimento'], name='idx_pagamento_status_venc'),
        ]

    def __str__(self):
        return f"Parcela {self.numero_parcela} - R$ {self.valor} ({self.status})"


class DescontoModel(models.Model):
    id = models.CharField(max_length=36, primary_key=True, editable=False)

    nome = models.CharField(max_length=200)
    codigo = models.CharField(max_length=50, unique=True)
    descricao = models.TextField(blank=True, default='')
    tipo = models.CharField(max_length=20, choices=TipoDescontoChoices.choices)
    valor = models.DecimalField(max_digits=12, decimal_places=2)
    data_inicio = models.DateField(null=True, blank=True)
    data_fim = models.DateField(null=True, blank=True)
    cursos_aplicaveis = models.JSONField(default=list, blank=True, help_text="IDs de cursos; vazio = todos")
    limite_usos = models.PositiveIntegerField(null=True, blank=True)
    usos = models.PositiveIntegerField(default=0)
    ativo = models.BooleanField(default=True, db_index=True)

    criado_em = models.DateTimeField(default=timezone.now)
    atualizado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'descontos'
        verbose_name = 'Desconto'
        verbose_name_plural = 'Descontos'
        ordering = ['codigo']

    def __str__(self):
        return f"{self.codigo} - {self.nome}"


class NegociacaoModel(models.Model):
    id = models.CharField(max_length=36, primary_key=True, editable=False)

    aluno_id = models.CharField(max_length=36, db_index=True)
    matricula_id = models.CharField(max_length=36, blank=True, default='')
    responsavel_id = models.CharField(max_length=100, null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=NegociacaoStatusChoices.choices,
        default=NegociacaoStatusChoices.PENDENTE,
    )
    valor_original = models.DecimalField(max_digits=12, decimal_places=2)
    valor_negociado = models.DecimalField(max_digits=12, decimal_places=2)
    numero_parcelas = models.PositiveSmallIntegerField()
    data_primeira_parcela = models.DateField(null=True, blank=True)
    observacoes = models.TextField(blank=True, default='')
    pagamento_ids = models.JSONField(default=list)

    criado_em = models.DateTimeField(default=timezone.now)
    atualizado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'negociacoes'
        verbose_name = 'Negociação'
        verbose_name_plural = 'Negociações'
        ordering = ['-criado_em']

    def __str__(self):
        return f"Negociação {self.id[:8]} ({self.status})"


class SplitPagamentoModel(models.Model):
    id = models.CharField(max_length=36, primary_key=True, editable=False)

    payment = models.ForeignKey(PagamentoModel, on_delete=models.CASCADE, related_name='splits')
    recipient_id = models.CharField(max_length=100)
    recipient_type = models.CharField(max_length=50)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    percentage = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=PaymentStatusChoices.choices,
        default=PaymentStatusChoices.PENDENTE,
    )
    criado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'split_pagamentos'
        verbose_name = 'Split de pagamento'
        verbose_name_plural = 'Splits de pagamento'
        ordering = ['criado_em']


class TransacaoFinanceiraModel(models.Model):
    id = models.CharField(max_length=36, primary_key=True, editable=False)

    reference_id = models.CharField(max_length=36, db_index=True)
    reference_type = models.CharField(max_length=50, default='payment')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    type = models.CharField(max_length=20, choices=TipoTransacaoChoices.choices)
    status = models.CharField(max_length=20, default='completed')
    payment_method = models.CharField(max_length=20, null=True, blank=True)
    description = models.CharField(max_length=255, blank=True, default='')
    metadata = models.JSONField(default=dict, blank=True)
    criado_em = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'transacoes_financeiras'
        verbose_name = 'Transação financeira'
        verbose_name_plural = 'Transações financeiras'
        ordering = ['criado_em']

    def __str__(self):
        return f"{self.type} R$ {self.amount} ({self.reference_type} {self.reference_id[:8]})"
