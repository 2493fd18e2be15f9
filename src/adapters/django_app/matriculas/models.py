"""
Django Models do domínio de Matrículas.

Models são ADAPTERS:
- Persistem MatriculaEntity, DocumentoEntity e ContratoEntity
- Não contêm regra de negócio (transições ficam na entidade)
"""

from django.db import models
from django.utils import timezone

from src.adapters.django_app.academico.models import AlunoModel, CursoModel


class MatriculaStatusChoices(models.TextChoices):
    """Espelha MatriculaStatus do Core."""
    PENDENTE = 'pendente', 'Pendente'
    APROVADO = 'aprovado', 'Aprovado'
    REJEITADO = 'rejeitado', 'Rejeitado'
    ATIVO = 'ativo', 'Ativo'
    TRANCADO = 'trancado', 'Trancado'
    CANCELADO = 'cancelado', 'Cancelado'
    CONCLUIDO = 'concluido', 'Concluído'


class FormaPagamentoChoices(models.TextChoices):
    CARTAO_CREDITO = 'cartao_credito', 'Cartão de crédito'
    BOLETO = 'boleto', 'Boleto'
    PIX = 'pix', 'PIX'
    TRANSFERENCIA = 'transferencia', 'Transferência'


class TipoDocumentoChoices(models.TextChoices):
    RG = 'rg', 'RG'
    CPF = 'cpf', 'CPF'
    COMPROVANTE_RESIDENCIA = 'comprovante_residencia', 'Comprovante de residência'
    HISTORICO_ESCOLAR = 'historico_escolar', 'Histórico escolar'
    DIPLOMA = 'diploma', 'Diploma'
    FOTO = 'foto', 'Foto'
    OUTRO = 'outro', 'Outro'


class DocumentoStatusChoices(models.TextChoices):
    PENDENTE = 'pendente', 'Pendente'
    APROVADO = 'aprovado', 'Aprovado'
    REJEITADO = 'rejeitado', 'Rejeitado'


class ContratoStatusChoices(models.TextChoices):
    PENDENTE = 'pendente', 'Pendente'
    ASSINADO = 'assinado', 'Assinado'
    REJEITADO = 'rejeitado', 'Rejeitado'


class MatriculaModel(models.Model):
    """
    Tabela: matriculas

    Índices:
    - status (filtros de listagem)
    - aluno + status (matrículas de um aluno)
    """

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    aluno = models.ForeignKey(AlunoModel, on_delete=models.PROTECT, related_name='matriculas')
    curso = models.ForeignKey(CursoModel, on_delete=models.PROTECT, related_name='matriculas')
    status = models.CharField(
        max_length=20,
        choices=MatriculaStatusChoices.choices,
        default=MatriculaStatusChoices.PENDENTE,
        db_index=True,
    )
    data_inicio = models.DateField(null=True, blank=True)
    data_termino = models.DateField(null=True, blank=True)

    valor_total = models.DecimalField(max_digits=12, decimal_places=2)
    valor_com_desconto = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    desconto_id = models.CharField(max_length=36, null=True, blank=True)
    forma_pagamento = models.CharField(
        max_length=20,
        choices=FormaPagamentoChoices.choices,
        default=FormaPagamentoChoices.BOLETO,
    )
    numero_parcelas = models.PositiveSmallIntegerField(default=1)
    observacoes = models.TextField(blank=True, default='')
    metadata = models.JSONField(default=dict, blank=True, help_text="Inclui status_history")

    criado_em = models.DateTimeField(default=timezone.now, db_index=True)
    atualizado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'matriculas'
        verbose_name = 'Matrícula'
        verbose_name_plural = 'Matrículas'
        ordering = ['-criado_em']
        indexes = [
            models.Index(fields=['aluno', 'status'], name='idx_matricula_aluno_status'),
        ]

    def __str__(self):
        return f"Matrícula {self.id[:8]} ({self.status})"


class DocumentoModel(models.Model):
    id = models.CharField(max_length=36, primary_key=True, editable=False)

    matricula = models.ForeignKey(MatriculaModel, on_delete=models.CASCADE, related_name='documentos')
    tipo = models.CharField(max_length=30, choices=TipoDocumentoChoices.choices)
    nome_arquivo = models.CharField(max_length=255)
    url = models.CharField(max_length=500)
    status = models.CharField(
        max_length=20,
        choices=DocumentoStatusChoices.choices,
        default=DocumentoStatusChoices.PENDENTE,
        db_index=True,
    )
    observacoes = models.TextField(blank=True, default='')
    avaliado_por = models.CharField(max_length=100, null=True, blank=True)
    avaliado_em = models.DateTimeField(null=True, blank=True)

    criado_em = models.DateTimeField(default=timezone.now)
    atualizado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'matricula_documentos'
        verbose_name = 'Documento'
        verbose_name_plural = 'Documentos'
        ordering = ['criado_em']

    def __str__(self):
        return f"{self.get_tipo_display()} - {self.nome_arquivo}"


class ContratoModel(models.Model):
    id = models.CharField(max_length=36, primary_key=True, editable=False)

    matricula = models.OneToOneField(MatriculaModel, on_delete=models.CASCADE, related_name='contrato')
    titulo = models.CharField(max_length=255)
    versao = models.CharField(max_length=10, default='1.0')
    url = models.CharField(max_length=500)
    status = models.CharField(
        max_length=20,
        choices=ContratoStatusChoices.choices,
        default=ContratoStatusChoices.PENDENTE,
    )
    data_assinatura = models.DateTimeField(null=True, blank=True)
    assinado_por = models.CharField(max_length=100, null=True, blank=True)
    assinatura_metadata = models.JSONField(default=dict, blank=True)

    criado_em = models.DateTimeField(default=timezone.now)
    atualizado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'contratos'
        verbose_name = 'Contrato'
        verbose_name_plural = 'Contratos'

    def __str__(self):
        return self.titulo
