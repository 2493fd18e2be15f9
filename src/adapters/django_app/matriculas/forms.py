"""
Django Forms do domínio de Matrículas.

Forms validam apenas a estrutura da entrada; transições de status,
descontos e parcelamento são regras do Core.
"""

from django import forms

from .models import (
    DocumentoStatusChoices,
    FormaPagamentoChoices,
    MatriculaStatusChoices,
    TipoDocumentoChoices,
)

TAMANHO_MAXIMO_DOCUMENTO = 10 * 1024 * 1024
EXTENSOES_DOCUMENTO = ('.pdf', '.jpg', '.jpeg', '.png')


class MatriculaCreateForm(forms.Form):
    """
    Escolhas de aluno e curso são carregadas pela view
    (``alunos`` e ``cursos`` são listas de DTOs).
    """

    aluno_id = forms.ChoiceField(label='Aluno', widget=forms.Select(attrs={'class': 'form-control'}))
    curso_id = forms.ChoiceField(label='Curso', widget=forms.Select(attrs={'class': 'form-control'}))
    data_inicio = forms.DateField(
        label='Início',
        widget=forms.DateInput(attrs={'type': 'date', 'class': 'form-control'}),
    )
    data_termino = forms.DateField(
        label='Término',
        required=False,
        widget=forms.DateInput(attrs={'type': 'date', 'class': 'form-control'}),
    )
    valor_total = forms.DecimalField(
        label='Valor total',
        required=False,
        max_digits=12,
        decimal_places=2,
        help_text='Em branco usa o valor do curso',
    )
    forma_pagamento = forms.ChoiceField(
        label='Forma de pagamento',
        choices=FormaPagamentoChoices.choices,
        initial=FormaPagamentoChoices.BOLETO,
    )
    numero_parcelas = forms.IntegerField(label='Parcelas', min_value=1, max_value=48, initial=1)
    data_primeiro_vencimento = forms.DateField(
        label='Primeiro vencimento',
        required=False,
        widget=forms.DateInput(attrs={'type': 'date', 'class': 'form-control'}),
    )
    codigo_desconto = forms.CharField(label='Cupom de desconto', max_length=50, required=False)
    observacoes = forms.CharField(label='Observações', required=False, widget=forms.Textarea(attrs={'rows': 2}))

    def __init__(self, *args, alunos=(), cursos=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['aluno_id'].choices = [(a.id, f"{a.nome} ({a.email})") for a in alunos]
        self.fields['curso_id'].choices = [(c.id, f"[{c.codigo}] {c.nome}") for c in cursos]

    def clean(self):
        cleaned = super().clean()
        inicio, termino = cleaned.get('data_inicio'), cleaned.get('data_termino')
        if inicio and termino and termino < inicio:
            self.add_error('data_termino', 'Término deve ser posterior ao início')
        return cleaned


class MatriculaStatusForm(forms.Form):
    status = forms.ChoiceField(label='Novo status', choices=MatriculaStatusChoices.choices)
    observacoes = forms.CharField(label='Observações', required=False, widget=forms.Textarea(attrs={'rows': 2}))


class DocumentoUploadForm(forms.Form):
    tipo = forms.ChoiceField(label='Tipo', choices=TipoDocumentoChoices.choices)
    arquivo = forms.FileField(label='Arquivo')

    def clean_arquivo(self):
        arquivo = self.cleaned_data['arquivo']
        if arquivo.size > TAMANHO_MAXIMO_DOCUMENTO:
            raise forms.ValidationError('Arquivo maior que 10 MB')
        if not arquivo.name.lower().endswith(EXTENSOES_DOCUMENTO):
            raise forms.ValidationError('Envie PDF, JPG ou PNG')
        return arquivo


class DocumentoAvaliarForm(forms.Form):
    status = forms.ChoiceField(label='Parecer', choices=DocumentoStatusChoices.choices)
    observacoes = forms.CharField(label='Observações', required=False, widget=forms.Textarea(attrs={'rows': 2}))


class ContratoAssinarForm(forms.Form):
    aceite = forms.BooleanField(
        label='Li e aceito os termos do contrato',
        error_messages={'required': 'É necessário aceitar os termos'},
    )
