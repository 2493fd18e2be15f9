"""
Django Forms do domínio Financeiro.
"""

from django import forms

from .models import TipoDescontoChoices


class DescontoForm(forms.Form):
    nome = forms.CharField(label='Nome', min_length=3, max_length=200)
    codigo = forms.CharField(label='Código', min_length=3, max_length=50)
    tipo = forms.ChoiceField(label='Tipo', choices=TipoDescontoChoices.choices)
    valor = forms.DecimalField(label='Valor', max_digits=12, decimal_places=2, min_value=0.01)
    data_inicio = forms.DateField(
        label='Válido a partir de',
        required=False,
        widget=forms.DateInput(attrs={'type': 'date'}),
    )
    data_fim = forms.DateField(
        label='Válido até',
        required=False,
        widget=forms.DateInput(attrs={'type': 'date'}),
    )
    limite_usos = forms.IntegerField(label='Limite de usos', min_value=1, required=False)
    descricao = forms.CharField(label='Descrição', required=False, widget=forms.Textarea(attrs={'rows': 2}))

    def clean_codigo(self):
        return self.cleaned_data['codigo'].strip().upper()

    def clean(self):
        cleaned = super().clean()
        inicio, fim = cleaned.get('data_inicio'), cleaned.get('data_fim')
        if inicio and fim and fim < inicio:
            self.add_error('data_fim', 'Fim deve ser posterior ao início')
        return cleaned


class RegistrarPagamentoForm(forms.Form):
    data_pagamento = forms.DateField(
        label='Data do pagamento',
        required=False,
        widget=forms.DateInput(attrs={'type': 'date'}),
    )
    observacoes = forms.CharField(label='Observações', required=False, max_length=500)


class CancelarPagamentoForm(forms.Form):
    motivo = forms.CharField(label='Motivo', max_length=500)
