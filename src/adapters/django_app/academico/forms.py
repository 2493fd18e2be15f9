"""
Forms do domínio Acadêmico.

Validação estrutural apenas; regras (CPF, duplicidade) ficam no Core.
"""

from django import forms

from .models import ModalidadeChoices


class AlunoForm(forms.Form):
    nome = forms.CharField(
        label='Nome',
        max_length=200,
        min_length=3,
        error_messages={'required': 'Nome é obrigatório'},
    )
    email = forms.EmailField(label='E-mail', error_messages={'invalid': 'E-mail inválido'})
    cpf = forms.CharField(label='CPF', max_length=14)
    telefone = forms.CharField(label='Telefone', max_length=20, required=False)
    data_nascimento = forms.DateField(
        label='Data de nascimento',
        required=False,
        widget=forms.DateInput(attrs={'type': 'date'}),
    )
    endereco = forms.CharField(label='Endereço', required=False, widget=forms.Textarea(attrs={'rows': 2}))


class CursoForm(forms.Form):
    nome = forms.CharField(label='Nome', max_length=200, min_length=3)
    codigo = forms.CharField(label='Código', max_length=50, min_length=2)
    descricao = forms.CharField(label='Descrição', required=False, widget=forms.Textarea(attrs={'rows': 3}))
    carga_horaria = forms.IntegerField(label='Carga horária (h)', min_value=1)
    modalidade = forms.ChoiceField(label='Modalidade', choices=ModalidadeChoices.choices)
    valor = forms.DecimalField(label='Valor', max_digits=12, decimal_places=2, min_value=0)
    vagas = forms.IntegerField(label='Vagas', min_value=0, required=False)

    def clean_codigo(self):
        return self.cleaned_data['codigo'].strip().upper()
