"""
Django Admin do domínio Acadêmico.
"""

from django.contrib import admin

from .models import (
    AlocacaoTurmaModel,
    AlunoModel,
    CursoModel,
    DisciplinaCursoModel,
    GradeCurricularModel,
    TurmaModel,
)


@admin.register(AlunoModel)
class AlunoAdmin(admin.ModelAdmin):
    list_display = ['nome', 'email', 'cpf_mascarado', 'telefone', 'ativo', 'criado_em']
    list_filter = ['ativo', 'criado_em']
    search_fields = ['nome', 'email', 'cpf']
    readonly_fields = ['id', 'criado_em', 'atualizado_em']
    ordering = ['nome']

    def cpf_mascarado(self, obj):
        """Exibe apenas os dois últimos dígitos."""
        if len(obj.cpf) != 11:
            return obj.cpf
        return f"***.***.***-{obj.cpf[-2:]}"
    cpf_mascarado.short_description = 'CPF'


class DisciplinaInline(admin.TabularInline):
    model = DisciplinaCursoModel
    extra = 0
    fields = ['semestre', 'codigo', 'nome', 'carga_horaria']


@admin.register(CursoModel)
class CursoAdmin(admin.ModelAdmin):
    inlines = [DisciplinaInline]
    list_display = ['codigo', 'nome', 'modalidade', 'carga_horaria', 'valor', 'vagas', 'ativo']
    list_filter = ['modalidade', 'ativo']
    search_fields = ['codigo', 'nome']
    readonly_fields = ['id', 'criado_em', 'atualizado_em']
    ordering = ['nome']


@admin.register(TurmaModel)
class TurmaAdmin(admin.ModelAdmin):
    list_display = ['codigo', 'nome', 'curso', 'turno', 'vagas', 'alunos_alocados', 'ativo']
    list_filter = ['ativo', 'turno']
    search_fields = ['codigo', 'nome', 'curso__codigo']
    readonly_fields = ['id', 'alunos_alocados', 'criado_em', 'atualizado_em']


@admin.register(AlocacaoTurmaModel)
class AlocacaoTurmaAdmin(admin.ModelAdmin):
    list_display = ['turma', 'aluno', 'matricula', 'status', 'alocado_em']
    list_filter = ['status']
    search_fields = ['turma__codigo', 'aluno__nome']
    readonly_fields = ['id', 'alocado_em']


@admin.register(GradeCurricularModel)
class GradeCurricularAdmin(admin.ModelAdmin):
    list_display = ['aluno', 'curso', 'status', 'criado_em']
    list_filter = ['status']
    search_fields = ['aluno__nome', 'curso__codigo']
    readonly_fields = ['id', 'disciplinas', 'criado_em']
