"""
Django Models do domínio Acadêmico.

Models são ADAPTERS: persistem as entidades acadêmicas (alunos, cursos,
turmas, disciplinas e grades) e não contêm regra de negócio. Unicidade de CPF/e-mail é verificada nos
use cases (dados anonimizados pela LGPD podem repetir).
"""

from django.db import models
from django.utils import timezone


class ModalidadeChoices(models.TextChoices):
    """Espelha Modalidade do Core."""
    PRESENCIAL = 'presencial', 'Presencial'
    EAD = 'ead', 'EAD'
    HIBRIDO = 'hibrido', 'Híbrido'


class AlunoModel(models.Model):
    id = models.CharField(max_length=36, primary_key=True, editable=False)

    nome = models.CharField(max_length=200, db_index=True)
    email = models.CharField(max_length=254, db_index=True)
    cpf = models.CharField(
        max_length=14,
        db_index=True,
        help_text="Apenas dígitos (ou valor anonimizado)"
    )
    telefone = models.CharField(max_length=20, blank=True, default='')
    data_nascimento = models.DateField(null=True, blank=True)
    endereco = models.TextField(blank=True, default='')
    ativo = models.BooleanField(default=True, db_index=True)

    criado_em = models.DateTimeField(default=timezone.now, db_index=True)
    atualizado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'alunos'
        verbose_name = 'Aluno'
        verbose_name_plural = 'Alunos'
        ordering = ['nome']

    def __str__(self):
        return f"{self.nome} <{self.email}>"


class CursoModel(models.Model):
    id = models.CharField(max_length=36, primary_key=True, editable=False)

    nome = models.CharField(max_length=200)
    codigo = models.CharField(max_length=50, unique=True)
    descricao = models.TextField(blank=True, default='')
    carga_horaria = models.PositiveIntegerField(help_text="Horas")
    modalidade = models.CharField(
        max_length=20,
        choices=ModalidadeChoices.choices,
        default=ModalidadeChoices.PRESENCIAL,
    )
    valor = models.DecimalField(max_digits=12, decimal_places=2)
    vagas = models.PositiveIntegerField(null=True, blank=True)
    ativo = models.BooleanField(default=True, db_index=True)

    criado_em = models.DateTimeField(default=timezone.now)
    atualizado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'cursos'
        verbose_name = 'Curso'
        verbose_name_plural = 'Cursos'
        ordering = ['nome']

    def __str__(self):
        return f"[{self.codigo}] {self.nome}"


class TurmaModel(models.Model):
    id = models.CharField(max_length=36, primary_key=True, editable=False)
    curso = models.ForeignKey(CursoModel, on_delete=models.PROTECT, related_name='turmas')

    nome = models.CharField(max_length=200)
    codigo = models.CharField(max_length=50)
    turno = models.CharField(max_length=30, blank=True, default='')
    data_inicio = models.DateField(null=True, blank=True)
    vagas = models.PositiveIntegerField()
    alunos_alocados = models.PositiveIntegerField(default=0)
    ativo = models.BooleanField(default=True, db_index=True)

    criado_em = models.DateTimeField(default=timezone.now)
    atualizado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'turmas'
        verbose_name = 'Turma'
        verbose_name_plural = 'Turmas'
        ordering = ['codigo']
        constraints = [
            models.UniqueConstraint(fields=['curso', 'codigo'], name='uniq_turma_curso_codigo'),
        ]

    def __str__(self):
        return f"{self.codigo} ({self.alunos_alocados}/{self.vagas})"


class AlocacaoTurmaModel(models.Model):
    id = models.CharField(max_length=36, primary_key=True, editable=False)
    turma = models.ForeignKey(TurmaModel, on_delete=models.PROTECT, related_name='alocacoes')
    matricula = models.ForeignKey(
        'matriculas.MatriculaModel', on_delete=models.PROTECT, related_name='alocacoes'
    )
    aluno = models.ForeignKey(AlunoModel, on_delete=models.PROTECT, related_name='alocacoes')
    status = models.CharField(max_length=20, default='ativa')
    observacoes = models.TextField(blank=True, default='')
    alocado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'alocacoes_turma'
        verbose_name = 'Alocação em turma'
        verbose_name_plural = 'Alocações em turma'
        ordering = ['-alocado_em']
        constraints = [
            models.UniqueConstraint(fields=['aluno', 'turma'], name='uniq_alocacao_aluno_turma'),
        ]


class DisciplinaCursoModel(models.Model):
    id = models.CharField(max_length=36, primary_key=True, editable=False)
    curso = models.ForeignKey(CursoModel, on_delete=models.CASCADE, related_name='disciplinas')
    codigo = models.CharField(max_length=50)
    nome = models.CharField(max_length=200)
    semestre = models.PositiveSmallIntegerField()
    carga_horaria = models.PositiveIntegerField(help_text="Horas")

    class Meta:
        db_table = 'disciplinas_curso'
        verbose_name = 'Disciplina do curso'
        verbose_name_plural = 'Disciplinas do curso'
        ordering = ['semestre', 'codigo']
        constraints = [
            models.UniqueConstraint(fields=['curso', 'codigo'], name='uniq_disciplina_curso_codigo'),
        ]

    def __str__(self):
        return f"{self.codigo} - {self.nome} ({self.semestre}º sem.)"


class GradeCurricularModel(models.Model):
    """``disciplinas``: cópia das disciplinas do curso com o status de cada uma."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)
    matricula = models.ForeignKey(
        'matriculas.MatriculaModel', on_delete=models.PROTECT, related_name='grades'
    )
    aluno = models.ForeignKey(AlunoModel, on_delete=models.PROTECT, related_name='grades')
    curso = models.ForeignKey(CursoModel, on_delete=models.PROTECT, related_name='grades')
    status = models.CharField(max_length=20, default='ativa')
    disciplinas = models.JSONField(default=list, blank=True)
    criado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'grades_curriculares'
        verbose_name = 'Grade curricular'
        verbose_name_plural = 'Grades curriculares'
        ordering = ['-criado_em']
        constraints = [
            models.UniqueConstraint(fields=['aluno', 'curso'], name='uniq_grade_aluno_curso'),
        ]
