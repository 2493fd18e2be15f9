"""
Repositórios Django do domínio Acadêmico.

Implementam os ports de src/core/academico/ports.py (alunos, cursos,
turmas, alocações, disciplinas e grades) sobre o BaseRepository
compartilhado.
"""

from typing import List, Optional
import logging

from django.db.models import F, Q
from django.utils import timezone

from src.core.academico.entities import (
    AlocacaoTurmaEntity,
    AlunoEntity,
    CursoEntity,
    DisciplinaCursoEntity,
    GradeCurricularEntity,
    TurmaEntity,
    somente_digitos,
)

from ..shared.repository import BaseRepository, CachingRepositoryMixin
from .mappers import (
    AlocacaoTurmaMapper,
    AlunoMapper,
    CursoMapper,
    DisciplinaCursoMapper,
    GradeCurricularMapper,
    TurmaMapper,
)
from .models import (
    AlocacaoTurmaModel,
    AlunoModel,
    CursoModel,
    DisciplinaCursoModel,
    GradeCurricularModel,
    TurmaModel,
)

logger = logging.getLogger(__name__)


class DjangoAlunoRepository(BaseRepository[AlunoEntity, AlunoModel]):
    """
    Example:
        repo = DjangoAlunoRepository()
        repo.save(aluno)
        repo.buscar("maria", ativo=True)
    """

    model_class = AlunoModel
    default_order_field = 'nome'

    def to_entity(self, model: AlunoModel) -> AlunoEntity:
        return AlunoMapper.to_entity(model)

    def to_model(self, entity: AlunoEntity) -> AlunoModel:
        return AlunoMapper.to_model(entity)

    def get_by_cpf(self, cpf: str) -> Optional[AlunoEntity]:
        model = AlunoModel.objects.filter(cpf=cpf).first()
        return self.to_entity(model) if model else None

    def get_by_email(self, email: str) -> Optional[AlunoEntity]:
        model = AlunoModel.objects.filter(email__iexact=email).first()
        return self.to_entity(model) if model else None

    def list_all(self) -> List[AlunoEntity]:
        return self._to_entities(AlunoModel.objects.order_by('nome'))

    def buscar(self, termo: Optional[str] = None, ativo: Optional[bool] = None) -> List[AlunoEntity]:
        qs = AlunoModel.objects.all()
        if termo:
            filtro = Q(nome__icontains=termo) | Q(email__icontains=termo)
            digitos = somente_digitos(termo)
            if digitos:
                filtro |= Q(cpf__contains=digitos)
            qs = qs.filter(filtro)
        if ativo is not None:
            qs = qs.filter(ativo=ativo)
        return self._to_entities(qs.order_by('nome'))


class DjangoCursoRepository(BaseRepository[CursoEntity, CursoModel]):
    model_class = CursoModel
    default_order_field = 'nome'

    def to_entity(self, model: CursoModel) -> CursoEntity:
        return CursoMapper.to_entity(model)

    def to_model(self, entity: CursoEntity) -> CursoModel:
        return CursoMapper.to_model(entity)

    def get_by_codigo(self, codigo: str) -> Optional[CursoEntity]:
        model = CursoModel.objects.filter(codigo__iexact=codigo).first()
        return self.to_entity(model) if model else None

    def list_all(self, apenas_ativos: bool = False) -> List[CursoEntity]:
        qs = CursoModel.objects.all()
        if apenas_ativos:
            qs = qs.filter(ativo=True)
        return self._to_entities(qs.order_by('nome'))


class CachedCursoRepository(CachingRepositoryMixin, DjangoCursoRepository):
    """Cursos mudam pouco e são lidos em toda matrícula e relatório."""

    cache_timeout = 600


class DjangoTurmaRepository(BaseRepository[TurmaEntity, TurmaModel]):
    model_class = TurmaModel
    default_order_field = 'codigo'

    def to_entity(self, model: TurmaModel) -> TurmaEntity:
        return TurmaMapper.to_entity(model)

    def to_model(self, entity: TurmaEntity) -> TurmaModel:
        return TurmaMapper.to_model(entity)

    def get_by_codigo(self, curso_id: str, codigo: str) -> Optional[TurmaEntity]:
        model = TurmaModel.objects.filter(curso_id=curso_id, codigo__iexact=codigo).first()
        return self.to_entity(model) if model else None

    def list_by_curso(self, curso_id: str, apenas_ativas: bool = False) -> List[TurmaEntity]:
        qs = TurmaModel.objects.filter(curso_id=curso_id)
        if apenas_ativas:
            qs = qs.filter(ativo=True)
        return self._to_entities(qs.order_by('codigo'))

    def ocupar_vaga(self, turma_id: str) -> bool:
        """UPDATE condicional: só incrementa enquanto alunos_alocados < vagas."""
        atualizadas = (
            TurmaModel.objects
            .filter(pk=turma_id, alunos_alocados__lt=F('vagas'))
            .update(alunos_alocados=F('alunos_alocados') + 1, atualizado_em=timezone.now())
        )
        return atualizadas == 1


class DjangoAlocacaoTurmaRepository(BaseRepository[AlocacaoTurmaEntity, AlocacaoTurmaModel]):
    model_class = AlocacaoTurmaModel
    default_order_field = '-alocado_em'

    def to_entity(self, model: AlocacaoTurmaModel) -> AlocacaoTurmaEntity:
        return AlocacaoTurmaMapper.to_entity(model)

    def to_model(self, entity: AlocacaoTurmaEntity) -> AlocacaoTurmaModel:
        return AlocacaoTurmaMapper.to_model(entity)

    def existe(self, aluno_id: str, turma_id: str) -> bool:
        return AlocacaoTurmaModel.objects.filter(aluno_id=aluno_id, turma_id=turma_id).exists()

    def list_by_matricula(self, matricula_id: str) -> List[AlocacaoTurmaEntity]:
        return self._to_entities(
            AlocacaoTurmaModel.objects.filter(matricula_id=matricula_id).order_by('alocado_em')
        )


class DjangoDisciplinaCursoRepository(BaseRepository[DisciplinaCursoEntity, DisciplinaCursoModel]):
    model_class = DisciplinaCursoModel
    default_order_field = 'semestre'

    def to_entity(self, model: DisciplinaCursoModel) -> DisciplinaCursoEntity:
        return DisciplinaCursoMapper.to_entity(model)

    def to_model(self, entity: DisciplinaCursoEntity) -> DisciplinaCursoModel:
        return DisciplinaCursoMapper.to_model(entity)

    def get_by_codigo(self, curso_id: str, codigo: str) -> Optional[DisciplinaCursoEntity]:
        model = DisciplinaCursoModel.objects.filter(curso_id=curso_id, codigo__iexact=codigo).first()
        return self.to_entity(model) if model else None

    def list_by_curso(self, curso_id: str) -> List[DisciplinaCursoEntity]:
        return self._to_entities(
            DisciplinaCursoModel.objects.filter(curso_id=curso_id).order_by('semestre', 'codigo')
        )


class DjangoGradeCurricularRepository(BaseRepository[GradeCurricularEntity, GradeCurricularModel]):
    model_class = GradeCurricularModel

    def to_entity(self, model: GradeCurricularModel) -> GradeCurricularEntity:
        return GradeCurricularMapper.to_entity(model)

    def to_model(self, entity: GradeCurricularEntity) -> GradeCurricularModel:
        return GradeCurricularMapper.to_model(entity)

    def get_by_aluno_curso(self, aluno_id: str, curso_id: str) -> Optional[GradeCurricularEntity]:
        model = GradeCurricularModel.objects.filter(aluno_id=aluno_id, curso_id=curso_id).first()
        return self.to_entity(model) if model else None

    def get_by_matricula(self, matricula_id: str) -> Optional[GradeCurricularEntity]:
        model = GradeCurricularModel.objects.filter(matricula_id=matricula_id).first()
        return self.to_entity(model) if model else None
