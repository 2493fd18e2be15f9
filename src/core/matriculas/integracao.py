"""
Integração da matrícula com a vida acadêmica.

Use Cases implementados:
- AlocarTurmaService: ocupa vaga em turma do curso da matrícula
- VerificarRequisitosAcademicosService: documentos obrigatórios aprovados
- GerarGradeCurricularService / ObterGradeCurricularService

Alocação e grade exigem matrícula aprovada ou ativa.
"""

import logging
from typing import List

from src.core.academico.dtos import (
    AlocarTurmaInputDTO,
    GradeCurricularOutputDTO,
    RequisitosAcademicosOutputDTO,
)
from src.core.academico.entities import AlocacaoTurmaEntity, GradeCurricularEntity
from src.core.academico.events import AlunoAlocadoTurmaEvent, GradeCurricularGeradaEvent
from src.core.academico.ports import (
    AlocacaoTurmaRepository,
    DisciplinaCursoRepository,
    GradeCurricularRepository,
    TurmaRepository,
)
from src.core.academico.use_cases import obter_turma_ou_erro
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    EntityNotFoundError,
    ErrorCode,
)
from src.core.shared.interfaces import UnitOfWork

from .entities import DocumentoStatus, MatriculaEntity, MatriculaStatus, TipoDocumento
from .ports import DocumentoRepository, MatriculaRepository
from .use_cases import obter_matricula_ou_erro


logger = logging.getLogger(__name__)

DOCUMENTOS_OBRIGATORIOS = (
    TipoDocumento.RG,
    TipoDocumento.CPF,
    TipoDocumento.HISTORICO_ESCOLAR,
)

STATUS_ACADEMICOS = (MatriculaStatus.APROVADO, MatriculaStatus.ATIVO)


def exigir_matricula_vigente(matricula: MatriculaEntity) -> None:
    if matricula.status not in STATUS_ACADEMICOS:
        raise BusinessRuleViolationError(
            "Matrícula não está ativa ou aprovada",
            rule="matricula_nao_vigente",
            code=ErrorCode.INVALID_STATUS,
        )


class AlocarTurmaService:
    """
    Use Case: Alocar o aluno da matrícula em uma turma.

    Regras (na ordem verificada):
    1. Matrícula aprovada ou ativa (INVALID_STATUS)
    2. Turma do mesmo curso da matrícula (INVALID_CLASS)
    3. Turma com vaga (NO_VACANCIES)
    4. Aluno ainda não alocado na turma (ALREADY_ALLOCATED)

    A vaga é ocupada no repositório de forma atômica: duas alocações
    simultâneas na última vaga resultam em uma única alocação.
    """

    def __init__(
        self,
        matricula_repo: MatriculaRepository,
        turma_repo: TurmaRepository,
        alocacao_repo: AlocacaoTurmaRepository,
        uow: UnitOfWork,
    ):
        self.matricula_repo = matricula_repo
        self.turma_repo = turma_repo
        self.alocacao_repo = alocacao_repo
        self.uow = uow

    def execute(self, input_dto: AlocarTurmaInputDTO) -> AlocacaoTurmaEntity:
        with self.uow:
            matricula = obter_matricula_ou_erro(self.matricula_repo, input_dto.matricula_id)
            exigir_matricula_vigente(matricula)

            turma = obter_turma_ou_erro(self.turma_repo, input_dto.turma_id)
            if turma.curso_id != matricula.curso_id:
                raise BusinessRuleViolationError(
                    "Turma não pertence ao curso da matrícula",
                    rule="turma_de_outro_curso",
                    code=ErrorCode.INVALID_CLASS,
                )

            turma.exigir_vaga()

            if self.alocacao_repo.existe(matricula.aluno_id, turma.id):
                raise BusinessRuleViolationError(
                    "Aluno já está alocado nesta turma",
                    rule="aluno_ja_alocado",
                    code=ErrorCode.ALREADY_ALLOCATED,
                )

            if not self.turma_repo.ocupar_vaga(turma.id):
                raise BusinessRuleViolationError(
                    "Não há vagas disponíveis nesta turma",
                    rule="turma_lotada",
                    code=ErrorCode.NO_VACANCIES,
                )

            turma = self.turma_repo.get_by_id(turma.id)
            alocacao = AlocacaoTurmaEntity(
                turma_id=turma.id,
                matricula_id=matricula.id,
                aluno_id=matricula.aluno_id,
                observacoes=(input_dto.observacoes or "").strip(),
            )
            self.alocacao_repo.save(alocacao)
            self.uow.publish_event(
                AlunoAlocadoTurmaEvent(
                    aggregate_id=turma.id,
                    matricula_id=matricula.id,
                    aluno_id=matricula.aluno_id,
                    vagas_restantes=turma.vagas_disponiveis,
                )
            )

        logger.info(f"Matrícula {matricula.id} alocada na turma {turma.codigo}")
        return alocacao


class VerificarRequisitosAcademicosService:
    """
    Use Case: Conferir se a matrícula cumpre os requisitos acadêmicos.

    Cada documento obrigatório sem versão aprovada gera uma pendência.
    """

    def __init__(self, matricula_repo: MatriculaRepository, documento_repo: DocumentoRepository):
        self.matricula_repo = matricula_repo
        self.documento_repo = documento_repo

    def execute(self, matricula_id: str) -> RequisitosAcademicosOutputDTO:
        matricula = obter_matricula_ou_erro(self.matricula_repo, matricula_id)
        aprovados = {
            d.tipo
            for d in self.documento_repo.list_by_matricula(matricula.id)
            if d.status == DocumentoStatus.APROVADO
        }
        pendencias: List[str] = [
            f"Documento obrigatório não aprovado: {tipo.value}"
            for tipo in DOCUMENTOS_OBRIGATORIOS
            if tipo not in aprovados
        ]
        return RequisitosAcademicosOutputDTO(
            matricula_id=matricula.id,
            aprovado=not pendencias,
            pendencias=pendencias,
        )


class GerarGradeCurricularService:
    """
    Use Case: Gerar a grade curricular do aluno a partir da matriz do curso.

    Uma grade por aluno e curso (ALREADY_EXISTS na segunda tentativa).
    Curso sem disciplinas gera grade vazia.
    """

    def __init__(
        self,
        matricula_repo: MatriculaRepository,
        disciplina_repo: DisciplinaCursoRepository,
        grade_repo: GradeCurricularRepository,
        uow: UnitOfWork,
    ):
        self.matricula_repo = matricula_repo
        self.disciplina_repo = disciplina_repo
        self.grade_repo = grade_repo
        self.uow = uow

    def execute(self, matricula_id: str) -> GradeCurricularOutputDTO:
        with self.uow:
            matricula = obter_matricula_ou_erro(self.matricula_repo, matricula_id)
            exigir_matricula_vigente(matricula)

            if self.grade_repo.get_by_aluno_curso(matricula.aluno_id, matricula.curso_id):
                raise BusinessRuleViolationError(
                    "Já existe uma grade curricular para esta matrícula",
                    rule="grade_unica",
                    code=ErrorCode.ALREADY_EXISTS,
                )

            grade = GradeCurricularEntity.gerar(
                matricula_id=matricula.id,
                aluno_id=matricula.aluno_id,
                curso_id=matricula.curso_id,
                disciplinas=self.disciplina_repo.list_by_curso(matricula.curso_id),
            )
            self.grade_repo.save(grade)
            self.uow.publish_event(
                GradeCurricularGeradaEvent(
                    aggregate_id=grade.id,
                    matricula_id=matricula.id,
                    aluno_id=matricula.aluno_id,
                    curso_id=matricula.curso_id,
                    total_disciplinas=len(grade.disciplinas),
                )
            )

        logger.info(f"Grade curricular gerada para matrícula {matricula.id}: {len(grade.disciplinas)} disciplinas")
        return GradeCurricularOutputDTO.from_entity(grade)


class ObterGradeCurricularService:
    def __init__(self, grade_repo: GradeCurricularRepository):
        self.grade_repo = grade_repo

    def execute(self, matricula_id: str) -> GradeCurricularOutputDTO:
        grade = self.grade_repo.get_by_matricula(matricula_id)
        if not grade:
            raise EntityNotFoundError(
                "Grade curricular não encontrada",
                entity_type="GradeCurricular",
                entity_id=matricula_id,
            )
        return GradeCurricularOutputDTO.from_entity(grade)
