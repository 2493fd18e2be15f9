"""
Testes da integração matrícula x vida acadêmica.

Coverage:
- AlocarTurmaService (curso, status, vagas, alocação repetida)
- VerificarRequisitosAcademicosService
- GerarGradeCurricularService / ObterGradeCurricularService
"""

import pytest

from src.core.academico.dtos import AlocarTurmaInputDTO
from src.core.academico.entities import DisciplinaCursoEntity, TurmaEntity
from src.core.academico.events import AlunoAlocadoTurmaEvent, GradeCurricularGeradaEvent
from src.core.academico.ports import (
    InMemoryAlocacaoTurmaRepository,
    InMemoryDisciplinaCursoRepository,
    InMemoryGradeCurricularRepository,
    InMemoryTurmaRepository,
)
from src.core.matriculas.entities import (
    DocumentoEntity,
    DocumentoStatus,
    MatriculaEntity,
    MatriculaStatus,
    TipoDocumento,
)
from src.core.matriculas.integracao import (
    AlocarTurmaService,
    GerarGradeCurricularService,
    ObterGradeCurricularService,
    VerificarRequisitosAcademicosService,
)
from src.core.matriculas.ports import InMemoryDocumentoRepository, InMemoryMatriculaRepository
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    EntityNotFoundError,
    ErrorCode,
)


@pytest.fixture
def matricula_repo():
    return InMemoryMatriculaRepository()


@pytest.fixture
def turma_repo():
    return InMemoryTurmaRepository()


@pytest.fixture
def alocacao_repo():
    return InMemoryAlocacaoTurmaRepository()


def _matricula(repo, status=MatriculaStatus.APROVADO, curso_id="curso-py", aluno_id="aluno-1"):
    matricula = MatriculaEntity(aluno_id=aluno_id, curso_id=curso_id, status=status)
    repo.save(matricula)
    return matricula


def _turma(repo, vagas=2, curso_id="curso-py", codigo="T1"):
    turma = TurmaEntity.criar(curso_id, "Turma Noturna", codigo, vagas)
    repo.save(turma)
    return turma


class TurmaDisputada(InMemoryTurmaRepository):
    """Outra alocação ocupa a última vaga entre a leitura e o UPDATE."""

    def ocupar_vaga(self, turma_id):
        return False


class TestAlocarTurmaService:

    def _service(self, matricula_repo, turma_repo, alocacao_repo, uow):
        return AlocarTurmaService(matricula_repo, turma_repo, alocacao_repo, uow)

    def test_aloca_e_ocupa_vaga(self, matricula_repo, turma_repo, alocacao_repo, uow):
        matricula = _matricula(matricula_repo, status=MatriculaStatus.ATIVO)
        turma = _turma(turma_repo, vagas=2)

        alocacao = self._service(matricula_repo, turma_repo, alocacao_repo, uow).execute(
            AlocarTurmaInputDTO(matricula.id, turma.id, observacoes=" noturno ")
        )

        assert alocacao.aluno_id == "aluno-1"
        assert alocacao.observacoes == "noturno"
        assert turma_repo.get_by_id(turma.id).alunos_alocados == 1
        evento = uow.collect_events()[0]
        assert isinstance(evento, AlunoAlocadoTurmaEvent)
        assert evento.vagas_restantes == 1
        assert uow.committed

    def test_ultima_vaga(self, matricula_repo, turma_repo, alocacao_repo, uow):
        matricula = _matricula(matricula_repo)
        turma = _turma(turma_repo, vagas=1)

        self._service(matricula_repo, turma_repo, alocacao_repo, uow).execute(
            AlocarTurmaInputDTO(matricula.id, turma.id)
        )

        assert turma_repo.get_by_id(turma.id).vagas_disponiveis == 0
        assert uow.collect_events()[0].vagas_restantes == 0

    def test_turma_de_outro_curso(self, matricula_repo, turma_repo, alocacao_repo, uow):
        matricula = _matricula(matricula_repo)
        turma = _turma(turma_repo, curso_id="curso-java")

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            self._service(matricula_repo, turma_repo, alocacao_repo, uow).execute(
                AlocarTurmaInputDTO(matricula.id, turma.id)
            )

        assert exc_info.value.code == ErrorCode.INVALID_CLASS
        assert alocacao_repo.alocacoes == []

    @pytest.mark.parametrize("status", [
        MatriculaStatus.PENDENTE,
        MatriculaStatus.TRANCADO,
        MatriculaStatus.CANCELADO,
    ])
    def test_matricula_nao_vigente(self, matricula_repo, turma_repo, alocacao_repo, uow, status):
        matricula = _matricula(matricula_repo, status=status)
        turma = _turma(turma_repo)

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            self._service(matricula_repo, turma_repo, alocacao_repo, uow).execute(
                AlocarTurmaInputDTO(matricula.id, turma.id)
            )

        assert exc_info.value.code == ErrorCode.INVALID_STATUS
        assert turma_repo.get_by_id(turma.id).alunos_alocados == 0

    def test_turma_lotada(self, matricula_repo, turma_repo, alocacao_repo, uow):
        matricula = _matricula(matricula_repo)
        turma = _turma(turma_repo, vagas=1)
        turma.alunos_alocados = 1

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            self._service(matricula_repo, turma_repo, alocacao_repo, uow).execute(
                AlocarTurmaInputDTO(matricula.id, turma.id)
            )

        assert exc_info.value.code == ErrorCode.NO_VACANCIES
        assert uow.rolled_back

    def test_aluno_ja_alocado(self, matricula_repo, turma_repo, alocacao_repo, uow):
        matricula = _matricula(matricula_repo)
        turma = _turma(turma_repo, vagas=5)
        service = self._service(matricula_repo, turma_repo, alocacao_repo, uow)
        service.execute(AlocarTurmaInputDTO(matricula.id, turma.id))

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            service.execute(AlocarTurmaInputDTO(matricula.id, turma.id))

        assert exc_info.value.code == ErrorCode.ALREADY_ALLOCATED
        assert turma_repo.get_by_id(turma.id).alunos_alocados == 1
        assert len(alocacao_repo.alocacoes) == 1

    def test_vaga_ocupada_por_alocacao_concorrente(self, matricula_repo, alocacao_repo, uow):
        turma_repo = TurmaDisputada()
        matricula = _matricula(matricula_repo)
        turma = _turma(turma_repo, vagas=1)

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            self._service(matricula_repo, turma_repo, alocacao_repo, uow).execute(
                AlocarTurmaInputDTO(matricula.id, turma.id)
            )

        assert exc_info.value.code == ErrorCode.NO_VACANCIES
        assert alocacao_repo.alocacoes == []
        assert uow.rolled_back

    def test_turma_inexistente(self, matricula_repo, turma_repo, alocacao_repo, uow):
        matricula = _matricula(matricula_repo)

        with pytest.raises(EntityNotFoundError):
            self._service(matricula_repo, turma_repo, alocacao_repo, uow).execute(
                AlocarTurmaInputDTO(matricula.id, "nao-existe")
            )


class TestVerificarRequisitosAcademicos:

    def _documento(self, repo, matricula_id, tipo, status=DocumentoStatus.APROVADO):
        documento = DocumentoEntity.criar(matricula_id, tipo, f"{tipo.value}.pdf", "/docs")
        documento.status = status
        repo.save(documento)

    def test_todos_os_documentos_aprovados(self, matricula_repo):
        documento_repo = InMemoryDocumentoRepository()
        matricula = _matricula(matricula_repo)
        for tipo in (TipoDocumento.RG, TipoDocumento.CPF, TipoDocumento.HISTORICO_ESCOLAR):
            self._documento(documento_repo, matricula.id, tipo)

        resultado = VerificarRequisitosAcademicosService(matricula_repo, documento_repo).execute(
            matricula.id
        )

        assert resultado.to_dict() == {
            "matricula_id": matricula.id,
            "approved": True,
            "reasons": [],
        }

    def test_documentos_pendentes_e_rejeitados(self, matricula_repo):
        documento_repo = InMemoryDocumentoRepository()
        matricula = _matricula(matricula_repo)
        self._documento(documento_repo, matricula.id, TipoDocumento.RG)
        self._documento(
            documento_repo, matricula.id, TipoDocumento.CPF, status=DocumentoStatus.REJEITADO
        )

        resultado = VerificarRequisitosAcademicosService(matricula_repo, documento_repo).execute(
            matricula.id
        )

        assert not resultado.aprovado
        assert resultado.pendencias == [
            "Documento obrigatório não aprovado: cpf",
            "Documento obrigatório não aprovado: historico_escolar",
        ]


class TestGradeCurricular:

    @pytest.fixture
    def disciplina_repo(self):
        repo = InMemoryDisciplinaCursoRepository()
        repo.save(DisciplinaCursoEntity.criar("curso-py", "WEB", "Desenvolvimento Web", 2, 80))
        repo.save(DisciplinaCursoEntity.criar("curso-py", "ALG", "Algoritmos", 1, 60))
        repo.save(DisciplinaCursoEntity.criar("curso-java", "JVM", "Máquina Virtual", 1, 40))
        return repo

    def test_gera_grade_do_curso(self, matricula_repo, disciplina_repo, uow):
        grade_repo = InMemoryGradeCurricularRepository()
        matricula = _matricula(matricula_repo)

        saida = GerarGradeCurricularService(
            matricula_repo, disciplina_repo, grade_repo, uow
        ).execute(matricula.id)

        dados = saida.to_dict()
        assert [d["codigo"] for d in dados["disciplinas"]] == ["ALG", "WEB"]
        assert dados["carga_horaria_total"] == 140
        assert grade_repo.get_by_matricula(matricula.id) is not None
        evento = uow.collect_events()[0]
        assert isinstance(evento, GradeCurricularGeradaEvent)
        assert evento.total_disciplinas == 2

    def test_segunda_grade_para_o_mesmo_curso(self, matricula_repo, disciplina_repo, uow):
        grade_repo = InMemoryGradeCurricularRepository()
        matricula = _matricula(matricula_repo)
        service = GerarGradeCurricularService(matricula_repo, disciplina_repo, grade_repo, uow)
        service.execute(matricula.id)

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            service.execute(matricula.id)

        assert exc_info.value.code == ErrorCode.ALREADY_EXISTS

    def test_matricula_pendente(self, matricula_repo, disciplina_repo, uow):
        matricula = _matricula(matricula_repo, status=MatriculaStatus.PENDENTE)

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            GerarGradeCurricularService(
                matricula_repo, disciplina_repo, InMemoryGradeCurricularRepository(), uow
            ).execute(matricula.id)

        assert exc_info.value.code == ErrorCode.INVALID_STATUS

    def test_obter_grade_inexistente(self):
        with pytest.raises(EntityNotFoundError):
            ObterGradeCurricularService(InMemoryGradeCurricularRepository()).execute("nao-existe")
