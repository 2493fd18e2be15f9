"""
Testes do domínio acadêmico: alunos e cursos.

Coverage:
- Validação de CPF, e-mail e nome
- CriarAlunoService / AtualizarAlunoService / ListarAlunosService
- CriarCursoService / AtualizarCursoService / ListarCursosService
- Turmas (vagas) e disciplinas da matriz curricular
"""

from datetime import date, timedelta

import pytest

from src.core.academico.dtos import (
    AtualizarAlunoInputDTO,
    AtualizarCursoInputDTO,
    CriarAlunoInputDTO,
    CriarCursoInputDTO,
    CriarDisciplinaInputDTO,
    CriarTurmaInputDTO,
    ListarAlunosQueryDTO,
)
from src.core.academico.entities import (
    AlunoEntity,
    CursoEntity,
    DisciplinaCursoEntity,
    GradeCurricularEntity,
    Modalidade,
    TurmaEntity,
    cpf_valido,
)
from src.core.academico.events import AlunoCadastradoEvent, CursoCriadoEvent
from src.core.academico.ports import (
    InMemoryAlunoRepository,
    InMemoryCursoRepository,
    InMemoryDisciplinaCursoRepository,
    InMemoryTurmaRepository,
)
from src.core.academico.use_cases import (
    AtualizarAlunoService,
    AdicionarDisciplinaService,
    AtualizarCursoService,
    CriarAlunoService,
    CriarCursoService,
    CriarTurmaService,
    ListarAlunosService,
    ListarCursosService,
    ListarDisciplinasService,
    ListarTurmasService,
    ObterAlunoService,
)
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    EntityNotFoundError,
    ErrorCode,
    ValidationError,
)


CPF_MARIA = "529.982.247-25"
CPF_JOAO = "111.444.777-35"


@pytest.fixture
def aluno_repo():
    return InMemoryAlunoRepository()


@pytest.fixture
def curso_repo():
    return InMemoryCursoRepository()


class TestCpf:

    @pytest.mark.parametrize("cpf", [CPF_MARIA, "52998224725", CPF_JOAO])
    def test_cpfs_validos(self, cpf):
        assert cpf_valido(cpf)

    @pytest.mark.parametrize("cpf", ["529.982.247-26", "111.111.111-11", "123", ""])
    def test_cpfs_invalidos(self, cpf):
        assert not cpf_valido(cpf)


class TestAlunoEntity:

    def test_normaliza_dados(self):
        aluno = AlunoEntity.criar(" Maria Souza ", "Maria@Exemplo.COM", CPF_MARIA)

        assert aluno.nome == "Maria Souza"
        assert aluno.email == "maria@exemplo.com"
        assert aluno.cpf == "52998224725"
        assert aluno.cpf_formatado == CPF_MARIA

    def test_cpf_invalido(self):
        with pytest.raises(ValidationError) as exc_info:
            AlunoEntity.criar("Maria Souza", "maria@exemplo.com", "529.982.247-26")

        assert exc_info.value.field == "cpf"

    def test_email_invalido(self):
        with pytest.raises(ValidationError) as exc_info:
            AlunoEntity.criar("Maria Souza", "maria.exemplo.com", CPF_MARIA)

        assert exc_info.value.field == "email"

    def test_nascimento_no_futuro(self):
        with pytest.raises(ValidationError):
            AlunoEntity.criar(
                "Maria Souza", "maria@exemplo.com", CPF_MARIA,
                data_nascimento=date.today() + timedelta(days=1),
            )

    def test_anonimizar_desativa(self):
        aluno = AlunoEntity.criar("Maria Souza", "maria@exemplo.com", CPF_MARIA)

        aluno.anonimizar({"nome": "M**** S****", "email": "m***a@exemplo.com"})

        assert aluno.nome == "M**** S****"
        assert aluno.ativo is False
        assert aluno.data_nascimento is None


class TestCursoEntity:

    def test_codigo_em_maiusculas(self):
        curso = CursoEntity.criar("Python Avançado", "py-200", 160, "1500.5", Modalidade.EAD)

        assert curso.codigo == "PY-200"
        assert str(curso.valor) == "1500.50"
        assert curso.prazo_meses == 2

    def test_carga_horaria_invalida(self):
        with pytest.raises(ValidationError) as exc_info:
            CursoEntity.criar("Python", "PY", 0, "100")

        assert exc_info.value.field == "carga_horaria"

    def test_modalidade_invalida(self):
        with pytest.raises(ValidationError):
            Modalidade.from_string("remoto")

    @pytest.mark.parametrize("valor", ["1e30", "10000000000", "9" * 40])
    def test_valor_acima_do_limite(self, valor):
        with pytest.raises(ValidationError) as exc_info:
            CursoEntity.criar("Python", "PY", 10, valor)

        assert exc_info.value.field == "valor"


class TestAlunoServices:
    """Testes dos use cases de aluno."""

    def _criar(self, aluno_repo, uow, **kwargs):
        dados = dict(nome="Maria Souza Lima", email="maria@exemplo.com", cpf=CPF_MARIA)
        dados.update(kwargs)
        return CriarAlunoService(aluno_repo, uow).execute(CriarAlunoInputDTO(**dados))

    def test_cadastrar_aluno(self, aluno_repo, uow):
        saida = self._criar(aluno_repo, uow)

        assert aluno_repo.get_by_id(saida.id) is not None
        assert isinstance(uow.collect_events()[0], AlunoCadastradoEvent)

    def test_cpf_duplicado(self, aluno_repo, uow):
        self._criar(aluno_repo, uow)

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            self._criar(aluno_repo, uow, email="outra@exemplo.com")

        assert exc_info.value.code == ErrorCode.ALREADY_EXISTS

    def test_email_duplicado(self, aluno_repo, uow):
        self._criar(aluno_repo, uow)

        with pytest.raises(BusinessRuleViolationError):
            self._criar(aluno_repo, uow, cpf=CPF_JOAO, email="MARIA@exemplo.com")

    def test_atualizar_email_para_um_existente(self, aluno_repo, uow):
        self._criar(aluno_repo, uow)
        joao = self._criar(aluno_repo, uow, nome="João Silva", email="joao@exemplo.com", cpf=CPF_JOAO)

        with pytest.raises(BusinessRuleViolationError):
            AtualizarAlunoService(aluno_repo, uow).execute(
                AtualizarAlunoInputDTO(joao.id, email="maria@exemplo.com")
            )

    def test_atualizar_telefone(self, aluno_repo, uow):
        maria = self._criar(aluno_repo, uow)

        saida = AtualizarAlunoService(aluno_repo, uow).execute(
            AtualizarAlunoInputDTO(maria.id, telefone="(11) 99999-0000")
        )

        assert saida.telefone == "(11) 99999-0000"
        assert saida.email == "maria@exemplo.com"

    def test_buscar_por_nome(self, aluno_repo, uow):
        self._criar(aluno_repo, uow)
        self._criar(aluno_repo, uow, nome="João Silva", email="joao@exemplo.com", cpf=CPF_JOAO)

        resultado = ListarAlunosService(aluno_repo).execute(ListarAlunosQueryDTO(busca="joão"))

        assert [a.nome for a in resultado] == ["João Silva"]

    def test_aluno_inexistente(self, aluno_repo):
        with pytest.raises(EntityNotFoundError):
            ObterAlunoService(aluno_repo).execute("nao-existe")


class TestCursoServices:

    def test_cadastrar_curso(self, curso_repo, uow):
        saida = CriarCursoService(curso_repo, uow).execute(
            CriarCursoInputDTO("Python Avançado", "py-200", 160, "1500", modalidade="ead")
        )

        assert saida.codigo == "PY-200"
        assert saida.modalidade == "ead"
        assert isinstance(uow.collect_events()[0], CursoCriadoEvent)

    def test_codigo_duplicado(self, curso_repo, uow):
        service = CriarCursoService(curso_repo, uow)
        service.execute(CriarCursoInputDTO("Python Avançado", "PY-200", 160, "1500"))

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            service.execute(CriarCursoInputDTO("Outro curso", "py-200", 80, "500"))

        assert exc_info.value.code == ErrorCode.ALREADY_EXISTS

    def test_desativar_e_listar_ativos(self, curso_repo, uow):
        service = CriarCursoService(curso_repo, uow)
        python = service.execute(CriarCursoInputDTO("Python", "PY", 80, "500"))
        service.execute(CriarCursoInputDTO("Java", "JV", 80, "500"))

        AtualizarCursoService(curso_repo, uow).execute(
            AtualizarCursoInputDTO(python.id, {"ativo": False})
        )

        ativos = ListarCursosService(curso_repo).execute(apenas_ativos=True)
        assert [c.codigo for c in ativos] == ["JV"]


@pytest.fixture
def curso(curso_repo):
    curso = CursoEntity.criar("Python Avançado", "PY-200", 160, "1500")
    curso_repo.save(curso)
    return curso


class TestTurmaEntity:

    def test_criar_normaliza_codigo(self):
        turma = TurmaEntity.criar("c1", "Turma Noturna", " py-2024a ", 30, turno="noite")

        assert turma.codigo == "PY-2024A"
        assert turma.vagas_disponiveis == 30
        assert turma.alunos_alocados == 0

    @pytest.mark.parametrize("vagas", [0, -1, "muitas", None])
    def test_vagas_invalidas(self, vagas):
        with pytest.raises(ValidationError) as exc_info:
            TurmaEntity.criar("c1", "Turma Noturna", "T1", vagas)

        assert exc_info.value.field == "vagas"

    def test_turma_cheia_sem_vaga(self):
        turma = TurmaEntity.criar("c1", "Turma Noturna", "T1", 2)
        turma.alunos_alocados = 2

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            turma.exigir_vaga()

        assert exc_info.value.code == ErrorCode.NO_VACANCIES
        assert turma.vagas_disponiveis == 0


class TestDisciplinaEntity:

    def test_criar(self):
        disciplina = DisciplinaCursoEntity.criar("c1", "alg-1", "Algoritmos", 1, 60)

        assert disciplina.codigo == "ALG-1"
        assert disciplina.to_dict()["carga_horaria"] == 60

    @pytest.mark.parametrize("semestre,carga,campo", [
        (0, 60, "semestre"),
        (1, 0, "carga_horaria"),
        ("primeiro", 60, "semestre"),
    ])
    def test_valores_invalidos(self, semestre, carga, campo):
        with pytest.raises(ValidationError) as exc_info:
            DisciplinaCursoEntity.criar("c1", "ALG-1", "Algoritmos", semestre, carga)

        assert exc_info.value.field == campo

    def test_grade_ordena_por_semestre_e_codigo(self):
        disciplinas = [
            DisciplinaCursoEntity.criar("c1", "WEB", "Desenvolvimento Web", 2, 80),
            DisciplinaCursoEntity.criar("c1", "LOG", "Lógica", 1, 40),
            DisciplinaCursoEntity.criar("c1", "ALG", "Algoritmos", 1, 60),
        ]

        grade = GradeCurricularEntity.gerar("m1", "a1", "c1", disciplinas)

        assert [d["codigo"] for d in grade.disciplinas] == ["ALG", "LOG", "WEB"]
        assert {d["status"] for d in grade.disciplinas} == {"pendente"}
        assert grade.carga_horaria_total == 180


class TestTurmaServices:

    def test_abrir_turma(self, curso, curso_repo, uow):
        turma_repo = InMemoryTurmaRepository()

        saida = CriarTurmaService(turma_repo, curso_repo, uow).execute(
            CriarTurmaInputDTO(curso.id, "Turma Noturna", "t1", 25, turno="noite")
        )

        assert saida.codigo == "T1"
        assert saida.to_dict()["vagas_disponiveis"] == 25
        assert uow.committed

    def test_codigo_repetido_no_mesmo_curso(self, curso, curso_repo, uow):
        turma_repo = InMemoryTurmaRepository()
        service = CriarTurmaService(turma_repo, curso_repo, uow)
        service.execute(CriarTurmaInputDTO(curso.id, "Turma Noturna", "T1", 25))

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            service.execute(CriarTurmaInputDTO(curso.id, "Outra turma", "t1", 10))

        assert exc_info.value.code == ErrorCode.ALREADY_EXISTS

    def test_curso_inexistente(self, curso_repo, uow):
        with pytest.raises(EntityNotFoundError):
            CriarTurmaService(InMemoryTurmaRepository(), curso_repo, uow).execute(
                CriarTurmaInputDTO("nao-existe", "Turma Noturna", "T1", 25)
            )

    def test_listar_apenas_ativas(self, curso, curso_repo):
        turma_repo = InMemoryTurmaRepository()
        ativa = TurmaEntity.criar(curso.id, "Turma A", "A", 10)
        encerrada = TurmaEntity.criar(curso.id, "Turma B", "B", 10)
        encerrada.ativo = False
        turma_repo.save(ativa)
        turma_repo.save(encerrada)

        turmas = ListarTurmasService(turma_repo, curso_repo).execute(curso.id, apenas_ativas=True)

        assert [t.codigo for t in turmas] == ["A"]


class TestDisciplinaServices:

    def test_incluir_e_listar_na_ordem_da_matriz(self, curso, curso_repo, uow):
        repo = InMemoryDisciplinaCursoRepository()
        service = AdicionarDisciplinaService(repo, curso_repo, uow)
        service.execute(CriarDisciplinaInputDTO(curso.id, "WEB", "Desenvolvimento Web", 2, 80))
        service.execute(CriarDisciplinaInputDTO(curso.id, "ALG", "Algoritmos", 1, 60))

        disciplinas = ListarDisciplinasService(repo, curso_repo).execute(curso.id)

        assert [d.codigo for d in disciplinas] == ["ALG", "WEB"]

    def test_disciplina_repetida(self, curso, curso_repo, uow):
        service = AdicionarDisciplinaService(InMemoryDisciplinaCursoRepository(), curso_repo, uow)
        service.execute(CriarDisciplinaInputDTO(curso.id, "ALG", "Algoritmos", 1, 60))

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            service.execute(CriarDisciplinaInputDTO(curso.id, "alg", "Algoritmos II", 2, 60))

        assert exc_info.value.code == ErrorCode.ALREADY_EXISTS
