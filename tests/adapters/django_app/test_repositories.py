"""
Testes dos repositórios Django.

Verifica persistência e consultas contra o banco de teste (SQLite em
memória): conversão entity <-> model, filtros por status/data e
repositórios de auditoria.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from src.adapters.django_app.academico.repositories import (
    CachedCursoRepository,
    DjangoAlunoRepository,
    DjangoCursoRepository,
    DjangoDisciplinaCursoRepository,
    DjangoGradeCurricularRepository,
    DjangoTurmaRepository,
)
from src.adapters.django_app.auditoria.repositories import (
    DjangoFeedbackRepository,
    DjangoMetricRepository,
    DjangoTransactionLogRepository,
)
from src.adapters.django_app.financeiro.repositories import (
    CachedDescontoRepository,
    DjangoDescontoRepository,
    DjangoPagamentoRepository,
)
from src.adapters.django_app.matriculas.repositories import (
    DjangoContratoRepository,
    DjangoDocumentoRepository,
    DjangoMatriculaRepository,
)
from src.adapters.django_app.shared.repository import PaginationParams
from src.core.academico.entities import (
    AlunoEntity,
    CursoEntity,
    DisciplinaCursoEntity,
    GradeCurricularEntity,
    TurmaEntity,
)
from src.core.financeiro.entities import (
    DescontoEntity,
    FormaPagamento,
    PagamentoEntity,
    PaymentStatus,
    TipoDesconto,
)
from src.core.matriculas.entities import (
    ContratoEntity,
    DocumentoEntity,
    MatriculaEntity,
    MatriculaStatus,
    TipoDocumento,
)
from src.core.monitoramento.entities import (
    Feedback,
    FeedbackPriority,
    FeedbackStatus,
    FeedbackType,
    MetricType,
    SatisfactionLevel,
)
from src.core.monitoramento.ports import FeedbackFilters
from src.core.monitoramento.services import MonitoringService
from src.core.seguranca.entities import TransactionLogEntry, TransactionStatus, TransactionType

pytestmark = pytest.mark.django_db


@pytest.fixture
def aluno():
    aluno = AlunoEntity.criar("Maria Souza", "maria@exemplo.com", "529.982.247-25")
    DjangoAlunoRepository().save(aluno)
    return aluno


@pytest.fixture
def curso():
    curso = CursoEntity.criar("Python Avançado", "PY-200", 160, "1000.00")
    DjangoCursoRepository().save(curso)
    return curso


@pytest.fixture
def matricula(aluno, curso):
    matricula = MatriculaEntity.criar(
        aluno.id, curso.id, date(2024, 3, 1), "1000.00", FormaPagamento.BOLETO, 3
    )
    DjangoMatriculaRepository().save(matricula)
    return matricula


class TestAcademicoRepositories:

    def test_aluno_roundtrip(self, aluno):
        repo = DjangoAlunoRepository()

        salvo = repo.get_by_id(aluno.id)

        assert salvo.nome == "Maria Souza"
        assert salvo.cpf == "52998224725"
        assert repo.get_by_cpf("52998224725").id == aluno.id
        assert repo.get_by_email("MARIA@exemplo.com").id == aluno.id

    def test_buscar_aluno(self, aluno):
        repo = DjangoAlunoRepository()

        assert [a.id for a in repo.buscar("souza")] == [aluno.id]
        assert repo.buscar("inexistente") == []

    def test_inexistente(self):
        assert DjangoAlunoRepository().get_by_id("nao-existe") is None

    def test_cursos_ativos(self, curso):
        repo = DjangoCursoRepository()
        inativo = CursoEntity.criar("Curso Antigo", "OLD-1", 10, "100")
        inativo.ativo = False
        repo.save(inativo)

        assert [c.id for c in repo.list_all(apenas_ativos=True)] == [curso.id]
        assert repo.get_by_codigo("PY-200").valor == Decimal("1000.00")

    def test_curso_em_cache_invalida_ao_salvar(self, curso):
        repo = CachedCursoRepository()

        assert repo.get_by_id(curso.id).nome == "Python Avançado"
        curso.nome = "Python Expert"
        repo.save(curso)

        assert repo.get_by_id(curso.id).nome == "Python Expert"


class TestTurmaEGradeRepositories:

    def test_ocupar_vaga_respeita_o_limite(self, curso):
        repo = DjangoTurmaRepository()
        turma = TurmaEntity.criar(curso.id, "Turma Noturna", "T1", 2)
        repo.save(turma)

        ocupadas = [repo.ocupar_vaga(turma.id) for _ in range(3)]

        assert ocupadas == [True, True, False]
        assert repo.get_by_id(turma.id).alunos_alocados == 2

    def test_leitura_antiga_nao_libera_vaga(self, curso):
        repo = DjangoTurmaRepository()
        turma = TurmaEntity.criar(curso.id, "Turma Noturna", "T1", 1)
        repo.save(turma)
        lida_antes = repo.get_by_id(turma.id)

        assert repo.ocupar_vaga(turma.id)
        assert lida_antes.vagas_disponiveis == 1
        assert not repo.ocupar_vaga(lida_antes.id)

    def test_turma_inexistente(self):
        assert DjangoTurmaRepository().ocupar_vaga("nao-existe") is False

    def test_codigo_por_curso(self, curso):
        repo = DjangoTurmaRepository()
        repo.save(TurmaEntity.criar(curso.id, "Turma Noturna", "t1", 10))

        assert repo.get_by_codigo(curso.id, "T1").nome == "Turma Noturna"
        assert repo.get_by_codigo("outro-curso", "T1") is None

    def test_grade_roundtrip(self, matricula):
        disciplinas = DjangoDisciplinaCursoRepository()
        disciplinas.save(DisciplinaCursoEntity.criar(matricula.curso_id, "WEB", "Web", 2, 80))
        disciplinas.save(DisciplinaCursoEntity.criar(matricula.curso_id, "ALG", "Algoritmos", 1, 60))
        repo = DjangoGradeCurricularRepository()
        grade = GradeCurricularEntity.gerar(
            matricula.id, matricula.aluno_id, matricula.curso_id,
            disciplinas.list_by_curso(matricula.curso_id),
        )
        repo.save(grade)

        salva = repo.get_by_matricula(matricula.id)

        assert [d["codigo"] for d in salva.disciplinas] == ["ALG", "WEB"]
        assert salva.carga_horaria_total == 140
        assert repo.get_by_aluno_curso(matricula.aluno_id, matricula.curso_id).id == grade.id


class TestMatriculaRepositories:

    def test_historico_de_status_persistido(self, matricula):
        repo = DjangoMatriculaRepository()
        matricula.alterar_status(MatriculaStatus.APROVADO, "Documentos ok")
        repo.save(matricula)

        salva = repo.get_by_id(matricula.id)

        assert salva.status == MatriculaStatus.APROVADO
        assert salva.historico_status[0]["from"] == "pendente"
        assert salva.historico_status[0]["observacoes"] == "Documentos ok"

    def test_filtros(self, matricula, aluno):
        repo = DjangoMatriculaRepository()

        assert len(repo.list_all(aluno_id=aluno.id)) == 1
        assert repo.list_all(status=MatriculaStatus.ATIVO) == []

    def test_paginacao(self, matricula):
        resultado = DjangoMatriculaRepository().list_paginated(
            PaginationParams(page=1, per_page=10), filters={"status": "pendente"}
        )

        assert resultado.total == 1
        assert resultado.items[0].id == matricula.id

    def test_documentos_e_contrato(self, matricula):
        documentos = DjangoDocumentoRepository()
        contratos = DjangoContratoRepository()
        documentos.save(DocumentoEntity.criar(matricula.id, TipoDocumento.RG, "rg.pdf", "/media/rg.pdf"))
        contratos.save(ContratoEntity.criar(matricula.id, "Python Avançado", "/media/c.pdf"))

        assert documentos.list_by_matricula(matricula.id)[0].nome_arquivo == "rg.pdf"
        assert contratos.get_by_matricula(matricula.id).titulo == (
            "Contrato de Matrícula - Python Avançado"
        )


class TestPagamentoRepository:

    @pytest.fixture
    def parcelas(self, matricula):
        parcelas = [
            PagamentoEntity.criar(matricula.id, n, "333.33", date(2024, 3, 10) + timedelta(days=30 * (n - 1)))
            for n in (1, 2, 3)
        ]
        DjangoPagamentoRepository().save_many(parcelas)
        return parcelas

    def test_por_matricula_ordenado(self, parcelas, matricula):
        salvas = DjangoPagamentoRepository().list_by_matricula(matricula.id)

        assert [p.numero_parcela for p in salvas] == [1, 2, 3]
        assert salvas[0].valor == Decimal("333.33")

    def test_vencidos_e_vencendo(self, parcelas):
        repo = DjangoPagamentoRepository()

        vencidos = repo.list_vencidos(date(2024, 4, 9))
        vencendo = repo.list_vencendo(date(2024, 4, 8), date(2024, 4, 10))

        assert [p.numero_parcela for p in vencidos] == [1]
        assert [p.numero_parcela for p in vencendo] == [2]

    def test_pago_sai_dos_vencidos(self, parcelas):
        repo = DjangoPagamentoRepository()
        parcelas[0].registrar_pagamento(date(2024, 3, 12))
        repo.save(parcelas[0])

        assert repo.list_vencidos(date(2024, 4, 9)) == []
        assert [p.id for p in repo.list_pagos_entre(date(2024, 3, 1), date(2024, 3, 31))] == [
            parcelas[0].id
        ]
        assert repo.list_by_status(PaymentStatus.PAGO)[0].data_pagamento == date(2024, 3, 12)

    def test_gateway_id(self, parcelas):
        repo = DjangoPagamentoRepository()
        parcelas[1].vincular_gateway("gw_123", {"payment_url": "https://x"})
        repo.save(parcelas[1])

        encontrado = repo.get_by_gateway_id("gw_123")

        assert encontrado.id == parcelas[1].id
        assert encontrado.gateway_data == {"payment_url": "https://x"}

    def test_list_by_ids_preserva_ordem(self, parcelas):
        ids = [parcelas[2].id, parcelas[0].id, "nao-existe"]

        assert [p.id for p in DjangoPagamentoRepository().list_by_ids(ids)] == ids[:2]


class TestDescontoRepository:

    def test_roundtrip(self, curso):
        repo = DjangoDescontoRepository()
        desconto = DescontoEntity.criar(
            "Primeira turma", "PRIMEIRA10", TipoDesconto.PERCENTUAL, "10",
            cursos_aplicaveis=[curso.id],
        )
        repo.save(desconto)

        salvo = repo.get_by_codigo("PRIMEIRA10")

        assert salvo.valor == Decimal("10")
        assert salvo.cursos_aplicaveis == [curso.id]

    def test_registrar_uso_respeita_limite(self):
        repo = DjangoDescontoRepository()
        desconto = DescontoEntity.criar(
            "Último cupom", "ULTIMO", TipoDesconto.PERCENTUAL, "10", limite_usos=1
        )
        repo.save(desconto)

        assert repo.registrar_uso(desconto.id) is True
        assert repo.registrar_uso(desconto.id) is False
        assert repo.get_by_id(desconto.id).usos == 1

    def test_leitura_antiga_nao_libera_novo_uso(self):
        """Duas matrículas leram usos=0; só o primeiro UPDATE passa."""
        repo = DjangoDescontoRepository()
        desconto = DescontoEntity.criar(
            "Último cupom", "ULTIMO", TipoDesconto.PERCENTUAL, "10", limite_usos=1
        )
        repo.save(desconto)
        primeira = repo.get_by_id(desconto.id)
        segunda = repo.get_by_id(desconto.id)

        primeira.validar_uso()
        segunda.validar_uso()

        assert repo.registrar_uso(primeira.id) is True
        assert repo.registrar_uso(segunda.id) is False
        assert repo.get_by_id(desconto.id).usos == 1

    def test_sem_limite_e_desconto_inexistente(self):
        repo = DjangoDescontoRepository()
        desconto = DescontoEntity.criar("Livre", "LIVRE", TipoDesconto.VALOR_FIXO, "50")
        repo.save(desconto)

        for _ in range(3):
            assert repo.registrar_uso(desconto.id)

        assert repo.get_by_id(desconto.id).usos == 3
        assert repo.registrar_uso("nao-existe") is False

    def test_registrar_uso_invalida_cache(self):
        repo = CachedDescontoRepository()
        desconto = DescontoEntity.criar("Livre", "LIVRE", TipoDesconto.VALOR_FIXO, "50")
        repo.save(desconto)
        assert repo.get_by_id(desconto.id).usos == 0

        repo.registrar_uso(desconto.id)

        assert repo.get_by_id(desconto.id).usos == 1


class TestAuditoriaRepositories:

    def test_logs_por_usuario(self):
        repo = DjangoTransactionLogRepository()
        antigo = TransactionLogEntry(
            TransactionType.PAYMENT, TransactionStatus.SUCCESS,
            user_id="u1", created_at=datetime.now() - timedelta(hours=1),
        )
        novo = TransactionLogEntry(TransactionType.DATA_ACCESS, TransactionStatus.SUCCESS, user_id="u1")
        repo.save(antigo)
        repo.save(novo)
        repo.save(TransactionLogEntry(TransactionType.PAYMENT, TransactionStatus.SUCCESS, user_id="u2"))

        assert [e.id for e in repo.list_by_user("u1")] == [novo.id, antigo.id]
        assert [e.id for e in repo.list_by_user("u1", transaction_type=TransactionType.PAYMENT)] == [
            antigo.id
        ]

    def test_metricas_e_alertas(self):
        service = MonitoringService(DjangoMetricRepository())
        service.record_response_time("/api/pagamentos", 2500)
        service.record_response_time("/api/pagamentos", 100)
        agora = datetime.now()

        stats = service.get_metric_stats(
            MetricType.RESPONSE_TIME, agora - timedelta(minutes=1), agora + timedelta(minutes=1)
        )
        alertas = service.list_alerts(severity="critical")

        assert stats["count"] == 2
        assert stats["max"] == 2500
        assert len(alertas) == 1
        assert alertas[0]["metric_value"] == 2500

    def test_feedback_filtros_e_ordem(self):
        repo = DjangoFeedbackRepository()
        antigo = Feedback(
            user_id="u1", type=FeedbackType.BUG, message="Erro ao gerar boleto",
            module="financeiro", satisfaction_level=SatisfactionLevel.DISSATISFIED,
            priority=FeedbackPriority.HIGH, tags=["bug", "module:financeiro"],
            created_at=datetime.now() - timedelta(days=3),
        )
        novo = Feedback(user_id="u2", type=FeedbackType.GENERAL, message="Portal muito bom", module="financeiro")
        repo.save(antigo)
        repo.save(novo)
        antigo.status = FeedbackStatus.REVIEWED
        repo.save(antigo)

        todos = repo.buscar(FeedbackFilters(module="financeiro"))
        recentes = repo.buscar(FeedbackFilters(start_date=datetime.now() - timedelta(days=1)))
        salvo = repo.get_by_id(antigo.id)

        assert [f.id for f in todos] == [novo.id, antigo.id]
        assert [f.id for f in recentes] == [novo.id]
        assert salvo.status == FeedbackStatus.REVIEWED
        assert salvo.satisfaction_level == SatisfactionLevel.DISSATISFIED
        assert salvo.tags == ["bug", "module:financeiro"]
        assert repo.buscar(FeedbackFilters(user_id="u3")) == []
