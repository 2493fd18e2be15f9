"""
Testes Unitários para Use Cases do Domínio de Matrículas.

Estratégia de Teste:
- Repositórios e storage em memória
- FakeContratoPdfRenderer no lugar do ReportLab
- FakeUnitOfWork (conftest) para eventos

Coverage:
- CriarMatriculaService (parcelas e desconto)
- AtualizarStatusMatriculaService
- EnviarDocumentoService / AvaliarDocumentoService
- GerarContratoService / AssinarContratoService
"""

from datetime import date
from decimal import Decimal

import pytest

from src.core.academico.entities import AlunoEntity, CursoEntity
from src.core.academico.ports import InMemoryAlunoRepository, InMemoryCursoRepository
from src.core.financeiro.entities import DescontoEntity, PaymentStatus, TipoDesconto
from src.core.financeiro.ports import InMemoryDescontoRepository, InMemoryPagamentoRepository
from src.core.matriculas.dtos import (
    AssinarContratoInputDTO,
    AtualizarStatusMatriculaInputDTO,
    AvaliarDocumentoInputDTO,
    CriarMatriculaInputDTO,
    EnviarDocumentoInputDTO,
    ListarMatriculasQueryDTO,
)
from src.core.matriculas.events import (
    ContratoAssinadoEvent,
    DocumentoAvaliadoEvent,
    MatriculaCriadaEvent,
    MatriculaStatusAlteradoEvent,
)
from src.core.matriculas.ports import (
    FakeContratoPdfRenderer,
    InMemoryContratoRepository,
    InMemoryDocumentoRepository,
    InMemoryMatriculaRepository,
)
from src.core.matriculas.use_cases import (
    AssinarContratoService,
    AtualizarStatusMatriculaService,
    AvaliarDocumentoService,
    CriarMatriculaService,
    EnviarDocumentoService,
    GerarContratoService,
    ListarMatriculasService,
)
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    EntityNotFoundError,
    ErrorCode,
    ValidationError,
)
from src.core.shared.interfaces import InMemoryFileStorage


@pytest.fixture
def repos():
    """Conjunto de repositórios em memória com um aluno e um curso."""

    class Repos:
        aluno = InMemoryAlunoRepository()
        curso = InMemoryCursoRepository()
        matricula = InMemoryMatriculaRepository()
        pagamento = InMemoryPagamentoRepository()
        desconto = InMemoryDescontoRepository()
        documento = InMemoryDocumentoRepository()
        contrato = InMemoryContratoRepository()

    r = Repos()
    r.aluno_maria = AlunoEntity.criar(
        "Maria Souza Lima", "maria@exemplo.com", "529.982.247-25",
        endereco="Rua das Flores, 10",
    )
    r.curso_python = CursoEntity.criar("Python Avançado", "py-200", 160, "1000")
    r.aluno.save(r.aluno_maria)
    r.curso.save(r.curso_python)
    return r


@pytest.fixture
def storage():
    return InMemoryFileStorage()


def _criar_service(repos, uow):
    return CriarMatriculaService(
        repos.matricula, repos.aluno, repos.curso, repos.pagamento, repos.desconto, uow
    )


def _input(repos, **kwargs):
    dados = dict(
        aluno_id=repos.aluno_maria.id,
        curso_id=repos.curso_python.id,
        data_inicio=date(2024, 2, 1),
        valor_total="1000",
        forma_pagamento="boleto",
        numero_parcelas=3,
        data_primeiro_vencimento=date(2024, 2, 10),
    )
    dados.update(kwargs)
    return CriarMatriculaInputDTO(**dados)


@pytest.fixture
def matricula(repos, uow):
    return _criar_service(repos, uow).execute(_input(repos)).matricula


class TestCriarMatriculaService:
    """Testes para CriarMatriculaService."""

    def test_cria_matricula_e_parcelas(self, repos, uow):
        saida = _criar_service(repos, uow).execute(_input(repos))

        assert saida.matricula.status == "pendente"
        assert [p.valor for p in saida.pagamentos] == [
            Decimal("333.33"), Decimal("333.33"), Decimal("333.34"),
        ]
        assert saida.pagamentos[0].data_vencimento == date(2024, 2, 10)
        assert len(repos.pagamento.list_by_matricula(saida.matricula.id)) == 3
        assert isinstance(uow.collect_events()[0], MatriculaCriadaEvent)
        assert uow.committed

    def test_primeiro_vencimento_padrao_e_data_inicio(self, repos, uow):
        saida = _criar_service(repos, uow).execute(
            _input(repos, data_primeiro_vencimento=None, numero_parcelas=1)
        )

        assert saida.pagamentos[0].data_vencimento == date(2024, 2, 1)

    def test_com_desconto_de_dez_por_cento(self, repos, uow):
        desconto = DescontoEntity.criar("Dez por cento", "DEZ10", TipoDesconto.PERCENTUAL, 10)
        repos.desconto.save(desconto)

        saida = _criar_service(repos, uow).execute(_input(repos, desconto_id=desconto.id))

        assert saida.matricula.valor_total == Decimal("1000.00")
        assert saida.matricula.valor_com_desconto == Decimal("900.00")
        assert sum(p.valor for p in saida.pagamentos) == Decimal("900.00")
        assert repos.desconto.get_by_id(desconto.id).usos == 1

    def test_desconto_de_outro_curso(self, repos, uow):
        desconto = DescontoEntity.criar(
            "Só para Java", "JAVA10", TipoDesconto.PERCENTUAL, 10,
            cursos_aplicaveis=["curso-java"],
        )
        repos.desconto.save(desconto)

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            _criar_service(repos, uow).execute(_input(repos, desconto_id=desconto.id))

        assert exc_info.value.code == ErrorCode.INVALID_DISCOUNT

    def test_ultimo_uso_consumido_por_outra_matricula(self, repos, uow, monkeypatch):
        """Cupom lido com usos=0, mas outra matrícula usou a última vaga antes da gravação."""
        import copy

        desconto = DescontoEntity.criar(
            "Último cupom", "ULTIMO", TipoDesconto.PERCENTUAL, 10, limite_usos=1
        )
        repos.desconto.save(desconto)
        leitura_antiga = copy.deepcopy(desconto)
        assert repos.desconto.registrar_uso(desconto.id)
        monkeypatch.setattr(repos.desconto, "get_by_id", lambda _id: leitura_antiga)

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            _criar_service(repos, uow).execute(_input(repos, desconto_id=desconto.id))

        assert exc_info.value.code == ErrorCode.INVALID_DISCOUNT
        assert desconto.usos == 1
        assert uow.rolled_back

    def test_aluno_inexistente(self, repos, uow):
        with pytest.raises(EntityNotFoundError):
            _criar_service(repos, uow).execute(_input(repos, aluno_id="nao-existe"))

        assert uow.rolled_back


class TestAtualizarStatusMatriculaService:

    def test_aprovar_publica_notificacao(self, repos, uow, matricula):
        service = AtualizarStatusMatriculaService(repos.matricula, uow)

        saida = service.execute(
            AtualizarStatusMatriculaInputDTO(matricula.id, "aprovado", "Tudo certo")
        )

        assert saida.status == "aprovado"
        assert saida.status_history[-1]["to"] == "aprovado"
        evento = uow.collect_events()[-1]
        assert isinstance(evento, MatriculaStatusAlteradoEvent)
        assert evento.notificacao == "matricula_aprovada"
        assert evento.status_anterior == "pendente"

    def test_transicao_invalida(self, repos, uow, matricula):
        service = AtualizarStatusMatriculaService(repos.matricula, uow)

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            service.execute(AtualizarStatusMatriculaInputDTO(matricula.id, "concluido"))

        assert exc_info.value.code == ErrorCode.INVALID_STATUS

    def test_listar_por_status(self, repos, uow, matricula):
        AtualizarStatusMatriculaService(repos.matricula, uow).execute(
            AtualizarStatusMatriculaInputDTO(matricula.id, "aprovado")
        )

        listadas = ListarMatriculasService(repos.matricula).execute(
            ListarMatriculasQueryDTO(status="aprovado")
        )

        assert [m.id for m in listadas] == [matricula.id]


class TestDocumentos:
    """Envio e avaliação de documentos."""

    def test_enviar_documento_grava_no_bucket(self, repos, uow, storage, matricula):
        service = EnviarDocumentoService(repos.documento, repos.matricula, storage, uow)

        saida = service.execute(
            EnviarDocumentoInputDTO(matricula.id, "rg", "RG Frente.PDF", b"%PDF-1.4 rg")
        )

        assert saida.status == "pendente"
        caminho = next(iter(storage.arquivos))
        assert caminho.startswith(f"matricula_documentos/{matricula.id}/rg_")
        assert caminho.endswith(".pdf")
        assert saida.url == f"memory://{caminho}"

    def test_arquivo_vazio(self, repos, uow, storage, matricula):
        service = EnviarDocumentoService(repos.documento, repos.matricula, storage, uow)

        with pytest.raises(ValidationError):
            service.execute(EnviarDocumentoInputDTO(matricula.id, "rg", "rg.pdf", b""))

    def test_avaliar_documento(self, repos, uow, storage, matricula):
        documento = EnviarDocumentoService(
            repos.documento, repos.matricula, storage, uow
        ).execute(EnviarDocumentoInputDTO(matricula.id, "cpf", "cpf.png", b"png"))
        service = AvaliarDocumentoService(repos.documento, repos.matricula, uow)

        saida = service.execute(
            AvaliarDocumentoInputDTO(documento.id, "aprovado", avaliado_por="secretaria")
        )

        assert saida.status == "aprovado"
        evento = uow.collect_events()[-1]
        assert isinstance(evento, DocumentoAvaliadoEvent)
        assert evento.aluno_id == repos.aluno_maria.id

    def test_avaliar_com_status_invalido(self, repos, uow, storage, matricula):
        documento = EnviarDocumentoService(
            repos.documento, repos.matricula, storage, uow
        ).execute(EnviarDocumentoInputDTO(matricula.id, "cpf", "cpf.png", b"png"))
        service = AvaliarDocumentoService(repos.documento, repos.matricula, uow)

        with pytest.raises(ValidationError) as exc_info:
            service.execute(AvaliarDocumentoInputDTO(documento.id, "em_analise"))

        assert exc_info.value.field == "status"
        assert repos.documento.get_by_id(documento.id).status.value == "pendente"


class TestContratos:
    """Geração e assinatura de contratos."""

    @pytest.fixture
    def renderer(self):
        return FakeContratoPdfRenderer()

    def _gerar(self, repos, uow, storage, renderer):
        return GerarContratoService(
            repos.contrato, repos.matricula, repos.aluno, repos.curso,
            repos.desconto, storage, renderer, uow,
        )

    def test_gerar_contrato(self, repos, uow, storage, renderer, matricula):
        contrato = self._gerar(repos, uow, storage, renderer).execute(matricula.id)

        assert contrato.status == "pendente"
        assert contrato.titulo == "Contrato de Matrícula - Python Avançado"
        dados = renderer.renderizados[0]
        assert dados.aluno_cpf == "529.982.247-25"
        assert dados.valor_parcela == Decimal("333.33")
        assert dados.prazo_meses == 2
        caminho = next(iter(storage.arquivos))
        assert caminho.startswith(f"matricula_contratos/contrato_{matricula.id}_")

    def test_contrato_unico_por_matricula(self, repos, uow, storage, renderer, matricula):
        service = self._gerar(repos, uow, storage, renderer)
        service.execute(matricula.id)

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            service.execute(matricula.id)

        assert exc_info.value.code == ErrorCode.ALREADY_EXISTS

    def test_assinar_contrato(self, repos, uow, storage, renderer, matricula):
        contrato = self._gerar(repos, uow, storage, renderer).execute(matricula.id)
        service = AssinarContratoService(repos.contrato, repos.matricula, uow)

        saida = service.execute(
            AssinarContratoInputDTO(contrato.id, "aluno-1", ip="10.0.0.1", user_agent="pytest")
        )

        assert saida.status == "assinado"
        assert saida.assinatura_metadata["ip"] == "10.0.0.1"
        assert isinstance(uow.collect_events()[-1], ContratoAssinadoEvent)

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            service.execute(AssinarContratoInputDTO(contrato.id, "aluno-1"))
        assert exc_info.value.code == ErrorCode.ALREADY_SIGNED
