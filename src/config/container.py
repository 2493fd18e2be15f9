"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação com
dependency-injector.

Padrões:
- Singleton: uma instância por processo (repositories, infraestrutura)
- Factory: nova instância por chamada (services, UoW)

Os imports são feitos sob demanda (``_lazy``): os adapters dependem do
registro de apps do Django, que ainda não existe quando este módulo é
importado.
"""

from importlib import import_module
from typing import Optional

from dependency_injector import containers, providers

CORE = 'src.core'
ADAPTERS = 'src.adapters.django_app'


def _lazy(modulo: str, nome: str):
    """Callable que importa ``modulo.nome`` e instancia com os kwargs recebidos."""

    def construir(*args, **kwargs):
        return getattr(import_module(modulo), nome)(*args, **kwargs)

    construir.__name__ = nome
    return construir


def _setting(nome: str, padrao=None):
    from django.conf import settings
    return getattr(settings, nome, padrao)


class Container(containers.DeclarativeContainer):
    """
    Container principal.

    Organização:
    - Infrastructure: eventos, cache, criptografia, arquivos, gateway
    - Repositories: persistência por domínio
    - Unit of Work: transações
    - Services: use cases por domínio

    Example:
        from src.config.container import get_container

        service = get_container().criar_matricula_service()
        resultado = service.execute(input_dto)
    """

    config = providers.Configuration()

    # =========================================================================
    # Infrastructure
    # =========================================================================

    event_publisher = providers.Singleton(
        lambda: import_module(f'{ADAPTERS}.events.publishers').get_event_publisher(
            _setting('EVENT_PUBLISHER_MODE', 'sync')
        )
    )

    event_store = providers.Singleton(_lazy(f'{ADAPTERS}.auditoria.repositories', 'DjangoEventStore'))

    cache_service = providers.Singleton(
        lambda: import_module(f'{ADAPTERS}.shared.cache').get_cache_service()
    )

    encryption_service = providers.Singleton(_lazy(f'{ADAPTERS}.shared.encryption', 'EncryptionService'))

    file_storage = providers.Singleton(_lazy(f'{ADAPTERS}.shared.storage', 'DjangoFileStorage'))

    contrato_pdf_renderer = providers.Singleton(_lazy(f'{ADAPTERS}.matriculas.pdf', 'ReportlabContratoRenderer'))

    payment_gateway = providers.Singleton(
        lambda: import_module(f'{ADAPTERS}.financeiro.gateway').get_payment_gateway()
    )

    # =========================================================================
    # Repositories
    # =========================================================================

    aluno_repository = providers.Singleton(_lazy(f'{ADAPTERS}.academico.repositories', 'DjangoAlunoRepository'))
    curso_repository = providers.Singleton(_lazy(f'{ADAPTERS}.academico.repositories', 'CachedCursoRepository'))
    turma_repository = providers.Singleton(_lazy(f'{ADAPTERS}.academico.repositories', 'DjangoTurmaRepository'))
    alocacao_turma_repository = providers.Singleton(
        _lazy(f'{ADAPTERS}.academico.repositories', 'DjangoAlocacaoTurmaRepository')
    )
    disciplina_curso_repository = providers.Singleton(
        _lazy(f'{ADAPTERS}.academico.repositories', 'DjangoDisciplinaCursoRepository')
    )
    grade_curricular_repository = providers.Singleton(
        _lazy(f'{ADAPTERS}.academico.repositories', 'DjangoGradeCurricularRepository')
    )

    matricula_repository = providers.Singleton(_lazy(f'{ADAPTERS}.matriculas.repositories', 'DjangoMatriculaRepository'))
    documento_repository = providers.Singleton(_lazy(f'{ADAPTERS}.matriculas.repositories', 'DjangoDocumentoRepository'))
    contrato_repository = providers.Singleton(_lazy(f'{ADAPTERS}.matriculas.repositories', 'DjangoContratoRepository'))

    pagamento_repository = providers.Singleton(_lazy(f'{ADAPTERS}.financeiro.repositories', 'DjangoPagamentoRepository'))
    desconto_repository = providers.Singleton(_lazy(f'{ADAPTERS}.financeiro.repositories', 'CachedDescontoRepository'))
    negociacao_repository = providers.Singleton(_lazy(f'{ADAPTERS}.financeiro.repositories', 'DjangoNegociacaoRepository'))
    split_repository = providers.Singleton(_lazy(f'{ADAPTERS}.financeiro.repositories', 'DjangoSplitPagamentoRepository'))
    transacao_repository = providers.Singleton(_lazy(f'{ADAPTERS}.financeiro.repositories', 'DjangoTransacaoRepository'))

    transaction_log_repository = providers.Singleton(
        _lazy(f'{ADAPTERS}.auditoria.repositories', 'DjangoTransactionLogRepository')
    )
    metric_repository = providers.Singleton(_lazy(f'{ADAPTERS}.auditoria.repositories', 'DjangoMetricRepository'))
    feedback_repository = providers.Singleton(_lazy(f'{ADAPTERS}.auditoria.repositories', 'DjangoFeedbackRepository'))

    # =========================================================================
    # Unit of Work
    # =========================================================================

    unit_of_work = providers.Factory(
        _lazy(f'{ADAPTERS}.shared.unit_of_work', 'DjangoUnitOfWork'),
        event_publisher=event_publisher,
        event_store=event_store,
    )

    # =========================================================================
    # Segurança e Monitoramento
    # =========================================================================

    transaction_logger = providers.Singleton(
        _lazy(f'{CORE}.seguranca.services', 'TransactionLogger'),
        repository=transaction_log_repository,
    )

    lgpd_service = providers.Factory(
        _lazy(f'{CORE}.seguranca.services', 'LGPDComplianceService'),
        transaction_logger=transaction_logger,
        encryptor=encryption_service,
        aluno_repo=aluno_repository,
        uow=unit_of_work,
    )

    monitoring_service = providers.Singleton(
        _lazy(f'{CORE}.monitoramento.services', 'MonitoringService'),
        repository=metric_repository,
        contador=cache_service,
    )

    feedback_service = providers.Factory(
        _lazy(f'{CORE}.monitoramento.feedback', 'FeedbackService'),
        repository=feedback_repository,
    )

    # =========================================================================
    # Acadêmico
    # =========================================================================

    criar_aluno_service = providers.Factory(
        _lazy(f'{CORE}.academico.use_cases', 'CriarAlunoService'),
        aluno_repo=aluno_repository,
        uow=unit_of_work,
    )

    atualizar_aluno_service = providers.Factory(
        _lazy(f'{CORE}.academico.use_cases', 'AtualizarAlunoService'),
        aluno_repo=aluno_repository,
        uow=unit_of_work,
    )

    obter_aluno_service = providers.Factory(
        _lazy(f'{CORE}.academico.use_cases', 'ObterAlunoService'),
        aluno_repo=aluno_repository,
    )

    listar_alunos_service = providers.Factory(
        _lazy(f'{CORE}.academico.use_cases', 'ListarAlunosService'),
        aluno_repo=aluno_repository,
    )

    criar_curso_service = providers.Factory(
        _lazy(f'{CORE}.academico.use_cases', 'CriarCursoService'),
        curso_repo=curso_repository,
        uow=unit_of_work,
    )

    atualizar_curso_service = providers.Factory(
        _lazy(f'{CORE}.academico.use_cases', 'AtualizarCursoService'),
        curso_repo=curso_repository,
        uow=unit_of_work,
    )

    obter_curso_service = providers.Factory(
        _lazy(f'{CORE}.academico.use_cases', 'ObterCursoService'),
        curso_repo=curso_repository,
    )

    listar_cursos_service = providers.Factory(
        _lazy(f'{CORE}.academico.use_cases', 'ListarCursosService'),
        curso_repo=curso_repository,
    )

    # =========================================================================
    # Acadêmico - Turmas e Grade
    # =========================================================================

    criar_turma_service = providers.Factory(
        _lazy(f'{CORE}.academico.use_cases', 'CriarTurmaService'),
        turma_repo=turma_repository,
        curso_repo=curso_repository,
        uow=unit_of_work,
    )

    listar_turmas_service = providers.Factory(
        _lazy(f'{CORE}.academico.use_cases', 'ListarTurmasService'),
        turma_repo=turma_repository,
        curso_repo=curso_repository,
    )

    adicionar_disciplina_service = providers.Factory(
        _lazy(f'{CORE}.academico.use_cases', 'AdicionarDisciplinaService'),
        disciplina_repo=disciplina_curso_repository,
        curso_repo=curso_repository,
        uow=unit_of_work,
    )

    listar_disciplinas_service = providers.Factory(
        _lazy(f'{CORE}.academico.use_cases', 'ListarDisciplinasService'),
        disciplina_repo=disciplina_curso_repository,
        curso_repo=curso_repository,
    )

    alocar_turma_service = providers.Factory(
        _lazy(f'{CORE}.matriculas.integracao', 'AlocarTurmaService'),
        matricula_repo=matricula_repository,
        turma_repo=turma_repository,
        alocacao_repo=alocacao_turma_repository,
        uow=unit_of_work,
    )

    verificar_requisitos_academicos_service = providers.Factory(
        _lazy(f'{CORE}.matriculas.integracao', 'VerificarRequisitosAcademicosService'),
        matricula_repo=matricula_repository,
        documento_repo=documento_repository,
    )

    gerar_grade_curricular_service = providers.Factory(
        _lazy(f'{CORE}.matriculas.integracao', 'GerarGradeCurricularService'),
        matricula_repo=matricula_repository,
        disciplina_repo=disciplina_curso_repository,
        grade_repo=grade_curricular_repository,
        uow=unit_of_work,
    )

    obter_grade_curricular_service = providers.Factory(
        _lazy(f'{CORE}.matriculas.integracao', 'ObterGradeCurricularService'),
        grade_repo=grade_curricular_repository,
    )

    # =========================================================================
    # Matrículas
    # =========================================================================

    criar_matricula_service = providers.Factory(
        _lazy(f'{CORE}.matriculas.use_cases', 'CriarMatriculaService'),
        matricula_repo=matricula_repository,
        aluno_repo=aluno_repository,
        curso_repo=curso_repository,
        pagamento_repo=pagamento_repository,
        desconto_repo=desconto_repository,
        uow=unit_of_work,
    )

    atualizar_status_matricula_service = providers.Factory(
        _lazy(f'{CORE}.matriculas.use_cases', 'AtualizarStatusMatriculaService'),
        matricula_repo=matricula_repository,
        uow=unit_of_work,
    )

    obter_matricula_service = providers.Factory(
        _lazy(f'{CORE}.matriculas.use_cases', 'ObterMatriculaService'),
        matricula_repo=matricula_repository,
    )

    listar_matriculas_service = providers.Factory(
        _lazy(f'{CORE}.matriculas.use_cases', 'ListarMatriculasService'),
        matricula_repo=matricula_repository,
    )

    enviar_documento_service = providers.Factory(
        _lazy(f'{CORE}.matriculas.use_cases', 'EnviarDocumentoService'),
        documento_repo=documento_repository,
        matricula_repo=matricula_repository,
        storage=file_storage,
        uow=unit_of_work,
    )

    avaliar_documento_service = providers.Factory(
        _lazy(f'{CORE}.matriculas.use_cases', 'AvaliarDocumentoService'),
        documento_repo=documento_repository,
        matricula_repo=matricula_repository,
        uow=unit_of_work,
    )

    listar_documentos_service = providers.Factory(
        _lazy(f'{CORE}.matriculas.use_cases', 'ListarDocumentosService'),
        documento_repo=documento_repository,
        matricula_repo=matricula_repository,
    )

    gerar_contrato_service = providers.Factory(
        _lazy(f'{CORE}.matriculas.use_cases', 'GerarContratoService'),
        contrato_repo=contrato_repository,
        matricula_repo=matricula_repository,
        aluno_repo=aluno_repository,
        curso_repo=curso_repository,
        desconto_repo=desconto_repository,
        storage=file_storage,
        renderer=contrato_pdf_renderer,
        uow=unit_of_work,
    )

    assinar_contrato_service = providers.Factory(
        _lazy(f'{CORE}.matriculas.use_cases', 'AssinarContratoService'),
        contrato_repo=contrato_repository,
        matricula_repo=matricula_repository,
        uow=unit_of_work,
    )

    obter_contrato_service = providers.Factory(
        _lazy(f'{CORE}.matriculas.use_cases', 'ObterContratoService'),
        contrato_repo=contrato_repository,
    )

    # =========================================================================
    # Financeiro - Pagamentos
    # =========================================================================

    gerar_pagamentos_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.use_cases', 'GerarPagamentosService'),
        pagamento_repo=pagamento_repository,
        desconto_repo=desconto_repository,
        uow=unit_of_work,
        matricula_repo=matricula_repository,
    )

    registrar_pagamento_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.use_cases', 'RegistrarPagamentoService'),
        pagamento_repo=pagamento_repository,
        transacao_repo=transacao_repository,
        uow=unit_of_work,
        cache=cache_service,
    )

    cancelar_pagamento_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.use_cases', 'CancelarPagamentoService'),
        pagamento_repo=pagamento_repository,
        uow=unit_of_work,
        cache=cache_service,
    )

    obter_pagamento_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.use_cases', 'ObterPagamentoService'),
        pagamento_repo=pagamento_repository,
    )

    listar_pagamentos_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.use_cases', 'ListarPagamentosService'),
        pagamento_repo=pagamento_repository,
    )

    processar_pagamento_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.use_cases', 'ProcessarPagamentoService'),
        pagamento_repo=pagamento_repository,
        transacao_repo=transacao_repository,
        gateway=payment_gateway,
        transaction_logger=transaction_logger,
        uow=unit_of_work,
        cache=cache_service,
    )

    processar_webhook_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.use_cases', 'ProcessarWebhookService'),
        pagamento_repo=pagamento_repository,
        transacao_repo=transacao_repository,
        transaction_logger=transaction_logger,
        uow=unit_of_work,
        webhook_secret=providers.Callable(_setting, 'WEBHOOK_SECRET', ''),
        cache=cache_service,
        tolerancia_segundos=providers.Callable(_setting, 'WEBHOOK_TOLERANCE_SECONDS', 300),
    )

    verificar_pagamentos_vencidos_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.use_cases', 'VerificarPagamentosVencidosService'),
        pagamento_repo=pagamento_repository,
        uow=unit_of_work,
        cache=cache_service,
    )

    verificar_pagamentos_proximos_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.use_cases', 'VerificarPagamentosProximosService'),
        pagamento_repo=pagamento_repository,
        uow=unit_of_work,
    )

    # =========================================================================
    # Financeiro - Descontos
    # =========================================================================

    criar_desconto_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.use_cases', 'CriarDescontoService'),
        desconto_repo=desconto_repository,
        uow=unit_of_work,
    )

    listar_descontos_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.use_cases', 'ListarDescontosService'),
        desconto_repo=desconto_repository,
    )

    validar_desconto_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.use_cases', 'ValidarDescontoService'),
        desconto_repo=desconto_repository,
    )

    # =========================================================================
    # Financeiro - Negociações e Split
    # =========================================================================

    criar_negociacao_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.use_cases', 'CriarNegociacaoService'),
        negociacao_repo=negociacao_repository,
        pagamento_repo=pagamento_repository,
        uow=unit_of_work,
    )

    aprovar_negociacao_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.use_cases', 'AprovarNegociacaoService'),
        negociacao_repo=negociacao_repository,
        pagamento_repo=pagamento_repository,
        uow=unit_of_work,
        cache=cache_service,
    )

    rejeitar_negociacao_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.use_cases', 'RejeitarNegociacaoService'),
        negociacao_repo=negociacao_repository,
        uow=unit_of_work,
    )

    cancelar_negociacao_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.use_cases', 'CancelarNegociacaoService'),
        negociacao_repo=negociacao_repository,
        uow=unit_of_work,
    )

    listar_negociacoes_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.use_cases', 'ListarNegociacoesService'),
        negociacao_repo=negociacao_repository,
    )

    configurar_split_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.use_cases', 'ConfigurarSplitService'),
        split_repo=split_repository,
        pagamento_repo=pagamento_repository,
        uow=unit_of_work,
    )

    obter_split_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.use_cases', 'ObterSplitService'),
        split_repo=split_repository,
    )

    # =========================================================================
    # Financeiro - Dashboard e Relatórios
    # =========================================================================

    obter_resumo_financeiro_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.use_cases', 'ObterResumoFinanceiroService'),
        pagamento_repo=pagamento_repository,
        cache=cache_service,
        ttl=providers.Callable(_setting, 'DASHBOARD_CACHE_TTL', 300),
    )

    gerar_relatorio_financeiro_service = providers.Factory(
        _lazy(f'{CORE}.financeiro.relatorios', 'GerarRelatorioFinanceiroService'),
        pagamento_repo=pagamento_repository,
        transacao_repo=transacao_repository,
        matricula_repo=matricula_repository,
        aluno_repo=aluno_repository,
        curso_repo=curso_repository,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def get_container() -> Container:
    """Retorna a instância global do container (criada sob demanda)."""
    global _container

    if _container is None:
        _container = Container()

    return _container


def reset_container() -> None:
    """Reset do container (para testes)."""
    global _container
    _container = None
