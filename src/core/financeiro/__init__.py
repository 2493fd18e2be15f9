"""
Domínio Financeiro - parcelas, descontos, negociações e split.

Este módulo contém:
- Cálculos monetários puros (parcelamento, desconto, split)
- Entidades (PagamentoEntity, DescontoEntity, NegociacaoEntity, ...)
- Use Cases de pagamentos, webhooks, negociações e dashboard
- Relatórios (inadimplência, fluxo de caixa, projeção)
"""

from .calculos import (
    adicionar_meses,
    aplicar_desconto,
    calcular_split,
    dividir_em_parcelas,
    gerar_vencimentos,
    para_decimal,
)
from .entities import (
    DescontoEntity,
    FormaPagamento,
    NegociacaoEntity,
    NegociacaoStatus,
    PagamentoEntity,
    PaymentStatus,
    SplitPagamentoEntity,
    TipoDesconto,
    TipoTransacao,
    TransacaoFinanceiraEntity,
)
from .events import (
    LembretePagamentoEvent,
    NegociacaoAprovadaEvent,
    NegociacaoCriadaEvent,
    PagamentoCanceladoEvent,
    PagamentoEstornadoEvent,
    PagamentoFalhouEvent,
    PagamentoRegistradoEvent,
    PagamentoVencidoEvent,
)
from .ports import (
    Cache,
    DescontoRepository,
    NegociacaoRepository,
    PagamentoRepository,
    PaymentGateway,
    ResultadoCobranca,
    SplitPagamentoRepository,
    TransacaoRepository,
)
from .relatorios import GerarRelatorioFinanceiroService
from .use_cases import (
    AprovarNegociacaoService,
    CancelarNegociacaoService,
    CancelarPagamentoService,
    ConfigurarSplitService,
    CriarDescontoService,
    CriarNegociacaoService,
    GerarPagamentosService,
    ListarDescontosService,
    ListarNegociacoesService,
    ListarPagamentosService,
    ObterPagamentoService,
    ObterResumoFinanceiroService,
    ObterSplitService,
    ProcessarPagamentoService,
    ProcessarWebhookService,
    RegistrarPagamentoService,
    RejeitarNegociacaoService,
    ValidarDescontoService,
    VerificarPagamentosProximosService,
    VerificarPagamentosVencidosService,
    consumir_desconto,
    gerar_parcelas,
    resolver_desconto,
)

__all__ = [
    # Cálculos
    "adicionar_meses",
    "aplicar_desconto",
    "calcular_split",
    "dividir_em_parcelas",
    "gerar_vencimentos",
    "para_decimal",
    # Entities
    "DescontoEntity",
    "FormaPagamento",
    "NegociacaoEntity",
    "NegociacaoStatus",
    "PagamentoEntity",
    "PaymentStatus",
    "SplitPagamentoEntity",
    "TipoDesconto",
    "TipoTransacao",
    "TransacaoFinanceiraEntity",
    # Events
    "LembretePagamentoEvent",
    "NegociacaoAprovadaEvent",
    "NegociacaoCriadaEvent",
    "PagamentoCanceladoEvent",
    "PagamentoEstornadoEvent",
    "PagamentoFalhouEvent",
    "PagamentoRegistradoEvent",
    "PagamentoVencidoEvent",
    # Ports
    "Cache",
    "DescontoRepository",
    "NegociacaoRepository",
    "PagamentoRepository",
    "PaymentGateway",
    "ResultadoCobranca",
    "SplitPagamentoRepository",
    "TransacaoRepository",
    # Use Cases
    "AprovarNegociacaoService",
    "CancelarNegociacaoService",
    "CancelarPagamentoService",
    "ConfigurarSplitService",
    "CriarDescontoService",
    "CriarNegociacaoService",
    "GerarPagamentosService",
    "GerarRelatorioFinanceiroService",
    "ListarDescontosService",
    "ListarNegociacoesService",
    "ListarPagamentosService",
    "ObterPagamentoService",
    "ObterResumoFinanceiroService",
    "ObterSplitService",
    "ProcessarPagamentoService",
    "ProcessarWebhookService",
    "RegistrarPagamentoService",
    "RejeitarNegociacaoService",
    "ValidarDescontoService",
    "VerificarPagamentosProximosService",
    "VerificarPagamentosVencidosService",
    "consumir_desconto",
    "gerar_parcelas",
    "resolver_desconto",
]
