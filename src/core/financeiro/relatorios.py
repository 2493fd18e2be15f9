"""
Relatórios financeiros.

Tipos:
- overdue: parcelas em atraso com dados de contato do aluno
- cash_flow: lançamentos do fluxo de caixa em um período
- projection: receita prevista pelos vencimentos dos próximos meses

O serviço produz um RelatorioDTO tabular; a conversão para CSV ou PDF
fica nos adapters.
"""

import logging
from collections import OrderedDict
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

from src.core.shared.exceptions import ValidationError

from .calculos import adicionar_meses
from .dtos import GerarRelatorioInputDTO, RelatorioDTO
from .entities import PagamentoEntity, PaymentStatus, TipoTransacao
from .ports import PagamentoRepository, TransacaoRepository


logger = logging.getLogger(__name__)

TIPOS_RELATORIO = ("overdue", "cash_flow", "projection")
FORMATOS_RELATORIO = ("csv", "pdf")


class GerarRelatorioFinanceiroService:
    """
    Use Case: Gerar relatório financeiro.

    Os repositórios de matrícula, aluno e curso são opcionais e usados
    apenas para enriquecer o relatório de inadimplência.

    Raises:
        ValidationError: Tipo ou formato desconhecido, período ausente
            ou invertido no fluxo de caixa
    """

    def __init__(
        self,
        pagamento_repo: PagamentoRepository,
        transacao_repo: TransacaoRepository,
        matricula_repo=None,
        aluno_repo=None,
        curso_repo=None,
    ):
        self.pagamento_repo = pagamento_repo
        self.transacao_repo = transacao_repo
        self.matricula_repo = matricula_repo
        self.aluno_repo = aluno_repo
        self.curso_repo = curso_repo

    def execute(
        self, input_dto: GerarRelatorioInputDTO, hoje: Optional[date] = None
    ) -> RelatorioDTO:
        if input_dto.tipo not in TIPOS_RELATORIO:
            raise ValidationError(
                f"Tipo de relatório inválido: {input_dto.tipo}", field="type"
            )
        if input_dto.formato not in FORMATOS_RELATORIO:
            raise ValidationError(
                f"Formato de relatório inválido: {input_dto.formato}", field="format"
            )

        hoje = hoje or date.today()
        if input_dto.tipo == "overdue":
            relatorio = self._inadimplencia(hoje)
        elif input_dto.tipo == "cash_flow":
            relatorio = self._fluxo_caixa(input_dto.inicio, input_dto.fim)
        else:
            relatorio = self._projecao(hoje, input_dto.meses)

        logger.info(
            f"Relatório {relatorio.tipo} gerado com {len(relatorio.linhas)} linhas"
        )
        return relatorio

    # ------------------------------------------------------------------
    # Inadimplência
    # ------------------------------------------------------------------

    def _contexto(self, pagamento: PagamentoEntity) -> Dict[str, Any]:
        contexto = {"aluno": "", "email": "", "telefone": "", "curso": ""}
        if self.matricula_repo is None:
            return contexto
        matricula = self.matricula_repo.get_by_id(pagamento.matricula_id)
        if not matricula:
            return contexto
        if self.aluno_repo is not None:
            aluno = self.aluno_repo.get_by_id(matricula.aluno_id)
            if aluno:
                contexto.update(aluno=aluno.nome, email=aluno.email, telefone=aluno.telefone)
        if self.curso_repo is not None:
            curso = self.curso_repo.get_by_id(matricula.curso_id)
            if curso:
                contexto["curso"] = curso.nome
        return contexto

    def _inadimplencia(self, hoje: date) -> RelatorioDTO:
        em_atraso = {p.id: p for p in self.pagamento_repo.list_by_status(PaymentStatus.ATRASADO)}
        for pagamento in self.pagamento_repo.list_vencidos(hoje):
            em_atraso.setdefault(pagamento.id, pagamento)
        pagamentos = sorted(em_atraso.values(), key=lambda p: p.data_vencimento)

        linhas = []
        total = Decimal("0.00")
        soma_dias = 0
        por_curso: Dict[str, Dict[str, Any]] = OrderedDict()
        for pagamento in pagamentos:
            contexto = self._contexto(pagamento)
            dias = pagamento.dias_atraso(hoje)
            linhas.append([
                pagamento.id,
                contexto["aluno"],
                contexto["email"],
                contexto["telefone"],
                contexto["curso"],
                pagamento.numero_parcela,
                pagamento.valor,
                pagamento.data_vencimento.strftime("%d/%m/%Y"),
                dias,
                pagamento.forma_pagamento.value,
            ])
            total += pagamento.valor
            soma_dias += dias
            grupo = por_curso.setdefault(
                contexto["curso"] or "Sem curso", {"quantidade": 0, "valor": Decimal("0.00")}
            )
            grupo["quantidade"] += 1
            grupo["valor"] += pagamento.valor

        media_dias = round(soma_dias / len(pagamentos), 1) if pagamentos else 0
        resumo = [
            ("Total de parcelas em atraso", len(pagamentos)),
            ("Valor total em atraso", total),
            ("Média de dias em atraso", media_dias),
        ]
        for curso, grupo in por_curso.items():
            resumo.append((curso, f"{grupo['quantidade']} parcelas / {grupo['valor']}"))

        return RelatorioDTO(
            tipo="overdue",
            titulo="Relatório de Inadimplência",
            colunas=[
                "id", "aluno", "email", "telefone", "curso", "parcela",
                "valor", "vencimento", "dias_atraso", "forma_pagamento",
            ],
            linhas=linhas,
            resumo=resumo,
        )

    # ------------------------------------------------------------------
    # Fluxo de caixa
    # ------------------------------------------------------------------

    def _fluxo_caixa(self, inicio: Optional[date], fim: Optional[date]) -> RelatorioDTO:
        if not inicio or not fim:
            raise ValidationError(
                "Datas de início e fim são obrigatórias para o fluxo de caixa",
                field="startDate" if not inicio else "endDate",
            )
        if fim < inicio:
            raise ValidationError(
                "Data final deve ser posterior à data inicial", field="endDate"
            )

        transacoes = self.transacao_repo.list_entre(
            datetime.combine(inicio, time.min), datetime.combine(fim, time.max)
        )
        linhas = []
        receitas = Decimal("0.00")
        estornos = Decimal("0.00")
        despesas = Decimal("0.00")
        por_tipo: Dict[str, Decimal] = OrderedDict()
        por_metodo: Dict[str, Decimal] = OrderedDict()
        for transacao in transacoes:
            linhas.append([
                transacao.id,
                transacao.criado_em.strftime("%d/%m/%Y"),
                transacao.type.value,
                transacao.amount,
                transacao.status,
                transacao.payment_method or "",
                transacao.reference_id,
            ])
            if transacao.type == TipoTransacao.INCOME:
                receitas += transacao.amount
            elif transacao.type == TipoTransacao.REFUND:
                estornos += transacao.amount
            else:
                despesas += transacao.amount
            por_tipo[transacao.type.value] = (
                por_tipo.get(transacao.type.value, Decimal("0.00")) + transacao.amount
            )
            metodo = transacao.payment_method or "outros"
            por_metodo[metodo] = por_metodo.get(metodo, Decimal("0.00")) + transacao.amount

        resumo = [
            ("Total de receitas", receitas),
            ("Total de estornos", estornos),
            ("Total de despesas", despesas),
            ("Saldo líquido", receitas - estornos - despesas),
        ]
        resumo.extend((f"Tipo {tipo}", valor) for tipo, valor in por_tipo.items())
        resumo.extend((f"Método {metodo}", valor) for metodo, valor in por_metodo.items())

        return RelatorioDTO(
            tipo="cash_flow",
            titulo=(
                f"Fluxo de Caixa {inicio.strftime('%d/%m/%Y')} a {fim.strftime('%d/%m/%Y')}"
            ),
            colunas=["id", "data", "tipo", "valor", "status", "metodo_pagamento", "referencia"],
            linhas=linhas,
            resumo=resumo,
        )

    # ------------------------------------------------------------------
    # Projeção
    # ------------------------------------------------------------------

    def _projecao(self, hoje: date, meses: int) -> RelatorioDTO:
        if meses < 1 or meses > 36:
            raise ValidationError("Horizonte deve estar entre 1 e 36 meses", field="months")

        inicio = hoje.replace(day=1)
        fim = adicionar_meses(inicio, meses) - timedelta(days=1)
        por_mes: Dict[tuple, List[PagamentoEntity]] = OrderedDict(
            ((m.year, m.month), []) for m in (adicionar_meses(inicio, i) for i in range(meses))
        )
        for pagamento in self.pagamento_repo.list_by_vencimento(inicio, fim):
            if pagamento.status in (PaymentStatus.CANCELADO, PaymentStatus.REEMBOLSADO):
                continue
            por_mes[(pagamento.data_vencimento.year, pagamento.data_vencimento.month)].append(
                pagamento
            )

        linhas = []
        total = Decimal("0.00")
        for (ano, mes), pagamentos in por_mes.items():
            receita = sum((p.valor for p in pagamentos), Decimal("0.00"))
            total += receita
            linhas.append([f"{mes}/{ano}", receita, len(pagamentos)])

        return RelatorioDTO(
            tipo="projection",
            titulo=f"Projeção de Receitas ({meses} meses)",
            colunas=["mes", "receita_prevista", "quantidade_pagamentos"],
            linhas=linhas,
            resumo=[("Receita prevista no período", total)],
        )
