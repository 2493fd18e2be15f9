"""
Mappers Entity ⇄ Model do domínio Financeiro.
"""

from decimal import Decimal

from src.core.financeiro.entities import (
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

from ..shared.repository import do_banco, para_banco
from .models import (
    DescontoModel,
    NegociacaoModel,
    PagamentoModel,
    SplitPagamentoModel,
    TransacaoFinanceiraModel,
)


def _decimal(valor):
    return Decimal(valor) if valor is not None else None


class PagamentoMapper:
    @staticmethod
    def to_model(entity: PagamentoEntity) -> PagamentoModel:
        return PagamentoModel(
            id=entity.id,
            matricula_id=entity.matricula_id,
            numero_parcela=entity.numero_parcela,
            valor=entity.valor,
            data_vencimento=entity.data_vencimento,
            data_pagamento=entity.data_pagamento,
            status=entity.status.value,
            forma_pagamento=entity.forma_pagamento.value,
            gateway_id=entity.gateway_id,
            gateway_data=entity.gateway_data or {},
            comprovante_url=entity.comprovante_url,
            observacoes=entity.observacoes or '',
            negociacao_id=entity.negociacao_id,
            criado_em=para_banco(entity.criado_em),
            atualizado_em=para_banco(entity.atualizado_em),
        )

    @staticmethod
    def to_entity(model: PagamentoModel) -> PagamentoEntity:
        return PagamentoEntity(
            id=model.id,
            matricula_id=model.matricula_id,
            numero_parcela=model.numero_parcela,
            valor=Decimal(model.valor),
            data_vencimento=model.data_vencimento,
            data_pagamento=model.data_pagamento,
            status=PaymentStatus(model.status),
            forma_pagamento=FormaPagamento(model.forma_pagamento),
            gateway_id=model.gateway_id,
            gateway_data=dict(model.gateway_data or {}),
            comprovante_url=model.comprovante_url,
            observacoes=model.observacoes,
            negociacao_id=model.negociacao_id,
            criado_em=do_banco(model.criado_em),
            atualizado_em=do_banco(model.atualizado_em),
        )


class DescontoMapper:
    @staticmethod
    def to_model(entity: DescontoEntity) -> DescontoModel:
        return DescontoModel(
            id=entity.id,
            nome=entity.nome,
            codigo=entity.codigo,
            descricao=entity.descricao or '',
            tipo=entity.tipo.value,
            valor=entity.valor,
            data_inicio=entity.data_inicio,
            data_fim=entity.data_fim,
            cursos_aplicaveis=list(entity.cursos_aplicaveis),
            limite_usos=entity.limite_usos,
            usos=entity.usos,
            ativo=entity.ativo,
            criado_em=para_banco(entity.criado_em),
            atualizado_em=para_banco(entity.atualizado_em),
        )

    @staticmethod
    def to_entity(model: DescontoModel) -> DescontoEntity:
        return DescontoEntity(
            id=model.id,
            nome=model.nome,
            codigo=model.codigo,
            descricao=model.descricao,
            tipo=TipoDesconto(model.tipo),
            valor=Decimal(model.valor),
            data_inicio=model.data_inicio,
            data_fim=model.data_fim,
            cursos_aplicaveis=list(model.cursos_aplicaveis or []),
            limite_usos=model.limite_usos,
            usos=model.usos,
            ativo=model.ativo,
            criado_em=do_banco(model.criado_em),
            atualizado_em=do_banco(model.atualizado_em),
        )


class NegociacaoMapper:
    @staticmethod
    def to_model(entity: NegociacaoEntity) -> NegociacaoModel:
        return NegociacaoModel(
            id=entity.id,
            aluno_id=entity.aluno_id,
            matricula_id=entity.matricula_id or '',
            responsavel_id=entity.responsavel_id,
            status=entity.status.value,
            valor_original=entity.valor_original,
            valor_negociado=entity.valor_negociado,
            numero_parcelas=entity.numero_parcelas,
            data_primeira_parcela=entity.data_primeira_parcela,
            observacoes=entity.observacoes or '',
            pagamento_ids=list(entity.pagamento_ids),
            criado_em=para_banco(entity.criado_em),
            atualizado_em=para_banco(entity.atualizado_em),
        )

    @staticmethod
    def to_entity(model: NegociacaoModel) -> NegociacaoEntity:
        return NegociacaoEntity(
            id=model.id,
            aluno_id=model.aluno_id,
            matricula_id=model.matricula_id,
            responsavel_id=model.responsavel_id,
            status=NegociacaoStatus(model.status),
            valor_original=Decimal(model.valor_original),
            valor_negociado=Decimal(model.valor_negociado),
            numero_parcelas=model.numero_parcelas,
            data_primeira_parcela=model.data_primeira_parcela,
            observacoes=model.observacoes,
            pagamento_ids=list(model.pagamento_ids or []),
            criado_em=do_banco(model.criado_em),
            atualizado_em=do_banco(model.atualizado_em),
        )


class SplitPagamentoMapper:
    @staticmethod
    def to_model(entity: SplitPagamentoEntity) -> SplitPagamentoModel:
        return SplitPagamentoModel(
            id=entity.id,
            payment_id=entity.payment_id,
            recipient_id=entity.recipient_id,
            recipient_type=entity.recipient_type,
            amount=entity.amount,
            percentage=entity.percentage,
            status=entity.status.value,
            criado_em=para_banco(entity.criado_em),
        )

    @staticmethod
    def to_entity(model: SplitPagamentoModel) -> SplitPagamentoEntity:
        return SplitPagamentoEntity(
            id=model.id,
            payment_id=model.payment_id,
            recipient_id=model.recipient_id,
            recipient_type=model.recipient_type,
            amount=Decimal(model.amount),
            percentage=_decimal(model.percentage),
            status=PaymentStatus(model.status),
            criado_em=do_banco(model.criado_em),
        )


class TransacaoMapper:
    @staticmethod
    def to_model(entity: TransacaoFinanceiraEntity) -> TransacaoFinanceiraModel:
        return TransacaoFinanceiraModel(
            id=entity.id,
            reference_id=entity.reference_id,
            reference_type=entity.reference_type,
            amount=entity.amount,
            type=entity.type.value,
            status=entity.status,
            payment_method=entity.payment_method,
            description=entity.description or '',
            metadata=entity.metadata or {},
            criado_em=para_banco(entity.criado_em),
        )

    @staticmethod
    def to_entity(model: TransacaoFinanceiraModel) -> TransacaoFinanceiraEntity:
        return TransacaoFinanceiraEntity(
            id=model.id,
            reference_id=model.reference_id,
            reference_type=model.reference_type,
            amount=Decimal(model.amount),
            type=TipoTransacao(model.type),
            status=model.status,
            payment_method=model.payment_method,
            description=model.description,
            metadata=dict(model.metadata or {}),
            criado_em=do_banco(model.criado_em),
        )
