"""
Repositórios Django do domínio Financeiro.

Implementam os ports de src/core/financeiro/ports.py. Filtros por
data usam ``DateField``; ``list_entre`` das transações converte os
limites para datetime com fuso antes da consulta.
"""

from datetime import date, datetime
from typing import List, Optional
import logging

from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone

from src.core.financeiro.entities import (
    DescontoEntity,
    NegociacaoEntity,
    PagamentoEntity,
    PaymentStatus,
    SplitPagamentoEntity,
    TransacaoFinanceiraEntity,
)

from ..shared.repository import BaseRepository, CachingRepositoryMixin, para_banco
from .mappers import (
    DescontoMapper,
    NegociacaoMapper,
    PagamentoMapper,
    SplitPagamentoMapper,
    TransacaoMapper,
)
from .models import (
    DescontoModel,
    NegociacaoModel,
    PagamentoModel,
    SplitPagamentoModel,
    TransacaoFinanceiraModel,
)

logger = logging.getLogger(__name__)


class DjangoPagamentoRepository(BaseRepository[PagamentoEntity, PagamentoModel]):
    """
    Example:
        repo = DjangoPagamentoRepository()
        repo.save_many(parcelas)
        atrasadas = repo.list_vencidos(date.today())
    """

    model_class = PagamentoModel
    default_order_field = 'data_vencimento'

    def to_entity(self, model: PagamentoModel) -> PagamentoEntity:
        return PagamentoMapper.to_entity(model)

    def to_model(self, entity: PagamentoEntity) -> PagamentoModel:
        return PagamentoMapper.to_model(entity)

    def save_many(self, entities: List[PagamentoEntity]) -> None:
        with transaction.atomic():
            super().save_many(entities)

    def get_by_gateway_id(self, gateway_id: str) -> Optional[PagamentoEntity]:
        model = PagamentoModel.objects.filter(gateway_id=gateway_id).first()
        return self.to_entity(model) if model else None

    def list_by_matricula(self, matricula_id: str) -> List[PagamentoEntity]:
        return self._to_entities(
            PagamentoModel.objects.filter(matricula_id=matricula_id)
            .order_by('data_vencimento', 'numero_parcela')
        )

    def list_by_ids(self, pagamento_ids: List[str]) -> List[PagamentoEntity]:
        por_id = {
            m.id: self.to_entity(m)
            for m in PagamentoModel.objects.filter(id__in=pagamento_ids)
        }
        return [por_id[i] for i in pagamento_ids if i in por_id]

    def list_by_status(self, status: PaymentStatus) -> List[PagamentoEntity]:
        return self._to_entities(
            PagamentoModel.objects.filter(status=status.value).order_by('data_vencimento')
        )

    def list_vencidos(self, hoje: date) -> List[PagamentoEntity]:
        return self._to_entities(
            PagamentoModel.objects.filter(
                status=PaymentStatus.PENDENTE.value,
                data_vencimento__lt=hoje,
            ).order_by('data_vencimento')
        )

    def list_vencendo(self, inicio: date, fim: date) -> List[PagamentoEntity]:
        return self._to_entities(
            PagamentoModel.objects.filter(
                status=PaymentStatus.PENDENTE.value,
                data_vencimento__range=(inicio, fim),
            ).order_by('data_vencimento')
        )

    def list_by_vencimento(self, inicio: date, fim: date) -> List[PagamentoEntity]:
        return self._to_entities(
            PagamentoModel.objects.filter(data_vencimento__range=(inicio, fim))
            .order_by('data_vencimento')
        )

    def list_pagos_entre(self, inicio: date, fim: date) -> List[PagamentoEntity]:
        return self._to_entities(
            PagamentoModel.objects.filter(
                status=PaymentStatus.PAGO.value,
                data_pagamento__range=(inicio, fim),
            ).order_by('data_pagamento')
        )


class DjangoDescontoRepository(BaseRepository[DescontoEntity, DescontoModel]):
    model_class = DescontoModel
    default_order_field = 'codigo'

    def to_entity(self, model: DescontoModel) -> DescontoEntity:
        return DescontoMapper.to_entity(model)

    def to_model(self, entity: DescontoEntity) -> DescontoModel:
        return DescontoMapper.to_model(entity)

    def get_by_codigo(self, codigo: str) -> Optional[DescontoEntity]:
        model = DescontoModel.objects.filter(codigo__iexact=codigo.strip()).first()
        return self.to_entity(model) if model else None

    def list_all(self, apenas_ativos: bool = False) -> List[DescontoEntity]:
        qs = DescontoModel.objects.all()
        if apenas_ativos:
            qs = qs.filter(ativo=True)
        return self._to_entities(qs.order_by('codigo'))

    def registrar_uso(self, desconto_id: str) -> bool:
        """UPDATE único condicionado ao limite; concorrentes não ultrapassam limite_usos."""
        atualizados = (
            DescontoModel.objects
            .filter(pk=desconto_id)
            .filter(Q(limite_usos__isnull=True) | Q(usos__lt=F('limite_usos')))
            .update(usos=F('usos') + 1, atualizado_em=timezone.now())
        )
        return atualizados == 1


class CachedDescontoRepository(CachingRepositoryMixin, DjangoDescontoRepository):
    cache_timeout = 600

    def registrar_uso(self, desconto_id: str) -> bool:
        registrado = super().registrar_uso(desconto_id)
        self._cache().delete(self._get_cache_key(desconto_id))
        return registrado


class DjangoNegociacaoRepository(BaseRepository[NegociacaoEntity, NegociacaoModel]):
    model_class = NegociacaoModel

    def to_entity(self, model: NegociacaoModel) -> NegociacaoEntity:
        return NegociacaoMapper.to_entity(model)

    def to_model(self, entity: NegociacaoEntity) -> NegociacaoModel:
        return NegociacaoMapper.to_model(entity)

    def list_by_aluno(self, aluno_id: str) -> List[NegociacaoEntity]:
        return self._to_entities(
            NegociacaoModel.objects.filter(aluno_id=aluno_id).order_by('-criado_em')
        )

    def list_all(self) -> List[NegociacaoEntity]:
        return self._to_entities(NegociacaoModel.objects.order_by('-criado_em'))


class DjangoSplitPagamentoRepository:
    """Split não é agregado próprio: sempre substituído em bloco."""

    def replace(self, payment_id: str, splits: List[SplitPagamentoEntity]) -> None:
        with transaction.atomic():
            SplitPagamentoModel.objects.filter(payment_id=payment_id).delete()
            SplitPagamentoModel.objects.bulk_create(
                [SplitPagamentoMapper.to_model(s) for s in splits]
            )
        logger.debug(f"Split do pagamento {payment_id}: {len(splits)} recebedores")

    def list_by_payment(self, payment_id: str) -> List[SplitPagamentoEntity]:
        return [
            SplitPagamentoMapper.to_entity(m)
            for m in SplitPagamentoModel.objects.filter(payment_id=payment_id).order_by('criado_em')
        ]


class DjangoTransacaoRepository(BaseRepository[TransacaoFinanceiraEntity, TransacaoFinanceiraModel]):
    model_class = TransacaoFinanceiraModel
    default_order_field = 'criado_em'

    def to_entity(self, model: TransacaoFinanceiraModel) -> TransacaoFinanceiraEntity:
        return TransacaoMapper.to_entity(model)

    def to_model(self, entity: TransacaoFinanceiraEntity) -> TransacaoFinanceiraModel:
        return TransacaoMapper.to_model(entity)

    def list_entre(self, inicio: datetime, fim: datetime) -> List[TransacaoFinanceiraEntity]:
        return self._to_entities(
            TransacaoFinanceiraModel.objects.filter(
                criado_em__range=(para_banco(inicio), para_banco(fim))
            ).order_by('criado_em')
        )

    def list_by_reference(self, reference_id: str) -> List[TransacaoFinanceiraEntity]:
        return self._to_entities(
            TransacaoFinanceiraModel.objects.filter(reference_id=reference_id).order_by('criado_em')
        )
