"""
Mappers Entity ⇄ Model do domínio de Matrículas.
"""

from decimal import Decimal

from src.core.financeiro.entities import FormaPagamento
from src.core.matriculas.entities import (
    ContratoEntity,
    ContratoStatus,
    DocumentoEntity,
    DocumentoStatus,
    MatriculaEntity,
    MatriculaStatus,
    TipoDocumento,
)

from ..shared.repository import do_banco, para_banco
from .models import ContratoModel, DocumentoModel, MatriculaModel


class MatriculaMapper:
    @staticmethod
    def to_model(entity: MatriculaEntity) -> MatriculaModel:
        return MatriculaModel(
            id=entity.id,
            aluno_id=entity.aluno_id,
            curso_id=entity.curso_id,
            status=entity.status.value,
            data_inicio=entity.data_inicio,
            data_termino=entity.data_termino,
            valor_total=entity.valor_total,
            valor_com_desconto=entity.valor_com_desconto,
            desconto_id=entity.desconto_id,
            forma_pagamento=entity.forma_pagamento.value,
            numero_parcelas=entity.numero_parcelas,
            observacoes=entity.observacoes or '',
            metadata=entity.metadata or {},
            criado_em=para_banco(entity.criado_em),
            atualizado_em=para_banco(entity.atualizado_em),
        )

    @staticmethod
    def to_entity(model: MatriculaModel) -> MatriculaEntity:
        return MatriculaEntity(
            id=model.id,
            aluno_id=model.aluno_id,
            curso_id=model.curso_id,
            status=MatriculaStatus(model.status),
            data_inicio=model.data_inicio,
            data_termino=model.data_termino,
            valor_total=Decimal(model.valor_total),
            valor_com_desconto=(
                Decimal(model.valor_com_desconto) if model.valor_com_desconto is not None else None
            ),
            desconto_id=model.desconto_id,
            forma_pagamento=FormaPagamento(model.forma_pagamento),
            numero_parcelas=model.numero_parcelas,
            observacoes=model.observacoes,
            metadata=dict(model.metadata or {}),
            criado_em=do_banco(model.criado_em),
            atualizado_em=do_banco(model.atualizado_em),
        )


class DocumentoMapper:
    @staticmethod
    def to_model(entity: DocumentoEntity) -> DocumentoModel:
        return DocumentoModel(
            id=entity.id,
            matricula_id=entity.matricula_id,
            tipo=entity.tipo.value,
            nome_arquivo=entity.nome_arquivo,
            url=entity.url,
            status=entity.status.value,
            observacoes=entity.observacoes or '',
            avaliado_por=entity.avaliado_por,
            avaliado_em=para_banco(entity.avaliado_em),
            criado_em=para_banco(entity.criado_em),
            atualizado_em=para_banco(entity.atualizado_em),
        )

    @staticmethod
    def to_entity(model: DocumentoModel) -> DocumentoEntity:
        return DocumentoEntity(
            id=model.id,
            matricula_id=model.matricula_id,
            tipo=TipoDocumento(model.tipo),
            nome_arquivo=model.nome_arquivo,
            url=model.url,
            status=DocumentoStatus(model.status),
            observacoes=model.observacoes,
            avaliado_por=model.avaliado_por,
            avaliado_em=do_banco(model.avaliado_em),
            criado_em=do_banco(model.criado_em),
            atualizado_em=do_banco(model.atualizado_em),
        )


class ContratoMapper:
    @staticmethod
    def to_model(entity: ContratoEntity) -> ContratoModel:
        return ContratoModel(
            id=entity.id,
            matricula_id=entity.matricula_id,
            titulo=entity.titulo,
            versao=entity.versao,
            url=entity.url,
            status=entity.status.value,
            data_assinatura=para_banco(entity.data_assinatura),
            assinado_por=entity.assinado_por,
            assinatura_metadata=entity.assinatura_metadata or {},
            criado_em=para_banco(entity.criado_em),
            atualizado_em=para_banco(entity.atualizado_em),
        )

    @staticmethod
    def to_entity(model: ContratoModel) -> ContratoEntity:
        return ContratoEntity(
            id=model.id,
            matricula_id=model.matricula_id,
            titulo=model.titulo,
            versao=model.versao,
            url=model.url,
            status=ContratoStatus(model.status),
            data_assinatura=do_banco(model.data_assinatura),
            assinado_por=model.assinado_por,
            assinatura_metadata=dict(model.assinatura_metadata or {}),
            criado_em=do_banco(model.criado_em),
            atualizado_em=do_banco(model.atualizado_em),
        )
