"""
Repositórios Django do domínio de Matrículas.
"""

from typing import List, Optional
import logging

from src.core.matriculas.entities import (
    ContratoEntity,
    DocumentoEntity,
    MatriculaEntity,
    MatriculaStatus,
)

from ..shared.repository import BaseRepository
from .mappers import ContratoMapper, DocumentoMapper, MatriculaMapper
from .models import ContratoModel, DocumentoModel, MatriculaModel

logger = logging.getLogger(__name__)


class DjangoMatriculaRepository(BaseRepository[MatriculaEntity, MatriculaModel]):
    model_class = MatriculaModel

    def to_entity(self, model: MatriculaModel) -> MatriculaEntity:
        return MatriculaMapper.to_entity(model)

    def to_model(self, entity: MatriculaEntity) -> MatriculaModel:
        return MatriculaMapper.to_model(entity)

    def list_all(
        self,
        aluno_id: Optional[str] = None,
        curso_id: Optional[str] = None,
        status: Optional[MatriculaStatus] = None,
    ) -> List[MatriculaEntity]:
        qs = self._get_base_queryset()
        if aluno_id:
            qs = qs.filter(aluno_id=aluno_id)
        if curso_id:
            qs = qs.filter(curso_id=curso_id)
        if status:
            qs = qs.filter(status=status.value)
        return self._to_entities(qs.order_by('-criado_em'))

    def list_by_ids(self, ids: List[str]) -> List[MatriculaEntity]:
        return self._to_entities(self._get_base_queryset().filter(id__in=ids))


class DjangoDocumentoRepository(BaseRepository[DocumentoEntity, DocumentoModel]):
    model_class = DocumentoModel
    default_order_field = 'criado_em'

    def to_entity(self, model: DocumentoModel) -> DocumentoEntity:
        return DocumentoMapper.to_entity(model)

    def to_model(self, entity: DocumentoEntity) -> DocumentoModel:
        return DocumentoMapper.to_model(entity)

    def list_by_matricula(self, matricula_id: str) -> List[DocumentoEntity]:
        return self._to_entities(
            DocumentoModel.objects.filter(matricula_id=matricula_id).order_by('criado_em')
        )


class DjangoContratoRepository(BaseRepository[ContratoEntity, ContratoModel]):
    model_class = ContratoModel

    def to_entity(self, model: ContratoModel) -> ContratoEntity:
        return ContratoMapper.to_entity(model)

    def to_model(self, entity: ContratoEntity) -> ContratoModel:
        return ContratoMapper.to_model(entity)

    def get_by_matricula(self, matricula_id: str) -> Optional[ContratoEntity]:
        model = ContratoModel.objects.filter(matricula_id=matricula_id).first()
        return self.to_entity(model) if model else None
