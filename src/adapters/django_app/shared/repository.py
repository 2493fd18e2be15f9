"""
Repository Base - Implementação base de repositórios com Django ORM.

Fornece funcionalidades comuns para todos os repositórios:
- Conversão Model ⇄ Entity via mapper
- save / save_many com update_or_create
- Paginação e ordenação
- Cache transparente (CachingRepositoryMixin)

Princípios:
- Repositórios são stateless
- Não contêm lógica de negócio
- Apenas persistência e queries
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar
import logging

from django.conf import settings
from django.db import models
from django.db.models import QuerySet
from django.utils import timezone

logger = logging.getLogger(__name__)

T = TypeVar("T")  # Entity type
M = TypeVar("M", bound=models.Model)  # Model type


def para_banco(valor: Optional[datetime]) -> Optional[datetime]:
    """Entidades usam datetime local ingênuo; o banco guarda com fuso."""
    if valor is None or not settings.USE_TZ or timezone.is_aware(valor):
        return valor
    return timezone.make_aware(valor)


def do_banco(valor: Optional[datetime]) -> Optional[datetime]:
    if valor is None or timezone.is_naive(valor):
        return valor
    return timezone.make_naive(valor)


@dataclass
class PaginationParams:
    """Parâmetros de paginação."""
    page: int = 1
    per_page: int = 20

    @classmethod
    def from_query(cls, params, per_page_max: int = 100) -> "PaginationParams":
        """Lê ``page`` e ``per_page`` de um QueryDict, com limites."""
        try:
            page = max(1, int(params.get("page", 1)))
            per_page = min(per_page_max, max(1, int(params.get("per_page", 20))))
        except (TypeError, ValueError):
            page, per_page = 1, 20
        return cls(page=page, per_page=per_page)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


@dataclass
class PaginatedResult(Generic[T]):
    """Resultado paginado."""
    items: List[T]
    total: int
    page: int
    per_page: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.per_page - 1) // self.per_page

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [
                item.to_dict() if hasattr(item, "to_dict") else item
                for item in self.items
            ],
            "total": self.total,
            "page": self.page,
            "per_page": self.per_page,
            "total_pages": self.total_pages,
            "has_next": self.has_next,
            "has_prev": self.has_prev,
        }


class BaseRepository(ABC, Generic[T, M]):
    """
    Classe base abstrata para repositórios Django.

    Type Parameters:
        T: Tipo da entidade de domínio
        M: Tipo do Model Django

    Example:
        class DjangoCursoRepository(BaseRepository[CursoEntity, CursoModel]):
            model_class = CursoModel

            def to_entity(self, model):
                return CursoMapper.to_entity(model)

            def to_model(self, entity):
                return CursoMapper.to_model(entity)
    """

    model_class: Type[M]
    select_related_fields: List[str] = []
    default_order_field: str = "-criado_em"

    @abstractmethod
    def to_entity(self, model: M) -> T:
        raise NotImplementedError

    @abstractmethod
    def to_model(self, entity: T) -> M:
        """Converte Entity para Model (não salvo)."""
        raise NotImplementedError

    def _get_base_queryset(self) -> QuerySet:
        qs = self.model_class.objects.all()
        if self.select_related_fields:
            qs = qs.select_related(*self.select_related_fields)
        return qs

    def _to_entities(self, qs) -> List[T]:
        return [self.to_entity(m) for m in qs]

    def save(self, entity: T) -> None:
        """Persiste entidade (create ou update)."""
        model = self.to_model(entity)
        defaults = {
            f.attname: getattr(model, f.attname)
            for f in model._meta.concrete_fields
            if not f.primary_key
        }
        self.model_class.objects.update_or_create(id=entity.id, defaults=defaults)
        logger.debug(f"{self.model_class.__name__} saved: {entity.id}")

    def save_many(self, entities: List[T]) -> None:
        for entity in entities:
            self.save(entity)

    def get_by_id(self, entity_id: str) -> Optional[T]:
        try:
            return self.to_entity(self._get_base_queryset().get(id=entity_id))
        except (self.model_class.DoesNotExist, ValueError):
            return None

    def exists(self, entity_id: str) -> bool:
        return self.model_class.objects.filter(id=entity_id).exists()

    def count(self) -> int:
        return self.model_class.objects.count()

    def list_paginated(
        self,
        pagination: PaginationParams,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
    ) -> PaginatedResult[T]:
        """Lista entidades com paginação; filtros None são ignorados."""
        qs = self._get_base_queryset()
        for key, value in (filters or {}).items():
            if value is None or value == "":
                continue
            lookup = f"{key}__in" if isinstance(value, list) else key
            qs = qs.filter(**{lookup: value})
        qs = qs.order_by(order_by or self.default_order_field)

        total = qs.count()
        pagina = qs[pagination.offset:pagination.offset + pagination.per_page]
        return PaginatedResult(
            items=self._to_entities(pagina),
            total=total,
            page=pagination.page,
            per_page=pagination.per_page,
        )


class CachingRepositoryMixin:
    """
    Mixin para adicionar cache por ID ao repositório.

    Usa o CacheService (registro de chaves + estatísticas).

    Example:
        class CachedCursoRepository(CachingRepositoryMixin, DjangoCursoRepository):
            cache_timeout = 300
    """

    cache_timeout: int = 300
    cache_prefix: str = "repo"

    def _cache(self):
        from src.adapters.django_app.shared.cache import get_cache_service
        return get_cache_service()

    def _get_cache_key(self, entity_id: str) -> str:
        return f"{self.cache_prefix}:{self.model_class.__name__}:{entity_id}"

    def get_by_id(self, entity_id: str):
        cache_key = self._get_cache_key(entity_id)
        cached = self._cache().get(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit: {cache_key}")
            return cached

        entity = super().get_by_id(entity_id)
        if entity is not None:
            self._cache().set(cache_key, entity, self.cache_timeout)
        return entity

    def save(self, entity) -> None:
        super().save(entity)
        self._cache().delete(self._get_cache_key(entity.id))
