"""
Cache Service - camada sobre o framework de cache do Django.

Backend configurado em ``settings.CACHES`` (Redis em produção,
LocMem em desenvolvimento/testes).

Recursos além do cache do Django:
- get_or_set com TTL padrão do projeto
- delete_by_pattern: chaves são registradas em uma entrada de
  registro, então funciona em qualquer backend
- Estatísticas de acerto (hits/misses) por processo
"""

from fnmatch import fnmatch
from typing import Any, Callable, Dict, Optional
import logging
import threading

from django.conf import settings
from django.core.cache import caches

logger = logging.getLogger(__name__)

DEFAULT_TTL = 600
REGISTRO_CHAVES = "__cache_service:keys__"

_SENTINELA = object()


class CacheService:
    """
    Serviço de cache com registro de chaves.

    Example:
        cache = CacheService()
        resumo = cache.get_or_set("financeiro:resumo:2024-05-01:6", calcular, 300)
        cache.delete_by_pattern("financeiro:resumo:*")
    """

    def __init__(self, alias: str = "default", default_ttl: Optional[int] = None):
        self._cache = caches[alias]
        self.default_ttl = default_ttl or getattr(settings, "CACHE_DEFAULT_TTL", DEFAULT_TTL)
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str, default: Any = None) -> Any:
        valor = self._cache.get(key, _SENTINELA)
        with self._lock:
            if valor is _SENTINELA:
                self._misses += 1
                return default
            self._hits += 1
        return valor

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        self._cache.set(key, value, ttl or self.default_ttl)
        self._registrar(key)

    def delete(self, key: str) -> bool:
        removido = self._cache.delete(key)
        self._desregistrar([key])
        return bool(removido)

    def get_or_set(self, key: str, factory: Callable[[], Any], ttl: Optional[int] = None) -> Any:
        """Retorna o valor em cache ou calcula, grava e retorna."""
        valor = self.get(key, _SENTINELA)
        if valor is not _SENTINELA:
            logger.debug(f"Cache hit: {key}")
            return valor
        valor = factory()
        self.set(key, valor, ttl)
        return valor

    def delete_by_pattern(self, pattern: str) -> int:
        """
        Remove chaves que casam com o padrão glob (ex: ``financeiro:*``).

        Returns:
            Número de chaves removidas
        """
        chaves = [k for k in self._chaves() if fnmatch(k, pattern)]
        if chaves:
            self._cache.delete_many(chaves)
            self._desregistrar(chaves)
        logger.debug(f"Cache invalidado: {pattern} ({len(chaves)} chaves)")
        return len(chaves)

    def clear(self) -> None:
        self._cache.clear()
        with self._lock:
            self._hits = 0
            self._misses = 0

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            hits, misses = self._hits, self._misses
        total = hits + misses
        return {
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / total, 4) if total else 0,
            "keys": len(self._chaves()),
        }

    # Registro de chaves ------------------------------------------------------

    def _chaves(self) -> set:
        return set(self._cache.get(REGISTRO_CHAVES) or ())

    def _registrar(self, key: str) -> None:
        with self._lock:
            chaves = self._chaves()
            chaves.add(key)
            self._cache.set(REGISTRO_CHAVES, chaves, None)

    def _desregistrar(self, keys) -> None:
        with self._lock:
            chaves = self._chaves() - set(keys)
            self._cache.set(REGISTRO_CHAVES, chaves, None)


_cache_service: Optional[CacheService] = None


def get_cache_service() -> CacheService:
    """Instância única por processo (mantém as estatísticas)."""
    global _cache_service
    if _cache_service is None:
        _cache_service = CacheService()
    return _cache_service


def reset_cache_service() -> None:
    global _cache_service
    _cache_service = None
