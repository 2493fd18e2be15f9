"""
File Storage - implementação sobre o storage do Django.

Usa ``default_storage`` (FileSystemStorage em MEDIA_ROOT por padrão;
pode ser trocado por S3 etc. via ``STORAGES``).
"""

from typing import Optional
import logging

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import Storage, default_storage

logger = logging.getLogger(__name__)


class DjangoFileStorage:
    """
    Adapter do port FileStorage.

    ``save`` não sobrescreve: se o caminho existir o Django gera um
    nome alternativo, e a URL retornada reflete o nome final.
    """

    def __init__(self, storage: Optional[Storage] = None):
        self._storage = storage or default_storage

    def save(self, path: str, content: bytes) -> str:
        nome = self._storage.save(path, ContentFile(content))
        logger.info(f"Arquivo salvo: {nome} ({len(content)} bytes)")
        return self._storage.url(nome)

    def read(self, path: str) -> bytes:
        with self._storage.open(path, "rb") as arquivo:
            return arquivo.read()

    def exists(self, path: str) -> bool:
        return self._storage.exists(path)

    def path_from_url(self, url: str) -> str:
        """Inverso de ``save``: URL pública -> caminho no storage."""
        prefixo = settings.MEDIA_URL or ""
        if prefixo and url.startswith(prefixo):
            return url[len(prefixo):]
        return url.lstrip("/")
