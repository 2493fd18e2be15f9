"""
Encryption Service - criptografia de dados sensíveis (AES-256-GCM).

Formato do texto cifrado: ``base64(iv[12] || ciphertext || tag[16])``.
A chave de 32 bytes é derivada de ``settings.ENCRYPTION_KEY`` via
SHA-256, então qualquer segredo configurado gera uma chave válida.

Senhas usam PBKDF2-SHA512 (10000 iterações) no formato ``salt:hash``.
"""

from typing import Any, Dict, Iterable, Optional
import base64
import hashlib
import hmac
import json
import logging
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from django.conf import settings

logger = logging.getLogger(__name__)

IV_LENGTH = 12
TAG_LENGTH = 16
PBKDF2_ITERATIONS = 10000
PBKDF2_KEY_LENGTH = 64


class EncryptionService:
    """
    Example:
        service = EncryptionService("segredo")
        cifrado = service.encrypt("123.456.789-09")
        service.decrypt(cifrado)  # "123.456.789-09"
    """

    def __init__(self, key: Optional[str] = None):
        segredo = key or getattr(settings, "ENCRYPTION_KEY", "")
        if not segredo:
            raise ValueError("ENCRYPTION_KEY não configurada")
        self._aesgcm = AESGCM(hashlib.sha256(segredo.encode("utf-8")).digest())

    def encrypt(self, texto: str) -> str:
        iv = os.urandom(IV_LENGTH)
        cifrado = self._aesgcm.encrypt(iv, texto.encode("utf-8"), None)
        return base64.b64encode(iv + cifrado).decode("ascii")

    def decrypt(self, cifrado: str) -> str:
        """
        Raises:
            ValueError: Texto corrompido, chave errada ou tag inválida
        """
        try:
            dados = base64.b64decode(cifrado, validate=True)
            if len(dados) < IV_LENGTH + TAG_LENGTH:
                raise ValueError("conteúdo curto demais")
            iv, conteudo = dados[:IV_LENGTH], dados[IV_LENGTH:]
            return self._aesgcm.decrypt(iv, conteudo, None).decode("utf-8")
        except (InvalidTag, ValueError, TypeError) as e:
            raise ValueError("Falha ao descriptografar dados sensíveis") from e

    def encrypt_object(self, dados: Dict[str, Any]) -> str:
        return self.encrypt(json.dumps(dados, default=str))

    def decrypt_object(self, cifrado: str) -> Dict[str, Any]:
        return json.loads(self.decrypt(cifrado))

    def encrypt_sensitive_fields(
        self, dados: Dict[str, Any], campos: Iterable[str]
    ) -> Dict[str, Any]:
        resultado = dict(dados)
        for campo in campos:
            if resultado.get(campo) is not None:
                resultado[campo] = self.encrypt(str(resultado[campo]))
        return resultado

    def decrypt_sensitive_fields(
        self, dados: Dict[str, Any], campos: Iterable[str]
    ) -> Dict[str, Any]:
        """Campos que não descriptografam mantêm o valor original."""
        resultado = dict(dados)
        for campo in campos:
            if resultado.get(campo) is None:
                continue
            try:
                resultado[campo] = self.decrypt(str(resultado[campo]))
            except ValueError as e:
                logger.warning(f"Falha ao descriptografar campo {campo}: {e}")
        return resultado

    @staticmethod
    def hash_password(senha: str) -> str:
        salt = os.urandom(16).hex()
        digest = hashlib.pbkdf2_hmac(
            "sha512", senha.encode("utf-8"), salt.encode("utf-8"),
            PBKDF2_ITERATIONS, PBKDF2_KEY_LENGTH,
        )
        return f"{salt}:{digest.hex()}"

    @staticmethod
    def verify_password(senha: str, armazenado: str) -> bool:
        salt, _, esperado = armazenado.partition(":")
        if not salt or not esperado:
            return False
        digest = hashlib.pbkdf2_hmac(
            "sha512", senha.encode("utf-8"), salt.encode("utf-8"),
            PBKDF2_ITERATIONS, PBKDF2_KEY_LENGTH,
        )
        return hmac.compare_digest(digest.hex(), esperado)
