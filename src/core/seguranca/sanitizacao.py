"""
Mascaramento e anonimização de dados.

- ``redigir_sensiveis``: troca segredos (senha, cartão, token) por
  ``[REDACTED]`` antes de gravar logs
- ``anonimizar_*``: anonimização de dados pessoais para a LGPD
"""

import re
from typing import Any, Dict, Iterable


REDACTED = "[REDACTED]"

SENSITIVE_KEYS = (
    "password",
    "senha",
    "credit_card",
    "cartao_credito",
    "card_number",
    "numero_cartao",
    "cvv",
    "cvc",
    "security_code",
    "codigo_seguranca",
    "token",
    "access_token",
    "refresh_token",
    "api_key",
    "secret",
    "private_key",
    "chave_privada",
)

# Campos pessoais sensíveis (LGPD)
SENSITIVE_FIELDS = (
    "document",
    "cpf",
    "rg",
    "passport",
    "birthdate",
    "data_nascimento",
    "address",
    "endereco",
    "phone",
    "telefone",
    "credit_card",
    "cartao_credito",
    "health_data",
    "dados_saude",
    "race",
    "raca",
    "ethnicity",
    "etnia",
    "religion",
    "religiao",
    "political_opinion",
    "opiniao_politica",
    "sexual_orientation",
    "orientacao_sexual",
    "biometric_data",
    "dados_biometricos",
)

ENDERECO_ANONIMIZADO = "[ENDEREÇO ANONIMIZADO]"
DATA_ANONIMIZADA = "[DATA ANONIMIZADA]"
DADO_SENSIVEL_ANONIMIZADO = "[DADO SENSÍVEL ANONIMIZADO]"
EMAIL_INVALIDO = "[EMAIL INVÁLIDO]"


def _contem_chave(nome: str, chaves: Iterable[str]) -> bool:
    nome = nome.lower()
    return any(chave in nome for chave in chaves)


def redigir_sensiveis(dados: Dict[str, Any]) -> Dict[str, Any]:
    """
    Retorna cópia com valores de chaves sensíveis mascarados.

    A comparação é por substring, sem diferenciar maiúsculas
    (``userPassword`` e ``card_token`` são mascarados). Percorre
    dicionários aninhados e listas de dicionários.
    """
    resultado = {}
    for chave, valor in (dados or {}).items():
        if _contem_chave(str(chave), SENSITIVE_KEYS):
            resultado[chave] = REDACTED
        elif isinstance(valor, dict):
            resultado[chave] = redigir_sensiveis(valor)
        elif isinstance(valor, list):
            resultado[chave] = [
                redigir_sensiveis(item) if isinstance(item, dict) else item
                for item in valor
            ]
        else:
            resultado[chave] = valor
    return resultado


def campo_sensivel(nome: str) -> bool:
    return _contem_chave(nome, SENSITIVE_FIELDS)


def anonimizar_nome(nome: str) -> str:
    """Ex.: "Maria Souza Lima" → "M**** L***"."""
    partes = nome.split()
    if not partes:
        return nome
    if len(partes) == 1:
        return partes[0][0] + "*" * (len(partes[0]) - 1)
    primeiro, ultimo = partes[0], partes[-1]
    return (
        f"{primeiro[0]}{'*' * (len(primeiro) - 1)} "
        f"{ultimo[0]}{'*' * (len(ultimo) - 1)}"
    )


def anonimizar_email(email: str) -> str:
    """Ex.: "maria@exemplo.com" → "m***a@exemplo.com"."""
    usuario, _, dominio = email.partition("@")
    if not usuario or not dominio:
        return EMAIL_INVALIDO
    return f"{usuario[0]}{'*' * max(1, len(usuario) - 2)}{usuario[-1]}@{dominio}"


def anonimizar_documento(documento: str) -> str:
    """Mantém os 3 primeiros e os 2 últimos dígitos."""
    digitos = re.sub(r"\D", "", documento)
    if len(digitos) <= 4:
        return "*" * len(digitos)
    return f"{digitos[:3]}{'*' * (len(digitos) - 5)}{digitos[-2:]}"


def anonimizar_telefone(telefone: str) -> str:
    """Mantém os 2 primeiros e os 2 últimos dígitos."""
    digitos = re.sub(r"\D", "", telefone)
    if len(digitos) <= 4:
        return "*" * len(digitos)
    return f"{digitos[:2]}{'*' * (len(digitos) - 4)}{digitos[-2:]}"


_ANONIMIZADORES = {
    "name": anonimizar_nome,
    "nome": anonimizar_nome,
    "email": anonimizar_email,
    "document": anonimizar_documento,
    "cpf": anonimizar_documento,
    "phone": anonimizar_telefone,
    "telefone": anonimizar_telefone,
    "address": lambda _: ENDERECO_ANONIMIZADO,
    "endereco": lambda _: ENDERECO_ANONIMIZADO,
    "birthdate": lambda _: DATA_ANONIMIZADA,
    "data_nascimento": lambda _: DATA_ANONIMIZADA,
}


def anonimizar_dados(dados: Dict[str, Any]) -> Dict[str, Any]:
    """
    Anonimiza dados pessoais.

    Campos conhecidos (nome, e-mail, documento, telefone, endereço,
    nascimento) recebem anonimização própria; demais campos sensíveis
    viram ``[DADO SENSÍVEL ANONIMIZADO]``. Valores vazios são mantidos.
    """
    resultado = dict(dados)
    for chave, valor in dados.items():
        if not valor:
            continue
        anonimizador = _ANONIMIZADORES.get(chave.lower())
        if anonimizador:
            resultado[chave] = anonimizador(str(valor))
        elif campo_sensivel(chave):
            resultado[chave] = DADO_SENSIVEL_ANONIMIZADO
    return resultado
