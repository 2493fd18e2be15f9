"""
Coleta e análise de feedback dos usuários.

Prioridade definida na submissão:
- bug -> high
- satisfação até "dissatisfied" -> medium
- demais -> low

Tags geradas: tipo, ``module:``, ``feature:``, ``satisfaction:`` e até
cinco ``keyword:`` reconhecidas na mensagem.
"""

from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging
import re

from src.core.shared.exceptions import EntityNotFoundError, ValidationError

from .entities import (
    Feedback,
    FeedbackPriority,
    FeedbackStatus,
    FeedbackType,
    SatisfactionLevel,
)
from .ports import FeedbackFilters, FeedbackRepository


logger = logging.getLogger(__name__)

MENSAGEM_MIN = 10
MENSAGEM_MAX = 1000
MAX_PALAVRAS_CHAVE = 5
MAX_TOP_FEATURES = 5

PALAVRAS_CHAVE = frozenset([
    "lento", "rápido", "difícil", "fácil", "confuso", "intuitivo",
    "erro", "bug", "problema", "falha", "travando", "carregando",
    "melhorar", "adicionar", "remover", "atualizar", "mudar",
    "interface", "design", "layout", "botão", "formulário", "campo",
    "pagamento", "financeiro", "matrícula", "contrato", "documento",
    "relatório", "dashboard", "gráfico", "notificação", "alerta",
])

_PONTUACAO = re.compile(r"[.,/#!$%^&*;:{}=\-_`~()]")


def extrair_palavras_chave(mensagem: str, limite: int = MAX_PALAVRAS_CHAVE) -> List[str]:
    """Palavras conhecidas com mais de 3 letras, na ordem em que aparecem."""
    palavras = _PONTUACAO.sub("", (mensagem or "").lower()).split()
    encontradas = [p for p in palavras if len(p) > 3 and p in PALAVRAS_CHAVE]
    return list(dict.fromkeys(encontradas))[:limite]


def definir_prioridade(
    tipo: FeedbackType, satisfacao: Optional[SatisfactionLevel]
) -> FeedbackPriority:
    if tipo == FeedbackType.BUG:
        return FeedbackPriority.HIGH
    if satisfacao is not None and satisfacao.value <= SatisfactionLevel.DISSATISFIED.value:
        return FeedbackPriority.MEDIUM
    return FeedbackPriority.LOW


def gerar_tags(
    tipo: FeedbackType,
    module: str,
    mensagem: str,
    feature: Optional[str] = None,
    satisfacao: Optional[SatisfactionLevel] = None,
) -> List[str]:
    tags = [tipo.value, f"module:{module}"]
    if feature:
        tags.append(f"feature:{feature}")
    if satisfacao is not None:
        tags.append(f"satisfaction:{satisfacao.name.lower()}")
    tags.extend(f"keyword:{p}" for p in extrair_palavras_chave(mensagem))
    return tags


class FeedbackService:
    """
    Example:
        service = FeedbackService(repo)
        feedback = service.submit_feedback(
            user_id="u1",
            feedback_type=FeedbackType.BUG,
            message="O botão de pagamento está travando",
            module="financeiro",
        )
        feedback.priority  # FeedbackPriority.HIGH
    """

    def __init__(self, repository: FeedbackRepository):
        self.repository = repository

    def submit_feedback(
        self,
        user_id: str,
        feedback_type: FeedbackType,
        message: str,
        module: str,
        satisfaction_level: Optional[SatisfactionLevel] = None,
        feature: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Feedback:
        """
        Raises:
            ValidationError: Mensagem fora de 10..1000 caracteres, módulo
                ausente ou metadata que não é objeto
        """
        if not user_id:
            raise ValidationError("Usuário é obrigatório", field="user_id")
        for campo, valor in (("message", message), ("module", module), ("feature", feature)):
            if valor is not None and not isinstance(valor, str):
                raise ValidationError(f"{campo} deve ser texto", field=campo)
        mensagem = (message or "").strip()
        if not MENSAGEM_MIN <= len(mensagem) <= MENSAGEM_MAX:
            raise ValidationError(
                f"Mensagem deve ter entre {MENSAGEM_MIN} e {MENSAGEM_MAX} caracteres",
                field="message",
            )
        modulo = (module or "").strip()
        if not modulo:
            raise ValidationError("Módulo é obrigatório", field="module")
        if metadata is not None and not isinstance(metadata, dict):
            raise ValidationError("metadata deve ser um objeto", field="metadata")
        feature = (feature or "").strip() or None

        feedback = Feedback(
            user_id=user_id,
            type=feedback_type,
            message=mensagem,
            module=modulo,
            satisfaction_level=satisfaction_level,
            feature=feature,
            metadata=metadata or {},
            priority=definir_prioridade(feedback_type, satisfaction_level),
            tags=gerar_tags(feedback_type, modulo, mensagem, feature, satisfaction_level),
        )
        self.repository.save(feedback)
        logger.info(f"Feedback {feedback.id} recebido ({feedback.type.value}, {feedback.priority.value})")
        return feedback

    def get_feedback(self, feedback_id: str) -> Feedback:
        feedback = self.repository.get_by_id(feedback_id)
        if feedback is None:
            raise EntityNotFoundError(
                "Feedback não encontrado", entity_type="Feedback", entity_id=feedback_id
            )
        return feedback

    def list_feedback(self, filters: Optional[FeedbackFilters] = None) -> List[Dict[str, Any]]:
        return [f.to_dict() for f in self.repository.buscar(filters or FeedbackFilters())]

    def update_status(
        self,
        feedback_id: str,
        status: FeedbackStatus,
        priority: Optional[FeedbackPriority] = None,
    ) -> Feedback:
        feedback = self.get_feedback(feedback_id)
        feedback.status = status
        if priority is not None:
            feedback.priority = priority
        self.repository.save(feedback)
        return feedback

    def get_stats(self, inicio: datetime, fim: datetime) -> Dict[str, Any]:
        """
        Contagens por tipo, módulo, status e prioridade, satisfação média
        e as cinco features mais citadas no período.

        Raises:
            ValidationError: Se fim for anterior ao início
        """
        if fim < inicio:
            raise ValidationError(
                "Data final deve ser posterior à data inicial", field="end_date"
            )
        feedbacks = self.repository.buscar(FeedbackFilters(start_date=inicio, end_date=fim))

        niveis = [f.satisfaction_level.value for f in feedbacks if f.satisfaction_level]
        features = Counter(f.feature for f in feedbacks if f.feature)
        return {
            "total": len(feedbacks),
            "by_type": dict(Counter(f.type.value for f in feedbacks)),
            "by_module": dict(Counter(f.module for f in feedbacks)),
            "by_status": dict(Counter(f.status.value for f in feedbacks)),
            "by_priority": dict(Counter(f.priority.value for f in feedbacks)),
            "average_satisfaction": round(sum(niveis) / len(niveis), 2) if niveis else 0,
            "top_features": [
                {"feature": feature, "count": total}
                for feature, total in features.most_common(MAX_TOP_FEATURES)
            ],
        }
