"""
Event Handlers - Processadores de Eventos de Domínio.

Handlers são executados de forma assíncrona via Celery quando
Domain Events são publicados:

- Notificação: e-mail/SMS/WhatsApp para aluno e secretaria
- Agendadas (beat): parcelas vencidas, lembretes de vencimento,
  limpeza do Event Store
- Relatórios: geração e envio de relatório financeiro por e-mail

Padrão:
    dispatch_domain_event(event_type, event_data)
        -> _on_<evento>(event_data) -> [(destinatario, tipo, variaveis)]
        -> enviar_notificacao.delay(...)
"""

from dataclasses import asdict
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple
import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import EmailMessage

from src.adapters.django_app.events import notificacoes
from src.adapters.django_app.events.notificacoes import Destinatario

logger = logging.getLogger(__name__)

Notificacao = Tuple[Destinatario, str, Dict[str, Any]]


# =============================================================================
# Destinatários
# =============================================================================

def _container():
    from src.config.container import get_container
    return get_container()


def _destinatario_aluno(aluno_id: Optional[str]) -> Optional[Destinatario]:
    if not aluno_id:
        return None
    aluno = _container().aluno_repository().get_by_id(aluno_id)
    if not aluno:
        logger.warning(f"Aluno {aluno_id} não encontrado para notificação")
        return None
    return Destinatario(id=aluno.id, nome=aluno.nome, email=aluno.email, telefone=aluno.telefone)


def _destinatario_secretaria() -> Destinatario:
    return Destinatario(
        id="secretaria",
        nome="Secretaria",
        email=getattr(settings, "SECRETARIA_EMAIL", None),
    )


def _aluno_da_matricula(matricula_id: Optional[str]) -> Optional[str]:
    if not matricula_id:
        return None
    matricula = _container().matricula_repository().get_by_id(matricula_id)
    return matricula.aluno_id if matricula else None


def _data_br(valor: Optional[str]) -> str:
    if not valor:
        return ""
    return date.fromisoformat(valor[:10]).strftime("%d/%m/%Y")


# =============================================================================
# Event Handlers
# =============================================================================

def _on_matricula_criada(event_data: Dict[str, Any]) -> List[Notificacao]:
    data = event_data["data"]
    aluno = _destinatario_aluno(data.get("aluno_id"))
    if not aluno:
        return []
    curso = _container().curso_repository().get_by_id(data.get("curso_id"))
    return [(aluno, "matricula_criada", {
        "matricula_id": event_data["aggregate_id"],
        "curso": curso.nome if curso else "",
    })]


def _on_matricula_status_alterado(event_data: Dict[str, Any]) -> List[Notificacao]:
    data = event_data["data"]
    aluno = _destinatario_aluno(data.get("aluno_id"))
    if not aluno:
        return []
    return [(aluno, data.get("notificacao") or "matricula_status_alterado", {
        "matricula_id": event_data["aggregate_id"],
        "status_anterior": data.get("status_anterior"),
        "status_novo": data.get("status_novo"),
        "observacoes": data.get("observacoes"),
    })]


def _on_documento_enviado(event_data: Dict[str, Any]) -> List[Notificacao]:
    data = event_data["data"]
    aluno = _destinatario_aluno(data.get("aluno_id"))
    variaveis = {
        "matricula_id": data.get("matricula_id"),
        "tipo": data.get("tipo"),
        "nome_arquivo": data.get("nome_arquivo"),
    }
    resultado = [(
        _destinatario_secretaria(),
        "novo_documento_para_analise",
        {**variaveis, "nome": aluno.nome if aluno else ""},
    )]
    if aluno:
        resultado.insert(0, (aluno, "documento_enviado", variaveis))
    return resultado


def _on_documento_avaliado(event_data: Dict[str, Any]) -> List[Notificacao]:
    data = event_data["data"]
    if data.get("status") not in ("aprovado", "rejeitado"):
        return []
    aluno = _destinatario_aluno(data.get("aluno_id"))
    if not aluno:
        return []
    return [(aluno, f"documento_{data['status']}", {
        "tipo": data.get("tipo"),
        "observacoes": data.get("observacoes"),
    })]


def _on_contrato_gerado(event_data: Dict[str, Any]) -> List[Notificacao]:
    data = event_data["data"]
    aluno = _destinatario_aluno(data.get("aluno_id"))
    if not aluno:
        return []
    return [(aluno, "contrato_gerado", {"matricula_id": data.get("matricula_id")})]


def _on_contrato_assinado(event_data: Dict[str, Any]) -> List[Notificacao]:
    data = event_data["data"]
    variaveis = {
        "matricula_id": data.get("matricula_id"),
        "assinado_por": data.get("assinado_por"),
        "ip": data.get("ip"),
    }
    resultado = [(_destinatario_secretaria(), "contrato_assinado_admin", variaveis)]
    aluno = _destinatario_aluno(data.get("aluno_id"))
    if aluno:
        resultado.insert(0, (aluno, "contrato_assinado", variaveis))
    return resultado


def _notificacao_pagamento(tipo: str) -> Callable[[Dict[str, Any]], List[Notificacao]]:
    def handler(event_data: Dict[str, Any]) -> List[Notificacao]:
        data = event_data["data"]
        aluno = _destinatario_aluno(_aluno_da_matricula(data.get("matricula_id")))
        if not aluno:
            return []
        return [(aluno, tipo, {
            "pagamento_id": event_data["aggregate_id"],
            "numero_parcela": data.get("numero_parcela"),
            "valor": data.get("valor"),
            "data_vencimento": _data_br(data.get("data_vencimento")),
            "dias_atraso": data.get("dias_atraso"),
        })]
    return handler


HANDLERS: Dict[str, Callable[[Dict[str, Any]], List[Notificacao]]] = {
    "MatriculaCriadaEvent": _on_matricula_criada,
    "MatriculaStatusAlteradoEvent": _on_matricula_status_alterado,
    "DocumentoEnviadoEvent": _on_documento_enviado,
    "DocumentoAvaliadoEvent": _on_documento_avaliado,
    "ContratoGeradoEvent": _on_contrato_gerado,
    "ContratoAssinadoEvent": _on_contrato_assinado,
    "PagamentoRegistradoEvent": _notificacao_pagamento("pagamento_confirmado"),
    "PagamentoVencidoEvent": _notificacao_pagamento("payment_overdue"),
    "LembretePagamentoEvent": _notificacao_pagamento("payment_reminder"),
}


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> int:
    """
    Dispatcher central para Domain Events.

    Args:
        event_type: Tipo do evento (ex: 'MatriculaCriadaEvent')
        event_data: Evento serializado (``DomainEvent.to_dict``)

    Returns:
        Número de notificações enfileiradas
    """
    handler = HANDLERS.get(event_type)
    if not handler:
        logger.debug(f"[DISPATCHER] Sem handler para {event_type}")
        return 0

    logger.info(f"[DISPATCHER] Roteando {event_type} ({event_data.get('aggregate_id')})")
    try:
        pendentes = handler(event_data)
    except Exception as e:
        logger.error(f"Erro no handler {event_type}: {e}", exc_info=True)
        raise self.retry(exc=e)

    for destinatario, tipo, variaveis in pendentes:
        enviar_notificacao.delay(asdict(destinatario), tipo, variaveis)
    return len(pendentes)


@shared_task(bind=True, max_retries=3, default_retry_delay=120, acks_late=True)
def enviar_notificacao(
    self,
    destinatario: Dict[str, Any],
    tipo: str,
    variaveis: Optional[Dict[str, Any]] = None,
    canal: str = "email",
) -> bool:
    """Envia uma notificação; falhas são logadas e retornam False."""
    return notificacoes.enviar(Destinatario(**destinatario), tipo, variaveis, canal)


# =============================================================================
# Scheduled Tasks (Beat)
# =============================================================================

@shared_task(bind=True)
def verificar_pagamentos_vencidos(self) -> Dict[str, Any]:
    """
    Marca parcelas vencidas como atrasadas (eventos geram notificações).

    Executada diariamente pelo Celery Beat.
    """
    logger.info("[SCHEDULED] Verificando pagamentos vencidos...")
    resultado = _container().verificar_pagamentos_vencidos_service().execute()
    logger.info(f"[SCHEDULED] {resultado['processados']} pagamentos marcados como atrasados")
    return resultado


@shared_task(bind=True)
def enviar_lembretes_pagamento(self, dias_antes: int = 3) -> Dict[str, Any]:
    """Lembretes para parcelas que vencem em ``dias_antes`` dias."""
    logger.info(f"[SCHEDULED] Enviando lembretes ({dias_antes} dias antes)...")
    resultado = _container().verificar_pagamentos_proximos_service().execute(dias_antes=dias_antes)
    logger.info(f"[SCHEDULED] {resultado['lembretes']} lembretes enviados")
    return resultado


@shared_task(bind=True)
def cleanup_old_events(self, days: int = 90) -> int:
    """
    Limpa eventos antigos do Event Store.

    Executada semanalmente pelo Celery Beat.
    """
    from src.adapters.django_app.auditoria.models import DomainEventModel

    cutoff_date = datetime.now() - timedelta(days=days)
    deleted, _ = DomainEventModel.objects.filter(occurred_at__lt=cutoff_date).delete()
    logger.info(f"[SCHEDULED] {deleted} eventos removidos")
    return deleted


# =============================================================================
# Report Tasks
# =============================================================================

@shared_task(bind=True, max_retries=2, default_retry_delay=300)
def enviar_relatorio_financeiro(
    self,
    email: str,
    tipo: str,
    formato: str = "csv",
    inicio: Optional[str] = None,
    fim: Optional[str] = None,
    meses: int = 6,
) -> str:
    """
    Gera o relatório financeiro e envia como anexo para ``email``.

    Returns:
        Nome do arquivo enviado
    """
    from src.adapters.django_app.financeiro.relatorios import renderizar_relatorio
    from src.core.financeiro.dtos import GerarRelatorioInputDTO

    relatorio = _container().gerar_relatorio_financeiro_service().execute(
        GerarRelatorioInputDTO(
            tipo=tipo,
            formato=formato,
            inicio=date.fromisoformat(inicio) if inicio else None,
            fim=date.fromisoformat(fim) if fim else None,
            meses=meses,
        )
    )
    arquivo = renderizar_relatorio(relatorio, formato)

    mensagem = EmailMessage(
        subject=relatorio.titulo,
        body=(
            f"Segue em anexo o relatório \"{relatorio.titulo}\" gerado em "
            f"{relatorio.gerado_em.strftime('%d/%m/%Y %H:%M')}."
        ),
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[email],
    )
    mensagem.attach(arquivo.nome, arquivo.conteudo, arquivo.content_type)
    try:
        mensagem.send()
    except Exception as e:
        logger.error(f"Falha ao enviar relatório para {email}: {e}", exc_info=True)
        raise self.retry(exc=e)

    logger.info(f"[REPORT] {arquivo.nome} enviado para {email}")
    return arquivo.nome
