"""
Notificações - templates padrão e envio por canal.

Canais:
- email: enviado pelo backend de e-mail do Django
- sms / whatsapp: apenas registrados em log (sem provedor configurado)

Falhas de envio nunca propagam: a operação de negócio que gerou
a notificação já foi confirmada.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import logging

from django.conf import settings
from django.core.mail import send_mail
from django.template import Context, Template

logger = logging.getLogger(__name__)

CANAIS = ("email", "sms", "whatsapp")

ASSINATURA = "\n\nAtenciosamente,\nEquipe Edunexia"


@dataclass(frozen=True)
class TemplateNotificacao:
    assunto: str
    corpo: str
    curto: str


TEMPLATES: Dict[str, TemplateNotificacao] = {
    "matricula_criada": TemplateNotificacao(
        assunto="Sua matrícula foi criada com sucesso",
        corpo=(
            "Olá {{ nome }},\n\nSua matrícula no curso {{ curso }} foi criada com "
            "sucesso. O número da sua matrícula é {{ matricula_id }}.\n\n"
            "Acesse o portal do aluno para mais informações."
        ),
        curto="Edunexia: Sua matrícula foi criada com sucesso.",
    ),
    "matricula_aprovada": TemplateNotificacao(
        assunto="Sua matrícula foi aprovada",
        corpo=(
            "Olá {{ nome }},\n\nSua matrícula {{ matricula_id }} foi aprovada. "
            "Em breve você receberá o contrato para assinatura."
        ),
        curto="Edunexia: Sua matrícula foi aprovada.",
    ),
    "matricula_rejeitada": TemplateNotificacao(
        assunto="Sua matrícula foi rejeitada",
        corpo=(
            "Olá {{ nome }},\n\nSua matrícula {{ matricula_id }} foi rejeitada."
            "{% if observacoes %}\nMotivo: {{ observacoes }}{% endif %}"
        ),
        curto="Edunexia: Sua matrícula foi rejeitada. Acesse o portal.",
    ),
    "matricula_ativada": TemplateNotificacao(
        assunto="Sua matrícula está ativa",
        corpo="Olá {{ nome }},\n\nSua matrícula {{ matricula_id }} está ativa. Bons estudos!",
        curto="Edunexia: Sua matrícula está ativa.",
    ),
    "matricula_cancelada": TemplateNotificacao(
        assunto="Sua matrícula foi cancelada",
        corpo=(
            "Olá {{ nome }},\n\nSua matrícula {{ matricula_id }} foi cancelada."
            "{% if observacoes %}\nObservações: {{ observacoes }}{% endif %}"
        ),
        curto="Edunexia: Sua matrícula foi cancelada.",
    ),
    "matricula_status_alterado": TemplateNotificacao(
        assunto="Atualização no status da sua matrícula",
        corpo=(
            "Olá {{ nome }},\n\nO status da sua matrícula foi alterado de "
            "{{ status_anterior }} para {{ status_novo }}."
        ),
        curto="Edunexia: O status da sua matrícula foi alterado para {{ status_novo }}.",
    ),
    "documento_enviado": TemplateNotificacao(
        assunto="Documento enviado com sucesso",
        corpo=(
            "Olá {{ nome }},\n\nSeu documento ({{ tipo }}) foi enviado com sucesso e "
            "está em análise. Você receberá uma notificação quando a análise for concluída."
        ),
        curto="Edunexia: Seu documento foi enviado e está em análise.",
    ),
    "novo_documento_para_analise": TemplateNotificacao(
        assunto="Novo documento para análise",
        corpo=(
            "O aluno {{ nome }} enviou o documento {{ tipo }} ({{ nome_arquivo }}) "
            "na matrícula {{ matricula_id }}."
        ),
        curto="Novo documento para análise na matrícula {{ matricula_id }}.",
    ),
    "documento_aprovado": TemplateNotificacao(
        assunto="Seu documento foi aprovado",
        corpo="Olá {{ nome }},\n\nSeu documento ({{ tipo }}) foi aprovado.",
        curto="Edunexia: Seu documento foi aprovado.",
    ),
    "documento_rejeitado": TemplateNotificacao(
        assunto="Seu documento foi rejeitado",
        corpo=(
            "Olá {{ nome }},\n\nSeu documento ({{ tipo }}) foi rejeitado."
            "{% if observacoes %}\nMotivo: {{ observacoes }}{% endif %}\n"
            "Envie uma nova versão pelo portal do aluno."
        ),
        curto="Edunexia: Seu documento foi rejeitado. Envie uma nova versão.",
    ),
    "contrato_gerado": TemplateNotificacao(
        assunto="Seu contrato está disponível para assinatura",
        corpo=(
            "Olá {{ nome }},\n\nSeu contrato está disponível para assinatura. "
            "Acesse o portal do aluno para assinar."
        ),
        curto="Edunexia: Seu contrato está disponível para assinatura.",
    ),
    "contrato_assinado": TemplateNotificacao(
        assunto="Confirmação de assinatura de contrato",
        corpo=(
            "Olá {{ nome }},\n\nSeu contrato foi assinado com sucesso. Você pode "
            "acessar o documento a qualquer momento no portal do aluno."
        ),
        curto="Edunexia: Seu contrato foi assinado com sucesso.",
    ),
    "contrato_assinado_admin": TemplateNotificacao(
        assunto="Contrato assinado",
        corpo=(
            "O contrato da matrícula {{ matricula_id }} foi assinado por "
            "{{ assinado_por }}{% if ip %} (IP {{ ip }}){% endif %}."
        ),
        curto="Contrato da matrícula {{ matricula_id }} assinado.",
    ),
    "pagamento_confirmado": TemplateNotificacao(
        assunto="Confirmação de pagamento",
        corpo=(
            "Olá {{ nome }},\n\nO pagamento da parcela {{ numero_parcela }} "
            "(R$ {{ valor }}) foi confirmado. Obrigado!"
        ),
        curto="Edunexia: Seu pagamento de R$ {{ valor }} foi confirmado. Obrigado!",
    ),
    "payment_overdue": TemplateNotificacao(
        assunto="Pagamento em atraso",
        corpo=(
            "Olá {{ nome }},\n\nA parcela {{ numero_parcela }} no valor de "
            "R$ {{ valor }}, vencida em {{ data_vencimento }}, está em atraso há "
            "{{ dias_atraso }} dia(s). Regularize pelo portal do aluno."
        ),
        curto="Edunexia: Parcela de R$ {{ valor }} em atraso há {{ dias_atraso }} dia(s).",
    ),
    "payment_reminder": TemplateNotificacao(
        assunto="Lembrete de vencimento",
        corpo=(
            "Olá {{ nome }},\n\nA parcela {{ numero_parcela }} no valor de "
            "R$ {{ valor }} vence em {{ data_vencimento }}."
        ),
        curto="Edunexia: Parcela de R$ {{ valor }} vence em {{ data_vencimento }}.",
    ),
}


@dataclass
class Destinatario:
    id: str
    nome: str
    email: Optional[str] = None
    telefone: Optional[str] = None


@dataclass
class NotificacaoRenderizada:
    tipo: str
    assunto: str
    conteudo: str
    variaveis: Dict[str, Any] = field(default_factory=dict)


def renderizar(tipo: str, variaveis: Dict[str, Any], canal: str = "email") -> NotificacaoRenderizada:
    """
    Renderiza o template padrão do tipo para o canal.

    Raises:
        KeyError: Tipo de notificação desconhecido
    """
    template = TEMPLATES[tipo]
    contexto = Context(variaveis, autoescape=False)
    if canal == "email":
        conteudo = Template(template.corpo).render(contexto) + ASSINATURA
    else:
        conteudo = Template(template.curto).render(contexto)
    return NotificacaoRenderizada(
        tipo=tipo,
        assunto=f"Notificação de Matrícula - {template.assunto}",
        conteudo=conteudo,
        variaveis=variaveis,
    )


def enviar(
    destinatario: Destinatario,
    tipo: str,
    variaveis: Optional[Dict[str, Any]] = None,
    canal: str = "email",
) -> bool:
    """
    Envia notificação ao destinatário.

    Returns:
        True se enviada; False se o destinatário não tem contato no
        canal, se o tipo é desconhecido ou se o envio falhou
    """
    if canal not in CANAIS:
        logger.warning(f"Canal de notificação desconhecido: {canal}")
        return False
    if canal == "email" and not destinatario.email:
        logger.warning(f"Destinatário {destinatario.id} não possui email")
        return False
    if canal in ("sms", "whatsapp") and not destinatario.telefone:
        logger.warning(f"Destinatário {destinatario.id} não possui telefone para {canal}")
        return False
    if tipo not in TEMPLATES:
        logger.warning(f"Template de notificação não encontrado: {tipo}")
        return False

    mensagem = renderizar(tipo, {"nome": destinatario.nome, **(variaveis or {})}, canal)

    try:
        if canal == "email":
            send_mail(
                subject=mensagem.assunto,
                message=mensagem.conteudo,
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[destinatario.email],
            )
        else:
            logger.info(
                f"[NOTIFICATION] {canal.upper()} para {destinatario.telefone}: "
                f"{mensagem.conteudo}"
            )
    except Exception as e:
        logger.error(f"Erro ao enviar notificação {tipo} por {canal}: {e}", exc_info=True)
        return False

    logger.info(f"[NOTIFICATION] {tipo} enviada por {canal} para {destinatario.id}")
    return True
