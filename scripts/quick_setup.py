#!/usr/bin/env python
"""
Setup rápido para desenvolvimento local.

Este script:
1. Configura Django settings (SQLite)
2. Executa migrations
3. Cria cursos, alunos, cupom e uma matrícula de exemplo (opcional)

Uso:
    python scripts/quick_setup.py
    python scripts/quick_setup.py --with-sample-data
    python scripts/quick_setup.py --check-only
"""

from datetime import date, timedelta
import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def setup_django():
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')
    os.environ['DATABASE_URL'] = 'sqlite:///db.sqlite3'
    os.environ.setdefault('EVENT_PUBLISHER_MODE', 'logging')

    import django
    django.setup()


def run_migrations():
    from django.core.management import call_command

    print("📦 Executando migrations...")
    call_command('migrate', verbosity=1)
    print("✅ Migrations concluídas!")


def create_sample_data():
    """Cadastra dados de exemplo pelos use cases (mesmas validações da API)."""
    from src.config.container import get_container
    from src.core.academico.dtos import CriarAlunoInputDTO, CriarCursoInputDTO
    from src.core.financeiro.dtos import CriarDescontoInputDTO
    from src.core.matriculas.dtos import CriarMatriculaInputDTO
    from src.core.shared.exceptions import BusinessRuleViolationError

    container = get_container()

    cursos = [
        CriarCursoInputDTO(nome='Python Avançado', codigo='PY-200', carga_horaria=160,
                           valor='1800.00', modalidade='ead', vagas=40),
        CriarCursoInputDTO(nome='Gestão Financeira', codigo='GF-101', carga_horaria=80,
                           valor='950.00', modalidade='presencial', vagas=25),
    ]
    alunos = [
        CriarAlunoInputDTO(nome='Maria Souza Lima', email='maria@exemplo.com',
                           cpf='529.982.247-25', telefone='11987654321'),
        CriarAlunoInputDTO(nome='João Pereira', email='joao@exemplo.com',
                           cpf='111.444.777-35', telefone='21912345678'),
    ]

    print("📝 Criando dados de exemplo...")
    criados_cursos, criados_alunos = [], []
    try:
        for dto in cursos:
            criados_cursos.append(container.criar_curso_service().execute(dto))
            print(f"   ✓ Curso {dto.codigo}")
        for dto in alunos:
            criados_alunos.append(container.criar_aluno_service().execute(dto))
            print(f"   ✓ Aluno {dto.nome}")
        container.criar_desconto_service().execute(
            CriarDescontoInputDTO(nome='Primeira turma', codigo='PRIMEIRA10',
                                  tipo='percentual', valor='10', limite_usos=50)
        )
        print("   ✓ Cupom PRIMEIRA10")
    except BusinessRuleViolationError as e:
        print(f"⚠️  Dados de exemplo já existem ({e.message})")
        return

    hoje = date.today()
    resultado = container.criar_matricula_service().execute(
        CriarMatriculaInputDTO(
            aluno_id=criados_alunos[0].id,
            curso_id=criados_cursos[0].id,
            data_inicio=hoje,
            valor_total=criados_cursos[0].valor,
            forma_pagamento='boleto',
            numero_parcelas=6,
            data_primeiro_vencimento=hoje + timedelta(days=10),
        )
    )
    print(f"   ✓ Matrícula {resultado.matricula.id} com {len(resultado.pagamentos)} parcelas")
    print("✅ Dados de exemplo criados!")


def check_connection():
    from src.adapters.django_app.shared.database import health_check

    print("🔍 Verificando conexão com o banco...")
    resultado = health_check()
    if resultado['status'] == 'ok':
        print(f"✅ Conexão OK! ({resultado['latency_ms']} ms)")
        return True
    print(f"❌ Erro de conexão: {resultado['error']}")
    return False


def show_info():
    from django.conf import settings

    print("\n" + "=" * 60)
    print("📊 Informações do Setup")
    print("=" * 60)
    print(f"  Database Engine: {settings.DATABASES['default']['ENGINE']}")
    print(f"  Database Name: {settings.DATABASES['default']['NAME']}")
    print(f"  Debug Mode: {settings.DEBUG}")
    print(f"  Gateway: {settings.PAYMENT_GATEWAY_MODE}")
    print("=" * 60)
    print("\n🚀 Próximos passos:")
    print("   1. django-admin runserver --settings=src.config.settings --pythonpath=.")
    print("   2. Acesse: http://localhost:8000/matriculas/")
    print("   3. Acesse: http://localhost:8000/financeiro/")
    print("\n")


def main():
    parser = argparse.ArgumentParser(description='Setup rápido para desenvolvimento')
    parser.add_argument('--with-sample-data', action='store_true', help='Criar dados de exemplo')
    parser.add_argument('--check-only', action='store_true', help='Apenas verificar conexão')
    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("🎓 Portal de Matrículas - Quick Setup")
    print("=" * 60 + "\n")

    setup_django()

    if args.check_only:
        check_connection()
        return

    if not check_connection():
        print("\n⚠️  Certifique-se de que o banco de dados está acessível.")
        return

    run_migrations()

    if args.with_sample_data:
        create_sample_data()

    show_info()


if __name__ == '__main__':
    main()
