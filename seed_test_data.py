from models import Base, SurveySubmission, QuestionResponseRecord
from db import engine, SessionLocal
from catalog import list_questions
from datetime import datetime, timedelta
import sys

# Alocações (A, B, C, D) por respondente, sempre somando 100 sem empates
CURRENT = [(40, 30, 20, 10), (35, 25, 30, 10), (50, 25, 15, 10), (10, 20, 30, 40)]
ASPIRATIONAL = [(30, 40, 20, 10), (25, 45, 20, 10), (45, 35, 15, 5), (20, 30, 40, 10)]

RESPONDENTS = [
    ("Ana Souza", "ana.souza@acme.com", "Acme"),
    ("Bruno Lima", "bruno.lima@acme.com", "Acme"),
    ("Carla Dias", "carla.dias@globex.co.uk", "Globex"),
    ("Diego Rocha", "diego.rocha@globex.co.uk", "Globex"),
]


def allocation(values):
    return dict(zip("ABCD", values))


Base.metadata.create_all(bind=engine)
db = SessionLocal()

try:
    # Limpar dados anteriores
    db.query(QuestionResponseRecord).delete()
    db.query(SurveySubmission).delete()
    db.commit()
    print("✅ Banco limpo")

    now = datetime.utcnow()
    for i, (name, email, company) in enumerate(RESPONDENTS):
        submission = SurveySubmission(
            full_name=name,
            email=email,
            designation="Mid-Level Management (e.g., Manager, Team Lead)",
            cohort_team="Operations",
            office_typology="HQ",
            company=company,
            completion_time=300 + 45 * i,
            ip_address="127.0.0.1",
            user_agent="seed_test_data",
            submitted_at=now - timedelta(days=len(RESPONDENTS) - i),
        )
        for position, question in enumerate(list_questions()):
            submission.question_responses.append(QuestionResponseRecord(
                position=position,
                question_id=question.id,
                question_title=question.title,
                current_state=allocation(CURRENT[(i + position) % len(CURRENT)]),
                aspirational_state=allocation(ASPIRATIONAL[(i + position) % len(ASPIRATIONAL)]),
            ))
        db.add(submission)
    db.commit()
    print(f"✅ {len(RESPONDENTS)} submissões criadas")

    print("\n🎉 DADOS DE TESTE CRIADOS COM SUCESSO!")
    print("📊 Teste em: GET /api/surveys/analytics/acme")

except Exception as e:
    db.rollback()
    print(f"❌ Erro: {str(e)}")
    sys.exit(1)
finally:
    db.close()
