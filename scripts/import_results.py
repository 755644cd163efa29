import csv
from datetime import datetime
from sqlalchemy.orm import Session
from database.db import SessionLocal
from services.document_store import DocumentStore
from services.errors import NotFoundError
from services.records import get_student

CSV_PATH = "data/results.csv"  # ✅ 파일 경로

def _score(value):
    return float(value) if value not in (None, "") else None

def migrate_results(db: Session, csv_path: str = CSV_PATH) -> int:
    """
    예전 성적 대장(과목별 ca1 / ca2 / exam 한 줄) 이관용.
    컬럼: student_id,subject_id,term,session,ca1,ca2,exam,recorded_at
    - 구 형식 필드 그대로 저장 (성적표 생성 시 신규 형식과 함께 정규화됨)
    """
    store = DocumentStore(db)
    count = 0

    with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        with store.batch():
            for row in reader:
                student = get_student(store, row["student_id"])
                if student is None:
                    raise NotFoundError(f"Student not found: {row['student_id']}")
                store.create("results", {
                    "student_id": student.id,
                    "subject_id": row["subject_id"],
                    "class_id": student.class_id,
                    "term": row["term"],
                    "session": row["session"],
                    "ca1": _score(row.get("ca1")),
                    "ca2": _score(row.get("ca2")),
                    "exam": _score(row.get("exam")),
                    "recorded_at": datetime.fromisoformat(row["recorded_at"]) if row.get("recorded_at") else None,
                })
                count += 1

    return count

if __name__ == "__main__":
    db = SessionLocal()
    try:
        n = migrate_results(db)
    finally:
        db.close()
    print(f"✅ 성적 CSV → DB 마이그레이션 완료 ({n}건)")
