import csv
from sqlalchemy.orm import Session
from database.db import SessionLocal
from schemas.students import StudentCreate
from services.document_store import DocumentStore
from services.recording import create_student

CSV_PATH = "data/students.csv"  # ✅ 파일 경로

def migrate_students(db: Session, csv_path: str = CSV_PATH) -> int:
    """
    컬럼: id,admission_number,first_name,last_name,class_id,gender,parent_id,subjects,academic_track,trade_subject
    - subjects 는 세미콜론(;) 구분 과목 ID 목록
    - admission_number 가 비어 있으면 자동 발급
    """
    store = DocumentStore(db)
    count = 0

    with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        with store.batch():
            for row in reader:
                create_student(store, StudentCreate(
                    id=row.get("id") or None,
                    admission_number=row.get("admission_number") or None,
                    first_name=row["first_name"],
                    last_name=row["last_name"],
                    class_id=row["class_id"],
                    gender=row.get("gender") or None,
                    parent_id=row.get("parent_id") or None,
                    subjects=[s.strip() for s in (row.get("subjects") or "").split(";") if s.strip()],
                    academic_track=row.get("academic_track") or None,
                    trade_subject=row.get("trade_subject") or None,
                ))
                count += 1

    return count

if __name__ == "__main__":
    db = SessionLocal()
    try:
        n = migrate_students(db)
    finally:
        db.close()
    print(f"✅ 학생 정보 CSV → DB 마이그레이션 완료 ({n}명)")
