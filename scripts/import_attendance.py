import csv
from datetime import datetime
from sqlalchemy.orm import Session
from database.db import SessionLocal
from schemas.attendance import AttendanceCreate
from services.document_store import DocumentStore
from services.recording import mark_attendance

CSV_PATH = "data/attendance.csv"  # ✅ 파일 경로 (student_id,date,status,term,session,marked_by,reason)

def migrate_attendance(db: Session, csv_path: str = CSV_PATH) -> int:
    store = DocumentStore(db)
    count = 0

    with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        with store.batch():
            for row in reader:
                mark_attendance(
                    store,
                    AttendanceCreate(
                        student_id=row["student_id"],                 # 내부 ID 또는 입학 번호
                        date=datetime.fromisoformat(row["date"]),     # 날짜 (YYYY-MM-DD)
                        status=row["status"],                         # present / absent / late / excused
                        marked_by=row.get("marked_by") or None,
                        reason=row.get("reason") or None,
                    ),
                    row["term"],
                    row["session"],
                )
                count += 1

    return count

if __name__ == "__main__":
    db = SessionLocal()
    try:
        n = migrate_attendance(db)
    finally:
        db.close()
    print(f"✅ 출결 CSV → DB 마이그레이션 완료 ({n}건)")
