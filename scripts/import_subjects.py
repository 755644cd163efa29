import csv
from sqlalchemy.orm import Session
from database.db import SessionLocal
from services.document_store import DocumentStore

CSV_PATH = "data/subjects.csv"  # ✅ 파일 경로 (id,name,code,category,is_core)

def migrate_subjects(db: Session, csv_path: str = CSV_PATH) -> int:
    store = DocumentStore(db)
    count = 0

    with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        with store.batch():
            for row in reader:
                store.set("subjects", row["id"], {
                    "name": row["name"],                                  # 과목 이름
                    "code": row.get("code") or None,                      # 과목 코드
                    "category": row.get("category") or None,              # 과목 분류
                    "is_core": (row.get("is_core") or "").lower() in ("1", "true", "yes"),
                })
                count += 1

    return count

if __name__ == "__main__":
    db = SessionLocal()
    try:
        n = migrate_subjects(db)
    finally:
        db.close()
    print(f"✅ 과목 CSV → DB 마이그레이션 완료 ({n}건)")
