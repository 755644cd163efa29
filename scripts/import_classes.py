import csv
from sqlalchemy.orm import Session
from database.db import SessionLocal
from services.document_store import DocumentStore

CSV_PATH = "data/classes.csv"  # ✅ 파일 경로 (id,name,grade,section,level,class_teacher_id)

def migrate_classes(db: Session, csv_path: str = CSV_PATH) -> int:
    store = DocumentStore(db)
    count = 0

    with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        with store.batch():
            for row in reader:
                store.set("classes", row["id"], {
                    "name": row["name"],                                  # 학급 이름 (예: JSS 1A)
                    "grade": int(row["grade"]),                           # 학년
                    "section": row.get("section") or None,                # 반 구분
                    "level": row.get("level") or None,                    # 과정
                    "class_teacher_id": row.get("class_teacher_id") or None,
                })
                count += 1

    return count

if __name__ == "__main__":
    db = SessionLocal()
    try:
        n = migrate_classes(db)
    finally:
        db.close()
    print(f"✅ 학급 CSV → DB 마이그레이션 완료 ({n}건)")
