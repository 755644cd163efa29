"""
services/document_store.py

- 컬렉션 이름 기반의 범용 문서 저장소 어댑터
- 성적표 집계 로직은 SQLAlchemy 모델을 직접 다루지 않고 이 어댑터만 사용함
- 지원 기능:
  1) get / create / set(덮어쓰기) / update / delete
  2) query: 동등 조건, 범위 조건(between), 포함 조건(in_), 정렬, limit
  3) batch(): 여러 쓰기를 하나의 트랜잭션으로 묶음
"""

import logging
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from models.attendance import Attendance
from models.classes import SchoolClass
from models.merits import Merit, MeritSummary
from models.report_cards import ReportCard
from models.results import Result
from models.students import Student
from models.subjects import Subject
from models.teachers import SubjectTeacherAssignment, Teacher, TeacherApproval
from services.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# ✅ 컬렉션 이름 → (모델, 고정 필드)
#    - 성적표 세 종류는 같은 테이블을 kind 로 구분해서 사용
COLLECTIONS: Dict[str, Tuple[type, Dict[str, Any]]] = {
    "students": (Student, {}),
    "classes": (SchoolClass, {}),
    "subjects": (Subject, {}),
    "attendance": (Attendance, {}),
    "merits": (Merit, {}),
    "meritSummaries": (MeritSummary, {}),
    "results": (Result, {}),
    "teachers": (Teacher, {}),
    "teacherApprovals": (TeacherApproval, {}),
    "subjectTeachers": (SubjectTeacherAssignment, {}),
    "caReportCards": (ReportCard, {"kind": "ca"}),
    "termReportCards": (ReportCard, {"kind": "term"}),
    "weeklyReportCards": (ReportCard, {"kind": "weekly"}),
}


def to_document(obj) -> Dict[str, Any]:
    """모델 인스턴스를 컬럼 값 dict 로 변환"""
    return {c.name: getattr(obj, c.name) for c in obj.__table__.columns}


class DocumentStore:
    def __init__(self, db: Session):
        self.db = db
        self._in_batch = False

    # ==========================================================
    # [내부] 컬렉션/필드 확인
    # ==========================================================
    def _resolve(self, collection: str) -> Tuple[type, Dict[str, Any]]:
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise ValidationError(f"Unknown collection: {collection}")

    def _column(self, model, field: str):
        if field not in model.__table__.columns:
            raise ValidationError(f"Unknown field '{field}' for {model.__tablename__}")
        return getattr(model, field)

    def _check_fields(self, model, data: Dict[str, Any]):
        for field in data:
            self._column(model, field)

    def _commit(self, obj=None):
        # batch 안에서는 flush 만 하고 커밋은 batch 종료 시점에 한 번
        if self._in_batch:
            self.db.flush()
            return
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        if obj is not None:
            self.db.refresh(obj)

    # ==========================================================
    # [단건] CRUD
    # ==========================================================
    def get(self, collection: str, doc_id: str):
        model, fixed = self._resolve(collection)
        if not doc_id:
            return None
        obj = self.db.get(model, doc_id)
        if obj is None:
            return None
        if any(getattr(obj, k) != v for k, v in fixed.items()):
            return None
        return obj

    def create(self, collection: str, data: Dict[str, Any]):
        model, fixed = self._resolve(collection)
        values = {**data, **fixed}
        if not values.get("id"):
            values["id"] = uuid.uuid4().hex
        self._check_fields(model, values)

        obj = model(**values)
        self.db.add(obj)
        self._commit(obj)
        return obj

    def set(self, collection: str, doc_id: str, data: Dict[str, Any]):
        """문서를 생성하거나 같은 ID의 기존 문서를 덮어씀"""
        model, fixed = self._resolve(collection)
        values = {**data, **fixed}
        values.pop("id", None)
        self._check_fields(model, values)

        obj = self.db.get(model, doc_id)
        if obj is None:
            obj = model(id=doc_id, **values)
            self.db.add(obj)
        else:
            for key, value in values.items():
                setattr(obj, key, value)
        self._commit(obj)
        return obj

    def update(self, collection: str, doc_id: str, data: Dict[str, Any]):
        model, _ = self._resolve(collection)
        self._check_fields(model, data)

        obj = self.get(collection, doc_id)
        if obj is None:
            raise NotFoundError(f"{collection}/{doc_id} not found")
        for key, value in data.items():
            if key == "id":
                continue
            setattr(obj, key, value)
        self._commit(obj)
        return obj

    def delete(self, collection: str, doc_id: str):
        obj = self.get(collection, doc_id)
        if obj is None:
            raise NotFoundError(f"{collection}/{doc_id} not found")
        self.db.delete(obj)
        self._commit()

    # ==========================================================
    # [목록] 조건 조회
    # ==========================================================
    def query(
        self,
        collection: str,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        between: Optional[Tuple[str, Tuple[Any, Any]]] = None,
        in_: Optional[Tuple[str, Iterable[Any]]] = None,
    ) -> List[Any]:
        model, fixed = self._resolve(collection)
        q = self.db.query(model)

        for field, value in {**(where or {}), **fixed}.items():
            q = q.filter(self._column(model, field) == value)

        if between:
            field, (low, high) = between
            q = q.filter(self._column(model, field).between(low, high))

        if in_:
            field, values = in_
            q = q.filter(self._column(model, field).in_(list(values)))

        if order_by:
            column = self._column(model, order_by)
            q = q.order_by(column.desc() if descending else column.asc())

        if limit is not None:
            q = q.limit(limit)

        return q.all()

    # ==========================================================
    # [배치] 여러 문서를 원자적으로 기록
    # ==========================================================
    @contextmanager
    def batch(self):
        if self._in_batch:
            yield self
            return

        self._in_batch = True
        try:
            yield self
            self.db.commit()
        except Exception:
            logger.warning("Batch write rolled back")
            self.db.rollback()
            raise
        finally:
            self._in_batch = False
