"""
차트 레코드 저장소 (TinyDB)
=============================

검증을 통과한 제출만 저장한다. 문서 형식 (테이블 "charts"):

    {
      "id": "<uuid4 hex>",
      "user_id": "<소유자>" | None,
      "commitment": "<hex>",
      "proof": "<hex>",
      "nonce": "<hex>",
      "positions": {...},
      "verified": True,
      "created_at": "<ISO-8601 UTC>"
    }

출생 데이터 원본은 어떤 필드에도 저장되지 않는다.
레코드는 한 번 만들어지면 수정/삭제하지 않는다.
"""

import threading
import uuid
from datetime import datetime, timezone

from tinydb import TinyDB, Query
from tinydb.storages import MemoryStorage

from chart_serializers import serialize_positions


CHART_TABLE = "charts"

CHART = Query()


class DuplicateCommitment(Exception):
    """같은 커밋먼트로 이미 저장된 차트가 있다."""


class ChartStore:
    """TinyDB 위의 ChartRecord 저장소.

    create()는 커밋먼트 중복 검사와 삽입을 하나의 락 안에서 수행한다.
    """

    def __init__(self, db):
        self.db = db
        self.table = db.table(CHART_TABLE)
        self._lock = threading.Lock()

    @classmethod
    def open(cls, path=None):
        """path가 None이면 메모리 DB, 아니면 JSON 파일 DB를 연다."""
        if path is None:
            return cls(TinyDB(storage=MemoryStorage))
        return cls(TinyDB(path))

    def create(self, artifact, positions, user_id=None):
        """검증된 제출을 저장하고 문서를 반환한다.

        Raises:
            DuplicateCommitment: 같은 커밋먼트가 이미 있음
        """
        record = {
            "id": uuid.uuid4().hex,
            "user_id": user_id,
            "commitment": artifact.commitment,
            "proof": artifact.proof,
            "nonce": artifact.nonce,
            "positions": serialize_positions(positions),
            "verified": True,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }

        with self._lock:
            if self.table.contains(CHART.commitment == artifact.commitment):
                raise DuplicateCommitment(artifact.commitment)
            self.table.insert(record)
        return record

    def get(self, chart_id):
        """id로 차트를 조회한다. 없으면 None."""
        return self.table.get(CHART.id == chart_id)

    def list_by_user(self, user_id):
        """소유자의 차트를 생성 순서대로 반환한다."""
        return self.table.search(CHART.user_id == user_id)

    def count(self):
        return len(self.table)

    def close(self):
        self.db.close()
