"""
차트 제출 직렬화/역직렬화 헬퍼
================================

요청 JSON ↔ 커밋먼트 프로토콜 레코드, 레코드 ↔ TinyDB 문서 변환.

제출 본문:
    {
      "commitment": "<hex>",
      "proof": "<hex>",
      "nonce": "<hex>",
      "positions": {
        "planets": {"sun": 24500, "moon": 8765, ...},
        "asc": 15000,
        "mc": 20000,
        "algoVersion": "western-equal-v1",
        "retro": {"mercury": true}          (선택)
      }
    }

형태가 잘못된 요청도 ProofInvalid로 바꿔서 검증 실패와 같은 응답을 낸다.
"""

from zkp.commitment.errors import EncodingError, ProofInvalid
from zkp.commitment.records import (
    BODIES, DEFAULT_ALGO_VERSION, ProofArtifact, PublicPositions,
)


ARTIFACT_KEYS = ("commitment", "proof", "nonce")


# ─── PublicPositions ───

def serialize_positions(positions):
    """PublicPositions → dict (저장/응답용)"""
    data = {
        "planets": positions.planets,
        "asc": positions.asc,
        "mc": positions.mc,
        "algoVersion": positions.algo_version,
    }
    if positions.retro:
        data["retro"] = dict(positions.retro)
    return data


def deserialize_positions(data, default_algo_version=DEFAULT_ALGO_VERSION):
    """dict → PublicPositions

    Raises:
        EncodingError: 천체 누락, 정수가 아닌 값, 알 수 없는 천체
    """
    if not isinstance(data, dict):
        raise EncodingError("positions must be an object")

    planets = data.get("planets")
    if not isinstance(planets, dict):
        raise EncodingError("positions.planets must be an object")
    unknown = set(planets) - set(BODIES)
    if unknown:
        raise EncodingError("unknown bodies in positions")

    algo_version = data.get("algoVersion", default_algo_version)
    if not isinstance(algo_version, str) or not algo_version:
        raise EncodingError("algoVersion must be a non-empty string")

    retro = data.get("retro", {})
    if not isinstance(retro, dict) or not all(
            b in BODIES and isinstance(v, bool) for b, v in retro.items()):
        raise EncodingError("retro must map bodies to booleans")

    if "asc" not in data or "mc" not in data:
        raise EncodingError("positions require asc and mc")

    return PublicPositions.from_planets(
        planets, asc=data["asc"], mc=data["mc"],
        algo_version=algo_version, retro=retro,
    )


# ─── 제출 본문 ───

def deserialize_submission(body, default_algo_version=DEFAULT_ALGO_VERSION):
    """요청 JSON → (ProofArtifact, PublicPositions)

    형태 오류는 모두 ProofInvalid로 바꾼다 (검증 실패와 구분되지 않게).
    """
    if not isinstance(body, dict):
        raise ProofInvalid()
    if any(key not in body for key in ARTIFACT_KEYS + ("positions",)):
        raise ProofInvalid()

    try:
        positions = deserialize_positions(body["positions"], default_algo_version)
    except EncodingError as exc:
        raise ProofInvalid() from exc

    artifact = ProofArtifact(*(body[key] for key in ARTIFACT_KEYS))
    return artifact, positions


# ─── ChartRecord ↔ 응답 ───

def chart_summary(record):
    """저장된 차트 → 공개 응답 (commitment/proof/nonce는 내보내지 않는다)"""
    return {
        "chartId": record["id"],
        "positions": record["positions"],
        "createdAt": record["created_at"],
    }
