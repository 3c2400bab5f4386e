"""
차트 제출 Flask Blueprint
===========================

  POST /api/charts            커밋먼트 증명 검증 후 차트 저장
  GET  /api/charts/<chart_id> 차트 공개 정보 (positions만)
  GET  /api/charts            X-User-Id 소유 차트 목록
  GET  /api/health            Poseidon 준비 상태

해시 핸들, 저장소, 워커 풀은 app.py에서 app.extensions로 주입된다:
  app.extensions["poseidon"]        PoseidonHasher 또는 None (초기화 실패)
  app.extensions["chart_store"]     ChartStore
  app.extensions["chart_executor"]  ThreadPoolExecutor
"""

from flask import Blueprint, current_app, jsonify, request

from zkp.commitment.errors import ProofInvalid
from zkp.commitment.verifier import Verifier

from chart_serializers import chart_summary, deserialize_submission
from chart_store import DuplicateCommitment


chart_bp = Blueprint('charts', __name__, url_prefix='/api')

USER_HEADER = "X-User-Id"


# ─── 오류 응답 ───

@chart_bp.errorhandler(ProofInvalid)
def proof_invalid(exc):
    """모든 검증 실패는 같은 본문의 400으로 응답한다."""
    current_app.logger.warning("chart submission rejected")
    return jsonify({"error": "proof verification failed"}), 400


@chart_bp.errorhandler(DuplicateCommitment)
def duplicate_commitment(exc):
    return jsonify({"error": "chart already exists"}), 409


def _extension(name):
    return current_app.extensions.get(name)


# ──────────────────────────────────────────────────────────────
# 제출
# ──────────────────────────────────────────────────────────────

@chart_bp.route("/charts", methods=["POST"])
def submit_chart():
    """증명을 검증하고 통과한 경우에만 차트를 저장한다."""
    hasher = _extension("poseidon")
    if hasher is None:
        return jsonify({"error": "chart submission unavailable"}), 503

    body = request.get_json(silent=True)
    artifact, positions = deserialize_submission(
        body, current_app.config["ALGO_VERSION"]
    )

    # 해싱은 워커 스레드에서 실행한다
    verifier = Verifier(hasher)
    future = _extension("chart_executor").submit(
        verifier.verify, artifact, positions
    )
    if not future.result():
        raise ProofInvalid()

    record = _extension("chart_store").create(
        artifact, positions, user_id=request.headers.get(USER_HEADER)
    )
    current_app.logger.info("chart %s accepted", record["id"])

    return jsonify({
        "chartId": record["id"],
        "positions": record["positions"],
        "verified": True,
        "algoVersion": positions.algo_version,
    })


# ──────────────────────────────────────────────────────────────
# 조회
# ──────────────────────────────────────────────────────────────

@chart_bp.route("/charts/<chart_id>")
def get_chart(chart_id):
    """차트의 공개 정보만 반환한다."""
    record = _extension("chart_store").get(chart_id)
    if record is None:
        return jsonify({"error": "chart not found"}), 404
    return jsonify(chart_summary(record))


@chart_bp.route("/charts")
def list_charts():
    """요청자(X-User-Id)가 소유한 차트 목록."""
    user_id = request.headers.get(USER_HEADER)
    if not user_id:
        return jsonify({"error": "user id required"}), 400
    records = _extension("chart_store").list_by_user(user_id)
    return jsonify({"charts": [chart_summary(r) for r in records]})


@chart_bp.route("/health")
def health():
    return jsonify({
        "status": "ok",
        "poseidon": _extension("poseidon") is not None,
    })
