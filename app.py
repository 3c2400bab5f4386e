import atexit
from concurrent.futures import ThreadPoolExecutor

from flask import Flask

from zkp.commitment.errors import HashPrimitiveInitError
from zkp.commitment.poseidon import PoseidonHasher
from zkp.commitment.records import DEFAULT_ALGO_VERSION

from chart_routes import chart_bp
from chart_store import ChartStore


# 커밋먼트/챌린지/증명 해시 폭 (입력 개수 + 1)
#   commitment: 5 필드 + nonce 3 청크 = 8 → 9
#   proof:      C 2..3 + nonce 3 + e 2..3 청크 → 8..10
#   challenge:  C 2..3 청크 + 9 위치 → 12..13
#   (다이제스트 16진이 62자 이하면 2 청크)
PROTOCOL_WIDTHS = tuple(range(8, 14))

DEFAULT_CONFIG = {
    "SECRET_KEY": "key",
    "CHART_DB_PATH": "db.json",
    "POSEIDON_WARM_WIDTHS": PROTOCOL_WIDTHS,
    "ALGO_VERSION": DEFAULT_ALGO_VERSION,
    "VERIFY_WORKERS": 4,
}


def build_hasher(app):
    """해시 핸들을 만든다. 실패하면 None (제출 기능 비활성화)."""
    try:
        return PoseidonHasher.build(app.config["POSEIDON_WARM_WIDTHS"])
    except HashPrimitiveInitError:
        app.logger.exception("Poseidon setup failed; chart submission disabled")
        return None


def create_app(config=None, hasher=None, store=None):
    """Flask 앱을 만든다.

    Args:
        config: app.config를 덮어쓸 매핑
        hasher: 미리 만든 PoseidonHasher (테스트에서 공유)
        store: 미리 만든 ChartStore
    """
    app = Flask(__name__)
    app.config.update(DEFAULT_CONFIG)
    app.config.from_prefixed_env()
    if config:
        app.config.update(config)

    if hasher is None:
        hasher = build_hasher(app)
    if store is None:
        store = ChartStore.open(app.config["CHART_DB_PATH"])

    app.extensions["poseidon"] = hasher
    app.extensions["chart_store"] = store
    executor = ThreadPoolExecutor(max_workers=app.config["VERIFY_WORKERS"])
    atexit.register(executor.shutdown, wait=False)
    app.extensions["chart_executor"] = executor

    app.register_blueprint(chart_bp)
    return app


if __name__ == "__main__":
    create_app().run()
