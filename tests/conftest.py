import sys
import os
import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from zkp.commitment.poseidon import PoseidonHasher
from zkp.commitment.records import BirthInput, PublicPositions


# ── 테스트 상수 (저장소 예제 벡터) ──
SAMPLE_BIRTH = {
    "dob": "1990-01-15",
    "tob": "14:30",
    "tz": "America/New_York",
    "lat": 40.7128,
    "lon": -74.0060,
}

SAMPLE_PLANETS = {
    "sun": 24500,
    "moon": 8765,
    "mercury": 18234,
    "venus": 21098,
    "mars": 9876,
    "jupiter": 12345,
    "saturn": 30000,
}
SAMPLE_ASC = 15000
SAMPLE_MC = 20000

# 고정 논스 (결정성 테스트용)
FIXED_NONCE = "0123456789abcdef" * 4
ZERO_NONCE = "00" * 32


@pytest.fixture(scope="session")
def hasher():
    """프로세스 전체에서 공유하는 Poseidon 핸들 (폭별 테이블은 처음 쓸 때 생성)."""
    return PoseidonHasher()


@pytest.fixture
def birth_input():
    return BirthInput(**SAMPLE_BIRTH)


@pytest.fixture
def positions():
    return PublicPositions.from_planets(SAMPLE_PLANETS, asc=SAMPLE_ASC, mc=SAMPLE_MC)
