"""
Poseidon 해시 (bn128 스칼라 필드)
==================================

영지식 회로 친화적인 대수적(algebraic) 해시 함수.
SHA-256이 비트 연산으로 이루어진 것과 달리, Poseidon은 필드 덧셈/곱셈만으로
구성되어 회로 안에서 값싸게 표현된다.

**순열(permutation) 구조** (HADES 설계):

  state = [0, x₁, x₂, ..., x_n]          (폭 t = n + 1, 용량 원소 1개)

  ┌──────────────────────────────────────────────┐
  │  R_F/2 전체 라운드:  ARK → S(x)=x⁵ (전체) → MDS │
  │  R_P   부분 라운드:  ARK → S(x)=x⁵ (state[0]) → MDS │
  │  R_F/2 전체 라운드:  ARK → S(x)=x⁵ (전체) → MDS │
  └──────────────────────────────────────────────┘

  출력 = state[0]

  - ARK (Add Round Key): 라운드 상수 t개를 더한다
  - S-box: x ↦ x⁵ (gcd(5, p-1) = 1 이므로 전단사)
  - MDS: t×t 최대 거리 분리 행렬 곱

**파라미터 생성 (Grain LFSR)**:
  라운드 상수와 MDS 행렬은 (field, sbox, n, t, R_F, R_P)로 시드한 80비트
  Grain LFSR에서 결정론적으로 뽑는다. 폭마다 수천 개의 254비트 값을
  생성해야 하므로 비용이 크다. 해시 객체(PoseidonHasher)는 프로세스당
  한 번 만들어 공유하고, 폭별 테이블은 처음 필요할 때 한 번만 생성한다.

사용 예시:
    >>> hasher = PoseidonHasher.build(warm_widths=[3])
    >>> h = hasher.hash([FR(1), FR(2)])
    >>> hasher.element_to_hex(h)
"""

import threading

from zkp.commitment.field import FR, CURVE_ORDER, element_to_hex
from zkp.commitment.errors import EncodingError, HashPrimitiveInitError


# 전체 라운드 수 (앞 4 + 뒤 4)
FULL_ROUNDS = 8

# 폭 t = 2..17 에 대한 부분 라운드 수 (circom 파라미터 표)
PARTIAL_ROUNDS = [56, 57, 56, 60, 60, 63, 64, 63, 60, 66, 60, 65, 70, 60, 64, 68]

MIN_WIDTH = 2
MAX_WIDTH = MIN_WIDTH + len(PARTIAL_ROUNDS) - 1

# 해시 한 번에 넣을 수 있는 최대 입력 원소 수
MAX_INPUTS = MAX_WIDTH - 1

# S-box 지수
ALPHA = 5

# Grain 시드 필드: field=1 (소수체), sbox=0 (x^α)
_GRAIN_FIELD = 1
_GRAIN_SBOX = 0


def partial_rounds_for(width):
    """폭 t에 대한 부분 라운드 수 R_P."""
    if width < MIN_WIDTH or width > MAX_WIDTH:
        raise ValueError(f"unsupported Poseidon width: {width}")
    return PARTIAL_ROUNDS[width - MIN_WIDTH]


# ─────────────────────────────────────────────────────────────────────
# Grain LFSR
# ─────────────────────────────────────────────────────────────────────

class GrainLFSR:
    """80비트 Grain LFSR (자기 축약 출력).

    초기 상태 비트열:
        field(2) | sbox(4) | n(12) | t(12) | R_F(10) | R_P(10) | 1 × 30

    피드백: b₀ ⊕ b₁₃ ⊕ b₂₃ ⊕ b₃₈ ⊕ b₅₁ ⊕ b₆₂
    처음 160비트는 버린다. 이후 비트를 두 개씩 뽑아 첫 비트가 1일 때만
    두 번째 비트를 출력한다.

    상태는 정수 하나로 표현한다: 정수의 i번째 비트 = 비트열의 i번째 원소.
    """

    STATE_BITS = 80

    def __init__(self, field, sbox, n, t, r_f, r_p):
        bits = (
            format(field, "02b")
            + format(sbox, "04b")
            + format(n, "012b")
            + format(t, "012b")
            + format(r_f, "010b")
            + format(r_p, "010b")
            + "1" * 30
        )
        state = 0
        for i, b in enumerate(bits):
            if b == "1":
                state |= 1 << i
        self.state = state

        for _ in range(160):
            self._step()

    def _step(self):
        s = self.state
        bit = ((s >> 62) ^ (s >> 51) ^ (s >> 38) ^ (s >> 23) ^ (s >> 13) ^ s) & 1
        self.state = (s >> 1) | (bit << 79)
        return bit

    def next_bit(self):
        while True:
            first = self._step()
            second = self._step()
            if first:
                return second

    def random_bits(self, num_bits):
        """num_bits 개의 출력 비트를 빅엔디안 정수로 묶는다."""
        # 내부 루프는 지역 변수로 펼쳐서 속도를 확보한다
        s = self.state
        value = 0
        produced = 0
        while produced < num_bits:
            first = ((s >> 62) ^ (s >> 51) ^ (s >> 38) ^ (s >> 23) ^ (s >> 13) ^ s) & 1
            s = (s >> 1) | (first << 79)
            second = ((s >> 62) ^ (s >> 51) ^ (s >> 38) ^ (s >> 23) ^ (s >> 13) ^ s) & 1
            s = (s >> 1) | (second << 79)
            if first:
                value = (value << 1) | second
                produced += 1
        self.state = s
        return value

    def field_element(self, num_bits, modulus):
        """modulus 미만이 나올 때까지 거절 샘플링한다."""
        value = self.random_bits(num_bits)
        while value >= modulus:
            value = self.random_bits(num_bits)
        return value


# ─────────────────────────────────────────────────────────────────────
# 파라미터
# ─────────────────────────────────────────────────────────────────────

class PoseidonParams:
    """폭 t 하나에 대한 Poseidon 파라미터.

    속성:
        width: 상태 폭 t
        full_rounds: R_F
        partial_rounds: R_P
        round_constants: (R_F + R_P) × t 개의 FR (라운드 순서대로 평탄화)
        mds: t × t FR 행렬 (코시 행렬 1/(x_i + y_j))
    """

    def __init__(self, width, full_rounds, partial_rounds, round_constants, mds):
        self.width = width
        self.full_rounds = full_rounds
        self.partial_rounds = partial_rounds
        self.round_constants = round_constants
        self.mds = mds

    @classmethod
    def generate(cls, width, full_rounds=FULL_ROUNDS):
        """Grain LFSR로 라운드 상수와 MDS 행렬을 생성한다.

        상수를 먼저 뽑고, 같은 LFSR 스트림에서 이어서 MDS를 뽑는다.
        """
        partial_rounds = partial_rounds_for(width)
        n = CURVE_ORDER.bit_length()
        lfsr = GrainLFSR(_GRAIN_FIELD, _GRAIN_SBOX, n, width,
                         full_rounds, partial_rounds)

        num_constants = (full_rounds + partial_rounds) * width
        round_constants = [
            FR(lfsr.field_element(n, CURVE_ORDER))
            for _ in range(num_constants)
        ]

        mds = cls._cauchy_mds(lfsr, width, n)
        return cls(width, full_rounds, partial_rounds, round_constants, mds)

    @staticmethod
    def _cauchy_mds(lfsr, width, n):
        # 2t개의 서로 다른 원소 x_0..x_{t-1}, y_0..y_{t-1}
        while True:
            values = [lfsr.random_bits(n) % CURVE_ORDER for _ in range(2 * width)]
            if len(set(values)) != len(values):
                continue
            xs = values[:width]
            ys = values[width:]
            if any((x + y) % CURVE_ORDER == 0 for x in xs for y in ys):
                continue
            return [[FR(1) / FR(x + y) for y in ys] for x in xs]


# ─────────────────────────────────────────────────────────────────────
# 순열 및 해시
# ─────────────────────────────────────────────────────────────────────

def permute(params, state):
    """Poseidon 순열을 state(FR 리스트)에 적용한 새 리스트를 반환한다."""
    t = params.width
    half_full = params.full_rounds // 2
    total_rounds = params.full_rounds + params.partial_rounds
    constants = params.round_constants
    mds = params.mds

    state = list(state)
    for r in range(total_rounds):
        # ARK
        offset = r * t
        state = [state[i] + constants[offset + i] for i in range(t)]

        # S-box
        if r < half_full or r >= half_full + params.partial_rounds:
            state = [x ** ALPHA for x in state]
        else:
            state[0] = state[0] ** ALPHA

        # MDS
        new_state = []
        for row in mds:
            acc = FR(0)
            for m, x in zip(row, state):
                acc = acc + m * x
            new_state.append(acc)
        state = new_state

    return state


class PoseidonHasher:
    """Poseidon 해시 핸들.

    폭별 파라미터 테이블을 메모이즈한다. 테이블 생성은 비싸므로 이 객체는
    프로세스 시작 시 한 번 만들어 주입(app.extensions 등)하고 요청마다
    새로 만들지 않는다. 생성 이후의 hash()는 부작용 없는 순수 함수이다.
    """

    def __init__(self, full_rounds=FULL_ROUNDS):
        self.full_rounds = full_rounds
        self._params = {}
        self._lock = threading.Lock()

    @classmethod
    def build(cls, warm_widths=range(MIN_WIDTH, MAX_WIDTH + 1)):
        """해시 핸들을 만들고 주어진 폭들의 테이블을 미리 생성한다.

        Raises:
            HashPrimitiveInitError: 파라미터 생성 실패
        """
        hasher = cls()
        for width in warm_widths:
            hasher.params(width)
        return hasher

    @property
    def built_widths(self):
        return sorted(self._params)

    def params(self, width):
        """폭 t의 파라미터를 반환한다 (없으면 생성 후 캐시)."""
        params = self._params.get(width)
        if params is not None:
            return params

        with self._lock:
            params = self._params.get(width)
            if params is None:
                try:
                    params = PoseidonParams.generate(width, self.full_rounds)
                except (ValueError, ZeroDivisionError) as exc:
                    raise HashPrimitiveInitError(
                        f"cannot build Poseidon parameters for width {width}"
                    ) from exc
                self._params[width] = params
        return params

    def hash(self, elements):
        """필드 원소 리스트(1..16개)를 하나의 필드 원소로 해시한다.

        Raises:
            EncodingError: 입력 개수가 지원 범위를 벗어날 때
        """
        elements = list(elements)
        if not elements or len(elements) > MAX_INPUTS:
            raise EncodingError(
                f"Poseidon takes 1..{MAX_INPUTS} inputs, got {len(elements)}"
            )

        params = self.params(len(elements) + 1)
        state = [FR(0)] + [FR(int(e)) for e in elements]
        return permute(params, state)[0]

    @staticmethod
    def element_to_hex(element):
        return element_to_hex(element)
