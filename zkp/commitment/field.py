"""
커밋먼트 프로토콜: 유한체(Finite Field) 인코딩
================================================

Poseidon 해시의 입력은 모두 bn128 스칼라 필드의 원소이다.
이 모듈은 문자열/숫자를 필드 원소 시퀀스로 결정론적으로 변환한다.

**청크 분할 (CHUNK_SIZE = 31)**:
  p ≈ 2^254 이므로 32바이트(256비트) 값은 p를 넘을 수 있다.
  31바이트(248비트) 청크는 항상 p보다 작으므로 모듈러 축소 없이
  그대로 하나의 필드 원소가 된다.

    "1990-01-15"  →  UTF-8 바이트  →  [31B][31B]...[나머지]
                                       │    │         │
                                       ▼    ▼         ▼
                                      e₀   e₁   ...  e_k   (빅엔디안)

  CHUNK_SIZE는 프로토콜 상수이다. 제출자와 검증자가 다른 값을 쓰면
  같은 문자열이 다른 원소열이 되어 모든 증명이 실패한다.

**숫자의 정규 표기**:
  숫자는 먼저 고정된 10진 표기로 문자열화된 뒤 인코딩된다.
  - int: str(int)
  - float: 왕복(round-trip) 가능한 최단 자릿수, 지수 표기 없음
    40.0 → "40", -74.0060 → "-74.006", 1e-05 → "0.00001"

사용 예시:
    >>> from zkp.commitment.field import string_to_field_elements, element_to_hex
    >>> string_to_field_elements("ab")
    [FR(24930)]
    >>> element_to_hex(FR(255))
    'ff'
"""

import math
import re
from decimal import Decimal

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import bn128

from zkp.commitment.errors import EncodingError, ProofMalformed


class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소 (Poseidon의 연산 단위)."""
    field_modulus = bn128.curve_order


# 곡선 위수 (필드 크기)
CURVE_ORDER = bn128.curve_order

# 바이트 청크 크기: 31 * 8 = 248 < 254 (필드 비트 길이)
CHUNK_SIZE = 31

# 제출되는 16진 문자열의 최대 길이 (254비트 → 최대 64자)
MAX_HEX_LENGTH = 64

_HEX_RE = re.compile(r"^[0-9a-f]+$")


# ─────────────────────────────────────────────────────────────────────
# 정규 표기 (Canonical rendering)
# ─────────────────────────────────────────────────────────────────────

def canonical_number(value):
    """숫자를 프로토콜 고정 10진 문자열로 변환한다.

    Raises:
        EncodingError: bool, NaN, 무한대, 숫자가 아닌 값
    """
    if isinstance(value, bool):
        raise EncodingError("boolean is not a number")
    if isinstance(value, int):
        return str(value)
    if not isinstance(value, float):
        raise EncodingError(f"unsupported numeric type: {type(value).__name__}")
    if math.isnan(value) or math.isinf(value):
        raise EncodingError("non-finite number")
    if value.is_integer():
        return str(int(value))
    # repr은 최단 왕복 표기; Decimal로 지수 표기를 풀어낸다
    return format(Decimal(repr(value)), "f")


def canonical_string(value):
    """문자열은 그대로, 숫자는 canonical_number로 변환한다."""
    if isinstance(value, str):
        return value
    return canonical_number(value)


# ─────────────────────────────────────────────────────────────────────
# 문자열 → 필드 원소
# ─────────────────────────────────────────────────────────────────────

def iter_chunks(data, size=CHUNK_SIZE):
    """바이트열을 size 바이트 청크로 나눈다 (마지막 청크는 짧을 수 있음)."""
    for i in range(0, len(data), size):
        yield data[i:i + size]


def string_to_field_elements(value):
    """문자열(또는 숫자)을 필드 원소 리스트로 인코딩한다.

    각 31바이트 청크를 빅엔디안 정수로 묶는다.
    빈 문자열은 빈 리스트가 된다.

    Args:
        value: str 또는 int/float (canonical_number로 먼저 문자열화)

    Returns:
        list[FR]

    Raises:
        EncodingError: 정규화할 수 없는 입력
    """
    text = canonical_string(value)
    try:
        data = text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise EncodingError("string is not valid UTF-8") from exc

    return [FR(int.from_bytes(chunk, "big")) for chunk in iter_chunks(data)]


def encode_all(values):
    """여러 값을 순서대로 인코딩하여 하나의 평평한 리스트로 잇는다."""
    elements = []
    for value in values:
        elements.extend(string_to_field_elements(value))
    return elements


# ─────────────────────────────────────────────────────────────────────
# 16진 표기
# ─────────────────────────────────────────────────────────────────────

def element_to_hex(element):
    """필드 원소 → 소문자 16진 문자열 (0x 접두어, 0 채움 없음)."""
    return format(int(element) % CURVE_ORDER, "x")


def hex_to_element(hex_str):
    """element_to_hex의 역변환. 필드 밖의 값은 ProofMalformed."""
    check_hex(hex_str)
    value = int(hex_str, 16)
    if value >= CURVE_ORDER:
        raise ProofMalformed("value is outside the scalar field")
    return FR(value)


def check_hex(hex_str, max_length=MAX_HEX_LENGTH):
    """제출된 16진 문자열의 형식을 검사한다.

    Raises:
        ProofMalformed: 문자열이 아니거나, 비어 있거나, 너무 길거나,
                        소문자 16진 문자가 아닌 경우
    """
    if not isinstance(hex_str, str):
        raise ProofMalformed("expected a hex string")
    if not hex_str or len(hex_str) > max_length:
        raise ProofMalformed("hex string has invalid length")
    if not _HEX_RE.match(hex_str):
        raise ProofMalformed("hex string has invalid characters")
    return hex_str
