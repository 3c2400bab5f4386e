"""
커밋먼트 프로토콜 예외
========================

  CommitmentError
  ├── EncodingError           정규화할 수 없는 입력 (숫자/문자열)
  ├── HashPrimitiveInitError  Poseidon 파라미터 생성 실패 (치명적, 1회성)
  ├── ProofMalformed          파싱할 수 없는 16진 값
  └── ProofInvalid            재계산 결과 불일치

EncodingError, ProofMalformed, ProofInvalid는 외부에 모두 같은
"proof verification failed"로 보인다. 어떤 검사에서 실패했는지는 노출하지 않는다.
"""


class CommitmentError(Exception):
    """커밋먼트/증명 프로토콜 예외의 기반 클래스."""


class EncodingError(CommitmentError):
    """필드 원소로 인코딩할 수 없는 입력."""


class HashPrimitiveInitError(CommitmentError):
    """해시 프리미티브 설정 실패. 기능을 비활성화해야 한다."""


class ProofMalformed(CommitmentError):
    """커밋먼트/증명/논스가 올바른 16진 문자열이 아님."""


class ProofInvalid(CommitmentError):
    """증명 검증 실패 (외부로 노출되는 유일한 실패 형태)."""

    def __init__(self, message="proof verification failed"):
        super().__init__(message)
