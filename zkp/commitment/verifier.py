"""
증명 검증 (Verifier, 서버 전용)
=================================

**검증 과정**:
  1. 형식 검사: commitment, proof는 필드 원소 16진, nonce는 16진 문자열
  2. 챌린지 재계산   e' = Poseidon(enc(C) ‖ enc(positions))
  3. 증명 재계산     π' = Poseidon(enc(C) ‖ enc(nonce) ‖ enc(e'))
  4. π' == π (16진 문자열 완전 일치)

형식 오류(ProofMalformed), 인코딩 오류(EncodingError), 불일치는 모두
외부에 같은 실패로 보인다.

**한계**:
  π'는 (C, nonce, positions)만으로 완전히 결정된다. 서버는 원본 입력을
  받지 않으므로, 임의의 (C, nonce)와 원하는 positions를 골라 같은 공식으로
  π를 계산한 제출도 통과한다. 이 검증은 "제출물이 내부적으로 일관됨"을
  보일 뿐, positions가 커밋된 입력에서 계산되었음을 보이지는 않는다.

사용 예시:
    >>> verifier = Verifier(hasher)
    >>> verifier.verify(artifact, positions)
    True
"""

from zkp.commitment.challenge import derive_challenge
from zkp.commitment.errors import EncodingError, ProofInvalid, ProofMalformed
from zkp.commitment.field import check_hex, hex_to_element
from zkp.commitment.prover import build_proof


class Verifier:
    """제출된 증명을 재계산으로 검증한다."""

    def __init__(self, hasher):
        self.hasher = hasher

    def expected_proof(self, commitment, nonce, positions):
        """(C, nonce, positions)에서 기대되는 증명 16진을 계산한다.

        Raises:
            ProofMalformed: 16진 형식 오류
            EncodingError: 인코딩 불가 입력
        """
        hex_to_element(commitment)
        check_hex(nonce)
        challenge = derive_challenge(self.hasher, commitment, positions)
        return build_proof(self.hasher, commitment, nonce, challenge)

    def verify(self, artifact, positions):
        """검증 결과를 bool로 반환한다.

        제출자가 조작할 수 있는 입력에 대해서는 예외를 던지지 않는다.
        HashPrimitiveInitError는 운영 오류이므로 그대로 전파된다.
        """
        try:
            hex_to_element(artifact.proof)
            expected = self.expected_proof(
                artifact.commitment, artifact.nonce, positions
            )
        except (ProofMalformed, EncodingError):
            return False
        return expected == artifact.proof

    def check(self, artifact, positions):
        """검증에 실패하면 ProofInvalid를 던진다."""
        if not self.verify(artifact, positions):
            raise ProofInvalid()
        return True
