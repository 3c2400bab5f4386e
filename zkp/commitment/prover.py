"""
증명 생성 (ProofBuilder, 클라이언트 전용)
===========================================

  1. 논스 생성          nonce ← 32바이트 난수
  2. 커밋먼트           C = Poseidon(enc(inputs) ‖ enc(nonce))
  3. 챌린지             e = Poseidon(enc(C) ‖ enc(positions))
  4. 증명               π = Poseidon(enc(C) ‖ enc(nonce) ‖ enc(e))

전송: {commitment: C, proof: π, nonce} + positions
원본 출생 데이터는 클라이언트를 떠나지 않는다.

사용 예시:
    >>> artifact = generate_proof(hasher, inputs, positions)
    >>> artifact.to_dict()
    {'commitment': '...', 'proof': '...', 'nonce': '...'}
"""

from zkp.commitment.challenge import derive_challenge
from zkp.commitment.commitment import create_commitment
from zkp.commitment.field import encode_all
from zkp.commitment.nonce import generate_nonce
from zkp.commitment.records import ProofArtifact


def proof_elements(commitment, nonce, challenge):
    """증명 해시에 들어가는 필드 원소 리스트: C ‖ nonce ‖ e."""
    return encode_all([commitment, nonce, challenge])


def build_proof(hasher, commitment, nonce, challenge):
    """(커밋먼트, 논스, 챌린지)로 증명 다이제스트(16진)를 만든다."""
    digest = hasher.hash(proof_elements(commitment, nonce, challenge))
    return hasher.element_to_hex(digest)


def generate_proof(hasher, inputs, positions, nonce=None):
    """출생 데이터와 공개 위치로 ProofArtifact를 만든다.

    Args:
        hasher: PoseidonHasher
        inputs: BirthInput
        positions: PublicPositions
        nonce: 테스트용 고정 논스. None이면 새로 생성한다.

    Returns:
        ProofArtifact
    """
    if nonce is None:
        nonce = generate_nonce()

    commitment = create_commitment(hasher, inputs, nonce)
    challenge = derive_challenge(hasher, commitment, positions)
    proof = build_proof(hasher, commitment, nonce, challenge)

    return ProofArtifact(commitment, proof, nonce)
