"""
챌린지 도출 (ChallengeDeriver)
================================

대화식 프로토콜에서 검증자가 보내는 랜덤 챌린지를 해시로 대신한다
(Fiat-Shamir 변환).

  e = Poseidon( enc(C) ‖ enc(sun) ‖ ... ‖ enc(saturn) ‖ enc(asc) ‖ enc(mc) )

챌린지는 이미 공개된 값(커밋먼트, 공개 위치)에만 의존하므로
저장하지 않고 필요할 때마다 다시 계산한다.
"""

from zkp.commitment.field import encode_all


def challenge_elements(commitment, positions):
    """챌린지 해시에 들어가는 필드 원소 리스트."""
    return encode_all([commitment] + positions.canonical_fields())


def derive_challenge(hasher, commitment, positions):
    """커밋먼트와 공개 위치로 챌린지(16진)를 도출한다.

    Args:
        hasher: PoseidonHasher
        commitment: 커밋먼트 16진
        positions: PublicPositions

    Returns:
        str: 챌린지 16진 다이제스트
    """
    digest = hasher.hash(challenge_elements(commitment, positions))
    return hasher.element_to_hex(digest)
