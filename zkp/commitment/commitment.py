"""
커밋먼트 생성 (CommitmentBuilder)
===================================

  C = Poseidon( enc(dob) ‖ enc(tob) ‖ enc(tz) ‖ enc(lat) ‖ enc(lon) ‖ enc(nonce) )

  - enc: 31바이트 청크 인코딩 (zkp.commitment.field)
  - 필드 순서는 프로토콜 상수 (records.BIRTH_FIELDS)
  - 논스는 항상 마지막

같은 (입력, 논스)는 항상 같은 커밋먼트를 만든다 (결정성).
논스가 다르면 같은 입력이라도 다른 커밋먼트가 된다 (은닉성).
"""

from zkp.commitment.field import encode_all


def commitment_elements(inputs, nonce):
    """커밋먼트 해시에 들어가는 필드 원소 리스트."""
    return encode_all(inputs.canonical_fields() + [nonce])


def create_commitment(hasher, inputs, nonce):
    """출생 데이터와 논스로 커밋먼트(16진)를 만든다.

    Args:
        hasher: PoseidonHasher
        inputs: BirthInput
        nonce: 16진 논스

    Returns:
        str: 커밋먼트 16진 다이제스트
    """
    digest = hasher.hash(commitment_elements(inputs, nonce))
    return hasher.element_to_hex(digest)


def verify_commitment(hasher, commitment, inputs, nonce):
    """클라이언트 측 확인: 커밋먼트가 (입력, 논스)에서 나왔는지 재계산한다.

    원본 입력을 가진 쪽에서만 쓸 수 있다. 서버는 입력을 받지 않는다.
    """
    return create_commitment(hasher, inputs, nonce) == commitment
