"""
논스(Nonce) 생성
=================

제출 시도마다 새로 뽑는 32바이트 난수 (16진 64자).
같은 출생 데이터라도 논스가 다르면 커밋먼트가 달라지므로(은닉성),
거절된 시도를 재시도할 때도 반드시 새 논스를 써야 한다.
"""

import secrets


# 논스 바이트 길이
NONCE_BYTES = 32


def generate_nonce():
    """암호학적으로 안전한 32바이트 난수를 16진 문자열로 반환한다."""
    return secrets.token_hex(NONCE_BYTES)
