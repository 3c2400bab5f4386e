"""
제출 시도 상태 기계
=====================

  CLIENT_COMPUTING ──commit()──▶ COMMITTED ──submit()──▶ SUBMITTED
                                                            │
                                               resolve(True) │ resolve(False)
                                                  ┌──────────┴──────────┐
                                                  ▼                     ▼
                                               VERIFIED              REJECTED
                                                                        │
                                                              retry()   │
                                                                        ▼
                                                  새 SubmissionAttempt (새 논스)

VERIFIED, REJECTED는 종료 상태이다. 거절된 시도는 같은 산출물로 다시
제출할 수 없고, retry()는 항상 새 논스를 뽑아 무관한 커밋먼트를 만든다.
"""

from enum import Enum

from zkp.commitment.challenge import derive_challenge
from zkp.commitment.commitment import create_commitment
from zkp.commitment.errors import CommitmentError
from zkp.commitment.nonce import generate_nonce
from zkp.commitment.prover import build_proof
from zkp.commitment.records import ProofArtifact


class SubmissionState(Enum):
    CLIENT_COMPUTING = "client_computing"
    COMMITTED = "committed"
    SUBMITTED = "submitted"
    VERIFIED = "verified"
    REJECTED = "rejected"


TERMINAL_STATES = (SubmissionState.VERIFIED, SubmissionState.REJECTED)


class SubmissionStateError(CommitmentError):
    """허용되지 않는 상태 전이."""


class SubmissionAttempt:
    """클라이언트 측 제출 시도 하나.

    속성:
        state: SubmissionState
        nonce: 이 시도 전용 논스
        commitment: commit() 이후 설정
        artifact: submit() 이후 설정 (ProofArtifact)
    """

    def __init__(self, hasher, inputs, positions):
        self.hasher = hasher
        self.positions = positions
        self._inputs = inputs
        self.nonce = generate_nonce()
        self.commitment = None
        self.artifact = None
        self.state = SubmissionState.CLIENT_COMPUTING

    def _expect(self, *states):
        if self.state not in states:
            raise SubmissionStateError(
                f"invalid transition from {self.state.value}"
            )

    def commit(self):
        self._expect(SubmissionState.CLIENT_COMPUTING)
        self.commitment = create_commitment(self.hasher, self._inputs, self.nonce)
        self.state = SubmissionState.COMMITTED
        return self.commitment

    def submit(self):
        """챌린지와 증명을 만들고 전송할 산출물을 반환한다."""
        self._expect(SubmissionState.COMMITTED)
        challenge = derive_challenge(self.hasher, self.commitment, self.positions)
        proof = build_proof(self.hasher, self.commitment, self.nonce, challenge)
        self.artifact = ProofArtifact(self.commitment, proof, self.nonce)
        self.state = SubmissionState.SUBMITTED
        return self.artifact

    def resolve(self, verified):
        """서버 응답을 반영한다."""
        self._expect(SubmissionState.SUBMITTED)
        if verified:
            self.state = SubmissionState.VERIFIED
            self._inputs = None
        else:
            self.state = SubmissionState.REJECTED
        return self.state

    def retry(self):
        """거절된 시도 대신 새 논스로 새 시도를 만든다."""
        self._expect(SubmissionState.REJECTED)
        inputs, self._inputs = self._inputs, None
        if inputs is None:
            raise SubmissionStateError("attempt was already retried")
        return SubmissionAttempt(self.hasher, inputs, self.positions)
