"""
Tests for the client-side submission state machine.

CLIENT_COMPUTING → COMMITTED → SUBMITTED → {VERIFIED | REJECTED}
"""

import pytest

from zkp.commitment.records import ProofArtifact
from zkp.commitment.submission import (
    SubmissionAttempt, SubmissionState, SubmissionStateError, TERMINAL_STATES,
)
from zkp.commitment.verifier import Verifier


@pytest.fixture
def attempt(hasher, birth_input, positions):
    return SubmissionAttempt(hasher, birth_input, positions)


class TestSubmissionAttempt:
    """SubmissionAttempt 상태 전이 테스트."""

    def test_initial_state(self, attempt):
        assert attempt.state is SubmissionState.CLIENT_COMPUTING
        assert attempt.commitment is None
        assert attempt.artifact is None

    def test_happy_path(self, hasher, attempt, positions):
        commitment = attempt.commit()
        assert attempt.state is SubmissionState.COMMITTED

        artifact = attempt.submit()
        assert attempt.state is SubmissionState.SUBMITTED
        assert artifact.commitment == commitment
        assert artifact.nonce == attempt.nonce

        verified = Verifier(hasher).verify(artifact, positions)
        assert attempt.resolve(verified) is SubmissionState.VERIFIED

    def test_submit_before_commit(self, attempt):
        with pytest.raises(SubmissionStateError):
            attempt.submit()

    def test_commit_twice(self, attempt):
        attempt.commit()
        with pytest.raises(SubmissionStateError):
            attempt.commit()

    def test_terminal_states_are_final(self, attempt):
        attempt.commit()
        attempt.submit()
        attempt.resolve(True)
        assert attempt.state in TERMINAL_STATES
        with pytest.raises(SubmissionStateError):
            attempt.resolve(False)
        with pytest.raises(SubmissionStateError):
            attempt.retry()

    def test_rejected_cannot_resubmit(self, attempt):
        attempt.commit()
        attempt.submit()
        assert attempt.resolve(False) is SubmissionState.REJECTED
        with pytest.raises(SubmissionStateError):
            attempt.submit()

    def test_retry_draws_fresh_nonce(self, hasher, attempt, positions):
        attempt.commit()
        first = attempt.submit()
        attempt.resolve(False)

        retry = attempt.retry()
        assert retry.state is SubmissionState.CLIENT_COMPUTING
        assert retry.nonce != attempt.nonce

        retry.commit()
        second = retry.submit()
        assert second.commitment != first.commitment
        assert Verifier(hasher).verify(second, positions) is True

    def test_retry_only_once(self, attempt):
        attempt.commit()
        attempt.submit()
        attempt.resolve(False)
        attempt.retry()
        with pytest.raises(SubmissionStateError):
            attempt.retry()

    def test_artifact_type(self, attempt):
        attempt.commit()
        assert isinstance(attempt.submit(), ProofArtifact)
