"""
커밋먼트 프로토콜 레코드
==========================

해시 입력 순서는 딕셔너리 순회 순서가 아니라 아래의 고정 필드 순서로 정해진다.

  BirthInput (비공개, 클라이언트에만 존재):
    [dob, tob, tz, lat, lon]

  PublicPositions (공개):
    [sun, moon, mercury, venus, mars, jupiter, saturn, asc, mc]
    각 값은 센티도(centi-degree, 1/100도) 정수 황경

  ProofArtifact (전송):
    {commitment, proof, nonce}
"""

from zkp.commitment.errors import EncodingError
from zkp.commitment.field import canonical_number


# 비공개 입력의 해시 순서
BIRTH_FIELDS = ("dob", "tob", "tz", "lat", "lon")

# 천체 순서 (챌린지 해시 순서)
BODIES = ("sun", "moon", "mercury", "venus", "mars", "jupiter", "saturn")

# 천체 뒤에 이어지는 각도
ANGLES = ("asc", "mc")

POSITION_FIELDS = BODIES + ANGLES

DEFAULT_ALGO_VERSION = "western-equal-v1"


class BirthInput:
    """출생 데이터. 직렬화/저장되지 않는다.

    속성:
        dob: "YYYY-MM-DD"
        tob: "HH:MM"
        tz: IANA 시간대 식별자 (예: "America/New_York")
        lat, lon: 위도/경도 (float)
    """

    def __init__(self, dob, tob, tz, lat, lon):
        self.dob = dob
        self.tob = tob
        self.tz = tz
        self.lat = lat
        self.lon = lon

    def canonical_fields(self):
        """해시 순서대로 정규화된 문자열 리스트."""
        for name in ("dob", "tob", "tz"):
            if not isinstance(getattr(self, name), str):
                raise EncodingError(f"{name} must be a string")
        return [
            self.dob,
            self.tob,
            self.tz,
            canonical_number(self.lat),
            canonical_number(self.lon),
        ]

    def __repr__(self):
        # 출생 데이터는 로그/트레이스백에 남지 않게 한다
        return "BirthInput(<redacted>)"


class PublicPositions:
    """공개 천체 위치.

    속성:
        sun ... saturn, asc, mc: 센티도 정수
        algo_version: 위치 계산 알고리즘 버전 태그 (해시하지 않음)
        retro: 역행 여부 {천체: bool} (선택, 해시하지 않음)
    """

    def __init__(self, sun, moon, mercury, venus, mars, jupiter, saturn,
                 asc, mc, algo_version=DEFAULT_ALGO_VERSION, retro=None):
        self.sun = sun
        self.moon = moon
        self.mercury = mercury
        self.venus = venus
        self.mars = mars
        self.jupiter = jupiter
        self.saturn = saturn
        self.asc = asc
        self.mc = mc
        self.algo_version = algo_version
        self.retro = dict(retro) if retro else {}

        for name in POSITION_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise EncodingError(f"{name} must be an integer")

    @classmethod
    def from_planets(cls, planets, asc, mc, **kwargs):
        """{천체: 값} 매핑에서 생성한다. 매핑의 순서는 무시된다."""
        missing = [b for b in BODIES if b not in planets]
        if missing:
            raise EncodingError(f"missing bodies: {', '.join(missing)}")
        return cls(*(planets[b] for b in BODIES), asc=asc, mc=mc, **kwargs)

    @property
    def planets(self):
        return {b: getattr(self, b) for b in BODIES}

    def ordered_values(self):
        """챌린지 해시 순서: 7개 천체, asc, mc."""
        return [getattr(self, name) for name in POSITION_FIELDS]

    def canonical_fields(self):
        return [canonical_number(v) for v in self.ordered_values()]

    def replace(self, **changes):
        """일부 값을 바꾼 새 객체를 반환한다."""
        values = {name: getattr(self, name) for name in POSITION_FIELDS}
        values["algo_version"] = self.algo_version
        values["retro"] = self.retro
        values.update(changes)
        return PublicPositions(**values)

    def __eq__(self, other):
        if not isinstance(other, PublicPositions):
            return NotImplemented
        return (self.ordered_values() == other.ordered_values()
                and self.algo_version == other.algo_version
                and self.retro == other.retro)

    def __repr__(self):
        inner = ", ".join(f"{n}={getattr(self, n)}" for n in POSITION_FIELDS)
        return f"PublicPositions({inner}, algo_version={self.algo_version!r})"


class ProofArtifact:
    """클라이언트가 전송하는 증명 묶음 {commitment, proof, nonce} (모두 16진)."""

    def __init__(self, commitment, proof, nonce):
        self.commitment = commitment
        self.proof = proof
        self.nonce = nonce

    def to_dict(self):
        return {
            "commitment": self.commitment,
            "proof": self.proof,
            "nonce": self.nonce,
        }

    def __eq__(self, other):
        if not isinstance(other, ProofArtifact):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"ProofArtifact(commitment={self.commitment!r}, "
                f"proof={self.proof!r}, nonce={self.nonce!r})")
