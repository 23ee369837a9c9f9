"""
Symptom-based diabetes risk classifier.

Two scoring strategies share one interface:
- ``proportional``: score grows with the number of reported codes, tier by threshold.
- ``rule_based``: ordered symptom-combination rules (first match wins) pick the tier
  and a base score, then every vocabulary code adds a bonus that depends on its
  position in the input.

Codes are never rejected. Unknown codes never satisfy a rule and earn no bonus,
but they still count toward cardinality and shift the position of later codes.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Optional, Sequence, Tuple

import yaml

RULES_PATH = Path(__file__).parent.parent / "data" / "risk_rules.yaml"


def load_rules(path: Path = RULES_PATH) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


RULES = load_rules()

RECOMMENDATION_TEXT: str = RULES["recommendation_text"]


class RiskTier(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return _TIER_RANK[self.value]

    def __lt__(self, other):  # type: ignore[override]
        if isinstance(other, RiskTier):
            return self.rank < other.rank
        return NotImplemented

    def __le__(self, other):  # type: ignore[override]
        if isinstance(other, RiskTier):
            return self.rank <= other.rank
        return NotImplemented

    def __gt__(self, other):  # type: ignore[override]
        if isinstance(other, RiskTier):
            return self.rank > other.rank
        return NotImplemented

    def __ge__(self, other):  # type: ignore[override]
        if isinstance(other, RiskTier):
            return self.rank >= other.rank
        return NotImplemented


_TIER_RANK = {"Low": 0, "Medium": 1, "High": 2}


@dataclass(frozen=True)
class DiagnosisResult:
    risk_tier: RiskTier
    score: float
    matched_rule: Optional[str]
    recommendation_text: str
    symptoms: Tuple[str, ...]


@dataclass(frozen=True)
class TierRule:
    id: str
    requires: FrozenSet[str]
    tier: RiskTier
    score: int

    def matches(self, observed: FrozenSet[str]) -> bool:
        return self.requires <= observed


class ScoringStrategy:
    """Maps an ordered tuple of codes to ``(tier, score, matched_rule)``."""

    name = ""

    def evaluate(self, codes: Tuple[str, ...]) -> Tuple[RiskTier, float, Optional[str]]:
        raise NotImplementedError

    def describe(self) -> Dict[str, Any]:
        return {"strategy": self.name}


class ProportionalStrategy(ScoringStrategy):
    name = "proportional"

    def __init__(self, max_symptoms: int = 5, high_above: float = 70, medium_above: float = 40):
        self.max_symptoms = max_symptoms
        self.high_above = high_above
        self.medium_above = medium_above

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ProportionalStrategy":
        return cls(
            max_symptoms=int(config["max_symptoms"]),
            high_above=float(config["high_above"]),
            medium_above=float(config["medium_above"]),
        )

    def evaluate(self, codes: Tuple[str, ...]) -> Tuple[RiskTier, float, Optional[str]]:
        # Duplicates count: the score follows the raw number of reported codes
        score = len(codes) * 100 / self.max_symptoms
        if score > self.high_above:
            return RiskTier.HIGH, score, None
        if score > self.medium_above:
            return RiskTier.MEDIUM, score, None
        return RiskTier.LOW, score, None

    def describe(self) -> Dict[str, Any]:
        return {
            "strategy": self.name,
            "max_symptoms": self.max_symptoms,
            "high_above": self.high_above,
            "medium_above": self.medium_above,
        }


class RuleBasedStrategy(ScoringStrategy):
    name = "rule_based"

    def __init__(
        self,
        rules: Sequence[TierRule],
        fallback_tier: RiskTier = RiskTier.LOW,
        fallback_score: int = 40,
        position_bonus: int = 5,
        vocabulary: Optional[Iterable[str]] = None,
    ):
        self.rules = tuple(rules)
        self.fallback_tier = fallback_tier
        self.fallback_score = fallback_score
        self.position_bonus = position_bonus
        # None: every code earns its positional bonus
        self.vocabulary = frozenset(vocabulary) if vocabulary is not None else None

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "RuleBasedStrategy":
        rules = [
            TierRule(
                id=str(r["id"]),
                requires=frozenset(str(c) for c in r["requires"]),
                tier=RiskTier(r["tier"]),
                score=int(r["score"]),
            )
            for r in config["rules"]
        ]
        fallback = config["fallback"]
        return cls(
            rules,
            fallback_tier=RiskTier(fallback["tier"]),
            fallback_score=int(fallback["score"]),
            position_bonus=int(config["position_bonus"]),
            vocabulary=[str(c) for c in config["vocabulary"]] if "vocabulary" in config else None,
        )

    def match(self, codes: Iterable[str]) -> Optional[TierRule]:
        observed = frozenset(codes)
        for rule in self.rules:
            if rule.matches(observed):
                return rule
        return None

    def evaluate(self, codes: Tuple[str, ...]) -> Tuple[RiskTier, float, Optional[str]]:
        rule = self.match(codes)
        if rule is None:
            tier, base, rule_id = self.fallback_tier, self.fallback_score, None
        else:
            tier, base, rule_id = rule.tier, rule.score, rule.id

        bonus = sum(
            (i + 1) * self.position_bonus
            for i, code in enumerate(codes)
            if self.vocabulary is None or code in self.vocabulary
        )
        # Tier comes from the rule alone; the bonus never promotes it
        return tier, float(base + bonus), rule_id

    def describe(self) -> Dict[str, Any]:
        return {
            "strategy": self.name,
            "position_bonus": self.position_bonus,
            "vocabulary": sorted(self.vocabulary) if self.vocabulary is not None else None,
            "fallback": {"tier": self.fallback_tier.value, "score": self.fallback_score},
            "rules": [
                {
                    "id": r.id,
                    "requires": sorted(r.requires),
                    "tier": r.tier.value,
                    "score": r.score,
                }
                for r in self.rules
            ],
        }


STRATEGIES = {
    ProportionalStrategy.name: lambda: ProportionalStrategy.from_config(RULES["proportional"]),
    RuleBasedStrategy.name: lambda: RuleBasedStrategy.from_config(RULES["rule_based"]),
}


class RiskClassifier:
    """Stateless wrapper that turns a strategy outcome into a ``DiagnosisResult``.

    Callers pass an already-normalized sequence of codes; the HTTP layer maps
    absent or malformed input to an empty list before calling ``classify``.
    """

    def __init__(self, strategy: Optional[ScoringStrategy] = None, recommendation_text: str = RECOMMENDATION_TEXT):
        self.strategy = strategy or STRATEGIES[RuleBasedStrategy.name]()
        self.recommendation_text = recommendation_text

    @property
    def strategy_name(self) -> str:
        return self.strategy.name

    def classify(self, symptom_codes: Iterable[str]) -> DiagnosisResult:
        codes = tuple(str(c) for c in symptom_codes)
        tier, score, matched_rule = self.strategy.evaluate(codes)
        return DiagnosisResult(
            risk_tier=tier,
            score=score,
            matched_rule=matched_rule,
            recommendation_text=self.recommendation_text,
            symptoms=codes,
        )


def build_classifier(strategy_name: str) -> RiskClassifier:
    key = (strategy_name or "").strip().lower().replace("-", "_")
    factory = STRATEGIES.get(key)
    if factory is None:
        raise ValueError(
            f"Unknown scoring strategy '{strategy_name}'; expected one of {sorted(STRATEGIES)}"
        )
    return RiskClassifier(factory())


__all__ = [
    "RiskTier",
    "DiagnosisResult",
    "TierRule",
    "ScoringStrategy",
    "ProportionalStrategy",
    "RuleBasedStrategy",
    "RiskClassifier",
    "build_classifier",
    "load_rules",
    "RULES",
]
