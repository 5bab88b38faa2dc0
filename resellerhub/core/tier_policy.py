"""Commission rate selection.

Resellers earn a tiered percent based on paid revenue; sub-agents (CTV)
earn a flat percent regardless of volume.
"""
from dataclasses import dataclass, field
from typing import Tuple, Union

from resellerhub.core.config import SUB_AGENT_COMMISSION_PERCENT
from resellerhub.core.exceptions import ValidationError
from resellerhub.models.user import UserRole

# (lower bound inclusive, percent), highest bound first
DEFAULT_TIERS: Tuple[Tuple[int, int], ...] = (
    (50_000_000, 20),
    (20_000_000, 15),
    (0, 10),
)


@dataclass(frozen=True)
class TierPolicy:
    tiers: Tuple[Tuple[int, int], ...] = DEFAULT_TIERS

    def rate(self, cumulative_paid_revenue: int) -> int:
        if cumulative_paid_revenue < 0:
            raise ValidationError("Revenue cannot be negative")
        for lower_bound, percent in self.tiers:
            if cumulative_paid_revenue >= lower_bound:
                return percent
        # Unreachable with a zero lower tier, kept for custom tables
        return self.tiers[-1][1]


@dataclass(frozen=True)
class TieredRate:
    policy: TierPolicy = field(default_factory=TierPolicy)
    needs_revenue = True

    def percent(self, cumulative_paid_revenue: int = 0) -> int:
        return self.policy.rate(cumulative_paid_revenue)


@dataclass(frozen=True)
class FlatRate:
    value: int = SUB_AGENT_COMMISSION_PERCENT
    needs_revenue = False

    def percent(self, cumulative_paid_revenue: int = 0) -> int:
        return self.value


RatePolicy = Union[TieredRate, FlatRate]

_default_policy = TierPolicy()


def rate(cumulative_paid_revenue: int) -> int:
    return _default_policy.rate(cumulative_paid_revenue)


def rate_policy_for_role(role: str, *, tiered: bool = True) -> RatePolicy:
    """
    Pick the rate variant for a selling role.
    With tiered=False resellers fall back to the flat percent as well.
    """
    if role == UserRole.RESELLER.value:
        return TieredRate() if tiered else FlatRate()
    if role == UserRole.SUB_AGENT.value:
        return FlatRate()
    raise ValidationError(f"Role '{role}' does not earn commissions")
