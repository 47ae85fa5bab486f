"""Opportunity matching - turns category decisions into catalog matches with an estimated amount"""

import math
from typing import Collection, Iterable, List, Mapping, Optional

from rimborsami_engine.domain.categories import Category, parse_category
from rimborsami_engine.domain.models import CategoryScore, MatchedOpportunity, OpportunityDefinition
from rimborsami_engine.domain.rules import DEFAULT_AMOUNT_RULES, MATCH_REASONS, AmountRule


def midpoint_amount(opportunity: OpportunityDefinition) -> int:
    """floor((min + max) / 2); missing bounds count as zero"""
    low = opportunity.min_amount or 0
    high = opportunity.max_amount or 0
    return math.floor((low + high) / 2)


def estimate_amount(
    opportunity: OpportunityDefinition,
    score: CategoryScore,
    amount_rules: Mapping[Category, AmountRule] = DEFAULT_AMOUNT_RULES,
) -> int:
    """Category-specific literal amount when a rule yields one, else the catalog midpoint"""
    rule = amount_rules.get(score.category)
    if rule is not None:
        amount = rule(score.evidence)
        if amount is not None:
            return amount
    return midpoint_amount(opportunity)


def match_opportunities(
    category_scores: Mapping[Category, CategoryScore],
    catalog: Iterable[OpportunityDefinition],
    amount_rules: Mapping[Category, AmountRule] = DEFAULT_AMOUNT_RULES,
    exclude_ids: Optional[Collection[str]] = None,
) -> List[MatchedOpportunity]:
    """
    Match every active catalog entry whose category applies.

    Requirements:
    - Catalog order is preserved
    - Several entries of the same category all match, no dedup or ranking
    - Inactive entries, unknown categories and ids in exclude_ids never match
    - An empty catalog or no applicable category gives an empty list
    """
    excluded = set(exclude_ids or ())
    matches = []

    for opportunity in catalog:
        if not opportunity.active or opportunity.id in excluded:
            continue

        category = parse_category(opportunity.category)
        score = category_scores.get(category)
        if score is None or not score.applies:
            continue

        matches.append(
            MatchedOpportunity(
                opportunity_id=opportunity.id,
                category=category,
                estimated_amount=estimate_amount(opportunity, score, amount_rules),
                match_reason=MATCH_REASONS.get(category, ""),
            )
        )

    return matches


def estimated_total(matches: Iterable[MatchedOpportunity]) -> int:
    return sum(match.estimated_amount for match in matches)
