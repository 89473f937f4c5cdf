"""Post scoring for the ranking engine.

Everything here is a pure function of a post's current state and the time
of the pass, so recomputing never accumulates anything from earlier runs.
"""

import math
from datetime import datetime
from typing import Optional, Sequence
from urllib.parse import urlparse

from tally.config import RankingSettings
from tally.domain.model import Post, RankUpdate
from tally.domain.value import PostId

MAX_COMPONENT = 100


def vote_component(score: int) -> int:
    """Scale a net vote score onto [-100, 100].

    Logarithmic so a handful of early votes matter and a pile-on does not
    dominate everything else.
    """
    magnitude = min(MAX_COMPONENT, round(math.log10(1 + abs(score)) * 20))
    return magnitude if score >= 0 else -magnitude


def comment_component(comment_count: int) -> int:
    """Scale a comment count onto [0, 100]."""
    return min(MAX_COMPONENT, round(math.log10(1 + max(0, comment_count)) * 25))


def link_domain(link: Optional[str]) -> Optional[str]:
    """Hostname of a post link, or None when missing or unparsable."""
    if not link:
        return None
    try:
        hostname = urlparse(link).hostname
    except ValueError:
        return None
    return hostname or None


def diversity_scores(posts: Sequence[Post]) -> dict[PostId, int]:
    """Assign domain diversity to a pool of posts.

    Posts must be ordered best first. The first post seen from each domain
    gets 100, later posts from the same domain get 0. Posts without a
    usable link count as their own domain.

    Args:
        posts: Candidate pool, ordered by net score DESC

    Returns:
        Mapping of post ID to diversity score
    """
    seen: set[str] = set()
    scores: dict[PostId, int] = {}
    for post in posts:
        domain = link_domain(post.link)
        if domain is None:
            scores[post.id] = MAX_COMPONENT
        elif domain in seen:
            scores[post.id] = 0
        else:
            seen.add(domain)
            scores[post.id] = MAX_COMPONENT
    return scores


class PostScorer:
    """Computes the decayed time score and final rank of a post."""

    def __init__(self, settings: RankingSettings) -> None:
        self.settings = settings

    def time_decay_score(self, created_at: datetime, now: datetime) -> int:
        """Time component, decaying from the seed to the floor over the horizon.

        Always derived from the seed, never from the stored time score.
        """
        age_hours = max(0.0, (now - created_at).total_seconds() / 3600)
        if age_hours >= self.settings.decay_horizon_hours:
            return self.settings.time_score_floor

        decayed = self.settings.time_score_seed * math.exp(
            -self.settings.decay_rate * age_hours
        )
        return max(
            self.settings.time_score_floor,
            min(self.settings.time_score_seed, round(decayed)),
        )

    def rank_post(
        self, post: Post, now: datetime, diversity: Optional[int] = None
    ) -> RankUpdate:
        """Rank a post.

        The rank is the weighted mean of the signals the post carries.
        Votes, time and comments are always present; quality signals and
        diversity only count when set.

        Args:
            post: Post to rank
            now: Time of the ranking pass
            diversity: Domain diversity score, if the post was in the pool

        Returns:
            New time score and rank for the post
        """
        weights = self.settings.weights
        time_score = self.time_decay_score(post.created_at, now)

        components: list[tuple[float, float]] = [
            (weights.votes, vote_component(post.score)),
            (weights.time, time_score),
            (weights.comments, comment_component(post.comment_count)),
        ]

        optional_signals = [
            (weights.relevancy, post.relevancy_score),
            (weights.quality, post.quality_score),
            (weights.sensation, post.sensation_score),
            (weights.safety, post.safety_score),
            (weights.spelling, post.spelling_score),
            # Lower spam is better
            (
                weights.spam,
                MAX_COMPONENT - post.spam_score if post.spam_score is not None else None,
            ),
            (weights.diversity, diversity),
        ]
        components.extend(
            (weight, value) for weight, value in optional_signals if value is not None
        )

        total_weight = sum(weight for weight, _ in components)
        if total_weight <= 0:
            rank = 0.0
        else:
            rank = sum(weight * value for weight, value in components) / total_weight

        rank = round(max(0.0, min(float(MAX_COMPONENT), rank)), 4)
        return RankUpdate(post_id=post.id, time_score=time_score, rank=rank)
