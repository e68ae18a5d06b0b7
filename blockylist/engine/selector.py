"""Track selection policies.

Both policies are pure functions of their inputs and of the random source
passed in, so a seeded random.Random gives reproducible selections.

  - select_range_random(): songs blocks. Draw a count in the block's range,
    shuffle the source tracks, take that many.
  - select_tiered(): recommended blocks. Rank the pool by a jittered score,
    split the ranking into low/mid/high tiers and sample each tier, so the
    output mixes score bands instead of always taking the top of the ranking.
"""

from dataclasses import dataclass
import math
import random
from typing import Iterable, List, Sequence, Tuple

from blockylist.core import CandidateTrack, SongRange

# score = weight*30 + popularity*0.7 + U(0, 20)
SCORE_WEIGHT_FACTOR = 30
SCORE_POPULARITY_FACTOR = 0.7
SCORE_JITTER = 20

# Tier boundaries, as fractions of the ranked pool
LOW_TIER_END = 0.4
MID_TIER_END = 0.7

# Share of the output taken from the low and mid tiers; high gets the rest
LOW_TIER_SHARE = 0.3
MID_TIER_SHARE = 0.4


@dataclass(frozen=True)
class TierCounts:
    low: int
    mid: int
    high: int

    @property
    def total(self) -> int:
        return self.low + self.mid + self.high


def draw_count(song_range: SongRange, rng: random.Random) -> int:
    """Uniform integer in [min, max], both inclusive."""
    return rng.randint(song_range.min, song_range.max)


def select_range_random(
    uris: Iterable[str],
    song_range: SongRange,
    rng: random.Random,
) -> List[str]:
    """
    Pick between song_range.min and song_range.max distinct URIs at random.

    Duplicate URIs in the input (a playlist may hold a track twice) count once.
    Fewer URIs than the drawn count means all of them are returned, shuffled.
    """
    candidates = list(dict.fromkeys(uris))
    count = draw_count(song_range, rng)
    rng.shuffle(candidates)
    return candidates[: min(count, len(candidates))]


def score_candidate(candidate: CandidateTrack, rng: random.Random) -> float:
    return (
        candidate.weight * SCORE_WEIGHT_FACTOR
        + candidate.popularity * SCORE_POPULARITY_FACTOR
        + rng.uniform(0, SCORE_JITTER)
    )


def rank_candidates(
    candidates: Iterable[CandidateTrack],
    rng: random.Random,
) -> List[CandidateTrack]:
    """Sort candidates by descending score; each score is drawn exactly once."""
    scored = [(score_candidate(c, rng), c) for c in candidates]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [c for _, c in scored]


def allocate_tiers(n: int) -> TierCounts:
    low = math.floor(n * LOW_TIER_SHARE)
    mid = math.floor(n * MID_TIER_SHARE)
    return TierCounts(low=low, mid=mid, high=n - low - mid)


def split_tiers(
    ranked: Sequence[CandidateTrack],
) -> Tuple[List[CandidateTrack], List[CandidateTrack], List[CandidateTrack]]:
    """Cut the ranked pool by position into [0, 40%), [40%, 70%), [70%, 100%]."""
    size = len(ranked)
    low_end = math.floor(size * LOW_TIER_END)
    mid_end = math.floor(size * MID_TIER_END)
    return list(ranked[:low_end]), list(ranked[low_end:mid_end]), list(ranked[mid_end:])


def select_tiered(
    candidates: Iterable[CandidateTrack],
    song_range: SongRange,
    rng: random.Random,
) -> List[str]:
    """
    Tiered weighted sampling over a recommendation pool.

    The output holds exactly min(drawn count, pool size) URIs. Small pools can
    leave a tier shorter than its allocation; the gap is filled with the
    best-ranked candidates not picked yet.
    """
    ranked = rank_candidates(candidates, rng)
    if not ranked:
        return []

    n = min(draw_count(song_range, rng), len(ranked))
    counts = allocate_tiers(n)

    selected: List[CandidateTrack] = []
    for tier, wanted in zip(split_tiers(ranked), (counts.low, counts.mid, counts.high)):
        rng.shuffle(tier)
        selected.extend(tier[:wanted])

    if len(selected) < n:
        chosen = {c.uri for c in selected}
        leftovers = [c for c in ranked if c.uri not in chosen]
        selected.extend(leftovers[: n - len(selected)])

    uris = [c.uri for c in selected]
    rng.shuffle(uris)
    return uris
