"""
!first Ranking

Modules:
- rng: Reproduction of the bot's seeded generator
- opening: Daily opening-time reconstruction
- period: Period keywords for time filtering
- delta: Per-submission gap to the opening time
- engine: Day grouping and leaderboard ranking
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name == "rank":
        from firstrank.ranking.engine import rank
        return rank
    if name == "RankingConfig":
        from firstrank.ranking.engine import RankingConfig
        return RankingConfig
    if name == "opening_time":
        from firstrank.ranking.opening import opening_time
        return opening_time
    if name == "resolve_period":
        from firstrank.ranking.period import resolve_period
        return resolve_period
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
