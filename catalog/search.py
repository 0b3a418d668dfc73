"""Catalog search, recommendations, trending and content-based filtering."""

from __future__ import annotations

from datetime import datetime, timedelta

from models.catalog import ContentFilter, ContentRating, Podcast, SearchOptions
from models.data import as_utc, utcnow
from utils.helpers import get_logger

log = get_logger(__name__)

TRENDING_WEIGHTS = {"plays": 1, "likes": 3, "shares": 5}


def _within_rating_ceiling(podcast: Podcast, allowed: list[ContentRating]) -> bool:
    ceiling = max(ContentRating(r).ordinal for r in allowed)
    return podcast.metadata.content_rating.ordinal <= ceiling


def _epoch_ms(moment: datetime) -> float:
    return moment.timestamp() * 1000


def relevance_score(podcast: Podcast) -> float:
    """0.7 × creation time (epoch ms) + 0.3 × plays.

    The raw timestamp dominates, so plays only break near-ties between
    podcasts created at almost the same moment.
    """
    return _epoch_ms(podcast.created_at) * 0.7 + podcast.stats.plays * 0.3


def _matches_search(podcast: Podcast, options: SearchOptions) -> bool:
    meta = podcast.metadata

    if not options.include_private and podcast.is_private:
        return False

    # podcasts carry no owner id; the first speaker stands in for the creator
    if options.creator_id and (not meta.speakers or meta.speakers[0] != options.creator_id):
        return False

    if options.query:
        haystack = f"{podcast.title} {podcast.description} {' '.join(podcast.tags)}".lower()
        if not all(term in haystack for term in options.query.lower().split()):
            return False

    if options.categories and meta.category not in options.categories:
        return False

    if options.tones and meta.tone not in options.tones:
        return False

    if options.content_ratings and not _within_rating_ceiling(podcast, options.content_ratings):
        return False

    if options.min_duration is not None and podcast.duration < options.min_duration:
        return False
    if options.max_duration is not None and podcast.duration > options.max_duration:
        return False

    if options.start_date is not None and podcast.created_at < options.start_date:
        return False
    if options.end_date is not None and podcast.created_at > options.end_date:
        return False

    if options.tags and not any(tag in podcast.tags for tag in options.tags):
        return False

    return True


def search_podcasts(podcasts: list[Podcast], options: SearchOptions | None = None) -> list[Podcast]:
    """Filter, sort and paginate ``podcasts``.

    Sort modes: ``date`` newest first, ``popularity`` most plays first,
    ``duration`` shortest first, ``relevance`` by relevance_score.
    """
    options = options or SearchOptions()
    results = [p for p in podcasts if _matches_search(p, options)]

    if options.sort_by == "date":
        results.sort(key=lambda p: p.created_at, reverse=True)
    elif options.sort_by == "popularity":
        results.sort(key=lambda p: p.stats.plays, reverse=True)
    elif options.sort_by == "duration":
        results.sort(key=lambda p: p.duration)
    else:
        results.sort(key=relevance_score, reverse=True)

    page = results[options.offset:options.offset + options.limit]
    log.debug("Search %r matched %d, returning %d", options.query, len(results), len(page))
    return page


def similarity_score(candidate: Podcast, reference: Podcast) -> float:
    ref_meta, meta = reference.metadata, candidate.metadata
    score = 0.0

    if meta.category == ref_meta.category:
        score += 5
    score += sum(1 for sub in meta.subcategories if sub in ref_meta.subcategories)
    if meta.tone == ref_meta.tone:
        score += 3
    score += 0.5 * sum(1 for tag in candidate.tags if tag in reference.tags)

    analysis, ref_analysis = meta.content_analysis, ref_meta.content_analysis
    if analysis and ref_analysis:
        if analysis.mood.overall == ref_analysis.mood.overall:
            score += 2
        if analysis.sentiment.overall == ref_analysis.sentiment.overall:
            score += 1
        if analysis.complexity.vocabulary_level == ref_analysis.complexity.vocabulary_level:
            score += 1
        ref_topics = {t.name for t in ref_analysis.topics}
        score += 0.5 * sum(1 for t in analysis.topics if t.name in ref_topics)

    return score


def get_recommended_podcasts(
    reference: Podcast,
    podcasts: list[Podcast],
    limit: int = 5,
) -> list[Podcast]:
    """Podcasts most similar to ``reference``, best first; ties keep input order."""
    scored = [
        (similarity_score(p, reference), p) for p in podcasts if p.id != reference.id
    ]
    scored.sort(key=lambda item: item[0], reverse=True)
    return [p for _, p in scored[:limit]]


def trending_score(podcast: Podcast) -> float:
    stats = podcast.stats
    return (
        stats.plays * TRENDING_WEIGHTS["plays"]
        + stats.likes * TRENDING_WEIGHTS["likes"]
        + stats.shares * TRENDING_WEIGHTS["shares"]
    )


def get_trending_podcasts(
    podcasts: list[Podcast],
    limit: int = 10,
    time_window_days: float = 7,
    now: datetime | None = None,
) -> list[Podcast]:
    """Most engaged podcasts among those played within the window."""
    now = as_utc(now) if now else utcnow()
    window = timedelta(days=time_window_days)

    recent = [
        p for p in podcasts
        if p.stats.last_played is not None and now - p.stats.last_played <= window
    ]
    recent.sort(key=trending_score, reverse=True)
    return recent[:limit]


def filter_podcasts_by_content(podcasts: list[Podcast], criteria: ContentFilter) -> list[Podcast]:
    """Keep podcasts matching every populated criterion.

    Mood, readability and sentiment criteria only apply to podcasts
    that have a content analysis.
    """

    def keep(podcast: Podcast) -> bool:
        meta = podcast.metadata
        analysis = meta.content_analysis

        if criteria.content_ratings and not _within_rating_ceiling(podcast, criteria.content_ratings):
            return False
        if criteria.categories and meta.category not in criteria.categories:
            return False
        if criteria.moods and analysis and analysis.mood.overall not in criteria.moods:
            return False
        if criteria.target_audience and not any(
            a in meta.target_audience for a in criteria.target_audience
        ):
            return False
        if analysis:
            readability = analysis.complexity.readability_score
            if criteria.min_readability is not None and readability < criteria.min_readability:
                return False
            if criteria.max_readability is not None and readability > criteria.max_readability:
                return False
        if criteria.sentiments and analysis and analysis.sentiment.overall not in criteria.sentiments:
            return False
        return True

    return [p for p in podcasts if keep(p)]
