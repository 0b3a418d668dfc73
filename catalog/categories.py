"""Static catalog data: browse categories, content ratings, default playlists."""

from __future__ import annotations

from dataclasses import dataclass, field

from models.catalog import ContentRating
from models.data import Category


@dataclass(frozen=True)
class Subcategory:
    id: str
    name: str


@dataclass(frozen=True)
class CategoryInfo:
    id: Category
    name: str
    description: str
    icon_name: str
    color: str
    subcategories: list[Subcategory] = field(default_factory=list)


def _subs(*pairs: tuple[str, str]) -> list[Subcategory]:
    return [Subcategory(id=i, name=n) for i, n in pairs]


PODCAST_CATEGORIES: list[CategoryInfo] = [
    CategoryInfo(
        Category.TECH, "Technology",
        "Podcasts about technology, digital trends, and innovations",
        "computer", "#2196F3",
        _subs(("ai", "Artificial Intelligence"), ("programming", "Programming"),
              ("gadgets", "Gadgets & Hardware"), ("startups", "Startups & Entrepreneurship"),
              ("future", "Future Tech")),
    ),
    CategoryInfo(
        Category.COMEDY, "Comedy",
        "Funny and entertaining podcasts to brighten your day",
        "sentiment_very_satisfied", "#FF9800",
        _subs(("standup", "Stand-up Comedy"), ("improv", "Improv & Sketches"),
              ("satire", "Satire & Parody"), ("panel", "Comedy Panels"),
              ("storytelling", "Comedic Storytelling")),
    ),
    CategoryInfo(
        Category.NEWS, "News & Politics",
        "Stay informed with the latest news and political analysis",
        "public", "#F44336",
        _subs(("daily", "Daily News"), ("politics", "Politics"), ("global", "Global Affairs"),
              ("business_news", "Business News"), ("analysis", "In-depth Analysis")),
    ),
    CategoryInfo(
        Category.EDUCATION, "Education",
        "Learn something new with educational podcasts",
        "school", "#4CAF50",
        _subs(("language", "Language Learning"), ("science_ed", "Science Education"),
              ("history_ed", "History Lessons"), ("how_to", "How-To & Tutorials"),
              ("academic", "Academic Topics")),
    ),
    CategoryInfo(
        Category.BUSINESS, "Business",
        "Insights on business, finance, and professional growth",
        "business_center", "#795548",
        _subs(("entrepreneurship", "Entrepreneurship"), ("marketing", "Marketing"),
              ("finance", "Finance & Investing"), ("careers", "Careers & Leadership"),
              ("interviews", "Business Interviews")),
    ),
    CategoryInfo(
        Category.HEALTH, "Health & Wellness",
        "Podcasts about physical and mental wellbeing",
        "favorite", "#E91E63",
        _subs(("fitness", "Fitness & Exercise"), ("nutrition", "Nutrition & Diet"),
              ("mental_health", "Mental Health"), ("meditation", "Meditation & Mindfulness"),
              ("medical", "Medical Topics")),
    ),
    CategoryInfo(
        Category.SCIENCE, "Science",
        "Explore the wonders of science and discovery",
        "science", "#9C27B0",
        _subs(("physics", "Physics & Astronomy"), ("biology", "Biology & Nature"),
              ("psychology", "Psychology"), ("environment", "Environment & Climate"),
              ("research", "Latest Research")),
    ),
    CategoryInfo(
        Category.ARTS, "Arts & Culture",
        "Celebrate creativity, arts, and cultural topics",
        "palette", "#3F51B5",
        _subs(("music", "Music & Musicians"), ("film", "Film & Cinema"),
              ("literature", "Books & Literature"), ("visual_arts", "Visual Arts"),
              ("performing_arts", "Performing Arts")),
    ),
    CategoryInfo(
        Category.SPORTS, "Sports",
        "Coverage of sports, athletics, and competitive events",
        "sports_basketball", "#FF5722",
        _subs(("football", "Football"), ("basketball", "Basketball"), ("baseball", "Baseball"),
              ("soccer", "Soccer"), ("other_sports", "Other Sports")),
    ),
    CategoryInfo(
        Category.TRUE_CRIME, "True Crime",
        "Real crime stories, investigations, and mysteries",
        "gavel", "#607D8B",
        _subs(("investigations", "Investigations"), ("mysteries", "Unsolved Mysteries"),
              ("criminal_justice", "Criminal Justice"), ("historical_crimes", "Historical Crimes"),
              ("forensics", "Forensic Analysis")),
    ),
    CategoryInfo(
        Category.FICTION, "Fiction & Storytelling",
        "Immersive fictional stories and narrative podcasts",
        "auto_stories", "#009688",
        _subs(("drama", "Drama"), ("scifi", "Science Fiction"), ("fantasy", "Fantasy"),
              ("horror", "Horror"), ("audio_drama", "Audio Drama")),
    ),
    CategoryInfo(
        Category.SELF_IMPROVEMENT, "Self Improvement",
        "Personal development, productivity, and growth",
        "psychology", "#00BCD4",
        _subs(("productivity", "Productivity"), ("motivation", "Motivation"),
              ("habits", "Habits & Routines"), ("mindset", "Mindset"),
              ("life_skills", "Life Skills")),
    ),
]


CONTENT_RATING_DESCRIPTIONS: dict[ContentRating, str] = {
    ContentRating.G: "Suitable for all audiences, contains no objectionable material",
    ContentRating.PG: "Parental guidance suggested, may contain mild language or themes",
    ContentRating.PG_13: "May be inappropriate for children under 13, contains moderate language or themes",
    ContentRating.R: "Contains adult themes, strong language, or intense situations",
    ContentRating.NC_17: "Adults only, contains explicit content not suitable for minors",
}


@dataclass(frozen=True)
class PlaylistTemplate:
    name: str
    description: str
    tags: tuple[str, ...]


DEFAULT_MOOD_PLAYLISTS: list[PlaylistTemplate] = [
    PlaylistTemplate(
        "Motivational Morning",
        "Start your day with inspiring and motivational podcasts",
        ("morning", "motivation", "inspiration"),
    ),
    PlaylistTemplate(
        "Learn Something New",
        "Expand your knowledge with these educational podcasts",
        ("educational", "learning", "informative"),
    ),
    PlaylistTemplate(
        "Laugh Out Loud",
        "Brighten your day with these hilarious comedy podcasts",
        ("comedy", "humor", "entertainment"),
    ),
    PlaylistTemplate(
        "Deep Thinking",
        "Thought-provoking podcasts to stimulate your mind",
        ("philosophy", "analysis", "thought-provoking"),
    ),
    PlaylistTemplate(
        "Relax & Unwind",
        "Calming podcasts to help you relax and de-stress",
        ("relaxing", "mindfulness", "calm"),
    ),
]


# (playlist name, dominant mood, description) for mood playlist generation
MOOD_PLAYLIST_SPECS: list[tuple[str, str, str]] = [
    ("Motivational Morning", "inspirational", "Start your day with inspiring and motivational podcasts"),
    ("Learn Something New", "educational", "Expand your knowledge with these educational podcasts"),
    ("Laugh Out Loud", "entertaining", "Brighten your day with these hilarious comedy podcasts"),
    ("Deep Thinking", "informative", "Thought-provoking podcasts to stimulate your mind"),
]


def get_category_by_id(category_id: Category | str) -> CategoryInfo | None:
    category = Category(category_id)
    return next((info for info in PODCAST_CATEGORIES if info.id == category), None)


def get_all_categories() -> list[CategoryInfo]:
    return PODCAST_CATEGORIES


def get_content_rating_description(rating: ContentRating | str) -> str:
    return CONTENT_RATING_DESCRIPTIONS.get(ContentRating(rating), "")


def get_all_content_ratings() -> list[dict[str, str]]:
    return [{"id": r.value, "description": d} for r, d in CONTENT_RATING_DESCRIPTIONS.items()]
