"""Prompt templates and prompt construction for script generation."""

from __future__ import annotations

from models.data import Category, ScriptGenerationRequest, Tone

WORDS_PER_MINUTE = 150
TOKENS_PER_WORD = 1.3
MAX_TOKENS_CEILING = 8000
TOKEN_HEADROOM = 500


CATEGORY_DESCRIPTIONS: dict[Category, str] = {
    Category.TECH: "technology, digital trends, and innovations",
    Category.COMEDY: "humor, jokes, and entertaining stories",
    Category.NEWS: "current events, breaking stories, and analysis",
    Category.EDUCATION: "learning, teaching, and educational content",
    Category.BUSINESS: "entrepreneurship, finance, and professional development",
    Category.HEALTH: "wellness, fitness, mental health, and medical topics",
    Category.SCIENCE: "scientific discoveries, research, and explanations",
    Category.ARTS: "creative works, music, literature, and visual arts",
    Category.SPORTS: "athletic competitions, teams, players, and analysis",
    Category.ENTERTAINMENT: "movies, TV shows, celebrities, and pop culture",
    Category.HISTORY: "historical events, figures, and analysis of the past",
    Category.TRUE_CRIME: "real criminal cases, investigations, and legal proceedings",
    Category.FICTION: "storytelling, narrative fiction, and creative tales",
    Category.POLITICS: "political discourse, policy, and governmental affairs",
    Category.PHILOSOPHY: "philosophical concepts, ethics, and deep thinking",
    Category.SELF_IMPROVEMENT: "personal development, productivity, and growth",
    Category.INTERVIEW: "conversations with guests, Q&A format, and discussions",
}

TONE_DESCRIPTIONS: dict[Tone, str] = {
    Tone.CASUAL: "relaxed, informal, and conversational",
    Tone.PROFESSIONAL: "formal, authoritative, and polished",
    Tone.HUMOROUS: "funny, witty, and entertaining",
    Tone.SERIOUS: "solemn, earnest, and straightforward",
    Tone.EDUCATIONAL: "informative, instructive, and clear",
    Tone.INSPIRATIONAL: "motivating, uplifting, and encouraging",
    Tone.CONVERSATIONAL: "dialogue-heavy, natural, and engaging",
    Tone.DRAMATIC: "intense, emotional, and captivating",
    Tone.INVESTIGATIVE: "probing, analytical, and detailed",
}


SCRIPT_GENERATOR_SYSTEM = (
    "You are an expert podcast scriptwriter who creates engaging, natural-sounding scripts."
)

SCRIPT_GENERATOR_USER = """\
Create a complete podcast script {suggested_title} for {host_info}{guest_info}.

PODCAST DETAILS:
- Category: {category} ({category_description})
- Target length: {length_minutes} minutes
- Tone: {tone} ({tone_description})
- Target audience: {target_audience}
{context_line}
SCRIPT STRUCTURE:
{structure}

FORMAT YOUR RESPONSE AS FOLLOWS:
1. Title: [Podcast Title]
2. Summary: [Brief 1-2 sentence summary]
3. Full Script: [Complete script with speaker names clearly indicated]

The script should be detailed, engaging, and approximately {length_minutes} minutes long \
when read aloud (about {word_count} words)."""


def _join_names(names: list[str] | tuple[str, ...]) -> str:
    """'A', 'A and B', 'A, B and C'."""
    if len(names) == 1:
        return names[0]
    return f"{', '.join(names[:-1])} and {names[-1]}"


def describe_hosts(host_names: tuple[str, ...]) -> str:
    if len(host_names) == 1:
        return f"a host named {host_names[0]}"
    return f"hosts named {_join_names(host_names)}"


def describe_guests(guest_names: tuple[str, ...]) -> str:
    if not guest_names:
        return ""
    if len(guest_names) == 1:
        return f" and a guest named {guest_names[0]}"
    return f" and guests named {_join_names(guest_names)}"


def _format_minutes(minutes: float) -> str:
    return f"{minutes:g}"


def target_word_count(length_minutes: float) -> int:
    # round-half-up, matching how the token budget is rounded
    return int(length_minutes * WORDS_PER_MINUTE + 0.5)


def calculate_max_tokens(length_minutes: float) -> int:
    """Token budget for a script of the given length, capped at 8000."""
    return min(
        MAX_TOKENS_CEILING,
        int(length_minutes * WORDS_PER_MINUTE * TOKENS_PER_WORD + 0.5) + TOKEN_HEADROOM,
    )


def build_prompt(request: ScriptGenerationRequest) -> str:
    """Render the user prompt for a script request."""
    category_description = CATEGORY_DESCRIPTIONS[request.category]

    if request.title:
        suggested_title = f'titled "{request.title}"'
    else:
        suggested_title = f"about {category_description}"

    structure = [
        "- An engaging introduction that hooks the listener" if request.include_intro else "",
        "- Main content with clear speaker transitions",
        "- A brief mid-roll advertisement segment" if request.include_ads else "",
        "- A conclusion that summarizes key points and includes a call to action"
        if request.include_outro
        else "",
    ]

    context_line = (
        f"- Additional context: {request.additional_context}\n"
        if request.additional_context
        else ""
    )

    return SCRIPT_GENERATOR_USER.format(
        suggested_title=suggested_title,
        host_info=describe_hosts(request.host_names),
        guest_info=describe_guests(request.guest_names),
        category=request.category.value,
        category_description=category_description,
        length_minutes=_format_minutes(request.length_minutes),
        tone=request.tone.value,
        tone_description=TONE_DESCRIPTIONS[request.tone],
        target_audience=request.target_audience,
        context_line=context_line,
        structure="\n".join(line for line in structure if line),
        word_count=target_word_count(request.length_minutes),
    )
