"""Rating prompt generation for extracted articles.

Turns an ArticleContent (or ``None`` when extraction failed) into a prompt
asking a language model to score the article on five axes and save the
result with the ``createArticleRating`` tool.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from content_rater.services.extractors.base import ArticleContent

# Maximum article characters embedded in a prompt
PROMPT_CONTENT_LIMIT = 2000
TRUNCATION_MARKER = "..."
NOT_AVAILABLE = "N/A"
RATING_TOOL_NAME = "createArticleRating"

EVALUATION_AXES: dict[str, str] = {
    "practicalValue": """
Practical value (1-10):
How much of this article can be applied directly in day-to-day work or development?

Scoring guide:
- 9-10: Immediately applicable, with concrete implementation examples
- 7-8: Applicable with small adjustments, a useful reference
- 5-6: Useful in theory, but applying it takes effort
- 3-4: Good background knowledge, hard to apply directly
- 1-2: Little practical value, theory only

Consider:
- Presence of concrete examples or code samples
- Clarity of implementation steps
- Realistic usage scenarios
""",
    "technicalDepth": """
Technical depth (1-10):
How deep and specialized is the technical content of this article?

Scoring guide:
- 9-10: Advanced expertise, detailed technical explanation
- 7-8: Intermediate level, reasonable technical detail
- 5-6: Basic technical content, overview level
- 3-4: Introductory, surface-level explanation
- 1-2: Thin technical content, generalities only

Consider:
- Richness of technical detail
- Appropriate use of terminology
- Explanation of underlying theory
- Complexity of the implementation
""",
    "understanding": """
Understanding (1-10):
How easy is this article for you to understand?

Scoring guide:
- 9-10: Very clear, understood without effort
- 7-8: Easy to follow, some inference needed
- 5-6: Average, some parts are difficult
- 3-4: Somewhat hard, requires specialist knowledge
- 1-2: Hard to understand, missing background

Consider:
- Logical structure of the explanation
- Clarity of examples
- Required prior knowledge
- Readability of the prose
""",
    "novelty": """
Novelty (1-10):
How much new insight or learning does this article bring you?

Scoring guide:
- 9-10: Entirely new material, a major discovery
- 7-8: New perspectives or details, worthwhile learning
- 5-6: Partly new, partly review
- 3-4: Mostly known, a little learning
- 1-2: Already known, nothing new

Consider:
- Difference from what you already know
- Introduction of new techniques or methods
- Original viewpoints or analysis
- Up-to-date information
""",
    "importance": """
Importance (1-10):
How important is this article for your current interests and priorities?

Scoring guide:
- 9-10: Very important, want to use it right away
- 7-8: Important, will refer to it soon
- 5-6: Moderately important, use when the chance comes
- 3-4: Some interest, read if time allows
- 1-2: Outside current interests

Consider:
- Relevance to current work or projects
- Fit with short and mid-term learning goals
- Contribution to career growth
- Match with personal interests
""",
}

AXIS_SUMMARIES: dict[str, str] = {
    "practicalValue": "how much can be applied in real work or implementation",
    "technicalDepth": "depth and specialization of the technical content",
    "understanding": "how easy the article is for you to understand",
    "novelty": "how new the material is to you",
    "importance": "fit with your current interests and priorities",
}

OUTPUT_FORMAT_EXAMPLE = """```json
{
  "practicalValue": {
    "score": 8,
    "reason": "Concrete code examples that can be used in a real project"
  },
  "technicalDepth": {
    "score": 7,
    "reason": "Reasonable technical detail for intermediate readers"
  },
  "understanding": {
    "score": 9,
    "reason": "Well structured with plenty of diagrams"
  },
  "novelty": {
    "score": 6,
    "reason": "Partly familiar, but introduces a new implementation pattern"
  },
  "importance": {
    "score": 8,
    "reason": "Directly related to the stack used in the current project"
  },
  "comment": "Summarize what you learned and your impressions in about 200 characters"
}
```"""

FALLBACK_OUTPUT_FORMAT = """```json
{
  "practicalValue": { "score": X, "reason": "..." },
  "technicalDepth": { "score": X, "reason": "..." },
  "understanding": { "score": X, "reason": "..." },
  "novelty": { "score": X, "reason": "..." },
  "importance": { "score": X, "reason": "..." },
  "comment": "Summarize what you learned and your impressions in about 200 characters"
}
```"""


def _or_na(value: object) -> str:
    if value is None or value == "":
        return NOT_AVAILABLE
    return str(value)


def content_preview(text: str, limit: int = PROMPT_CONTENT_LIMIT) -> str:
    """First ``limit`` characters of ``text``, with a marker when cut."""
    if len(text) > limit:
        return f"{text[:limit]}{TRUNCATION_MARKER}"
    return text


def generate_rating_prompt(article: ArticleContent | None, url: str) -> str:
    """Build the evaluation prompt for an article.

    Args:
        article: Extraction result, or ``None`` when extraction failed
        url: Original article URL

    Returns:
        Prompt text. Never raises.
    """
    if article is None:
        return generate_fallback_prompt(url)

    metadata = article.metadata
    reading_time = (
        f"{metadata.reading_time} min" if metadata.reading_time is not None else NOT_AVAILABLE
    )

    info_lines = [
        f"- **Title**: {article.title}",
        f"- **URL**: {url}",
        f"- **Published**: {_or_na(metadata.published_date)}",
        f"- **Author**: {_or_na(metadata.author)}",
        f"- **Estimated reading time**: {reading_time}",
        f"- **Word count**: {_or_na(metadata.word_count)}",
        f"- **Extraction method**: {article.extraction_method.value}",
        f"- **Content quality score**: {article.quality_score * 100:.0f}%",
    ]
    if metadata.tags:
        info_lines.append(f"- **Tags**: {', '.join(metadata.tags)}")
    if metadata.description:
        info_lines.append(f"- **Summary**: {metadata.description}")

    axes = "\n\n".join(f"### {key}\n{text}" for key, text in EVALUATION_AXES.items())
    info = "\n".join(info_lines)

    return f"""# Article Evaluation Task

## Article Information
{info}

## Article Content
{content_preview(article.content)}

## Evaluation Instructions

Evaluate the article on the five axes below. For each axis, give a score from 1 to 10 using the detailed criteria, and explain the reason concretely.

{axes}

## Output Format
Respond in the following JSON format:

{OUTPUT_FORMAT_EXAMPLE}

## Important Notes
- Evaluate each axis independently
- Take your own experience and knowledge level into account
- Keep the reasons concrete and constructive
- Follow each axis's criteria rather than an overall impression

When the evaluation is complete, save the result with the {RATING_TOOL_NAME} tool."""


def generate_fallback_prompt(url: str) -> str:
    """Prompt used when the article content could not be retrieved."""
    axes = "\n".join(
        f"{index}. **{key}** (1-10): {summary}"
        for index, (key, summary) in enumerate(AXIS_SUMMARIES.items(), start=1)
    )

    return f"""# Article Evaluation Task (content retrieval failed)

## Article Information
- **URL**: {url}
- **Status**: Automatic retrieval of the article content failed

## Instructions
Open the URL above, review the article directly, and evaluate it on the following five axes:

{axes}

## Output Format
Respond in the following JSON format:

{FALLBACK_OUTPUT_FORMAT}

When the evaluation is complete, save the result with the {RATING_TOOL_NAME} tool."""
