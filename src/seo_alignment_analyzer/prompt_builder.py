"""
Enhancement prompt construction.

Formats the instruction handed to the completion provider when the user
asks for rewritten text that incorporates the recommended keywords.
"""

import logging
from typing import Sequence

from .errors import classify_provider_error
from .llm_client import CompletionProvider
from .models import SectionImprovement

logger = logging.getLogger(__name__)


ENHANCEMENT_SYSTEM_PROMPT = (
    "You are a content optimization expert who enhances text for better SEO "
    "while maintaining readability."
)

EDITORIAL_RULES = [
    "Add missing keywords naturally without keyword stuffing",
    "Maintain the original tone and style",
    "Keep the same overall structure",
    "Make minimal changes - only add what's necessary",
    "Ensure all additions flow naturally with existing content",
]


def _format_improvement(improvement: SectionImprovement) -> str:
    return (
        f"Section: {improvement.section_title}\n"
        f"Missing Keywords: {', '.join(improvement.missing_keywords)}\n"
        f"Suggested Phrases: {', '.join(improvement.suggested_phrases)}\n"
    )


def build_enhancement_prompt(
    original_text: str,
    improvements: Sequence[SectionImprovement],
) -> str:
    """
    Build the rewrite instruction for the completion provider.

    Args:
        original_text: The user's text, embedded verbatim.
        improvements: Per-section suggestions to incorporate.

    Returns:
        Prompt string.
    """
    improvements_block = "\n".join(_format_improvement(imp) for imp in improvements)
    rules_block = "\n".join(f"{i}. {rule}" for i, rule in enumerate(EDITORIAL_RULES, start=1))

    return f"""You are a content optimization expert. Enhance the following text by naturally incorporating the suggested improvements while maintaining the original voice and structure.

Original Text:
{original_text}

Improvements Needed:
{improvements_block}
Rules:
{rules_block}

Enhanced Text:"""


def enhance_text(
    provider: CompletionProvider,
    original_text: str,
    improvements: Sequence[SectionImprovement],
) -> str:
    """
    Ask the completion provider to rewrite the text.

    Falls back to the original text when the provider returns empty content.
    Provider failures are classified and raised.
    """
    prompt = build_enhancement_prompt(original_text, improvements)
    try:
        enhanced = provider.complete(ENHANCEMENT_SYSTEM_PROMPT, prompt)
    except Exception as e:
        classified = classify_provider_error(e, "Enhancement request")
        if classified is e:
            raise
        raise classified from e

    if not enhanced or not enhanced.strip():
        logger.warning("Completion provider returned empty content; keeping original text")
        return original_text
    return enhanced.strip()
