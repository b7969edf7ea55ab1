"""Prompt builders for platform-optimized post generation."""

from models.content_models import Platform

PLATFORM_GUIDELINES = {
    Platform.TWITTER: (
        "- Keep content concise and impactful within character limits\n"
        "- Use 1-2 relevant hashtags maximum\n"
        "- Focus on timely, conversational content\n"
        "- Consider thread potential for longer messages"
    ),
    Platform.INSTAGRAM: (
        "- Create visually descriptive content\n"
        "- Use 5-10 strategic hashtags\n"
        "- Focus on storytelling elements\n"
        "- Include calls to action\n"
        "- Consider carousel potential"
    ),
    Platform.LINKEDIN: (
        "- Maintain professional tone\n"
        "- Focus on industry insights and expertise\n"
        "- Use 3-5 relevant hashtags\n"
        "- Include data points when applicable\n"
        "- Consider longer-form content"
    ),
    Platform.FACEBOOK: (
        "- Focus on community engagement\n"
        "- Keep content conversational but informative\n"
        "- Use 1-3 hashtags maximum\n"
        "- Include questions or calls for interaction\n"
        "- Consider multimedia potential"
    ),
}

GENERIC_GUIDELINES = "Focus on platform-appropriate content length, tone, and engagement strategies"

RESPONSE_FORMAT = """Return response in JSON format with the following structure:
{
  "content": "the generated post text",
  "hashtags": ["relevant", "trending", "hashtags"],
  "engagement_prediction": number between 0-100,
  "tone": "descriptive tone of the content",
  "quality_metrics": {
    "clarity": number between 0-100,
    "relevance": number between 0-100,
    "originality": number between 0-100,
    "engagement_potential": number between 0-100
  }
}"""


def platform_guidelines(platform: str) -> str:
    """Return the guidance block for a platform, or generic guidance if unknown."""
    try:
        return PLATFORM_GUIDELINES[Platform((platform or "").strip().lower())]
    except ValueError:
        return GENERIC_GUIDELINES


def build_system_prompt(platform: str) -> str:
    """Return the content-strategist system prompt."""
    return (
        f"You are an expert {platform} content strategist with deep understanding of the platform's "
        "best practices, audience behavior, and content performance metrics. Your goal is to create "
        "highly engaging, platform-optimized content that drives meaningful engagement while "
        "maintaining authenticity and brand voice."
    )


def build_user_prompt(prompt: str, platform: str) -> str:
    """Merge the caller's prompt with platform guidance and the reply schema."""
    return (
        f"Generate highly engaging {platform} content optimized for maximum impact and authenticity.\n\n"
        f"Platform-specific considerations:\n{platform_guidelines(platform)}\n\n"
        f"Original prompt: {prompt}\n\n"
        "Additional requirements:\n"
        "- Ensure the content is authentic, engaging, and platform-appropriate\n"
        "- Include trending but relevant hashtags\n"
        "- Maintain brand voice consistency\n"
        "- Focus on creating shareable, valuable content\n\n"
        f"{RESPONSE_FORMAT}"
    )
