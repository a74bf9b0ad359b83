"""System instruction and provider config assembly for chat sessions."""

from gemini_chat.llm.chat.models import ChatMessage, ChatSettings, Personality
from gemini_chat.llm.provider import ProviderConfig, ProviderContent, TextPart

IDENTITY_INSTRUCTION = (
    "You are a helpful, clever, and concise AI assistant named Gemini Chat. "
    "Format your responses with Markdown."
)

PERSONALITY_INSTRUCTIONS: dict[Personality, str] = {
    Personality.PROFESSIONAL: "Maintain a strictly professional, objective, and formal tone.",
    Personality.FRIENDLY: "Be warm, approachable, and friendly. Use emojis occasionally if appropriate.",
    Personality.CREATIVE: "Be imaginative and creative. Use colorful language and metaphors.",
    Personality.HUMOROUS: "Be witty and humorous. Feel free to crack jokes where appropriate.",
    Personality.STRICT: "Be concise, direct, and strict. Avoid filler words and pleasantries.",
    Personality.NONE: "",
}

# Sent when thinking is enabled without an explicit budget
DYNAMIC_THINKING_BUDGET = -1


def personality_instruction(personality: Personality | None) -> str:
    """Get the tone directive for a personality (empty for none)."""
    if personality is None:
        return ""
    return PERSONALITY_INSTRUCTIONS[Personality(personality)]


def build_system_instruction(settings: ChatSettings) -> str:
    """Join identity, tone and custom directives, skipping empty ones.

    Args:
        settings: The session settings.

    Returns:
        The system instruction. Never empty, the identity directive is always first.
    """
    segments = [
        IDENTITY_INSTRUCTION,
        personality_instruction(settings.personality),
        settings.custom_instruction or "",
    ]
    return "\n\n".join(segment for segment in segments if segment)


def build_provider_config(settings: ChatSettings) -> ProviderConfig:
    """Build the provider configuration for a session."""
    thinking_budget: int | None = None
    if settings.thinking_enabled:
        thinking_budget = (
            settings.thinking_budget
            if settings.thinking_budget is not None
            else DYNAMIC_THINKING_BUDGET
        )

    return ProviderConfig(
        system_instruction=build_system_instruction(settings),
        temperature=settings.temperature,
        max_output_tokens=settings.max_output_tokens,
        thinking_budget=thinking_budget,
    )


def build_provider_history(history: list[ChatMessage]) -> list[ProviderContent]:
    """Convert chat history into provider content, one item per message."""
    return [
        ProviderContent(role=message.role, parts=[TextPart(text=message.text)])
        for message in history
    ]
