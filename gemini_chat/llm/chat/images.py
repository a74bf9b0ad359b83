"""Image generation request detection and response rendering."""

from gemini_chat.llm.chat.errors import MalformedResponse
from gemini_chat.llm.provider import GenerationResponse

IMAGE_REQUEST_PREFIX = "generate an image"

DEFAULT_IMAGE_MIME_TYPE = "image/png"


def is_image_request(text: str) -> bool:
    """Check whether a turn asks for image generation.

    A plain prefix match on the trimmed, case-folded text. Anything that
    merely starts with the phrase is intercepted, nothing else is.
    """
    return text.strip().casefold().startswith(IMAGE_REQUEST_PREFIX)


def render_image_reply(response: GenerationResponse) -> str:
    """Render a generation response as Markdown.

    Text parts are kept verbatim, inline images become data-URI image
    references surrounded by blank lines.

    Args:
        response: The one-shot generation response.

    Returns:
        The rendered reply.

    Raises:
        MalformedResponse: If the response has no text or image content.
    """
    content = ""

    candidate = response.candidates[0] if response.candidates else None
    parts = candidate.content.parts if candidate and candidate.content else None

    for part in parts or []:
        if part.text:
            content += part.text
        if part.inline_data is not None:
            mime_type = part.inline_data.mime_type or DEFAULT_IMAGE_MIME_TYPE
            content += (
                f"\n\n![Generated Image](data:{mime_type};base64,{part.inline_data.data})\n\n"
            )

    if not content:
        raise MalformedResponse("Generation response contained no text or image data")
    return content
