"""Tests for image request detection and reply rendering."""

import pytest

from gemini_chat.llm.chat.errors import MalformedResponse
from gemini_chat.llm.chat.images import is_image_request, render_image_reply
from gemini_chat.llm.provider import (
    Candidate,
    CandidateContent,
    GenerationResponse,
    InlineData,
    ResponsePart,
)


def response(*parts: ResponsePart) -> GenerationResponse:
    return GenerationResponse(
        candidates=[Candidate(content=CandidateContent(parts=list(parts)))]
    )


class TestIsImageRequest:
    """Tests for is_image_request."""

    @pytest.mark.parametrize(
        "text",
        [
            "generate an image",
            "Generate an image of a lighthouse",
            "GENERATE AN IMAGE!!!",
            "\n\t generate an image of two cats",
            "generate an imagebook cover",
        ],
    )
    def test_intercepted(self, text):
        """Test inputs starting with the phrase are intercepted."""
        assert is_image_request(text)

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "generate a picture of a cat",
            "can you generate an image?",
            "generate  an image",
            "image generation please",
        ],
    )
    def test_not_intercepted(self, text):
        """Test other phrasing is left to the conversation."""
        assert not is_image_request(text)


class TestRenderImageReply:
    """Tests for render_image_reply."""

    def test_text_only(self):
        """Test text parts are kept verbatim."""
        assert render_image_reply(response(ResponsePart(text="No image today."))) == (
            "No image today."
        )

    def test_image_only(self):
        """Test an image alone is wrapped in blank lines."""
        reply = render_image_reply(
            response(ResponsePart(inline_data=InlineData(mime_type="image/jpeg", data="/9j/")))
        )
        assert reply == "\n\n![Generated Image](data:image/jpeg;base64,/9j/)\n\n"

    def test_missing_mime_type_defaults_to_png(self):
        """Test images without a mime type are rendered as PNG."""
        reply = render_image_reply(response(ResponsePart(inline_data=InlineData(data="AAA="))))
        assert "data:image/png;base64,AAA=" in reply

    def test_parts_in_order(self):
        """Test text and images are appended in part order."""
        reply = render_image_reply(
            response(
                ResponsePart(text="First"),
                ResponsePart(inline_data=InlineData(mime_type="image/png", data="AAA=")),
                ResponsePart(text="Second"),
                ResponsePart(inline_data=InlineData(mime_type="image/png", data="BBB=")),
            )
        )
        assert reply == (
            "First"
            "\n\n![Generated Image](data:image/png;base64,AAA=)\n\n"
            "Second"
            "\n\n![Generated Image](data:image/png;base64,BBB=)\n\n"
        )

    def test_only_first_candidate_used(self):
        """Test later candidates are ignored."""
        reply = render_image_reply(
            GenerationResponse(
                candidates=[
                    Candidate(content=CandidateContent(parts=[ResponsePart(text="one")])),
                    Candidate(content=CandidateContent(parts=[ResponsePart(text="two")])),
                ]
            )
        )
        assert reply == "one"

    @pytest.mark.parametrize(
        "empty",
        [
            GenerationResponse(),
            GenerationResponse(candidates=[]),
            GenerationResponse(candidates=[Candidate()]),
            GenerationResponse(candidates=[Candidate(content=CandidateContent())]),
            response(ResponsePart(text=""), ResponsePart(text=None)),
        ],
    )
    def test_no_content_is_malformed(self, empty):
        """Test responses without text or image parts are rejected."""
        with pytest.raises(MalformedResponse):
            render_image_reply(empty)

    def test_empty_image_data_still_rendered(self):
        """Test an inline part with empty data is rendered, not skipped."""
        reply = render_image_reply(
            response(ResponsePart(text=""), ResponsePart(inline_data=InlineData(data="")))
        )
        assert reply == "\n\n![Generated Image](data:image/png;base64,)\n\n"
