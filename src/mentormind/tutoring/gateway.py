"""Tutoring gateway: one request, one tutor reply."""

import structlog
from openai import AsyncOpenAI
from pydantic import BaseModel

from mentormind.errors import GatewayError
from mentormind.models.chat import Language
from mentormind.models.user_profile import UserProfile
from mentormind.tutoring.diagrams import DiagramGenerator
from mentormind.tutoring.prompts import (
    TUTOR_USER_PROMPT,
    build_tutor_prompt,
    classify_message,
    pick_diagram_type,
    wants_explanation,
)

logger = structlog.get_logger()

VISUAL_AID_NOTE = (
    "\n\n---\n\n🖼️ **AI-Generated Visual Learning Aid:** An educational {diagram_type} "
    "diagram has been generated to help you visualize these concepts."
)


class TutorReply(BaseModel):
    reply: str
    image_url: str | None = None


class TutorGateway:
    """Stateless bridge to the tutoring model.

    No retries or timeouts are layered on top of the client; callers show a
    retry message when a call fails.

    Args:
        client: OpenAI-compatible async client.
        model: Chat model name.
        diagrams: Diagram generator for visual learners (optional).
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = "gpt-4o-mini",
        diagrams: DiagramGenerator | None = None,
    ):
        self.client = client
        self.model = model
        self.diagrams = diagrams

    async def send_prompt(
        self,
        message: str,
        profile: UserProfile | None,
        language: Language = Language.ENGLISH,
    ) -> TutorReply:
        """Get a tutor reply for a learner message.

        Raises:
            GatewayError: The model call failed or returned no text.
        """
        message_type = classify_message(message)
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": build_tutor_prompt(profile, language)},
                    {
                        "role": "user",
                        "content": TUTOR_USER_PROMPT.format(
                            message_type=message_type, message=message
                        ),
                    },
                ],
                temperature=0.7,
            )
            reply = response.choices[0].message.content
        except Exception as exc:
            logger.exception("tutor_request_failed")
            raise GatewayError("Tutor request failed", {"error": str(exc)}) from exc

        if not reply:
            raise GatewayError("Tutor returned an empty reply")

        result = TutorReply(reply=reply)
        if self.diagrams and profile and profile.prefers_images and wants_explanation(message):
            diagram_type = pick_diagram_type(message)
            result.image_url = await self.diagrams.generate(message, profile.topic, diagram_type)
            result.reply += VISUAL_AID_NOTE.format(diagram_type=diagram_type)

        logger.info("tutor_reply", message_type=message_type.value, has_image=bool(result.image_url))
        return result
