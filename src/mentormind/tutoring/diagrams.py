"""SVG teaching diagrams generated by the model, with a plain fallback."""

import base64
from html import escape

import structlog
from openai import AsyncOpenAI

from mentormind.errors import GatewayError
from mentormind.tutoring.prompts import DIAGRAM_PROMPT, DiagramType, strip_code_fences

logger = structlog.get_logger()

MAX_CONCEPT_CHARS = 100


def svg_data_url(svg: str) -> str:
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"


def fallback_svg(topic: str, concept: str) -> str:
    """A simple title card used when the model cannot draw."""
    return (
        '<svg xmlns="http://www.w3.org/2000/svg" width="800" height="600">'
        '<rect width="800" height="600" fill="#1F2937"/>'
        '<text x="400" y="260" font-size="28" fill="#4F46E5" text-anchor="middle">'
        f"{escape(topic)}</text>"
        '<text x="400" y="320" font-size="16" fill="#E5E7EB" text-anchor="middle">'
        f"{escape(concept[:MAX_CONCEPT_CHARS])}</text>"
        "</svg>"
    )


class DiagramGenerator:
    """Asks the model for an SVG diagram and returns it as a data URL.

    Args:
        client: Shared OpenAI-compatible async client.
        model: Model to use for SVG generation.
    """

    def __init__(self, client: AsyncOpenAI, model: str = "gpt-4o-mini"):
        self.client = client
        self.model = model

    async def _draw(self, concept: str, topic: str, diagram_type: DiagramType) -> str:
        prompt = DIAGRAM_PROMPT.format(topic=topic, concept=concept, diagram_type=diagram_type)
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=0.4,
        )
        svg = strip_code_fences(response.choices[0].message.content or "", "svg")
        if "<svg" not in svg:
            raise GatewayError("Generated content is not valid SVG", {"topic": topic})
        return svg

    async def generate(
        self,
        concept: str,
        topic: str,
        diagram_type: DiagramType = DiagramType.MINDMAP,
    ) -> str:
        """Return a data URL for the diagram; falls back to a title card on failure."""
        concept = concept[:MAX_CONCEPT_CHARS]
        try:
            svg = await self._draw(concept, topic, diagram_type)
            logger.info("diagram_generated", topic=topic, diagram_type=diagram_type.value)
        except Exception:
            logger.exception("diagram_generation_failed", topic=topic)
            svg = fallback_svg(topic, concept)
        return svg_data_url(svg)
