"""Prompt templates and message heuristics for the tutor."""

import re
from enum import StrEnum

from mentormind.models.user_profile import UserProfile


class MessageType(StrEnum):
    GREETING = "GREETING"
    TOPIC_REQUEST = "TOPIC_REQUEST"
    SUMMARY_REQUEST = "SUMMARY_REQUEST"
    EXAMPLE_REQUEST = "EXAMPLE_REQUEST"
    SHORT_MESSAGE = "SHORT_MESSAGE"
    DETAILED_QUERY = "DETAILED_QUERY"


class DiagramType(StrEnum):
    FLOWCHART = "flowchart"
    MINDMAP = "mindmap"
    COMPARISON = "comparison"
    PROCESS = "process"
    CHART = "chart"


# Checked in order; first match wins
_MESSAGE_PATTERNS: list[tuple[MessageType, re.Pattern]] = [
    (MessageType.GREETING, re.compile(r"^(hello|hi|hey|salam|hola)")),
    (MessageType.TOPIC_REQUEST, re.compile(r"(explain|what is|tell me about|define)")),
    (MessageType.SUMMARY_REQUEST, re.compile(r"(summary|brief|short|overview)")),
    (MessageType.EXAMPLE_REQUEST, re.compile(r"example")),
]

SHORT_MESSAGE_LENGTH = 20


def classify_message(message: str) -> MessageType:
    """Rough intent of a learner message, used to size the reply."""
    msg = message.lower().strip()
    for message_type, pattern in _MESSAGE_PATTERNS:
        if pattern.search(msg):
            return message_type
    if len(msg) < SHORT_MESSAGE_LENGTH:
        return MessageType.SHORT_MESSAGE
    return MessageType.DETAILED_QUERY


def wants_explanation(message: str) -> bool:
    return classify_message(message) in (MessageType.TOPIC_REQUEST, MessageType.DETAILED_QUERY)


def pick_diagram_type(message: str) -> DiagramType:
    text = message.lower()
    if any(word in text for word in ("step", "process", "how to")):
        return DiagramType.FLOWCHART
    if any(word in text for word in ("compare", "difference", "vs")):
        return DiagramType.COMPARISON
    if any(word in text for word in ("progress", "learning path", "roadmap")):
        return DiagramType.PROCESS
    return DiagramType.MINDMAP


TUTOR_SYSTEM_PROMPT = """\
You are MentorMind AI, a professional personal tutor.

STUDENT PROFILE:
- Name: {name}
- Topic: {topic}
- Confidence Level: {confidence}/5
- Prior Knowledge: {prior_knowledge}
- Preferred Examples: {example_types}
- Wants References: {wants_references}
- Language Preference: {language}

RESPONSE GUIDELINES:
- Simple messages (greetings, short questions): reply in 1-2 friendly lines.
- Topic requests and explanations: use a step-by-step format with a bold \
title per step, a practical example after each step, and finish with a \
quick comprehension check question.
- Follow-ups: build on previous context and check understanding before \
moving on.
- Match explanation depth to the confidence level: simple language and more \
examples for beginners, technical detail and challenges for advanced learners.
- Format the response as markdown.

Respond in {language}. Match the message intent and length appropriately.
"""

TUTOR_USER_PROMPT = """\
Message Type: {message_type}
Message: "{message}"
"""

QUIZ_SYSTEM_PROMPT = """\
You are a quiz generator for an AI tutoring app. Respond ONLY with a JSON object:
{
    "quizTitle": "<quiz title>",
    "topic": "<topic>",
    "difficulty": "<difficulty>",
    "questions": [
        {
            "id": 1,
            "question": "<question text>",
            "options": {"A": "<text>", "B": "<text>", "C": "<text>", "D": "<text>"},
            "correctAnswer": "<A|B|C|D>",
            "explanation": "<why the answer is correct>"
        }
    ]
}
"""

QUIZ_USER_PROMPT = """\
Generate a quiz for a student learning **{topic}**.

- Difficulty Level: {difficulty}
- Number of Questions: {count}
- Language: {language}
- Student Confidence: {confidence}/5

Create {count} practical, engaging multiple-choice questions with 4 options \
(A, B, C, D) each, matched to the difficulty level, with a clear explanation \
for every correct answer. Write the quiz in {language}.
"""

DIAGRAM_PROMPT = """\
You are an educational diagram generator. Create a detailed SVG diagram for the following:

Topic: {topic}
Concept: {concept}
Diagram Type: {diagram_type}

The SVG should be 800x600 pixels, use clear readable fonts (14-18px), a clean \
educational style with colors like #4F46E5, #7C3AED and #10B981, and include \
labels, arrows and text that explain the concept.

Provide ONLY the SVG code, starting with <svg> and ending with </svg>.
"""


def build_tutor_prompt(profile: UserProfile | None, language: str) -> str:
    if profile is None:
        return TUTOR_SYSTEM_PROMPT.format(
            name="Student",
            topic="General Learning",
            confidence=3,
            prior_knowledge="beginner",
            example_types="real-world",
            wants_references="yes",
            language=language,
        )
    return TUTOR_SYSTEM_PROMPT.format(
        name=profile.name or "Student",
        topic=profile.topic or "General Learning",
        confidence=profile.confidence,
        prior_knowledge=profile.prior_knowledge,
        example_types=", ".join(profile.example_types) or "real-world",
        wants_references="yes" if profile.wants_references else "no",
        language=language,
    )


def welcome_message(profile: UserProfile) -> str:
    """Opening tutor message for an empty transcript."""
    return (
        f"🎯 **Welcome {profile.name}!** I'm MentorMind AI, your personal learning "
        f"assistant for **{profile.topic}**.\n\n"
        "Based on your preferences:\n"
        f"• **Learning Style:** {', '.join(profile.format_preferences)}\n"
        f"• **Confidence Level:** {profile.confidence}/5\n"
        f"• **Session Length:** {profile.session_length}\n"
        f"• **Examples:** {', '.join(profile.example_types)}\n\n"
        f"I'll tailor everything to your learning style! How can I help you with "
        f"{profile.topic} today?"
    )


def strip_code_fences(text: str, lang: str) -> str:
    """Remove ```lang / ``` markers a model wraps around structured output."""
    return re.sub(rf"```(?:{lang})?\n?", "", text).strip()
