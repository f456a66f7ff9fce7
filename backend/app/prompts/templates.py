"""Prompt templates for each AI task.

Every template is a pure function from the user's fields to the prompt
string, registered under its ``TaskKind`` so that callers only ever go
through ``render_prompt``.
"""

from enum import Enum
from typing import Callable

from app.models.tasks import TranslationDirection

FINAL_TICKET_MARKER = "---FINAL SUPPORT TICKET---"
RECOMMENDATIONS_MARKER = "---RECOMMENDATIONS---"


class TaskKind(str, Enum):
    CHAT = "chat"
    CODEGEN = "codegen"
    POLICY = "policy"
    TRANSLATE = "translate"
    TICKET_SUGGESTIONS = "ticket_suggestions"
    TICKET_PREVIEW = "ticket_preview"


def chat_prompt(text: str) -> str:
    return text


def codegen_prompt(text: str) -> str:
    return f"""
You are a code-generation AI for creating modern wab apps based on this tech stack:
- next.js
- tailwindcss
- typescript

take in to consideration that the user will have his project up and running and do not add any more packages to the project

User prompt:
{text}
""".strip()


def policy_prompt(text: str) -> str:
    return (
        "Simplify the following corporate policy into plain language, but also add "
        "a funny, brutally honest commentary that reveals what's really going on "
        "behind the corporate jargon. Do not include any warnings, notes, or extra "
        "commentary—only the simplified text and its humorous, candid "
        f'explanation:\n\n"{text}"'
    )


def translate_prompt(text: str, direction: TranslationDirection) -> str:
    if direction is TranslationDirection.CORPORATE_TO_NORMAL:
        instruction = (
            "Translate the following corporate language text to a funny, everyday "
            "tone that is a bit direct and slightly rude."
        )
    else:
        instruction = (
            "Translate the following everyday language text to formal, corporate "
            "language."
        )
    return (
        f"{instruction} Do not include any warnings, notes, or extra commentary "
        f'– only provide the translated text:\n\n"{text}"'
    )


def ticket_suggestions_prompt(description: str) -> str:
    return f"""
You are an AI that analyzes support ticket reports and suggests additional details that could improve their clarity.
Based on the description below, list at least one suggestion (e.g., "provide detailed steps to reproduce the issue" or "include environment details or error messages") that would help create a more complete support ticket.
Description:
{description}
""".strip()


def ticket_preview_prompt(issue_type: str, urgency: int, description: str) -> str:
    return f"""
You are an AI specialized in generating clear, well-organized support tickets.
Based solely on the user input below, produce two sections separated by the markers below:
{FINAL_TICKET_MARKER}
Generate a complete, formatted support ticket including:
  • Ticket Summary (a brief, clear title)
  • Detailed Description (explain the problem in plain language)
  • Steps to Reproduce (if available)
  • Impact (explain how the issue affects work or usage)
  • Additional Comments
  • Both the user's provided urgency rating and your computed urgency rating.
  Analyze the context carefully: if the user's input is exaggerated (e.g. "I can't do my job") but the description shows a less critical issue, adjust the computed rating accordingly.
{RECOMMENDATIONS_MARKER}
List suggestions for additional details the reporter could add to improve the ticket's clarity (e.g., reproduction steps, environment details, error messages, screenshots).

User Details:
  - Issue Type: {issue_type}
  - User's Urgency Rating (1 = Minor, 5 = Critical): {urgency}
  - Description: {description}

Format your output in plain text using exactly the markers above.
""".strip()


PROMPT_TEMPLATES: dict[TaskKind, Callable[..., str]] = {
    TaskKind.CHAT: chat_prompt,
    TaskKind.CODEGEN: codegen_prompt,
    TaskKind.POLICY: policy_prompt,
    TaskKind.TRANSLATE: translate_prompt,
    TaskKind.TICKET_SUGGESTIONS: ticket_suggestions_prompt,
    TaskKind.TICKET_PREVIEW: ticket_preview_prompt,
}


def render_prompt(kind: TaskKind, **fields: object) -> str:
    """Render the prompt for ``kind`` from keyword fields."""
    return PROMPT_TEMPLATES[kind](**fields)
