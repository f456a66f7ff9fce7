"""Post-processing of model replies for the code-generation and ticket pages."""

from app.models.tasks import CodeSegment, TicketPreview
from app.prompts.templates import FINAL_TICKET_MARKER, RECOMMENDATIONS_MARKER

CODE_FENCE = "```"

NO_RECOMMENDATIONS = (
    "No recommendations provided. Consider adding more details such as "
    "reproduction steps, environment details, or error logs."
)


def split_code_segments(text: str) -> list[CodeSegment]:
    """Split a reply on triple-backtick fences.

    Segments alternate plain/code starting with plain, so every odd-indexed
    part is the inside of a fence (language tag included). Blank parts are
    dropped and the rest trimmed.
    """
    segments = []
    for index, part in enumerate(text.split(CODE_FENCE)):
        if not part.strip():
            continue
        segments.append(
            CodeSegment(type="code" if index % 2 else "plain", content=part.strip())
        )
    return segments


def split_ticket(reply: str) -> TicketPreview:
    """Separate the ticket body from the recommendations section.

    Either marker may be missing: without the recommendations marker the
    whole reply is the ticket and the recommendations get a placeholder.
    """
    parts = reply.split(RECOMMENDATIONS_MARKER)
    ticket = parts[0].replace(FINAL_TICKET_MARKER, "", 1).strip()
    recommendations = parts[1].strip() if len(parts) > 1 else ""
    return TicketPreview(
        final_ticket=ticket,
        recommendations=recommendations or NO_RECOMMENDATIONS,
    )
