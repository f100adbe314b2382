"""Render a saved pair as a Markdown note with YAML front matter."""

from datetime import datetime, timezone

from .config import SOURCE_LABEL
from .models import NoteOptions


def parse_tags(tags: str) -> list[str]:
    """Split a comma-separated tag string, dropping blanks."""
    return [t.strip() for t in tags.split(",") if t.strip()]


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _created_date(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).date().isoformat()


def render_note(
    title: str,
    tags: str,
    prompt: str | None,
    response: str,
    conversation_title: str,
    timestamp: float,
    options: NoteOptions | None = None,
) -> str:
    """
    Build the note body for one response.

    Args:
        title: Note title written to the front matter
        tags: Comma-separated tags
        prompt: The user prompt, or None when the response has none
        response: The assistant response
        conversation_title: Title of the source conversation
        timestamp: Creation time of the response (epoch seconds)
        options: Rendering switches; defaults include everything

    Returns:
        The complete note text
    """
    options = options or NoteOptions()
    tag_list = parse_tags(tags)

    lines = ["---", f"title: {_quote(title)}"]
    if options.include_tags and tag_list:
        lines.append(f"tags: [{', '.join(_quote(t) for t in tag_list)}]")
    if options.include_timestamps:
        lines.append(f"created: {_created_date(timestamp)}")
        lines.append(f"source: {SOURCE_LABEL}")
        lines.append(f"conversation: {_quote(conversation_title)}")
    lines.append("---")

    body = "\n".join(lines) + "\n\n"
    if options.include_user_prompt and prompt is not None:
        body += f"## User Prompt\n\n{prompt}\n\n"
    body += f"## Response\n\n{response}"
    return body
