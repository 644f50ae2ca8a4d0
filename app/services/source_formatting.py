"""Text rendering for similarity results: the model's context block and source citations."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from html import escape

from app.db.schemas import SimilarityResult

logger = logging.getLogger(__name__)

NO_CONTEXT_FOUND = "No relevant context found."


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as M/D/YYYY, h:MM:SS AM|PM."""
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return (
        f"{value.month}/{value.day}/{value.year}, "
        f"{hour}:{value.minute:02d}:{value.second:02d} {meridiem}"
    )


def describe_location(result: SimilarityResult) -> str:
    if result.channel_id is not None:
        location = f"in channel {result.channel_id}"
        if result.is_thread_reply:
            location += f" (thread reply to post {result.parent_id})"
        return location
    if result.conversation_id is not None:
        location = f"in DM {result.conversation_id}"
        if result.is_thread_reply:
            location += f" (thread reply to message {result.parent_id})"
        return location
    return ""


def build_context(results: Sequence[SimilarityResult]) -> str:
    """Number each result from 1 so the model can cite it back by index."""
    if not results:
        return NO_CONTEXT_FOUND
    return "\n".join(
        f"[{index}] {result.display_name} {describe_location(result)} at "
        f"{format_timestamp(result.created_at)}: {result.content} "
        f"(similarity: {result.similarity:.3f})"
        for index, result in enumerate(results, start=1)
    )


def build_source_href(result: SimilarityResult) -> str:
    if result.channel_id is not None:
        href = f"/channel/{result.channel_id}"
        if result.is_thread_reply:
            return f"{href}?thread={result.parent_id}#{result.content_id}"
        return f"{href}?thread={result.content_id}"
    if result.conversation_id is not None:
        href = f"/dm/{result.conversation_id}"
        if result.is_thread_reply:
            return f"{href}?thread={result.parent_id}#{result.content_id}"
        return href
    return ""


def render_source_link(index: int, result: SimilarityResult) -> str:
    return (
        f'<a href="{escape(build_source_href(result))}" target="_blank" '
        f'rel="noopener noreferrer" class="text-blue-500" title="Opens in new tab">'
        f"[{index}]</a>"
    )


def render_sources(results: Sequence[SimilarityResult], source_indices: Sequence[int]) -> str:
    """Render the cited sources as an inline block to append to the reply.

    Indices are 1-based positions in ``results``. Indices the model made up
    (outside the result list) are dropped. Returns an empty string when
    nothing is left to cite.
    """
    if not results or not source_indices:
        return ""

    links: list[str] = []
    for index in source_indices:
        if not 1 <= index <= len(results):
            logger.warning(
                "Ignoring cited source %d; only %d results were provided", index, len(results)
            )
            continue
        links.append(render_source_link(index, results[index - 1]))

    if not links:
        return ""
    return '<br><span class="text-xs">Sources: ' + " ".join(links) + "</span>"
