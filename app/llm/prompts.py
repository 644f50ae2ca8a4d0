"""Prompt templates for LLM interactions."""

from __future__ import annotations

DEFAULT_RESPONSE_LANGUAGE = "English"


def get_bot_reply_system_prompt(language: str | None) -> str:
    """Build the system prompt, directing the model to answer in the given language."""
    return (
        "You are a helpful AI assistant in a chat application. Use the provided context to help "
        "answer the user's question. If no relevant context is found, respond based on your "
        "general knowledge. Keep responses concise and friendly. You should respond in "
        f"{language or DEFAULT_RESPONSE_LANGUAGE} language. Your response must be a valid JSON "
        "object with two fields: 'response' (your text response) and 'relevant_sources' (an "
        "array of indices of the provided sources that contained the information requested by "
        "the user). If there are multiple sources used, include all of them in the "
        "relevant_sources array. Exclude any sources that are not relevant to the user's "
        "question."
    )


def get_bot_reply_user_prompt(context: str, message: str) -> str:
    """Generate the user turn carrying the retrieved context and the original message."""
    return f"""Context from messages and posts throughout the company's communication:
{context}

User's message: {message}"""
