from app.llm.client import LLMClient, OpenAIClient
from app.llm.schemas import BotReply

__all__ = ["BotReply", "LLMClient", "OpenAIClient"]
