from app.db.models.message import Message
from app.db.models.user import TopLanguage, User
from app.db.models.vector_embedding import EMBEDDING_DIMENSIONS, VectorEmbedding

__all__ = ["EMBEDDING_DIMENSIONS", "Message", "TopLanguage", "User", "VectorEmbedding"]
