"""
Chat Component
"""
from .routes import chat_bp, init_chat
from .service import ChatService, stream_chat

__all__ = ['chat_bp', 'init_chat', 'ChatService', 'stream_chat']
