"""
WebSocket relay for the chat view
"""
from .chat_relay import ROLE_PROMPTS, ChatRelayServer

__all__ = ['ChatRelayServer', 'ROLE_PROMPTS']
