"""
Chat Service
Streams /api/chat replies back to the UI as chat_stream events
"""
import logging

from .. import register_component
from ...core.errors import OllamaUnavailableError
from ...core.schemas import ChatMessage, ChatResponse

logger = logging.getLogger(__name__)

CHAT_STREAM_EVENT = 'chat_stream'
FALLBACK_REPLY = ('This is a simulated response from the Intel optimized Ollama edition. '
                  'The Ollama service could not be reached, so no model produced this reply.')


def stream_chat(client, payload):
    """Yield accumulated updates for a streaming chat request

    Each update is a dict with the chunk's model, created_at, content, the
    full_content so far and done. Chunks without content are only yielded when
    they finish the stream. A daemon error chunk raises OllamaUnavailableError.
    """
    full_content = []
    for chunk in client.chat_stream(payload):
        if chunk.get('error'):
            raise OllamaUnavailableError(f"Ollama reported an error: {chunk['error']}")

        message = chunk.get('message')
        content = (message.get('content') or '') if isinstance(message, dict) else ''
        content = content if isinstance(content, str) else str(content)
        done = bool(chunk.get('done'))
        if content:
            full_content.append(content)
        if content or done:
            yield {
                'model': chunk.get('model', payload.get('model', '')),
                'created_at': chunk.get('created_at', ''),
                'content': content,
                'full_content': ''.join(full_content),
                'done': done,
            }
        if done:
            return


def fallback_response(model):
    return ChatResponse(
        model=model,
        message=ChatMessage(role='assistant', content=FALLBACK_REPLY),
        done=True,
    )


@register_component('chat')
class ChatService:
    """Service for one-shot chat completions"""

    def __init__(self, client=None, event_bus=None):
        from ... import core

        self.client = client or core.ollama_client
        self.event_bus = event_bus or core.event_bus

    def chat_completion(self, chat_request):
        """Run a chat request, emitting each streamed piece

        Returns the final ChatResponse. When the daemon fails the canned
        fallback reply is returned instead.
        """
        chat_request.stream = True
        payload = chat_request.to_dict()
        full_content = ''
        last = None

        try:
            for update in stream_chat(self.client, payload):
                last = update
                full_content = update['full_content']
                if update['content']:
                    self.event_bus.emit(CHAT_STREAM_EVENT, {
                        'model': update['model'],
                        'content': update['content'],
                        'full_content': full_content,
                        'done': update['done'],
                    })
        except OllamaUnavailableError as e:
            logger.warning(f"Chat with {chat_request.model} failed, returning fallback reply: {e}")
            return fallback_response(chat_request.model)

        if last is None or not last['done']:
            logger.warning(f"Chat stream for {chat_request.model} ended before completion")
            return ChatResponse(
                model=last['model'] if last else chat_request.model,
                created_at=last['created_at'] if last else '',
                message=ChatMessage(role='assistant', content=full_content),
                done=False,
            )

        return ChatResponse(
            model=last['model'],
            created_at=last['created_at'],
            message=ChatMessage(role='assistant', content=full_content),
            done=True,
        )
