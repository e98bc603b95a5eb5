"""
Request and response shapes shared with the front end
"""
from typing import Any, Dict, List, Optional


def format_size(num_bytes) -> str:
    """Human readable size in the units the model lists use"""
    gigabytes = num_bytes / (1024 ** 3)
    if gigabytes >= 1:
        return f"{gigabytes:.1f} GB"
    return f"{num_bytes / (1024 ** 2):.1f} MB"


class ChatMessage:
    """One chat turn"""

    def __init__(self, role: str, content: str):
        self.role = role
        self.content = content

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChatMessage':
        if not isinstance(data, dict):
            raise ValueError('chat message must be an object')
        return cls(role=str(data.get('role', '') or ''), content=str(data.get('content', '') or ''))

    def to_dict(self) -> Dict[str, str]:
        return {'role': self.role, 'content': self.content}

    def __eq__(self, other):
        return isinstance(other, ChatMessage) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"ChatMessage(role={self.role!r}, content={self.content!r})"


class ChatRequest:
    """Chat request forwarded to /api/chat"""

    def __init__(self, model: str, messages: List[ChatMessage], stream: bool = True,
                 options: Optional[Dict[str, Any]] = None):
        self.model = model
        self.messages = messages
        self.stream = stream
        self.options = options

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChatRequest':
        if not isinstance(data, dict):
            raise ValueError('chat request must be an object')
        model = data.get('model')
        if not model:
            raise ValueError('model is required')
        messages = data.get('messages') or []
        if not isinstance(messages, list):
            raise ValueError('messages must be a list')
        return cls(
            model=model,
            messages=[ChatMessage.from_dict(m) for m in messages],
            stream=bool(data.get('stream', True)),
            options=data.get('options'),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            'model': self.model,
            'messages': [m.to_dict() for m in self.messages],
            'stream': self.stream,
        }
        if self.options is not None:
            payload['options'] = self.options
        return payload


class ChatResponse:
    """Final assistant reply returned to the UI"""

    def __init__(self, model: str, message: ChatMessage, done: bool, created_at: str = '',
                 messages: Optional[List[ChatMessage]] = None):
        self.model = model
        self.created_at = created_at
        self.message = message
        self.done = done
        self.messages = messages

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            'model': self.model,
            'created_at': self.created_at,
            'message': self.message.to_dict(),
            'done': self.done,
        }
        if self.messages:
            payload['messages'] = [m.to_dict() for m in self.messages]
        return payload


class ModelInfo:
    """Locally installed model as listed by /api/tags"""

    def __init__(self, name: str, model: str = '', size: str = '', digest: str = '',
                 details: Optional[Dict[str, Any]] = None, modified_at: str = ''):
        self.name = name
        self.model = model
        self.size = size
        self.digest = digest
        self.details = details or {}
        self.modified_at = modified_at

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'ModelInfo':
        """Build from a /api/tags entry, keeping only string fields"""
        def text(key):
            value = data.get(key)
            return value if isinstance(value, str) else ''

        size = data.get('size')
        if isinstance(size, (int, float)) and not isinstance(size, bool):
            size = format_size(size)

        return cls(
            name=text('name'),
            model=text('model'),
            size=size if isinstance(size, str) else '',
            digest=text('digest'),
            modified_at=text('modified_at'),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            'name': self.name,
            'model': self.model,
            'size': self.size,
            'digest': self.digest,
            'modified_at': self.modified_at,
        }
        if self.details:
            payload['details'] = self.details
        return payload
