"""
WebSocket chat relay
Serves ws://<host>:11435/ws/chat for the chat view, one thread per connection
"""
import json
import logging
import threading
import uuid
from urllib.parse import urlsplit

from websockets.exceptions import ConnectionClosed
from websockets.frames import CloseCode
from websockets.sync.server import serve

from ..components.chat.service import stream_chat
from ..core.errors import OllamaUnavailableError
from ..core.schemas import ChatMessage

logger = logging.getLogger(__name__)

ROLE_PROMPTS = {
    'code': ('You are a professional coding expert who is good at solving all kinds of programming '
             'problems. Provide clear, efficient and maintainable code solutions with detailed '
             'explanations and comments.'),
    'video': ('You are a professional video script writer who creates scripts of every genre. Design '
              'engaging video content for the request, including shots, lines and visual effects.'),
    'writing': ('You are a professional writer skilled in every style. Produce high quality writing '
                'for the request, paying attention to structure, logic and expression.'),
    'business': ('You are a professional business consultant who analyses business problems and gives '
                 'strategic advice. Provide professional and practical business solutions.'),
    'education': ('You are a professional educator who designs teaching content and answers study '
                  'questions. Provide clear, easy to follow and insightful educational content.'),
}


class ChatRelayServer:
    """Relay chat, role and search requests from the UI over WebSocket"""

    def __init__(self, host=None, port=None, client=None, path=None):
        from .. import core
        from ..config.settings import DashboardConfig

        self.host = host or DashboardConfig.WEBSOCKET_HOST
        self.port = DashboardConfig.WEBSOCKET_PORT if port is None else port
        self.path = path or DashboardConfig.WEBSOCKET_PATH
        self.client = client or core.ollama_client
        self.connections = {}
        self._connections_lock = threading.Lock()
        self._server = None
        self._thread = None

    # --- Server lifecycle ---

    def start(self):
        """Bind and serve in a daemon thread; returns the bound port"""
        if self._server is not None:
            return self.port
        self._server = serve(self.handle_connection, self.host, self.port)
        self.port = self._server.socket.getsockname()[1]
        self._thread = threading.Thread(target=self._server.serve_forever, name='chat-relay', daemon=True)
        self._thread.start()
        logger.info(f"WebSocket server listening on ws://{self.host}:{self.port}{self.path}")
        return self.port

    def stop(self):
        if self._server is None:
            return
        self._server.shutdown()
        if self._thread is not None:
            self._thread.join(timeout=5)
        self._server = None
        self._thread = None
        logger.info("WebSocket server stopped")

    def connection_count(self):
        with self._connections_lock:
            return len(self.connections)

    def broadcast(self, payload):
        """Send a JSON payload to every open connection"""
        with self._connections_lock:
            connections = list(self.connections.values())
        for connection in connections:
            self.send(connection, payload)
        return len(connections)

    # --- Connection handling ---

    def handle_connection(self, connection):
        if urlsplit(connection.request.path).path != self.path:
            connection.close(CloseCode.POLICY_VIOLATION, 'unknown path')
            return

        conn_id = uuid.uuid4().hex
        with self._connections_lock:
            self.connections[conn_id] = connection
        logger.info(f"WebSocket connection opened: {conn_id}")

        try:
            for raw in connection:
                self.dispatch(connection, raw)
        except ConnectionClosed as e:
            logger.warning(f"WebSocket connection {conn_id} closed unexpectedly: {e}")
        finally:
            with self._connections_lock:
                self.connections.pop(conn_id, None)
            logger.info(f"WebSocket connection closed: {conn_id}")

    def dispatch(self, connection, raw):
        """Route one client message by its type"""
        try:
            message = json.loads(raw)
        except (TypeError, ValueError):
            self.send_error(connection, 'Invalid message')
            return
        if not isinstance(message, dict):
            self.send_error(connection, 'Invalid message')
            return

        message_type = message.get('type')
        try:
            messages = [ChatMessage.from_dict(m) for m in (message.get('messages') or [])]
        except (TypeError, ValueError):
            self.send_error(connection, 'Invalid messages')
            return

        if message_type == 'chat':
            self.handle_chat(connection, message.get('model') or '', messages)
        elif message_type == 'role':
            self.handle_role(connection, message.get('role') or '')
        elif message_type == 'search':
            if not messages:
                self.send_error(connection, 'Search needs a query message')
                return
            self.handle_search(connection, messages[-1].content)
        else:
            logger.debug(f"Ignoring WebSocket message of type {message_type!r}")

    def handle_chat(self, connection, model, messages):
        payload = {
            'model': model,
            'messages': [m.to_dict() for m in messages],
            'stream': True,
        }
        full_content = ''
        try:
            for update in stream_chat(self.client, payload):
                full_content = update['full_content']
                if update['content']:
                    self.send(connection, {
                        'type': 'stream',
                        'content': update['content'],
                        'full_content': full_content,
                        'done': update['done'],
                    })
                if update['done']:
                    self.send(connection, {
                        'type': 'done',
                        'content': full_content,
                    })
                    return
        except OllamaUnavailableError as e:
            logger.warning(f"WebSocket chat with {model} failed: {e}")
            self.send_error(connection, 'Failed to connect to the Ollama service')
            return

        self.send_error(connection, 'Chat stream ended before completion')

    def handle_role(self, connection, role):
        prompt = ROLE_PROMPTS.get(role)
        if prompt is None:
            self.send_error(connection, 'Unknown role')
            return
        self.send(connection, {
            'type': 'role',
            'content': prompt,
        })

    def handle_search(self, connection, query):
        self.send(connection, {
            'type': 'search',
            'content': 'Web search is under development, stay tuned!',
            'query': query,
            'results': [
                {
                    'title': 'Search result 1',
                    'url': 'https://example.com/1',
                    'snippet': 'Summary of search result 1',
                },
                {
                    'title': 'Search result 2',
                    'url': 'https://example.com/2',
                    'snippet': 'Summary of search result 2',
                },
            ],
        })

    def send_error(self, connection, content):
        self.send(connection, {
            'type': 'error',
            'content': content,
        })

    def send(self, connection, payload):
        try:
            connection.send(json.dumps(payload, ensure_ascii=False))
        except ConnectionClosed:
            logger.debug("Dropped message for a closed WebSocket connection")
