"""Constants and limits for the Slack MCP Gateway."""

SERVER_NAME = "slack-mcp-server"
SERVER_VERSION = "0.3.0"

# Ceiling applied to every list-style limit, whatever the caller asks for
MAX_LIST_LIMIT = 200
MIN_LIST_LIMIT = 1

DEFAULT_CHANNEL_LIST_LIMIT = 100
DEFAULT_HISTORY_LIMIT = 10
DEFAULT_THREAD_REPLIES_LIMIT = 100
DEFAULT_USER_LIST_LIMIT = 100
DEFAULT_FIND_USER_LIMIT = 5
DEFAULT_MENTIONS_SCAN_LIMIT = 50

MCP_SESSION_ID_HEADER = "mcp-session-id"

STREAMABLE_HTTP_PATH = "/mcp"
SSE_PATHS = ("/sse", "/sse/mcp")
SSE_MESSAGE_PREFIX = "/messages"

# users.list page size requested by slack_find_user while paging
USER_SEARCH_PAGE_SIZE = 1000

# Legacy message routes that carry the session id as a query parameter
SSE_QUERY_MESSAGE_PATHS = ("/message", "/sse/mcp")
SESSION_QUERY_ALIASES = ("sessionId", "sessionID", "session_id", "session")
