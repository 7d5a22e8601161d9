"""tabletalk - Conversational data exploration for Trino.

tabletalk connects an OpenAI-compatible chat model to a small set of
read-only Trino tools and streams the resulting conversation as a
sequence of tagged events.

Key modules:

- :mod:`tabletalk.agent` - Streaming tool-use agent loop and its event types
- :mod:`tabletalk.tools` - Tool registry and the built-in Trino tools
- :mod:`tabletalk.trino` - Async client for the Trino HTTP protocol
- :mod:`tabletalk.llm` - LLM client abstraction (OpenAI-compatible endpoints)
- :mod:`tabletalk.server` - FastAPI app exposing the event stream over SSE
"""

__version__ = "0.1.0"
