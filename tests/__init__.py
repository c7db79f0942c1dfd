"""
Sora Prompt Genie Test Suite

Tests for:
- Prompt session core (history, debounce, reconciler, suggestion cache)
- HTTP API client
- Prompt API routes, schemas and middleware
- LLM and Langflow services

Run tests with:
    pytest tests/ -v

Run without network tests:
    pytest tests/ -v --skip-integration
"""
