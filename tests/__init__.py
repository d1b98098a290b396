"""
Test suite for Oracle Earth

- Simulation layer: time cursor, crisis feed, scenario evaluator, session
- LLM gateway adapter with a mocked OpenAI client
- Analyst fallbacks, SQLite storage, API endpoints and CLI
"""
