"""
Sellpoint package.

Provides:
- A generation pipeline that turns a product description into marketing copy
  via an OpenAI-compatible chat-completion API
- A FastAPI service exposing the pipeline behind a per-caller rate limit
"""
