"""
Completion providers, prompts and observability.

Submodules are imported directly (``news_digest.llm.providers``,
``news_digest.llm.tracing``) because config depends on the prompts.
"""
