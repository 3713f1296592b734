"""Model parts package (see ``unified_llm.base.models`` for the public surface)."""
