"""Cancellation implementation parts (see ``unified_llm.base.cancellation``)."""
