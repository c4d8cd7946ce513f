"""Memopad: markdown memos and user records."""
