"""Shared page envelope for paginated listings"""
from pydantic import BaseModel


class PageMeta(BaseModel):
    current_page: int
    per_page: int
    total: int
    last_page: int
