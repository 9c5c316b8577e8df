"""
命名模块 - kovar_id 自动分配与去重
"""

from .allocator import NameAllocator, next_name, parse_name_number

__all__ = [
    "NameAllocator",
    "next_name",
    "parse_name_number",
]
