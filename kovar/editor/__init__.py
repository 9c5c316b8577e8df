"""
编辑器协作模块 - 画布对象仓库与命名器挂接
"""

from .store import ShapeStore, attach_allocator, new_shape_id

__all__ = [
    "ShapeStore",
    "attach_allocator",
    "new_shape_id",
]
