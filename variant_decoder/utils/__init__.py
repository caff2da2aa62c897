"""
Utility modules for VARDEC.

Author: Kevin R. Roy
"""

from .sequence import (
    common_prefix_length,
    common_suffix_length,
    is_numeric,
    trim_common_suffix,
)

__all__ = [
    'common_prefix_length',
    'common_suffix_length',
    'trim_common_suffix',
    'is_numeric',
]
