"""Index implementations."""

from .term_index import TermIndex, init_index

__all__ = ['TermIndex', 'init_index']
