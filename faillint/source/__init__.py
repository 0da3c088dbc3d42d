"""Parsed Go source model, parser and comment map."""

from .comment_map import CommentMap
from .models import Comment, CommentGroup, ImportSpec, Position, SourceFile
from .parser import GoSourceParser

__all__ = [
    "Comment",
    "CommentGroup",
    "CommentMap",
    "GoSourceParser",
    "ImportSpec",
    "Position",
    "SourceFile",
]
