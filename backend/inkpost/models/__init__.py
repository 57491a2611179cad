"""
ORM models. Importing the package registers every mapped class on
Base.metadata so relationships resolve regardless of which model a caller
imports first.
"""

from inkpost.models.user import User
from inkpost.models.post import Image, Post

__all__ = ["User", "Post", "Image"]
