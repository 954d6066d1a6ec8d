"""Dependency container and the factory that builds it."""

from multibase.core.container.container import Container
from multibase.core.container.factory import create_container

__all__ = ["Container", "create_container"]
