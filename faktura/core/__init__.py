"""Core domain layer - entities, interfaces, services and exceptions."""

from faktura.core import entities, exceptions, interfaces

__all__ = ["entities", "interfaces", "exceptions"]
