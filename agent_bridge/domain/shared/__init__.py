"""Shared domain components."""

from .domain_event import DomainEvent
from .entity import AggregateRoot, Entity
from .value_object import ValueObject

__all__ = ["Entity", "AggregateRoot", "ValueObject", "DomainEvent"]
