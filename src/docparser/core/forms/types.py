"""
Form Types

Core data structures for forms read from dialect source text. A form is an
identifier, a string literal, a number, or a tuple of forms.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

KEYWORD_NAMESPACE = "keyword"
STANDARD_NAMESPACE = "core"


@dataclass(frozen=True)
class Identifier:
    """An unresolved identifier token as written in the source.
    
    Attributes:
        name: Bare name without any namespace prefix
        namespace: Namespace prefix, or None for an unqualified identifier
        internal: True for ``ns::name`` references
    """
    name: str
    namespace: Optional[str] = None
    internal: bool = False
    
    def __post_init__(self):
        """Validate identifier after creation."""
        if not isinstance(self.name, str) or not self.name:
            raise ValueError(f"Identifier name must be a non-empty string, got {self.name!r}")
    
    @property
    def is_keyword(self) -> bool:
        return self.namespace == KEYWORD_NAMESPACE
    
    @property
    def is_standard(self) -> bool:
        """True when unqualified or qualified with the standard namespace."""
        return self.namespace is None or self.namespace.lower() == STANDARD_NAMESPACE
    
    @property
    def is_qualified(self) -> bool:
        return self.namespace is not None
    
    def matches(self, name: str) -> bool:
        """Case-insensitive comparison of the bare name."""
        return self.name.lower() == name.lower()
    
    def __str__(self) -> str:
        if self.is_keyword:
            return f":{self.name}"
        if self.namespace is None:
            return self.name
        separator = "::" if self.internal else ":"
        return f"{self.namespace}{separator}{self.name}"


@dataclass(frozen=True)
class Character:
    """A character literal such as ``#\\a`` or ``#\\Space``."""
    name: str
    
    def __str__(self) -> str:
        return f"#\\{self.name}"


Form = Union[Identifier, Character, str, int, float, Tuple["Form", ...]]


def form_head(form: Form) -> Optional[Identifier]:
    """Return the leading identifier of a list form, or None."""
    if isinstance(form, tuple) and form and isinstance(form[0], Identifier):
        return form[0]
    return None


def is_setf_name(form: Form) -> bool:
    """Check for a compound ``(setf NAME)`` function name."""
    head = form_head(form)
    return (
        head is not None
        and head.matches("setf")
        and len(form) == 2
        and isinstance(form[1], Identifier)
    )


def keyword(name: str) -> Identifier:
    return Identifier(name, KEYWORD_NAMESPACE)
