"""
Extraction-related exceptions for docparser.

Every failure during a parse aborts the parse; these classes carry enough
context (identifier, system, form) to report where it happened.
"""

from typing import Any, Optional


class DocparserError(Exception):
    """Base exception for all extraction errors."""
    pass


class ResolutionError(DocparserError):
    """Raised when an identifier cannot be resolved to a defining namespace."""
    
    def __init__(self, message: str, identifier: Optional[Any] = None) -> None:
        """
        Initialize resolution error.
        
        Args:
            message: Error description
            identifier: The identifier that failed to resolve
        """
        super().__init__(message)
        self.identifier = identifier


class LoadError(DocparserError):
    """Raised when a system or one of its dependencies fails to load."""
    
    def __init__(self, message: str, system: Optional[str] = None) -> None:
        """
        Initialize load error.
        
        Args:
            message: Error description
            system: Name of the system being loaded when the failure occurred
        """
        super().__init__(message)
        self.system = system


class HandlerError(DocparserError):
    """Raised when a form handler cannot destructure a recognized form."""
    
    def __init__(self, message: str, form: Optional[Any] = None) -> None:
        super().__init__(message)
        self.form = form


class ReaderError(DocparserError):
    """Raised for malformed source text."""
    
    def __init__(
        self,
        message: str,
        line: int = 0,
        column: int = 0,
        source: Optional[str] = None
    ) -> None:
        """
        Initialize reader error.
        
        Args:
            message: Error description
            line: 1-based line where the problem was detected
            column: 1-based column where the problem was detected
            source: Name of the file being read, if any
        """
        location = f"{source or '<string>'}:{line}:{column}"
        super().__init__(f"{location}: {message}")
        self.line = line
        self.column = column
        self.source = source


class EvaluationError(DocparserError):
    """Raised by the compilation pipeline when a top-level form cannot be evaluated."""
    
    def __init__(self, message: str, form: Optional[Any] = None) -> None:
        super().__init__(message)
        self.form = form


class HookSlotBusyError(DocparserError):
    """Raised on unpaired acquire/release of the pipeline's expansion-hook slot."""
    pass
