"""
Form Reader Module

Reads dialect source text into forms. Lists become tuples, string literals
become ``str``, numeric tokens become ``int``/``float``, ``#\\x`` literals
become Character and every other token becomes an Identifier. Quote-style
prefixes are expanded into their list forms (``'x`` reads as ``(quote x)``).

Usage:
    >>> forms = read_forms('(defun greet (name) "Greets a person.")')
    >>> forms[0][3]
    'Greets a person.'
"""

import logging
import re
from typing import List, Optional

from ...exceptions import ReaderError
from .types import Character, Form, Identifier, KEYWORD_NAMESPACE

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"^[+-]?\d+$")
_FLOAT = re.compile(r"^[+-]?(\d+\.\d*|\.\d+|\d+)([eE][+-]?\d+)?$")
_DELIMITERS = set("()'`,\";")

_PREFIXES = {
    "'": "quote",
    "`": "quasiquote",
    ",": "unquote",
    ",@": "unquote-splicing",
    "#'": "function",
}


class Reader:
    """Single-pass reader over one source text with line/column tracking."""
    
    def __init__(self, text: str, source: Optional[str] = None) -> None:
        self.text = text
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
    
    def error(self, message: str) -> ReaderError:
        return ReaderError(message, self.line, self.column, self.source)
    
    def _peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else ""
    
    def _advance(self) -> str:
        char = self.text[self.pos]
        self.pos += 1
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char
    
    def _skip_block_comment(self) -> None:
        start_line, start_column = self.line, self.column
        self._advance()
        self._advance()
        depth = 1
        while depth:
            if self.pos >= len(self.text):
                raise ReaderError("unterminated block comment", start_line, start_column, self.source)
            if self._peek() == "|" and self._peek(1) == "#":
                depth -= 1
                self._advance()
            elif self._peek() == "#" and self._peek(1) == "|":
                depth += 1
                self._advance()
            self._advance()
    
    def _skip_atmosphere(self) -> None:
        while self.pos < len(self.text):
            char = self._peek()
            if char.isspace():
                self._advance()
            elif char == ";":
                while self.pos < len(self.text) and self._peek() != "\n":
                    self._advance()
            elif char == "#" and self._peek(1) == "|":
                self._skip_block_comment()
            else:
                break
    
    def at_end(self) -> bool:
        self._skip_atmosphere()
        return self.pos >= len(self.text)
    
    def read(self) -> Form:
        """Read the next form. Call only when ``at_end()`` is False."""
        self._skip_atmosphere()
        if self.pos >= len(self.text):
            raise self.error("unexpected end of input")
        
        char = self._peek()
        if char == "(":
            return self._read_list()
        if char == ")":
            raise self.error("unbalanced closing parenthesis")
        if char == '"':
            return self._read_string()
        if char == "#" and self._peek(1) == "\\":
            return self._read_character()
        
        for prefix in (",@", "#'", "'", "`", ","):
            if self.text.startswith(prefix, self.pos):
                for _ in prefix:
                    self._advance()
                if self.at_end():
                    raise self.error(f"missing form after {prefix!r}")
                return (Identifier(_PREFIXES[prefix]), self.read())
        
        return self._read_atom()
    
    def _read_list(self) -> Form:
        start_line, start_column = self.line, self.column
        self._advance()
        items = []
        while True:
            self._skip_atmosphere()
            if self.pos >= len(self.text):
                raise ReaderError("unbalanced opening parenthesis", start_line, start_column, self.source)
            if self._peek() == ")":
                self._advance()
                return tuple(items)
            items.append(self.read())
    
    def _read_string(self) -> str:
        start_line, start_column = self.line, self.column
        self._advance()
        chars = []
        while True:
            if self.pos >= len(self.text):
                raise ReaderError("unterminated string literal", start_line, start_column, self.source)
            char = self._advance()
            if char == "\\":
                if self.pos >= len(self.text):
                    raise ReaderError("unterminated string literal", start_line, start_column, self.source)
                chars.append(self._advance())
            elif char == '"':
                return "".join(chars)
            else:
                chars.append(char)
    
    def _read_character(self) -> Character:
        self._advance()
        self._advance()
        if self.pos >= len(self.text):
            raise self.error("missing character after '#\\'")
        start = self.pos
        self._advance()
        while self.pos < len(self.text):
            char = self._peek()
            if char.isspace() or char in _DELIMITERS or char == ")":
                break
            self._advance()
        return Character(self.text[start:self.pos])
    
    def _read_atom(self) -> Form:
        start = self.pos
        while self.pos < len(self.text):
            char = self._peek()
            if char.isspace() or char in _DELIMITERS or char == ")":
                break
            self._advance()
        token = self.text[start:self.pos]
        
        if _INTEGER.match(token):
            return int(token)
        if _FLOAT.match(token):
            return float(token)
        return self._parse_identifier(token)
    
    def _parse_identifier(self, token: str) -> Identifier:
        if token.startswith(":"):
            if len(token) == 1 or ":" in token[1:]:
                raise self.error(f"malformed keyword {token!r}")
            return Identifier(token[1:], KEYWORD_NAMESPACE)
        
        if "::" in token:
            namespace, _, name = token.partition("::")
            internal = True
        elif ":" in token:
            namespace, _, name = token.partition(":")
            internal = False
        else:
            return Identifier(token)
        
        if not namespace or not name or ":" in name:
            raise self.error(f"malformed qualified identifier {token!r}")
        return Identifier(name, namespace, internal)


def read_forms(text: str, source: Optional[str] = None) -> List[Form]:
    """Read every top-level form in ``text``.
    
    Args:
        text: Source text
        source: File name used in error messages
        
    Returns:
        List of forms in source order
        
    Raises:
        ReaderError: If the text is malformed
    """
    reader = Reader(text, source)
    forms = []
    while not reader.at_end():
        forms.append(reader.read())
    logger.debug("Read %d forms from %s", len(forms), source or "<string>")
    return forms
