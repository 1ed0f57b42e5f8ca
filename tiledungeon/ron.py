"""
RON (Rusty Object Notation) reader for map configuration files.

Only reading is supported. Values map onto plain Python types:

    Config(width: 640)      -> {"width": 640}     (struct name dropped)
    (16, 32)                -> (16, 32)
    [1, 2]                  -> [1, 2]
    {"a": 1}                -> {"a": 1}
    Some(3) / None          -> 3 / None
    Floor                   -> "Floor"            (unit enum variant)
"""

import math
from typing import Any, Dict, IO, List


class RonError(ValueError):
    """Raised when RON text cannot be parsed."""

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"{message} (line {line}, column {column})")
        self.line = line
        self.column = column


_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "'": "'",
}

_IDENT_START = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
_IDENT_CHARS = _IDENT_START | set("0123456789")
_NUMBER_CHARS = set("0123456789abcdefABCDEFxob_.+-")


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    # --- Position helpers ---

    def error(self, message: str, pos: int = -1) -> RonError:
        if pos < 0:
            pos = self.pos
        line = self.text.count("\n", 0, pos) + 1
        column = pos - (self.text.rfind("\n", 0, pos) + 1) + 1
        return RonError(message, line, column)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def expect(self, char: str) -> None:
        self.skip_whitespace()
        if self.peek() != char:
            found = self.peek() or "end of input"
            raise self.error(f"Expected '{char}', found '{found}'")
        self.pos += 1

    def skip_whitespace(self) -> None:
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char.isspace():
                self.pos += 1
            elif self.text.startswith("//", self.pos):
                end = self.text.find("\n", self.pos)
                self.pos = len(self.text) if end == -1 else end + 1
            elif self.text.startswith("/*", self.pos):
                self.skip_block_comment()
            else:
                break

    def skip_block_comment(self) -> None:
        start = self.pos
        depth = 0
        while self.pos < len(self.text):
            if self.text.startswith("/*", self.pos):
                depth += 1
                self.pos += 2
            elif self.text.startswith("*/", self.pos):
                depth -= 1
                self.pos += 2
                if depth == 0:
                    return
            else:
                self.pos += 1
        raise self.error("Unterminated block comment", start)

    # --- Top level ---

    def parse_document(self) -> Any:
        self.skip_whitespace()
        while self.text.startswith("#![", self.pos):
            end = self.text.find("]", self.pos)
            # enable(...) attributes contain parentheses but no brackets
            if end == -1:
                raise self.error("Unterminated extension attribute")
            self.pos = end + 1
            self.skip_whitespace()

        value = self.parse_value()
        self.skip_whitespace()
        if self.pos != len(self.text):
            raise self.error(f"Unexpected trailing content '{self.peek()}'")
        return value

    def parse_value(self) -> Any:
        self.skip_whitespace()
        char = self.peek()
        if not char:
            raise self.error("Unexpected end of input")
        if char == "(":
            return self.parse_parenthesized()
        if char == "[":
            return self.parse_list()
        if char == "{":
            return self.parse_map()
        if char == '"':
            return self.parse_string()
        if char == "r" and self.text.startswith(('r"', "r#"), self.pos):
            return self.parse_raw_string()
        if char == "'":
            return self.parse_char()
        if char.isdigit() or char in "+-.":
            return self.parse_number()
        if char in _IDENT_START:
            return self.parse_identifier_value()
        raise self.error(f"Unexpected character '{char}'")

    # --- Compound values ---

    def parse_identifier(self) -> str:
        start = self.pos
        while self.peek() and self.peek() in _IDENT_CHARS:
            self.pos += 1
        return self.text[start : self.pos]

    def parse_identifier_value(self) -> Any:
        start = self.pos
        name = self.parse_identifier()

        if name == "true":
            return True
        if name == "false":
            return False
        if name == "None":
            return None
        if name in ("inf", "NaN"):
            return math.inf if name == "inf" else math.nan

        self.skip_whitespace()
        if name == "Some":
            if self.peek() != "(":
                raise self.error("Expected '(' after Some", start)
            self.pos += 1
            value = self.parse_value()
            self.skip_whitespace()
            if self.peek() == ",":
                self.pos += 1
            self.expect(")")
            return value

        if self.peek() == "(":
            # Named struct or tuple struct; the name carries no data
            return self.parse_parenthesized()
        return name

    def parse_parenthesized(self) -> Any:
        """Parses either a struct body `(a: 1)` or a tuple `(1, 2)`."""
        self.expect("(")
        self.skip_whitespace()
        if self.peek() == ")":
            self.pos += 1
            return ()

        if self.looks_like_field():
            return self.parse_struct_fields()

        items: List[Any] = []
        while True:
            items.append(self.parse_value())
            self.skip_whitespace()
            if self.peek() == ",":
                self.pos += 1
                self.skip_whitespace()
                if self.peek() == ")":
                    self.pos += 1
                    break
                continue
            self.expect(")")
            break
        return tuple(items)

    def looks_like_field(self) -> bool:
        saved = self.pos
        try:
            if not self.peek() or self.peek() not in _IDENT_START:
                return False
            self.parse_identifier()
            self.skip_whitespace()
            return self.peek() == ":"
        finally:
            self.pos = saved

    def parse_struct_fields(self) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        while True:
            self.skip_whitespace()
            if self.peek() == ")":
                self.pos += 1
                return fields

            key_pos = self.pos
            if not self.peek() or self.peek() not in _IDENT_START:
                raise self.error("Expected field name")
            key = self.parse_identifier()
            if key in fields:
                raise self.error(f"Duplicate field '{key}'", key_pos)
            self.expect(":")
            fields[key] = self.parse_value()

            self.skip_whitespace()
            if self.peek() == ",":
                self.pos += 1
            elif self.peek() != ")":
                raise self.error("Expected ',' or ')' after struct field")

    def parse_list(self) -> List[Any]:
        self.expect("[")
        items: List[Any] = []
        while True:
            self.skip_whitespace()
            if self.peek() == "]":
                self.pos += 1
                return items
            items.append(self.parse_value())
            self.skip_whitespace()
            if self.peek() == ",":
                self.pos += 1
            elif self.peek() != "]":
                raise self.error("Expected ',' or ']' in list")

    def parse_map(self) -> Dict[Any, Any]:
        self.expect("{")
        entries: Dict[Any, Any] = {}
        while True:
            self.skip_whitespace()
            if self.peek() == "}":
                self.pos += 1
                return entries
            key_pos = self.pos
            key = self.parse_value()
            try:
                hash(key)
            except TypeError:
                raise self.error("Map keys must be hashable", key_pos) from None
            self.expect(":")
            entries[key] = self.parse_value()
            self.skip_whitespace()
            if self.peek() == ",":
                self.pos += 1
            elif self.peek() != "}":
                raise self.error("Expected ',' or '}' in map")

    # --- Scalars ---

    def parse_number(self) -> Any:
        start = self.pos
        while self.peek() and self.peek() in _NUMBER_CHARS:
            # A sign is only part of the number at the start or after an exponent
            if self.peek() in "+-" and self.pos != start and self.text[self.pos - 1] not in "eE":
                break
            self.pos += 1
        literal = self.text[start : self.pos]

        if literal in ("+", "-") and self.text.startswith("inf", self.pos):
            self.pos += 3
            return -math.inf if literal == "-" else math.inf

        cleaned = literal.replace("_", "")
        sign = 1
        body = cleaned
        if body and body[0] in "+-":
            sign = -1 if body[0] == "-" else 1
            body = body[1:]

        try:
            for prefix, base in (("0x", 16), ("0o", 8), ("0b", 2)):
                if body.lower().startswith(prefix):
                    return sign * int(body[2:], base)
            if any(c in body for c in ".eE"):
                return sign * float(body)
            return sign * int(body, 10)
        except ValueError:
            raise self.error(f"Invalid number '{literal}'", start) from None

    def parse_escape(self) -> str:
        # self.pos is just past the backslash
        char = self.peek()
        if char in _ESCAPES:
            self.pos += 1
            return _ESCAPES[char]
        if char == "u" and self.text.startswith("u{", self.pos):
            end = self.text.find("}", self.pos)
            if end == -1:
                raise self.error("Unterminated unicode escape")
            digits = self.text[self.pos + 2 : end]
            try:
                code = int(digits, 16)
            except ValueError:
                raise self.error(f"Invalid unicode escape '{digits}'") from None
            # Same range as a Rust char: no surrogates, nothing past U+10FFFF
            if not 0 <= code <= 0x10FFFF or 0xD800 <= code <= 0xDFFF:
                raise self.error(f"Unicode escape '{digits}' is not a valid character")
            self.pos = end + 1
            return chr(code)
        raise self.error(f"Invalid escape '\\{char}'")

    def parse_string(self) -> str:
        start = self.pos
        self.pos += 1
        chars: List[str] = []
        while True:
            char = self.peek()
            if not char:
                raise self.error("Unterminated string", start)
            self.pos += 1
            if char == '"':
                return "".join(chars)
            if char == "\\":
                chars.append(self.parse_escape())
            else:
                chars.append(char)

    def parse_raw_string(self) -> str:
        start = self.pos
        self.pos += 1  # r
        hashes = 0
        while self.peek() == "#":
            hashes += 1
            self.pos += 1
        if self.peek() != '"':
            raise self.error("Expected '\"' in raw string", start)
        self.pos += 1
        terminator = '"' + "#" * hashes
        end = self.text.find(terminator, self.pos)
        if end == -1:
            raise self.error("Unterminated raw string", start)
        value = self.text[self.pos : end]
        self.pos = end + len(terminator)
        return value

    def parse_char(self) -> str:
        start = self.pos
        self.pos += 1
        char = self.peek()
        if not char:
            raise self.error("Unterminated char literal", start)
        self.pos += 1
        if char == "\\":
            char = self.parse_escape()
        if self.peek() != "'":
            raise self.error("Char literal must hold exactly one character", start)
        self.pos += 1
        return char


def loads(text: str) -> Any:
    """Parses a RON document from a string."""
    return _Parser(text).parse_document()


def load(fp: IO[str]) -> Any:
    """Parses a RON document from a text file object."""
    return loads(fp.read())


