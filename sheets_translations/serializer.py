"""Rendering translation trees as loadable modules and reading them back.

Output is formatted the way prettier formats ``module.exports = {...}`` with
``singleQuote: true, semi: false``, so repeated pulls of unchanged data produce
byte-identical files.
"""

import json
import re
from typing import Any, Dict, List, Tuple

MODULE_PREFIXES = {
    "js": "module.exports = ",
    "esm": "export default ",
}

INDENT = "  "

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_ESCAPES = {
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


class ModuleSyntaxError(ValueError):
    """Raised when a translation module cannot be parsed."""

    def __init__(self, message: str, text: str, position: int):
        line = text.count("\n", 0, position) + 1
        column = position - (text.rfind("\n", 0, position) + 1) + 1
        self.line = line
        self.column = column
        super().__init__(f"{message} (line {line}, column {column})")


def sort_arrays(value: Any) -> Any:
    """Return a copy of ``value`` with every nested list sorted canonically.

    Elements are ordered by their JSON encoding with sorted keys, which gives a
    total order across strings, numbers and objects alike.
    """
    if isinstance(value, dict):
        return {key: sort_arrays(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        items = [sort_arrays(item) for item in value]
        return sorted(items, key=_canonical)
    return value


def _canonical(value: Any) -> str:
    return json.dumps(value, sort_keys=True, ensure_ascii=False, default=str)


def quote_string(text: str) -> str:
    """Quote a string literal, preferring single quotes like prettier does."""
    quote = '"' if text.count("'") > text.count('"') else "'"
    parts = []
    for char in text:
        if char == quote:
            parts.append("\\" + char)
        elif char in _ESCAPES:
            parts.append(_ESCAPES[char])
        elif ord(char) < 0x20:
            parts.append(f"\\u{ord(char):04x}")
        else:
            parts.append(char)
    return quote + "".join(parts) + quote


def render_key(key: str) -> str:
    key = str(key)
    return key if _IDENTIFIER.match(key) else quote_string(key)


def render_value(value: Any, depth: int = 0) -> str:
    """Render a Python value as a JavaScript literal."""
    if isinstance(value, dict):
        if not value:
            return "{}"
        pad = INDENT * (depth + 1)
        lines = [f"{pad}{render_key(key)}: {render_value(item, depth + 1)}" for key, item in value.items()]
        return "{\n" + ",\n".join(lines) + "\n" + INDENT * depth + "}"
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        pad = INDENT * (depth + 1)
        lines = [f"{pad}{render_value(item, depth + 1)}" for item in value]
        return "[\n" + ",\n".join(lines) + "\n" + INDENT * depth + "]"
    if isinstance(value, str):
        return quote_string(value)
    if value is None or isinstance(value, (bool, int, float)):
        return json.dumps(value)
    return quote_string(str(value))


def render_module(tree: Dict[str, Any], fmt: str = "js") -> str:
    """Render a translation tree as the content of a translation file.

    Args:
        tree: Nested translation tree
        fmt: ``js`` (CommonJS), ``esm`` (ES module) or ``json``

    Returns:
        File content ending with a newline
    """
    sorted_tree = sort_arrays(tree)
    if fmt == "json":
        return json.dumps(sorted_tree, indent=2, ensure_ascii=False) + "\n"
    if fmt not in MODULE_PREFIXES:
        raise ValueError(f"Unknown translation file format: {fmt}")
    return MODULE_PREFIXES[fmt] + render_value(sorted_tree) + "\n"


def parse_module(text: str, fmt: str = "js") -> Dict[str, Any]:
    """Parse translation file content back into a translation tree.

    Raises:
        ModuleSyntaxError: If the content is not a supported module
    """
    if fmt == "json":
        try:
            tree = json.loads(text)
        except json.JSONDecodeError as e:
            raise ModuleSyntaxError(e.msg, text, e.pos) from e
        if not isinstance(tree, dict):
            raise ModuleSyntaxError("Expected a JSON object", text, 0)
        return tree

    return _ModuleParser(text).parse()


class _ModuleParser:
    """Recursive-descent parser for the object-literal subset rendered above.

    Accepts ``module.exports =`` or ``export default`` followed by an object
    literal made of objects, arrays, quoted strings, numbers, ``true``,
    ``false`` and ``null``, with comments and trailing commas.
    """

    _EXPORT = re.compile(r"(?:module\.exports\s*=|export\s+default\b)")
    _NUMBER = re.compile(r"[-+]?(?:0[xX][0-9a-fA-F]+|(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")
    _WORD = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
    _LITERALS = {"true": True, "false": False, "null": None}
    _SIMPLE_ESCAPES = {
        "n": "\n", "r": "\r", "t": "\t", "b": "\b", "f": "\f", "v": "\v",
        "'": "'", '"': '"', "\\": "\\", "/": "/",
    }

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def error(self, message: str) -> ModuleSyntaxError:
        return ModuleSyntaxError(message, self.text, self.pos)

    def parse(self) -> Dict[str, Any]:
        self.skip()
        self.skip_directive()
        match = self._EXPORT.match(self.text, self.pos)
        if not match:
            raise self.error("Expected 'module.exports =' or 'export default'")
        self.pos = match.end()
        self.skip()
        if self.peek() != "{":
            raise self.error("Expected the exported value to be an object")
        tree = self.value()
        self.skip()
        if self.peek() == ";":
            self.pos += 1
            self.skip()
        if self.pos < len(self.text):
            raise self.error("Unexpected content after the exported object")
        return tree

    def skip_directive(self) -> None:
        # 'use strict' prologue
        for directive in ("'use strict'", '"use strict"'):
            if self.text.startswith(directive, self.pos):
                self.pos += len(directive)
                self.skip()
                if self.peek() == ";":
                    self.pos += 1
                    self.skip()
                return

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip(self) -> None:
        text = self.text
        while self.pos < len(text):
            char = text[self.pos]
            if char.isspace():
                self.pos += 1
            elif text.startswith("//", self.pos):
                end = text.find("\n", self.pos)
                self.pos = len(text) if end == -1 else end + 1
            elif text.startswith("/*", self.pos):
                end = text.find("*/", self.pos + 2)
                if end == -1:
                    raise self.error("Unterminated comment")
                self.pos = end + 2
            else:
                break

    def expect(self, char: str) -> None:
        if self.peek() != char:
            raise self.error(f"Expected '{char}'")
        self.pos += 1

    def value(self) -> Any:
        char = self.peek()
        if char == "{":
            return self.object()
        if char == "[":
            return self.array()
        if char in ("'", '"'):
            return self.string()
        if char and (char.isdigit() or char in "-+."):
            return self.number()
        match = self._WORD.match(self.text, self.pos)
        if match and match.group() in self._LITERALS:
            self.pos = match.end()
            return self._LITERALS[match.group()]
        if not char:
            raise self.error("Unexpected end of file")
        raise self.error(f"Unsupported value starting with '{char}'")

    def object(self) -> Dict[str, Any]:
        self.expect("{")
        result: Dict[str, Any] = {}
        self.skip()
        while self.peek() != "}":
            key = self.key()
            self.skip()
            self.expect(":")
            self.skip()
            result[key] = self.value()
            if not self.separator("}"):
                break
        self.expect("}")
        return result

    def array(self) -> List[Any]:
        self.expect("[")
        result: List[Any] = []
        self.skip()
        while self.peek() != "]":
            result.append(self.value())
            if not self.separator("]"):
                break
        self.expect("]")
        return result

    def separator(self, closing: str) -> bool:
        """Consume a comma between items; False when the collection ends."""
        self.skip()
        if self.peek() == ",":
            self.pos += 1
            self.skip()
            return True
        if self.peek() != closing:
            raise self.error(f"Expected ',' or '{closing}'")
        return False

    def key(self) -> str:
        char = self.peek()
        if char in ("'", '"'):
            return self.string()
        match = self._WORD.match(self.text, self.pos)
        if match:
            self.pos = match.end()
            return match.group()
        match = self._NUMBER.match(self.text, self.pos)
        if match:
            self.pos = match.end()
            return match.group()
        raise self.error("Expected a property name")

    def number(self) -> Any:
        match = self._NUMBER.match(self.text, self.pos)
        if not match:
            raise self.error("Invalid number")
        self.pos = match.end()
        literal = match.group()
        if literal.lstrip("+-")[:2].lower() == "0x":
            return int(literal, 16)
        if any(char in literal for char in ".eE"):
            return float(literal)
        return int(literal)

    def string(self) -> str:
        quote = self.text[self.pos]
        self.pos += 1
        parts = []
        text = self.text
        while True:
            if self.pos >= len(text):
                raise self.error("Unterminated string")
            char = text[self.pos]
            if char == quote:
                self.pos += 1
                # escaped surrogate pairs such as \ud83d\ude00 become one character
                return "".join(parts).encode("utf-16", "surrogatepass").decode("utf-16", "surrogatepass")
            if char == "\n":
                raise self.error("Unterminated string")
            if char == "\\":
                decoded, self.pos = self.escape(self.pos + 1)
                parts.append(decoded)
                continue
            parts.append(char)
            self.pos += 1

    def escape(self, pos: int) -> Tuple[str, int]:
        text = self.text
        if pos >= len(text):
            raise self.error("Unterminated string")
        char = text[pos]
        if char in self._SIMPLE_ESCAPES:
            return self._SIMPLE_ESCAPES[char], pos + 1
        if char == "0" and not text[pos + 1:pos + 2].isdigit():
            return "\0", pos + 1
        if char == "x":
            return chr(self.hex_digits(pos + 1, 2)), pos + 3
        if char == "u":
            if text[pos + 1:pos + 2] == "{":
                end = text.find("}", pos + 2)
                if end == -1:
                    raise self.error("Invalid unicode escape")
                return chr(self.hex_digits(pos + 2, end - pos - 2)), end + 1
            return chr(self.hex_digits(pos + 1, 4)), pos + 5
        if char == "\r" and text[pos + 1:pos + 2] == "\n":
            return "", pos + 2
        if char in "\n\r\u2028\u2029":
            # line continuation
            return "", pos + 1
        return char, pos + 1

    def hex_digits(self, start: int, length: int) -> int:
        digits = self.text[start:start + length]
        if length == 0 or len(digits) != length or any(c not in "0123456789abcdefABCDEF" for c in digits):
            raise self.error("Invalid escape sequence")
        return int(digits, 16)
