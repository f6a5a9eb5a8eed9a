from __future__ import annotations

import bisect
import logging
import re
from dataclasses import dataclass, field

from convention_checker.models import ClassDecl, FieldDecl, ImportDecl, MethodDecl, SyntaxUnit

logger = logging.getLogger(__name__)


MODIFIERS = frozenset(
    {
        "public",
        "protected",
        "private",
        "static",
        "final",
        "abstract",
        "synchronized",
        "native",
        "transient",
        "volatile",
        "strictfp",
        "default",
        "sealed",
        "non-sealed",
    }
)

INTERFACE_KINDS = frozenset({"interface", "annotation"})

NOT_METHOD_NAMES = frozenset({"if", "for", "while", "switch", "catch", "synchronized", "return", "new", "throw"})

_ANNOTATION_RE = re.compile(r"@\s*([A-Za-z_$][\w$]*(?:\s*\.\s*[A-Za-z_$][\w$]*)*)")
_WORD_RE = re.compile(r"non-sealed\b|[A-Za-z_$][\w$]*")
_TYPE_DECL_RE = re.compile(r"(class|interface|enum|record|@\s*interface)\s+([A-Za-z_$][\w$]*)")
_MODULE_RE = re.compile(r"(?:open\s+)?module\s+[\w.]+\s*$")
_PACKAGE_RE = re.compile(r"package\s+([\w$.\s]+?)\s*$")
_IMPORT_RE = re.compile(r"import\s+(static\s+)?([\w$.\s]+?(?:\.\s*\*)?)\s*$")
_TRAILING_IDENT_RE = re.compile(r"([A-Za-z_$][\w$]*)\s*(?:\[\s*\]\s*)*$")

_OPENERS = {"(": ")", "[": "]", "{": "}"}


class ParseError(Exception):
    """A source file could not be read or scanned into a SyntaxUnit."""

    def __init__(self, file_path: str, message: str, line: int = 1, column: int = 1):
        super().__init__(f"{file_path}:{line}:{column}: {message}")
        self.file_path = file_path
        self.message = message
        self.line = line
        self.column = column


@dataclass
class _Scope:
    kind: str
    open_offset: int
    type_kind: str | None = None
    qualified_name: str | None = None
    constants_pending: bool = False
    skip_tail: bool = False
    method: dict | None = None
    field_tail: bool = False


@dataclass
class _Collected:
    package: str | None = None
    imports: list[ImportDecl] = field(default_factory=list)
    classes: list[ClassDecl] = field(default_factory=list)
    fields: list[FieldDecl] = field(default_factory=list)
    methods: list[MethodDecl] = field(default_factory=list)


def parse_java(source: str, file_path: str) -> SyntaxUnit:
    if source.startswith("\ufeff"):
        source = source[1:]

    code = blank_comments_and_literals(source, file_path)
    scanner = _DeclarationScanner(code, file_path)
    collected = scanner.run()

    lines = _split_lines(source)
    code_lines = _split_lines(code)

    return SyntaxUnit(
        path=file_path,
        package=collected.package,
        imports=tuple(collected.imports),
        classes=tuple(sorted(collected.classes, key=lambda item: (item.line, item.column))),
        fields=tuple(sorted(collected.fields, key=lambda item: (item.line, item.column))),
        methods=tuple(sorted(collected.methods, key=lambda item: (item.line, item.column))),
        lines=lines,
        code_lines=code_lines,
    )


def blank_comments_and_literals(source: str, file_path: str) -> str:
    """Replace comment bodies and string/char literal contents with spaces.

    Newlines are kept and quotes stay in place, so offsets, line numbers and
    columns in the result match the original text.
    """
    out = list(source)
    positions = _LinePositions(source)
    n = len(source)
    i = 0
    while i < n:
        ch = source[i]
        if ch == "/" and source.startswith("//", i):
            end = source.find("\n", i)
            if end == -1:
                end = n
            _blank(out, i, end)
            i = end
            continue
        if ch == "/" and source.startswith("/*", i):
            end = source.find("*/", i + 2)
            if end == -1:
                line, column = positions.at(i)
                raise ParseError(file_path, "unterminated block comment", line, column)
            _blank(out, i, end + 2)
            i = end + 2
            continue
        if source.startswith('"""', i):
            j = i + 3
            while j < n:
                if source[j] == "\\":
                    j += 2
                    continue
                if source.startswith('"""', j):
                    break
                j += 1
            else:
                line, column = positions.at(i)
                raise ParseError(file_path, "unterminated text block", line, column)
            _blank(out, i + 3, j)
            i = j + 3
            continue
        if ch in "\"'":
            j = i + 1
            while j < n:
                current = source[j]
                if current == "\\":
                    j += 2
                    continue
                if current == ch or current == "\n":
                    break
                j += 1
            if j >= n or source[j] != ch:
                line, column = positions.at(i)
                kind = "string" if ch == '"' else "character"
                raise ParseError(file_path, f"unterminated {kind} literal", line, column)
            _blank(out, i + 1, j)
            i = j + 1
            continue
        i += 1
    return "".join(out)


class _LinePositions:
    def __init__(self, text: str):
        self.starts = [0]
        for idx, ch in enumerate(text):
            if ch == "\n":
                self.starts.append(idx + 1)

    def at(self, offset: int) -> tuple[int, int]:
        line = bisect.bisect_right(self.starts, offset)
        return line, offset - self.starts[line - 1] + 1


class _DeclarationScanner:
    def __init__(self, code: str, file_path: str):
        self.code = code
        self.file_path = file_path
        self.positions = _LinePositions(code)
        self.stack: list[_Scope] = []
        self.result = _Collected()

    def run(self) -> _Collected:
        chunk_start = 0
        paren_depth = 0
        paren_open: list[int] = []

        for offset, ch in enumerate(self.code):
            if ch in "([":
                paren_depth += 1
                paren_open.append(offset)
                continue
            if ch in ")]":
                if paren_depth == 0:
                    self._fail(f"unbalanced '{ch}'", offset)
                paren_depth -= 1
                paren_open.pop()
                continue
            if paren_depth or ch not in "{};":
                continue

            text = self.code[chunk_start:offset]
            if ch == "{":
                self._open_brace(text, chunk_start, offset)
            elif ch == "}":
                self._close_brace(offset)
            else:
                self._statement(text, chunk_start)
            chunk_start = offset + 1

        if paren_open:
            self._fail("unclosed parenthesis", paren_open[-1])
        if self.stack:
            self._fail("unclosed '{'", self.stack[-1].open_offset)
        if self.code[chunk_start:].strip():
            self._fail("unexpected trailing text", chunk_start + _leading_ws(self.code[chunk_start:]))
        return self.result

    def _fail(self, message: str, offset: int) -> None:
        line, column = self.positions.at(offset)
        raise ParseError(self.file_path, message, line, column)

    def _scope(self) -> _Scope | None:
        return self.stack[-1] if self.stack else None

    def _open_brace(self, text: str, start: int, offset: int) -> None:
        scope = self._scope()
        if scope is not None and scope.kind == "block":
            self.stack.append(_Scope(kind="block", open_offset=offset))
            return

        annotations, modifiers, rest_start = _split_prefix(text)
        rest = text[rest_start:]
        match = _TYPE_DECL_RE.match(rest)
        if match:
            self._open_type(match, annotations, modifiers, start + rest_start, offset)
            return

        if scope is None:
            if _MODULE_RE.match(rest):
                self.stack.append(_Scope(kind="block", open_offset=offset))
                return
            self._fail("expected a type declaration", start + rest_start)

        if scope.constants_pending:
            # enum constant with a class body
            self.stack.append(_Scope(kind="block", open_offset=offset))
            return

        head = _parse_method_head(rest)
        if head is not None:
            name, return_type, parameters, name_offset = head
            line, column = self.positions.at(start + rest_start + name_offset)
            method = dict(
                name=name,
                return_type=return_type,
                owner=scope.qualified_name,
                owner_kind=scope.type_kind,
                modifiers=frozenset(modifiers),
                annotations=tuple(annotations),
                parameters=parameters,
                line=line,
                column=column,
            )
            body_line, _ = self.positions.at(offset)
            method["body_start"] = body_line
            self.stack.append(_Scope(kind="block", open_offset=offset, method=method))
            return

        if _find_depth0(rest, "=") != -1:
            self._add_fields(rest, start + rest_start, annotations, modifiers, scope)
            self.stack.append(_Scope(kind="block", open_offset=offset, field_tail=True))
            return

        if rest.strip() and rest.strip() != "static":
            logger.debug("%s: unrecognized member before '{' at offset %d", self.file_path, offset)
        self.stack.append(_Scope(kind="block", open_offset=offset))

    def _open_type(self, match: re.Match, annotations: list[str], modifiers: set[str], rest_offset: int, offset: int) -> None:
        keyword = re.sub(r"\s+", "", match.group(1))
        kind = "annotation" if keyword == "@interface" else keyword
        name = match.group(2)
        outer = self._scope()
        outer_name = outer.qualified_name if outer is not None else None
        qualified = f"{outer_name}.{name}" if outer_name else name
        line, column = self.positions.at(rest_offset + match.start(2))

        self.result.classes.append(
            ClassDecl(
                name=name,
                kind=kind,
                qualified_name=qualified,
                modifiers=frozenset(modifiers),
                annotations=tuple(annotations),
                outer=outer_name,
                line=line,
                column=column,
            )
        )
        self.stack.append(
            _Scope(
                kind="type",
                open_offset=offset,
                type_kind=kind,
                qualified_name=qualified,
                constants_pending=(kind == "enum"),
            )
        )

    def _close_brace(self, offset: int) -> None:
        if not self.stack:
            self._fail("unbalanced '}'", offset)
        closed = self.stack.pop()
        if closed.method is not None:
            method = dict(closed.method)
            body_start = method.pop("body_start")
            body_end, _ = self.positions.at(offset)
            self.result.methods.append(MethodDecl(body=(body_start, body_end), **method))
        if closed.field_tail and self.stack:
            self.stack[-1].skip_tail = True

    def _statement(self, text: str, start: int) -> None:
        scope = self._scope()
        if scope is None:
            self._top_level_statement(text, start)
            return
        if scope.kind == "block":
            return
        if scope.constants_pending:
            scope.constants_pending = False
            return
        if scope.skip_tail:
            scope.skip_tail = False
            return
        if not text.strip():
            return

        annotations, modifiers, rest_start = _split_prefix(text)
        rest = text[rest_start:]
        head = _parse_method_head(rest)
        if head is not None:
            name, return_type, parameters, name_offset = head
            line, column = self.positions.at(start + rest_start + name_offset)
            self.result.methods.append(
                MethodDecl(
                    name=name,
                    return_type=return_type,
                    owner=scope.qualified_name,
                    owner_kind=scope.type_kind,
                    modifiers=frozenset(modifiers),
                    annotations=tuple(annotations),
                    parameters=parameters,
                    line=line,
                    column=column,
                    body=None,
                )
            )
            return

        self._add_fields(rest, start + rest_start, annotations, modifiers, scope)

    def _top_level_statement(self, text: str, start: int) -> None:
        _, _, rest_start = _split_prefix(text)
        rest = text[rest_start:]
        if not rest.strip():
            return

        package = _PACKAGE_RE.match(rest)
        if package:
            self.result.package = re.sub(r"\s+", "", package.group(1))
            return

        imported = _IMPORT_RE.match(rest)
        if imported:
            line, column = self.positions.at(start + rest_start)
            self.result.imports.append(
                ImportDecl(
                    name=re.sub(r"\s+", "", imported.group(2)),
                    is_static=bool(imported.group(1)),
                    line=line,
                    column=column,
                )
            )
            return

        self._fail("unexpected statement outside of a type declaration", start + rest_start)

    def _add_fields(
        self,
        rest: str,
        rest_offset: int,
        annotations: list[str],
        modifiers: set[str],
        scope: _Scope,
    ) -> None:
        effective = set(modifiers)
        if scope.type_kind in INTERFACE_KINDS:
            effective.update({"public", "static", "final"})

        type_name: str | None = None
        for declarator_offset, declarator in _split_declarators(rest):
            eq = _find_depth0(declarator, "=")
            lhs = declarator if eq == -1 else declarator[:eq]
            match = _TRAILING_IDENT_RE.search(lhs)
            if not match:
                logger.debug("%s: could not read field declarator %r", self.file_path, declarator.strip())
                return
            name = match.group(1)
            if type_name is None:
                type_name = re.sub(r"\s+", " ", lhs[: match.start()]).strip()
                if not type_name:
                    logger.debug("%s: declaration without a type: %r", self.file_path, declarator.strip())
                    return
            line, column = self.positions.at(rest_offset + declarator_offset + match.start(1))
            self.result.fields.append(
                FieldDecl(
                    name=name,
                    type_name=type_name,
                    owner=scope.qualified_name,
                    owner_kind=scope.type_kind,
                    modifiers=frozenset(effective),
                    annotations=tuple(annotations),
                    initializer=None if eq == -1 else re.sub(r"\s+", " ", declarator[eq + 1 :]).strip(),
                    line=line,
                    column=column,
                )
            )


def _split_prefix(text: str) -> tuple[list[str], set[str], int]:
    """Consume leading annotations and modifiers, in any order."""
    annotations: list[str] = []
    modifiers: set[str] = set()
    pos = 0
    while True:
        pos += _leading_ws(text[pos:])
        if text.startswith("@", pos) and not re.match(r"@\s*interface\b", text[pos:]):
            match = _ANNOTATION_RE.match(text, pos)
            if not match:
                break
            annotations.append(re.sub(r"\s+", "", match.group(1)).split(".")[-1])
            pos = match.end()
            after = pos + _leading_ws(text[pos:])
            if text.startswith("(", after):
                pos = _matching_close(text, after) + 1
            continue
        match = _WORD_RE.match(text, pos)
        if match and match.group(0) in MODIFIERS:
            modifiers.add(match.group(0))
            pos = match.end()
            continue
        break
    return annotations, modifiers, pos


def _parse_method_head(rest: str) -> tuple[str, str | None, tuple[str, ...], int] | None:
    paren = rest.find("(")
    if paren == -1:
        return None
    eq = _find_depth0(rest, "=")
    if eq != -1 and eq < paren:
        return None

    head = rest[:paren].rstrip()
    match = re.search(r"([A-Za-z_$][\w$]*)$", head)
    if not match or match.group(1) in NOT_METHOD_NAMES:
        return None
    name = match.group(1)

    return_type = head[: match.start()].strip()
    if return_type.startswith("<"):
        return_type = return_type[_matching_angle(return_type, 0) + 1 :].strip()

    close = _matching_close(rest, paren)
    parameters = tuple(
        re.sub(r"\s+", " ", item).strip()
        for _, item in _split_declarators(rest[paren + 1 : close])
        if item.strip()
    )
    return name, (re.sub(r"\s+", " ", return_type) or None), parameters, match.start()


def _split_declarators(text: str) -> list[tuple[int, str]]:
    """Split on top-level commas; angle brackets count only outside initializers."""
    parts: list[tuple[int, str]] = []
    depth = 0
    angle = 0
    in_init = False
    start = 0
    for idx, ch in enumerate(text):
        if ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth -= 1
        elif ch == "<" and not in_init:
            angle += 1
        elif ch == ">" and not in_init and angle:
            angle -= 1
        elif ch == "=" and depth == 0 and angle == 0:
            in_init = True
        elif ch == "," and depth == 0 and angle == 0:
            parts.append((start, text[start:idx]))
            start = idx + 1
            in_init = False
    parts.append((start, text[start:]))
    return parts


def _find_depth0(text: str, target: str) -> int:
    depth = 0
    for idx, ch in enumerate(text):
        if ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth -= 1
        elif ch == target and depth == 0:
            if target == "=" and (text[idx + 1 : idx + 2] == "=" or text[idx - 1 : idx] in "=!<>"):
                continue
            return idx
    return -1


def _matching_close(text: str, open_index: int) -> int:
    closer = _OPENERS[text[open_index]]
    opener = text[open_index]
    depth = 0
    for idx in range(open_index, len(text)):
        if text[idx] == opener:
            depth += 1
        elif text[idx] == closer:
            depth -= 1
            if depth == 0:
                return idx
    return len(text) - 1


def _matching_angle(text: str, open_index: int) -> int:
    depth = 0
    for idx in range(open_index, len(text)):
        if text[idx] == "<":
            depth += 1
        elif text[idx] == ">":
            depth -= 1
            if depth == 0:
                return idx
    return len(text) - 1


def _leading_ws(text: str) -> int:
    return len(text) - len(text.lstrip())


def _blank(chars: list[str], start: int, end: int) -> None:
    for idx in range(start, end):
        if chars[idx] not in "\r\n":
            chars[idx] = " "


def _split_lines(text: str) -> tuple[str, ...]:
    lines = [line.rstrip("\r") for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return tuple(lines)
