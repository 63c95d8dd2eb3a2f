"""
Language Profiles — Lexical declaration patterns for SDK source files.

This is structural extraction, not a compiler front end. A profile
knows how to recognise a declaration head, its name, its visibility
and its parameter list. It does not resolve types.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from agentcheck.core.errors import ConfigError
from agentcheck.symbols.models import SymbolKind, Visibility

# Comments and string/char literals, blanked before scanning so that
# braces and keywords inside them are invisible. Newlines are kept.
_NOISE = re.compile(
    r'//[^\n]*'
    r'|/\*.*?\*/'
    r'|"""(?:.|\n)*?"""'
    r'|"(?:\\.|[^"\\\n])*"'
    r"|'(?:\\.|[^'\\\n])+'",
    re.S,
)

_ANNOTATION = r"@[\w.]+(?:\([^()]*\))?"
_GENERIC = r"<(?:[^<>]|<(?:[^<>]|<[^<>]*>)*>)*>"


def strip_noise(source: str) -> str:
    """Blank comments and literals, preserving offsets and line breaks."""
    return _NOISE.sub(lambda m: re.sub(r"[^\n]", " ", m.group(0)), source)


def matching_close(text: str, open_pos: int) -> int:
    """Offset of the bracket closing the one at open_pos, or -1."""
    pairs = {"(": ")", "[": "]", "{": "}", "<": ">"}
    opener = text[open_pos]
    closer = pairs[opener]
    depth = 0
    for i in range(open_pos, len(text)):
        ch = text[i]
        if ch == opener:
            depth += 1
        elif ch == closer:
            if closer == ">" and i > 0 and text[i - 1] == "-":
                continue
            depth -= 1
            if depth == 0:
                return i
    return -1


def skip_type_params(text: str, pos: int) -> int:
    """Skip whitespace and a <...> type parameter list starting at pos."""
    cursor = pos
    while cursor < len(text) and text[cursor] in " \t":
        cursor += 1
    if cursor < len(text) and text[cursor] == "<":
        close = matching_close(text, cursor)
        if close != -1:
            return close + 1
    return pos


def split_top_level(params: str) -> list[str]:
    """Split a parameter list on commas that are not nested."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for i, ch in enumerate(params):
        if ch in "([{<":
            depth += 1
        elif ch in ")]}" or (ch == ">" and not (i > 0 and params[i - 1] == "-")):
            depth -= 1
        if ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    parts.append("".join(current))
    return [p.strip() for p in parts if p.strip()]


def _strip_default(param: str) -> tuple[str, bool]:
    depth = 0
    for i, ch in enumerate(param):
        if ch in "([{<":
            depth += 1
        elif ch in ")]}" or (ch == ">" and not (i > 0 and param[i - 1] == "-")):
            depth -= 1
        elif ch == "=" and depth == 0:
            return param[:i].strip(), True
    return param.strip(), False


def _tidy(text: str) -> str:
    text = re.sub(r"\s*<\s*", "<", text)
    text = re.sub(r"\s+>", ">", text)
    text = re.sub(r"\s+\?", "?", text)
    return re.sub(r"\s*,\s*", ", ", text)


def normalize_param(param: str) -> str:
    """Canonical spelling of one parameter: no annotations, single spaces."""
    param, _ = _strip_default(param)
    param = re.sub(_ANNOTATION + r"\s*", "", param)
    param = re.sub(r"\s+", " ", param).strip()
    param = re.sub(r"\s*:\s*", ": ", param)
    return _tidy(param)


def normalize_signature(params: str) -> str:
    """Canonical parameter list, used to compare against an expected shape."""
    return ", ".join(normalize_param(p) for p in split_top_level(params))


def param_arity(params: str) -> tuple[int, Optional[int]]:
    """(required, maximum) argument count; maximum is None for varargs."""
    required = 0
    total = 0
    variadic = False
    for param in split_top_level(params):
        total += 1
        _, has_default = _strip_default(param)
        if re.search(r"\bvararg\b|\.\.\.", param):
            variadic = True
        elif not has_default:
            required += 1
    return required, (None if variadic else total)


def normalize_type(type_text: str) -> str:
    type_text = re.split(r"\s+(?:by|get|set)\b", type_text, maxsplit=1)[0]
    return _tidy(re.sub(r"\s+", " ", type_text).strip())


@dataclass
class Member:
    """A property declared inside a header (constructor or record)."""
    name: str
    type: str
    visibility: Visibility


@dataclass
class Declaration:
    kind: SymbolKind
    name: str
    visibility: Visibility
    offset: int
    resume: int
    opens_type: bool = False
    record: bool = True
    companion: bool = False
    signature: Optional[str] = None
    arity: Optional[tuple[int, Optional[int]]] = None
    members: list[Member] = field(default_factory=list)


class LanguageProfile:
    """Base profile: scanner regex plus a declaration parser."""

    name = ""
    extensions: tuple[str, ...] = ()
    newline_ends_statement = False
    scanner: re.Pattern

    def at_statement_start(self, text: str, offset: int) -> bool:
        i = offset - 1
        while i >= 0 and text[i] in " \t\r":
            i -= 1
        if i < 0:
            return True
        if text[i] == "\n":
            if self.newline_ends_statement:
                return True
            while i >= 0 and text[i] in " \t\r\n":
                i -= 1
            if i < 0:
                return True
        return text[i] in "{};"

    def parse(self, text: str, m: re.Match, enclosing_kind: Optional[SymbolKind]) -> Optional[Declaration]:
        raise NotImplementedError


# =============================================================================
# Kotlin
# =============================================================================

_KT_MODIFIERS = (
    "public|private|internal|protected|open|abstract|final|sealed|data|enum|"
    "annotation|inner|value|inline|override|suspend|operator|infix|external|"
    "tailrec|const|lateinit|companion|actual|expect"
)
_KT_VISIBILITY = {
    "private": Visibility.PRIVATE,
    "protected": Visibility.PROTECTED,
    "internal": Visibility.INTERNAL,
}
_KT_NAME = re.compile(r"\s+(\w+)")
_KT_OBJECT_NAME = re.compile(r"[ \t]+(\w+)")
_KT_CTOR = re.compile(
    r"\s*(?:" + _ANNOTATION + r"\s+)*(?:(?:public|private|internal|protected)\s+)?"
    r"(?:constructor\s*)?\("
)
_KT_RECEIVER = r"(?:[\w.]+(?:" + _GENERIC + r")?\??\s*\.\s*)?"
_KT_FUN = re.compile(r"\s*(?:" + _GENERIC + r"\s*)?" + _KT_RECEIVER + r"(?P<name>\w+)\s*\(")
_KT_PROP = re.compile(
    r"\s*(?:" + _GENERIC + r"\s*)?" + _KT_RECEIVER
    + r"(?P<name>\w+)(?:[ \t]*:[ \t]*(?P<type>[^=\n;{]+))?"
)
_KT_CTOR_PARAM = re.compile(
    r"^\s*(?:" + _ANNOTATION + r"\s+)*"
    r"(?P<mods>(?:(?:public|private|internal|protected|override|open|final)\s+)*)"
    r"(?:val|var)\s+(?P<name>\w+)\s*:\s*(?P<type>.+?)\s*(?:=.*)?$",
    re.S,
)


def _kotlin_visibility(words: set[str]) -> Visibility:
    for word, visibility in _KT_VISIBILITY.items():
        if word in words:
            return visibility
    return Visibility.PUBLIC


class KotlinProfile(LanguageProfile):
    name = "kotlin"
    extensions = (".kt",)
    newline_ends_statement = True
    scanner = re.compile(
        r"(?P<open>\{)|(?P<close>\})|(?<![\w@.$])(?P<decl>"
        r"(?P<mods>(?:(?:" + _ANNOTATION + r"|" + _KT_MODIFIERS + r")\s+)*)"
        r"(?P<keyword>fun\s+interface|class|interface|object|fun|val|var)\b)"
    )

    def parse(self, text, m, enclosing_kind):
        words = set(re.findall(r"\b\w+\b", re.sub(_ANNOTATION, "", m.group("mods"))))
        visibility = _kotlin_visibility(words)
        keyword = " ".join(m.group("keyword").split())
        pos = m.end()

        if keyword in ("class", "interface", "fun interface"):
            nm = _KT_NAME.match(text, pos)
            if not nm:
                return None
            kind = SymbolKind.INTERFACE if "interface" in keyword else SymbolKind.CLASS
            decl = Declaration(kind, nm.group(1), visibility, nm.start(1), skip_type_params(text, nm.end()), opens_type=True)
            ctor = _KT_CTOR.match(text, decl.resume)
            if keyword == "class" and ctor:
                close = matching_close(text, ctor.end() - 1)
                if close == -1:
                    return decl
                decl.members = self._ctor_properties(text[ctor.end():close])
                decl.resume = close + 1
            return decl

        if keyword == "object":
            nm = _KT_OBJECT_NAME.match(text, pos)
            if nm:
                return Declaration(SymbolKind.CLASS, nm.group(1), visibility, nm.start(1), nm.end(), opens_type=True)
            if "companion" in words:
                return Declaration(
                    SymbolKind.CLASS, "Companion", visibility, m.start("keyword"), pos,
                    opens_type=True, record=False, companion=True,
                )
            return None

        if keyword == "fun":
            fm = _KT_FUN.match(text, pos)
            if not fm:
                return None
            close = matching_close(text, fm.end() - 1)
            if close == -1:
                return None
            params = text[fm.end():close]
            return Declaration(
                SymbolKind.METHOD, fm.group("name"), visibility, fm.start("name"), close + 1,
                signature=normalize_signature(params), arity=param_arity(params),
            )

        pm = _KT_PROP.match(text, pos)
        if not pm:
            return None
        type_text = pm.group("type")
        return Declaration(
            SymbolKind.FIELD, pm.group("name"), visibility, pm.start("name"), pm.end("name"),
            signature=normalize_type(type_text) if type_text else None,
        )

    def _ctor_properties(self, params: str) -> list[Member]:
        members = []
        for param in split_top_level(params):
            pm = _KT_CTOR_PARAM.match(param)
            if not pm:
                continue
            members.append(Member(
                name=pm.group("name"),
                type=normalize_type(pm.group("type")),
                visibility=_kotlin_visibility(set(pm.group("mods").split())),
            ))
        return members


# =============================================================================
# Java
# =============================================================================

_JAVA_MODIFIERS = (
    "public|private|protected|static|final|abstract|sealed|non-sealed|strictfp|"
    "synchronized|native|default|transient|volatile"
)
_JAVA_NOT_A_TYPE = {
    "return", "new", "throw", "else", "case", "package", "import", "assert",
    "yield", "goto", "break", "continue",
} | set(_JAVA_MODIFIERS.split("|"))


class JavaProfile(LanguageProfile):
    name = "java"
    extensions = (".java",)
    scanner = re.compile(
        r"(?P<open>\{)|(?P<close>\})|(?<![\w@.$])(?P<decl>"
        r"(?P<mods>(?:(?:" + _ANNOTATION + r"|" + _JAVA_MODIFIERS + r")\s+)*)"
        r"(?:(?P<keyword>class|interface|enum|record|@interface)\s+(?P<tname>\w+)"
        r"|(?:" + _GENERIC + r"\s+)?(?P<rtype>[\w.$]+(?:" + _GENERIC + r")?(?:\[\])*(?:\.\.\.)?)"
        r"\s+(?P<mname>\w+)\s*(?P<tail>[(=;])))"
    )

    def _visibility(self, words: set[str], enclosing_kind: Optional[SymbolKind]) -> Visibility:
        if "private" in words:
            return Visibility.PRIVATE
        if "protected" in words:
            return Visibility.PROTECTED
        if "public" in words or enclosing_kind is SymbolKind.INTERFACE:
            return Visibility.PUBLIC
        return Visibility.INTERNAL

    def parse(self, text, m, enclosing_kind):
        words = set(re.sub(_ANNOTATION, "", m.group("mods")).split())
        visibility = self._visibility(words, enclosing_kind)

        if m.group("keyword"):
            keyword = m.group("keyword")
            kind = SymbolKind.INTERFACE if keyword.endswith("interface") else SymbolKind.CLASS
            decl = Declaration(kind, m.group("tname"), visibility, m.start("tname"),
                               skip_type_params(text, m.end()), opens_type=True)
            if keyword == "record":
                cursor = decl.resume
                while cursor < len(text) and text[cursor] in " \t\r\n":
                    cursor += 1
                if cursor < len(text) and text[cursor] == "(":
                    close = matching_close(text, cursor)
                    if close != -1:
                        decl.members = self._record_components(text[cursor + 1:close])
                        decl.resume = close + 1
            return decl

        if m.group("rtype") in _JAVA_NOT_A_TYPE:
            return None

        name = m.group("mname")
        if m.group("tail") == "(":
            open_pos = m.end() - 1
            close = matching_close(text, open_pos)
            if close == -1:
                return None
            params = text[open_pos + 1:close]
            return Declaration(
                SymbolKind.METHOD, name, visibility, m.start("mname"), close + 1,
                signature=normalize_signature(params), arity=param_arity(params),
            )

        return Declaration(
            SymbolKind.FIELD, name, visibility, m.start("mname"), m.end("mname"),
            signature=normalize_type(m.group("rtype")),
        )

    def _record_components(self, params: str) -> list[Member]:
        members = []
        for param in split_top_level(params):
            parts = normalize_param(param).rsplit(" ", 1)
            if len(parts) == 2:
                members.append(Member(name=parts[1], type=parts[0], visibility=Visibility.PUBLIC))
        return members


# =============================================================================
# Registry
# =============================================================================

LANGUAGES: dict[str, LanguageProfile] = {
    "kotlin": KotlinProfile(),
    "java": JavaProfile(),
}


def get_language(name: str) -> LanguageProfile:
    try:
        return LANGUAGES[name.lower()]
    except KeyError:
        raise ConfigError(
            f"Unknown source language '{name}' (known: {', '.join(sorted(LANGUAGES))})"
        ) from None
