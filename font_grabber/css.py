"""Regex-level extraction of font declarations from CSS text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from font_grabber.urls import font_format, is_font_related_url, resolve_url

FONT_FACE_RE = re.compile(r"@font-face\s*{([^}]*)}", re.I)
IMPORT_RE = re.compile(
    r"@import\s+(?:url\(\s*(?:\"([^\"]+)\"|'([^']+)'|([^)\s]+))\s*\)|\"([^\"]+)\"|'([^']+)')",
    re.I,
)
FAMILY_RULE_RE = re.compile(r"([^{}]*){[^{}]*?(?<![-\w])font-family\s*:\s*([^;}]+)[^}]*}", re.I)
SHORTHAND_RULE_RE = re.compile(r"([^{}]*){[^{}]*?(?<![-\w])font\s*:\s*([^;}]+)[^}]*}", re.I)
FONT_FAMILY_VALUE_RE = re.compile(r"(?<![-\w])font-family\s*:\s*([^;}]+)", re.I)
FONT_FILE_RE = re.compile(
    r"url\(\s*['\"]?([^'\")]+?\.(?:woff2?|ttf|otf|eot)(?:\?[^'\")#]*)?(?:#[^'\")]*)?)['\"]?\s*\)",
    re.I,
)
VARIABLE_NAME_TOKENS = ("font", "typeface", "text")


@dataclass(frozen=True)
class FontFaceDeclaration:
    family: str
    src: str
    style: str = "normal"
    weight: str = "normal"
    display: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "fontFamily": self.family,
            "src": self.src,
            "style": self.style,
            "weight": self.weight,
            "display": self.display,
        }


@dataclass(frozen=True)
class FamilyUsage:
    selector: str
    value: str
    shorthand: bool = False

    def to_dict(self) -> Dict[str, object]:
        out: Dict[str, object] = {"selector": self.selector, "value": self.value}
        if self.shorthand:
            out["shorthand"] = True
        return out


@dataclass(frozen=True)
class FontFileReference:
    url: str
    format: str

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.url, "type": "font-file", "format": self.format}


@dataclass(frozen=True)
class ImportReference:
    url: str

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.url, "type": "css-import-font"}


def strip_comments(css: str) -> str:
    return re.sub(r"/\*.*?\*/", "", css, flags=re.S)


def strip_quotes(value: str) -> str:
    return value.replace('"', "").replace("'", "")


def clean_css_value(value: Optional[str]) -> Optional[str]:
    if not value:
        return value
    return re.sub(r"\s*!important\s*", "", value, flags=re.I).strip()


def split_declarations(block: str) -> List[str]:
    """Split a declaration block on semicolons outside parentheses and quotes."""
    parts: List[str] = []
    buf: List[str] = []
    depth = 0
    quote = ""
    for ch in block:
        if quote:
            if ch == quote:
                quote = ""
        elif ch in "\"'":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")" and depth:
            depth -= 1
        elif ch == ";" and depth == 0:
            parts.append("".join(buf))
            buf = []
            continue
        buf.append(ch)
    parts.append("".join(buf))
    return parts


def parse_declarations(block: str) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for part in split_declarations(block):
        if ":" not in part:
            continue
        prop, val = part.split(":", 1)
        prop = prop.strip().lower()
        val = val.strip()
        if prop and val:
            out[prop] = val
    return out


def extract_font_faces(css_text: str) -> List[FontFaceDeclaration]:
    """Every ``@font-face`` rule that names a family, in source order.

    Rules for the same family are kept apart; weight and style variants are
    distinct faces.
    """
    faces: List[FontFaceDeclaration] = []
    for match in FONT_FACE_RE.finditer(strip_comments(css_text or "")):
        decls = parse_declarations(match.group(1))
        family = strip_quotes(clean_css_value(decls.get("font-family")) or "").strip()
        if not family:
            continue
        faces.append(
            FontFaceDeclaration(
                family=family,
                src=decls.get("src", ""),
                style=clean_css_value(decls.get("font-style")) or "normal",
                weight=clean_css_value(decls.get("font-weight")) or "normal",
                display=clean_css_value(decls.get("font-display")) or "",
            )
        )
    return faces


def extract_imports(css_text: str, base_url: str) -> List[ImportReference]:
    refs: List[ImportReference] = []
    for match in IMPORT_RE.finditer(strip_comments(css_text or "")):
        raw = next((g for g in match.groups() if g), "")
        url = resolve_url(raw, base_url)
        if url and is_font_related_url(url):
            refs.append(ImportReference(url))
    return refs


def shorthand_family(value: str) -> Optional[str]:
    # Approximation: the last space-separated token of a ``font`` shorthand is
    # taken as the family, which misses multi-family stacks.
    parts = value.split(" ")
    if len(parts) < 2:
        return None
    last = parts[-1]
    if not last or last[0].isdigit():
        return None
    return strip_quotes(last)


def rule_selector(prelude: str) -> str:
    # Statements such as @charset end in ";" and precede the selector.
    return prelude.rsplit(";", 1)[-1].strip()


def extract_font_families(css_text: str) -> List[FamilyUsage]:
    css = strip_comments(css_text or "")
    usages: List[FamilyUsage] = []
    for match in FAMILY_RULE_RE.finditer(css):
        selector = rule_selector(match.group(1))
        if selector.lower().startswith("@font-face"):
            continue
        usages.append(FamilyUsage(selector, strip_quotes(match.group(2).strip())))
    for match in SHORTHAND_RULE_RE.finditer(css):
        family = shorthand_family(match.group(2).strip())
        if family:
            usages.append(FamilyUsage(rule_selector(match.group(1)), family, shorthand=True))
    return usages


def extract_font_files(css_text: str, base_url: str) -> List[FontFileReference]:
    refs: List[FontFileReference] = []
    for match in FONT_FILE_RE.finditer(strip_comments(css_text or "")):
        url = resolve_url(match.group(1), base_url)
        if url:
            refs.append(FontFileReference(url, font_format(url)))
    return refs


def extract_font_stacks(css_text: str) -> List[str]:
    stacks: List[str] = []
    css = FONT_FACE_RE.sub("", strip_comments(css_text or ""))
    for match in FONT_FAMILY_VALUE_RE.finditer(css):
        stack = clean_css_value(match.group(1))
        if stack:
            stacks.append(stack)
    return stacks


def is_font_variable(name: str, value: Optional[str]) -> bool:
    lname = (name or "").lower()
    if not lname.startswith("--") or not any(token in lname for token in VARIABLE_NAME_TOKENS):
        return False
    literal = (value or "").strip()
    return bool(literal) and not literal.lower().startswith("var(")
