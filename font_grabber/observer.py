"""Read rendered font information from a live, script-capable page."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from font_grabber.css import is_font_variable
from font_grabber.urls import looks_like_font_resource

logger = logging.getLogger(__name__)

COMPUTED_STACKS_JS = """() => {
    const stacks = [];
    const seen = new Set();
    const visit = (root) => {
        root.querySelectorAll('*').forEach(el => {
            const value = window.getComputedStyle(el).fontFamily;
            if (value && !seen.has(value)) {
                seen.add(value);
                stacks.push(value);
            }
            if (el.shadowRoot) {
                visit(el.shadowRoot);
            }
        });
    };
    visit(document);
    return stacks;
}"""

RESOURCE_TIMING_JS = """() => performance.getEntriesByType('resource').map(entry => ({
    name: entry.name,
    initiatorType: entry.initiatorType,
    duration: entry.duration,
}))"""

CUSTOM_PROPERTIES_JS = """() => {
    const authored = new Map();
    const restricted = [];
    const targetsRoot = (rule) => (rule.selectorText || '')
        .split(',')
        .some(selector => [':root', 'html'].includes(selector.trim().toLowerCase()));
    const walk = (rules) => {
        for (const rule of rules) {
            if (rule.style && targetsRoot(rule)) {
                for (let i = 0; i < rule.style.length; i++) {
                    const name = rule.style[i];
                    if (name.startsWith('--')) {
                        authored.set(name, rule.style.getPropertyValue(name).trim());
                    }
                }
            }
            if (rule.cssRules) {
                walk(rule.cssRules);
            }
        }
    };
    for (const sheet of Array.from(document.styleSheets)) {
        let rules;
        try {
            rules = sheet.cssRules;
        } catch (e) {
            restricted.push(sheet.href || '');
            continue;
        }
        walk(rules);
    }
    const root = window.getComputedStyle(document.documentElement);
    const properties = Array.from(authored.entries()).map(([name, value]) => ({
        name,
        authored: value,
        value: root.getPropertyValue(name).trim(),
    }));
    return { properties, restricted };
}"""


@dataclass(frozen=True)
class LoadedFont:
    url: str
    duration: float
    initiator: str = ""

    def to_dict(self) -> Dict[str, object]:
        return {
            "url": self.url,
            "loadTime": round(self.duration, 2),
            "initiator": self.initiator,
            "type": "loaded-font",
        }


@dataclass(frozen=True)
class FontVariable:
    name: str
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "value": self.value, "type": "css-variable-font"}


def computed_font_stacks(page: Any) -> List[str]:
    """Distinct ``font-family`` computed values across the rendered tree."""
    stacks: List[str] = []
    for value in page.evaluate(COMPUTED_STACKS_JS) or []:
        stack = str(value or "").strip()
        if stack and stack not in stacks:
            stacks.append(stack)
    return stacks


def is_font_timing_entry(entry: Dict[str, Any]) -> bool:
    name = str(entry.get("name") or "")
    if not name:
        return False
    return entry.get("initiatorType") == "css" or looks_like_font_resource(name)


def loaded_fonts(page: Any) -> List[LoadedFont]:
    fonts: List[LoadedFont] = []
    seen = set()
    for entry in page.evaluate(RESOURCE_TIMING_JS) or []:
        if not is_font_timing_entry(entry):
            continue
        url = str(entry["name"])
        if url in seen:
            continue
        seen.add(url)
        fonts.append(LoadedFont(url, float(entry.get("duration") or 0.0), str(entry.get("initiatorType") or "")))
    return fonts


def font_variables(page: Any) -> List[FontVariable]:
    result: Optional[Dict[str, Any]] = page.evaluate(CUSTOM_PROPERTIES_JS)
    if not result:
        return []
    for href in result.get("restricted") or []:
        logger.debug("Skipping stylesheet with unreadable rules: %s", href or "<inline>")
    variables: List[FontVariable] = []
    seen = set()
    for item in result.get("properties") or []:
        name = str(item.get("name") or "")
        authored = str(item.get("authored") or "").strip()
        value = str(item.get("value") or "").strip()
        # References are judged on the declared value; the computed one has var() substituted.
        if name in seen or not value or not is_font_variable(name, authored):
            continue
        seen.add(name)
        variables.append(FontVariable(name, value))
    return variables


@dataclass
class Observation:
    computed_stacks: List[str]
    loaded_fonts: List[LoadedFont]
    font_variables: List[FontVariable]


def observe(page: Any) -> Observation:
    return Observation(
        computed_stacks=computed_font_stacks(page),
        loaded_fonts=loaded_fonts(page),
        font_variables=font_variables(page),
    )
