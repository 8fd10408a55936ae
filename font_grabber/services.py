"""Recognize hosted font-service links and the families they deliver."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple
from urllib.parse import unquote, urlparse

from font_grabber.css import extract_font_faces
from font_grabber.fetch import SERVICE_TIMEOUT, Fetcher, fetch_each, fetch_text
from font_grabber.urls import is_family_list_url, is_kit_url

logger = logging.getLogger(__name__)

FAMILY_PARAM_RE = re.compile(r"(?:^|&)family=([^&]+)", re.I)


@dataclass(frozen=True)
class ServiceFamily:
    name: str
    url: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "url": self.url, "type": "google-font"}


@dataclass(frozen=True)
class KitFont:
    name: str
    weight: str
    style: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "weight": self.weight, "style": self.style}


@dataclass(frozen=True)
class KitProject:
    project_id: str
    url: str
    fonts: List[KitFont] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "type": "adobe-font",
            "url": self.url,
            "projectId": self.project_id,
            "fonts": [font.to_dict() for font in self.fonts],
        }


def parse_family_list_link(url: str) -> List[ServiceFamily]:
    """Family names encoded in a family-list link, e.g. ``?family=Open+Sans:400|Roboto``."""
    try:
        query = urlparse(url).query
    except ValueError:
        return []
    families: List[ServiceFamily] = []
    for raw in FAMILY_PARAM_RE.findall(query):
        for part in unquote(raw.replace("+", " ")).split("|"):
            name = part.split(":", 1)[0].strip()
            if name:
                families.append(ServiceFamily(name, url))
    return families


def kit_project_id(url: str) -> str:
    try:
        path = urlparse(url).path
    except ValueError:
        path = url
    segment = path.rstrip("/").split("/")[-1]
    return segment.split(".")[0]


def kit_fonts(css_text: str) -> List[KitFont]:
    # One record per family; later faces of a family inside the same kit are variants.
    seen = set()
    fonts: List[KitFont] = []
    for face in extract_font_faces(css_text):
        if face.family in seen:
            continue
        seen.add(face.family)
        fonts.append(KitFont(face.family, face.weight, face.style))
    return fonts


def classify_service_links(
    links: Iterable[str],
    fetch: Fetcher = fetch_text,
    timeout: float = SERVICE_TIMEOUT,
) -> Tuple[List[ServiceFamily], List[KitProject]]:
    families: List[ServiceFamily] = []
    kit_links: List[str] = []
    for url in links:
        if is_family_list_url(url):
            families.extend(parse_family_list_link(url))
        elif is_kit_url(url) and url not in kit_links:
            kit_links.append(url)

    projects: List[KitProject] = []
    for outcome in fetch_each(kit_links, timeout, fetch):
        if not outcome.ok:
            continue
        projects.append(KitProject(kit_project_id(outcome.url), outcome.url, kit_fonts(outcome.text or "")))
    return families, projects
