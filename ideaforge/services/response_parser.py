"""
Recovers idea records from model output.

Three output shapes have been seen in practice; they are tried in a fixed
order and the first strategy that yields at least one record wins:

1. a JSON array of objects (possibly fenced or wrapped in prose),
2. one ``Idea Name: description`` line per idea,
3. labeled blocks (``Idea Name:`` / ``Description:`` / ``Source:`` ...).
"""

import json
import re
from typing import Any, Callable, Dict, List, Optional

from ideaforge.models.idea import PartialIdeaRecord, Source
from ideaforge.utils.logger import logger

# Normalized key (lowercase, alphanumerics only) -> canonical field
FIELD_ALIASES = {
    "idea": "title",
    "title": "title",
    "name": "title",
    "ideaname": "title",
    "ideatitle": "title",
    "projecttitle": "title",
    "projectname": "title",
    "description": "description",
    "summary": "description",
    "details": "description",
    "marketneed": "marketNeed",
    "problem": "marketNeed",
    "problemstatement": "marketNeed",
    "need": "marketNeed",
    "techstack": "techStack",
    "technologystack": "techStack",
    "technologies": "techStack",
    "stack": "techStack",
    "difficulty": "difficulty",
    "difficultylevel": "difficulty",
    "estimatedtime": "estimatedTime",
    "timeestimate": "estimatedTime",
    "estimatedduration": "estimatedTime",
    "timeline": "estimatedTime",
    "developmenttime": "estimatedTime",
    "sources": "sources",
    "source": "sources",
    "citations": "sources",
    "references": "sources",
    "url": "sources",
    "link": "sources",
}

BULLET_PREFIX = re.compile(r"^\s*(?:#{1,6}\s*)?(?:[-*•]\s+|\d+[.)]\s*|\d+\s*[-:]\s+)?")
LABEL_LINE = re.compile(r"^\s*(?P<label>[A-Za-z][A-Za-z _/]{0,40}?)\s*(?:#?\d+)?\s*(?::|\s[-–—]\s)\s*(?P<value>.*)$")
NAME_LINE = re.compile(r"^(?P<title>[^:]{3,100}?)\s*:\s+(?P<rest>\S.*)$")
URL_PATTERN = re.compile(r"https?://[^\s)\]>\"']+")
LABEL_STARTS_IDEA = {"idea", "ideaname", "ideatitle", "title", "name", "projecttitle", "projectname"}
NOT_IDEA_NAMES = {"note", "notes", "overview", "conclusion", "disclaimer", "example", "tip", "important"}
MAX_NAME_WORDS = 12


def normalize_key(key: str) -> str:
    return re.sub(r"[^a-z0-9]", "", str(key).lower())


def clean_line(line: str) -> str:
    """Strip bullets, numbering, heading marks and markdown emphasis from a line."""
    line = line.replace("**", "").replace("__", "")
    line = BULLET_PREFIX.sub("", line, count=1)
    return line.strip().strip("*_` ").strip()


def split_list(value: Any) -> List[str]:
    """Turn a list or a comma/semicolon separated string into trimmed items."""
    if isinstance(value, list):
        items = value
    elif isinstance(value, str):
        items = re.split(r"[,;\n]", value)
    else:
        return []
    return [str(item).strip().strip("*` ") for item in items if str(item).strip()]


def parse_sources(value: Any) -> List[Source]:
    """Read citations given as dicts, bare URLs or free text containing URLs."""
    if value is None:
        return []
    items = value if isinstance(value, list) else [value]
    sources = []
    for item in items:
        if isinstance(item, dict):
            url = str(item.get("url") or item.get("link") or "").strip()
            if url:
                sources.append(Source(
                    title=item.get("title") or item.get("name") or None,
                    url=url,
                    snippet=item.get("snippet") or None,
                ))
        elif isinstance(item, str):
            for url in URL_PATTERN.findall(item):
                title = item.replace(url, "").strip(" -:()[]") or None
                sources.append(Source(title=title, url=url.rstrip(".,;")))
    return sources


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, list):
        value = " ".join(str(v) for v in value)
    text = str(value).strip()
    return text or None


def _strip_fences(text: str) -> str:
    text = text.strip().lstrip("﻿")
    fenced = re.search(r"```(?:json|JSON)?\s*(.*?)```", text, re.DOTALL)
    return fenced.group(1).strip() if fenced else text


def _slice_json(text: str, opener: str, closer: str) -> Any:
    """Decode the span from the first opener to the last closer, or None."""
    start = text.find(opener)
    end = text.rfind(closer)
    if start == -1 or end <= start:
        return None
    candidate = text[start:end + 1]
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        pass
    # Trailing commas are the most common defect
    try:
        return json.loads(re.sub(r",\s*([}\]])", r"\1", candidate))
    except json.JSONDecodeError as e:
        logger.debug(f"JSON strategy failed: {e}")
        return None


class ResponseParser:
    """Parses raw completion text into partial idea records."""

    def __init__(self):
        self.strategies: List[Callable[[str], List[PartialIdeaRecord]]] = [
            self.parse_json,
            self.parse_name_lines,
            self.parse_labeled_blocks,
        ]

    def parse(self, raw_text: str) -> List[PartialIdeaRecord]:
        """
        Recover idea records from model output.

        Args:
            raw_text: The completion text

        Returns:
            Records from the first strategy that found any, otherwise an empty list
        """
        if not raw_text or not raw_text.strip():
            return []

        for strategy in self.strategies:
            records = strategy(raw_text)
            if records:
                logger.debug(f"{strategy.__name__} recovered {len(records)} records")
                return records

        logger.warning("No idea records could be recovered from the response")
        return []

    # JSON array

    def parse_json(self, raw_text: str) -> List[PartialIdeaRecord]:
        text = _strip_fences(raw_text)
        items = _slice_json(text, "[", "]")
        if not isinstance(items, list) or not any(isinstance(item, dict) for item in items):
            # A single object, or an object wrapping the list under some key
            items = self._object_items(text)

        records = []
        for item in items:
            if not isinstance(item, dict):
                continue
            record = self._from_mapping(item)
            if record.title or record.description:
                records.append(record)
        return records

    @staticmethod
    def _object_items(text: str) -> List[Any]:
        obj = _slice_json(text, "{", "}")
        if not isinstance(obj, dict):
            return []
        for value in obj.values():
            if isinstance(value, list) and any(isinstance(item, dict) for item in value):
                return value
        return [obj]

    def _from_mapping(self, item: Dict[str, Any]) -> PartialIdeaRecord:
        fields: Dict[str, Any] = {}
        for key, value in item.items():
            field = FIELD_ALIASES.get(normalize_key(key))
            if field is None or field in fields:
                continue
            if field == "techStack":
                fields[field] = split_list(value)
            elif field == "sources":
                fields[field] = parse_sources(value)
            else:
                fields[field] = _text(value)
        return PartialIdeaRecord(**fields)

    # "Idea Name: description" lines

    def parse_name_lines(self, raw_text: str) -> List[PartialIdeaRecord]:
        lines = [clean_line(line) for line in raw_text.splitlines()]
        if any(self._starts_labeled_idea(line) for line in lines):
            return []

        records = []
        for cleaned in lines:
            match = NAME_LINE.match(cleaned)
            if not match:
                continue
            title = match.group("title").strip()
            key = normalize_key(re.sub(r"\d+", "", title))
            if key in FIELD_ALIASES or key in NOT_IDEA_NAMES or len(title.split()) > MAX_NAME_WORDS:
                continue
            records.append(PartialIdeaRecord(
                title=title,
                description=match.group("rest").strip(),
            ))
        return records

    @staticmethod
    def _starts_labeled_idea(line: str) -> bool:
        match = LABEL_LINE.match(line)
        return bool(match) and normalize_key(match.group("label")) in LABEL_STARTS_IDEA

    # Labeled blocks

    def parse_labeled_blocks(self, raw_text: str) -> List[PartialIdeaRecord]:
        records: List[PartialIdeaRecord] = []
        current: Optional[Dict[str, Any]] = None
        extra_lines: List[str] = []

        def flush():
            if current is None:
                return
            if extra_lines:
                joined = " ".join(extra_lines)
                current["description"] = f"{current['description']} {joined}".strip() if current.get("description") else joined
            if current.get("title") or current.get("description"):
                records.append(PartialIdeaRecord(**current))

        for line in raw_text.splitlines():
            cleaned = clean_line(line)
            if not cleaned:
                continue

            match = LABEL_LINE.match(cleaned)
            label = normalize_key(match.group("label")) if match else None
            field = FIELD_ALIASES.get(label) if label else None

            if field == "title" and label in LABEL_STARTS_IDEA:
                flush()
                current = {"title": _text(match.group("value"))}
                extra_lines = []
                continue

            if current is None:
                continue

            if field is None:
                extra_lines.append(cleaned)
            elif field == "techStack":
                current["techStack"] = split_list(match.group("value"))
            elif field == "sources":
                current.setdefault("sources", []).extend(parse_sources(match.group("value")))
            else:
                current[field] = _text(match.group("value"))

        flush()
        return records
