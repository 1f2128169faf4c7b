# platescan/plate_reader.py

import re
import string
from dataclasses import dataclass
from typing import Optional, Pattern, Tuple


@dataclass(frozen=True)
class PatternRule:
    name: str
    pattern: Pattern[str]


@dataclass(frozen=True)
class PlateMatch:
    plate: str       # normalized, A-Z0-9 only
    raw: str         # substring that matched in the uppercased text
    rule: str


# Priority = position. First rule that matches anywhere in the text wins,
# even if a later rule would find a more plausible plate.
PLATE_RULES: Tuple[PatternRule, ...] = (
    PatternRule("3L4D", re.compile(r"[A-Z]{3}[0-9]{4}")),
    PatternRule("2L5D", re.compile(r"[A-Z]{2}[0-9]{5}")),
    PatternRule("2L4D", re.compile(r"[A-Z]{2}[0-9]{4}")),
    PatternRule("3L3D", re.compile(r"[A-Z]{3}[0-9]{3}")),
    PatternRule("spaced", re.compile(r"[A-Z]{2,3}\s*[0-9]{3,4}")),
    PatternRule("hyphenated", re.compile(r"[A-Z]{2,3}-[0-9]{3,4}")),
)

_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)
_NON_PLATE_CHARS = re.compile(r"[^A-Z0-9]")


def ascii_upper(text: str) -> str:
    """Uppercase a-z only; everything else passes through unchanged."""
    return text.translate(_ASCII_UPPER)


def normalize_plate(raw: str) -> str:
    return _NON_PLATE_CHARS.sub("", ascii_upper(raw))


def match_plate(ocr_text: str, rules: Tuple[PatternRule, ...] = PLATE_RULES) -> Optional[PlateMatch]:
    """
    Find the plate in raw OCR output.

    Returns the match of the first rule (in priority order) that occurs
    anywhere in the uppercased text, or None if no rule matches.
    """
    upper = ascii_upper(ocr_text or "")
    for rule in rules:
        m = rule.pattern.search(upper)
        if m:
            return PlateMatch(plate=normalize_plate(m.group(0)), raw=m.group(0), rule=rule.name)
    return None


def extract_plate(ocr_text: str) -> Optional[str]:
    """Return the normalized plate found in `ocr_text`, or None."""
    match = match_plate(ocr_text)
    return match.plate if match else None
