"""File-name stems for exported documents"""

import re
import unicodedata


NON_WORD_RE = re.compile(r'[^a-z0-9\s_-]')
SEPARATOR_RE = re.compile(r'[\s_-]+')
MAX_STEM = 80


def slugify(title: str, fallback: str = "untitled") -> str:
    """ASCII-fold a document title into a lowercase, hyphenated file stem.

    Accents are dropped ("Café" -> "cafe"); anything left empty becomes fallback.
    """
    ascii_title = unicodedata.normalize('NFKD', title).encode('ascii', 'ignore').decode('ascii')
    stem = SEPARATOR_RE.sub('-', NON_WORD_RE.sub('', ascii_title.lower())).strip('-')
    return stem[:MAX_STEM].rstrip('-') or fallback
