"""Mention extraction: ``[Display Name]`` tokens resolved to user ids."""
import html
import re
from typing import Dict, List

from sqlalchemy.orm import Session

from feedback_board.models import User
from feedback_board.models.user import normalize_name

MENTION_PATTERN = re.compile(r"\[([^\[\]]+)\]")


def find_mention_tokens(text: str) -> List[str]:
    """Return the trimmed names inside bracket tokens, in order of appearance."""
    tokens = []
    for match in MENTION_PATTERN.finditer(text or ""):
        name = html.unescape(match.group(1)).strip()
        if name:
            tokens.append(name)
    return tokens


def resolve_names(db: Session, names: List[str]) -> Dict[str, int]:
    """Map normalised display names to user ids.

    Names are casefolded in Python on both sides, so the match is
    case-insensitive for any script. When several users share a display
    name the lowest id wins.
    """
    wanted = {normalize_name(name) for name in names}
    if not wanted:
        return {}

    rows = (
        db.query(User.id, User.name_key)
        .filter(User.name_key.in_(wanted))
        .order_by(User.id.asc())
        .all()
    )
    resolved: Dict[str, int] = {}
    for user_id, key in rows:
        resolved.setdefault(key, user_id)
    return resolved


def extract_mentions(db: Session, text: str) -> List[int]:
    """Resolve every bracket token in ``text`` to a user id.

    Unknown names are dropped. A name repeated in the text yields its id once
    per occurrence; de-duplication belongs to the ledger.
    """
    tokens = find_mention_tokens(text)
    if not tokens:
        return []

    resolved = resolve_names(db, tokens)
    keys = [normalize_name(token) for token in tokens]
    return [resolved[key] for key in keys if key in resolved]
