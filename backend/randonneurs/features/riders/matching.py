"""
Fuzzy rider-name matching.

Scores name similarity with Levenshtein distance, ignoring case and
punctuation and treating common nicknames as the same name. Used to suggest
"is this you?" candidates, never to merge riders automatically.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, TypeVar

T = TypeVar("T")

# Canonical name -> nicknames (all lowercase)
NICKNAMES: dict[str, tuple[str, ...]] = {
    "alexander": ("alex", "alec", "al", "sandy", "xander"),
    "alexandra": ("alex", "alexa", "sandy", "lexi"),
    "andrew": ("andy", "drew"),
    "anthony": ("tony", "ant"),
    "barbara": ("barb", "barbie", "babs"),
    "benjamin": ("ben", "benny", "benji"),
    "catherine": ("cathy", "cat", "kate", "katie"),
    "charles": ("charlie", "chuck", "chas"),
    "christine": ("chris", "chrissy", "tina"),
    "christopher": ("chris", "kit", "topher"),
    "daniel": ("dan", "danny"),
    "david": ("dave", "davey"),
    "deborah": ("deb", "debbie", "debby"),
    "donald": ("don", "donny", "donnie"),
    "dorothy": ("dot", "dotty", "dottie"),
    "edward": ("ed", "eddie", "ted", "teddy", "ned"),
    "elizabeth": ("liz", "lizzy", "beth", "betty", "eliza", "libby", "eli", "ellie"),
    "frederick": ("fred", "freddy", "freddie"),
    "geoffrey": ("geoff", "jeff"),
    "gerald": ("gerry", "jerry"),
    "gregory": ("greg", "gregg"),
    "james": ("jim", "jimmy", "jamie", "jem"),
    "jeffrey": ("jeff", "geoff"),
    "jennifer": ("jen", "jenny", "jenn"),
    "jessica": ("jess", "jessie"),
    "john": ("jack", "johnny", "jon"),
    "jonathan": ("jon", "jonny", "john"),
    "joseph": ("joe", "joey", "jo"),
    "joshua": ("josh",),
    "katherine": ("kate", "kathy", "katie", "katy", "kay", "kit", "kitty"),
    "kenneth": ("ken", "kenny"),
    "lawrence": ("larry", "lars"),
    "leonard": ("leo", "len", "lenny"),
    "margaret": ("maggie", "meg", "peggy", "marge", "margie", "megan"),
    "matthew": ("matt", "matty"),
    "michael": ("mike", "mikey", "mick"),
    "nicholas": ("nick", "nicky"),
    "patricia": ("pat", "patty", "trish", "trisha"),
    "patrick": ("pat", "paddy", "patty"),
    "peter": ("pete",),
    "philip": ("phil",),
    "phillip": ("phil",),
    "raymond": ("ray",),
    "rebecca": ("becky", "becca"),
    "richard": ("rick", "ricky", "dick", "rich", "richie"),
    "robert": ("bob", "bobby", "rob", "robbie", "bert"),
    "ronald": ("ron", "ronny", "ronnie"),
    "samuel": ("sam", "sammy"),
    "sandra": ("sandy",),
    "stephanie": ("steph", "stephy"),
    "stephen": ("steve", "stevie"),
    "steven": ("steve", "stevie"),
    "susan": ("sue", "susie", "suzy"),
    "theodore": ("ted", "teddy", "theo"),
    "thomas": ("tom", "tommy"),
    "timothy": ("tim", "timmy"),
    "victoria": ("vicky", "vicki", "tori"),
    "william": ("bill", "billy", "will", "willy", "liam"),
}


def _build_reverse(table: dict[str, tuple[str, ...]]) -> dict[str, set[str]]:
    reverse: dict[str, set[str]] = {}
    for canonical, nicknames in table.items():
        for nick in nicknames:
            reverse.setdefault(nick, set()).add(canonical)
    return reverse


# Nickname -> canonical names
CANONICAL_NAMES = _build_reverse(NICKNAMES)

# Weight applied when names only match in swapped (last, first) order
SWAPPED_ORDER_FACTOR = 0.9

_NON_LETTERS = re.compile(r"[^a-z]")


def normalize_name(name: str) -> str:
    """Lowercase and drop everything but letters: "O'Callahan" -> "ocallahan"."""
    return _NON_LETTERS.sub("", name.strip().lower())


def get_name_variants(name: str) -> list[str]:
    """
    All spellings equivalent to `name`, including itself.

    "Bob" -> ["bob", "robert", "bobby", "rob", "robbie", "bert"]
    """
    normalized = name.strip().lower()
    variants = [normalized]

    def add(v: str):
        if v not in variants:
            variants.append(v)

    for nick in NICKNAMES.get(normalized, ()):
        add(nick)
    for canonical in sorted(CANONICAL_NAMES.get(normalized, ())):
        add(canonical)
        for nick in NICKNAMES[canonical]:
            add(nick)
    return variants


def are_nickname_equivalent(a: str, b: str) -> bool:
    """Same name, or nickname/canonical of each other, or nicknames of one canonical."""
    if a == b:
        return True
    if b in NICKNAMES.get(a, ()) or a in NICKNAMES.get(b, ()):
        return True
    return bool(CANONICAL_NAMES.get(a, set()) & CANONICAL_NAMES.get(b, set()))


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum single-character edits turning `a` into `b` (case-insensitive)."""
    a, b = a.lower(), b.lower()
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(
                previous[j] + 1,         # deletion
                current[j - 1] + 1,      # insertion
                previous[j - 1] + cost,  # substitution
            ))
        previous = current
    return previous[-1]


def similarity_score(a: str, b: str) -> float:
    """1.0 for identical strings, 0.0 for completely different ones."""
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return 1 - levenshtein_distance(a, b) / max_len


def _component_score(a: str, b: str) -> float:
    return 1.0 if are_nickname_equivalent(a, b) else similarity_score(a, b)


def fuzzy_name_score(
    search_first: str,
    search_last: str,
    candidate_first: str,
    candidate_last: str,
) -> float:
    """
    Similarity of two (first, last) names in [0, 1].

    Handles typos, punctuation (O'Callahan / Ocallahan), nicknames
    (Bob / Robert) and swapped order (scored at SWAPPED_ORDER_FACTOR).
    """
    sf = normalize_name(search_first)
    sl = normalize_name(search_last)
    cf = normalize_name(candidate_first)
    cl = normalize_name(candidate_last)

    if sf == cf and sl == cl:
        return 1.0

    direct = (_component_score(sf, cf) + _component_score(sl, cl)) / 2
    swapped = (_component_score(sf, cl) + _component_score(sl, cf)) / 2
    return max(direct, swapped * SWAPPED_ORDER_FACTOR)


@dataclass
class FuzzyMatch(Generic[T]):
    item: T
    score: float


def find_fuzzy_name_matches(
    search_first: str,
    search_last: str,
    candidates: Iterable[T],
    threshold: float = 0.5,
    max_results: int = 10,
    get_first: Callable[[T], str] = lambda c: c.first_name,
    get_last: Callable[[T], str] = lambda c: c.last_name,
) -> list[FuzzyMatch[T]]:
    """
    Candidates scoring at least `threshold`, best first, at most `max_results`.

    Ties keep the candidates' input order.
    """
    scored = [
        FuzzyMatch(
            item=c,
            score=fuzzy_name_score(search_first, search_last, get_first(c), get_last(c)),
        )
        for c in candidates
    ]
    matches = [m for m in scored if m.score >= threshold]
    matches.sort(key=lambda m: m.score, reverse=True)
    return matches[:max_results]
