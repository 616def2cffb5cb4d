import re
from collections import Counter
from typing import Dict, List, Tuple

# Filler words that would otherwise dominate a job description's token counts
STOP_WORDS = frozenset("""
a an and are as at be by for from has have in is it its of on or our that the their this to we will with
you your who what which while within across about into per such than then there these they those us
""".split())

_TOKEN_RE = re.compile(r"[A-Za-z0-9#+.]+")


def _tokens(s: str) -> List[str]:
    out = []
    for w in _TOKEN_RE.findall(s or ""):
        w = w.lower().strip(".")
        if w and w not in STOP_WORDS:
            out.append(w)
    return out


def match_score(resume: str, jd: str) -> Dict[str, float]:
    """Percentage of JD tokens (with multiplicity) that the resume also contains."""
    r, j = Counter(_tokens(resume)), Counter(_tokens(jd))
    overlap = sum(min(r[t], j[t]) for t in j)
    total = sum(j.values()) or 1
    score = round(100 * overlap / total, 1)
    return {"match_score": score}


def keyword_gaps(resume: str, jd: str, top_k: int = 30) -> Dict[str, List[Tuple[str, float]]]:
    rset = set(_tokens(resume))
    missing = []
    for w in _tokens(jd):
        if w not in rset and w not in missing:
            missing.append(w)
        if len(missing) >= top_k:
            break
    return {"missing": [(w, 1.0) for w in missing]}
