import json
import re
from typing import Any, Dict, List, Optional, Union
from bs4 import BeautifulSoup, Tag

_ws = re.compile(r"\s+")
_decimal = re.compile(r"\d+(?:\.\d+)?")


def make_soup(html: Union[str, BeautifulSoup]) -> BeautifulSoup:
    if isinstance(html, BeautifulSoup):
        return html
    return BeautifulSoup(html or "", "lxml")


def text_of(el: Optional[Tag]) -> str:
    """Whitespace-normalised text of ``el``; meta tags yield their content."""
    if el is None:
        return ""
    if el.name == "meta":
        return _ws.sub(" ", el.get("content") or "").strip()
    return _ws.sub(" ", el.get_text(" ", strip=True)).strip()


def extract_number(text: Optional[str]) -> float:
    """First decimal number in a pt-BR formatted string, 0 when there is none.

    "R$ 1.234,56" -> 1234.56, "3 dormitórios" -> 3.0
    """
    if not text:
        return 0
    clean = text.replace("R$", "").replace(".", "").replace(",", ".", 1)
    m = _decimal.search(clean)
    return float(m.group(0)) if m else 0


def innermost(elements: List[Tag]) -> List[Tag]:
    """Drop every element that has another element of the list as a descendant."""
    ids = {id(el) for el in elements}
    out = []
    for el in elements:
        if not any(id(d) in ids for d in el.find_all(True)):
            out.append(el)
    return out


def next_element(el: Tag) -> Optional[Tag]:
    sib = el.find_next_sibling()
    return sib if isinstance(sib, Tag) else None


def _parse_jsonld_blocks(soup: BeautifulSoup) -> List[Dict[str, Any]]:
    out = []
    for s in soup.find_all("script"):
        t = (s.get("type") or "").lower()
        if "ld+json" in t:
            raw = s.string or s.text
            if not raw:
                continue
            try:
                data = json.loads(raw)
            except ValueError:
                # Attempt to repair common trailing comma issues
                fixed = re.sub(r",\s*([}\]])", r"\1", raw)
                try:
                    data = json.loads(fixed)
                except ValueError:
                    continue
            if isinstance(data, list):
                out.extend([x for x in data if isinstance(x, dict)])
            elif isinstance(data, dict):
                graph = data.get("@graph")
                if isinstance(graph, list):
                    out.extend([x for x in graph if isinstance(x, dict)])
                else:
                    out.append(data)
    return out


def jsonld_values(soup: BeautifulSoup, path: str) -> List[Any]:
    """Values at dotted ``path`` (e.g. "offers.price") across all JSON-LD blocks."""
    values = []
    for block in _parse_jsonld_blocks(soup):
        cur: Any = block
        for key in path.split("."):
            if isinstance(cur, list):
                cur = cur[0] if cur else None
            cur = cur.get(key) if isinstance(cur, dict) else None
            if cur is None:
                break
        if isinstance(cur, (str, int, float)) and not isinstance(cur, bool):
            values.append(cur)
    return values
