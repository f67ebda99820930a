"""Property extraction for vilaviximoveis.com.br listing pages.

Each field is described by an ordered list of strategies in
``FIELD_STRATEGIES``. A strategy only yields raw candidates (text, or a number
for JSON-LD); ``extract_field`` converts them according to ``FIELD_KINDS``,
applies ``FIELD_BOUNDS`` and returns the first acceptable value, or ``None``
when nothing matched. Defaults are applied only in ``extract_property``, which
records every defaulted field so a real value is never confused with a
fallback.
"""
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from bs4 import BeautifulSoup, Tag

from app.schemas import Characteristics, ExtractedProperty
from app.scrapers.common import (
    extract_number,
    innermost,
    jsonld_values,
    make_soup,
    next_element,
    text_of,
)

log = logging.getLogger(__name__)

Candidate = Union[str, float]

MAX_IMAGES = 10
LABEL_TAGS = ["div", "span", "p", "li", "dt", "dd", "td", "th", "strong", "b", "label", "h3", "h4", "h5"]
INFO_SCOPE = ".info-imovel, .caracteristica, .detalhe-imovel, .item-caracteristica, li, .campo"
DESCRIPTION_MARKER = "DESCRIÇÃO DO IMÓVEL"


# -- strategies --------------------------------------------------------------

@dataclass(frozen=True)
class LabelStrategy:
    """Value next to a label: "Dormitórios: 4", or the following element
    ("Dormitórios" then "4 quartos")."""
    labels: Tuple[str, ...]
    contains: bool = False

    def candidates(self, soup: BeautifulSoup) -> Iterator[Candidate]:
        wanted = [lb.casefold() for lb in self.labels]
        matches = []
        for el in soup.find_all(LABEL_TAGS):
            txt = text_of(el).casefold()
            if not txt:
                continue
            if self.contains:
                hit = next((lb for lb in wanted if lb in txt), None)
            else:
                hit = txt if txt in wanted or txt.rstrip(":").strip() in wanted else None
            if hit:
                matches.append((el, hit))
        inner = {id(e) for e in innermost([m[0] for m in matches])}
        ordered = [m for m in matches if id(m[0]) in inner]
        if not self.contains:
            # wrappers holding nothing but the label are tried last
            ordered += [m for m in matches if id(m[0]) not in inner]
        for el, hit in ordered:
            # "Dormitórios: 4" carries its own value; a bare label reads the next element
            value = re.sub(re.escape(hit), "", text_of(el), count=1, flags=re.I).strip(" :")
            if not value:
                sib = next_element(el)
                value = text_of(sib) if sib is not None else ""
            if value:
                yield value


@dataclass(frozen=True)
class SelectorStrategy:
    """First non-empty element matched by each CSS selector, in order."""
    selectors: Tuple[str, ...]

    def candidates(self, soup: BeautifulSoup) -> Iterator[Candidate]:
        for sel in self.selectors:
            txt = text_of(soup.select_one(sel))
            if txt:
                yield txt


@dataclass(frozen=True)
class KeywordStrategy:
    """Innermost elements in ``scope`` whose text mentions a keyword."""
    keywords: Tuple[str, ...]
    exclude: Tuple[str, ...] = ()
    scope: str = "*"

    def candidates(self, soup: BeautifulSoup) -> Iterator[Candidate]:
        hits = []
        for el in soup.select(self.scope):
            if el.name in ("script", "style", "head", "title", "meta"):
                continue
            txt = text_of(el)
            low = txt.lower()
            if any(k in low for k in self.keywords) and not any(x in low for x in self.exclude):
                hits.append(el)
        for el in innermost(hits):
            yield text_of(el)


@dataclass(frozen=True)
class MarkerStrategy:
    """Text of the container following (or wrapping) a heading such as DESCRIÇÃO DO IMÓVEL."""
    marker: str

    def candidates(self, soup: BeautifulSoup) -> Iterator[Candidate]:
        pattern = re.compile(re.escape(self.marker), re.I)
        hits = [el for el in soup.find_all(True)
                if el.name not in ("script", "style", "head", "title") and pattern.search(text_of(el))]
        for el in innermost(hits):
            container = next_element(el) or el.parent
            if container is None:
                continue
            txt = pattern.sub("", text_of(container), count=1).strip(" :")
            if txt:
                yield txt


@dataclass(frozen=True)
class JsonLdStrategy:
    """Value at a dotted path inside embedded JSON-LD blocks.

    JSON-LD numbers are machine formatted ("650000.00"), so numeric paths are
    parsed with float() instead of the pt-BR number extraction.
    """
    path: str
    numeric: bool = False

    def candidates(self, soup: BeautifulSoup) -> Iterator[Candidate]:
        for v in jsonld_values(soup, self.path):
            if not self.numeric:
                txt = str(v).strip()
                if txt:
                    yield txt
                continue
            try:
                yield float(v)
            except ValueError:
                continue


Strategy = Union[LabelStrategy, SelectorStrategy, KeywordStrategy, MarkerStrategy, JsonLdStrategy]


# -- site tables -------------------------------------------------------------

FIELD_STRATEGIES: Dict[str, List[Strategy]] = {
    "title": [
        SelectorStrategy(("h1.titulo-imovel", "h1", "h2.nome-imovel", ".titulo-anuncio", ".nome-imovel",
                          'meta[property="og:title"]')),
        JsonLdStrategy("name"),
    ],
    "price": [
        SelectorStrategy((".valor-imovel", ".preco-imovel", ".valor", ".preco", 'span[class*="valor"]',
                          'div[class*="valor"]', ".box-valor", ".campo-valor")),
        KeywordStrategy(("r$",), exclude=("condomínio", "iptu")),
        JsonLdStrategy("offers.price", numeric=True),
    ],
    "address": [
        SelectorStrategy((".endereco-completo", ".localizacao-imovel", ".endereco", 'span[class*="endereco"]',
                          'div[class*="endereco"]', ".campo-endereco")),
    ],
    "neighborhood": [
        SelectorStrategy((".bairro", ".nome-bairro", 'span[class*="bairro"]', 'div[class*="bairro"]',
                          ".campo-bairro")),
    ],
    "type": [
        LabelStrategy(("Tipo do Imóvel",)),
        SelectorStrategy((".tipo-imovel", ".categoria-imovel", 'span[class*="tipo"]', 'div[class*="tipo"]')),
    ],
    "bedrooms": [
        LabelStrategy(("Dormitórios", "Quartos")),
        LabelStrategy(("Dormitórios", "Quartos"), contains=True),
        KeywordStrategy(("quarto", "dormitório", "suíte"), exclude=("banheiro",), scope=INFO_SCOPE),
    ],
    "bathrooms": [
        LabelStrategy(("Banheiros",)),
        LabelStrategy(("Banheiros",), contains=True),
        KeywordStrategy(("banheiro", "wc", "lavabo"), scope=INFO_SCOPE),
    ],
    "area": [
        LabelStrategy(("Área Construída", "Área Privativa", "Área Útil")),
        KeywordStrategy(("área", "m²", "metros"), scope=INFO_SCOPE),
    ],
    "description": [
        MarkerStrategy(DESCRIPTION_MARKER),
        SelectorStrategy((".descricao-completa", ".texto-descricao", ".descricao-imovel", ".observacoes",
                          ".detalhes-adicionais", 'div[class*="descricao"]', 'p[class*="descricao"]',
                          ".campo-observacao", ".texto-anuncio")),
        JsonLdStrategy("description"),
    ],
}

FIELD_KINDS = {
    "price": float,
    "bedrooms": int,
    "bathrooms": int,
    "area": float,
}

# inclusive; anything outside is discarded as a misread
FIELD_BOUNDS: Dict[str, Tuple[float, float]] = {
    "bedrooms": (1, 19),
    "bathrooms": (1, 19),
    "area": (11, 9999),
    "price": (10001, 49999999),
    "parkingSpaces": (1, 19),
}

FIELD_DEFAULTS: Dict[str, Any] = {
    "title": "Imóvel em Vila Velha",
    "price": 750000.0,
    "address": "Vila Velha, ES",
    "neighborhood": "Centro",
    "type": "Casa",
    "bedrooms": 3,
    "bathrooms": 2,
    "area": 120.0,
    "description": (
        "Excelente imóvel localizado em região privilegiada, com acabamento de primeira "
        "qualidade e pronto para morar."
    ),
    "features": [
        "Área privativa",
        "Garagem",
        "Área de serviço",
        "Cozinha",
        "Sala",
        "Localização privilegiada",
    ],
    "images": [
        "https://images.unsplash.com/photo-1560448204-e02f11c3d0e2?w=800&h=600",
        "https://images.unsplash.com/photo-1565182999561-18d7dc61c393?w=800&h=600",
        "https://images.unsplash.com/photo-1556909114-f6e7ad7d3136?w=800&h=600",
    ],
}

FEATURE_SELECTORS = (
    ".lista-caracteristicas li",
    ".caracteristicas-imovel li",
    ".itens-imovel li",
    ".comodidades li",
    ".item-caracteristica",
    ".caracteristica-item",
)

IMAGE_SELECTORS = (
    ".galeria-fotos img",
    ".carousel-item img",
    ".carousel img",
    '[class*="galeria"] img',
    '[class*="foto"] img',
    ".swiper-slide img",
    'img[src*="imovel"]',
)
IMAGE_ATTRS = ("src", "data-src", "data-lazy")
IMAGE_EXCLUDE = ("logo", "banner")

# label -> (Characteristics attribute, numeric?)
CHARACTERISTIC_LABELS = {
    "Tipo do Imóvel": ("type", False),
    "Área Construída": ("builtArea", True),
    "Terreno": ("landArea", True),
    "Área Privativa": ("privateArea", True),
    "Dimensões": ("dimensions", False),
    "Dormitórios": ("bedroomsDetail", False),
    "Vagas": ("parkingSpaces", True),
}


# -- extraction --------------------------------------------------------------

def _in_bounds(field: str, value: float) -> bool:
    lo, hi = FIELD_BOUNDS.get(field, (float("-inf"), float("inf")))
    return lo <= value <= hi


def _convert(field: str, raw: Candidate) -> Optional[Any]:
    kind = FIELD_KINDS.get(field)
    if kind is None:
        txt = str(raw).strip()
        return txt or None
    num = raw if isinstance(raw, float) else extract_number(raw)
    if not num or not _in_bounds(field, num):
        return None
    return kind(num)


def extract_field(soup: BeautifulSoup, field: str) -> Optional[Any]:
    """First acceptable value for ``field``, or None when no strategy matched."""
    for strategy in FIELD_STRATEGIES.get(field, []):
        for raw in strategy.candidates(soup):
            value = _convert(field, raw)
            if value is not None:
                return value
    return None


def extract_features(soup: BeautifulSoup) -> Optional[List[str]]:
    features: List[str] = []
    for sel in FEATURE_SELECTORS:
        for el in soup.select(sel):
            txt = text_of(el)
            if len(txt) > 2 and txt not in features:
                features.append(txt)
    return features or None


def _image_src(img: Tag) -> Optional[str]:
    for attr in IMAGE_ATTRS:
        src = (img.get(attr) or "").strip()
        if src.startswith("http"):
            return src
    return None


def extract_images(soup: BeautifulSoup) -> Optional[List[str]]:
    """Absolute image URLs from the first gallery selector that yields any."""
    for sel in IMAGE_SELECTORS:
        images: List[str] = []
        for img in soup.select(sel):
            src = _image_src(img)
            if not src or any(x in src.lower() for x in IMAGE_EXCLUDE):
                continue
            if src not in images:
                images.append(src)
        if images:
            return images[:MAX_IMAGES]
    return None


def extract_characteristics(soup: BeautifulSoup) -> Characteristics:
    values: Dict[str, Any] = {}
    for label, (attr, numeric) in CHARACTERISTIC_LABELS.items():
        for raw in LabelStrategy((label,)).candidates(soup):
            if numeric:
                num = extract_number(raw)
                if attr in FIELD_BOUNDS and not _in_bounds(attr, num):
                    continue
                if num:
                    values[attr] = num
                    break
            else:
                values[attr] = raw
                break
    return Characteristics(**values)


def extract_property(html: Union[str, BeautifulSoup]) -> ExtractedProperty:
    """Build the listing record from a rendered page, defaulting what is missing."""
    soup = make_soup(html)
    found: Dict[str, Any] = {field: extract_field(soup, field) for field in FIELD_STRATEGIES}
    found["features"] = extract_features(soup)
    found["images"] = extract_images(soup)

    defaulted = []
    for field, value in found.items():
        if value is None:
            default = FIELD_DEFAULTS[field]
            found[field] = list(default) if isinstance(default, list) else default
            defaulted.append(field)
    if defaulted:
        log.info("Using defaults for: %s", ", ".join(defaulted))

    return ExtractedProperty(
        **found,
        characteristics=extract_characteristics(soup),
        defaulted=defaulted,
    )
