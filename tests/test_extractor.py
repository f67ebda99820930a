"""Tests for the Vila Vix property extractor."""

from __future__ import annotations

import pytest

from app.scrapers.common import extract_number, make_soup
from app.scrapers.vilavix import (
    FIELD_DEFAULTS,
    MAX_IMAGES,
    extract_characteristics,
    extract_field,
    extract_images,
    extract_property,
)


def _soup(body: str):
    return make_soup(f"<html><body>{body}</body></html>")


# ---------------------------------------------------------------------------
# Number extraction
# ---------------------------------------------------------------------------

class TestExtractNumber:
    def test_brazilian_currency(self):
        assert extract_number("R$ 1.234,56") == pytest.approx(1234.56)

    def test_thousands_only(self):
        assert extract_number("R$ 1.250.000") == 1250000

    def test_leading_count(self):
        assert extract_number("3 dormitórios") == 3

    def test_decimal_area(self):
        assert extract_number("Área: 120,5 m²") == pytest.approx(120.5)

    @pytest.mark.parametrize("text", ["", None, "sem valor", "R$ ,"])
    def test_no_match_is_zero(self, text):
        assert extract_number(text) == 0


# ---------------------------------------------------------------------------
# Field strategies
# ---------------------------------------------------------------------------

class TestBedrooms:
    def test_label_adjacent_value(self):
        soup = _soup("<div><span>Dormitórios</span><span>4 quartos</span></div>")
        assert extract_field(soup, "bedrooms") == 4

    def test_label_and_value_in_one_list_item(self):
        soup = _soup("<ul><li>Dormitórios: 4</li><li>Banheiros: 2</li></ul>")
        assert extract_field(soup, "bedrooms") == 4
        assert extract_field(soup, "bathrooms") == 2

    def test_inline_value_wins_over_next_element(self):
        soup = _soup("<div><span>Dormitórios 3</span><span>2 Vagas</span></div>")
        assert extract_field(soup, "bedrooms") == 3

    @pytest.mark.parametrize("count", [0, 25])
    def test_out_of_bounds_is_not_found(self, count):
        soup = _soup(f"<div><span>Dormitórios</span><span>{count} quartos</span></div>")
        assert extract_field(soup, "bedrooms") is None
        record = extract_property(soup)
        assert record.bedrooms == 3
        assert "bedrooms" in record.defaulted

    def test_in_bounds_overrides_default(self):
        record = extract_property(_soup("<div><span>Dormitórios</span><span>4 quartos</span></div>"))
        assert record.bedrooms == 4
        assert "bedrooms" not in record.defaulted

    def test_keyword_scan_in_list_items(self):
        soup = _soup("<ul><li>2 suítes</li></ul>")
        assert extract_field(soup, "bedrooms") == 2

    def test_nothing_matches(self):
        record = extract_property(_soup("<p>Sem informações</p>"))
        assert record.bedrooms == 3


class TestOtherFields:
    def test_bathrooms_from_keyword(self):
        assert extract_field(_soup("<ul><li>2 banheiros</li></ul>"), "bathrooms") == 2

    def test_area_label(self):
        soup = _soup("<dl><dt>Área Privativa</dt><dd>85,5 m²</dd></dl>")
        assert extract_field(soup, "area") == pytest.approx(85.5)

    def test_area_too_small_rejected(self):
        assert extract_field(_soup("<dl><dt>Área Construída</dt><dd>8 m²</dd></dl>"), "area") is None

    def test_type_label(self):
        soup = _soup("<div><span>Tipo do Imóvel</span><span>Apartamento</span></div>")
        assert extract_field(soup, "type") == "Apartamento"

    def test_price_keyword_skips_condominium(self):
        soup = _soup(
            "<div><span>Venda</span><span>R$ 480.000,00</span></div>"
            "<p>Condomínio R$ 300.000,00</p>"
        )
        assert extract_field(soup, "price") == 480000

    def test_price_out_of_bounds_falls_back(self):
        record = extract_property(_soup('<div class="valor-imovel">R$ 5.000</div>'))
        assert record.price == FIELD_DEFAULTS["price"]
        assert "price" in record.defaulted

    def test_jsonld_fallback(self):
        soup = _soup(
            '<script type="application/ld+json">'
            '{"@type": "Residence", "name": "Apto Praia da Costa", "offers": {"price": "650000"},}'
            "</script>"
        )
        assert extract_field(soup, "title") == "Apto Praia da Costa"
        assert extract_field(soup, "price") == 650000

    def test_jsonld_numeric_looking_title_stays_text(self):
        soup = _soup(
            '<script type="application/ld+json">'
            '{"@type": "Residence", "name": "2024", "offers": {"price": "650000.00"}}'
            "</script>"
        )
        assert extract_field(soup, "title") == "2024"
        assert extract_field(soup, "price") == 650000

    def test_title_from_og_meta(self):
        soup = make_soup('<html><head><meta property="og:title" content="Casa na praia"></head><body></body></html>')
        assert extract_field(soup, "title") == "Casa na praia"


class TestDescription:
    def test_marker_sibling(self):
        soup = _soup("<section><h3>DESCRIÇÃO DO IMÓVEL</h3><div>Apartamento reformado.</div></section>")
        assert extract_field(soup, "description") == "Apartamento reformado."

    def test_marker_parent(self):
        soup = _soup("<section><h3>DESCRIÇÃO DO IMÓVEL</h3></section>")
        assert extract_field(soup, "description") is None

        soup = _soup("<section><span>Descrição do imóvel</span> Vista para o mar.</section>")
        assert extract_field(soup, "description") == "Vista para o mar."

    def test_selector_fallback(self):
        soup = _soup('<div class="descricao-imovel">Casa térrea com quintal.</div>')
        assert extract_field(soup, "description") == "Casa térrea com quintal."


class TestImages:
    def test_logo_excluded(self):
        soup = _soup(
            '<div class="galeria-fotos">'
            '<img src="https://cdn.example.com/logo.png">'
            '<img src="https://cdn.example.com/imovel/sala.jpg">'
            "</div>"
        )
        assert extract_images(soup) == ["https://cdn.example.com/imovel/sala.jpg"]

    def test_first_matching_selector_wins(self):
        soup = _soup(
            '<div class="galeria-fotos"><img src="https://a.example.com/1.jpg"></div>'
            '<div class="swiper-slide"><img src="https://a.example.com/2.jpg"></div>'
        )
        assert extract_images(soup) == ["https://a.example.com/1.jpg"]

    def test_capped_and_unique(self):
        imgs = "".join(f'<img src="https://a.example.com/{i}.jpg">' for i in range(15))
        soup = _soup(f'<div class="galeria-fotos">{imgs}<img src="https://a.example.com/0.jpg"></div>')
        images = extract_images(soup)
        assert len(images) == MAX_IMAGES
        assert len(set(images)) == len(images)

    def test_placeholders_when_missing(self):
        record = extract_property(_soup('<img src="/relative.jpg">'))
        assert record.images == FIELD_DEFAULTS["images"]
        assert "images" in record.defaulted


# ---------------------------------------------------------------------------
# Full page
# ---------------------------------------------------------------------------

class TestExtractProperty:
    def test_full_listing(self, listing_html):
        record = extract_property(listing_html)
        assert record.title == "Casa 4 quartos em Itapoã"
        assert record.price == 1250000
        assert record.address == "Rua Castelo Branco, 1200"
        assert record.neighborhood == "Itapoã"
        assert record.type == "Casa"
        assert record.bedrooms == 4
        assert record.bathrooms == 3
        assert record.area == 250
        assert record.description.startswith("Casa ampla")
        assert record.features == ["Piscina", "Churrasqueira"]
        assert record.images == [
            "https://cdn.vilaviximoveis.com.br/fotos/1.jpg",
            "https://cdn.vilaviximoveis.com.br/fotos/2.jpg",
        ]
        assert record.defaulted == []

    def test_characteristics(self, listing_html):
        ch = extract_characteristics(make_soup(listing_html))
        assert ch.type == "Casa"
        assert ch.builtArea == 250
        assert ch.landArea == 360
        assert ch.privateArea is None
        assert ch.dimensions == "12 x 30"
        assert ch.bedroomsDetail == "4 quartos (2 suítes)"
        assert ch.parkingSpaces == 2

    def test_empty_page_uses_every_default(self):
        record = extract_property("")
        assert record.title == FIELD_DEFAULTS["title"]
        assert record.bedrooms == 3
        assert record.bathrooms == 2
        assert record.area == 120
        assert record.features == FIELD_DEFAULTS["features"]
        assert set(record.defaulted) == set(FIELD_DEFAULTS)

    def test_defaults_are_not_shared(self):
        a = extract_property("")
        a.features.append("Extra")
        assert "Extra" not in extract_property("").features
