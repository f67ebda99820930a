"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from app import config


LISTING_HTML = """
<html>
<head>
  <title>Casa à venda</title>
  <meta property="og:title" content="Casa em Itapoã">
</head>
<body>
  <header><img src="https://www.vilaviximoveis.com.br/img/logo.png"></header>
  <h1 class="titulo-imovel">Casa 4 quartos em Itapoã</h1>
  <div class="valor-imovel">R$ 1.250.000,00</div>
  <div class="condominio">Condomínio R$ 450,00</div>
  <div class="endereco">Rua Castelo Branco, 1200</div>
  <div class="bairro">Itapoã</div>
  <div class="box-detalhes-imovel">
    <div class="item"><span>Tipo do Imóvel</span><span>Casa</span></div>
    <div class="item"><span>Área Construída</span><span>250 m²</span></div>
    <div class="item"><span>Terreno</span><span>360 m²</span></div>
    <div class="item"><span>Dimensões</span><span>12 x 30</span></div>
    <div class="item"><span>Dormitórios</span><span>4 quartos (2 suítes)</span></div>
    <div class="item"><span>Banheiros</span><span>3</span></div>
    <div class="item"><span>Vagas</span><span>2</span></div>
  </div>
  <div class="bloco">
    <h3>DESCRIÇÃO DO IMÓVEL</h3>
    <div class="texto">Casa ampla a duas quadras da praia, com piscina e churrasqueira.</div>
  </div>
  <ul class="lista-caracteristicas">
    <li>Piscina</li>
    <li>Churrasqueira</li>
    <li>Piscina</li>
    <li>AC</li>
  </ul>
  <div class="galeria-fotos">
    <img src="https://cdn.vilaviximoveis.com.br/fotos/1.jpg">
    <img data-src="https://cdn.vilaviximoveis.com.br/fotos/2.jpg">
    <img src="https://cdn.vilaviximoveis.com.br/fotos/1.jpg">
    <img src="/fotos/relativa.jpg">
    <img src="https://cdn.vilaviximoveis.com.br/banner-topo.jpg">
  </div>
</body>
</html>
"""


@pytest.fixture
def listing_html() -> str:
    return LISTING_HTML


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.setattr(config, "GOOGLE_MAPS_API_KEY", "")


@pytest.fixture
def api_key(monkeypatch) -> str:
    monkeypatch.setattr(config, "GOOGLE_MAPS_API_KEY", "test-key")
    return "test-key"
