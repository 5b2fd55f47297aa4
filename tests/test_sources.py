from __future__ import annotations

import re

import pytest
from conftest import FakeTransport, make_vehicle

from dealerstock.classify import KeywordClassifier
from dealerstock.config import ApiEndpoints, DataSourceConfig, SourceUrls, StockConfig
from dealerstock.exceptions import UpstreamMalformedError
from dealerstock.extraction.heuristic import pair_prices_with_images
from dealerstock.models.vehicle import Category
from dealerstock.sources import ADAPTERS, build_adapters
from dealerstock.sources import autoscout24, landwirt, motornetzwerk, willhaben, zweispurig
from dealerstock.sources.gallery import enrich_galleries

BASE_URL = "https://www.autohaus-demo.at"

# ---------------------------------------------------------------------------
# Motornetzwerk
# ---------------------------------------------------------------------------

MOTORNETZWERK_PAYLOAD = {
    "vehicles": [
        {
            "id": 4711001,
            "modelName": "VW Golf 1.6 TDI Comfortline",
            "price": "16990.0",
            "registrationYear": 2018,
            "mileage": 98000,
            "fuelName": "Diesel",
            "engineEffectKw": 85,
            "engineEffectPs": 116,
            "transmissionName": "Schaltgetriebe",
            "image": "https://img.example.at/4711001/1.jpg",
            "allImages": ["https://img.example.at/4711001/1.jpg", "https://img.example.at/4711001/2.jpg"],
        },
        {"id": 4711002, "type": "Skoda Octavia Combi", "price": "", "registrationYear": 2019},
    ]
}

MOTORNETZWERK_PAGE = """
<div class="list">
  <article>
    <a href="/fahrzeugdetails?vid=555"><img src="/img/555.jpg" alt="Skoda Octavia Combi Style"></a>
    <h3>Skoda Octavia Combi Style</h3>
    <span class="price">€ 18.900,-</span>
    <ul>
      <li>EZ: 2018 // 98.000 km // Diesel</li>
      <li>85 kw / 116 PS // Automatik</li>
    </ul>
  </article>
</div>
"""


def test_motornetzwerk_maps_api_payload() -> None:
    raws = motornetzwerk.map_api_payload(MOTORNETZWERK_PAYLOAD, base_url=BASE_URL)

    assert len(raws) == 2
    first = raws[0]
    assert first.id == "4711001"
    assert first.title == "VW Golf 1.6 TDI Comfortline"
    assert first.price == "16990.0"
    assert first.power_kw == 85
    assert first.images == ["https://img.example.at/4711001/1.jpg", "https://img.example.at/4711001/2.jpg"]
    assert first.url == f"{BASE_URL}/fahrzeugdetails?vid=4711001"
    assert raws[1].title == "Skoda Octavia Combi"


def test_motornetzwerk_accepts_bare_list_and_rejects_other_shapes() -> None:
    assert len(motornetzwerk.map_api_payload(MOTORNETZWERK_PAYLOAD["vehicles"])) == 2
    with pytest.raises(UpstreamMalformedError):
        motornetzwerk.map_api_payload({"error": "maintenance"})


def test_motornetzwerk_parses_listing_page() -> None:
    raws = motornetzwerk.parse_listing_page(MOTORNETZWERK_PAGE, base_url=BASE_URL)

    assert len(raws) == 1
    raw = raws[0]
    assert raw.id == "555"
    assert raw.title == "Skoda Octavia Combi Style"
    assert raw.price == "€ 18.900,-"
    assert raw.year == "2018"
    assert raw.mileage == "98.000"
    assert raw.fuel_type == "Diesel"
    assert (raw.power_kw, raw.power_ps) == ("85", "116")
    assert raw.transmission == "Automatik"
    assert raw.image == f"{BASE_URL}/img/555.jpg"
    assert raw.url == f"{BASE_URL}/fahrzeugdetails?vid=555"


def _motornetzwerk_config(**endpoints: str) -> StockConfig:
    return StockConfig(
        data_source=DataSourceConfig(
            type="motornetzwerk",
            dealer_id="4711",
            base_url=BASE_URL,
            api_endpoints=ApiEndpoints(**endpoints),
        ),
        render_enabled=False,
    )


@pytest.mark.asyncio
async def test_motornetzwerk_adapter_uses_api_per_category(transport: FakeTransport) -> None:
    config = _motornetzwerk_config(pkw="https://api.example.at/pkw", nutzfahrzeuge="https://api.example.at/nfz")
    transport.payloads["https://api.example.at/pkw"] = MOTORNETZWERK_PAYLOAD
    transport.payloads["https://api.example.at/nfz"] = {
        "vehicles": [{"id": 9, "modelName": "VW Crafter 35 Kastenwagen", "price": 32900}]
    }

    result = await motornetzwerk.MotornetzwerkAdapter(config, transport).fetch()

    assert result.partial is False
    assert result.tier == "structured_api"
    assert {vehicle.id: vehicle.category for vehicle in result.vehicles} == {
        "4711001": Category.PKW,
        "9": Category.NUTZFAHRZEUGE,
    }


@pytest.mark.asyncio
async def test_motornetzwerk_adapter_reports_partial_on_failed_target(transport: FakeTransport) -> None:
    config = _motornetzwerk_config(pkw="https://api.example.at/pkw", nutzfahrzeuge="https://api.example.at/nfz")
    transport.payloads["https://api.example.at/pkw"] = MOTORNETZWERK_PAYLOAD

    result = await motornetzwerk.MotornetzwerkAdapter(config, transport).fetch()

    assert result.partial is True
    assert result.error is not None and "nutzfahrzeuge" in result.error
    assert [vehicle.id for vehicle in result.vehicles] == ["4711001"]


@pytest.mark.asyncio
async def test_adapter_without_targets_is_partial(transport: FakeTransport) -> None:
    result = await motornetzwerk.MotornetzwerkAdapter(_motornetzwerk_config(), transport).fetch()

    assert result.partial is True
    assert result.vehicles == []
    assert transport.calls == []


# ---------------------------------------------------------------------------
# willhaben
# ---------------------------------------------------------------------------

WILLHABEN_URL = "https://www.willhaben.at/iad/haendler/autohaus-demo/auto"

WILLHABEN_ITEM_LIST_PAGE = """
<html><head>
<script type="application/ld+json">
{"@context": "https://schema.org", "@type": "ItemList", "itemListElement": [
  {"@type": "ListItem", "position": 1, "url": "/iad/gebrauchtwagen/d/auto/vw-golf-7-1234567/",
   "item": {"name": "VW Golf 7 Highline", "offers": {"price": "21990"}}}
]}
</script>
</head><body>
<div id="1234567" class="card">
  <h3>VW Golf 7 Highline</h3>
  <span data-testid="search-result-entry-price-1234567">€ 21.990</span>
  <img src="https://cache.willhaben.at/mmo/7/123/4567_hoved.jpg">
  <div data-testid="search-result-entry-attributes-0"><span>2017</span></div>
  <div data-testid="search-result-entry-attributes-1"><span>85.000</span></div>
  <div data-testid="search-result-entry-subheader">Diesel · Automatik</div>
</div>
</body></html>
"""

WILLHABEN_CARDS_PAGE = """
<div id="7654321" class="result">
  <a href="/iad/gebrauchtwagen/d/auto/ford-transit/7654321/"><h3>Ford Transit Custom L2</h3></a>
  <span data-testid="price">€ 29.500</span>
</div>
<div id="7654322" class="result">
  <a href="/iad/gebrauchtwagen/d/auto/renault-master/7654322/"><h3>Renault Master dCi</h3></a>
  <span data-category="nutzfahrzeuge"></span>
  <span data-testid="price">€ 24.800</span>
</div>
<div id="7654323" class="result">
  <a href="/iad/gebrauchtwagen/d/auto/opel-astra/7654323/"><h3>Opel Astra Sports Tourer</h3></a>
  <span data-testid="price">€ 12.400</span>
</div>
"""


def test_willhaben_item_list_is_completed_from_card() -> None:
    raws = willhaben.parse_item_list(WILLHABEN_ITEM_LIST_PAGE)

    assert len(raws) == 1
    raw = raws[0]
    assert raw.id == "1234567"
    assert raw.title == "VW Golf 7 Highline"
    assert raw.price == "21990"
    assert raw.year == "2017"
    assert raw.mileage == "85.000"
    assert raw.fuel_type == "Diesel"
    assert raw.transmission == "Automatik"
    assert raw.image == "https://cache.willhaben.at/mmo/7/123/4567_hoved.jpg"
    assert raw.url == "https://www.willhaben.at/iad/gebrauchtwagen/d/auto/vw-golf-7-1234567/"
    assert raw.category is None


def test_willhaben_cards_carry_markup_category_hint() -> None:
    raws = {raw.id: raw for raw in willhaben.parse_cards(WILLHABEN_CARDS_PAGE)}

    assert set(raws) == {"7654321", "7654322", "7654323"}
    assert raws["7654322"].category == Category.NUTZFAHRZEUGE.value
    assert raws["7654321"].category is None
    assert raws["7654321"].title == "Ford Transit Custom L2"
    assert raws["7654321"].price == "29.500"


@pytest.mark.asyncio
async def test_willhaben_adapter_classifies_cards(transport: FakeTransport) -> None:
    config = StockConfig(
        data_source=DataSourceConfig(type="willhaben", source_urls=SourceUrls(willhaben=WILLHABEN_URL)),
    )
    transport.pages[WILLHABEN_URL] = WILLHABEN_CARDS_PAGE

    adapter = willhaben.WillhabenAdapter(config, transport, classifier=KeywordClassifier())
    result = await adapter.fetch()

    assert result.tier == "static_html"
    assert {vehicle.id: vehicle.category for vehicle in result.vehicles} == {
        "7654321": Category.NUTZFAHRZEUGE,
        "7654322": Category.NUTZFAHRZEUGE,
        "7654323": Category.PKW,
    }
    assert transport.urls("text") == [WILLHABEN_URL]


# ---------------------------------------------------------------------------
# AutoScout24
# ---------------------------------------------------------------------------

AUTOSCOUT_URL = "https://www.autoscout24.at/haendler/autohaus-demo"
LISTING_UUID = "0a1b2c3d-1111-2222-3333-444455556666"
IMAGE_UUID = "abcdef12-0000-0000-0000-000000000000"

AUTOSCOUT_PAGE = f"""
<main>
<article id="{LISTING_UUID}" class="cldt-summary-full-item">
  <a href="/angebote/audi-a4-avant-diesel-grau-{LISTING_UUID}">
    <h2>Audi A4</h2><span class="version">Avant 2.0 TDI **Navi**</span>
  </a>
  <img src="https://prod.pictures.autoscout24.net/listing-images/{LISTING_UUID}_{IMAGE_UUID}.jpg/250x188.webp">
  <p data-testid="regular-price">€ 24.990,-</p>
  <span class="detail-item">05/2019</span><span class="detail-item">87.500 km</span>
  <span>Diesel</span><span>Automatik</span><span>140 kW (190 PS)</span>
</article>
</main>
"""

AUTOSCOUT_ITEM_LIST = """
<script type="application/ld+json">
{"@type": "ItemList", "itemListElement": [
  {"item": {"@type": "Car", "identifier": "0a1b2c3d-1111-2222-3333-444455556666", "name": "Audi A4 Avant",
            "offers": {"price": 24990}, "productionDate": "2019-05",
            "mileageFromOdometer": {"value": 87500, "unitCode": "KMT"},
            "engine": {"power": 140}, "fuelType": "Diesel",
            "image": ["https://prod.pictures.autoscout24.net/listing-images/x.jpg"],
            "url": "/angebote/audi-a4"}}
]}
</script>
"""


def test_autoscout24_listing_id_requires_uuid() -> None:
    assert autoscout24.listing_id(LISTING_UUID) == f"autoscout-{LISTING_UUID}"
    assert autoscout24.listing_id("12345") is None


def test_autoscout24_parses_listing_page() -> None:
    raws = autoscout24.parse_listing_page(AUTOSCOUT_PAGE, dealer_url=AUTOSCOUT_URL)

    assert len(raws) == 1
    raw = raws[0]
    assert raw.id == f"autoscout-{LISTING_UUID}"
    assert raw.title == "Audi A4 Avant 2.0 TDI Navi"
    assert raw.price == 24990
    assert raw.year == "2019"
    assert raw.mileage == "87.500"
    assert raw.fuel_type == "Diesel"
    assert raw.transmission == "Automatik"
    assert (raw.power_kw, raw.power_ps) == ("140", "190")
    assert raw.image == (
        f"https://prod.pictures.autoscout24.net/listing-images/{LISTING_UUID}_{IMAGE_UUID}.jpg/480x360.webp"
    )
    assert raw.url == f"https://www.autoscout24.at/angebote/audi-a4-avant-diesel-grau-{LISTING_UUID}"


def test_autoscout24_keeps_card_fields_with_their_own_listing() -> None:
    first, second = "11111111-1111-1111-1111-111111111111", "22222222-2222-2222-2222-222222222222"
    markup = f"""
    <article class="card">
      <a href="/angebote/audi-a4-avant-{first}"><h2>Audi A4 Avant 2.0 TDI</h2></a>
      <p>€ 25.990</p><p>EZ 04/2018 · 98.000 km</p>
    </article>
    <article class="card">
      <a href="/angebote/bmw-320d-touring-{second}"><h2>BMW 320d Touring xDrive</h2></a>
      <p>€ 31.500</p><p>Erstzulassung 2019 130 438 km</p>
    </article>
    """

    raws = {raw.id: raw for raw in autoscout24.parse_listing_page(markup)}

    audi, bmw = raws[f"autoscout-{first}"], raws[f"autoscout-{second}"]
    assert (audi.title, audi.price, audi.mileage) == ("Audi A4 Avant 2.0 TDI", 25990, "98.000")
    assert (bmw.title, bmw.price, bmw.year) == ("BMW 320d Touring xDrive", 31500, "2019")
    assert bmw.mileage == "130 438"
    assert bmw.url == f"https://www.autoscout24.at/angebote/bmw-320d-touring-{second}"


def test_autoscout24_parses_item_list() -> None:
    raws = autoscout24.parse_item_list(AUTOSCOUT_ITEM_LIST)

    assert len(raws) == 1
    raw = raws[0]
    assert raw.id == f"autoscout-{LISTING_UUID}"
    assert raw.price == 24990
    assert raw.year == "2019-05"
    assert raw.mileage == 87500
    assert raw.power_kw == 140
    assert raw.url == "https://www.autoscout24.at/angebote/audi-a4"


@pytest.mark.asyncio
async def test_autoscout24_adapter_drops_listings_repeated_on_commercial_page(transport: FakeTransport) -> None:
    config = StockConfig(
        data_source=DataSourceConfig(type="autoscout24", source_urls=SourceUrls(autoscout24=AUTOSCOUT_URL)),
    )
    transport.pages[AUTOSCOUT_URL] = AUTOSCOUT_PAGE
    transport.pages[f"{AUTOSCOUT_URL}?atype=X"] = AUTOSCOUT_PAGE

    result = await autoscout24.AutoScout24Adapter(config, transport).fetch()

    assert [vehicle.id for vehicle in result.vehicles] == [f"autoscout-{LISTING_UUID}"]
    assert result.vehicles[0].category is Category.PKW
    assert result.vehicles[0].year == 2019
    assert result.partial is False


# ---------------------------------------------------------------------------
# landwirt
# ---------------------------------------------------------------------------

LANDWIRT_PAGE = """
<section>
<article>
  <a href="/detail/liebherr-a-914-compact-1234567" aria-label="Liebherr A 914 Compact Mobilbagger">
    <img src="https://static.landwirt.com/media/k/1234567-liebherr-1.jpg">
  </a>
  <strong>89.000 €</strong>
  <span>Bj. 2016</span><span>115 kW / 156 PS</span><span>8.450 h</span>
</article>
<article>
  <a href="/detail/kubota-kx-019-7654321" aria-label="Kubota KX 019-4"></a>
  <span>Preis auf Anfrage</span>
</article>
<article>
  <a href="/list?sort=price" aria-label="Sortierung ändern"></a>
</article>
</section>
"""


def test_landwirt_parses_machine_articles() -> None:
    raws = landwirt.parse_machines(LANDWIRT_PAGE)

    assert [raw.id for raw in raws] == ["landwirt-1234567", "landwirt-7654321"]
    machine, on_request = raws
    assert machine.title == "Liebherr A 914 Compact Mobilbagger"
    assert machine.price is not None and "89.000" in machine.price
    assert machine.price_on_request is False
    assert machine.year == "2016"
    assert (machine.power_kw, machine.power_ps) == ("115", "156")
    assert machine.operating_hours == "8.450"
    assert machine.image == "https://static.landwirt.com/media/k/1234567-liebherr-1.jpg"
    assert machine.url == "https://www.landwirt.com/detail/liebherr-a-914-compact-1234567"
    assert machine.category is None
    assert on_request.price is None
    assert on_request.price_on_request is True


def test_landwirt_detail_links_fallback() -> None:
    raws = landwirt.parse_detail_links(
        '<a href="/detail/case-ih-puma-185-cvx-998877">x</a><a href="/detail/case-ih-puma-185-cvx-998877">y</a>'
    )

    assert len(raws) == 1
    assert raws[0].title == "Case Ih Puma 185 Cvx"
    assert raws[0].price_on_request is True


def test_landwirt_gallery_filters_icons_and_thumbnails() -> None:
    markup = """
    <img src="https://static.landwirt.com/media/k/1234567-liebherr-1.jpg">
    <img src="https://static.landwirt.com/media/k/1234567-liebherr-2.jpg">
    <img src="https://static.landwirt.com/media/k/1234567-liebherr-2kl.jpg">
    <img src="https://static.landwirt.com/mobileicons/logo.png">
    """

    assert landwirt.parse_gallery(markup) == [
        "https://static.landwirt.com/media/k/1234567-liebherr-1.jpg",
        "https://static.landwirt.com/media/k/1234567-liebherr-2.jpg",
    ]


@pytest.mark.asyncio
async def test_landwirt_adapter_defaults_to_baumaschine(transport: FakeTransport) -> None:
    url = "https://www.landwirt.com/dealer/info/autohaus-demo/machines"
    config = StockConfig(
        data_source=DataSourceConfig(type="landwirt", dealer_slug="autohaus-demo"),
        enrich_galleries=False,
    )
    transport.pages[url] = LANDWIRT_PAGE

    result = await landwirt.LandwirtAdapter(config, transport).fetch()

    assert {vehicle.category for vehicle in result.vehicles} == {Category.BAUMASCHINE}
    assert [vehicle.price for vehicle in result.vehicles] == [89000, None]


# ---------------------------------------------------------------------------
# zweispurig
# ---------------------------------------------------------------------------

ZWEISPURIG_URL = "https://www.zweispurig.at/autohaus-demo/autohaendler-fahrzeuge/4711/"

ZWEISPURIG_PAGE = """
<div class="listing">
  <a href="https://www.zweispurig.at/vw-caddy-kastenwagen-diesel-weiss-wien/details-4455667"><h3>VW</h3><h4>Caddy Kastenwagen 2.0 TDI</h4></a>
  <img src="https://files.zweispurig.at/fahrzeugbilder/sm/4455667_1.jpg">
  <span>€ 17.900,-</span>
  <h5>03/2020</h5><span>64.000 km</span>
  <table><tr><td>Diesel</td><td>Schaltgetriebe</td></tr></table>
  <span>102 PS (75 KW)</span>
</div>
<hr>
<div class="listing">
  <a href="https://www.zweispurig.at/skoda-fabia-benzin-rot-wien/details-4455668"><h3>Skoda</h3><h4>Fabia Combi **TOP**</h4></a>
  <img src="https://files.zweispurig.at/fahrzeugbilder/sm/4455668_1.jpg">
  <span>€ 9.990,-</span>
  <h5>11/2017</h5><span>Tageszulassung</span>
</div>
"""


def test_zweispurig_parses_sections() -> None:
    raws = {raw.id: raw for raw in zweispurig.parse_listings(ZWEISPURIG_PAGE)}

    caddy = raws["zweispurig-4455667"]
    assert caddy.title == "VW Caddy Kastenwagen 2.0 TDI"
    assert caddy.price == "17.900"
    assert caddy.year == "2020"
    assert caddy.mileage == "64.000"
    assert caddy.fuel_type == "Diesel"
    assert caddy.transmission == "Schaltgetriebe"
    assert (caddy.power_ps, caddy.power_kw) == ("102", "75")
    assert caddy.vehicle_type == "Gebrauchtwagen"
    assert caddy.category == Category.NUTZFAHRZEUGE.value
    assert caddy.image == "https://files.zweispurig.at/fahrzeugbilder/sm/4455667_1.jpg"

    fabia = raws["zweispurig-4455668"]
    assert fabia.title == "Skoda Fabia Combi"
    assert fabia.vehicle_type == "Tageszulassung"
    assert fabia.category is None


def test_zweispurig_gallery_collapses_thumbnail_directories() -> None:
    markup = """
    <img src="https://files.zweispurig.at/fahrzeugbilder/sm/4455667_1.jpg">
    <a href="https://files.zweispurig.at/fahrzeugbilder/lg/4455667_1.jpg"></a>
    <img src="https://files.zweispurig.at/fahrzeugbilder/4455667_2.jpg">
    <img src="https://files.zweispurig.at/fahrzeugbilder/placeholder.jpg">
    """

    assert zweispurig.parse_gallery(markup) == [
        "https://files.zweispurig.at/fahrzeugbilder/4455667_1.jpg",
        "https://files.zweispurig.at/fahrzeugbilder/4455667_2.jpg",
    ]


@pytest.mark.asyncio
async def test_zweispurig_adapter_enriches_galleries(transport: FakeTransport) -> None:
    config = StockConfig(
        data_source=DataSourceConfig(type="zweispurig", dealer_slug="autohaus-demo", dealer_id="4711"),
    )
    detail_url = "https://www.zweispurig.at/vw-caddy-kastenwagen-diesel-weiss-wien/details-4455667"
    transport.pages[ZWEISPURIG_URL] = ZWEISPURIG_PAGE
    transport.pages[detail_url] = '<img src="https://files.zweispurig.at/fahrzeugbilder/lg/4455667_9.jpg">'

    result = await zweispurig.ZweispurigAdapter(config, transport, classifier=KeywordClassifier()).fetch()

    vehicles = {vehicle.id: vehicle for vehicle in result.vehicles}
    assert vehicles["zweispurig-4455667"].all_images == ["https://files.zweispurig.at/fahrzeugbilder/4455667_9.jpg"]
    # The second detail page is missing; the listing keeps its card image.
    assert vehicles["zweispurig-4455668"].image == "https://files.zweispurig.at/fahrzeugbilder/sm/4455668_1.jpg"
    assert result.partial is False


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def test_pair_prices_with_images_uses_each_image_once() -> None:
    markup = (
        '<h3>Opel Astra Sports Tourer</h3><img src="https://img.example.at/a.jpg">'
        "<span>€ 12.500</span><span>€ 12.900</span>"
        f"<p>{'Ausstattung ' * 40}</p>"
        '<h3>Mazda CX-5 Skyactiv</h3><img src="https://img.example.at/b.jpg">'
        "<span>€ 23.900</span><span>€ 300</span>"
    )

    raws = pair_prices_with_images(markup, re.compile(r'src="(https://img\.example\.at/[^"]+)"'))

    assert [(raw.title, raw.price, raw.image) for raw in raws] == [
        ("Opel Astra Sports Tourer", 12500, "https://img.example.at/a.jpg"),
        ("Mazda CX-5 Skyactiv", 23900, "https://img.example.at/b.jpg"),
    ]


@pytest.mark.asyncio
async def test_enrich_galleries_keeps_vehicle_when_page_fails(transport: FakeTransport) -> None:
    ok = make_vehicle("1", "VW Golf").model_copy(update={"url": "https://example.at/1"})
    broken = make_vehicle("2", "VW Polo").model_copy(update={"url": "https://example.at/2"})
    no_url = make_vehicle("3", "VW Up")
    transport.pages["https://example.at/1"] = "page-1"

    enriched = await enrich_galleries(
        [ok, broken, no_url],
        transport,
        lambda markup: [f"https://img.example.at/{markup}.jpg"],
        concurrency=2,
    )

    assert enriched[0].image == "https://img.example.at/page-1.jpg"
    assert enriched[0].all_images == ["https://img.example.at/page-1.jpg"]
    assert enriched[1] is broken
    assert enriched[2] is no_url
    assert transport.urls("text") == ["https://example.at/1", "https://example.at/2"]


def test_build_adapters_follows_combined_order(transport: FakeTransport) -> None:
    config = StockConfig(data_source=DataSourceConfig(type="combined", combined_order=("willhaben", "landwirt")))

    adapters = build_adapters(config, transport)

    assert [adapter.source_id for adapter in adapters] == ["willhaben", "landwirt"]
    assert set(ADAPTERS) == {"motornetzwerk", "willhaben", "autoscout24", "landwirt", "zweispurig"}
