import threading
from functools import partial
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import pytest

from xtract.config import load_config
from xtract.fields import FieldSpec
from xtract.scraper import Scraper


@pytest.fixture(scope="module")
def local_server():
    base_dir = Path(__file__).parent / "data"
    handler = partial(SimpleHTTPRequestHandler, directory=str(base_dir))
    server = ThreadingHTTPServer(("localhost", 0), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    thread.join()


def test_extract_local_listing(tmp_path, local_server):
    port = local_server.server_address[1]
    config = load_config(tmp_path / "absent.yaml")
    config.logging.verbose = False
    config.fetch.max_retries = 0
    specs = [
        FieldSpec(".product .name", name="name"),
        FieldSpec(".product .link", attributes=["href"], name="link"),
        FieldSpec(".product .price", pattern=r"^(Price: )(\d+)( EUR)$", attributes=["text", "data-currency"], name="price"),
    ]
    with Scraper(specs, config=config) as scraper:
        records = scraper.extract_many(f"http://localhost:{port}/listing.html")
        missing = scraper.extract_one(f"http://localhost:{port}/nope.html")
        csv_path = scraper.save_csv(tmp_path / "products.csv")

    assert missing is None
    assert [r.model_dump() for r in records] == [
        {"name": "Espresso Machine", "link_href": "/p/espresso", "price_text": "249", "price_data_currency": "EUR"},
        {"name": "Milk Frother", "link_href": "/p/frother", "price_text": "39", "price_data_currency": "EUR"},
        {"name": "Grinder", "link_href": "/p/grinder", "price_text": "", "price_data_currency": ""},
    ]
    assert csv_path.read_text(encoding="utf-8").splitlines()[0] == "name,link_href,price_text,price_data_currency"
