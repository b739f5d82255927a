import logging
import xml.etree.ElementTree as ET

import pytest

import sitemap_tool

NS = {"sm": "http://www.sitemaps.org/schemas/sitemap/0.9"}


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def locs(path, tag):
    return [el.text for el in ET.parse(path).getroot().findall(f"sm:{tag}/sm:loc", NS)]


def test_paths_with_base(tmp_path, capsys):
    out = tmp_path / "out"
    code = sitemap_tool.main([
        "--out", str(out), "--log-dir", "",
        "--base", "https://example.com/",
        "--changefreq", "weekly", "--priority", "0.7", "--lastmod", "2024-05-01",
        "/", "/about",
    ])

    assert code == 0
    assert locs(out / "sitemap_0.xml", "url") == ["https://example.com/", "https://example.com/about"]
    assert locs(out / "sitemap_index.xml", "sitemap") == ["https://example.com/sitemap_0.xml"]
    assert f"Wrote {out / 'sitemap_index.xml'}" in capsys.readouterr().out


def test_explicit_prefix_overrides_base(tmp_path):
    code = sitemap_tool.main([
        "--out", str(tmp_path), "--log-dir", "",
        "--base", "https://example.com",
        "--sitemap-loc-prefix", "https://static.example.com/maps",
        "/a",
    ])

    assert code == 0
    assert locs(tmp_path / "sitemap_index.xml", "sitemap") == ["https://static.example.com/maps/sitemap_0.xml"]


def test_csv_input(tmp_path):
    csv_path = tmp_path / "urls.csv"
    csv_path.write_text("loc,lastmod\n/a,2024-01-01\n/b,2024-02-01\n", encoding="utf-8")
    out = tmp_path / "out"

    assert sitemap_tool.main(["--out", str(out), "--log-dir", "", "--csv", str(csv_path)]) == 0
    root = ET.parse(out / "sitemap_index.xml").getroot()
    assert root.find("sm:sitemap/sm:lastmod", NS).text == "2024-02-01T00:00:00+00:00"


def test_invalid_record_fails_with_status_1(tmp_path):
    out = tmp_path / "out"
    code = sitemap_tool.main(["--out", str(out), "--log-dir", "", "--priority", "1.5", "/a"])

    assert code == 1
    assert not (out / "sitemap_index.xml").exists()


def test_log_file_is_written(tmp_path):
    log_dir = tmp_path / "logs"
    sitemap_tool.main(["--out", str(tmp_path / "out"), "--log-dir", str(log_dir), "/a"])
    assert (log_dir / "sitemap.log").is_file()


def test_needs_exactly_one_source(tmp_path):
    with pytest.raises(SystemExit):
        sitemap_tool.main(["--out", str(tmp_path), "--log-dir", ""])
    with pytest.raises(SystemExit):
        sitemap_tool.main(["--out", str(tmp_path), "--log-dir", "", "--csv", "x.csv", "/a"])


def test_csv_with_invalid_utf8_fails_with_status_1(tmp_path):
    csv_path = tmp_path / "urls.csv"
    csv_path.write_bytes(b"loc\n/a\n/\xff\n")
    out = tmp_path / "out"

    assert sitemap_tool.main(["--out", str(out), "--log-dir", "", "--csv", str(csv_path)]) == 1
    assert not (out / "sitemap_index.xml").exists()
