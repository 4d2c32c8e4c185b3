"""
Tests for partial loading, content validation and injection.

Run with: pytest tests/test_partials.py -v
"""

import copy
import json

import pytest

from conftest import SAMPLE_SRC, write
from partials import (
    PARTIAL_NAMES,
    ContentError,
    embed,
    inject_content,
    load_content,
    load_partials,
    partial_filename,
    replace_all,
    replace_each,
    replace_first,
    validate_content,
)

NAV_PARTIAL = (
    '<nav>'
    '<a href="{{DESTINATION}}">{{LABEL}}</a>'
    '<a href="{{DESTINATION}}">{{LABEL}}</a>'
    '<a href="{{DESTINATION}}">{{LABEL}}</a>'
    '</nav>'
)


def nav_items(*labels):
    return [{"LABEL": label, "DESTINATION": f"#{label.lower()}"} for label in labels]


@pytest.fixture
def content():
    with open(SAMPLE_SRC / "assets" / "content" / "copy.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def partials():
    return {
        "head": "<meta charset=\"utf-8\">",
        "headerHTML": NAV_PARTIAL,
        "heroSection": "<h1>{{TITLE}}</h1><p>{{DESCRIPTION}}</p><a>{{CTA}}</a><!-- INVOICES -->",
        "invoices": "<li>{{LABEL}} {{AMOUNT}}</li><li>{{LABEL}} {{AMOUNT}}</li>",
        "aboutSection": "<h2>{{TITLE}}</h2><p>{{DESCRIPTION}}</p><ol><!-- STEPS --></ol>",
        "steps": "<li>{{TITLE}}: {{DESCRIPTION}}</li>" * 3,
        "servicesSection": "<h2>{{TITLE}}</h2><p>{{DESCRIPTION}}</p><!-- SERVICES -->",
        "services": "<article>{{TITLE}} {{DESCRIPTION}}</article>" * 3,
        "contactSection": "<h2>{{TITLE}}</h2><p>{{DESCRIPTION}}</p><!-- CONTACT FORM -->",
        "contactForm": "<form></form>",
        "footerHTML": "<footer></footer>",
    }


class TestLoadPartials:
    """Tests for reading partial files."""

    def test_filename_transform(self):
        assert partial_filename("headerHTML") == "header.html"
        assert partial_filename("footerHTML") == "footer.html"
        assert partial_filename("heroSection") == "heroSection.html"

    def test_loads_every_named_partial(self):
        loaded = load_partials(SAMPLE_SRC / "partials")

        assert set(loaded) == set(PARTIAL_NAMES)
        assert "<header" in loaded["headerHTML"]

    def test_missing_partial_is_fatal(self, tmp_path):
        write(tmp_path / "head.html", "<meta>")

        with pytest.raises(FileNotFoundError):
            load_partials(tmp_path, ["head", "footerHTML"])


class TestContentValidation:
    """Tests for the eager content document checks."""

    def test_sample_is_valid(self, content):
        validate_content(content)

    def test_missing_field(self, content):
        del content["hero"]["cta"]

        with pytest.raises(ContentError, match=r"hero\.cta"):
            validate_content(content)

    def test_missing_section(self, content):
        del content["contact"]

        with pytest.raises(ContentError, match=r"contact\.title"):
            validate_content(content)

    def test_missing_list_item_key(self, content):
        del content["header"]["nav"][1]["link"]

        with pytest.raises(ContentError, match=r"header\.nav\[1\]\.link"):
            validate_content(content)

    def test_wrong_type(self, content):
        content["invoices"]["amounts"] = "$10"

        with pytest.raises(ContentError, match="should be a list"):
            validate_content(content)

    def test_load_content_validates(self, tmp_path):
        path = write(tmp_path / "copy.json", json.dumps({"header": {"nav": []}}))

        with pytest.raises(ContentError):
            load_content(path)


class TestReplacement:
    """Tests for the substitution helpers."""

    def test_replace_first(self):
        assert replace_first("{{A}} {{A}}", "A", "x") == "x {{A}}"

    def test_replace_all(self):
        assert replace_all("{{A}} {{A}}", "A", "x") == "x x"

    def test_embed(self):
        assert embed("<div><!-- CHILD --></div>", "CHILD", "<p></p>") == "<div><p></p></div>"

    def test_list_matches_markers(self):
        html = replace_each(NAV_PARTIAL, nav_items("About", "Services", "Contact"))

        assert html == (
            '<nav>'
            '<a href="#about">About</a>'
            '<a href="#services">Services</a>'
            '<a href="#contact">Contact</a>'
            '</nav>'
        )
        assert "{{" not in html

    def test_shorter_list_leaves_markers(self):
        html = replace_each(NAV_PARTIAL, nav_items("About"))

        assert html.count("{{LABEL}}") == 2
        assert html.count("{{DESTINATION}}") == 2
        assert html.startswith('<nav><a href="#about">About</a>')

    def test_longer_list_drops_extras_with_warning(self, capsys):
        html = replace_each(NAV_PARTIAL, nav_items("A", "B", "C", "D", "E"))

        assert "D" not in html and "E" not in html
        out = capsys.readouterr().out
        assert "[WARN]" in out
        assert "dropped 2 extra value(s)" in out

    def test_values_not_resubstituted(self):
        html = replace_each("{{AMOUNT}}|{{AMOUNT}}", [{"AMOUNT": "$1"}, {"AMOUNT": "$2"}])

        assert html == "$1|$2"


class TestInjectContent:
    """Tests for inject_content."""

    def test_sections_resolved(self, partials, content):
        sections = inject_content(partials, content)

        assert set(sections) == {"head", "header", "hero", "about", "services", "contact", "footer"}
        assert sections["hero"].startswith(f"<h1>{content['hero']['title']}</h1>")
        assert "<!-- INVOICES -->" not in sections["hero"]
        assert sections["hero"].count(content["invoices"]["label"]) == 2
        assert content["invoices"]["amounts"][0] in sections["hero"]
        assert "<!-- STEPS -->" not in sections["about"]
        assert "<!-- SERVICES -->" not in sections["services"]
        assert sections["contact"].endswith("<form></form>")

    def test_child_titles_do_not_leak_into_parent(self, partials, content):
        """Each section title comes from its own field, not from its children."""
        sections = inject_content(partials, content)

        assert sections["about"].startswith(f"<h2>{content['about']['title']}</h2>")
        assert f"<li>{content['about']['steps'][0]['title']}:" in sections["about"]
        assert sections["services"].startswith(f"<h2>{content['services']['title']}</h2>")

    def test_input_partials_untouched(self, partials, content):
        before = copy.deepcopy(partials)

        inject_content(partials, content)

        assert partials == before

    def test_sample_site_fully_resolved(self, content):
        sections = inject_content(load_partials(SAMPLE_SRC / "partials"), content)

        for name, html in sections.items():
            assert "{{" not in html, name
        labels = [item["label"] for item in content["header"]["nav"]]
        positions = [sections["header"].index(label) for label in labels]
        assert positions == sorted(positions)
