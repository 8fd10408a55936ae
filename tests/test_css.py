from __future__ import annotations

from font_grabber.css import (
    FamilyUsage,
    extract_font_faces,
    extract_font_families,
    extract_font_files,
    extract_font_stacks,
    extract_imports,
    is_font_variable,
)

FACES = """
/* brand faces */
@font-face {
  font-family: "Brand Sans";
  src: url(/f/brand.woff2) format("woff2"), url(/f/brand.woff) format("woff");
  font-weight: 700;
  font-display: swap;
}
@font-face { font-family: 'Brand Sans'; src: url(/f/brand-it.woff2); font-style: italic; }
@font-face { font-family: Mono; src: url(data:font/woff2;base64,d09GMgABAAAA) format("woff2"); }
@font-face { src: url(/f/orphan.woff2); }
"""


def test_every_named_font_face_is_kept() -> None:
    faces = extract_font_faces(FACES)

    assert [f.family for f in faces] == ["Brand Sans", "Brand Sans", "Mono"]
    bold, italic, mono = faces
    assert bold.weight == "700"
    assert bold.style == "normal"
    assert bold.display == "swap"
    assert bold.src.startswith("url(/f/brand.woff2)")
    assert italic.style == "italic"
    assert italic.weight == "normal"
    assert italic.display == ""
    assert mono.src == 'url(data:font/woff2;base64,d09GMgABAAAA) format("woff2")'


def test_malformed_css_does_not_raise() -> None:
    junk = "@font-face { font-family: ; src: url( }}} body { font-family: ; @import"
    assert extract_font_faces(junk) == []
    assert extract_imports(junk, "https://example.com/") == []
    extract_font_families(junk)
    assert extract_font_faces("") == []


def test_imports_are_filtered_to_font_resources() -> None:
    css = """
    @import url("https://fonts.googleapis.com/css?family=Lato");
    @import 'theme.css';
    @import url(/static/fonts/icons.css);
    @import "type/face.woff2?v=2";
    """
    urls = [ref.url for ref in extract_imports(css, "https://example.com/css/main.css")]
    assert urls == [
        "https://fonts.googleapis.com/css?family=Lato",
        "https://example.com/static/fonts/icons.css",
        "https://example.com/css/type/face.woff2?v=2",
    ]


def test_family_usage_and_shorthand() -> None:
    css = """
    body { color: #111; font-family: "Inter", Arial, sans-serif; }
    .lead { font: italic 700 18px/1.4 Georgia; }
    .tiny { font: 12px 1.2; }
    @font-face { font-family: Inter; src: url(a.woff2); }
    """
    usages = extract_font_families(css)
    assert FamilyUsage("body", "Inter, Arial, sans-serif") in usages
    assert FamilyUsage(".lead", "Georgia", shorthand=True) in usages
    assert all(u.selector != ".tiny" for u in usages)
    assert all(not u.selector.startswith("@font-face") for u in usages)


def test_font_files_resolve_against_source_url() -> None:
    css = "@font-face { font-family: A; src: url('../fonts/a.woff2') format('woff2'), url(a.ttf?v=1); }"
    refs = extract_font_files(css, "https://cdn.example.com/css/site.css")
    assert [(r.url, r.format) for r in refs] == [
        ("https://cdn.example.com/fonts/a.woff2", "woff2"),
        ("https://cdn.example.com/css/a.ttf?v=1", "ttf"),
    ]


def test_font_stacks_skip_face_rules_and_important() -> None:
    css = "@font-face { font-family: A; } h1 { font-family: A, serif !important; }"
    assert extract_font_stacks(css) == ["A, serif"]


def test_font_variable_filter() -> None:
    assert is_font_variable("--font-body", "Inter, sans-serif")
    assert is_font_variable("--brand-typeface", "Georgia")
    assert not is_font_variable("--font-body", "var(--base)")
    assert not is_font_variable("--text-color", "")
    assert not is_font_variable("--spacing", "4px")


def test_selector_excludes_preceding_statements() -> None:
    usages = extract_font_families('@charset "utf-8";body{font-family:Inter}')
    assert usages == [FamilyUsage("body", "Inter")]
    shorthand = extract_font_families('@import "x.css";.lead{font: 16px Georgia}')
    assert shorthand == [FamilyUsage(".lead", "Georgia", shorthand=True)]


def test_font_file_with_fragment() -> None:
    css = "@font-face { font-family: Icons; src: url(icons.woff2#iefix) format('woff2'), url('icons.svg#icons'); }"
    refs = extract_font_files(css, "https://example.com/css/")
    assert [(r.url, r.format) for r in refs] == [("https://example.com/css/icons.woff2#iefix", "woff2")]
