import logging
from pathlib import Path

import pandas as pd
import pytest

from domain.schemas import DocumentKind
from domain.taxonomy import AliasTable, MalformedDocumentError, TopicResolver, build_taxonomy_graph, check_taxonomy
from infrastructure.io import FileSystemDocumentStore, InMemoryDocumentStore, read_manifest
from infrastructure.io.store import extract_anchors, extract_links, heading_anchor, split_front_matter

REPO_CORPUS = Path(__file__).resolve().parents[2] / "corpus"


def _write(root: Path, rel: str, text: str) -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_heading_anchor_slugs_and_explicit_ids() -> None:
    assert heading_anchor("Number Input") == "number-input"
    assert heading_anchor("Sizes & Variants {#sizes}") == "sizes"
    assert heading_anchor("Don't panic") == "dont-panic"


def test_split_front_matter() -> None:
    meta, body = split_front_matter("---\nidentifier: button\n---\n# Button\n")

    assert meta == {"identifier": "button"}
    assert body == "# Button\n"
    assert split_front_matter("# Plain\n") == (None, "# Plain\n")


def test_split_front_matter_rejects_non_mapping() -> None:
    with pytest.raises(ValueError, match="mapping"):
        split_front_matter("---\n- a\n- b\n---\n")


def test_extract_anchors_skips_fenced_code() -> None:
    body = "# Input\n\n## Number Input\n\n```md\n## Not A Heading\n```\n\n### Validation\n"

    assert extract_anchors(body) == ["input", "number-input", "validation"]


def test_extract_links_resolves_relative_markdown_targets() -> None:
    body = (
        "[a](button.rules.md) [b](../Angular/tab.rules.md#usage) [c](#local) "
        "[d](https://example.com/x.md) [e](image.png) [f](../../outside.md)"
    )

    assert extract_links(body, "WebAwesome/index.md") == [
        "WebAwesome/button.rules.md",
        "Angular/tab.rules.md#usage",
        "WebAwesome/index.md#local",
    ]


def test_filesystem_store_derives_descriptors(tmp_path) -> None:
    _write(tmp_path, "README.md", "# Corpus\n")
    _write(
        tmp_path,
        "Vue/index.md",
        "---\ngroup: Reactive\n---\n# Vue\n\n- [Select](select.rules.md)\n- [Setup](setup.md)\n",
    )
    _write(
        tmp_path,
        "Vue/select.rules.md",
        "---\nidentifier: VaSelect\nname: Select\nrelated: VaOption\n---\n# Select\n\n## Multiple\n",
    )
    _write(tmp_path, "Vue/setup.md", "# Setup\n")

    docs = {d.path: d for d in FileSystemDocumentStore(tmp_path).iter_documents()}

    assert sorted(docs) == ["Vue/index.md", "Vue/select.rules.md", "Vue/setup.md"]
    assert docs["Vue/index.md"].kind is DocumentKind.INDEX
    assert docs["Vue/index.md"].links == ("Vue/select.rules.md", "Vue/setup.md")
    assert docs["Vue/select.rules.md"].kind is DocumentKind.RULE
    assert docs["Vue/select.rules.md"].topic == "Vue"
    assert docs["Vue/select.rules.md"].anchors == ("select", "multiple")
    assert docs["Vue/select.rules.md"].related == ("VaOption",)
    assert docs["Vue/setup.md"].kind is DocumentKind.GUIDE


def test_front_matter_with_component_data_but_no_identifier_is_malformed(tmp_path) -> None:
    _write(tmp_path, "WebAwesome/index.md", "---\ngroup: Standard\n---\n- [Card](card.rules.md)\n- [Tile](tile.md)\n")
    _write(tmp_path, "WebAwesome/card.rules.md", "---\nname: Card\naliases: [tile]\n---\n# Card\n")
    _write(tmp_path, "WebAwesome/tile.md", "---\naliases: [tile]\n---\n# Tile\n")

    docs = {d.path: d for d in FileSystemDocumentStore(tmp_path).iter_documents()}

    assert docs["WebAwesome/card.rules.md"].kind is DocumentKind.RULE
    assert docs["WebAwesome/tile.md"].kind is DocumentKind.RULE
    with pytest.raises(MalformedDocumentError) as excinfo:
        build_taxonomy_graph(docs.values())
    assert excinfo.value.path == "WebAwesome/card.rules.md"


def test_rules_file_without_front_matter_is_a_rule(tmp_path) -> None:
    _write(tmp_path, "WebAwesome/card.rules.md", "# Card\n")

    (doc,) = FileSystemDocumentStore(tmp_path).iter_documents()

    assert doc.kind is DocumentKind.RULE


def test_explicit_guide_kind_is_kept(tmp_path) -> None:
    _write(tmp_path, "WebAwesome/theming.md", "---\nkind: guide\nname: Theming\n---\n# Theming\n")

    (doc,) = FileSystemDocumentStore(tmp_path).iter_documents()

    assert doc.kind is DocumentKind.GUIDE
    assert doc.display_name == "Theming"


def test_camel_case_front_matter_keys_are_accepted(tmp_path, caplog) -> None:
    _write(
        tmp_path,
        "WebAwesome/card.md",
        "---\n"
        "canonicalIdentifier: card\n"
        "displayName: Card\n"
        "subsectionAnchors: ['#sizes']\n"
        "relatedIdentifiers: [button]\n"
        "owner: design-team\n"
        "---\n"
        "# Card\n\n## Variants\n",
    )

    with caplog.at_level(logging.WARNING, logger="infrastructure.io.store"):
        (doc,) = FileSystemDocumentStore(tmp_path).iter_documents()

    assert doc.kind is DocumentKind.RULE
    assert doc.identifier == "card"
    assert doc.display_name == "Card"
    assert doc.anchors == ("sizes",)
    assert doc.related == ("button",)
    assert "owner" in caplog.text


def test_invalid_front_matter_values_name_the_file(tmp_path) -> None:
    _write(tmp_path, "WebAwesome/card.rules.md", "---\nidentifier: card\nkind: widget\n---\n")

    with pytest.raises(ValueError, match="WebAwesome/card.rules.md"):
        FileSystemDocumentStore(tmp_path).iter_documents()


def test_filesystem_store_requires_existing_root(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        FileSystemDocumentStore(tmp_path / "missing").iter_documents()


def test_bundled_corpus_builds_and_resolves() -> None:
    store = FileSystemDocumentStore(REPO_CORPUS)
    graph = build_taxonomy_graph(store.iter_documents())
    resolver = TopicResolver(graph, AliasTable.from_graph(graph, {"WebAwesome": {"icon button": "icon-button"}}))

    assert set(graph.topics) == {"Angular", "WebAwesome"}
    assert resolver.resolve_text("icon button").path == "WebAwesome/icon-button.rules.md"
    assert resolver.resolve_text("WaInput", variant="number input").anchor == "#number-input"
    assert resolver.resolve_text("Tab").status == "ambiguous"
    assert not [v for v in check_taxonomy(graph) if v.kind.value in {"dangling_link", "missing_document"}]


def test_in_memory_store_returns_a_copy(documents) -> None:
    store = InMemoryDocumentStore(documents)

    listed = store.iter_documents()
    listed.clear()

    assert len(store.iter_documents()) == len(documents)


def test_yaml_manifest_with_documents_key(tmp_path) -> None:
    manifest = tmp_path / "manifest.yaml"
    manifest.write_text(
        "documents:\n"
        "  - {path: Vue/index.md, group: Reactive, topic: Vue, kind: index, links: [Vue/select.rules.md]}\n"
        "  - {path: Vue/select.rules.md, topic: Vue, canonicalIdentifier: VaSelect, displayName: Select}\n",
        encoding="utf-8",
    )

    docs = read_manifest(manifest)

    assert [d.path for d in docs] == ["Vue/index.md", "Vue/select.rules.md"]
    assert docs[1].identifier == "VaSelect"
    assert docs[1].display_name == "Select"


def test_csv_manifest_splits_list_columns(tmp_path) -> None:
    manifest = tmp_path / "manifest.csv"
    pd.DataFrame(
        [
            {"path": "Vue/index.md", "group": "Reactive", "topic": "Vue", "kind": "index", "links": "Vue/select.rules.md"},
            {
                "path": "Vue/select.rules.md",
                "group": None,
                "topic": "Vue",
                "kind": "rule",
                "identifier": "VaSelect",
                "subsectionAnchors": "multiple; searchable",
                "aliases": "dropdown",
            },
        ]
    ).to_csv(manifest, index=False)

    docs = read_manifest(manifest)
    graph = build_taxonomy_graph(docs)

    assert docs[1].anchors == ("multiple", "searchable")
    assert docs[1].aliases == ("dropdown",)
    assert docs[1].group is None
    assert graph.topics["Vue"].components == ("VaSelect",)


def test_excel_manifest_reads_like_csv(tmp_path) -> None:
    manifest = tmp_path / "manifest.xlsx"
    pd.DataFrame(
        [
            {
                "path": "Vue/index.md",
                "group": "Reactive",
                "topic": "Vue",
                "kind": "index",
                "links": "Vue/select.rules.md; Vue/select.rules.md#multiple",
                "canonicalIdentifier": None,
                "displayName": None,
                "subsectionAnchors": None,
            },
            {
                "path": "Vue/select.rules.md",
                "group": None,
                "topic": "Vue",
                "kind": "Rule",
                "links": None,
                "canonicalIdentifier": "VaSelect",
                "displayName": "Select",
                "subsectionAnchors": "multiple",
            },
        ]
    ).to_excel(manifest, index=False)

    docs = read_manifest(manifest)
    graph = build_taxonomy_graph(docs)
    resolver = TopicResolver(graph, AliasTable.from_graph(graph))

    assert docs[0].links == ("Vue/select.rules.md", "Vue/select.rules.md#multiple")
    assert docs[1].kind is DocumentKind.RULE
    assert resolver.resolve_text("select", variant="multiple").target == "Vue/select.rules.md#multiple"
    assert check_taxonomy(graph) == []


def test_manifest_with_invalid_record_is_rejected(tmp_path) -> None:
    manifest = tmp_path / "manifest.yaml"
    manifest.write_text("- path: Vue/index.md\n- just a string\n", encoding="utf-8")

    with pytest.raises(ValueError, match="must be a mapping"):
        read_manifest(manifest)


def test_unsupported_manifest_format(tmp_path) -> None:
    manifest = tmp_path / "manifest.json"
    manifest.write_text("[]", encoding="utf-8")

    with pytest.raises(ValueError, match="Unsupported file format"):
        read_manifest(manifest)
