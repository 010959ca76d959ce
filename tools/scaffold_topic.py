"""Scaffold a topic directory (index + rule stubs) in a markdown corpus."""

from __future__ import annotations

import argparse
import re
from pathlib import Path
from typing import Any

import yaml

INDEX_TEMPLATE = """{front_matter}
# {topic}

{entries}
"""

RULE_TEMPLATE = """{front_matter}
# {name}

<!-- Usage rules for {name} go here. Add one heading per variant/subsection. -->
"""


def front_matter(data: dict[str, Any]) -> str:
    """YAML front matter block; values are quoted wherever YAML would retype them."""
    return f"---\n{yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=None)}---\n"


def slugify(name: str) -> str:
    """'Radio Group' -> 'radio-group'."""
    return re.sub(r"[^a-z0-9]+", "-", name.strip().lower()).strip("-")


def parse_component(text: str) -> tuple[str, str]:
    """Parse 'identifier=Display Name' or 'Display Name' into (identifier, name)."""
    identifier, sep, name = text.partition("=")
    if sep:
        identifier, name = identifier.strip(), name.strip()
    else:
        name = text.strip()
        identifier = slugify(name)
    if not identifier or not name:
        raise SystemExit(f"Invalid component: {text!r}")
    return identifier, name


def rule_filename(identifier: str) -> str:
    return f"{slugify(identifier)}.rules.md"


def scaffold_topic(
    corpus_root: Path,
    topic: str,
    group: str,
    components: list[tuple[str, str]],
    force: bool,
) -> list[Path]:
    """Write index.md and one rule stub per component; return the written paths."""
    dest = corpus_root / topic
    if dest.exists() and any(dest.iterdir()) and not force:
        raise SystemExit(f"Destination exists and is not empty: {dest} (use --force)")
    dest.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    entries = "\n".join(f"- [{name}]({rule_filename(identifier)})" for identifier, name in components)
    index = dest / "index.md"
    index_meta = front_matter({"group": group, "topic": topic, "kind": "index"})
    index.write_text(INDEX_TEMPLATE.format(front_matter=index_meta, topic=topic, entries=entries), encoding="utf-8")
    written.append(index)

    for identifier, name in components:
        path = dest / rule_filename(identifier)
        if path.exists() and not force:
            continue
        rule_meta = front_matter(
            {"topic": topic, "identifier": identifier, "name": name, "aliases": [], "related": []}
        )
        path.write_text(RULE_TEMPLATE.format(front_matter=rule_meta, name=name), encoding="utf-8")
        written.append(path)
    return written


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--topic", required=True, help="Topic folder name (e.g., WebAwesome, Angular)")
    ap.add_argument("--group", required=True, help="Owning group (e.g., Standard, Reactive)")
    ap.add_argument("--corpus-root", default="corpus", help="Corpus root directory (default: corpus)")
    ap.add_argument(
        "--component",
        action="append",
        default=[],
        help="Component as 'Display Name' or 'identifier=Display Name' (repeatable)",
    )
    ap.add_argument("--force", action="store_true", help="Overwrite if destination exists")
    args = ap.parse_args()

    components = [parse_component(c) for c in args.component]
    written = scaffold_topic(Path(args.corpus_root), args.topic, args.group, components, args.force)
    print(f"Scaffolded {len(written)} file(s) under: {Path(args.corpus_root) / args.topic}")


if __name__ == "__main__":
    main()
