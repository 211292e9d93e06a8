"""Shared test fixtures for the docsindex test suite.

Design:
- corpus / store: in-memory corpus wrapped in an IndexStore
- docs_root: on-disk docs tree in a temp directory
- runner: CliRunner with DOCSINDEX_ROOT pointed at docs_root
"""

from pathlib import Path

import pytest
from click.testing import CliRunner

from docsindex.config import IndexSettings
from docsindex.corpus import MappingCorpus
from docsindex.store import IndexStore


# ─────────────────────────────────────────────────────────────────────────────
# Sample corpus
# ─────────────────────────────────────────────────────────────────────────────

SAMPLE_DOCS: dict[str, str] = {
    "README.md": """---
title: Docs Hub
description: Entry point for the documentation
tags: [overview]
---

# Docs Hub

Start with [Getting Started](guides/getting-started) or read the
[API overview](api/overview.md#intro).
""",
    "guides/getting-started.md": """---
title: Getting Started
description: Install and configure the hub
author: Dana
tags:
  - setup
  - guides
---

# Getting Started

## Installation

Run the installer to install the hub on your machine.

See the [API overview](../api/overview.md) and the [diagram](../assets/flow.png).
""",
    "guides/configuration.md": """---
title: Configuration
tags: [setup, Reference]
---

Configure the hub with a settings file. Back to [getting started](getting-started.md).
Also [getting started again](./getting-started.md) and [external](https://example.com).
""",
    "api/overview.md": """# API Overview

The API exposes search and tags.

## Authentication

Tokens are required. See [config](/guides/configuration).
""",
    "examples/hidden/secret.md": """---
title: Secret Example
tags: [overview]
---

Links to [hub](../../README.md).
""",
    "assets/flow.png": "",
}


@pytest.fixture
def corpus() -> MappingCorpus:
    """In-memory corpus with guides, an API page, an image and a hidden folder."""
    return MappingCorpus(SAMPLE_DOCS)


@pytest.fixture
def settings() -> IndexSettings:
    return IndexSettings(hidden_directories=["examples/hidden/"])


@pytest.fixture
def store(corpus: MappingCorpus, settings: IndexSettings) -> IndexStore:
    return IndexStore(corpus, settings)


@pytest.fixture
def pair_store() -> IndexStore:
    """Two documents sharing tag x, where a links to b."""
    return IndexStore(
        MappingCorpus(
            {
                "a.md": "---\ntitle: Alpha\ntags: [x]\n---\nSee [Beta](./b.md).",
                "b.md": "---\ntitle: Beta\ntags: [x]\n---\nNo links.",
            }
        )
    )


# ─────────────────────────────────────────────────────────────────────────────
# On-disk fixtures
# ─────────────────────────────────────────────────────────────────────────────


def write_docs(root: Path, docs: dict[str, str]) -> None:
    for rel, text in docs.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")


@pytest.fixture
def docs_root(tmp_path: Path) -> Path:
    """Sample corpus written to disk with a .docsindex.yaml."""
    root = tmp_path / "docs"
    write_docs(root, SAMPLE_DOCS)
    (root / ".docsindex.yaml").write_text("hidden_directories:\n  - examples/hidden/\n")
    return root


@pytest.fixture
def runner(docs_root: Path, monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    """CLI runner with the sample docs root configured via environment."""
    monkeypatch.setenv("DOCSINDEX_ROOT", str(docs_root))
    return CliRunner()
