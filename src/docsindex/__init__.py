"""docsindex: search, tags, backlinks and graph views over a documentation corpus."""

__version__ = "0.1.0"
