"""Search engine layer — Pluggable backends that execute query specs.

Built-in engines:
  - solr: Apache Solr v8+ (edismax full-text search, fq filters, field facets)
  - collection: In-memory search over a record type's own records
  - null: Search disabled; every query matches nothing

Implement ``SearchEngine`` to connect your own search backend.
"""
