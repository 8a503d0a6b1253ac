"""
Domain Layer

This package contains the conversion algorithms, organized by domain area.
Domain modules are pure functions over in-memory values and never touch
files or the network.

Domains:
- coercion: scalar box/unbox
- serialized: typed-length serialization codec
- tree: record <-> Node mirrors
- xml_tree: Node <-> XML under the attribute encoding policies
- detection: input format classification
"""
