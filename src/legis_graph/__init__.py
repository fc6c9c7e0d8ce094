"""Legislative knowledge graph: in-memory relationship graph over members,
bills, committees and donors, rebuilt from the relational source of truth."""

__version__ = "0.1.0"
