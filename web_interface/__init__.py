"""Flask REST interface for Graph Codegen."""
