"""
THINK-MEM - structured memory for AI assistants.

Package structure:
- core: Config, logging, errors, result types, service wiring
- memory: Document model (raw text blocks, ordered lists)
- storage: JSON file store, NamePath addressing, advisory lock
- auth: Secret tokens for mutating tools
- tools: Tool framework and built-in memory tools
"""

__version__ = "1.0.0"
