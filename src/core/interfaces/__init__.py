"""Core interfaces and abstractions.

Why:
- Defines the contracts (Protocol / ABC) that adapters and generated code
  implement.
- Inverts dependencies: the core depends on abstractions only.
"""
