"""Domain models.

Why:
- Pure, frozen data structures (Pydantic v2): declarations coming in,
  descriptors going out.
- The domain knows nothing about files, templates or the CLI.
"""
