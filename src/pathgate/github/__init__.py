"""GitHub integration: event refs, change sets and action outputs.

Runs as a GitHub Action step that:
  - Resolves base and head from the triggering event
  - Lists the files changed between them
  - Sets one true/false output per path rule
"""
