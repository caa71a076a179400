"""
Commands - CLI command implementations for the Data Store SDK.

Each module holds one or more top-level CLI commands:
- create:    Initialize a data account and metadata PDA
- write:     Write or upload file contents (chunked)
- lifecycle: set-authority, finalize, close
- inspect:   Read metadata and contents
"""
