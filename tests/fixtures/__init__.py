"""Test fixtures for the studio.

- workspace: VFS, tree and preference fixtures
- server: In-memory build server (FastAPI) and clients wired to it
"""
