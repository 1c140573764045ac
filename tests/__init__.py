"""Test package for the chat relay.

Structure:
    - unit/: Individual function and class tests
    - integration/: End-to-end workflow tests over HTTP
    - fakes.py: Scripted model provider
"""
