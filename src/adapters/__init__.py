"""Adapters package for threadlink.

Adapters hold everything Slack, Trello, or SQLite specific and translate it
to and from the core models and ports.
"""
