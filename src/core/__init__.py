"""Core domain package for threadlink.

Core contains the action model, translators, and dispatch sequencing without
any Slack, Trello, HTTP, or storage-specific code, keeping the relay logic
portable.
"""
