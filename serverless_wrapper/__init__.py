"""Wrap serverless function handlers with a user-supplied wrapper at deploy time."""

from serverless_wrapper.plugin import ServerlessWrapperPlugin

__all__ = ["ServerlessWrapperPlugin"]
