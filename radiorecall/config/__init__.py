"""Configuration module — exports Settings."""

from radiorecall.config.settings import MPEGURL_CONTENT_TYPE, Settings

__all__ = ["MPEGURL_CONTENT_TYPE", "Settings"]
