"""Utility functions and classes for sqlstub."""

from sqlstub.utils import logging

__all__ = ("logging",)
