"""Tugza bank signup and digital coin voucher service."""

__version__ = "0.1.0"
