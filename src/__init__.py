"""Hate Speech Analysis Console API."""
