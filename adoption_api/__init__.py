"""Adoption case lifecycle API."""
