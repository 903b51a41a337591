"""Credential and session service."""
