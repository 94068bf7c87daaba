"""Tokenizing, matching and dispatch of command lines."""
