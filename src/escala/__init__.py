"""Shared weekly duty roster board for officers."""
