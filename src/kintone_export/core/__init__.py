"""Core configuration and utilities for kintone-export."""
