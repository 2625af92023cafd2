"""Readers and writers for forecast, price and plan files."""
