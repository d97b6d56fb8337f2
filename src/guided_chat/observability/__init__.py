"""Observabilidade: logging JSON e correlation_id."""
