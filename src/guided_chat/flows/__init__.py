"""Grafos de fluxo e perfis de domínio (configuração declarativa)."""
