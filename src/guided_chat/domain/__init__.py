"""Camada de domínio: modelos, validadores, patches e grafo de fluxo (puro)."""
