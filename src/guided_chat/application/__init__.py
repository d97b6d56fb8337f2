"""Camada de aplicação: motor de fluxo, store de conversas e runtime do chat."""
