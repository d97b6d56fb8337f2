"""guided_chat: motor de fluxo conversacional roteirizado multi-domínio.

Domínios suportados: insurance, banking, booking, healthcare.
"""

__version__ = "0.1.0"
