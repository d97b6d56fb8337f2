"""Infraestrutura: agendamento de timers."""
