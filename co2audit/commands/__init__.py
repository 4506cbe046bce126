"""Command implementations behind the co2audit CLI."""
