"""Crosscutting: config, logging, errores, middleware y métricas."""
