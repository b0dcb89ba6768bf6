"""Aplicación FastAPI: factory, rutas de autenticación y handlers de errores."""
