"""
Adaptador HTTP (FastAPI): router raíz, routers por feature, schemas y
traducción de errores de validación.
"""
