"""Identity Records API: gestión de cuentas de usuario con RBAC."""

__version__ = "0.1.0"
